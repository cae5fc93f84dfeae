"""Подгонка изображения под размер ячейки: растяжение или масштаб с обрезкой.

Принципы:
- SRP: только ресэмплинг/обрезка одного изображения.
- Исходное изображение не мутируется, всегда возвращается новый буфер.
"""
from __future__ import annotations

import logging
from typing import Tuple

from PIL import Image

from collage.errors import InvalidImageError
from collage.models.layout_model import Dimensions

logger = logging.getLogger(__name__)

# Catmull-Rom: хороший компромисс скорость/качество
RESAMPLE = Image.Resampling.BICUBIC


class FitService:
    def __init__(self, resample: Image.Resampling = RESAMPLE) -> None:
        self._resample = resample

    def fit(self, source: Image.Image, target: Dimensions, preserve_aspect: bool) -> Image.Image:
        """Возвращает RGBA-изображение размером ровно `target`.

        Args:
            source: Исходное изображение (только чтение).
            target: Размер ячейки.
            preserve_aspect: False — растяжение до `target`;
                True — равномерный масштаб «с покрытием» и обрезка по центру.

        Raises:
            InvalidImageError: если у исходного изображения нулевая ширина или высота.
        """
        src_w, src_h = source.size
        if src_w <= 0 or src_h <= 0:
            raise InvalidImageError(src_w, src_h)

        rgba = source if source.mode == "RGBA" else source.convert("RGBA")
        if not preserve_aspect:
            if rgba.size == target.as_tuple():
                return rgba.copy()
            return rgba.resize(target.as_tuple(), self._resample)

        source_size = Dimensions(src_w, src_h)
        scaled_size = self.cover_size(source_size, target)
        box = self.center_crop_box(scaled_size, target)
        if scaled_size == (src_w, src_h):
            return rgba.crop(box)
        # resample only the visible region: memory follows the target, not the scaled image
        source_box = self.source_box(source_size, scaled_size, box)
        logger.debug("Fit %sx%s -> cover %s, source box %s", src_w, src_h, scaled_size, source_box)
        return rgba.resize(target.as_tuple(), self._resample, box=source_box)

    @staticmethod
    def cover_size(source: Dimensions, target: Dimensions) -> Tuple[int, int]:
        """Размер после масштаба «с покрытием»: обе стороны не меньше `target`."""
        scale = max(target.width / source.width, target.height / source.height)
        width = max(target.width, int(round(source.width * scale)))
        height = max(target.height, int(round(source.height * scale)))
        return width, height

    @staticmethod
    def center_crop_box(size: Tuple[int, int], target: Dimensions) -> Tuple[int, int, int, int]:
        """Симметричная обрезка; нечётный лишний пиксель срезается с правого/нижнего края."""
        width, height = size
        left = (width - target.width) // 2
        top = (height - target.height) // 2
        return left, top, left + target.width, top + target.height

    @staticmethod
    def source_box(
        source: Dimensions, scaled_size: Tuple[int, int], box: Tuple[int, int, int, int]
    ) -> Tuple[float, float, float, float]:
        """Переводит рамку обрезки из координат масштабированного кадра в координаты исходника."""
        sx = scaled_size[0] / source.width
        sy = scaled_size[1] / source.height
        left, top, right, bottom = box
        return left / sx, top / sy, min(source.width, right / sx), min(source.height, bottom / sy)
