"""Сборка итогового холста из подогнанных изображений.

Принципы:
- SRP: только заливка фона и копирование пикселей в заранее рассчитанные области.
- Холст принадлежит сервису на время одной сборки; наружу отдаётся готовое изображение.
"""
from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import List, Optional, Sequence, Tuple

import numpy as np
from PIL import Image

from collage.errors import OutOfBoundsError
from collage.models.layout_model import Color, Dimensions, Rect

logger = logging.getLogger(__name__)


class CompositeService:
    def composite(
        self,
        canvas_size: Dimensions,
        background: Color,
        placed: Sequence[Tuple[Rect, Image.Image]],
        workers: Optional[int] = None,
    ) -> Image.Image:
        """Заливает холст фоном и копирует каждое изображение в свой прямоугольник.

        Args:
            canvas_size: Размер холста.
            background: Цвет фона (RGBA).
            placed: Пары (прямоугольник, изображение размера прямоугольника) в порядке раскладки.
            workers: Если > 1, области копируются параллельно (они не пересекаются).

        Returns:
            Новое RGBA-изображение.

        Raises:
            OutOfBoundsError: если прямоугольник выходит за холст, пересекается с другим
                или размер изображения не совпадает с прямоугольником.
        """
        self._validate(canvas_size, placed)

        canvas = np.empty((canvas_size.height, canvas_size.width, 4), dtype=np.uint8)
        canvas[:, :] = background.as_tuple()
        logger.info(
            "Compositing %d images onto %dx%d canvas (background %s)",
            len(placed),
            canvas_size.width,
            canvas_size.height,
            background.to_hex(),
        )

        def paint(item: Tuple[Rect, Image.Image]) -> None:
            rect, image = item
            pixels = np.asarray(image.convert("RGBA") if image.mode != "RGBA" else image, dtype=np.uint8)
            canvas[rect.y:rect.bottom, rect.x:rect.right] = pixels

        if workers is not None and workers > 1 and len(placed) > 1:
            with ThreadPoolExecutor(max_workers=workers) as ex:
                # list() re-raises the first painting error after the join
                list(ex.map(paint, placed))
        else:
            for item in placed:
                paint(item)

        return Image.fromarray(canvas)

    # ---------- Проверки согласованности ----------
    def _validate(self, canvas_size: Dimensions, placed: Sequence[Tuple[Rect, Image.Image]]) -> None:
        rects: List[Rect] = []
        for index, (rect, image) in enumerate(placed):
            if rect.right > canvas_size.width or rect.bottom > canvas_size.height:
                raise OutOfBoundsError(
                    f"Прямоугольник #{index} {rect} выходит за холст "
                    f"{canvas_size.width}x{canvas_size.height}"
                )
            if image.size != (rect.width, rect.height):
                raise OutOfBoundsError(
                    f"Изображение #{index} размером {image.size[0]}x{image.size[1]} "
                    f"не совпадает с прямоугольником {rect.width}x{rect.height}"
                )
            rects.append(rect)

        # sweep by x: only rects whose x-ranges intersect need a full check
        order = sorted(range(len(rects)), key=lambda i: rects[i].x)
        active: List[int] = []
        for i in order:
            current = rects[i]
            active = [j for j in active if rects[j].right > current.x]
            for j in active:
                if current.overlaps(rects[j]):
                    raise OutOfBoundsError(f"Прямоугольники #{j} и #{i} пересекаются")
            active.append(i)
