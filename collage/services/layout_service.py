"""Геометрия коллажа: форма сетки, размер ячейки и размещение на холсте.

Принципы:
- SRP: только арифметика раскладки, без пикселей и файлов.
- Чистые функции: результат зависит только от аргументов, состояние не хранится.
"""
from __future__ import annotations

import logging
import math
from typing import List, Optional, Tuple

from collage.errors import EmptyInputError, GeometryOverflowError, InvalidDimensionError
from collage.models.collage_config import DEFAULT_MARGIN, DEFAULT_SPACING
from collage.models.layout_model import (
    Dimensions,
    GridShape,
    LayoutPlan,
    LayoutSpec,
    Orientation,
    PlacedImage,
    Rect,
)

logger = logging.getLogger(__name__)

# Signed 32-bit coordinate limit.
MAX_CANVAS_DIMENSION = 2**31 - 1
# RGBA canvas budget: 2**28 pixels is 1 GiB of pixel data.
MAX_CANVAS_PIXELS = 2**28


class LayoutService:
    def grid_shape(self, image_count: int, orientation: Orientation) -> GridShape:
        """Сетка «как можно ближе к квадрату» с наклоном в сторону ориентации.

        Portrait: строк не меньше, чем столбцов; Landscape — наоборот.
        Пустых ячеек всегда меньше, чем одна полная строка/столбец.
        """
        if image_count < 1:
            raise EmptyInputError()
        base = math.isqrt(image_count - 1) + 1  # ceil(sqrt(n))
        other = -(-image_count // base)
        if orientation is Orientation.PORTRAIT:
            return GridShape(rows=base, cols=other)
        return GridShape(rows=other, cols=base)

    def resolve(
        self,
        image_count: int,
        orientation: Orientation,
        explicit_width: Optional[int],
        explicit_height: Optional[int],
        first_image_size: Dimensions,
        *,
        top_margin: int = DEFAULT_MARGIN,
        left_margin: int = DEFAULT_MARGIN,
        spacing: int = DEFAULT_SPACING,
    ) -> LayoutSpec:
        """Определяет размер ячейки и собирает `LayoutSpec`.

        Args:
            image_count: Количество изображений.
            orientation: Ориентация сетки.
            explicit_width: Заданная ширина ячейки или None.
            explicit_height: Заданная высота ячейки или None.
            first_image_size: Размер первого изображения (значения по умолчанию).

        Raises:
            EmptyInputError: если изображений нет.
            InvalidDimensionError: если итоговая ширина/высота или отступ некорректны.
        """
        if image_count < 1:
            raise EmptyInputError()
        width = explicit_width if explicit_width is not None else first_image_size.width
        height = explicit_height if explicit_height is not None else first_image_size.height
        if width <= 0:
            raise InvalidDimensionError("width", width)
        if height <= 0:
            raise InvalidDimensionError("height", height)
        for name, value in (("top_margin", top_margin), ("left_margin", left_margin), ("spacing", spacing)):
            if value < 0:
                raise InvalidDimensionError(name, value)

        spec = LayoutSpec(
            image_count=image_count,
            cell_size=Dimensions(width, height),
            orientation=orientation,
            top_margin=top_margin,
            left_margin=left_margin,
            spacing=spacing,
        )
        logger.debug("Resolved layout spec: %s", spec)
        return spec

    def plan(
        self,
        grid: GridShape,
        cell_size: Dimensions,
        top_margin: int,
        left_margin: int,
        spacing: int,
        image_count: int,
        max_dimension: int = MAX_CANVAS_DIMENSION,
        max_pixels: int = MAX_CANVAS_PIXELS,
    ) -> Tuple[Dimensions, List[Rect]]:
        """Размер холста и прямоугольники ячеек в построчном порядке.

        Прямоугольников ровно `image_count`: пустые ячейки сетки не выдаются,
        но холст всегда рассчитан на полную сетку.

        Raises:
            InvalidDimensionError: отрицательный отступ или промежуток.
            GeometryOverflowError: сторона холста больше `max_dimension`
                или площадь больше `max_pixels`.
        """
        if image_count < 1:
            raise EmptyInputError()
        if image_count > grid.cells:
            raise InvalidDimensionError("image_count", image_count)
        for name, value in (("top_margin", top_margin), ("left_margin", left_margin), ("spacing", spacing)):
            if value < 0:
                raise InvalidDimensionError(name, value)

        canvas_w = 2 * left_margin + grid.cols * cell_size.width + (grid.cols - 1) * spacing
        canvas_h = 2 * top_margin + grid.rows * cell_size.height + (grid.rows - 1) * spacing
        _check_limit("canvas width", canvas_w, max_dimension)
        _check_limit("canvas height", canvas_h, max_dimension)
        _check_limit("canvas pixels", canvas_w * canvas_h, max_pixels)

        step_x = cell_size.width + spacing
        step_y = cell_size.height + spacing
        rects: List[Rect] = []
        for index in range(image_count):
            row, col = grid.position(index)
            rects.append(
                Rect(
                    x=left_margin + col * step_x,
                    y=top_margin + row * step_y,
                    width=cell_size.width,
                    height=cell_size.height,
                )
            )
        return Dimensions(canvas_w, canvas_h), rects

    def plan_layout(
        self,
        spec: LayoutSpec,
        max_dimension: int = MAX_CANVAS_DIMENSION,
        max_pixels: int = MAX_CANVAS_PIXELS,
    ) -> LayoutPlan:
        """Полный план для `LayoutSpec`: сетка + холст + `PlacedImage` на каждое изображение."""
        grid = self.grid_shape(spec.image_count, spec.orientation)
        canvas_size, rects = self.plan(
            grid,
            spec.cell_size,
            spec.top_margin,
            spec.left_margin,
            spec.spacing,
            spec.image_count,
            max_dimension=max_dimension,
            max_pixels=max_pixels,
        )
        placements = tuple(PlacedImage(source_index=i, dest_rect=rect) for i, rect in enumerate(rects))
        logger.info(
            "Planned %dx%d grid (%d images), canvas %dx%d",
            grid.rows,
            grid.cols,
            spec.image_count,
            canvas_size.width,
            canvas_size.height,
        )
        return LayoutPlan(grid=grid, cell_size=spec.cell_size, canvas_size=canvas_size, placements=placements)


def _check_limit(name: str, value: int, limit: int) -> None:
    if value > limit:
        raise GeometryOverflowError(name, value, limit)
