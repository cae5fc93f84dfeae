"""Модели геометрии коллажа.

Принципы:
- SRP: только структуры данных и проверка их инвариантов, без алгоритмов раскладки.
- Чистый код: неизменяемость (`frozen=True`), значения создаются один раз и не мутируют.
"""
from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from typing import Tuple

from collage.errors import InvalidColorError, InvalidDimensionError

_HEX_RE = re.compile(r"^[0-9a-fA-F]{6}([0-9a-fA-F]{2})?$")


class Orientation(Enum):
    """Направление, в котором «вытягивается» сетка."""
    PORTRAIT = "portrait"
    LANDSCAPE = "landscape"

    @classmethod
    def parse(cls, value: "str | Orientation") -> "Orientation":
        """Разбирает строку без учёта регистра: 'portrait' | 'landscape'."""
        if isinstance(value, Orientation):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            choices = ", ".join(o.value for o in cls)
            raise ValueError(f"Неизвестная ориентация {value!r} (допустимо: {choices})") from None


@dataclass(frozen=True)
class Dimensions:
    """Ширина и высота в пикселях, обе строго положительные."""
    width: int
    height: int

    def __post_init__(self) -> None:
        if self.width <= 0:
            raise InvalidDimensionError("width", self.width)
        if self.height <= 0:
            raise InvalidDimensionError("height", self.height)

    def as_tuple(self) -> Tuple[int, int]:
        return self.width, self.height


@dataclass(frozen=True)
class Rect:
    """Прямоугольник размещения на холсте (начало координат — левый верхний угол)."""
    x: int
    y: int
    width: int
    height: int

    def __post_init__(self) -> None:
        if self.x < 0:
            raise InvalidDimensionError("x", self.x)
        if self.y < 0:
            raise InvalidDimensionError("y", self.y)
        if self.width <= 0:
            raise InvalidDimensionError("width", self.width)
        if self.height <= 0:
            raise InvalidDimensionError("height", self.height)

    @property
    def right(self) -> int:
        return self.x + self.width

    @property
    def bottom(self) -> int:
        return self.y + self.height

    def overlaps(self, other: "Rect") -> bool:
        """Пересекаются ли прямоугольники хотя бы одним пикселем."""
        return (
            self.x < other.right
            and other.x < self.right
            and self.y < other.bottom
            and other.y < self.bottom
        )

    def contains_point(self, x: int, y: int) -> bool:
        return self.x <= x < self.right and self.y <= y < self.bottom


@dataclass(frozen=True)
class Color:
    """Цвет фона RGBA, по умолчанию полностью непрозрачный."""
    r: int
    g: int
    b: int
    a: int = 255

    def __post_init__(self) -> None:
        for name in ("r", "g", "b", "a"):
            value = getattr(self, name)
            if not 0 <= value <= 255:
                raise InvalidColorError(str(value), f"канал {name} вне диапазона 0..255")

    @classmethod
    def from_hex(cls, value: str) -> "Color":
        """Разбирает '#rrggbb', 'rrggbb' или '#rrggbbaa'."""
        code = value.strip()
        if code.startswith("#"):
            code = code[1:]
        if not _HEX_RE.match(code):
            raise InvalidColorError(value)
        r, g, b = (int(code[i:i + 2], 16) for i in (0, 2, 4))
        a = int(code[6:8], 16) if len(code) == 8 else 255
        return cls(r, g, b, a)

    def as_tuple(self) -> Tuple[int, int, int, int]:
        return self.r, self.g, self.b, self.a

    def to_hex(self) -> str:
        """HEX без альфа, если цвет непрозрачный."""
        if self.a == 255:
            return f"#{self.r:02x}{self.g:02x}{self.b:02x}"
        return f"#{self.r:02x}{self.g:02x}{self.b:02x}{self.a:02x}"


@dataclass(frozen=True)
class GridShape:
    """Размер сетки: строки × столбцы."""
    rows: int
    cols: int

    def __post_init__(self) -> None:
        if self.rows <= 0:
            raise InvalidDimensionError("rows", self.rows)
        if self.cols <= 0:
            raise InvalidDimensionError("cols", self.cols)

    @property
    def cells(self) -> int:
        return self.rows * self.cols

    def position(self, index: int) -> Tuple[int, int]:
        """Позиция (row, col) для индекса в порядке построчного обхода."""
        return divmod(index, self.cols)


@dataclass(frozen=True)
class LayoutSpec:
    """Полностью определённые параметры раскладки, создаются один раз за запуск.

    Fields:
        image_count: Количество изображений (>= 1).
        cell_size: Целевой размер каждой ячейки.
        orientation: Ориентация сетки.
        top_margin: Отступ сверху и снизу, px.
        left_margin: Отступ слева и справа, px.
        spacing: Промежуток между ячейками, px.
    """
    image_count: int
    cell_size: Dimensions
    orientation: Orientation
    top_margin: int = 0
    left_margin: int = 0
    spacing: int = 0

    def __post_init__(self) -> None:
        for name in ("top_margin", "left_margin", "spacing"):
            if getattr(self, name) < 0:
                raise InvalidDimensionError(name, getattr(self, name))


@dataclass(frozen=True)
class PlacedImage:
    """Назначение: какое изображение и в какой прямоугольник холста."""
    source_index: int
    dest_rect: Rect


@dataclass(frozen=True)
class LayoutPlan:
    """Результат планировщика: сетка, размер ячейки, размер холста и размещения."""
    grid: GridShape
    cell_size: Dimensions
    canvas_size: Dimensions
    placements: Tuple[PlacedImage, ...]

    def placement_at(self, x: int, y: int) -> "PlacedImage | None":
        """Размещение, содержащее точку холста, или None (поля, промежутки, пустые ячейки)."""
        for placed in self.placements:
            if placed.dest_rect.contains_point(x, y):
                return placed
        return None
