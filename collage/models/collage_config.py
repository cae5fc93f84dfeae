"""Параметры построения коллажа и их значения по умолчанию.

Принципы:
- SRP: только структура данных и проверка значений, без логики построения.
- Значения по умолчанию — именованные константы, передаются явно (никакого глобального состояния).
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from collage.errors import InvalidDimensionError
from collage.models.layout_model import Color, Orientation

DEFAULT_ORIENTATION = Orientation.PORTRAIT
DEFAULT_MARGIN = 0
DEFAULT_SPACING = 20
DEFAULT_BACKGROUND = "#ffffff"
DEFAULT_PRESERVE_ASPECT = False


@dataclass(frozen=True)
class CollageConfig:
    """Неизменяемый набор опций коллажа.

    Fields:
        width: Ширина ячейки, px; None — ширина первого изображения.
        height: Высота ячейки, px; None — высота первого изображения.
        orientation: Ориентация сетки.
        top_margin: Отступ сверху и снизу, px.
        left_margin: Отступ слева и справа, px.
        spacing: Промежуток между изображениями, px.
        background: Цвет фона.
        preserve_aspect: Сохранять пропорции (масштаб с обрезкой по центру).
        workers: Размер пула потоков; None — число ядер.
    """
    width: Optional[int] = None
    height: Optional[int] = None
    orientation: Orientation = DEFAULT_ORIENTATION
    top_margin: int = DEFAULT_MARGIN
    left_margin: int = DEFAULT_MARGIN
    spacing: int = DEFAULT_SPACING
    background: Color = field(default_factory=lambda: Color.from_hex(DEFAULT_BACKGROUND))
    preserve_aspect: bool = DEFAULT_PRESERVE_ASPECT
    workers: Optional[int] = None

    def __post_init__(self) -> None:
        for name in ("width", "height"):
            value = getattr(self, name)
            if value is not None and value <= 0:
                raise InvalidDimensionError(name, value)
        for name in ("top_margin", "left_margin", "spacing"):
            if getattr(self, name) < 0:
                raise InvalidDimensionError(name, getattr(self, name))
        if self.workers is not None and self.workers <= 0:
            raise InvalidDimensionError("workers", self.workers)
