"""Иерархия ошибок построения коллажа.

Принципы:
- Все ошибки движка наследуют `CollageError`, чтобы вызывающий код (CLI, GUI)
  мог перехватить их одним `except`.
- Каждая ошибка дополнительно наследует подходящее встроенное исключение
  (`ValueError`, `OverflowError`, `OSError`), сохраняя привычную семантику.
"""
from __future__ import annotations

from pathlib import Path
from typing import Optional


class CollageError(Exception):
    """Базовая ошибка движка коллажа."""


class EmptyInputError(CollageError):
    """Не передано ни одного изображения."""

    def __init__(self, message: str = "Не передано ни одного изображения") -> None:
        super().__init__(message)


class InvalidDimensionError(CollageError, ValueError):
    """Размер (или отступ) нулевой, отрицательный или иначе некорректный."""

    def __init__(self, name: str, value: object) -> None:
        super().__init__(f"Некорректное значение {name}: {value!r}")
        self.name = name
        self.value = value


class InvalidColorError(CollageError, ValueError):
    """Строка цвета не является HEX-кодом вида #rrggbb или #rrggbbaa."""

    def __init__(self, value: str, reason: str = "ожидается #rrggbb или #rrggbbaa") -> None:
        super().__init__(f"Некорректный цвет {value!r}: {reason}")
        self.value = value


class InvalidImageError(CollageError, ValueError):
    """Исходное изображение имеет нулевую ширину или высоту."""

    def __init__(self, width: int, height: int, path: Optional[Path] = None) -> None:
        where = f" ({path})" if path is not None else ""
        super().__init__(f"Пустое изображение {width}x{height}{where}")
        self.width = width
        self.height = height
        self.path = path


class GeometryOverflowError(CollageError, OverflowError):
    """Геометрия холста или ячейки не помещается в допустимые границы."""

    def __init__(self, name: str, value: int, limit: int) -> None:
        super().__init__(f"{name}={value} превышает предел {limit}")
        self.name = name
        self.value = value
        self.limit = limit


class OutOfBoundsError(CollageError):
    """Нарушена внутренняя согласованность: прямоугольник выходит за холст или пересекается с другим."""


class ImageLoadError(CollageError, ValueError):
    """Файл не удалось декодировать как изображение."""

    def __init__(self, path: Path, reason: str) -> None:
        super().__init__(f"Не удалось открыть изображение {path}: {reason}")
        self.path = path


class ImageSaveError(CollageError, OSError):
    """Не удалось закодировать или записать результат."""

    def __init__(self, path: Path, reason: str) -> None:
        super().__init__(f"Не удалось сохранить {path}: {reason}")
        self.path = path
