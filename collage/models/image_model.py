"""Модели данных для исходных изображений коллажа.

Принципы:
- SRP: только структура данных, без логики обработки.
- Чистый код: неизменяемость (`frozen=True`) для предсказуемости.
"""
from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from PIL import Image


@dataclass(frozen=True)
class ImageData:
    """Неизменяемая модель исходного изображения и его метаданные.

    Fields:
        path: Путь к исходному файлу (для сообщений об ошибках и списка в UI).
        pil_image: Декодированное изображение PIL в режиме RGBA.
        width: Ширина, px.
        height: Высота, px.
        mode: Режим исходного файла до конвертации, например "RGB" или "P".
        size_bytes: Размер файла, если доступен.
    """
    path: Path
    pil_image: Image.Image
    width: int
    height: int
    mode: str
    size_bytes: Optional[int]

    @classmethod
    def from_image(cls, image: Image.Image, path: str | Path = "<memory>") -> "ImageData":
        """Оборачивает уже загруженное изображение (без чтения с диска)."""
        rgba = image if image.mode == "RGBA" else image.convert("RGBA")
        return cls(
            path=Path(path),
            pil_image=rgba,
            width=rgba.width,
            height=rgba.height,
            mode=image.mode,
            size_bytes=None,
        )

    @property
    def name(self) -> str:
        return self.path.name
