"""Загрузка исходных изображений с диска и сохранение готового коллажа.

Принципы:
- SRP: класс отвечает только за файловый ввод-вывод и кодеки (через Pillow).
- OCP: новые источники (стрим, URL) можно добавить отдельными методами.
- LSP/ISP: возвращает `ImageData` с предсказуемыми полями; интерфейс узкий и конкретный.
"""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable, List, Optional

from PIL import Image, UnidentifiedImageError

from collage.errors import ImageLoadError, ImageSaveError
from collage.models.image_model import ImageData

logger = logging.getLogger(__name__)

SUPPORTED_EXTS = {".png", ".jpg", ".jpeg", ".bmp", ".gif", ".tif", ".tiff", ".webp"}

# форматы без альфа-канала: прозрачность сводится на белый
_OPAQUE_EXTS = {".jpg", ".jpeg", ".bmp"}

OUTPUT_STEM = "collage"
OUTPUT_SUFFIX = ".png"


class ImageService:
    def load_image(self, file_path: str | Path) -> ImageData:
        """Загружает изображение с диска и возвращает его вместе с метаданными.

        Args:
            file_path: Путь до файла изображения.

        Returns:
            `ImageData` c `PIL.Image.Image` (в режиме RGBA), размерами, режимом и размером файла.

        Raises:
            FileNotFoundError: если путь не существует или не указывает на файл.
            ImageLoadError: если файл не распознан как изображение или повреждён
                либо заявленный размер превышает предел Pillow (decompression bomb).
        """
        path = Path(file_path)
        if not path.exists() or not path.is_file():
            raise FileNotFoundError(f"Файл не найден: {path}")

        try:
            with Image.open(path) as raw:
                mode = raw.mode
                pil_image = raw.convert("RGBA")
        except UnidentifiedImageError as exc:
            raise ImageLoadError(path, "файл не является изображением") from exc
        except Image.DecompressionBombError as exc:
            # declared size exceeds twice Image.MAX_IMAGE_PIXELS; nothing is decoded
            raise ImageLoadError(path, str(exc)) from exc
        except (OSError, SyntaxError) as exc:
            # truncated/corrupted data surfaces as OSError or SyntaxError from the decoders
            raise ImageLoadError(path, str(exc)) from exc

        width, height = pil_image.size
        try:
            size_bytes: Optional[int] = path.stat().st_size
        except OSError:
            size_bytes = None

        logger.debug("Loaded %s (%dx%d, %s)", path, width, height, mode)
        return ImageData(
            path=path,
            pil_image=pil_image,
            width=width,
            height=height,
            mode=mode,
            size_bytes=size_bytes,
        )

    def collect_paths(self, inputs: Iterable[str | Path]) -> List[Path]:
        """Разворачивает входные пути в упорядоченный список файлов.

        Каталог заменяется поддерживаемыми файлами из него (без рекурсии),
        отсортированными по имени; явно указанные файлы идут в заданном порядке.
        """
        paths: List[Path] = []
        for item in inputs:
            path = Path(item)
            if path.is_dir():
                found = sorted(
                    (p for p in path.iterdir() if p.is_file() and p.suffix.lower() in SUPPORTED_EXTS),
                    key=lambda p: p.name,
                )
                logger.debug("Directory %s: %d images", path, len(found))
                paths.extend(found)
            else:
                paths.append(path)
        return paths

    def load_images(self, inputs: Iterable[str | Path]) -> List[ImageData]:
        """Загружает все изображения по порядку; первая ошибка прерывает загрузку."""
        paths = self.collect_paths(inputs)
        logger.info("Opening %d images", len(paths))
        return [self.load_image(p) for p in paths]

    def save_image(self, image: Image.Image, file_path: str | Path) -> Path:
        """Кодирует изображение в формат по расширению файла и записывает его.

        Raises:
            ImageSaveError: если формат не поддерживается или запись не удалась.
        """
        path = Path(file_path)
        out = image
        if path.suffix.lower() in _OPAQUE_EXTS and image.mode != "RGB":
            out = _flatten(image)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            out.save(path)
        except (OSError, ValueError, KeyError) as exc:
            # Pillow: unknown extension -> ValueError, unsupported mode -> OSError/KeyError
            raise ImageSaveError(path, str(exc)) from exc
        logger.info("Saved collage to %s", path)
        return path

    def default_output_path(self, directory: str | Path | None = None) -> Path:
        """Первый свободный `collage_<N>.png` в каталоге (по умолчанию — «Загрузки»)."""
        base = Path(directory) if directory is not None else _downloads_dir()
        num = 0
        candidate = base / f"{OUTPUT_STEM}_{num}{OUTPUT_SUFFIX}"
        while candidate.exists():
            num += 1
            candidate = base / f"{OUTPUT_STEM}_{num}{OUTPUT_SUFFIX}"
        return candidate


def _downloads_dir() -> Path:
    downloads = Path.home() / "Downloads"
    return downloads if downloads.is_dir() else Path.cwd()


def _flatten(image: Image.Image) -> Image.Image:
    rgba = image if image.mode == "RGBA" else image.convert("RGBA")
    background = Image.new("RGB", rgba.size, (255, 255, 255))
    background.paste(rgba, mask=rgba.getchannel("A"))
    return background
