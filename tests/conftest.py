from pathlib import Path
from typing import Callable, List

import pytest

from collage.models.image_model import ImageData
from helpers import solid


@pytest.fixture
def make_sources() -> Callable[..., List[ImageData]]:
    def _make(count: int, width: int = 40, height: int = 30) -> List[ImageData]:
        palette = [(255, 0, 0, 255), (0, 255, 0, 255), (0, 0, 255, 255), (255, 255, 0, 255)]
        return [
            ImageData.from_image(solid(width, height, palette[i % len(palette)]), f"img_{i}.png")
            for i in range(count)
        ]
    return _make


@pytest.fixture
def image_dir(tmp_path: Path) -> Path:
    directory = tmp_path / "photos"
    directory.mkdir()
    solid(30, 20, (255, 0, 0, 255)).save(directory / "b.png")
    solid(30, 20, (0, 255, 0, 255)).convert("RGB").save(directory / "a.jpg")
    solid(30, 20, (0, 0, 255, 255)).save(directory / "c.png")
    (directory / "notes.txt").write_text("not an image")
    return directory
