import struct
import zlib
from typing import Tuple

import numpy as np
from PIL import Image


def solid(width: int, height: int, color: Tuple[int, int, int, int] = (255, 0, 0, 255)) -> Image.Image:
    return Image.new("RGBA", (width, height), color)


def gradient(width: int, height: int) -> Image.Image:
    """Красный растёт по X, зелёный по Y: позиция пикселя читается по цвету."""
    xs = np.linspace(0, 255, width)
    ys = np.linspace(0, 255, height)
    arr = np.zeros((height, width, 4), dtype=np.uint8)
    arr[..., 0] = np.round(xs)[None, :].astype(np.uint8)
    arr[..., 1] = np.round(ys)[:, None].astype(np.uint8)
    arr[..., 2] = 128
    arr[..., 3] = 255
    return Image.fromarray(arr)


def png_header(path, width: int, height: int) -> None:
    """PNG только с IHDR и IEND: размер заявлен, пиксельных данных нет."""
    def chunk(kind: bytes, data: bytes) -> bytes:
        return struct.pack(">I", len(data)) + kind + data + struct.pack(">I", zlib.crc32(kind + data))

    ihdr = struct.pack(">IIBBBBB", width, height, 8, 2, 0, 0, 0)
    path.write_bytes(b"\x89PNG\r\n\x1a\n" + chunk(b"IHDR", ihdr) + chunk(b"IEND", b""))
