"""Командная строка: собрать коллаж из списка изображений или каталогов.

Коллаж — сетка одинаковых ячеек; ориентация portrait вытягивает сетку
по вертикали, landscape — по горизонтали. Все изображения приводятся
к одному размеру (по умолчанию — размер первого изображения).
"""
from __future__ import annotations

import argparse
import logging
import os
import sys
from pathlib import Path
from typing import Optional, Sequence

from collage.errors import CollageError
from collage.models.collage_config import (
    DEFAULT_BACKGROUND,
    DEFAULT_MARGIN,
    DEFAULT_ORIENTATION,
    DEFAULT_SPACING,
    CollageConfig,
)
from collage.models.layout_model import Color, Orientation
from collage.services.collage_service import CollageService
from collage.services.image_service import ImageService

logger = logging.getLogger(__name__)

LOG_LEVEL_ENV = "COLLAGE_LOG_LEVEL"


def _non_negative(value: str) -> int:
    number = int(value)
    if number < 0:
        raise argparse.ArgumentTypeError(f"ожидается неотрицательное число, получено {value}")
    return number


def _positive(value: str) -> int:
    number = int(value)
    if number <= 0:
        raise argparse.ArgumentTypeError(f"ожидается положительное число, получено {value}")
    return number


def _orientation(value: str) -> Orientation:
    try:
        return Orientation.parse(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(str(exc)) from None


def build_parser() -> argparse.ArgumentParser:
    # -h is taken by --height, so help is long-option only
    p = argparse.ArgumentParser(
        prog="collage",
        description="Собрать коллаж (сетку) из списка изображений.",
        add_help=False,
    )
    p.add_argument("images", nargs="*", help="Файлы изображений или каталоги (файлы каталога — по имени).")
    p.add_argument("-w", "--width", type=_positive, default=None,
                   help="Ширина ячейки, px (по умолчанию — ширина первого изображения).")
    p.add_argument("-h", "--height", type=_positive, default=None,
                   help="Высота ячейки, px (по умолчанию — высота первого изображения).")
    p.add_argument("-o", "--orientation", type=_orientation, default=DEFAULT_ORIENTATION,
                   metavar="{portrait,landscape}", help="Ориентация сетки (по умолчанию portrait).")
    p.add_argument("-t", "--top", dest="top_margin", type=_non_negative, default=DEFAULT_MARGIN,
                   help="Отступ сверху и снизу, px (по умолчанию 0).")
    p.add_argument("-l", "--left", dest="left_margin", type=_non_negative, default=DEFAULT_MARGIN,
                   help="Отступ слева и справа, px (по умолчанию 0).")
    p.add_argument("-s", "--spacing", type=_non_negative, default=DEFAULT_SPACING,
                   help=f"Промежуток между изображениями, px (по умолчанию {DEFAULT_SPACING}).")
    p.add_argument("-c", "--color", dest="background_color", default=DEFAULT_BACKGROUND,
                   help=f"Цвет фона #rrggbb или #rrggbbaa (по умолчанию {DEFAULT_BACKGROUND}).")
    p.add_argument("-p", "--preserve", dest="preserve_aspect", action="store_true",
                   help="Сохранять пропорции: масштаб с обрезкой по центру вместо растяжения.")
    p.add_argument("--out", default=None,
                   help="Путь результата (по умолчанию collage_<N>.png в каталоге «Загрузки»).")
    p.add_argument("-j", "--workers", type=_positive, default=None,
                   help="Число потоков обработки (по умолчанию — число ядер).")
    verbosity = p.add_mutually_exclusive_group()
    verbosity.add_argument("-v", "--verbose", action="store_true", help="Подробный журнал (DEBUG).")
    verbosity.add_argument("-q", "--quiet", action="store_true", help="Только ошибки.")
    p.add_argument("--help", action="help", help="Показать справку и выйти.")
    return p


def config_from_args(args: argparse.Namespace) -> CollageConfig:
    """Единственная точка перехода от строк командной строки к типизированной конфигурации."""
    return CollageConfig(
        width=args.width,
        height=args.height,
        orientation=args.orientation,
        top_margin=args.top_margin,
        left_margin=args.left_margin,
        spacing=args.spacing,
        background=Color.from_hex(args.background_color),
        preserve_aspect=args.preserve_aspect,
        workers=args.workers,
    )


def configure_logging(verbose: bool = False, quiet: bool = False) -> None:
    if verbose:
        level = logging.DEBUG
    elif quiet:
        level = logging.ERROR
    else:
        level = logging.getLevelName(os.environ.get(LOG_LEVEL_ENV, "WARNING").upper())
        if not isinstance(level, int):
            level = logging.WARNING
    logging.basicConfig(level=level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(args.verbose, args.quiet)

    image_service = ImageService()
    try:
        config = config_from_args(args)
        sources = image_service.load_images(args.images)
        result = CollageService().build(sources, config)
        out_path = Path(args.out).expanduser() if args.out else image_service.default_output_path()
        saved = image_service.save_image(result.image, out_path)
    except (CollageError, FileNotFoundError) as exc:
        logger.error("%s", exc)
        return 1

    print(saved)
    return 0


if __name__ == "__main__":
    sys.exit(main())
