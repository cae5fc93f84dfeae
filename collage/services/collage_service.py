"""Конвейер коллажа: геометрия -> размещение -> подгонка -> сборка.

Принципы:
- SRP: только оркестрация; расчёты делегируются сервисам раскладки, подгонки и сборки.
- DIP: сервисы передаются в конструктор, по умолчанию — стандартные реализации.
"""
from __future__ import annotations

import logging
import os
from concurrent.futures import Future, ThreadPoolExecutor, as_completed
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence

from PIL import Image

from collage.errors import EmptyInputError, InvalidImageError
from collage.models.collage_config import CollageConfig
from collage.models.image_model import ImageData
from collage.models.layout_model import Dimensions, LayoutPlan
from collage.services.composite_service import CompositeService
from collage.services.fit_service import FitService
from collage.services.layout_service import LayoutService

logger = logging.getLogger(__name__)


def effective_workers(workers: Optional[int]) -> int:
    if workers is None or workers <= 0:
        return max(1, os.cpu_count() or 1)
    return workers


@dataclass(frozen=True)
class CollageResult:
    """Готовый холст и план, по которому он собран."""
    image: Image.Image
    plan: LayoutPlan


class CollageService:
    def __init__(
        self,
        layout_service: Optional[LayoutService] = None,
        fit_service: Optional[FitService] = None,
        composite_service: Optional[CompositeService] = None,
    ) -> None:
        self._layout = layout_service or LayoutService()
        self._fitter = fit_service or FitService()
        self._compositor = composite_service or CompositeService()
        self._background: Optional[ThreadPoolExecutor] = None

    def plan(self, sources: Sequence[ImageData], config: CollageConfig) -> LayoutPlan:
        """Рассчитывает план раскладки без обработки пикселей."""
        if not sources:
            raise EmptyInputError()
        first = sources[0]
        if first.width <= 0 or first.height <= 0:
            raise InvalidImageError(first.width, first.height, first.path)
        spec = self._layout.resolve(
            len(sources),
            config.orientation,
            config.width,
            config.height,
            Dimensions(first.width, first.height),
            top_margin=config.top_margin,
            left_margin=config.left_margin,
            spacing=config.spacing,
        )
        return self._layout.plan_layout(spec)

    def build(self, sources: Sequence[ImageData], config: CollageConfig) -> CollageResult:
        """Строит коллаж целиком.

        Подгонка изображений идёт параллельно; при первой ошибке ожидающие задачи
        отменяются, исключение пробрасывается, частичный холст наружу не попадает.

        Raises:
            EmptyInputError: если изображений нет (холст не создаётся).
            InvalidDimensionError, GeometryOverflowError: некорректная геометрия.
            InvalidImageError: пустое исходное изображение (с путём к файлу).
        """
        plan = self.plan(sources, config)
        fitted = self._fit_all(sources, plan, config)
        placed = [(p.dest_rect, fitted[p.source_index]) for p in plan.placements]
        canvas = self._compositor.composite(
            plan.canvas_size,
            config.background,
            placed,
            workers=effective_workers(config.workers),
        )
        return CollageResult(image=canvas, plan=plan)

    def submit(self, sources: Sequence[ImageData], config: CollageConfig) -> "Future[CollageResult]":
        """Запускает `build` в фоновом потоке и сразу возвращает `Future`.

        Сборки выполняются по одной в порядке вызова; ошибки доступны через
        `Future.result()`. Нужен для UI, чтобы главный цикл не блокировался.
        """
        if self._background is None:
            self._background = ThreadPoolExecutor(max_workers=1, thread_name_prefix="collage-build")
        return self._background.submit(self.build, list(sources), config)

    def close(self) -> None:
        if self._background is not None:
            self._background.shutdown(wait=True, cancel_futures=True)
            self._background = None

    def _fit_all(self, sources: Sequence[ImageData], plan: LayoutPlan, config: CollageConfig) -> List[Image.Image]:
        workers = effective_workers(config.workers)
        logger.info(
            "Fitting %d images to %dx%d (preserve aspect: %s, workers: %d)",
            len(sources),
            plan.cell_size.width,
            plan.cell_size.height,
            config.preserve_aspect,
            workers,
        )
        results: Dict[int, Image.Image] = {}
        ex = ThreadPoolExecutor(max_workers=workers)
        try:
            futures: Dict[Future, int] = {
                ex.submit(self._fit_one, sources[i], plan.cell_size, config.preserve_aspect): i
                for i in range(len(sources))
            }
            for fut in as_completed(futures):
                results[futures[fut]] = fut.result()
        except BaseException:
            ex.shutdown(wait=True, cancel_futures=True)
            raise
        ex.shutdown(wait=True)
        return [results[i] for i in range(len(sources))]

    def _fit_one(self, source: ImageData, target: Dimensions, preserve_aspect: bool) -> Image.Image:
        try:
            return self._fitter.fit(source.pil_image, target, preserve_aspect)
        except InvalidImageError as exc:
            raise InvalidImageError(exc.width, exc.height, source.path) from exc
