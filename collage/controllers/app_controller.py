"""Контроллер приложения: оркестрация UI и сервисов коллажа.

SOLID:
- SRP: класс управляет связями между UI и сервисами (без логики раскладки и пикселей).
- DIP: зависит от сервисов как от ролей; конкретные реализации инкапсулированы.
Clean Code:
- Обработчики компактны; тяжёлая логика вынесена в сервисы.
"""
from __future__ import annotations

import logging
from concurrent.futures import Future
from dataclasses import dataclass, field
from tkinter import TclError, filedialog
from typing import List, Optional, Sequence, Tuple

import customtkinter as ctk

from collage.errors import CollageError
from collage.models.image_model import ImageData
from collage.services.collage_service import CollageResult, CollageService
from collage.services.image_service import SUPPORTED_EXTS, ImageService
from collage.ui.bottom_bar import BottomBar
from collage.ui.image_viewer import ImageViewer
from collage.ui.sidebar import Sidebar

logger = logging.getLogger(__name__)

# background build polling interval, ms
_POLL_MS = 40

_FILETYPES = (
    ("Images", " ".join(f"*{ext}" for ext in sorted(SUPPORTED_EXTS))),
    ("All files", "*.*"),
)


@dataclass
class AppController:
    """Связывает элементы UI с прикладной логикой.

    Ответственности:
    - Инициализация и бинд событий (UI -> контроллер).
    - Загрузка изображений через `ImageService`.
    - Перестроение коллажа через `CollageService` при любом изменении параметров.
    - Сохранение результата и вывод ошибок в строку состояния.
    """
    viewer: ImageViewer
    sidebar: Sidebar
    bottom: BottomBar
    window: ctk.CTk

    _image_service: ImageService = field(default_factory=ImageService)
    _collage_service: CollageService = field(default_factory=CollageService)
    _images: List[ImageData] = field(default_factory=list)
    _result: Optional[CollageResult] = None
    _pending: Optional[Future] = None

    def bind_events(self) -> None:
        """Регистрирует обработчики событий между UI-компонентами.

        Компоненты UI ничего не знают друг о друге, общаются через контроллер.
        """
        self.sidebar.on_add_files = self._handle_add_files
        self.sidebar.on_add_folder = self._handle_add_folder
        self.sidebar.on_clear = self._handle_clear
        self.sidebar.on_settings_change = self._rebuild

        self.viewer.on_cursor_move = self._handle_cursor_move
        self.viewer.on_zoom_change = self._handle_viewer_zoom_changed

        self.bottom.on_zoom_change = self._handle_zoom_change
        self.bottom.on_zoom_preset = self._handle_zoom_change
        self.bottom.on_zoom_fit = self._handle_zoom_fit
        self.bottom.on_save = self._handle_save

        # keyboard shortcuts
        self.window.bind("<Control-o>", lambda _e: self._handle_add_files())
        self.window.bind("<Control-s>", lambda _e: self._handle_save())
        self.window.bind("<Control-0>", lambda _e: self._handle_zoom_fit())

    # ---- Handlers ----
    def _handle_add_files(self) -> None:
        try:
            paths = filedialog.askopenfilenames(title="Выберите изображения", filetypes=_FILETYPES)
        except TclError:
            return
        if paths:
            self._load(paths)

    def _handle_add_folder(self) -> None:
        try:
            directory = filedialog.askdirectory(title="Выберите папку с изображениями")
        except TclError:
            return
        if directory:
            self._load([directory])

    def _handle_clear(self) -> None:
        self._images = []
        self._pending = None
        self._result = None
        self.sidebar.set_images(self._images)
        self.sidebar.set_plan_info(None)
        self.viewer.set_image(None)
        self.bottom.set_save_enabled(False)
        self.bottom.set_status("Добавьте изображения")

    def _handle_save(self) -> None:
        if self._result is None:
            return
        default = self._image_service.default_output_path()
        try:
            file_path = filedialog.asksaveasfilename(
                title="Сохранить коллаж",
                initialdir=str(default.parent),
                initialfile=default.name,
                defaultextension=".png",
                filetypes=(("PNG", "*.png"), ("JPEG", "*.jpg *.jpeg"), ("WebP", "*.webp"), ("All files", "*.*")),
            )
        except TclError:
            return
        if not file_path:
            return
        try:
            saved = self._image_service.save_image(self._result.image, file_path)
        except CollageError as exc:
            self.bottom.set_status(str(exc), error=True)
            return
        self.bottom.set_status(f"Сохранено: {saved}")

    def _handle_cursor_move(self, x: Optional[int], y: Optional[int], rgba: Optional[Tuple[int, int, int, int]]) -> None:
        cell = None
        if self._result is not None and x is not None and y is not None:
            placed = self._result.plan.placement_at(x, y)
            if placed is not None:
                row, col = self._result.plan.grid.position(placed.source_index)
                cell = f"#{placed.source_index + 1} {self._images[placed.source_index].name} (ряд {row + 1}, столбец {col + 1})"
        self.sidebar.update_cursor_info(x, y, rgba, cell)

    def _handle_zoom_change(self, zoom_percent: int) -> None:
        self.viewer.set_zoom_percent(zoom_percent)
        self.bottom.set_zoom_percent(self.viewer.get_zoom_percent())

    def _handle_viewer_zoom_changed(self, zoom_percent: int) -> None:
        # mouse wheel zoom -> sync the slider
        self.bottom.set_zoom_percent(zoom_percent)

    def _handle_zoom_fit(self) -> None:
        self.viewer.set_zoom_to_fit()
        self.bottom.set_zoom_percent(self.viewer.get_zoom_percent())

    # ---- Helpers ----
    def _load(self, inputs: Sequence[str]) -> None:
        try:
            loaded = self._image_service.load_images(inputs)
        except (CollageError, FileNotFoundError) as exc:
            self.bottom.set_status(str(exc), error=True)
            return
        first_build = not self._images
        self._images.extend(loaded)
        self.sidebar.set_images(self._images)
        self._rebuild(keep_view=not first_build)

    def _rebuild(self, keep_view: bool = True) -> None:
        """Запускает пересборку коллажа по текущим параметрам сайдбара.

        Сборка идёт в фоновом потоке; окно опрашивает её через `after`, поэтому
        главный цикл Tk не блокируется. Результат устаревшей сборки отбрасывается.
        """
        if not self._images:
            return
        try:
            config = self.sidebar.read_config()
        except CollageError as exc:
            self._show_build_error(exc)
            return
        if self._pending is not None:
            self._pending.cancel()
        self._pending = self._collage_service.submit(self._images, config)
        self.bottom.set_status("Сборка коллажа…")
        self.window.after(_POLL_MS, self._poll_build, self._pending, keep_view)

    def _poll_build(self, future: Future, keep_view: bool) -> None:
        if future is not self._pending:
            return  # superseded
        if not future.done():
            self.window.after(_POLL_MS, self._poll_build, future, keep_view)
            return
        self._pending = None
        try:
            result = future.result()
        except CollageError as exc:
            self._show_build_error(exc)
            return

        self._result = result
        self.viewer.set_image(result.image, keep_view=keep_view)
        self.sidebar.set_plan_info(result.plan)
        self.bottom.set_zoom_percent(self.viewer.get_zoom_percent())
        self.bottom.set_save_enabled(True)
        size = result.plan.canvas_size
        self.bottom.set_status(f"Готово: {len(self._images)} изобр., {size.width}×{size.height} px")

    def _show_build_error(self, exc: CollageError) -> None:
        # a failed build never leaves a partial canvas on screen
        logger.warning("Collage rebuild failed: %s", exc)
        self._result = None
        self.viewer.set_image(None)
        self.sidebar.set_plan_info(None)
        self.bottom.set_save_enabled(False)
        self.bottom.set_status(str(exc), error=True)

    def close(self) -> None:
        """Отменяет ожидающие сборки и закрывает окно."""
        self._pending = None
        self._collage_service.close()
        self.window.destroy()
