"""Боковая панель: список изображений, параметры коллажа и информация.

Принципы:
- SRP: управляет только UI параметров, не содержит алгоритмов раскладки.
- ISP: выдаёт параметры через `read_config()`, события через `on_*`.
"""
from __future__ import annotations

from typing import Callable, List, Optional, Sequence, Tuple

import customtkinter as ctk

from collage.errors import InvalidDimensionError
from collage.models.collage_config import (
    DEFAULT_BACKGROUND,
    DEFAULT_MARGIN,
    DEFAULT_ORIENTATION,
    DEFAULT_PRESERVE_ASPECT,
    DEFAULT_SPACING,
    CollageConfig,
)
from collage.models.image_model import ImageData
from collage.models.layout_model import Color, LayoutPlan, Orientation

_ORIENTATION_LABELS = {Orientation.PORTRAIT: "Портрет", Orientation.LANDSCAPE: "Альбом"}


def _rgba_to_hex(rgba: Tuple[int, int, int, int]) -> str:
    """Преобразует RGBA в HEX (без альфа)."""
    r, g, b, _a = rgba
    return f"#{r:02X}{g:02X}{b:02X}"


def _parse_int(name: str, raw: str, allow_empty: bool = False) -> Optional[int]:
    text = raw.strip()
    if not text:
        if allow_empty:
            return None
        raise InvalidDimensionError(name, raw)
    try:
        return int(text)
    except ValueError:
        raise InvalidDimensionError(name, raw) from None


class Sidebar(ctk.CTkFrame):
    """Панель с блоками: изображения, параметры, информация, курсор."""
    def __init__(self, master: ctk.CTk, **kwargs) -> None:
        super().__init__(master, width=300, **kwargs)

        self.grid_columnconfigure(0, weight=1)
        self.grid_columnconfigure(1, weight=1)

        # Callbacks
        self.on_add_files: Optional[Callable[[], None]] = None
        self.on_add_folder: Optional[Callable[[], None]] = None
        self.on_clear: Optional[Callable[[], None]] = None
        self.on_settings_change: Optional[Callable[[], None]] = None

        title_font = ctk.CTkFont(size=16, weight="bold")

        # Images section
        self._images_title = ctk.CTkLabel(self, text="Изображения", font=title_font)
        self._images_title.grid(row=0, column=0, columnspan=2, padx=8, pady=(8, 4), sticky="w")

        self._add_btn = ctk.CTkButton(self, text="Добавить файлы…", command=lambda: self._emit(self.on_add_files))
        self._add_btn.grid(row=1, column=0, padx=(8, 4), pady=(0, 6), sticky="ew")
        self._folder_btn = ctk.CTkButton(self, text="Добавить папку…", command=lambda: self._emit(self.on_add_folder))
        self._folder_btn.grid(row=1, column=1, padx=(4, 8), pady=(0, 6), sticky="ew")

        self._files_box = ctk.CTkTextbox(self, height=110, wrap="none")
        self._files_box.grid(row=2, column=0, columnspan=2, padx=8, pady=(0, 6), sticky="nsew")
        self._files_box.configure(state="disabled")

        self._clear_btn = ctk.CTkButton(
            self, text="Очистить список", fg_color="transparent", border_width=1,
            command=lambda: self._emit(self.on_clear),
        )
        self._clear_btn.grid(row=3, column=0, columnspan=2, padx=8, pady=(0, 10), sticky="ew")

        # Settings section
        self._settings_title = ctk.CTkLabel(self, text="Параметры", font=title_font)
        self._settings_title.grid(row=4, column=0, columnspan=2, padx=8, pady=(8, 4), sticky="w")

        self._width_val = ctk.StringVar(value="")
        self._height_val = ctk.StringVar(value="")
        self._top_val = ctk.StringVar(value=str(DEFAULT_MARGIN))
        self._left_val = ctk.StringVar(value=str(DEFAULT_MARGIN))
        self._spacing_val = ctk.StringVar(value=str(DEFAULT_SPACING))
        self._color_val = ctk.StringVar(value=DEFAULT_BACKGROUND)

        row = 5
        # empty width/height = size of the first image
        for label, var in (
            ("Ширина ячейки, px:", self._width_val),
            ("Высота ячейки, px:", self._height_val),
            ("Отступ сверху/снизу:", self._top_val),
            ("Отступ слева/справа:", self._left_val),
            ("Промежуток:", self._spacing_val),
            ("Цвет фона:", self._color_val),
        ):
            ctk.CTkLabel(self, text=label, anchor="w").grid(row=row, column=0, padx=8, pady=2, sticky="w")
            entry = ctk.CTkEntry(self, textvariable=var, width=110)
            entry.grid(row=row, column=1, padx=8, pady=2, sticky="ew")
            entry.bind("<Return>", self._on_entry_commit)
            entry.bind("<FocusOut>", self._on_entry_commit)
            row += 1

        self._color_swatch = ctk.CTkLabel(self, text="", height=10, fg_color=DEFAULT_BACKGROUND, corner_radius=4)
        self._color_swatch.grid(row=row, column=1, padx=8, pady=(0, 4), sticky="ew")
        row += 1

        self._orientation = ctk.CTkSegmentedButton(
            self,
            values=list(_ORIENTATION_LABELS.values()),
            command=lambda _value: self._emit(self.on_settings_change),
        )
        self._orientation.set(_ORIENTATION_LABELS[DEFAULT_ORIENTATION])
        self._orientation.grid(row=row, column=0, columnspan=2, padx=8, pady=(6, 4), sticky="ew")
        row += 1

        self._preserve_val = ctk.BooleanVar(value=DEFAULT_PRESERVE_ASPECT)
        self._preserve_chk = ctk.CTkCheckBox(
            self,
            text="Сохранять пропорции (обрезка)",
            variable=self._preserve_val,
            command=lambda: self._emit(self.on_settings_change),
        )
        self._preserve_chk.grid(row=row, column=0, columnspan=2, padx=8, pady=(4, 10), sticky="w")
        row += 1

        # Info section
        self._info_title = ctk.CTkLabel(self, text="Информация", font=title_font)
        self._info_title.grid(row=row, column=0, columnspan=2, padx=8, pady=(8, 4), sticky="w")
        self._count_val = ctk.StringVar(value="—")
        self._grid_val = ctk.StringVar(value="—")
        self._canvas_val = ctk.StringVar(value="—")
        for var in (self._count_val, self._grid_val, self._canvas_val):
            row += 1
            ctk.CTkLabel(self, textvariable=var, anchor="w", justify="left").grid(
                row=row, column=0, columnspan=2, padx=8, pady=(0, 2), sticky="ew"
            )
        row += 1

        # Cursor section
        self._cursor_title = ctk.CTkLabel(self, text="Курсор", font=title_font)
        self._cursor_title.grid(row=row, column=0, columnspan=2, padx=8, pady=(8, 4), sticky="w")
        self._cursor_xy_val = ctk.StringVar(value="—")
        self._cursor_rgba_val = ctk.StringVar(value="—")
        self._cursor_cell_val = ctk.StringVar(value="—")
        for var in (self._cursor_xy_val, self._cursor_rgba_val, self._cursor_cell_val):
            row += 1
            ctk.CTkLabel(self, textvariable=var, anchor="w", justify="left").grid(
                row=row, column=0, columnspan=2, padx=8, pady=(0, 2), sticky="ew"
            )

        # filler
        self.grid_rowconfigure(99, weight=1)

    # ---- Public API ----
    def read_config(self) -> CollageConfig:
        """Собирает типизированную конфигурацию из полей ввода.

        Raises:
            InvalidDimensionError: нечисловое или отрицательное значение.
            InvalidColorError: неверный HEX-цвет.
        """
        label = self._orientation.get()
        orientation = next(o for o, text in _ORIENTATION_LABELS.items() if text == label)
        background = Color.from_hex(self._color_val.get())
        self._color_swatch.configure(fg_color=background.to_hex()[:7])
        return CollageConfig(
            width=_parse_int("width", self._width_val.get(), allow_empty=True),
            height=_parse_int("height", self._height_val.get(), allow_empty=True),
            orientation=orientation,
            top_margin=_parse_int("top_margin", self._top_val.get()),
            left_margin=_parse_int("left_margin", self._left_val.get()),
            spacing=_parse_int("spacing", self._spacing_val.get()),
            background=background,
            preserve_aspect=bool(self._preserve_val.get()),
        )

    def set_images(self, images: Sequence[ImageData]) -> None:
        lines: List[str] = [f"{i + 1:>3}. {img.name}  ({img.width}x{img.height})" for i, img in enumerate(images)]
        self._files_box.configure(state="normal")
        self._files_box.delete("1.0", "end")
        self._files_box.insert("1.0", "\n".join(lines))
        self._files_box.configure(state="disabled")
        self._count_val.set(f"Изображений: {len(images)}" if images else "—")

    def set_plan_info(self, plan: Optional[LayoutPlan]) -> None:
        if plan is None:
            self._grid_val.set("—")
            self._canvas_val.set("—")
            return
        self._grid_val.set(
            f"Сетка: {plan.grid.rows} × {plan.grid.cols}, ячейка {plan.cell_size.width}×{plan.cell_size.height}"
        )
        self._canvas_val.set(f"Холст: {plan.canvas_size.width}×{plan.canvas_size.height} px")

    def update_cursor_info(
        self,
        x: Optional[int],
        y: Optional[int],
        rgba: Optional[Tuple[int, int, int, int]],
        cell: Optional[str] = None,
    ) -> None:
        if x is None or y is None or rgba is None:
            self._cursor_xy_val.set("—")
            self._cursor_rgba_val.set("—")
            self._cursor_cell_val.set("—")
            return
        self._cursor_xy_val.set(f"X: {x}  Y: {y}")
        self._cursor_rgba_val.set(f"RGBA: {rgba}  {_rgba_to_hex(rgba)}")
        self._cursor_cell_val.set(cell or "Фон")

    # ---- Internals ----
    def _on_entry_commit(self, _event: object) -> None:
        self._emit(self.on_settings_change)

    @staticmethod
    def _emit(callback: Optional[Callable[[], None]]) -> None:
        if callback:
            callback()
