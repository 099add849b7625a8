"""Боковая панель: открытие файла, информация, параметры вывода.

Принципы:
- SRP: управляет только UI параметров, не пересчитывает размеры.
- ISP: события через `on_*`, обновление значений через `set_*`.
"""
from __future__ import annotations

from typing import Callable, Dict, Optional

import customtkinter as ctk

from repeaty.models.image_model import InputImage
from repeaty.models.output_spec import OutputSpec
from repeaty.services.output_naming import format_number

_FIELD_LABELS = (
    ("repeat_x", "Повтор по X"),
    ("repeat_y", "Повтор по Y"),
    ("dim_mm_x", "Ширина, мм"),
    ("dim_mm_y", "Высота, мм"),
)


class Sidebar(ctk.CTkFrame):
    """Панель с блоками: файл, информация, размеры, запуск."""
    def __init__(self, master: ctk.CTk, **kwargs) -> None:
        super().__init__(master, width=280, **kwargs)

        self.grid_columnconfigure(1, weight=1)

        # Callbacks
        self.on_open_file: Optional[Callable[[], None]] = None
        self.on_field_change: Optional[Callable[[str, str], None]] = None
        self.on_create: Optional[Callable[[], None]] = None

        # Controls
        self._title = ctk.CTkLabel(self, text="Repeaty", font=ctk.CTkFont(size=16, weight="bold"))
        self._title.grid(row=0, column=0, columnspan=2, padx=8, pady=(8, 4), sticky="w")

        self._open_btn = ctk.CTkButton(self, text="Открыть изображение…", command=self._emit_open_file)
        self._open_btn.grid(row=1, column=0, columnspan=2, padx=8, pady=(0, 12), sticky="ew")

        # Info section
        self._info_title = ctk.CTkLabel(self, text="Информация", font=ctk.CTkFont(size=16, weight="bold"))
        self._info_title.grid(row=2, column=0, columnspan=2, padx=8, pady=(8, 4), sticky="w")

        self._path_val = ctk.StringVar(value="—")
        self._dims_val = ctk.StringVar(value="—")
        self._dpi_val = ctk.StringVar(value="—")
        self._chunks_val = ctk.StringVar(value="—")

        for row, var in enumerate((self._path_val, self._dims_val, self._dpi_val, self._chunks_val), start=3):
            label = ctk.CTkLabel(self, textvariable=var, wraplength=250, anchor="w", justify="left")
            label.grid(row=row, column=0, columnspan=2, padx=8, pady=(0, 2), sticky="ew")

        # Output section
        self._out_title = ctk.CTkLabel(self, text="Результат", font=ctk.CTkFont(size=16, weight="bold"))
        self._out_title.grid(row=7, column=0, columnspan=2, padx=8, pady=(12, 4), sticky="w")

        self._entries: Dict[str, ctk.CTkEntry] = {}
        for row, (name, text) in enumerate(_FIELD_LABELS, start=8):
            ctk.CTkLabel(self, text=text, anchor="w").grid(row=row, column=0, padx=8, pady=2, sticky="w")
            entry = ctk.CTkEntry(self, width=100)
            entry.grid(row=row, column=1, padx=8, pady=2, sticky="ew")
            entry.bind("<Return>", lambda _e, n=name: self._emit_field_change(n))
            entry.bind("<FocusOut>", lambda _e, n=name: self._emit_field_change(n))
            self._entries[name] = entry

        self._size_val = ctk.StringVar(value="—")
        self._size_label = ctk.CTkLabel(self, textvariable=self._size_val, anchor="w")
        self._size_label.grid(row=12, column=0, columnspan=2, padx=8, pady=(4, 2), sticky="ew")

        self._create_btn = ctk.CTkButton(self, text="Создать узор", command=self._emit_create, state="disabled")
        self._create_btn.grid(row=13, column=0, columnspan=2, padx=8, pady=(8, 12), sticky="ew")

    # public API (sync from controller)
    def set_image_info(self, image: InputImage) -> None:
        self._path_val.set(str(image.path))
        self._dims_val.set(f"{image.width}×{image.height} px")
        if image.resolution is None:
            self._dpi_val.set(f"DPI: неизвестно ({format_number(image.default_dpi)})")
        else:
            self._dpi_val.set(f"DPI: {format_number(image.resolution.pixels_per_inch)}")
        self._chunks_val.set("Чанки: " + (", ".join(image.chunks) or "—"))
        self._create_btn.configure(state="normal")

    def set_spec(self, spec: OutputSpec, output_size: Optional[tuple[int, int]]) -> None:
        for name, entry in self._entries.items():
            entry.delete(0, "end")
            entry.insert(0, format_number(getattr(spec, name)))
        if output_size is None:
            self._size_val.set("Размер: —")
            return
        width, height = output_size
        self._size_val.set(f"Размер: {width}×{height} px")

    def set_busy(self, busy: bool) -> None:
        self._create_btn.configure(state="disabled" if busy else "normal")

    # events
    def _emit_open_file(self) -> None:
        if self.on_open_file:
            self.on_open_file()

    def _emit_field_change(self, name: str) -> None:
        if self.on_field_change:
            self.on_field_change(name, self._entries[name].get())

    def _emit_create(self) -> None:
        if self.on_create:
            self.on_create()
