"""Контроллер приложения: оркестрация UI и сервисов.

SOLID:
- SRP: класс управляет связями между UI и сервисами (без пересчёта размеров и тайлинга).
- DIP: зависит от `RepeatService` и `DimensionModel`; UI только отображает их состояние.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from tkinter import TclError, filedialog, messagebox
from typing import Optional, Tuple

import customtkinter as ctk

from repeaty.errors import RepeatyError, ValidationError
from repeaty.models.image_model import InputImage
from repeaty.models.output_spec import DimensionModel, Edit
from repeaty.services.output_naming import parse_edit
from repeaty.services.repeat_service import RepeatService
from repeaty.ui.sidebar import Sidebar

logger = logging.getLogger(__name__)


@dataclass
class AppController:
    """Связывает элементы UI с прикладной логикой.

    Ответственности:
    - Бинд событий (UI -> контроллер).
    - Загрузка изображений через `RepeatService`.
    - Передача правок полей в `DimensionModel` и обратная синхронизация UI.
    - Запуск построения и показ итога.
    """
    sidebar: Sidebar
    window: ctk.CTk
    service: RepeatService = field(default_factory=RepeatService)
    output_dir: Optional[Path] = None

    _current_image: Optional[InputImage] = None
    _model: Optional[DimensionModel] = None

    def bind_events(self) -> None:
        self.sidebar.on_open_file = self._handle_open_file
        self.sidebar.on_field_change = self._handle_field_change
        self.sidebar.on_create = self._handle_create

    def load(self, file_path: str | Path) -> None:
        """Загружает изображение; ошибка показывается, текущее состояние не меняется."""
        try:
            image, model = self.service.load(file_path)
        except (RepeatyError, OSError) as exc:
            logger.error("Ошибка загрузки %s: %s", file_path, exc)
            self._show_message("Ошибка загрузки", str(exc), is_error=True)
            return

        self._current_image = image
        self._model = model
        self.sidebar.set_image_info(image)
        self._sync_spec()

    # ---- Handlers ----
    def _handle_open_file(self) -> None:
        try:
            file_path = filedialog.askopenfilename(
                title="Выберите изображение",
                filetypes=(("PNG", "*.png"), ("All files", "*.*")),
            )
        except TclError:
            # Silent fail if dialog cannot open
            return

        if not file_path:
            return
        self.load(file_path)

    def _handle_field_change(self, name: str, text: str) -> None:
        if self._model is None:
            return
        value = parse_edit(text, getattr(self._model.spec, name))
        if value is not None:
            self._model.apply(Edit(name, value))
        # unchanged or unparsable text: restore the last consistent values
        self._sync_spec()

    def _handle_create(self) -> None:
        if self._current_image is None or self._model is None:
            return
        self.sidebar.set_busy(True)
        self.window.update_idletasks()
        try:
            path = self.service.create_pattern(self._current_image, self._model, self.output_dir)
        except RepeatyError as exc:
            logger.error("Ошибка построения: %s", exc)
            self._show_message("Ошибка", str(exc), is_error=True)
        else:
            self._show_message("Repeaty", f"Узор создан:\n{path}", is_error=False)
        finally:
            self.sidebar.set_busy(False)

    # ---- Helpers ----
    def _sync_spec(self) -> None:
        if self._model is None:
            return
        try:
            size: Optional[Tuple[int, int]] = self._model.output_size()
        except ValidationError:
            size = None
        self.sidebar.set_spec(self._model.spec, size)

    def _show_message(self, title: str, message: str, is_error: bool) -> None:
        if is_error:
            messagebox.showerror(title, message, parent=self.window)
        else:
            messagebox.showinfo(title, message, parent=self.window)
