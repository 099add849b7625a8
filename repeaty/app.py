from __future__ import annotations

from pathlib import Path
from typing import Optional

import customtkinter as ctk

from repeaty.controllers.app_controller import AppController
from repeaty.services.repeat_service import RepeatService
from repeaty.ui.sidebar import Sidebar


class RepeatyApp(ctk.CTk):
    def __init__(self, service: RepeatService, output_dir: Optional[Path] = None) -> None:
        super().__init__()
        ctk.set_appearance_mode("system")
        ctk.set_default_color_theme("blue")

        self.title("Repeaty")
        self.minsize(320, 520)

        self.grid_columnconfigure(0, weight=1)
        self.grid_rowconfigure(0, weight=1)

        self._sidebar = Sidebar(self)
        self._sidebar.grid(row=0, column=0, sticky="nsew", padx=12, pady=12)

        self._controller = AppController(sidebar=self._sidebar, window=self, service=service, output_dir=output_dir)
        self._controller.bind_events()

    def open_image(self, file_path: str | Path) -> None:
        self._controller.load(file_path)
