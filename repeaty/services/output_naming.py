"""Имя выходного файла.

Пример: `example.png`, повтор 5x5, размер 120x80 мм ->
`<папка программы>/example__5x5__120x80mm.png`.
"""
from __future__ import annotations

import math
import sys
from pathlib import Path
from typing import Optional

from repeaty.models.output_spec import OutputSpec


def format_number(value: float) -> str:
    """Целое без дробной части, если до него не больше 0.01, иначе два знака.

    NaN и бесконечность выводятся как есть.
    """
    if not math.isfinite(value):
        return str(value)
    nearest = round(value)
    if abs(value - nearest) <= 0.01:
        return str(int(nearest))
    return f"{value:.2f}"


def parse_edit(text: str, current: float) -> Optional[float]:
    """Значение из поля ввода или None, если текст не число либо не изменился.

    Неизменённый текст — это округлённое отображение `current`; повторно
    применять его нельзя, иначе значение поля «поплывёт».
    """
    text = text.strip()
    if text == format_number(current):
        return None
    try:
        return float(text.replace(",", "."))
    except ValueError:
        return None


def output_suffix(spec: OutputSpec) -> str:
    return (
        f"__{format_number(spec.repeat_x)}x{format_number(spec.repeat_y)}"
        f"__{format_number(spec.dim_mm_x)}x{format_number(spec.dim_mm_y)}mm"
    )


def executable_dir() -> Path:
    """Папка запущенной программы (собранного exe или скрипта)."""
    if getattr(sys, "frozen", False):
        return Path(sys.executable).resolve().parent
    if sys.argv and sys.argv[0]:
        return Path(sys.argv[0]).resolve().parent
    return Path.cwd()


def output_path(input_path: str | Path, spec: OutputSpec, output_dir: Optional[Path] = None) -> Path:
    directory = output_dir if output_dir is not None else executable_dir()
    return Path(directory) / f"{Path(input_path).stem}{output_suffix(spec)}.png"
