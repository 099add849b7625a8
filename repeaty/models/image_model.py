"""Модели данных для изображений.

Принципы:
- SRP: только структура данных, без логики загрузки и обработки.
- Чистый код: неизменяемость (`frozen=True`) для предсказуемости.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Iterator, Optional, Tuple

import numpy as np

from repeaty.services.units import MM_PER_INCH

DEFAULT_DPI = 72.0

# Тип чанка PNG (например, "pHYs") -> сырые байты его данных.
MetadataChunkSet = Dict[str, bytes]


@dataclass(frozen=True)
class RasterImage:
    """Растровое изображение RGBA, 8 бит на канал.

    Fields:
        width: Ширина, px.
        height: Высота, px.
        pixels: Массив `uint8` формы `(width * height, 4)`, строки сверху вниз.
    """
    width: int
    height: int
    pixels: np.ndarray = field(repr=False)

    def __post_init__(self) -> None:
        if self.width < 0 or self.height < 0:
            raise ValueError(f"Недопустимый размер: {self.width}x{self.height}")
        expected = (self.width * self.height, 4)
        if self.pixels.shape != expected:
            raise ValueError(f"Буфер формы {self.pixels.shape}, ожидалось {expected}")
        if self.pixels.dtype != np.uint8:
            raise ValueError(f"Буфер должен быть uint8, получено {self.pixels.dtype}")

    @classmethod
    def blank(cls, width: int, height: int) -> "RasterImage":
        return cls(width, height, np.zeros((width * height, 4), dtype=np.uint8))

    @classmethod
    def from_array(cls, array: np.ndarray) -> "RasterImage":
        """Создаёт растр из массива формы `(height, width, 4)`."""
        height, width, channels = array.shape
        if channels != 4:
            raise ValueError(f"Ожидалось 4 канала, получено {channels}")
        flat = np.ascontiguousarray(array, dtype=np.uint8).reshape(width * height, 4)
        return cls(width, height, flat)

    def pixel(self, x: int, y: int) -> Tuple[int, int, int, int]:
        r, g, b, a = self.pixels[y * self.width + x]
        return int(r), int(g), int(b), int(a)

    def rows(self) -> Iterator[bytes]:
        """Строки пикселей в порядке байтов R, G, B, A."""
        for y in range(self.height):
            start = y * self.width
            yield self.pixels[start:start + self.width].tobytes()


@dataclass(frozen=True)
class ResolutionInfo:
    """Плотность пикселей из чанка `pHYs`."""
    pixels_per_inch: float

    @property
    def pixels_per_mm(self) -> float:
        return self.pixels_per_inch / MM_PER_INCH


@dataclass(frozen=True)
class InputImage:
    """Неизменяемая модель загруженного изображения и его метаданных.

    Fields:
        path: Путь к исходному файлу.
        raster: Пиксели в RGBA.
        chunks: Сохраняемые вспомогательные чанки PNG.
        resolution: Плотность, если её удалось однозначно определить.
        size_bytes: Размер файла, если доступен.
        default_dpi: Плотность, которая используется при `resolution is None`.
    """
    path: Path
    raster: RasterImage
    chunks: MetadataChunkSet
    resolution: Optional[ResolutionInfo]
    size_bytes: Optional[int] = None
    default_dpi: float = DEFAULT_DPI

    @property
    def width(self) -> int:
        return self.raster.width

    @property
    def height(self) -> int:
        return self.raster.height

    @property
    def pixels_per_mm(self) -> float:
        if self.resolution is None:
            return self.default_dpi / MM_PER_INCH
        return self.resolution.pixels_per_mm
