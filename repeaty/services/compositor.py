"""Построение повторяющегося изображения (тайлинг).

Выходной буфер делится на непрерывные диапазоны линейных индексов, которые
заполняются параллельно. Координаты восстанавливаются из абсолютного индекса,
поэтому граница диапазона может попасть в середину строки: диапазоны не
пересекаются и не зависят друг от друга. Исходное изображение только читается.
"""
from __future__ import annotations

import logging
import os
from concurrent.futures import ThreadPoolExecutor
from typing import Optional

import numpy as np

from repeaty.models.image_model import RasterImage

logger = logging.getLogger(__name__)

DEFAULT_CHUNK_SIZE = 4 * 1024 * 1024


def composite_tiled(
    source: RasterImage,
    width: int,
    height: int,
    chunk_size: int = DEFAULT_CHUNK_SIZE,
    max_workers: Optional[int] = None,
) -> RasterImage:
    """Возвращает растр `width`x`height`, где пиксель (x, y) равен
    пикселю источника (x mod w, y mod h).

    Вызов синхронный: возвращается после завершения всех диапазонов.
    """
    if source.width < 1 or source.height < 1:
        raise ValueError(f"Пустой источник: {source.width}x{source.height}")
    if width < 0 or height < 0:
        raise ValueError(f"Недопустимый размер результата: {width}x{height}")
    if chunk_size < 1:
        raise ValueError(f"Размер диапазона должен быть положительным: {chunk_size}")

    total = width * height
    out = np.empty((total, 4), dtype=np.uint8)
    if total == 0:
        return RasterImage(width, height, out)

    src_pixels = source.pixels
    src_w, src_h = source.width, source.height

    def fill(start: int) -> None:
        stop = min(start + chunk_size, total)
        index = np.arange(start, stop, dtype=np.int64)
        y = index // width
        x = index - y * width
        out[start:stop] = src_pixels[(y % src_h) * src_w + (x % src_w)]

    starts = range(0, total, chunk_size)
    workers = max_workers or min(os.cpu_count() or 1, len(starts))
    logger.debug("Тайлинг %dx%d: %d диапазонов, потоков %d", width, height, len(starts), workers)
    with ThreadPoolExecutor(max_workers=workers) as executor:
        # list() re-raises worker exceptions
        list(executor.map(fill, starts))

    return RasterImage(width, height, out)
