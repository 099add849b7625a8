"""Загрузка изображений с диска и упаковка метаданных.

Принципы:
- SRP: класс отвечает только за загрузку и извлечение свойств.
- OCP: другие форматы можно добавить, расширив `SUPPORTED_EXTENSIONS`.
- LSP/ISP: возвращает `InputImage` с предсказуемыми полями; интерфейс узкий и конкретный.
"""
from __future__ import annotations

import io
import logging
from pathlib import Path
from typing import Optional

import numpy as np
from PIL import Image, UnidentifiedImageError

from repeaty.errors import PngDecodeError, UnsupportedFormatError
from repeaty.models.image_model import DEFAULT_DPI, InputImage, RasterImage
from repeaty.services.chunk_scanner import resolution_from_chunks, scan_chunks

logger = logging.getLogger(__name__)

SUPPORTED_EXTENSIONS = (".png",)


class ImageService:
    def __init__(self, default_dpi: float = DEFAULT_DPI) -> None:
        self.default_dpi = default_dpi

    def load_image(self, file_path: str | Path) -> InputImage:
        """Загружает PNG с диска вместе с сохраняемыми чанками и плотностью.

        Args:
            file_path: Путь до файла изображения.

        Returns:
            `InputImage` с пикселями RGBA, чанками и `ResolutionInfo`.

        Raises:
            FileNotFoundError: если путь не существует или не указывает на файл.
            UnsupportedFormatError: если расширение не `.png`.
            PngDecodeError: если файл повреждён.
        """
        path = Path(file_path)
        if not path.exists() or not path.is_file():
            raise FileNotFoundError(f"Файл не найден: {path}")
        if path.suffix.lower() not in SUPPORTED_EXTENSIONS:
            raise UnsupportedFormatError(f"Поддерживаются только PNG-изображения: {path.name}")

        try:
            data = path.read_bytes()
        except OSError as exc:
            raise PngDecodeError(f"Не удалось прочитать {path.name}: {exc}") from exc
        chunks = scan_chunks(data)
        resolution = resolution_from_chunks(chunks)
        raster = self._decode_pixels(data, path)

        try:
            size_bytes: Optional[int] = path.stat().st_size
        except OSError:
            size_bytes = None

        logger.info(
            "Загружено %s: %dx%d px, чанки %s, DPI %s",
            path,
            raster.width,
            raster.height,
            sorted(chunks),
            f"{resolution.pixels_per_inch:.2f}" if resolution else "неизвестно",
        )
        return InputImage(
            path=path,
            raster=raster,
            chunks=chunks,
            resolution=resolution,
            size_bytes=size_bytes,
            default_dpi=self.default_dpi,
        )

    def _decode_pixels(self, data: bytes, path: Path) -> RasterImage:
        try:
            with Image.open(io.BytesIO(data)) as pil_image:
                rgba = pil_image.convert("RGBA")
        except (UnidentifiedImageError, OSError, SyntaxError, ValueError) as exc:
            raise PngDecodeError(f"Не удалось декодировать {path.name}: {exc}") from exc

        width, height = rgba.size
        if width == 0 or height == 0:
            raise PngDecodeError(f"Изображение {path.name} не содержит пикселей")
        return RasterImage.from_array(np.asarray(rgba, dtype=np.uint8))
