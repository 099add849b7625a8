"""Запись PNG с сохранёнными чанками исходного файла.

Пиксели кодирует pypng (8 бит RGBA) построчно, сжатые данные IDAT пишутся в
файл частями. Сохранённые чанки добавляются сразу после заголовка, до IDAT,
без изменений. `pHYs` переносится как есть: плотность результата совпадает
с плотностью источника.
"""
from __future__ import annotations

import io
import logging
from pathlib import Path
from typing import BinaryIO, List, Tuple

import png

from repeaty.errors import EncodeError
from repeaty.models.image_model import MetadataChunkSet, RasterImage
from repeaty.services.chunk_scanner import PRESERVED_CHUNKS

logger = logging.getLogger(__name__)

Chunk = Tuple[bytes, bytes]


def _ordered_chunks(chunks: MetadataChunkSet) -> List[Chunk]:
    known = [name for name in PRESERVED_CHUNKS if name in chunks]
    extra = [name for name in chunks if name not in PRESERVED_CHUNKS]
    return [(name.encode("ascii"), chunks[name]) for name in known + extra]


class _ChunkWriter(png.Writer):
    """`png.Writer`, который после IHDR дописывает заданные чанки."""

    def __init__(self, extra_chunks: List[Chunk], **kwargs) -> None:
        super().__init__(**kwargs)
        self.extra_chunks = extra_chunks

    def write_preamble(self, outfile) -> None:
        super().write_preamble(outfile)
        for tag, data in self.extra_chunks:
            png.write_chunk(outfile, tag, data)


def _write_stream(image: RasterImage, chunks: MetadataChunkSet, stream: BinaryIO) -> None:
    try:
        writer = _ChunkWriter(
            _ordered_chunks(chunks),
            width=image.width,
            height=image.height,
            greyscale=False,
            alpha=True,
            bitdepth=8,
        )
        writer.write(stream, image.rows())
    except png.Error as exc:
        raise EncodeError(f"Не удалось закодировать PNG {image.width}x{image.height}: {exc}") from exc


def encode_png(image: RasterImage, chunks: MetadataChunkSet) -> bytes:
    """Кодирует `image` в PNG в памяти и добавляет `chunks` перед данными пикселей.

    Raises:
        EncodeError: если pypng отверг параметры (например, нулевой размер).
    """
    with io.BytesIO() as out:
        _write_stream(image, chunks, out)
        return out.getvalue()


def write_png(image: RasterImage, path: str | Path, chunks: MetadataChunkSet) -> Path:
    """Записывает PNG прямо в файл. При ошибке частично записанный файл удаляется.

    Raises:
        EncodeError: ошибка кодирования или файловой системы.
    """
    path = Path(path)
    try:
        with path.open("wb") as f:
            _write_stream(image, chunks, f)
    except (OSError, EncodeError) as exc:
        try:
            path.unlink(missing_ok=True)
        except OSError:
            logger.warning("Не удалось удалить неполный файл %s", path)
        if isinstance(exc, EncodeError):
            raise
        raise EncodeError(f"Не удалось записать {path}: {exc}") from exc

    logger.info("Записано %s (%d байт, чанки %s)", path, path.stat().st_size, list(chunks))
    return path
