"""Сканер чанков PNG.

Проходит по записям `[длина][тип][данные][CRC]` и копирует как есть только
вспомогательные чанки цвета и плотности. Пиксели здесь не декодируются,
CRC не проверяется.
"""
from __future__ import annotations

import logging
from typing import Iterator, Optional, Tuple

from repeaty.errors import (
    BadChunkTypeError,
    BadSignatureError,
    MalformedPhysError,
    TruncatedChunkError,
)
from repeaty.models.image_model import MetadataChunkSet, ResolutionInfo
from repeaty.services.units import ppm_to_ppi

logger = logging.getLogger(__name__)

PNG_SIGNATURE = b"\x89PNG\r\n\x1a\n"
PRESERVED_CHUNKS = ("cHRM", "gAMA", "iCCP", "pHYs", "sRGB")

PHYS_UNIT_UNKNOWN = 0
PHYS_UNIT_METER = 1

# length + type + crc
_CHUNK_OVERHEAD = 12


def iter_chunks(data: bytes) -> Iterator[Tuple[str, int, int]]:
    """Итерирует чанки: (тип, начало данных, конец данных).

    Raises:
        BadSignatureError: первые 8 байт не сигнатура PNG.
        TruncatedChunkError: чанк выходит за конец файла.
        BadChunkTypeError: тип чанка не декодируется как UTF-8.
    """
    if data[:8] != PNG_SIGNATURE:
        raise BadSignatureError("Файл не является PNG: неверная сигнатура")
    offset = 8
    while offset < len(data):
        remaining = len(data) - offset
        if remaining < _CHUNK_OVERHEAD:
            raise TruncatedChunkError(f"Обрезанный заголовок чанка по смещению {offset}")
        length = int.from_bytes(data[offset : offset + 4], "big")
        if length + _CHUNK_OVERHEAD > remaining:
            raise TruncatedChunkError(
                f"Чанк по смещению {offset} заявляет {length} байт, в файле осталось {remaining - _CHUNK_OVERHEAD}"
            )
        try:
            chunk_type = data[offset + 4 : offset + 8].decode("utf-8")
        except UnicodeDecodeError as exc:
            raise BadChunkTypeError(f"Недопустимый тип чанка по смещению {offset}") from exc
        start = offset + 8
        yield chunk_type, start, start + length
        offset += length + _CHUNK_OVERHEAD


def scan_chunks(data: bytes) -> MetadataChunkSet:
    """Возвращает сохраняемые чанки; при повторе типа побеждает последний."""
    chunks: MetadataChunkSet = {}
    for chunk_type, start, end in iter_chunks(data):
        if chunk_type in PRESERVED_CHUNKS:
            chunks[chunk_type] = bytes(data[start:end])
    return chunks


def parse_phys(payload: bytes) -> Tuple[int, int, int]:
    """Разбирает `pHYs`: (пикселей на единицу по X, по Y, единица)."""
    if len(payload) != 9:
        raise MalformedPhysError(f"Чанк pHYs должен содержать 9 байт, получено {len(payload)}")
    ppu_x = int.from_bytes(payload[0:4], "big")
    ppu_y = int.from_bytes(payload[4:8], "big")
    return ppu_x, ppu_y, payload[8]


def resolution_from_chunks(chunks: MetadataChunkSet) -> Optional[ResolutionInfo]:
    """Плотность из `pHYs` или `None`, если она неизвестна или неоднозначна."""
    payload = chunks.get("pHYs")
    if payload is None:
        return None
    ppu_x, ppu_y, unit = parse_phys(payload)
    if unit != PHYS_UNIT_METER:
        logger.warning("pHYs: единица %d не метр, плотность считается неизвестной", unit)
        return None
    if ppu_x != ppu_y:
        logger.warning("pHYs: плотность по осям различается (%d != %d), используется значение по умолчанию", ppu_x, ppu_y)
        return None
    if ppu_x == 0:
        logger.warning("pHYs: нулевая плотность, используется значение по умолчанию")
        return None
    return ResolutionInfo(pixels_per_inch=ppm_to_ppi(ppu_x))
