"""Перевод единиц: метры, миллиметры, дюймы и плотность пикселей.

Все функции — линейное масштабирование без побочных эффектов.
Дюйм считается равным ровно 25.4 мм.
"""
from __future__ import annotations

import math

MM_PER_INCH = 25.4
MM_PER_METER = 1000.0


def mm_to_meters(mm: float) -> float:
    return mm / MM_PER_METER


def meters_to_mm(meters: float) -> float:
    return meters * MM_PER_METER


def mm_to_inches(mm: float) -> float:
    return mm / MM_PER_INCH


def inches_to_mm(inches: float) -> float:
    return inches * MM_PER_INCH


def meters_to_inches(meters: float) -> float:
    return mm_to_inches(meters_to_mm(meters))


def inches_to_meters(inches: float) -> float:
    return mm_to_meters(inches_to_mm(inches))


# ---------- Плотность пикселей ----------
# ppm — пиксели на метр (как в pHYs), ppi — на дюйм, ppmm — на миллиметр.

def ppm_to_ppi(ppm: float) -> float:
    return ppm * inches_to_meters(1.0)


def ppi_to_ppm(ppi: float) -> float:
    return ppi / inches_to_meters(1.0)


def ppi_to_ppmm(ppi: float) -> float:
    return ppi / MM_PER_INCH


def ppmm_to_ppi(ppmm: float) -> float:
    return ppmm * MM_PER_INCH


def ppm_to_ppmm(ppm: float) -> float:
    return ppm / MM_PER_METER


def ppmm_to_ppm(ppmm: float) -> float:
    return ppmm * MM_PER_METER


def round_half_up(value: float) -> int:
    """Округление до ближайшего целого, половины — от нуля (2.5 -> 3)."""
    if value < 0:
        return -int(math.floor(-value + 0.5))
    return int(math.floor(value + 0.5))
