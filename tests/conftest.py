"""Shared fixtures: PNG files are assembled in-test, no binary fixtures."""
from __future__ import annotations

import zlib
from typing import Iterable, Optional, Tuple

import numpy as np
import pytest

PNG_SIGNATURE = b"\x89PNG\r\n\x1a\n"

# 11811 px/m ~ 300 DPI
PHYS_300_DPI = (11811).to_bytes(4, "big") * 2 + b"\x01"
GAMA = (45455).to_bytes(4, "big")
SRGB = b"\x00"
CHRM = b"".join(v.to_bytes(4, "big") for v in (31270, 32900, 64000, 33000, 30000, 60000, 15000, 6000))
ICCP = b"test profile\x00\x00" + zlib.compress(b"fake icc profile payload" * 4)


def chunk(tag: bytes, data: bytes) -> bytes:
    crc = zlib.crc32(data, zlib.crc32(tag))
    return len(data).to_bytes(4, "big") + tag + data + crc.to_bytes(4, "big")


def build_png(pixels: np.ndarray, extra: Iterable[Tuple[bytes, bytes]] = ()) -> bytes:
    """PNG bytes for an `(h, w, 4)` uint8 array with `extra` chunks after IHDR."""
    height, width, _ = pixels.shape
    ihdr = width.to_bytes(4, "big") + height.to_bytes(4, "big") + bytes([8, 6, 0, 0, 0])
    raw = b"".join(b"\x00" + pixels[y].tobytes() for y in range(height))
    parts = [PNG_SIGNATURE, chunk(b"IHDR", ihdr)]
    parts += [chunk(tag, data) for tag, data in extra]
    parts += [chunk(b"IDAT", zlib.compress(raw)), chunk(b"IEND", b"")]
    return b"".join(parts)


def gradient(width: int, height: int, seed: Optional[int] = None) -> np.ndarray:
    if seed is not None:
        return np.random.default_rng(seed).integers(0, 256, size=(height, width, 4), dtype=np.uint8)
    ys, xs = np.mgrid[0:height, 0:width]
    return np.stack(
        [xs % 256, ys % 256, (xs + ys) % 256, np.full_like(xs, 255)], axis=-1
    ).astype(np.uint8)


@pytest.fixture
def write_png_file(tmp_path):
    """Writes a generated PNG into tmp_path and returns its path."""
    def _write(name: str, pixels: np.ndarray, extra: Iterable[Tuple[bytes, bytes]] = ()):
        path = tmp_path / name
        path.write_bytes(build_png(pixels, extra))
        return path
    return _write
