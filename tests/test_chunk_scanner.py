"""Tests for the PNG chunk scanner and pHYs interpretation."""
import logging

import pytest

from conftest import CHRM, GAMA, ICCP, PHYS_300_DPI, SRGB, build_png, chunk, gradient
from repeaty.errors import (
    BadChunkTypeError,
    BadSignatureError,
    MalformedPhysError,
    PngDecodeError,
    TruncatedChunkError,
)
from repeaty.services.chunk_scanner import (
    PNG_SIGNATURE,
    iter_chunks,
    parse_phys,
    resolution_from_chunks,
    scan_chunks,
)


@pytest.mark.unit
class TestScanChunks:
    def test_keeps_only_allow_listed_chunks(self):
        data = build_png(
            gradient(4, 3),
            extra=[
                (b"cHRM", CHRM),
                (b"gAMA", GAMA),
                (b"iCCP", ICCP),
                (b"pHYs", PHYS_300_DPI),
                (b"sRGB", SRGB),
                (b"tEXt", b"Comment\x00hello"),
                (b"prVt", b"\x01\x02\x03"),
            ],
        )
        chunks = scan_chunks(data)
        assert chunks == {
            "cHRM": CHRM,
            "gAMA": GAMA,
            "iCCP": ICCP,
            "pHYs": PHYS_300_DPI,
            "sRGB": SRGB,
        }

    def test_subset_and_no_metadata(self):
        assert scan_chunks(build_png(gradient(2, 2), [(b"gAMA", GAMA)])) == {"gAMA": GAMA}
        assert scan_chunks(build_png(gradient(2, 2))) == {}

    def test_last_occurrence_wins(self):
        data = build_png(gradient(2, 2), [(b"gAMA", b"\x00\x00\x00\x01"), (b"gAMA", GAMA)])
        assert scan_chunks(data) == {"gAMA": GAMA}

    def test_walks_every_chunk(self):
        data = build_png(gradient(2, 2), [(b"sRGB", SRGB)])
        assert [tag for tag, _, _ in iter_chunks(data)] == ["IHDR", "sRGB", "IDAT", "IEND"]

    def test_crc_is_not_verified(self):
        data = bytearray(build_png(gradient(2, 2), [(b"sRGB", SRGB)]))
        sig_ihdr = 8 + 12 + 13
        # corrupt the sRGB CRC
        data[sig_ihdr + 12] ^= 0xFF
        assert scan_chunks(bytes(data)) == {"sRGB": SRGB}


@pytest.mark.unit
class TestMalformedInput:
    def test_bad_signature(self):
        data = bytearray(build_png(gradient(2, 2)))
        data[1] = ord("X")
        with pytest.raises(BadSignatureError):
            scan_chunks(bytes(data))

    def test_empty_input(self):
        with pytest.raises(BadSignatureError):
            scan_chunks(b"")

    def test_declared_length_exceeds_file(self):
        data = PNG_SIGNATURE + (1000).to_bytes(4, "big") + b"IDAT" + b"\x00" * 20
        with pytest.raises(TruncatedChunkError):
            scan_chunks(data)

    def test_dangling_tail(self):
        data = build_png(gradient(2, 2)) + b"\x00\x00"
        with pytest.raises(TruncatedChunkError):
            scan_chunks(data)

    def test_truncated_file(self):
        data = build_png(gradient(8, 8), [(b"pHYs", PHYS_300_DPI)])
        with pytest.raises(PngDecodeError):
            scan_chunks(data[:-6])

    def test_non_utf8_chunk_type(self):
        data = PNG_SIGNATURE + chunk(b"\xff\xfe\xfd\xfc", b"abc") + chunk(b"IEND", b"")
        with pytest.raises(BadChunkTypeError):
            scan_chunks(data)

    def test_errors_share_base_class(self):
        for exc in (BadSignatureError, TruncatedChunkError, BadChunkTypeError, MalformedPhysError):
            assert issubclass(exc, PngDecodeError)


@pytest.mark.unit
class TestResolution:
    def test_parse_phys(self):
        assert parse_phys(PHYS_300_DPI) == (11811, 11811, 1)

    def test_parse_phys_wrong_length(self):
        with pytest.raises(MalformedPhysError):
            parse_phys(b"\x00" * 5)

    def test_meter_unit_gives_ppi(self):
        resolution = resolution_from_chunks({"pHYs": PHYS_300_DPI})
        assert resolution.pixels_per_inch == pytest.approx(300.0, abs=0.01)
        assert resolution.pixels_per_mm == pytest.approx(11.811)

    def test_missing_phys(self):
        assert resolution_from_chunks({"gAMA": GAMA}) is None

    def test_unknown_unit_is_lenient(self, caplog):
        payload = (11811).to_bytes(4, "big") * 2 + b"\x00"
        with caplog.at_level(logging.WARNING):
            assert resolution_from_chunks({"pHYs": payload}) is None
        assert "pHYs" in caplog.text

    def test_density_mismatch_is_lenient(self, caplog):
        payload = (11811).to_bytes(4, "big") + (11812).to_bytes(4, "big") + b"\x01"
        with caplog.at_level(logging.WARNING):
            assert resolution_from_chunks({"pHYs": payload}) is None
        assert caplog.records

    def test_zero_density(self):
        assert resolution_from_chunks({"pHYs": b"\x00" * 8 + b"\x01"}) is None
