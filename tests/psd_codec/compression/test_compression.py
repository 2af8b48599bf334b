import logging
import struct
import zlib

import pytest

from psd_codec.compression import (
    compress,
    decode_prediction,
    decode_rle,
    decompress,
    encode_prediction,
    encode_rle,
)
from psd_codec.constants import Compression

logger = logging.getLogger(__name__)

RAW_IMAGE_3x3_8bit = b"\x00\x01\x02\x01\x01\x01\x01\x00\x00"
RAW_IMAGE_2x2_16bit = b"\x00\x01\x00\x02\x00\x03\x00\x04"


@pytest.mark.parametrize(
    "fixture, width, height, depth",
    [
        (bytes(bytearray(range(256))), 128, 2, 8),
        (bytes(bytearray(range(64))), 64, 1, 8),
        (bytes(bytearray(range(256))), 64, 2, 16),
        (bytes(bytearray(range(3))), 1, 3, 8),
        (bytes(bytearray(range(6))), 2, 3, 8),
        (struct.pack(">4H", 1, 0xFFFF, 2, 3), 2, 2, 16),
        (struct.pack(">3H", 7, 0, 9), 1, 3, 16),
    ],
)
def test_prediction(fixture: bytes, width: int, height: int, depth: int) -> None:
    encoded = encode_prediction(fixture, width, height, depth)
    decoded = decode_prediction(encoded, width, height, depth)
    assert fixture == decoded


def test_prediction_wraps() -> None:
    assert encode_prediction(b"\x01\x03\x02", 3, 1, 8) == b"\x01\x02\xff"
    assert decode_prediction(b"\x01\x02\xff", 3, 1, 8) == b"\x01\x03\x02"
    encoded = encode_prediction(struct.pack(">2H", 2, 1), 2, 1, 16)
    assert encoded == struct.pack(">2H", 2, 0xFFFF)


def test_prediction_invalid_depth() -> None:
    with pytest.raises(ValueError):
        encode_prediction(b"\x00" * 4, 1, 1, 32)


@pytest.mark.parametrize(
    "fixture, width, height, depth, version",
    [
        (bytes(bytearray(range(256))), 128, 2, 8, 1),
        (bytes(bytearray(range(256))), 128, 2, 8, 2),
    ],
)
def test_rle(
    fixture: bytes, width: int, height: int, depth: int, version: int
) -> None:
    encoded = encode_rle(fixture, width, height, depth, version)
    decoded = decode_rle(encoded, width, height, depth, version)
    assert fixture == decoded


def test_rle_table() -> None:
    encoded = encode_rle(b"\x05\x05\x05\x01\x02\x03", 3, 2, 8, 1)
    assert encoded[:4] == b"\x00\x02\x00\x04"
    encoded = encode_rle(b"\x05\x05\x05\x01\x02\x03", 3, 2, 8, 2)
    assert encoded[:8] == b"\x00\x00\x00\x02\x00\x00\x00\x04"


@pytest.mark.parametrize(
    "data, kind, width, height, depth, version",
    [
        (RAW_IMAGE_3x3_8bit, Compression.RAW, 3, 3, 8, 1),
        (RAW_IMAGE_3x3_8bit, Compression.RLE, 3, 3, 8, 1),
        (RAW_IMAGE_3x3_8bit, Compression.RLE, 3, 3, 8, 2),
        (RAW_IMAGE_3x3_8bit, Compression.ZIP, 3, 3, 8, 1),
        (RAW_IMAGE_3x3_8bit, Compression.ZIP_WITH_PREDICTION, 3, 3, 8, 1),
        (RAW_IMAGE_2x2_16bit, Compression.RAW, 2, 2, 16, 1),
        (RAW_IMAGE_2x2_16bit, Compression.RLE, 2, 2, 16, 1),
        (RAW_IMAGE_2x2_16bit, Compression.RLE, 2, 2, 16, 2),
        (RAW_IMAGE_2x2_16bit, Compression.ZIP, 2, 2, 16, 1),
        (RAW_IMAGE_2x2_16bit, Compression.ZIP_WITH_PREDICTION, 2, 2, 16, 1),
    ],
)
def test_compress_decompress(
    data: bytes,
    kind: Compression,
    width: int,
    height: int,
    depth: int,
    version: int,
) -> None:
    compressed = compress(data, kind, width, height, depth, version)
    output = decompress(compressed, kind, width, height, depth, version)
    assert output == data, "output=%r, expected=%r" % (output, data)


def test_compress_unknown() -> None:
    with pytest.raises(ValueError):
        compress(b"\x00", 7, 1, 1, 8)  # type: ignore[arg-type]


@pytest.mark.parametrize(
    "data, kind, expected",
    [
        (b"\x01", Compression.RAW, b"\x01\x00\x00\x00"),
        (b"\x01\x02\x03\x04\x05", Compression.RAW, b"\x01\x02\x03\x04"),
        (b"\x01\x02\x03\x04", 7, b"\x00" * 4),
        (b"not a deflate stream", Compression.ZIP, b"\x00" * 4),
        (b"not a deflate stream", Compression.ZIP_WITH_PREDICTION, b"\x00" * 4),
        (zlib.compress(b"\x09"), Compression.ZIP, b"\x09\x00\x00\x00"),
        (b"\x00", Compression.RLE, b"\x00" * 4),
        (b"\x00\x02\x00\x02\xff\x07", Compression.RLE, b"\x07\x07\x00\x00"),
    ],
)
def test_decompress_lenient(data: bytes, kind: int, expected: bytes) -> None:
    assert decompress(data, kind, 2, 2, 8) == expected


def test_decompress_zip_with_prediction() -> None:
    data = zlib.compress(b"\x01\x02\xff")
    assert decompress(data, Compression.ZIP_WITH_PREDICTION, 3, 1, 8) == (
        b"\x01\x03\x02"
    )


def test_decompress_empty() -> None:
    assert decompress(b"\x01\x02", Compression.RAW, 0, 5, 8) == b""
