import pytest

import psd_codec.compression.rle as rle

from .test_compression import RAW_IMAGE_3x3_8bit


def test_identical() -> None:
    size = len(RAW_IMAGE_3x3_8bit)
    encoded = rle.encode(RAW_IMAGE_3x3_8bit)
    assert rle.decode(encoded, size) == RAW_IMAGE_3x3_8bit


@pytest.mark.parametrize(
    "data, size, expected",
    [
        (b"\xfd\x01", 4, b"\x01\x01\x01\x01"),
        (b"\xfd\x01", 3, b"\x01\x01\x01"),
        (b"\xfd\x01", 5, b"\x01\x01\x01\x01\x00"),
        (b"\x02\x01\x02\x03", 3, b"\x01\x02\x03"),
        (b"\x02\x01\x02\x03", 2, b"\x01\x02"),
        (b"\x02\x01\x02\x03", 4, b"\x01\x02\x03\x00"),
        (b"\x80\x00\x05", 1, b"\x05"),
        (b"\x03\x01", 4, b"\x01\x00\x00\x00"),
        (b"\xfe", 2, b"\x00\x00"),
        (b"", 2, b"\x00\x00"),
    ],
)
def test_decode(data: bytes, size: int, expected: bytes) -> None:
    assert rle.decode(data, size) == expected


def test_decode_longest_runs() -> None:
    literal = bytes(range(128))
    assert rle.decode(b"\x7f" + literal, 128) == literal
    assert rle.decode(b"\x81\x09", 128) == b"\x09" * 128


@pytest.mark.parametrize(
    "data, expected",
    [
        (b"", b""),
        (b"\x05", b"\x00\x05"),
        (b"\x00" * 100 + b"\xff" * 50, b"\x9d\x00\xcf\xff"),
        (b"\x07" * 200, b"\x81\x07\xb9\x07"),
        (b"\x01\x02\x02\x02\x03", b"\x00\x01\xfe\x02\x00\x03"),
        (b"\x01\x02\x02\x03", b"\x03\x01\x02\x02\x03"),
    ],
)
def test_encode(data: bytes, expected: bytes) -> None:
    assert rle.encode(data) == expected
    assert rle.decode(expected, len(data)) == data


def test_encode_long_literal() -> None:
    data = bytes(range(130))
    encoded = rle.encode(data)
    assert encoded == b"\x7f" + data[:128] + b"\x01" + data[128:]
    assert rle.decode(encoded, len(data)) == data
