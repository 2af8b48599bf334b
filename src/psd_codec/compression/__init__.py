"""
Image compression utilities for PSD channel data.

Supported compression methods:

- **RAW** (``Compression.RAW``): Uncompressed raw pixel data
- **RLE** (``Compression.RLE``): Apple PackBits run-length encoding with a
  per-row byte count table
- **ZIP** (``Compression.ZIP``): Deflate compression without prediction
- **ZIP_WITH_PREDICTION** (``Compression.ZIP_WITH_PREDICTION``): Deflate
  with a horizontal delta filter per row

Decoding is lenient: :py:func:`decompress` always returns exactly
``width * height * depth // 8`` bytes. Short input is zero-padded, and
unknown compression codes or corrupt deflate streams produce a zero-filled
plane.

Example usage::

    from psd_codec.compression import compress, decompress
    from psd_codec.constants import Compression

    compressed = compress(raw_pixels, Compression.RLE, 100, 100, 8)
    raw_pixels = decompress(compressed, Compression.RLE, 100, 100, 8)
"""

import logging
import zlib
from typing import Union

import numpy as np

from psd_codec.compression import rle as rle_impl
from psd_codec.constants import Compression

logger = logging.getLogger(__name__)

_DTYPES = {8: np.dtype(">u1"), 16: np.dtype(">u2")}


def compress(
    data: bytes,
    compression: Compression,
    width: int,
    height: int,
    depth: int,
    version: int = 1,
) -> bytes:
    """Compress raw data.

    :param data: raw data bytes to write.
    :param compression: compression type, see :py:class:`.Compression`.
    :param width: width.
    :param height: height.
    :param depth: bit depth of the pixel.
    :param version: psd file version.
    :return: compressed data bytes.
    """
    if compression == Compression.RAW:
        return data
    elif compression == Compression.RLE:
        return encode_rle(data, width, height, depth, version)
    elif compression == Compression.ZIP:
        return zlib.compress(data)
    elif compression == Compression.ZIP_WITH_PREDICTION:
        return zlib.compress(encode_prediction(data, width, height, depth))
    raise ValueError("Unsupported compression %r" % (compression,))


def decompress(
    data: bytes,
    compression: Union[Compression, int],
    width: int,
    height: int,
    depth: int,
    version: int = 1,
) -> bytes:
    """Decompress raw data.

    :param data: compressed data bytes.
    :param compression: compression code,
            see :py:class:`~psd_codec.constants.Compression`.
    :param width: width.
    :param height: height.
    :param depth: bit depth of the pixel.
    :param version: psd file version.
    :return: decompressed data bytes, exactly ``width * height * depth // 8``
        long.
    """
    length = width * height * max(1, depth // 8)
    if length == 0:
        return b""

    result = None
    if compression == Compression.RAW:
        result = data
    elif compression == Compression.RLE:
        result = decode_rle(data, width, height, depth, version)
    elif compression in (Compression.ZIP, Compression.ZIP_WITH_PREDICTION):
        try:
            result = zlib.decompress(data)
        except zlib.error as e:
            logger.warning("Failed to inflate channel data: %s" % e)
        else:
            if compression == Compression.ZIP_WITH_PREDICTION:
                result = decode_prediction(
                    _fit(result, length), width, height, depth
                )
    else:
        logger.warning("Unknown compression %r" % (compression,))

    if result is None:
        logger.warning("Failed channel has been replaced by zeros")
        return bytes(length)
    if len(result) != length:
        logger.debug(
            "Channel data size mismatch, len=%d, expected=%d" % (len(result), length)
        )
    return _fit(result, length)


def encode_rle(data: bytes, width: int, height: int, depth: int, version: int) -> bytes:
    row_size = width * depth // 8
    rows = [
        rle_impl.encode(data[y * row_size : (y + 1) * row_size]) for y in range(height)
    ]
    bytes_counts = np.array([len(row) for row in rows], dtype=(">u2", ">u4")[version - 1])
    return bytes_counts.tobytes() + b"".join(rows)


def decode_rle(data: bytes, width: int, height: int, depth: int, version: int) -> bytes:
    """
    Decode a row byte count table followed by ``height`` PackBits rows.
    Missing counts and rows decode as zeros.
    """
    row_size = max(width * depth // 8, 1)
    dtype = np.dtype((">u2", ">u4")[version - 1])
    table_size = height * dtype.itemsize
    if len(data) < table_size:
        logger.warning(
            "RLE byte count table is truncated, len=%d, expected=%d"
            % (len(data), table_size)
        )
    bytes_counts = np.frombuffer(_fit(data[:table_size], table_size), dtype=dtype)

    rows = []
    offset = table_size
    for count in bytes_counts.tolist():
        rows.append(rle_impl.decode(data[offset : offset + count], row_size))
        offset += count
    return b"".join(rows)


def encode_prediction(data: bytes, w: int, h: int, depth: int) -> bytes:
    """Apply the horizontal delta filter per row."""
    arr = _as_rows(data, w, h, depth)
    encoded = arr.copy()
    encoded[:, 1:] = arr[:, 1:] - arr[:, :-1]
    return encoded.astype(_DTYPES[depth]).tobytes()


def decode_prediction(data: bytes, w: int, h: int, depth: int) -> bytes:
    """Undo the horizontal delta filter by a per-row cumulative sum."""
    arr = _as_rows(data, w, h, depth)
    decoded = np.cumsum(arr, axis=1, dtype=arr.dtype)
    return decoded.astype(_DTYPES[depth]).tobytes()


def _as_rows(data: bytes, w: int, h: int, depth: int) -> np.ndarray:
    if depth not in _DTYPES:
        raise ValueError("Invalid pixel size %d" % (depth))
    dtype = _DTYPES[depth]
    arr = np.frombuffer(_fit(data, w * h * dtype.itemsize), dtype=dtype)
    # Native unsigned arithmetic wraps modulo 2**depth.
    return arr.astype(np.uint8 if depth == 8 else np.uint16).reshape((h, w))


def _fit(data: bytes, length: int) -> bytes:
    """Zero-pad or truncate to exactly ``length`` bytes."""
    if len(data) < length:
        return bytes(data) + bytes(length - len(data))
    return bytes(data[:length])
