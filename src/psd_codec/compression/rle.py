"""
Apple PackBits RLE codec.

Every run starts with a signed header byte ``n``:

- ``0 <= n <= 127``: copy the next ``n + 1`` bytes literally.
- ``-127 <= n <= -1``: repeat the next byte ``1 - n`` times.
- ``n == -128``: no operation.

Example::

    from psd_codec.compression.rle import encode, decode

    raw_data = b'\\x00' * 100 + b'\\xff' * 50
    assert decode(encode(raw_data), len(raw_data)) == raw_data
"""

import logging

logger = logging.getLogger(__name__)

MAX_RUN = 128


def decode(data: bytes, size: int) -> bytes:
    """decode(data, size) -> bytes

    Lenient PackBits decoder. The result is always exactly ``size`` bytes:
    output beyond ``size`` is dropped and missing output, for example from a
    truncated run, is zero-padded.
    """
    result = bytearray()
    i, length = 0, len(data)

    while i < length and len(result) < size:
        header = data[i]
        i += 1
        if header < 128:
            count = header + 1
            result.extend(data[i : i + count])
            i += count
        elif header > 128:
            count = 257 - header
            if i < length:
                result.extend(data[i : i + 1] * count)
            i += 1

    if len(result) < size:
        logger.debug("RLE row short by %d bytes, padding" % (size - len(result)))
        result.extend(bytes(size - len(result)))
    return bytes(result[:size])


def encode(data: bytes) -> bytes:
    """encode(data) -> bytes

    PackBits encoder. Runs of 3 or more identical bytes are stored as repeat
    runs, everything else as literal runs of at most 128 bytes.
    """
    result = bytearray()
    length = len(data)
    i = 0
    literal_start = 0

    def flush_literal(end: int) -> None:
        start = literal_start
        while start < end:
            count = min(end - start, MAX_RUN)
            result.append(count - 1)
            result.extend(data[start : start + count])
            start += count

    while i < length:
        run = 1
        while i + run < length and run < MAX_RUN and data[i + run] == data[i]:
            run += 1
        if run >= 3:
            flush_literal(i)
            result.extend((257 - run, data[i]))
            i += run
            literal_start = i
        else:
            i += run
    flush_literal(length)
    return bytes(result)
