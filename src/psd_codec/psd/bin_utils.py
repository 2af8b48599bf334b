"""
Binary processing utilities.

Reading goes through :py:class:`Cursor`, a forward-only big-endian reader
over a fully buffered input. Writing uses plain file-like objects such as
:py:class:`io.BytesIO`.
"""

import io
import logging
import struct
from typing import Any, BinaryIO, Callable, Sequence, Union

from psd_codec.errors import UnexpectedEndOfFile

logger = logging.getLogger(__name__)


class Cursor(io.BytesIO):
    """
    Sequential reader over an immutable byte buffer.

    Every read fails with :py:exc:`~psd_codec.errors.UnexpectedEndOfFile`
    when fewer bytes remain than requested. The position only moves forward;
    nested regions are parsed with :py:meth:`read_section`, which bounds the
    nested parser and always leaves this cursor at the end of the region.

    Example::

        fp = Cursor(data)
        signature = fp.read_bytes(4)
        with fp.read_section(fp.read_u32()) as section:
            ...
    """

    def __init__(self, data: Union[bytes, bytearray, memoryview] = b""):
        super().__init__(data)
        self._size = len(data)

    def remaining(self) -> int:
        """Number of unread bytes."""
        return max(self._size - self.tell(), 0)

    def seek(self, offset: int, whence: int = 0) -> int:
        if whence == 1:
            target = self.tell() + offset
        elif whence == 2:
            target = self._size + offset
        else:
            target = offset
        if target < self.tell():
            raise ValueError(
                "Cursor cannot move backwards: %d -> %d" % (self.tell(), target)
            )
        return super().seek(target)

    def read_bytes(self, size: int) -> bytes:
        if size < 0 or self.remaining() < size:
            raise UnexpectedEndOfFile(
                "Expected %d bytes at offset %d, %d available"
                % (size, self.tell(), self.remaining())
            )
        return self.read(size)

    def skip(self, size: int) -> None:
        if size < 0 or self.remaining() < size:
            raise UnexpectedEndOfFile(
                "Cannot skip %d bytes at offset %d, %d available"
                % (size, self.tell(), self.remaining())
            )
        super().seek(size, 1)

    def read_section(self, length: int) -> "Cursor":
        """
        Returns a sub-cursor over the next ``length`` bytes and moves past
        them, regardless of how much of the section is later parsed.
        """
        return Cursor(self.read_bytes(length))

    def read_u8(self) -> int:
        return read_fmt("B", self)[0]

    def read_u16(self) -> int:
        return read_fmt("H", self)[0]

    def read_i16(self) -> int:
        return read_fmt("h", self)[0]

    def read_u32(self) -> int:
        return read_fmt("I", self)[0]

    def read_i32(self) -> int:
        return read_fmt("i", self)[0]

    def read_u64(self) -> int:
        return read_fmt("Q", self)[0]


def pack(fmt: str, *args: Any) -> bytes:
    fmt = ">" + fmt
    return struct.pack(fmt, *args)


def read_fmt(fmt: str, fp: BinaryIO) -> tuple:
    """
    Reads data from ``fp`` according to ``fmt``.
    """
    fmt = ">" + fmt
    fmt_size = struct.calcsize(fmt)
    data = fp.read(fmt_size)
    if len(data) != fmt_size:
        raise UnexpectedEndOfFile(
            "Expected %d bytes for %r, got %d" % (fmt_size, fmt, len(data))
        )
    return struct.unpack(fmt, data)


def write_fmt(fp: BinaryIO, fmt: str, *args: Any) -> int:
    """
    Writes data to ``fp`` according to ``fmt``.
    """
    fmt = ">" + fmt
    fmt_size = struct.calcsize(fmt)
    written = write_bytes(fp, struct.pack(fmt, *args))
    assert written == fmt_size, "written=%d, expected=%d" % (written, fmt_size)
    return written


def write_bytes(fp: BinaryIO, data: bytes) -> int:
    """
    Write bytes to the file object and returns bytes written.

    :return: written byte size
    """
    assert isinstance(data, (bytes, bytearray)), type(data)
    return fp.write(data)


def read_length_block(fp: Cursor, fmt: str = "I", padding: int = 1) -> bytes:
    """
    Read a block of data with a length marker at the beginning.

    :param fp: cursor
    :param fmt: format of the length marker
    :param padding: divisor for the padding alignment
    :return: bytes object
    """
    length = read_fmt(fmt, fp)[0]
    data = fp.read_bytes(length)
    read_padding(fp, length, padding)
    return data


def write_length_block(
    fp: BinaryIO,
    writer: Callable[[BinaryIO], int],
    fmt: str = "I",
    padding: int = 1,
    **kwargs: Any,
) -> int:
    """
    Writes a block of data with a length marker at the beginning.

    Example::

        with io.BytesIO() as fp:
            write_length_block(fp, lambda f: f.write(b'\\x00\\x00'))

    :param fp: file-like
    :param writer: function object that takes file-like object as an argument
    :param fmt: format of the length marker
    :param padding: divisor for the padding alignment
    :return: written byte size
    """
    length_position = reserve_position(fp, fmt)
    written = writer(fp, **kwargs)
    written += write_position(fp, length_position, written, fmt)
    written += write_padding(fp, written, padding)
    return written


def reserve_position(fp: BinaryIO, fmt: str = "I") -> int:
    """
    Reserves the current position for write.

    Use with `write_position`.
    """
    position = fp.tell()
    fp.write(b"\x00" * struct.calcsize(">" + fmt))
    return position


def write_position(fp: BinaryIO, position: int, value: int, fmt: str = "I") -> int:
    """
    Writes a value to the specified position.

    :return: written byte size
    """
    current_position = fp.tell()
    fp.seek(position)
    written = write_bytes(fp, pack(fmt, value))
    fp.seek(current_position)
    return written


def read_padding(fp: Cursor, size: int, divisor: int = 2) -> bytes:
    """
    Read padding bytes for the given byte size. Missing padding at the end of
    the stream is tolerated.
    """
    remainder = size % divisor
    if remainder:
        return fp.read(divisor - remainder)
    return b""


def write_padding(fp: BinaryIO, size: int, divisor: int = 2) -> int:
    """
    Writes padding bytes given the currently written size.

    :return: written byte size
    """
    remainder = size % divisor
    if remainder:
        return write_bytes(fp, struct.pack("%dx" % (divisor - remainder)))
    return 0


def is_readable(fp: Cursor, size: int = 1) -> bool:
    """
    Check if the cursor has at least ``size`` bytes left.
    """
    return fp.remaining() >= size


def pad(number: int, divisor: int) -> int:
    if number % divisor:
        number = (number // divisor + 1) * divisor
    return number


def read_pascal_string(
    fp: Cursor, encoding: str = "macroman", padding: int = 2
) -> str:
    length = read_fmt("B", fp)[0]
    data = fp.read_bytes(length)
    # -1 accounts for the length byte
    padded_length = pad(length + 1, padding) - 1
    fp.skip(min(padded_length - length, fp.remaining()))
    return data.decode(encoding, "replace")


def write_pascal_string(
    fp: BinaryIO, value: str, encoding: str = "macroman", padding: int = 2
) -> int:
    data = value.encode(encoding, "replace")[:255]
    written = write_fmt(fp, "B", len(data))
    written += write_bytes(fp, data)
    written += write_padding(fp, written, padding)
    return written


def read_unicode_string(fp: Cursor, padding: int = 1) -> str:
    num_chars = read_fmt("I", fp)[0]
    data = fp.read_bytes(num_chars * 2)
    read_padding(fp, 4 + num_chars * 2, padding)
    return data.decode("utf-16-be", "replace").rstrip("\x00")


def write_unicode_string(fp: BinaryIO, value: str, padding: int = 1) -> int:
    data = value.encode("utf-16-be")
    written = write_fmt(fp, "I", len(data) // 2)
    written += write_bytes(fp, data)
    written += write_padding(fp, written, padding)
    return written


def decode_fixed_point(numbers: Sequence[int]) -> tuple:
    """Decodes signed 8.24 fixed-point integers."""
    return tuple(float(x) / 0x01000000 for x in numbers)


def encode_fixed_point(numbers: Sequence[float]) -> tuple:
    """Encodes floats as signed 8.24 fixed-point integers."""
    return tuple(int(round(x * 0x01000000)) for x in numbers)


def trimmed_repr(data: Any, trim_length: int = 16) -> str:
    if isinstance(data, bytes):
        if len(data) > trim_length:
            return repr(data[:trim_length] + b" ... =" + str(len(data)).encode("ascii"))
    return repr(data)
