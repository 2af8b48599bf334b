"""
File header structure.
"""

import logging
from typing import Any, BinaryIO, TypeVar

from attrs import astuple, define, field

from psd_codec.constants import ColorMode
from psd_codec.errors import (
    InvalidHeader,
    InvalidSignature,
    UnsupportedColorMode,
    UnsupportedDepth,
    UnsupportedVersion,
)
from psd_codec.psd.base import BaseElement
from psd_codec.psd.bin_utils import Cursor, write_fmt
from psd_codec.validators import in_, range_

logger = logging.getLogger(__name__)

T = TypeVar("T", bound="FileHeader")

MAX_CHANNELS = 56
MAX_DIMENSION = 300000


@define(repr=True)
class FileHeader(BaseElement):
    """
    Header section of the PSD file.

    Example::

        from psd_codec.psd.header import FileHeader
        from psd_codec.constants import ColorMode

        header = FileHeader(channels=3, height=4, width=4, depth=8,
                            color_mode=ColorMode.RGB)

    .. py:attribute:: signature

        Signature: always equal to ``b'8BPS'``.

    .. py:attribute:: version

        Version number. PSD is 1, and PSB is 2. Version 2 uses 64-bit
        section lengths.

    .. py:attribute:: channels

        The number of channels in the image, including any user-defined alpha
        channel.

    .. py:attribute:: height

        The height of the image in pixels.

    .. py:attribute:: width

        The width of the image in pixels.

    .. py:attribute:: depth

        The number of bits per channel, 8 or 16.

    .. py:attribute:: color_mode

        The color mode of the file. See
        :py:class:`~psd_codec.constants.ColorMode`
    """

    _FORMAT = "4sH6xHIIHH"

    signature: bytes = field(default=b"8BPS", repr=False)
    version: int = field(default=1, validator=in_((1, 2)))
    channels: int = field(default=3, validator=range_(1, MAX_CHANNELS))
    height: int = field(default=64, validator=range_(1, MAX_DIMENSION))
    width: int = field(default=64, validator=range_(1, MAX_DIMENSION))
    depth: int = field(default=8, validator=in_((8, 16)))
    color_mode: ColorMode = field(
        default=ColorMode.RGB, converter=ColorMode, validator=in_(ColorMode)
    )

    @classmethod
    def read(cls: type[T], fp: Cursor, **kwargs: Any) -> T:
        """
        Read and validate the header field by field so that the first broken
        field determines the reported error.
        """
        if fp.remaining() < 4:
            raise InvalidSignature("Input is too short to be a PSD or PSB file")
        signature = fp.read_bytes(4)
        if signature != b"8BPS":
            raise InvalidSignature("This is not a PSD or PSB file: %r" % signature)

        version = fp.read_u16()
        if version not in (1, 2):
            raise UnsupportedVersion("Unsupported version %d" % version)
        fp.skip(6)

        channels = fp.read_u16()
        if not 1 <= channels <= MAX_CHANNELS:
            raise InvalidHeader("Invalid channel count %d" % channels)
        height = fp.read_u32()
        width = fp.read_u32()
        if not (1 <= height <= MAX_DIMENSION and 1 <= width <= MAX_DIMENSION):
            raise InvalidHeader("Invalid dimensions %dx%d" % (width, height))

        depth = fp.read_u16()
        if depth not in (8, 16):
            raise UnsupportedDepth("Unsupported depth %d" % depth)

        mode = fp.read_u16()
        try:
            color_mode = ColorMode(mode)
        except ValueError:
            raise UnsupportedColorMode("Unsupported color mode %d" % mode)

        logger.debug(
            "reading header, version=%d, %dx%d, depth=%d, mode=%s"
            % (version, width, height, depth, color_mode.name)
        )
        return cls(signature, version, channels, height, width, depth, color_mode)

    def write(self, fp: BinaryIO, **kwargs: Any) -> int:
        return write_fmt(fp, self._FORMAT, *astuple(self))
