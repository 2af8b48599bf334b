"""
Image data section structure.

:py:class:`ImageData` corresponds to the last section of the PSD/PSB file
where the flattened composite is stored, planar across the whole canvas.
"""

import logging
from typing import Any, BinaryIO, Optional, Sequence, TypeVar, Union

from attrs import define, field

from psd_codec.compression import compress, decompress
from psd_codec.constants import Compression
from psd_codec.psd.base import BaseElement
from psd_codec.psd.bin_utils import Cursor, write_bytes, write_fmt
from psd_codec.psd.header import FileHeader

logger = logging.getLogger(__name__)

T = TypeVar("T", bound="ImageData")


@define(repr=False)
class ImageData(BaseElement):
    """
    Merged channel image data.

    .. py:attribute:: compression

        See :py:class:`~psd_codec.constants.Compression`. ``None`` when the
        file ends before the section.

    .. py:attribute:: data

        `bytes` as compressed in the `compression` flag.
    """

    compression: Optional[Union[Compression, int]] = Compression.RAW
    data: bytes = field(default=b"", repr=False)

    @classmethod
    def read(cls: type[T], fp: Cursor, **kwargs: Any) -> T:
        if fp.remaining() < 2:
            logger.debug("image data is missing")
            return cls(compression=None)
        value = fp.read_u16()
        try:
            compression: Union[Compression, int] = Compression(value)
        except ValueError:
            compression = value
        data = fp.read_bytes(fp.remaining())
        logger.debug("  read image data, len=%d" % (len(data) + 2))
        return cls(compression, data)

    def write(self, fp: BinaryIO, **kwargs: Any) -> int:
        if self.compression is None:
            return 0
        written = write_fmt(fp, "H", int(self.compression))
        written += write_bytes(fp, self.data)
        logger.debug("  wrote image data, len=%d" % (written))
        return written

    @property
    def is_missing(self) -> bool:
        return self.compression is None

    def get_data(self, header: FileHeader) -> list[bytes]:
        """
        Get decompressed data, one plane per channel.

        :param header: See :py:class:`~psd_codec.psd.header.FileHeader`.
        :return: `list` of bytes corresponding each channel.
        """
        if self.compression is None:
            return []
        data = decompress(
            self.data,
            self.compression,
            header.width,
            header.height * header.channels,
            header.depth,
            header.version,
        )
        plane_size = len(data) // header.channels
        return [
            data[i * plane_size : (i + 1) * plane_size] for i in range(header.channels)
        ]

    def set_data(self, data: Sequence[bytes], header: FileHeader) -> int:
        """
        Set raw data and compress.

        :param data: list of raw data bytes corresponding channels.
        :param header: See :py:class:`~psd_codec.psd.header.FileHeader`.
        :return: length of compressed data.
        """
        self.data = compress(
            b"".join(data),
            self.compression or Compression.RAW,
            header.width,
            header.height * header.channels,
            header.depth,
            header.version,
        )
        return len(self.data)
