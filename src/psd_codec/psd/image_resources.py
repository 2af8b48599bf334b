"""
Image resources section structure.

The decoder does not consume any resource, so the section is skipped by its
length prefix when reading. The encoder emits a minimal set built by
:py:meth:`ImageResources.new`.

Example::

    from psd_codec.constants import Resource

    resources = ImageResources.new()
    resolution = resources[Resource.RESOLUTION_INFO].data
"""

import logging
from typing import Any, BinaryIO, TypeVar

from attrs import astuple, define, field

from psd_codec.constants import Resource
from psd_codec.psd.base import BaseElement, DictElement
from psd_codec.psd.bin_utils import (
    Cursor,
    read_length_block,
    write_bytes,
    write_fmt,
    write_length_block,
    write_pascal_string,
)

logger = logging.getLogger(__name__)

T_ImageResources = TypeVar("T_ImageResources", bound="ImageResources")


@define(repr=False)
class ImageResources(DictElement):
    """
    Image resources section of the PSD file. Dict of
    :py:class:`.ImageResource`.
    """

    @classmethod
    def new(cls: type[T_ImageResources], **kwargs: Any) -> T_ImageResources:
        """
        Create a new default image resources holding the resolution info.

        :return: ImageResources
        """
        return cls(  # type: ignore[arg-type]
            [
                (
                    Resource.RESOLUTION_INFO,
                    ImageResource(
                        key=Resource.RESOLUTION_INFO,
                        data=ResolutionInfo.new(**kwargs),
                    ),
                ),
            ]
        )

    @classmethod
    def read(
        cls: type[T_ImageResources], fp: Cursor, **kwargs: Any
    ) -> T_ImageResources:
        data = read_length_block(fp)
        logger.debug("skipping image resources, len=%d" % (len(data)))
        return cls()

    def write(self, fp: BinaryIO, encoding: str = "macroman", **kwargs: Any) -> int:
        def writer(f: BinaryIO) -> int:
            written = sum(item.write(f, encoding) for item in self.values())
            logger.debug("writing image resources, len=%d" % (written))
            return written

        return write_length_block(fp, writer)

    @classmethod
    def _key_converter(cls, key: Any) -> Any:
        return getattr(key, "value", key)


@define(repr=False)
class ImageResource(BaseElement):
    """
    Image resource block, as written by the encoder.

    .. py:attribute:: signature

        Binary signature, always ``b'8BIM'``.

    .. py:attribute:: key

        Unique identifier for the resource. See
        :py:class:`~psd_codec.constants.Resource`.

    .. py:attribute:: name
    .. py:attribute:: data

        The resource data.
    """

    signature: bytes = field(default=b"8BIM", repr=False)
    key: int = Resource.RESOLUTION_INFO
    name: str = ""
    data: object = field(default=b"", repr=False)

    def write(self, fp: BinaryIO, encoding: str = "macroman", **kwargs: Any) -> int:
        written = write_fmt(
            fp, "4sH", self.signature, getattr(self.key, "value", self.key)
        )
        written += write_pascal_string(fp, self.name, encoding, 2)

        def writer(f: BinaryIO) -> int:
            if hasattr(self.data, "write"):
                return self.data.write(f)  # type: ignore[attr-defined]
            return write_bytes(f, self.data)  # type: ignore[arg-type]

        written += write_length_block(fp, writer, padding=2)
        return written


@define(repr=False)
class ResolutionInfo(BaseElement):
    """
    Resolution info structure.

    Resolutions are 16.16 fixed-point pixels per unit.

    .. py:attribute:: horizontal
    .. py:attribute:: horizontal_unit
    .. py:attribute:: width_unit
    .. py:attribute:: vertical
    .. py:attribute:: vertical_unit
    .. py:attribute:: height_unit
    """

    horizontal: int = 0
    horizontal_unit: int = 0
    width_unit: int = 0
    vertical: int = 0
    vertical_unit: int = 0
    height_unit: int = 0

    @classmethod
    def new(cls, dpi: int = 72, **kwargs: Any) -> "ResolutionInfo":
        """Resolution in pixels per inch, with inches as the display unit."""
        return cls(dpi << 16, 1, 1, dpi << 16, 1, 1)

    def write(self, fp: BinaryIO, **kwargs: Any) -> int:
        return write_fmt(fp, "I2HI2H", *astuple(self))
