"""
Layer and mask data structures.

This module implements the low-level binary structures of the "Layer and
Mask Information" section.

Key classes:

- :py:class:`LayerAndMaskInformation`: Top-level container for all layer data
- :py:class:`LayerInfo`: Contains layer records and channel image data
- :py:class:`LayerRecords`: List of individual layer records
- :py:class:`LayerRecord`: Single layer metadata (name, bounds, blend mode, etc.)
- :py:class:`ChannelInfo`: Channel metadata within a layer record
- :py:class:`ChannelImageData`: Compressed pixel data for all channels
- :py:class:`ChannelData`: Single channel's compressed pixel data
- :py:class:`MaskData`: Layer mask parameters
- :py:class:`GlobalLayerMaskInfo`: Document-wide mask settings

Layers are stored as a flat list, bottom of the stack first. Group
boundaries are marked by layers carrying a ``lsct`` tagged block, see
:py:class:`~psd_codec.psd.tagged_blocks.SectionDividerSetting`. The list is
kept flat here and in :py:mod:`psd_codec.api`.

Every length-prefixed region is read through
:py:meth:`~psd_codec.psd.bin_utils.Cursor.read_section`, so the parent
cursor always lands on the end of the region no matter how much of it the
nested parser consumed.
"""

import logging
from typing import Any, BinaryIO, Optional, TypeVar, Union

from attrs import define, field

from psd_codec.compression import compress, decompress
from psd_codec.constants import (
    BlendMode,
    ChannelID,
    Clipping,
    Compression,
    Tag,
)
from psd_codec.errors import InvalidLayerData
from psd_codec.psd.base import BaseElement, ListElement
from psd_codec.psd.bin_utils import (
    Cursor,
    is_readable,
    read_fmt,
    read_pascal_string,
    write_bytes,
    write_fmt,
    write_length_block,
    write_padding,
    write_pascal_string,
)
from psd_codec.psd.tagged_blocks import TaggedBlocks, register
from psd_codec.validators import range_

logger = logging.getLogger(__name__)

T_LayerAndMaskInformation = TypeVar(
    "T_LayerAndMaskInformation", bound="LayerAndMaskInformation"
)
T_LayerInfo = TypeVar("T_LayerInfo", bound="LayerInfo")
T_LayerRecord = TypeVar("T_LayerRecord", bound="LayerRecord")
T_MaskData = TypeVar("T_MaskData", bound="MaskData")


def _length_format(version: int) -> str:
    return ("I", "Q")[version - 1]


def _to_enum(kls: Any, value: int) -> Union[int, Any]:
    try:
        return kls(value)
    except ValueError:
        return value


@define(repr=False)
class LayerAndMaskInformation(BaseElement):
    """
    Layer and mask information section.

    .. py:attribute:: layer_info

        See :py:class:`.LayerInfo`.

    .. py:attribute:: global_layer_mask_info

        See :py:class:`.GlobalLayerMaskInfo`.

    .. py:attribute:: tagged_blocks

        Global :py:class:`~psd_codec.psd.tagged_blocks.TaggedBlocks`. 16-bit
        documents store their layer info here under ``Lr16``.
    """

    layer_info: Optional["LayerInfo"] = None
    global_layer_mask_info: Optional["GlobalLayerMaskInfo"] = None
    tagged_blocks: Optional[TaggedBlocks] = None

    @classmethod
    def read(
        cls: type[T_LayerAndMaskInformation],
        fp: Cursor,
        encoding: str = "macroman",
        version: int = 1,
        **kwargs: Any,
    ) -> T_LayerAndMaskInformation:
        length = read_fmt(_length_format(version), fp)[0]
        logger.debug("reading layer and mask info, len=%d" % length)
        if length == 0:
            return cls()
        with fp.read_section(length) as section:
            return cls._read_body(section, encoding, version)

    @classmethod
    def _read_body(
        cls: type[T_LayerAndMaskInformation],
        fp: Cursor,
        encoding: str,
        version: int,
    ) -> T_LayerAndMaskInformation:
        layer_info = LayerInfo.read(fp, encoding, version)

        global_layer_mask_info = None
        if is_readable(fp, 4):
            global_layer_mask_info = GlobalLayerMaskInfo.read(fp)

        tagged_blocks = None
        if is_readable(fp, 12):
            tagged_blocks = TaggedBlocks.read(
                fp, version=version, padding=4, encoding=encoding
            )

        return cls(layer_info, global_layer_mask_info, tagged_blocks)

    def write(
        self,
        fp: BinaryIO,
        encoding: str = "macroman",
        version: int = 1,
        **kwargs: Any,
    ) -> int:
        def writer(f: BinaryIO) -> int:
            written = 0
            if self.layer_info:
                written += self.layer_info.write(f, encoding, version)
            else:
                written += write_fmt(f, _length_format(version), 0)
            if self.global_layer_mask_info:
                written += self.global_layer_mask_info.write(f)
            if self.tagged_blocks:
                written += self.tagged_blocks.write(f, version=version, padding=4)
            logger.debug("writing layer and mask info, len=%d" % (written))
            return written

        return write_length_block(fp, writer, fmt=_length_format(version))


@define(repr=False)
class LayerInfo(BaseElement):
    """
    High-level organization of the layer information.

    .. py:attribute:: layer_count

        Layer count. If it is a negative number, its absolute value is the
        number of layers and the first alpha channel contains the transparency
        data for the merged result.

    .. py:attribute:: layer_records

        Information about each layer. See :py:class:`.LayerRecords`.

    .. py:attribute:: channel_image_data

        Channel image data. See :py:class:`.ChannelImageData`.
    """

    layer_count: int = 0
    layer_records: "LayerRecords" = field(factory=lambda: LayerRecords())
    channel_image_data: "ChannelImageData" = field(factory=lambda: ChannelImageData())

    @classmethod
    def read(
        cls: type[T_LayerInfo],
        fp: Cursor,
        encoding: str = "macroman",
        version: int = 1,
        **kwargs: Any,
    ) -> T_LayerInfo:
        length = read_fmt(_length_format(version), fp)[0]
        logger.debug("reading layer info, len=%d" % length)
        if length == 0:
            return cls()
        with fp.read_section(length) as section:
            return cls._read_body(section, encoding, version)

    @classmethod
    def _read_body(
        cls: type[T_LayerInfo], fp: Cursor, encoding: str, version: int
    ) -> T_LayerInfo:
        layer_count = fp.read_i16()
        layer_records = LayerRecords.read(fp, layer_count, encoding, version)
        channel_image_data = ChannelImageData.read(fp, layer_records)
        return cls(
            layer_count=layer_count,
            layer_records=layer_records,
            channel_image_data=channel_image_data,
        )

    def write(
        self,
        fp: BinaryIO,
        encoding: str = "macroman",
        version: int = 1,
        **kwargs: Any,
    ) -> int:
        def writer(f: BinaryIO) -> int:
            written = self._write_body(f, encoding, version)
            logger.debug("writing layer info, len=%d" % (written))
            return written

        fmt = _length_format(version)
        if self.layer_count == 0:
            return write_fmt(fp, fmt, 0)
        return write_length_block(fp, writer, fmt=fmt)

    def _write_body(self, fp: BinaryIO, encoding: str, version: int) -> int:
        written = write_fmt(fp, "h", self.layer_count)
        self._update_channel_length()
        written += self.layer_records.write(fp, encoding, version)
        written += self.channel_image_data.write(fp)
        written += write_padding(fp, written, 2)
        return written

    def _update_channel_length(self) -> None:
        for layer, channels in zip(self.layer_records, self.channel_image_data):
            for channel_info, channel in zip(layer.channel_info, channels):
                channel_info.length = channel._length


@register(Tag.LAYER_16)
@define(repr=False)
class LayerInfoBlock(LayerInfo):
    """
    Layer info stored in a global tagged block, without the length prefix.
    """

    @classmethod
    def read(
        cls: type[T_LayerInfo],
        fp: Cursor,
        encoding: str = "macroman",
        version: int = 1,
        **kwargs: Any,
    ) -> T_LayerInfo:
        return cls._read_body(fp, encoding, version)

    def write(
        self,
        fp: BinaryIO,
        encoding: str = "macroman",
        version: int = 1,
        **kwargs: Any,
    ) -> int:
        return self._write_body(fp, encoding, version)


@define(repr=False)
class ChannelInfo(BaseElement):
    """
    Channel information.

    .. py:attribute:: id

        Channel ID: 0 = red, 1 = green, etc.; -1 = transparency mask; -2 =
        user supplied layer mask, -3 real user supplied layer mask (when both
        a user mask and a vector mask are present). See
        :py:class:`~psd_codec.constants.ChannelID`. Unknown ids are kept as
        plain integers.

    .. py:attribute:: length

        Length of the corresponding channel data, including the 2-byte
        compression code.
    """

    id: Union[ChannelID, int] = ChannelID.CHANNEL_0
    length: int = 0

    @classmethod
    def read(cls, fp: Cursor, version: int = 1, **kwargs: Any) -> "ChannelInfo":
        channel_id, length = read_fmt(("hI", "hQ")[version - 1], fp)
        return cls(id=_to_enum(ChannelID, channel_id), length=length)

    def write(self, fp: BinaryIO, version: int = 1, **kwargs: Any) -> int:
        return write_fmt(fp, ("hI", "hQ")[version - 1], int(self.id), self.length)


@define(repr=False)
class LayerFlags(BaseElement):
    """
    Layer flags.

    .. py:attribute:: transparency_protected
    .. py:attribute:: visible

        Stored inverted in bit 1.

    .. py:attribute:: pixel_data_irrelevant
    """

    transparency_protected: bool = False
    visible: bool = True
    obsolete: bool = field(default=False, repr=False)
    photoshop_v5_later: bool = field(default=True, repr=False)
    pixel_data_irrelevant: bool = False
    undocumented: int = field(default=0, repr=False)

    @classmethod
    def read(cls, fp: Cursor, **kwargs: Any) -> "LayerFlags":
        flags = fp.read_u8()
        return cls(
            bool(flags & 1),
            not bool(flags & 2),
            bool(flags & 4),
            bool(flags & 8),
            bool(flags & 16),
            flags & 0xE0,
        )

    def write(self, fp: BinaryIO, **kwargs: Any) -> int:
        flags = (
            (self.transparency_protected * 1)
            | ((not self.visible) * 2)
            | (self.obsolete * 4)
            | (self.photoshop_v5_later * 8)
            | (self.pixel_data_irrelevant * 16)
            | (self.undocumented & 0xE0)
        )
        return write_fmt(fp, "B", flags)


class LayerRecords(ListElement):
    """
    List of layer records. See :py:class:`.LayerRecord`.
    """

    @classmethod
    def read(  # type: ignore[override]
        cls,
        fp: Cursor,
        layer_count: int,
        encoding: str = "macroman",
        version: int = 1,
        **kwargs: Any,
    ) -> "LayerRecords":
        count = abs(layer_count)
        logger.debug("reading %d layer records" % count)
        return cls([LayerRecord.read(fp, encoding, version) for _ in range(count)])


@define(repr=False)
class LayerRecord(BaseElement):
    """
    Layer record.

    .. py:attribute:: top
    .. py:attribute:: left
    .. py:attribute:: bottom
    .. py:attribute:: right

        Bounds in absolute canvas coordinates.

    .. py:attribute:: channel_info

        List of :py:class:`.ChannelInfo`.

    .. py:attribute:: signature

        Blend mode signature ``b'8BIM'``.

    .. py:attribute:: blend_mode

        Blend mode. See :py:class:`~psd_codec.constants.BlendMode`.

    .. py:attribute:: opacity

        Opacity, 0 = transparent, 255 = opaque.

    .. py:attribute:: clipping

        Clipping, 0 = base, 1 = non-base.

    .. py:attribute:: flags

        See :py:class:`.LayerFlags`.

    .. py:attribute:: mask_data

        :py:class:`.MaskData` or None.

    .. py:attribute:: blending_ranges

        Raw blending ranges data, not interpreted.

    .. py:attribute:: name

        Pascal string layer name. A ``luni`` block, when present, holds the
        full unicode name.

    .. py:attribute:: tagged_blocks

        See :py:class:`~psd_codec.psd.tagged_blocks.TaggedBlocks`.
    """

    top: int = 0
    left: int = 0
    bottom: int = 0
    right: int = 0
    channel_info: list[ChannelInfo] = field(factory=list)
    signature: bytes = field(default=b"8BIM", repr=False)
    blend_mode: BlendMode = field(default=BlendMode.NORMAL, converter=BlendMode)
    opacity: int = field(default=255, validator=range_(0, 255))
    clipping: Union[Clipping, int] = Clipping.BASE
    flags: LayerFlags = field(factory=LayerFlags)
    mask_data: Optional["MaskData"] = None
    blending_ranges: bytes = field(default=b"", repr=False)
    name: str = ""
    tagged_blocks: TaggedBlocks = field(factory=TaggedBlocks)

    @classmethod
    def read(
        cls: type[T_LayerRecord],
        fp: Cursor,
        encoding: str = "macroman",
        version: int = 1,
        **kwargs: Any,
    ) -> T_LayerRecord:
        start_pos = fp.tell()
        top, left, bottom, right, num_channels = read_fmt("4iH", fp)
        channel_info = [ChannelInfo.read(fp, version) for i in range(num_channels)]
        signature = fp.read_bytes(4)
        if signature != b"8BIM":
            raise InvalidLayerData(
                "Invalid blend mode signature %r at offset %d"
                % (signature, fp.tell() - 4)
            )
        blend_mode = BlendMode.from_key(fp.read_bytes(4))
        opacity, clipping = read_fmt("BB", fp)
        flags = LayerFlags.read(fp)

        length = read_fmt("xI", fp)[0]
        with fp.read_section(length) as section:
            mask_data, blending_ranges, name, tagged_blocks = cls._read_extra(
                section, encoding, version
            )
        logger.debug("  read layer record, len=%d" % (fp.tell() - start_pos))
        return cls(
            top=top,
            left=left,
            bottom=bottom,
            right=right,
            channel_info=channel_info,
            signature=signature,
            blend_mode=blend_mode,
            opacity=opacity,
            clipping=_to_enum(Clipping, clipping),
            flags=flags,
            mask_data=mask_data,
            blending_ranges=blending_ranges,
            name=name,
            tagged_blocks=tagged_blocks,
        )

    @classmethod
    def _read_extra(
        cls, fp: Cursor, encoding: str, version: int
    ) -> tuple[Optional["MaskData"], bytes, str, TaggedBlocks]:
        mask_data = MaskData.read(fp)
        blending_ranges = fp.read_bytes(fp.read_u32())
        name = read_pascal_string(fp, encoding, padding=4)
        tagged_blocks = TaggedBlocks.read(
            fp, version=version, padding=4, encoding=encoding
        )
        return mask_data, blending_ranges, name, tagged_blocks

    def write(
        self, fp: BinaryIO, encoding: str = "macroman", version: int = 1, **kwargs: Any
    ) -> int:
        written = write_fmt(
            fp,
            "4iH",
            self.top,
            self.left,
            self.bottom,
            self.right,
            len(self.channel_info),
        )
        written += sum(c.write(fp, version) for c in self.channel_info)
        written += write_fmt(
            fp,
            "4s4sBB",
            self.signature,
            self.blend_mode.value,
            self.opacity,
            int(self.clipping),
        )
        written += self.flags.write(fp)

        def writer(f: BinaryIO) -> int:
            return self._write_extra(f, encoding, version)

        written += write_length_block(fp, writer, fmt="xI")
        return written

    def _write_extra(self, fp: BinaryIO, encoding: str, version: int) -> int:
        if self.mask_data is not None:
            written = self.mask_data.write(fp)
        else:
            written = write_fmt(fp, "I", 0)
        written += write_fmt(fp, "I", len(self.blending_ranges))
        written += write_bytes(fp, self.blending_ranges)
        written += write_pascal_string(fp, self.name, encoding, padding=4)
        written += self.tagged_blocks.write(fp, version, padding=4)
        return written

    @property
    def width(self) -> int:
        """Width of the layer, zero for inverted bounds."""
        return max(self.right - self.left, 0)

    @property
    def height(self) -> int:
        """Height of the layer, zero for inverted bounds."""
        return max(self.bottom - self.top, 0)

    @property
    def channel_sizes(self) -> list[tuple[int, int]]:
        """List of channel sizes: [(width, height)]."""
        sizes = []
        for channel in self.channel_info:
            if channel.id == ChannelID.USER_LAYER_MASK and self.mask_data:
                sizes.append((self.mask_data.width, self.mask_data.height))
            elif channel.id == ChannelID.REAL_USER_LAYER_MASK and self.mask_data:
                sizes.append((self.mask_data.real_width, self.mask_data.real_height))
            else:
                sizes.append((self.width, self.height))
        return sizes


@define(repr=False)
class MaskFlags(BaseElement):
    """
    Mask flags.

    .. py:attribute:: pos_relative_to_layer
    .. py:attribute:: mask_disabled
    .. py:attribute:: invert_mask
    .. py:attribute:: user_mask_from_render
    .. py:attribute:: parameters_applied

        The user and/or vector masks have parameters applied to them.
    """

    pos_relative_to_layer: bool = False
    mask_disabled: bool = False
    invert_mask: bool = False
    user_mask_from_render: bool = False
    parameters_applied: bool = False
    undocumented: int = field(default=0, repr=False)

    @classmethod
    def read(cls, fp: Cursor, **kwargs: Any) -> "MaskFlags":
        flags = fp.read_u8()
        return cls(
            bool(flags & 1),
            bool(flags & 2),
            bool(flags & 4),
            bool(flags & 8),
            bool(flags & 16),
            flags & 0xE0,
        )

    def write(self, fp: BinaryIO, **kwargs: Any) -> int:
        flags = (
            (self.pos_relative_to_layer * 1)
            | (self.mask_disabled * 2)
            | (self.invert_mask * 4)
            | (self.user_mask_from_render * 8)
            | (self.parameters_applied * 16)
            | (self.undocumented & 0xE0)
        )
        return write_fmt(fp, "B", flags)


@define(repr=False)
class MaskData(BaseElement):
    """
    Mask data.

    Real user mask is a final composite mask of vector and pixel masks. Its
    fields are present only when the block is at least 36 bytes long.

    .. py:attribute:: top
    .. py:attribute:: left
    .. py:attribute:: bottom
    .. py:attribute:: right

        Bounds of the user mask in canvas coordinates.

    .. py:attribute:: background_color

        Default fill outside the bounds, 0 or 255.

    .. py:attribute:: flags

        See :py:class:`.MaskFlags`.

    .. py:attribute:: parameters

        Raw mask parameters or None.

    .. py:attribute:: real_flags
    .. py:attribute:: real_background_color
    .. py:attribute:: real_top
    .. py:attribute:: real_left
    .. py:attribute:: real_bottom
    .. py:attribute:: real_right
    """

    top: int = 0
    left: int = 0
    bottom: int = 0
    right: int = 0
    background_color: int = 0
    flags: MaskFlags = field(factory=MaskFlags)
    parameters: Optional[bytes] = field(default=None, repr=False)
    real_flags: Optional[MaskFlags] = None
    real_background_color: Optional[int] = None
    real_top: Optional[int] = None
    real_left: Optional[int] = None
    real_bottom: Optional[int] = None
    real_right: Optional[int] = None

    @classmethod
    def read(cls: type[T_MaskData], fp: Cursor, **kwargs: Any) -> Optional[T_MaskData]:
        length = fp.read_u32()
        if length == 0:
            return None
        with fp.read_section(length) as section:
            if length < 18:
                logger.warning("Mask data is too short, len=%d, skipping" % length)
                return None
            return cls._read_body(section, length)

    @classmethod
    def _read_body(cls: type[T_MaskData], fp: Cursor, length: int) -> T_MaskData:
        top, left, bottom, right, background_color = read_fmt("4iB", fp)
        flags = MaskFlags.read(fp)

        real_flags, real_background_color = None, None
        real_top, real_left, real_bottom, real_right = None, None, None, None
        if length >= 36:
            real_flags = MaskFlags.read(fp)
            real_background_color = fp.read_u8()
            real_top, real_left, real_bottom, real_right = read_fmt("4i", fp)

        parameters = None
        if flags.parameters_applied and fp.remaining():
            parameters = fp.read_bytes(fp.remaining())

        return cls(
            top=top,
            left=left,
            bottom=bottom,
            right=right,
            background_color=background_color,
            flags=flags,
            parameters=parameters,
            real_flags=real_flags,
            real_background_color=real_background_color,
            real_top=real_top,
            real_left=real_left,
            real_bottom=real_bottom,
            real_right=real_right,
        )

    def write(self, fp: BinaryIO, **kwargs: Any) -> int:
        return write_length_block(fp, lambda f: self._write_body(f))

    def _write_body(self, fp: BinaryIO) -> int:
        written = write_fmt(
            fp,
            "4iB",
            self.top,
            self.left,
            self.bottom,
            self.right,
            self.background_color,
        )
        written += self.flags.write(fp)
        if self.real_flags is not None:
            written += self.real_flags.write(fp)
            written += write_fmt(
                fp,
                "B4i",
                self.real_background_color or 0,
                self.real_top or 0,
                self.real_left or 0,
                self.real_bottom or 0,
                self.real_right or 0,
            )
        if self.flags.parameters_applied and self.parameters:
            written += write_bytes(fp, self.parameters)
        written += write_padding(fp, written, 4)
        return written

    @property
    def bbox(self) -> tuple[int, int, int, int]:
        """(left, top, right, bottom) of the user mask."""
        return self.left, self.top, self.right, self.bottom

    @property
    def real_bbox(self) -> tuple[int, int, int, int]:
        """(left, top, right, bottom) of the real user mask."""
        return (
            self.real_left or 0,
            self.real_top or 0,
            self.real_right or 0,
            self.real_bottom or 0,
        )

    @property
    def width(self) -> int:
        """Width of the mask."""
        return max(self.right - self.left, 0)

    @property
    def height(self) -> int:
        """Height of the mask."""
        return max(self.bottom - self.top, 0)

    @property
    def real_width(self) -> int:
        """Width of real user mask."""
        return max((self.real_right or 0) - (self.real_left or 0), 0)

    @property
    def real_height(self) -> int:
        """Height of real user mask."""
        return max((self.real_bottom or 0) - (self.real_top or 0), 0)


class ChannelImageData(ListElement):
    """
    List of channel data list.

    This size of this list corresponds to the size of
    :py:class:`LayerRecords`. Each item corresponds to the channels of each
    layer.

    See :py:class:`.ChannelDataList`.
    """

    @classmethod
    def read(
        cls,
        fp: Cursor,
        layer_records: Optional[LayerRecords] = None,
        **kwargs: Any,
    ) -> "ChannelImageData":
        start_pos = fp.tell()
        items = []
        for layer in layer_records or []:
            items.append(ChannelDataList.read(fp, layer.channel_info))
        logger.debug("  read channel image data, len=%d" % (fp.tell() - start_pos))
        return cls(items)

    def write(self, fp: BinaryIO, **kwargs: Any) -> int:
        written = sum(item.write(fp) for item in self)
        logger.debug("  wrote channel image data, len=%d" % (written))
        return written


class ChannelDataList(ListElement):
    """
    List of channel image data, corresponding to each color or alpha.

    See :py:class:`.ChannelData`.
    """

    @classmethod
    def read(  # type: ignore[override]
        cls,
        fp: Cursor,
        channel_info: list[ChannelInfo],
        **kwargs: Any,
    ) -> "ChannelDataList":
        return cls([ChannelData.read(fp, c.length) for c in channel_info])


@define(repr=False)
class ChannelData(BaseElement):
    """
    Channel data.

    .. py:attribute:: compression

        Compression code. See :py:class:`~psd_codec.constants.Compression`.
        Unknown codes are kept as plain integers and decode to zeros.

    .. py:attribute:: data

        Compressed data.
    """

    compression: Union[Compression, int] = Compression.RAW
    data: bytes = field(default=b"", repr=False)

    @classmethod
    def read(cls, fp: Cursor, length: int = 0, **kwargs: Any) -> "ChannelData":
        """
        Read ``length`` bytes, the compression code included. Data cut short
        by the end of the section is kept as far as it goes.
        """
        if length < 2 or fp.remaining() < 2:
            if length > fp.remaining():
                logger.warning("Channel data missing, len=%d" % length)
            fp.skip(min(length, fp.remaining()))
            return cls()
        compression = _to_enum(Compression, fp.read_u16())
        size = length - 2
        if size > fp.remaining():
            logger.warning(
                "Channel data truncated, len=%d, available=%d"
                % (size, fp.remaining())
            )
            size = fp.remaining()
        return cls(compression=compression, data=fp.read_bytes(size))

    def write(self, fp: BinaryIO, **kwargs: Any) -> int:
        written = write_fmt(fp, "H", int(self.compression))
        written += write_bytes(fp, self.data)
        return written

    def get_data(self, width: int, height: int, depth: int, version: int = 1) -> bytes:
        """Get decompressed channel data.

        :param width: width.
        :param height: height.
        :param depth: bit depth of the pixel.
        :param version: psd file version.
        :rtype: bytes
        """
        return decompress(self.data, self.compression, width, height, depth, version)

    def set_data(
        self, data: bytes, width: int, height: int, depth: int, version: int = 1
    ) -> int:
        """Set raw channel data and compress to store.

        :param data: raw data bytes to write.
        :param width: width.
        :param height: height.
        :param depth: bit depth of the pixel.
        :param version: psd file version.
        """
        self.data = compress(data, self.compression, width, height, depth, version)
        return len(self.data)

    @property
    def _length(self) -> int:
        """Length of channel data block."""
        return 2 + len(self.data)


@define(repr=False)
class GlobalLayerMaskInfo(BaseElement):
    """
    Global mask information.

    .. py:attribute:: overlay_color

        Overlay color space (undocumented) and color components.

    .. py:attribute:: opacity

        Opacity. 0 = transparent, 100 = opaque.

    .. py:attribute:: kind

        0 = color selected, 1 = color protected, 128 = use value stored per
        layer.
    """

    overlay_color: Optional[list[int]] = None
    opacity: int = 0
    kind: int = 128

    @classmethod
    def read(cls, fp: Cursor, **kwargs: Any) -> "GlobalLayerMaskInfo":
        length = fp.read_u32()
        logger.debug("reading global layer mask info, len=%d" % length)
        if length > fp.remaining():
            logger.warning(
                "global layer mask info is broken, len=%d, available=%d"
                % (length, fp.remaining())
            )
            fp.skip(fp.remaining())
            return cls()
        with fp.read_section(length) as section:
            if length < 13:
                return cls()
            overlay_color = list(read_fmt("5H", section))
            opacity, kind = read_fmt("HB", section)
            return cls(overlay_color, opacity, kind)

    def write(self, fp: BinaryIO, **kwargs: Any) -> int:
        return write_length_block(fp, lambda f: self._write_body(f))

    def _write_body(self, fp: BinaryIO) -> int:
        written = 0
        if self.overlay_color is not None:
            written = write_fmt(fp, "5H", *self.overlay_color)
            written += write_fmt(fp, "HB", self.opacity, self.kind)
            written += write_padding(fp, written, 4)
        logger.debug("writing global layer mask info, len=%d" % (written))
        return written
