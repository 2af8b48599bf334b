"""
Tagged block data structure.

Tagged blocks are the additional layer information stored after the layer
name, and the global blocks after the layer and mask info. Each block is
``signature, key, length, payload``; the reader always advances by the
length rounded up to 4 bytes, so unknown and malformed blocks never break
synchronization with the blocks that follow.

Only the keys registered in :py:data:`TYPES` are parsed. Everything else is
kept as raw bytes.
"""

import logging
from typing import Any, BinaryIO, Optional, TypeVar

from attrs import define, field

from psd_codec.constants import BlendMode, SectionDivider, Tag
from psd_codec.errors import PSDError
from psd_codec.psd.base import BaseElement, DictElement, ValueElement
from psd_codec.psd.bin_utils import (
    Cursor,
    is_readable,
    read_fmt,
    read_padding,
    read_unicode_string,
    trimmed_repr,
    write_bytes,
    write_fmt,
    write_length_block,
    write_padding,
    write_unicode_string,
)
from psd_codec.psd.vector import VectorMaskSetting
from psd_codec.registry import new_registry
from psd_codec.validators import in_

logger = logging.getLogger(__name__)

T_TaggedBlocks = TypeVar("T_TaggedBlocks", bound="TaggedBlocks")
T_TaggedBlock = TypeVar("T_TaggedBlock", bound="TaggedBlock")

TYPES, register = new_registry()

TYPES.update(
    {
        Tag.VECTOR_MASK_SETTING1: VectorMaskSetting,
        Tag.VECTOR_MASK_SETTING2: VectorMaskSetting,
    }
)


@define(repr=False)
class TaggedBlocks(DictElement):
    """
    Dict of tagged block items.

    See :py:class:`~psd_codec.constants.Tag` for available keys.

    Example::

        from psd_codec.constants import Tag

        # Iterate over fields
        for key in tagged_blocks:
            print(key)

        # Get a field
        name = tagged_blocks.get_data(Tag.UNICODE_LAYER_NAME)
    """

    def get_data(self, key: Any, default: Any = None) -> Any:
        """
        Get data from the tagged blocks.

        Shortcut for the following::

            if key in tagged_blocks:
                value = tagged_blocks[key].data
        """
        if key in self:
            value = self[key].data
            if isinstance(value, ValueElement):
                return value.value
            return value
        return default

    def set_data(self, key: Any, *args: Any, **kwargs: Any) -> None:
        """
        Set data for the given key, constructing the registered type.
        """
        key = self._key_converter(key)
        kls = TYPES.get(key)
        if kls is None:
            raise KeyError("No registered type for %r" % (key,))
        self[key] = TaggedBlock(key=key, data=kls(*args, **kwargs))

    @classmethod
    def read(
        cls: type[T_TaggedBlocks],
        fp: Cursor,
        version: int = 1,
        padding: int = 4,
        **kwargs: Any,
    ) -> T_TaggedBlocks:
        """
        Read blocks until the cursor is exhausted or a block signature is
        missing. Callers hand in a cursor bounded to the block region.
        """
        items = []
        while is_readable(fp, 12):  # signature + key + length
            block = TaggedBlock.read(fp, version, padding, **kwargs)
            if block is None:
                break
            items.append((block.key, block))
        if fp.remaining():
            logger.debug("  discarding %d trailing bytes" % fp.remaining())
        return cls(items)  # type: ignore[arg-type]

    def write(
        self, fp: BinaryIO, version: int = 1, padding: int = 4, **kwargs: Any
    ) -> int:
        return sum(block.write(fp, version, padding) for block in self.values())

    @classmethod
    def _key_converter(cls, key: Any) -> Any:
        if isinstance(key, bytes):
            try:
                return Tag(key)
            except ValueError:
                return key
        return key

    def _repr_pretty_(self, p: Any, cycle: bool) -> None:
        if cycle:
            p.text("{...}")
            return

        with p.group(2, "{", "}"):
            p.breakable("")
            for idx, (key, value) in enumerate(self._items.items()):
                if idx:
                    p.text(",")
                    p.breakable()
                try:
                    p.text(Tag(key).name)
                except ValueError:
                    p.pretty(key)
                p.text(": ")
                if isinstance(value.data, bytes):
                    p.text(trimmed_repr(value.data))
                else:
                    p.pretty(value.data)
            p.breakable("")


@define(repr=False)
class TaggedBlock(BaseElement):
    """
    Layer tagged block with extra info.

    .. py:attribute:: key

        4-character code, a :py:class:`~psd_codec.constants.Tag` member when
        known, otherwise raw bytes.

    .. py:attribute:: data

        Parsed payload for registered keys, raw bytes otherwise.
    """

    _SIGNATURES = (b"8BIM", b"8B64")
    _BIG_KEYS = {
        Tag.USER_MASK,
        Tag.LAYER_16,
        Tag.LAYER_32,
        Tag.LAYER,
        Tag.SAVING_MERGED_TRANSPARENCY,
        Tag.SAVING_MERGED_TRANSPARENCY16,
        Tag.SAVING_MERGED_TRANSPARENCY32,
        Tag.ALPHA,
        Tag.FILTER_MASK,
        Tag.LINKED_LAYER2,
        Tag.LINKED_LAYER3,
        Tag.LINKED_LAYER_EXTERNAL,
        Tag.PIXEL_SOURCE_DATA2,
    }

    signature: bytes = field(default=b"8BIM", repr=False, validator=in_(_SIGNATURES))
    key: Any = b""
    data: Any = field(default=b"", repr=True)

    @classmethod
    def read(
        cls: type[T_TaggedBlock],
        fp: Cursor,
        version: int = 1,
        padding: int = 4,
        **kwargs: Any,
    ) -> Optional[T_TaggedBlock]:
        signature = fp.read_bytes(4)
        if signature not in cls._SIGNATURES:
            logger.warning("Invalid tagged block signature (%r)" % (signature))
            return None

        key = fp.read_bytes(4)
        try:
            key = Tag(key)
        except ValueError:
            pass

        fmt = cls._length_format(key, version)
        length = read_fmt(fmt, fp)[0]
        if length > fp.remaining():
            logger.warning(
                "Tagged block %r overruns its region: len=%d, available=%d"
                % (key, length, fp.remaining())
            )
            return None
        raw_data = fp.read_bytes(length)
        read_padding(fp, length, padding)
        kls = TYPES.get(key)
        if kls:
            try:
                data = kls.frombytes(raw_data, version=version, **kwargs)
            except (PSDError, ValueError) as e:
                logger.error("Failed to read tagged block %r: %s" % (key, e))
                data = raw_data
        else:
            logger.info(
                "Unknown tagged block: %r, %s" % (key, trimmed_repr(raw_data))
            )
            data = raw_data
        return cls(signature, key, data)

    def write(
        self, fp: BinaryIO, version: int = 1, padding: int = 4, **kwargs: Any
    ) -> int:
        key = self.key if isinstance(self.key, bytes) else self.key.value
        written = write_fmt(fp, "4s4s", self.signature, key)

        def writer(f: BinaryIO) -> int:
            if hasattr(self.data, "write"):
                return self.data.write(f, padding=padding, version=version)
            return write_bytes(f, self.data)

        fmt = self._length_format(self.key, version)
        written += write_length_block(fp, writer, fmt=fmt, padding=padding)
        return written

    @classmethod
    def _length_format(cls, key: Any, version: int) -> str:
        return ("I", "Q")[int(version == 2 and key in cls._BIG_KEYS)]


@register(Tag.UNICODE_LAYER_NAME)
@define(repr=False, eq=False)
class UnicodeLayerName(ValueElement):
    """
    Unicode layer name. Trailing NUL characters are stripped on read.

    .. py:attribute:: value

        `str` value
    """

    value: str = ""

    @classmethod
    def read(cls, fp: Cursor, **kwargs: Any) -> "UnicodeLayerName":
        return cls(read_unicode_string(fp))

    def write(self, fp: BinaryIO, padding: int = 4, **kwargs: Any) -> int:
        return write_unicode_string(fp, self.value, padding=padding)


@register(Tag.SECTION_DIVIDER_SETTING)
@register(Tag.NESTED_SECTION_DIVIDER_SETTING)
@define(repr=False)
class SectionDividerSetting(BaseElement):
    """
    SectionDividerSetting structure.

    .. py:attribute:: kind

        See :py:class:`~psd_codec.constants.SectionDivider`. Unknown kinds
        read as ``OTHER``.

    .. py:attribute:: blend_mode
    .. py:attribute:: sub_type
    """

    kind: SectionDivider = field(
        default=SectionDivider.OTHER,
        converter=SectionDivider,
        validator=in_(SectionDivider),
    )
    signature: Optional[bytes] = field(default=None, repr=False)
    blend_mode: Optional[BlendMode] = None
    sub_type: Optional[int] = None

    @classmethod
    def read(cls, fp: Cursor, **kwargs: Any) -> "SectionDividerSetting":
        value = fp.read_u32()
        try:
            kind = SectionDivider(value)
        except ValueError:
            logger.warning("Unknown section divider kind %d" % value)
            kind = SectionDivider.OTHER
        signature, blend_mode = None, None
        if is_readable(fp, 8):
            signature = fp.read_bytes(4)
            if signature != b"8BIM":
                raise PSDError("Invalid section divider signature %r" % signature)
            blend_mode = BlendMode.from_key(fp.read_bytes(4))
        sub_type = None
        if is_readable(fp, 4):
            sub_type = fp.read_u32()
        return cls(kind, signature=signature, blend_mode=blend_mode, sub_type=sub_type)

    def write(self, fp: BinaryIO, padding: int = 4, **kwargs: Any) -> int:
        written = write_fmt(fp, "I", self.kind.value)
        if self.blend_mode:
            written += write_fmt(
                fp, "4s4s", self.signature or b"8BIM", self.blend_mode.value
            )
            if self.sub_type is not None:
                written += write_fmt(fp, "I", self.sub_type)
        return written


@register(Tag.TYPE_TOOL_OBJECT_SETTING)
@define(repr=False)
class TypeToolData(BaseElement):
    """
    Best-effort view of a type tool object setting.

    The text is taken from the ``Txt `` item of the text descriptor when it
    can be found. Otherwise a fixed 48-byte style header is skipped and a
    16-bit length-prefixed UTF-8 string is read. The payload is kept as is
    for writing.

    .. py:attribute:: text
    .. py:attribute:: data
    """

    _TEXT_MARKER = b"Txt TEXT"
    _STYLE_HEADER_SIZE = 48

    text: Optional[str] = None
    data: bytes = field(default=b"", repr=False)

    @classmethod
    def read(cls, fp: Cursor, **kwargs: Any) -> "TypeToolData":
        data = fp.read_bytes(fp.remaining())
        return cls(text=cls._extract_text(data), data=data)

    @classmethod
    def _extract_text(cls, data: bytes) -> Optional[str]:
        index = data.find(cls._TEXT_MARKER)
        if index >= 0:
            with Cursor(data[index + len(cls._TEXT_MARKER) :]) as f:
                if is_readable(f, 4):
                    try:
                        return read_unicode_string(f)
                    except PSDError as e:
                        logger.debug("Malformed text descriptor: %s" % e)

        if len(data) < cls._STYLE_HEADER_SIZE + 2:
            return None
        length = read_fmt("H", Cursor(data[cls._STYLE_HEADER_SIZE :]))[0]
        start = cls._STYLE_HEADER_SIZE + 2
        return data[start : start + length].decode("utf-8", "replace")

    def write(self, fp: BinaryIO, padding: int = 4, **kwargs: Any) -> int:
        written = write_bytes(fp, self.data)
        written += write_padding(fp, written, padding)
        return written
