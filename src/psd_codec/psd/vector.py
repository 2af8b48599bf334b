"""
Vector mask and path structure.

A path is a flat sequence of 26-byte records: a 2-byte selector followed by
24 bytes of payload. Knot records carry Bezier control points as 8.24
fixed-point ``(y, x)`` pairs normalized to the canvas size.
"""

import logging
from typing import Any, BinaryIO, Optional, TypeVar

from attrs import astuple, define, field

from psd_codec.constants import PathResourceID
from psd_codec.psd.base import BaseElement, ListElement
from psd_codec.psd.bin_utils import (
    Cursor,
    decode_fixed_point,
    encode_fixed_point,
    is_readable,
    read_fmt,
    write_bytes,
    write_fmt,
    write_padding,
)
from psd_codec.registry import new_registry

logger = logging.getLogger(__name__)

TYPES, register = new_registry(attribute="selector")  # Path record types.

T_Path = TypeVar("T_Path", bound="Path")
T_Knot = TypeVar("T_Knot", bound="Knot")

RECORD_SIZE = 26


@define(repr=False)
class Path(ListElement):
    """
    List-like Path structure. Elements are :py:class:`SubpathLength`,
    :py:class:`Knot`, :py:class:`PathFillRule`, :py:class:`ClipboardRecord`,
    :py:class:`InitialFillRule`, or :py:class:`UnknownRecord`.
    """

    @classmethod
    def read(cls: type[T_Path], fp: Cursor, **kwargs: Any) -> T_Path:
        items = []
        while is_readable(fp, RECORD_SIZE):
            selector = read_fmt("H", fp)[0]
            try:
                kls = TYPES[PathResourceID(selector)]
            except ValueError:
                logger.debug("Unknown path record %d" % selector)
                items.append(UnknownRecord(selector, fp.read_bytes(24)))
                continue
            items.append(kls.read(fp))
        return cls(items)  # type: ignore[arg-type]

    def write(self, fp: BinaryIO, padding: int = 4, **kwargs: Any) -> int:
        written = 0
        for item in self:
            written += write_fmt(fp, "H", getattr(item.selector, "value", item.selector))
            written += item.write(fp)
        written += write_padding(fp, written, padding)
        return written

    @property
    def anchors(self) -> list[tuple[float, float]]:
        """Anchor points of every knot record, as normalized (y, x)."""
        return [item.anchor for item in self if isinstance(item, Knot)]


@define(repr=False)
class SubpathLength(BaseElement):
    """
    Subpath length record, the number of knots that follow.
    """

    length: int = 0
    _extra: bytes = field(default=b"\x00" * 22, repr=False)

    @classmethod
    def read(cls, fp: Cursor, **kwargs: Any) -> "SubpathLength":
        return cls(*read_fmt("H22s", fp))

    def write(self, fp: BinaryIO, **kwargs: Any) -> int:
        return write_fmt(fp, "H22s", self.length, self._extra)


@register(PathResourceID.CLOSED_LENGTH)
class ClosedPathLength(SubpathLength):
    pass


@register(PathResourceID.OPEN_LENGTH)
class OpenPathLength(SubpathLength):
    pass


@define(repr=False)
class Knot(BaseElement):
    """
    Knot element consisting of 3 control points for Bezier curves.

    .. py:attribute:: preceding

        (y, x) tuple of preceding control point in relative coordinates.

    .. py:attribute:: anchor

        (y, x) tuple of anchor point in relative coordinates.

    .. py:attribute:: leaving

        (y, x) tuple of leaving control point in relative coordinates.
    """

    preceding: tuple = (0.0, 0.0)
    anchor: tuple = (0.0, 0.0)
    leaving: tuple = (0.0, 0.0)

    @classmethod
    def read(cls: type[T_Knot], fp: Cursor, **kwargs: Any) -> T_Knot:
        preceding = decode_fixed_point(read_fmt("2i", fp))
        anchor = decode_fixed_point(read_fmt("2i", fp))
        leaving = decode_fixed_point(read_fmt("2i", fp))
        return cls(preceding, anchor, leaving)

    def write(self, fp: BinaryIO, **kwargs: Any) -> int:
        values = self.preceding + self.anchor + self.leaving
        return write_fmt(fp, "6i", *encode_fixed_point(values))


@register(PathResourceID.CLOSED_KNOT_LINKED)
class ClosedKnotLinked(Knot):
    pass


@register(PathResourceID.CLOSED_KNOT_UNLINKED)
class ClosedKnotUnlinked(Knot):
    pass


@register(PathResourceID.OPEN_KNOT_LINKED)
class OpenKnotLinked(Knot):
    pass


@register(PathResourceID.OPEN_KNOT_UNLINKED)
class OpenKnotUnlinked(Knot):
    pass


@register(PathResourceID.PATH_FILL)
@define(repr=False)
class PathFillRule(BaseElement):
    """
    Path fill rule record, empty.
    """

    @classmethod
    def read(cls, fp: Cursor, **kwargs: Any) -> "PathFillRule":
        fp.skip(24)
        return cls()

    def write(self, fp: BinaryIO, **kwargs: Any) -> int:
        return write_fmt(fp, "24x")


@register(PathResourceID.CLIPBOARD)
@define(repr=False)
class ClipboardRecord(BaseElement):
    """
    Clipboard record, bounds and resolution in 8.24 fixed point.
    """

    top: float = 0.0
    left: float = 0.0
    bottom: float = 0.0
    right: float = 0.0
    resolution: float = 0.0

    @classmethod
    def read(cls, fp: Cursor, **kwargs: Any) -> "ClipboardRecord":
        return cls(*decode_fixed_point(read_fmt("5i4x", fp)))

    def write(self, fp: BinaryIO, **kwargs: Any) -> int:
        return write_fmt(fp, "5i4x", *encode_fixed_point(astuple(self)))


@register(PathResourceID.INITIAL_FILL)
@define(repr=False)
class InitialFillRule(BaseElement):
    """
    Initial fill rule record. 1 means that the fill starts with all pixels.
    """

    rule: int = 0

    @classmethod
    def read(cls, fp: Cursor, **kwargs: Any) -> "InitialFillRule":
        return cls(*read_fmt("H22x", fp))

    def write(self, fp: BinaryIO, **kwargs: Any) -> int:
        return write_fmt(fp, "H22x", self.rule)


@define(repr=False)
class UnknownRecord(BaseElement):
    """Record with an unrecognized selector, kept verbatim."""

    selector: int = 0
    data: bytes = field(default=b"\x00" * 24, repr=False)

    def write(self, fp: BinaryIO, **kwargs: Any) -> int:
        return write_bytes(fp, self.data)


@define(repr=False)
class VectorMaskSetting(BaseElement):
    """
    VectorMaskSetting structure.

    .. py:attribute:: version
    .. py:attribute:: flags
    .. py:attribute:: path

        :py:class:`Path` records.
    """

    version: int = 3
    flags: int = 0
    path: Optional[Path] = None

    @classmethod
    def read(cls, fp: Cursor, **kwargs: Any) -> "VectorMaskSetting":
        version, flags = read_fmt("2I", fp)
        path = Path.read(fp)
        return cls(version=version, flags=flags, path=path)

    def write(self, fp: BinaryIO, padding: int = 4, **kwargs: Any) -> int:
        written = write_fmt(fp, "2I", self.version, self.flags)
        if self.path:
            written += self.path.write(fp, padding=1)
        written += write_padding(fp, written, padding)
        return written

    @property
    def invert(self) -> bool:
        """Flag to indicate that the vector mask is inverted."""
        return bool(self.flags & 1)

    @property
    def not_link(self) -> bool:
        """Flag to indicate that the vector mask is not linked."""
        return bool(self.flags & 2)

    @property
    def disable(self) -> bool:
        """Flag to indicate that the vector mask is disabled."""
        return bool(self.flags & 4)

    def to_canvas(self, width: int, height: int) -> list[tuple[float, float]]:
        """
        Polyline vertices in canvas space as ``(x, y)`` pairs. Curve handles
        are dropped.
        """
        if not self.path:
            return []
        return [(x * width, y * height) for y, x in self.path.anchors]
