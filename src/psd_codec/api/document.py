"""
Decoded document model.

This module turns the low-level :py:class:`~psd_codec.psd.PSD` structure into
a flat, fully decoded :py:class:`Document`:

- every layer carries straight-alpha RGBA pixels, with its user mask applied
- color modes other than RGB are converted through
  :py:mod:`psd_codec.api.color_space`
- the composite image is always present

Layers stay in file order, bottom of the stack first. Groups are not
rebuilt: folder layers and section dividers appear in the list as sentinels
with the matching :py:class:`~psd_codec.constants.LayerType`.

Example usage::

    from psd_codec import decode

    with open('document.psd', 'rb') as f:
        document = decode(f.read())

    for layer in document.layers:
        print(layer.name, layer.bbox)

    document.topil().save('composite.png')
"""

import logging
from typing import Any, Optional

import numpy as np
from attrs import define, field
from PIL import Image

from psd_codec.api import numpy_io, pil_io
from psd_codec.api.mask import apply_mask, get_mask
from psd_codec.constants import (
    BlendMode,
    Clipping,
    ColorMode,
    LayerType,
    SectionDivider,
    Tag,
)
from psd_codec.psd.document import PSD
from psd_codec.psd.header import FileHeader
from psd_codec.psd.layer_and_mask import (
    ChannelDataList,
    LayerRecord,
    MaskData,
    MaskFlags,
)
from psd_codec.psd.tagged_blocks import SectionDividerSetting, TypeToolData
from psd_codec.psd.vector import VectorMaskSetting

logger = logging.getLogger(__name__)


@define(repr=False)
class MaskInfo:
    """
    User mask attached to a layer.

    .. py:attribute:: top
    .. py:attribute:: left
    .. py:attribute:: bottom
    .. py:attribute:: right

        Mask bounds in canvas coordinates.

    .. py:attribute:: default_fill

        Mask value outside the bounds, 0 or 255.

    .. py:attribute:: flags

        See :py:class:`~psd_codec.psd.layer_and_mask.MaskFlags`.
    """

    top: int = 0
    left: int = 0
    bottom: int = 0
    right: int = 0
    default_fill: int = 0
    flags: MaskFlags = field(factory=MaskFlags)

    @classmethod
    def from_record(cls, mask_data: MaskData) -> "MaskInfo":
        return cls(
            top=mask_data.top,
            left=mask_data.left,
            bottom=mask_data.bottom,
            right=mask_data.right,
            default_fill=mask_data.background_color,
            flags=mask_data.flags,
        )

    @property
    def bbox(self) -> tuple[int, int, int, int]:
        """(left, top, right, bottom) tuple."""
        return self.left, self.top, self.right, self.bottom

    @property
    def width(self) -> int:
        return max(self.right - self.left, 0)

    @property
    def height(self) -> int:
        return max(self.bottom - self.top, 0)

    @property
    def disabled(self) -> bool:
        return self.flags.mask_disabled

    def __repr__(self) -> str:
        return "%s(offset=(%d,%d) size=%dx%d)" % (
            self.__class__.__name__,
            self.left,
            self.top,
            self.width,
            self.height,
        )


@define(repr=False)
class Layer:
    """
    Decoded layer.

    .. py:attribute:: name

        Layer name. The unicode name wins over the pascal string name.

    .. py:attribute:: top
    .. py:attribute:: left
    .. py:attribute:: bottom
    .. py:attribute:: right

        Bounds in canvas coordinates.

    .. py:attribute:: opacity

        Opacity, 0 = transparent, 255 = opaque.

    .. py:attribute:: visible
    .. py:attribute:: blend_mode

        See :py:class:`~psd_codec.constants.BlendMode`.

    .. py:attribute:: layer_type

        See :py:class:`~psd_codec.constants.LayerType`.

    .. py:attribute:: clipping

        True when the layer is clipped to the layer below.

    .. py:attribute:: mask_info

        :py:class:`.MaskInfo` or None.

    .. py:attribute:: text_data

        Text of a type layer or None.

    .. py:attribute:: vector_mask

        Vector mask vertices as ``(x, y)`` canvas coordinates, or None.

    .. py:attribute:: rgba

        ``width * height * 4`` bytes of straight-alpha RGBA pixels.
    """

    name: str = ""
    top: int = 0
    left: int = 0
    bottom: int = 0
    right: int = 0
    opacity: int = 255
    visible: bool = True
    blend_mode: BlendMode = BlendMode.NORMAL
    layer_type: LayerType = LayerType.NORMAL
    clipping: bool = False
    mask_info: Optional[MaskInfo] = None
    text_data: Optional[str] = None
    vector_mask: Optional[list[tuple[float, float]]] = None
    rgba: bytes = field(default=b"", repr=False)

    @classmethod
    def from_record(
        cls,
        record: LayerRecord,
        channels: ChannelDataList,
        header: FileHeader,
        palette: Optional[bytes] = None,
    ) -> "Layer":
        """
        Decode a layer record and its channels.

        :param record: See :py:class:`~psd_codec.psd.layer_and_mask.LayerRecord`.
        :param channels: channel data of the record.
        :param header: file header of the document.
        :param palette: color table of indexed documents.
        """
        blocks = record.tagged_blocks

        name = blocks.get_data(Tag.UNICODE_LAYER_NAME)
        if not isinstance(name, str):
            name = record.name

        layer_type = LayerType.NORMAL
        for key in (
            Tag.SECTION_DIVIDER_SETTING,
            Tag.NESTED_SECTION_DIVIDER_SETTING,
        ):
            setting = blocks.get_data(key)
            if isinstance(setting, SectionDividerSetting):
                if setting.kind != SectionDivider.OTHER:
                    layer_type = LayerType(int(setting.kind))
                break

        text_data = None
        type_tool = blocks.get_data(Tag.TYPE_TOOL_OBJECT_SETTING)
        if isinstance(type_tool, TypeToolData):
            text_data = type_tool.text

        vector_mask = None
        for key in (Tag.VECTOR_MASK_SETTING1, Tag.VECTOR_MASK_SETTING2):
            setting = blocks.get_data(key)
            if isinstance(setting, VectorMaskSetting):
                vector_mask = setting.to_canvas(header.width, header.height)
                break

        self = cls(
            name=name,
            top=record.top,
            left=record.left,
            bottom=record.bottom,
            right=record.right,
            opacity=record.opacity,
            visible=record.flags.visible,
            blend_mode=record.blend_mode,
            layer_type=layer_type,
            clipping=record.clipping != Clipping.BASE,
            mask_info=(
                MaskInfo.from_record(record.mask_data) if record.mask_data else None
            ),
            text_data=text_data,
            vector_mask=vector_mask,
        )
        if self.width == 0 or self.height == 0:
            logger.debug("Skipping pixels of empty layer %r" % name)
            return self

        rgba, planes = numpy_io.get_layer_data(record, channels, header, palette)
        mask = get_mask(record.mask_data, planes)
        if mask is not None:
            mask_plane, mask_bbox, default_fill = mask
            rgba[:, :, 3] = apply_mask(
                rgba[:, :, 3], self.bbox, mask_plane, mask_bbox, default_fill
            )
        self.rgba = rgba.tobytes()
        return self

    @property
    def width(self) -> int:
        """Width of the layer, zero for inverted bounds."""
        return max(self.right - self.left, 0)

    @property
    def height(self) -> int:
        """Height of the layer, zero for inverted bounds."""
        return max(self.bottom - self.top, 0)

    @property
    def size(self) -> tuple[int, int]:
        """(width, height) tuple."""
        return self.width, self.height

    @property
    def bbox(self) -> tuple[int, int, int, int]:
        """(left, top, right, bottom) tuple."""
        return self.left, self.top, self.right, self.bottom

    def is_group(self) -> bool:
        return self.layer_type in (LayerType.FOLDER_OPEN, LayerType.FOLDER_CLOSED)

    def has_mask(self) -> bool:
        return self.mask_info is not None

    def numpy(self) -> np.ndarray:
        """``(height, width, 4)`` uint8 array of the pixels."""
        return np.frombuffer(self.rgba, np.uint8).reshape((self.height, self.width, 4))

    def topil(self) -> Optional[Image.Image]:
        """
        Get PIL Image of the layer.

        :return: RGBA :py:class:`PIL.Image.Image`, or `None` if the layer has
            no pixels.
        """
        return pil_io.convert_rgba_to_pil(self.rgba, self.width, self.height)

    def __repr__(self) -> str:
        has_size = self.width > 0 and self.height > 0
        return "%s(%r%s%s%s%s%s)" % (
            self.__class__.__name__,
            self.name,
            " size=%dx%d" % (self.width, self.height) if has_size else "",
            " invisible" if not self.visible else "",
            " clip" if self.clipping else "",
            " mask" if self.has_mask() else "",
            " %s" % self.layer_type.name.lower()
            if self.layer_type != LayerType.NORMAL
            else "",
        )


@define(repr=False)
class Document:
    """
    Decoded PSD/PSB document.

    .. py:attribute:: width
    .. py:attribute:: height
    .. py:attribute:: color_mode

        See :py:class:`~psd_codec.constants.ColorMode`.

    .. py:attribute:: depth

        Bits per channel, 8 or 16.

    .. py:attribute:: version

        1 for PSD, 2 for PSB.

    .. py:attribute:: palette

        768 bytes color table of indexed documents, None otherwise.

    .. py:attribute:: layers

        List of :py:class:`.Layer`, bottom of the stack first.

    .. py:attribute:: composite_rgba

        ``width * height * 4`` bytes of the composite image.
    """

    width: int = 0
    height: int = 0
    color_mode: ColorMode = ColorMode.RGB
    depth: int = 8
    version: int = 1
    palette: Optional[bytes] = field(default=None, repr=False)
    layers: list[Layer] = field(factory=list)
    composite_rgba: bytes = field(default=b"", repr=False)

    @classmethod
    def frombytes(cls, data: bytes, encoding: str = "macroman") -> "Document":
        """
        Decode a PSD/PSB byte string.

        :param data: the whole file content.
        :param encoding: charset encoding of the pascal strings.
        :raises ~psd_codec.errors.PSDError: on malformed input.
        """
        return cls.from_record(PSD.frombytes(data, encoding=encoding))

    @classmethod
    def from_record(cls, psd: PSD) -> "Document":
        header = psd.header
        palette = None
        if header.color_mode == ColorMode.INDEXED:
            palette = psd.color_mode_data.value

        layers = [
            Layer.from_record(record, channels, header, palette)
            for record, channels in psd._iter_layers()
        ]
        logger.debug("decoded %d layers" % len(layers))
        composite = numpy_io.get_image_data(psd.image_data, header, palette)
        return cls(
            width=header.width,
            height=header.height,
            color_mode=header.color_mode,
            depth=header.depth,
            version=header.version,
            palette=palette,
            layers=layers,
            composite_rgba=composite.tobytes(),
        )

    @property
    def size(self) -> tuple[int, int]:
        """(width, height) tuple."""
        return self.width, self.height

    def numpy(self) -> np.ndarray:
        """``(height, width, 4)`` uint8 array of the composite image."""
        return np.frombuffer(self.composite_rgba, np.uint8).reshape(
            (self.height, self.width, 4)
        )

    def topil(self) -> Optional[Image.Image]:
        """Get RGBA PIL Image of the composite image."""
        return pil_io.convert_rgba_to_pil(self.composite_rgba, self.width, self.height)

    def simplify(self) -> "SimplifiedDocument":
        """
        Strip the document down to what :py:func:`~psd_codec.encode` accepts.
        Masks, text and vector masks are dropped; pixels keep the mask
        already applied.
        """
        return SimplifiedDocument(
            width=self.width,
            height=self.height,
            composite_rgba=self.composite_rgba,
            layers=[
                SimplifiedLayer(
                    name=layer.name,
                    top=layer.top,
                    left=layer.left,
                    width=layer.width,
                    height=layer.height,
                    opacity=layer.opacity,
                    visible=layer.visible,
                    blend_mode=layer.blend_mode,
                    clipping=layer.clipping,
                    layer_type=layer.layer_type,
                    rgba=layer.rgba,
                )
                for layer in self.layers
            ],
        )

    def __repr__(self) -> str:
        return "%s(mode=%s size=%dx%d depth=%d layers=%d)" % (
            self.__class__.__name__,
            self.color_mode.name,
            self.width,
            self.height,
            self.depth,
            len(self.layers),
        )

    def _repr_pretty_(self, p: Any, cycle: bool) -> None:
        if cycle:
            p.text(repr(self))
            return
        p.text(repr(self))
        for index, layer in enumerate(self.layers):
            p.break_()
            p.text("  [%d] %r" % (index, layer))


@define(repr=False)
class SimplifiedLayer:
    """
    Flat, rasterized layer accepted by the encoder.

    ``rgba`` must hold exactly ``width * height * 4`` bytes.
    """

    name: str = ""
    top: int = 0
    left: int = 0
    width: int = 0
    height: int = 0
    opacity: int = 255
    visible: bool = True
    blend_mode: BlendMode = BlendMode.NORMAL
    clipping: bool = False
    layer_type: LayerType = LayerType.NORMAL
    rgba: bytes = field(default=b"", repr=False)

    @classmethod
    def frompil(
        cls, image: Image.Image, name: str = "", top: int = 0, left: int = 0, **kwargs: Any
    ) -> "SimplifiedLayer":
        """Create a layer from PIL Image placed at ``(left, top)``."""
        return cls(
            name=name,
            top=top,
            left=left,
            width=image.width,
            height=image.height,
            rgba=pil_io.convert_pil_to_rgba(image),
            **kwargs,
        )

    def __repr__(self) -> str:
        return "%s(%r offset=(%d,%d) size=%dx%d)" % (
            self.__class__.__name__,
            self.name,
            self.left,
            self.top,
            self.width,
            self.height,
        )


@define(repr=False)
class SimplifiedDocument:
    """
    Encoder input: canvas size, composite pixels and flat layers, bottom of
    the stack first.
    """

    width: int = 0
    height: int = 0
    composite_rgba: bytes = field(default=b"", repr=False)
    layers: list[SimplifiedLayer] = field(factory=list)

    def __repr__(self) -> str:
        return "%s(size=%dx%d layers=%d)" % (
            self.__class__.__name__,
            self.width,
            self.height,
            len(self.layers),
        )
