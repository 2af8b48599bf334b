"""
Encoder for simplified documents.

The output is a version 1, 8-bit RGB document with uncompressed channels:

- empty color mode data
- a resolution resource at 72 dpi
- one layer record per layer with red, green, blue and transparency
  channels, a unicode name block, and a section divider block for folder and
  divider layers
- empty global layer mask info
- the composite image as red, green and blue planes

Masks, text, vector masks and other color modes are not written.
"""

import logging

import numpy as np

from psd_codec.api.document import SimplifiedDocument, SimplifiedLayer
from psd_codec.constants import (
    ChannelID,
    Clipping,
    ColorMode,
    Compression,
    LayerType,
    SectionDivider,
    Tag,
)
from psd_codec.psd.color_mode_data import ColorModeData
from psd_codec.psd.document import PSD
from psd_codec.psd.header import FileHeader
from psd_codec.psd.image_data import ImageData
from psd_codec.psd.image_resources import ImageResources
from psd_codec.psd.layer_and_mask import (
    ChannelData,
    ChannelDataList,
    ChannelImageData,
    ChannelInfo,
    GlobalLayerMaskInfo,
    LayerAndMaskInformation,
    LayerFlags,
    LayerInfo,
    LayerRecord,
    LayerRecords,
)
from psd_codec.psd.tagged_blocks import TaggedBlocks

logger = logging.getLogger(__name__)

_CHANNEL_IDS = (
    ChannelID.CHANNEL_0,
    ChannelID.CHANNEL_1,
    ChannelID.CHANNEL_2,
    ChannelID.TRANSPARENCY_MASK,
)


def encode(document: SimplifiedDocument) -> bytes:
    """
    Encode a simplified document.

    :param document: See :py:class:`~psd_codec.api.document.SimplifiedDocument`.
    :return: PSD file content.
    :raises ValueError: when a pixel buffer does not match its size.
    """
    header = FileHeader(
        version=1,
        channels=3,
        height=document.height,
        width=document.width,
        depth=8,
        color_mode=ColorMode.RGB,
    )

    layer_records = LayerRecords()
    channel_image_data = ChannelImageData()
    for layer in document.layers:
        record, channels = _make_layer(layer)
        layer_records.append(record)
        channel_image_data.append(channels)

    psd = PSD(
        header=header,
        color_mode_data=ColorModeData(),
        image_resources=ImageResources.new(),
        layer_and_mask_information=LayerAndMaskInformation(
            layer_info=LayerInfo(
                layer_count=len(layer_records),
                layer_records=layer_records,
                channel_image_data=channel_image_data,
            ),
            global_layer_mask_info=GlobalLayerMaskInfo(),
        ),
        image_data=_make_image_data(document, header),
    )
    data = psd.tobytes()
    logger.debug("encoded %d layers, len=%d" % (len(layer_records), len(data)))
    return data


def _make_layer(layer: SimplifiedLayer) -> tuple[LayerRecord, ChannelDataList]:
    planes = _split_rgba(layer.rgba, layer.width, layer.height, repr(layer))
    channels = ChannelDataList(
        [ChannelData(compression=Compression.RAW, data=plane) for plane in planes]
    )
    channel_info = [
        ChannelInfo(id=channel_id, length=channel._length)
        for channel_id, channel in zip(_CHANNEL_IDS, channels)
    ]

    tagged_blocks = TaggedBlocks()
    tagged_blocks.set_data(Tag.UNICODE_LAYER_NAME, layer.name)
    if layer.layer_type != LayerType.NORMAL:
        tagged_blocks.set_data(
            Tag.SECTION_DIVIDER_SETTING, SectionDivider(int(layer.layer_type))
        )

    record = LayerRecord(
        top=layer.top,
        left=layer.left,
        bottom=layer.top + layer.height,
        right=layer.left + layer.width,
        channel_info=channel_info,
        blend_mode=layer.blend_mode,
        opacity=layer.opacity,
        clipping=Clipping.NON_BASE if layer.clipping else Clipping.BASE,
        flags=LayerFlags(visible=layer.visible),
        name=layer.name,
        tagged_blocks=tagged_blocks,
    )
    return record, channels


def _make_image_data(document: SimplifiedDocument, header: FileHeader) -> ImageData:
    planes = _split_rgba(
        document.composite_rgba, document.width, document.height, "composite"
    )
    image_data = ImageData(compression=Compression.RAW)
    image_data.set_data(planes[:3], header)
    return image_data


def _split_rgba(rgba: bytes, width: int, height: int, label: str) -> list[bytes]:
    expected = width * height * 4
    if len(rgba) != expected:
        raise ValueError(
            "Invalid RGBA length for %s: %d, expected %d" % (label, len(rgba), expected)
        )
    pixels = np.frombuffer(rgba, dtype=np.uint8).reshape((-1, 4))
    return [pixels[:, i].tobytes() for i in range(4)]
