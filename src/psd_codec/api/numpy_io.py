"""
Channel plane assembly into straight-alpha RGBA arrays.
"""

import logging
from typing import Optional, Union

import numpy as np

from psd_codec.api.color_space import cmyk_to_rgb, indexed_to_rgb, lab_to_rgb
from psd_codec.constants import ChannelID, ColorMode
from psd_codec.psd.header import FileHeader
from psd_codec.psd.image_data import ImageData
from psd_codec.psd.layer_and_mask import ChannelDataList, LayerRecord

logger = logging.getLogger(__name__)

_MASK_IDS = (ChannelID.USER_LAYER_MASK, ChannelID.REAL_USER_LAYER_MASK)


def parse_array(data: Union[bytes, bytearray], depth: int) -> np.ndarray:
    """
    Parse a decompressed plane into 8-bit samples. 16-bit samples keep their
    high byte.
    """
    if depth == 8:
        return np.frombuffer(data, ">u1")
    elif depth == 16:
        return (np.frombuffer(data, ">u2") >> 8).astype(np.uint8)
    raise ValueError("Unsupported depth: %g" % depth)


def get_layer_planes(
    record: LayerRecord, channels: ChannelDataList, depth: int, version: int
) -> dict[int, np.ndarray]:
    """
    Decode every channel of a layer into ``(height, width)`` planes keyed by
    channel id. Mask channels use the mask bounds; a mask with empty bounds
    yields an empty plane so that its default fill still applies.
    """
    planes = {}
    iterator = zip(record.channel_info, channels, record.channel_sizes)
    for info, data, (width, height) in iterator:
        if width == 0 or height == 0:
            if info.id in _MASK_IDS:
                planes[int(info.id)] = np.zeros((height, width), dtype=np.uint8)
            continue
        plane = parse_array(data.get_data(width, height, depth, version), depth)
        planes[int(info.id)] = plane.reshape((height, width))
    return planes


def get_layer_data(
    record: LayerRecord,
    channels: ChannelDataList,
    header: FileHeader,
    palette: Optional[bytes] = None,
) -> tuple[np.ndarray, dict[int, np.ndarray]]:
    """
    Get ``(height, width, 4)`` RGBA of a layer together with its decoded
    planes.
    """
    shape = (record.height, record.width)
    planes = get_layer_planes(record, channels, header.depth, header.version)
    color = [
        planes[i] if i in planes else _missing(shape, i)
        for i in range(ColorMode.channels(header.color_mode))
    ]
    alpha = planes.get(ChannelID.TRANSPARENCY_MASK)
    if alpha is None:
        alpha = np.full(shape, 255, dtype=np.uint8)
    return _to_rgba(color, alpha, header.color_mode, palette), planes


def get_image_data(
    image_data: ImageData, header: FileHeader, palette: Optional[bytes] = None
) -> np.ndarray:
    """
    Get ``(height, width, 4)`` RGBA of the composite image. The first channel
    beyond the color channels is used as alpha. A missing section renders as
    opaque white.
    """
    shape = (header.height, header.width)
    if image_data.is_missing:
        logger.debug("composite image is missing, using white canvas")
        return np.full(shape + (4,), 255, dtype=np.uint8)

    planes = [
        parse_array(data, header.depth).reshape(shape)
        for data in image_data.get_data(header)
    ]
    count = ColorMode.channels(header.color_mode)
    color = [
        planes[i] if i < len(planes) else _missing(shape, i) for i in range(count)
    ]
    if len(planes) > count:
        alpha = planes[count]
    else:
        alpha = np.full(shape, 255, dtype=np.uint8)
    return _to_rgba(color, alpha, header.color_mode, palette)


def _to_rgba(
    color: list[np.ndarray],
    alpha: np.ndarray,
    color_mode: ColorMode,
    palette: Optional[bytes],
) -> np.ndarray:
    if color_mode == ColorMode.RGB:
        rgb = np.stack(color[:3], axis=-1)
    elif color_mode == ColorMode.CMYK:
        c, m, y, k = (255 - plane for plane in color[:4])
        rgb = cmyk_to_rgb(c, m, y, k)
    elif color_mode == ColorMode.LAB:
        rgb = lab_to_rgb(*color[:3])
    elif color_mode == ColorMode.INDEXED:
        rgb = indexed_to_rgb(color[0], palette or b"")
    else:
        # Grayscale, duotone, multichannel and bitmap render their first
        # channel as gray.
        rgb = np.repeat(np.expand_dims(color[0], -1), 3, axis=-1)
    return np.concatenate([rgb, np.expand_dims(alpha, -1)], axis=-1).astype(np.uint8)


def _missing(shape: tuple[int, int], index: int) -> np.ndarray:
    logger.debug("Channel %d is missing, filled with zeros" % index)
    return np.zeros(shape, dtype=np.uint8)
