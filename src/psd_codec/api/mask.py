"""
Mask module.
"""

import logging
from typing import Optional

import numpy as np

from psd_codec.constants import ChannelID
from psd_codec.psd.layer_and_mask import MaskData

logger = logging.getLogger(__name__)

BBox = tuple[int, int, int, int]


def apply_mask(
    alpha: np.ndarray,
    layer_bbox: BBox,
    mask_plane: np.ndarray,
    mask_bbox: BBox,
    default_fill: int,
) -> np.ndarray:
    """
    Multiply the layer alpha by the user mask.

    Both planes are positioned on the canvas by their own ``(left, top,
    right, bottom)`` bounds, so each layer pixel meets the mask sample at the
    same canvas position. Layer pixels outside the mask bounds use
    ``default_fill``.

    :param alpha: ``(height, width)`` uint8 alpha of the layer.
    :param layer_bbox: bounds of the layer.
    :param mask_plane: ``(height, width)`` uint8 mask samples.
    :param mask_bbox: bounds of the mask.
    :param default_fill: mask value outside the mask bounds, 0..255.
    :return: ``(height, width)`` uint8 alpha.
    """
    left, top = layer_bbox[0], layer_bbox[1]
    height, width = alpha.shape
    mask = np.full((height, width), default_fill, dtype=np.uint16)

    mask_left, mask_top = mask_bbox[0], mask_bbox[1]
    mask_height, mask_width = mask_plane.shape
    x0, y0 = max(left, mask_left), max(top, mask_top)
    x1 = min(left + width, mask_left + mask_width)
    y1 = min(top + height, mask_top + mask_height)
    if x0 < x1 and y0 < y1:
        mask[y0 - top : y1 - top, x0 - left : x1 - left] = mask_plane[
            y0 - mask_top : y1 - mask_top, x0 - mask_left : x1 - mask_left
        ]
    else:
        logger.debug("Mask %r does not overlap layer %r" % (mask_bbox, layer_bbox))

    result = (alpha.astype(np.uint16) * mask + 127) // 255
    return result.astype(np.uint8)


def get_mask(
    mask_data: Optional[MaskData], planes: dict[int, np.ndarray]
) -> Optional[tuple[np.ndarray, BBox, int]]:
    """
    Select the user mask plane of a layer.

    The real user mask (-3) is used when the record carries real mask
    parameters, otherwise the user mask (-2). Disabled masks yield None.

    :return: ``(mask_plane, mask_bbox, default_fill)`` or None.
    """
    if mask_data is None:
        return None
    if mask_data.flags.mask_disabled:
        logger.debug("Mask is disabled")
        return None

    if (
        mask_data.real_flags is not None
        and ChannelID.REAL_USER_LAYER_MASK in planes
    ):
        return (
            planes[ChannelID.REAL_USER_LAYER_MASK],
            mask_data.real_bbox,
            mask_data.real_background_color or 0,
        )
    if ChannelID.USER_LAYER_MASK in planes:
        return (
            planes[ChannelID.USER_LAYER_MASK],
            mask_data.bbox,
            mask_data.background_color,
        )
    return None
