"""
Low-level API that translates binary data to Python structure.

All the data structure in this subpackage inherits from one of the object
defined in :py:mod:`psd_codec.psd.base` module.
"""

# Main PSD document class
from .document import PSD as PSD

# Layer and mask structures
from .layer_and_mask import (
    ChannelData as ChannelData,
    ChannelImageData as ChannelImageData,
    GlobalLayerMaskInfo as GlobalLayerMaskInfo,
    LayerInfo as LayerInfo,
    LayerRecord as LayerRecord,
    LayerRecords as LayerRecords,
    MaskData as MaskData,
)
from .tagged_blocks import TaggedBlocks as TaggedBlocks

__all__ = [
    "PSD",
    "ChannelData",
    "LayerInfo",
    "LayerRecord",
    "LayerRecords",
    "MaskData",
    "ChannelImageData",
    "TaggedBlocks",
    "GlobalLayerMaskInfo",
]
