"""
Various constants for psd_codec
"""

import logging
from enum import Enum, IntEnum

logger = logging.getLogger(__name__)


class ColorMode(IntEnum):
    """
    Color mode.
    """

    BITMAP = 0
    GRAYSCALE = 1
    INDEXED = 2
    RGB = 3
    CMYK = 4
    MULTICHANNEL = 7
    DUOTONE = 8
    LAB = 9

    @staticmethod
    def channels(value: "ColorMode", alpha: bool = False) -> int:
        """Number of color channels for the given mode."""
        return {
            ColorMode.BITMAP: 1,
            ColorMode.GRAYSCALE: 1,
            ColorMode.INDEXED: 1,
            ColorMode.RGB: 3,
            ColorMode.CMYK: 4,
            ColorMode.MULTICHANNEL: 1,
            ColorMode.DUOTONE: 1,
            ColorMode.LAB: 3,
        }[value] + int(alpha)


class ChannelID(IntEnum):
    """
    Channel types.
    """

    CHANNEL_0 = 0  # Red, Cyan, Gray, Index, or L*
    CHANNEL_1 = 1  # Green, Magenta, or a*
    CHANNEL_2 = 2  # Blue, Yellow, or b*
    CHANNEL_3 = 3  # Black
    CHANNEL_4 = 4
    CHANNEL_5 = 5
    CHANNEL_6 = 6
    CHANNEL_7 = 7
    CHANNEL_8 = 8
    CHANNEL_9 = 9
    TRANSPARENCY_MASK = -1
    USER_LAYER_MASK = -2
    REAL_USER_LAYER_MASK = -3


class Clipping(IntEnum):
    """
    Clipping.
    """

    BASE = 0
    NON_BASE = 1


class BlendMode(Enum):
    """
    Blend modes.

    Keys that are not listed here are read as :py:attr:`NORMAL`, see
    :py:meth:`from_key`.
    """

    NORMAL = b"norm"
    MULTIPLY = b"mul "
    SCREEN = b"scrn"
    OVERLAY = b"over"
    DARKEN = b"dark"
    LIGHTEN = b"lite"
    COLOR_DODGE = b"div "
    COLOR_BURN = b"idiv"
    HARD_LIGHT = b"hLit"
    SOFT_LIGHT = b"sLit"
    DIFFERENCE = b"diff"
    EXCLUSION = b"smud"
    HUE = b"hue "
    SATURATION = b"sat "
    COLOR = b"colr"
    LUMINOSITY = b"lum "

    @classmethod
    def from_key(cls, key: bytes) -> "BlendMode":
        """Map a 4-byte blend key, falling back to :py:attr:`NORMAL`."""
        try:
            return cls(key)
        except ValueError:
            logger.debug("Unsupported blend mode %r, using normal" % (key,))
            return cls.NORMAL


class Compression(IntEnum):
    """
    Compression modes.

    Compression. 0 = Raw Data, 1 = RLE compressed, 2 = ZIP without
    prediction, 3 = ZIP with prediction.
    """

    RAW = 0
    RLE = 1
    ZIP = 2
    ZIP_WITH_PREDICTION = 3


class SectionDivider(IntEnum):
    """
    Section divider kinds stored in ``lsct`` blocks.
    """

    OTHER = 0
    OPEN_FOLDER = 1
    CLOSED_FOLDER = 2
    BOUNDING_SECTION_DIVIDER = 3


class LayerType(IntEnum):
    """
    Kind of a decoded layer. Group structure is expressed by the
    folder and divider sentinels in the flat layer list.
    """

    NORMAL = 0
    FOLDER_OPEN = 1
    FOLDER_CLOSED = 2
    SECTION_DIVIDER = 3


class Resource(IntEnum):
    """
    Image resource keys.

    Only the resources the encoder emits are listed.
    """

    RESOLUTION_INFO = 1005


class PathResourceID(IntEnum):
    CLOSED_LENGTH = 0
    CLOSED_KNOT_LINKED = 1
    CLOSED_KNOT_UNLINKED = 2
    OPEN_LENGTH = 3
    OPEN_KNOT_LINKED = 4
    OPEN_KNOT_UNLINKED = 5
    PATH_FILL = 6
    CLIPBOARD = 7
    INITIAL_FILL = 8


class Tag(Enum):
    """
    Tagged blocks keys.
    """

    ALPHA = b"Alph"  # Undocumented.
    EFFECTS_LAYER = b"lrFX"
    FILTER_MASK = b"FMsk"
    LAYER = b"Layr"
    LAYER_16 = b"Lr16"
    LAYER_32 = b"Lr32"
    LAYER_ID = b"lyid"
    LINKED_LAYER2 = b"lnk2"
    LINKED_LAYER3 = b"lnk3"
    LINKED_LAYER_EXTERNAL = b"lnkE"
    NESTED_SECTION_DIVIDER_SETTING = b"lsdk"
    OBJECT_BASED_EFFECTS_LAYER_INFO = b"lfx2"
    PIXEL_SOURCE_DATA2 = b"PxSD"
    SAVING_MERGED_TRANSPARENCY = b"Mtrn"
    SAVING_MERGED_TRANSPARENCY16 = b"Mt16"
    SAVING_MERGED_TRANSPARENCY32 = b"Mt32"
    SECTION_DIVIDER_SETTING = b"lsct"
    TYPE_TOOL_OBJECT_SETTING = b"TySh"
    UNICODE_LAYER_NAME = b"luni"
    USER_MASK = b"LMsk"
    VECTOR_MASK_SETTING1 = b"vmsk"
    VECTOR_MASK_SETTING2 = b"vsms"
