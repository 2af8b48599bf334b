"""
PSD document structure module.

This module contains the main PSD class that represents the low-level
binary structure of a PSD/PSB file.
"""

import logging
from typing import Any, BinaryIO, Generator, Optional, TypeVar

from attrs import define, field

from psd_codec.constants import Tag

from .base import BaseElement
from .bin_utils import Cursor
from .color_mode_data import ColorModeData
from .header import FileHeader
from .image_data import ImageData
from .image_resources import ImageResources
from .layer_and_mask import (
    ChannelDataList,
    LayerAndMaskInformation,
    LayerInfo,
    LayerRecord,
)

logger = logging.getLogger(__name__)

T = TypeVar("T", bound="PSD")


@define(repr=False)
class PSD(BaseElement):
    """
    Low-level PSD file structure.

    Example::

        from psd_codec.psd import PSD

        with open(input_file, 'rb') as f:
            psd = PSD.frombytes(f.read())

        with open(output_file, 'wb') as f:
            psd.write(f)


    .. py:attribute:: header

        See :py:class:`.FileHeader`.

    .. py:attribute:: color_mode_data

        See :py:class:`.ColorModeData`.

    .. py:attribute:: image_resources

        See :py:class:`.ImageResources`.

    .. py:attribute:: layer_and_mask_information

        See :py:class:`.LayerAndMaskInformation`.

    .. py:attribute:: image_data

        See :py:class:`.ImageData`.
    """

    header: FileHeader = field(factory=FileHeader)
    color_mode_data: ColorModeData = field(factory=ColorModeData)
    image_resources: ImageResources = field(factory=ImageResources)
    layer_and_mask_information: LayerAndMaskInformation = field(
        factory=LayerAndMaskInformation
    )
    image_data: ImageData = field(factory=ImageData)

    @classmethod
    def read(cls: type[T], fp: Cursor, encoding: str = "macroman", **kwargs: Any) -> T:
        header = FileHeader.read(fp)
        return cls(
            header,
            ColorModeData.read(fp),
            ImageResources.read(fp, encoding=encoding),
            LayerAndMaskInformation.read(fp, encoding, header.version),
            ImageData.read(fp),
        )

    def write(self, fp: BinaryIO, encoding: str = "macroman", **kwargs: Any) -> int:
        logger.debug("writing %s" % self.header)
        written = self.header.write(fp)
        written += self.color_mode_data.write(fp)
        written += self.image_resources.write(fp, encoding)
        written += self.layer_and_mask_information.write(
            fp, encoding, self.header.version
        )
        written += self.image_data.write(fp)
        return written

    def _iter_layers(self) -> Generator[tuple[LayerRecord, ChannelDataList], None, None]:
        """
        Iterate over (layer_record, channel_data) pairs.
        """
        layer_info = self._get_layer_info()
        if layer_info is not None:
            yield from zip(layer_info.layer_records, layer_info.channel_image_data)

    def _get_layer_info(self) -> Optional[LayerInfo]:
        """
        Layer info of the document. 16-bit documents keep it in a global
        tagged block instead of the layer info section.
        """
        tagged_blocks = self.layer_and_mask_information.tagged_blocks
        if tagged_blocks is not None:
            layer_info = tagged_blocks.get_data(Tag.LAYER_16)
            if isinstance(layer_info, LayerInfo):
                return layer_info
        return self.layer_and_mask_information.layer_info
