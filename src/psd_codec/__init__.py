"""
psd-codec: decoder and minimal encoder for Adobe Photoshop PSD/PSB files.

Basic usage::

    from psd_codec import decode, encode

    with open('example.psd', 'rb') as f:
        document = decode(f.read())

    for layer in document.layers:
        print(layer.name, layer.bbox, layer.blend_mode)

    document.topil().save('composite.png')

    data = encode(document.simplify())

Architecture:

- :py:mod:`psd_codec.psd`: Low-level binary structure parsing/writing
- :py:mod:`psd_codec.api`: Decoded document model, color conversion, mask
  compositing and the encoder
- :py:mod:`psd_codec.compression`: Image compression codecs (RLE, ZIP)
"""

from psd_codec.api.document import (
    Document,
    Layer,
    MaskInfo,
    SimplifiedDocument,
    SimplifiedLayer,
)
from psd_codec.api.writer import encode
from psd_codec.version import __version__


def decode(data: bytes, encoding: str = "macroman") -> Document:
    """
    Decode a PSD/PSB file content.

    :param data: the whole file content.
    :param encoding: charset encoding of the pascal strings, default
        'macroman'.
    :return: :py:class:`~psd_codec.api.document.Document`.
    :raises ~psd_codec.errors.PSDError: on malformed input.
    """
    return Document.frombytes(data, encoding=encoding)


__all__ = [
    "Document",
    "Layer",
    "MaskInfo",
    "SimplifiedDocument",
    "SimplifiedLayer",
    "decode",
    "encode",
    "__version__",
]
