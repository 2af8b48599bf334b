"""
Exceptions raised while decoding a PSD/PSB stream.

All of them derive from :py:class:`PSDError`, itself a :py:class:`ValueError`,
so callers can catch either.
"""


class PSDError(ValueError):
    """Base class of decoding errors."""


class InvalidSignature(PSDError):
    """The stream does not start with ``b'8BPS'``."""


class UnsupportedVersion(PSDError):
    """The version is neither 1 (PSD) nor 2 (PSB)."""


class UnsupportedColorMode(PSDError):
    """The color mode code is not a known :py:class:`~psd_codec.constants.ColorMode`."""


class UnsupportedDepth(PSDError):
    """The bit depth is not 8 or 16."""


class InvalidHeader(PSDError):
    """Channel count or canvas dimensions are out of range."""


class InvalidLayerData(PSDError):
    """A layer record is structurally broken, e.g. the blend signature is missing."""


class UnexpectedEndOfFile(PSDError, EOFError):
    """Fewer bytes remain than a mandatory field requires."""
