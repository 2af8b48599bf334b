"""
Color space conversion to 8-bit RGB.

Every function accepts scalars or numpy arrays and returns an ``(..., 3)``
``uint8`` array.
"""

import logging
from typing import Any

import numpy as np

logger = logging.getLogger(__name__)

# D65 reference white.
_WHITE = np.array([0.95047, 1.0, 1.08883])

# Linear sRGB from CIE XYZ.
_XYZ_TO_RGB = np.array(
    [
        [3.2404542, -1.5371385, -0.4985314],
        [-0.9692660, 1.8760108, 0.0415560],
        [0.0556434, -0.2040259, 1.0572252],
    ]
)

_DELTA = 6.0 / 29.0


def cmyk_to_rgb(c: Any, m: Any, y: Any, k: Any) -> np.ndarray:
    """
    Convert CMYK ink amounts to RGB.

    Inputs are in 0..255 where 0 means no ink. PSD files store channels
    inverted, so pass ``255 - stored`` values.
    """
    c, m, y, k = (np.asarray(v, dtype=np.float64) / 255.0 for v in (c, m, y, k))
    rgb = np.stack([(1.0 - c), (1.0 - m), (1.0 - y)], axis=-1)
    rgb *= np.expand_dims(1.0 - k, -1)
    return _to_uint8(rgb * 255.0)


def lab_to_rgb(l: Any, a: Any, b: Any) -> np.ndarray:  # noqa: E741
    """
    Convert 8-bit encoded CIELAB to sRGB.

    ``l`` is scaled from 0..255 to 0..100, ``a`` and ``b`` are offset by 128.
    """
    L = np.asarray(l, dtype=np.float64) * 100.0 / 255.0
    A = np.asarray(a, dtype=np.float64) - 128.0
    B = np.asarray(b, dtype=np.float64) - 128.0

    fy = (L + 16.0) / 116.0
    fx = fy + A / 500.0
    fz = fy - B / 200.0
    xyz = np.stack([_finv(fx), _finv(fy), _finv(fz)], axis=-1) * _WHITE

    linear = np.clip(xyz @ _XYZ_TO_RGB.T, 0.0, 1.0)
    srgb = np.where(
        linear <= 0.0031308,
        12.92 * linear,
        1.055 * np.power(linear, 1.0 / 2.4) - 0.055,
    )
    return _to_uint8(srgb * 255.0)


def indexed_to_rgb(indices: Any, palette: bytes) -> np.ndarray:
    """
    Look up palette colors. ``palette`` holds 256 red, 256 green, then 256
    blue values.
    """
    table = np.zeros(768, dtype=np.uint8)
    data = np.frombuffer(palette[:768], dtype=np.uint8)
    table[: len(data)] = data
    table = table.reshape((3, 256)).T
    return table[np.asarray(indices, dtype=np.uint8)]


def _finv(t: np.ndarray) -> np.ndarray:
    return np.where(
        t > _DELTA, t**3, 3.0 * _DELTA * _DELTA * (t - 4.0 / 29.0)
    )


def _to_uint8(values: np.ndarray) -> np.ndarray:
    return np.clip(np.round(values), 0, 255).astype(np.uint8)
