import numpy as np
import pytest

from psd_codec.api.color_space import cmyk_to_rgb, indexed_to_rgb, lab_to_rgb


@pytest.mark.parametrize(
    "cmyk, expected",
    [
        ((0, 0, 0, 0), (255, 255, 255)),
        ((0, 0, 0, 255), (0, 0, 0)),
        ((255, 0, 0, 0), (0, 255, 255)),
        ((0, 255, 255, 0), (255, 0, 0)),
        ((0, 0, 0, 51), (204, 204, 204)),
    ],
)
def test_cmyk_to_rgb(cmyk: tuple, expected: tuple) -> None:
    assert tuple(cmyk_to_rgb(*cmyk).tolist()) == expected


def test_cmyk_to_rgb_array() -> None:
    planes = [np.zeros((2, 3), dtype=np.uint8) for _ in range(4)]
    rgb = cmyk_to_rgb(*planes)
    assert rgb.shape == (2, 3, 3)
    assert rgb.dtype == np.uint8
    assert np.all(rgb == 255)


def test_lab_to_rgb_white_and_black() -> None:
    white = lab_to_rgb(255, 128, 128)
    assert white.dtype == np.uint8
    assert all(v >= 250 for v in white.tolist())
    assert lab_to_rgb(0, 128, 128).tolist() == [0, 0, 0]


def test_lab_to_rgb_hue() -> None:
    red = lab_to_rgb(136, 208, 195).tolist()
    assert red[0] > 200 and red[1] < 80 and red[2] < 80
    gray = lab_to_rgb(128, 128, 128).tolist()
    assert abs(gray[0] - gray[1]) <= 1 and abs(gray[1] - gray[2]) <= 1


def test_lab_to_rgb_clips_out_of_gamut() -> None:
    rgb = lab_to_rgb(np.full((1, 2), 255), np.full((1, 2), 255), np.zeros((1, 2)))
    assert rgb.shape == (1, 2, 3)
    assert rgb.dtype == np.uint8


def test_indexed_to_rgb() -> None:
    palette = bytes(range(256)) + bytes(256) + b"\xff" * 256
    rgb = indexed_to_rgb(np.array([[5, 200]], dtype=np.uint8), palette)
    assert rgb.shape == (1, 2, 3)
    assert rgb.tolist() == [[[5, 0, 255], [200, 0, 255]]]


def test_indexed_to_rgb_short_palette() -> None:
    rgb = indexed_to_rgb(np.array([0, 1]), b"\x10\x20")
    assert rgb.tolist() == [[0x10, 0, 0], [0x20, 0, 0]]
