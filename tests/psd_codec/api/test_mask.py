import struct

import numpy as np

from psd_codec.api.mask import apply_mask, get_mask
from psd_codec.psd.layer_and_mask import MaskData

from ..utils import make_mask


def _mask_data(*args, **kwargs) -> MaskData:
    payload = make_mask(*args, **kwargs)
    mask_data = MaskData.frombytes(struct.pack(">I", len(payload)) + payload)
    assert mask_data is not None
    return mask_data


def test_apply_mask_same_bounds() -> None:
    alpha = np.array([[255, 255], [128, 0]], dtype=np.uint8)
    mask = np.array([[0, 255], [128, 255]], dtype=np.uint8)
    result = apply_mask(alpha, (0, 0, 2, 2), mask, (0, 0, 2, 2), 0)
    assert result.dtype == np.uint8
    assert result.tolist() == [[0, 255], [64, 0]]


def test_apply_mask_offset_smaller_mask() -> None:
    alpha = np.full((1, 4), 255, dtype=np.uint8)
    mask = np.array([[10, 20]], dtype=np.uint8)
    result = apply_mask(alpha, (5, 3, 9, 4), mask, (6, 3, 8, 4), 255)
    assert result.tolist() == [[255, 10, 20, 255]]


def test_apply_mask_larger_mask() -> None:
    alpha = np.full((1, 2), 255, dtype=np.uint8)
    mask = np.array([[1, 2, 3, 4]], dtype=np.uint8)
    result = apply_mask(alpha, (2, 0, 4, 1), mask, (1, 0, 5, 1), 255)
    assert result.tolist() == [[2, 3]]


def test_apply_mask_without_overlap() -> None:
    alpha = np.full((2, 2), 200, dtype=np.uint8)
    mask = np.full((2, 2), 255, dtype=np.uint8)
    result = apply_mask(alpha, (0, 0, 2, 2), mask, (10, 10, 12, 12), 0)
    assert not result.any()


def test_get_mask_user_mask() -> None:
    plane = np.zeros((1, 1), dtype=np.uint8)
    mask_data = _mask_data(1, 2, 2, 3, default_fill=255)
    mask = get_mask(mask_data, {-2: plane})
    assert mask is not None
    assert mask[0] is plane
    assert mask[1] == (2, 1, 3, 2)
    assert mask[2] == 255


def test_get_mask_prefers_real_mask() -> None:
    user, real = np.zeros((1, 1)), np.ones((2, 2))
    mask_data = _mask_data(0, 0, 1, 1, real=(4, 5, 6, 7, 255))
    mask = get_mask(mask_data, {-2: user, -3: real})
    assert mask is not None
    assert mask[0] is real
    assert mask[1] == (5, 4, 7, 6)
    assert mask[2] == 255


def test_get_mask_real_mask_without_plane() -> None:
    user = np.zeros((1, 1))
    mask_data = _mask_data(0, 0, 1, 1, real=(4, 5, 6, 7, 255))
    mask = get_mask(mask_data, {-2: user})
    assert mask is not None
    assert mask[0] is user


def test_get_mask_disabled() -> None:
    mask_data = _mask_data(0, 0, 1, 1, flags=2)
    assert get_mask(mask_data, {-2: np.zeros((1, 1))}) is None


def test_get_mask_missing() -> None:
    assert get_mask(None, {}) is None
    assert get_mask(_mask_data(0, 0, 1, 1), {}) is None


def test_apply_mask_empty_plane() -> None:
    alpha = np.full((2, 2), 255, dtype=np.uint8)
    mask = np.zeros((0, 0), dtype=np.uint8)
    assert apply_mask(alpha, (0, 0, 2, 2), mask, (0, 0, 0, 0), 0).tolist() == [
        [0, 0],
        [0, 0],
    ]
    assert apply_mask(alpha, (0, 0, 2, 2), mask, (0, 0, 0, 0), 255).tolist() == [
        [255, 255],
        [255, 255],
    ]
