from PIL import Image

from psd_codec.api.pil_io import convert_pil_to_rgba, convert_rgba_to_pil


def test_convert_rgba_to_pil() -> None:
    image = convert_rgba_to_pil(b"\x01\x02\x03\x04" * 6, 3, 2)
    assert image is not None
    assert image.mode == "RGBA"
    assert image.size == (3, 2)
    assert image.getpixel((2, 1)) == (1, 2, 3, 4)


def test_convert_rgba_to_pil_empty() -> None:
    assert convert_rgba_to_pil(b"", 0, 4) is None


def test_convert_pil_to_rgba() -> None:
    image = Image.new("RGB", (2, 1), (10, 20, 30))
    assert convert_pil_to_rgba(image) == b"\x0a\x14\x1e\xff" * 2
    image = Image.new("RGBA", (1, 1), (1, 2, 3, 4))
    assert convert_pil_to_rgba(image) == b"\x01\x02\x03\x04"
