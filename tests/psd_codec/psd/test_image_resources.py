import struct

from psd_codec.constants import Resource
from psd_codec.psd.bin_utils import Cursor
from psd_codec.psd.color_mode_data import ColorModeData
from psd_codec.psd.image_resources import ImageResource, ImageResources, ResolutionInfo

from ..utils import check_write_read


def test_image_resources_new() -> None:
    resources = ImageResources.new()
    assert Resource.RESOLUTION_INFO in resources
    assert resources[Resource.RESOLUTION_INFO].data == ResolutionInfo(
        72 << 16, 1, 1, 72 << 16, 1, 1
    )
    data = resources.tobytes()
    assert data[:4] == b"\x00\x00\x00\x1c"
    assert data[4:10] == b"8BIM\x03\xed"
    assert data[10:12] == b"\x00\x00"
    assert data[12:16] == b"\x00\x00\x00\x10"
    assert data[16:] == struct.pack(">I2HI2H", 72 << 16, 1, 1, 72 << 16, 1, 1)


def test_image_resources_are_skipped() -> None:
    data = ImageResources.new().tobytes()
    fp = Cursor(data + b"next")
    assert len(ImageResources.read(fp)) == 0
    assert fp.read_bytes(4) == b"next"


def test_image_resource_odd_data_is_padded() -> None:
    resource = ImageResource(key=1000, name="ab", data=b"\x01\x02\x03")
    assert resource.tobytes() == (
        b"8BIM\x03\xe8" + b"\x02ab\x00" + b"\x00\x00\x00\x03" + b"\x01\x02\x03\x00"
    )


def test_resolution_info() -> None:
    assert ResolutionInfo.new(300).tobytes() == struct.pack(
        ">I2HI2H", 300 << 16, 1, 1, 300 << 16, 1, 1
    )


def test_color_mode_data() -> None:
    check_write_read(ColorModeData(b"\x01\x02"))
    check_write_read(ColorModeData(bytes(768)))
