import logging
import struct

import pytest

from psd_codec.constants import BlendMode, SectionDivider, Tag
from psd_codec.psd.bin_utils import Cursor
from psd_codec.psd.tagged_blocks import (
    SectionDividerSetting,
    TaggedBlock,
    TaggedBlocks,
    TypeToolData,
    UnicodeLayerName,
)

from ..utils import check_read_write, check_write_read, make_block, make_unicode_string


def test_tagged_blocks() -> None:
    blocks = TaggedBlocks(
        [
            (
                Tag.UNICODE_LAYER_NAME,
                TaggedBlock(
                    key=Tag.UNICODE_LAYER_NAME, data=UnicodeLayerName("Layer")
                ),
            ),
            (
                Tag.SECTION_DIVIDER_SETTING,
                TaggedBlock(
                    key=Tag.SECTION_DIVIDER_SETTING,
                    data=SectionDividerSetting(SectionDivider.OPEN_FOLDER),
                ),
            ),
        ]
    )
    check_write_read(blocks)
    assert blocks.get_data(Tag.UNICODE_LAYER_NAME) == "Layer"
    assert blocks.get_data(b"lsct").kind == SectionDivider.OPEN_FOLDER
    assert blocks.get_data(Tag.TYPE_TOOL_OBJECT_SETTING) is None


def test_tagged_blocks_set_data() -> None:
    blocks = TaggedBlocks()
    blocks.set_data(b"luni", "Name")
    assert Tag.UNICODE_LAYER_NAME in blocks
    assert blocks.get_data(Tag.UNICODE_LAYER_NAME) == "Name"
    with pytest.raises(KeyError):
        blocks.set_data(b"abcd", b"")


def test_unknown_block_between_known_blocks(caplog: pytest.LogCaptureFixture) -> None:
    data = (
        make_block(b"luni", make_unicode_string("Unicode name"))
        + make_block(b"zzzz", b"\x01\x02\x03\x04\x05")
        + make_block(b"lsct", struct.pack(">I", 3))
    )
    with caplog.at_level(logging.INFO):
        blocks = TaggedBlocks.frombytes(data)
    assert list(blocks.keys()) == [
        Tag.UNICODE_LAYER_NAME,
        b"zzzz",
        Tag.SECTION_DIVIDER_SETTING,
    ]
    assert blocks.get_data(Tag.UNICODE_LAYER_NAME) == "Unicode name"
    assert blocks.get_data(b"zzzz") == b"\x01\x02\x03\x04\x05\x00\x00\x00"
    assert (
        blocks.get_data(Tag.SECTION_DIVIDER_SETTING).kind
        == SectionDivider.BOUNDING_SECTION_DIVIDER
    )
    assert "Unknown tagged block" in caplog.text


def test_unpadded_block_length_is_rounded() -> None:
    # Length 5 is stored as is, the block still occupies 8 bytes.
    data = (
        b"8BIM" + b"zzzz" + struct.pack(">I", 5) + b"abcde\x00\x00\x00"
        + make_block(b"lsct", struct.pack(">I", 1))
    )
    blocks = TaggedBlocks.frombytes(data)
    assert blocks.get_data(b"zzzz") == b"abcde"
    assert blocks.get_data(Tag.SECTION_DIVIDER_SETTING).kind == SectionDivider.OPEN_FOLDER


def test_block_overrun_stops_reading() -> None:
    data = make_block(b"lsct", struct.pack(">I", 2)) + (
        b"8BIM" + b"zzzz" + struct.pack(">I", 100) + b"\x00" * 8
    )
    blocks = TaggedBlocks.frombytes(data)
    assert list(blocks.keys()) == [Tag.SECTION_DIVIDER_SETTING]


def test_invalid_signature_stops_reading() -> None:
    data = make_block(b"lsct", struct.pack(">I", 2)) + b"\x00" * 16
    blocks = TaggedBlocks.frombytes(data)
    assert len(blocks) == 1


def test_malformed_known_block_is_kept(caplog: pytest.LogCaptureFixture) -> None:
    payload = struct.pack(">I", 1) + b"XXXXnorm"
    data = make_block(b"lsct", payload) + make_block(
        b"luni", make_unicode_string("After")
    )
    with caplog.at_level(logging.ERROR):
        blocks = TaggedBlocks.frombytes(data)
    assert blocks.get_data(Tag.SECTION_DIVIDER_SETTING) == payload
    assert blocks.get_data(Tag.UNICODE_LAYER_NAME) == "After"
    assert "Failed to read tagged block" in caplog.text


def test_big_keys_in_version_2() -> None:
    block = TaggedBlock(key=Tag.USER_MASK, data=b"\x00" * 4)
    data = block.tobytes(version=2)
    assert data[8:16] == struct.pack(">Q", 4)
    blocks = TaggedBlocks.frombytes(data, version=2)
    assert blocks.get_data(Tag.USER_MASK) == b"\x00" * 4

    block = TaggedBlock(key=Tag.UNICODE_LAYER_NAME, data=UnicodeLayerName("a"))
    assert block.tobytes(version=2)[8:12] == struct.pack(">I", 8)


def test_unicode_layer_name() -> None:
    check_write_read(UnicodeLayerName("Ebene 1"))
    data = make_unicode_string("Name\x00")
    assert UnicodeLayerName.frombytes(data).value == "Name"


@pytest.mark.parametrize(
    "fixture, kind, blend_mode, sub_type",
    [
        (struct.pack(">I", 0), SectionDivider.OTHER, None, None),
        (struct.pack(">I", 1), SectionDivider.OPEN_FOLDER, None, None),
        (struct.pack(">I", 2), SectionDivider.CLOSED_FOLDER, None, None),
        (struct.pack(">I", 3) + b"8BIMpass", SectionDivider.BOUNDING_SECTION_DIVIDER, BlendMode.NORMAL, None),
        (struct.pack(">I", 1) + b"8BIMmul " + struct.pack(">I", 1), SectionDivider.OPEN_FOLDER, BlendMode.MULTIPLY, 1),
        (struct.pack(">I", 9), SectionDivider.OTHER, None, None),
    ],
)
def test_section_divider_setting(
    fixture: bytes,
    kind: SectionDivider,
    blend_mode: BlendMode,
    sub_type: int,
) -> None:
    setting = SectionDividerSetting.frombytes(fixture)
    assert setting.kind == kind
    assert setting.blend_mode == blend_mode
    assert setting.sub_type == sub_type


def test_section_divider_setting_wr() -> None:
    check_read_write(SectionDividerSetting, struct.pack(">I", 2))
    check_read_write(
        SectionDividerSetting, struct.pack(">I", 1) + b"8BIMmul " + struct.pack(">I", 1)
    )


def test_type_tool_data_fallback() -> None:
    text = "Hello é"
    encoded = text.encode("utf-8")
    data = b"\x00" * 48 + struct.pack(">H", len(encoded)) + encoded + b"\x00\x01"
    type_tool = TypeToolData.frombytes(data)
    assert type_tool.text == text
    assert type_tool.data == data


def test_type_tool_data_descriptor() -> None:
    data = (
        b"\x00\x01" + b"\x00" * 60 + b"Txt TEXT" + make_unicode_string("Hi there\x00")
        + b"\x00" * 8
    )
    assert TypeToolData.frombytes(data).text == "Hi there"


def test_type_tool_data_short() -> None:
    assert TypeToolData.frombytes(b"\x00" * 10).text is None


def test_type_tool_data_truncated_string() -> None:
    data = b"\x00" * 48 + struct.pack(">H", 100) + b"abc"
    assert TypeToolData.frombytes(data).text == "abc"


def test_type_tool_data_write() -> None:
    type_tool = TypeToolData(text="x", data=b"\x00" * 5)
    assert type_tool.tobytes() == b"\x00" * 8


def test_tagged_block_cursor_position() -> None:
    data = make_block(b"luni", make_unicode_string("ab")) + b"rest"
    fp = Cursor(data)
    block = TaggedBlock.read(fp)
    assert block is not None
    assert block.data == "ab"
    assert fp.read_bytes(4) == b"rest"
