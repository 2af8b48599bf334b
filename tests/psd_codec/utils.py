import io
import logging
import struct
from typing import Any, Optional, Sequence, Type, TypeVar

from psd_codec.psd.base import BaseElement
from psd_codec.psd.bin_utils import Cursor, trimmed_repr

T = TypeVar("T", bound=BaseElement)

logging.basicConfig(level=logging.DEBUG)

Channel = tuple[int, bytes]


def check_write_read(element: T, *args: Any, **kwargs: Any) -> None:
    with io.BytesIO() as f:
        element.write(f, *args, **kwargs)
        data = f.getvalue()
    new_element = element.read(Cursor(data), *args, **kwargs)
    assert element == new_element, "%s vs %s" % (element, new_element)


def check_read_write(cls: Type[T], data: bytes, *args: Any, **kwargs: Any) -> None:
    element = cls.frombytes(data, *args, **kwargs)
    new_data = element.tobytes(*args, **kwargs)
    assert data == new_data, "%s vs %s" % (trimmed_repr(data), trimmed_repr(new_data))


# Fixture builders assembling PSD byte streams by hand.


def make_header(
    width: int,
    height: int,
    channels: int = 3,
    depth: int = 8,
    color_mode: int = 3,
    version: int = 1,
    signature: bytes = b"8BPS",
) -> bytes:
    return struct.pack(
        ">4sH6xHIIHH", signature, version, channels, height, width, depth, color_mode
    )


def make_pascal_string(value: str, padding: int = 4) -> bytes:
    data = value.encode("macroman")
    result = struct.pack(">B", len(data)) + data
    return result + bytes(-len(result) % padding)


def make_unicode_string(value: str) -> bytes:
    return struct.pack(">I", len(value)) + value.encode("utf-16-be")


def make_block(key: bytes, payload: bytes, signature: bytes = b"8BIM") -> bytes:
    payload += bytes(-len(payload) % 4)
    return signature + key + struct.pack(">I", len(payload)) + payload


def make_mask(
    top: int,
    left: int,
    bottom: int,
    right: int,
    default_fill: int = 0,
    flags: int = 0,
    real: Optional[tuple[int, int, int, int, int]] = None,
) -> bytes:
    """
    Mask data payload. ``real`` is (top, left, bottom, right, default_fill)
    of the real user mask.
    """
    data = struct.pack(">4iBB", top, left, bottom, right, default_fill, flags)
    if real is None:
        return data + b"\x00\x00"
    real_top, real_left, real_bottom, real_right, real_fill = real
    return data + struct.pack(
        ">BB4i", 0, real_fill, real_top, real_left, real_bottom, real_right
    )


def raw_channel(channel_id: int, data: bytes, compression: int = 0) -> Channel:
    return channel_id, struct.pack(">H", compression) + data


def make_layer(
    bbox: tuple[int, int, int, int],
    channels: Sequence[Channel],
    name: str = "",
    blend_mode: bytes = b"norm",
    opacity: int = 255,
    clipping: int = 0,
    flags: int = 0,
    mask: bytes = b"",
    blocks: bytes = b"",
    signature: bytes = b"8BIM",
    version: int = 1,
) -> tuple[bytes, bytes]:
    """
    Returns a layer record and the channel data following the records.
    ``bbox`` is (top, left, bottom, right).
    """
    record = struct.pack(">4iH", *bbox, len(channels))
    for channel_id, data in channels:
        record += struct.pack((">hI", ">hQ")[version - 1], channel_id, len(data))
    record += signature + blend_mode + struct.pack(">BBBx", opacity, clipping, flags)
    extra = struct.pack(">I", len(mask)) + mask
    extra += struct.pack(">I", 0)  # blending ranges
    extra += make_pascal_string(name) + blocks
    record += struct.pack(">I", len(extra)) + extra
    return record, b"".join(data for _, data in channels)


def make_layer_info_body(
    layers: Sequence[tuple[bytes, bytes]], layer_count: Optional[int] = None
) -> bytes:
    if layer_count is None:
        layer_count = len(layers)
    body = struct.pack(">h", layer_count)
    body += b"".join(record for record, _ in layers)
    body += b"".join(data for _, data in layers)
    return body


def make_psd(
    width: int,
    height: int,
    layers: Sequence[tuple[bytes, bytes]] = (),
    composite: Optional[Sequence[bytes]] = None,
    channels: int = 3,
    depth: int = 8,
    color_mode: int = 3,
    color_mode_data: bytes = b"",
    image_resources: bytes = b"",
    layer_count: Optional[int] = None,
    global_blocks: bytes = b"",
    compression: int = 0,
    version: int = 1,
) -> bytes:
    """
    Build a whole file. ``composite`` holds the already compressed planes of
    the image data section, None omits the section.
    """
    length_format = (">I", ">Q")[version - 1]
    data = make_header(width, height, channels, depth, color_mode, version)
    data += struct.pack(">I", len(color_mode_data)) + color_mode_data
    data += struct.pack(">I", len(image_resources)) + image_resources

    layer_and_mask = b""
    if layers or global_blocks:
        body = make_layer_info_body(layers, layer_count) if layers else b""
        body += bytes(len(body) % 2)
        layer_and_mask = struct.pack(length_format, len(body)) + body
        layer_and_mask += struct.pack(">I", 0)  # global layer mask info
        layer_and_mask += global_blocks
    data += struct.pack(length_format, len(layer_and_mask)) + layer_and_mask

    if composite is not None:
        data += struct.pack(">H", compression) + b"".join(composite)
    return data
