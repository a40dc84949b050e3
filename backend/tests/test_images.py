import base64
import io
import struct
import zlib
import pytest
from PIL import Image
from assistant.errors import ValidationError
from assistant.images import decode_image_data

def _png_bytes() -> bytes:
    buf = io.BytesIO()
    Image.new("RGB", (4, 4), color=(200, 30, 30)).save(buf, format="PNG")
    return buf.getvalue()

def _jpeg_bytes() -> bytes:
    buf = io.BytesIO()
    Image.new("RGB", (4, 4)).save(buf, format="JPEG")
    return buf.getvalue()

def test_decodes_png_data_url():
    raw = _png_bytes()
    payload = decode_image_data("data:image/png;base64," + base64.b64encode(raw).decode())
    assert payload.mime_type == "image/png"
    assert payload.data == raw

def test_decodes_bare_base64_jpeg():
    payload = decode_image_data(base64.b64encode(_jpeg_bytes()).decode())
    assert payload.mime_type == "image/jpeg"

def test_rejects_non_image_bytes():
    with pytest.raises(ValidationError):
        decode_image_data("data:image/png;base64," + base64.b64encode(b"not an image").decode())

def test_rejects_bad_base64():
    with pytest.raises(ValidationError):
        decode_image_data("data:image/png;base64,@@@not-base64@@@")

def test_rejects_oversized_image():
    encoded = base64.b64encode(_png_bytes()).decode()
    with pytest.raises(ValidationError, match="too large"):
        decode_image_data(encoded, max_bytes=10)

def _png_chunk(kind: bytes, data: bytes) -> bytes:
    return struct.pack(">I", len(data)) + kind + data + struct.pack(">I", zlib.crc32(kind + data))

def huge_canvas_png() -> bytes:
    # Tiny file whose header claims a 20000x20000 canvas
    header = struct.pack(">IIBBBBB", 20000, 20000, 8, 2, 0, 0, 0)
    return b"\x89PNG\r\n\x1a\n" + _png_chunk(b"IHDR", header) + _png_chunk(b"IEND", b"")

def _mpo_bytes() -> bytes:
    buf = io.BytesIO()
    first = Image.new("RGB", (8, 8), color=(10, 20, 30))
    second = Image.new("RGB", (8, 8), color=(30, 20, 10))
    first.save(buf, format="MPO", save_all=True, append_images=[second])
    return buf.getvalue()

def test_rejects_decompression_bomb():
    encoded = base64.b64encode(huge_canvas_png()).decode()
    with pytest.raises(ValidationError, match="Invalid image"):
        decode_image_data("data:image/png;base64," + encoded)

def test_multi_picture_jpeg_is_sent_as_jpeg():
    raw = _mpo_bytes()
    assert Image.open(io.BytesIO(raw)).format == "MPO"
    payload = decode_image_data("data:image/jpeg;base64," + base64.b64encode(raw).decode())
    assert payload.mime_type == "image/jpeg"
    assert payload.data == raw

def test_unlisted_format_defaults_to_jpeg():
    buf = io.BytesIO()
    Image.new("RGB", (4, 4)).save(buf, format="GIF")
    payload = decode_image_data(base64.b64encode(buf.getvalue()).decode())
    assert payload.mime_type == "image/jpeg"
