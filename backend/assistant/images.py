"""Decode image uploads sent by the chat widget as data URLs"""

from __future__ import annotations
import base64
import binascii
import io
from PIL import Image, UnidentifiedImageError

from .errors import ValidationError
from .models import ImagePayload

DEFAULT_MIME_TYPE = "image/jpeg"

# Formats the AI provider accepts inline. MPO is how Pillow reports multi picture
# JPEGs from phone cameras, they are still plain JPEG to the provider
PROVIDER_MIME_TYPES = {
    "PNG": "image/png",
    "JPEG": "image/jpeg",
    "MPO": "image/jpeg",
    "WEBP": "image/webp",
}


def decode_image_data(image_data: str, max_bytes: int = 4 * 1024 * 1024) -> ImagePayload:
    """Turn a data URL (or bare base64 string) into an ImagePayload

    The bytes are opened with Pillow so only real images reach the AI
    provider, and the MIME type is taken from the decoded format. Anything the
    provider does not know is sent as JPEG.
    """
    if not isinstance(image_data, str) or not image_data.strip():
        raise ValidationError("Invalid image: empty image data")
    # Strip the "data:image/png;base64," header when present
    encoded = image_data.split(",")[-1].strip()
    try:
        img_bytes = base64.b64decode(encoded, validate=True)
    except (binascii.Error, ValueError) as e:
        raise ValidationError(f"Invalid image: {e}")
    if len(img_bytes) > max_bytes:
        raise ValidationError(f"Image too large (max {max_bytes} bytes)")
    try:
        with Image.open(io.BytesIO(img_bytes)) as image:
            image.verify()
            fmt = image.format
    except (UnidentifiedImageError, Image.DecompressionBombError, OSError, SyntaxError) as e:
        raise ValidationError(f"Invalid image: {e}")
    mime_type = PROVIDER_MIME_TYPES.get(fmt or "", DEFAULT_MIME_TYPE)
    return ImagePayload(mime_type=mime_type, data=img_bytes)
