"""
Image buffer helpers.

Images are Pillow ``Image.Image`` objects. Remote APIs exchange them as
base64 text, either bare or wrapped in a ``data:`` URL.
"""
import base64
import binascii
import io

from PIL import Image, UnidentifiedImageError

from core.errors import DecodeFailure, EncodeFailure

# Matches CompressionQuality.HighQuality / IntermediateQuality on device
HIGH_QUALITY = 95
INTERMEDIATE_QUALITY = 75


def encode_bytes(image: Image.Image, format: str = "PNG", quality: int = HIGH_QUALITY) -> bytes:
    """Serialize an image to PNG or JPEG bytes."""
    buffer = io.BytesIO()
    try:
        if format.upper() in ("JPEG", "JPG"):
            if image.mode != "RGB":
                image = image.convert("RGB")
            image.save(buffer, format="JPEG", quality=quality)
        else:
            image.save(buffer, format=format.upper())
    except (OSError, ValueError, KeyError) as e:
        raise EncodeFailure(f"Failed to encode image to {format}: {e}") from e
    return buffer.getvalue()


def encode_base64(image: Image.Image, format: str = "PNG", quality: int = HIGH_QUALITY) -> str:
    return base64.b64encode(encode_bytes(image, format, quality)).decode("ascii")


def to_data_url(image: Image.Image) -> str:
    """Encode an image as a PNG data URL."""
    return f"data:image/png;base64,{encode_base64(image, 'PNG')}"


def strip_data_url(data: str) -> str:
    """Return the base64 payload of a data URL, or the input if it is bare base64."""
    if data.startswith("data:"):
        if "," not in data:
            raise DecodeFailure("Invalid data URL format")
        return data.split(",", 1)[1]
    return data


def decode_bytes(raw: bytes) -> Image.Image:
    """Decode raw image bytes into a fully loaded image."""
    if not raw:
        raise DecodeFailure("Image data is empty")
    try:
        image = Image.open(io.BytesIO(raw))
        image.load()
    except (UnidentifiedImageError, OSError, ValueError) as e:
        raise DecodeFailure(f"Failed to decode image: {e}") from e
    return image


def decode_base64(data: str) -> Image.Image:
    """Decode base64 (bare or data URL) into an image."""
    try:
        raw = base64.b64decode(strip_data_url(data), validate=True)
    except (binascii.Error, ValueError) as e:
        raise DecodeFailure(f"Failed to decode texture from base64 data: {e}") from e
    return decode_bytes(raw)
