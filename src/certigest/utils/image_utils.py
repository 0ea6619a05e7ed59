"""
Image utility functions for page images.
"""

from io import BytesIO
from PIL import Image, UnidentifiedImageError

from ..errors import UnsupportedImageFormat

# Raster codecs accepted for legacy page images
SUPPORTED_FORMATS = ("JPEG", "PNG")


def decode_page_image(image_bytes: bytes, reference: str = "") -> Image.Image:
    """
    Decode a JPEG or PNG page image.

    Args:
        image_bytes: Raw image bytes
        reference: Where the bytes came from, for error messages

    Returns:
        Loaded PIL image in RGB mode

    Raises:
        UnsupportedImageFormat: If the bytes are not a decodable JPEG/PNG
    """
    try:
        image = Image.open(BytesIO(image_bytes))
        image.load()
    except (UnidentifiedImageError, OSError) as exc:
        raise UnsupportedImageFormat(f"Cannot decode image {reference}: {exc}") from exc
    if image.format not in SUPPORTED_FORMATS:
        raise UnsupportedImageFormat(
            f"Unsupported image format {image.format} for {reference}; expected JPEG or PNG"
        )
    if image.mode != "RGB":
        image = image.convert("RGB")
    return image
