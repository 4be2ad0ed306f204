"""
Image Loader Module
Decodes uploaded statement screenshots (PNG, JPEG, WEBP) using Pillow.
"""

import io
import logging

from PIL import Image, UnidentifiedImageError

logger = logging.getLogger(__name__)

SUPPORTED_FORMATS = ("PNG", "JPEG", "WEBP")


class ImageLoadError(Exception):
    """Custom exception for image loading errors."""
    pass


def load_image(data: bytes, filename: str = "<upload>") -> Image.Image:
    """
    Decode screenshot bytes into a fully loaded Pillow image.

    Args:
        data: Encoded image bytes
        filename: Name used in log and error messages

    Returns:
        Decoded image; its format attribute holds the source encoding

    Raises:
        ImageLoadError: If the bytes are empty, corrupt or not a supported format
    """
    if not data:
        logger.error(f"Image file is empty: {filename}")
        raise ImageLoadError(f"Image file is empty: {filename}")

    try:
        image = Image.open(io.BytesIO(data))
        image_format = image.format
        # Image.open is lazy; force decoding so truncated files fail here
        image.load()

    except UnidentifiedImageError as e:
        logger.error(f"Unreadable image file: {filename}")
        raise ImageLoadError(f"Unreadable image file: {filename}") from e

    except (OSError, Image.DecompressionBombError) as e:
        logger.error(f"Invalid or corrupted image file: {filename}", exc_info=True)
        raise ImageLoadError(f"Invalid or corrupted image file {filename}: {str(e)}") from e

    if image_format not in SUPPORTED_FORMATS:
        logger.error(f"Unsupported image format {image_format}: {filename}")
        raise ImageLoadError(
            f"Unsupported image format {image_format} in {filename}. "
            f"Supported: {', '.join(SUPPORTED_FORMATS)}"
        )

    image.format = image_format
    logger.info(f"Loaded image: {filename} ({image_format}, {image.size[0]}x{image.size[1]}, {image.mode})")
    return image
