"""
Image Preprocessor Module
Prepares statement screenshots for OCR: upscale, grayscale, contrast stretch and sharpen.
"""

import io
import logging
from typing import Optional

import numpy as np
from PIL import Image

from config import config
from loaders.image_loader import load_image

logger = logging.getLogger(__name__)


class ImagePreprocessor:
    """
    Deterministic screenshot enhancement.

    Steps, in order:
    1. Upscale with Lanczos interpolation
    2. Grayscale with ITU-R 601 luminance weights
    3. Contrast stretch around mid-gray
    4. 3x3 sharpen on interior pixels (the 1-pixel border is left as is)

    The same input always yields byte-identical output.
    """

    LUMA_WEIGHTS = (0.299, 0.587, 0.114)

    def __init__(self, upscale_factor: Optional[float] = None, contrast_factor: Optional[float] = None):
        """
        Initialize preprocessor.

        Args:
            upscale_factor: Scale applied to both dimensions (default from config)
            contrast_factor: Contrast multiplier around mid-gray (default from config)
        """
        self.upscale_factor = upscale_factor if upscale_factor is not None else config.UPSCALE_FACTOR
        self.contrast_factor = contrast_factor if contrast_factor is not None else config.CONTRAST_FACTOR

        if self.upscale_factor <= 0:
            raise ValueError(f"upscale_factor must be positive, got {self.upscale_factor}")

    def preprocess(self, image: Image.Image) -> Image.Image:
        """
        Enhance a decoded screenshot.

        Args:
            image: Pillow image in any mode

        Returns:
            Grayscale image ("L"), or "LA" when the source had an alpha channel
        """
        alpha = None
        if image.mode in ("RGBA", "LA", "PA") or (image.mode == "P" and "transparency" in image.info):
            image = image.convert("RGBA")
            alpha = image.getchannel("A")

        rgb = image.convert("RGB")
        width, height = rgb.size
        new_size = (max(1, round(width * self.upscale_factor)), max(1, round(height * self.upscale_factor)))

        if new_size != rgb.size:
            rgb = rgb.resize(new_size, Image.Resampling.LANCZOS)
            if alpha is not None:
                alpha = alpha.resize(new_size, Image.Resampling.LANCZOS)

        gray = self._to_grayscale(np.asarray(rgb, dtype=np.float64))
        contrasted = self._stretch_contrast(gray)
        sharpened = self._sharpen(contrasted)

        result = Image.fromarray(sharpened.astype(np.uint8))
        if alpha is not None:
            result.putalpha(alpha)

        logger.debug(
            f"Preprocessed image {width}x{height} -> {new_size[0]}x{new_size[1]} "
            f"(contrast {self.contrast_factor}, mode {result.mode})"
        )
        return result

    def preprocess_bytes(self, data: bytes, filename: str = "<upload>") -> bytes:
        """
        Enhance an encoded screenshot and re-encode it in its source format.

        Args:
            data: Encoded image bytes
            filename: Name used in log and error messages

        Returns:
            Encoded bytes of the processed image

        Raises:
            ImageLoadError: If the bytes cannot be decoded
        """
        image = load_image(data, filename)
        processed = self.preprocess(image)
        return self.encode(processed, image.format or "PNG")

    @staticmethod
    def encode(image: Image.Image, image_format: str) -> bytes:
        """Encode an image, converting to a mode the target format can store."""
        if image_format == "JPEG":
            image = image.convert("L")
        elif image_format == "WEBP":
            image = image.convert("RGBA" if image.mode == "LA" else "RGB")

        buffer = io.BytesIO()
        save_options = {"lossless": True} if image_format == "WEBP" else {}
        image.save(buffer, format=image_format, **save_options)
        return buffer.getvalue()

    def _to_grayscale(self, pixels: np.ndarray) -> np.ndarray:
        red_weight, green_weight, blue_weight = self.LUMA_WEIGHTS
        luminance = (red_weight * pixels[:, :, 0]
                     + green_weight * pixels[:, :, 1]
                     + blue_weight * pixels[:, :, 2])
        # Round half up
        return np.floor(luminance + 0.5)

    def _stretch_contrast(self, gray: np.ndarray) -> np.ndarray:
        stretched = ((gray / 255.0 - 0.5) * self.contrast_factor + 0.5) * 255.0
        return np.clip(np.floor(stretched + 0.5), 0, 255).astype(np.int32)

    @staticmethod
    def _sharpen(gray: np.ndarray) -> np.ndarray:
        """
        Apply the kernel [[0,-1,0],[-1,5,-1],[0,-1,0]] to interior pixels.

        Neighbours are always read from the unsharpened input.
        """
        result = gray.copy()
        result[1:-1, 1:-1] = (
            5 * gray[1:-1, 1:-1]
            - gray[:-2, 1:-1]
            - gray[2:, 1:-1]
            - gray[1:-1, :-2]
            - gray[1:-1, 2:]
        )
        return np.clip(result, 0, 255)
