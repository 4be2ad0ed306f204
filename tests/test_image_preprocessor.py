"""
Tests for screenshot loading and OCR preprocessing.
"""

import io

import numpy as np
import pytest
from PIL import Image

from loaders.image_loader import ImageLoadError, load_image
from preprocessing.image_preprocessor import ImagePreprocessor

from conftest import make_image_bytes


def gray_image(values):
    return Image.fromarray(np.array(values, dtype=np.uint8))


class TestImagePreprocessor:

    def test_upscales_and_converts_to_grayscale(self):
        processed = ImagePreprocessor(upscale_factor=2, contrast_factor=1.2).preprocess(
            Image.new("RGB", (10, 6), (100, 150, 200))
        )
        assert processed.size == (20, 12)
        assert processed.mode == "L"

    def test_luminance_and_contrast_formula(self):
        processed = ImagePreprocessor(upscale_factor=1, contrast_factor=1.2).preprocess(
            Image.new("RGB", (4, 4), (100, 150, 200))
        )
        # gray = round(140.75) = 141; contrast -> round(143.7) = 144; uniform image is unchanged by sharpening
        assert set(np.asarray(processed).flatten().tolist()) == {144}

    def test_sharpen_interior_only(self):
        source = gray_image([
            [50, 50, 50],
            [50, 100, 50],
            [50, 50, 50],
        ])
        result = np.asarray(ImagePreprocessor(upscale_factor=1, contrast_factor=1.0).preprocess(source))

        # 5 * 100 - 4 * 50 = 300, clamped
        assert result[1, 1] == 255
        assert result[0].tolist() == [50, 50, 50]
        assert result[:, 0].tolist() == [50, 50, 50]

    def test_sharpen_clamps_low(self):
        source = gray_image([
            [200, 200, 200],
            [200, 10, 200],
            [200, 200, 200],
        ])
        result = np.asarray(ImagePreprocessor(upscale_factor=1, contrast_factor=1.0).preprocess(source))
        assert result[1, 1] == 0

    def test_contrast_clamps(self):
        processed = ImagePreprocessor(upscale_factor=1, contrast_factor=3.0).preprocess(
            Image.new("L", (3, 3), 250)
        )
        assert set(np.asarray(processed).flatten().tolist()) == {255}

    def test_alpha_is_preserved(self):
        source = Image.new("RGBA", (4, 4), (10, 20, 30, 77))
        processed = ImagePreprocessor(upscale_factor=1).preprocess(source)

        assert processed.mode == "LA"
        assert set(np.asarray(processed.getchannel("A")).flatten().tolist()) == {77}

    def test_tiny_image(self):
        processed = ImagePreprocessor(upscale_factor=1).preprocess(Image.new("RGB", (1, 1), (0, 0, 0)))
        assert processed.size == (1, 1)

    def test_rejects_non_positive_factor(self):
        with pytest.raises(ValueError):
            ImagePreprocessor(upscale_factor=0)

    def test_bytes_output_is_deterministic(self, png_bytes):
        preprocessor = ImagePreprocessor()
        first = preprocessor.preprocess_bytes(png_bytes)
        second = preprocessor.preprocess_bytes(png_bytes)

        assert first == second
        decoded = Image.open(io.BytesIO(first))
        assert decoded.format == "PNG"
        assert decoded.size == (16, 12)

    @pytest.mark.parametrize("image_format", ["JPEG", "WEBP"])
    def test_bytes_keep_source_format(self, image_format):
        output = ImagePreprocessor().preprocess_bytes(make_image_bytes(image_format))
        assert Image.open(io.BytesIO(output)).format == image_format

    def test_corrupt_bytes_raise(self):
        with pytest.raises(ImageLoadError):
            ImagePreprocessor().preprocess_bytes(b"not an image")


class TestImageLoader:

    def test_loads_png(self, png_bytes):
        image = load_image(png_bytes, "shot.png")
        assert image.format == "PNG"
        assert image.size == (8, 6)

    def test_empty_bytes(self):
        with pytest.raises(ImageLoadError, match="empty"):
            load_image(b"", "shot.png")

    def test_truncated_png(self, png_bytes):
        with pytest.raises(ImageLoadError):
            load_image(png_bytes[:30], "shot.png")

    def test_unsupported_format(self):
        with pytest.raises(ImageLoadError, match="Unsupported"):
            load_image(make_image_bytes("GIF", mode="P", color=1), "shot.gif")
