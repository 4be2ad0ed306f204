"""
Tests for the Tesseract OCR wrapper, with pytesseract patched out.
"""

import pytest
import pytesseract
from PIL import Image

from ocr.ocr_engine import OCRError, TesseractOCREngine


@pytest.fixture
def image():
    return Image.new("L", (4, 4), 255)


def test_recognize_passes_settings(monkeypatch, image):
    calls = {}

    def fake_image_to_string(img, lang=None, config=None, timeout=0):
        calls.update(lang=lang, config=config, timeout=timeout)
        return "Dec 7, 2025\nStarbucks $4.50\n"

    monkeypatch.setattr(pytesseract, "image_to_string", fake_image_to_string)
    engine = TesseractOCREngine(language="eng", extra_config="--psm 6", timeout=10)

    assert engine.recognize(image) == "Dec 7, 2025\nStarbucks $4.50\n"
    assert calls == {"lang": "eng", "config": "--psm 6", "timeout": 10}


@pytest.mark.parametrize("error,message", [
    (pytesseract.TesseractNotFoundError(), "not installed"),
    (pytesseract.TesseractError(1, "bad image"), "OCR failed"),
    (RuntimeError("Tesseract process timeout"), "timed out"),
])
def test_engine_failures_raise_ocr_error(monkeypatch, image, error, message):
    def failing(*args, **kwargs):
        raise error

    monkeypatch.setattr(pytesseract, "image_to_string", failing)

    with pytest.raises(OCRError, match=message):
        TesseractOCREngine(extra_config="").recognize(image)
