"""
Shared fixtures for the screenshot extractor test suite.
"""

import io
from datetime import date

import pytest
from PIL import Image

from extractors.statement_rules import ParserConfig
from ocr.ocr_engine import OCREngine, OCRError


class FakeOCREngine(OCREngine):
    """Returns queued texts in order; an exception instance in the queue is raised instead."""

    name = "fake"

    def __init__(self, outputs):
        self.outputs = list(outputs)
        self.images = []

    def recognize(self, image):
        self.images.append(image)
        output = self.outputs.pop(0)
        if isinstance(output, Exception):
            raise output
        return output


def make_image_bytes(image_format: str = "PNG", size=(8, 6), mode: str = "RGB", color=(120, 130, 140)) -> bytes:
    buffer = io.BytesIO()
    Image.new(mode, size, color).save(buffer, format=image_format)
    return buffer.getvalue()


@pytest.fixture
def parser_config():
    return ParserConfig()


@pytest.fixture
def fixed_today():
    return lambda: date(2025, 3, 4)


@pytest.fixture
def png_bytes():
    return make_image_bytes()


@pytest.fixture
def fake_ocr_factory():
    return FakeOCREngine


@pytest.fixture
def ocr_failure():
    return OCRError("engine crashed")
