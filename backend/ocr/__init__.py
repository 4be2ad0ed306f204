"""
OCR Module - Text recognition engines.
"""

from .ocr_engine import (
    OCREngine,
    TesseractOCREngine,
    OCRError
)

__all__ = [
    'OCREngine',
    'TesseractOCREngine',
    'OCRError',
]
