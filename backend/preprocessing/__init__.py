"""
Preprocessing Module - Screenshot enhancement before OCR.
"""

from .image_preprocessor import (
    ImagePreprocessor
)

__all__ = [
    'ImagePreprocessor',
]
