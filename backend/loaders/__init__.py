"""
Loaders Module - Screenshot decoding and loading.
"""

from .image_loader import (
    load_image,
    ImageLoadError,
    SUPPORTED_FORMATS
)

__all__ = [
    'load_image',
    'ImageLoadError',
    'SUPPORTED_FORMATS',
]
