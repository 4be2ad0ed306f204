"""
OCR Engine Module
Text recognition collaborators for preprocessed screenshots.
"""

import logging
from abc import ABC, abstractmethod
from typing import Optional

import pytesseract
from PIL import Image

from config import config

logger = logging.getLogger(__name__)


class OCRError(Exception):
    """Custom exception for OCR engine failures."""
    pass


class OCREngine(ABC):
    """Abstract base class for OCR engines."""

    name = "base"

    @abstractmethod
    def recognize(self, image: Image.Image) -> str:
        """
        Recognize the text in an image.

        Args:
            image: Preprocessed Pillow image

        Returns:
            Plain text, one OCR line per text line

        Raises:
            OCRError: If recognition fails
        """
        pass


class TesseractOCREngine(OCREngine):
    """Tesseract OCR via pytesseract."""

    name = "tesseract"

    def __init__(
        self,
        language: Optional[str] = None,
        tesseract_cmd: Optional[str] = None,
        extra_config: Optional[str] = None,
        timeout: int = 0
    ):
        """
        Initialize Tesseract engine.

        Args:
            language: Tesseract language code (default from config)
            tesseract_cmd: Path to the tesseract binary (default from config/PATH)
            extra_config: Extra command-line options passed to tesseract
            timeout: Seconds before recognition is aborted (0 disables)
        """
        self.language = language or config.OCR_LANGUAGE
        self.extra_config = extra_config if extra_config is not None else config.TESSERACT_CONFIG
        self.timeout = timeout

        cmd = tesseract_cmd or config.TESSERACT_CMD
        if cmd:
            pytesseract.pytesseract.tesseract_cmd = cmd
            logger.info(f"Using tesseract binary: {cmd}")

    def recognize(self, image: Image.Image) -> str:
        try:
            text = pytesseract.image_to_string(
                image,
                lang=self.language,
                config=self.extra_config,
                timeout=self.timeout,
            )
        except pytesseract.TesseractNotFoundError as e:
            logger.error("Tesseract is not installed or not on PATH")
            raise OCRError("Tesseract is not installed or not on PATH. Set TESSERACT_CMD.") from e
        except pytesseract.TesseractError as e:
            logger.error(f"Tesseract failed: {e}", exc_info=True)
            raise OCRError(f"OCR failed: {e}") from e
        except RuntimeError as e:
            # pytesseract raises a bare RuntimeError on timeout
            logger.error(f"Tesseract timed out after {self.timeout}s")
            raise OCRError(f"OCR timed out after {self.timeout}s") from e

        logger.debug(f"Tesseract recognized {len(text)} characters")
        return text
