"""
Configuration settings for the Screenshot Statement Extractor.
Centralized configuration management for the application.
"""

import os
from pathlib import Path
from typing import Optional

class Config:
    """Application configuration class."""

    # Application Settings
    APP_NAME = "Screenshot Statement Extractor"
    VERSION = "1.0.0"

    # File Upload Settings
    MAX_FILE_SIZE_MB: int = int(os.getenv("MAX_FILE_SIZE_MB", "10"))
    MAX_FILE_SIZE_BYTES: int = MAX_FILE_SIZE_MB * 1024 * 1024
    ALLOWED_FILE_TYPES: list[str] = [".png", ".jpg", ".jpeg", ".webp"]

    # Output Settings
    LOG_DIR: Path = Path(os.getenv("LOG_DIR", "./logs"))

    # Image Preprocessing Settings
    UPSCALE_FACTOR: int = int(os.getenv("UPSCALE_FACTOR", "2"))
    CONTRAST_FACTOR: float = float(os.getenv("CONTRAST_FACTOR", "1.2"))

    # OCR Settings
    OCR_LANGUAGE: str = os.getenv("OCR_LANGUAGE", "eng")
    TESSERACT_CMD: Optional[str] = os.getenv("TESSERACT_CMD")
    TESSERACT_CONFIG: str = os.getenv("TESSERACT_CONFIG", "")

    # Parsing Settings
    # Amounts above this value on the line after a merchant line are running balances
    BALANCE_THRESHOLD: float = float(os.getenv("BALANCE_THRESHOLD", "1000.00"))
    DATE_HEADER_RESIDUAL_MAX: int = int(os.getenv("DATE_HEADER_RESIDUAL_MAX", "15"))
    AMOUNT_ONLY_RESIDUAL_MAX: int = int(os.getenv("AMOUNT_ONLY_RESIDUAL_MAX", "5"))
    CONTINUATION_MAX_LENGTH: int = int(os.getenv("CONTINUATION_MAX_LENGTH", "30"))
    MIN_DESCRIPTION_LENGTH: int = int(os.getenv("MIN_DESCRIPTION_LENGTH", "3"))

    # Validation Settings
    STRICT_MODE: bool = os.getenv("STRICT_MODE", "false").lower() == "true"
    ALLOW_ZERO_AMOUNTS: bool = os.getenv("ALLOW_ZERO_AMOUNTS", "false").lower() == "true"

    # Review Settings
    DEFAULT_PAYMENT_METHOD: str = os.getenv("DEFAULT_PAYMENT_METHOD", "Other")
    PAYMENT_METHODS: list[str] = [
        "BOA Travel",
        "BOA CB",
        "Chase Sapphire",
        "Chase Amazon",
        "Chase Freedom",
        "Discover",
        "Amex",
        "Chase Debit",
        "BILT",
        "Cash",
        "Other",
    ]

    # Import API Settings
    IMPORT_API_URL: str = os.getenv("IMPORT_API_URL", "http://localhost:3000")
    IMPORT_API_TIMEOUT: float = float(os.getenv("IMPORT_API_TIMEOUT", "30"))

    # Logging Settings
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")
    LOG_FORMAT: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    LOG_DATE_FORMAT: str = "%Y-%m-%d %H:%M:%S"

    # API Settings
    API_HOST: str = os.getenv("API_HOST", "0.0.0.0")
    API_PORT: int = int(os.getenv("API_PORT", "8000"))

    @classmethod
    def ensure_directories(cls):
        """Ensure required directories exist."""
        cls.LOG_DIR.mkdir(parents=True, exist_ok=True)

    @classmethod
    def get_log_path(cls, filename: str) -> Path:
        """Get full path for log file."""
        cls.ensure_directories()
        return cls.LOG_DIR / filename

    @classmethod
    def validate_file(cls, filename: str, file_size: int) -> tuple[bool, Optional[str]]:
        """
        Validate uploaded screenshot.

        Returns:
            tuple: (is_valid, error_message)
        """
        # Check file type
        if not any(filename.lower().endswith(ext) for ext in cls.ALLOWED_FILE_TYPES):
            return False, f"Invalid file type. Allowed types: {', '.join(cls.ALLOWED_FILE_TYPES)}"

        # Check file size
        if file_size > cls.MAX_FILE_SIZE_BYTES:
            size_mb = file_size / (1024 * 1024)
            return False, f"File too large ({size_mb:.2f} MB). Maximum: {cls.MAX_FILE_SIZE_MB} MB"

        # Check if empty
        if file_size == 0:
            return False, "File is empty"

        return True, None

    @classmethod
    def to_dict(cls) -> dict:
        """Convert configuration to dictionary."""
        return {
            "app_name": cls.APP_NAME,
            "version": cls.VERSION,
            "max_file_size_mb": cls.MAX_FILE_SIZE_MB,
            "allowed_file_types": cls.ALLOWED_FILE_TYPES,
            "log_dir": str(cls.LOG_DIR),
            "upscale_factor": cls.UPSCALE_FACTOR,
            "contrast_factor": cls.CONTRAST_FACTOR,
            "ocr_language": cls.OCR_LANGUAGE,
            "balance_threshold": cls.BALANCE_THRESHOLD,
            "date_header_residual_max": cls.DATE_HEADER_RESIDUAL_MAX,
            "amount_only_residual_max": cls.AMOUNT_ONLY_RESIDUAL_MAX,
            "continuation_max_length": cls.CONTINUATION_MAX_LENGTH,
            "strict_mode": cls.STRICT_MODE,
            "allow_zero_amounts": cls.ALLOW_ZERO_AMOUNTS,
            "default_payment_method": cls.DEFAULT_PAYMENT_METHOD,
            "import_api_url": cls.IMPORT_API_URL,
            "log_level": cls.LOG_LEVEL,
        }


# Create a singleton instance
config = Config()
