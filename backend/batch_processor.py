"""
Screenshot Statement Extractor - Batch Pipeline
Orchestrates preprocessing, OCR and transaction assembly for a batch of uploaded screenshots.
"""

import logging
from dataclasses import dataclass, field
from datetime import date as calendar_date
from typing import Callable, Optional

from config import config
from extractors.assembler import TransactionAssembler
from extractors.models import ParsedTransaction, PeriodSpec
from extractors.statement_rules import ParserConfig
from loaders.image_loader import load_image, ImageLoadError
from ocr.ocr_engine import OCREngine, OCRError
from preprocessing.image_preprocessor import ImagePreprocessor

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[int, int, str], None]


class BatchProcessingError(Exception):
    """Raised when no file in a batch produced any transaction."""

    def __init__(self, message: str, warnings: Optional[list[str]] = None):
        super().__init__(message)
        self.warnings = list(warnings or [])


@dataclass
class UploadedImage:
    """One uploaded screenshot."""
    filename: str
    data: bytes


@dataclass
class BatchResult:
    """Everything one batch run produced."""
    transactions: list[ParsedTransaction] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    raw_texts: dict[str, str] = field(default_factory=dict)
    files_processed: int = 0
    files_failed: int = 0
    cancelled: bool = False

    def to_dict(self) -> dict:
        return {
            "transactions": [txn.to_dict() for txn in self.transactions],
            "warnings": list(self.warnings),
            "raw_texts": dict(self.raw_texts),
            "summary": {
                "files_processed": self.files_processed,
                "files_failed": self.files_failed,
                "transactions_found": len(self.transactions),
                "cancelled": self.cancelled,
            },
        }


class BatchOrchestrator:
    """Main orchestrator for the screenshot extraction pipeline."""

    def __init__(
        self,
        ocr_engine: OCREngine,
        preprocessor: Optional[ImagePreprocessor] = None,
        parser_config: Optional[ParserConfig] = None,
        today: Optional[Callable[[], calendar_date]] = None
    ):
        """
        Initialize orchestrator.

        Args:
            ocr_engine: Text recognition collaborator
            preprocessor: Image enhancement step (configured defaults if omitted)
            parser_config: Parser keyword lists and thresholds
            today: Clock injected into the assembler's date fallback
        """
        self.ocr_engine = ocr_engine
        self.preprocessor = preprocessor or ImagePreprocessor()
        self.parser_config = parser_config or ParserConfig.from_config()
        self.today = today
        self.stats = self._empty_stats()

    def _validate_inputs(self, files: list[UploadedImage], year: int, period: PeriodSpec):
        """Validate all input parameters."""
        if not files:
            raise ValueError("At least one screenshot is required")

        if not isinstance(year, int) or not 1 <= year <= 9999:
            raise ValueError(f"year must be a four-digit year, got {year}")

        if not isinstance(period, PeriodSpec):
            raise ValueError("period must be a PeriodSpec")

        logger.info("Input validation passed")

    def process(
        self,
        files: list[UploadedImage],
        year: int,
        period: PeriodSpec,
        payment_method: Optional[str] = None,
        progress_callback: Optional[ProgressCallback] = None,
        should_cancel: Optional[Callable[[], bool]] = None
    ) -> BatchResult:
        """
        Process a batch of screenshots, strictly one file at a time.

        Args:
            files: Uploaded screenshots in processing order
            year: Statement year
            period: Month/quarter/year every transaction is filed under
            payment_method: Payment method applied to every transaction
            progress_callback: Called as (file_number, total_files, filename) before each file
            should_cancel: Checked between files; True stops the batch

        Returns:
            BatchResult with transactions, per-file warnings and raw OCR text

        Raises:
            ValueError: If inputs are invalid
            BatchProcessingError: If no file produced any transaction
        """
        self._validate_inputs(files, year, period)
        self.stats = self._empty_stats()

        logger.info("=" * 80)
        logger.info(f"Starting screenshot batch: {len(files)} file(s), year {year}, {period}")
        logger.info("=" * 80)

        result = BatchResult()
        assembler = TransactionAssembler(
            year=year,
            period=period,
            payment_method=payment_method,
            parser_config=self.parser_config,
            today=self.today,
        )

        for idx, upload in enumerate(files, 1):
            if should_cancel is not None and should_cancel():
                logger.info(f"Batch cancelled before file {idx}/{len(files)}")
                result.cancelled = True
                break

            if progress_callback is not None:
                progress_callback(idx, len(files), upload.filename)

            logger.info(f"Processing screenshot {idx}/{len(files)}: {upload.filename}")
            try:
                transactions, raw_text = self.process_file(upload, assembler)
            except (ImageLoadError, OCRError, ValueError) as e:
                logger.error(f"Failed to process {upload.filename}: {e}")
                result.warnings.append(f"{upload.filename}: {e}")
                result.files_failed += 1
                continue
            except Exception as e:
                logger.error(f"Unexpected error processing {upload.filename}: {e}", exc_info=True)
                result.warnings.append(f"{upload.filename}: unexpected error: {e}")
                result.files_failed += 1
                continue

            result.raw_texts[upload.filename] = raw_text
            result.files_processed += 1

            if not transactions:
                logger.warning(f"No transactions found in {upload.filename}")
                result.warnings.append(f"{upload.filename}: no transactions found")
                continue

            result.transactions.extend(transactions)

        self.stats["files_processed"] = result.files_processed
        self.stats["files_failed"] = result.files_failed
        self.stats["transactions_found"] = len(result.transactions)

        if not result.transactions and not result.cancelled:
            logger.error(f"No transactions extracted from any of {len(files)} file(s)")
            raise BatchProcessingError(
                f"No transactions could be extracted from {len(files)} file(s): " + "; ".join(result.warnings),
                warnings=result.warnings,
            )

        self._print_summary()
        return result

    def process_file(
        self,
        upload: UploadedImage,
        assembler: TransactionAssembler
    ) -> tuple[list[ParsedTransaction], str]:
        """
        Run one screenshot through load, preprocess, OCR and assembly.

        Args:
            upload: Uploaded screenshot
            assembler: Assembler holding the batch's period context

        Returns:
            Tuple of (transactions tagged with the source file, raw OCR text)

        Raises:
            ValueError: If the file fails type/size checks
            ImageLoadError: If the image cannot be decoded
            OCRError: If text recognition fails
        """
        is_valid, error = config.validate_file(upload.filename, len(upload.data))
        if not is_valid:
            raise ValueError(error)

        image = load_image(upload.data, upload.filename)
        processed = self.preprocessor.preprocess(image)
        raw_text = self.ocr_engine.recognize(processed)
        logger.debug(f"OCR text for {upload.filename}:\n{raw_text}")

        transactions = assembler.assemble(raw_text)
        for txn in transactions:
            txn.id = f"{upload.filename}-{txn.id}"
            txn.source_file = upload.filename

        logger.info(f"{upload.filename}: {len(transactions)} transaction(s) extracted")
        return transactions, raw_text

    @staticmethod
    def _empty_stats() -> dict:
        return {
            "files_processed": 0,
            "files_failed": 0,
            "transactions_found": 0,
        }

    def _print_summary(self):
        """Log batch summary."""
        logger.info("=" * 80)
        logger.info("BATCH SUMMARY")
        logger.info(f"Files processed:        {self.stats['files_processed']}")
        logger.info(f"Files failed:           {self.stats['files_failed']}")
        logger.info(f"Transactions extracted: {self.stats['transactions_found']}")
        logger.info("=" * 80)
