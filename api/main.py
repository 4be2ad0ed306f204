"""
FastAPI Backend for Screenshot Statement Extractor
RESTful API endpoints for extracting, validating and importing screenshot transactions
"""

from fastapi import FastAPI, File, UploadFile, Form, HTTPException, Depends
from fastapi.concurrency import run_in_threadpool
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel
from typing import List, Optional, Union
from pathlib import Path
from datetime import datetime
import logging
import sys

# Add backend to path
backend_path = Path(__file__).parent.parent / 'backend'
sys.path.insert(0, str(backend_path))

# Import backend modules
from config import config
from logging_config import setup_logging
from batch_processor import BatchOrchestrator, BatchProcessingError, UploadedImage
from extractors.models import ParsedTransaction, PeriodSpec
from ocr.ocr_engine import TesseractOCREngine
from output.import_writer import TransactionImportClient, ImportSubmissionError
from validators.transaction_validator import TransactionValidator

# Setup logging
setup_logging()
logger = logging.getLogger(__name__)

# Initialize FastAPI app
app = FastAPI(
    title="Screenshot Statement Extractor API",
    description="Extract candidate transactions from bank and credit-card statement screenshots",
    version=config.VERSION
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # Configure appropriately for production
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


class TransactionModel(BaseModel):
    """A candidate transaction as shown on the review screen."""
    id: str = ""
    date: Optional[str] = None
    amount: Union[str, float, int, None] = None
    description: str = ""
    category: Optional[str] = ""
    payment_method: Optional[str] = None
    paid_by: Optional[str] = None
    year: Optional[int] = None
    month: Optional[int] = None
    quarter: Optional[int] = None
    raw_text: Optional[str] = ""
    source_file: Optional[str] = None
    error: Optional[str] = None

    def to_transaction(self) -> ParsedTransaction:
        return ParsedTransaction.from_dict(self.model_dump())


class ImportRequest(BaseModel):
    transactions: List[TransactionModel]
    is_shared: Optional[bool] = None


def get_orchestrator() -> BatchOrchestrator:
    """Build the batch pipeline with the configured OCR engine."""
    return BatchOrchestrator(ocr_engine=TesseractOCREngine())


def get_validator() -> TransactionValidator:
    return TransactionValidator(
        strict_mode=False,
        allow_zero_amounts=config.ALLOW_ZERO_AMOUNTS,
        min_description_length=config.MIN_DESCRIPTION_LENGTH
    )


def get_import_client() -> TransactionImportClient:
    return TransactionImportClient()


@app.get("/")
async def root():
    """Root endpoint - API information"""
    return {
        "message": "Screenshot Statement Extractor API",
        "version": config.VERSION,
        "endpoints": {
            "POST /extract": "Extract candidate transactions from screenshots",
            "POST /validate": "Validate reviewed transactions",
            "POST /import": "Validate and forward transactions to the import API",
            "GET /health": "Health check"
        }
    }


@app.get("/health")
async def health_check():
    """Health check endpoint"""
    return {
        "status": "healthy",
        "timestamp": datetime.now().isoformat(),
        "config": config.to_dict()
    }


@app.post("/extract")
async def extract_transactions(
    files: List[UploadFile] = File(..., description="One or more statement screenshots"),
    year: int = Form(..., description="Statement year"),
    period_type: str = Form("month", description="month, quarter or year"),
    period_value: Optional[int] = Form(None, description="Month (1-12) or quarter (1-4)"),
    payment_method: Optional[str] = Form(None, description="Payment method for every transaction"),
    orchestrator: BatchOrchestrator = Depends(get_orchestrator)
):
    """
    Extract candidate transactions from statement screenshots.

    - **files**: PNG, JPEG or WEBP screenshots, processed in upload order
    - **year**: Statement year, also used for dates printed without a year
    - **period_type** / **period_value**: Period every transaction is filed under
    - **payment_method**: Optional payment method override

    Returns transactions, per-file warnings and the raw OCR text of each file.
    """
    if not files:
        raise HTTPException(status_code=400, detail="At least one screenshot is required")

    try:
        period = PeriodSpec(period_type, period_value)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    uploads = []
    for idx, uploaded_file in enumerate(files, 1):
        content = await uploaded_file.read()
        uploads.append(UploadedImage(filename=uploaded_file.filename or f"upload-{idx}", data=content))

    logger.info(f"Extracting transactions from {len(uploads)} screenshot(s)")

    try:
        result = await run_in_threadpool(
            orchestrator.process, uploads, year, period, payment_method or None
        )
    except BatchProcessingError as e:
        logger.warning(f"Batch produced no transactions: {e}")
        raise HTTPException(status_code=422, detail={"message": str(e), "warnings": e.warnings})
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.error(f"Error extracting transactions: {str(e)}", exc_info=True)
        raise HTTPException(status_code=500, detail=f"Internal server error: {str(e)}")

    return {
        "status": "success",
        "year": year,
        "period": period.to_dict(),
        **result.to_dict()
    }


@app.post("/validate")
async def validate_reviewed_transactions(
    transactions: List[TransactionModel],
    validator: TransactionValidator = Depends(get_validator)
):
    """
    Validate reviewed transactions.

    Returns the same transactions with their error field set or cleared.
    """
    parsed = [txn.to_transaction() for txn in transactions]
    valid = validator.validate_transactions(parsed)

    return {
        "transactions": [txn.to_dict() for txn in parsed],
        "valid_count": len(valid),
        "invalid_count": len(parsed) - len(valid)
    }


@app.post("/import")
async def import_transactions(
    request: ImportRequest,
    validator: TransactionValidator = Depends(get_validator),
    client: TransactionImportClient = Depends(get_import_client)
):
    """
    Validate reviewed transactions and forward them to the import API.

    Nothing is forwarded if any transaction is invalid.
    """
    if not request.transactions:
        raise HTTPException(status_code=400, detail="No transactions provided")

    parsed = [txn.to_transaction() for txn in request.transactions]
    valid = validator.validate_transactions(parsed)

    if len(valid) != len(parsed):
        raise HTTPException(
            status_code=400,
            detail={
                "message": f"{len(parsed) - len(valid)} transaction(s) failed validation",
                "transactions": [txn.to_dict() for txn in parsed]
            }
        )

    try:
        count = await run_in_threadpool(client.submit, parsed, request.is_shared)
    except ImportSubmissionError as e:
        logger.error(f"Import failed: {e}")
        raise HTTPException(status_code=502, detail=str(e))

    return {
        "status": "success",
        "message": f"Successfully imported {count} transactions",
        "count": count
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host=config.API_HOST, port=config.API_PORT)
