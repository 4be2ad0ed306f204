"""
Import Writer Module
Builds the transaction import payload and submits it to the finance app's import API.
"""

import logging
from typing import Optional

import requests

from config import config
from extractors.models import ParsedTransaction

logger = logging.getLogger(__name__)

IMPORT_PATH = "/api/transactions/import"


class ImportSubmissionError(Exception):
    """Raised when the import API rejects or cannot receive a payload."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


def build_import_record(transaction: ParsedTransaction) -> dict:
    """
    Convert one reviewed transaction to the import API's record shape.

    Category is sent as a free-text name (None when blank). Only one of
    month/quarter is included, matching the batch period.
    """
    record = {
        "date": transaction.date or None,
        "amount": transaction.amount,
        "description": transaction.description,
        "category": transaction.category or None,
        "payment_method": transaction.payment_method or config.DEFAULT_PAYMENT_METHOD,
        "paid_by": transaction.paid_by or None,
        "year": transaction.year,
    }

    if transaction.month is not None:
        record["month"] = transaction.month
    if transaction.quarter is not None:
        record["quarter"] = transaction.quarter

    return record


def build_import_payload(transactions: list[ParsedTransaction], is_shared: Optional[bool] = None) -> dict:
    """
    Build the import request body.

    Args:
        transactions: Reviewed transactions in display order
        is_shared: Optional sharing flag forwarded to the import API

    Returns:
        Request body {"transactions": [...]}
    """
    payload = {"transactions": [build_import_record(txn) for txn in transactions]}
    if is_shared is not None:
        payload["is_shared"] = is_shared
    return payload


class TransactionImportClient:
    """HTTP client for the transaction import endpoint."""

    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        session: Optional[requests.Session] = None,
        headers: Optional[dict] = None
    ):
        """
        Initialize import client.

        Args:
            base_url: Finance app base URL (default from config)
            timeout: Request timeout in seconds (default from config)
            session: requests session, e.g. one carrying auth cookies
            headers: Extra headers sent with every request
        """
        self.base_url = (base_url or config.IMPORT_API_URL).rstrip("/")
        self.timeout = timeout if timeout is not None else config.IMPORT_API_TIMEOUT
        self.session = session or requests.Session()
        self.headers = headers or {}

    @property
    def import_url(self) -> str:
        return f"{self.base_url}{IMPORT_PATH}"

    def submit(self, transactions: list[ParsedTransaction], is_shared: Optional[bool] = None) -> int:
        """
        Submit reviewed transactions.

        Args:
            transactions: Transactions to import
            is_shared: Optional sharing flag

        Returns:
            Number of transactions the import API reports as imported

        Raises:
            ImportSubmissionError: On network failure or a non-2xx response
        """
        if not transactions:
            raise ImportSubmissionError("No transactions provided")

        payload = build_import_payload(transactions, is_shared=is_shared)
        logger.info(f"Submitting {len(transactions)} transactions to {self.import_url}")

        try:
            response = self.session.post(
                self.import_url,
                json=payload,
                headers=self.headers,
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            logger.error(f"Import request failed: {e}", exc_info=True)
            raise ImportSubmissionError(f"Could not reach import API at {self.import_url}: {e}") from e

        if not response.ok:
            message = self._error_message(response)
            logger.error(f"Import API rejected payload ({response.status_code}): {message}")
            raise ImportSubmissionError(message, status_code=response.status_code)

        try:
            data = response.json()
        except ValueError:
            data = {}

        count = data.get("count", len(transactions))
        logger.info(f"Import API accepted {count} transactions")
        return count

    @staticmethod
    def _error_message(response: requests.Response) -> str:
        """Prefer the server's error field, fall back to the status code."""
        try:
            data = response.json()
        except ValueError:
            data = {}

        if isinstance(data, dict) and data.get("error"):
            return str(data["error"])
        return f"Failed to import transactions ({response.status_code})"
