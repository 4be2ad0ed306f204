"""
Transaction Validator Module
Validates reviewed transactions for correctness and completeness before import.
"""

import re
import logging
from datetime import datetime
from decimal import Decimal, InvalidOperation
from typing import Optional

from extractors.models import ParsedTransaction

logger = logging.getLogger(__name__)


class ValidationError(Exception):
    """Custom exception for validation errors."""
    pass


class TransactionValidator:
    """Validates transaction data after the user has reviewed and edited it."""

    def __init__(
        self,
        strict_mode: bool = False,
        allow_zero_amounts: bool = False,
        min_description_length: int = 3
    ):
        """
        Initialize validator with configurable settings.

        Args:
            strict_mode: If True, raise exceptions on invalid data.
                        If False, record the problem in the transaction's error field.
            allow_zero_amounts: If True, allow transactions with 0 amount.
            min_description_length: Minimum characters required in description.
        """
        self.strict_mode = strict_mode
        self.allow_zero_amounts = allow_zero_amounts
        self.min_description_length = min_description_length

        self.validation_stats = self._empty_stats()

    def validate_transaction(self, transaction: ParsedTransaction) -> bool:
        """
        Validate a single transaction and set its error field.

        Args:
            transaction: ParsedTransaction to validate

        Returns:
            True if valid, False if invalid

        Raises:
            ValidationError: If strict_mode is True and validation fails
        """
        self.validation_stats["total_validated"] += 1

        checks = (
            ("invalid_date", self._validate_date(transaction.date),
             f"Invalid date: {transaction.date}"),
            ("invalid_amount", self._validate_amount(transaction.amount),
             f"Invalid amount: {transaction.amount}"),
            ("invalid_description", self._validate_description(transaction.description),
             "Invalid description: empty, too short or only digits"),
            ("invalid_payment_method", bool(transaction.payment_method and transaction.payment_method.strip()),
             "Payment method is required"),
            ("invalid_period", self._validate_period(transaction.year, transaction.month, transaction.quarter),
             f"Invalid period: year={transaction.year}, month={transaction.month}, quarter={transaction.quarter}"),
        )

        for stat_key, passed, msg in checks:
            if passed:
                continue

            self.validation_stats[stat_key] += 1
            self.validation_stats["invalid"] += 1
            if self.strict_mode:
                raise ValidationError(msg)
            logger.warning(f"{msg} in transaction: {transaction}")
            transaction.error = msg
            return False

        transaction.error = None
        self.validation_stats["valid"] += 1
        return True

    def validate_transactions(self, transactions: list[ParsedTransaction]) -> list[ParsedTransaction]:
        """
        Validate a list of transactions.

        Every transaction gets its error field set or cleared.

        Args:
            transactions: List of ParsedTransaction objects

        Returns:
            List of valid transactions
        """
        valid_transactions = [txn for txn in transactions if self.validate_transaction(txn)]

        logger.info(
            f"Validation complete: {self.validation_stats['valid']} valid, "
            f"{self.validation_stats['invalid']} invalid out of "
            f"{self.validation_stats['total_validated']} total"
        )

        return valid_transactions

    def _validate_date(self, date_str: str) -> bool:
        """Date must be an ISO calendar date (YYYY-MM-DD)."""
        if not date_str or not isinstance(date_str, str):
            return False

        try:
            datetime.strptime(date_str, '%Y-%m-%d')
            return True
        except ValueError:
            return False

    def _validate_amount(self, amount) -> bool:
        """
        Validate amount with configurable settings.

        Must be:
        - A decimal number (string or numeric)
        - Non-zero (unless allow_zero_amounts is True)
        """
        if amount is None or isinstance(amount, bool):
            return False

        try:
            value = Decimal(str(amount).replace(',', '').strip())
        except InvalidOperation:
            return False

        if not value.is_finite():
            return False

        if value == 0:
            if not self.allow_zero_amounts:
                logger.debug("Amount is zero (rejected - allow_zero_amounts=False)")
                return False
            logger.debug("Amount is zero (accepted - allow_zero_amounts=True)")

        return True

    def _validate_description(self, description: str) -> bool:
        """
        Validate description with configurable minimum length.

        Must be:
        - Non-empty
        - At least min_description_length characters (configurable)
        - Not only digits
        """
        if not isinstance(description, str):
            return False

        text = description.strip()
        if len(text) < self.min_description_length:
            logger.debug(f"Description too short: '{description}' (min: {self.min_description_length})")
            return False

        return not re.fullmatch(r'[\d\s]+', text)

    @staticmethod
    def _validate_period(year: Optional[int], month: Optional[int], quarter: Optional[int]) -> bool:
        """Year is required; at most one of month (1-12) and quarter (1-4) is set."""
        if not isinstance(year, int) or not 1 <= year <= 9999:
            return False

        if month is not None and quarter is not None:
            return False

        if month is not None and not (isinstance(month, int) and 1 <= month <= 12):
            return False

        if quarter is not None and not (isinstance(quarter, int) and 1 <= quarter <= 4):
            return False

        return True

    @staticmethod
    def _empty_stats() -> dict:
        return {
            "total_validated": 0,
            "valid": 0,
            "invalid": 0,
            "invalid_date": 0,
            "invalid_amount": 0,
            "invalid_description": 0,
            "invalid_payment_method": 0,
            "invalid_period": 0,
        }

    def get_stats(self) -> dict:
        """Get validation statistics."""
        return self.validation_stats.copy()

    def reset_stats(self):
        """Reset validation statistics."""
        self.validation_stats = self._empty_stats()


def validate_transactions(
    transactions: list[ParsedTransaction],
    strict_mode: bool = False
) -> list[ParsedTransaction]:
    """
    Convenience function to validate a list of transactions.

    Args:
        transactions: List of ParsedTransaction objects
        strict_mode: If True, raise exceptions on invalid data

    Returns:
        List of valid transactions
    """
    validator = TransactionValidator(strict_mode=strict_mode)
    return validator.validate_transactions(transactions)
