"""
Validators Module - Reviewed transaction validation.
"""

from .transaction_validator import (
    TransactionValidator,
    validate_transactions,
    ValidationError
)

__all__ = [
    'TransactionValidator',
    'validate_transactions',
    'ValidationError',
]
