"""
Output Module - Import payload building and submission.
"""

from .import_writer import (
    TransactionImportClient,
    ImportSubmissionError,
    build_import_record,
    build_import_payload
)

__all__ = [
    'TransactionImportClient',
    'ImportSubmissionError',
    'build_import_record',
    'build_import_payload',
]
