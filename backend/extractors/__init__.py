"""
Extractors Module - Date/amount parsing, line classification and transaction assembly.
"""

from .models import (
    ParsedTransaction,
    PeriodSpec
)

from .statement_rules import (
    ParserConfig,
    is_header_phrase
)

from .token_parsers import (
    DateParser,
    AmountParser,
    parse_date,
    parse_amount
)

from .scan_state import (
    ScanPhase,
    ParserState,
    LineCursor
)

from .line_classifier import (
    LineTag,
    LineTokens,
    LineClassifier
)

from .assembler import (
    DescriptionCleaner,
    TransactionAssembler,
    clean_description,
    extract_transactions_from_text
)

__all__ = [
    'ParsedTransaction',
    'PeriodSpec',
    'ParserConfig',
    'is_header_phrase',
    'DateParser',
    'AmountParser',
    'parse_date',
    'parse_amount',
    'ScanPhase',
    'ParserState',
    'LineCursor',
    'LineTag',
    'LineTokens',
    'LineClassifier',
    'DescriptionCleaner',
    'TransactionAssembler',
    'clean_description',
    'extract_transactions_from_text',
]
