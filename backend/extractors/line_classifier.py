"""
Line Classifier Module
Tokenizes OCR lines once and tags each one for the transaction assembler.
"""

import re
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from .scan_state import ParserState
from .statement_rules import ParserConfig, is_header_phrase
from .token_parsers import AmountParser, DateParser

logger = logging.getLogger(__name__)


class LineTag(Enum):
    """Line classification enumeration."""
    BLANK = "blank"
    HEADER = "header"
    PENDING_MARKER = "pending_marker"
    DATE_HEADER = "date_header"
    AMOUNT_ONLY = "amount_only"
    DATE_AND_AMOUNT = "date_and_amount"
    CONTINUATION_CANDIDATE = "continuation_candidate"
    PLAIN_TEXT = "plain_text"


@dataclass(frozen=True)
class LineTokens:
    """Everything the parser needs to know about one line, computed once."""
    text: str
    date: Optional[str] = None
    amount: Optional[str] = None
    is_header: bool = False
    pending_amount: Optional[str] = None
    is_continuation: bool = False
    date_residual: int = 0
    amount_residual: int = 0

    @property
    def is_blank(self) -> bool:
        return not self.text


class LineClassifier:
    """
    Tags statement lines as headers, date headers, pending markers, amount-only
    lines, transaction heads, continuation candidates or plain text.
    """

    PENDING_PATTERN = re.compile(
        r'pending\s+(-)?\$?((?:\d{1,3}(?:,\d{3})+|\d+)(?:\.\d{2})?)', re.IGNORECASE
    )
    PHONE_PATTERN = re.compile(r'^[\d\s\-().+]+$')
    LOCATION_CODE_PATTERN = re.compile(r'^[A-Z]{2}$')
    LOCATION_NAME_PATTERN = re.compile(r'^[A-Z][A-Z\s]+$')

    def __init__(
        self,
        parser_config: Optional[ParserConfig] = None,
        date_parser: Optional[DateParser] = None,
        amount_parser: Optional[AmountParser] = None
    ):
        self.parser_config = parser_config or ParserConfig()
        self.date_parser = date_parser or DateParser(self.parser_config)
        self.amount_parser = amount_parser or AmountParser()
        self.header_patterns = [re.compile(p) for p in self.parser_config.header_patterns]
        self.url_pattern = re.compile(self.parser_config.url_pattern, re.IGNORECASE)

    def tokenize(self, line: str, default_year: int) -> LineTokens:
        """
        Run every matcher against a line once.

        Args:
            line: Raw OCR line
            default_year: Year for dates printed without one

        Returns:
            LineTokens for the stripped line
        """
        text = line.strip()
        if not text:
            return LineTokens(text="")

        date = self.date_parser.parse(text, default_year)
        amount = self.amount_parser.parse(text)

        pending_amount = None
        pending_match = self.PENDING_PATTERN.search(text)
        if pending_match:
            pending_amount = self.amount_parser.normalize(
                pending_match.group(2), negative=bool(pending_match.group(1))
            )
            logger.debug(f"Pending marker found: {pending_amount}")

        return LineTokens(
            text=text,
            date=date,
            amount=amount,
            is_header=self.is_header(text),
            pending_amount=pending_amount,
            is_continuation=self.is_continuation(text),
            date_residual=len(self._date_residual(text)) if date else 0,
            amount_residual=len(self.amount_parser.strip_amounts(text).strip()) if amount else 0,
        )

    def classify(self, tokens: LineTokens, state: ParserState) -> LineTag:
        """
        Tag a tokenized line against the current parser state. First match wins.

        Args:
            tokens: Tokens for the line
            state: Current parser state

        Returns:
            LineTag for the line
        """
        if tokens.is_blank:
            return LineTag.BLANK

        if tokens.is_header:
            return LineTag.HEADER

        if tokens.pending_amount is not None:
            return LineTag.PENDING_MARKER

        if (tokens.date and not tokens.amount
                and tokens.date_residual < self.parser_config.date_header_residual_max):
            return LineTag.DATE_HEADER

        if (state.current_date and not tokens.date and tokens.amount
                and tokens.amount_residual < self.parser_config.amount_only_residual_max):
            return LineTag.AMOUNT_ONLY

        if tokens.date and tokens.amount:
            return LineTag.DATE_AND_AMOUNT

        if not tokens.date and not tokens.amount and tokens.is_continuation:
            return LineTag.CONTINUATION_CANDIDATE

        return LineTag.PLAIN_TEXT

    def is_header(self, line: str) -> bool:
        """Check if a line is statement chrome (navigation, totals, legal text, clock)."""
        if is_header_phrase(line, self.parser_config):
            return True
        return any(pattern.search(line.strip().lower()) for pattern in self.header_patterns)

    def is_continuation(self, line: str) -> bool:
        """
        Check if a line looks like part of the previous merchant entry.

        Phone numbers, URLs/domains and short location codes ("CA", "SAN JOSE")
        belong to the merchant above them.
        """
        text = line.strip()
        if not text:
            return False

        digits = re.sub(r'\D', '', text)
        if self.PHONE_PATTERN.match(text) and len(digits) >= self.parser_config.phone_min_digits:
            return True

        if self.url_pattern.search(text):
            return True

        if self.LOCATION_CODE_PATTERN.match(text):
            return True

        if len(text) < self.parser_config.location_max_length and self.LOCATION_NAME_PATTERN.match(text):
            return True

        return False

    def is_description_continuation(self, tokens: LineTokens) -> bool:
        """
        Check if a line extends the description being collected.

        Blank, header, date and amount lines always end the description.
        """
        if tokens.is_blank or tokens.is_header or tokens.date or tokens.amount:
            return False
        return tokens.is_continuation or len(tokens.text) < self.parser_config.continuation_max_length

    def _date_residual(self, text: str) -> str:
        """Text left on a line once dates, colons and punctuation are removed."""
        residual = self.date_parser.strip_dates(text)
        residual = residual.replace(':', '').strip()
        return re.sub(r'[^\w\s]', '', residual)
