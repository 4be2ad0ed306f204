"""
Token Parsers Module
Extracts calendar dates and signed money amounts from single OCR text fragments.
"""

import re
import logging
from datetime import date
from decimal import Decimal, InvalidOperation, ROUND_DOWN
from typing import Optional

from .statement_rules import ParserConfig

logger = logging.getLogger(__name__)


class DateParser:
    """
    Extracts a calendar date from a text fragment.

    Patterns are tried in priority order; the first one that both matches and
    forms a valid calendar date wins:
    1. M/D/YYYY or MM/DD/YYYY
    2. Abbreviated month + day + year (e.g. "Sun, Dec 7, 2025")
    3. Abbreviated month + day, year taken from the default year
    4. Full month + day + year
    5. Full month + day, year taken from the default year
    """

    NUMERIC_PATTERN = re.compile(r'\b(\d{1,2})/(\d{1,2})/(\d{4})\b')

    def __init__(self, parser_config: Optional[ParserConfig] = None):
        self.parser_config = parser_config or ParserConfig()

        abbrevs = '|'.join(self.parser_config.month_abbreviations)
        full_names = '|'.join(self.parser_config.month_names)
        weekdays = '|'.join(self.parser_config.weekday_abbreviations)
        weekday_prefix = rf'(?:(?:{weekdays}),?\s+)?'

        self._abbrev_months = {
            name.lower(): index for index, name in enumerate(self.parser_config.month_abbreviations, 1)
        }
        self._full_months = {
            name.lower(): index for index, name in enumerate(self.parser_config.month_names, 1)
        }

        self.abbrev_with_year = re.compile(
            rf'\b{weekday_prefix}({abbrevs})\s+(\d{{1,2}}),?\s+(\d{{4}})\b', re.IGNORECASE
        )
        self.abbrev_no_year = re.compile(
            rf'(?:^|\s){weekday_prefix}({abbrevs})\s+(\d{{1,2}})\b', re.IGNORECASE
        )
        self.full_with_year = re.compile(
            rf'\b({full_names})\s+(\d{{1,2}}),?\s+(\d{{4}})\b', re.IGNORECASE
        )
        self.full_no_year = re.compile(
            rf'\b({full_names})\s+(\d{{1,2}})\b', re.IGNORECASE
        )

        # Date-shaped substrings, including month words OCR extended ("Sept", "December")
        self.strip_patterns = [
            self.NUMERIC_PATTERN,
            re.compile(
                rf'(?:\b(?:{weekdays}),?\s+)?\b(?:{abbrevs})[a-z]*\.?\s+\d{{1,2}}(?:,?\s+\d{{4}})?\b',
                re.IGNORECASE
            ),
            re.compile(rf'\b(?:{full_names})\s+\d{{1,2}}(?:,?\s+\d{{4}})?\b', re.IGNORECASE),
        ]

    def parse(self, text: str, default_year: int) -> Optional[str]:
        """
        Parse the first date found in a text fragment.

        Args:
            text: OCR text fragment
            default_year: Year used when the fragment carries no year

        Returns:
            ISO date string (YYYY-MM-DD) or None if no valid date is found
        """
        if not text:
            return None

        match = self.NUMERIC_PATTERN.search(text)
        if match:
            month, day, year = (int(group) for group in match.groups())
            parsed = self._build_date(year, month, day)
            if parsed:
                return parsed

        match = self.abbrev_with_year.search(text)
        if match:
            parsed = self._build_date(
                int(match.group(3)), self._abbrev_months[match.group(1).lower()], int(match.group(2))
            )
            if parsed:
                return parsed

        match = self.abbrev_no_year.search(text)
        if match:
            parsed = self._build_day_of_year(
                default_year, self._abbrev_months[match.group(1).lower()], int(match.group(2))
            )
            if parsed:
                return parsed

        match = self.full_with_year.search(text)
        if match:
            parsed = self._build_date(
                int(match.group(3)), self._full_months[match.group(1).lower()], int(match.group(2))
            )
            if parsed:
                return parsed

        match = self.full_no_year.search(text)
        if match:
            parsed = self._build_day_of_year(
                default_year, self._full_months[match.group(1).lower()], int(match.group(2))
            )
            if parsed:
                return parsed

        return None

    def strip_dates(self, text: str) -> str:
        """Remove every date-shaped substring from a text fragment."""
        for pattern in self.strip_patterns:
            text = pattern.sub('', text)
        return text

    def _build_day_of_year(self, year: int, month: int, day: int) -> Optional[str]:
        """Build a date for a year-less match; day must be 1-31."""
        if not 1 <= day <= 31:
            return None
        return self._build_date(year, month, day)

    @staticmethod
    def _build_date(year: int, month: int, day: int) -> Optional[str]:
        try:
            return date(year, month, day).isoformat()
        except ValueError:
            logger.debug(f"Rejected invalid calendar date: {year}-{month}-{day}")
            return None


class AmountParser:
    """
    Extracts a signed monetary value from a text fragment.

    An amount needs either a "$" sign or a decimal point with at least two
    digits, so day numbers such as the "7" in "Dec 7" are never captured.
    """

    DOLLAR_PATTERN = re.compile(r'(-)?\$((?:\d{1,3}(?:,\d{3})+|\d+)(?:\.\d{2})?)')
    DECIMAL_PATTERN = re.compile(r'(-)?(?<![\d,.])((?:\d{1,3}(?:,\d{3})+|\d+)\.\d{2,})(?!\.?\d)')

    def parse(self, text: str) -> Optional[str]:
        """
        Parse the first amount found in a text fragment.

        Args:
            text: OCR text fragment

        Returns:
            Signed decimal string with two decimals (e.g. "-45.00") or None
        """
        if not text:
            return None

        for pattern in (self.DOLLAR_PATTERN, self.DECIMAL_PATTERN):
            match = pattern.search(text)
            if match:
                amount = self.normalize(match.group(2), negative=bool(match.group(1)))
                if amount is not None:
                    return amount

        return None

    def strip_amounts(self, text: str) -> str:
        """Remove every amount-shaped substring from a text fragment."""
        text = self.DOLLAR_PATTERN.sub('', text)
        return self.DECIMAL_PATTERN.sub('', text)

    @staticmethod
    def normalize(amount_str: str, negative: bool = False) -> Optional[str]:
        """
        Strip thousands separators and cut to two decimals without rounding.

        Args:
            amount_str: Unsigned amount text, e.g. "1,234.56"
            negative: Whether a leading minus was captured

        Returns:
            Signed decimal string or None if the text is not a number
        """
        try:
            value = Decimal(amount_str.replace(',', ''))
        except InvalidOperation:
            logger.warning(f"Cannot parse amount '{amount_str}'")
            return None

        formatted = f"{value.quantize(Decimal('0.01'), rounding=ROUND_DOWN):.2f}"
        return f"-{formatted}" if negative else formatted


_default_date_parser = DateParser()
_default_amount_parser = AmountParser()


def parse_date(text: str, default_year: int) -> Optional[str]:
    """
    Convenience function to parse a date with the default month names.

    Args:
        text: OCR text fragment
        default_year: Year used when the fragment carries no year

    Returns:
        ISO date string or None
    """
    return _default_date_parser.parse(text, default_year)


def parse_amount(text: str) -> Optional[str]:
    """
    Convenience function to parse an amount.

    Args:
        text: OCR text fragment

    Returns:
        Signed decimal string or None
    """
    return _default_amount_parser.parse(text)
