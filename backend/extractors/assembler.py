"""
Transaction Assembler Module
Turns the OCR text of one statement screenshot into candidate transactions.
Handles date headers, pending amounts, running balances and multi-line merchant entries.
"""

import re
import logging
from datetime import date as calendar_date
from decimal import Decimal
from typing import Callable, Optional

from .line_classifier import LineClassifier, LineTag, LineTokens
from .models import ParsedTransaction, PeriodSpec
from .scan_state import LineCursor, ParserState
from .statement_rules import ParserConfig

logger = logging.getLogger(__name__)


class DescriptionCleaner:
    """Removes OCR artifacts and UI glyphs from merchant descriptions."""

    def __init__(self, parser_config: Optional[ParserConfig] = None):
        self.parser_config = parser_config or ParserConfig()
        self.noise_patterns = [
            re.compile(pattern, re.IGNORECASE) for pattern in self.parser_config.ui_noise_patterns
        ]
        self.prefix_pattern = re.compile(self.parser_config.decorative_prefix_pattern)
        self.glyph_pattern = re.compile(
            f"[{re.escape(self.parser_config.checkmark_characters + self.parser_config.arrow_characters)}]"
        )

    def clean(self, description: str) -> str:
        """
        Clean a raw description.

        Args:
            description: Description text as collected from OCR lines

        Returns:
            Cleaned description (may be empty)
        """
        text = description.strip()
        for pattern in self.noise_patterns:
            text = pattern.sub('', text)
        text = self.prefix_pattern.sub('', text.strip())
        text = self.glyph_pattern.sub('', text)
        text = re.sub(r'\s+', ' ', text)
        return text.strip()

    def is_acceptable(self, description: str) -> bool:
        """A cleaned description must be long enough and not just digits."""
        if len(description) < self.parser_config.min_description_length:
            return False
        if re.fullmatch(r'[\d\s]+', description):
            return False
        return description.lower() != 'pending'


class TransactionAssembler:
    """
    Stateful scan over classified lines.

    Each line tag maps to one transition handler. Handlers read and update the
    ParserState and may consume further lines through the LineCursor when a
    transaction head is followed by its merchant and continuation lines.
    """

    def __init__(
        self,
        year: int,
        period: Optional[PeriodSpec] = None,
        payment_method: Optional[str] = None,
        parser_config: Optional[ParserConfig] = None,
        classifier: Optional[LineClassifier] = None,
        today: Optional[Callable[[], calendar_date]] = None
    ):
        """
        Initialize assembler for one batch's period context.

        Args:
            year: Statement year, also used for dates printed without a year
            period: Month/quarter/year the transactions are filed under
            payment_method: Payment method stamped on every transaction
            parser_config: Keyword lists and thresholds
            classifier: Line classifier (built from parser_config if omitted)
            today: Clock used when a transaction has no date context at all
        """
        self.year = year
        self.period = period
        self.parser_config = parser_config or ParserConfig()
        self.payment_method = payment_method or self.parser_config.default_payment_method
        self.classifier = classifier or LineClassifier(self.parser_config)
        self.cleaner = DescriptionCleaner(self.parser_config)
        self.today = today or calendar_date.today

        self.transitions = {
            LineTag.BLANK: self._skip_line,
            LineTag.HEADER: self._on_header,
            LineTag.PENDING_MARKER: self._on_pending_marker,
            LineTag.DATE_HEADER: self._on_date_header,
            LineTag.AMOUNT_ONLY: self._on_amount_only,
            LineTag.DATE_AND_AMOUNT: self._on_date_and_amount,
            LineTag.CONTINUATION_CANDIDATE: self._on_text,
            LineTag.PLAIN_TEXT: self._on_text,
        }

        self.transactions: list[ParsedTransaction] = []
        self._today_iso = ""
        self.stats = self._empty_stats()

    def assemble(self, text: str) -> list[ParsedTransaction]:
        """
        Extract all candidate transactions from one screenshot's OCR text.

        Args:
            text: Plain OCR text

        Returns:
            List of ParsedTransaction objects in statement order
        """
        self.transactions = []
        self.stats = self._empty_stats()
        self._today_iso = self.today().isoformat()

        if not text or not text.strip():
            logger.warning("Empty OCR text provided for extraction")
            return []

        lines = text.splitlines()
        tokens = [self.classifier.tokenize(line, self.year) for line in lines]
        first_date = next((t.date for t in tokens if t.date), None)

        state = ParserState(first_date=first_date)
        cursor = LineCursor(tokens)
        logger.info(f"Starting extraction from {len(lines)} lines (first date: {first_date})")

        while cursor.has_next():
            line_num = cursor.position + 1
            current = cursor.advance()
            self.stats["lines_processed"] += 1
            try:
                tag = self.classifier.classify(current, state)
                logger.debug(f"Line {line_num} [{tag.name}] {state.phase.name}: {current.text[:60]}")
                self.transitions[tag](current, cursor, state)
            except Exception as e:
                logger.error(f"Error processing line {line_num}: {e}")
                logger.debug(f"Problematic line: {current.text[:100]}...")
                continue

        logger.info(
            f"Extraction complete: {self.stats['transactions_found']} transactions found, "
            f"{self.stats['continuation_merges']} continuation lines merged, "
            f"{self.stats['balances_discarded']} balances discarded"
        )

        if not self.transactions:
            logger.warning(f"No transactions found in {len(lines)} lines")

        return self.transactions

    def _skip_line(self, tokens: LineTokens, cursor: LineCursor, state: ParserState):
        pass

    def _on_header(self, tokens: LineTokens, cursor: LineCursor, state: ParserState):
        """Headers never produce transactions but may supply the first date context."""
        self.stats["headers_skipped"] += 1
        state.harvest_date(tokens.date)

    def _on_pending_marker(self, tokens: LineTokens, cursor: LineCursor, state: ParserState):
        """Pending entries carry no date of their own; the merchant line follows."""
        state.set_pending(tokens.pending_amount, clear_date=True)

    def _on_date_header(self, tokens: LineTokens, cursor: LineCursor, state: ParserState):
        state.set_date(tokens.date)

    def _on_amount_only(self, tokens: LineTokens, cursor: LineCursor, state: ParserState):
        """Date header, then a bare amount line, then the merchant line."""
        state.set_pending(tokens.amount)

    def _on_date_and_amount(self, tokens: LineTokens, cursor: LineCursor, state: ParserState):
        """
        Transaction head: the merchant is on the next line.
        An amount on the merchant line is the running balance and is dropped.
        """
        state.set_date(tokens.date)

        offset = 0
        while cursor.peek(offset) is not None and cursor.peek(offset).is_blank:
            offset += 1
        merchant = cursor.peek(offset)

        if merchant is None:
            logger.debug(f"Transaction head at end of text has no merchant line: {tokens.text}")
            return

        if merchant.is_header or merchant.date or merchant.pending_amount is not None:
            logger.debug(f"Transaction head without merchant line: {tokens.text}")
            return

        for _ in range(offset + 1):
            cursor.advance()

        raw_lines = [tokens.text, merchant.text]
        description = merchant.text
        if merchant.amount:
            description = self.classifier.amount_parser.strip_amounts(merchant.text).strip()
            self.stats["balances_discarded"] += 1

        parts = [description] + self._collect_continuation(cursor, raw_lines)
        self._emit(' '.join(parts), tokens.amount, tokens.date, raw_lines)

    def _on_text(self, tokens: LineTokens, cursor: LineCursor, state: ParserState):
        """Merchant line for a pending amount, or a merchant + amount transaction head."""
        if tokens.date:
            logger.debug(f"Skipping text line with embedded date: {tokens.text[:50]}")
            return

        if state.pending_amount is not None:
            self._resolve_pending(tokens, state)
            return

        if not tokens.amount:
            return

        raw_lines = [tokens.text]
        description = self._strip_amount_text(tokens.text)
        parts = [description] + self._collect_continuation(cursor, raw_lines, discard_balance=True)
        self._emit(' '.join(parts), tokens.amount, state.fallback_date(self._today_iso), raw_lines)

    def _resolve_pending(self, tokens: LineTokens, state: ParserState):
        """
        Pair the pending amount with this merchant line.
        An amount on the merchant line is a trailing balance.
        """
        description = tokens.text
        if tokens.amount:
            description = self._strip_amount_text(tokens.text)
            self.stats["balances_discarded"] += 1

        emitted = self._emit(
            description, state.pending_amount, state.fallback_date(self._today_iso), [tokens.text]
        )
        if emitted:
            state.clear_pending()

    def _collect_continuation(
        self,
        cursor: LineCursor,
        raw_lines: list[str],
        discard_balance: bool = False
    ) -> list[str]:
        """
        Consume lines that continue the current merchant description.

        Args:
            cursor: Cursor positioned after the description's first line
            raw_lines: Consumed raw lines, extended in place
            discard_balance: Consume a following amount line above the balance threshold

        Returns:
            Continuation texts in order
        """
        parts = []
        while cursor.has_next():
            upcoming = cursor.peek()

            if upcoming.pending_amount is None and self.classifier.is_description_continuation(upcoming):
                cursor.advance()
                parts.append(upcoming.text)
                raw_lines.append(upcoming.text)
                self.stats["continuation_merges"] += 1
                continue

            if (discard_balance and upcoming.amount and not upcoming.date and not upcoming.is_header
                    and abs(Decimal(upcoming.amount)) > self.parser_config.balance_threshold):
                cursor.advance()
                raw_lines.append(upcoming.text)
                self.stats["balances_discarded"] += 1
                logger.debug(f"Discarded running balance line: {upcoming.text}")
            break

        return parts

    def _strip_amount_text(self, text: str) -> str:
        return self.classifier.amount_parser.strip_amounts(text).replace(':', '').strip()

    def _emit(self, description: str, amount: str, date: str, raw_lines: list[str]) -> bool:
        """
        Clean the description and record a transaction.

        Returns:
            True if a transaction was recorded
        """
        cleaned = self.cleaner.clean(description)
        if not self.cleaner.is_acceptable(cleaned):
            logger.debug(f"Skipping: no meaningful description in '{description[:50]}'")
            return False

        transaction = ParsedTransaction(
            date=date,
            amount=amount,
            description=cleaned,
            year=self.year,
            month=self.period.month if self.period else None,
            quarter=self.period.quarter if self.period else None,
            raw_text='\n'.join(raw_lines),
            transaction_id=f"screenshot-{len(self.transactions)}",
            payment_method=self.payment_method,
        )
        self.transactions.append(transaction)
        self.stats["transactions_found"] += 1
        logger.debug(f"Created transaction: {date} | {cleaned[:50]} | {amount}")
        return True

    @staticmethod
    def _empty_stats() -> dict:
        return {
            "lines_processed": 0,
            "headers_skipped": 0,
            "transactions_found": 0,
            "continuation_merges": 0,
            "balances_discarded": 0,
        }

    def get_stats(self) -> dict:
        """Get extraction statistics."""
        return self.stats.copy()


def clean_description(description: str) -> str:
    """
    Convenience function to clean a description with the default rules.

    Args:
        description: Raw description text

    Returns:
        Cleaned description
    """
    return DescriptionCleaner().clean(description)


def extract_transactions_from_text(
    text: str,
    year: int,
    period: Optional[PeriodSpec] = None,
    payment_method: Optional[str] = None,
    today: Optional[Callable[[], calendar_date]] = None
) -> list[ParsedTransaction]:
    """
    Convenience function to extract transactions from OCR text.

    Args:
        text: OCR text of one screenshot
        year: Statement year
        period: Month/quarter/year context
        payment_method: Payment method for every transaction
        today: Clock for the last-resort date fallback

    Returns:
        List of ParsedTransaction objects
    """
    assembler = TransactionAssembler(
        year=year,
        period=period,
        payment_method=payment_method,
        parser_config=ParserConfig.from_config(),
        today=today,
    )
    return assembler.assemble(text)
