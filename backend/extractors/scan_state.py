"""
Scan State Module
Tracks the date and pending-amount context while reading one screenshot's OCR text.
"""

from enum import Enum
from typing import Generic, Optional, Sequence, TypeVar
import logging

logger = logging.getLogger(__name__)

T = TypeVar("T")


class ScanPhase(Enum):
    """Parser phase enumeration."""
    SEEKING = "seeking"
    HAVE_DATE_CONTEXT = "have_date_context"
    HAVE_PENDING_AMOUNT = "have_pending_amount"


class ParserState:
    """
    Context threaded through a single file's parse pass.

    current_date is the date of the most recent date header, pending_amount an
    amount waiting for its merchant line, and first_date the first date seen
    anywhere in the document (found by a forward pre-scan).
    """

    def __init__(self, first_date: Optional[str] = None):
        """Initialize in SEEKING phase."""
        self.current_date: Optional[str] = None
        self.pending_amount: Optional[str] = None
        self.first_date = first_date
        self._history: list[tuple[str, str]] = []

    @property
    def phase(self) -> ScanPhase:
        """Current phase, derived from which context is populated."""
        if self.pending_amount is not None:
            return ScanPhase.HAVE_PENDING_AMOUNT
        if self.current_date is not None:
            return ScanPhase.HAVE_DATE_CONTEXT
        return ScanPhase.SEEKING

    def set_date(self, date: str):
        """A date header was read: it becomes the context and any pending amount is dropped."""
        self.current_date = date
        self.pending_amount = None
        self._record("DATE", date)

    def harvest_date(self, date: Optional[str]) -> bool:
        """
        Take a date from a header line, only when no date is current.

        Returns:
            True if the date was adopted
        """
        if date and self.current_date is None:
            self.current_date = date
            self._record("HEADER_DATE", date)
            return True
        return False

    def set_pending(self, amount: str, clear_date: bool = False):
        """Store an amount whose merchant line comes next."""
        self.pending_amount = amount
        if clear_date:
            self.current_date = None
        self._record("PENDING", amount)

    def clear_pending(self):
        """Drop the pending amount after it was used."""
        self.pending_amount = None

    def fallback_date(self, today: str) -> str:
        """Date used for an emitted transaction: current, then first seen, then today."""
        return self.current_date or self.first_date or today

    def _record(self, kind: str, value: str):
        self._history.append((kind, value))
        logger.debug(f"State changed to {self.phase.name}: {kind}={value}")

    def get_history(self) -> list[tuple[str, str]]:
        """Get state change history for debugging."""
        return self._history.copy()


class LineCursor(Generic[T]):
    """Forward-only cursor over the lines of one document with one-ahead lookahead."""

    def __init__(self, items: Sequence[T]):
        self._items = list(items)
        self.position = 0

    def has_next(self) -> bool:
        return self.position < len(self._items)

    def peek(self, offset: int = 0) -> Optional[T]:
        """Return the item offset positions ahead without consuming it."""
        index = self.position + offset
        if 0 <= index < len(self._items):
            return self._items[index]
        return None

    def advance(self) -> T:
        """Consume and return the next item."""
        if not self.has_next():
            raise IndexError("cursor is exhausted")
        item = self._items[self.position]
        self.position += 1
        return item

    def __len__(self) -> int:
        return len(self._items)
