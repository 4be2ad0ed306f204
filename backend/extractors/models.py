"""
Transaction Models Module
Candidate transactions extracted from statement screenshots and the period they belong to.
"""

from typing import Optional


class PeriodSpec:
    """
    Reporting period chosen once for a whole batch.

    type is one of "month", "quarter" or "year"; value is the month (1-12)
    or quarter (1-4) number and is ignored for "year".
    """

    TYPES = ("month", "quarter", "year")

    def __init__(self, period_type: str = "month", value: Optional[int] = None):
        if period_type not in self.TYPES:
            raise ValueError(f"period type must be one of {', '.join(self.TYPES)}, got '{period_type}'")

        if period_type == "month" and (value is None or not 1 <= value <= 12):
            raise ValueError(f"month must be between 1 and 12, got {value}")

        if period_type == "quarter" and (value is None or not 1 <= value <= 4):
            raise ValueError(f"quarter must be between 1 and 4, got {value}")

        self.type = period_type
        self.value = value if period_type != "year" else None

    @property
    def month(self) -> Optional[int]:
        return self.value if self.type == "month" else None

    @property
    def quarter(self) -> Optional[int]:
        return self.value if self.type == "quarter" else None

    def to_dict(self) -> dict:
        return {"type": self.type, "value": self.value}

    def __eq__(self, other) -> bool:
        return isinstance(other, PeriodSpec) and (self.type, self.value) == (other.type, other.value)

    def __repr__(self) -> str:
        return f"PeriodSpec(type={self.type}, value={self.value})"


class ParsedTransaction:
    """Represents a single candidate transaction awaiting review."""

    FIELDS = (
        "id", "date", "amount", "description", "category", "payment_method",
        "paid_by", "year", "month", "quarter", "raw_text", "source_file", "error",
    )

    def __init__(
        self,
        date: str,
        amount: str,
        description: str,
        year: Optional[int] = None,
        month: Optional[int] = None,
        quarter: Optional[int] = None,
        raw_text: str = "",
        transaction_id: str = "",
        category: str = "",
        payment_method: str = "Other",
        paid_by: Optional[str] = None,
        source_file: Optional[str] = None,
        error: Optional[str] = None
    ):
        self.id = transaction_id
        self.date = date
        self.amount = amount
        self.description = description.strip()
        self.category = category
        self.payment_method = payment_method
        self.paid_by = paid_by
        self.year = year
        self.month = month
        self.quarter = quarter
        self.raw_text = raw_text
        self.source_file = source_file
        self.error = error

    @classmethod
    def from_dict(cls, data: dict) -> "ParsedTransaction":
        """Rebuild a transaction from a review-surface record."""
        return cls(
            date=data.get("date") or "",
            amount="" if data.get("amount") is None else str(data.get("amount")),
            description=data.get("description") or "",
            year=data.get("year"),
            month=data.get("month"),
            quarter=data.get("quarter"),
            raw_text=data.get("raw_text") or "",
            transaction_id=data.get("id") or "",
            category=data.get("category") or "",
            payment_method=data.get("payment_method") or "Other",
            paid_by=data.get("paid_by"),
            source_file=data.get("source_file"),
            error=data.get("error"),
        )

    def to_dict(self) -> dict:
        """Convert transaction to dictionary."""
        return {field: getattr(self, field) for field in self.FIELDS}

    def __eq__(self, other) -> bool:
        return isinstance(other, ParsedTransaction) and self.to_dict() == other.to_dict()

    def __repr__(self) -> str:
        return f"ParsedTransaction(date={self.date}, desc={self.description[:30]}..., amount={self.amount})"
