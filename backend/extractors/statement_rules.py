"""
Statement Rules Module
Defines the keyword lists, month names and thresholds used to read statement screenshots.
"""

from dataclasses import dataclass
from decimal import Decimal

from config import config


# Statement chrome that never carries a transaction
HEADER_PHRASES = (
    "outstanding balance",
    "transaction total",
    "activity period",
    "recent activity",
    "now viewing",
    "current statement",
    "search by keyword",
    "need help",
    "log out",
    "sign off",
    "privacy & terms",
    "member fdic",
    "equal housing",
    "bilt world elite mastercard",
    "subi boa cb",
    "statement balance",
    "available credit",
    "minimum payment due",
    "filter",
)

# Leading clock time from the phone status bar, e.g. "11:18"
HEADER_PATTERNS = (
    r"^\d{1,2}:\d{2}",
)

MONTH_ABBREVIATIONS = (
    "Jan", "Feb", "Mar", "Apr", "May", "Jun",
    "Jul", "Aug", "Sep", "Oct", "Nov", "Dec",
)

MONTH_NAMES = (
    "January", "February", "March", "April", "May", "June",
    "July", "August", "September", "October", "November", "December",
)

WEEKDAY_ABBREVIATIONS = ("Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun")

# Button labels that OCR picks up next to the merchant name
UI_NOISE_PATTERNS = (
    r"pay\s+it",
)

# Icon glyphs OCR renders in front of merchant names ("®¢", "%¢", "9¢", "$C")
DECORATIVE_PREFIX_PATTERN = r"^(?:(?:[®¢©%$]+(?:[9C](?![A-Za-z0-9]))?|[9C][®¢©%$]+)\s*)+"

CHECKMARK_CHARACTERS = "✓✔✅@"
ARROW_CHARACTERS = ">→"

URL_PATTERN = r"\.(?:com|net|org|io|co|bill|amzn)\b|^https?://"


@dataclass
class ParserConfig:
    """
    Injected configuration for the screenshot parser.
    Every keyword list and threshold the parser uses lives here.
    """
    header_phrases: tuple[str, ...] = HEADER_PHRASES
    header_patterns: tuple[str, ...] = HEADER_PATTERNS
    month_abbreviations: tuple[str, ...] = MONTH_ABBREVIATIONS
    month_names: tuple[str, ...] = MONTH_NAMES
    weekday_abbreviations: tuple[str, ...] = WEEKDAY_ABBREVIATIONS
    ui_noise_patterns: tuple[str, ...] = UI_NOISE_PATTERNS
    decorative_prefix_pattern: str = DECORATIVE_PREFIX_PATTERN
    checkmark_characters: str = CHECKMARK_CHARACTERS
    arrow_characters: str = ARROW_CHARACTERS
    url_pattern: str = URL_PATTERN
    balance_threshold: Decimal = Decimal("1000")
    date_header_residual_max: int = 15
    amount_only_residual_max: int = 5
    continuation_max_length: int = 30
    min_description_length: int = 3
    phone_min_digits: int = 10
    location_max_length: int = 20
    default_payment_method: str = "Other"

    @classmethod
    def from_config(cls) -> "ParserConfig":
        """Build parser settings from the application configuration."""
        return cls(
            balance_threshold=Decimal(str(config.BALANCE_THRESHOLD)),
            date_header_residual_max=config.DATE_HEADER_RESIDUAL_MAX,
            amount_only_residual_max=config.AMOUNT_ONLY_RESIDUAL_MAX,
            continuation_max_length=config.CONTINUATION_MAX_LENGTH,
            min_description_length=config.MIN_DESCRIPTION_LENGTH,
            default_payment_method=config.DEFAULT_PAYMENT_METHOD,
        )


def is_header_phrase(line: str, parser_config: ParserConfig) -> bool:
    """
    Quick check if a line contains a known statement-chrome phrase.

    Args:
        line: Line to check
        parser_config: Keyword lists to check against

    Returns:
        True if line matches a known header phrase
    """
    line_lower = line.strip().lower()
    return any(phrase in line_lower for phrase in parser_config.header_phrases)
