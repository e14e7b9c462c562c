"""
Culture-aware parsing of the scalar values found in wallet CSV files.

Every parser here works through an explicit, ordered list of attempts and
returns the first success, or None when all attempts fail. The culture to
use is always passed in; nothing reads the process locale while parsing.
"""
import locale
import re
from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from functools import partial
from typing import Callable, Dict, Iterable, List, Optional, Sequence, TypeVar

import pandas as pd

from wallet_ledger.domain.enums import TransactionType
from wallet_ledger.logging_setup import get_logger

logger = get_logger(__name__)

T = TypeVar("T")

DEFAULT_DATE_FORMATS = ("%Y-%m-%d", "%d.%m.%Y", "%m/%d/%Y", "%d/%m/%Y")
DEFAULT_INCOME_TOKENS = ("income", "i")
DEFAULT_EXPENSE_TOKENS = ("expense", "e")

# Characters dropped by the last-chance numeric retry
_SPACE_CHARS = (" ", "\u00a0", "\u202f")


@dataclass(frozen=True)
class ParsingCulture:
    """
    Number and date conventions of one locale.

    Attributes:
        name: Culture identifier (e.g. 'invariant', 'ru')
        decimal_separator: Character between integer and fractional digits
        group_separator: Thousands separator
        date_separator: Replaces '/' in explicit date patterns
        day_first: Whether free-form dates put the day before the month
    """
    name: str
    decimal_separator: str = "."
    group_separator: str = ","
    date_separator: str = "/"
    day_first: bool = False

    @classmethod
    def named(cls, name: str) -> "ParsingCulture":
        """
        Resolve a culture by name.

        'system' derives the culture from the host locale; anything else must
        be 'invariant' or one of the known culture codes.

        Raises:
            ValueError: If the name is unknown
        """
        key = (name or "").strip().lower()
        if key == "system":
            return cls.from_system()
        if key not in CULTURES:
            available = ", ".join(sorted(CULTURES))
            raise ValueError(f"Unknown culture '{name}'. Available cultures: system, {available}")
        return CULTURES[key]

    @classmethod
    def from_system(cls) -> "ParsingCulture":
        """Pick the culture matching the host locale's language, else invariant"""
        language_code, _ = locale.getlocale()
        language = (language_code or "").split("_")[0].lower()
        return CULTURES.get(language, INVARIANT)

    def localize_date_format(self, fmt: str) -> str:
        """Swap the '/' placeholder for this culture's date separator"""
        return fmt.replace("/", self.date_separator)


INVARIANT = ParsingCulture(name="invariant")

CULTURES: Dict[str, ParsingCulture] = {
    "invariant": INVARIANT,
    "en": ParsingCulture(name="en"),
    "ru": ParsingCulture(
        name="ru", decimal_separator=",", group_separator="\u00a0",
        date_separator=".", day_first=True,
    ),
    "uk": ParsingCulture(
        name="uk", decimal_separator=",", group_separator="\u00a0",
        date_separator=".", day_first=True,
    ),
    "de": ParsingCulture(
        name="de", decimal_separator=",", group_separator=".",
        date_separator=".", day_first=True,
    ),
    "fr": ParsingCulture(
        name="fr", decimal_separator=",", group_separator="\u202f",
        date_separator="/", day_first=True,
    ),
}


def first_success(attempts: Iterable[Callable[[], Optional[T]]]) -> Optional[T]:
    """Run attempts in order and return the first non-None result"""
    for attempt in attempts:
        result = attempt()
        if result is not None:
            return result
    return None


# ----------------------------------------------------------------------
# Numbers
# ----------------------------------------------------------------------

def _number_pattern(culture: ParsingCulture) -> "re.Pattern[str]":
    group = re.escape(culture.group_separator)
    decimal = re.escape(culture.decimal_separator)
    return re.compile(
        rf"^(?P<lead>[+-])?\s*"
        rf"(?P<int>\d(?:\d|{group})*)?"
        rf"(?:{decimal}(?P<frac>\d*))?"
        rf"\s*(?P<trail>[+-])?$"
    )


def _parse_number(text: str, culture: ParsingCulture) -> Optional[Decimal]:
    """
    Parse a plain number (optional sign, thousands separators, decimal part).

    Returns:
        The Decimal value, or None if the text is not a number in this culture
    """
    match = _number_pattern(culture).match(text.strip())
    if not match:
        return None

    lead, trail = match.group("lead"), match.group("trail")
    integer = (match.group("int") or "").replace(culture.group_separator, "")
    fraction = match.group("frac") or ""

    if lead and trail:
        return None
    if not integer and not fraction:
        return None

    sign = "-" if "-" in (lead, trail) else ""
    try:
        return Decimal(f"{sign}{integer or '0'}.{fraction or '0'}")
    except InvalidOperation:
        return None


def _strip_spaces(text: str) -> str:
    for char in _SPACE_CHARS:
        text = text.replace(char, "")
    return text


def parse_decimal(text: Optional[str], culture: ParsingCulture = INVARIANT) -> Optional[Decimal]:
    """
    Parse a decimal number, tolerating different locale conventions.

    Tries, in order: the given culture, the invariant culture, and the
    invariant culture again with all spaces removed (e.g. '1 000.50').

    Args:
        text: Raw value from the file
        culture: The caller's current culture

    Returns:
        Parsed Decimal, or None if every attempt failed
    """
    if text is None or not text.strip():
        return None
    text = text.strip()

    attempts: List[Callable[[], Optional[Decimal]]] = [
        partial(_parse_number, text, culture),
        partial(_parse_number, text, INVARIANT),
        partial(_parse_number, _strip_spaces(text), INVARIANT),
    ]
    value = first_success(attempts)
    if value is None:
        logger.debug("Could not parse '%s' as a number (culture=%s)", text, culture.name)
    return value


# ----------------------------------------------------------------------
# Dates
# ----------------------------------------------------------------------

def _parse_exact(text: str, formats: Sequence[str]) -> Optional[date]:
    for fmt in formats:
        try:
            return datetime.strptime(text, fmt).date()
        except ValueError:
            continue
    return None


_DATE_PART = re.compile(r"[^\W\d_]+|\d+")
_RELATIVE_DATE_WORDS = {"now", "today", "tomorrow", "yesterday"}


def _looks_like_calendar_date(text: str) -> bool:
    """At least two components, one of them numeric, and no relative keywords"""
    parts = _DATE_PART.findall(text)
    if len(parts) < 2 or not any(p.isdigit() for p in parts):
        return False
    return not any(p.lower() in _RELATIVE_DATE_WORDS for p in parts)


def _parse_free_form(text: str, day_first: bool) -> Optional[date]:
    # pandas also accepts 'now', 'today' and bare years
    if not _looks_like_calendar_date(text):
        return None
    try:
        parsed = pd.to_datetime(text, errors="coerce", dayfirst=day_first)
    except (ValueError, TypeError, OverflowError):
        return None
    if pd.isna(parsed):
        return None
    return parsed.date()


def parse_date(
    text: Optional[str],
    culture: ParsingCulture = INVARIANT,
    formats: Sequence[str] = DEFAULT_DATE_FORMATS,
) -> Optional[date]:
    """
    Parse a calendar date, trying explicit patterns before guessing.

    Order of attempts:
        1. Each explicit pattern with invariant separators
        2. Each explicit pattern with the culture's date separator
        3. Free-form parse, month first
        4. Free-form parse using the culture's day/month order

    Args:
        text: Raw value from the file
        culture: The caller's current culture
        formats: strptime patterns, in priority order

    Returns:
        Parsed date, or None if nothing matched
    """
    if text is None or not text.strip():
        return None
    text = text.strip()

    localized = [culture.localize_date_format(fmt) for fmt in formats]
    attempts: List[Callable[[], Optional[date]]] = [
        partial(_parse_exact, text, list(formats)),
        partial(_parse_exact, text, localized),
        partial(_parse_free_form, text, INVARIANT.day_first),
        partial(_parse_free_form, text, culture.day_first),
    ]
    value = first_success(attempts)
    if value is None:
        logger.debug("Could not parse '%s' as a date (culture=%s)", text, culture.name)
    return value


# ----------------------------------------------------------------------
# Transaction type
# ----------------------------------------------------------------------

def parse_transaction_type(
    text: Optional[str],
    income_tokens: Iterable[str] = DEFAULT_INCOME_TOKENS,
    expense_tokens: Iterable[str] = DEFAULT_EXPENSE_TOKENS,
) -> Optional[TransactionType]:
    """Case-insensitive match of 'Income'/'I' or 'Expense'/'E'"""
    if text is None or not text.strip():
        return None
    token = text.strip().lower()

    if token in {t.lower() for t in income_tokens}:
        return TransactionType.INCOME
    if token in {t.lower() for t in expense_tokens}:
        return TransactionType.EXPENSE
    return None
