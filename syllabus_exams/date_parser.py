"""
Date token parsing for syllabus text.

Finds date substrings in a line of text and converts them to ISO dates.
Recognized forms, in priority order:

1. "10/8/2025", "10-8-25"       numeric month/day/year
2. "10/8"                       numeric month/day, year inferred
3. "24 Sep 25"                  day month year
4. "Oct. 8th, 2025"             month day, year
5. "8th of October"             day of month, year inferred
6. "October 8"                  month day, year inferred

When the year is missing the date is assumed to be the next occurrence: the
current year, or next year if that date has already passed.
"""

import logging
import re
from datetime import date
from typing import Iterator, List, Optional, Tuple

import dateparser

from .models import DateToken, serialize_date

logger = logging.getLogger(__name__)


# Month names and abbreviations mapped to month numbers
MONTHS = {
    'january': 1, 'jan': 1,
    'february': 2, 'feb': 2,
    'march': 3, 'mar': 3,
    'april': 4, 'apr': 4,
    'may': 5,
    'june': 6, 'jun': 6,
    'july': 7, 'jul': 7,
    'august': 8, 'aug': 8,
    'september': 9, 'sept': 9, 'sep': 9,
    'october': 10, 'oct': 10,
    'november': 11, 'nov': 11,
    'december': 12, 'dec': 12,
}

FULL_MONTH_NAMES = [
    "January", "February", "March", "April", "May", "June", "July",
    "August", "September", "October", "November", "December",
]

# Longest names first so "September" wins over "Sep"
_MONTH_ALT = "|".join(sorted(MONTHS, key=len, reverse=True))
_MONTH = rf"(?P<month>{_MONTH_ALT})\b\.?"
_DAY = r"(?P<day>3[01]|[12]\d|0?[1-9])"
_NUM_MONTH = r"(?P<month>1[0-2]|0?[1-9])"
_ORDINAL = r"(?:st|nd|rd|th)?"

# (family, pattern) in priority order; ties on position go to the earlier family
DATE_PATTERNS: List[Tuple[str, "re.Pattern[str]"]] = [
    ("numeric_mdy", re.compile(
        rf"(?<![\d/.\-]){_NUM_MONTH}(?P<sep>[/\-]){_DAY}(?P=sep)(?P<year>\d{{4}}|\d{{2}})(?![\d/\-])"
    )),
    ("numeric_md", re.compile(
        rf"(?<![\d/.\-]){_NUM_MONTH}/{_DAY}(?![\d/])"
    )),
    ("day_month_year", re.compile(
        rf"\b{_DAY}{_ORDINAL}\s+{_MONTH}\s+(?P<year>\d{{4}}|\d{{2}})\b(?![:/%])",
        re.IGNORECASE,
    )),
    ("month_day_year", re.compile(
        rf"\b{_MONTH}\s*{_DAY}{_ORDINAL}\b(?P<comma>,?)\s+(?P<year>\d{{4}}|\d{{2}})\b(?![:/%])",
        re.IGNORECASE,
    )),
    ("day_of_month", re.compile(
        rf"\b{_DAY}{_ORDINAL}\s+of\s+{_MONTH}",
        re.IGNORECASE,
    )),
    ("month_day", re.compile(
        rf"\b{_MONTH}\s*{_DAY}{_ORDINAL}\b(?![:/])",
        re.IGNORECASE,
    )),
]

_PATTERNS_BY_FAMILY = dict(DATE_PATTERNS)


def _accept(family: str, match: "re.Match[str]") -> bool:
    """Reject matches that are more likely numbers than dates."""
    if family == "day_month_year" and len(match.group("year")) == 2:
        # "24 Sep 25" is a date, "Week 2 October 15" is not
        return len(match.group("month").rstrip(".")) <= 4
    if family == "month_day_year" and len(match.group("year")) == 2:
        # "Oct 8, 25" is a date, "Oct 8 15 points" is not
        return bool(match.group("comma"))
    return True


def _iter_matches(family: str, text: str) -> Iterator["re.Match[str]"]:
    for match in _PATTERNS_BY_FAMILY[family].finditer(text):
        if _accept(family, match):
            yield match


def find_date_token(text: str) -> Optional[DateToken]:
    """Find the first date token in text.

    Args:
        text: Text to search (usually one line)

    Returns:
        The leftmost DateToken, or None if the text contains no date
    """
    best = None
    for family, _ in DATE_PATTERNS:
        match = next(_iter_matches(family, text), None)
        if match and (best is None or match.start() < best.start):
            best = DateToken(raw=match.group(0), family=family, start=match.start())
    return best


def find_date_tokens(text: str, families: Optional[Tuple[str, ...]] = None) -> List[DateToken]:
    """Find all non-overlapping date tokens in text, ordered by position.

    Args:
        text: Text to search
        families: Restrict the search to these pattern families

    Returns:
        List of DateToken objects
    """
    tokens: List[DateToken] = []
    taken: List[Tuple[int, int]] = []
    for family, _ in DATE_PATTERNS:
        if families and family not in families:
            continue
        for match in _iter_matches(family, text):
            span = match.span()
            if any(span[0] < end and start < span[1] for start, end in taken):
                continue
            taken.append(span)
            tokens.append(DateToken(raw=match.group(0), family=family, start=span[0]))
    return sorted(tokens, key=lambda t: t.start)


def infer_year(month: int, day: int, today: date) -> int:
    """Year of the next occurrence of month/day relative to today."""
    try:
        candidate = date(today.year, month, day)
    except ValueError:
        # e.g. Feb 29 outside a leap year; next year may still be invalid
        return today.year + 1
    return today.year + 1 if candidate < today else today.year


def _expand_year(year_str: str) -> int:
    year = int(year_str)
    return year + 2000 if year < 100 else year


def _numeric_date(year: int, month: int, day: int) -> Optional[str]:
    try:
        return serialize_date(date(year, month, day))
    except ValueError:
        logger.debug("Rejected impossible date %d-%d-%d", year, month, day)
        return None


def _named_month_date(month_name: str, day: int, year: int) -> Optional[str]:
    """Resolve "<Month> <day>, <year>" through dateparser."""
    month = MONTHS[month_name.lower().rstrip('.')]
    if _numeric_date(year, month, day) is None:
        return None
    date_str = f"{FULL_MONTH_NAMES[month - 1]} {day}, {year}"
    parsed = dateparser.parse(date_str, languages=["en"], date_formats=["%B %d, %Y"])
    if parsed is None:
        logger.debug("dateparser could not resolve %r", date_str)
        return None
    return serialize_date(parsed.date())


def _convert(family: str, match: "re.Match[str]", today: date) -> Optional[str]:
    day = int(match.group("day"))
    if family == "numeric_mdy":
        return _numeric_date(_expand_year(match.group("year")), int(match.group("month")), day)
    if family == "numeric_md":
        month = int(match.group("month"))
        return _numeric_date(infer_year(month, day, today), month, day)

    month_name = match.group("month")
    if family in ("day_month_year", "month_day_year"):
        year = _expand_year(match.group("year"))
    else:
        year = infer_year(MONTHS[month_name.lower().rstrip('.')], day, today)
    return _named_month_date(month_name, day, year)


def parse_date(raw: str, today: Optional[date] = None, family: Optional[str] = None) -> Optional[str]:
    """Convert a raw date substring to an ISO "YYYY-MM-DD" string.

    Args:
        raw: Matched date text (e.g., "Oct. 8th, 2025" or "10/8")
        today: Reference date for year inference (default: today)
        family: Pattern family that matched raw, if already known

    Returns:
        ISO date string, or None if raw cannot be confidently resolved
    """
    today = today or date.today()
    raw = raw.strip()
    families = [family] if family else [name for name, _ in DATE_PATTERNS]

    for name in families:
        for match in _iter_matches(name, raw):
            return _convert(name, match, today)
    return None


def parse_date_token(token: DateToken, today: Optional[date] = None) -> Optional[str]:
    """Convert a DateToken found by find_date_token to an ISO date string."""
    return parse_date(token.raw, today=today, family=token.family)
