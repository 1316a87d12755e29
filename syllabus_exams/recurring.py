"""
Weekly recitation quiz synthesis.

Some syllabi never list quiz dates; they say "weekly quizzes are given in
recitation" and leave the dates to the recitation schedule. This module reads
the recitation day for the requested section and the semester window from the
schedule table, then generates one quiz per week:

- week 1 of recitation has no quiz
- weeks near a break date are skipped
- missing schedules produce no quizzes (never an error)
"""

import logging
import re
from datetime import date, timedelta
from typing import List, Optional

from .date_parser import find_date_tokens
from .models import ExtractedExam, RecitationSchedule, SemesterWindow, serialize_date
from .sections import normalize_section

logger = logging.getLogger(__name__)


WEEKLY_QUIZ_PATTERN = re.compile(r"weekly\s+quiz(?:zes)?", re.IGNORECASE)
QUIZ_PATTERN = re.compile(r"quiz(?:zes)?", re.IGNORECASE)

# Day names and abbreviations mapped to 0=Sunday ... 6=Saturday
DAY_INDEX = {
    'sunday': 0, 'sun': 0, 'su': 0, 'u': 0,
    'monday': 1, 'mon': 1, 'mo': 1, 'm': 1,
    'tuesday': 2, 'tues': 2, 'tue': 2, 'tu': 2, 't': 2,
    'wednesday': 3, 'wed': 3, 'we': 3, 'w': 3,
    'thursday': 4, 'thurs': 4, 'thur': 4, 'thu': 4, 'th': 4, 'r': 4,
    'friday': 5, 'fri': 5, 'fr': 5, 'f': 5,
    'saturday': 6, 'sat': 6, 'sa': 6, 's': 6,
}
DAY_NAMES = ["Sunday", "Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday"]

_DAY_ALT = "|".join(sorted(DAY_INDEX, key=len, reverse=True))
RECITATION_ROW_PATTERN = re.compile(r"^\s*Recitations?\b(?P<rest>.*)$", re.IGNORECASE)
DAY_TIME_PATTERN = re.compile(rf"\b({_DAY_ALT})\.?\s+at\s+(\d{{1,2}}:\d{{2}})", re.IGNORECASE)

SCHEDULE_HEADER_DATE = re.compile(r"\bdates?\b", re.IGNORECASE)
SCHEDULE_HEADER_COLUMN = re.compile(r"\b(?:sections?|topics?)\b", re.IGNORECASE)
SCHEDULE_END_PATTERN = re.compile(r"academic\s+integrity|disabilit(?:y|ies)", re.IGNORECASE)
BREAK_PATTERN = re.compile(r"\b(?:break|holidays?|recess|no\s+class(?:es)?)\b", re.IGNORECASE)
NO_MAKEUP_PATTERN = re.compile(r"no\s+make-?\s*ups?", re.IGNORECASE)

FALL_MONTHS = range(8, 13)


def mentions_weekly_quizzes(text: str) -> bool:
    """Coarse trigger: weekly quizzes tied to recitation."""
    return bool(
        WEEKLY_QUIZ_PATTERN.search(text)
        and 'recitation' in text.lower()
        and QUIZ_PATTERN.search(text)
    )


class ColumnResolver:
    """Chooses which day/time pair of a recitation row belongs to a section."""

    def resolve(self, lines: List[str], row_index: int, pair_count: int,
                section: Optional[str]) -> Optional[int]:
        """Return the column index for section, or None if undecidable."""
        raise NotImplementedError


class SectionHeaderColumnResolver(ColumnResolver):
    """Reads column order from a nearby "SECTION ..." header line.

    Walks back up to HEADER_LOOKBACK lines from the recitation row for a line
    containing "section" and takes the section IDs in the order they appear.
    When no header names the section, "L01"/"L02"-style IDs map to the
    first/second column.
    """

    HEADER_LOOKBACK = 10
    _LABELED_ID = re.compile(r"\bSec(?:tion)?\.?\s*:?\s*([A-Za-z0-9]{1,4})\b", re.IGNORECASE)
    _BARE_ID = re.compile(r"\b([A-Za-z]{0,2}\d{1,3})\b")
    _ORDINAL_ID = re.compile(r"[A-Z]{0,2}0*(\d+)")

    def resolve(self, lines, row_index, pair_count, section):
        section = normalize_section(section)
        if section is None:
            return None

        columns = self.header_columns(lines, row_index)
        if section in columns:
            index = columns.index(section)
        else:
            ordinal = self._ORDINAL_ID.fullmatch(section)
            index = int(ordinal.group(1)) - 1 if ordinal and int(ordinal.group(1)) > 0 else None

        if index is None or index >= pair_count:
            return None
        return index

    def header_columns(self, lines: List[str], row_index: int) -> List[str]:
        """Section IDs of the closest header line above row_index."""
        for j in range(row_index - 1, max(-1, row_index - 1 - self.HEADER_LOOKBACK), -1):
            line = lines[j]
            keyword = re.search(r"section", line, re.IGNORECASE)
            if not keyword:
                continue
            labeled = self._LABELED_ID.findall(line)
            if len(labeled) >= 2:
                return [normalize_section(s) for s in labeled]
            bare = self._BARE_ID.findall(line[keyword.end():])
            return [normalize_section(s) for s in bare]
        return []


def find_recitation_schedule(lines: List[str], section: Optional[str],
                             resolver: Optional[ColumnResolver] = None) -> Optional[RecitationSchedule]:
    """Find the recitation day and time for section.

    Args:
        lines: Syllabus lines
        section: Target section identifier (may be None for single-section rows)
        resolver: Column resolver for rows listing several sections

    Returns:
        RecitationSchedule, or None when no usable row is found
    """
    resolver = resolver or SectionHeaderColumnResolver()
    for i, line in enumerate(lines):
        row = RECITATION_ROW_PATTERN.match(line)
        if not row:
            continue
        pairs = DAY_TIME_PATTERN.findall(row.group("rest"))
        if not pairs:
            continue

        if len(pairs) == 1:
            index = 0
        else:
            index = resolver.resolve(lines, i, len(pairs), section)
            if index is None:
                logger.debug("Could not match section %s to a recitation column on line %d", section, i)
                continue

        day, time_str = pairs[index]
        return RecitationSchedule(
            section=normalize_section(section) or "",
            day_of_week=DAY_INDEX[day.lower()],
            time=time_str,
        )
    return None


def infer_academic_year(month: int, today: date) -> int:
    """Year of a bare month in a schedule table, using the academic calendar.

    In spring (Jan-Jul) a fall month belongs to the previous year; in fall
    (Aug-Dec) a spring month belongs to the next year.
    """
    if today.month <= 7 and month >= 8:
        return today.year - 1
    if today.month >= 8 and month <= 7:
        return today.year + 1
    return today.year


def _schedule_dates(line: str, today: date) -> List[date]:
    dates = []
    for token in find_date_tokens(line, families=("numeric_md",)):
        month, day = (int(part) for part in token.raw.split('/'))
        try:
            dates.append(date(infer_academic_year(month, today), month, day))
        except ValueError:
            continue
    return dates


def _schedule_table(lines: List[str]) -> List[str]:
    start = None
    for i, line in enumerate(lines):
        if SCHEDULE_HEADER_DATE.search(line) and SCHEDULE_HEADER_COLUMN.search(line):
            start = i + 1
            break
    if start is None:
        return []

    table = []
    for line in lines[start:]:
        if SCHEDULE_END_PATTERN.search(line):
            break
        table.append(line)
    return table


def find_semester_window(lines: List[str], today: date) -> Optional[SemesterWindow]:
    """Infer the semester start, end and break weeks from the schedule table.

    Args:
        lines: Syllabus lines
        today: Reference date for academic-year inference

    Returns:
        SemesterWindow, or None if no schedule table with fall dates is found
    """
    bounds: List[date] = []
    breaks = set()
    for line in _schedule_table(lines):
        dates = _schedule_dates(line, today)
        bounds.extend(d for d in dates if d.month in FALL_MONTHS)
        if BREAK_PATTERN.search(line) and not NO_MAKEUP_PATTERN.search(line):
            breaks.update(dates)

    if not bounds:
        return None
    return SemesterWindow(start_date=min(bounds), end_date=max(bounds), break_weeks=breaks)


def generate_weekly_quizzes(schedule: RecitationSchedule, window: SemesterWindow) -> List[ExtractedExam]:
    """Generate one quiz per recitation week inside the window.

    The first recitation has no quiz; recitations within 7 days of a break
    date are skipped. Week n yields "Quiz <n-1>", so a skipped break week
    leaves a gap in the numbering.
    """
    current = window.start_date
    while current.weekday() != schedule.weekday:
        current += timedelta(days=1)

    day_name = DAY_NAMES[schedule.day_of_week]
    when = f"{day_name} at {schedule.time}" if schedule.time else day_name
    section_label = f"section {schedule.section}" if schedule.section else "recitation"

    quizzes: List[ExtractedExam] = []
    week = 0
    while current <= window.end_date:
        week += 1
        if week > 1:
            if any(abs((current - b).days) < 7 for b in window.break_weeks):
                logger.debug("Skipping quiz on %s (break week)", current)
            else:
                quizzes.append(ExtractedExam(
                    title=f"Quiz {week - 1}",
                    date=serialize_date(current),
                    type="quiz",
                    notes=f"Weekly recitation quiz for {section_label} ({when}), week {week}",
                ))
        current += timedelta(days=7)
    return quizzes


def synthesize_weekly_quizzes(text: str, section: Optional[str], today: Optional[date] = None,
                              resolver: Optional[ColumnResolver] = None) -> List[ExtractedExam]:
    """Generate recurring recitation quizzes described in a syllabus.

    Without a section, quizzes are still synthesized when the recitation
    row lists a single day/time pair; rows with several pairs need one.

    Args:
        text: Normalized syllabus text
        section: Target section identifier
        today: Reference date for year inference (default: today)
        resolver: Column resolver for multi-section recitation rows

    Returns:
        List of synthesized quizzes (empty when the syllabus has none)
    """
    if not mentions_weekly_quizzes(text):
        return []

    today = today or date.today()
    lines = text.split('\n')

    schedule = find_recitation_schedule(lines, section, resolver)
    if schedule is None:
        logger.info("Weekly quizzes mentioned but no recitation schedule found")
        return []

    window = find_semester_window(lines, today)
    if window is None:
        logger.info("Weekly quizzes mentioned but no semester schedule table found")
        return []

    quizzes = generate_weekly_quizzes(schedule, window)
    logger.info("Synthesized %d weekly quizzes on %s", len(quizzes), DAY_NAMES[schedule.day_of_week])
    return quizzes
