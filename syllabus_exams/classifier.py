"""
Exam-line classification.

Scans normalized syllabus text line by line and turns lines that name an
assessment and carry a date into ExtractedExam candidates:

1. Exclusion (review sessions, office hours, breaks, ...)
2. Type classification (first matching keyword rule wins)
3. Date location (table-row prefix, same line, gated two-line lookahead)
4. Date canonicalization
5. Title and notes
6. Section attribution (only when a target section is given)
"""

import logging
import re
from dataclasses import dataclass
from datetime import date
from typing import List, Optional, Tuple

from .date_parser import find_date_token, parse_date_token
from .models import DateToken, ExtractedExam, MAX_NOTES_LENGTH
from .sections import SectionTracker

logger = logging.getLogger(__name__)


# Lines matching any of these never produce a candidate
EXCLUSION_PATTERNS = [
    re.compile(r"review\s+session", re.IGNORECASE),
    re.compile(r"office\s+hours?", re.IGNORECASE),
    re.compile(r"\bgrades?\s+(?:(?:are|is|will\s+be)\s+)?(?:posted|released|available)", re.IGNORECASE),
    re.compile(r"\b(?:holidays?|break|no\s+class(?:es)?|cancell?ed)\b", re.IGNORECASE),
    re.compile(r"syllabus\s+updated", re.IGNORECASE),
    re.compile(r"weekly\s+reading", re.IGNORECASE),
    re.compile(r"subject\s+to\s+change", re.IGNORECASE),
]

# Recurring quiz descriptions are handled by the weekly quiz synthesizer
RECURRING_QUIZ_PATTERN = re.compile(r"\b(?:weekly|every\s+week|each\s+week)\b", re.IGNORECASE)


@dataclass(frozen=True)
class TypeRule:
    """Keyword rule mapping a line to an exam type."""
    pattern: "re.Pattern[str]"
    exam_type: str
    label: str                  # Rule name used in logs


# Ordered: the first matching rule decides the type
TYPE_RULES = [
    TypeRule(re.compile(r"\bmid-?terms?\b", re.IGNORECASE), "midterm", "Midterm"),
    TypeRule(re.compile(r"\bfinal\s+(?:exam(?:ination)?|test|essay)s?\b", re.IGNORECASE), "exam", "Final exam"),
    TypeRule(re.compile(r"\bessay\s*#?\s*\d+", re.IGNORECASE), "project", "Essay"),
    TypeRule(re.compile(r"\bquiz(?:zes)?\b", re.IGNORECASE), "quiz", "Quiz"),
    TypeRule(re.compile(r"\btests?\b", re.IGNORECASE), "test", "Test"),
    TypeRule(re.compile(r"\bexam(?:s|inations?)?\b", re.IGNORECASE), "exam", "Exam"),
    TypeRule(re.compile(r"\b(?:final|research)\s+projects?\b", re.IGNORECASE), "project", "Project"),
    TypeRule(re.compile(r"\bpresentations?\b", re.IGNORECASE), "presentation", "Presentation"),
]

# Words that tie a date on a following line to the assessment
TEMPORAL_INDICATOR_PATTERN = re.compile(
    r"\b(?:due|on|by|scheduled|deadline|submit(?:ted|ssion)?|is)\b", re.IGNORECASE
)

# "Quiz 3", "Midterm #2": the number counts assessments, it is not a date
NUMBERED_KEYWORD_PATTERN = re.compile(
    r"\b(?:mid-?term|quiz|test|exam|essay|project|presentation)\s*#?\s*(\d{1,2})\b(?![/\-.]\d)",
    re.IGNORECASE,
)

# A capitalized phrase such as "Group Research Presentation"
DESCRIPTIVE_TITLE_PATTERN = re.compile(
    r"\b((?:[A-Z][\w'&-]*\s+){0,5}(?:Presentation|Project))\b"
)

TABLE_ROW_PREFIX = 20
LOOKAHEAD_LINES = 2


def is_excluded(line: str) -> bool:
    """True if the line describes something that is not an assessment."""
    if any(p.search(line) for p in EXCLUSION_PATTERNS):
        return True
    return bool(re.search(r"quiz", line, re.IGNORECASE) and RECURRING_QUIZ_PATTERN.search(line))


def classify_line(line: str) -> Optional[TypeRule]:
    """Return the first TypeRule matching line, or None."""
    for rule in TYPE_RULES:
        if rule.pattern.search(line):
            return rule
    return None


def _mask_numbered_keywords(line: str) -> str:
    # Blank out "Midterm 2" so "Midterm 2 Oct 15" is not read as 2 Oct 2015
    return NUMBERED_KEYWORD_PATTERN.sub(lambda m: " " * len(m.group(0)), line)


def locate_date(lines: List[str], index: int) -> Tuple[Optional[DateToken], List[str]]:
    """Find the date token belonging to the candidate on lines[index].

    Search order: a date in the first TABLE_ROW_PREFIX characters (table rows
    like "10/8  Midterm 1"), then anywhere on the same line, then up to
    LOOKAHEAD_LINES following lines, each accepted only when it or the
    combined context contains a temporal indicator word.

    Args:
        lines: All lines of the document
        index: Index of the candidate line

    Returns:
        Tuple of (token or None, contributing lines)
    """
    line = lines[index]
    token = find_date_token(_mask_numbered_keywords(line))
    if token is not None:
        if token.start < TABLE_ROW_PREFIX:
            logger.debug("Table-row date %r on line %d", token.raw, index)
        return token, [line]

    context = [line]
    for offset in range(1, LOOKAHEAD_LINES + 1):
        if index + offset >= len(lines):
            break
        next_line = lines[index + offset]
        if is_excluded(next_line):
            continue
        context.append(next_line)
        combined = " ".join(context)
        if not (TEMPORAL_INDICATOR_PATTERN.search(next_line) or TEMPORAL_INDICATOR_PATTERN.search(combined)):
            continue
        token = find_date_token(next_line)
        if token is not None:
            return token, context
    return None, [line]


def build_title(line: str, rule: TypeRule) -> str:
    """Derive a short display title for a candidate line.

    Essays keep their number ("Essay 2"), projects and presentations use a
    capitalized phrase when the line has one; everything else is titled by
    its type ("Midterm", "Quiz", "Exam").
    """
    if rule.label == "Essay":
        number = re.search(r"\d+", rule.pattern.search(line).group(0))
        return f"Essay {number.group(0)}"
    if rule.exam_type in ("project", "presentation"):
        phrase = DESCRIPTIVE_TITLE_PATTERN.search(line)
        if phrase:
            return " ".join(phrase.group(1).split())
    return rule.exam_type.capitalize()


class ExamLineClassifier:
    """Turns syllabus lines into exam candidates."""

    def __init__(self, today: Optional[date] = None):
        """Initialize classifier.

        Args:
            today: Reference date for year inference (default: today)
        """
        self.today = today or date.today()

    def classify(self, text: str, section: Optional[str] = None) -> List[ExtractedExam]:
        """Extract exam candidates from normalized text.

        Args:
            text: Line-oriented syllabus text
            section: Only keep candidates attributed to this section

        Returns:
            List of ExtractedExam candidates in document order (not deduplicated)
        """
        lines = text.split('\n')
        tracker = SectionTracker(section)
        exams: List[ExtractedExam] = []

        for i, line in enumerate(lines):
            tracker.observe(line)
            if not line.strip() or is_excluded(line):
                continue

            rule = classify_line(line)
            if rule is None:
                continue

            token, context_lines = locate_date(lines, i)
            if token is None:
                logger.debug("No date for %s candidate on line %d: %s", rule.label, i, line.strip()[:80])
                continue

            iso_date = parse_date_token(token, today=self.today)
            if iso_date is None:
                logger.debug("Unparseable date %r on line %d", token.raw, i)
                continue

            context = " ".join(" ".join(l.split()) for l in context_lines).strip()
            if not tracker.accepts(context):
                logger.debug("Dropped candidate outside section %s: %s", tracker.target, context[:80])
                continue

            exam = ExtractedExam(
                title=build_title(line, rule),
                date=iso_date,
                type=rule.exam_type,
                notes=context[:MAX_NOTES_LENGTH],
            )
            logger.debug("Candidate %s on %s from line %d", exam.title, exam.date, i)
            exams.append(exam)

        return exams
