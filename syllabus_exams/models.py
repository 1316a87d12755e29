"""
Data models for the syllabus exam extractor.

This module defines the data structures passed between the extraction stages.
All models use Python dataclasses, which keep the records small and readable.

These models represent:
- Extracted exam events (the public output)
- Date tokens found in syllabus text
- Recitation schedules and semester windows (used for weekly quizzes)
- Uploaded documents and the text extracted from them
"""

from dataclasses import dataclass, field
from datetime import date
from typing import Any, Dict, Optional, Set


# Closed set of exam types an ExtractedExam may carry
EXAM_TYPES = ("exam", "midterm", "test", "quiz", "project", "presentation", "final")

MAX_TITLE_LENGTH = 80
MAX_NOTES_LENGTH = 300


@dataclass
class ExtractedExam:
    """Represents one exam event found in a syllabus.

    The date is always a fully resolved calendar date in ISO format. Records
    produced by the extractor never share both date and (case-insensitive)
    title.
    """
    title: str                  # Display title (e.g., "Midterm", "Essay 2")
    date: str                   # ISO date "YYYY-MM-DD"
    type: str                   # One of EXAM_TYPES
    notes: Optional[str] = None  # Source line(s) or synthetic description

    def __post_init__(self):
        if self.type not in EXAM_TYPES:
            raise ValueError(f"Unknown exam type: {self.type!r}")
        self.title = self.title[:MAX_TITLE_LENGTH]
        if self.notes is not None:
            self.notes = self.notes[:MAX_NOTES_LENGTH]

    @property
    def dedup_key(self):
        return (self.date, self.title.lower())

    def to_dict(self) -> Dict[str, Any]:
        """Convert to a JSON-serializable dict."""
        return {
            "title": self.title,
            "date": self.date,
            "type": self.type,
            "notes": self.notes,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ExtractedExam":
        """Build an ExtractedExam from a dict (e.g., an API request body)."""
        deserialize_date(data["date"])  # rejects partial or malformed dates
        return cls(
            title=str(data["title"]),
            date=data["date"],
            type=data.get("type", "exam"),
            notes=data.get("notes"),
        )


@dataclass
class DateToken:
    """A raw date substring and the pattern family that matched it."""
    raw: str                    # e.g., "Oct. 8th, 2025"
    family: str                 # e.g., "month_day_year"
    start: int = 0              # Offset of the match in the searched text


@dataclass
class RecitationSchedule:
    """The weekly recitation meeting for one section.

    day_of_week follows the Sunday=0 convention used by syllabus tables;
    use the weekday property for Python's Monday=0 convention.
    """
    section: str                # Normalized section identifier ("L02", "1")
    day_of_week: int            # 0=Sunday, 1=Monday, ..., 6=Saturday
    time: Optional[str] = None  # "H:MM" as written in the schedule

    @property
    def weekday(self) -> int:
        return (self.day_of_week - 1) % 7


@dataclass
class SemesterWindow:
    """Date range of the term as inferred from the schedule table."""
    start_date: date
    end_date: date
    break_weeks: Set[date] = field(default_factory=set)


@dataclass
class UploadedDocument:
    """A file as received from the caller."""
    content: bytes
    media_type: Optional[str] = None  # e.g., "application/pdf"
    filename: Optional[str] = None


@dataclass
class ExtractedText:
    """Text produced by the document normalizer."""
    text: str
    method: str                 # "text", "pdf", "docx" or "ocr"


# Serialization helpers for JSON conversion

def serialize_date(d: date) -> str:
    """Convert date to ISO format string."""
    return d.isoformat()


def deserialize_date(s: str) -> date:
    """Convert ISO format string to date."""
    return date.fromisoformat(s)
