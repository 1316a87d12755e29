"""Extract exam dates from course syllabi."""

from .errors import ExtractionError, InputError, SyllabusParseError, UnsupportedFileTypeError
from .extractor import deduplicate, parse_syllabus, parse_syllabus_text
from .models import ExtractedExam, UploadedDocument

__all__ = [
    "ExtractedExam",
    "UploadedDocument",
    "parse_syllabus",
    "parse_syllabus_text",
    "deduplicate",
    "SyllabusParseError",
    "InputError",
    "UnsupportedFileTypeError",
    "ExtractionError",
]
