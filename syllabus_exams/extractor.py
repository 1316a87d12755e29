"""
Exam extraction pipeline.

Ties the stages together:

    document -> text -> line classifier (+ section filter)
                     -> weekly quiz synthesizer
                     -> deduplicated list of ExtractedExam
"""

import logging
from datetime import date
from typing import Iterable, List, Optional, Union

from .classifier import ExamLineClassifier
from .document_text import OcrEngine, document_to_text
from .errors import InputError
from .models import ExtractedExam, UploadedDocument
from .recurring import synthesize_weekly_quizzes

logger = logging.getLogger(__name__)

EMPTY_TEXT_MESSAGE = "Please enter some text to parse."


def deduplicate(exams: Iterable[ExtractedExam]) -> List[ExtractedExam]:
    """Drop records whose (date, lowercased title) was already seen.

    The first occurrence wins and input order is preserved.
    """
    seen = set()
    unique: List[ExtractedExam] = []
    for exam in exams:
        if exam.dedup_key in seen:
            continue
        seen.add(exam.dedup_key)
        unique.append(exam)
    return unique


def parse_syllabus_text(text: str, section: Optional[str] = None, today: Optional[date] = None,
                        max_length: Optional[int] = None) -> List[ExtractedExam]:
    """Extract exams from syllabus text.

    Args:
        text: Line-oriented syllabus text
        section: Only keep exams for this section (e.g., "L02", "1")
        today: Reference date for year inference (default: today)
        max_length: Reject text longer than this many characters

    Returns:
        Deduplicated list of ExtractedExam in document order, followed by
        synthesized weekly quizzes

    Raises:
        InputError: If the text is empty or too long
    """
    if not text or not text.strip():
        raise InputError(EMPTY_TEXT_MESSAGE)
    if max_length is not None and len(text) > max_length:
        raise InputError(f"Text is too long. Maximum length is {max_length} characters.")

    # Captured once so every stage agrees on "now"
    today = today or date.today()

    candidates = ExamLineClassifier(today=today).classify(text, section=section)
    quizzes = synthesize_weekly_quizzes(text, section, today=today)
    exams = deduplicate(candidates + quizzes)

    logger.info("Found %d exams (%d candidates, %d synthesized quizzes)%s",
                len(exams), len(candidates), len(quizzes),
                f" for section {section}" if section else "")
    return exams


def parse_syllabus(document_or_text: Union[str, UploadedDocument], section: Optional[str] = None, *,
                   ocr_engine: Optional[OcrEngine] = None, today: Optional[date] = None) -> List[ExtractedExam]:
    """Extract exams from an uploaded syllabus or pasted text.

    Args:
        document_or_text: Pasted text, or an UploadedDocument
        section: Only keep exams for this section
        ocr_engine: OCR collaborator for scanned documents and images
        today: Reference date for year inference (default: today)

    Returns:
        Deduplicated list of ExtractedExam

    Raises:
        InputError: If the text is empty or the file type is not accepted
        ExtractionError: If no text could be extracted from the document
    """
    if isinstance(document_or_text, UploadedDocument):
        extracted = document_to_text(document_or_text, ocr_engine=ocr_engine)
        text = extracted.text
    else:
        text = document_or_text
    return parse_syllabus_text(text, section=section, today=today)
