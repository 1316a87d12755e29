"""Shared fixtures."""

import pytest

from syllabus_exams.document_text import OcrEngine


RECITATION_SYLLABUS = "\n".join([
    "CISC 1600 Computer Science I",
    "Weekly quizzes will be given during recitation.",
    "",
    "Meeting times",
    "Section L01    Section L02",
    "Lecture   Mon. at 9:00    Mon. at 11:30",
    "Recitation   Tue. at 9:30    Wed. at 2:30",
    "",
    "Date    Topic",
    "8/25    Introduction",
    "9/8     Variables and types",
    "10/6    Loops",
    "11/3    Functions",
    "12/10   Wrap-up",
    "",
    "Academic Integrity",
    "Work submitted after 12/15 receives no credit.",
])


class FakeOcrEngine(OcrEngine):
    """Records calls and returns canned text."""

    def __init__(self, text=""):
        self.text = text
        self.calls = []

    def extract_text(self, document, media_type):
        self.calls.append((document.filename, media_type))
        return self.text


@pytest.fixture
def recitation_syllabus():
    """Two-section syllabus with weekly recitation quizzes (Fall 2025)."""
    return RECITATION_SYLLABUS


@pytest.fixture
def fake_ocr():
    return FakeOcrEngine("Midterm 1 on 10/8\nQuiz 3 due on January 15, 2026")
