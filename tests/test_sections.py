"""Unit tests for section disambiguation."""

from datetime import date
from syllabus_exams.classifier import ExamLineClassifier
from syllabus_exams.sections import (
    SectionTracker, find_inline_section, match_section_heading, normalize_section
)

TODAY = date(2025, 9, 1)

MULTI_SECTION_SYLLABUS = "\n".join([
    "Exam Schedule",
    "Section 01",
    "Midterm 1    10/8",
    "Final Exam on December 10, 2025",
    "Section 02",
    "Midterm 1    10/9",
    "Final Exam on December 11, 2025",
])


def test_normalize_section():
    """Test section ID normalization."""
    assert normalize_section("01") == "1"
    assert normalize_section(" l02 ") == "L02"
    assert normalize_section("L01") == "L01"
    assert normalize_section("000") == "0"
    assert normalize_section("") is None
    assert normalize_section(None) is None


def test_match_section_heading():
    """Test recognized heading forms."""
    assert match_section_heading("Section L01") == "L01"
    assert match_section_heading("SECTION 2 - Tuesday/Thursday") == "2"
    assert match_section_heading("Sec. 3") == "3"
    assert match_section_heading("Sec 04") == "4"
    assert match_section_heading("L02: Wednesday recitation") == "L02"


def test_match_section_heading_rejects_non_headings():
    """Test lines that look like headings but are not."""
    assert match_section_heading("Note: bring a calculator") is None
    assert match_section_heading("9:30 Midterm") is None
    assert match_section_heading("Section L01    Section L02") is None
    assert match_section_heading("Midterm 1 in this section") is None


def test_find_inline_section():
    """Test inline section markers."""
    assert find_inline_section("Quiz 2 (Section L02) on 11/5") == "L02"
    assert find_inline_section("Midterm [Sec. 1] 10/8") == "1"
    assert find_inline_section("Midterm 10/8") is None


def test_tracker_inline_beats_heading():
    """Test that an inline marker overrides the current heading."""
    tracker = SectionTracker("L02")
    tracker.observe("Section L01")
    assert tracker.current == "L01"
    assert not tracker.accepts("Midterm 1 10/8")
    assert tracker.accepts("Quiz 2 (Section L02) on 11/5")


def test_tracker_without_target_accepts_everything():
    """Test that no target section means no filtering."""
    tracker = SectionTracker()
    assert not tracker.active
    assert tracker.accepts("Midterm 1 10/8")


def test_classifier_filters_by_heading():
    """Test that only the requested section's dates are kept."""
    classifier = ExamLineClassifier(today=TODAY)
    exams = classifier.classify(MULTI_SECTION_SYLLABUS, section="1")
    assert [(e.title, e.date) for e in exams] == [
        ("Midterm", "2025-10-08"),
        ("Exam", "2025-12-10"),
    ]

    exams = classifier.classify(MULTI_SECTION_SYLLABUS, section="02")
    assert [(e.title, e.date) for e in exams] == [
        ("Midterm", "2025-10-09"),
        ("Exam", "2025-12-11"),
    ]


def test_classifier_drops_unattributed_candidates():
    """Test that candidates before any heading are dropped when filtering."""
    text = "Quiz 1 on 9/17\nSection L02\nQuiz 2 on 9/24"
    exams = ExamLineClassifier(today=TODAY).classify(text, section="L02")
    assert [e.title for e in exams] == ["Quiz"]


def test_classifier_without_section_keeps_all():
    """Test that every section's dates are returned without a target."""
    exams = ExamLineClassifier(today=TODAY).classify(MULTI_SECTION_SYLLABUS)
    assert len(exams) == 4
