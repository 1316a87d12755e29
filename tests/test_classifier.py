"""Unit tests for exam-line classification."""

from datetime import date
from syllabus_exams.classifier import (
    ExamLineClassifier, build_title, classify_line, is_excluded, locate_date
)

TODAY = date(2025, 9, 1)


def classify(text, section=None):
    return ExamLineClassifier(today=TODAY).classify(text, section=section)


def test_table_row_date():
    """Test a schedule row with the date after the keyword ("Midterm 1    10/8")."""
    exams = classify("Midterm 1    10/8")
    assert len(exams) == 1
    assert exams[0].type == "midterm"
    assert exams[0].date == "2025-10-08"
    assert exams[0].title == "Midterm"
    assert exams[0].notes == "Midterm 1 10/8"


def test_date_first_table_row():
    """Test a table row that starts with the date."""
    exams = classify("10/15   Exam 2 (chapters 4-6)")
    assert len(exams) == 1
    assert exams[0].type == "exam"
    assert exams[0].date == "2025-10-15"
    assert exams[0].title == "Exam"


def test_same_line_date_with_year():
    """Test "Quiz 3 due on January 15, 2026"."""
    exams = classify("Quiz 3 due on January 15, 2026")
    assert len(exams) == 1
    assert exams[0].type == "quiz"
    assert exams[0].date == "2026-01-15"
    assert exams[0].title == "Quiz"


def test_numbered_keyword_is_not_a_date():
    """Test that "Midterm 2 Oct 15" is not read as 2 Oct 2015."""
    exams = classify("Midterm 2 Oct 15")
    assert len(exams) == 1
    assert exams[0].date == "2025-10-15"
    assert exams[0].title == "Midterm"


def test_midterm_hash_number():
    """Test "Midterm #2 on Oct 15"."""
    exams = classify("Midterm #2 on Oct 15")
    assert exams[0].title == "Midterm"
    assert exams[0].type == "midterm"


def test_lookahead_with_temporal_indicator():
    """Test a date on the following line tied by a temporal word."""
    text = "Final Exam\nScheduled for December 12, 2025"
    exams = classify(text)
    assert len(exams) == 1
    assert exams[0].title == "Exam"
    assert exams[0].type == "exam"
    assert exams[0].date == "2025-12-12"
    assert exams[0].notes == "Final Exam Scheduled for December 12, 2025"


def test_lookahead_without_temporal_indicator():
    """Test that a bare date on the next line is not attached."""
    text = "Midterm Exam\nDecember 12, 2025"
    assert classify(text) == []


def test_lookahead_limit():
    """Test that dates more than two lines below are ignored."""
    text = "Research Project\nworth 20% of the grade\nsee rubric online\ndue December 5, 2025"
    assert classify(text) == []


def test_lookahead_skips_excluded_lines():
    """Test that a review-session date below a candidate is not used."""
    text = "Midterm Exam\nReview session on 10/6\nHeld on 10/8 in class"
    exams = classify(text)
    assert len(exams) == 1
    assert exams[0].date == "2025-10-08"


def test_excluded_lines():
    """Test lines that mention exams but are not assessments."""
    assert classify("Midterm review session 10/7") == []
    assert classify("Office hours before the exam: 10/7") == []
    assert classify("Exam grades posted 10/20") == []
    assert classify("Fall break 10/13 - no quiz") == []
    assert classify("Syllabus updated 9/2, exam dates subject to change") == []


def test_recurring_quiz_lines_excluded():
    """Test that weekly quiz descriptions are left to the synthesizer."""
    assert is_excluded("Weekly quizzes start 9/10")
    assert is_excluded("A quiz is given every week starting 9/10")
    assert classify("Quizzes each week, first one on 9/10") == []


def test_line_without_date():
    """Test that a candidate without a date produces nothing."""
    assert classify("There will be three quizzes and a final exam.") == []


def test_impossible_date_dropped():
    """Test that Feb 30 yields no record."""
    assert classify("Exam on 2/30") == []


def test_type_rules_order():
    """Test that the first matching rule decides the type."""
    assert classify_line("Midterm exam").exam_type == "midterm"
    assert classify_line("Final Exam").exam_type == "exam"
    assert classify_line("Quiz on chapter 2 test material").exam_type == "quiz"
    assert classify_line("Unit test").exam_type == "test"
    assert classify_line("Essay 2 due").exam_type == "project"
    assert classify_line("Final Project").exam_type == "project"
    assert classify_line("Group presentations").exam_type == "presentation"
    assert classify_line("Homework 3") is None


def test_titles():
    """Test title derivation."""
    assert build_title("Final essay due 12/1", classify_line("Final essay due 12/1")) == "Exam"
    assert build_title("Essay #2 due 10/1", classify_line("Essay #2 due 10/1")) == "Essay 2"
    line = "Group Research Presentation due November 20, 2025"
    assert build_title(line, classify_line(line)) == "Group Research Presentation"
    assert build_title("Midterm exam 10/8", classify_line("Midterm exam 10/8")) == "Midterm"


def test_presentation_line():
    """Test a presentation with a descriptive title."""
    exams = classify("Group Research Presentation due November 20, 2025")
    assert exams[0].type == "presentation"
    assert exams[0].title == "Group Research Presentation"
    assert exams[0].date == "2025-11-20"


def test_locate_date_same_line():
    """Test locate_date on a single line."""
    token, context = locate_date(["Quiz 1 on 9/17"], 0)
    assert token.raw == "9/17"
    assert context == ["Quiz 1 on 9/17"]


def test_locate_date_none():
    """Test locate_date when nothing qualifies."""
    token, context = locate_date(["Quiz 1", "Chapter 3"], 0)
    assert token is None
    assert context == ["Quiz 1"]


def test_candidates_in_document_order():
    """Test several candidates in one document."""
    text = "\n".join([
        "Course Schedule",
        "9/17   Quiz 1",
        "10/8   Midterm 1",
        "11/12  Midterm 2",
        "Final Exam: December 12, 2025",
    ])
    exams = classify(text)
    assert [(e.title, e.date) for e in exams] == [
        ("Quiz", "2025-09-17"),
        ("Midterm", "2025-10-08"),
        ("Midterm", "2025-11-12"),
        ("Exam", "2025-12-12"),
    ]
