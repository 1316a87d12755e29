"""Tests for the command-line interface."""

import io
import json

import pytest

from syllabus_exams.main import main, read_input
from syllabus_exams.models import UploadedDocument


def test_read_input_file(tmp_path):
    """Test that files become uploads with a media type."""
    path = tmp_path / "syllabus.txt"
    path.write_text("Midterm 1 on 10/8/2026")

    source = read_input(str(path))
    assert isinstance(source, UploadedDocument)
    assert source.media_type == "text/plain"
    assert source.filename == "syllabus.txt"


def test_read_input_stdin(monkeypatch):
    """Test that - reads pasted text from stdin."""
    monkeypatch.setattr("sys.stdin", io.StringIO("Quiz 1 on 9/17/2026"))
    assert read_input("-") == "Quiz 1 on 9/17/2026"


def test_main_writes_json_and_ics(tmp_path, capsys):
    """Test a full CLI run."""
    path = tmp_path / "cisc1600.txt"
    path.write_text("Midterm 1 on 10/8/2026\nFinal Exam on 12/12/2026\n")
    output_dir = tmp_path / "out"

    main([str(path), "--output-dir", str(output_dir), "--ics", "--course", "CISC 1600"])

    exams = json.loads((output_dir / "cisc1600_exams.json").read_text())
    assert [e["title"] for e in exams] == ["Midterm", "Exam"]
    assert (output_dir / "cisc1600.ics").exists()
    assert "Found 2 exam(s)" in capsys.readouterr().out


def test_main_missing_file(tmp_path, capsys):
    """Test a missing input file."""
    with pytest.raises(SystemExit) as exc_info:
        main([str(tmp_path / "nope.pdf")])
    assert exc_info.value.code == 1
    assert "Error: Syllabus file not found" in capsys.readouterr().out


def test_main_parse_error(tmp_path, capsys):
    """Test that parse errors exit with status 1."""
    path = tmp_path / "empty.txt"
    path.write_text("")

    with pytest.raises(SystemExit) as exc_info:
        main([str(path), "--output-dir", str(tmp_path)])
    assert exc_info.value.code == 1
    assert "Error: Please enter some text to parse." in capsys.readouterr().out
