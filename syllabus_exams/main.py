"""
Main CLI entry point for the syllabus exam extractor.
"""

import argparse
import json
import logging
import mimetypes
import sys
from pathlib import Path

from .config import load_settings
from .document_text import EXTENSION_MEDIA_TYPES, TesseractOcrEngine
from .errors import SyllabusParseError
from .extractor import parse_syllabus
from .icalendar_gen import ICalendarGenerator
from .models import UploadedDocument


def read_input(path_arg: str):
    """Read the syllabus named on the command line.

    Args:
        path_arg: File path, or "-" to read pasted text from stdin

    Returns:
        Text (for stdin) or an UploadedDocument (for files)
    """
    if path_arg == "-":
        return sys.stdin.read()

    path = Path(path_arg)
    media_type = EXTENSION_MEDIA_TYPES.get(path.suffix.lower()) or mimetypes.guess_type(path.name)[0]
    return UploadedDocument(content=path.read_bytes(), media_type=media_type, filename=path.name)


def main(argv=None):
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Extract exam dates from a course syllabus"
    )
    parser.add_argument(
        "syllabus_path",
        type=str,
        help="Path to syllabus file (PDF, DOCX, TXT, PNG, JPG), or - to read text from stdin"
    )
    parser.add_argument(
        "--section",
        type=str,
        default=None,
        help="Only keep exams for this course section (e.g., L02)"
    )
    parser.add_argument(
        "--output-dir",
        type=str,
        default=".",
        help="Output directory for JSON and .ics files (default: current directory)"
    )
    parser.add_argument(
        "--ics",
        action="store_true",
        help="Also write an iCalendar file with reminders"
    )
    parser.add_argument(
        "--course",
        type=str,
        default=None,
        help="Course name used in calendar event titles"
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Log every candidate and skip decision"
    )

    args = parser.parse_args(argv)
    settings = load_settings()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else settings.log_level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )

    if args.syllabus_path != "-" and not Path(args.syllabus_path).exists():
        print(f"Error: Syllabus file not found: {args.syllabus_path}")
        sys.exit(1)

    output_dir = Path(args.output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)

    try:
        source = read_input(args.syllabus_path)
        exams = parse_syllabus(source, section=args.section, ocr_engine=TesseractOcrEngine(settings))
    except SyllabusParseError as e:
        print(f"Error: {e}")
        sys.exit(1)

    print(f"Found {len(exams)} exam(s)")
    for exam in exams:
        print(f"  {exam.date}  {exam.type:<12} {exam.title}")

    base_name = "pasted" if args.syllabus_path == "-" else Path(args.syllabus_path).stem
    json_path = output_dir / f"{base_name}_exams.json"

    # Save JSON
    with open(json_path, 'w') as f:
        json.dump([exam.to_dict() for exam in exams], f, indent=2)
    print(f"Saved extracted exams to: {json_path}")

    # Save .ics
    if args.ics:
        cal_gen = ICalendarGenerator(timezone_str=settings.timezone, calendar_name=settings.calendar_name)
        calendar = cal_gen.generate_calendar(exams, course=args.course)
        ics_path = output_dir / f"{base_name}.ics"
        cal_gen.export_to_file(calendar, str(ics_path))
        print(f"Saved calendar to: {ics_path}")


if __name__ == "__main__":
    main()
