"""
iCalendar generation module.

Generates standards-compliant .ics files for calendar import.
"""

import uuid
from datetime import datetime, timedelta
from typing import List, Optional

import pytz
from icalendar import Alarm, Calendar, Event

from .models import ExtractedExam, deserialize_date

# Display reminders before each exam, in days
REMINDER_DAYS = (7, 3, 1)


class ICalendarGenerator:
    """Generates iCalendar (.ics) files from extracted exams."""

    def __init__(self, timezone_str: str = "America/New_York", calendar_name: str = "Exams"):
        """Initialize calendar generator.

        Args:
            timezone_str: Timezone advertised to calendar clients (default: America/New_York)
            calendar_name: Display name of the calendar
        """
        self.tz = pytz.timezone(timezone_str)
        self.calendar_name = calendar_name

    def generate_calendar(self, exams: List[ExtractedExam], course: Optional[str] = None) -> Calendar:
        """Generate a calendar with one all-day event per exam.

        Args:
            exams: Extracted exams
            course: Course name used as summary prefix (e.g., "CISC 1600")

        Returns:
            Calendar object ready for export
        """
        cal = Calendar()
        cal.add('prodid', '-//Syllabus Exam Extractor//EN')
        cal.add('version', '2.0')
        cal.add('calscale', 'GREGORIAN')
        cal.add('method', 'PUBLISH')
        cal.add('x-wr-calname', self.calendar_name)
        cal.add('x-wr-timezone', self.tz.zone)

        for exam in exams:
            cal.add_component(self._create_exam_event(exam, course))

        return cal

    def _create_exam_event(self, exam: ExtractedExam, course: Optional[str]) -> Event:
        """Create an all-day event with reminders for an exam.

        Args:
            exam: Extracted exam
            course: Course name, if known

        Returns:
            Event object
        """
        exam_date = deserialize_date(exam.date)
        summary = f"{course} - {exam.title}" if course else exam.title

        event = Event()
        event.add('uid', f"{uuid.uuid4()}@syllabus-exams")
        event.add('dtstamp', datetime.now(pytz.utc))
        event.add('dtstart', exam_date)
        # DTEND of an all-day event is exclusive
        event.add('dtend', exam_date + timedelta(days=1))
        event.add('summary', summary)
        if exam.notes:
            event.add('description', exam.notes)
        event.add('categories', [exam.type])
        event.add('status', 'CONFIRMED')
        event.add('sequence', 0)

        for days in REMINDER_DAYS:
            event.add_component(self._create_reminder(summary, days))

        return event

    def _create_reminder(self, summary: str, days: int) -> Alarm:
        alarm = Alarm()
        alarm.add('action', 'DISPLAY')
        alarm.add('description', f"Reminder: {summary} in {days} day{'s' if days > 1 else ''}")
        alarm.add('trigger', timedelta(days=-days))
        return alarm

    def export_to_file(self, calendar: Calendar, filepath: str):
        """Export calendar to .ics file.

        Args:
            calendar: Calendar object
            filepath: Path to output file
        """
        with open(filepath, 'wb') as f:
            f.write(calendar.to_ical())
