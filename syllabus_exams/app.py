"""
Flask web API for the syllabus exam extractor.

Endpoints:
- POST /api/parse      upload a syllabus or paste text, get exam records
- POST /api/calendar   turn exam records into a downloadable .ics file
"""

import io
import logging

from flask import Flask, jsonify, request, send_file
from werkzeug.exceptions import RequestEntityTooLarge
from werkzeug.utils import secure_filename

from .config import load_settings
from .document_text import EXTENSION_MEDIA_TYPES, UNSUPPORTED_MESSAGE, TesseractOcrEngine, document_to_text
from .errors import InputError, SyllabusParseError
from .extractor import parse_syllabus_text
from .icalendar_gen import ICalendarGenerator
from .models import ExtractedExam, UploadedDocument

settings = load_settings()

logging.basicConfig(
    level=settings.log_level,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

# Initialize Flask app
app = Flask(__name__)
app.secret_key = settings.secret_key

# Configuration
ALLOWED_EXTENSIONS = {ext.lstrip('.') for ext in EXTENSION_MEDIA_TYPES}
MAX_FILE_SIZE = settings.max_upload_mb * 1024 * 1024

app.config['MAX_CONTENT_LENGTH'] = MAX_FILE_SIZE

# OCR collaborator for scanned PDFs and images
ocr_engine = TesseractOcrEngine(settings)


def allowed_file(filename: str) -> bool:
    """Check if file extension is allowed.

    Args:
        filename: Name of the uploaded file

    Returns:
        True if file extension is allowed, False otherwise
    """
    return '.' in filename and filename.rsplit('.', 1)[1].lower() in ALLOWED_EXTENSIONS


def error_response(message: str, status: int = 400):
    return jsonify({"error": message}), status


@app.route('/api/parse', methods=['POST'])
def parse():
    """Extract exams from an uploaded syllabus or pasted text.

    Accepts either a multipart form with a ``file`` field or a JSON body with
    a ``text`` field. An optional ``section`` narrows the results.

    Returns:
        JSON with the exams, their count and the extraction method
    """
    try:
        if 'file' in request.files:
            file = request.files['file']
            if file.filename == '':
                return error_response('No file selected. Please choose a syllabus file.')
            if not allowed_file(file.filename):
                return error_response(UNSUPPORTED_MESSAGE)

            section = request.form.get('section') or None
            document = UploadedDocument(
                content=file.read(),
                media_type=file.mimetype,
                filename=secure_filename(file.filename),
            )
            extracted = document_to_text(document, ocr_engine=ocr_engine)
            text, method = extracted.text, extracted.method
        else:
            payload = request.get_json(silent=True) or {}
            if not isinstance(payload, dict):
                raise InputError('Request body must be a JSON object.')
            section = payload.get('section') or None
            text, method = payload.get('text', ''), 'text'
            if not isinstance(text, str):
                raise InputError('"text" must be a string.')
            if section is not None and not isinstance(section, str):
                raise InputError('"section" must be a string.')

        # Only pasted text is length-limited
        max_length = settings.max_text_length if method == 'text' else None
        exams = parse_syllabus_text(text, section=section, max_length=max_length)

    except RequestEntityTooLarge:
        return error_response(f'File too large. Maximum size is {settings.max_upload_mb}MB.', 413)
    except SyllabusParseError as e:
        logger.warning("Could not parse syllabus: %s", e)
        return error_response(str(e))

    return jsonify({
        "exams": [exam.to_dict() for exam in exams],
        "count": len(exams),
        "extraction_method": method,
    })


@app.route('/api/calendar', methods=['POST'])
def calendar():
    """Build an .ics file from exam records.

    Expects JSON ``{"exams": [...], "course": "..."}``.

    Returns:
        The calendar as a file download
    """
    payload = request.get_json(silent=True) or {}
    try:
        exams = [ExtractedExam.from_dict(item) for item in payload.get('exams', [])]
    except (KeyError, TypeError, ValueError) as e:
        return error_response(f'Invalid exam record: {e}')

    if not exams:
        return error_response('No exams to export.')

    cal_gen = ICalendarGenerator(timezone_str=settings.timezone, calendar_name=settings.calendar_name)
    cal = cal_gen.generate_calendar(exams, course=payload.get('course'))

    return send_file(
        io.BytesIO(cal.to_ical()),
        as_attachment=True,
        download_name='exams.ics',
        mimetype='text/calendar'
    )


@app.errorhandler(RequestEntityTooLarge)
def too_large(error):
    """Handle uploads above MAX_CONTENT_LENGTH."""
    return error_response(f'File too large. Maximum size is {settings.max_upload_mb}MB.', 413)


@app.errorhandler(404)
def not_found(error):
    """Handle 404 errors."""
    return error_response('Not found', 404)


@app.errorhandler(500)
def internal_error(error):
    """Handle 500 errors."""
    return error_response('Internal server error', 500)


if __name__ == '__main__':
    # Run development server
    app.run(debug=True, host='0.0.0.0', port=5000)
