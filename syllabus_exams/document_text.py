"""
Document-to-text normalization.

Converts an uploaded syllabus (PDF, DOCX, plain text or image) into a single
newline-separated string. Later stages treat "same line" as a strong signal,
so PDF text is rebuilt line by line from word positions rather than taken in
extraction order.

Extraction is an ordered chain of strategies. Each strategy either returns
ExtractedText or None to let the next one try:

    PDF    -> pdfplumber words grouped into lines -> OCR
    DOCX   -> python-docx paragraphs
    TXT    -> decoded as-is
    Image  -> OCR
"""

import io
import logging
import re
from pathlib import Path
from typing import Dict, List, Optional, Sequence

import pdfplumber
import pytesseract
from docx import Document
from pdf2image import convert_from_bytes
from PIL import Image

from .config import Settings, load_settings
from .errors import ExtractionError, UnsupportedFileTypeError
from .models import ExtractedText, UploadedDocument

logger = logging.getLogger(__name__)


PDF = "application/pdf"
DOCX = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"
DOC = "application/msword"
TEXT = "text/plain"
PNG = "image/png"
JPEG = "image/jpeg"

# Accepted media types and the extensions that imply them
EXTENSION_MEDIA_TYPES = {
    ".pdf": PDF,
    ".docx": DOCX,
    ".doc": DOC,
    ".txt": TEXT,
    ".png": PNG,
    ".jpg": JPEG,
    ".jpeg": JPEG,
}
MEDIA_TYPE_ALIASES = {"image/jpg": JPEG}
SUPPORTED_MEDIA_TYPES = set(EXTENSION_MEDIA_TYPES.values())
IMAGE_MEDIA_TYPES = {PNG, JPEG}

UNSUPPORTED_MESSAGE = "Unsupported file type. Please upload PDF, DOCX, TXT, PNG, or JPG files."
NO_TEXT_MESSAGE = "No text could be extracted from the file. Please ensure the document is clear and readable."

# Scanned-document heuristic thresholds
MIN_TEXT_LENGTH = 100
MIN_WORD_COUNT = 20
MIN_ALNUM_RATIO = 0.5


def resolve_media_type(document: UploadedDocument) -> str:
    """Determine the media type of an upload.

    The declared type wins unless it is missing or generic, in which case the
    filename extension decides.

    Raises:
        UnsupportedFileTypeError: If the type is not accepted
    """
    declared = (document.media_type or "").split(";")[0].strip().lower()
    declared = MEDIA_TYPE_ALIASES.get(declared, declared)
    if declared in SUPPORTED_MEDIA_TYPES:
        return declared

    if document.filename and declared in ("", "application/octet-stream"):
        extension = Path(document.filename).suffix.lower()
        if extension in EXTENSION_MEDIA_TYPES:
            return EXTENSION_MEDIA_TYPES[extension]

    raise UnsupportedFileTypeError(UNSUPPORTED_MESSAGE)


def is_likely_scanned(text: str) -> bool:
    """Check whether extracted text looks like a scanned document.

    Text is unreliable when it is very short, has very few words, or is
    mostly non-alphanumeric noise.
    """
    trimmed = text.strip()
    if len(trimmed) < MIN_TEXT_LENGTH:
        return True
    if len(trimmed.split()) < MIN_WORD_COUNT:
        return True
    alnum = len(re.findall(r"[A-Za-z0-9]", trimmed))
    return alnum / len(trimmed) < MIN_ALNUM_RATIO


def extract_pdf_lines(content: bytes) -> str:
    """Extract PDF text with words grouped into visual lines.

    Words whose rounded baseline y-coordinate is equal belong to one line;
    lines are ordered top to bottom and words left to right. Pages are
    processed in order.

    Args:
        content: Raw PDF bytes

    Returns:
        Newline-separated text of all pages
    """
    lines: List[str] = []
    with pdfplumber.open(io.BytesIO(content)) as pdf:
        for page in pdf.pages:
            rows: Dict[int, List[dict]] = {}
            for word in page.extract_words():
                rows.setdefault(round(word["bottom"]), []).append(word)
            for y in sorted(rows):
                words = sorted(rows[y], key=lambda w: w["x0"])
                lines.append(" ".join(w["text"] for w in words))
    return "\n".join(lines)


def extract_docx_text(content: bytes) -> str:
    """Extract paragraph and table text from a DOCX file."""

    doc = Document(io.BytesIO(content))
    lines = [p.text for p in doc.paragraphs]
    for table in doc.tables:
        for row in table.rows:
            lines.append("  ".join(cell.text.strip() for cell in row.cells))
    return "\n".join(lines)


class OcrEngine:
    """Optical character recognition collaborator."""

    def extract_text(self, document: UploadedDocument, media_type: str) -> str:
        """Return best-effort text for the document (may be empty)."""
        raise NotImplementedError


class TesseractOcrEngine(OcrEngine):
    """OCR through Tesseract; PDFs are rasterized page by page first."""

    def __init__(self, settings: Optional[Settings] = None):
        self.settings = settings or load_settings()

    def extract_text(self, document, media_type):

        if self.settings.tesseract_cmd:
            pytesseract.pytesseract.tesseract_cmd = self.settings.tesseract_cmd

        if media_type == PDF:
            images = convert_from_bytes(document.content, dpi=self.settings.ocr_dpi)
        else:
            images = [Image.open(io.BytesIO(document.content))]

        pages = []
        for image in images:
            pages.append(pytesseract.image_to_string(image, lang=self.settings.ocr_language))
        return "\n".join(pages)


class ExtractionStrategy:
    """One step of the text extraction chain."""

    name = "base"

    def attempt(self, document: UploadedDocument, media_type: str) -> Optional[ExtractedText]:
        """Return ExtractedText, or None to let the next strategy try."""
        raise NotImplementedError


class PlainTextStrategy(ExtractionStrategy):
    name = "text"

    def attempt(self, document, media_type):
        return ExtractedText(text=document.content.decode("utf-8", errors="replace"), method=self.name)


class PdfTextStrategy(ExtractionStrategy):
    """Direct PDF extraction, skipped when the result looks scanned."""

    name = "pdf"

    def attempt(self, document, media_type):
        try:
            text = extract_pdf_lines(document.content)
        except Exception as e:
            logger.warning("PDF text extraction failed, trying OCR: %s", e)
            return None

        if is_likely_scanned(text):
            logger.info("PDF appears to be scanned (%d characters extracted), using OCR fallback",
                        len(text.strip()))
            return None
        return ExtractedText(text=text, method=self.name)


class DocxTextStrategy(ExtractionStrategy):
    name = "docx"

    def attempt(self, document, media_type):
        try:
            text = extract_docx_text(document.content)
        except Exception as e:
            raise ExtractionError(f"Could not read Word document: {e}") from e
        return ExtractedText(text=text, method=self.name)


class OcrStrategy(ExtractionStrategy):
    """Last resort: OCR. An empty result ends the whole parse."""

    name = "ocr"

    def __init__(self, engine: OcrEngine):
        self.engine = engine

    def attempt(self, document, media_type):
        try:
            text = self.engine.extract_text(document, media_type)
        except ExtractionError:
            raise
        except Exception as e:
            raise ExtractionError(f"OCR extraction failed: {e}") from e

        if not text or not text.strip():
            raise ExtractionError(NO_TEXT_MESSAGE)
        return ExtractedText(text=text, method=self.name)


class TextExtractionChain:
    """Tries extraction strategies in order until one produces text."""

    def __init__(self, strategies: Sequence[ExtractionStrategy]):
        self.strategies = list(strategies)

    def run(self, document: UploadedDocument, media_type: str) -> ExtractedText:
        for strategy in self.strategies:
            result = strategy.attempt(document, media_type)
            if result is not None:
                logger.debug("Text extracted with %s strategy (%d characters)",
                             strategy.name, len(result.text))
                return result
        raise ExtractionError(NO_TEXT_MESSAGE)


def build_chain(media_type: str, ocr_engine: OcrEngine) -> TextExtractionChain:
    """Strategy chain for a media type."""
    if media_type == PDF:
        return TextExtractionChain([PdfTextStrategy(), OcrStrategy(ocr_engine)])
    if media_type in (DOCX, DOC):
        return TextExtractionChain([DocxTextStrategy()])
    if media_type in IMAGE_MEDIA_TYPES:
        return TextExtractionChain([OcrStrategy(ocr_engine)])
    return TextExtractionChain([PlainTextStrategy()])


def document_to_text(document: UploadedDocument, ocr_engine: Optional[OcrEngine] = None) -> ExtractedText:
    """Convert an uploaded document into line-oriented text.

    Args:
        document: The uploaded file
        ocr_engine: OCR collaborator (default: Tesseract)

    Returns:
        ExtractedText with the text and the strategy that produced it

    Raises:
        UnsupportedFileTypeError: If the file type is not accepted
        ExtractionError: If no text could be extracted, even with OCR
    """
    media_type = resolve_media_type(document)
    logger.info("Extracting text from %s (%s, %d bytes)",
                document.filename or "upload", media_type, len(document.content))
    chain = build_chain(media_type, ocr_engine or TesseractOcrEngine())
    return chain.run(document, media_type)
