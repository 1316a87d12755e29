"""
Runtime configuration.

Settings come from environment variables so the CLI, the web app and the
OCR engine share one source of truth.
"""

import os
from dataclasses import dataclass
from typing import Optional


@dataclass
class Settings:
    """Configuration values for the extractor and its outer surfaces."""
    ocr_language: str = "eng"            # Tesseract language pack
    tesseract_cmd: Optional[str] = None  # Path to tesseract binary, if not on PATH
    ocr_dpi: int = 300                   # Rasterization DPI for scanned PDFs
    max_text_length: int = 50000         # Limit for pasted syllabus text
    timezone: str = "America/New_York"   # Timezone advertised in exported calendars
    calendar_name: str = "Exams"         # X-WR-CALNAME of exported calendars
    secret_key: str = "dev-secret-key-change-in-production"
    max_upload_mb: int = 16
    log_level: str = "INFO"


def load_settings() -> Settings:
    """Read settings from the environment, falling back to defaults.

    Returns:
        Settings populated from SYLLABUS_* and related variables
    """
    defaults = Settings()
    return Settings(
        ocr_language=os.getenv("SYLLABUS_OCR_LANG", defaults.ocr_language),
        tesseract_cmd=os.getenv("TESSERACT_CMD") or None,
        ocr_dpi=int(os.getenv("SYLLABUS_OCR_DPI", defaults.ocr_dpi)),
        max_text_length=int(os.getenv("SYLLABUS_MAX_TEXT_LENGTH", defaults.max_text_length)),
        timezone=os.getenv("SYLLABUS_TIMEZONE", defaults.timezone),
        calendar_name=os.getenv("SYLLABUS_CALENDAR_NAME", defaults.calendar_name),
        secret_key=os.getenv("SECRET_KEY", defaults.secret_key),
        max_upload_mb=int(os.getenv("MAX_UPLOAD_MB", defaults.max_upload_mb)),
        log_level=os.getenv("LOG_LEVEL", defaults.log_level).upper(),
    )
