"""Exceptions raised when a syllabus cannot be parsed at all.

"Nothing found" is never an error: the extractor returns an empty list.
"""


class SyllabusParseError(Exception):
    """Base class for unrecoverable parse failures."""


class InputError(SyllabusParseError):
    """The input is empty or otherwise unusable before any scanning."""


class UnsupportedFileTypeError(InputError):
    """The uploaded file is not one of the accepted types."""


class ExtractionError(SyllabusParseError):
    """No text could be extracted from the document, even with OCR."""
