"""
Section disambiguation.

Syllabi shared by several sections often list dates per section, either under
headings ("Section L01", "Sec. 2", "L02:") or with inline markers
("(Section L02)"). SectionTracker follows the heading context while lines are
scanned and decides whether a candidate belongs to the requested section.
"""

import re
from typing import Optional

_SECTION_ID = r"([A-Za-z0-9]{1,4})"

# Headings that open a block of section-specific content
SECTION_HEADING_PATTERNS = [
    re.compile(rf"^\s*(?:Section|Sec\.?)\s+{_SECTION_ID}\b", re.IGNORECASE),
    re.compile(rf"^\s*{_SECTION_ID}:(?!\d)"),  # "L02:" but not "9:30"
]

_SECTION_WORD = re.compile(r"\b(?:Section|Sec\.?)(?=\s)", re.IGNORECASE)

# Markers embedded in a line: "(Section L02)", "[Sec. 1]"
INLINE_SECTION_PATTERN = re.compile(
    rf"[\(\[]\s*(?:Section|Sec\.?)\s+{_SECTION_ID}\s*[\)\]]",
    re.IGNORECASE,
)


def normalize_section(section_id: Optional[str]) -> Optional[str]:
    """Normalize a section identifier for comparison.

    Uppercases and trims; purely numeric identifiers lose leading zeros
    ("01" -> "1") while mixed identifiers ("L01") are kept intact.
    """
    if section_id is None:
        return None
    normalized = section_id.strip().upper()
    if not normalized:
        return None
    if normalized.isdigit():
        normalized = normalized.lstrip('0') or '0'
    return normalized


def _looks_like_prefix_id(candidate: str) -> bool:
    # "Note:" and "Date:" are labels, not sections
    return any(c.isdigit() for c in candidate) or (len(candidate) == 1 and candidate.isupper())


def match_section_heading(line: str) -> Optional[str]:
    """Return the normalized section ID if line is a section heading."""
    if len(_SECTION_WORD.findall(line)) > 1:
        # "Section L01  Section L02" is a table header, not a heading
        return None
    first, prefix = SECTION_HEADING_PATTERNS
    match = first.match(line)
    if match:
        return normalize_section(match.group(1))
    match = prefix.match(line)
    if match and _looks_like_prefix_id(match.group(1)):
        return normalize_section(match.group(1))
    return None


def find_inline_section(text: str) -> Optional[str]:
    """Return the normalized section ID of the first inline marker in text."""
    match = INLINE_SECTION_PATTERN.search(text)
    return normalize_section(match.group(1)) if match else None


class SectionTracker:
    """Tracks the current section heading while scanning lines."""

    def __init__(self, target: Optional[str] = None):
        self.target = normalize_section(target)
        self.current: Optional[str] = None

    @property
    def active(self) -> bool:
        return self.target is not None

    def observe(self, line: str) -> None:
        """Update the current section if line is a heading."""
        heading = match_section_heading(line)
        if heading:
            self.current = heading

    def attribute(self, context: str) -> Optional[str]:
        """Section a candidate belongs to; inline markers beat headings."""
        return find_inline_section(context) or self.current

    def accepts(self, context: str) -> bool:
        """True if a candidate with this context should be kept."""
        if not self.active:
            return True
        return self.attribute(context) == self.target
