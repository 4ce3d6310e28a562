"""Three-view content model and the offset primitive.

A statute is held as three views of one text:

- ``content_raw``: the verbatim source, the only view used for addressing
- ``content_normalized``: Unicode NFC canonicalization of the raw text
- ``content_corrected``: the normalized text after OCR corrections applied
  by an external remediation step

Normalization can change string length, so an offset computed against one
view is meaningless in another. Every position reported by this package
addresses ``content_raw`` and is reconciled through ``locate_offset``.
"""

import bisect
import hashlib
import logging
import re
import unicodedata
from dataclasses import dataclass, replace

logger = logging.getLogger(__name__)

BENGALI_CHAR = re.compile("[\u0980-\u09e5\u09f0-\u09ff]")  # Bengali block minus digits
LATIN_CHAR = re.compile("[A-Za-z]")
BENGALI_DIGIT = re.compile("[০-৯]")
ASCII_DIGIT = re.compile("[0-9]")


@dataclass(frozen=True)
class ContentRecord:
    """Immutable triple of raw, normalized and corrected content."""

    content_raw: str
    content_normalized: str
    content_corrected: str

    def content_hash(self) -> str | None:
        """SHA-256 of the raw view, as ``sha256:<hex>``."""
        if not self.content_raw:
            return None
        digest = hashlib.sha256(self.content_raw.encode("utf-8")).hexdigest()
        return f"sha256:{digest}"

    def with_corrections(self, corrected: str) -> "ContentRecord":
        """Return a new record carrying remediated text.

        The raw and normalized views are carried over unchanged.
        """
        return replace(self, content_corrected=corrected)


def create_content(raw_text: str | None) -> ContentRecord:
    """Create the three-view record for a source text.

    Args:
        raw_text: Source text. None yields a record of empty strings.

    Returns:
        ContentRecord whose corrected view starts equal to the normalized one.
    """
    if raw_text is None:
        return ContentRecord("", "", "")
    raw = str(raw_text)
    normalized = unicodedata.normalize("NFC", raw)
    if len(normalized) != len(raw):
        logger.debug(
            f"NFC changed content length {len(raw)} -> {len(normalized)}; "
            "offsets address content_raw only"
        )
    return ContentRecord(
        content_raw=raw,
        content_normalized=normalized,
        content_corrected=normalized,
    )


def locate_offset(
    needle: str | None, haystack: str | None, search_start: int = 0
) -> int:
    """Find the first occurrence of a trimmed needle at or after search_start.

    This is the single reconciliation primitive for positions: callers
    locate text through it rather than searching on their own.

    Returns:
        Offset into haystack, or -1 when the needle is absent, blank, or not
        found, or the haystack is absent or blank.
    """
    if not needle or not haystack:
        return -1
    trimmed = needle.strip()
    if not trimmed or not haystack.strip():
        return -1
    return haystack.find(trimmed, max(search_start, 0))


class OffsetIndex:
    """Offset lookups bound to one ``content_raw``.

    Line starts are computed once so line numbers resolve with a bisect
    instead of counting newlines per query.
    """

    def __init__(self, content: str | None):
        self.content = content or ""
        self._line_starts = [0] + [
            m.end() for m in re.finditer("\n", self.content)
        ]

    def __len__(self) -> int:
        return len(self.content)

    def locate(self, needle: str | None, search_start: int = 0) -> int:
        return locate_offset(needle, self.content, search_start)

    def verify(self, position: int, text: str) -> bool:
        """Check that ``text`` appears verbatim at ``position``."""
        if position < 0 or not text:
            return False
        return self.content[position : position + len(text)] == text

    def line_number(self, position: int) -> int:
        """1-based line number: newlines before position, plus one."""
        if position < 0:
            raise ValueError(f"Negative position: {position}")
        return bisect.bisect_right(self._line_starts, position)

    def line_bounds(self, position: int) -> tuple[int, int]:
        """Start and end offsets of the line containing position."""
        line = self.line_number(position)
        start = self._line_starts[line - 1]
        end = self.content.find("\n", start)
        return start, len(self.content) if end == -1 else end


def detect_content_language(text: str | None) -> str:
    """Return "bengali" when Bengali characters outnumber Latin ones."""
    if not text:
        return "english"
    bengali = len(BENGALI_CHAR.findall(text))
    latin = len(LATIN_CHAR.findall(text))
    return "bengali" if bengali > latin else "english"


def calculate_language_distribution(text: str | None) -> dict[str, float]:
    """Share of Bengali vs Latin letters, rounded to two places."""
    if not text:
        return {"bn_ratio": 0.0, "en_ratio": 0.0}
    bengali = len(BENGALI_CHAR.findall(text))
    latin = len(LATIN_CHAR.findall(text))
    total = bengali + latin
    if total == 0:
        return {"bn_ratio": 0.0, "en_ratio": 0.0}
    return {
        "bn_ratio": round(bengali / total, 2),
        "en_ratio": round(latin / total, 2),
    }


@dataclass(frozen=True)
class NumericRepresentation:
    bengali_digit_count: int
    ascii_digit_count: int

    @property
    def is_mixed(self) -> bool:
        return self.bengali_digit_count > 0 and self.ascii_digit_count > 0

    @property
    def dominant(self) -> str | None:
        if not self.bengali_digit_count and not self.ascii_digit_count:
            return None
        if self.bengali_digit_count >= self.ascii_digit_count:
            return "bengali"
        return "ascii"


def detect_numeric_representation(text: str | None) -> NumericRepresentation:
    """Count digit scripts without converting any digits."""
    if not text:
        return NumericRepresentation(0, 0)
    return NumericRepresentation(
        bengali_digit_count=len(BENGALI_DIGIT.findall(text)),
        ascii_digit_count=len(ASCII_DIGIT.findall(text)),
    )
