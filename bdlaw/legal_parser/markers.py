"""Structural marker detectors for statute text.

All detectors are pure scans over ``content_raw``: they never modify their
input, never cache results, and return an empty shape (False, None, zero
counts, or an empty list) for absent or blank text.
"""

import logging
from dataclasses import dataclass

from bdlaw.config import settings
from bdlaw.legal_parser.content import OffsetIndex
from bdlaw.legal_parser.patterns import DEFAULT_MARKER_PATTERNS, MarkerPatterns
from bdlaw.models.enums import MarkerKind

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MarkerDetection:
    """Result of a preamble or enactment-clause scan.

    Attributes:
        kind: MarkerKind.PREAMBLE or MarkerKind.ENACTMENT.
        present: Whether any marker matched.
        start_position: Earliest match offset, or None.
        markers: Distinct matched strings, in order of first occurrence.
    """

    kind: MarkerKind
    present: bool = False
    start_position: int | None = None
    markers: tuple[str, ...] = ()


@dataclass(frozen=True)
class MarkerFrequency:
    dhara_count: int = 0
    numeral_danda_count: int = 0
    chapter_count: int = 0
    schedule_count: int = 0

    @property
    def bengali_numbered_sections(self) -> int:
        return self.dhara_count + self.numeral_danda_count


@dataclass(frozen=True)
class MarkerMatch:
    """A clause or subsection marker relative to the scanned slice."""

    marker: str
    relative_offset: int


@dataclass(frozen=True)
class MarkerOccurrence:
    text: str
    absolute_offset: int
    kind: MarkerKind
    line_number: int


@dataclass(frozen=True)
class AmendmentMarker:
    """A deletion/amendment/substitution marker with its line context."""

    marker: str
    position: int
    line_number: int
    context_before: str
    context_after: str


@dataclass(frozen=True)
class ScheduleReference:
    text: str
    position: int
    line_number: int


def _is_blank(text: str | None) -> bool:
    return not text or not text.strip()


def _detect(
    text: str | None, kind: MarkerKind, family: str, patterns: MarkerPatterns
) -> MarkerDetection:
    if _is_blank(text):
        return MarkerDetection(kind=kind)

    hits: list[tuple[int, str]] = []
    for regex in patterns.compiled(family):
        hits.extend((m.start(), m.group(0)) for m in regex.finditer(text))
    if not hits:
        return MarkerDetection(kind=kind)

    hits.sort()
    markers: list[str] = []
    for _, matched in hits:
        if matched not in markers:
            markers.append(matched)
    return MarkerDetection(
        kind=kind,
        present=True,
        start_position=hits[0][0],
        markers=tuple(markers),
    )


def detect_preamble(
    text: str | None, patterns: MarkerPatterns = DEFAULT_MARKER_PATTERNS
) -> MarkerDetection:
    """Detect a preamble (যেহেতু / এবং যেহেতু / WHEREAS)."""
    return _detect(text, MarkerKind.PREAMBLE, "preamble", patterns)


def detect_enactment_clause(
    text: str | None, patterns: MarkerPatterns = DEFAULT_MARKER_PATTERNS
) -> MarkerDetection:
    """Detect an enactment formula (সেহেতু এতদ্বারা আইন করা হইল / Be it enacted)."""
    return _detect(text, MarkerKind.ENACTMENT, "enactment", patterns)


def _count(text: str, family: str, patterns: MarkerPatterns) -> int:
    return sum(len(regex.findall(text)) for regex in patterns.compiled(family))


def count_section_markers(
    text: str | None, patterns: MarkerPatterns = DEFAULT_MARKER_PATTERNS
) -> MarkerFrequency:
    """Count section-level markers.

    Each family is counted independently. In particular, numeral+danda
    markers are counted whether or not ধারা appears anywhere in the text.
    """
    if not text:
        return MarkerFrequency()
    frequency = MarkerFrequency(
        dhara_count=_count(text, "dhara", patterns),
        numeral_danda_count=_count(text, "numeral_danda", patterns),
        chapter_count=_count(text, "chapter", patterns),
        schedule_count=_count(text, "schedule", patterns),
    )
    logger.debug(f"Section markers: {frequency}")
    return frequency


def _relative_markers(
    content: str | None, family: str, patterns: MarkerPatterns
) -> list[MarkerMatch]:
    if _is_blank(content):
        return []
    matches: dict[int, MarkerMatch] = {}
    for regex in patterns.compiled(family):
        for m in regex.finditer(content):
            matches.setdefault(m.start(), MarkerMatch(m.group(0), m.start()))
    return [matches[offset] for offset in sorted(matches)]


def detect_clauses(
    content: str | None, patterns: MarkerPatterns = DEFAULT_MARKER_PATTERNS
) -> list[MarkerMatch]:
    """Find (ক)…(ঢ) clause markers, ordered by offset within ``content``."""
    return _relative_markers(content, "clause", patterns)


def detect_subsections(
    content: str | None, patterns: MarkerPatterns = DEFAULT_MARKER_PATTERNS
) -> list[MarkerMatch]:
    """Find (১), (২), … subsection markers, ordered by offset."""
    return _relative_markers(content, "subsection", patterns)


_SECTION_FAMILIES = (
    ("dhara", MarkerKind.DHARA),
    ("numeral_danda", MarkerKind.NUMERAL_DANDA),
    ("chapter", MarkerKind.CHAPTER),
    ("schedule", MarkerKind.SCHEDULE),
)


def detect_section_markers(
    text: str | None, patterns: MarkerPatterns = DEFAULT_MARKER_PATTERNS
) -> list[MarkerOccurrence]:
    """List every section-level marker with its absolute offset and line."""
    if not text:
        return []
    index = OffsetIndex(text)
    occurrences = []
    for family, kind in _SECTION_FAMILIES:
        for regex in patterns.compiled(family):
            for m in regex.finditer(text):
                occurrences.append(
                    MarkerOccurrence(
                        text=m.group(0),
                        absolute_offset=m.start(),
                        kind=kind,
                        line_number=index.line_number(m.start()),
                    )
                )
    occurrences.sort(key=lambda o: (o.absolute_offset, o.kind.value))
    return occurrences


def detect_amendment_markers(
    text: str | None,
    patterns: MarkerPatterns = DEFAULT_MARKER_PATTERNS,
    context_chars: int | None = None,
) -> list[AmendmentMarker]:
    """Find বিলুপ্ত / সংশোধিত / প্রতিস্থাপিত with context clipped to the line."""
    if _is_blank(text):
        return []
    if context_chars is None:
        context_chars = settings.amendment_context_chars
    index = OffsetIndex(text)
    found = []
    for regex in patterns.compiled("amendment"):
        for m in regex.finditer(text):
            line_start, line_end = index.line_bounds(m.start())
            before = text[max(line_start, m.start() - context_chars) : m.start()]
            after = text[m.end() : min(line_end, m.end() + context_chars)]
            found.append(
                AmendmentMarker(
                    marker=m.group(0),
                    position=m.start(),
                    line_number=index.line_number(m.start()),
                    context_before=before.strip(),
                    context_after=after.strip(),
                )
            )
    found.sort(key=lambda a: a.position)
    return found


def detect_schedule_references(
    text: str | None, patterns: MarkerPatterns = DEFAULT_MARKER_PATTERNS
) -> list[ScheduleReference]:
    """Find তফসিল / Schedule / Appendix references."""
    if _is_blank(text):
        return []
    index = OffsetIndex(text)
    found = {}
    for regex in patterns.compiled("schedule_reference"):
        for m in regex.finditer(text):
            found.setdefault(
                m.start(),
                ScheduleReference(m.group(0), m.start(), index.line_number(m.start())),
            )
    return [found[offset] for offset in sorted(found)]
