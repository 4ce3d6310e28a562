"""Span accounting for citation and marker coverage.

This module provides the SpanAccountant class that tracks which portions
of a statute's ``content_raw`` have been claimed by citations and markers,
finds unclaimed gaps that may hold a citation the grammars missed, and
generates coverage reports.
"""

import json
import re
from dataclasses import dataclass, field, replace

from bdlaw.config import settings
from bdlaw.legal_parser.citations import Citation
from bdlaw.legal_parser.content import OffsetIndex
from bdlaw.legal_parser.markers import MarkerOccurrence
from bdlaw.legal_parser.patterns import (
    LEXICAL_RELATION_KEYWORDS,
    keyword_regex,
)

# Words that suggest citation content in unclaimed text
CITATION_HINT_KEYWORDS = [
    *(kw for keywords in LEXICAL_RELATION_KEYWORDS.values() for kw in keywords),
    "সনের",
    "নং আইন",
    "অধ্যাদেশ",
    "Act",
    "Ordinance",
    "President's Order",
]


@dataclass(frozen=True)
class ClaimedSpan:
    """A span of content_raw claimed by a detector."""

    start_pos: int
    end_pos: int
    source: str
    label: str


@dataclass(frozen=True)
class UnclaimedSpan:
    start_pos: int
    end_pos: int
    text: str
    contains_keywords: bool = False
    detected_keywords: tuple[str, ...] = ()


@dataclass
class CoverageReport:
    """Report on text coverage from detection."""

    total_length: int
    claimed_length: int
    coverage_percentage: float
    claimed_spans: list[ClaimedSpan]
    unclaimed_spans: list[UnclaimedSpan]
    flagged_unclaimed: list[UnclaimedSpan] = field(default_factory=list)
    ignored_unclaimed: list[UnclaimedSpan] = field(default_factory=list)


class SpanAccountant:
    """Tracks claimed spans of content_raw and flags suspicious gaps.

    Example usage:
        accountant = SpanAccountant(record.content_raw)
        claim_citations(accountant, extract_citations(record.content_raw))
        report = accountant.generate_coverage_report()
    """

    def __init__(self, content_raw: str):
        self.text = content_raw
        self.total_length = len(content_raw)
        self._index = OffsetIndex(content_raw)
        self._claimed_spans: list[ClaimedSpan] = []
        self._keyword_pattern = re.compile(
            "|".join(f"({keyword_regex(kw)})" for kw in CITATION_HINT_KEYWORDS)
        )

    def claim_span(self, start_pos: int, end_pos: int, source: str, label: str) -> None:
        """Mark a span of text as claimed.

        Raises:
            ValueError: If positions are invalid.
        """
        if start_pos < 0 or end_pos > self.total_length:
            raise ValueError(
                f"Span positions out of bounds: {start_pos}-{end_pos} "
                f"(text length: {self.total_length})"
            )
        if end_pos <= start_pos:
            raise ValueError(f"Invalid span: end ({end_pos}) must be > start ({start_pos})")

        self._claimed_spans.append(ClaimedSpan(start_pos, end_pos, source, label))

    def verify_claim(self, start_pos: int, text: str) -> bool:
        """Check that text appears verbatim at start_pos."""
        return self._index.verify(start_pos, text)

    def get_claimed_spans(self) -> list[ClaimedSpan]:
        return sorted(self._claimed_spans, key=lambda s: (s.start_pos, s.end_pos))

    def get_unclaimed_spans(self, min_length: int | None = None) -> list[UnclaimedSpan]:
        """Get gaps between claims whose stripped text is at least min_length."""
        if min_length is None:
            min_length = settings.min_unclaimed_span_length

        unclaimed: list[UnclaimedSpan] = []
        current_pos = 0
        boundaries = [(s.start_pos, s.end_pos) for s in self._merged()]
        boundaries.append((self.total_length, self.total_length))

        for start, end in boundaries:
            if start > current_pos:
                gap_text = self.text[current_pos:start]
                if len(gap_text.strip()) >= min_length:
                    unclaimed.append(UnclaimedSpan(current_pos, start, gap_text))
            current_pos = max(current_pos, end)

        return unclaimed

    def _merged(self) -> list[ClaimedSpan]:
        merged: list[ClaimedSpan] = []
        for span in self.get_claimed_spans():
            if merged and span.start_pos <= merged[-1].end_pos:
                last = merged[-1]
                merged[-1] = replace(last, end_pos=max(last.end_pos, span.end_pos))
            else:
                merged.append(span)
        return merged

    def check_unclaimed_for_keywords(self, span: UnclaimedSpan) -> UnclaimedSpan:
        """Return the span annotated with any citation hint keywords it contains."""
        found = sorted({m.group(0) for m in self._keyword_pattern.finditer(span.text)})
        if not found:
            return span
        return replace(span, contains_keywords=True, detected_keywords=tuple(found))

    def generate_coverage_report(
        self, min_unclaimed_length: int | None = None
    ) -> CoverageReport:
        claimed_spans = self.get_claimed_spans()
        claimed_length = sum(s.end_pos - s.start_pos for s in self._merged())
        coverage_percentage = (
            (claimed_length / self.total_length * 100) if self.total_length > 0 else 0.0
        )

        unclaimed = [
            self.check_unclaimed_for_keywords(span)
            for span in self.get_unclaimed_spans(min_length=min_unclaimed_length)
        ]
        return CoverageReport(
            total_length=self.total_length,
            claimed_length=claimed_length,
            coverage_percentage=round(coverage_percentage, 2),
            claimed_spans=claimed_spans,
            unclaimed_spans=unclaimed,
            flagged_unclaimed=[s for s in unclaimed if s.contains_keywords],
            ignored_unclaimed=[s for s in unclaimed if not s.contains_keywords],
        )

    def to_json(self, include_text: bool = False) -> str:
        data = {
            "total_length": self.total_length,
            "claimed_spans": [
                {
                    "start_pos": s.start_pos,
                    "end_pos": s.end_pos,
                    "source": s.source,
                    "label": s.label,
                    **({"text": self.text[s.start_pos : s.end_pos]} if include_text else {}),
                }
                for s in self.get_claimed_spans()
            ],
        }
        return json.dumps(data, ensure_ascii=False, indent=2)


def claim_citations(accountant: SpanAccountant, citations: list[Citation]) -> None:
    """Claim the span of every citation, checking each round-trips first."""
    for citation in citations:
        if not accountant.verify_claim(citation.position, citation.citation_text):
            raise ValueError(
                f"Citation text does not match content at {citation.position}: "
                f"{citation.citation_text!r}"
            )
        accountant.claim_span(
            citation.position,
            citation.end_position,
            "citation",
            citation.pattern_type.value,
        )


def claim_markers(accountant: SpanAccountant, markers: list[MarkerOccurrence]) -> None:
    for marker in markers:
        if not accountant.verify_claim(marker.absolute_offset, marker.text):
            raise ValueError(
                f"Marker text does not match content at {marker.absolute_offset}: "
                f"{marker.text!r}"
            )
        accountant.claim_span(
            marker.absolute_offset,
            marker.absolute_offset + len(marker.text),
            "marker",
            marker.kind.value,
        )
