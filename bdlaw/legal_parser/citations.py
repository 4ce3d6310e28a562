"""Citation extraction and lexical relation classification.

This module finds references to other instruments in statute text, such as
"১৯৮৪ সনের ৩৬ নং আইন" or "Act XV of 1984", and tags each one with the
relation keyword seen around it.

Relations are lexical observations. A citation tagged ``repeal`` sits near a
repeal keyword; nothing here claims that one instrument repeals another.
"""

import logging
import re
from dataclasses import dataclass, field, replace
from typing import Any

from bdlaw.config import settings
from bdlaw.legal_parser.content import OffsetIndex
from bdlaw.legal_parser.patterns import (
    DEFAULT_TABLES,
    LEXICAL_RELATION_KEYWORDS,
    REFERENCE_TYPE_KEYWORDS,
    CitationPattern,
    PatternTables,
    keyword_regex,
)
from bdlaw.models.enums import (
    CitationPatternType,
    CitationScript,
    LexicalConfidence,
    LexicalRelation,
)

logger = logging.getLogger(__name__)

LEXICAL_RELATION_DISCLAIMER = (
    "Detected via pattern matching. No legal force or applicability implied."
)
RELATIONSHIP_INFERENCE = "explicitly_prohibited"
DETECTION_METHOD = "pattern-based detection"

__all__ = [
    "LEXICAL_RELATION_KEYWORDS",
    "REFERENCE_TYPE_KEYWORDS",
    "Citation",
    "CitationExtractor",
    "LexicalReferencesMetadata",
    "NegationCheck",
    "RelationClassification",
    "assign_lexical_confidence",
    "check_negation",
    "classify_lexical_relation",
    "extract_citations",
    "get_lexical_references_metadata",
]


@dataclass(frozen=True)
class NegationCheck:
    negation_present: bool = False
    negation_word: str | None = None
    negation_position: int | None = None


@dataclass(frozen=True)
class RelationClassification:
    """Keyword-derived relation plus the advisory negation flag."""

    lexical_relation_type: LexicalRelation
    negation_present: bool = False
    negation_word: str | None = None


@dataclass(frozen=True)
class Citation:
    """A single citation found in statute text.

    ``position`` is the absolute offset of ``citation_text`` in the text that
    was scanned, and ``text[position:position + len(citation_text)]`` is
    always ``citation_text``. Year and serial keep their original digits.
    """

    pattern_type: CitationPatternType
    script: CitationScript
    citation_year: str | None
    citation_serial: str | None
    act_type: str | None
    position: int
    citation_text: str
    line_number: int
    context_before: str
    context_after: str
    lexical_relation_type: LexicalRelation = LexicalRelation.MENTION
    negation_present: bool = False
    negation_word: str | None = None
    act_name: str | None = None
    lexical_relation_confidence: LexicalConfidence = LexicalConfidence.LOW

    @property
    def end_position(self) -> int:
        return self.position + len(self.citation_text)

    def __str__(self) -> str:
        return f"{self.pattern_type.value}@{self.position}: {self.citation_text}"

    def to_dict(self) -> dict[str, Any]:
        return {
            "pattern_type": self.pattern_type.value,
            "script": self.script.value,
            "citation_year": self.citation_year,
            "citation_serial": self.citation_serial,
            "act_type": self.act_type,
            "act_name": self.act_name,
            "position": self.position,
            "citation_text": self.citation_text,
            "line_number": self.line_number,
            "context_before": self.context_before,
            "context_after": self.context_after,
            "lexical_relation_type": self.lexical_relation_type.value,
            "lexical_relation_confidence": self.lexical_relation_confidence.value,
            "negation_present": self.negation_present,
            "negation_word": self.negation_word,
        }


def assign_lexical_confidence(citation: Citation) -> LexicalConfidence:
    """Rate how complete the matched citation is.

    high: act name, year and serial; medium: year and serial; low otherwise.
    """
    if citation.citation_year and citation.citation_serial:
        if citation.act_name:
            return LexicalConfidence.HIGH
        return LexicalConfidence.MEDIUM
    return LexicalConfidence.LOW


@dataclass(frozen=True)
class LexicalReferencesMetadata:
    """Citation list wrapped with its fixed disclaimer contract."""

    references: tuple[Citation, ...] = ()
    method: str = DETECTION_METHOD
    disclaimer: str = LEXICAL_RELATION_DISCLAIMER
    relationship_inference: str = field(default=RELATIONSHIP_INFERENCE, init=False)

    @property
    def count(self) -> int:
        return len(self.references)

    def to_dict(self) -> dict[str, Any]:
        return {
            "count": self.count,
            "method": self.method,
            "disclaimer": self.disclaimer,
            "relationship_inference": self.relationship_inference,
            "references": [c.to_dict() for c in self.references],
        }


def get_lexical_references_metadata(
    citations: list[Citation] | tuple[Citation, ...] | None,
) -> LexicalReferencesMetadata:
    """Wrap citations with count, method and disclaimer."""
    return LexicalReferencesMetadata(references=tuple(citations or ()))


class CitationExtractor:
    """Extract citations from statute text.

    Example:
        >>> extractor = CitationExtractor()
        >>> citations = extractor.extract("১৯৮৪ সনের ৩৬ নং আইন দ্বারা")
        >>> citations[0].citation_serial
        '৩৬'
    """

    def __init__(
        self,
        patterns: PatternTables | None = None,
        context_chars: int | None = None,
        negation_window: int | None = None,
    ):
        """Initialize the extractor.

        Args:
            patterns: Pattern tables to use. Defaults to DEFAULT_TABLES.
            context_chars: Context captured on each side of a citation.
            negation_window: Characters searched either side for negation.
        """
        self.tables = patterns or DEFAULT_TABLES
        self.context_chars = (
            settings.citation_context_chars if context_chars is None else context_chars
        )
        self.negation_window = (
            settings.negation_window_chars if negation_window is None else negation_window
        )

        self._compiled_patterns = [(p, p.compile()) for p in self.tables.citation_patterns]
        self._relation_regexes = [
            (relation, re.compile("|".join(keyword_regex(k) for k in keywords)))
            for relation, keywords in self.tables.relation_keywords.items()
        ]
        self._negation_regexes = [
            (cue, re.compile(keyword_regex(cue)))
            for cue in sorted(self.tables.negation_cues, key=len, reverse=True)
        ]

    def extract(self, text: str | None) -> list[Citation]:
        """Extract every citation, ordered by position.

        Overlapping matches are resolved by keeping the earliest; at the same
        position the longest match wins, so a full citation absorbs the short
        form nested inside it.
        """
        if not text or not text.strip():
            return []

        index = OffsetIndex(text)
        matches: list[tuple[re.Match, CitationPattern]] = []
        for pattern, compiled in self._compiled_patterns:
            matches.extend((m, pattern) for m in compiled.finditer(text))
        matches.sort(key=lambda item: (item[0].start(), -(item[0].end() - item[0].start())))

        citations: list[Citation] = []
        last_end = 0
        for match, pattern in matches:
            if match.start() < last_end:
                continue
            citation = self._process_match(match, pattern, text, index)
            if not index.verify(citation.position, citation.citation_text):
                logger.warning(
                    f"Dropping citation that does not round-trip at "
                    f"{citation.position}: {citation.citation_text!r}"
                )
                continue
            citations.append(citation)
            last_end = match.end()

        logger.debug(f"Extracted {len(citations)} citations from {len(matches)} matches")
        return citations

    def _process_match(
        self,
        match: re.Match,
        pattern: CitationPattern,
        text: str,
        index: OffsetIndex,
    ) -> Citation:
        def group(number: int | None) -> str | None:
            if number is None:
                return None
            value = match.group(number)
            return value.strip() if value else None

        start, end = match.start(), match.end()
        context_before = text[max(0, start - self.context_chars) : start].strip()
        context_after = text[end : end + self.context_chars].strip()

        window = f"{context_before} {match.group(0)} {context_after}"
        negation = self.check_negation(text, start)
        relation = self.classify(window, negation)

        citation = Citation(
            pattern_type=pattern.name,
            script=pattern.script,
            citation_year=group(pattern.year_group) or group(pattern.alt_year_group),
            citation_serial=group(pattern.serial_group),
            act_type=group(pattern.act_type_group),
            act_name=group(pattern.act_name_group),
            position=start,
            citation_text=match.group(0),
            line_number=index.line_number(start),
            context_before=context_before,
            context_after=context_after,
            lexical_relation_type=relation.lexical_relation_type,
            negation_present=relation.negation_present,
            negation_word=relation.negation_word,
        )
        return _with_confidence(citation)

    def check_negation(self, text: str | None, position: int) -> NegationCheck:
        """Look for a negation cue within the window around position.

        Longer cues are tried first so নয় is reported rather than the
        shorter cue it contains.
        """
        if not text or position < 0:
            return NegationCheck()
        window_start = max(0, position - self.negation_window)
        window = text[window_start : position + self.negation_window]
        for cue, regex in self._negation_regexes:
            m = regex.search(window)
            if m:
                return NegationCheck(True, cue, window_start + m.start())
        return NegationCheck()

    def classify(
        self, context_window: str | None, negation_info: NegationCheck | None = None
    ) -> RelationClassification:
        """Return the first relation whose keywords appear in the window.

        Negation is reported alongside the relation and never changes it.
        """
        negation = negation_info or NegationCheck()
        relation = LexicalRelation.MENTION
        if context_window:
            for candidate, regex in self._relation_regexes:
                if regex.search(context_window):
                    relation = candidate
                    break
        return RelationClassification(
            lexical_relation_type=relation,
            negation_present=negation.negation_present,
            negation_word=negation.negation_word,
        )


def _with_confidence(citation: Citation) -> Citation:
    return replace(
        citation, lexical_relation_confidence=assign_lexical_confidence(citation)
    )


_default_extractor: CitationExtractor | None = None


def _get_default_extractor() -> CitationExtractor:
    global _default_extractor
    if _default_extractor is None:
        _default_extractor = CitationExtractor()
    return _default_extractor


def extract_citations(text: str | None) -> list[Citation]:
    """Extract citations with the default tables and settings."""
    return _get_default_extractor().extract(text)


def check_negation(
    text: str | None, position: int, window: int | None = None
) -> NegationCheck:
    if window is None:
        return _get_default_extractor().check_negation(text, position)
    return CitationExtractor(negation_window=window).check_negation(text, position)


def classify_lexical_relation(
    context_window: str | None, negation_info: NegationCheck | None = None
) -> RelationClassification:
    """Classify a context window with the default keyword table."""
    return _get_default_extractor().classify(context_window, negation_info)
