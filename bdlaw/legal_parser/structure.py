"""Structure tree builder.

Composes a section/subsection/clause skeleton with ``content_raw`` into a
nested tree whose every offset is absolute and checked against the source.

The skeleton comes from a content locator outside this package, or from
``SectionInput.from_body`` / ``derive_section_skeleton``. Each section
carries its ``body_text`` and marker offsets relative to that text. The
builder locates each body in ``content_raw`` and converts relative offsets:

- subsection and direct clause: section slice base + relative_offset
- clause nested in a subsection: subsection marker_offset + relative_offset

Problems are recorded as ``StructuralDefect`` entries on the offending node.
The builder never raises for a malformed section, so one bad section leaves
the rest of the document intact.
"""

import logging
import re
from dataclasses import dataclass
from typing import Any

from bdlaw.legal_parser.citations import Citation
from bdlaw.legal_parser.content import OffsetIndex
from bdlaw.legal_parser.markers import detect_clauses, detect_subsections
from bdlaw.legal_parser.patterns import (
    BENGALI_DANDA,
    BN_DIGIT,
    DEFAULT_MARKER_PATTERNS,
    DEVANAGARI_DANDA,
    WS,
    MarkerPatterns,
)
from bdlaw.models.enums import DefectKind

logger = logging.getLogger(__name__)

REFERENCE_SEMANTICS = "string_match_only"
REFERENCE_WARNING = (
    "Keywords detected in proximity to citation strings. No legal relationship, "
    "effect, direction, or applicability is implied."
)

# "৫৷ শিরোনাম৷" at the start of a line opens a section.
SECTION_HEADING = re.compile(
    rf"^{WS}*({BN_DIGIT}+)[{BENGALI_DANDA}{DEVANAGARI_DANDA}]{WS}*"
    rf"([^\n{BENGALI_DANDA}{DEVANAGARI_DANDA}]*)",
    re.M,
)


# =============================================================================
# Skeleton input
# =============================================================================


@dataclass(frozen=True, slots=True)
class ClauseInput:
    marker: str
    relative_offset: int


@dataclass(frozen=True, slots=True)
class SubsectionInput:
    marker: str
    relative_offset: int
    clauses: tuple[ClauseInput, ...] = ()


@dataclass(frozen=True, slots=True)
class SectionInput:
    """One section of the skeleton.

    ``subsections`` and ``clauses`` offsets are relative to ``body_text``;
    clauses inside a subsection are relative to that subsection's marker.
    """

    number: str | None
    heading: str | None
    body_text: str
    subsections: tuple[SubsectionInput, ...] = ()
    clauses: tuple[ClauseInput, ...] = ()

    @classmethod
    def from_body(
        cls,
        number: str | None,
        heading: str | None,
        body_text: str,
        patterns: MarkerPatterns = DEFAULT_MARKER_PATTERNS,
    ) -> "SectionInput":
        """Build the skeleton for one section with the marker detectors.

        The text between consecutive subsection markers is that subsection's
        clause scope; clauses before the first subsection belong to the
        section directly.
        """
        subsection_marks = detect_subsections(body_text, patterns)
        clause_marks = detect_clauses(body_text, patterns)

        subsections = []
        for i, sub in enumerate(subsection_marks):
            if i + 1 < len(subsection_marks):
                scope_end = subsection_marks[i + 1].relative_offset
            else:
                scope_end = len(body_text)
            nested = tuple(
                ClauseInput(c.marker, c.relative_offset - sub.relative_offset)
                for c in clause_marks
                if sub.relative_offset <= c.relative_offset < scope_end
            )
            subsections.append(SubsectionInput(sub.marker, sub.relative_offset, nested))

        first_subsection = (
            subsection_marks[0].relative_offset if subsection_marks else len(body_text)
        )
        direct = tuple(
            ClauseInput(c.marker, c.relative_offset)
            for c in clause_marks
            if c.relative_offset < first_subsection
        )
        return cls(number, heading, body_text, tuple(subsections), direct)


def derive_section_skeleton(
    content_raw: str | None, patterns: MarkerPatterns = DEFAULT_MARKER_PATTERNS
) -> list[SectionInput]:
    """Split text into sections at line-initial numeral+danda headings."""
    if not content_raw:
        return []
    headings = list(SECTION_HEADING.finditer(content_raw))
    sections = []
    for i, m in enumerate(headings):
        end = headings[i + 1].start() if i + 1 < len(headings) else len(content_raw)
        heading = m.group(2).strip() or None
        sections.append(
            SectionInput.from_body(m.group(1), heading, content_raw[m.start() : end], patterns)
        )
    return sections


# =============================================================================
# Tree
# =============================================================================


@dataclass(frozen=True, slots=True)
class StructuralDefect:
    kind: DefectKind
    node: str
    detail: str


@dataclass(frozen=True, slots=True)
class Clause:
    marker: str
    marker_offset: int
    defects: tuple[StructuralDefect, ...] = ()


@dataclass(frozen=True, slots=True)
class Subsection:
    marker: str
    marker_offset: int
    clauses: tuple[Clause, ...] = ()
    defects: tuple[StructuralDefect, ...] = ()


@dataclass(frozen=True, slots=True)
class Section:
    number: str | None
    heading: str | None
    content_start: int
    content_end: int
    subsections: tuple[Subsection, ...] = ()
    clauses: tuple[Clause, ...] = ()
    defects: tuple[StructuralDefect, ...] = ()

    @property
    def located(self) -> bool:
        return self.content_start >= 0

    def contains(self, offset: int) -> bool:
        return self.located and self.content_start <= offset < self.content_end


@dataclass(frozen=True, slots=True)
class TextAnchor:
    """Preamble or enactment text and where it sits in content_raw (-1 if absent)."""

    text: str
    offset: int


@dataclass(frozen=True, slots=True)
class StructureTree:
    sections: tuple[Section, ...]
    preamble: TextAnchor | None = None
    enactment: TextAnchor | None = None
    extraction_method: str = "skeleton"

    @property
    def total_subsections(self) -> int:
        return sum(len(s.subsections) for s in self.sections)

    @property
    def total_clauses(self) -> int:
        return sum(
            len(s.clauses) + sum(len(sub.clauses) for sub in s.subsections)
            for s in self.sections
        )

    @property
    def defects(self) -> tuple[StructuralDefect, ...]:
        found: list[StructuralDefect] = []
        for section in self.sections:
            found.extend(section.defects)
            found.extend(d for c in section.clauses for d in c.defects)
            for sub in section.subsections:
                found.extend(sub.defects)
                found.extend(d for c in sub.clauses for d in c.defects)
        return tuple(found)

    @property
    def is_valid(self) -> bool:
        return not self.defects

    @property
    def metadata(self) -> dict[str, Any]:
        return {
            "total_sections": len(self.sections),
            "total_subsections": self.total_subsections,
            "total_clauses": self.total_clauses,
            "total_defects": len(self.defects),
            "extraction_method": self.extraction_method,
        }


# =============================================================================
# Builder
# =============================================================================


class _NodeBuilder:
    """Converts one section's skeleton into tree nodes, collecting defects."""

    def __init__(self, index: OffsetIndex, label: str, start: int, end: int):
        self.index = index
        self.label = label
        self.start = start
        self.end = end

    def defect(self, kind: DefectKind, node: str, detail: str) -> StructuralDefect:
        logger.warning(f"Structural defect [{kind.value}] at {node}: {detail}")
        return StructuralDefect(kind, node, detail)

    def _check(
        self, marker: str, offset: int, lower: int, previous: int | None, node: str
    ) -> list[StructuralDefect]:
        defects = []
        if not (lower <= offset < self.end):
            defects.append(
                self.defect(
                    DefectKind.MARKER_OUT_OF_BOUNDS,
                    node,
                    f"offset {offset} outside [{lower}, {self.end})",
                )
            )
        elif not self.index.verify(offset, marker):
            found = self.index.content[offset : offset + len(marker)]
            defects.append(
                self.defect(
                    DefectKind.MARKER_TEXT_MISMATCH,
                    node,
                    f"expected {marker!r} at {offset}, found {found!r}",
                )
            )
        if previous is not None and 0 <= offset <= previous:
            defects.append(
                self.defect(
                    DefectKind.ORDER_VIOLATION,
                    node,
                    f"offset {offset} does not follow sibling at {previous}",
                )
            )
        return defects

    def clauses(
        self, inputs: tuple[ClauseInput, ...], base: int, lower: int, parent: str
    ) -> tuple[Clause, ...]:
        built = []
        previous = None
        for clause in inputs:
            offset = base + clause.relative_offset if self.start >= 0 else -1
            node = f"{parent}/{clause.marker}"
            defects = self._check(clause.marker, offset, lower, previous, node)
            built.append(Clause(clause.marker, offset, tuple(defects)))
            previous = offset
        return tuple(built)

    def subsections(
        self, inputs: tuple[SubsectionInput, ...], base: int
    ) -> tuple[Subsection, ...]:
        built = []
        previous = None
        for sub in inputs:
            offset = base + sub.relative_offset if self.start >= 0 else -1
            node = f"{self.label}/{sub.marker}"
            defects = self._check(sub.marker, offset, self.start, previous, node)
            # Nested clauses must sit at or after their subsection marker.
            clauses = self.clauses(sub.clauses, offset, max(offset, self.start), node)
            built.append(Subsection(sub.marker, offset, clauses, tuple(defects)))
            previous = offset
        return tuple(built)


def build_structure_tree(
    sections: list[SectionInput] | tuple[SectionInput, ...],
    content_raw: str | None,
    preamble: str | None = None,
    enactment: str | None = None,
    extraction_method: str = "skeleton",
) -> StructureTree:
    """Build a bounds-checked structure tree.

    Args:
        sections: Section skeleton in document order.
        content_raw: The verbatim source text.
        preamble: Preamble text to anchor, if known.
        enactment: Enactment clause text to anchor, if known.
        extraction_method: Recorded in the tree metadata.

    Returns:
        StructureTree. Inspect ``defects`` / ``is_valid`` for problems.
    """
    content_raw = content_raw or ""
    index = OffsetIndex(content_raw)

    # Locate every body first; content_end depends on the next located start.
    located: list[tuple[SectionInput, int, int]] = []
    cursor = 0
    for section in sections:
        start = index.locate(section.body_text, cursor)
        if start == -1:
            located.append((section, -1, -1))
            continue
        leading = len(section.body_text) - len(section.body_text.lstrip())
        located.append((section, start, start - leading))
        cursor = start + len(section.body_text.strip())

    built = []
    for i, (section, start, base) in enumerate(located):
        label = f"section {section.number}" if section.number else f"section #{i + 1}"
        if start == -1:
            end = -1
        else:
            following = [s for _, s, _ in located[i + 1 :] if s != -1]
            end = following[0] if following else len(content_raw)

        builder = _NodeBuilder(index, label, start, end)
        defects = []
        if start == -1:
            defects.append(
                builder.defect(
                    DefectKind.SECTION_NOT_LOCATED,
                    label,
                    "body text not found in content_raw",
                )
            )
        built.append(
            Section(
                number=section.number,
                heading=section.heading,
                content_start=start,
                content_end=end,
                subsections=builder.subsections(section.subsections, base),
                clauses=builder.clauses(section.clauses, base, start, label),
                defects=tuple(defects),
            )
        )

    tree = StructureTree(
        sections=tuple(built),
        preamble=_anchor(preamble, index),
        enactment=_anchor(enactment, index),
        extraction_method=extraction_method,
    )
    logger.debug(f"Built structure tree: {tree.metadata}")
    return tree


def _anchor(text: str | None, index: OffsetIndex) -> TextAnchor | None:
    if not text or not text.strip():
        return None
    offset = index.locate(text)
    if offset == -1:
        logger.warning(f"Anchor text not found in content_raw: {text[:40]!r}")
    return TextAnchor(text.strip(), offset)


# =============================================================================
# Scope anchoring
# =============================================================================


@dataclass(frozen=True, slots=True)
class ReferenceScope:
    section_index: int | None = None
    section: str | None = None
    subsection: str | None = None
    clause: str | None = None


def _last_at_or_before(nodes, offset: int):
    candidates = [n for n in nodes if 0 <= n.marker_offset <= offset]
    return candidates[-1] if candidates else None


def anchor_reference_scope(offset: int, tree: StructureTree) -> ReferenceScope:
    """Find the section, subsection and clause enclosing an absolute offset."""
    for i, section in enumerate(tree.sections):
        if not section.contains(offset):
            continue
        subsection = _last_at_or_before(section.subsections, offset)
        clause_pool = subsection.clauses if subsection else section.clauses
        clause = _last_at_or_before(clause_pool, offset)
        return ReferenceScope(
            section_index=i,
            section=section.number,
            subsection=subsection.marker if subsection else None,
            clause=clause.marker if clause else None,
        )
    return ReferenceScope()


@dataclass(frozen=True, slots=True)
class CrossReference:
    citation: Citation
    scope: ReferenceScope
    reference_semantics: str = REFERENCE_SEMANTICS
    warning: str = REFERENCE_WARNING

    def to_dict(self) -> dict[str, Any]:
        return {
            **self.citation.to_dict(),
            "scope": {
                "section_index": self.scope.section_index,
                "section": self.scope.section,
                "subsection": self.scope.subsection,
                "clause": self.scope.clause,
            },
            "reference_semantics": self.reference_semantics,
            "warning": self.warning,
        }


def build_cross_references(
    citations: list[Citation] | None, tree: StructureTree
) -> list[CrossReference]:
    """Attach tree scope to citations, one entry per citation offset."""
    seen: set[int] = set()
    references = []
    for citation in sorted(citations or [], key=lambda c: c.position):
        if citation.position in seen:
            continue
        seen.add(citation.position)
        references.append(
            CrossReference(citation, anchor_reference_scope(citation.position, tree))
        )
    return references
