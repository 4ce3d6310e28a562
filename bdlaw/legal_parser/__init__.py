"""Statute text parser: content views, markers, citations and structure."""

from bdlaw.legal_parser.citations import (
    Citation,
    CitationExtractor,
    classify_lexical_relation,
    extract_citations,
    get_lexical_references_metadata,
)
from bdlaw.legal_parser.content import (
    ContentRecord,
    OffsetIndex,
    create_content,
    locate_offset,
)
from bdlaw.legal_parser.markers import (
    count_section_markers,
    detect_clauses,
    detect_enactment_clause,
    detect_preamble,
)
from bdlaw.legal_parser.patterns import (
    DEFAULT_MARKER_PATTERNS,
    DEFAULT_TABLES,
    LEXICAL_RELATION_KEYWORDS,
    REFERENCE_TYPE_KEYWORDS,
    MarkerPatterns,
    PatternTables,
)

__all__ = [
    # Content
    "ContentRecord",
    "OffsetIndex",
    "create_content",
    "locate_offset",
    # Markers
    "detect_preamble",
    "detect_enactment_clause",
    "count_section_markers",
    "detect_clauses",
    # Citations
    "Citation",
    "CitationExtractor",
    "extract_citations",
    "classify_lexical_relation",
    "get_lexical_references_metadata",
    # Pattern tables
    "PatternTables",
    "MarkerPatterns",
    "DEFAULT_TABLES",
    "DEFAULT_MARKER_PATTERNS",
    "LEXICAL_RELATION_KEYWORDS",
    "REFERENCE_TYPE_KEYWORDS",
    # Structure
    "SectionInput",
    "StructureTree",
    "build_structure_tree",
    # Span accounting
    "SpanAccountant",
    "CoverageReport",
]


# Lazy imports for the modules that compose the detectors above
def __getattr__(name: str):
    if name in ("SectionInput", "StructureTree", "build_structure_tree"):
        from bdlaw.legal_parser import structure

        return getattr(structure, name)
    elif name in ("SpanAccountant", "CoverageReport"):
        from bdlaw.legal_parser import span_accounting

        return getattr(span_accounting, name)
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
