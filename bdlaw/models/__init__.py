"""Shared enumerations for the bdlaw package."""

from bdlaw.models.enums import (
    CitationPatternType,
    CitationScript,
    DefectKind,
    LexicalConfidence,
    LexicalRelation,
    MarkerKind,
)

__all__ = [
    "CitationPatternType",
    "CitationScript",
    "DefectKind",
    "LexicalConfidence",
    "LexicalRelation",
    "MarkerKind",
]
