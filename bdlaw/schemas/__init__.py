"""Pydantic schemas module.

These models are the serialization boundary for analysis results. The
detectors themselves return frozen dataclasses; each schema has a
``from_*`` constructor that converts one.
"""

from bdlaw.schemas.statute import (
    AnalysisReportSchema,
    CitationSchema,
    ClauseSchema,
    ContentSummarySchema,
    EnactmentDetectionSchema,
    LexicalReferencesMetadataSchema,
    MarkerFrequencySchema,
    PreambleDetectionSchema,
    SectionSchema,
    StructuralDefectSchema,
    StructureTreeSchema,
    SubsectionSchema,
)

__all__ = [
    "AnalysisReportSchema",
    "ContentSummarySchema",
    # Marker schemas
    "PreambleDetectionSchema",
    "EnactmentDetectionSchema",
    "MarkerFrequencySchema",
    # Citation schemas
    "CitationSchema",
    "LexicalReferencesMetadataSchema",
    # Structure schemas
    "StructureTreeSchema",
    "SectionSchema",
    "SubsectionSchema",
    "ClauseSchema",
    "StructuralDefectSchema",
]
