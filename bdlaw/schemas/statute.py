"""Pydantic schemas for statute analysis output.

These schemas are the export boundary: detectors and the tree builder work
with frozen dataclasses, and reporting layers receive these models.
"""

from pydantic import BaseModel, ConfigDict, Field, computed_field

from bdlaw.legal_parser.citations import (
    Citation,
    LexicalReferencesMetadata,
)
from bdlaw.legal_parser.content import ContentRecord
from bdlaw.legal_parser.markers import MarkerDetection, MarkerFrequency
from bdlaw.legal_parser.structure import (
    Clause,
    Section,
    StructuralDefect,
    StructureTree,
    Subsection,
)
from bdlaw.models.enums import (
    CitationPatternType,
    CitationScript,
    DefectKind,
    LexicalConfidence,
    LexicalRelation,
)


class _FrozenSchema(BaseModel):
    model_config = ConfigDict(frozen=True)


class ContentSummarySchema(_FrozenSchema):
    """Content hash and lengths; the text itself is not exported."""

    content_hash: str | None = Field(None, description="sha256:<hex> of content_raw")
    raw_length: int = Field(..., ge=0)
    normalized_length: int = Field(..., ge=0)
    corrected_length: int = Field(..., ge=0)
    language: str = Field(..., description="Dominant script: bengali or english")

    @classmethod
    def from_record(cls, record: ContentRecord, language: str) -> "ContentSummarySchema":
        return cls(
            content_hash=record.content_hash(),
            raw_length=len(record.content_raw),
            normalized_length=len(record.content_normalized),
            corrected_length=len(record.content_corrected),
            language=language,
        )


class PreambleDetectionSchema(_FrozenSchema):
    """Preamble detection with both compatibility names for the flag."""

    has_preamble: bool = Field(False, description="Whether a preamble marker matched")
    preamble_start_position: int | None = Field(None, description="Earliest match offset")
    preamble_markers: list[str] = Field(default_factory=list)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def preamble_present(self) -> bool:
        return self.has_preamble

    @classmethod
    def from_detection(cls, detection: MarkerDetection) -> "PreambleDetectionSchema":
        return cls(
            has_preamble=detection.present,
            preamble_start_position=detection.start_position,
            preamble_markers=list(detection.markers),
        )


class EnactmentDetectionSchema(_FrozenSchema):
    has_enactment_clause: bool = Field(False, description="Whether an enactment formula matched")
    enactment_clause_position: int | None = Field(None, description="Earliest match offset")
    enactment_markers: list[str] = Field(default_factory=list)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def enactment_clause_present(self) -> bool:
        return self.has_enactment_clause

    @classmethod
    def from_detection(cls, detection: MarkerDetection) -> "EnactmentDetectionSchema":
        return cls(
            has_enactment_clause=detection.present,
            enactment_clause_position=detection.start_position,
            enactment_markers=list(detection.markers),
        )


class MarkerFrequencySchema(_FrozenSchema):
    dhara_count: int = Field(0, ge=0, description="Occurrences of ধারা")
    numeral_danda_count: int = Field(0, ge=0, description="Bengali numeral + danda markers")
    chapter_count: int = Field(0, ge=0, description="Occurrences of অধ্যায়")
    schedule_count: int = Field(0, ge=0, description="Occurrences of তফসিল")

    @computed_field  # type: ignore[prop-decorator]
    @property
    def bengali_numbered_sections(self) -> int:
        return self.dhara_count + self.numeral_danda_count

    @classmethod
    def from_frequency(cls, frequency: MarkerFrequency) -> "MarkerFrequencySchema":
        return cls(
            dhara_count=frequency.dhara_count,
            numeral_danda_count=frequency.numeral_danda_count,
            chapter_count=frequency.chapter_count,
            schedule_count=frequency.schedule_count,
        )


class CitationSchema(_FrozenSchema):
    """A citation found in statute text.

    ``position`` addresses content_raw; year and serial keep their original
    digit script.
    """

    pattern_type: CitationPatternType
    script: CitationScript
    citation_year: str | None = None
    citation_serial: str | None = None
    act_type: str | None = None
    act_name: str | None = None
    position: int = Field(..., ge=0)
    citation_text: str
    line_number: int = Field(..., ge=1, description="1-indexed line number")
    context_before: str = ""
    context_after: str = ""
    lexical_relation_type: LexicalRelation = LexicalRelation.MENTION
    lexical_relation_confidence: LexicalConfidence = LexicalConfidence.LOW
    negation_present: bool = Field(
        False, description="Advisory; never changes lexical_relation_type"
    )
    negation_word: str | None = None

    @classmethod
    def from_citation(cls, citation: Citation) -> "CitationSchema":
        return cls(**citation.to_dict())


class LexicalReferencesMetadataSchema(_FrozenSchema):
    count: int = Field(0, ge=0)
    method: str
    disclaimer: str
    relationship_inference: str
    references: list[CitationSchema] = Field(default_factory=list)

    @classmethod
    def from_metadata(
        cls, metadata: LexicalReferencesMetadata
    ) -> "LexicalReferencesMetadataSchema":
        return cls(
            count=metadata.count,
            method=metadata.method,
            disclaimer=metadata.disclaimer,
            relationship_inference=metadata.relationship_inference,
            references=[CitationSchema.from_citation(c) for c in metadata.references],
        )


class StructuralDefectSchema(_FrozenSchema):
    kind: DefectKind
    node: str
    detail: str

    @classmethod
    def from_defect(cls, defect: StructuralDefect) -> "StructuralDefectSchema":
        return cls(kind=defect.kind, node=defect.node, detail=defect.detail)


def _defects(defects: tuple[StructuralDefect, ...]) -> list[StructuralDefectSchema]:
    return [StructuralDefectSchema.from_defect(d) for d in defects]


class ClauseSchema(_FrozenSchema):
    marker: str = Field(..., description="Verbatim marker, e.g. '(ক)'")
    marker_offset: int
    defects: list[StructuralDefectSchema] = Field(default_factory=list)

    @classmethod
    def from_clause(cls, clause: Clause) -> "ClauseSchema":
        return cls(
            marker=clause.marker,
            marker_offset=clause.marker_offset,
            defects=_defects(clause.defects),
        )


class SubsectionSchema(_FrozenSchema):
    marker: str = Field(..., description="Verbatim marker, e.g. '(১)'")
    marker_offset: int
    clauses: list[ClauseSchema] = Field(default_factory=list)
    defects: list[StructuralDefectSchema] = Field(default_factory=list)

    @classmethod
    def from_subsection(cls, subsection: Subsection) -> "SubsectionSchema":
        return cls(
            marker=subsection.marker,
            marker_offset=subsection.marker_offset,
            clauses=[ClauseSchema.from_clause(c) for c in subsection.clauses],
            defects=_defects(subsection.defects),
        )


class SectionSchema(_FrozenSchema):
    number: str | None = None
    heading: str | None = None
    content_start: int = Field(..., description="-1 when the body was not located")
    content_end: int
    subsections: list[SubsectionSchema] = Field(default_factory=list)
    clauses: list[ClauseSchema] = Field(default_factory=list)
    defects: list[StructuralDefectSchema] = Field(default_factory=list)

    @classmethod
    def from_section(cls, section: Section) -> "SectionSchema":
        return cls(
            number=section.number,
            heading=section.heading,
            content_start=section.content_start,
            content_end=section.content_end,
            subsections=[SubsectionSchema.from_subsection(s) for s in section.subsections],
            clauses=[ClauseSchema.from_clause(c) for c in section.clauses],
            defects=_defects(section.defects),
        )


class StructureTreeSchema(_FrozenSchema):
    sections: list[SectionSchema] = Field(default_factory=list)
    preamble_offset: int | None = None
    enactment_offset: int | None = None
    total_sections: int = 0
    total_subsections: int = 0
    total_clauses: int = 0
    total_defects: int = 0
    extraction_method: str = "skeleton"

    @classmethod
    def from_tree(cls, tree: StructureTree) -> "StructureTreeSchema":
        return cls(
            sections=[SectionSchema.from_section(s) for s in tree.sections],
            preamble_offset=tree.preamble.offset if tree.preamble else None,
            enactment_offset=tree.enactment.offset if tree.enactment else None,
            **tree.metadata,
        )


class AnalysisReportSchema(_FrozenSchema):
    """Everything the CLI reports for one document."""

    source: str = Field(..., description="Input path, or '-' for stdin")
    content: ContentSummarySchema
    preamble: PreambleDetectionSchema
    enactment: EnactmentDetectionSchema
    section_markers: MarkerFrequencySchema
    lexical_references: LexicalReferencesMetadataSchema
    structure: StructureTreeSchema | None = None
