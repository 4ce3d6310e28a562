"""Enumerated value types shared by the detectors, builder and schemas."""

import enum


class MarkerKind(str, enum.Enum):
    """Kind of structural marker found in statute text."""

    PREAMBLE = "preamble"
    ENACTMENT = "enactment"
    DHARA = "dhara"  # ধারা
    NUMERAL_DANDA = "numeral_danda"  # ১৷, ১০৷
    CHAPTER = "chapter"  # অধ্যায়
    SCHEDULE = "schedule"  # তফসিল
    SUBSECTION = "subsection"  # (১), (২)
    CLAUSE = "clause"  # (ক), (খ)


class CitationScript(str, enum.Enum):
    """Script a citation was written in."""

    BENGALI = "bengali"
    ENGLISH = "english"


class CitationPatternType(str, enum.Enum):
    """Citation grammar that produced a match."""

    ENGLISH_ACT_FULL = "ENGLISH_ACT_FULL"
    ENGLISH_ACT_SHORT = "ENGLISH_ACT_SHORT"
    BENGALI_ACT_FULL = "BENGALI_ACT_FULL"
    BENGALI_ACT_SHORT = "BENGALI_ACT_SHORT"
    BENGALI_ORDINANCE = "BENGALI_ORDINANCE"
    PRESIDENTS_ORDER = "PRESIDENTS_ORDER"


class LexicalRelation(str, enum.Enum):
    """Keyword-detected relation between a citation and its context.

    These are lexical observations only. None of them implies a legal
    effect between the citing and cited instrument.
    """

    AMENDMENT = "amendment"
    REPEAL = "repeal"
    SUBSTITUTION = "substitution"
    DEPENDENCY = "dependency"
    INCORPORATION = "incorporation"
    MENTION = "mention"


class LexicalConfidence(str, enum.Enum):
    """How complete the matched citation pattern was."""

    HIGH = "high"  # act name + year + serial
    MEDIUM = "medium"  # year + serial
    LOW = "low"


class DefectKind(str, enum.Enum):
    """Structural defect recorded on a structure tree node."""

    SECTION_NOT_LOCATED = "section_not_located"
    MARKER_OUT_OF_BOUNDS = "marker_out_of_bounds"
    MARKER_TEXT_MISMATCH = "marker_text_mismatch"
    ORDER_VIOLATION = "order_violation"
