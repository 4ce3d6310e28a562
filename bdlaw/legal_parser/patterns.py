"""Pattern and keyword tables for Bengali/English statute analysis.

This module defines the regex grammars and keyword dictionaries used by the
marker detectors and the citation extractor. Tables are immutable values:
detectors receive them as constructor/keyword arguments, so tests can swap
in alternate tables without touching engine logic.

Pattern Categories:
- Citation grammars: Bengali short/full act, Bengali ordinance, English
  short/full act, President's Order
- Lexical relation keywords: amendment, repeal, substitution, dependency,
  incorporation (first match wins, in that order)
- Negation cues: advisory only, never change a classification
- Structural markers: preamble, enactment clause, ধারা, numeral+danda,
  অধ্যায়, তফসিল, subsection and clause markers

Every table is validated when it is constructed. A malformed grammar or
dictionary raises ValueError at load time rather than on a detector call.
"""

import re
from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType

from bdlaw.models.enums import CitationPatternType, CitationScript, LexicalRelation

# Horizontal whitespace; citations never span a line break.
WS = r"[^\S\n]"

# Bengali digits ০-৯ (U+09E6 to U+09EF). Python's \d would also match these,
# so English grammars use [0-9] explicitly.
BN_DIGIT = "[০-৯]"
EN_DIGIT = "[0-9]"
ROMAN_NUMERAL = "[IVXLCDM]+"

# Bengali currency-numerator glyph used as the statute danda (U+09F7).
BENGALI_DANDA = "৷"
# Devanagari danda (U+0964), the common full stop in typed Bengali.
DEVANAGARI_DANDA = "।"

# Clause alphabet: ক খ গ ঘ ঙ চ ছ জ ঝ ঞ ট ঠ ড ঢ (U+0995 to U+09A2).
CLAUSE_LETTERS = tuple(chr(cp) for cp in range(0x0995, 0x09A3))

# Title words in full citations; bounded so long lines stay linear.
_EN_TITLE = rf"[A-Z][A-Za-z]*(?:{WS}+(?:[A-Z][A-Za-z]*|of|and|the|for)){{0,12}}"
_BN_TITLE_WORD = "[^\\s,।৷()]+"
_BN_TITLE = rf"{_BN_TITLE_WORD}(?:{WS}+{_BN_TITLE_WORD}){{0,12}}"

# Nukta letters have a precomposed code point and a base+nukta spelling.
# NFC keeps the decomposed form, but scraped sources contain both.
_NUKTA_LETTERS = {
    "ড়": "ড়",  # RRA
    "ঢ়": "ঢ়",  # RHA
    "য়": "য়",  # YYA
}


def nukta_variants(word: str) -> tuple[str, ...]:
    """Return the distinct spellings of a word across nukta encodings."""
    decomposed = word
    for composed, parts in _NUKTA_LETTERS.items():
        decomposed = decomposed.replace(composed, parts)
    recomposed = decomposed
    for composed, parts in _NUKTA_LETTERS.items():
        recomposed = recomposed.replace(parts, composed)

    variants = [word]
    for variant in (decomposed, recomposed):
        if variant not in variants:
            variants.append(variant)
    return tuple(variants)


def keyword_regex(keyword: str) -> str:
    """Build the regex source used to look for a keyword in context text.

    ASCII keywords are matched case-insensitively on word boundaries.
    Bengali keywords are matched as substrings in any nukta spelling,
    since \\b is unreliable around Bengali vowel signs.
    """
    if keyword.isascii():
        words = (re.escape(w) for w in keyword.split())
        return r"\b(?i:" + r"\s+".join(words) + r")\b"
    return "(?:" + "|".join(re.escape(v) for v in nukta_variants(keyword)) + ")"


def _compile(name: str, regex: str, flags: int = 0) -> re.Pattern:
    try:
        return re.compile(regex, flags)
    except re.error as e:
        raise ValueError(f"Pattern {name!r} does not compile: {e}") from e


@dataclass(frozen=True)
class CitationPattern:
    """Definition of a citation grammar with its regex and group layout.

    Group indices point into the regex's capture groups; ``alt_year_group``
    is consulted when ``year_group`` did not participate in the match.
    """

    name: CitationPatternType
    script: CitationScript
    regex: str
    year_group: int
    serial_group: int
    description: str
    act_name_group: int | None = None
    act_type_group: int | None = None
    alt_year_group: int | None = None
    flags: int = 0

    def __post_init__(self) -> None:
        if not self.regex:
            raise ValueError(f"Citation pattern {self.name!r} has an empty regex")
        compiled = _compile(str(self.name), self.regex, self.flags)
        groups = [
            g
            for g in (
                self.year_group,
                self.serial_group,
                self.act_name_group,
                self.act_type_group,
                self.alt_year_group,
            )
            if g is not None
        ]
        if min(groups) < 1 or max(groups) > compiled.groups:
            raise ValueError(
                f"Citation pattern {self.name!r} references group {max(groups)} "
                f"but its regex only has {compiled.groups} groups"
            )

    def compile(self) -> re.Pattern:
        """Compile the regex pattern with its configured flags."""
        return re.compile(self.regex, self.flags)


# Citation grammars, in the order they are scanned.
CITATION_PATTERNS: tuple[CitationPattern, ...] = (
    # "Income Tax Ordinance, 1984 (XXXVI of 1984)"
    # "Code of Criminal Procedure Act, 1898 (V of 1898)"
    CitationPattern(
        name=CitationPatternType.ENGLISH_ACT_FULL,
        script=CitationScript.ENGLISH,
        regex=(
            rf"\b({_EN_TITLE}{WS}+(Act|Ordinance)),?{WS}*({EN_DIGIT}{{4}})"
            rf"{WS}*\(({ROMAN_NUMERAL}|{EN_DIGIT}+){WS}+of{WS}+({EN_DIGIT}{{4}})\)"
        ),
        act_name_group=1,
        act_type_group=2,
        year_group=3,
        serial_group=4,
        alt_year_group=5,
        description="<Title> Act, <year> (<serial> of <year>)",
    ),
    # "Act XV of 1984", "Ordinance 12 of 1982"
    CitationPattern(
        name=CitationPatternType.ENGLISH_ACT_SHORT,
        script=CitationScript.ENGLISH,
        regex=(
            rf"\b(Act|Ordinance){WS}+({ROMAN_NUMERAL}|{EN_DIGIT}+){WS}+of"
            rf"{WS}+({EN_DIGIT}{{4}})(?!{EN_DIGIT})"
        ),
        act_type_group=1,
        serial_group=2,
        year_group=3,
        description="(Act|Ordinance) <Roman|Arabic> of <year>",
    ),
    # "দণ্ডবিধি আইন, ১৮৬০ (১৮৬০ সনের ৪৫ নং আইন)"
    CitationPattern(
        name=CitationPatternType.BENGALI_ACT_FULL,
        script=CitationScript.BENGALI,
        regex=(
            rf"({_BN_TITLE}{WS}+(আইন)),?{WS}*({BN_DIGIT}{{4}}){WS}*"
            rf"\(({BN_DIGIT}{{4}}){WS}*সনের{WS}*({BN_DIGIT}+){WS}*নং{WS}*আইন\)"
        ),
        act_name_group=1,
        act_type_group=2,
        year_group=3,
        alt_year_group=4,
        serial_group=5,
        description="<শিরোনাম> আইন, <সন> (<সন> সনের <নং> নং আইন)",
    ),
    # "১৯৮৪ সনের ৩৬ নং আইন", "১৯৮২ সনের ২ নং অধ্যাদেশ"
    CitationPattern(
        name=CitationPatternType.BENGALI_ACT_SHORT,
        script=CitationScript.BENGALI,
        regex=(
            rf"(?<!{BN_DIGIT})({BN_DIGIT}{{4}}){WS}*সনের{WS}*({BN_DIGIT}+)"
            rf"{WS}*নং{WS}*(আইন|অধ্যাদেশ)"
        ),
        year_group=1,
        serial_group=2,
        act_type_group=3,
        description="<সন> সনের <নং> নং (আইন|অধ্যাদেশ)",
    ),
    # "বাংলাদেশ ব্যাংক অধ্যাদেশ, ১৯৭২ (অধ্যাদেশ নং ১২৭, ১৯৭২)"
    CitationPattern(
        name=CitationPatternType.BENGALI_ORDINANCE,
        script=CitationScript.BENGALI,
        regex=(
            rf"({_BN_TITLE}{WS}+(অধ্যাদেশ)),?{WS}*({BN_DIGIT}{{4}}){WS}*"
            rf"\(অধ্যাদেশ{WS}*নং{WS}*({BN_DIGIT}+),?{WS}*({BN_DIGIT}{{4}})\)"
        ),
        act_name_group=1,
        act_type_group=2,
        year_group=3,
        serial_group=4,
        alt_year_group=5,
        description="<শিরোনাম> অধ্যাদেশ, <সন> (অধ্যাদেশ নং <নং>, <সন>)",
    ),
    # "P.O. 12 of 1972", "PO No. 48 of 1972", "P.O 5 of 1973"
    CitationPattern(
        name=CitationPatternType.PRESIDENTS_ORDER,
        script=CitationScript.ENGLISH,
        regex=(
            rf"\bP\.?O\.?{WS}*(?:No\.?{WS}*)?({EN_DIGIT}+){WS}+of"
            rf"{WS}+({EN_DIGIT}{{4}})(?!{EN_DIGIT})"
        ),
        serial_group=1,
        year_group=2,
        description="(P.O.|PO|P.O) [No.] <number> of <year>",
    ),
)

# Relation keywords in priority order; the first relation with a hit wins.
LEXICAL_RELATION_KEYWORDS: Mapping[LexicalRelation, tuple[str, ...]] = MappingProxyType(
    {
        LexicalRelation.AMENDMENT: (
            "সংশোধন",
            "সংশোধিত",
            "amendment",
            "amended",
            "amending",
        ),
        LexicalRelation.REPEAL: (
            "রহিত",
            "রহিতকরণ",
            "বিলুপ্ত",
            "repeal",
            "repealed",
            "repealing",
        ),
        LexicalRelation.SUBSTITUTION: (
            "প্রতিস্থাপিত",
            "প্রতিস্থাপন",
            "substituted",
            "substitution",
            "replaced",
        ),
        LexicalRelation.DEPENDENCY: (
            "সাপেক্ষে",
            "অধীন",
            "অনুসারে",
            "subject to",
            "under",
            "pursuant to",
        ),
        LexicalRelation.INCORPORATION: (
            "সন্নিবেশিত",
            "অন্তর্ভুক্ত",
            "inserted",
            "incorporated",
            "added",
        ),
    }
)

# Legacy name for the relation table. An alias of the same object, never a
# second output field.
REFERENCE_TYPE_KEYWORDS = LEXICAL_RELATION_KEYWORDS

# Negation cues. Flagged for linguist review: inferred from observed usage and
# unlikely to cover every Bengali legal negation idiom.
NEGATION_CUES: tuple[str, ...] = (
    "না",
    "নয়",
    "নহে",
    "নাই",
    "নেই",
    "ব্যতীত",
    "ছাড়া",
    "not",
    "except",
)


@dataclass(frozen=True)
class PatternTables:
    """Citation grammars plus relation and negation dictionaries.

    Construct with alternate values to change what the extractor sees.
    Mappings are copied into read-only proxies so a table cannot be mutated
    after validation.
    """

    citation_patterns: tuple[CitationPattern, ...] = CITATION_PATTERNS
    relation_keywords: Mapping[LexicalRelation, tuple[str, ...]] = field(
        default_factory=lambda: LEXICAL_RELATION_KEYWORDS
    )
    negation_cues: tuple[str, ...] = NEGATION_CUES

    def __post_init__(self) -> None:
        patterns = tuple(self.citation_patterns)
        if not patterns:
            raise ValueError("At least one citation pattern is required")
        for pattern in patterns:
            if not isinstance(pattern, CitationPattern):
                raise ValueError(f"Not a CitationPattern: {pattern!r}")
        names = [p.name for p in patterns]
        duplicates = sorted({str(n) for n in names if names.count(n) > 1})
        if duplicates:
            raise ValueError(f"Duplicate citation pattern names: {duplicates}")

        keywords: dict[LexicalRelation, tuple[str, ...]] = {}
        for relation, words in self.relation_keywords.items():
            try:
                relation = LexicalRelation(relation)
            except ValueError as e:
                raise ValueError(f"Unknown lexical relation {relation!r}") from e
            if relation is LexicalRelation.MENTION:
                raise ValueError("'mention' is the fallback and takes no keywords")
            if isinstance(words, str):
                raise ValueError(f"Keywords for {relation.value!r} must be a sequence")
            words = tuple(words)
            if not words or any(not str(w).strip() for w in words):
                raise ValueError(f"Keywords for {relation.value!r} must be non-empty")
            keywords[relation] = words

        cues = tuple(self.negation_cues)
        if any(not str(c).strip() for c in cues):
            raise ValueError("Negation cues must be non-empty strings")

        object.__setattr__(self, "citation_patterns", patterns)
        object.__setattr__(self, "relation_keywords", MappingProxyType(keywords))
        object.__setattr__(self, "negation_cues", cues)


@dataclass(frozen=True)
class MarkerPatterns:
    """Regex sources for the structural marker detectors.

    Each field holds regex source text; the compiled form is built once in
    ``__post_init__`` and read back through ``compiled()``.
    """

    preamble: tuple[str, ...] = (
        "যেহেতু",
        r"এবং\s*যেহেতু",
        r"\b(?i:whereas)\b",
    )
    enactment: tuple[str, ...] = (
        r"সেহেতু\s*এতদ্বারা\s*আইন\s*করা\s*হইল",
        r"এতদ্বারা\s*নিম্নরূপ\s*আইন\s*করা\s*হইল",
        r"\b(?i:be\s+it\s+enacted)\b",
        r"\b(?i:it\s+is\s+hereby\s+enacted)\b",
    )
    dhara: str = "ধারা"
    numeral_danda: str = f"{BN_DIGIT}+[{BENGALI_DANDA}{DEVANAGARI_DANDA}]"
    chapter: str = keyword_regex("অধ্যায়")
    schedule: str = "তফসিল"
    subsection: str = rf"\({BN_DIGIT}+\)"
    clause: str = r"\([" + "".join(CLAUSE_LETTERS) + r"]\)"
    amendment: tuple[str, ...] = ("বিলুপ্ত", "সংশোধিত", "প্রতিস্থাপিত")
    schedule_reference: tuple[str, ...] = ("তফসিল", r"\b(?i:schedule|appendix)\b")
    _compiled: Mapping[str, tuple[re.Pattern, ...]] = field(
        init=False, repr=False, compare=False
    )

    def __post_init__(self) -> None:
        compiled: dict[str, tuple[re.Pattern, ...]] = {}
        for name in (
            "preamble",
            "enactment",
            "dhara",
            "numeral_danda",
            "chapter",
            "schedule",
            "subsection",
            "clause",
            "amendment",
            "schedule_reference",
        ):
            value = getattr(self, name)
            sources = (value,) if isinstance(value, str) else tuple(value)
            if not sources or any(not s for s in sources):
                raise ValueError(f"Marker pattern {name!r} is empty")
            compiled[name] = tuple(
                _compile(f"{name}[{i}]", source) for i, source in enumerate(sources)
            )
        object.__setattr__(self, "_compiled", MappingProxyType(compiled))

    def compiled(self, name: str) -> tuple[re.Pattern, ...]:
        """Return the compiled patterns for one marker family."""
        return self._compiled[name]


DEFAULT_TABLES = PatternTables()
DEFAULT_MARKER_PATTERNS = MarkerPatterns()


def get_patterns_by_script(
    script: CitationScript, tables: PatternTables = DEFAULT_TABLES
) -> list[CitationPattern]:
    """Get all citation patterns written in one script."""
    return [p for p in tables.citation_patterns if p.script == script]
