"""Tests for citation extraction and lexical relation classification."""

import dataclasses

import pytest

from bdlaw.legal_parser.citations import (
    LEXICAL_RELATION_DISCLAIMER,
    CitationExtractor,
    NegationCheck,
    assign_lexical_confidence,
    check_negation,
    classify_lexical_relation,
    extract_citations,
    get_lexical_references_metadata,
)
from bdlaw.legal_parser.patterns import (
    CITATION_PATTERNS,
    PatternTables,
    nukta_variants,
)
from bdlaw.models.enums import (
    CitationPatternType,
    CitationScript,
    LexicalConfidence,
    LexicalRelation,
)

SCENARIO = "এই বিধান ১৯৮৪ সনের ৩৬ নং আইন দ্বারা নিয়ন্ত্রিত।"

MIXED = (
    "Act XV of 1984 এবং ১৯৮২ সনের ২ নং অধ্যাদেশ\n"
    "P.O. 12 of 1972 অনুসারে\n"
    "দণ্ডবিধি আইন, ১৮৬০ (১৮৬০ সনের ৪৫ নং আইন)\n"
    "the Income Tax Ordinance, 1984 (XXXVI of 1984) is repealed\n"
)


class TestScenario:
    """Tests for the single Bengali citation scenario."""

    def test_single_bengali_citation(self) -> None:
        """Test every field of the one citation found."""
        citations = extract_citations(SCENARIO)
        assert len(citations) == 1
        citation = citations[0]
        assert citation.citation_year == "১৯৮৪"
        assert citation.citation_serial == "৩৬"
        assert citation.act_type == "আইন"
        assert citation.script == CitationScript.BENGALI
        assert citation.script.value == "bengali"
        assert citation.position == SCENARIO.index("১৯৮৪")
        assert citation.line_number == 1
        assert citation.pattern_type == CitationPatternType.BENGALI_ACT_SHORT
        assert citation.citation_text == "১৯৮৪ সনের ৩৬ নং আইন"

    def test_context_windows(self) -> None:
        """Test that context is taken from either side of the match."""
        (citation,) = extract_citations(SCENARIO)
        assert citation.context_before == "এই বিধান"
        assert citation.context_after.startswith("দ্বারা")


class TestExtractCitations:
    """Tests for CitationExtractor.extract."""

    def test_mixed_scripts_in_order(self) -> None:
        """Test that citations from both scripts come back by position."""
        citations = extract_citations(MIXED)
        assert [c.pattern_type for c in citations] == [
            CitationPatternType.ENGLISH_ACT_SHORT,
            CitationPatternType.BENGALI_ACT_SHORT,
            CitationPatternType.PRESIDENTS_ORDER,
            CitationPatternType.BENGALI_ACT_FULL,
            CitationPatternType.ENGLISH_ACT_FULL,
        ]
        assert [c.line_number for c in citations] == [1, 1, 2, 3, 4]
        positions = [c.position for c in citations]
        assert positions == sorted(positions)

    def test_round_trip(self) -> None:
        """Test that every citation's text sits at its position."""
        for text in (SCENARIO, MIXED, MIXED * 3):
            for c in extract_citations(text):
                assert text[c.position : c.position + len(c.citation_text)] == c.citation_text

    def test_full_citation_absorbs_short(self) -> None:
        """Test that the short form inside a full citation is not repeated."""
        text = "দণ্ডবিধি আইন, ১৮৬০ (১৮৬০ সনের ৪৫ নং আইন)"
        (citation,) = extract_citations(text)
        assert citation.pattern_type == CitationPatternType.BENGALI_ACT_FULL
        assert citation.act_name == "দণ্ডবিধি আইন"
        assert citation.citation_year == "১৮৬০"
        assert citation.citation_serial == "৪৫"

    def test_full_title_takes_preceding_words(self) -> None:
        """Test that a Bengali title runs back over the words before আইন."""
        text = "এই বিধান দণ্ডবিধি আইন, ১৮৬০ (১৮৬০ সনের ৪৫ নং আইন)"
        (citation,) = extract_citations(text)
        assert citation.act_name == "এই বিধান দণ্ডবিধি আইন"
        assert citation.position == 0
        assert citation.citation_year == "১৮৬০"
        assert citation.citation_serial == "৪৫"
        assert citation.citation_text == text

    def test_english_full(self) -> None:
        """Test the English full form and its components."""
        text = "the Income Tax Ordinance, 1984 (XXXVI of 1984)"
        (citation,) = extract_citations(text)
        assert citation.act_name == "Income Tax Ordinance"
        assert citation.act_type == "Ordinance"
        assert citation.citation_year == "1984"
        assert citation.citation_serial == "XXXVI"
        assert citation.script == CitationScript.ENGLISH
        assert citation.lexical_relation_confidence == LexicalConfidence.HIGH

    def test_presidents_order(self) -> None:
        """Test President's Order serial and year."""
        (citation,) = extract_citations("See P.O. No. 48 of 1972.")
        assert citation.citation_serial == "48"
        assert citation.citation_year == "1972"
        assert citation.act_type is None
        assert citation.lexical_relation_confidence == LexicalConfidence.MEDIUM

    def test_digits_kept_verbatim(self) -> None:
        """Test that Bengali digits are not converted."""
        citations = extract_citations(MIXED)
        bengali = [c for c in citations if c.script == CitationScript.BENGALI]
        for citation in bengali:
            assert not any(ch.isascii() and ch.isdigit() for ch in citation.citation_year)

    def test_line_number_on_later_line(self) -> None:
        """Test line counting from preceding newlines."""
        text = "প্রথম লাইন\n\nতৃতীয় লাইন ১৯৮৪ সনের ৩৬ নং আইন"
        (citation,) = extract_citations(text)
        assert citation.line_number == 3

    def test_deterministic(self) -> None:
        """Test that identical input yields identical ordered output."""
        assert extract_citations(MIXED) == extract_citations(MIXED)

    def test_input_not_mutated(self) -> None:
        """Test that the input keeps its value and length."""
        text = str(MIXED)
        extract_citations(text)
        assert text == MIXED
        assert len(text) == len(MIXED)

    def test_citation_is_independent_value(self) -> None:
        """Test that citations are frozen and copies leave the text alone."""
        text = str(SCENARIO)
        (citation,) = extract_citations(text)
        with pytest.raises(dataclasses.FrozenInstanceError):
            citation.citation_text = "x"  # type: ignore[misc]
        changed = dataclasses.replace(citation, citation_text="x")
        assert changed.citation_text == "x"
        assert text == SCENARIO
        assert extract_citations(text)[0].citation_text == "১৯৮৪ সনের ৩৬ নং আইন"

    @pytest.mark.parametrize("text", [None, "", "   ", "কোন উল্লেখ নাই"])
    def test_nothing_found(self, text: str | None) -> None:
        """Test inputs without citations."""
        assert extract_citations(text) == []

    def test_context_bounded(self) -> None:
        """Test a custom context size."""
        extractor = CitationExtractor(context_chars=5)
        (citation,) = extractor.extract(SCENARIO)
        assert len(citation.context_before) <= 5
        assert len(citation.context_after) <= 5

    def test_to_dict(self) -> None:
        """Test plain-dict export of a citation."""
        (citation,) = extract_citations(SCENARIO)
        data = citation.to_dict()
        assert data["script"] == "bengali"
        assert data["pattern_type"] == "BENGALI_ACT_SHORT"
        assert data["lexical_relation_type"] == citation.lexical_relation_type.value
        assert "reference_type" not in data


class TestInjectedTables:
    """Tests that alternate tables change behavior without code changes."""

    def test_restricted_grammars(self) -> None:
        """Test an extractor that only knows President's Orders."""
        only_po = tuple(
            p for p in CITATION_PATTERNS if p.name == CitationPatternType.PRESIDENTS_ORDER
        )
        extractor = CitationExtractor(patterns=PatternTables(citation_patterns=only_po))
        citations = extractor.extract(MIXED)
        assert [c.pattern_type for c in citations] == [CitationPatternType.PRESIDENTS_ORDER]

    def test_alternate_keywords(self) -> None:
        """Test that a replaced keyword table changes the relation."""
        tables = PatternTables(relation_keywords={LexicalRelation.REPEAL: ("দ্বারা",)})
        (citation,) = CitationExtractor(patterns=tables).extract(SCENARIO)
        assert citation.lexical_relation_type == LexicalRelation.REPEAL

    def test_default_tables_unchanged(self) -> None:
        """Test that building alternate tables leaves the defaults alone."""
        PatternTables(relation_keywords={LexicalRelation.REPEAL: ("দ্বারা",)})
        (citation,) = extract_citations(SCENARIO)
        assert citation.lexical_relation_type == LexicalRelation.MENTION


class TestClassifyLexicalRelation:
    """Tests for classify_lexical_relation."""

    def test_priority_order(self) -> None:
        """Test that amendment wins over repeal when both appear."""
        result = classify_lexical_relation("রহিত এবং সংশোধিত")
        assert result.lexical_relation_type == LexicalRelation.AMENDMENT

    @pytest.mark.parametrize(
        "context,expected",
        [
            ("Act XV of 1984 is hereby repealed", LexicalRelation.REPEAL),
            ("শব্দগুলি প্রতিস্থাপিত হইবে", LexicalRelation.SUBSTITUTION),
            ("Subject to the provisions of", LexicalRelation.DEPENDENCY),
            ("এই আইনের অধীন", LexicalRelation.DEPENDENCY),
            ("a new section inserted", LexicalRelation.INCORPORATION),
            ("referred to in", LexicalRelation.MENTION),
        ],
    )
    def test_relations(self, context: str, expected: LexicalRelation) -> None:
        """Test one keyword per relation."""
        assert classify_lexical_relation(context).lexical_relation_type == expected

    def test_empty_context(self) -> None:
        """Test that an empty window is a mention."""
        assert classify_lexical_relation("").lexical_relation_type == LexicalRelation.MENTION
        assert classify_lexical_relation(None).lexical_relation_type == LexicalRelation.MENTION

    def test_negation_is_advisory(self) -> None:
        """Test that negation is reported but never changes the relation."""
        negation = NegationCheck(True, "not", 0)
        result = classify_lexical_relation("not amended", negation)
        assert result.lexical_relation_type == LexicalRelation.AMENDMENT
        assert result.negation_present is True
        assert result.negation_word == "not"

    def test_extracted_negation_does_not_invert(self) -> None:
        """Test negation end to end on an extracted citation."""
        (citation,) = extract_citations("Act XV of 1984 not amended")
        assert citation.negation_present is True
        assert citation.negation_word == "not"
        assert citation.lexical_relation_type == LexicalRelation.AMENDMENT


class TestCheckNegation:
    """Tests for check_negation."""

    def test_bengali_cue(self) -> None:
        """Test a Bengali negation cue within the window."""
        text = "এটি আইন নয়"
        result = check_negation(text, 0)
        assert result.negation_present is True
        assert result.negation_word in nukta_variants("নয়")
        assert result.negation_position == text.index("নয়")

    def test_outside_window(self) -> None:
        """Test that a cue beyond the window is ignored."""
        text = "Act XV of 1984" + " " * 30 + "not"
        assert check_negation(text, 0).negation_present is False
        assert check_negation(text, 0, window=60).negation_present is True

    def test_no_cue(self) -> None:
        """Test text without negation."""
        assert check_negation("Act XV of 1984", 0) == NegationCheck()
        assert check_negation(None, 0) == NegationCheck()


class TestMetadata:
    """Tests for get_lexical_references_metadata and confidence."""

    def test_empty(self) -> None:
        """Test the empty-input contract."""
        for value in (None, []):
            metadata = get_lexical_references_metadata(value)
            assert metadata.count == 0
            assert metadata.references == ()
            assert metadata.disclaimer == (
                "Detected via pattern matching. No legal force or applicability implied."
            )
            assert metadata.relationship_inference == "explicitly_prohibited"

    def test_with_citations(self) -> None:
        """Test count, method and serialized references."""
        citations = extract_citations(MIXED)
        data = get_lexical_references_metadata(citations).to_dict()
        assert data["count"] == len(citations)
        assert data["method"] == "pattern-based detection"
        assert data["disclaimer"] == LEXICAL_RELATION_DISCLAIMER
        assert data["relationship_inference"] == "explicitly_prohibited"
        assert [r["citation_text"] for r in data["references"]] == [
            c.citation_text for c in citations
        ]

    def test_relationship_inference_is_fixed(self) -> None:
        """Test that relationship_inference cannot be passed in."""
        with pytest.raises(TypeError):
            get_lexical_references_metadata([]).__class__(relationship_inference="allowed")

    def test_confidence_levels(self) -> None:
        """Test high / medium / low."""
        (citation,) = extract_citations(SCENARIO)
        assert assign_lexical_confidence(citation) == LexicalConfidence.MEDIUM
        assert assign_lexical_confidence(
            dataclasses.replace(citation, act_name="দণ্ডবিধি")
        ) == LexicalConfidence.HIGH
        assert assign_lexical_confidence(
            dataclasses.replace(citation, citation_serial=None)
        ) == LexicalConfidence.LOW
