"""Tests for structural marker detectors."""

import pytest

from bdlaw.legal_parser.markers import (
    MarkerDetection,
    MarkerFrequency,
    count_section_markers,
    detect_amendment_markers,
    detect_clauses,
    detect_enactment_clause,
    detect_preamble,
    detect_schedule_references,
    detect_section_markers,
    detect_subsections,
)
from bdlaw.legal_parser.patterns import MarkerPatterns
from bdlaw.models.enums import MarkerKind

DANDA = "৷"  # ৷

STATUTE = (
    "যেহেতু নিম্নবর্ণিত উদ্দেশ্যসমূহ পূরণকল্পে বিধান করা সমীচীন;\n"
    "সেহেতু এতদ্বারা আইন করা হইল:-\n"
    f"১{DANDA} সংক্ষিপ্ত শিরোনাম{DANDA}\n"
    f"২{DANDA} সংজ্ঞা{DANDA} (১) এই আইনে-\n"
    "(ক) \"সরকার\" অর্থ গণপ্রজাতন্ত্রী বাংলাদেশ সরকার;\n"
    "(খ) \"ধারা\" অর্থ এই আইনের ধারা;\n"
    "(২) তফসিল বিলুপ্ত হইবে।\n"
)


class TestDetectPreamble:
    """Tests for detect_preamble."""

    def test_bengali_preamble(self) -> None:
        """Test detection of যেহেতু at the start of the text."""
        result = detect_preamble(STATUTE)
        assert result.present is True
        assert result.start_position == 0
        assert result.markers == ("যেহেতু",)
        assert result.kind == MarkerKind.PREAMBLE

    def test_and_whereas(self) -> None:
        """Test that both the compound and plain markers are reported."""
        text = "এবং যেহেতু ইহা সমীচীন"
        result = detect_preamble(text)
        assert result.start_position == 0
        assert result.markers == ("এবং যেহেতু", "যেহেতু")

    def test_english_case_insensitive(self) -> None:
        """Test WHEREAS / Whereas detection."""
        assert detect_preamble("WHEREAS it is expedient").present
        result = detect_preamble("Preamble.\nWhereas it is expedient")
        assert result.start_position == len("Preamble.\n")
        assert result.markers == ("Whereas",)

    def test_word_bounded(self) -> None:
        """Test that whereas inside another word is ignored."""
        assert not detect_preamble("somewhereasked").present

    @pytest.mark.parametrize("text", [None, "", "   \n "])
    def test_blank_input(self, text: str | None) -> None:
        """Test that blank input yields the absent shape."""
        assert detect_preamble(text) == MarkerDetection(kind=MarkerKind.PREAMBLE)

    def test_deterministic(self) -> None:
        """Test that repeated calls give identical results."""
        assert detect_preamble(STATUTE) == detect_preamble(STATUTE)


class TestDetectEnactmentClause:
    """Tests for detect_enactment_clause."""

    def test_bengali_enactment(self) -> None:
        """Test the সেহেতু এতদ্বারা আইন করা হইল formula."""
        result = detect_enactment_clause(STATUTE)
        assert result.present is True
        assert result.start_position == STATUTE.index("সেহেতু")
        assert result.markers == ("সেহেতু এতদ্বারা আইন করা হইল",)

    def test_english_enactment(self) -> None:
        """Test Be it enacted / IT IS HEREBY ENACTED."""
        assert detect_enactment_clause("Be it enacted by Parliament").present
        assert detect_enactment_clause("IT IS HEREBY ENACTED as follows").present
        assert detect_enactment_clause("be it ENACTED").present

    def test_absent(self) -> None:
        """Test text without an enactment formula."""
        result = detect_enactment_clause("এই আইন বাংলাদেশ আইন নামে অভিহিত হইবে")
        assert result.present is False
        assert result.start_position is None
        assert result.markers == ()


class TestCountSectionMarkers:
    """Tests for count_section_markers."""

    def test_numeral_danda_without_dhara(self) -> None:
        """Test counting numeral+danda when ধারা never appears."""
        result = count_section_markers(f"০{DANDA} ১{DANDA} ২{DANDA}")
        assert result.numeral_danda_count == 3
        assert result.dhara_count == 0
        assert result.bengali_numbered_sections == 3

    def test_multi_digit(self) -> None:
        """Test that multi-digit numerals count once."""
        result = count_section_markers(f"১০{DANDA} বিধি\n১১{DANDA} রহিতকরণ")
        assert result.numeral_danda_count == 2

    def test_devanagari_danda_accepted(self) -> None:
        """Test the । glyph as a danda."""
        assert count_section_markers("৫। শিরোনাম").numeral_danda_count == 1

    def test_all_families(self) -> None:
        """Test counts on a small statute."""
        result = count_section_markers(STATUTE)
        assert result.dhara_count == 2
        assert result.numeral_danda_count == 2
        assert result.schedule_count == 1
        assert result.chapter_count == 0
        assert result.bengali_numbered_sections == 4

    def test_chapter(self) -> None:
        """Test অধ্যায় counting in either nukta spelling."""
        text = "প্রথম অধ্যায়\nদ্বিতীয় অধ্যায়"
        assert count_section_markers(text).chapter_count == 2

    def test_empty(self) -> None:
        """Test that empty input yields zero counts."""
        assert count_section_markers("") == MarkerFrequency()
        assert count_section_markers(None).bengali_numbered_sections == 0


class TestDetectClauses:
    """Tests for detect_clauses and detect_subsections."""

    def test_clauses_in_order(self) -> None:
        """Test ascending offsets and verbatim markers."""
        content = "(ক) প্রথম; (খ) দ্বিতীয়; (গ) তৃতীয়"
        clauses = detect_clauses(content)
        assert [c.marker for c in clauses] == ["(ক)", "(খ)", "(গ)"]
        offsets = [c.relative_offset for c in clauses]
        assert offsets == sorted(set(offsets))
        for clause in clauses:
            assert content[clause.relative_offset :].startswith(clause.marker)

    def test_letters_outside_alphabet(self) -> None:
        """Test that (ণ) and (ত) are not clause markers."""
        clauses = detect_clauses("(ণ) (ত) (ঢ)")
        assert [c.marker for c in clauses] == ["(ঢ)"]
        assert clauses[0].relative_offset == 8

    @pytest.mark.parametrize("content", [None, "", "  ", "কোন দফা নাই"])
    def test_no_clauses(self, content: str | None) -> None:
        """Test inputs without clause markers."""
        assert detect_clauses(content) == []

    def test_subsections(self) -> None:
        """Test Bengali-numeral subsection markers."""
        subs = detect_subsections("(১) প্রথম (২) দ্বিতীয় (১০) দশম")
        assert [s.marker for s in subs] == ["(১)", "(২)", "(১০)"]

    def test_alternate_table(self) -> None:
        """Test that an injected table changes what is detected."""
        latin = MarkerPatterns(clause=r"\([a-n]\)")
        assert [c.marker for c in detect_clauses("(a) one (b) two", latin)] == ["(a)", "(b)"]
        assert detect_clauses("(ক) one", latin) == []


class TestSectionMarkerOccurrences:
    """Tests for detect_section_markers and the supplementary detectors."""

    def test_occurrences_have_lines(self) -> None:
        """Test absolute offsets and line numbers for each marker."""
        occurrences = detect_section_markers(STATUTE)
        numeral = [o for o in occurrences if o.kind == MarkerKind.NUMERAL_DANDA]
        assert [o.text for o in numeral] == [f"১{DANDA}", f"২{DANDA}"]
        assert [o.line_number for o in numeral] == [3, 4]
        for occurrence in occurrences:
            start = occurrence.absolute_offset
            assert STATUTE[start : start + len(occurrence.text)] == occurrence.text
        offsets = [o.absolute_offset for o in occurrences]
        assert offsets == sorted(offsets)

    def test_amendment_markers(self) -> None:
        """Test বিলুপ্ত detection with context clipped to its line."""
        (marker,) = detect_amendment_markers(STATUTE)
        assert marker.marker == "বিলুপ্ত"
        assert marker.line_number == 7
        assert marker.context_before == "(২) তফসিল"
        assert "\n" not in marker.context_after

    def test_schedule_references(self) -> None:
        """Test তফসিল and English Schedule detection."""
        refs = detect_schedule_references("See the First Schedule and তফসিল ২")
        assert [r.text for r in refs] == ["Schedule", "তফসিল"]

    def test_input_not_mutated(self) -> None:
        """Test that detectors leave their input unchanged."""
        text = str(STATUTE)
        detect_preamble(text)
        detect_enactment_clause(text)
        count_section_markers(text)
        detect_clauses(text)
        detect_section_markers(text)
        assert text == STATUTE
        assert len(text) == len(STATUTE)
