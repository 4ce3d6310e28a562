"""CLI for analyzing statute text files."""

import argparse
import json
import logging
import sys
from pathlib import Path

from bdlaw.config import settings
from bdlaw.legal_parser.citations import (
    extract_citations,
    get_lexical_references_metadata,
)
from bdlaw.legal_parser.content import create_content, detect_content_language
from bdlaw.legal_parser.markers import (
    count_section_markers,
    detect_enactment_clause,
    detect_preamble,
    detect_section_markers,
)
from bdlaw.legal_parser.span_accounting import (
    SpanAccountant,
    claim_citations,
    claim_markers,
)
from bdlaw.legal_parser.structure import build_structure_tree, derive_section_skeleton
from bdlaw.schemas.statute import (
    AnalysisReportSchema,
    CitationSchema,
    ContentSummarySchema,
    EnactmentDetectionSchema,
    LexicalReferencesMetadataSchema,
    MarkerFrequencySchema,
    PreambleDetectionSchema,
    StructureTreeSchema,
)

logger = logging.getLogger(__name__)


def read_source(source: str) -> str:
    """Read UTF-8 text from a path, or from stdin when source is '-'."""
    if source == "-":
        return sys.stdin.read()
    return Path(source).read_text(encoding="utf-8")


def analyze_command(source: str, include_structure: bool = False) -> int:
    """Print a full analysis report as JSON.

    Args:
        source: Input path, or '-' for stdin.
        include_structure: Also derive a section skeleton and build the tree.
    """
    try:
        text = read_source(source)
    except (OSError, UnicodeDecodeError) as e:
        logger.error(f"Could not read {source}: {e}")
        return 1

    record = create_content(text)
    raw = record.content_raw
    citations = extract_citations(raw)
    preamble = detect_preamble(raw)
    enactment = detect_enactment_clause(raw)

    structure = None
    if include_structure:
        tree = build_structure_tree(
            derive_section_skeleton(raw),
            raw,
            preamble=preamble.markers[0] if preamble.markers else None,
            enactment=enactment.markers[0] if enactment.markers else None,
            extraction_method="numeral_danda_headings",
        )
        structure = StructureTreeSchema.from_tree(tree)
        logger.info(
            f"Structure: {tree.metadata['total_sections']} sections, "
            f"{tree.metadata['total_defects']} defects"
        )

    report = AnalysisReportSchema(
        source=source,
        content=ContentSummarySchema.from_record(record, detect_content_language(raw)),
        preamble=PreambleDetectionSchema.from_detection(preamble),
        enactment=EnactmentDetectionSchema.from_detection(enactment),
        section_markers=MarkerFrequencySchema.from_frequency(count_section_markers(raw)),
        lexical_references=LexicalReferencesMetadataSchema.from_metadata(
            get_lexical_references_metadata(citations)
        ),
        structure=structure,
    )
    logger.info(f"Found {len(citations)} citations in {source}")
    print(json.dumps(report.model_dump(mode="json"), ensure_ascii=False, indent=2))
    return 0


def citations_command(source: str) -> int:
    """Print one line per citation: line number, pattern and text."""
    try:
        text = read_source(source)
    except (OSError, UnicodeDecodeError) as e:
        logger.error(f"Could not read {source}: {e}")
        return 1

    citations = extract_citations(create_content(text).content_raw)
    if not citations:
        print("No citations found.")
        return 0
    for citation in citations:
        schema = CitationSchema.from_citation(citation)
        print(
            f"{schema.line_number:>5}  {schema.pattern_type.value:<18} "
            f"{schema.lexical_relation_type.value:<13} {schema.citation_text}"
        )
    return 0


def coverage_command(source: str, min_length: int | None = None) -> int:
    """Report how much of the text is claimed by citations and markers."""
    try:
        text = read_source(source)
    except (OSError, UnicodeDecodeError) as e:
        logger.error(f"Could not read {source}: {e}")
        return 1

    raw = create_content(text).content_raw
    accountant = SpanAccountant(raw)
    claim_citations(accountant, extract_citations(raw))
    claim_markers(accountant, detect_section_markers(raw))
    report = accountant.generate_coverage_report(min_unclaimed_length=min_length)

    print(f"Coverage: {report.coverage_percentage}% of {report.total_length} characters")
    print(f"Claimed spans: {len(report.claimed_spans)}")
    print(f"Unclaimed spans: {len(report.unclaimed_spans)}")
    for span in report.flagged_unclaimed:
        keywords = ", ".join(span.detected_keywords)
        print(f"  [{span.start_pos}-{span.end_pos}] may hold a citation ({keywords})")
    return 0


def main(argv: list[str] | None = None) -> int:
    """Main entry point for CLI."""
    parser = argparse.ArgumentParser(description="Bengali/English statute analysis CLI")
    parser.add_argument(
        "--log-level",
        default=settings.log_level,
        help=f"Logging level (default: {settings.log_level})",
    )
    subparsers = parser.add_subparsers(dest="command", help="Command to run")

    # Analyze command
    analyze_parser = subparsers.add_parser(
        "analyze", help="Print a JSON analysis report for a text file"
    )
    analyze_parser.add_argument("source", help="UTF-8 text file, or '-' for stdin")
    analyze_parser.add_argument(
        "--structure",
        action="store_true",
        help="Split the text at numeral+danda headings and build a structure tree",
    )

    # Citations command
    citations_parser = subparsers.add_parser("citations", help="List detected citations")
    citations_parser.add_argument("source", help="UTF-8 text file, or '-' for stdin")

    # Coverage command
    coverage_parser = subparsers.add_parser(
        "coverage", help="Show text not claimed by citations or markers"
    )
    coverage_parser.add_argument("source", help="UTF-8 text file, or '-' for stdin")
    coverage_parser.add_argument(
        "--min-length",
        type=int,
        default=None,
        help=f"Shortest unclaimed span to report (default: {settings.min_unclaimed_span_length})",
    )

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=args.log_level.upper(),
        format="%(levelname)-5.5s [%(name)s] %(message)s",
    )

    if args.command == "analyze":
        return analyze_command(args.source, include_structure=args.structure)

    elif args.command == "citations":
        return citations_command(args.source)

    elif args.command == "coverage":
        return coverage_command(args.source, min_length=args.min_length)

    else:
        parser.print_help()
        return 1


if __name__ == "__main__":
    sys.exit(main())
