"""
Scoring CLI - score fixture assessments and classify gaps from the terminal.

Usage:
    # Score an assessment from a YAML fixture
    python -m compliance_engine score fixtures/demo.yaml --assessment asmt-demo

    # Ranked gap list for the same assessment
    python -m compliance_engine gaps fixtures/demo.yaml --assessment asmt-demo

    # Classify a single gap
    python -m compliance_engine classify --score 1.2 --foundational --section-weight 0.3

    # Output JSON instead of tables
    python -m compliance_engine score fixtures/demo.yaml --assessment asmt-demo --json

    # Score against the database (COMPLIANCE_DB_* settings) instead of a fixture
    python -m compliance_engine score --database --assessment 42
"""

import argparse
import json
import sys
from pathlib import Path

from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from compliance_engine.db.client import check_connection, close_connection
from compliance_engine.db.repository import DatabaseScoringSource
from compliance_engine.errors import ComplianceEngineError
from compliance_engine.scorers.gap_prioritization import calculate_gap_prioritization
from compliance_engine.schemas.enums import RiskBand
from compliance_engine.schemas.scoring import GapPrioritizationInput
from compliance_engine.services.gap_service import GapService
from compliance_engine.services.lookup import InMemoryScoringStore
from compliance_engine.services.scoring_service import WeightedScoringService
from compliance_engine.utils.logger import ScoringLogger, configure_global_logging

console = Console()

RISK_BAND_COLORS = {
    RiskBand.LOW: "green",
    RiskBand.MEDIUM: "yellow",
    RiskBand.HIGH: "red",
    RiskBand.CRITICAL: "bold red",
}


def _load_service(args: argparse.Namespace) -> WeightedScoringService | None:
    if args.database:
        if not check_connection():
            console.print("[red]Error: Database unavailable (check COMPLIANCE_DB_* settings)[/red]")
            return None
        store = DatabaseScoringSource()
    elif args.fixture is None:
        console.print("[red]Error: Give a fixture path or --database[/red]")
        return None
    else:
        path = Path(args.fixture)
        if not path.exists():
            console.print(f"[red]Error: File not found: {args.fixture}[/red]")
            return None
        store = InMemoryScoringStore.from_yaml(path)

    logger = ScoringLogger(name="compliance_engine.cli", log_level=args.log_level)
    return WeightedScoringService(store, sink=store, logger=logger)


def cmd_score(args: argparse.Namespace) -> int:
    """Score one assessment."""
    service = _load_service(args)
    if service is None:
        return 1

    overall = service.compute_overall_score(args.assessment)

    if args.json:
        print(json.dumps(overall.model_dump(mode="json"), indent=2))
        return 0

    color = RISK_BAND_COLORS[overall.risk_band]
    console.print(
        Panel(
            f"Overall score: {overall.overall_score:.2f}/100\n"
            f"Risk band: [{color}]{overall.risk_band.value}[/{color}]\n"
            f"Sections: {len(overall.section_scores)}",
            title=f"Assessment {overall.assessment_id}",
            border_style="blue",
        )
    )

    table = Table(title="Section Scores")
    table.add_column("Section", style="cyan")
    table.add_column("Score (0-5)", justify="right")
    table.add_column("Scaled (0-100)", justify="right")
    table.add_column("Answered", justify="right")

    for section_score in overall.section_scores:
        answered = sum(1 for qs in section_score.question_scores if qs.answer_id is not None)
        table.add_row(
            section_score.section_name or section_score.section_id,
            f"{section_score.score:.2f}",
            f"{section_score.scaled_score:.1f}",
            f"{answered}/{len(section_score.question_scores)}",
        )

    console.print(table)
    return 0


def cmd_gaps(args: argparse.Namespace) -> int:
    """List ranked gaps for one assessment."""
    service = _load_service(args)
    if service is None:
        return 1

    gaps = GapService(service).generate_gaps(args.assessment, threshold=args.threshold)

    if args.json:
        print(json.dumps([gap.model_dump(mode="json") for gap in gaps], indent=2))
        return 0

    if not gaps:
        console.print("[green]No gaps identified[/green]")
        return 0

    table = Table(title=f"Gaps ({len(gaps)})")
    table.add_column("#", justify="right")
    table.add_column("Gap")
    table.add_column("Severity", justify="center")
    table.add_column("Priority", justify="center")
    table.add_column("Score", justify="right")
    table.add_column("Effort")
    table.add_column("Cost")

    for rank, gap in enumerate(gaps, start=1):
        title = gap.title[:50] + "..." if len(gap.title) > 50 else gap.title
        table.add_row(
            str(rank),
            title,
            gap.severity.value,
            f"{gap.priority.value} ({gap.priority_score})",
            f"{gap.score:.2f}",
            gap.estimated_effort.value,
            gap.estimated_cost.value,
        )

    console.print(table)
    return 0


def cmd_classify(args: argparse.Namespace) -> int:
    """Classify a single gap."""
    result = calculate_gap_prioritization(
        GapPrioritizationInput(
            score=args.score,
            is_foundational=args.foundational,
            section_weight=args.section_weight,
        )
    )
    print(json.dumps(result.model_dump(mode="json"), indent=2))
    return 0


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="Compliance scoring and gap prioritization",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("--log-level", default="WARNING", help="Logging level (default: WARNING)")
    subparsers = parser.add_subparsers(dest="command", help="Commands")

    score_parser = subparsers.add_parser("score", help="Score an assessment")
    score_parser.add_argument("fixture", nargs="?", help="Path to YAML fixture")
    score_parser.add_argument("--database", action="store_true", help="Read from and write back to the database")
    score_parser.add_argument("--assessment", required=True, help="Assessment ID")
    score_parser.add_argument("--json", action="store_true", help="Output JSON")

    gaps_parser = subparsers.add_parser("gaps", help="List ranked gaps for an assessment")
    gaps_parser.add_argument("fixture", nargs="?", help="Path to YAML fixture")
    gaps_parser.add_argument("--database", action="store_true", help="Read from and write back to the database")
    gaps_parser.add_argument("--assessment", required=True, help="Assessment ID")
    gaps_parser.add_argument("--threshold", type=float, help="Gap threshold (default: configured, 3.0)")
    gaps_parser.add_argument("--json", action="store_true", help="Output JSON")

    classify_parser = subparsers.add_parser("classify", help="Classify a single gap")
    classify_parser.add_argument("--score", type=float, required=True, help="Final score (0-5)")
    classify_parser.add_argument("--foundational", action="store_true", help="Question is foundational")
    classify_parser.add_argument("--section-weight", type=float, default=0.0, help="Section weight (0-1)")

    args = parser.parse_args(argv)
    configure_global_logging(args.log_level)

    try:
        if args.command == "score":
            return cmd_score(args)
        elif args.command == "gaps":
            return cmd_gaps(args)
        elif args.command == "classify":
            return cmd_classify(args)
        else:
            parser.print_help()
            return 1
    except ComplianceEngineError as e:
        console.print(f"[red]{e.error_code}: {e}[/red]")
        return 2
    finally:
        close_connection()


if __name__ == "__main__":
    sys.exit(main())
