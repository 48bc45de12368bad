"""Command-line interface for the recruitcrm compensation and pipeline tool."""

import argparse
import json
import logging
import sys
from datetime import date
from pathlib import Path
from typing import Optional

from recruitcrm.compensation.payroll import PayrollCalculator, current_month
from recruitcrm.domain.models import (
    PipelineBoard,
    PipelineEntity,
    Recruiter,
    Role,
    Settings,
    ShiftRecord,
    ShiftType,
    Stage,
    StatusFilter,
)
from recruitcrm.history.ledger import ShiftHistory
from recruitcrm.logging_config import setup_logging
from recruitcrm.output.pdf_generator import PDFGenerator
from recruitcrm.output.text_generator import TextReportGenerator
from recruitcrm.pipeline.stage_machine import HireError, PipelineStageMachine
from recruitcrm.reporting.aggregator import BucketLevel, PeriodAggregator
from recruitcrm.reporting.recruiter_stats import ranked
from recruitcrm.storage.json_store import JsonStore, StoreKey
from recruitcrm.validation.validator import ShiftRejectedError

logger = logging.getLogger(__name__)


def load_settings(store: JsonStore) -> Settings:
    data = store.load(StoreKey.SETTINGS, {})
    return Settings.from_dict(data if isinstance(data, dict) else {})


def load_recruiters(store: JsonStore) -> list[Recruiter]:
    data = store.load(StoreKey.RECRUITERS, [])
    if not isinstance(data, list):
        logger.warning("Ignoring malformed recruiters file")
        return []
    return [Recruiter.from_dict(item) for item in data if isinstance(item, dict)]


def load_history(store: JsonStore, snapshot_rates: bool = False) -> ShiftHistory:
    data = store.load(StoreKey.HISTORY, [])
    if not isinstance(data, list):
        logger.warning("Ignoring malformed history file")
        data = []
    return ShiftHistory.from_list(data, snapshot_rates=snapshot_rates)


def load_board(store: JsonStore) -> PipelineBoard:
    data = store.load(StoreKey.PIPELINE, {})
    return PipelineBoard.from_dict(data if isinstance(data, dict) else {})


def create_sample_data() -> tuple[list[Recruiter], list[ShiftRecord]]:
    """Create a small roster and three months of shifts for the demo."""
    recruiters = [
        Recruiter(id="R001", name="Alice Martin", role=Role.TEAM_CAPTAIN, crew_code="10001"),
        Recruiter(id="R002", name="Bob Peeters", role=Role.POOL_CAPTAIN, crew_code="10002"),
        Recruiter(id="R003", name="Carol Janssens", role=Role.PROMOTER, crew_code="10003"),
        Recruiter(id="R004", name="David Claes", role=Role.ROOKIE, crew_code="10004"),
        Recruiter(
            id="R005", name="Eve Wouters", role=Role.ROOKIE, crew_code="10005", is_inactive=True
        ),
    ]

    # (date, recruiter, score, box2 full, box2 discounted, box4 full, shift type, location)
    plan = [
        ("2025-07-04", "R001", 9, 4, 1, 2, ShiftType.D2D, "Gent Noord"),
        ("2025-07-04", "R003", 6, 2, 1, 1, ShiftType.D2D, "Gent Noord"),
        ("2025-07-05", "R002", 7, 3, 0, 2, ShiftType.EVENT, "Flanders Expo"),
        ("2025-07-11", "R004", 4, 1, 1, 0, ShiftType.D2D, "Brugge"),
        ("2025-07-18", "R005", 3, 1, 0, 0, ShiftType.D2D, "Brugge"),
        ("2025-08-01", "R001", 12, 6, 2, 3, ShiftType.D2D, "Antwerpen Zuid"),
        ("2025-08-01", "R002", 8, 4, 0, 2, ShiftType.D2D, "Antwerpen Zuid"),
        ("2025-08-08", "R003", 5, 2, 0, 1, ShiftType.EVENT, "Sportpaleis"),
        ("2025-08-15", "R004", 6, 3, 1, 1, ShiftType.D2D, "Mechelen"),
        ("2025-08-29", "R001", 10, 5, 1, 2, ShiftType.D2D, "Leuven"),
        ("2025-09-05", "R002", 9, 4, 2, 2, ShiftType.D2D, "Hasselt"),
        ("2025-09-12", "R003", 7, 3, 1, 2, ShiftType.D2D, "Hasselt"),
    ]

    roles = {r.id: r.role for r in recruiters}
    names = {r.id: r.name for r in recruiters}
    records = [
        ShiftRecord(
            recruiter_id=rid,
            date_iso=day,
            role_at_shift=roles[rid],
            shift_type=shift_type,
            score=score,
            box2_full=b2f,
            box2_discounted=b2d,
            box4_full=b4f,
            recruiter_name=names[rid],
            location=location,
            project="Hello Fresh",
        )
        for day, rid, score, b2f, b2d, b4f, shift_type, location in plan
    ]
    return recruiters, records


def run_finances(
    store: JsonStore,
    year: int,
    status: str,
    depth: str,
    output_path: Optional[str] = None,
) -> None:
    """Print the finance report and optionally save it."""
    settings = load_settings(store)
    recruiters = load_recruiters(store)
    history = load_history(store)

    bucket = PeriodAggregator(settings).aggregate(
        history, year, StatusFilter(status), recruiters
    )
    level = BucketLevel(depth)
    print(TextReportGenerator().generate_to_string(bucket, level), end="")

    if output_path:
        _write_report(bucket, level, output_path)


def run_wages(
    store: JsonStore,
    month: str,
    status: str,
    output_path: Optional[str] = None,
) -> None:
    """Print monthly payroll and optionally save it."""
    settings = load_settings(store)
    payroll = PayrollCalculator(settings).calculate(
        month, load_recruiters(store), load_history(store), StatusFilter(status)
    )
    print(TextReportGenerator().payroll_to_string(month, payroll), end="")

    if output_path:
        if output_path.lower().endswith(".pdf"):
            PDFGenerator().generate_payroll(month, payroll, output_path)
        else:
            Path(output_path).write_text(
                TextReportGenerator().payroll_to_string(month, payroll)
            )
        print(f"\nSaved {output_path}")


def run_commit(store: JsonStore, day_file: str, snapshot_rates: bool = False) -> None:
    """Commit a day's shift rows from a JSON file.

    The file holds ``{"date_iso": "YYYY-MM-DD", "rows": [...]}``.
    """
    with open(day_file, "r", encoding="utf-8") as f:
        payload = json.load(f)
    if not isinstance(payload, dict) or "date_iso" not in payload:
        raise ValueError(f"{day_file}: expected an object with date_iso and rows")

    date_iso = str(payload["date_iso"])
    rows = [
        ShiftRecord.from_dict({"date_iso": date_iso, **row})
        for row in payload.get("rows") or []
        if isinstance(row, dict)
    ]

    history = load_history(store, snapshot_rates=snapshot_rates)
    updated = history.commit_day(date_iso, rows, load_settings(store))
    store.save(StoreKey.HISTORY, updated.to_list())
    print(f"Committed {len(rows)} row(s) for {date_iso} ({len(updated)} records total)")


def run_pipeline(store: JsonStore, args: argparse.Namespace) -> None:
    """Show or change the candidate pipeline."""
    machine = PipelineStageMachine()
    board = load_board(store)

    if args.action == "list":
        for stage in Stage:
            entities = board.entities(stage)
            print(f"{stage.label} ({len(entities)})")
            for entity in entities:
                when = " ".join(part for part in (entity.date, entity.time) if part)
                print(f"  {entity.id:<12} {entity.name:<28} {when:<17} {entity.comment}")
        return

    if args.action == "add":
        entity = PipelineEntity(
            id=args.id, name=args.name, phone=args.phone, email=args.email, source=args.source
        )
        board = machine.add_lead(board, entity)
    elif args.action == "move":
        updated = machine.move(board, args.id, Stage(args.from_stage), Stage(args.to_stage))
        if updated is board:
            raise ValueError(f"Cannot move {args.id} from {args.from_stage} to {args.to_stage}")
        board = updated
    elif args.action == "hire":
        board, recruiter = machine.hire(board, args.id, args.crew_code)
        recruiters = load_recruiters(store) + [recruiter]
        store.save(StoreKey.RECRUITERS, [r.to_dict() for r in recruiters])
        print(f"Hired {recruiter.name} as {recruiter.role.value} (crew {recruiter.crew_code})")

    store.save(StoreKey.PIPELINE, board.to_dict())


def run_recruiters(store: JsonStore, include_inactive: bool = False) -> None:
    """Print the ranked recruiter roster."""
    summaries = ranked(load_recruiters(store), load_history(store), include_inactive)
    print(TextReportGenerator().roster_to_string(summaries), end="")


def run_demo(output_path: Optional[str] = None) -> None:
    """Run a demo report over built-in sample data."""
    print("Generating demo finance report over sample data...")

    recruiters, records = create_sample_data()
    settings = Settings()
    history = ShiftHistory()
    for day in sorted({r.date_iso for r in records}):
        history = history.commit_day(day, [r for r in records if r.date_iso == day], settings)

    bucket = PeriodAggregator(settings).aggregate(history, 2025, StatusFilter.ALL, recruiters)
    text = TextReportGenerator()
    print(text.generate_to_string(bucket, BucketLevel.WEEK), end="")

    payroll = PayrollCalculator(settings).calculate("2025-09", recruiters, history)
    print()
    print(text.payroll_to_string("2025-09", payroll), end="")

    print()
    print(text.roster_to_string(ranked(recruiters, history, True, date(2025, 9, 30))), end="")

    if output_path:
        print(f"\nGenerating PDF: {output_path}")
        PDFGenerator().generate(bucket, output_path, BucketLevel.WEEK)
        print("  PDF created successfully!")


def _write_report(bucket, level: BucketLevel, output_path: str) -> None:
    if output_path.lower().endswith(".pdf"):
        PDFGenerator().generate(bucket, output_path, level)
    else:
        TextReportGenerator().generate(bucket, output_path, level)
    print(f"\nSaved {output_path}")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="recruitcrm - Recruitment Compensation and Pipeline Tool",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s demo                              Run the demo over sample data
  %(prog)s demo --output demo.pdf            Also render the demo as PDF

  %(prog)s finances --year 2025              Finance report for 2025
  %(prog)s finances --status active --depth month
  %(prog)s wages --month 2025-09 -o pay.pdf  Payroll for September 2025

  %(prog)s commit day.json                   Save a day's shift rows
  %(prog)s pipeline list                     Show the candidate pipeline
  %(prog)s pipeline move L1 intake screening
  %(prog)s pipeline hire L1 12345            Hire an onboarding candidate
  %(prog)s recruiters --all                  Ranked roster incl. inactive
        """,
    )
    parser.add_argument(
        "--data-dir", "-D",
        type=str,
        default="data",
        help="Directory holding the JSON data files (default: data)",
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable debug logging",
    )

    subparsers = parser.add_subparsers(dest="command", help="Command to run")
    statuses = [s.value for s in StatusFilter]

    # Finances command
    finances_parser = subparsers.add_parser("finances", help="Show the finance report")
    finances_parser.add_argument(
        "--year", "-y",
        type=int,
        default=date.today().year,
        help="Year to report (default: current year)",
    )
    finances_parser.add_argument(
        "--status", "-s",
        type=str,
        default="all",
        choices=statuses,
        help="Recruiter status filter (default: all)",
    )
    finances_parser.add_argument(
        "--depth", "-d",
        type=str,
        default="day",
        choices=["month", "week", "day"],
        help="Finest period level shown (default: day)",
    )
    finances_parser.add_argument(
        "--output", "-o",
        type=str,
        help="Output file (.pdf for PDF, anything else for text)",
    )

    # Wages command
    wages_parser = subparsers.add_parser("wages", help="Show monthly payroll")
    wages_parser.add_argument(
        "--month", "-m",
        type=str,
        default=current_month(),
        help="Pay month as YYYY-MM (default: current month)",
    )
    wages_parser.add_argument(
        "--status", "-s",
        type=str,
        default="active",
        choices=statuses,
        help="Recruiter status filter (default: active)",
    )
    wages_parser.add_argument(
        "--output", "-o",
        type=str,
        help="Output file (.pdf for PDF, anything else for text)",
    )

    # Commit command
    commit_parser = subparsers.add_parser("commit", help="Save a day's shift rows")
    commit_parser.add_argument("day_file", help="JSON file with date_iso and rows")
    commit_parser.add_argument(
        "--snapshot-rates",
        action="store_true",
        help="Store the hourly rate in effect on each committed row",
    )

    # Pipeline command
    pipeline_parser = subparsers.add_parser("pipeline", help="Manage the candidate pipeline")
    actions = pipeline_parser.add_subparsers(dest="action", help="Pipeline action")
    actions.required = True
    actions.add_parser("list", help="List candidates per stage")

    add_parser = actions.add_parser("add", help="Add a lead")
    add_parser.add_argument("id", help="Lead ID")
    add_parser.add_argument("name", help="Lead name")
    add_parser.add_argument("--phone", default="", help="Mobile number")
    add_parser.add_argument("--email", default="", help="Email address")
    add_parser.add_argument("--source", default="", help="Where the lead came from")

    stages = [s.value for s in Stage]
    move_parser = actions.add_parser("move", help="Move a candidate between stages")
    move_parser.add_argument("id", help="Candidate ID")
    move_parser.add_argument("from_stage", choices=stages, help="Current stage")
    move_parser.add_argument("to_stage", choices=stages, help="Destination stage")

    hire_parser = actions.add_parser("hire", help="Hire an onboarding candidate")
    hire_parser.add_argument("id", help="Candidate ID")
    hire_parser.add_argument("crew_code", help="Five-digit crew code")

    # Recruiters command
    recruiters_parser = subparsers.add_parser("recruiters", help="Show the ranked roster")
    recruiters_parser.add_argument(
        "--all", "-a",
        dest="include_inactive",
        action="store_true",
        help="Include inactive recruiters",
    )

    # Demo command
    demo_parser = subparsers.add_parser("demo", help="Run a demo over sample data")
    demo_parser.add_argument(
        "--output", "-o",
        type=str,
        help="Output PDF file path",
    )

    return parser


def main(argv: Optional[list[str]] = None) -> int:
    """Main entry point for CLI."""
    parser = build_parser()
    args = parser.parse_args(argv)
    setup_logging(verbose=args.verbose)
    store = JsonStore(args.data_dir)

    try:
        if args.command == "finances":
            run_finances(store, args.year, args.status, args.depth, args.output)
        elif args.command == "wages":
            run_wages(store, args.month, args.status, args.output)
        elif args.command == "commit":
            run_commit(store, args.day_file, args.snapshot_rates)
        elif args.command == "pipeline":
            run_pipeline(store, args)
        elif args.command == "recruiters":
            run_recruiters(store, args.include_inactive)
        elif args.command == "demo":
            run_demo(args.output)
        else:
            parser.print_help()
            return 1
    except ShiftRejectedError as exc:
        print("Shift rows rejected:", file=sys.stderr)
        for error in exc.result.errors:
            print(f"  - {error}", file=sys.stderr)
        return 1
    except (HireError, ValueError, OSError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
