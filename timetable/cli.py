# timetable/cli.py
"""Command line entry point: load CSVs, place lectures, print and export the timetable."""
import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from timetable.config import settings
from timetable.exceptions import ExportError, LoadError
from timetable.loaders import load_catalog
from timetable.renderer import export_csv, export_excel, export_json, render_text, sort_for_export
from timetable.scheduler import ScheduleResult, generate_schedule

logger = logging.getLogger("timetable")

EXIT_LOAD_FAILURE = 1
EXIT_EXPORT_FAILURE = 2


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="smart-timetable",
        description="Generate a weekly lecture timetable from CSV inputs.",
    )
    parser.add_argument("--data-dir", type=Path, default=Path("."),
                        help="directory holding subjects/faculty/classrooms/timeslots/batches CSVs")
    parser.add_argument("--output", type=Path, default=Path("timetable.csv"),
                        help="CSV file to write (default: timetable.csv)")
    parser.add_argument("--json", type=Path, default=None, help="also write a JSON export")
    parser.add_argument("--excel", type=Path, default=None, help="also write an Excel workbook")
    parser.add_argument("--seed", type=int, default=settings.seed,
                        help="random seed for a reproducible run")
    parser.add_argument("--max-attempts", type=int, default=settings.max_attempts,
                        help="attempts per hour before it is left unplaced")
    parser.add_argument("-q", "--quiet", action="store_true", help="do not print the timetable")
    parser.add_argument("-v", "--verbose", action="store_true", help="debug logging")
    return parser


def print_diagnostics(result: ScheduleResult) -> None:
    s = result.summary()
    print(f"Placed {s['placed_hours']} of {s['requested_hours']} required hours.")

    if result.unassigned:
        print(f"\n{len(result.unassigned)} subject(s) have no qualified faculty:")
        for u in result.unassigned:
            print(f"  {u.batch.label}: {u.subject.code} ({u.subject.name})")

    if result.unplaced:
        print(f"\n{len(result.unplaced)} hour(s) could not be placed:")
        for u in result.unplaced:
            print(f"  {u.batch.label}: {u.subject.code} hour {u.hour} ({u.faculty.name})")


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        catalog = load_catalog(args.data_dir)
    except LoadError as e:
        logger.error("Error loading input data: %s", e)
        return EXIT_LOAD_FAILURE

    result = generate_schedule(
        catalog.subjects, catalog.faculties, catalog.classrooms,
        catalog.slots, catalog.batches,
        seed=args.seed, limits=settings.limits, max_attempts=args.max_attempts,
    )
    ordered = sort_for_export(result.lectures, settings.day_order)

    if not args.quiet:
        print(render_text(ordered, settings.day_order))
    print_diagnostics(result)

    try:
        export_csv(ordered, args.output, presorted=True)
        print(f"\nTimetable also exported to {args.output}")
        if args.json:
            export_json(ordered, args.json, presorted=True)
        if args.excel:
            export_excel(ordered, args.excel, presorted=True)
    except ExportError as e:
        logger.error("Error exporting timetable: %s", e)
        return EXIT_EXPORT_FAILURE

    return 0


if __name__ == "__main__":
    sys.exit(main())
