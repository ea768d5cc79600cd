# src/cli/recipe_diff.py

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from app.logging_config import configure_logging
from recipes.analysis import analyze_dump, compare_dumps
from recipes.filters import StatusFilter
from recipes.loader import DumpFormatError, load_dumps
from recipes.schema import Status
from recipes.writer import print_summary, write_report
from settings.loader import apply_overrides, load_settings

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_FAILED = 1
EXIT_BAD_CONFIG = 2


def build_parser() -> argparse.ArgumentParser:
    statuses = ", ".join(s.value for s in Status)
    parser = argparse.ArgumentParser(
        prog="gtnh-recipe-diff",
        description=(
            "Compare two RecEx GregTech recipe dumps, or check a single dump "
            "for conflicting and duplicate recipes."
        ),
    )
    parser.add_argument("before", type=Path, help="Path to a RecEx dump prior to your changes")
    parser.add_argument(
        "after",
        type=Path,
        nargs="?",
        default=None,
        help="Path to a RecEx dump after your changes. If omitted, only conflict analysis runs.",
    )
    parser.add_argument("-o", "--output", default=None, help="Report path (default: analysis.json)")
    parser.add_argument(
        "-w",
        "--whitelist",
        action="append",
        default=[],
        metavar="STATUS",
        help=f"Only report these statuses ({statuses})",
    )
    parser.add_argument(
        "-b",
        "--blacklist",
        action="append",
        default=[],
        metavar="STATUS",
        help="Never report these statuses",
    )
    parser.add_argument("--config", type=Path, default=None, help="Settings YAML (default: config/recipe_diff.yaml)")
    parser.add_argument("--log-level", default=None, help="Logging level (DEBUG, INFO, ...)")
    parser.add_argument("--quiet", action="store_true", help="Do not print the summary table")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    try:
        settings = apply_overrides(
            load_settings(args.config),
            output=args.output,
            whitelist=args.whitelist,
            blacklist=args.blacklist,
            log_level=args.log_level,
        )
        configure_logging(settings.log_level)
        status_filter = StatusFilter.from_names(settings.whitelist, settings.blacklist)
    except ValueError as exc:
        print(f"invalid configuration: {exc}", file=sys.stderr)
        return EXIT_BAD_CONFIG
    except FileNotFoundError as exc:
        print(str(exc), file=sys.stderr)
        return EXIT_FAILED

    try:
        before, after = load_dumps(args.before, args.after)
    except (DumpFormatError, FileNotFoundError) as exc:
        logger.error("Failed to load dump: %s", exc)
        return EXIT_FAILED

    if after is None:
        logger.info("Running conflict analysis on %s", before.source)
        analysis = analyze_dump(before.records, status_filter)
    else:
        logger.info("Comparing %s -> %s", before.source, after.source)
        analysis = compare_dumps(before.records, after.records, status_filter)

    if not args.quiet:
        print_summary(analysis)

    output = Path(settings.output)
    logger.info("Writing %s", output)
    try:
        write_report(analysis, output)
    except OSError as exc:
        logger.error("Failed to write report: %s", exc)
        return EXIT_FAILED
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
