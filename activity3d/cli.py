"""Command-line entry point for activity3d."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from datetime import date
from pathlib import Path

from activity3d.core.calendar import DateRange
from activity3d.core.calendar import parse_day
from activity3d.core.calendar import span_label
from activity3d.core.calendar import trailing_range
from activity3d.core.errors import DomainError
from activity3d.core.errors import RemoteApiError
from activity3d.core.errors import ResponseParseError
from activity3d.core.observability import configure_logging
from activity3d.core.observability import init_sentry
from activity3d.openscad import generate_data_source
from activity3d.openscad import load_static_code
from activity3d.services.activity_service import fetch_activity
from activity3d.settings import Settings

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_REMOTE_ERROR = 1
EXIT_USAGE_ERROR = 2


def _iso_date(value: str) -> date:
    try:
        return parse_day(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"invalid date {value!r}, expected YYYY-MM-DD") from exc


def build_parser() -> argparse.ArgumentParser:
    """Build and return the argument parser."""
    parser = argparse.ArgumentParser(
        prog="activity3d",
        description="Render GitHub contribution activity as OpenSCAD data",
        epilog="Set GITHUB_TOKEN to include private contributions.",
    )
    parser.add_argument("username", help="GitHub user handle")
    parser.add_argument("--days", type=int, default=None, help="Days of history ending today (default 360)")
    parser.add_argument("--from", dest="from_date", type=_iso_date, default=None, help="Start date, YYYY-MM-DD")
    parser.add_argument("--to", dest="to_date", type=_iso_date, default=None, help="End date, YYYY-MM-DD")
    parser.add_argument("--static-code", type=Path, default=None, help="OpenSCAD model appended after the data")
    parser.add_argument("--output", "-o", type=Path, default=None, help="Output file path (default stdout)")
    parser.add_argument(
        "--format", choices=["scad", "json", "matrix"], default="scad", help="Output format"
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    return parser


def resolve_date_range(
    args: argparse.Namespace, settings: Settings, today: date | None = None
) -> DateRange:
    """Pick the explicit --from/--to range or the trailing window."""
    if args.from_date is None and args.to_date is None:
        days = settings.activity_window_days if args.days is None else args.days
        return trailing_range(days, today=today)
    if args.from_date is None or args.to_date is None:
        raise DomainError("--from and --to must be provided together")
    if args.days is not None:
        raise DomainError("--days cannot be combined with --from and --to")
    return DateRange(args.from_date, args.to_date)


def render(args: argparse.Namespace, settings: Settings) -> str:
    """Fetch activity and render it in the requested format."""
    date_range = resolve_date_range(args, settings)
    static_code = load_static_code(args.static_code) if args.static_code else None
    activity = fetch_activity(
        args.username, date_range, token=settings.github_token, settings=settings
    )

    if args.format == "json":
        payload = {"username": args.username, **activity.to_dict()}
        return json.dumps(payload, indent=2) + "\n"
    if args.format == "matrix":
        return json.dumps(activity.as_matrix()) + "\n"

    return generate_data_source(
        args.username,
        span_label(date_range),
        activity.as_matrix(),
        static_code=static_code,
    )


def main(argv: list[str] | None = None) -> int:
    """Entry point for the CLI."""
    parser = build_parser()
    args = parser.parse_args(argv)
    settings = Settings()

    configure_logging(logging.DEBUG if args.verbose else settings.log_level)
    init_sentry(settings)

    try:
        output = render(args, settings)
    except DomainError as exc:
        print(f"activity3d: error: {exc}", file=sys.stderr)
        return EXIT_USAGE_ERROR
    except RemoteApiError as exc:
        print(f"activity3d: error: {exc}", file=sys.stderr)
        if exc.body:
            print(exc.body, file=sys.stderr)
        return EXIT_REMOTE_ERROR
    except ResponseParseError as exc:
        print(f"activity3d: error: {exc}", file=sys.stderr)
        return EXIT_REMOTE_ERROR
    except OSError as exc:
        print(f"activity3d: error: {exc}", file=sys.stderr)
        return EXIT_USAGE_ERROR

    if args.output is None:
        sys.stdout.write(output)
        return EXIT_OK

    try:
        args.output.write_text(output, encoding="utf-8")
    except OSError as exc:
        print(f"activity3d: error: {exc}", file=sys.stderr)
        return EXIT_USAGE_ERROR
    logger.info("Wrote %s", args.output)
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
