#!/usr/bin/env python3
"""
dtresolve command line

Resolves date expressions from the command line, or interactively when no
expression is given. Useful for manual testing and for checking how a zone
name will be interpreted.

Usage:
    dtresolve "now-1d/d" --tz UTC
    dtresolve "now/w" "now/w" --round-up --tz Europe/Berlin
    dtresolve                 (interactive mode)

    or

    python -m dtresolve ...
"""
import argparse
import logging
import sys
from dataclasses import replace
from typing import Callable, List, Optional, TextIO

from dotenv import find_dotenv, load_dotenv

from ..config import config
from ..data_types import ParseOptions
from ..errors import DateTimeResolutionError
from ..logging_config import setup_logging
from ..parser import resolve
from ..timezones import get_time_zone, reset_default_time_zone

logger = logging.getLogger(__name__)

EXIT_COMMANDS = {"quit", "exit", "q", ":quit", ":q"}


def format_result(value: str, options: ParseOptions) -> str:
    """
    Resolve ``value`` and render it as an ISO-8601 line.

    Raises:
        DateTimeResolutionError: In strict mode, or when nothing resolves
    """
    result = resolve(value, options)
    if result is None:
        raise DateTimeResolutionError(
            f"Cannot resolve {value!r}", value=value, time_zone=options.time_zone)
    return result.isoformat()


def print_banner(options: ParseOptions, out: TextIO) -> None:
    """Print welcome banner."""
    print("=" * 60, file=out)
    print("dtresolve - Interactive Mode", file=out)
    print("=" * 60, file=out)
    print(f"Time zone: {get_time_zone(options)}", file=out)
    print("\nCommands:", file=out)
    print("  :tz ZONE     switch time zone (empty = default)", file=out)
    print("  :roundup     toggle rounding to the end of units", file=out)
    print("  :quit        exit (or Ctrl+C)", file=out)
    print("\nExamples:", file=out)
    print("  now-6h", file=out)
    print("  now-7d/d", file=out)
    print("  2024-03-01T10:00:00", file=out)
    print("=" * 60, file=out)


def interactive_main(
    options: ParseOptions,
    input_fn: Callable[[str], str] = input,
    out: TextIO = sys.stdout
) -> None:
    """
    Read expressions until the user quits and print what they resolve to.

    Args:
        options: Starting options; :tz and :roundup change them for the session
        input_fn: Prompt function (injected by tests)
        out: Output stream
    """
    print_banner(options, out)

    while True:
        try:
            line = input_fn("\n> ").strip()
        except (KeyboardInterrupt, EOFError):
            print("\nGoodbye!", file=out)
            break

        if not line:
            continue
        if line.lower() in EXIT_COMMANDS:
            print("Goodbye!", file=out)
            break

        if line.startswith(":tz"):
            zone = line[len(":tz"):].strip() or None
            options = replace(options, time_zone=zone)
            print(f"Time zone: {get_time_zone(options)}", file=out)
            continue
        if line == ":roundup":
            options = replace(options, round_up=not options.round_up)
            print(f"Round up: {options.round_up}", file=out)
            continue

        try:
            print(format_result(line, options), file=out)
        except DateTimeResolutionError as e:
            print(f"Error: {e}", file=out)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="dtresolve",
        description="Resolve absolute timestamps and relative expressions (now-6h, now-7d/d)",
        formatter_class=argparse.RawDescriptionHelpFormatter
    )
    parser.add_argument(
        'values',
        nargs='*',
        help='Values to resolve; interactive mode when omitted'
    )
    parser.add_argument(
        '--tz', '--timezone',
        dest='time_zone',
        default=None,
        help='Time zone name, "utc" or "browser" (default: configured default)'
    )
    parser.add_argument(
        '--round-up',
        action='store_true',
        help='Round relative expressions to the end of the unit'
    )
    parser.add_argument(
        '--strict',
        action='store_true',
        default=None,
        help='Fail on unresolvable input instead of falling back'
    )
    parser.add_argument(
        '--fiscal-year-start-month',
        type=int,
        default=None,
        choices=range(12),
        metavar='0-11',
        help='0-based month the fiscal year starts in'
    )
    return parser


def main(argv: Optional[List[str]] = None, out: TextIO = sys.stdout) -> int:
    """Entry point for the CLI. Returns the process exit status."""
    load_dotenv(find_dotenv(usecwd=True))
    config.reload()
    reset_default_time_zone()
    setup_logging('dtresolve', config.LOG_LEVEL, config.LOG_FORMAT, config.LOG_FILE)

    args = build_parser().parse_args(argv)
    options = ParseOptions(
        time_zone=args.time_zone,
        round_up=args.round_up,
        fiscal_year_start_month=args.fiscal_year_start_month,
        strict=args.strict,
    )

    if not args.values:
        interactive_main(options, out=out)
        return 0

    status = 0
    for value in args.values:
        try:
            print(format_result(value, options), file=out)
        except DateTimeResolutionError as e:
            logger.error("Resolution failed", extra={'value': value, 'error_type': type(e).__name__})
            print(f"Error: {e}", file=sys.stderr)
            status = 1
    return status


if __name__ == "__main__":
    sys.exit(main())
