#!/usr/bin/env python3
"""
Command-line interface for the same-file finder.
"""

import argparse
import logging
import sys
import time
from datetime import datetime
from typing import List, Optional

from .detector import RunOptions, find_duplicates
from .diagnostics import WarningTracker
from .digests import DEFAULT_ALGORITHM, get_algorithm
from .errors import UnsupportedAlgorithm
from .formatter import (
    format_algorithms,
    format_json_output,
    format_output,
    format_start_time,
    format_timing,
    format_warning_summary,
)
from .hasher import CachePolicy
from .report import ReportOptions, render

DOT_PREFIX = "./"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="same",
        description="Find files with identical content by hashing them",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        allow_abbrev=False,
    )
    parser.add_argument(
        "paths",
        nargs="*",
        metavar="PATH",
        help="Files or directories to examine",
    )
    parser.add_argument(
        "-a", "--algorithm",
        default=DEFAULT_ALGORITHM,
        help=f"Select the hashing algorithm (default: {DEFAULT_ALGORITHM})",
    )
    parser.add_argument(
        "-A", "--available", "--algorithms",
        dest="available",
        action="store_true",
        help="List available algorithms and exit",
    )
    parser.add_argument(
        "-r", "--recursive",
        action="store_true",
        help="Process directories recursively",
    )
    parser.add_argument(
        "-l", "--follow-links",
        action="store_true",
        help="Follow symbolic links",
    )
    parser.add_argument(
        "-X", "--store-xattr",
        action="store_true",
        help="Check for and store hash in extended attributes",
    )
    parser.add_argument(
        "-Y", "--always-recreate-xattr",
        action="store_true",
        help="Always recalculate and store hash in extended attributes",
    )
    parser.add_argument(
        "-z", "--skip-zero-sized", "--skip-zero",
        dest="skip_zero_sized",
        action="store_true",
        help="Skip printing zero-sized files in the output",
    )
    parser.add_argument(
        "-d", "--duplicates",
        action="store_true",
        help="Leave out the shortest-named copy of each group, mark ties",
    )
    parser.add_argument(
        "-n", "--no-show", "--noshow",
        dest="no_show",
        action="store_true",
        help="Don't show the hashes when listing duplicates",
    )
    parser.add_argument(
        "-N", "--no-dot", "--nodot",
        dest="no_dot",
        action="store_true",
        help="Cut './' from the start of names of files when listing",
    )
    parser.add_argument(
        "-o", "--output",
        choices=["text", "json"],
        default="text",
        help="Output format (default: text)",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Show a progress bar and verbose diagnostics",
    )
    parser.add_argument(
        "-q", "--quiet",
        action="store_true",
        help="Only report errors on stderr",
    )
    parser.add_argument(
        "-t", "--show-time",
        action="store_true",
        help="Show time taken to process",
    )
    parser.add_argument(
        "--stderr", "--stderr-progress",
        dest="stderr",
        action="store_true",
        help="Send progress, timing and debug lines to stderr",
    )
    parser.add_argument(
        "--DEBUG",
        dest="debug",
        action="store_true",
        help="Print one 'hash path' line per file instead of the report",
    )
    parser.add_argument(
        "-j", "--workers",
        type=int,
        default=1,
        help="Hashing threads (default: 1, 0 for automatic)",
    )
    parser.add_argument(
        "--max-warnings",
        type=int,
        default=0,
        help="Log at most this many warnings per category (default: 0, unlimited)",
    )
    return parser


def parse_arguments(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    return build_parser().parse_args(argv)


def setup_logging(verbose: bool, quiet: bool) -> None:
    if verbose:
        level = logging.DEBUG
    elif quiet:
        level = logging.ERROR
    else:
        level = logging.INFO
    logging.basicConfig(level=level, format='%(message)s', stream=sys.stderr, force=True)


def run_options_from_args(args: argparse.Namespace) -> RunOptions:
    side_stream = sys.stderr if args.stderr else sys.stdout
    return RunOptions(
        algorithm=args.algorithm,
        recursive=args.recursive,
        follow_links=args.follow_links,
        cache_policy=CachePolicy.from_flags(args.store_xattr, args.always_recreate_xattr),
        workers=args.workers,
        show_progress=args.verbose and not args.debug,
        progress_stream=side_stream,
        debug_stream=side_stream if args.debug else None,
    )


def report_options_from_args(args: argparse.Namespace) -> ReportOptions:
    return ReportOptions(
        skip_zero_length=args.skip_zero_sized,
        show_hashes=not args.no_show,
        strip_prefix=DOT_PREFIX if args.no_dot else None,
        mark_representative=args.duplicates,
    )


def main(argv: Optional[List[str]] = None) -> None:
    """Main entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.verbose and args.quiet:
        print("Error: Cannot use both --verbose and --quiet flags", file=sys.stderr)
        sys.exit(1)

    setup_logging(args.verbose, args.quiet)

    # Debug mode replaces every other kind of output
    if args.debug:
        args.verbose = False
        args.show_time = False

    if args.available:
        format_algorithms()
        sys.exit(0)

    if not args.paths:
        parser.print_usage(sys.stderr)
        print("Error: at least one path is required", file=sys.stderr)
        sys.exit(1)

    try:
        get_algorithm(args.algorithm)
    except UnsupportedAlgorithm as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    side_stream = sys.stderr if args.stderr else sys.stdout
    if args.debug:
        print(f"Using hashing algorithm: {args.algorithm}", file=side_stream)

    started = datetime.now()
    start_clock = time.perf_counter()
    if args.show_time and args.verbose:
        format_start_time(started, file=side_stream)

    tracker = WarningTracker(max_per_type=args.max_warnings)
    context = find_duplicates(args.paths, run_options_from_args(args), tracker=tracker)

    if not args.debug:
        report = render(context.index, report_options_from_args(args))
        if args.output == "json":
            format_json_output(report, context)
        else:
            format_output(report, header=not args.stderr)

    if args.show_time:
        elapsed = time.perf_counter() - start_clock
        finished = datetime.now() if args.verbose else None
        format_timing(context.files_processed, elapsed, finished=finished, file=side_stream)

    if not args.quiet and args.output != "json":
        format_warning_summary(tracker)

    sys.exit(0)


if __name__ == "__main__":
    main()
