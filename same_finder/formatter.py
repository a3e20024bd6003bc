"""
Output formatting for duplicate reports.
"""

import json
import sys
from datetime import datetime
from typing import Optional, TextIO

from .detector import RunContext
from .diagnostics import WarningTracker
from .digests import AVAILABLE_ALGORITHMS, DEFAULT_ALGORITHM, is_available
from .report import TIE_MARKER, Report, display_path

REPORT_HEADER = "--- Duplicate files found ---"
TIME_FORMAT = "%Y-%m-%d %H:%M:%S"


def format_output(report: Report, header: bool = True, file: Optional[TextIO] = None) -> None:
    """
    Print the report as text.

    Each group is its hash label (unless hidden), one indented line per listed
    file and a blank line. Tied representative candidates carry a marker.
    """
    file = file or sys.stdout
    if header:
        print(f"\n{REPORT_HEADER}", file=file)

    for group in report.groups:
        if report.options.show_hashes:
            print(f"{group.label}:", file=file)
        for entry in group.entries:
            if entry.tied:
                print(f"  {entry.display} {TIE_MARKER}", file=file)
            else:
                print(f"  {entry.display}", file=file)
        print(file=file)

    if not report.found_duplicates:
        print("No duplicate files found.", file=file)


def build_statistics(context: RunContext, report: Report) -> dict:
    return {
        "files_processed": context.files_processed,
        "hash_errors": context.hash_errors,
        "duplicate_groups_count": len(report.groups),
        "duplicate_files_count": sum(group.size for group in report.groups),
        "scan": context.scan_stats.as_dict(),
        "cache": context.resolver.stats.as_dict(),
        "warnings": context.tracker.summary(),
    }


def format_json_output(report: Report, context: RunContext, file: Optional[TextIO] = None) -> None:
    """
    Print the report as JSON for scripting.

    Unlike the text form, every member of a group is listed; the implied
    original is given separately as ``representative``.
    """
    strip = report.options.strip_prefix
    groups = []
    for group in report.groups:
        tied = [entry.display for entry in group.entries if entry.tied]
        groups.append({
            "hash": group.label,
            "count": group.size,
            "files": [display_path(p, strip) for p in group.members],
            "representative": display_path(group.representative, strip) if group.representative else None,
            "tied": tied,
        })

    output = {
        "algorithm": context.algorithm.name,
        "duplicate_files": groups,
        "statistics": build_statistics(context, report),
    }
    print(json.dumps(output, indent=2), file=file or sys.stdout)


def format_start_time(started: datetime, file: Optional[TextIO] = None) -> None:
    print(f"Start time: {started.strftime(TIME_FORMAT)}", file=file or sys.stdout)


def format_timing(
    files_processed: int,
    elapsed: float,
    finished: Optional[datetime] = None,
    file: Optional[TextIO] = None,
) -> None:
    """Print the per-file timing line, preceded by the end time when given."""
    file = file or sys.stdout
    if finished is not None:
        print(f"End time: {finished.strftime(TIME_FORMAT)}", file=file)
    if files_processed > 0:
        print(f"{files_processed} files, {elapsed / files_processed:.4f} seconds / file", file=file)
    else:
        print("No files found.", file=file)


def format_warning_summary(tracker: WarningTracker, file: Optional[TextIO] = None) -> None:
    """Print counts of skipped entities by category, if there were any."""
    file = file or sys.stderr
    if tracker.total == 0:
        return
    print("\n⚠️  Processing warnings summary:", file=file)
    for warning_type, count in tracker.summary().items():
        if count > 0:
            warning_name = warning_type.replace('_', ' ').title()
            print(f"  • {warning_name}: {count}", file=file)


def format_algorithms(file: Optional[TextIO] = None) -> None:
    file = file or sys.stdout
    print("Available Hashing Algorithms:", file=file)
    for name in AVAILABLE_ALGORITHMS:
        suffix = ""
        if name == DEFAULT_ALGORITHM:
            suffix = " (default)"
        elif not is_available(name):
            suffix = " (not available in this Python build)"
        print(f"- {name}{suffix}", file=file)
