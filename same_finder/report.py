"""
Build the duplicate report from a completed index.
"""

import os
from dataclasses import dataclass, field
from typing import List, Optional

from .index import ZERO_LENGTH, DuplicateIndex, IndexKey, key_label

# Appended to each of several equally good representative candidates
TIE_MARKER = "×"


@dataclass
class ReportOptions:
    """Display options for a duplicate report."""
    skip_zero_length: bool = False
    show_hashes: bool = True
    strip_prefix: Optional[str] = None
    mark_representative: bool = False


@dataclass
class ReportEntry:
    """One printed line of a group."""
    path: str
    display: str
    tied: bool = False


@dataclass
class ReportGroup:
    """A set of files sharing an index key."""
    key: IndexKey
    members: List[str]
    entries: List[ReportEntry] = field(default_factory=list)
    representative: Optional[str] = None

    @property
    def label(self) -> str:
        return key_label(self.key)

    @property
    def size(self) -> int:
        return len(self.members)


@dataclass
class Report:
    groups: List[ReportGroup]
    options: ReportOptions

    @property
    def found_duplicates(self) -> bool:
        return bool(self.groups)


def _sort_key(path: str):
    return len(path), len(os.path.basename(path))


def sort_members(paths: List[str]) -> List[str]:
    """Order by path length, then basename length; ties keep discovery order."""
    return sorted(paths, key=_sort_key)


def representative_candidates(sorted_paths: List[str]) -> List[str]:
    """Members tied with the first one on both path and basename length."""
    if not sorted_paths:
        return []
    best = _sort_key(sorted_paths[0])
    return [p for p in sorted_paths if _sort_key(p) == best]


def display_path(path: str, strip_prefix: Optional[str] = None) -> str:
    if strip_prefix and path.startswith(strip_prefix):
        return path[len(strip_prefix):]
    return path


def build_group(key: IndexKey, paths: List[str], options: ReportOptions) -> ReportGroup:
    """
    Lay out one duplicate group.

    With ``mark_representative`` the shortest member is the implied original
    and is left out of the listing. When several members tie for shortest,
    none can be picked, so all of them are listed with a marker.
    """
    if not options.mark_representative:
        entries = [ReportEntry(p, display_path(p, options.strip_prefix)) for p in paths]
        return ReportGroup(key, list(paths), entries)

    ordered = sort_members(paths)
    candidates = representative_candidates(ordered)
    group = ReportGroup(key, ordered)

    if len(candidates) == 1:
        group.representative = candidates[0]

    for p in ordered:
        shown = display_path(p, options.strip_prefix)
        if p == group.representative:
            continue
        group.entries.append(ReportEntry(p, shown, tied=len(candidates) > 1 and p in candidates))
    return group


def render(index: DuplicateIndex, options: Optional[ReportOptions] = None) -> Report:
    """
    Collect every bucket with two or more members into a report.

    Groups come out in the order their keys were first seen.
    """
    options = options or ReportOptions()
    groups = []
    for key, paths in index.groups(min_size=2):
        if key is ZERO_LENGTH and options.skip_zero_length:
            continue
        groups.append(build_group(key, paths, options))
    return Report(groups, options)
