"""
Directory traversal: enumerate candidate regular files under a root.
"""

import logging
import os
from typing import Iterator, List, Optional

from .classifier import FileKind, FileRecord, classify, resolve_symlink
from .diagnostics import WarningTracker

logger = logging.getLogger(__name__)

# OS-generated marker files that are never reported
HOUSEKEEPING_NAMES = frozenset({".DS_Store", "Icon\r", "Thumbs.db", "desktop.ini"})


class ScanStats:
    """Counters describing what a walk saw and skipped."""

    def __init__(self):
        self.entries_seen = 0
        self.files_found = 0
        self.directories_pruned = 0
        self.symlinks_ignored = 0
        self.special_files = 0
        self.housekeeping_skipped = 0

    def as_dict(self) -> dict:
        return dict(vars(self))


def walk(
    root,
    recursive: bool = False,
    follow_links: bool = False,
    tracker: Optional[WarningTracker] = None,
    stats: Optional[ScanStats] = None,
) -> Iterator[FileRecord]:
    """
    Lazily yield regular files under ``root``.

    A root that is a file is yielded as-is. A directory root has its entries
    visited in name order, depth first; subdirectories are entered only when
    ``recursive`` is set. Symlinks are skipped unless ``follow_links`` is set,
    in which case they are reported under their resolved path when that is a
    regular file. Directories reached through a symlink entry are never
    entered.

    Args:
        root: File or directory to walk
        recursive: Descend into subdirectories
        follow_links: Resolve symlinked entries
        tracker: Receives warnings for entries that cannot be accessed
        stats: Optional counters updated during the walk

    Yields:
        FileRecord for each regular (possibly zero-length) file
    """
    tracker = tracker or WarningTracker()
    stats = stats or ScanStats()
    root = os.fspath(root)

    record = classify(root)
    if record.kind is FileKind.INACCESSIBLE:
        tracker.warn_os_error(record.error, f"Error accessing path {root}: {record.error}")
        return

    if record.kind is FileKind.SYMLINK:
        if not follow_links:
            stats.symlinks_ignored += 1
            logger.info(f"Skipping symlink {root} (links are not followed)")
            return
        record = resolve_symlink(root)
        if record.kind is FileKind.INACCESSIBLE:
            tracker.warn('broken_symlinks', f"Error resolving symlink {root}: {record.error}")
            return

    if record.kind is FileKind.DIRECTORY:
        yield from _walk_directory(record.path, recursive, follow_links, tracker, stats)
    elif record.is_file:
        stats.files_found += 1
        yield record
    else:
        stats.special_files += 1
        logger.info(f"Skipping {root}: not a regular file")


def _list_entries(path: str, tracker: WarningTracker) -> Optional[Iterator[os.DirEntry]]:
    try:
        with os.scandir(path) as it:
            entries: List[os.DirEntry] = sorted(it, key=lambda e: e.name)
    except OSError as e:
        tracker.warn_os_error(e, f"Error accessing path {path}: {e}")
        return None
    return iter(entries)


def _walk_directory(
    top: str,
    recursive: bool,
    follow_links: bool,
    tracker: WarningTracker,
    stats: ScanStats,
) -> Iterator[FileRecord]:
    entries = _list_entries(top, tracker)
    if entries is None:
        return

    # Stack of entry iterators, one per open directory
    stack = [entries]
    while stack:
        entry = next(stack[-1], None)
        if entry is None:
            stack.pop()
            continue

        if entry.name in HOUSEKEEPING_NAMES:
            stats.housekeeping_skipped += 1
            continue
        stats.entries_seen += 1

        try:
            is_dir = entry.is_dir(follow_symlinks=False)
        except OSError as e:
            tracker.warn_os_error(e, f"Error accessing path {entry.path}: {e}")
            continue

        if is_dir:
            if not recursive:
                stats.directories_pruned += 1
                continue
            children = _list_entries(entry.path, tracker)
            if children is not None:
                stack.append(children)
            continue

        record = _classify_entry(entry, follow_links, tracker, stats)
        if record is not None:
            stats.files_found += 1
            yield record


def _classify_entry(
    entry: os.DirEntry,
    follow_links: bool,
    tracker: WarningTracker,
    stats: ScanStats,
) -> Optional[FileRecord]:
    record = classify(entry.path, follow_links=follow_links)

    if record.kind is FileKind.INACCESSIBLE:
        if record.link is not None:
            tracker.warn('broken_symlinks', f"Error following symlink {entry.path}: {record.error}")
        else:
            tracker.warn_os_error(record.error, f"Error accessing path {entry.path}: {record.error}")
        return None

    if record.kind is FileKind.SYMLINK:
        stats.symlinks_ignored += 1
        return None

    if record.kind is FileKind.DIRECTORY:
        # Only reachable through a followed symlink
        logger.debug(f"Not descending into linked directory {entry.path} -> {record.path}")
        stats.symlinks_ignored += 1
        return None

    if record.kind is FileKind.OTHER:
        stats.special_files += 1
        return None

    return record
