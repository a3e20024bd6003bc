"""
Duplicate detection run: walk roots, hash files, build the index.
"""

import logging
import os
from dataclasses import dataclass, field
from typing import Iterable, Iterator, Optional, TextIO

from tqdm import tqdm

from .classifier import FileRecord
from .diagnostics import WarningTracker
from .digests import DEFAULT_ALGORITHM, Algorithm, get_algorithm
from .hasher import CachePolicy, HashResolver
from .index import DuplicateIndex, IndexKey, key_label
from .parallel_hasher import parallel_resolve, resolve_sequential
from .scanner import ScanStats, walk

logger = logging.getLogger(__name__)


@dataclass
class RunOptions:
    """Settings for one detection run."""
    algorithm: str = DEFAULT_ALGORITHM
    recursive: bool = False
    follow_links: bool = False
    cache_policy: CachePolicy = CachePolicy.NONE
    workers: int = 1
    show_progress: bool = False
    progress_stream: Optional[TextIO] = None
    # When set, one "<hash> <path>" line is written here per indexed file
    debug_stream: Optional[TextIO] = None


@dataclass
class RunContext:
    """State owned by a single run."""
    options: RunOptions
    algorithm: Algorithm
    resolver: HashResolver
    tracker: WarningTracker
    index: DuplicateIndex = field(default_factory=DuplicateIndex)
    scan_stats: ScanStats = field(default_factory=ScanStats)
    files_processed: int = 0
    hash_errors: int = 0


def create_context(options: RunOptions, cache=None, tracker: Optional[WarningTracker] = None) -> RunContext:
    """
    Validate options and set up a run.

    Raises:
        UnsupportedAlgorithm: before anything touches the filesystem
    """
    algorithm = get_algorithm(options.algorithm)
    tracker = tracker or WarningTracker()
    resolver = HashResolver(algorithm, options.cache_policy, cache=cache, tracker=tracker)
    return RunContext(options=options, algorithm=algorithm, resolver=resolver, tracker=tracker)


def iter_files(roots: Iterable, context: RunContext) -> Iterator[FileRecord]:
    """Chain the walks of every root."""
    opts = context.options
    for root in roots:
        yield from walk(
            root,
            recursive=opts.recursive,
            follow_links=opts.follow_links,
            tracker=context.tracker,
            stats=context.scan_stats,
        )


def record_result(context: RunContext, record: FileRecord, key: IndexKey) -> None:
    """Insert one resolved file into the index."""
    # Relative and symlink-resolved spellings of one file share a realpath
    if not context.index.insert(key, record.path, identity=os.path.realpath(record.path)):
        logger.debug(f"Already indexed: {record.path}")
        return
    context.files_processed += 1
    if context.options.debug_stream is not None:
        print(f"{key_label(key)} {record.path}", file=context.options.debug_stream)


def find_duplicates(
    roots: Iterable,
    options: Optional[RunOptions] = None,
    cache=None,
    tracker: Optional[WarningTracker] = None,
) -> RunContext:
    """
    Hash every file under ``roots`` and group them by content.

    Files that cannot be read are logged through the tracker and left out of
    the index. With ``options.workers > 1`` hashing runs on a thread pool
    while index insertion stays on this thread; buckets then fill in
    completion order.

    Args:
        roots: Files and/or directories to examine
        options: Run settings
        cache: Attribute cache (defaults to extended attributes when a cache
            policy is active)
        tracker: Warning tracker shared with the caller

    Returns:
        The finished RunContext, holding the index and counters
    """
    roots = list(roots)
    if not roots:
        raise ValueError("At least one path is required")

    context = create_context(options or RunOptions(), cache=cache, tracker=tracker)
    opts = context.options
    records = iter_files(roots, context)

    if opts.workers == 1:
        results = resolve_sequential(records, context.resolver)
    else:
        results = parallel_resolve(records, context.resolver, max_workers=opts.workers or None)

    with tqdm(
        desc="Hashing",
        unit=" files",
        disable=not opts.show_progress,
        file=opts.progress_stream,
        leave=False,
    ) as pbar:
        for record, key, error in results:
            pbar.update(1)
            if error is not None:
                context.hash_errors += 1
                context.tracker.warn_os_error(error.cause, str(error))
                continue
            record_result(context, record, key)

    return context
