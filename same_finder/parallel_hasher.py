"""
Parallel file hashing for improved I/O throughput.
"""

import os
from concurrent.futures import FIRST_COMPLETED, Future, ThreadPoolExecutor, wait
from typing import Dict, Iterable, Iterator, Optional, Set, Tuple

from .classifier import FileRecord
from .errors import HashError
from .hasher import HashResolver
from .index import IndexKey

# (record, key, error) - exactly one of key/error is set
ResolveResult = Tuple[FileRecord, Optional[IndexKey], Optional[HashError]]


def get_optimal_worker_count() -> int:
    """
    Determine a worker thread count from the CPU count.

    Returns:
        Number of worker threads to use
    """
    cpu_count = os.cpu_count() or 4
    return min(cpu_count * 2, 16)


def resolve_sequential(records: Iterable[FileRecord], resolver: HashResolver) -> Iterator[ResolveResult]:
    """Resolve records one at a time, in discovery order."""
    for record in records:
        try:
            yield record, resolver.resolve(record), None
        except HashError as e:
            yield record, None, e


def parallel_resolve(
    records: Iterable[FileRecord],
    resolver: HashResolver,
    max_workers: Optional[int] = None,
) -> Iterator[ResolveResult]:
    """
    Resolve records on a thread pool, yielding results as they complete.

    At most ``max_workers * 4`` records are in flight, so the record source
    is consumed lazily. Results arrive in completion order, not discovery
    order. A failure on one file is reported for that file only.

    Args:
        records: Files to hash
        resolver: Shared resolver; its counters are thread-safe
        max_workers: Worker threads (None for auto)

    Yields:
        (record, key, error) tuples
    """
    if max_workers is None or max_workers < 1:
        max_workers = get_optimal_worker_count()
    window = max_workers * 4

    with ThreadPoolExecutor(max_workers=max_workers) as executor:
        pending: Dict[Future, FileRecord] = {}
        for record in records:
            pending[executor.submit(resolver.resolve, record)] = record
            if len(pending) >= window:
                done, _ = wait(pending, return_when=FIRST_COMPLETED)
                yield from _drain(done, pending)

        while pending:
            done, _ = wait(pending, return_when=FIRST_COMPLETED)
            yield from _drain(done, pending)


def _drain(done: Set[Future], pending: Dict[Future, FileRecord]) -> Iterator[ResolveResult]:
    for future in done:
        record = pending.pop(future)
        try:
            yield record, future.result(), None
        except HashError as e:
            yield record, None, e
