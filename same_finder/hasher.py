"""
File hashing with optional extended-attribute caching.
"""

import logging
import os
import threading
from enum import Enum
from typing import Dict, Optional

from .classifier import FileKind, FileRecord, classify
from .diagnostics import WarningTracker
from .digests import Algorithm, Digest, get_algorithm
from .errors import CacheError, HashError
from .index import ZERO_LENGTH, IndexKey
from .xattr_cache import XattrCache

logger = logging.getLogger(__name__)

CHUNK_SIZE = 65536


class CachePolicy(Enum):
    """How the attribute cache takes part in hashing."""
    NONE = "none"
    USE_CACHE_THEN_STORE = "store"
    ALWAYS_RECOMPUTE = "recreate"

    @classmethod
    def from_flags(cls, store: bool = False, recreate: bool = False) -> "CachePolicy":
        """Map the store/recreate flags onto a policy; recreate wins."""
        if recreate:
            return cls.ALWAYS_RECOMPUTE
        if store:
            return cls.USE_CACHE_THEN_STORE
        return cls.NONE


class CacheStats:
    """Thread-safe counters for cache activity."""

    def __init__(self):
        self._lock = threading.Lock()
        self.hits = 0
        self.misses = 0
        self.writes = 0
        self.errors = 0

    def record(self, name: str) -> None:
        with self._lock:
            setattr(self, name, getattr(self, name) + 1)

    def as_dict(self) -> Dict[str, int]:
        return {
            'hits': self.hits,
            'misses': self.misses,
            'writes': self.writes,
            'errors': self.errors,
        }


def calculate_file_hash(file_path: str, algorithm: Algorithm) -> Digest:
    """
    Stream a file through ``algorithm``.

    Raises:
        HashError: the file could not be opened or read
    """
    accumulator = algorithm.new()
    try:
        with open(file_path, "rb") as f:
            for chunk in iter(lambda: f.read(CHUNK_SIZE), b""):
                accumulator.update(chunk)
    except OSError as e:
        raise HashError(file_path, e) from e
    return accumulator.digest()


class HashResolver:
    """
    Produce the index key for a file under a cache policy.

    Zero-length files map to the sentinel key without being opened and
    without touching the cache.
    """

    def __init__(
        self,
        algorithm: Algorithm,
        policy: CachePolicy = CachePolicy.NONE,
        cache=None,
        tracker: Optional[WarningTracker] = None,
    ):
        self.algorithm = algorithm
        self.policy = policy
        if cache is None and policy is not CachePolicy.NONE:
            cache = XattrCache()
        self.cache = cache
        self.tracker = tracker or WarningTracker()
        self.stats = CacheStats()

    def resolve(self, record: FileRecord) -> IndexKey:
        """
        Get the index key for a classified file.

        Raises:
            HashError: the file could not be read
        """
        if record.kind is FileKind.ZERO_LENGTH_FILE:
            return ZERO_LENGTH

        path = record.path
        if self.policy is CachePolicy.NONE:
            return calculate_file_hash(path, self.algorithm)

        if self.policy is CachePolicy.USE_CACHE_THEN_STORE:
            cached = self._read_cache(path)
            if cached is not None:
                self.stats.record('hits')
                return cached
            self.stats.record('misses')
            digest = calculate_file_hash(path, self.algorithm)
            self._write_cache(path, digest)
            return digest

        if self.policy is CachePolicy.ALWAYS_RECOMPUTE:
            digest = calculate_file_hash(path, self.algorithm)
            self._write_cache(path, digest)
            return digest

        raise ValueError(f"Unknown cache policy: {self.policy!r}")

    def resolve_path(self, path) -> IndexKey:
        """Classify ``path`` (following links) and resolve it."""
        record = classify(path, follow_links=True)
        if record.kind is FileKind.INACCESSIBLE:
            raise HashError(record.path, record.error)
        if not record.is_file:
            raise HashError(record.path, IsADirectoryError(f"not a regular file: {record.path}"))
        return self.resolve(record)

    def _read_cache(self, path: str) -> Optional[Digest]:
        try:
            value = self.cache.get(path, self.algorithm.name)
        except CacheError as e:
            self.stats.record('errors')
            self.tracker.warn('cache_errors', f"Error reading xattr for {path}: {e.cause}")
            return None
        if value is None:
            return None
        try:
            return Digest.from_hex(value)
        except ValueError:
            self.stats.record('errors')
            self.tracker.warn('cache_errors', f"Ignoring malformed cached hash on {path}: {value!r}")
            return None

    def _write_cache(self, path: str, digest: Digest) -> None:
        try:
            self.cache.set(path, self.algorithm.name, digest.hex)
        except CacheError as e:
            self.stats.record('errors')
            self.tracker.warn('cache_errors', f"Error writing xattr for {path}: {e.cause}")
            return
        self.stats.record('writes')


def resolve_hash(path, algorithm_name: str, policy: CachePolicy = CachePolicy.NONE, cache=None) -> IndexKey:
    """One-off resolve of a single path by algorithm name."""
    resolver = HashResolver(get_algorithm(algorithm_name), policy, cache=cache)
    return resolver.resolve_path(os.fspath(path))
