"""
Hash -> paths multimap built up during a run.
"""

from enum import Enum
from typing import Dict, Iterator, List, Optional, Set, Tuple, Union

from .digests import Digest


class Sentinel(Enum):
    """Index keys that are not digests."""
    ZERO_LENGTH = "0-byte-file"

    def __str__(self) -> str:
        return self.value


ZERO_LENGTH = Sentinel.ZERO_LENGTH

IndexKey = Union[Digest, Sentinel]


def key_label(key: IndexKey) -> str:
    """Display form of an index key: hex digest or the sentinel name."""
    return str(key)


class DuplicateIndex:
    """
    Append-only mapping of index key to paths in discovery order.

    Each file is recorded at most once. Callers may pass an ``identity`` (the
    resolved path) so that one file reached under two spellings, for example
    relative and through a followed symlink, is only indexed the first time.
    """

    def __init__(self):
        self._buckets: Dict[IndexKey, List[str]] = {}
        self._seen: Set[str] = set()
        self._identities: Set[str] = set()

    def insert(self, key: IndexKey, path: str, identity: Optional[str] = None) -> bool:
        """
        Append ``path`` to the bucket for ``key``.

        Args:
            key: Digest or sentinel
            path: Path as it will be reported
            identity: What makes two paths the same file (defaults to ``path``)

        Returns:
            False if the path or identity was already indexed, True otherwise
        """
        identity = path if identity is None else identity
        if path in self._seen or identity in self._identities:
            return False
        self._seen.add(path)
        self._identities.add(identity)
        self._buckets.setdefault(key, []).append(path)
        return True

    def get(self, key: IndexKey) -> List[str]:
        return list(self._buckets.get(key, ()))

    def buckets(self) -> Iterator[Tuple[IndexKey, List[str]]]:
        """Iterate (key, paths) in first-insertion order of the keys."""
        for key, paths in self._buckets.items():
            yield key, list(paths)

    def groups(self, min_size: int = 2) -> Iterator[Tuple[IndexKey, List[str]]]:
        """Iterate buckets with at least ``min_size`` members."""
        for key, paths in self.buckets():
            if len(paths) >= min_size:
                yield key, paths

    def __contains__(self, path: str) -> bool:
        return path in self._seen

    def __len__(self) -> int:
        return len(self._seen)

    @property
    def bucket_count(self) -> int:
        return len(self._buckets)
