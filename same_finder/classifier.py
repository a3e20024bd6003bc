"""
File classification for the tree walker.
"""

import os
import stat
from dataclasses import dataclass
from enum import Enum
from typing import Optional


class FileKind(Enum):
    """What a path turned out to be when it was examined."""
    DIRECTORY = "directory"
    REGULAR_FILE = "regular_file"
    ZERO_LENGTH_FILE = "zero_length_file"
    SYMLINK = "symlink"
    OTHER = "other"  # FIFOs, sockets, devices
    INACCESSIBLE = "inaccessible"


@dataclass(frozen=True)
class FileRecord:
    """A classified path. ``link`` is set when reached through a followed symlink."""
    path: str
    kind: FileKind
    size: int = 0
    link: Optional[str] = None
    error: Optional[OSError] = None

    @property
    def is_file(self) -> bool:
        return self.kind in (FileKind.REGULAR_FILE, FileKind.ZERO_LENGTH_FILE)


def _kind_from_mode(mode: int, size: int) -> FileKind:
    if stat.S_ISDIR(mode):
        return FileKind.DIRECTORY
    if stat.S_ISLNK(mode):
        return FileKind.SYMLINK
    if stat.S_ISREG(mode):
        return FileKind.ZERO_LENGTH_FILE if size == 0 else FileKind.REGULAR_FILE
    return FileKind.OTHER


def classify(path: str, follow_links: bool = False) -> FileRecord:
    """
    Classify ``path`` without following a final symlink unless asked to.

    With ``follow_links`` a symlink is resolved to its final target, and the
    returned record describes the target under its resolved path. Failures
    never raise; they come back as ``FileKind.INACCESSIBLE`` with the error.

    Args:
        path: Path to examine
        follow_links: Resolve symlinks and classify their targets

    Returns:
        FileRecord for the path (or its resolved target)
    """
    path = os.fspath(path)
    try:
        st = os.lstat(path)
    except OSError as e:
        return FileRecord(path, FileKind.INACCESSIBLE, error=e)

    kind = _kind_from_mode(st.st_mode, st.st_size)
    if kind is not FileKind.SYMLINK:
        return FileRecord(path, kind, size=st.st_size)

    if not follow_links:
        return FileRecord(path, FileKind.SYMLINK)

    return resolve_symlink(path)


def resolve_symlink(path: str) -> FileRecord:
    """Resolve a symlink and classify its target."""
    resolved = os.path.realpath(path)
    try:
        st = os.stat(resolved)
    except OSError as e:
        return FileRecord(resolved, FileKind.INACCESSIBLE, link=path, error=e)

    kind = _kind_from_mode(st.st_mode, st.st_size)
    return FileRecord(resolved, kind, size=st.st_size, link=path)
