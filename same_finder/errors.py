"""
Exception types raised by same_finder.
"""


class SameFinderError(Exception):
    """Base class for all same_finder errors."""


class UnsupportedAlgorithm(SameFinderError, ValueError):
    """Raised when a digest algorithm name is unknown or unavailable."""

    def __init__(self, name: str, reason: str = "unsupported hash algorithm"):
        self.name = name
        super().__init__(f"{reason}: {name}")


class HashError(SameFinderError):
    """A file could not be read to completion while hashing."""

    def __init__(self, path: str, cause: OSError):
        self.path = path
        self.cause = cause
        super().__init__(f"Error hashing file {path}: {cause}")


class CacheError(SameFinderError):
    """An extended attribute could not be read or written."""

    def __init__(self, path: str, name: str, cause: OSError):
        self.path = path
        self.name = name
        self.cause = cause
        super().__init__(f"xattr {name} on {path}: {cause}")
