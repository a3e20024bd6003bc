"""
Digest cache stored in extended file attributes.
"""

import errno
import os
from typing import Optional

from .errors import CacheError

XATTR_PREFIX = "user.same-hash."

# Linux reports a missing attribute as ENODATA, BSD/macOS as ENOATTR
_MISSING_ERRNOS = {getattr(errno, name) for name in ("ENODATA", "ENOATTR") if hasattr(errno, name)}


def attribute_name(algorithm: str, prefix: str = XATTR_PREFIX) -> str:
    """Name of the attribute holding the digest for ``algorithm``."""
    return prefix + algorithm


def _check_supported(path: str, name: str) -> None:
    if not hasattr(os, "setxattr"):
        raise CacheError(path, name, OSError(errno.ENOTSUP, "extended attributes not supported on this platform"))


class XattrCache:
    """
    Get/set a hex digest string on a file, keyed by (path, algorithm).

    Values are stored as the ASCII bytes of the hex digest so they read back
    in the same textual form used for display.
    """

    def __init__(self, prefix: str = XATTR_PREFIX):
        self.prefix = prefix

    def get(self, path: str, algorithm: str) -> Optional[str]:
        """
        Read the cached digest.

        Returns:
            The stored string, or None if the attribute does not exist

        Raises:
            CacheError: the attribute exists but could not be read, or the
                platform/filesystem has no user attributes
        """
        name = attribute_name(algorithm, self.prefix)
        _check_supported(path, name)
        try:
            value = os.getxattr(path, name)
        except OSError as e:
            if e.errno in _MISSING_ERRNOS:
                return None
            raise CacheError(path, name, e) from e
        return value.decode("ascii", errors="replace")

    def set(self, path: str, algorithm: str, value: str) -> None:
        """Store ``value``, replacing any existing attribute."""
        name = attribute_name(algorithm, self.prefix)
        _check_supported(path, name)
        try:
            os.setxattr(path, name, value.encode("ascii"))
        except OSError as e:
            raise CacheError(path, name, e) from e
