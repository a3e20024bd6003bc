"""
Per-run warning tracking for recoverable errors.
"""

import errno
import logging
import threading
from typing import Dict, Optional

logger = logging.getLogger(__name__)

WARNING_CATEGORIES = (
    'permission_denied',
    'file_not_found',
    'broken_symlinks',
    'io_errors',
    'cache_errors',
    'other_errors',
)


def categorize_os_error(error: BaseException) -> str:
    """Map an exception onto one of the warning categories."""
    if isinstance(error, PermissionError):
        return 'permission_denied'
    if isinstance(error, FileNotFoundError):
        return 'file_not_found'
    if isinstance(error, OSError):
        if error.errno == errno.ELOOP:
            return 'broken_symlinks'
        return 'io_errors'
    return 'other_errors'


class WarningTracker:
    """
    Counts and logs recoverable errors by category.

    Every occurrence is counted. Only the first ``max_per_type`` of each
    category are logged, followed by one suppression notice; ``None`` or 0
    logs everything.
    """

    def __init__(self, max_per_type: Optional[int] = None, log: Optional[logging.Logger] = None):
        self.max_per_type = max_per_type or None
        self.log = log or logger
        self._lock = threading.Lock()
        self._counts: Dict[str, int] = {name: 0 for name in WARNING_CATEGORIES}

    def warn(self, category: str, message: str) -> None:
        with self._lock:
            count = self._counts.get(category, 0)
            self._counts[category] = count + 1

        if self.max_per_type is None or count < self.max_per_type:
            self.log.warning(message)
        elif count == self.max_per_type:
            name = category.replace('_', ' ').title()
            self.log.warning(f"{name}: additional warnings suppressed...")

    def warn_os_error(self, error: BaseException, message: str) -> None:
        self.warn(categorize_os_error(error), message)

    @property
    def total(self) -> int:
        with self._lock:
            return sum(self._counts.values())

    def summary(self) -> Dict[str, int]:
        """Get a copy of the per-category counts."""
        with self._lock:
            return self._counts.copy()

    def reset(self) -> None:
        with self._lock:
            self._counts = {name: 0 for name in WARNING_CATEGORIES}
