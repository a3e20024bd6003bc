"""
Find files with identical content under one or more directory trees.
"""

from .detector import RunContext, RunOptions, find_duplicates
from .digests import AVAILABLE_ALGORITHMS, DEFAULT_ALGORITHM, Digest, get_algorithm, select
from .errors import CacheError, HashError, SameFinderError, UnsupportedAlgorithm
from .hasher import CachePolicy, HashResolver, resolve_hash
from .index import ZERO_LENGTH, DuplicateIndex
from .report import Report, ReportOptions, render
from .scanner import walk

__version__ = "1.0.0"
