"""
Digest algorithm selection and streaming accumulators.
"""

import hashlib
from dataclasses import dataclass
from typing import Callable, Dict, Optional, Tuple

from Crypto.Hash import MD4, RIPEMD160

from .errors import UnsupportedAlgorithm

DEFAULT_ALGORITHM = "sha512"

# Output length requested from extendable-output functions
XOF_LENGTH = 64

# name -> (constructor, XOF output length or None). OpenSSL 3 drops md4 and
# often ripemd160 from hashlib, so those two come from pycryptodome.
_CATALOG: Dict[str, Tuple[Callable, Optional[int]]] = {
    "md4": (MD4.new, None),
    "md5": (hashlib.md5, None),
    "sha1": (hashlib.sha1, None),
    "sha224": (hashlib.sha224, None),
    "sha256": (hashlib.sha256, None),
    "sha384": (hashlib.sha384, None),
    "sha512": (hashlib.sha512, None),
    "ripemd160": (RIPEMD160.new, None),
    "sha3-224": (hashlib.sha3_224, None),
    "sha3-256": (hashlib.sha3_256, None),
    "sha3-384": (hashlib.sha3_384, None),
    "sha3-512": (hashlib.sha3_512, None),
    "blake2b": (lambda: hashlib.blake2b(digest_size=64), None),
    "shake128": (hashlib.shake_128, XOF_LENGTH),
    "shake256": (hashlib.shake_256, XOF_LENGTH),
}

AVAILABLE_ALGORITHMS = tuple(_CATALOG)


@dataclass(frozen=True)
class Digest:
    """Content digest. Compares byte-wise, displays as lowercase hex."""
    value: bytes

    @classmethod
    def from_hex(cls, text: str) -> "Digest":
        return cls(bytes.fromhex(text.strip()))

    @property
    def hex(self) -> str:
        return self.value.hex()

    def __str__(self) -> str:
        return self.hex


class Accumulator:
    """Streaming hash accumulator for a single input."""

    def __init__(self, name: str, hash_obj, xof_length: Optional[int] = None):
        self.name = name
        self._hash = hash_obj
        self._xof_length = xof_length

    def update(self, data: bytes) -> None:
        self._hash.update(data)

    def digest(self) -> Digest:
        if self._xof_length is not None:
            return Digest(self._hash.digest(self._xof_length))
        return Digest(self._hash.digest())


@dataclass(frozen=True)
class Algorithm:
    """A validated digest algorithm that can produce fresh accumulators."""
    name: str
    factory: Callable
    xof_length: Optional[int] = None

    def new(self) -> Accumulator:
        return Accumulator(self.name, self.factory(), self.xof_length)


def get_algorithm(name: str) -> Algorithm:
    """
    Resolve an algorithm name (case-insensitive) to an Algorithm.

    The constructor is exercised once so that algorithms missing from the
    local build are rejected here rather than on the first file.

    Raises:
        UnsupportedAlgorithm: unknown name, or not provided by this Python
    """
    key = (name or "").strip().lower()
    try:
        factory, xof_length = _CATALOG[key]
    except KeyError:
        raise UnsupportedAlgorithm(name) from None

    try:
        factory()
    except ValueError as e:
        raise UnsupportedAlgorithm(name, "hash algorithm not available in this Python build") from e

    return Algorithm(key, factory, xof_length)


def select(name: str) -> Accumulator:
    """Get a fresh accumulator for ``name``."""
    return get_algorithm(name).new()


def is_available(name: str) -> bool:
    try:
        get_algorithm(name)
    except UnsupportedAlgorithm:
        return False
    return True
