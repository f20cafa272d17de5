"""
Hash capabilities for proof verification.

A hash capability is any callable ``hash_fn(text) -> digest`` whose digest is
a fixed-width text string. The width of that string is the chunk width of
the wire protocol, so the authority and the client must agree on it.

Built-in capabilities return lowercase hex digests:

    md5     32 chars (the authority's default)
    sha1    40 chars
    sha256  64 chars
"""

from __future__ import annotations

import hashlib
from typing import Callable, Dict

HashFunction = Callable[[str], str]

DEFAULT_HASH_ALGORITHM = "md5"


def _hex_digest(algorithm: str) -> HashFunction:
    def hash_fn(text: str) -> str:
        hasher = hashlib.new(algorithm)
        hasher.update(text.encode("utf-8"))
        return hasher.hexdigest()

    hash_fn.__name__ = f"{algorithm}_hex"
    return hash_fn


md5_hex = _hex_digest("md5")
sha1_hex = _hex_digest("sha1")
sha256_hex = _hex_digest("sha256")

_REGISTRY: Dict[str, HashFunction] = {
    "md5": md5_hex,
    "sha1": sha1_hex,
    "sha256": sha256_hex,
}


def available_algorithms() -> list:
    return sorted(_REGISTRY)


def get_hash_function(name: str) -> HashFunction:
    """
    Look up a built-in hash capability by name.

    Raises:
        ValueError: If the algorithm is unknown
    """
    key = (name or "").strip().lower()
    try:
        return _REGISTRY[key]
    except KeyError:
        raise ValueError(
            f"Unknown hash algorithm {name!r}; expected one of {available_algorithms()}"
        ) from None


def digest_width(hash_fn: HashFunction) -> int:
    """Width in bytes of the digests produced by hash_fn."""
    return len(hash_fn("").encode("utf-8"))
