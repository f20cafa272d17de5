"""
Merkle proof verification primitives.

- Hash capabilities (md5/sha1/sha256 hex) and digest width discovery
- Hash-chain root recomputation
- Value-equality root comparison
"""

from merkleclient.merkle.hashing import (
    DEFAULT_HASH_ALGORITHM,
    HashFunction,
    available_algorithms,
    digest_width,
    get_hash_function,
    md5_hex,
    sha1_hex,
    sha256_hex,
)

from merkleclient.merkle.verifier import (
    ProofVerifier,
    compute_root,
    verify_proof,
)

__all__ = [
    # Hashing
    "DEFAULT_HASH_ALGORITHM",
    "HashFunction",
    "available_algorithms",
    "digest_width",
    "get_hash_function",
    "md5_hex",
    "sha1_hex",
    "sha256_hex",
    # Verification
    "ProofVerifier",
    "compute_root",
    "verify_proof",
]
