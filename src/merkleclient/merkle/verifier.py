"""
Merkle inclusion proof verification.

The authority's proofs are plain hash chains: starting from the transaction
identifier, each sibling digest is appended to the running value and the
result is hashed again. After the last node the running value must equal the
known root.

    acc = identifier
    for node in proof:
        acc = hash(acc + node)
    valid = (acc == root)

Concatenation is not commutative, so node order matters.
"""

from __future__ import annotations

from typing import Iterable, Optional

from merkleclient.protocol.models import VerificationResult

from .hashing import HashFunction, digest_width, md5_hex


# ===========================================================================
# Verification Functions
# ===========================================================================


def compute_root(identifier: str, proof: Iterable[str], hash_fn: HashFunction) -> str:
    """
    Fold the proof into a candidate root.

    An empty proof leaves the identifier itself as the candidate.
    """
    acc = identifier
    for node in proof:
        acc = hash_fn(acc + node)
    return acc


def verify_proof(
    identifier: str,
    proof: Iterable[str],
    known_root: str,
    hash_fn: HashFunction,
) -> bool:
    """
    Check an inclusion proof against a known root.

    Args:
        identifier: Leaf value being proven
        proof: Sibling digests, leaf to root
        known_root: Root digest known before the session
        hash_fn: Hash capability shared with the authority

    Returns:
        True if the recomputed root equals known_root
    """
    return compute_root(identifier, proof, hash_fn) == known_root


# ===========================================================================
# Proof Verifier
# ===========================================================================


class ProofVerifier:
    """
    Verifier bound to one hash capability.

    The digest width of the hash is the chunk width the codec must use.
    """

    def __init__(self, hash_fn: Optional[HashFunction] = None):
        self._hash_fn = hash_fn or md5_hex
        self._width = digest_width(self._hash_fn)

    @property
    def hash_fn(self) -> HashFunction:
        return self._hash_fn

    @property
    def digest_width(self) -> int:
        return self._width

    def compute_root(self, identifier: str, proof: Iterable[str]) -> str:
        return compute_root(identifier, proof, self._hash_fn)

    def verify(self, identifier: str, proof: Iterable[str], known_root: str) -> bool:
        return verify_proof(identifier, proof, known_root, self._hash_fn)

    def check(self, identifier: str, proof: list, known_root: str) -> VerificationResult:
        """Verify and keep the recomputed root for reporting."""
        computed = self.compute_root(identifier, proof)
        return VerificationResult(
            identifier=identifier,
            valid=computed == known_root,
            computed_root=computed,
            proof_length=len(proof),
        )
