"""
Data model for Merkle validity sessions.

Models:
- AuthorityEndpoint: where the proof authority listens
- BatchRequest: immutable endpoint + root + ordered identifiers
- VerificationResult: outcome for a single identifier
- BatchOutcome: aggregated, order-preserving classification of a batch
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from .enums import BatchStatus
from .validators import validate_endpoint, validate_identifier, validate_root


# A proof is the ordered list of sibling digests, leaf to root.
Proof = List[str]


@dataclass(frozen=True)
class AuthorityEndpoint:
    host: str
    port: int

    @property
    def address(self) -> Tuple[str, int]:
        return (self.host, self.port)

    def __str__(self) -> str:
        return f"{self.host}:{self.port}"

    def to_dict(self) -> Dict[str, Any]:
        return {"host": self.host, "port": self.port}


@dataclass(frozen=True)
class BatchRequest:
    """
    Frozen request for one session.

    Attributes:
        endpoint: Authority to ask for proofs
        merkle_root: Root digest known before the session starts
        identifiers: Transaction identifiers, verified in this order

    Raises:
        ValidationError: On construction, for a bad endpoint, an empty root,
            or an empty or sentinel identifier
    """
    endpoint: AuthorityEndpoint
    merkle_root: str
    identifiers: Tuple[str, ...]

    def __post_init__(self) -> None:
        validate_endpoint(self.endpoint.host, self.endpoint.port)
        validate_root(self.merkle_root)
        identifiers = tuple(self.identifiers)
        for identifier in identifiers:
            validate_identifier(identifier)
        object.__setattr__(self, "identifiers", identifiers)

    def __len__(self) -> int:
        return len(self.identifiers)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "endpoint": self.endpoint.to_dict(),
            "merkleRoot": self.merkle_root,
            "identifiers": list(self.identifiers),
        }


@dataclass(frozen=True)
class VerificationResult:
    identifier: str
    valid: bool
    computed_root: str
    proof_length: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            "identifier": self.identifier,
            "valid": self.valid,
            "computedRoot": self.computed_root,
            "proofLength": self.proof_length,
        }


@dataclass
class BatchOutcome:
    """
    Result of running a BatchRequest.

    status distinguishes a completed batch from one that never reached the
    authority (NOT_ATTEMPTED) and one cut short by a stream failure (ABORTED),
    so an empty valid/invalid pair is never ambiguous.
    """
    status: BatchStatus
    valid: List[str] = field(default_factory=list)
    invalid: List[str] = field(default_factory=list)
    results: List[VerificationResult] = field(default_factory=list)
    error: Optional[str] = None

    @property
    def processed(self) -> int:
        return len(self.results)

    @property
    def all_valid(self) -> bool:
        return self.status == BatchStatus.COMPLETED and not self.invalid

    def record(self, result: VerificationResult) -> None:
        self.results.append(result)
        if result.valid:
            self.valid.append(result.identifier)
        else:
            self.invalid.append(result.identifier)

    def to_mapping(self) -> Dict[bool, List[str]]:
        """The {True: valid, False: invalid} view of the batch."""
        return {True: list(self.valid), False: list(self.invalid)}

    def to_dict(self) -> Dict[str, Any]:
        return {
            "status": self.status.value,
            "valid": list(self.valid),
            "invalid": list(self.invalid),
            "processed": self.processed,
            "results": [r.to_dict() for r in self.results],
            "error": self.error,
        }
