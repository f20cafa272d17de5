from .enums import BatchStatus, ErrorCode, SessionState
from .errors import (
    AuthorityConnectionError,
    BatchAbortedError,
    IncompleteReadError,
    MerkleClientError,
    ProtocolError,
    SessionStateError,
    TransportError,
    ValidationError,
)
from .models import (
    AuthorityEndpoint,
    BatchOutcome,
    BatchRequest,
    Proof,
    VerificationResult,
)

__all__ = [
    "BatchStatus",
    "ErrorCode",
    "SessionState",
    "MerkleClientError",
    "ValidationError",
    "AuthorityConnectionError",
    "TransportError",
    "ProtocolError",
    "IncompleteReadError",
    "SessionStateError",
    "BatchAbortedError",
    "AuthorityEndpoint",
    "BatchRequest",
    "BatchOutcome",
    "Proof",
    "VerificationResult",
]
