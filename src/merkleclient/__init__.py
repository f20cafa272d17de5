from .core.builder import BatchRequestBuilder
from .core.session import MerkleValidityClient
from .core.hooks import LoggingSessionObserver, InMemorySessionRecorder, SessionObserver
from .merkle.hashing import get_hash_function, md5_hex
from .merkle.verifier import ProofVerifier, compute_root, verify_proof
from .protocol import (
    AuthorityEndpoint,
    BatchAbortedError,
    BatchOutcome,
    BatchRequest,
    BatchStatus,
    VerificationResult,
)

__version__ = "1.0.0"

__all__ = [
    "BatchRequestBuilder",
    "MerkleValidityClient",
    "LoggingSessionObserver",
    "InMemorySessionRecorder",
    "SessionObserver",
    "get_hash_function",
    "md5_hex",
    "ProofVerifier",
    "compute_root",
    "verify_proof",
    "AuthorityEndpoint",
    "BatchAbortedError",
    "BatchOutcome",
    "BatchRequest",
    "BatchStatus",
    "VerificationResult",
]
