from typing import Optional

from .enums import ErrorCode


class MerkleClientError(Exception):
    def __init__(self, message: str, code: Optional[ErrorCode] = None):
        super().__init__(message)
        self.code = code or ErrorCode.INTERNAL_ERROR


class ValidationError(MerkleClientError):
    """Raised when a batch request or configuration value is malformed."""

    def __init__(self, message: str):
        super().__init__(message, ErrorCode.VALIDATION_ERROR)


class AuthorityConnectionError(MerkleClientError):
    """Raised when the authority cannot be reached at open time."""

    def __init__(self, message: str):
        super().__init__(message, ErrorCode.CONNECTION_ERROR)


class TransportError(MerkleClientError):
    """Raised when the stream fails mid-session (reset, broken pipe, timeout)."""

    def __init__(self, message: str):
        super().__init__(message, ErrorCode.TRANSPORT_ERROR)


class ProtocolError(MerkleClientError):
    """Raised when the authority's reply does not follow the wire format."""

    def __init__(self, message: str):
        super().__init__(message, ErrorCode.PROTOCOL_ERROR)


class IncompleteReadError(ProtocolError):
    """Raised when the stream ends before the expected number of bytes arrived."""

    def __init__(self, partial: bytes, expected: int):
        super().__init__(
            f"Stream closed after {len(partial)} of {expected} expected bytes"
        )
        self.partial = partial
        self.expected = expected


class SessionStateError(MerkleClientError):
    """Raised on an illegal session state transition."""

    def __init__(self, message: str):
        super().__init__(message, ErrorCode.SESSION_STATE_ERROR)


class BatchAbortedError(MerkleClientError):
    """
    Raised by run_batch when a transport or protocol failure ends the session
    early. The identifiers classified before the failure are kept on
    ``outcome``; the underlying error is chained as ``__cause__``.
    """

    def __init__(self, message: str, outcome):
        super().__init__(message, ErrorCode.BATCH_ABORTED)
        self.outcome = outcome
