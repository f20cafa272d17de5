from enum import Enum


class ErrorCode(str, Enum):
    VALIDATION_ERROR = "validation_error"
    CONNECTION_ERROR = "connection_error"
    TRANSPORT_ERROR = "transport_error"
    PROTOCOL_ERROR = "protocol_error"
    SESSION_STATE_ERROR = "session_state_error"
    BATCH_ABORTED = "batch_aborted"
    INTERNAL_ERROR = "internal_error"


class BatchStatus(str, Enum):
    COMPLETED = "completed"
    NOT_ATTEMPTED = "not_attempted"  # authority unreachable, nothing was sent
    ABORTED = "aborted"


class SessionState(str, Enum):
    IDLE = "idle"
    CONNECTED = "connected"
    REQUESTING = "requesting"
    AWAITING_HEADER = "awaiting_header"
    AWAITING_PAYLOAD = "awaiting_payload"
    VERIFIED = "verified"
    CLOSING = "closing"
    CLOSED = "closed"
    FAILED = "failed"
