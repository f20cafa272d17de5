from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Protocol, runtime_checkable

from merkleclient.protocol.errors import MerkleClientError
from merkleclient.protocol.models import (
    AuthorityEndpoint,
    BatchOutcome,
    VerificationResult,
)


@runtime_checkable
class SessionObserver(Protocol):
    """
    Pluggable observer for MerkleValidityClient sessions.

    Lifecycle:
      - on_connected(endpoint) | on_connection_refused(endpoint, error)
      - per identifier:
          on_request_sent(identifier)
          on_response_header(identifier, payload_length)
          on_verified(result)
      - on_error(error)              (mid-batch failure)
      - on_session_closed(outcome)
    """

    def on_connected(self, endpoint: AuthorityEndpoint) -> None:  # pragma: no cover - interface
        ...

    def on_connection_refused(self, endpoint: AuthorityEndpoint, error: MerkleClientError) -> None:  # pragma: no cover - interface
        ...

    def on_request_sent(self, identifier: str) -> None:  # pragma: no cover - interface
        ...

    def on_response_header(self, identifier: str, payload_length: int) -> None:  # pragma: no cover - interface
        ...

    def on_verified(self, result: VerificationResult) -> None:  # pragma: no cover - interface
        ...

    def on_error(self, error: MerkleClientError) -> None:  # pragma: no cover - interface
        ...

    def on_session_closed(self, outcome: BatchOutcome) -> None:  # pragma: no cover - interface
        ...


class LoggingSessionObserver:
    """
    Logs every session event.
    """

    def __init__(self, logger: Optional[logging.Logger] = None) -> None:
        self._log = logger or logging.getLogger("merkleclient.session")

    def on_connected(self, endpoint: AuthorityEndpoint) -> None:
        self._log.debug("Connected to authority %s", endpoint)

    def on_connection_refused(self, endpoint: AuthorityEndpoint, error: MerkleClientError) -> None:
        self._log.warning(
            "Connection to authority %s refused, no transactions processed (%s)",
            endpoint,
            error,
        )

    def on_request_sent(self, identifier: str) -> None:
        self._log.info("Sending: %s", identifier)

    def on_response_header(self, identifier: str, payload_length: int) -> None:
        self._log.debug("Buffer size received for %s: %d", identifier, payload_length)

    def on_verified(self, result: VerificationResult) -> None:
        self._log.info(
            "Transaction %s is %s (%d proof nodes)",
            result.identifier,
            "VALID" if result.valid else "INVALID",
            result.proof_length,
        )

    def on_error(self, error: MerkleClientError) -> None:
        self._log.error("Session failed (code=%s): %s", error.code.value, error)

    def on_session_closed(self, outcome: BatchOutcome) -> None:
        self._log.info(
            "Session %s: %d valid, %d invalid",
            outcome.status.value,
            len(outcome.valid),
            len(outcome.invalid),
        )


# ----------------------------------------------------------------------
# IN-MEMORY RECORDER
# ----------------------------------------------------------------------
@dataclass
class SessionEvent:
    name: str
    timestamp: float = field(default_factory=time.time)
    attributes: Dict[str, Any] = field(default_factory=dict)


class InMemorySessionRecorder:
    """
    Stores session events in order, for tests and inspection.
    """

    def __init__(self) -> None:
        self._events: List[SessionEvent] = []

    def _record(self, name: str, **attributes: Any) -> None:
        self._events.append(SessionEvent(name=name, attributes=attributes))

    def on_connected(self, endpoint: AuthorityEndpoint) -> None:
        self._record("connected", endpoint=str(endpoint))

    def on_connection_refused(self, endpoint: AuthorityEndpoint, error: MerkleClientError) -> None:
        self._record("connection_refused", endpoint=str(endpoint), error=str(error))

    def on_request_sent(self, identifier: str) -> None:
        self._record("request_sent", identifier=identifier)

    def on_response_header(self, identifier: str, payload_length: int) -> None:
        self._record("response_header", identifier=identifier, payload_length=payload_length)

    def on_verified(self, result: VerificationResult) -> None:
        self._record("verified", identifier=result.identifier, valid=result.valid)

    def on_error(self, error: MerkleClientError) -> None:
        self._record("error", code=error.code.value, error=str(error))

    def on_session_closed(self, outcome: BatchOutcome) -> None:
        self._record("session_closed", status=outcome.status.value)

    @property
    def events(self) -> List[SessionEvent]:
        return list(self._events)

    def names(self) -> List[str]:
        return [e.name for e in self._events]

    def clear(self) -> None:
        self._events.clear()
