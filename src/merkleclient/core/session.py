# merkleclient/core/session.py

from __future__ import annotations

import logging
from typing import Callable, Dict, Iterable, List, Optional

from merkleclient.merkle.hashing import HashFunction, get_hash_function
from merkleclient.merkle.verifier import ProofVerifier
from merkleclient.protocol import codec
from merkleclient.protocol.enums import BatchStatus, SessionState
from merkleclient.protocol.errors import (
    AuthorityConnectionError,
    BatchAbortedError,
    MerkleClientError,
    ProtocolError,
    SessionStateError,
    TransportError,
)
from merkleclient.protocol.models import (
    AuthorityEndpoint,
    BatchOutcome,
    BatchRequest,
    VerificationResult,
)
from merkleclient.protocol.validators import validate_root
from merkleclient.transport.base import StreamTransport
from merkleclient.transport.tcp import SocketTransport

from .hooks import LoggingSessionObserver, SessionObserver
from .settings import SessionSettings, get_settings

logger = logging.getLogger("merkleclient.session")

TransportFactory = Callable[[AuthorityEndpoint], StreamTransport]

_TRANSITIONS: Dict[SessionState, frozenset] = {
    SessionState.IDLE: frozenset({SessionState.CONNECTED, SessionState.FAILED}),
    SessionState.CONNECTED: frozenset(
        {SessionState.REQUESTING, SessionState.CLOSING, SessionState.FAILED}
    ),
    SessionState.REQUESTING: frozenset({SessionState.AWAITING_HEADER, SessionState.FAILED}),
    SessionState.AWAITING_HEADER: frozenset({SessionState.AWAITING_PAYLOAD, SessionState.FAILED}),
    SessionState.AWAITING_PAYLOAD: frozenset({SessionState.VERIFIED, SessionState.FAILED}),
    SessionState.VERIFIED: frozenset(
        {SessionState.REQUESTING, SessionState.CLOSING, SessionState.FAILED}
    ),
    SessionState.CLOSING: frozenset({SessionState.CLOSED, SessionState.FAILED}),
    SessionState.CLOSED: frozenset(),
    SessionState.FAILED: frozenset(),
}


class MerkleValidityClient:
    """
    Runs Merkle validity sessions against a proof authority.

    Responsibilities:
      - Open one transport per batch and always close it
      - Request, receive and verify proofs strictly in batch order
      - Send the "close" sentinel after the last identifier
      - Report a refused connection as NOT_ATTEMPTED instead of raising
      - Abort the batch on the first transport/protocol failure
      - Notify observers at each step
    """

    def __init__(
        self,
        *,
        hash_fn: Optional[HashFunction] = None,
        transport_factory: Optional[TransportFactory] = None,
        observers: Optional[Iterable[SessionObserver]] = None,
        settings: Optional[SessionSettings] = None,
    ) -> None:
        self._settings = settings or get_settings().session
        self._verifier = ProofVerifier(
            hash_fn or get_hash_function(self._settings.hash_algorithm)
        )
        self._transport_factory = transport_factory or self._socket_transport
        self._observers: List[SessionObserver] = (
            list(observers) if observers is not None else [LoggingSessionObserver()]
        )
        self._state = SessionState.IDLE
        self._log = logger

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def digest_width(self) -> int:
        return self._verifier.digest_width

    # ===========================================================
    # Public API
    # ===========================================================
    def run_batch(self, request: BatchRequest) -> BatchOutcome:
        """
        Verify every identifier of the request in one session.

        Returns:
            BatchOutcome with status COMPLETED, or NOT_ATTEMPTED when the
            authority could not be reached.

        Raises:
            ValidationError: If the root width does not match the hash width
            BatchAbortedError: On a transport or protocol failure mid-batch;
                the partial outcome is attached as ``.outcome``
        """
        validate_root(request.merkle_root, self._verifier.digest_width)

        self._state = SessionState.IDLE
        outcome = BatchOutcome(status=BatchStatus.COMPLETED)
        transport = self._transport_factory(request.endpoint)

        try:
            transport.open()
        except AuthorityConnectionError as exc:
            self._transition(SessionState.FAILED)
            outcome.status = BatchStatus.NOT_ATTEMPTED
            outcome.error = str(exc)
            self._notify("on_connection_refused", request.endpoint, exc)
            self._notify("on_session_closed", outcome)
            return outcome

        failure: Optional[MerkleClientError] = None
        try:
            self._transition(SessionState.CONNECTED)
            self._notify("on_connected", request.endpoint)

            for identifier in request.identifiers:
                result = self._exchange(transport, identifier, request.merkle_root)
                outcome.record(result)

            self._transition(SessionState.CLOSING)
            self._send_close(transport)
            self._transition(SessionState.CLOSED)

        except (TransportError, ProtocolError) as exc:
            self._transition(SessionState.FAILED)
            outcome.status = BatchStatus.ABORTED
            outcome.error = str(exc)
            failure = exc
            self._notify("on_error", exc)

        finally:
            transport.close()

        self._notify("on_session_closed", outcome)

        if failure is not None:
            raise BatchAbortedError(
                f"Batch aborted after {outcome.processed} of {len(request)} "
                f"transactions: {failure}",
                outcome,
            ) from failure

        return outcome

    def check_which_transactions_valid(self, request: BatchRequest) -> Dict[bool, List[str]]:
        """{True: valid identifiers, False: invalid identifiers}, in batch order."""
        return self.run_batch(request).to_mapping()

    # ===========================================================
    # Internal
    # ===========================================================
    def _exchange(
        self,
        transport: StreamTransport,
        identifier: str,
        known_root: str,
    ) -> VerificationResult:
        self._transition(SessionState.REQUESTING)
        transport.send(codec.encode_request(identifier))
        self._notify("on_request_sent", identifier)

        def header_received(length: int) -> None:
            self._notify("on_response_header", identifier, length)
            self._transition(SessionState.AWAITING_PAYLOAD)

        self._transition(SessionState.AWAITING_HEADER)
        _, proof = codec.read_proof(
            transport,
            self._verifier.digest_width,
            self._settings.max_payload_bytes,
            on_header=header_received,
        )

        result = self._verifier.check(identifier, proof, known_root)
        self._transition(SessionState.VERIFIED)
        self._notify("on_verified", result)
        return result

    def _send_close(self, transport: StreamTransport) -> None:
        # Every identifier is already classified; the authority never
        # acknowledges the sentinel, so a failed send does not change the outcome.
        try:
            transport.send(codec.encode_close())
        except TransportError as exc:
            self._log.warning("Could not send close sentinel: %s", exc)

    def _transition(self, target: SessionState) -> None:
        if target not in _TRANSITIONS[self._state]:
            raise SessionStateError(
                f"Illegal session transition {self._state.value} -> {target.value}"
            )
        self._log.debug("Session %s -> %s", self._state.value, target.value)
        self._state = target

    def _notify(self, hook: str, *args) -> None:
        for observer in self._observers:
            method = getattr(observer, hook, None)
            if method is None:
                continue
            try:
                method(*args)
            except Exception as ex:
                self._log.exception(
                    "Session observer %s.%s failed: %s",
                    type(observer).__name__,
                    hook,
                    ex,
                )

    def _socket_transport(self, endpoint: AuthorityEndpoint) -> StreamTransport:
        return SocketTransport(
            endpoint,
            connect_timeout=self._settings.connect_timeout,
            read_timeout=self._settings.read_timeout,
        )
