from __future__ import annotations

"""
Base transport interface for Merkle validity sessions.

This defines the transport boundary:

    identifier bytes  → [StreamTransport] → authority
    authority reply   → [StreamTransport] → exact-length byte strings

Transports DO NOT:
  - frame or parse messages
  - verify proofs
  - decide when a session ends

Transports ONLY:
  - open one connection-oriented byte stream
  - write every byte they are given
  - read exactly the number of bytes asked for
  - close the stream

Everything else is handled by:
  - protocol.codec (framing)
  - merkle.verifier (proof checks)
  - core.session (turn-taking, sentinel, aggregation)
"""

from abc import ABC, abstractmethod
from typing import Optional

from merkleclient.protocol.errors import IncompleteReadError, TransportError
from merkleclient.protocol.models import AuthorityEndpoint


class StreamTransport(ABC):
    """
    Abstract base class for all transports.

    Subclasses provide the partial I/O primitives (_send_some, _recv_some),
    which may move fewer bytes than requested. The public send/recv_exact
    loop over them, so callers never observe a short read or write.

    Implicit contract:
        open()          → AuthorityConnectionError if unreachable
        send(data)      → all of data written, or TransportError
        recv_exact(n)   → exactly n bytes, IncompleteReadError on EOF,
                          TransportError on stream failure
        close()         → idempotent
    """

    def __init__(self, endpoint: Optional[AuthorityEndpoint] = None) -> None:
        self._endpoint = endpoint
        self._open = False

    @property
    def endpoint(self) -> Optional[AuthorityEndpoint]:
        return self._endpoint

    @property
    def is_open(self) -> bool:
        return self._open

    # ----------------------------------------------------------------------
    # PRIMITIVES (subclasses)
    # ----------------------------------------------------------------------
    @abstractmethod
    def _connect(self) -> None:
        """Establish the stream. Raise AuthorityConnectionError on failure."""
        raise NotImplementedError

    @abstractmethod
    def _send_some(self, data: memoryview) -> int:
        """Write a prefix of data and return how many bytes were written."""
        raise NotImplementedError

    @abstractmethod
    def _recv_some(self, max_bytes: int) -> bytes:
        """Read up to max_bytes. An empty result means end of stream."""
        raise NotImplementedError

    @abstractmethod
    def _disconnect(self) -> None:
        raise NotImplementedError

    # ----------------------------------------------------------------------
    # PUBLIC API
    # ----------------------------------------------------------------------
    def open(self) -> None:
        if self._open:
            return
        self._connect()
        self._open = True

    def send(self, data: bytes) -> None:
        self._ensure_open()
        view = memoryview(data)
        try:
            while view:
                written = self._send_some(view)
                if written <= 0:
                    raise TransportError("Stream accepted no bytes")
                view = view[written:]
        except OSError as exc:
            raise TransportError(f"Send to {self._endpoint} failed: {exc}") from exc

    def recv_exact(self, n: int) -> bytes:
        if n < 0:
            raise ValueError(f"Cannot receive a negative byte count: {n}")
        self._ensure_open()

        buf = bytearray()
        try:
            while len(buf) < n:
                chunk = self._recv_some(n - len(buf))
                if not chunk:
                    raise IncompleteReadError(bytes(buf), n)
                buf += chunk
        except OSError as exc:
            raise TransportError(f"Receive from {self._endpoint} failed: {exc}") from exc
        return bytes(buf)

    def close(self) -> None:
        if not self._open:
            return
        try:
            self._disconnect()
        finally:
            self._open = False

    def __enter__(self) -> "StreamTransport":
        self.open()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def _ensure_open(self) -> None:
        if not self._open:
            raise TransportError(f"{self.__class__.__name__} is not open")
