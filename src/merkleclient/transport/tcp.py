"""
TCP transport for Merkle validity sessions.

- One blocking stream socket per session
- Optional connect/read timeouts (None blocks forever)
"""

from __future__ import annotations

import logging
import socket
from typing import Optional

from merkleclient.protocol.errors import AuthorityConnectionError
from merkleclient.protocol.models import AuthorityEndpoint

from .base import StreamTransport

logger = logging.getLogger("merkleclient.transport")

RECV_CHUNK_SIZE = 64 * 1024


class SocketTransport(StreamTransport):
    """
    Blocking TCP stream transport.

    Usage:
        with SocketTransport(AuthorityEndpoint("127.0.0.1", 9000)) as t:
            t.send(b"tx1")
            header = t.recv_exact(4)
    """

    def __init__(
        self,
        endpoint: AuthorityEndpoint,
        *,
        connect_timeout: Optional[float] = None,
        read_timeout: Optional[float] = None,
    ) -> None:
        super().__init__(endpoint)
        self._connect_timeout = connect_timeout
        self._read_timeout = read_timeout
        self._sock: Optional[socket.socket] = None

    def _connect(self) -> None:
        try:
            sock = socket.create_connection(
                self._endpoint.address, timeout=self._connect_timeout
            )
        except OSError as exc:
            raise AuthorityConnectionError(
                f"Cannot connect to authority at {self._endpoint}: {exc}"
            ) from exc

        sock.settimeout(self._read_timeout)
        self._sock = sock
        logger.debug("Connected to authority at %s", self._endpoint)

    def _send_some(self, data: memoryview) -> int:
        return self._sock.send(data)

    def _recv_some(self, max_bytes: int) -> bytes:
        return self._sock.recv(min(max_bytes, RECV_CHUNK_SIZE))

    def _disconnect(self) -> None:
        sock, self._sock = self._sock, None
        if sock is None:
            return
        try:
            sock.shutdown(socket.SHUT_RDWR)
        except OSError:
            # peer already gone
            pass
        sock.close()
        logger.debug("Closed connection to %s", self._endpoint)
