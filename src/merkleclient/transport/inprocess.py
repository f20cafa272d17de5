from __future__ import annotations

from typing import Dict, Iterable, List, Optional, Protocol, runtime_checkable

from merkleclient.protocol import codec
from merkleclient.protocol.errors import AuthorityConnectionError
from merkleclient.protocol.models import AuthorityEndpoint
from merkleclient.protocol.validators import CLOSE_SENTINEL

from .base import StreamTransport


@runtime_checkable
class ProofAuthority(Protocol):
    """Answers one identifier with the raw reply bytes (header + payload)."""

    def handle(self, identifier: str) -> bytes:  # pragma: no cover - interface
        ...


class StaticProofAuthority:
    """
    Authority backed by a fixed identifier → proof table.

    Unknown identifiers get an empty proof, which only verifies when the
    identifier itself equals the root.
    """

    def __init__(self, proofs: Dict[str, Iterable[str]], width: int):
        self._proofs = {k: list(v) for k, v in proofs.items()}
        self._width = width

    def handle(self, identifier: str) -> bytes:
        return codec.encode_response(self._proofs.get(identifier, []), self._width)


class InProcessTransport(StreamTransport):
    """
    Loopback transport that hands each request to an in-process authority.

    Replies are queued as bytes and served back through the normal
    recv_exact path; max_read caps each underlying read to exercise
    short-read handling.
    """

    def __init__(
        self,
        authority: ProofAuthority,
        *,
        endpoint: Optional[AuthorityEndpoint] = None,
        max_read: Optional[int] = None,
        refuse: bool = False,
    ) -> None:
        super().__init__(endpoint or AuthorityEndpoint("in-process", 1))
        self._authority = authority
        self._max_read = max_read
        self._refuse = refuse
        self._inbox = bytearray()
        self.requests: List[str] = []
        self.sentinel_received = False
        self.open_count = 0
        self.close_count = 0

    def _connect(self) -> None:
        if self._refuse:
            raise AuthorityConnectionError(f"Connection refused by {self._endpoint}")
        self.open_count += 1

    def _send_some(self, data: memoryview) -> int:
        message = bytes(data).decode(codec.TEXT_ENCODING)
        if message == CLOSE_SENTINEL:
            self.sentinel_received = True
        else:
            self.requests.append(message)
            self._inbox += self._authority.handle(message)
        return len(data)

    def _recv_some(self, max_bytes: int) -> bytes:
        size = max_bytes if self._max_read is None else min(max_bytes, self._max_read)
        chunk = bytes(self._inbox[:size])
        del self._inbox[:size]
        return chunk

    def _disconnect(self) -> None:
        self.close_count += 1
        self._inbox.clear()
