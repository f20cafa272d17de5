from __future__ import annotations

from typing import Iterable, List, Optional

from merkleclient.protocol.models import AuthorityEndpoint, BatchRequest
from merkleclient.protocol.validators import (
    validate_endpoint,
    validate_identifier,
    validate_root,
)


class BatchRequestBuilder:
    """
    Accumulates transaction identifiers, then freezes them into a BatchRequest.

    Endpoint and root are validated when the builder is created, identifiers
    when they are added, so build() itself cannot fail.

    Example:
        request = (
            BatchRequestBuilder("127.0.0.1", 2323, root)
            .add_identifier("tx1")
            .add_identifier("tx2")
            .build()
        )
    """

    def __init__(
        self,
        host: str,
        port: int,
        merkle_root: str,
        *,
        digest_width: Optional[int] = None,
    ) -> None:
        validate_endpoint(host, port)
        validate_root(merkle_root, digest_width)
        self._endpoint = AuthorityEndpoint(host=host, port=port)
        self._root = merkle_root
        self._identifiers: List[str] = []

    def add_identifier(self, identifier: str) -> "BatchRequestBuilder":
        validate_identifier(identifier)
        self._identifiers.append(identifier)
        return self

    def add_identifiers(self, identifiers: Iterable[str]) -> "BatchRequestBuilder":
        for identifier in identifiers:
            self.add_identifier(identifier)
        return self

    def build(self) -> BatchRequest:
        return BatchRequest(
            endpoint=self._endpoint,
            merkle_root=self._root,
            identifiers=tuple(self._identifiers),
        )
