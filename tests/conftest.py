"""
Shared fixtures for merkleclient tests.
"""

import socket
import threading
from typing import Dict, List, Optional

import pytest

from merkleclient.core.settings import SessionSettings, get_settings
from merkleclient.merkle.hashing import md5_hex
from merkleclient.merkle.verifier import compute_root
from merkleclient.protocol.codec import encode_response
from merkleclient.protocol.models import AuthorityEndpoint


# ===========================================================================
# Proof chains
# ===========================================================================


@pytest.fixture
def chain_factory():
    """
    Build (proof, root) for an identifier from n md5 sibling digests.

    Siblings are derived from the identifier and a salt so different
    identifiers get different proofs.
    """

    def make(identifier: str, n: int = 3, salt: str = "node") -> tuple:
        proof = [md5_hex(f"{salt}:{identifier}:{i}") for i in range(n)]
        return proof, compute_root(identifier, proof, md5_hex)

    return make


@pytest.fixture
def session_settings():
    """Session settings isolated from the environment."""
    return SessionSettings(
        hash_algorithm="md5",
        connect_timeout=5.0,
        read_timeout=5.0,
    )


@pytest.fixture(autouse=True)
def _clear_settings_cache():
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


# ===========================================================================
# Threaded TCP authority
# ===========================================================================


class ThreadedAuthority:
    """
    Minimal single-connection authority on 127.0.0.1.

    Answers each request with the proof from its table (empty proof for
    unknown identifiers) until it reads the close sentinel or EOF.
    """

    def __init__(self, proofs: Dict[str, List[str]], width: int = 32, fragment: Optional[int] = None):
        self._proofs = proofs
        self._width = width
        self._fragment = fragment
        self._server = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
        self._server.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
        self._server.bind(("127.0.0.1", 0))
        self._server.listen(1)
        self._server.settimeout(5.0)
        self.endpoint = AuthorityEndpoint("127.0.0.1", self._server.getsockname()[1])
        self.received: List[str] = []
        self._thread = threading.Thread(target=self._serve, daemon=True)

    def start(self) -> "ThreadedAuthority":
        self._thread.start()
        return self

    def _serve(self) -> None:
        try:
            conn, _ = self._server.accept()
        except OSError:
            return
        with conn:
            conn.settimeout(5.0)
            while True:
                data = conn.recv(4096)
                if not data:
                    break
                message = data.decode("utf-8")
                self.received.append(message)
                if message == "close":
                    break
                reply = encode_response(self._proofs.get(message, []), self._width)
                if self._fragment:
                    for i in range(0, len(reply), self._fragment):
                        conn.sendall(reply[i:i + self._fragment])
                else:
                    conn.sendall(reply)

    def stop(self) -> None:
        self._thread.join(timeout=5.0)
        self._server.close()


@pytest.fixture
def tcp_authority():
    """Factory for started ThreadedAuthority instances, stopped at teardown."""
    started: List[ThreadedAuthority] = []

    def make(proofs: Dict[str, List[str]], **kwargs) -> ThreadedAuthority:
        authority = ThreadedAuthority(proofs, **kwargs).start()
        started.append(authority)
        return authority

    yield make

    for authority in started:
        authority.stop()


@pytest.fixture
def refused_endpoint():
    """An endpoint on localhost with nothing listening."""
    s = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    s.bind(("127.0.0.1", 0))
    port = s.getsockname()[1]
    s.close()
    return AuthorityEndpoint("127.0.0.1", port)
