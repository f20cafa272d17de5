from .base import StreamTransport
from .inprocess import InProcessTransport, ProofAuthority, StaticProofAuthority
from .tcp import SocketTransport

__all__ = [
    "StreamTransport",
    "SocketTransport",
    "InProcessTransport",
    "ProofAuthority",
    "StaticProofAuthority",
]
