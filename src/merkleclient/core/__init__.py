from .builder import BatchRequestBuilder
from .hooks import (
    InMemorySessionRecorder,
    LoggingSessionObserver,
    SessionEvent,
    SessionObserver,
)
from .session import MerkleValidityClient, TransportFactory
from .settings import (
    AuthoritySettings,
    MerkleClientSettings,
    SessionSettings,
    get_settings,
)

__all__ = [
    "BatchRequestBuilder",
    "MerkleValidityClient",
    "TransportFactory",
    "SessionObserver",
    "LoggingSessionObserver",
    "InMemorySessionRecorder",
    "SessionEvent",
    "AuthoritySettings",
    "SessionSettings",
    "MerkleClientSettings",
    "get_settings",
]
