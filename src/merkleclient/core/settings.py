"""
Central configuration for merkleclient.

This module provides a single, typed configuration object that reads from
environment variables (12-factor style) using pydantic-settings.

Usage:

    from merkleclient.core.settings import get_settings

    settings = get_settings()
    client = MerkleValidityClient(settings=settings.session)
"""

from __future__ import annotations

from functools import lru_cache
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from merkleclient.merkle.hashing import DEFAULT_HASH_ALGORITHM, available_algorithms
from merkleclient.protocol.codec import DEFAULT_MAX_PAYLOAD_BYTES

_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class AuthoritySettings(BaseSettings):
    """
    Where the proof authority lives and which root it is checked against.
    """

    model_config = SettingsConfigDict(env_prefix="MERKLECLIENT_AUTHORITY_")

    host: str = Field(
        default="127.0.0.1",
        description="Authority host name or IP address.",
    )
    port: int = Field(
        default=2323,
        description="Authority TCP port.",
    )
    root: Optional[str] = Field(
        default=None,
        description="Known Merkle root digest, if not given on the command line.",
    )

    @field_validator("port")
    @classmethod
    def _validate_port(cls, v: int) -> int:
        if not 0 < v < 65536:
            raise ValueError(f"MERKLECLIENT_AUTHORITY_PORT out of range: {v}")
        return v


class SessionSettings(BaseSettings):
    """
    Per-session behaviour: hash capability, timeouts, limits, logging.
    """

    model_config = SettingsConfigDict(env_prefix="MERKLECLIENT_")

    hash_algorithm: str = Field(
        default=DEFAULT_HASH_ALGORITHM,
        description="Hash shared with the authority: 'md5', 'sha1' or 'sha256'.",
    )
    connect_timeout: Optional[float] = Field(
        default=None,
        description="Seconds to wait for the TCP connect; unset blocks forever.",
    )
    read_timeout: Optional[float] = Field(
        default=None,
        description="Seconds to wait on each socket read/write; unset blocks forever.",
    )
    max_payload_bytes: int = Field(
        default=DEFAULT_MAX_PAYLOAD_BYTES,
        description="Largest proof payload accepted from the authority.",
    )
    log_level: str = Field(
        default="INFO",
        description="Root log level (DEBUG/INFO/WARNING/ERROR).",
    )

    @field_validator("hash_algorithm")
    @classmethod
    def _normalize_hash_algorithm(cls, v: str) -> str:
        v = (v or DEFAULT_HASH_ALGORITHM).strip().lower()
        if v not in available_algorithms():
            raise ValueError(
                f"Unknown hash algorithm {v!r}; expected one of {available_algorithms()}"
            )
        return v

    @field_validator("connect_timeout", "read_timeout")
    @classmethod
    def _validate_timeout(cls, v: Optional[float]) -> Optional[float]:
        if v is not None and v <= 0:
            raise ValueError("Timeouts must be positive seconds")
        return v

    @field_validator("max_payload_bytes")
    @classmethod
    def _validate_max_payload(cls, v: int) -> int:
        if v <= 0:
            raise ValueError("MERKLECLIENT_MAX_PAYLOAD_BYTES must be positive")
        return v

    @field_validator("log_level")
    @classmethod
    def _normalize_log_level(cls, v: str) -> str:
        v = (v or "INFO").strip().upper()
        if v == "WARN":
            v = "WARNING"
        if v not in _LOG_LEVELS:
            return "INFO"
        return v


class MerkleClientSettings(BaseSettings):
    """
    Root configuration object.

    Aggregates:
      - Authority
      - Session
    """

    model_config = SettingsConfigDict(env_prefix="MERKLECLIENT_")

    authority: AuthoritySettings = Field(default_factory=AuthoritySettings)
    session: SessionSettings = Field(default_factory=SessionSettings)


@lru_cache(maxsize=1)
def get_settings() -> MerkleClientSettings:
    """
    Cached accessor for MerkleClientSettings.

    Call get_settings.cache_clear() after changing the environment.
    """
    return MerkleClientSettings()
