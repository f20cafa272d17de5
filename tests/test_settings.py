"""
Tests for environment-driven settings.
"""

import pydantic
import pytest

from merkleclient.core.settings import (
    AuthoritySettings,
    MerkleClientSettings,
    SessionSettings,
    get_settings,
)
from merkleclient.protocol.codec import DEFAULT_MAX_PAYLOAD_BYTES


@pytest.fixture
def clean_env(monkeypatch):
    for name in (
        "MERKLECLIENT_AUTHORITY_HOST",
        "MERKLECLIENT_AUTHORITY_PORT",
        "MERKLECLIENT_AUTHORITY_ROOT",
        "MERKLECLIENT_HASH_ALGORITHM",
        "MERKLECLIENT_CONNECT_TIMEOUT",
        "MERKLECLIENT_READ_TIMEOUT",
        "MERKLECLIENT_MAX_PAYLOAD_BYTES",
        "MERKLECLIENT_LOG_LEVEL",
    ):
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


class TestDefaults:
    def test_defaults(self, clean_env):
        settings = MerkleClientSettings()

        assert settings.authority.host == "127.0.0.1"
        assert settings.authority.port == 2323
        assert settings.authority.root is None
        assert settings.session.hash_algorithm == "md5"
        assert settings.session.connect_timeout is None
        assert settings.session.read_timeout is None
        assert settings.session.max_payload_bytes == DEFAULT_MAX_PAYLOAD_BYTES
        assert settings.session.log_level == "INFO"


class TestEnvironment:
    def test_authority_from_env(self, clean_env):
        clean_env.setenv("MERKLECLIENT_AUTHORITY_HOST", "authority.internal")
        clean_env.setenv("MERKLECLIENT_AUTHORITY_PORT", "9000")
        clean_env.setenv("MERKLECLIENT_AUTHORITY_ROOT", "abc")

        settings = AuthoritySettings()

        assert settings.host == "authority.internal"
        assert settings.port == 9000
        assert settings.root == "abc"

    def test_session_from_env(self, clean_env):
        clean_env.setenv("MERKLECLIENT_HASH_ALGORITHM", "SHA256")
        clean_env.setenv("MERKLECLIENT_READ_TIMEOUT", "2.5")
        clean_env.setenv("MERKLECLIENT_LOG_LEVEL", "warn")

        settings = SessionSettings()

        assert settings.hash_algorithm == "sha256"
        assert settings.read_timeout == 2.5
        assert settings.log_level == "WARNING"

    def test_get_settings_is_cached(self, clean_env):
        first = get_settings()
        clean_env.setenv("MERKLECLIENT_AUTHORITY_PORT", "9100")

        assert get_settings() is first

        get_settings.cache_clear()
        assert get_settings().authority.port == 9100


class TestValidation:
    def test_unknown_hash_rejected(self, clean_env):
        with pytest.raises(pydantic.ValidationError):
            SessionSettings(hash_algorithm="crc32")

    def test_non_positive_timeout_rejected(self, clean_env):
        with pytest.raises(pydantic.ValidationError):
            SessionSettings(read_timeout=0)

    def test_port_range(self, clean_env):
        with pytest.raises(pydantic.ValidationError):
            AuthoritySettings(port=70000)

    def test_unknown_log_level_falls_back(self, clean_env):
        assert SessionSettings(log_level="chatty").log_level == "INFO"
