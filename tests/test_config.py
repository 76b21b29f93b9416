"""Tests for ClientConfig."""

from __future__ import annotations

import dataclasses

import pytest

from gofilepy import ClientConfig, GofileClient, ValidationError
from gofilepy.config import DEFAULT_BASE_URL, TOKEN_ENV_VAR


class TestClientConfig:
    """Tests for configuration defaults and overrides."""

    def test_defaults(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test the default settings."""
        monkeypatch.delenv(TOKEN_ENV_VAR, raising=False)

        config = ClientConfig.from_env()

        assert config.token is None
        assert config.base_url == DEFAULT_BASE_URL
        assert config.retry_count == 3
        assert config.timeout == 60.0
        assert config.upload_timeout is None

    def test_token_from_environment(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test that the token falls back to GOFILE_TOKEN."""
        monkeypatch.setenv(TOKEN_ENV_VAR, "env-token")

        assert ClientConfig.from_env().token == "env-token"
        assert ClientConfig.from_env("explicit").token == "explicit"

    def test_overrides(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test that constructor options override the defaults."""
        monkeypatch.delenv(TOKEN_ENV_VAR, raising=False)

        config = ClientConfig.from_env(
            "tok", retry_count=0, timeout=5, base_url="https://example.test/"
        )

        assert config.retry_count == 0
        assert config.timeout == 5.0
        assert config.base_url == "https://example.test"

    def test_config_is_immutable(self) -> None:
        """Test that a config cannot change after construction."""
        config = ClientConfig(token="a")

        with pytest.raises(dataclasses.FrozenInstanceError):
            config.token = "b"  # type: ignore[misc]

    @pytest.mark.parametrize(
        "kwargs", [{"retry_count": -1}, {"timeout": 0}, {"upload_timeout": -5}]
    )
    def test_invalid_values(self, kwargs: dict) -> None:
        """Test that nonsensical settings are rejected."""
        with pytest.raises(ValidationError):
            ClientConfig(**kwargs)

    def test_masked_token(self) -> None:
        """Test that only a prefix of the token is logged."""
        assert ClientConfig(token="abcdef123").masked_token == "abcd***"
        assert ClientConfig().masked_token == "<none>"

    def test_client_uses_environment_token(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test that GofileClient builds its config from the environment."""
        monkeypatch.setenv(TOKEN_ENV_VAR, "env-token")

        with GofileClient(timeout=12) as client:
            assert client.token == "env-token"
            assert client.config.timeout == 12.0
            assert client.transport.client.timeout.read == 12.0
