"""Unit tests for AssistantConfig and the process-wide orchestrator.

Tests configuration validation and environment loading.
"""

from unittest.mock import MagicMock, patch

import pytest
from pydantic import ValidationError

from assistant_chat.assistant.config import (
    DEFAULT_ASSISTANT_ID,
    AssistantConfig,
    load_assistant_config,
)
from assistant_chat.assistant.errors import ConfigurationError

_ENV_VARS = (
    "OPENAI_API_KEY",
    "OPENAI_ASSISTANT_ID",
    "OPENAI_BASE_URL",
    "ASSISTANT_POLL_INTERVAL",
    "ASSISTANT_MAX_POLLS",
    "OPENAI_TIMEOUT",
    "OPENAI_MAX_RETRIES",
    "OPENAI_VERIFY_SSL",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Remove assistant settings inherited from the shell."""
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)


class TestAssistantConfig:
    """Tests for AssistantConfig validation."""

    def test_config_with_default_values(self) -> None:
        """Config uses the built-in assistant and a 60 x 1s poll deadline."""
        config = AssistantConfig(api_key="sk-test-key")

        assert config.assistant_id == DEFAULT_ASSISTANT_ID
        assert config.base_url is None
        assert config.poll_interval_seconds == 1.0
        assert config.max_poll_attempts == 60
        assert config.request_timeout_seconds == 60.0
        assert config.max_retries == 2
        assert config.verify_ssl is True

    def test_config_fails_with_missing_api_key(self) -> None:
        """Config raises ValidationError when API key is missing."""
        with pytest.raises(ValidationError) as exc_info:
            AssistantConfig(api_key="")

        assert "OPENAI_API_KEY is not set" in str(exc_info.value)

    def test_config_fails_with_whitespace_api_key(self) -> None:
        """Config rejects whitespace-only API key."""
        with pytest.raises(ValidationError) as exc_info:
            AssistantConfig(api_key="   ")

        assert "OPENAI_API_KEY is not set" in str(exc_info.value)

    def test_config_strips_api_key_whitespace(self) -> None:
        config = AssistantConfig(api_key="  sk-test-key  ")

        assert config.api_key == "sk-test-key"

    def test_config_rejects_negative_poll_interval(self) -> None:
        with pytest.raises(ValidationError) as exc_info:
            AssistantConfig(api_key="sk-test", poll_interval_seconds=-1.0)

        assert "poll_interval_seconds" in str(exc_info.value)

    def test_config_rejects_zero_poll_attempts(self) -> None:
        with pytest.raises(ValidationError) as exc_info:
            AssistantConfig(api_key="sk-test", max_poll_attempts=0)

        assert "max_poll_attempts" in str(exc_info.value)

    def test_config_rejects_empty_assistant_id(self) -> None:
        with pytest.raises(ValidationError):
            AssistantConfig(api_key="sk-test", assistant_id="")


class TestLoadAssistantConfig:
    """Tests for load_assistant_config."""

    def test_loads_values_from_environment(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("OPENAI_API_KEY", "sk-env-key")
        monkeypatch.setenv("OPENAI_ASSISTANT_ID", "asst_env")
        monkeypatch.setenv("ASSISTANT_MAX_POLLS", "10")
        monkeypatch.setenv("ASSISTANT_POLL_INTERVAL", "0.5")
        monkeypatch.setenv("OPENAI_VERIFY_SSL", "false")

        config = load_assistant_config()

        assert config.api_key == "sk-env-key"
        assert config.assistant_id == "asst_env"
        assert config.max_poll_attempts == 10
        assert config.poll_interval_seconds == 0.5
        assert config.verify_ssl is False

    def test_missing_key_raises_configuration_error(self) -> None:
        """Missing credential fails fast with a configuration error."""
        with pytest.raises(ConfigurationError) as exc_info:
            load_assistant_config()

        assert exc_info.value.message == "OPENAI_API_KEY is not set in environment variables"
        assert exc_info.value.status_code == 500

    @pytest.mark.parametrize(
        ("name", "value"),
        [
            ("ASSISTANT_MAX_POLLS", "0"),
            ("ASSISTANT_POLL_INTERVAL", "-5"),
            ("OPENAI_TIMEOUT", "0"),
            ("OPENAI_MAX_RETRIES", "9"),
            ("OPENAI_ASSISTANT_ID", ""),
        ],
    )
    def test_out_of_range_env_raises_configuration_error(
        self, monkeypatch: pytest.MonkeyPatch, name: str, value: str
    ) -> None:
        """Environment values are held to the same bounds as explicit ones."""
        monkeypatch.setenv("OPENAI_API_KEY", "sk-env-key")
        monkeypatch.setenv(name, value)

        with pytest.raises(ConfigurationError):
            load_assistant_config()

    def test_whitespace_env_key_raises_configuration_error(
        self, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("OPENAI_API_KEY", "   ")

        with pytest.raises(ConfigurationError, match="OPENAI_API_KEY is not set"):
            load_assistant_config()

    def test_non_numeric_env_raises_configuration_error(
        self, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("OPENAI_API_KEY", "sk-env-key")
        monkeypatch.setenv("ASSISTANT_MAX_POLLS", "sixty")

        with pytest.raises(ConfigurationError, match="sixty"):
            load_assistant_config()


class TestGetOrchestrator:
    """Tests for get_orchestrator singleton function."""

    def test_singleton_returns_same_instance(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """get_orchestrator builds config and backend once."""
        import assistant_chat.assistant.orchestrator as orchestrator_module

        monkeypatch.setattr(orchestrator_module, "_orchestrator", None)
        monkeypatch.setenv("OPENAI_API_KEY", "sk-env-key")

        with patch.object(orchestrator_module, "OpenAIAssistantBackend") as mock_backend:
            mock_backend.return_value = MagicMock()

            first = orchestrator_module.get_orchestrator()
            second = orchestrator_module.get_orchestrator()

        assert first is second
        mock_backend.assert_called_once()

    def test_missing_key_is_not_cached(self, monkeypatch: pytest.MonkeyPatch) -> None:
        import assistant_chat.assistant.orchestrator as orchestrator_module

        monkeypatch.setattr(orchestrator_module, "_orchestrator", None)

        with pytest.raises(ConfigurationError):
            orchestrator_module.get_orchestrator()

        assert orchestrator_module._orchestrator is None
