"""Assistant configuration with environment variable loading.

Pydantic-based configuration for the OpenAI Assistants API connection.
Built once at process start and passed into the orchestrator.
"""

import os

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from assistant_chat.assistant.errors import ConfigurationError

# Load environment variables from .env file
load_dotenv()

DEFAULT_ASSISTANT_ID = "asst_F5dbOMeB3laJzTdaLMaiKacH"


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


class AssistantConfig(BaseModel):
    """Configuration for the upstream assistant service.

    Attributes:
        api_key: OpenAI API key.
        assistant_id: Identity of the pre-configured assistant that answers turns.
        base_url: API base URL (None for OpenAI default).
        poll_interval_seconds: Delay between run status checks.
        max_poll_attempts: Run status checks before giving up with a timeout.
        request_timeout_seconds: Per-request transport timeout.
        max_retries: Automatic transport retries on transient network failures.
        verify_ssl: Verify TLS certificates of the upstream service.
    """

    # Values read from the environment go through the same bounds as explicit ones
    model_config = ConfigDict(validate_default=True)

    api_key: str = Field(
        default_factory=lambda: os.getenv("OPENAI_API_KEY", ""),
        description="API key for the assistant service",
    )
    assistant_id: str = Field(
        default_factory=lambda: os.getenv("OPENAI_ASSISTANT_ID", DEFAULT_ASSISTANT_ID),
        min_length=1,
        description="Assistant that generates replies",
    )
    base_url: str | None = Field(
        default_factory=lambda: os.getenv("OPENAI_BASE_URL") or None,
        description="API base URL (None for OpenAI default)",
    )
    poll_interval_seconds: float = Field(
        default_factory=lambda: float(os.getenv("ASSISTANT_POLL_INTERVAL", "1.0")),
        ge=0.0,
        description="Seconds to wait between run status checks",
    )
    max_poll_attempts: int = Field(
        default_factory=lambda: int(os.getenv("ASSISTANT_MAX_POLLS", "60")),
        ge=1,
        description="Run status checks before the turn times out",
    )
    request_timeout_seconds: float = Field(
        default_factory=lambda: float(os.getenv("OPENAI_TIMEOUT", "60.0")),
        gt=0.0,
        description="Transport timeout for a single upstream request",
    )
    max_retries: int = Field(
        default_factory=lambda: int(os.getenv("OPENAI_MAX_RETRIES", "2")),
        ge=0,
        le=5,
        description="Low-level retries on transient network failures",
    )
    verify_ssl: bool = Field(
        default_factory=lambda: _env_bool("OPENAI_VERIFY_SSL", True),
        description="Verify upstream TLS certificates",
    )

    @field_validator("api_key")
    @classmethod
    def validate_api_key(cls, v: str) -> str:
        """Validate that API key is provided and non-empty."""
        if not v or not v.strip():
            raise ValueError("OPENAI_API_KEY is not set in environment variables")
        return v.strip()


def load_assistant_config() -> AssistantConfig:
    """Create assistant configuration from environment.

    Returns:
        Configured AssistantConfig instance.

    Raises:
        ConfigurationError: If the API key is missing or a value is invalid.
    """
    try:
        return AssistantConfig()
    except ValidationError as e:
        messages = "; ".join(err["msg"].removeprefix("Value error, ") for err in e.errors())
        raise ConfigurationError(messages) from e
    except ValueError as e:
        # Non-numeric values in numeric env vars fail inside default factories
        raise ConfigurationError(f"Invalid assistant configuration: {e}") from e
