"""Pytest fixtures and shared test configuration.

Provides reusable fixtures for unit and integration tests.

Fixtures:
    - assistant_config: Config with a test key and no poll delay
    - fake_backend: In-memory assistant service
    - orchestrator: ConversationOrchestrator wired to the fake backend
    - app: FastAPI app serving turns through that orchestrator
    - async_client: HTTPX client for API testing
"""

from collections.abc import AsyncIterator

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient

from assistant_chat.api.app import create_app
from assistant_chat.assistant.config import AssistantConfig
from assistant_chat.assistant.orchestrator import ConversationOrchestrator
from tests.fakes import FakeAssistantBackend


@pytest.fixture
def assistant_config() -> AssistantConfig:
    """Return a config that polls without sleeping.

    Returns:
        AssistantConfig with test credentials and a 60-poll deadline.
    """
    return AssistantConfig(
        api_key="sk-test-key",
        assistant_id="asst_test",
        base_url=None,
        poll_interval_seconds=0.0,
        max_poll_attempts=60,
        request_timeout_seconds=60.0,
        max_retries=2,
        verify_ssl=True,
    )


@pytest.fixture
def fake_backend() -> FakeAssistantBackend:
    """Return a fake assistant service whose runs complete on the first poll."""
    return FakeAssistantBackend()


@pytest.fixture
def orchestrator(
    assistant_config: AssistantConfig, fake_backend: FakeAssistantBackend
) -> ConversationOrchestrator:
    """Return an orchestrator backed by the fake service."""
    return ConversationOrchestrator(assistant_config, fake_backend)


@pytest.fixture
def app(orchestrator: ConversationOrchestrator) -> FastAPI:
    """Return an app that serves turns through the test orchestrator."""
    return create_app(orchestrator=orchestrator)


@pytest.fixture
async def async_client(app: FastAPI) -> AsyncIterator[AsyncClient]:
    """Create async HTTP client for API testing.

    Yields:
        Configured AsyncClient for making test requests.
    """
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
