"""Upstream boundary to the OpenAI Assistants API.

The orchestrator only talks to an ``AssistantBackend``; the OpenAI-backed
implementation lives here so tests can swap in an in-memory double.
"""

import logging
from typing import Any, Protocol

import httpx
from openai import AsyncOpenAI, DefaultAsyncHttpxClient
from pydantic import BaseModel

from assistant_chat.assistant.config import AssistantConfig

logger = logging.getLogger(__name__)

# Run statuses that mean "keep polling"
PENDING_RUN_STATUSES = frozenset({"queued", "in_progress", "cancelling"})


class RunState(BaseModel):
    """Snapshot of an upstream run.

    Attributes:
        id: Upstream run identifier.
        status: Run status (queued, in_progress, completed, failed, ...).
        failure_reason: Upstream-provided reason when the run failed.
    """

    id: str
    status: str
    failure_reason: str | None = None

    @property
    def is_pending(self) -> bool:
        return self.status in PENDING_RUN_STATUSES


class ThreadMessage(BaseModel):
    """The text view of one upstream thread message."""

    role: str
    content: str


class AssistantBackend(Protocol):
    """Operations the orchestrator needs from the assistant service."""

    async def resolve_thread(self, thread_id: str | None) -> str: ...

    async def append_user_message(self, thread_id: str, content: str) -> None: ...

    async def start_run(self, thread_id: str, assistant_id: str) -> RunState: ...

    async def get_run(self, thread_id: str, run_id: str) -> RunState: ...

    async def latest_message(self, thread_id: str) -> ThreadMessage | None: ...


def extract_text(message: Any) -> str:
    """Extract the text of an upstream message.

    Only the first content block is read. Non-text blocks (images, files)
    yield an empty string.
    """
    content = getattr(message, "content", None) or []
    if not content:
        return ""
    block = content[0]
    if getattr(block, "type", None) != "text":
        return ""
    return block.text.value


def _to_run_state(run: Any) -> RunState:
    last_error = getattr(run, "last_error", None)
    return RunState(
        id=run.id,
        status=run.status,
        failure_reason=getattr(last_error, "message", None),
    )


class OpenAIAssistantBackend:
    """AssistantBackend backed by ``AsyncOpenAI`` threads and runs."""

    def __init__(self, config: AssistantConfig, client: AsyncOpenAI | None = None) -> None:
        """Initialize the backend.

        Args:
            config: Assistant configuration.
            client: Optional preconfigured client, built from config if omitted.
        """
        self._config = config
        self._client = client or self._create_client()

    def _create_client(self) -> AsyncOpenAI:
        """Create the OpenAI client with a bounded timeout.

        SDK-level retries are off, so 429 and 5xx responses surface on the
        first attempt. Only failed connection attempts are retried, by the
        transport.
        """
        if not self._config.verify_ssl:
            logger.warning("TLS certificate verification is disabled for the assistant API")

        return AsyncOpenAI(
            api_key=self._config.api_key,
            base_url=self._config.base_url,
            timeout=self._config.request_timeout_seconds,
            max_retries=0,
            http_client=DefaultAsyncHttpxClient(transport=self._create_transport()),
        )

    def _create_transport(self) -> httpx.AsyncBaseTransport:
        """Transport that retries only failed connection attempts."""
        return httpx.AsyncHTTPTransport(
            retries=self._config.max_retries,
            verify=self._config.verify_ssl,
        )

    async def resolve_thread(self, thread_id: str | None) -> str:
        if thread_id:
            thread = await self._client.beta.threads.retrieve(thread_id)
        else:
            thread = await self._client.beta.threads.create()
            logger.info(f"Created thread {thread.id}")
        return thread.id

    async def append_user_message(self, thread_id: str, content: str) -> None:
        await self._client.beta.threads.messages.create(
            thread_id,
            role="user",
            content=content,
        )

    async def start_run(self, thread_id: str, assistant_id: str) -> RunState:
        run = await self._client.beta.threads.runs.create(
            thread_id,
            assistant_id=assistant_id,
        )
        return _to_run_state(run)

    async def get_run(self, thread_id: str, run_id: str) -> RunState:
        run = await self._client.beta.threads.runs.retrieve(run_id, thread_id=thread_id)
        return _to_run_state(run)

    async def latest_message(self, thread_id: str) -> ThreadMessage | None:
        page = await self._client.beta.threads.messages.list(
            thread_id,
            limit=1,
            order="desc",
        )
        if not page.data:
            return None
        message = page.data[0]
        return ThreadMessage(role=message.role, content=extract_text(message))

    async def close(self) -> None:
        await self._client.close()
