"""Chat client state and request cycle.

Holds the local conversation and thread handle, sends turns to the chat API,
and turns every outcome into a visible turn. The page only renders what this
client holds.
"""

import logging
import os
from collections.abc import Callable
from enum import Enum

import httpx

from assistant_chat.models.schemas import ChatRequest, ChatResponse, Role, Turn

logger = logging.getLogger(__name__)

DEFAULT_PORT = 8000
CHAT_ENDPOINT = "/api/chat"

# The server may poll the assistant for up to a minute before answering
REQUEST_TIMEOUT = 120.0


def default_base_url() -> str:
    """Chat API base URL: ``API_BASE_URL``, else this process's own server."""
    explicit = os.getenv("API_BASE_URL")
    if explicit:
        return explicit
    return f"http://localhost:{os.getenv('PORT', str(DEFAULT_PORT))}"


class ClientState(str, Enum):
    """Observable request state of the client."""

    IDLE = "idle"
    AWAITING_REPLY = "awaiting_reply"


class ChatClientError(Exception):
    """Raised internally when a turn cannot produce an assistant reply."""

    pass


class ChatClient:
    """Conversation held in memory for one browser session."""

    def __init__(
        self,
        http_client: httpx.AsyncClient | None = None,
        base_url: str | None = None,
        greeting: str | None = None,
        on_change: Callable[[], None] | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            http_client: Optional HTTP client; one is created per request if omitted.
            base_url: Chat API base URL, see ``default_base_url`` if omitted.
            greeting: Optional assistant turn shown before the first message.
            on_change: Called after every history or state change.
        """
        self._http_client = http_client
        self.base_url = base_url or default_base_url()
        self._greeting = greeting
        self._on_change = on_change
        self.messages: list[Turn] = []
        self.thread_id: str | None = None
        self.state = ClientState.IDLE
        self._seed()

    @property
    def awaiting_reply(self) -> bool:
        return self.state is ClientState.AWAITING_REPLY

    def _seed(self) -> None:
        if self._greeting:
            self.messages.append(Turn(role=Role.ASSISTANT, content=self._greeting))

    def _changed(self) -> None:
        if self._on_change is not None:
            self._on_change()

    def reset(self) -> bool:
        """Start a new conversation. Ignored while a reply is pending."""
        if self.awaiting_reply:
            return False
        self.messages.clear()
        self.thread_id = None
        self._seed()
        self._changed()
        return True

    async def send(self, text: str) -> bool:
        """Send a user message and append the reply or an error turn.

        Args:
            text: Raw input text.

        Returns:
            False if nothing was sent (blank input or a reply already pending).
        """
        text = text.strip()
        if not text or self.awaiting_reply:
            return False

        self.messages.append(Turn(role=Role.USER, content=text))
        self.state = ClientState.AWAITING_REPLY
        self._changed()

        try:
            response = await self._post_turn()
        except ChatClientError as e:
            logger.warning(f"Chat turn failed: {e}")
            self.messages.append(Turn(role=Role.ASSISTANT, content=f"Error: {e}"))
        else:
            self.messages.append(response.message)
            self.thread_id = response.thread_id
        finally:
            self.state = ClientState.IDLE
            self._changed()
        return True

    async def _post_turn(self) -> ChatResponse:
        payload = ChatRequest(messages=list(self.messages), thread_id=self.thread_id)
        body = payload.model_dump(mode="json", by_alias=True)

        try:
            if self._http_client is not None:
                response = await self._http_client.post(CHAT_ENDPOINT, json=body)
            else:
                async with httpx.AsyncClient(
                    base_url=self.base_url, timeout=REQUEST_TIMEOUT
                ) as client:
                    response = await client.post(CHAT_ENDPOINT, json=body)
        except httpx.TimeoutException as e:
            raise ChatClientError("The server took too long to respond. Please try again.") from e
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            raise ChatClientError(
                "Connection error. Unable to reach the server. "
                "Please make sure the server is running."
            ) from e

        if response.is_error:
            raise ChatClientError(self._error_text(response))

        try:
            reply = ChatResponse.model_validate(response.json())
        except ValueError as e:
            # Covers both undecodable JSON and pydantic ValidationError
            raise ChatClientError("Invalid response from server") from e
        if reply.message.role is not Role.ASSISTANT or not reply.message.content:
            raise ChatClientError("Invalid response from server")
        return reply

    @staticmethod
    def _error_text(response: httpx.Response) -> str:
        try:
            data = response.json()
        except ValueError:
            return f"HTTP {response.status_code}: {response.reason_phrase}"
        if isinstance(data, dict) and isinstance(data.get("error"), str) and data["error"]:
            return data["error"]
        return "Failed to send message"
