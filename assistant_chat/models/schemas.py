from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class Role(str, Enum):
    """Speaker of a conversation turn."""

    USER = "user"
    ASSISTANT = "assistant"


class Turn(BaseModel):
    """A single message in the conversation.

    Attributes:
        role: The speaker (user or assistant).
        content: The message text.
    """

    model_config = ConfigDict(frozen=True)

    role: Role
    content: str


class ChatRequest(BaseModel):
    """Request payload for the chat endpoint.

    Attributes:
        messages: Full local history; only the last user turn is sent upstream.
        thread_id: Upstream thread handle from a previous reply, if any.
    """

    model_config = ConfigDict(populate_by_name=True)

    messages: list[Turn]
    thread_id: str | None = Field(None, alias="threadId")


class ChatResponse(BaseModel):
    """Successful reply to a chat turn.

    Attributes:
        message: The assistant's turn.
        thread_id: Thread handle to echo on the next request.
    """

    model_config = ConfigDict(populate_by_name=True)

    message: Turn
    thread_id: str = Field(..., alias="threadId")


class ErrorResponse(BaseModel):
    """Error body returned for every failed chat turn."""

    error: str


class TurnResult(BaseModel):
    """Outcome of a successful orchestrated turn."""

    assistant_turn: Turn
    thread_id: str
