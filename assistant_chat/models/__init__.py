"""Pydantic models for API requests and responses.

Provides type safety, validation, and automatic OpenAPI documentation.

Models:
    - Turn: Individual message in conversation
    - ChatRequest: Incoming chat turn payload
    - ChatResponse: Assistant reply with thread handle
    - ErrorResponse: Error body for failed turns
"""

from assistant_chat.models.schemas import (
    ChatRequest,
    ChatResponse,
    ErrorResponse,
    Role,
    Turn,
    TurnResult,
)

__all__ = ["ChatRequest", "ChatResponse", "ErrorResponse", "Role", "Turn", "TurnResult"]
