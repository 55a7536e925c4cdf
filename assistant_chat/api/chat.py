"""Chat turn endpoint.

Forwards the latest user turn to the assistant orchestrator and returns the
assistant's reply with the thread handle for the next turn.
"""

import logging

from fastapi import APIRouter, Depends, Request

from assistant_chat.assistant.orchestrator import ConversationOrchestrator, get_orchestrator
from assistant_chat.models.schemas import ChatRequest, ChatResponse, ErrorResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["chat"])


def orchestrator_dependency(request: Request) -> ConversationOrchestrator:
    """Return the app's orchestrator, building the default one on first use.

    Raises:
        ConfigurationError: If no orchestrator was injected and config is incomplete.
    """
    orchestrator = getattr(request.app.state, "orchestrator", None)
    if orchestrator is None:
        orchestrator = get_orchestrator()
        request.app.state.orchestrator = orchestrator
    return orchestrator


@router.post(
    "/chat",
    response_model=ChatResponse,
    responses={
        400: {"model": ErrorResponse, "description": "Invalid input or model misconfiguration"},
        401: {"model": ErrorResponse, "description": "Upstream authentication failed"},
        429: {"model": ErrorResponse, "description": "Upstream rate limit exceeded"},
        500: {"model": ErrorResponse, "description": "Run failure or internal error"},
        503: {"model": ErrorResponse, "description": "Upstream unreachable"},
        504: {"model": ErrorResponse, "description": "Run did not finish in time"},
    },
)
async def chat(
    payload: ChatRequest,
    orchestrator: ConversationOrchestrator = Depends(orchestrator_dependency),
) -> ChatResponse:
    """Submit a chat turn and wait for the assistant's reply.

    Args:
        payload: Conversation history and optional thread handle.
        orchestrator: Injected conversation orchestrator.

    Returns:
        ChatResponse with the assistant turn and thread handle.

    Raises:
        ChatError: Rendered as ``{"error": ...}`` by the app's exception handler.
    """
    logger.info(
        f"Chat turn: {len(payload.messages)} messages, "
        f"thread={payload.thread_id or 'new'}"
    )
    result = await orchestrator.submit_turn(payload.messages, payload.thread_id)
    return ChatResponse(message=result.assistant_turn, thread_id=result.thread_id)
