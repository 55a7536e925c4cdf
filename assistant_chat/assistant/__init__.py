"""Orchestration of chat turns against the OpenAI Assistants API.

Responsibilities:
    - Configuration of the upstream credential and assistant identity
    - Thread resolution, message submission, and run polling
    - Classification of upstream failures into user-facing errors

Maintains clean separation from the HTTP layer.
"""

from assistant_chat.assistant.config import AssistantConfig, load_assistant_config
from assistant_chat.assistant.errors import ChatError, ErrorKind, classify
from assistant_chat.assistant.orchestrator import ConversationOrchestrator, get_orchestrator

__all__ = [
    "AssistantConfig",
    "ChatError",
    "ConversationOrchestrator",
    "ErrorKind",
    "classify",
    "get_orchestrator",
    "load_assistant_config",
]
