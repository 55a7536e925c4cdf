"""FastAPI endpoints for the assistant chat service.

Endpoints:
    - GET /health: Service health status
    - POST /api/chat: Submit a turn and wait for the assistant's reply
"""

from assistant_chat.api.app import app, create_app

__all__ = ["app", "create_app"]
