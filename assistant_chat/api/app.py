"""FastAPI application factory and configuration.

Main application entry point with lifespan management, middleware,
error handlers, and router registration.
"""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from assistant_chat.api.chat import router as chat_router
from assistant_chat.assistant.errors import ChatError, InvalidRequestError
from assistant_chat.assistant.orchestrator import ConversationOrchestrator, get_orchestrator

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Manage application startup and shutdown lifecycle.

    Builds the default orchestrator on startup so a missing API key
    fails before the first request arrives.

    Args:
        app: The FastAPI application instance.

    Yields:
        Control to the application while it runs.
    """
    # Startup
    logger.info("Starting Assistant Chat API...")
    if app.state.orchestrator is None:
        app.state.orchestrator = get_orchestrator()
    yield
    # Shutdown
    logger.info("Shutting down Assistant Chat API...")


async def chat_error_handler(request: Request, exc: ChatError) -> JSONResponse:
    """Render a ChatError as ``{"error": message}`` with its status code."""
    logger.warning(
        f"{request.method} {request.url.path} -> {exc.status_code} "
        f"{exc.kind.value}: {exc.message}"
    )
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


async def validation_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """Reject malformed request bodies with 400 instead of FastAPI's 422."""
    logger.warning(f"{request.method} {request.url.path} -> invalid body: {exc}")
    error = InvalidRequestError()
    return JSONResponse(status_code=error.status_code, content={"error": error.message})


def create_app(orchestrator: ConversationOrchestrator | None = None) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        orchestrator: Optional orchestrator to serve turns with. The default
            one is built from environment configuration when omitted.

    Returns:
        Configured FastAPI application instance.
    """
    application = FastAPI(
        title="Assistant Chat API",
        description=(
            "Forwards chat turns to a hosted assistant, polls the assistant run "
            "until it completes, and returns the reply with a thread handle for "
            "follow-up turns."
        ),
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )
    application.state.orchestrator = orchestrator

    application.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["*"],
    )

    application.add_exception_handler(ChatError, chat_error_handler)
    application.add_exception_handler(RequestValidationError, validation_error_handler)

    application.include_router(chat_router)

    @application.get("/health")
    async def health_check() -> dict[str, str]:
        """Check service health status."""
        return {"status": "healthy", "service": "assistant-chat"}

    return application


app = create_app()
