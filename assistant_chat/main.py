"""Main application entry point.

Serves the chat API and the NiceGUI chat page from one uvicorn process.
Environment variables are loaded from .env file.
"""

import logging
import os
import sys

from dotenv import load_dotenv

# Load environment variables before any other imports that might need them
load_dotenv()

# Configure logging
logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    handlers=[logging.StreamHandler(sys.stdout)],
)
logger = logging.getLogger(__name__)


def main() -> None:
    """Validate configuration, mount the chat page and serve on ``HOST``:``PORT``.

    Exits with status 1 when the assistant configuration is incomplete, before
    anything listens.
    """
    import uvicorn
    from nicegui import ui

    from assistant_chat.api.app import create_app
    from assistant_chat.assistant.errors import ConfigurationError
    from assistant_chat.assistant.orchestrator import get_orchestrator
    from assistant_chat.ui.chat_client import DEFAULT_PORT
    from assistant_chat.ui.chat_page import APP_TITLE, chat_page  # noqa: F401 - Registers the page

    try:
        orchestrator = get_orchestrator()
    except ConfigurationError as e:
        logger.error(f"Invalid configuration: {e.message}")
        sys.exit(1)

    app = create_app(orchestrator=orchestrator)
    ui.run_with(
        app,
        title=APP_TITLE,
        storage_secret=os.getenv("NICEGUI_STORAGE_SECRET", "assistant-chat-secret"),
    )

    port = int(os.getenv("PORT", str(DEFAULT_PORT)))
    logger.info(f"Chat UI on http://localhost:{port}/, API at /api/chat, docs at /docs")

    uvicorn.run(
        app,
        host=os.getenv("HOST", "0.0.0.0"),
        port=port,
        log_level=os.getenv("LOG_LEVEL", "info").lower(),
    )


if __name__ == "__main__":
    main()
