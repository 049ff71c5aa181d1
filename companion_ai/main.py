"""Main application entry point.

Runs FastAPI with NiceGUI mounted for the chat interface on one server.
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
    """Run FastAPI with NiceGUI mounted on the same server.

    FastAPI handles the JSON routes, NiceGUI handles the UI. The session
    lives in this process, so both surfaces see the same conversation.
    """
    import uvicorn
    from nicegui import ui

    from companion_ai.api.app import create_app
    from companion_ai.ui import chat_page  # noqa: F401 - Registers the pages

    app = create_app()

    ui.run_with(
        app,
        title="Companion AI",
        favicon="🤖",
        storage_secret=os.getenv("NICEGUI_STORAGE_SECRET", "companion-ai-secret"),
    )

    port = int(os.getenv("PORT", "8000"))
    logger.info(f"Starting Companion AI on http://localhost:{port}")
    logger.info(f"API docs available at http://localhost:{port}/docs")

    uvicorn.run(
        app,
        host=os.getenv("HOST", "0.0.0.0"),
        port=port,
        log_level=os.getenv("LOG_LEVEL", "info").lower(),
    )


if __name__ == "__main__":
    main()
