"""Run the agentkit API server."""

import os
from pathlib import Path

import uvicorn
from dotenv import load_dotenv

from agentkit.api import create_fastapi_app
from agentkit.app import Application
from agentkit.config import Settings
from agentkit.logging_config import get_logger, setup_logging

logger = get_logger(__name__)


def main():
    """Load .env, validate settings and serve the API."""
    load_dotenv(Path(__file__).resolve().parent.parent / ".env")
    setup_logging()

    # Bad settings fail here, before the server binds
    settings = Settings.from_env()
    host = os.getenv("API_HOST", "localhost")
    port = int(os.getenv("API_PORT", "8000"))
    logger.info(
        "Serving on %s:%s with the %s worker (db: %s)", host, port, settings.worker, settings.db_path
    )

    uvicorn.run(
        create_fastapi_app(Application(settings=settings)),
        host=host,
        port=port,
        log_level="info",
    )


if __name__ == "__main__":
    main()
