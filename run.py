"""Entry point for the Shiptivity API.

Launches the FastAPI application with Uvicorn.  Host, port and the
database location are read from the environment (``HOST``, ``PORT``,
``DATABASE_URL``; see ``shiptivity_api/app/core/config.py``).

Usage:
    python run.py
"""
import asyncio
import logging

from uvicorn import Config, Server

from shiptivity_api.app.core.config import settings
from shiptivity_api.app.main import app


async def main() -> None:
    """Serve the API until SIGINT/SIGTERM.

    Uvicorn runs the application's shutdown handlers on those signals,
    which closes the database connection.
    """
    config = Config(
        app=app,
        host=settings.host,
        port=settings.port,
        reload=False,
        log_level=settings.log_level.lower(),
        # Handlers come from setup_logging; uvicorn only sets levels.
        log_config=None,
    )
    server = Server(config)
    logging.getLogger(__name__).info("app running on port %s", settings.port)
    await server.serve()


if __name__ == "__main__":
    try:
        asyncio.run(main())
    except (KeyboardInterrupt, SystemExit):
        pass
