"""
Main entrypoint for the Shiptivity API.

This module assembles the FastAPI application, sets up logging and
includes versioned routers.  The ``create_app`` function builds and
configures the app, which is then instantiated at module import time
as ``app``, so it can be served directly::

    uvicorn shiptivity_api.app.main:app --port 3001

The SQLite connection is opened once on startup and closed on
shutdown; all requests share it.
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI

from .core.config import settings
from .core.logging_config import setup_logging
from .core.db import close_database, init_db, open_database
from .api.v1.router import router as v1_router


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Open and migrate the database on startup, close it on shutdown."""
    open_database()
    try:
        init_db()
        yield
    finally:
        close_database()


def create_app() -> FastAPI:
    """Create and configure a FastAPI application.

    Returns
    -------
    FastAPI
        A configured FastAPI application instance.
    """
    # Initialise logging before anything else so that imports below can
    # safely log messages.
    setup_logging(settings.log_level, settings.log_file or None)

    app = FastAPI(
        title=settings.project_name,
        version=settings.api_version,
        debug=settings.debug,
        lifespan=lifespan,
    )

    @app.get("/", include_in_schema=False)
    async def root() -> dict:
        return {"message": "SHIPTIVITY API. Read documentation to see API docs"}

    app.include_router(v1_router, prefix="/api/v1")

    return app


app = create_app()
