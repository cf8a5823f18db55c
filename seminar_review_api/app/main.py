"""
Main entrypoint for the Seminar Review API.

This module assembles the FastAPI application, sets up logging and
includes versioned routers.  The ``create_app`` function builds and
configures the app, which is then instantiated at module import time
as ``app`` so that it can be served with uvicorn::

    uvicorn seminar_review_api.app.main:app --reload

The record store behind the app is created on startup unless a
``ServiceContainer`` is passed to ``create_app`` (as the tests do).
"""

from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

from fastapi import FastAPI

from .api.v1.router import router as v1_router
from .container import ServiceContainer
from .core.config import settings
from .core.logging_config import setup_logging


def create_app(container: Optional[ServiceContainer] = None) -> FastAPI:
    """Create and configure a FastAPI application.

    Parameters
    ----------
    container:
        Services to serve.  When omitted, a container over the store
        selected by ``settings.store_backend`` is built at startup.
    """
    setup_logging(settings.log_level, settings.log_file)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        if app.state.container is None:
            app.state.container = ServiceContainer()
        yield

    app = FastAPI(
        title=settings.project_name,
        version=settings.api_version,
        debug=settings.debug,
        lifespan=lifespan,
    )
    app.state.container = container
    app.include_router(v1_router, prefix="/api/v1")
    return app


app = create_app()
