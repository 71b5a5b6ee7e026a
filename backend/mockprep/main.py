"""Application entry point."""

from __future__ import annotations

import logging
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from . import __version__
from .api import api_router
from .container import Stores, build_container
from .core.config import Settings, get_settings
from .core.errors import register_exception_handlers
from .core.headers import SecurityHeadersMiddleware
from .core.logging import RequestIDMiddleware, init_logging

logger = logging.getLogger(__name__)


def create_app(settings: Optional[Settings] = None, stores: Optional[Stores] = None) -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = settings or get_settings()
    init_logging(settings.LOG_LEVEL)

    container = build_container(settings, stores)

    app = FastAPI(title=settings.APP_NAME, version=__version__)
    app.state.container = container
    app.add_middleware(
        CORSMiddleware,
        allow_origins=[settings.FRONTEND_URL],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(SecurityHeadersMiddleware)
    app.add_middleware(RequestIDMiddleware)
    register_exception_handlers(app)
    app.include_router(api_router)
    app.mount("/uploads", StaticFiles(directory=str(container.uploads.root)), name="uploads")

    logger.info(
        "application configured",
        extra={"environment": settings.ENVIRONMENT, "seeded": settings.SEED_DEMO_DATA},
    )
    return app


app = create_app()
