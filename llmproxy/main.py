"""Application entrypoint for the FastAPI service."""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator, Sequence
from contextlib import asynccontextmanager

import httpx
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .api import register_routers
from .core.ai.service import AIService
from .core.settings import Settings, get_settings

logger = logging.getLogger(__name__)


def create_application(
    settings: Settings | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> FastAPI:
    """Construct and configure the FastAPI application instance.

    Required provider secrets are checked when the application starts, so a
    misconfigured deployment fails before serving any request.
    """

    settings = settings or get_settings()

    @asynccontextmanager
    async def lifespan(application: FastAPI) -> AsyncIterator[None]:
        settings.ensure_required_secrets()
        service = AIService(settings, transport=transport)
        application.state.ai_service = service
        logger.info(
            "AI service ready",
            extra={"providers": [provider.value for provider in service.available_providers()]},
        )
        try:
            yield
        finally:
            await service.aclose()

    application = FastAPI(title=settings.app_name, version=settings.app_version, lifespan=lifespan)
    application.state.settings = settings
    _configure_cors(application, settings.allowed_origins)

    register_routers(application)

    return application


def _configure_cors(app: FastAPI, origins: Sequence[str] | None) -> None:
    allow_all = not origins
    allow_list = ["*"] if allow_all else list(origins or [])
    app.add_middleware(
        CORSMiddleware,
        allow_origins=allow_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )


app = create_application()

__all__ = ("app", "create_application")
