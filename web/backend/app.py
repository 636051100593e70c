#!/usr/bin/env python3
"""
GitHub Spy - FastAPI Application

Receives GitHub webhooks and chat commands.

Usage:
    python main.py

Then point a GitHub webhook (content type application/json) at
    http://<host>:8080/github-spy
"""

import logging

from fastapi import Depends, FastAPI, HTTPException

from core.app_context import AppContext
from core.store.connection import is_connected
from .dependencies import get_context
from .exceptions import (
    ServiceException,
    service_exception_handler,
    http_exception_handler,
    general_exception_handler
)
from .models.responses import HealthResponse
from .routers import chat_router, create_webhook_router

logger = logging.getLogger(__name__)


def create_app(context: AppContext) -> FastAPI:
    """Create the FastAPI app around an already wired AppContext."""
    app = FastAPI(
        title="GitHub Spy API",
        description="GitHub activity notifications for chat users",
        version="1.0.0",
        docs_url="/docs",
        redoc_url="/redoc"
    )
    app.state.context = context

    # Register exception handlers
    app.add_exception_handler(ServiceException, service_exception_handler)
    app.add_exception_handler(HTTPException, http_exception_handler)
    app.add_exception_handler(Exception, general_exception_handler)

    # Include routers
    app.include_router(create_webhook_router(context.config.web.webhook_path))
    app.include_router(chat_router)

    @app.get("/health", response_model=HealthResponse)
    def health_check(ctx: AppContext = Depends(get_context)):
        """Health check endpoint."""
        return HealthResponse(status="ok", redis_connected=is_connected(ctx.redis))

    return app
