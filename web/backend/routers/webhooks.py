#!/usr/bin/env python3
"""
GitHub webhook endpoint - receives repository activity deliveries.
"""

import json
import logging
from typing import Optional

from fastapi import APIRouter, BackgroundTasks, Depends, Header, Request
from fastapi.responses import PlainTextResponse

from ..dependencies import get_engine
from ..exceptions import InvalidWebhookException
from notification.engine import NotificationEngine

logger = logging.getLogger(__name__)

DEFAULT_WEBHOOK_PATH = "/github-spy"


def create_webhook_router(path: str = DEFAULT_WEBHOOK_PATH) -> APIRouter:
    """Router for the webhook, mounted at the configured path."""
    router = APIRouter(tags=["webhooks"])

    @router.post(path, response_class=PlainTextResponse)
    async def receive_webhook(
        request: Request,
        background_tasks: BackgroundTasks,
        x_github_event: Optional[str] = Header(None),
        engine: NotificationEngine = Depends(get_engine)
    ):
        """
        Accept a GitHub webhook delivery.

        The event is processed after the response is sent; GitHub only needs
        the acknowledgement.
        """
        if not x_github_event:
            raise InvalidWebhookException("Missing X-GitHub-Event header")

        try:
            payload = await request.json()
        except (json.JSONDecodeError, UnicodeDecodeError):
            raise InvalidWebhookException("Webhook body is not valid JSON")

        if not isinstance(payload, dict):
            raise InvalidWebhookException("Webhook body must be a JSON object")

        logger.debug(f"Received {x_github_event} webhook ({payload.get('action')})")
        background_tasks.add_task(engine.handle, x_github_event, payload)
        return "OK"

    return router
