"""API route handlers."""

from .webhooks import create_webhook_router
from .chat import router as chat_router
