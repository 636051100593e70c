#!/usr/bin/env python3
"""
FastAPI dependencies for dependency injection.
"""

from fastapi import Request

from chat.commands import ChatCommandHandler
from core.app_context import AppContext
from notification.engine import NotificationEngine


def get_context(request: Request) -> AppContext:
    """The AppContext the application was created with."""
    return request.app.state.context


def get_engine(request: Request) -> NotificationEngine:
    return get_context(request).engine


def get_commands(request: Request) -> ChatCommandHandler:
    return get_context(request).commands
