#!/usr/bin/env python3
"""
Chat command endpoint - lets a chat integration forward user messages.
"""

import logging

from fastapi import APIRouter, Depends
from redis import RedisError

from ..dependencies import get_commands
from ..exceptions import StoreUnavailableException
from ..models.requests import ChatCommandRequest
from ..models.responses import ChatCommandResponse
from chat.commands import ChatCommandHandler

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/chat", tags=["chat"])


@router.post("/commands", response_model=ChatCommandResponse)
def run_command(
    request: ChatCommandRequest,
    commands: ChatCommandHandler = Depends(get_commands)
):
    """
    Run a chat command (alias, watch, unwatch, repos, issues) for a user.

    Text that is not a command gets a null reply.
    """
    try:
        reply = commands.respond(request.user_id, request.text.strip())
    except RedisError as e:
        raise StoreUnavailableException(f"Watch registry unavailable: {e}")

    return ChatCommandResponse(reply=reply)
