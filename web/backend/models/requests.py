#!/usr/bin/env python3
"""
Request models for API endpoints.
"""

from pydantic import BaseModel, Field


class ChatCommandRequest(BaseModel):
    """A message a chat user sent to the bot."""
    user_id: str = Field(..., min_length=1, description="Chat user id of the sender")
    text: str = Field(..., description="Message text, e.g. 'watch foo/bar'")
