#!/usr/bin/env python3
"""
Response models for API endpoints.
"""

from pydantic import BaseModel, Field
from typing import Optional


class ChatCommandResponse(BaseModel):
    """Reply to a chat command; null when the text is not a command."""
    reply: Optional[str] = None


class HealthResponse(BaseModel):
    status: str = Field(..., description="Service status")
    redis_connected: bool = Field(..., description="Whether Redis answered a ping")
