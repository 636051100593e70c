"""Chat Module - command front-end for the watch registry."""
from chat.commands import ChatCommandHandler

__all__ = ['ChatCommandHandler']
