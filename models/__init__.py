"""
Models package for chat, completion and error types.
"""

from .chat import ChatMessage, Conversation
from .completion import CompletionResponse, NormalizedError, TokenUsage, TurnResult

__all__ = [
    "ChatMessage",
    "CompletionResponse",
    "Conversation",
    "NormalizedError",
    "TokenUsage",
    "TurnResult",
]
