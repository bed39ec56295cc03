"""Shared utilities for FastAPI routes."""

from models.chat import ChatMessage


def trim_history(history, max_messages: int) -> list[ChatMessage]:
    """Keep the most recent ``max_messages`` items, oldest first."""
    messages = [ChatMessage(role=item.role, content=item.content) for item in history or []]
    if max_messages > 0 and len(messages) > max_messages:
        messages = messages[-max_messages:]
    return messages
