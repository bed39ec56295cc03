"""
Chat message and conversation containers.

Conversation history is chronological and never mutated in place; adding a
message returns a new Conversation.
"""

from dataclasses import dataclass, field
from typing import Any, Iterable, Literal, Mapping

Role = Literal["system", "user", "assistant"]
VALID_ROLES = ("system", "user", "assistant")


@dataclass(frozen=True)
class ChatMessage:
    role: Role
    content: str

    def __post_init__(self):
        if self.role not in VALID_ROLES:
            raise ValueError(f"Invalid role '{self.role}'. Must be one of: {', '.join(VALID_ROLES)}")

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ChatMessage":
        return cls(role=data["role"], content=str(data.get("content") or ""))

    def to_dict(self) -> dict[str, str]:
        return {"role": self.role, "content": self.content}


def normalize_history(history: Iterable[ChatMessage | Mapping[str, Any]] | None) -> list[ChatMessage]:
    """Accept ChatMessage objects or role/content dicts, preserving order."""
    if not history:
        return []
    return [m if isinstance(m, ChatMessage) else ChatMessage.from_dict(m) for m in history]


@dataclass(frozen=True)
class Conversation:
    """
    In-memory session history used by the CLI.

    Attributes:
        messages: Ordered user/assistant turns (system prompt excluded)
    """

    messages: tuple[ChatMessage, ...] = field(default_factory=tuple)

    def add_message(self, role: Role, content: str) -> "Conversation":
        """
        Create a new Conversation with an added message.

        Args:
            role: Message role ('user', 'assistant', 'system')
            content: Message content

        Returns:
            New Conversation instance with updated history
        """
        return Conversation(messages=self.messages + (ChatMessage(role=role, content=content),))

    def clear(self) -> "Conversation":
        return Conversation()

    def __len__(self) -> int:
        return len(self.messages)
