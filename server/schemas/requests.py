"""Pydantic request models for FastAPI endpoints."""

from pydantic import BaseModel, ConfigDict, Field, field_validator


class ConversationHistoryItem(BaseModel):
    role: str = Field(..., pattern="^(user|assistant|system)$")
    content: str


class ChatRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    message: str = Field(..., min_length=1)
    history: list[ConversationHistoryItem] = Field(default_factory=list)
    enable_search: bool = Field(True, alias="enableSearch")

    @field_validator("message")
    @classmethod
    def message_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("message must not be blank")
        return v
