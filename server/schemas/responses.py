"""Pydantic response models (DTOs) for FastAPI endpoints."""

from pydantic import BaseModel, ConfigDict, Field


class TokenUsageDTO(BaseModel):
    prompt_tokens: int
    completion_tokens: int
    total_tokens: int


class SearchMetadataDTO(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    query: str
    backend: str = Field(..., alias="backendIdentifier")
    result_count: int = Field(..., alias="resultCount")
    trigger: str


class ChatResponseDTO(BaseModel):
    success: bool = True
    message: str
    model: str
    usage: TokenUsageDTO
    search: SearchMetadataDTO | None = None

    @classmethod
    def from_turn_result(cls, result):
        """Convert a successful TurnResult to DTO."""
        search = None
        if result.search is not None:
            search = SearchMetadataDTO(
                query=result.search.query,
                backend=result.search.backend,
                result_count=result.search.result_count,
                trigger=result.search.trigger,
            )

        return cls(
            message=result.message,
            model=result.model,
            usage=TokenUsageDTO(**result.usage.to_dict()),
            search=search,
        )


class ChatErrorDTO(BaseModel):
    success: bool = False
    error: str
    details: str


class HealthResponseDTO(BaseModel):
    status: str
    timestamp: str
    version: str = "1.0.0"
