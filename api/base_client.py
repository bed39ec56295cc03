import time
import uuid
from abc import ABC, abstractmethod
from typing import Any, Iterable, Mapping

from models.chat import ChatMessage
from models.completion import CompletionResponse, NormalizedError, TokenUsage


class BaseAIClient(ABC):
    """
    Abstract base class for completion backend clients.

    Subclasses implement get_completion and must never raise from it: failures
    are returned as a CompletionResponse carrying a NormalizedError.
    """

    provider_name = "base"

    @abstractmethod
    def __init__(self, api_key: str, **kwargs):
        """
        Args:
            api_key: API key for the completion service
            **kwargs: Additional client-specific parameters
        """
        self.api_key = api_key
        self.model_name = kwargs.get("model_name")

    @abstractmethod
    def get_completion(
        self, messages: Iterable[ChatMessage | Mapping[str, Any]], **kwargs
    ) -> CompletionResponse:
        """
        Get a completion for an ordered list of role-tagged messages.

        Args:
            messages: System prompt, history and the current user turn, in order
            **kwargs: model, temperature, top_p, max_tokens overrides

        Returns:
            CompletionResponse (error set on failure)
        """
        pass

    # ---------- helpers shared by subclasses ----------

    @staticmethod
    def _generate_request_id() -> str:
        return f"req_{uuid.uuid4().hex[:16]}"

    @staticmethod
    def _measure_latency(start_time: float) -> int:
        return int((time.time() - start_time) * 1000)

    @staticmethod
    def _normalize_messages(
        messages: Iterable[ChatMessage | Mapping[str, Any]],
    ) -> list[dict[str, str]]:
        normalized = []
        for message in messages:
            if isinstance(message, ChatMessage):
                normalized.append(message.to_dict())
            else:
                normalized.append(ChatMessage.from_dict(message).to_dict())
        if not normalized:
            raise ValueError("messages must not be empty")
        return normalized

    @staticmethod
    def _normalize_finish_reason(reason: str | None, provider: str) -> str | None:
        if reason is None:
            return None
        mapping = {
            "stop": "stop",
            "length": "length",
            "tool_calls": "tool",
            "function_call": "tool",
            "content_filter": "content_filter",
        }
        return mapping.get(reason, reason)

    @staticmethod
    def _normalize_error(error: Exception, provider: str) -> NormalizedError:
        """Classify an SDK/transport exception into a NormalizedError."""
        message = str(error)
        lowered = message.lower()
        error_type = type(error).__name__.lower()

        if isinstance(error, TimeoutError) or "timeout" in error_type or "timed out" in lowered:
            code, retryable = "timeout", True
        elif "401" in message or "403" in message or "authentication" in error_type or "unauthorized" in lowered:
            code, retryable = "auth", False
        elif "429" in message or "ratelimit" in error_type or "rate limit" in lowered or "too many requests" in lowered:
            code, retryable = "rate_limit", True
        elif "400" in message or "badrequest" in error_type or "bad request" in lowered:
            code, retryable = "bad_request", False
        elif any(status in message for status in ("500", "502", "503", "504")) or "connection" in error_type:
            code, retryable = "provider_error", True
        else:
            code, retryable = "unknown", False

        return NormalizedError(
            code=code,
            message=message,
            provider=provider,
            retryable=retryable,
            details={"error_type": type(error).__name__},
        )

    def _create_error_response(
        self, request_id: str, error: NormalizedError, latency_ms: int, model: str
    ) -> CompletionResponse:
        return CompletionResponse(
            request_id=request_id,
            text="",
            provider=self.provider_name,
            model=model,
            latency_ms=latency_ms,
            token_usage=TokenUsage(),
            finish_reason="error",
            error=error,
        )
