import time

import openai

from models.completion import CompletionResponse, TokenUsage
from utils.logger import get_logger

from .base_client import BaseAIClient

logger = get_logger(__name__)

GROQ_BASE_URL = "https://api.groq.com/openai/v1"


class GroqClient(BaseAIClient):
    """
    Groq chat completion client.

    Uses the OpenAI SDK with a custom base URL since the Groq API is
    OpenAI-compatible. Responses are normalized to CompletionResponse.
    """

    provider_name = "groq"

    def __init__(
        self,
        api_key: str,
        model_name: str = "llama-3.3-70b-versatile",
        base_url: str = GROQ_BASE_URL,
        temperature: float = 0.7,
        top_p: float = 1.0,
        max_tokens: int = 2048,
        timeout_s: float = 60.0,
        **kwargs,
    ):
        """
        Initialize the Groq client.

        Args:
            api_key: The Groq API key
            model_name: Default model identifier
            base_url: OpenAI-compatible endpoint
            temperature, top_p, max_tokens: Default sampling configuration
            timeout_s: Per-request timeout for the completion call
        """
        super().__init__(api_key, model_name=model_name, **kwargs)
        if not api_key:
            raise ValueError("GROQ_API_KEY not set")
        self.client = openai.OpenAI(api_key=api_key, base_url=base_url, timeout=timeout_s)
        self.model_name = model_name
        self.temperature = temperature
        self.top_p = top_p
        self.max_tokens = max_tokens

    def get_completion(self, messages, **kwargs) -> CompletionResponse:
        """
        Get a completion from the Groq API.

        Args:
            messages: List of ChatMessage or dicts with 'role' and 'content'
            **kwargs: model, temperature, top_p, max_tokens overrides

        Returns:
            CompletionResponse: Normalized response object

        IMPORTANT: Never raises exceptions - returns CompletionResponse with error instead
        """
        request_id = self._generate_request_id()
        start_time = time.time()

        model = kwargs.get("model", self.model_name)
        temperature = kwargs.get("temperature", self.temperature)
        top_p = kwargs.get("top_p", self.top_p)
        max_tokens = kwargs.get("max_tokens", self.max_tokens)

        try:
            normalized_messages = self._normalize_messages(messages)

            response = self.client.chat.completions.create(
                model=model,
                messages=normalized_messages,
                temperature=temperature,
                top_p=top_p,
                max_tokens=max_tokens,
                stream=False,
            )

            latency_ms = self._measure_latency(start_time)

            choice = response.choices[0] if response.choices else None
            text = (choice.message.content if choice else None) or ""

            usage = getattr(response, "usage", None)
            token_usage = TokenUsage(
                prompt_tokens=getattr(usage, "prompt_tokens", 0) or 0,
                completion_tokens=getattr(usage, "completion_tokens", 0) or 0,
                total_tokens=getattr(usage, "total_tokens", 0) or 0,
            )

            finish_reason = self._normalize_finish_reason(
                choice.finish_reason if choice else None, provider=self.provider_name
            )

            logger.info(
                "Groq completion successful",
                extra={
                    "extra_fields": {
                        "request_id": request_id,
                        "model": response.model or model,
                        "latency_ms": latency_ms,
                        "tokens": token_usage.total_tokens,
                    }
                },
            )

            return CompletionResponse(
                request_id=request_id,
                text=text,
                provider=self.provider_name,
                model=response.model or model,
                latency_ms=latency_ms,
                token_usage=token_usage,
                finish_reason=finish_reason,
            )

        except Exception as e:
            latency_ms = self._measure_latency(start_time)
            error = self._normalize_error(e, provider=self.provider_name)

            logger.error(
                f"Groq completion failed: {error.code}",
                extra={
                    "extra_fields": {
                        "request_id": request_id,
                        "model": model,
                        "error_code": error.code,
                        "error_message": error.message,
                        "retryable": error.retryable,
                    }
                },
            )

            return self._create_error_response(
                request_id=request_id, error=error, latency_ms=latency_ms, model=model
            )
