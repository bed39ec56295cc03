"""
ChatOrchestrator - search-augmented turn pipeline.

Per turn: classify -> optional search -> completion -> optional rescue
search + completion. Strictly sequential; no state is shared between turns.

Key guarantees:
- ask() never raises; completion failures become a failed TurnResult
- search failures never reach the caller; the turn degrades to no search context
- at most one search before the first completion, at most one rescue after it,
  and never both in the same turn
"""

import asyncio
from typing import Any, Iterable, Mapping

from api.base_client import BaseAIClient
from config.config import Config
from models.chat import ChatMessage, normalize_history
from models.completion import CompletionResponse, TurnResult
from models.errors import CompletionBackendError
from orchestrator.response_validator import ResponseValidator
from tools.web.contracts import SearchMetadata, SearchOptions, SearchOutcome
from tools.web.intent import extract_search_query, is_business_query, should_perform_web_search
from tools.web.research_pack import build_augmented_message, build_search_failed_message
from tools.web.search_client import BaseSearchClient
from utils.logger import get_logger, truncate_for_log

logger = get_logger(__name__)

BUSINESS_MAX_RESULTS = 8
DEFAULT_MAX_RESULTS = 5
EMPTY_REPLY_FALLBACK = "I apologize, but I could not generate a response."
TURN_FAILED_ERROR = "Failed to generate response"


class ChatOrchestrator:
    def __init__(
        self,
        config: Config,
        completion_client: BaseAIClient,
        search_client: BaseSearchClient | None = None,
        validator: ResponseValidator | None = None,
    ):
        """
        Args:
            config: Read-only configuration (system prompt, sampling, timeouts)
            completion_client: Completion backend client
            search_client: Web search client; None disables search entirely
            validator: Uncertainty detector used to trigger rescue searches
        """
        self.config = config
        self.completion_client = completion_client
        self.search_client = search_client
        self.validator = validator or ResponseValidator()

    @classmethod
    def from_config(cls, config: Config) -> "ChatOrchestrator":
        from api.groq_client import GroqClient
        from tools.web.factory import create_search_client_from_config

        completion_client = GroqClient(
            api_key=config.GROQ_API_KEY,
            model_name=config.GROQ_MODEL,
            base_url=config.GROQ_BASE_URL,
            temperature=config.TEMPERATURE,
            top_p=config.TOP_P,
            max_tokens=config.MAX_TOKENS,
            timeout_s=config.COMPLETION_TIMEOUT_S,
        )
        return cls(
            config=config,
            completion_client=completion_client,
            search_client=create_search_client_from_config(config),
        )

    # ---------- helpers ----------

    def _build_messages(self, history: list[ChatMessage], user_content: str) -> list[ChatMessage]:
        return [
            ChatMessage(role="system", content=self.config.SYSTEM_PROMPT),
            *history,
            ChatMessage(role="user", content=user_content),
        ]

    async def _run_search(self, query: str, max_results: int, phase: str) -> SearchOutcome | None:
        """Search once; None when the search failed or found nothing."""
        options = SearchOptions(max_results=max_results, timeout_ms=self.config.TURN_SEARCH_TIMEOUT_MS)
        try:
            outcome = await self.search_client.search_web(query, options)
        except Exception as e:
            logger.warning(
                f"Web search failed during {phase}; continuing without search context",
                extra={
                    "extra_fields": {
                        "query": truncate_for_log(query),
                        "error": str(e),
                        "error_type": type(e).__name__,
                    }
                },
            )
            return None

        if not outcome.results:
            logger.warning(
                f"Web search returned no results during {phase}",
                extra={"extra_fields": {"query": truncate_for_log(query), "backend": outcome.backend}},
            )
            return None
        return outcome

    async def _complete(self, messages: list[ChatMessage]) -> CompletionResponse:
        response = await asyncio.to_thread(self.completion_client.get_completion, messages)
        if response.is_error:
            raise CompletionBackendError(response.error.message, code=response.error.code)
        return response

    async def _rescue(
        self, message: str, history: list[ChatMessage]
    ) -> tuple[CompletionResponse, SearchMetadata] | None:
        """Search with the original message and re-ask. None keeps the first reply."""
        query = extract_search_query(message)
        outcome = await self._run_search(query, DEFAULT_MAX_RESULTS, phase="rescue")
        if outcome is None:
            return None

        messages = self._build_messages(history, build_augmented_message(message, outcome))
        try:
            response = await self._complete(messages)
        except CompletionBackendError as e:
            logger.warning(
                "Rescue completion failed; keeping original reply",
                extra={"extra_fields": {"error": str(e), "error_code": e.code}},
            )
            return None

        metadata = SearchMetadata(
            query=outcome.query,
            backend=outcome.backend,
            result_count=outcome.total_results,
            trigger="uncertainty",
        )
        return response, metadata

    # ---------- public API ----------

    async def ask(
        self,
        message: str,
        history: Iterable[ChatMessage | Mapping[str, Any]] | None = None,
        enable_search: bool = True,
    ) -> TurnResult:
        """
        Run one user turn.

        Args:
            message: The user's message
            history: Prior turns in chronological order
            enable_search: Caller switch for web search augmentation

        Returns:
            TurnResult (success=False with error/details when the completion backend fails)
        """
        if not isinstance(message, str) or not message.strip():
            return TurnResult.failure("Message is required", "message must be a non-empty string")

        try:
            prior = normalize_history(history)
        except (KeyError, TypeError, ValueError) as e:
            return TurnResult.failure("Invalid history", str(e))

        try:
            search_enabled = enable_search and self.search_client is not None
            business = is_business_query(message)
            should_search = search_enabled and (should_perform_web_search(message) or business)

            logger.info(
                "Turn classified",
                extra={
                    "extra_fields": {
                        "message": truncate_for_log(message),
                        "search_enabled": search_enabled,
                        "business_query": business,
                        "should_search": should_search,
                        "history_length": len(prior),
                    }
                },
            )

            user_content = message
            search_metadata = None
            if should_search:
                query = extract_search_query(message)
                max_results = BUSINESS_MAX_RESULTS if business else DEFAULT_MAX_RESULTS
                outcome = await self._run_search(query, max_results, phase="pre-search")
                if outcome is not None:
                    user_content = build_augmented_message(message, outcome)
                    search_metadata = SearchMetadata(
                        query=outcome.query,
                        backend=outcome.backend,
                        result_count=outcome.total_results,
                        trigger="business" if business else "explicit",
                    )
                else:
                    user_content = build_search_failed_message(message)

            try:
                response = await self._complete(self._build_messages(prior, user_content))
            except CompletionBackendError as e:
                logger.error(
                    "Completion backend failed",
                    extra={"extra_fields": {"error": str(e), "error_code": e.code}},
                )
                return TurnResult.failure(TURN_FAILED_ERROR, str(e))

            reply = response.text or EMPTY_REPLY_FALLBACK

            if search_enabled and not should_search and self.validator.needs_rescue(reply):
                logger.info(
                    "Uncertain reply detected; attempting rescue search",
                    extra={"extra_fields": {"phrase": self.validator.matched_phrase(reply)}},
                )
                rescued = await self._rescue(message, prior)
                if rescued is not None:
                    response, search_metadata = rescued
                    reply = response.text or EMPTY_REPLY_FALLBACK

            return TurnResult(
                success=True,
                message=reply,
                model=response.model,
                usage=response.token_usage,
                search=search_metadata,
            )

        except Exception as e:
            logger.exception("ask() failed")
            return TurnResult.failure(TURN_FAILED_ERROR, str(e))
