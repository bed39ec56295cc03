import pytest
from dotenv import load_dotenv

from api.base_client import BaseAIClient
from config.config import Config
from models.completion import CompletionResponse, NormalizedError, TokenUsage
from models.errors import SearchError
from tools.web.contracts import SearchOutcome, SearchResultItem
from tools.web.search_client import BaseSearchClient

# Load environment variables from .env file for tests
load_dotenv()


class FakeCompletionClient(BaseAIClient):
    """
    Fake completion client: replays scripted replies and records every call.
    """

    provider_name = "fake"

    def __init__(self, replies=None, model_name: str = "fake-model", error_code: str | None = None):
        self.model_name = model_name
        self.replies = list(replies or ["OK"])
        self.error_code = error_code
        self.calls: list[list[dict[str, str]]] = []

    def get_completion(self, messages, **kwargs) -> CompletionResponse:
        normalized = self._normalize_messages(messages)
        self.calls.append(normalized)

        if self.error_code:
            return self._create_error_response(
                request_id=f"req_{len(self.calls)}",
                error=NormalizedError(
                    code=self.error_code,
                    message=f"Fake {self.error_code} error",
                    provider=self.provider_name,
                ),
                latency_ms=1,
                model=self.model_name,
            )

        text = self.replies[min(len(self.calls), len(self.replies)) - 1]
        return CompletionResponse(
            request_id=f"req_{len(self.calls)}",
            text=text,
            provider=self.provider_name,
            model=self.model_name,
            latency_ms=1,
            token_usage=TokenUsage(prompt_tokens=10, completion_tokens=5),
            finish_reason="stop",
        )


class FakeSearchClient(BaseSearchClient):
    """
    Fake search client returning canned results (or raising) and recording queries.
    """

    def __init__(self, result_count: int = 2, error: Exception | None = None, backend: str = "fake-search"):
        super().__init__()
        self.result_count = result_count
        self.error = error
        self.backend = backend
        self.calls: list[tuple[str, int, int]] = []

    @property
    def name(self) -> str:
        return self.backend

    async def _search(self, query, options) -> SearchOutcome:
        self.calls.append((query, options.max_results, options.timeout_ms))
        if self.error is not None:
            raise self.error
        count = min(self.result_count, options.max_results)
        results = tuple(
            SearchResultItem(
                title=f"Result {i}",
                url=f"https://example.com/{i}",
                content=f"Snippet {i}",
            )
            for i in range(1, count + 1)
        )
        return SearchOutcome(query=query, backend=self.backend, results=results, search_time_ms=12)


@pytest.fixture
def config():
    return Config(
        load_env_files=False,
        GROQ_API_KEY="test-key",
        GROQ_MODEL="fake-model",
        SYSTEM_PROMPT="You are a test assistant.",
        TURN_SEARCH_TIMEOUT_MS=5000,
        MAX_HISTORY_MESSAGES=20,
    )


@pytest.fixture
def completion_client():
    return FakeCompletionClient()


@pytest.fixture
def search_client():
    return FakeSearchClient()


@pytest.fixture
def failing_search_client():
    return FakeSearchClient(error=SearchError("backend down"))
