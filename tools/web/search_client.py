"""Web search clients: a hosted LangSearch endpoint and a SearXNG multi-instance fallback.

Both normalize raw records into SearchResultItem and bound every attempt with
an explicit deadline.
"""

import asyncio
import time
from abc import ABC, abstractmethod
from typing import Any

import httpx

from models.errors import AllBackendsFailed, BackendError, InvalidQuery, SearchError, SearchTimeout
from utils.logger import get_logger, truncate_for_log

from .contracts import SearchOptions, SearchOutcome, SearchResultItem

logger = get_logger(__name__)

LANGSEARCH_API_URL = "https://api.langsearch.com/v1/web-search"
LANGSEARCH_BACKEND_NAME = "LangSearch API"
USER_AGENT = "AriaChat/1.0 (+web search augmentation)"


def _text(value: Any) -> str:
    return str(value) if value is not None else ""


def normalize_results(
    raw_items: list[dict[str, Any]] | None, max_results: int, default_source: str = "web"
) -> tuple[SearchResultItem, ...]:
    """
    Map raw backend records to SearchResultItem, capped at max_results.

    content falls back through snippet -> description -> content -> "".
    """
    records = [raw for raw in (raw_items or []) if isinstance(raw, dict)]
    items = []
    for raw in records[:max_results]:
        items.append(
            SearchResultItem(
                title=_text(raw.get("title") or raw.get("name")),
                url=_text(raw.get("url") or raw.get("link")),
                content=_text(raw.get("snippet") or raw.get("description") or raw.get("content")),
                source=_text(raw.get("source") or raw.get("engine") or default_source),
            )
        )
    return tuple(items)


class BaseSearchClient(ABC):
    """
    Abstract base for search clients.

    Subclasses implement ``_search``; ``search_web`` validates the query, fills
    default options and logs the outcome.
    """

    default_timeout_ms = 10000

    def __init__(self, transport: httpx.AsyncBaseTransport | None = None):
        """
        Args:
            transport: Optional httpx transport (tests use httpx.MockTransport)
        """
        self._transport = transport

    @property
    @abstractmethod
    def name(self) -> str:
        pass

    @abstractmethod
    async def _search(self, query: str, options: SearchOptions) -> SearchOutcome:
        pass

    async def search_web(self, query: str, options: SearchOptions | None = None) -> SearchOutcome:
        """
        Search the web.

        Args:
            query: Non-empty search string
            options: Result cap and per-attempt timeout (client default when None)

        Returns:
            SearchOutcome with at most options.max_results results

        Raises:
            InvalidQuery: query is empty or not a string
            SearchError: backend failure (subclass-specific)
        """
        if not isinstance(query, str) or not query.strip():
            raise InvalidQuery("Query must be a non-empty string")

        if options is None:
            options = SearchOptions(timeout_ms=self.default_timeout_ms)

        logger.info(
            f"Web search: '{truncate_for_log(query)}' via {self.name}",
            extra={
                "extra_fields": {
                    "max_results": options.max_results,
                    "timeout_ms": options.timeout_ms,
                }
            },
        )

        outcome = await self._search(query, options)

        logger.info(
            f"Web search returned {outcome.total_results} results",
            extra={
                "extra_fields": {
                    "backend": outcome.backend,
                    "search_time_ms": outcome.search_time_ms,
                }
            },
        )
        return outcome

    def _client(self, timeout_ms: int) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            timeout=timeout_ms / 1000,
            transport=self._transport,
            headers={"User-Agent": USER_AGENT, "Accept": "application/json"},
            follow_redirects=True,
        )

    async def _with_deadline(self, coro, backend: str, timeout_ms: int):
        """Await ``coro`` within timeout_ms, mapping any timeout to SearchTimeout."""
        try:
            return await asyncio.wait_for(coro, timeout=timeout_ms / 1000)
        except (asyncio.TimeoutError, httpx.TimeoutException) as e:
            raise SearchTimeout(backend, timeout_ms) from e


class LangSearchClient(BaseSearchClient):
    """Single authenticated hosted endpoint."""

    default_timeout_ms = 10000

    def __init__(
        self,
        api_key: str,
        api_url: str = LANGSEARCH_API_URL,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        super().__init__(transport=transport)
        if not api_key:
            raise ValueError("LANGSEARCH_API_KEY not set")
        self.api_key = api_key
        self.api_url = api_url

    @property
    def name(self) -> str:
        return LANGSEARCH_BACKEND_NAME

    async def _search(self, query: str, options: SearchOptions) -> SearchOutcome:
        start = time.perf_counter()
        payload = await self._with_deadline(
            self._post(query, options), self.name, options.timeout_ms
        )
        search_time_ms = int((time.perf_counter() - start) * 1000)

        return SearchOutcome(
            query=query,
            backend=self.name,
            results=normalize_results(self._extract_items(payload), options.max_results),
            search_time_ms=search_time_ms,
        )

    async def _post(self, query: str, options: SearchOptions) -> dict[str, Any]:
        headers = {
            "Content-Type": "application/json",
            "x-api-key": self.api_key,
            "Authorization": f"Bearer {self.api_key}",
        }
        try:
            async with self._client(options.timeout_ms) as client:
                response = await client.post(
                    self.api_url,
                    json={"query": query, "num": options.max_results},
                    headers=headers,
                )
        except httpx.TimeoutException:
            raise
        except httpx.HTTPError as e:
            raise SearchError(f"{self.name} failed: {e}") from e

        if not response.is_success:
            raise BackendError(self.name, response.status_code, response.text)

        try:
            payload = response.json() if response.content else {}
        except ValueError as e:
            raise SearchError(f"{self.name} returned invalid JSON") from e
        return payload if isinstance(payload, dict) else {}

    @staticmethod
    def _extract_items(payload: dict[str, Any]) -> list[dict[str, Any]]:
        # Accepts {"data": [...]} and {"data": {"webPages": {"value": [...]}}}
        data = payload.get("data")
        if isinstance(data, list):
            return data
        if isinstance(data, dict):
            web_pages = data.get("webPages") or {}
            value = web_pages.get("value") if isinstance(web_pages, dict) else None
            if isinstance(value, list):
                return value
        return []


class SearxngFallbackClient(BaseSearchClient):
    """
    Ordered list of public SearXNG instances.

    Instances are tried in order; the first that returns at least one result
    wins. Failures and empty answers are recorded and the next instance is
    tried. Raises AllBackendsFailed only when every instance came up empty.
    """

    default_timeout_ms = 5000

    def __init__(self, instances: list[str], transport: httpx.AsyncBaseTransport | None = None):
        super().__init__(transport=transport)
        self.instances = [i.rstrip("/") for i in instances if i]
        if not self.instances:
            raise ValueError("At least one SearXNG instance is required")

    @property
    def name(self) -> str:
        return "SearXNG"

    async def _search(self, query: str, options: SearchOptions) -> SearchOutcome:
        errors: list[tuple[str, str]] = []

        for instance in self.instances:
            start = time.perf_counter()
            try:
                raw_items = await self._with_deadline(
                    self._fetch(instance, query, options), instance, options.timeout_ms
                )
                results = normalize_results(raw_items, options.max_results)
            except Exception as e:
                errors.append((instance, str(e)))
                logger.warning(
                    f"Search instance failed: {instance}",
                    extra={
                        "extra_fields": {
                            "instance": instance,
                            "error": str(e),
                            "error_type": type(e).__name__,
                        }
                    },
                )
                continue

            if not results:
                errors.append((instance, "no results"))
                logger.warning(f"Search instance returned no results: {instance}")
                continue

            return SearchOutcome(
                query=query,
                backend=instance,
                results=results,
                search_time_ms=int((time.perf_counter() - start) * 1000),
            )

        raise AllBackendsFailed(errors)

    async def _fetch(self, instance: str, query: str, options: SearchOptions) -> list[dict[str, Any]]:
        async with self._client(options.timeout_ms) as client:
            response = await client.get(
                f"{instance}/search",
                params={"q": query, "format": "json", "language": "en-US"},
            )
        if not response.is_success:
            raise BackendError(instance, response.status_code, response.text[:200])
        payload = response.json()
        results = payload.get("results") if isinstance(payload, dict) else None
        return results if isinstance(results, list) else []
