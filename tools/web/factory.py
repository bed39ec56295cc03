"""Factory for creating the configured search client."""

import httpx

from config.config import Config, SearchBackendType
from utils.logger import get_logger

from .search_client import BaseSearchClient, LangSearchClient, SearxngFallbackClient

logger = get_logger(__name__)


def create_search_client_from_config(
    config: Config, transport: httpx.AsyncBaseTransport | None = None
) -> BaseSearchClient | None:
    """
    Create the search client selected by SEARCH_BACKEND.

    Args:
        config: Loaded configuration
        transport: Optional httpx transport passed through to the client

    Returns:
        Configured search client, or None when the selected backend lacks
        its credentials/endpoints (search is then disabled)

    Raises:
        ValueError: If SEARCH_BACKEND is not a known backend
    """
    backend = config.SEARCH_BACKEND

    if backend == SearchBackendType.LANGSEARCH.value:
        if not config.LANGSEARCH_API_KEY:
            logger.warning("LANGSEARCH_API_KEY not set; web search disabled")
            return None
        client = LangSearchClient(
            api_key=config.LANGSEARCH_API_KEY,
            api_url=config.LANGSEARCH_API_URL,
            transport=transport,
        )
    elif backend == SearchBackendType.SEARXNG.value:
        if not config.SEARXNG_INSTANCES:
            logger.warning("No SEARXNG_INSTANCES configured; web search disabled")
            return None
        client = SearxngFallbackClient(instances=config.SEARXNG_INSTANCES, transport=transport)
    else:
        raise ValueError(f"Unsupported SEARCH_BACKEND: {backend}")

    client.default_timeout_ms = config.SEARCH_TIMEOUT_MS
    logger.info(
        f"Using {client.name} for web search",
        extra={"extra_fields": {"backend": backend, "timeout_ms": config.SEARCH_TIMEOUT_MS}},
    )
    return client
