"""Web search tools: intent detection, search clients and result formatting."""

from .contracts import SearchMetadata, SearchOptions, SearchOutcome, SearchResultItem
from .factory import create_search_client_from_config
from .research_pack import format_search_results
from .search_client import BaseSearchClient, LangSearchClient, SearxngFallbackClient

__all__ = [
    "BaseSearchClient",
    "LangSearchClient",
    "SearchMetadata",
    "SearchOptions",
    "SearchOutcome",
    "SearchResultItem",
    "SearxngFallbackClient",
    "create_search_client_from_config",
    "format_search_results",
]
