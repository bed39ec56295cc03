"""Data contracts for the web search module."""

from dataclasses import dataclass, field
from typing import Any, Literal

SearchTrigger = Literal["business", "explicit", "uncertainty"]


@dataclass(frozen=True)
class SearchOptions:
    """Per-call search options. ``timeout_ms`` bounds a single backend attempt."""

    max_results: int = 5
    timeout_ms: int = 10000

    def __post_init__(self):
        if self.max_results <= 0:
            raise ValueError("max_results must be greater than 0")
        if self.timeout_ms <= 0:
            raise ValueError("timeout_ms must be greater than 0")


@dataclass(frozen=True)
class SearchResultItem:
    """A single normalized search hit."""

    title: str
    url: str
    content: str = ""
    source: str = "web"


@dataclass(frozen=True)
class SearchOutcome:
    """Result of one search attempt, consumed by the formatter and then discarded."""

    query: str
    backend: str
    results: tuple[SearchResultItem, ...] = field(default_factory=tuple)
    search_time_ms: int = 0

    @property
    def total_results(self) -> int:
        return len(self.results)


@dataclass(frozen=True)
class SearchMetadata:
    """Search summary attached to a turn response."""

    query: str
    backend: str
    result_count: int
    trigger: SearchTrigger

    def to_dict(self) -> dict[str, Any]:
        return {
            "query": self.query,
            "backendIdentifier": self.backend,
            "resultCount": self.result_count,
            "trigger": self.trigger,
        }
