"""Error taxonomy for search and completion backends."""


class AppError(Exception):
    """Base class for all application errors."""

    pass


class SearchError(AppError):
    """Base class for search backend failures. Always recovered by the orchestrator."""

    pass


class InvalidQuery(SearchError):
    """Query was empty or not a string."""

    pass


class SearchTimeout(SearchError):
    """A search attempt exceeded its deadline."""

    def __init__(self, backend: str, timeout_ms: int):
        super().__init__(f"Request timeout - {backend} took longer than {timeout_ms}ms to respond")
        self.backend = backend
        self.timeout_ms = timeout_ms


class BackendError(SearchError):
    """Search backend answered with a non-success HTTP status."""

    def __init__(self, backend: str, status: int, body: str = ""):
        super().__init__(f"{backend} error {status}: {body}")
        self.backend = backend
        self.status = status
        self.body = body


class AllBackendsFailed(SearchError):
    """Every configured endpoint failed or returned zero results."""

    def __init__(self, errors: list[tuple[str, str]]):
        summary = "; ".join(f"{endpoint}: {message}" for endpoint, message in errors)
        super().__init__(f"All search backends failed ({summary})")
        self.errors = errors


class CompletionBackendError(AppError):
    """Completion backend failed; fatal to the turn."""

    def __init__(self, message: str, code: str = "unknown"):
        super().__init__(message)
        self.code = code
