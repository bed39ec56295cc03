"""Render search outcomes into prompt text for the completion backend."""

from .contracts import SearchOutcome

NO_RESULTS_TEXT = "No search results found."

SEARCH_INSTRUCTION = (
    "Please use the web search results above to answer my question accurately. "
    "Mention the relevant sources (URLs) where appropriate."
)

SEARCH_FAILED_NOTE = (
    "(Note: A web search was attempted but failed. Please answer based on your own "
    "knowledge and clearly mention if the information might be outdated or uncertain.)"
)


def format_search_results(outcome: SearchOutcome | None) -> str:
    """
    Build the numbered result block inserted into the user turn.

    Args:
        outcome: SearchOutcome from a search client (may be None)

    Returns:
        Formatted text, or NO_RESULTS_TEXT when there is nothing to show
    """
    if outcome is None or not outcome.results:
        return NO_RESULTS_TEXT

    lines = [f'Web Search Results for "{outcome.query}":', ""]

    for index, result in enumerate(outcome.results, start=1):
        lines.append(f"{index}. {result.title}")
        lines.append(f"   URL: {result.url}")
        if result.content:
            lines.append(f"   {result.content}")
        lines.append("")

    lines.append("")
    lines.append(
        f"Source: {outcome.backend} "
        f"({outcome.total_results} results in {outcome.search_time_ms}ms)"
    )

    return "\n".join(lines)


def build_augmented_message(message: str, outcome: SearchOutcome) -> str:
    """User message followed by the formatted results and the answering instruction."""
    return f"{message}\n\n{format_search_results(outcome)}\n\n{SEARCH_INSTRUCTION}"


def build_search_failed_message(message: str) -> str:
    return f"{message}\n\n{SEARCH_FAILED_NOTE}"
