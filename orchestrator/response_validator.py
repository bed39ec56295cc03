"""Detects completions that hedge about missing or stale knowledge.

A match triggers at most one rescue search in the orchestrator.
"""

import re

_APOS = "['’]"

UNCERTAINTY_PATTERNS = [
    re.compile(rf"I (?:don{_APOS}t|do not|dont) (?:have|know)", re.I),
    re.compile(rf"I(?: am not|{_APOS}m not) sure", re.I),
    re.compile(rf"I (?:don{_APOS}t|do not) have (?:access to|information|data)", re.I),
    re.compile(rf"I (?:cannot|can{_APOS}t|can not) provide", re.I),
    re.compile(r"I (?:lack|am missing) (?:the )?(?:information|data|knowledge)", re.I),
    re.compile(
        rf"(?:my training|my knowledge|my data) (?:does not|doesn{_APOS}t|ended|cuts off|is limited)",
        re.I,
    ),
    re.compile(r"I would need (?:to|more) (?:search|look|check)", re.I),
    re.compile(rf"(?:unfortunately|regrettably|sadly),? I (?:don{_APOS}t|do not|cannot)", re.I),
    re.compile(rf"as an AI(?: language model)?,? I (?:don{_APOS}t|do not|cannot)", re.I),
    re.compile(rf"I apologize, but I (?:don{_APOS}t|do not|cannot)", re.I),
    re.compile(r"without (?:current|real-time|up-to-date|recent) (?:information|data)", re.I),
    re.compile(r"I would recommend (?:searching|looking|checking)", re.I),
]


def is_uncertain_response(response) -> bool:
    """True when a completion hedges about missing or stale knowledge."""
    if not isinstance(response, str) or not response:
        return False
    return any(pattern.search(response) for pattern in UNCERTAINTY_PATTERNS)


class ResponseValidator:
    """Inspects completions after the fact to decide whether a rescue search is worth it."""

    def __init__(self, patterns: list[re.Pattern] | None = None):
        self._patterns = patterns if patterns is not None else UNCERTAINTY_PATTERNS

    def needs_rescue(self, text) -> bool:
        return self.matched_phrase(text) is not None

    def matched_phrase(self, text) -> str | None:
        """The first hedging phrase found, for logging."""
        if not isinstance(text, str) or not text:
            return None
        for pattern in self._patterns:
            match = pattern.search(text)
            if match:
                return match.group(0)
        return None
