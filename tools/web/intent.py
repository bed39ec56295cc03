"""Intent detection for deciding when and what to search on the web.

All functions here are pure: pattern tables are compiled once at import time
and evaluated in a fixed order. A single match is enough (no scoring).
"""

import re

_FLAGS = re.IGNORECASE

BUSINESS_PATTERNS = [
    # Direct business queries
    re.compile(r"(?:hours|open|opening|closing|close)(?: (?:for|of|at))? [A-Z]", _FLAGS),
    re.compile(r"(?:is|are) (?:the )?\w+ (?:open|closed)", _FLAGS),
    re.compile(r"(?:when|what time) (?:does|do|is|are) (?:the )?\w+ (?:open|close)", _FLAGS),
    # Business categories
    re.compile(
        r"(?:restaurant|cafe|coffee shop|bar|pub|hotel|motel|store|shop|mall|gym|bank|hospital"
        r"|clinic|pharmacy|gas station|salon|spa|dentist|doctor)\b",
        _FLAGS,
    ),
    # Location + category
    re.compile(r"(?:near me|nearby|in|at) (?:the )?(?:restaurant|cafe|store|shop|hotel|gym|bank)", _FLAGS),
    # Contact / pricing directed at a named place
    re.compile(r"(?:phone number|address|location|directions to|how to get to|contact) (?:for|of|to)? [A-Z]", _FLAGS),
    re.compile(r"(?:menu|prices|rates|cost|reservations) (?:for|at|of) [A-Z]", _FLAGS),
    re.compile(r"\b(?:hours|location|address|phone|menu|website) (?:for|of|at) [A-Z]\w+", _FLAGS),
    re.compile(r"\b[A-Z]\w+ (?:restaurant|cafe|store|shop|hotel|gym|bank|hours|location)", _FLAGS),
    re.compile(r"business hours", _FLAGS),
    re.compile(r"hours of operation", _FLAGS),
]

SEARCH_PATTERNS = [
    # Explicit search requests
    re.compile(r"search (?:for|the web|online)", _FLAGS),
    re.compile(r"look up", _FLAGS),
    re.compile(r"find (?:information|info) (?:on|about)", _FLAGS),
    re.compile(r"web search", _FLAGS),
    re.compile(r"google", _FLAGS),
    re.compile(r"browse (?:for|the web)", _FLAGS),
    # Recency
    re.compile(r"what'?s (?:the latest|happening|new|current)", _FLAGS),
    re.compile(r"current (?:news|events|information|status|price|weather)", _FLAGS),
    re.compile(r"(?:latest|recent|newest|updated) (?:news|information|version|release)", _FLAGS),
    re.compile(r"(?:today|this week|this month|right now)", _FLAGS),
    # Real-time data
    re.compile(r"(?:stock price|weather|temperature|forecast)", _FLAGS),
    re.compile(r"(?:score|result) of (?:the )?(?:game|match)", _FLAGS),
    # Factual lookups that go stale
    re.compile(r"(?:when|what time) (?:is|was|did)", _FLAGS),
    re.compile(r"who (?:is|won|became)", _FLAGS),
    re.compile(r"(?:price|cost) of", _FLAGS),
]

QUOTED_PATTERN = re.compile(r"[\"']([^\"']+)[\"']")
HOURS_KEYWORD_PATTERN = re.compile(r"\b(?:hours|open|opening|closing)\b", _FLAGS)
CATEGORY_PATTERN = re.compile(r"\b(?:restaurant|cafe|store|shop|hotel|bank|gym)\b", _FLAGS)
BUSINESS_QUERY_SUFFIX = " hours location"

# Order matters: the first pattern that matches supplies the query.
QUERY_EXTRACTION_PATTERNS = [
    re.compile(r"search (?:for |the web for |online for )?(.+?)(?:\?|$)", _FLAGS),
    re.compile(r"look up (.+?)(?:\?|$)", _FLAGS),
    re.compile(r"find (?:information|info) (?:on|about) (.+?)(?:\?|$)", _FLAGS),
    re.compile(r"what'?s (?:the latest|happening|new) (?:on|about|with) (.+?)(?:\?|$)", _FLAGS),
    re.compile(r"web search (?:for )?(.+?)(?:\?|$)", _FLAGS),
    re.compile(r"(?:hours|location|address) (?:for|of|at) (.+?)(?:\?|$)", _FLAGS),
    re.compile(r"(?:when|what time) (?:does|do|is) (.+?) (?:open|close)(?:\?|$)", _FLAGS),
]

TRAILING_QUESTION_MARK = re.compile(r"\?$")


def _matches_any(patterns: list[re.Pattern], text: str) -> bool:
    return any(pattern.search(text) for pattern in patterns)


def is_business_query(message: str) -> bool:
    """
    Detect questions about a business: hours, category nouns, location or contact info.

    Args:
        message: User message

    Returns:
        True if any business pattern matches
    """
    if not isinstance(message, str) or not message:
        return False
    return _matches_any(BUSINESS_PATTERNS, message)


def should_perform_web_search(message: str) -> bool:
    """
    Detect explicit search requests and questions that need current data.

    Business queries always qualify.
    """
    if not isinstance(message, str) or not message:
        return False
    if is_business_query(message):
        return True
    return _matches_any(SEARCH_PATTERNS, message)


def extract_search_query(message: str) -> str:
    """
    Pick the text to send to the search backend.

    Precedence:
        1. Quoted text, verbatim
        2. Business query naming a category but no hours keyword: message + " hours location"
        3. First matching phrase-stripping pattern ("search for X" -> "X")
        4. The message without a trailing "?", trimmed

    Args:
        message: User message

    Returns:
        Search query string
    """
    if not isinstance(message, str):
        return ""

    quoted = QUOTED_PATTERN.search(message)
    if quoted:
        return quoted.group(1)

    if is_business_query(message):
        has_hours_keyword = HOURS_KEYWORD_PATTERN.search(message) is not None
        if not has_hours_keyword and CATEGORY_PATTERN.search(message):
            return message.strip() + BUSINESS_QUERY_SUFFIX

    for pattern in QUERY_EXTRACTION_PATTERNS:
        match = pattern.search(message)
        if match:
            return match.group(1).strip()

    return TRAILING_QUESTION_MARK.sub("", message, count=1).strip()
