import pytest

from tools.web.intent import extract_search_query, is_business_query, should_perform_web_search


@pytest.mark.parametrize(
    "message",
    [
        "What are the hours for Starbucks?",
        "opening at Walmart tomorrow?",
        "Is the library open on Sunday?",
        "When does the pharmacy open?",
        "Any good restaurant around here?",
        "Find a gym near me",
        "phone number for Joe's Pizza",
        "menu at Olive Garden",
        "What are Starbucks hours on Main Street?",
        "What are your business hours?",
        "hours of operation please",
    ],
)
def test_business_queries_detected(message):
    assert is_business_query(message) is True


@pytest.mark.parametrize(
    "message",
    [
        "Explain CSS flexbox",
        "How do I center a div?",
        "Write a React component for a modal",
    ],
)
def test_non_business_queries(message):
    assert is_business_query(message) is False


def test_hours_followed_by_capitalized_token():
    for word in ("hours", "open", "opening", "closing", "close"):
        assert is_business_query(f"{word} for Target") is True


def test_business_query_implies_search():
    assert should_perform_web_search("Is the bank open today?") is True


@pytest.mark.parametrize(
    "message",
    [
        "search for python 3.13 release notes",
        "Can you look up the population of Lagos?",
        "find info about the James Webb telescope",
        "web search fastapi lifespan",
        "google the best CSS frameworks",
        "What's the latest in frontend tooling?",
        "current news on the election",
        "latest version of React",
        "What happened today?",
        "Tesla stock price",
        "weather in Paris",
        "score of the game last night",
        "When was HTML5 released?",
        "Who won the World Cup?",
        "price of a Raspberry Pi",
    ],
)
def test_search_requests_detected(message):
    assert should_perform_web_search(message) is True


def test_plain_design_question_does_not_search():
    assert should_perform_web_search("Explain CSS flexbox") is False


def test_quoted_text_takes_precedence():
    assert extract_search_query('search for "exact phrase" please') == "exact phrase"
    assert extract_search_query("look up 'grid layout'") == "grid layout"


def test_business_category_without_hours_gets_suffix():
    assert (
        extract_search_query("  Best hotel in Lisbon  ")
        == "Best hotel in Lisbon hours location"
    )


def test_business_query_with_hours_keyword_is_not_suffixed():
    assert extract_search_query("What are the hours for Starbucks?") == "Starbucks"


@pytest.mark.parametrize(
    "message, expected",
    [
        ("search for tailwind v4 changes?", "tailwind v4 changes"),
        ("search the web for svelte runes", "svelte runes"),
        ("Please look up the Node LTS schedule", "the Node LTS schedule"),
        ("find information about WebGPU support?", "WebGPU support"),
        ("what's new with Vite", "Vite"),
        ("web search for htmx examples", "htmx examples"),
        ("address of Blue Bottle Coffee?", "Blue Bottle Coffee"),
        ("when does Costco open?", "Costco"),
    ],
)
def test_phrase_stripping(message, expected):
    assert extract_search_query(message) == expected


def test_fallback_strips_single_trailing_question_mark():
    assert extract_search_query("  Who is the CEO of Vercel?") == "Who is the CEO of Vercel"
    assert extract_search_query("Why??") == "Why?"


def test_unrecognized_diner_falls_through():
    # "diner" is not a recognized category noun
    message = "What are Joe's Diner hours?"
    assert is_business_query(message) is True
    assert extract_search_query(message) == "What are Joe's Diner hours"


def test_classification_is_idempotent():
    message = "What are Starbucks hours on Main Street?"
    first = (is_business_query(message), should_perform_web_search(message), extract_search_query(message))
    second = (is_business_query(message), should_perform_web_search(message), extract_search_query(message))
    assert first == second


def test_non_string_inputs_are_safe():
    assert is_business_query(None) is False
    assert should_perform_web_search("") is False
    assert extract_search_query(None) == ""
