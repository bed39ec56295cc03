import pytest

from orchestrator.response_validator import ResponseValidator, is_uncertain_response


@pytest.mark.parametrize(
    "text",
    [
        "I don't have access to real-time information about that.",
        "I’m not sure which version shipped last.",
        "I do not have information on events after my cutoff.",
        "I can't provide live prices.",
        "I lack the information needed to answer.",
        "My knowledge cuts off in 2023.",
        "I would need to search the web for that.",
        "Unfortunately, I cannot browse.",
        "As an AI language model, I don't have opinions.",
        "I apologize, but I cannot verify this.",
        "Without current information I can only guess.",
        "I would recommend checking the official site.",
    ],
)
def test_hedging_detected(text):
    assert is_uncertain_response(text) is True


@pytest.mark.parametrize(
    "text",
    [
        "Flexbox lays out items along a main axis and a cross axis.",
        "Here is a React component:\n\n```jsx\nexport const Modal = () => null\n```",
    ],
)
def test_confident_answers_pass(text):
    assert is_uncertain_response(text) is False


@pytest.mark.parametrize("value", [None, "", 42, ["I don't know"], {"text": "I'm not sure"}])
def test_non_string_or_empty_is_not_uncertain(value):
    assert is_uncertain_response(value) is False


def test_validator_reports_matched_phrase():
    validator = ResponseValidator()
    text = "Sorry, I don't have access to real-time information."
    assert validator.needs_rescue(text) is True
    assert validator.matched_phrase(text) == "I don't have"


def test_validator_without_match():
    validator = ResponseValidator()
    assert validator.needs_rescue("Use gap instead of margins.") is False
    assert validator.matched_phrase("Use gap instead of margins.") is None
