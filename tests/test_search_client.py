"""
Search client tests. All HTTP traffic goes through httpx.MockTransport; no network.
"""

import asyncio
import json

import httpx
import pytest

from models.errors import AllBackendsFailed, BackendError, InvalidQuery, SearchTimeout
from tools.web.contracts import SearchOptions
from tools.web.search_client import LangSearchClient, SearxngFallbackClient, normalize_results


def _run(coro):
    return asyncio.run(coro)


def _langsearch_items(n):
    return [
        {"title": f"Title {i}", "url": f"https://example.com/{i}", "snippet": f"Snippet {i}"}
        for i in range(n)
    ]


# -------------------------------------------------------------------
# Normalization
# -------------------------------------------------------------------


def test_normalize_results_fallbacks_and_cap():
    raw = [
        {"title": "A", "url": "https://a", "description": "from description"},
        {"name": "B", "link": "https://b", "content": "from content", "engine": "duckduckgo"},
        {},
        {"title": "D"},
    ]
    results = normalize_results(raw, max_results=3)

    assert len(results) == 3
    assert results[0].content == "from description"
    assert results[1].title == "B"
    assert results[1].url == "https://b"
    assert results[1].source == "duckduckgo"
    assert results[2].title == ""
    assert results[2].url == ""
    assert results[2].content == ""
    assert results[2].source == "web"


def test_snippet_preferred_over_description():
    results = normalize_results([{"snippet": "s", "description": "d", "content": "c"}], max_results=5)
    assert results[0].content == "s"


def test_malformed_records_do_not_use_cap_slots():
    raw = ["junk", None, {"title": "A", "url": "https://a"}, 42, {"title": "B", "url": "https://b"}]
    results = normalize_results(raw, max_results=2)
    assert [r.title for r in results] == ["A", "B"]


# -------------------------------------------------------------------
# Hosted endpoint
# -------------------------------------------------------------------


def test_langsearch_success_caps_results_and_sends_key():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["headers"] = request.headers
        seen["body"] = json.loads(request.content)
        return httpx.Response(200, json={"data": _langsearch_items(6)})

    client = LangSearchClient(api_key="sk-test", transport=httpx.MockTransport(handler))
    outcome = _run(client.search_web("css grid", SearchOptions(max_results=3, timeout_ms=1000)))

    assert outcome.backend == "LangSearch API"
    assert outcome.query == "css grid"
    assert outcome.total_results == 3
    assert [r.title for r in outcome.results] == ["Title 0", "Title 1", "Title 2"]
    assert seen["body"] == {"query": "css grid", "num": 3}
    assert seen["headers"]["x-api-key"] == "sk-test"
    assert outcome.search_time_ms >= 0


def test_langsearch_web_pages_shape():
    payload = {
        "data": {
            "webPages": {
                "value": [{"name": "MDN Flexbox", "url": "https://developer.mozilla.org", "snippet": "Guide"}]
            }
        }
    }
    client = LangSearchClient(
        api_key="sk-test", transport=httpx.MockTransport(lambda r: httpx.Response(200, json=payload))
    )
    outcome = _run(client.search_web("flexbox"))

    assert outcome.total_results == 1
    assert outcome.results[0].title == "MDN Flexbox"
    assert outcome.results[0].content == "Guide"


def test_langsearch_empty_results_is_valid_outcome():
    client = LangSearchClient(
        api_key="sk-test", transport=httpx.MockTransport(lambda r: httpx.Response(200, json={"data": []}))
    )
    outcome = _run(client.search_web("nothing"))
    assert outcome.results == ()


def test_langsearch_non_success_status_raises_backend_error():
    client = LangSearchClient(
        api_key="sk-bad",
        transport=httpx.MockTransport(lambda r: httpx.Response(401, text="invalid api key")),
    )
    with pytest.raises(BackendError) as exc_info:
        _run(client.search_web("anything"))

    assert exc_info.value.status == 401
    assert exc_info.value.body == "invalid api key"


def test_langsearch_transport_timeout_raises_search_timeout():
    def handler(request):
        raise httpx.ReadTimeout("slow", request=request)

    client = LangSearchClient(api_key="sk-test", transport=httpx.MockTransport(handler))
    with pytest.raises(SearchTimeout):
        _run(client.search_web("slow query", SearchOptions(timeout_ms=100)))


def test_langsearch_deadline_cancels_slow_request():
    async def handler(request):
        await asyncio.sleep(1)
        return httpx.Response(200, json={"data": _langsearch_items(1)})

    client = LangSearchClient(api_key="sk-test", transport=httpx.MockTransport(handler))
    with pytest.raises(SearchTimeout):
        _run(client.search_web("slow query", SearchOptions(timeout_ms=50)))


@pytest.mark.parametrize("query", ["", "   ", None, 123])
def test_invalid_query_rejected(query):
    client = LangSearchClient(
        api_key="sk-test", transport=httpx.MockTransport(lambda r: httpx.Response(200, json={}))
    )
    with pytest.raises(InvalidQuery):
        _run(client.search_web(query))


def test_langsearch_requires_key():
    with pytest.raises(ValueError):
        LangSearchClient(api_key="")


# -------------------------------------------------------------------
# Multi-endpoint fallback
# -------------------------------------------------------------------

INSTANCES = ["https://one.example", "https://two.example", "https://three.example", "https://four.example"]


def test_fallback_returns_first_instance_with_results():
    calls = []

    def handler(request: httpx.Request) -> httpx.Response:
        host = request.url.host
        calls.append(host)
        if host == "one.example":
            raise httpx.ConnectError("refused", request=request)
        if host == "two.example":
            return httpx.Response(500, text="boom")
        return httpx.Response(
            200,
            json={
                "results": [
                    {"title": "R1", "url": "https://r1", "content": "c1", "engine": "bing"},
                    {"title": "R2", "url": "https://r2", "content": "c2", "engine": "google"},
                ]
            },
        )

    client = SearxngFallbackClient(INSTANCES, transport=httpx.MockTransport(handler))
    outcome = _run(client.search_web("htmx", SearchOptions(max_results=5, timeout_ms=1000)))

    assert outcome.backend == "https://three.example"
    assert outcome.total_results == 2
    assert calls == ["one.example", "two.example", "three.example"]


def test_fallback_sends_json_format_query():
    seen = []

    def handler(request):
        seen.append(request.url)
        return httpx.Response(200, json={"results": [{"title": "R", "url": "https://r"}]})

    client = SearxngFallbackClient(["https://one.example/"], transport=httpx.MockTransport(handler))
    _run(client.search_web("vue 3"))

    assert seen[0].path == "/search"
    assert seen[0].params["q"] == "vue 3"
    assert seen[0].params["format"] == "json"


def test_fallback_skips_instances_with_zero_results():
    def handler(request):
        if request.url.host == "one.example":
            return httpx.Response(200, json={"results": []})
        return httpx.Response(200, json={"results": [{"title": "R", "url": "https://r"}]})

    client = SearxngFallbackClient(INSTANCES[:2], transport=httpx.MockTransport(handler))
    outcome = _run(client.search_web("query"))
    assert outcome.backend == "https://two.example"


def test_fallback_timeout_moves_to_next_instance():
    async def handler(request):
        if request.url.host == "one.example":
            await asyncio.sleep(1)
        return httpx.Response(200, json={"results": [{"title": "R", "url": "https://r"}]})

    client = SearxngFallbackClient(INSTANCES[:2], transport=httpx.MockTransport(handler))
    outcome = _run(client.search_web("query", SearchOptions(timeout_ms=50)))
    assert outcome.backend == "https://two.example"


def test_fallback_all_failed_lists_every_instance():
    def handler(request):
        if request.url.host == "one.example":
            return httpx.Response(503, text="unavailable")
        return httpx.Response(200, json={"results": []})

    client = SearxngFallbackClient(INSTANCES[:2], transport=httpx.MockTransport(handler))
    with pytest.raises(AllBackendsFailed) as exc_info:
        _run(client.search_web("query"))

    errors = exc_info.value.errors
    assert [endpoint for endpoint, _ in errors] == ["https://one.example", "https://two.example"]
    assert errors[1][1] == "no results"


def test_fallback_caps_results():
    items = [{"title": f"R{i}", "url": f"https://r{i}"} for i in range(10)]
    client = SearxngFallbackClient(
        INSTANCES[:1], transport=httpx.MockTransport(lambda r: httpx.Response(200, json={"results": items}))
    )
    outcome = _run(client.search_web("query", SearchOptions(max_results=4)))
    assert outcome.total_results == 4


def test_fallback_requires_instances():
    with pytest.raises(ValueError):
        SearxngFallbackClient([])


def test_search_options_validation():
    with pytest.raises(ValueError):
        SearchOptions(max_results=0)
    with pytest.raises(ValueError):
        SearchOptions(timeout_ms=0)


@pytest.mark.parametrize("bad_results", [{"oops": 1}, 7, "text", None])
def test_fallback_skips_instance_with_malformed_results(bad_results):
    calls = []

    def handler(request):
        calls.append(request.url.host)
        if request.url.host == "one.example":
            return httpx.Response(200, json={"results": bad_results})
        return httpx.Response(200, json={"results": [{"title": "R", "url": "https://r"}]})

    client = SearxngFallbackClient(INSTANCES[:2], transport=httpx.MockTransport(handler))
    outcome = _run(client.search_web("query"))

    assert calls == ["one.example", "two.example"]
    assert outcome.backend == "https://two.example"
    assert outcome.total_results == 1
