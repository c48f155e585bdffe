import asyncio
import json

import httpx
import pytest

from assistant_chat.errors import InvalidRequest, UpstreamError
from assistant_chat.services.search_svc import SearchService, clamp_max_results
from tests.conftest import tavily_ok

RESULTS = [
    {"title": f"Title {i}", "url": f"https://ey.com/{i}", "content": f"content {i}"}
    for i in range(12)
]


def sent_body(request):
    return json.loads(request.content)


def test_results_are_normalized(tavily_factory, tavily_requests):
    service = tavily_factory(tavily_ok([
        {"title": "A", "url": "https://a", "content": "from content", "snippet": "ignored"},
        {"title": "B", "url": "https://b", "snippet": "from snippet"},
        {"url": "https://c"},
    ]))
    payload = asyncio.run(service.search("  growth outlook  ", 5, ["imf.org"]))
    assert payload == {
        "query": "growth outlook",
        "include_domains": ["imf.org"],
        "count": 3,
        "results": [
            {"title": "A", "url": "https://a", "snippet": "from content"},
            {"title": "B", "url": "https://b", "snippet": "from snippet"},
            {"title": "", "url": "https://c", "snippet": ""},
        ],
    }
    body = sent_body(tavily_requests[0])
    assert body["query"] == "growth outlook"
    assert body["search_depth"] == "advanced"
    assert body["include_answer"] is False
    assert tavily_requests[0].headers["Authorization"] == "Bearer tvly-test"


def test_results_are_truncated_in_provider_order(tavily_factory):
    service = tavily_factory(tavily_ok(RESULTS))
    payload = asyncio.run(service.search("q", 2, None))
    assert [r["title"] for r in payload["results"]] == ["Title 0", "Title 1"]
    assert payload["count"] == 2


@pytest.mark.parametrize("requested, expected", [(0, 1), (1, 1), (-5, 1), (3, 3), (10, 10), (999, 10)])
def test_max_results_is_clamped(tavily_factory, tavily_requests, requested, expected):
    service = tavily_factory(tavily_ok(RESULTS))
    payload = asyncio.run(service.search("q", requested, []))
    assert len(payload["results"]) <= expected
    assert sent_body(tavily_requests[0])["max_results"] == expected


def test_clamp_handles_odd_values():
    assert clamp_max_results(None) == 3
    assert clamp_max_results("7") == 7
    assert clamp_max_results("lots") == 1
    assert clamp_max_results(4.9) == 4


@pytest.mark.parametrize("query", ["", "   ", None, 42])
def test_empty_query_is_an_error_payload(tavily_factory, tavily_requests, query):
    service = tavily_factory(tavily_ok(RESULTS))
    assert asyncio.run(service.search(query, 3, None)) == {"error": "Query is required"}
    assert tavily_requests == []


def test_execute_raises_invalid_request(tavily_factory):
    service = tavily_factory(tavily_ok(RESULTS))
    with pytest.raises(InvalidRequest):
        asyncio.run(service.execute(" ", 3, None))


def test_provider_error_becomes_error_payload(tavily_factory):
    service = tavily_factory(lambda request: httpx.Response(500, text="internal"))
    payload = asyncio.run(service.search("q", 3, None))
    assert payload == {"error": "Tavily error: 500 internal"}


def test_execute_raises_upstream_error_with_status(tavily_factory):
    service = tavily_factory(lambda request: httpx.Response(429, text="slow down"))
    with pytest.raises(UpstreamError) as excinfo:
        asyncio.run(service.execute("q", 3, None))
    assert excinfo.value.status_code == 429


def test_timeout_becomes_error_payload(tavily_factory):
    def handler(request):
        raise httpx.ReadTimeout("timed out", request=request)

    service = tavily_factory(handler)
    payload = asyncio.run(service.search("q", 3, None))
    assert "timed out" in payload["error"]


def test_missing_api_key_is_error_payload(tavily_requests):
    service = SearchService(api_key="", default_domains=["ey.com"], transport=httpx.MockTransport(tavily_ok([])))
    assert asyncio.run(service.search("q", 3, None)) == {"error": "Tavily API key not configured"}


def test_missing_results_field_yields_empty_list(tavily_factory):
    service = tavily_factory(lambda request: httpx.Response(200, json={"answer": None}))
    payload = asyncio.run(service.search("q", 3, None))
    assert payload["results"] == []
    assert payload["count"] == 0


@pytest.mark.parametrize("include_domains, unrestricted, expected", [
    (None, False, ["ey.com"]),
    (None, True, ["ey.com"]),
    ([], False, ["ey.com"]),
    ([], True, []),
    (["", "  "], True, []),
    ([" imf.org ", 7, "worldbank.org"], False, ["imf.org", "worldbank.org"]),
])
def test_domain_policy(tavily_factory, tavily_requests, include_domains, unrestricted, expected):
    service = tavily_factory(tavily_ok([]), empty_means_unrestricted=unrestricted)
    payload = asyncio.run(service.search("q", 3, include_domains))
    assert payload["include_domains"] == expected
    assert sent_body(tavily_requests[0])["include_domains"] == expected


def test_web_search_tool_reads_arguments(tavily_factory, tavily_requests):
    service = tavily_factory(tavily_ok(RESULTS))
    payload = asyncio.run(service.web_search_tool({"query": "inflation", "max_results": 4}))
    assert payload["count"] == 4
    assert sent_body(tavily_requests[0])["include_domains"] == ["ey.com"]
