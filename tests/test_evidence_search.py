from __future__ import annotations

from unittest.mock import AsyncMock, patch

import httpx
import pytest

from config.settings import settings
from conftest import google_items
from core import google_search
from core.evidence_search import MAX_EVIDENCE, clean_items, search_evidence
from util.errors import SearchTransportError


async def test_search_uses_composed_query_and_cleans_items(complete_params):
    search = AsyncMock(return_value=google_items())

    items = await search_evidence(complete_params, search=search)

    search.assert_awaited_once_with("SC Hindu scholarships in Karnataka for Engineering")
    assert [i.title for i in items] == ["SC Scholarship 2024", "Karnataka scheme"]
    assert items[0].snippet == "Post matric scheme"
    assert items[1].snippet is None


def test_clean_items_caps_results():
    raw = [{"title": f"t{i}", "link": f"https://x/{i}"} for i in range(25)]
    items = clean_items(raw)
    assert len(items) == MAX_EVIDENCE
    assert items[0].title == "t0"
    assert items[-1].title == "t9"


async def test_malformed_item_is_dropped_without_losing_the_rest(complete_params):
    search = AsyncMock(
        return_value=[
            {"title": "Good", "link": "https://good"},
            {"title": 2024, "link": "https://bad"},
            {"title": "Bad link", "link": ["https://x"]},
            {"title": "Odd snippet", "link": "https://odd", "snippet": 42},
        ]
    )

    items = await search_evidence(complete_params, search=search)

    assert [i.title for i in items] == ["Good", "Odd snippet"]
    assert items[1].snippet is None


@pytest.mark.parametrize(
    "error",
    [SearchTransportError("quota exceeded"), httpx.ConnectError("refused"), ValueError("odd")],
)
async def test_search_failures_degrade_to_empty(complete_params, error):
    search = AsyncMock(side_effect=error)
    assert await search_evidence(complete_params, search=search) == []


async def test_non_list_result_degrades_to_empty(complete_params):
    search = AsyncMock(return_value=None)
    assert await search_evidence(complete_params, search=search) == []


def _client_with(handler):
    real = httpx.AsyncClient

    def factory(*args, **kwargs):
        kwargs["transport"] = httpx.MockTransport(handler)
        return real(*args, **kwargs)

    return factory


async def test_google_search_sends_regional_params_and_returns_items():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen.update(dict(request.url.params))
        return httpx.Response(200, json={"items": google_items()})

    with (
        patch.object(settings, "GOOGLE_SEARCH_API_KEY", "key"),
        patch.object(settings, "GOOGLE_CSE_ID", "cx"),
        patch("core.google_search.httpx.AsyncClient", new=_client_with(handler)),
    ):
        items = await google_search.search("SC Hindu scholarships", num=10)

    assert len(items) == 4
    assert seen["q"] == "SC Hindu scholarships"
    assert seen["num"] == "10"
    assert seen["gl"] == "in"
    assert seen["cr"] == "countryIN"
    assert seen["sort"] == "date"


async def test_google_search_raises_transport_error_on_quota():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(429, json={"error": {"message": "Quota exceeded"}})

    with (
        patch.object(settings, "GOOGLE_SEARCH_API_KEY", "key"),
        patch.object(settings, "GOOGLE_CSE_ID", "cx"),
        patch("core.google_search.httpx.AsyncClient", new=_client_with(handler)),
    ):
        with pytest.raises(SearchTransportError, match="Quota exceeded"):
            await google_search.search("q")


async def test_google_search_without_credentials_raises():
    with patch.object(settings, "GOOGLE_SEARCH_API_KEY", ""):
        with pytest.raises(SearchTransportError):
            await google_search.search("q")


async def test_google_search_empty_items():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"searchInformation": {"totalResults": "0"}})

    with (
        patch.object(settings, "GOOGLE_SEARCH_API_KEY", "key"),
        patch.object(settings, "GOOGLE_CSE_ID", "cx"),
        patch("core.google_search.httpx.AsyncClient", new=_client_with(handler)),
    ):
        assert await google_search.search("q") == []
