"""Tests for FirecrawlService response handling with a stub SDK client."""

from types import SimpleNamespace

import pytest

from llmscore.services.firecrawl_service import FirecrawlService, MapServiceError


class StubSDK:
    def __init__(self, map_result=None, map_error=None, scrape_result=None, search_result=None):
        self.map_result = map_result
        self.map_error = map_error
        self.scrape_result = scrape_result
        self.search_result = search_result
        self.calls = []

    def map(self, url, **kwargs):
        self.calls.append(("map", url, kwargs))
        if self.map_error:
            raise self.map_error
        return self.map_result

    def scrape(self, url, **kwargs):
        self.calls.append(("scrape", url, kwargs))
        return self.scrape_result

    def search(self, query, **kwargs):
        self.calls.append(("search", query, kwargs))
        return self.search_result


def test_requires_api_key_without_client(settings):
    no_key = settings.model_copy(update={"firecrawl_api_key": None})
    with pytest.raises(ValueError):
        FirecrawlService(no_key)


async def test_map_normalizes_link_shapes(settings):
    sdk = StubSDK(
        map_result=SimpleNamespace(
            links=[
                "https://example.com/plain",
                {"url": "https://example.com/dict", "title": "Dict"},
                SimpleNamespace(url="https://example.com/obj", title="Obj", description="An object"),
            ]
        )
    )

    links = await FirecrawlService(settings, client=sdk).map_website("https://example.com")

    assert links == [
        {"url": "https://example.com/plain", "title": None, "description": None},
        {"url": "https://example.com/dict", "title": "Dict", "description": None},
        {"url": "https://example.com/obj", "title": "Obj", "description": "An object"},
    ]
    _, _, kwargs = sdk.calls[0]
    assert kwargs["limit"] == settings.map_limit
    assert kwargs["sitemap"] == "include"


async def test_map_failure_raises_map_service_error(settings):
    service = FirecrawlService(settings, client=StubSDK(map_error=RuntimeError("boom")))
    with pytest.raises(MapServiceError):
        await service.map_website("https://example.com")


async def test_map_without_link_list_raises(settings):
    service = FirecrawlService(settings, client=StubSDK(map_result=SimpleNamespace(links=None)))
    with pytest.raises(MapServiceError):
        await service.map_website("https://example.com")


async def test_scrape_returns_markdown_or_empty(settings):
    service = FirecrawlService(settings, client=StubSDK(scrape_result=SimpleNamespace(markdown="# Hi")))
    assert await service.scrape_markdown("https://example.com") == "# Hi"

    service = FirecrawlService(settings, client=StubSDK(scrape_result=SimpleNamespace(markdown=None)))
    assert await service.scrape_markdown("https://example.com") == ""


async def test_search_returns_ranked_results(settings):
    sdk = StubSDK(
        search_result=SimpleNamespace(
            web=[
                SimpleNamespace(url="https://a.com", title="A", description="first"),
                {"url": "https://b.com", "title": "B"},
            ]
        )
    )

    results = await FirecrawlService(settings, client=sdk).search("widgets")

    assert [r["url"] for r in results] == ["https://a.com", "https://b.com"]
    assert sdk.calls[0][2]["limit"] == settings.search_limit


async def test_search_without_web_list_returns_none(settings):
    service = FirecrawlService(settings, client=StubSDK(search_result=SimpleNamespace(web=None)))
    assert await service.search("widgets", limit=5) is None
