"""Map, scrape and search through the Firecrawl API."""

import asyncio
import logging
from typing import Any

from firecrawl import Firecrawl

from llmscore.config import Settings

logger = logging.getLogger(__name__)


class MapServiceError(Exception):
    """The map endpoint failed or returned no link list."""


class FirecrawlService:
    """Thin async wrapper around the Firecrawl SDK.

    The SDK is synchronous, so every call runs in a worker thread to keep
    the event loop free.
    """

    def __init__(self, settings: Settings, client: Any | None = None):
        """Initialize with settings.

        Args:
            settings: Application settings containing the Firecrawl API key
            client: Pre-built SDK client (tests pass a fake here)
        """
        if client is None:
            if not settings.firecrawl_api_key:
                raise ValueError("FIRECRAWL_API_KEY is required")
            client = Firecrawl(api_key=settings.firecrawl_api_key)

        self.client = client
        self.map_limit = settings.map_limit
        self.search_limit = settings.search_limit
        self.timeout_ms = settings.firecrawl_timeout_ms

    async def map_website(self, url: str) -> list[dict[str, Any]]:
        """Enumerate URLs on a site via the /map endpoint.

        Returns:
            List of ``{url, title, description}`` dicts

        Raises:
            MapServiceError: If the call fails or no link list comes back
        """
        logger.info(f"Mapping website URLs: {url}")

        try:
            result = await asyncio.to_thread(
                self.client.map,
                url,
                limit=self.map_limit,
                sitemap="include",
                timeout=self.timeout_ms,
            )
        except Exception as e:
            logger.error(f"Error mapping {url}: {e}")
            raise MapServiceError(str(e)) from e

        raw_links = getattr(result, "links", None) if result is not None else None
        if not isinstance(raw_links, list):
            logger.error(f"Map of {url} returned no link list")
            raise MapServiceError("Map response did not contain a link list")

        links = []
        for link in raw_links:
            if isinstance(link, str):
                links.append({"url": link, "title": None, "description": None})
            elif isinstance(link, dict):
                links.append({
                    "url": link.get("url") or "",
                    "title": link.get("title"),
                    "description": link.get("description"),
                })
            else:
                links.append({
                    "url": getattr(link, "url", "") or "",
                    "title": getattr(link, "title", None),
                    "description": getattr(link, "description", None),
                })

        logger.info(f"Map completed: {len(links)} URLs discovered")
        return links

    async def scrape_markdown(self, url: str) -> str:
        """Scrape a page's main content as markdown. Empty string if none."""
        logger.info(f"Scraping page content: {url}")

        doc = await asyncio.to_thread(
            self.client.scrape,
            url,
            formats=["markdown"],
            only_main_content=True,
            timeout=self.timeout_ms,
        )
        return getattr(doc, "markdown", None) or ""

    async def search(self, query: str, limit: int | None = None) -> list[dict[str, Any]] | None:
        """Run a web search.

        Returns:
            Ranked ``{url, title, description}`` dicts, or None when the
            response carried no web results list
        """
        result = await asyncio.to_thread(
            self.client.search,
            query,
            limit=limit or self.search_limit,
            timeout=self.timeout_ms,
        )

        web = getattr(result, "web", None) if result is not None else None
        if web is None:
            return None

        results = []
        for item in web:
            if isinstance(item, dict):
                results.append({
                    "url": item.get("url") or "",
                    "title": item.get("title"),
                    "description": item.get("description"),
                })
                continue
            # Plain web hits carry url directly, scraped hits keep it in metadata
            meta = getattr(item, "metadata", None)
            url = getattr(item, "url", None) or getattr(meta, "url", None) or getattr(meta, "source_url", "") or ""
            results.append({
                "url": url,
                "title": getattr(item, "title", None) or getattr(meta, "title", None),
                "description": getattr(item, "description", None) or getattr(meta, "description", None),
            })
        return results
