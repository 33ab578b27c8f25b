"""Site link mapping and HTML-page vs asset classification."""

import logging
import re
from dataclasses import dataclass
from typing import Any

from llmscore.services.firecrawl_service import FirecrawlService

logger = logging.getLogger(__name__)

ASSET_EXTENSIONS = (
    ".txt", ".md", ".css", ".js", ".json", ".xml", ".csv",
    ".png", ".jpg", ".jpeg", ".gif", ".svg", ".ico", ".webp",
    ".mp3", ".mp4", ".pdf", ".zip", ".exe", ".bin",
)

ASSET_PATH_PATTERN = re.compile(
    r"/(assets?|static|media|images?|css|js|files?|downloads?)/",
    re.IGNORECASE,
)


@dataclass
class LinkRecord:
    """A URL discovered on a site, with whatever metadata the map returned."""
    url: str
    title: str | None = None
    description: str | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "LinkRecord":
        return cls(
            url=data.get("url") or "",
            title=data.get("title") or None,
            description=data.get("description") or None,
        )

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"url": self.url}
        if self.title:
            data["title"] = self.title
        if self.description:
            data["description"] = self.description
        return data


@dataclass
class MapSummary:
    """Metadata coverage over the HTML pages of a map."""
    total_links: int
    html_pages: int
    missing_titles: int
    missing_descriptions: int


@dataclass
class MapResult:
    links: list[LinkRecord]
    summary: MapSummary


def is_asset_url(url: str) -> bool:
    """Static files and asset directories don't need page titles."""
    lowered = url.lower()
    if any(lowered.endswith(ext) for ext in ASSET_EXTENSIONS):
        return True
    return bool(ASSET_PATH_PATTERN.search(url))


def html_pages(links: list[LinkRecord]) -> list[LinkRecord]:
    """Links eligible for title/description evaluation."""
    return [link for link in links if not is_asset_url(link.url)]


def summarize_links(links: list[LinkRecord]) -> MapSummary:
    pages = html_pages(links)
    return MapSummary(
        total_links=len(links),
        html_pages=len(pages),
        missing_titles=sum(1 for page in pages if not page.title),
        missing_descriptions=sum(1 for page in pages if not page.description),
    )


class LinkMapper:
    """Enumerates a site's URLs through the crawl service."""

    def __init__(self, crawler: FirecrawlService):
        self.crawler = crawler

    async def map(self, url: str) -> MapResult:
        """Map a site. MapServiceError propagates to the caller unretried."""
        raw_links = await self.crawler.map_website(url)
        links = [LinkRecord.from_dict(link) for link in raw_links]
        summary = summarize_links(links)
        logger.info(
            f"Mapped {url}: {summary.total_links} links, {summary.html_pages} HTML pages, "
            f"{summary.missing_titles} missing titles, {summary.missing_descriptions} missing descriptions"
        )
        return MapResult(links=links, summary=summary)
