"""Generate candidate search keywords for a site with an LLM."""

import logging
import re
from dataclasses import dataclass

from llmscore.prompts import CONTENT_KEYWORD_PROMPT, DOMAIN_KEYWORD_PROMPT
from llmscore.services.firecrawl_service import FirecrawlService
from llmscore.services.llm_client import LLMClient

logger = logging.getLogger(__name__)

MAX_KEYWORDS = 10
KEYWORD_SOURCE_CONTENT = "content_analysis"
KEYWORD_SOURCE_DOMAIN = "domain_analysis"

_QUOTE_CHARS = re.compile(r"[\"“”]")
_SEPARATORS = re.compile(r"[,\n\r]")


@dataclass
class KeywordSet:
    keywords: list[str]
    source: str  # content_analysis or domain_analysis


def parse_keywords(text: str | None, limit: int = MAX_KEYWORDS) -> list[str]:
    """Parse an LLM's comma-separated keyword list.

    Quote characters are dropped, commas and line breaks both separate
    items, blanks are skipped and the result is cut to `limit`. Short or
    malformed output just yields fewer keywords.
    """
    if not text:
        return []
    cleaned = _QUOTE_CHARS.sub("", text)
    keywords = [part.strip() for part in _SEPARATORS.split(cleaned)]
    return [keyword for keyword in keywords if keyword][:limit]


class KeywordGenerator:
    """Summarizes a site into keywords, from its content when available."""

    def __init__(
        self,
        crawler: FirecrawlService,
        llm: LLMClient,
        max_content_chars: int = 3000,
    ):
        self.crawler = crawler
        self.llm = llm
        self.max_content_chars = max_content_chars

    async def fetch_content(self, url: str) -> str:
        """First `max_content_chars` of the page's main content, or ""."""
        try:
            markdown = await self.crawler.scrape_markdown(url)
        except Exception as e:
            logger.error(f"Error scraping website content for {url}: {e}")
            return ""
        return markdown[: self.max_content_chars]

    def build_prompt(self, content: str, domain: str) -> str:
        if content:
            return CONTENT_KEYWORD_PROMPT.format(content=content)
        return DOMAIN_KEYWORD_PROMPT.format(domain=domain)

    async def generate(self, url: str, domain: str) -> KeywordSet:
        """Generate up to ten keywords for the site at `url`."""
        content = await self.fetch_content(url)
        source = KEYWORD_SOURCE_CONTENT if content else KEYWORD_SOURCE_DOMAIN
        prompt = self.build_prompt(content, domain)

        try:
            text = await self.llm.complete(prompt, temperature=0.7, max_tokens=200)
        except Exception as e:
            logger.error(f"Keyword generation failed for {domain}: {e}")
            return KeywordSet(keywords=[], source=source)

        keywords = parse_keywords(text)
        logger.info(f"Generated {len(keywords)} keywords for {domain} from {source}: {keywords}")
        return KeywordSet(keywords=keywords, source=source)
