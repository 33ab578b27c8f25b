"""Measure how often and how high a domain ranks for its own keywords."""

import logging
import re
from dataclasses import dataclass, field

from llmscore.prompts import SEARCH_ANALYSIS_PROMPT
from llmscore.services.firecrawl_service import FirecrawlService
from llmscore.services.keyword_generator import KEYWORD_SOURCE_CONTENT, KeywordSet
from llmscore.services.llm_client import LLMClient
from llmscore.services.scoring import SubScore, round_half_up

logger = logging.getLogger(__name__)

SEARCH_RESULT_LIMIT = 20
UNRANKED_POSITION = 20
DEFAULT_SEARCH_SCORE = 5
LIMITED_ANALYSIS_REASONING = "Limited search visibility analysis available."
NARRATIVE_UNAVAILABLE = "Additional AI analysis not available."

_SCHEME = re.compile(r"^https?://", re.IGNORECASE)


def result_host(url: str) -> str:
    """Bare host of a search result URL (no scheme, credentials, port or path)."""
    remainder = _SCHEME.sub("", url.strip())
    host = re.split(r"[/?#]", remainder, maxsplit=1)[0]
    host = host.rsplit("@", 1)[-1].split(":", 1)[0]
    return host.lower()


def domain_matches(result_url: str, domain: str) -> bool:
    """Whether a search result belongs to the target domain.

    Substring match in both directions: the result URL contains the domain,
    or the domain contains the result's host (``www.example.com`` matches a
    result on ``example.com``). Unrelated hosts that happen to share a
    substring also match.
    """
    if not result_url or not domain:
        return False
    domain = domain.lower()
    if domain in result_url.lower():
        return True
    host = result_host(result_url)
    return bool(host) and host in domain


def find_rank(results: list[dict], domain: str) -> int | None:
    """1-based rank of the first result on the domain, or None."""
    for position, result in enumerate(results, start=1):
        if domain_matches(result.get("url") or "", domain):
            return position
    return None


def score_search_visibility(
    appearance_rate: float,
    top10_rate: float,
    average_position: float,
) -> int:
    """Map aggregate search stats to a 0-10 score. First matching tier wins."""
    if appearance_rate >= 0.8 and top10_rate >= 0.6 and average_position <= 5:
        return 9
    if appearance_rate >= 0.6 and top10_rate >= 0.4 and average_position <= 10:
        return 7
    if appearance_rate >= 0.4 and average_position <= 15:
        return 6
    if appearance_rate >= 0.2:
        return 5
    return 3


def describe_search_visibility(
    score: int,
    appearance_rate: float,
    top10_rate: float,
    average_position: float,
) -> str:
    appearance = round_half_up(appearance_rate * 100)
    top10 = round_half_up(top10_rate * 100)
    position = f"{average_position:.1f}"

    if score == 9:
        return (
            f"Excellent search visibility: Appears in {appearance}% of searches, "
            f"{top10}% in top 10, average position {position}."
        )
    if score == 7:
        return (
            f"Good search visibility: Appears in {appearance}% of searches, "
            f"{top10}% in top 10, average position {position}."
        )
    if score == 6:
        return f"Moderate search visibility: Appears in {appearance}% of searches, average position {position}."
    if score == 5:
        return f"Fair search visibility: Appears in {appearance}% of searches, average position {position}."
    return f"Poor search visibility: Rarely appears in search results, average position {position}."


@dataclass
class SearchStats:
    """Running totals across the keyword searches."""
    total_searches: int = 0
    appearances: int = 0
    top10_appearances: int = 0
    position_sum: int = 0
    insights: list[str] = field(default_factory=list)

    def record(self, keyword: str, rank: int | None) -> None:
        self.total_searches += 1
        if rank is None:
            self.insights.append(f"{keyword}: Not found in top {SEARCH_RESULT_LIMIT}")
            return
        self.appearances += 1
        self.position_sum += rank
        if rank <= 10:
            self.top10_appearances += 1
        self.insights.append(f"{keyword}: Position {rank}")

    @property
    def appearance_rate(self) -> float:
        return self.appearances / self.total_searches if self.total_searches else 0.0

    @property
    def top10_rate(self) -> float:
        return self.top10_appearances / self.total_searches if self.total_searches else 0.0

    @property
    def average_position(self) -> float:
        """Mean rank over appearances; 0 when the domain never appeared."""
        return self.position_sum / self.appearances if self.appearances else 0.0

    @property
    def scoring_position(self) -> float:
        return self.average_position if self.appearances else UNRANKED_POSITION


@dataclass
class SearchVisibilityResult:
    visibility: SubScore
    performance: dict


class SearchVisibilityScorer:
    """Searches each keyword in order and scores the domain's placement."""

    def __init__(self, crawler: FirecrawlService, llm: LLMClient):
        self.crawler = crawler
        self.llm = llm

    async def collect(self, domain: str, keywords: list[str]) -> SearchStats:
        """Search keywords sequentially so insights keep keyword order."""
        stats = SearchStats()
        for keyword in keywords:
            try:
                results = await self.crawler.search(keyword, limit=SEARCH_RESULT_LIMIT)
            except Exception as e:
                logger.error(f'Error searching for keyword "{keyword}": {e}')
                continue

            if results is None:
                logger.warning(f'Search for "{keyword}" returned no web results list')
                continue

            stats.record(keyword, find_rank(results, domain))
        return stats

    async def narrate(self, domain: str, keyword_set: KeywordSet, stats: SearchStats) -> str:
        """Ask the LLM for a short commentary. Informational only."""
        prompt = SEARCH_ANALYSIS_PROMPT.format(
            domain=domain,
            keyword_count=len(keyword_set.keywords),
            keyword_origin=(
                "actual website content"
                if keyword_set.source == KEYWORD_SOURCE_CONTENT
                else "domain analysis"
            ),
            appearance_percent=round_half_up(stats.appearance_rate * 100),
            top10_appearances=stats.top10_appearances,
            average_position=f"{stats.average_position:.1f}" if stats.appearances else "N/A",
        )
        try:
            return await self.llm.complete(prompt, temperature=0.3, max_tokens=300)
        except Exception as e:
            logger.error(f"Error getting search analysis narrative for {domain}: {e}")
            return NARRATIVE_UNAVAILABLE

    async def score(self, domain: str, keyword_set: KeywordSet) -> SearchVisibilityResult:
        stats = await self.collect(domain, keyword_set.keywords)

        if stats.total_searches > 0:
            score = score_search_visibility(
                stats.appearance_rate, stats.top10_rate, stats.scoring_position
            )
            reasoning = describe_search_visibility(
                score, stats.appearance_rate, stats.top10_rate, stats.scoring_position
            )
        else:
            score = DEFAULT_SEARCH_SCORE
            reasoning = LIMITED_ANALYSIS_REASONING

        narrative = await self.narrate(domain, keyword_set, stats)
        logger.info(
            f"Search visibility for {domain}: score {score}, "
            f"{stats.appearances}/{stats.total_searches} keywords ranked"
        )

        performance = {
            "keywords_analyzed": len(keyword_set.keywords),
            "keywords": list(keyword_set.keywords),
            "keyword_source": keyword_set.source,
            "total_searches": stats.total_searches,
            "appearance_rate": stats.appearance_rate,
            "top10_appearances": stats.top10_appearances,
            "average_position": stats.average_position,
            "search_insights": list(stats.insights),
        }
        return SearchVisibilityResult(
            visibility=SubScore(score=score, reasoning=f"{reasoning}\n\n{narrative}"),
            performance=performance,
        )
