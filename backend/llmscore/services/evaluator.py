"""Combine search, content, technical and AI-file signals into one evaluation."""

import logging
from dataclasses import dataclass, field

from llmscore.services.ai_file_prober import FileCheck
from llmscore.services.firecrawl_service import FirecrawlService
from llmscore.services.keyword_generator import KeywordGenerator
from llmscore.services.link_mapper import LinkRecord
from llmscore.services.llm_client import LLMClient
from llmscore.services.scoring import (
    SubScore,
    build_recommendations,
    compute_overall_score,
    score_ai_optimization,
    score_content_quality,
    score_technical_seo,
)
from llmscore.services.search_visibility import SearchVisibilityScorer

logger = logging.getLogger(__name__)


@dataclass
class EvaluationResult:
    """Scores, reasoning and recommendations for one site."""
    overall_score: int
    search_visibility: SubScore
    content_quality: SubScore
    technical_seo: SubScore
    ai_optimization: SubScore
    recommendations: list[str]
    search_performance: dict = field(default_factory=dict)

    def to_dict(self) -> dict:
        return {
            "overall_score": self.overall_score,
            "search_visibility": self.search_visibility.to_dict(),
            "content_quality": self.content_quality.to_dict(),
            "technical_seo": self.technical_seo.to_dict(),
            "ai_optimization": self.ai_optimization.to_dict(),
            "recommendations": list(self.recommendations),
            "search_performance": self.search_performance,
        }


class WebsiteEvaluator:
    """Runs keyword generation, search scoring and the composite rules.

    Clients are passed in so tests can substitute fakes.
    """

    def __init__(
        self,
        crawler: FirecrawlService,
        llm: LLMClient,
        max_content_chars: int = 3000,
    ):
        self.keyword_generator = KeywordGenerator(crawler, llm, max_content_chars)
        self.search_scorer = SearchVisibilityScorer(crawler, llm)

    async def evaluate(
        self,
        url: str,
        domain: str,
        site_map: list[LinkRecord] | None,
        ai_files: list[FileCheck] | None,
    ) -> EvaluationResult:
        """Evaluate a site.

        Args:
            url: Absolute URL of the page to analyze
            domain: Host used to recognize the site in search results
            site_map: Links from the map step, None if not mapped
            ai_files: File probe results, None if not probed
        """
        logger.info(f"Evaluating {url}")

        keyword_set = await self.keyword_generator.generate(url, domain)
        search = await self.search_scorer.score(domain, keyword_set)

        content = score_content_quality(site_map)
        technical = score_technical_seo(site_map)
        ai = score_ai_optimization(ai_files)

        search_score = search.visibility.score
        overall = compute_overall_score(search_score, content.score, technical.score, ai.score)
        recommendations = build_recommendations(
            search_score, content.score, technical.score, ai.score
        )

        logger.info(
            f"Evaluation of {domain}: overall {overall} (search {search_score}, content {content.score}, "
            f"technical {technical.score}, ai {ai.score})"
        )

        return EvaluationResult(
            overall_score=overall,
            search_visibility=search.visibility,
            content_quality=content,
            technical_seo=technical,
            ai_optimization=ai,
            recommendations=recommendations,
            search_performance=search.performance,
        )
