"""Sub-score rules and the weighted overall score."""

import math
from dataclasses import dataclass

from llmscore.services.ai_file_prober import FileCheck
from llmscore.services.link_mapper import LinkRecord, html_pages

SCORE_WEIGHTS = {
    "search": 0.4,
    "content": 0.3,
    "technical": 0.2,
    "ai": 0.1,
}

RECOMMENDATION_THRESHOLD = 7

SEARCH_RECOMMENDATION = "Improve AI search visibility by optimizing for semantic search and AI discovery"
CONTENT_RECOMMENDATION = "Add comprehensive titles and meta descriptions to all pages"
TECHNICAL_RECOMMENDATION = "Implement proper technical SEO foundations and content structure"
AI_RECOMMENDATION = "Add AI optimization files (/llms.txt, /llm.txt, /ai.txt, etc.) for better AI compatibility"
ALL_GOOD_RECOMMENDATION = "Excellent optimization! Continue monitoring and maintaining high standards."


@dataclass
class SubScore:
    score: int
    reasoning: str

    def to_dict(self) -> dict:
        return {"score": self.score, "reasoning": self.reasoning}


def round_half_up(value: float) -> int:
    """Round .5 upwards, unlike Python's banker's rounding."""
    return math.floor(value + 0.5)


def score_content_quality(site_map: list[LinkRecord] | None) -> SubScore:
    """Title/description coverage across HTML pages."""
    if not site_map:
        return SubScore(5, "Moderate content structure detected.")

    pages = html_pages(site_map)
    if not pages:
        return SubScore(7, "No HTML pages detected to evaluate for titles and descriptions.")

    title_ratio = sum(1 for page in pages if page.title) / len(pages)
    desc_ratio = sum(1 for page in pages if page.description) / len(pages)

    if title_ratio > 0.8 and desc_ratio > 0.8:
        return SubScore(9, "Excellent content structure with comprehensive titles and descriptions on HTML pages.")
    if title_ratio > 0.6 and desc_ratio > 0.6:
        return SubScore(7, "Good content structure with most HTML pages having titles and descriptions.")
    if title_ratio > 0.4 and desc_ratio > 0.4:
        return SubScore(6, "Moderate content structure, some HTML pages missing metadata.")
    return SubScore(4, "Poor content structure, many HTML pages missing essential metadata.")


def score_technical_seo(site_map: list[LinkRecord] | None) -> SubScore:
    links = site_map or []
    has_sitemap = len(links) > 10
    has_structured_content = any(
        link.description and len(link.description) > 50 for link in links
    )

    if has_sitemap and has_structured_content:
        return SubScore(8, "Good technical foundation with substantial content and proper structure.")
    if has_sitemap:
        return SubScore(6, "Adequate technical setup with content discovery capabilities.")
    return SubScore(4, "Limited technical SEO implementation detected.")


def score_ai_optimization(ai_files: list[FileCheck] | None) -> SubScore:
    if ai_files is None:
        return SubScore(3, "No AI optimization files detected.")

    existing = sum(1 for check in ai_files if check.exists)
    if existing >= 3:
        return SubScore(9, "Excellent AI optimization with multiple configuration files.")
    if existing >= 1:
        return SubScore(7, "Good AI optimization with some configuration files present.")
    return SubScore(4, "Minimal AI optimization, missing standard configuration files.")


def compute_overall_score(search: int, content: int, technical: int, ai: int) -> int:
    """Weighted average of the four 0-10 sub-scores, rounded half up."""
    weighted = (
        search * SCORE_WEIGHTS["search"]
        + content * SCORE_WEIGHTS["content"]
        + technical * SCORE_WEIGHTS["technical"]
        + ai * SCORE_WEIGHTS["ai"]
    )
    # Guard against float noise such as 7.4999999 for an exact 7.5
    return round_half_up(round(weighted, 6))


def build_recommendations(search: int, content: int, technical: int, ai: int) -> list[str]:
    """One advisory per weak sub-score, in search/content/technical/ai order."""
    recommendations = []
    if search < RECOMMENDATION_THRESHOLD:
        recommendations.append(SEARCH_RECOMMENDATION)
    if content < RECOMMENDATION_THRESHOLD:
        recommendations.append(CONTENT_RECOMMENDATION)
    if technical < RECOMMENDATION_THRESHOLD:
        recommendations.append(TECHNICAL_RECOMMENDATION)
    if ai < RECOMMENDATION_THRESHOLD:
        recommendations.append(AI_RECOMMENDATION)

    if not recommendations:
        recommendations.append(ALL_GOOD_RECOMMENDATION)
    return recommendations
