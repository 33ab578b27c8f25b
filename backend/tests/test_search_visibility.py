"""Tests for search ranking, the visibility score table and the scorer."""

import pytest

from conftest import FakeCrawler, FakeLLM
from llmscore.services.keyword_generator import KEYWORD_SOURCE_CONTENT, KeywordSet
from llmscore.services.search_visibility import (
    SearchVisibilityScorer,
    domain_matches,
    find_rank,
    result_host,
    score_search_visibility,
)


@pytest.mark.parametrize(
    "appearance, top10, position, expected",
    [
        (0.85, 0.65, 4, 9),
        (0.8, 0.6, 5, 9),
        (0.7, 0.5, 8, 7),
        (0.5, 0.1, 12, 6),
        (0.3, 0.0, 20, 5),
        (0.1, 0.0, 20, 3),
        (0.0, 0.0, 20, 3),
    ],
)
def test_score_table(appearance, top10, position, expected):
    assert score_search_visibility(appearance, top10, position) == expected


def test_result_host_strips_scheme_credentials_and_port():
    assert result_host("https://user:pw@Docs.Example.com:8443/path?q=1") == "docs.example.com"
    assert result_host("example.com/about") == "example.com"


def test_domain_matches_in_both_directions():
    assert domain_matches("https://example.com/pricing", "example.com")
    assert domain_matches("https://example.com/", "www.example.com")
    assert not domain_matches("https://other.org/example", "example.net")


def test_domain_matches_ignores_empty_values():
    assert not domain_matches("", "example.com")
    assert not domain_matches("https://example.com", "")
    assert not domain_matches("https://", "example.com")


def test_find_rank_is_one_based():
    results = [{"url": "https://a.com"}, {"url": None}, {"url": "https://example.com/x"}]
    assert find_rank(results, "example.com") == 3
    assert find_rank(results[:2], "example.com") is None


async def test_scorer_records_insights_in_keyword_order():
    crawler = FakeCrawler(
        search_results={
            "widgets": [{"url": "https://other.com"}, {"url": "https://example.com/widgets"}],
            "gadgets": [{"url": "https://other.com"}],
            "tools": None,
        }
    )
    keyword_set = KeywordSet(keywords=["widgets", "gadgets", "tools"], source=KEYWORD_SOURCE_CONTENT)

    result = await SearchVisibilityScorer(crawler, FakeLLM(narrative="Solid.")).score(
        "example.com", keyword_set
    )

    performance = result.performance
    assert crawler.search_calls == ["widgets", "gadgets", "tools"]
    assert performance["search_insights"] == ["widgets: Position 2", "gadgets: Not found in top 20"]
    assert performance["total_searches"] == 2
    assert performance["appearance_rate"] == 0.5
    assert performance["top10_appearances"] == 1
    assert performance["average_position"] == 2
    assert performance["keywords_analyzed"] == 3
    # 50% appearance, 50% top 10, position 2 -> tier 6
    assert result.visibility.score == 6
    assert result.visibility.reasoning.startswith("Moderate search visibility: Appears in 50% of searches")
    assert result.visibility.reasoning.endswith("\n\nSolid.")


async def test_scorer_defaults_when_nothing_was_searched():
    keyword_set = KeywordSet(keywords=[], source=KEYWORD_SOURCE_CONTENT)

    result = await SearchVisibilityScorer(FakeCrawler(), FakeLLM(fail=True)).score(
        "example.com", keyword_set
    )

    assert result.visibility.score == 5
    assert result.visibility.reasoning == (
        "Limited search visibility analysis available.\n\nAdditional AI analysis not available."
    )
    assert result.performance["average_position"] == 0


async def test_unranked_domain_scores_with_position_twenty():
    crawler = FakeCrawler(search_results={"a": [{"url": "https://x.com"}]})
    keyword_set = KeywordSet(keywords=["a"], source=KEYWORD_SOURCE_CONTENT)

    result = await SearchVisibilityScorer(crawler, FakeLLM()).score("example.com", keyword_set)

    assert result.visibility.score == 3
    assert "average position 20.0" in result.visibility.reasoning


async def test_failed_searches_are_not_counted():
    crawler = FakeCrawler(
        search_results={"good": [{"url": "https://example.com/"}]},
        search_errors={"bad"},
    )
    keyword_set = KeywordSet(keywords=["bad", "good"], source=KEYWORD_SOURCE_CONTENT)

    result = await SearchVisibilityScorer(crawler, FakeLLM()).score("example.com", keyword_set)

    assert crawler.search_calls == ["bad", "good"]
    assert result.performance["total_searches"] == 1
    assert result.performance["appearance_rate"] == 1.0
    assert result.performance["search_insights"] == ["good: Position 1"]
    assert result.performance["keywords_analyzed"] == 2
