"""End-to-end evaluator tests with fake upstream clients."""

from conftest import FakeCrawler, FakeLLM
from llmscore.services.ai_file_prober import FileCheck
from llmscore.services.evaluator import WebsiteEvaluator
from llmscore.services.link_mapper import LinkRecord
from llmscore.services.scoring import AI_RECOMMENDATION


async def test_evaluate_combines_sub_scores():
    keywords = ["widgets", "gadgets", "tools", "parts", "kits"]
    crawler = FakeCrawler(
        search_results={keyword: [{"url": "https://example.com/"}] for keyword in keywords}
    )
    llm = FakeLLM(keywords=", ".join(keywords), narrative="Strong presence.")
    site_map = [
        LinkRecord(f"https://example.com/p{n}", f"Page {n}", "d" * 60) for n in range(12)
    ]
    ai_files = [FileCheck(path="/llms.txt", exists=False)]

    result = await WebsiteEvaluator(crawler, llm).evaluate(
        "https://example.com", "example.com", site_map, ai_files
    )

    assert result.search_visibility.score == 9
    assert result.content_quality.score == 9
    assert result.technical_seo.score == 8
    assert result.ai_optimization.score == 4
    # 9*0.4 + 9*0.3 + 8*0.2 + 4*0.1 = 8.3
    assert result.overall_score == 8
    assert result.recommendations == [AI_RECOMMENDATION]
    assert result.search_performance["keywords"] == keywords

    data = result.to_dict()
    assert data["search_visibility"]["reasoning"].endswith("Strong presence.")


async def test_evaluate_degrades_when_everything_upstream_fails():
    result = await WebsiteEvaluator(FakeCrawler(scrape_error=True), FakeLLM(fail=True)).evaluate(
        "https://example.com", "example.com", None, None
    )

    assert result.search_visibility.score == 5
    assert result.content_quality.score == 5
    assert result.technical_seo.score == 4
    assert result.ai_optimization.score == 3
    # 2.0 + 1.5 + 0.8 + 0.3 = 4.6
    assert result.overall_score == 5
    assert len(result.recommendations) == 4
