"""Prompt for a short narrative on measured search performance."""

SEARCH_ANALYSIS_PROMPT = """Based on the actual search performance data for {domain}, provide additional insights about the website's search visibility and AI compatibility.

Search Performance Summary:
- Keywords analyzed: {keyword_count} (generated from {keyword_origin})
- Appearance rate: {appearance_percent}%
- Top 10 appearances: {top10_appearances}
- Average position: {average_position}

Consider:
1. How does this search performance translate to AI/LLM discoverability?
2. What does this say about the website's SEO and content strategy?
3. Any recommendations for improving search visibility?

Provide a brief analysis (2-3 sentences) of the search performance and AI compatibility."""
