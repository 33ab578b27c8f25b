"""LLM prompts for various tasks."""

from llmscore.prompts.keyword_generation import CONTENT_KEYWORD_PROMPT, DOMAIN_KEYWORD_PROMPT
from llmscore.prompts.search_analysis import SEARCH_ANALYSIS_PROMPT

__all__ = [
    "CONTENT_KEYWORD_PROMPT",
    "DOMAIN_KEYWORD_PROMPT",
    "SEARCH_ANALYSIS_PROMPT",
]
