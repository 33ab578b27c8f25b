"""Heuristics for telling real AI discovery files from error pages.

These are keyword checks, not parsers. They are plain functions so the
prober can be handed a different classifier and the thresholds can be
tested without any HTTP.
"""

from dataclasses import dataclass
from typing import Callable

MAX_AI_FILE_LENGTH = 50_000
LEGITIMATE_404_MAX_LENGTH = 100
LEGITIMATE_PLAIN_404_MAX_LENGTH = 500
ERROR_PAGE_MIN_INDICATORS = 2

ERROR_PAGE_INDICATORS = (
    "page not found",
    "404 error",
    "not found",
    "error 404",
    "sorry, the page you are looking for",
    "oops! that page can't be found",
    "the requested url was not found",
    "<html",
    "<head>",
    "<title>",
    "nginx",
    "apache",
    "cloudflare",
    "page does not exist",
    "file not found",
)


def count_error_indicators(content: str) -> int:
    """Number of distinct error-page indicators present in the body."""
    lower_content = content.lower()
    return sum(1 for indicator in ERROR_PAGE_INDICATORS if indicator in lower_content)


def is_probably_error_page(content: str) -> bool:
    """A body with two or more indicators is treated as an error page."""
    return count_error_indicators(content) >= ERROR_PAGE_MIN_INDICATORS


def is_legitimate_text_file(content: str, content_type: str = "") -> bool:
    """Whether a 2xx body looks like a real AI file rather than a soft 404."""
    # Sites that serve their HTML shell for every path
    if "text/html" in content_type.lower():
        return False

    if is_probably_error_page(content):
        return False

    if len(content.strip()) == 0:
        return False

    if len(content) > MAX_AI_FILE_LENGTH:
        return False

    return True


def is_legitimate_404(content: str, content_type: str = "") -> bool:
    """Whether a 404 body is a plain server "not found" response."""
    stripped_length = len(content.strip())
    if stripped_length < LEGITIMATE_404_MAX_LENGTH:
        return True

    if "text/plain" in content_type.lower() and stripped_length < LEGITIMATE_PLAIN_404_MAX_LENGTH:
        return True

    return False


@dataclass(frozen=True)
class ContentClassifier:
    """Bundle of the three checks used by the AI file prober."""
    is_legitimate_text_file: Callable[[str, str], bool] = is_legitimate_text_file
    is_legitimate_404: Callable[[str, str], bool] = is_legitimate_404
    is_probably_error_page: Callable[[str], bool] = is_probably_error_page


DEFAULT_CLASSIFIER = ContentClassifier()
