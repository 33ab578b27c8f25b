"""Tests for the AI file content heuristics."""

from llmscore.services.content_classifier import (
    count_error_indicators,
    is_legitimate_404,
    is_legitimate_text_file,
    is_probably_error_page,
)


def test_html_content_type_is_never_a_text_file():
    assert not is_legitimate_text_file("# llms.txt\n\nAbout us", "text/html; charset=utf-8")


def test_single_indicator_is_not_an_error_page():
    assert count_error_indicators("<html><body>hello</body></html>") == 1
    assert not is_probably_error_page("<html><body>hello</body></html>")


def test_two_indicators_make_an_error_page():
    body = "<html><body>404 Error</body></html>"
    assert is_probably_error_page(body)
    assert not is_legitimate_text_file(body, "text/plain")


def test_indicator_match_is_case_insensitive():
    assert is_probably_error_page("PAGE NOT FOUND - served by NGINX")


def test_empty_and_whitespace_bodies_are_rejected():
    assert not is_legitimate_text_file("", "text/plain")
    assert not is_legitimate_text_file("   \n\t", "text/plain")


def test_oversized_body_is_rejected():
    assert not is_legitimate_text_file("a" * 50_001, "text/plain")
    assert is_legitimate_text_file("a" * 50_000, "text/plain")


def test_short_plain_text_is_accepted():
    assert is_legitimate_text_file("User-agent", "text/plain")
    assert is_legitimate_text_file("# Example\n> A site", "")


def test_short_404_body_is_legitimate():
    assert is_legitimate_404("Not Found", "")
    assert is_legitimate_404("x" * 99, "text/html")


def test_plain_text_404_allows_longer_bodies():
    body = "x" * 300
    assert is_legitimate_404(body, "text/plain")
    assert not is_legitimate_404(body, "text/html")
    assert not is_legitimate_404("x" * 500, "text/plain")
