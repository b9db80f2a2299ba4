from __future__ import annotations

from newsrelay.tools import web_utils
from newsrelay.tools.normalize import normalize_result, normalize_results


def test_is_valid_url():
    assert web_utils.is_valid_url("https://example.com/a")
    assert web_utils.is_valid_url("http://x")
    assert not web_utils.is_valid_url("not-a-url")
    assert not web_utils.is_valid_url("mailto:someone@example.com")
    assert not web_utils.is_valid_url("https://")
    assert not web_utils.is_valid_url("")


def test_normalize_result_cleans_fields():
    result = normalize_result(
        title="  Title\n with  spaces ",
        link=" https://example.com/a ",
        snippet="line one\nline two",
        published_at="  ",
    )

    assert result is not None
    assert result.title == "Title with spaces"
    assert result.link == "https://example.com/a"
    assert result.snippet == "line one line two"
    assert result.published_at is None


def test_normalize_result_rejects_missing_title_or_link():
    assert normalize_result(title="", link="https://example.com") is None
    assert normalize_result(title="T", link="/relative/path") is None
    assert normalize_result(title=None, link=None) is None


def test_normalize_results_keeps_order():
    hits = [
        {"title": "b", "link": "https://b.com"},
        {"title": "", "link": "https://skip.com"},
        {"title": "a", "link": "https://a.com", "snippet": None},
    ]

    assert [r.title for r in normalize_results(hits)] == ["b", "a"]
