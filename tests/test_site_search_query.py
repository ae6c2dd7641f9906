# tests/test_site_search_query.py
import pytest

from modules.site_search.lib.query import (
    build_query,
    clean_domain,
    extract_phrase,
    normalize_domain,
    parse_lines,
)


def test_parse_lines_trims_and_drops_blanks():
    assert parse_lines("askanews.it\n\n  quotidiano.net  \n\t\n") == ["askanews.it", "quotidiano.net"]
    assert parse_lines(["  a ", "", "b"]) == ["a", "b"]
    assert parse_lines(None) == []
    assert parse_lines("   \n  ") == []


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("https://www.askanews.it/", "askanews.it"),
        ("HTTP://WWW.Example.com/path/to/page", "Example.com"),
        ("  quotidiano.net  ", "quotidiano.net"),
        ("www.dailymotion.com/video/x1", "dailymotion.com"),
        ("", ""),
        ("https://", ""),
    ],
)
def test_normalize_domain(raw, expected):
    assert normalize_domain(raw) == expected


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("example.com.*", "example.com"),
        ("example.com*", "example.com"),
        ("example.com.", "example.com"),
        ("example.com", "example.com"),
        (" example.com ", "example.com"),
    ],
)
def test_clean_domain_strips_wildcards_and_trailing_dot(raw, expected):
    assert clean_domain(raw) == expected


def test_build_query_quotes_title_verbatim():
    assert build_query("example.com", "Hello World") == 'site:example.com "Hello World"'
    assert build_query("news.it.*", "Fujifilm: AI & salute") == 'site:news.it "Fujifilm: AI & salute"'


def test_extract_phrase_recovers_article_title():
    assert extract_phrase('site:example.com "Hello World"') == "Hello World"
    # inner quotes survive (greedy between the outer pair)
    assert extract_phrase('site:a.it "Il "nuovo" piano"') == 'Il "nuovo" piano'
    assert extract_phrase("plain words ") == "plain words"
