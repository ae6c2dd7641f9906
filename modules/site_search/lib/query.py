"""
Input normalization and query construction.

  parse_lines("a.com\n\n b.com ")        -> ["a.com", "b.com"]
  normalize_domain("https://www.a.com/x") -> "a.com"
  build_query("a.com.*", "Hello World")   -> 'site:a.com "Hello World"'
"""

from __future__ import annotations

import re
from collections.abc import Iterable

_SCHEME_RE = re.compile(r"^https?://", re.IGNORECASE)
_WWW_RE = re.compile(r"^www\.", re.IGNORECASE)
_PHRASE_RE = re.compile(r'"(.*)"', re.DOTALL)


def parse_lines(raw: str | Iterable[str] | None) -> list[str]:
    """
    Split a newline-delimited block (or take an iterable of lines),
    trim every line and drop the blank ones. Order is preserved.
    """
    if raw is None:
        return []
    lines = raw.split("\n") if isinstance(raw, str) else list(raw)
    out: list[str] = []
    for line in lines:
        s = str(line or "").strip()
        if s:
            out.append(s)
    return out


def normalize_domain(raw: str | None) -> str:
    """Reduce user input like 'HTTPS://www.site.it/path/' to the bare host 'site.it'."""
    if not raw:
        return ""
    s = raw.strip()
    s = _SCHEME_RE.sub("", s)
    s = _WWW_RE.sub("", s)
    if s.endswith("/"):
        s = s[:-1]
    return s.split("/")[0]


def clean_domain(domain: str) -> str:
    """Drop a trailing wildcard ('.*' or '*') and a single trailing dot."""
    s = re.sub(r"\.\*$", "", domain)
    s = re.sub(r"\*$", "", s)
    s = re.sub(r"\.$", "", s)
    return s.strip()


def build_query(domain: str, article: str) -> str:
    return f'site:{clean_domain(domain)} "{article}"'


def extract_phrase(query: str) -> str:
    """
    Return the quoted phrase of a site: query (the article title).
    Queries without quotes are returned trimmed, as-is.
    """
    m = _PHRASE_RE.search(query or "")
    if m:
        return m.group(1)
    return (query or "").strip()
