# site_search/providers/duckduckgo_html.py
"""
DuckDuckGo HTML-endpoint provider.

Fetches the JavaScript-free results page and reads the FIRST organic result
only (ads are skipped). Like the browser provider it trusts the engine's own
top placement; there is no re-ranking here.
"""

from __future__ import annotations

import logging
from urllib.parse import parse_qs, urljoin, urlparse

import requests
from bs4 import BeautifulSoup

from ..config import DEFAULT_LOCALE, DEFAULT_USER_AGENT, Settings
from ..http_client import HttpClient
from ..models import SearchOutcome
from .base import SearchProvider
from .registry import register

log = logging.getLogger(__name__)


def _unwrap_redirect(href: str) -> str:
    """
    DDG wraps result links as //duckduckgo.com/l/?uddg=<target>&rut=...
    Return the target URL, or the href itself when it is not wrapped.
    """
    absolute = urljoin("https://duckduckgo.com/", href)
    parsed = urlparse(absolute)
    if parsed.netloc.endswith("duckduckgo.com") and parsed.path.startswith("/l/"):
        target = parse_qs(parsed.query).get("uddg")
        if target and target[0]:
            return target[0]
    return absolute


def parse_top_result(html: str) -> tuple[str, str, str]:
    """Return (url, title, description) of the first organic result; empty strings if none."""
    soup = BeautifulSoup(html, "html5lib")
    for result in soup.select("div.result"):
        classes = result.get("class") or []
        if "result--ad" in classes:
            continue
        link = result.select_one("a.result__a")
        if link is None:
            continue
        href = (link.get("href") or "").strip()
        title = link.get_text(" ", strip=True)
        snippet_el = result.select_one(".result__snippet")
        description = snippet_el.get_text(" ", strip=True) if snippet_el else ""
        return (_unwrap_redirect(href) if href else "", title, description)
    return ("", "", "")


@register
class DuckDuckGoHtmlProvider(SearchProvider):
    """Plain-HTTP document provider: GET the results page, read the top result."""

    kind = "duckduckgo_html"
    label = "DuckDuckGo HTML"
    ENDPOINT = "https://html.duckduckgo.com/html/"

    def __init__(
        self,
        *,
        timeout: float = 20.0,
        user_agent: str = DEFAULT_USER_AGENT,
        locale: str = DEFAULT_LOCALE,
        endpoint: str | None = None,
        client: HttpClient | None = None,
    ) -> None:
        self.endpoint = endpoint or self.ENDPOINT
        self._client = client or HttpClient(timeout=timeout, user_agent=user_agent, locale=locale)

    @classmethod
    def from_settings(cls, settings: Settings) -> DuckDuckGoHtmlProvider:
        return cls(
            timeout=settings.timeout_seconds,
            user_agent=settings.user_agent,
            locale=settings.locale,
            endpoint=settings.provider_params.get("endpoint"),
        )

    def search(self, query: str) -> SearchOutcome:
        try:
            html = self._client.get_text(self.endpoint, params={"q": query})
            url, title, description = parse_top_result(html)
        except (requests.RequestException, ValueError) as e:
            log.debug("duckduckgo failure for %r", query, exc_info=True)
            return self.transport_error(e)

        if url and title:
            return SearchOutcome.found(url, title, description)
        return self.no_result()

    def close(self) -> None:
        self._client.close()
