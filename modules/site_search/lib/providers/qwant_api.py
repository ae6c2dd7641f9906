# site_search/providers/qwant_api.py
"""
Qwant web-search JSON API provider.

The API answers with a nested structure:

  {"status": "success",
   "data": {"result": {"items": {"mainline": [
       {"type": "web", "items": [{"title": ..., "url": ..., "desc": ...}, ...]},
       {"type": "ads", "items": [...]}
   ]}}}}

Unlike the document-based providers, this one gets several raw hits and
re-ranks them itself (ranking.select_best) against the quoted article title.
"""

from __future__ import annotations

import logging
from typing import Any

import requests

from ..config import DEFAULT_LOCALE, DEFAULT_USER_AGENT, Settings
from ..http_client import HttpClient
from ..models import SearchOutcome
from ..query import extract_phrase
from ..ranking import select_best
from .base import ProviderError, SearchProvider
from .registry import register

log = logging.getLogger(__name__)


def _flatten_web_items(payload: Any) -> list[dict[str, Any]]:
    """Collect the items of every 'web' mainline group, in page order."""
    if not isinstance(payload, dict):
        raise ProviderError("response is not a JSON object")
    if payload.get("status") != "success":
        raise ProviderError(f"API status {payload.get('status')!r}")

    try:
        mainline = payload["data"]["result"]["items"]["mainline"]
    except (KeyError, TypeError):
        return []

    out: list[dict[str, Any]] = []
    for group in mainline or []:
        if not isinstance(group, dict) or group.get("type") != "web":
            continue
        for item in group.get("items") or []:
            if isinstance(item, dict):
                out.append(item)
    return out


@register
class QwantApiProvider(SearchProvider):
    """
    Query the Qwant JSON API and re-rank the returned hits.

    Params (provider_params): count (default 10), safesearch (default 1),
    endpoint (override of the API URL).
    """

    kind = "qwant_api"
    label = "Qwant API"
    ENDPOINT = "https://api.qwant.com/v3/search/web"

    def __init__(
        self,
        *,
        timeout: float = 20.0,
        user_agent: str | None = None,
        locale: str = DEFAULT_LOCALE,
        count: int = 10,
        safesearch: int = 1,
        endpoint: str | None = None,
        client: HttpClient | None = None,
    ) -> None:
        self.locale = locale
        self.count = int(count)
        self.safesearch = int(safesearch)
        self.endpoint = endpoint or self.ENDPOINT
        if client is None:
            client = HttpClient(timeout=timeout, user_agent=user_agent or DEFAULT_USER_AGENT, locale=locale)
        self._client = client

    @classmethod
    def from_settings(cls, settings: Settings) -> QwantApiProvider:
        params = settings.provider_params
        return cls(
            timeout=settings.timeout_seconds,
            user_agent=settings.user_agent,
            locale=settings.locale,
            count=int(params.get("count") or 10),
            safesearch=int(params.get("safesearch", 1)),
            endpoint=params.get("endpoint"),
        )

    def search(self, query: str) -> SearchOutcome:
        # requests percent-encodes params
        params = {
            "q": query,
            "count": self.count,
            "locale": self.locale,
            "offset": 0,
            "safesearch": self.safesearch,
            "device": "desktop",
        }
        try:
            payload = self._client.get_json(self.endpoint, params=params)
            items = _flatten_web_items(payload)
        except (requests.RequestException, ProviderError, ValueError) as e:
            log.debug("qwant api failure for %r", query, exc_info=True)
            return self.transport_error(e)

        best = select_best(items, extract_phrase(query))
        if best is None:
            return self.no_result()
        log.debug("qwant api picked %s (score=%.2f) of %d hits", best.url, best.score, len(items))
        return SearchOutcome.found(best.url, best.title, best.description)

    def close(self) -> None:
        self._client.close()
