# site_search/http_client.py
from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from typing import Any

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from .config import DEFAULT_LOCALE, DEFAULT_USER_AGENT

LOG = logging.getLogger(__name__)


def accept_language(locale: str | None) -> str:
    """
    Accept-Language header for a search locale such as "it_IT".

      accept_language("it_IT") -> "it-IT,it;q=0.9,en;q=0.8"
      accept_language("en_GB") -> "en-GB,en;q=0.9"
    """
    tag = (locale or "").strip().replace("_", "-")
    if not tag:
        return "en"
    lang = tag.split("-", 1)[0].lower()
    parts = [tag]
    if tag.lower() != lang:
        parts.append(f"{lang};q=0.9")
    if lang != "en":
        parts.append("en;q=0.8")
    return ",".join(parts)


class HttpClient:
    """Shared HTTP client for the document and API providers."""

    def __init__(
        self,
        timeout: float = 20.0,
        user_agent: str = DEFAULT_USER_AGENT,
        locale: str | None = DEFAULT_LOCALE,
        retries: int = 2,
    ):
        self.timeout = float(timeout)
        self.session = requests.Session()
        self.session.headers.update({
            "User-Agent": user_agent,
            "Accept-Language": accept_language(locale),
        })

        # 429 is retried with backoff; search endpoints throttle bursts.
        retry = Retry(
            total=retries,
            backoff_factor=0.5,
            status_forcelist=(429, 500, 502, 503, 504),
            allowed_methods=frozenset(["GET", "HEAD"]),
            raise_on_status=False,
        )
        adapter = HTTPAdapter(max_retries=retry, pool_connections=4, pool_maxsize=4)
        self.session.mount("http://", adapter)
        self.session.mount("https://", adapter)

    # ---- convenience ----
    def get_text(
        self,
        url: str,
        *,
        params: Mapping[str, Any] | None = None,
        headers: Mapping[str, str] | None = None,
        timeout: float | None = None,
        **kwargs: Any,
    ) -> str:
        """GET and return decoded text with gentle encoding hints."""
        resp = self.session.get(url, params=params, headers=headers, timeout=timeout or self.timeout, **kwargs)
        resp.raise_for_status()
        if not resp.encoding and resp.apparent_encoding:
            resp.encoding = resp.apparent_encoding
        return resp.text

    def get_json(
        self,
        url: str,
        *,
        params: Mapping[str, Any] | None = None,
        headers: Mapping[str, str] | None = None,
        timeout: float | None = None,
        **kwargs: Any,
    ) -> Any:
        """GET and parse JSON with clearer errors if decoding fails."""
        resp = self.session.get(url, params=params, headers=headers, timeout=timeout or self.timeout, **kwargs)
        resp.raise_for_status()
        try:
            return resp.json()
        except ValueError as e:
            # Server sent text/plain but the body may still be JSON.
            try:
                return json.loads(resp.text)
            except ValueError:
                preview = resp.text[:200].replace("\n", " ")
                raise ValueError(f"JSON decode failed for {url!r}; body starts: {preview!r}") from e

    def close(self) -> None:
        try:
            self.session.close()
        except Exception:
            LOG.debug("HttpClient.close() swallow", exc_info=True)
