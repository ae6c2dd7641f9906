# site_search/providers/qwant_browser.py
"""
Headless-browser Qwant provider (Playwright, Chromium).

Qwant renders its results client-side, so a real browser loads the page and
the FIRST result is read straight from the DOM:

  title        .gW4ak span
  link         .Fqopp a       (absolute href)
  description  div.aVNer

One browser per query; it is closed on every exit path.
"""

from __future__ import annotations

import logging
from urllib.parse import quote, urljoin

from playwright.sync_api import Error as PlaywrightError
from playwright.sync_api import TimeoutError as PlaywrightTimeoutError
from playwright.sync_api import sync_playwright

from ..config import DEFAULT_USER_AGENT, Settings
from ..models import SearchOutcome
from ..utils import truthy
from .base import SearchProvider
from .registry import register

log = logging.getLogger(__name__)

TITLE_SELECTOR = ".gW4ak span"
LINK_SELECTOR = ".Fqopp a"
DESCRIPTION_SELECTOR = "div.aVNer"


@register
class QwantBrowserProvider(SearchProvider):
    """
    Params (provider_params):
      headless: bool          # default True
      wait_seconds: float     # wait for the title element (default 10)
    """

    kind = "qwant_browser"
    label = "Playwright/Qwant"
    BASE_URL = "https://www.qwant.com/"

    def __init__(
        self,
        *,
        timeout: float = 30.0,
        user_agent: str = DEFAULT_USER_AGENT,
        headless: bool = True,
        wait_seconds: float = 10.0,
    ) -> None:
        self.timeout_ms = int(float(timeout) * 1000)
        self.wait_ms = int(float(wait_seconds) * 1000)
        self.user_agent = user_agent
        self.headless = headless

    @classmethod
    def from_settings(cls, settings: Settings) -> QwantBrowserProvider:
        params = settings.provider_params
        wait_seconds = params.get("wait_seconds")
        return cls(
            timeout=settings.timeout_seconds,
            user_agent=settings.user_agent,
            headless=truthy(params.get("headless", True)),
            wait_seconds=10.0 if wait_seconds is None or wait_seconds == "" else float(wait_seconds),
        )

    def search_url(self, query: str) -> str:
        return f"{self.BASE_URL}?q={quote(query, safe='')}&t=web"

    def search(self, query: str) -> SearchOutcome:
        try:
            with sync_playwright() as p:
                browser = p.chromium.launch(headless=self.headless)
                try:
                    url, title, description = self._read_top_result(browser, query)
                finally:
                    browser.close()
        except PlaywrightError as e:
            log.debug("playwright failure for %r", query, exc_info=True)
            return self.transport_error(e)
        except Exception as e:
            # Driver pipe, launch and DOM failures still belong to this backend.
            log.warning("browser search failed for %r: %r", query, e)
            return self.transport_error(e)

        if url and title:
            return SearchOutcome.found(url, title, description)
        return self.no_result()

    # ---- internals ----

    def _read_top_result(self, browser, query: str) -> tuple[str, str, str]:
        context = browser.new_context(user_agent=self.user_agent)
        page = context.new_page()
        page.goto(self.search_url(query), wait_until="networkidle", timeout=self.timeout_ms)

        # Results may legitimately be absent; read whatever rendered.
        try:
            page.wait_for_selector(TITLE_SELECTOR, timeout=self.wait_ms)
        except PlaywrightTimeoutError:
            log.debug("no title element within %d ms for %r", self.wait_ms, query)

        title_el = page.query_selector(TITLE_SELECTOR)
        title = (title_el.text_content() or "").strip() if title_el else ""

        link_el = page.query_selector(LINK_SELECTOR)
        href = (link_el.get_attribute("href") or "").strip() if link_el else ""
        url = urljoin(page.url, href) if href else ""

        desc_el = page.query_selector(DESCRIPTION_SELECTOR)
        description = (desc_el.text_content() or "").strip() if desc_el else ""

        return url, title, description
