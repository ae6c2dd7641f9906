# site_search/providers/__init__.py
from __future__ import annotations

# Importing the backends registers them (see registry.register).
from . import duckduckgo_html, qwant_api, qwant_browser, stub
from .base import ProviderError, SearchProvider
from .registry import all_kinds, describe, get, register

__all__ = [
    "ProviderError",
    "SearchProvider",
    "all_kinds",
    "describe",
    "duckduckgo_html",
    "get",
    "qwant_api",
    "qwant_browser",
    "register",
    "stub",
]
