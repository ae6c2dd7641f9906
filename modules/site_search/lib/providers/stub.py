from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from ..config import Settings
from ..models import ErrorKind, SearchOutcome
from ..query import extract_phrase
from .base import SearchProvider
from .registry import register


@register
class StubProvider(SearchProvider):
    """
    A zero-network provider used for tests and dry-runs.

    `results` maps a key to a canned outcome. The key may be the full query,
    the quoted article title, or the site: domain of the query; the first one
    that matches wins, in that order. Each value may contain:
      - url, title, description: str   # a found result
      - error: str                     # OPTIONAL, reported as a transport error
    Unmatched queries come back as NO_RESULT.
    """

    kind = "stub"
    label = "Stub"

    def __init__(self, results: Mapping[str, Mapping[str, Any]] | None = None, **_: Any) -> None:
        self.results: dict[str, Mapping[str, Any]] = dict(results or {})
        self.queries: list[str] = []

    @classmethod
    def from_settings(cls, settings: Settings) -> StubProvider:
        return cls(results=settings.provider_params.get("results"))

    def search(self, query: str) -> SearchOutcome:
        self.queries.append(query)
        entry = self._lookup(query)
        if entry is None:
            return self.no_result()
        if not isinstance(entry, Mapping):
            return self.transport_error(f"bad stub entry {entry!r}")

        if entry.get("error"):
            return SearchOutcome.failed(ErrorKind.TRANSPORT, f"{self.label} error: {entry['error']}")

        url = str(entry.get("url") or "").strip()
        title = str(entry.get("title") or "").strip()
        if not url or not title:
            return self.no_result()
        return SearchOutcome.found(url, title, str(entry.get("description") or ""))

    def _lookup(self, query: str) -> Any:
        if query in self.results:
            return self.results[query]
        phrase = extract_phrase(query)
        if phrase in self.results:
            return self.results[phrase]
        head = query.split(" ", 1)[0]
        if head.startswith("site:"):
            return self.results.get(head[len("site:"):])
        return None
