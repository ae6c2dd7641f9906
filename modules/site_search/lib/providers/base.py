from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from ..config import Settings
from ..models import ErrorKind, SearchOutcome


class ProviderError(Exception):
    """Base exception for provider failures (navigation, HTTP, parsing)."""


class SearchProvider(ABC):
    """
    Abstract search backend.

    Contract:
      - search(query) ALWAYS returns a SearchOutcome; transport/parse failures
        become ErrorKind.TRANSPORT outcomes, an empty result ErrorKind.NO_RESULT.
      - Any external resource acquired for a call (browser, connection) is
        released on every exit path.
      - Each call is bounded by the provider's own timeout.
      - Do NOT sleep for pacing; the engine owns that.
    """

    # Concrete subclasses MUST set these, e.g. kind="qwant_api", label="Qwant API"
    kind: str = ""
    label: str = ""

    @classmethod
    def from_settings(cls, settings: Settings) -> SearchProvider:
        """Default construction from run settings; override for extra params."""
        return cls(timeout=settings.timeout_seconds, user_agent=settings.user_agent)

    @abstractmethod
    def search(self, query: str) -> SearchOutcome:
        """
        Run one `site:<domain> "<title>"` query and return the single best hit.

        Args:
            query: Full query string (NOT percent-encoded; providers encode it).

        Returns:
            SearchOutcome - found, NO_RESULT, or TRANSPORT error.
        """
        raise NotImplementedError

    def close(self) -> None:
        """Release long-lived resources (sessions). Per-call resources are released by search()."""

    # ---- outcome helpers ----
    def no_result(self) -> SearchOutcome:
        return SearchOutcome.failed(ErrorKind.NO_RESULT, f"No results found on {self.label}")

    def transport_error(self, exc: BaseException | str) -> SearchOutcome:
        return SearchOutcome.failed(ErrorKind.TRANSPORT, f"{self.label} error: {exc}")

    def __enter__(self) -> SearchProvider:
        return self

    def __exit__(self, *exc: Any) -> None:
        self.close()

    def __repr__(self) -> str:
        return f"<{type(self).__name__} kind={self.kind!r}>"
