from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from .query import parse_lines
from .utils import getenv_str, truthy

DEFAULT_PROVIDER = "qwant_browser"
DEFAULT_LOCALE = "it_IT"
DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
)


# -----------------------------
# Exceptions
# -----------------------------
class ConfigError(ValueError):
    """Raised when provided kwargs/env cannot form a valid Settings."""


# -----------------------------
# Model
# -----------------------------
@dataclass
class Settings:
    """
    Canonical configuration for a 'site_search' run.

    Domains and articles come either inline (a newline-delimited block or a
    list) or from files (one entry per line). Inline values win over files.
    Blank lines are dropped here; an empty list is NOT a config error, the
    engine rejects it with ValidationError before any job runs.
    """

    # Inputs
    domains: list[str] = field(default_factory=list)
    articles: list[str] = field(default_factory=list)

    # Backend selection
    provider: str = DEFAULT_PROVIDER
    provider_params: dict[str, Any] = field(default_factory=dict)

    # Runtime behavior
    pacing_seconds: float = 0.5
    timeout_seconds: float = 30.0
    confirm_threshold: int = 10
    assume_yes: bool = False

    # Transport details
    user_agent: str = DEFAULT_USER_AGENT
    locale: str = DEFAULT_LOCALE

    # Output
    csv_path: str | None = None

    @property
    def total_jobs(self) -> int:
        return len(self.domains) * len(self.articles)

    # ------------- constructors -------------
    @classmethod
    def from_env_and_kwargs(cls, kwargs: Mapping[str, Any] | None) -> Settings:
        """
        Build Settings from kwargs with validation. Env supplies defaults:

            SITE_SEARCH_PROVIDER, SITE_SEARCH_PACING_SECONDS,
            SITE_SEARCH_TIMEOUT_SECONDS, SITE_SEARCH_USER_AGENT, SITE_SEARCH_LOCALE

        Expected kwargs (all optional):

            domains: str | list[str]      articles: str | list[str]
            domains_path: str             articles_path: str
            provider: str                 provider_params: dict
            pacing_seconds: float         timeout_seconds: float
            confirm_threshold: int        assume_yes: bool
            csv_path: str                 user_agent: str
            locale: str
        """
        kw = dict(kwargs or {})

        domains = _lines_from(kw, "domains")
        articles = _lines_from(kw, "articles")

        provider = str(kw.get("provider") or getenv_str("SITE_SEARCH_PROVIDER", DEFAULT_PROVIDER)).strip().lower()

        params = kw.get("provider_params") or {}
        if not isinstance(params, Mapping):
            raise ConfigError("'provider_params' must be an object.")

        csv_path = kw.get("csv_path")
        csv_path = str(csv_path).strip() or None if csv_path is not None else None

        settings = cls(
            domains=domains,
            articles=articles,
            provider=provider,
            provider_params=dict(params),
            pacing_seconds=_number(kw, "pacing_seconds", "SITE_SEARCH_PACING_SECONDS", 0.5),
            timeout_seconds=_number(kw, "timeout_seconds", "SITE_SEARCH_TIMEOUT_SECONDS", 30.0),
            confirm_threshold=int(_number(kw, "confirm_threshold", None, 10)),
            assume_yes=truthy(kw.get("assume_yes")),
            user_agent=str(kw.get("user_agent") or getenv_str("SITE_SEARCH_USER_AGENT", DEFAULT_USER_AGENT)),
            locale=str(kw.get("locale") or getenv_str("SITE_SEARCH_LOCALE", DEFAULT_LOCALE)),
            csv_path=csv_path,
        )
        _validate_settings(settings)
        return settings


# -----------------------------
# Helpers
# -----------------------------
def _lines_from(kw: Mapping[str, Any], name: str) -> list[str]:
    """Inline value first, then '<name>_path'; either way one entry per line."""
    inline = kw.get(name)
    if inline:
        if not isinstance(inline, (str, list, tuple)):
            raise ConfigError(f"'{name}' must be a string or a list of strings.")
        return parse_lines(inline)

    path = str(kw.get(f"{name}_path") or "").strip()
    if not path:
        return []
    try:
        with open(path, encoding="utf-8") as f:
            return parse_lines(f.read())
    except FileNotFoundError as e:
        raise ConfigError(f"{name} file not found: {path}") from e
    except OSError as e:
        raise ConfigError(f"{name} file unreadable: {path} ({e})") from e


def _number(kw: Mapping[str, Any], key: str, env: str | None, default: float) -> float:
    raw = kw.get(key)
    if raw is None or raw == "":
        raw = getenv_str(env) if env else None
    if raw is None:
        return float(default)
    try:
        return float(raw)
    except (TypeError, ValueError) as e:
        raise ConfigError(f"'{key}' must be a number (got {raw!r}).") from e


def _validate_settings(s: Settings) -> None:
    if not s.provider:
        raise ConfigError("'provider' cannot be empty.")
    if s.pacing_seconds < 0:
        raise ConfigError("'pacing_seconds' must be >= 0.")
    if s.timeout_seconds <= 0:
        raise ConfigError("'timeout_seconds' must be > 0.")
    if s.confirm_threshold < 0:
        raise ConfigError("'confirm_threshold' must be >= 0.")
