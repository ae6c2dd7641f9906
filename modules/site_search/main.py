from __future__ import annotations

from typing import Any

from .lib.config import Settings
from .lib.engine import ConfirmCallback, ProgressCallback
from .lib.engine import run_once as _run_engine
from .lib.logging_bridge import activity as log_activity
from .lib.models import ResultRow


def run(
    *,
    on_progress: ProgressCallback | None = None,
    confirm: ConfirmCallback | None = None,
    **kwargs: Any,
) -> tuple[list[ResultRow], dict] | None:
    """
    Entry point for the 'site_search' module.

    Accepts kwargs (from the CLI or a caller), including:
      domains / domains_path: newline-delimited hosts or a file of them
      articles / articles_path: article titles, one per line
      provider: str = "qwant_browser"   (qwant_api, duckduckgo_html, stub)
      provider_params: dict = {}
      pacing_seconds: float = 0.5
      timeout_seconds: float = 30
      confirm_threshold: int = 10
      assume_yes: bool = False
      csv_path: Optional[str]

    Returns:
      - None (the confirmation gate declined), or
      - (rows, meta) - rows in article-outer/domain-inner order.
    """
    settings = Settings.from_env_and_kwargs(kwargs)

    log_activity({
        "component": "site_search.main",
        "op": "start",
        "provider": settings.provider,
        "domains": len(settings.domains),
        "articles": len(settings.articles),
        "pacing_seconds": settings.pacing_seconds,
        "csv_path": settings.csv_path,
    })

    return _run_engine(settings, on_progress=on_progress, confirm=confirm)
