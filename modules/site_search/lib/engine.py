"""
Engine for running site-restricted article searches over a domain x article grid.

Features:
  - Cross-product job expansion (articles outer, domains inner)
  - Strictly sequential provider calls with a fixed pacing delay after each job
  - Per-job failure isolation: every job yields exactly one ResultRow
  - Live progress callbacks carrying the rows gathered so far
  - Pre-run confirmation hook for large batches; cooperative cancellation
  - Dependency injection for testability (`get_provider`, `sleep`)
  - Structured logging via `logging_bridge`
"""

from __future__ import annotations

import math
import time
from collections.abc import Callable, Iterable, Sequence

from . import logging_bridge, render
from .config import Settings
from .models import ErrorKind, Job, Progress, ResultRow, RunState, SearchOutcome
from .providers.base import SearchProvider
from .query import build_query, normalize_domain, parse_lines
from .utils import elapsed_us

ProgressCallback = Callable[[Progress], None]
ConfirmCallback = Callable[[int], bool]


class ValidationError(ValueError):
    """Raised when the domain or article list is empty after normalization."""


# =============================================================================
# JOB EXPANSION
# =============================================================================
def build_jobs(domains: Sequence[str], articles: Sequence[str]) -> list[Job]:
    """Articles in the outer loop, domains in the inner one; the row order follows."""
    return [Job(domain=d, article=a, query=build_query(d, a)) for a in articles for d in domains]


def percent(completed: int, total: int) -> int:
    """completed/total as a whole percentage, halves rounded up."""
    if total <= 0:
        return 0
    return int(math.floor(completed * 100 / total + 0.5))


def _prepare(domains: str | Iterable[str], articles: str | Iterable[str]) -> tuple[list[str], list[str]]:
    domain_list = [d for d in (normalize_domain(x) for x in parse_lines(domains)) if d]
    article_list = parse_lines(articles)
    if not domain_list or not article_list:
        raise ValidationError("Provide at least one domain and one article.")
    return domain_list, article_list


# =============================================================================
# ORCHESTRATOR
# =============================================================================
class BatchOrchestrator:
    """
    Drive a SearchProvider through every (article, domain) job, one at a time.

    States: IDLE -> RUNNING -> COMPLETED | ABORTED. A rejected input or a
    declined confirmation leaves the orchestrator IDLE.
    """

    def __init__(
        self,
        provider: SearchProvider,
        *,
        pacing_seconds: float = 0.5,
        confirm_threshold: int = 10,
        confirm: ConfirmCallback | None = None,
        on_progress: ProgressCallback | None = None,
        should_cancel: Callable[[], bool] | None = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.provider = provider
        self.pacing_seconds = float(pacing_seconds)
        self.confirm_threshold = int(confirm_threshold)
        self.confirm = confirm
        self.on_progress = on_progress
        self.should_cancel = should_cancel
        self.sleep = sleep
        self.state = RunState.IDLE

    def run(self, domains: str | Iterable[str], articles: str | Iterable[str]) -> list[ResultRow]:
        """
        Run the whole batch and return one ResultRow per job, in job order.

        Raises:
            ValidationError: either list is empty once blank lines are dropped.
        """
        domain_list, article_list = _prepare(domains, articles)
        jobs = build_jobs(domain_list, article_list)
        total = len(jobs)

        if self.confirm is not None and total > self.confirm_threshold and not self.confirm(total):
            logging_bridge.activity({
                "component": "site_search.engine",
                "op": "declined",
                "provider": self.provider.kind,
                "total": total,
            })
            return []

        self.state = RunState.RUNNING
        rows: list[ResultRow] = []
        try:
            for index, job in enumerate(jobs):
                if self.should_cancel is not None and self.should_cancel():
                    self.state = RunState.ABORTED
                    logging_bridge.activity({
                        "component": "site_search.engine",
                        "op": "cancelled",
                        "provider": self.provider.kind,
                        "completed": len(rows),
                        "total": total,
                    })
                    return rows

                rows.append(self._run_job(index, job))
                if self.on_progress is not None:
                    self.on_progress(Progress(
                        completed=len(rows),
                        total=total,
                        percent=percent(len(rows), total),
                        rows=tuple(rows),
                    ))
                # Backpressure on the search surface, success or not.
                if self.pacing_seconds > 0:
                    self.sleep(self.pacing_seconds)
        except BaseException:
            self.state = RunState.ABORTED
            raise

        self.state = RunState.COMPLETED
        return rows

    # -------------------------------------------------------------------------
    # ONE JOB: never raises
    # -------------------------------------------------------------------------
    def _run_job(self, index: int, job: Job) -> ResultRow:
        t0 = time.perf_counter_ns()
        try:
            outcome = self.provider.search(job.query)
            if not isinstance(outcome, SearchOutcome):
                raise TypeError(f"provider returned {type(outcome).__name__}, expected SearchOutcome")
        except Exception as e:
            outcome = SearchOutcome.failed(ErrorKind.UNEXPECTED, f"{type(e).__name__}: {e}")
            logging_bridge.error({
                "component": "site_search.engine",
                "op": "job_error",
                "provider": self.provider.kind,
                "index": index,
                "query": job.query,
                "error": repr(e),
            })

        row = ResultRow.from_outcome(job, outcome)
        logging_bridge.activity({
            "component": "site_search.engine",
            "op": "job",
            "provider": self.provider.kind,
            "index": index,
            "domain": job.domain,
            "article": job.article,
            "status": row.status.value,
            "error_kind": row.error_kind.value if row.error_kind else None,
            "duration_us": elapsed_us(t0),
        })
        return row


# =============================================================================
# DEFAULT PROVIDER LOOKUP (PRODUCTION)
# =============================================================================
def _default_get_provider(kind: str) -> type[SearchProvider]:
    """
    Resolve provider class from registry.

    Only called if no `get_provider` override is provided.
    """
    from .providers.registry import get as get_provider_class

    return get_provider_class(kind)


# =============================================================================
# MAIN ENTRY (settings in, rows + meta out)
# =============================================================================
def run_once(
    settings: Settings,
    get_provider: Callable[[str], type[SearchProvider]] | None = None,
    on_progress: ProgressCallback | None = None,
    confirm: ConfirmCallback | None = None,
    sleep: Callable[[float], None] = time.sleep,
) -> tuple[list[ResultRow], dict] | None:
    """
    Run one batch as configured.

    Args:
        settings: Inputs, provider kind, pacing, output path.
        get_provider: Optional override to inject provider classes (for testing).
        on_progress: Called after every job.
        confirm: Asked before large batches; ignored when settings.assume_yes.

    Returns:
        (rows, meta) when the batch ran, None when confirmation was declined.

    Raises:
        ValidationError: empty domain or article list.
        KeyError: unknown provider kind.
    """
    start_ns = time.perf_counter_ns()
    get_provider_func = get_provider or _default_get_provider

    provider_cls = get_provider_func(settings.provider)
    with provider_cls.from_settings(settings) as provider:
        orchestrator = BatchOrchestrator(
            provider,
            pacing_seconds=settings.pacing_seconds,
            confirm_threshold=settings.confirm_threshold,
            confirm=None if settings.assume_yes else confirm,
            on_progress=on_progress,
            sleep=sleep,
        )
        rows = orchestrator.run(settings.domains, settings.articles)

    if orchestrator.state is RunState.IDLE:
        return None

    counts = render.summarize(rows)
    csv_path = render.write_csv(rows, settings.csv_path) if settings.csv_path else None
    total_us = elapsed_us(start_ns)

    meta = {
        "provider": settings.provider,
        "total": len(rows),
        "found": counts["found"],
        "not_found": counts["not_found"],
        "errors": counts["errors"],
        "state": orchestrator.state.value,
        "csv_path": csv_path,
        "duration_us": total_us,
    }
    logging_bridge.activity({"component": "site_search.engine", "op": "summary", **meta})
    return rows, meta
