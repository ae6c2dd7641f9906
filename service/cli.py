# service/cli.py
"""
Command-line entrypoints.

Subcommands
-----------
search --domains FILE --articles FILE [--provider KIND] [--out CSV] [--yes] ...
    - Runs one batch via modules.site_search.run(...)
    - Prints a progress line per job and a final result table
    - Writes the CSV export (default: site_search_<YYYY-MM-DD>.csv)

providers
    - Prints the registered search providers
"""

from __future__ import annotations

import argparse
import json
import logging
import os
import sys
import time
from collections.abc import Iterable
from typing import Any

from modules.site_search import run as run_site_search
from modules.site_search.lib import ConfigError, Progress, ResultRow, Status, ValidationError
from modules.site_search.lib import render
from modules.site_search.lib.config import DEFAULT_PROVIDER
from modules.site_search.lib.providers import describe as describe_providers
from modules.site_search.lib.utils import getenv_str
from service import logging_utils as L

LOG = logging.getLogger("service.cli")

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_INVALID = 2
EXIT_DECLINED = 3
EXIT_INTERRUPTED = 130

_STATUS_LABEL = {
    Status.FOUND: "found",
    Status.NOT_FOUND: "not found",
    Status.ERROR: "error",
}


# ----------------------------- Logging setup ---------------------------------
def _ensure_logging(level: str | None = None) -> None:
    """Initialize a reasonable logging setup if none exists yet."""
    root = logging.getLogger()
    if not root.handlers:
        level = (level or os.getenv("LOG_LEVEL", "INFO")).upper()
        logging.basicConfig(
            level=getattr(logging, level, logging.INFO),
            format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
        )


# -------------------------- Utility / glue code ------------------------------
def _parse_kv_pairs(pairs: Iterable[str]) -> dict[str, Any]:
    """
    Parse key=value strings into a dict.
    - Values that look like JSON (true/false/null/number/object/array) are parsed.
    - Otherwise keep as raw strings.
    """
    out: dict[str, Any] = {}
    for raw in pairs:
        if "=" not in raw:
            raise argparse.ArgumentTypeError(f"--params item must be key=value (got {raw!r})")
        k, v = raw.split("=", 1)
        k = k.strip()
        v = v.strip()
        if not k:
            raise argparse.ArgumentTypeError(f"Invalid key in --params item {raw!r}")
        try:
            out[k] = json.loads(v)
        except ValueError:
            out[k] = v
    return out


def _truncate(s: str, width: int) -> str:
    return s if len(s) <= width else s[: width - 3] + "..."


def _print_table(rows: list[tuple[str, ...]], headers: tuple[str, ...]) -> None:
    """Very simple fixed-width table printer."""
    widths = [max(len(h), *(len(r[i]) for r in rows)) if rows else len(h) for i, h in enumerate(headers)]
    sep = "+-" + "-+-".join("-" * w for w in widths) + "-+"
    print(sep)
    print("| " + " | ".join(h.ljust(w) for h, w in zip(headers, widths)) + " |")
    print(sep)
    for r in rows:
        print("| " + " | ".join(c.ljust(w) for c, w in zip(r, widths)) + " |")
    print(sep)


def _result_table(rows: list[ResultRow]) -> list[tuple[str, ...]]:
    out = []
    for r in rows:
        status = _STATUS_LABEL[r.status]
        if r.status is Status.ERROR and r.error:
            status = f"error: {_truncate(r.error, 30)}"
        out.append((
            r.domain,
            _truncate(r.article, 40),
            _truncate(r.url, 50) if r.url else "-",
            _truncate(r.title, 40) if r.title else "-",
            status,
        ))
    return out


def _prompt_confirm(total: int) -> bool:
    minutes = render.estimate_minutes(total)
    print(
        f"About to run {total} searches (~{minutes} min at 5-10 s each). "
        "Smaller batches (10 or fewer) avoid upstream throttling.",
        file=sys.stderr,
    )
    try:
        answer = input("Continue? [y/N] ")
    except EOFError:
        return False
    return answer.strip().lower() in {"y", "yes"}


def _progress_printer(quiet: bool):
    def _on_progress(p: Progress) -> None:
        if quiet:
            return
        last = p.rows[-1]
        remaining = render.estimate_minutes(p.total - p.completed)
        print(
            f"[{p.percent:3d}%] {p.completed}/{p.total} {last.domain} | "
            f"{_truncate(last.article, 40)} -> {_STATUS_LABEL[last.status]} (~{remaining} min left)",
            file=sys.stderr,
        )

    return _on_progress


# ------------------------------ Subcommands ----------------------------------
def cmd_search(args: argparse.Namespace) -> int:
    start_time = time.monotonic()
    try:
        params = _parse_kv_pairs(args.params or [])
    except argparse.ArgumentTypeError as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return EXIT_INVALID

    kwargs: dict[str, Any] = {
        "domains_path": args.domains,
        "articles_path": args.articles,
        "provider_params": params,
        "assume_yes": args.yes,
        "csv_path": args.out or render.default_csv_name(),
    }
    # Only forward what was given so env defaults still apply.
    for key, value in (
        ("provider", args.provider),
        ("pacing_seconds", args.pace),
        ("timeout_seconds", args.timeout),
        ("confirm_threshold", args.threshold),
    ):
        if value is not None:
            kwargs[key] = value

    try:
        result = run_site_search(
            on_progress=_progress_printer(args.quiet),
            confirm=_prompt_confirm,
            **kwargs,
        )
    except KeyboardInterrupt:
        return EXIT_INTERRUPTED
    except (ValidationError, ConfigError, KeyError) as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return EXIT_INVALID
    except Exception as e:
        LOG.exception("Search run failed: %s", e)
        L.write_error_log({
            "where": "cli.search",
            "error": repr(e),
            "duration_ms": int((time.monotonic() - start_time) * 1000),
        })
        print(f"FAILURE: {e}", file=sys.stderr)
        return EXIT_FAILURE

    if result is None:
        print("Cancelled: no searches were run.")
        return EXIT_DECLINED

    rows, meta = result
    if not args.quiet:
        _print_table(_result_table(rows), headers=("DOMAIN", "ARTICLE", "LINK", "TITLE", "STATUS"))
    print(
        f"DONE: {meta['total']} searches - {meta['found']} found, "
        f"{meta['not_found']} not found, {meta['errors']} errors. CSV: {meta['csv_path']}"
    )
    L.write_activity_log({
        "event": "cli_search",
        "provider": meta["provider"],
        "total": meta["total"],
        "duration_ms": int((time.monotonic() - start_time) * 1000),
    })
    return EXIT_OK


def cmd_providers(args: argparse.Namespace) -> int:
    default = getenv_str("SITE_SEARCH_PROVIDER", DEFAULT_PROVIDER)
    rows = [(kind, label, "*" if is_default else "") for kind, label, is_default in describe_providers(default)]
    _print_table(rows, headers=("KIND", "LABEL", "DEFAULT"))
    return EXIT_OK


# ------------------------------- Argparse ------------------------------------
def _build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="python -m service.cli",
        description="Find the URL of each article on each domain via site: searches.",
    )
    p.add_argument("--log-level", help="Logging level (default: LOG_LEVEL env or INFO).")
    sub = p.add_subparsers(dest="cmd", required=True)

    # search
    sp = sub.add_parser("search", help="Search every article on every domain.")
    sp.add_argument("--domains", required=True, help="File with one domain per line.")
    sp.add_argument("--articles", required=True, help="File with one article title per line.")
    sp.add_argument("--provider", help="Provider kind (see 'providers'; default SITE_SEARCH_PROVIDER or qwant_browser).")
    sp.add_argument("--out", help="CSV output path (default: site_search_<date>.csv).")
    sp.add_argument("--pace", type=float, help="Seconds to wait after each search (default 0.5).")
    sp.add_argument("--timeout", type=float, help="Per-search timeout in seconds (default 30).")
    sp.add_argument("--threshold", type=int, help="Ask for confirmation above this many searches (default 10).")
    sp.add_argument("--yes", "-y", action="store_true", help="Do not ask for confirmation.")
    sp.add_argument(
        "--params",
        metavar="k=v",
        nargs="*",
        help="Extra provider params (JSON values supported), e.g. headless=false.",
    )
    sp.add_argument("--quiet", "-q", action="store_true", help="Only print the final summary line.")
    sp.set_defaults(func=cmd_search)

    # providers
    sp = sub.add_parser("providers", help="List registered search providers.")
    sp.set_defaults(func=cmd_providers)

    return p


# --------------------------------- Main --------------------------------------
def main(argv: Iterable[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(args=list(argv) if argv is not None else None)
    _ensure_logging(args.log_level)
    return args.func(args)


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
