from __future__ import annotations

import csv
import io
import os
from collections.abc import Iterable
from datetime import date

from .models import ResultRow, Status

CSV_HEADERS = ("Domain", "Article", "SearchQuery", "URL", "Title", "Description", "Error")


def to_csv(rows: Iterable[ResultRow]) -> str:
    """
    Serialize rows in order, header first.

    Fields holding a comma, a double quote or a newline are quoted, with
    inner quotes doubled; everything else is written bare.
    """
    buf = io.StringIO()
    writer = csv.writer(buf, quoting=csv.QUOTE_MINIMAL, lineterminator="\n")
    writer.writerow(CSV_HEADERS)
    for r in rows:
        writer.writerow([
            r.domain,
            r.article,
            r.query,
            r.url,
            r.title,
            r.description or "",
            r.error or "",
        ])
    return buf.getvalue()


def write_csv(rows: Iterable[ResultRow], path: str) -> str:
    """Write the CSV export to `path` (parent dirs created). Returns the path."""
    parent = os.path.dirname(path)
    if parent:
        os.makedirs(parent, exist_ok=True)
    with open(path, "w", encoding="utf-8", newline="") as f:
        f.write(to_csv(rows))
    return path


def default_csv_name(today: date | None = None) -> str:
    return f"site_search_{(today or date.today()).isoformat()}.csv"


def summarize(rows: Iterable[ResultRow]) -> dict[str, int]:
    counts = {"found": 0, "not_found": 0, "errors": 0}
    for r in rows:
        if r.status is Status.FOUND:
            counts["found"] += 1
        elif r.status is Status.ERROR:
            counts["errors"] += 1
        else:
            counts["not_found"] += 1
    return counts


def estimate_minutes(remaining_jobs: int, seconds_per_job: float = 7.0) -> int:
    """Rough wall-clock estimate; a browser-backed search takes 5-10 s."""
    return round(max(remaining_jobs, 0) * seconds_per_job / 60)
