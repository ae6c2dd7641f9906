# tests/test_site_search_render.py
import csv
import io
from datetime import date

from modules.site_search.lib import render
from modules.site_search.lib.models import ErrorKind, ResultRow, Status


def _row(**kw):
    base = {"domain": "a.it", "article": "Titolo", "query": 'site:a.it "Titolo"'}
    base.update(kw)
    return ResultRow(**base)


def test_csv_round_trips_comma_quote_and_newline():
    tricky = _row(
        article='Salute, "AI" e\ninnovazione',
        query='site:a.it "Salute, "AI" e\ninnovazione"',
        url="https://a.it/x",
        title="Salute, AI",
        description='He said "hi"\nthen left',
        status=Status.FOUND,
    )
    text = render.to_csv([tricky])
    parsed = list(csv.reader(io.StringIO(text)))

    assert parsed[1] == [
        "a.it",
        'Salute, "AI" e\ninnovazione',
        'site:a.it "Salute, "AI" e\ninnovazione"',
        "https://a.it/x",
        "Salute, AI",
        'He said "hi"\nthen left',
        "",
    ]


def test_csv_quotes_only_when_needed():
    plain = _row(url="https://a.it/x", title="Plain title", status=Status.FOUND)
    lines = render.to_csv([plain]).split("\n")
    assert lines[0] == "Domain,Article,SearchQuery,URL,Title,Description,Error"
    # the query carries quotes, so only it is wrapped
    assert lines[1] == 'a.it,Titolo,"site:a.it ""Titolo""",https://a.it/x,Plain title,,'


def test_csv_error_column_and_row_order():
    rows = [
        _row(domain="a.it", error_kind=ErrorKind.NO_RESULT, error="No results found on Stub"),
        _row(domain="b.it", error_kind=ErrorKind.TRANSPORT, error="Stub error: boom", status=Status.ERROR),
    ]
    parsed = list(csv.reader(io.StringIO(render.to_csv(rows))))
    assert [p[0] for p in parsed[1:]] == ["a.it", "b.it"]
    assert [p[-1] for p in parsed[1:]] == ["No results found on Stub", "Stub error: boom"]


def test_write_csv_creates_parent_dirs(tmp_path):
    path = tmp_path / "nested" / "out.csv"
    render.write_csv([_row()], str(path))
    assert path.read_text(encoding="utf-8").startswith("Domain,Article")


def test_default_csv_name_uses_today(frozen_today):
    assert render.default_csv_name() == "site_search_2025-01-01.csv"
    assert render.default_csv_name(date(2024, 2, 29)) == "site_search_2024-02-29.csv"


def test_summarize_counts_each_status():
    rows = [
        _row(url="https://a.it/1", status=Status.FOUND),
        _row(status=Status.NOT_FOUND),
        _row(status=Status.ERROR, error="x"),
        _row(status=Status.ERROR, error="y"),
    ]
    assert render.summarize(rows) == {"found": 1, "not_found": 1, "errors": 2}


def test_estimate_minutes():
    assert render.estimate_minutes(20) == 2
    assert render.estimate_minutes(0) == 0
    assert render.estimate_minutes(-3) == 0
