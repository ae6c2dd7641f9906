# tests/conftest.py
import os
import warnings

import pytest
from freezegun import freeze_time

from modules.site_search.lib.models import ErrorKind, SearchOutcome
from modules.site_search.lib.providers.base import SearchProvider

warnings.filterwarnings("error", category=DeprecationWarning, module="modules")


# ---------------------------------------------------------------------
# Live tests are opt-in: use --live or RUN_LIVE_TESTS=1
# ---------------------------------------------------------------------
def pytest_addoption(parser: pytest.Parser) -> None:
    parser.addoption(
        "--live",
        action="store_true",
        default=False,
        help="Run tests marked as 'live' (network calls or a real browser).",
    )


def pytest_configure(config: pytest.Config) -> None:
    config.addinivalue_line(
        "markers",
        "live: marks tests that perform live network calls or drive a real browser (skipped by default).",
    )


def pytest_collection_modifyitems(config: pytest.Config, items: list[pytest.Item]) -> None:
    run_live = config.getoption("--live") or os.getenv("RUN_LIVE_TESTS") == "1"
    if run_live:
        return
    skip_live = pytest.mark.skip(reason="live tests disabled (use --live or RUN_LIVE_TESTS=1)")
    for item in items:
        if "live" in item.keywords:
            item.add_marker(skip_live)


# ---------------------------------------------------------------------
# Test-wide env defaults (autouse, function-scoped)
# ---------------------------------------------------------------------
@pytest.fixture(autouse=True)
def _env_defaults(monkeypatch, tmp_path):
    # Write logs to a throwaway dir so real logs stay clean (per test)
    monkeypatch.setenv("LOG_DIR", str(tmp_path / "logs"))
    monkeypatch.setenv("ACTIVITY_LOG_PREFIX", "activity-test")
    monkeypatch.setenv("ERROR_LOG_PREFIX", "error-test")
    for name in (
        "SITE_SEARCH_PROVIDER",
        "SITE_SEARCH_PACING_SECONDS",
        "SITE_SEARCH_TIMEOUT_SECONDS",
        "SITE_SEARCH_USER_AGENT",
        "SITE_SEARCH_LOCALE",
    ):
        monkeypatch.delenv(name, raising=False)
    yield


# ---------------------------------------------------------------------
# Shared fakes
# ---------------------------------------------------------------------
@pytest.fixture
def events():
    """Ordered trace of provider calls and pacing sleeps."""
    return []


@pytest.fixture
def fake_sleep(events):
    def _sleep(seconds):
        events.append(("sleep", seconds))

    return _sleep


@pytest.fixture
def scripted_provider(events):
    """
    Build a provider whose answers are scripted per domain.

    script values: a SearchOutcome to return, or an exception instance to raise.
    Unscripted domains get a found result on https://<domain>/a.
    """

    def _factory(script=None):
        script = dict(script or {})

        class Scripted(SearchProvider):
            kind = "scripted"
            label = "Scripted"

            def __init__(self, **_):
                self.closed = False

            def search(self, query):
                events.append(("search", query))
                domain = query.split(" ", 1)[0][len("site:"):]
                answer = script.get(domain)
                if isinstance(answer, BaseException):
                    raise answer
                if answer is not None:
                    return answer
                return SearchOutcome.found(f"https://{domain}/a", "Some Title", "desc")

            def close(self):
                self.closed = True

        return Scripted

    return _factory


@pytest.fixture
def no_result():
    return SearchOutcome.failed(ErrorKind.NO_RESULT, "No results found on Scripted")


@pytest.fixture
def frozen_today():
    with freeze_time("2025-01-01T00:00:00Z"):
        yield
