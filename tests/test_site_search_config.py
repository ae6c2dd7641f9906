# tests/test_site_search_config.py
import json

import pytest

from modules.site_search.lib.config import DEFAULT_PROVIDER, ConfigError, Settings
from service import logging_utils


def test_defaults():
    s = Settings.from_env_and_kwargs({})
    assert s.provider == DEFAULT_PROVIDER
    assert s.pacing_seconds == 0.5
    assert s.timeout_seconds == 30.0
    assert s.confirm_threshold == 10
    assert s.assume_yes is False
    assert s.csv_path is None
    assert s.domains == [] and s.articles == []


def test_inline_inputs_win_over_files(tmp_path):
    f = tmp_path / "domains.txt"
    f.write_text("from-file.it\n", encoding="utf-8")
    s = Settings.from_env_and_kwargs({
        "domains": "a.it\n\n b.it ",
        "domains_path": str(f),
        "articles_path": str(f),
    })
    assert s.domains == ["a.it", "b.it"]
    assert s.articles == ["from-file.it"]
    assert s.total_jobs == 2


def test_env_defaults_and_kwarg_override(monkeypatch):
    monkeypatch.setenv("SITE_SEARCH_PROVIDER", "QWANT_API")
    monkeypatch.setenv("SITE_SEARCH_PACING_SECONDS", "1.5")
    s = Settings.from_env_and_kwargs({"assume_yes": "yes"})
    assert s.provider == "qwant_api"
    assert s.pacing_seconds == 1.5
    assert s.assume_yes is True

    s = Settings.from_env_and_kwargs({"provider": "stub", "pacing_seconds": "0"})
    assert s.provider == "stub"
    assert s.pacing_seconds == 0.0


@pytest.mark.parametrize(
    "kwargs",
    [
        {"pacing_seconds": -1},
        {"timeout_seconds": 0},
        {"confirm_threshold": -2},
        {"pacing_seconds": "soon"},
        {"provider_params": ["not", "a", "dict"]},
        {"domains": 42},
        {"domains_path": "/definitely/not/here.txt"},
    ],
)
def test_invalid_settings_raise_config_error(kwargs):
    with pytest.raises(ConfigError):
        Settings.from_env_and_kwargs(kwargs)


def test_activity_log_is_jsonl_and_redacted(tmp_path):
    logging_utils.write_activity_log({"op": "start", "api_key": "s3cr3t", "nested": {"token": "t"}})
    lines = (tmp_path / "logs").glob("activity-test-*.jsonl")
    records = [json.loads(line) for p in lines for line in p.read_text(encoding="utf-8").splitlines()]
    assert records[-1]["op"] == "start"
    assert records[-1]["api_key"] == "***REDACTED***"
    assert records[-1]["nested"]["token"] == "***REDACTED***"
    assert "host" in records[-1]["_meta"]
