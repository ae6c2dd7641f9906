from __future__ import annotations

import copy
import logging
from typing import Any

# Preferred sink is the service JSONL writer; default to stdlib logging.
# No prints; this module should be silent on import.
_logging_backend = None
try:
    from service import logging_utils as _svc_logging

    _logging_backend = _svc_logging
except ImportError:
    _logging_backend = None

# Keys that should be redacted from structured logs
_REDACT_KEYS = {
    "password",
    "token",
    "apikey",
    "api_key",
    "secret",
    "authorization",
    "auth",
    "bearer",
    "cookie",
}


def _redact_record(record: dict[str, Any]) -> dict[str, Any]:
    """
    Shallow-copy record and redact obvious secret-like fields at top level.
    Provider params may carry API keys, hence the check here as well.
    """
    redacted = copy.copy(record)
    for k in list(redacted.keys()):
        lk = str(k).lower()
        if lk in _REDACT_KEYS or lk.endswith("_secret") or lk.endswith("_key"):
            redacted[k] = "***REDACTED***"
    return redacted


def activity(record: dict[str, Any]) -> None:
    """
    Write an activity record through service.logging_utils if available.
    Falls back to stdlib logging as structured info.
    """
    payload = _redact_record(record)
    if _logging_backend is not None:
        try:
            _logging_backend.write_activity_log(payload)
            return
        except OSError:
            logging.getLogger("site_search.activity").debug("activity sink failed", exc_info=True)
    logging.getLogger("site_search.activity").info(payload)


def error(record: dict[str, Any]) -> None:
    """
    Write an error record through service.logging_utils if available.
    Falls back to stdlib logging as structured error.
    """
    payload = _redact_record(record)
    if _logging_backend is not None:
        try:
            _logging_backend.write_error_log(payload)
            return
        except OSError:
            logging.getLogger("site_search.error").debug("error sink failed", exc_info=True)
    logging.getLogger("site_search.error").error(payload)
