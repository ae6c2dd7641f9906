# service/logging_utils.py
from __future__ import annotations

import datetime as _dt
import json
import os
import socket
from collections.abc import Iterable
from typing import Any

# ---- Configuration (env-driven, read per write so tests can redirect) --------
#   LOG_DIR               base directory (default ./local/logs)
#   ACTIVITY_LOG_PREFIX   default "activity"
#   ERROR_LOG_PREFIX      default "error"

_DEFAULT_LOG_DIR = os.path.join("local", "logs")

# Keys/substrings to redact (case-insensitive, substring match)
_DEFAULT_REDACT_KEYS = {
    "password",
    "token",
    "apikey",
    "api_key",
    "secret",
    "authorization",
    "cookie",
    "set-cookie",
}

# Host + process metadata (fixed per-process)
_HOSTNAME = socket.gethostname()
_PID = os.getpid()


# ---- Public API --------------------------------------------------------------


def write_activity_log(record: dict[str, Any]) -> None:
    """
    Persist a single structured activity record as one JSON line.

    May raise OSError on unrecoverable I/O errors.
    Never mutates the passed-in dict.
    """
    _write_jsonl(_log_path_for_today(os.getenv("ACTIVITY_LOG_PREFIX", "activity")), record)


def write_error_log(record: dict[str, Any]) -> None:
    """Persist a single structured error record, parallel to the activity log."""
    _write_jsonl(_log_path_for_today(os.getenv("ERROR_LOG_PREFIX", "error")), record)


# ---- Internal helpers --------------------------------------------------------


def _log_path_for_today(prefix: str) -> str:
    today = _dt.date.today().isoformat()
    return os.path.join(os.getenv("LOG_DIR") or _DEFAULT_LOG_DIR, f"{prefix}-{today}.jsonl")


def _key_matches(name: str, patterns: Iterable[str]) -> bool:
    n = name.lower()
    return any(pat in n for pat in patterns)


def _redact_deep(value: Any, patterns: Iterable[str]) -> Any:
    if isinstance(value, dict):
        out: dict[str, Any] = {}
        for k, v in value.items():
            if isinstance(k, str) and _key_matches(k, patterns):
                out[k] = "***REDACTED***"
            else:
                out[k] = _redact_deep(v, patterns)
        return out
    if isinstance(value, (list, tuple)):
        return [_redact_deep(v, patterns) for v in value]
    return value


def _json_default(obj: Any) -> Any:
    # Enums (Status, ErrorKind) and dataclass-ish values end up here.
    value = getattr(obj, "value", None)
    if value is not None:
        return value
    return str(obj)


def _write_jsonl(path: str, record: dict[str, Any]) -> None:
    """
    Core writer:
      - makes a deep redacted copy
      - stamps ts/host/pid
      - appends a single line (POSIX O_APPEND)
    """
    os.makedirs(os.path.dirname(path) or ".", exist_ok=True)

    payload = _redact_deep(record, _DEFAULT_REDACT_KEYS)
    payload.setdefault("ts", _dt.datetime.now().astimezone().isoformat(timespec="seconds"))
    payload["_meta"] = {"host": _HOSTNAME, "pid": _PID}

    # Serialize first so any serialization errors happen before file ops.
    data = (json.dumps(payload, ensure_ascii=False, separators=(",", ":"), default=_json_default) + "\n").encode("utf-8")

    fd = os.open(path, os.O_CREAT | os.O_APPEND | os.O_WRONLY, 0o644)
    try:
        os.write(fd, data)
    finally:
        os.close(fd)
