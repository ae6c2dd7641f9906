from __future__ import annotations

import os
import time
from typing import Any


def truthy(v: Any) -> bool:
    """
    Normalize common truthy inputs from env/kwargs.
    Accepts bools or strings like: '1', 'true', 'yes', 'on'.
    """
    if isinstance(v, bool):
        return v
    if v is None:
        return False
    if isinstance(v, (int, float)):
        return v != 0
    s = str(v).strip().lower()
    return s in {"1", "true", "yes", "on", "y", "t"}


def getenv_str(name: str, default: str | None = None) -> str | None:
    """
    Typed wrapper for environment access. Blank values count as unset.
    """
    val = os.getenv(name)
    if val is None or not val.strip():
        return default
    return val.strip()


def elapsed_us(start_ns: int) -> int:
    return int((time.perf_counter_ns() - start_ns) // 1000)
