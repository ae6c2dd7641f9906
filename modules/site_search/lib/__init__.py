# modules/site_search/lib/__init__.py
from __future__ import annotations

# Re-export commonly-used types for convenience
from .config import ConfigError, Settings
from .engine import BatchOrchestrator, ValidationError, run_once
from .models import ErrorKind, Job, Progress, ResultRow, RunState, SearchOutcome, Status

# Importing providers registers every built-in backend.
from .providers import ProviderError, SearchProvider

__all__ = [
    "BatchOrchestrator",
    "ConfigError",
    "ErrorKind",
    "Job",
    "Progress",
    "ProviderError",
    "ResultRow",
    "RunState",
    "SearchOutcome",
    "SearchProvider",
    "Settings",
    "Status",
    "ValidationError",
    "run_once",
]
