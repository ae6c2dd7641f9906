from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class ErrorKind(str, Enum):
    """Why a provider call did not produce a usable result."""

    TRANSPORT = "transport_error"
    NO_RESULT = "no_result"
    UNEXPECTED = "unexpected_error"


class Status(str, Enum):
    FOUND = "found"
    NOT_FOUND = "not_found"
    ERROR = "error"


class RunState(str, Enum):
    IDLE = "idle"
    RUNNING = "running"
    COMPLETED = "completed"
    ABORTED = "aborted"


@dataclass(frozen=True)
class Job:
    """
    One (domain, article) pair of the cross product.
    `query` is derived by query.build_query when the job is created.
    """

    domain: str  # host-only, e.g. "askanews.it"
    article: str
    query: str


@dataclass(frozen=True)
class SearchOutcome:
    """
    What a provider returns for one query.

    - url/title set and error_kind None   -> found
    - url empty and error_kind None/NO_RESULT -> searched fine, nothing qualifying
    - error_kind TRANSPORT/UNEXPECTED      -> failed; `error` holds the message
    """

    url: str = ""
    title: str = ""
    description: str = ""
    error_kind: ErrorKind | None = None
    error: str | None = None

    @classmethod
    def found(cls, url: str, title: str, description: str = "") -> SearchOutcome:
        return cls(url=url, title=title, description=description or "")

    @classmethod
    def failed(cls, kind: ErrorKind, message: str) -> SearchOutcome:
        return cls(error_kind=kind, error=message)


@dataclass(frozen=True)
class Candidate:
    """A scored raw hit, only alive inside ranking.select_best."""

    url: str
    title: str
    description: str
    score: float


@dataclass(frozen=True)
class ResultRow:
    """Job fields + outcome fields + derived status. Appended once, never changed."""

    domain: str
    article: str
    query: str
    url: str = ""
    title: str = ""
    description: str = ""
    error_kind: ErrorKind | None = None
    error: str | None = None
    status: Status = Status.NOT_FOUND

    @classmethod
    def from_outcome(cls, job: Job, outcome: SearchOutcome) -> ResultRow:
        return cls(
            domain=job.domain,
            article=job.article,
            query=job.query,
            url=outcome.url or "",
            title=outcome.title or "",
            description=outcome.description or "",
            error_kind=outcome.error_kind,
            error=outcome.error,
            status=derive_status(outcome),
        )


@dataclass(frozen=True)
class Progress:
    """Snapshot handed to progress callbacks after every job."""

    completed: int
    total: int
    percent: int
    rows: tuple[ResultRow, ...] = field(default_factory=tuple)


def derive_status(outcome: SearchOutcome) -> Status:
    if outcome.error_kind in (ErrorKind.TRANSPORT, ErrorKind.UNEXPECTED):
        return Status.ERROR
    if outcome.url and outcome.error_kind is None:
        return Status.FOUND
    return Status.NOT_FOUND
