"""In-memory background jobs so slow simulations can leave the request cycle.

Jobs live in a bounded registry; the oldest entries are dropped once more
than ``MAX_JOBS`` are tracked. Tests switch to inline execution with
``set_async_execution(False)``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from threading import Lock, Thread
from typing import Any, Callable, Dict, List, Optional
from uuid import uuid4

from ..logging_config import get_logger

__all__ = [
    "Job",
    "JobRegistry",
    "enqueue",
    "get_job",
    "list_jobs",
    "set_async_execution",
    "clear_jobs",
]

logger = get_logger(__name__)

MAX_JOBS = 100

QUEUED = "queued"
RUNNING = "running"
SUCCEEDED = "succeeded"
FAILED = "failed"


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _iso(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value else None


@dataclass
class Job:
    """A queued callable, its lifecycle timestamps and its outcome."""

    name: str
    metadata: Dict[str, Any] = field(default_factory=dict)
    id: str = field(default_factory=lambda: uuid4().hex)
    status: str = QUEUED
    created_at: datetime = field(default_factory=_now)
    started_at: Optional[datetime] = None
    finished_at: Optional[datetime] = None
    error: Optional[str] = None
    result: Any = None

    def run(self, target: Callable[..., Any], kwargs: Dict[str, Any]) -> None:
        self.status = RUNNING
        self.started_at = _now()
        try:
            self.result = target(**kwargs)
        except Exception as exc:  # reported through the job status
            self.status = FAILED
            self.error = str(exc)
            logger.warning("Job %s (%s) failed: %s", self.id, self.name, exc)
        else:
            self.status = SUCCEEDED
        finally:
            self.finished_at = _now()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "status": self.status,
            "created_at": _iso(self.created_at),
            "started_at": _iso(self.started_at),
            "finished_at": _iso(self.finished_at),
            "error": self.error,
            "result": self.result,
            "metadata": self.metadata,
        }


class JobRegistry:
    """Thread-safe store of recent jobs."""

    def __init__(self, max_jobs: int = MAX_JOBS) -> None:
        self.max_jobs = max_jobs
        self.run_async = True
        self._jobs: Dict[str, Job] = {}
        self._lock = Lock()

    def add(self, job: Job) -> None:
        with self._lock:
            self._jobs[job.id] = job
            overflow = len(self._jobs) - self.max_jobs
            if overflow > 0:
                oldest = sorted(self._jobs.values(), key=lambda item: item.created_at)
                for stale in oldest[:overflow]:
                    del self._jobs[stale.id]

    def get(self, job_id: str) -> Optional[Job]:
        with self._lock:
            return self._jobs.get(job_id)

    def recent(self) -> List[Job]:
        with self._lock:
            jobs = list(self._jobs.values())
        return sorted(jobs, key=lambda item: item.created_at, reverse=True)

    def clear(self) -> None:
        with self._lock:
            self._jobs.clear()

    def submit(
        self,
        name: str,
        target: Callable[..., Any],
        metadata: Optional[Dict[str, Any]] = None,
        **kwargs: Any,
    ) -> Job:
        job = Job(name=name, metadata=metadata or {})
        self.add(job)
        if self.run_async:
            Thread(
                target=job.run,
                args=(target, kwargs),
                name=f"DebtSageJob-{job.id}",
                daemon=True,
            ).start()
        else:
            job.run(target, kwargs)
        return job


_registry = JobRegistry()


def set_async_execution(enabled: bool) -> None:
    """Run jobs in daemon threads (True) or inline in the caller (False)."""

    _registry.run_async = enabled


def clear_jobs() -> None:
    _registry.clear()


def enqueue(
    name: str,
    target: Callable[..., Any],
    *,
    metadata: Optional[Dict[str, Any]] = None,
    **kwargs: Any,
) -> Job:
    """Schedule ``target(**kwargs)`` and return the tracked job.

    The return value is stored on ``Job.result`` and should be
    JSON-serializable so status polling can return it unchanged.
    """

    return _registry.submit(name, target, metadata, **kwargs)


def get_job(job_id: str) -> Optional[Dict[str, Any]]:
    """Return the status payload for ``job_id`` or ``None`` when unknown."""

    job = _registry.get(job_id)
    return job.to_dict() if job else None


def list_jobs(limit: Optional[int] = None) -> List[Dict[str, Any]]:
    """Return tracked jobs, newest first."""

    jobs = _registry.recent()
    if limit is not None:
        jobs = jobs[:limit]
    return [job.to_dict() for job in jobs]
