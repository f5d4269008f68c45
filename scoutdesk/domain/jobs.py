"""Domain entities for long-running backend jobs observed by polling."""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any


class JobStatus(str, Enum):
    IDLE = "idle"
    POLLING = "polling"
    COMPLETE = "complete"
    FAILED = "failed"
    TIMED_OUT = "timedOut"
    CANCELLED = "cancelled"

    @property
    def is_terminal(self) -> bool:
        return self not in (JobStatus.IDLE, JobStatus.POLLING)


@dataclass(slots=True)
class PollJob:
    """A single polling run against one remote job."""

    job_id: str
    kind: str
    started_at: float
    interval_ms: int
    max_duration_ms: int
    status: JobStatus = JobStatus.POLLING
    baseline: int | None = None
    generation: int = 0
    ticks: int = 0
    last_observation: Any = None
    error: str | None = None
    finished_at: float | None = None

    def elapsed_ms(self, now: float) -> float:
        return now - self.started_at

    def to_dict(self) -> dict[str, Any]:
        return {
            "job_id": self.job_id,
            "kind": self.kind,
            "status": self.status.value,
            "started_at": self.started_at,
            "finished_at": self.finished_at,
            "interval_ms": self.interval_ms,
            "max_duration_ms": self.max_duration_ms,
            "baseline": self.baseline,
            "ticks": self.ticks,
            "error": self.error,
            "last_observation": self.last_observation,
        }
