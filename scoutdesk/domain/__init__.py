"""Domain layer definitions."""

from .jobs import JobStatus, PollJob

__all__ = [
    "JobStatus",
    "PollJob",
]
