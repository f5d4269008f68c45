"""Bounded polling of long-running backend jobs.

The backend offers no push channel for report generation or web-search
enrichment, so completion is detected by polling on a fixed interval until a
predicate fires or a wall-clock cap elapses.  A watcher owns at most one job
and one timer task at a time::

    idle -> polling -> complete | failed | timedOut | cancelled

Terminal states are sticky: once a job has timed out or been cancelled, a
late poll result or pushed status update cannot move it again.  Clock and
sleep are injected so tests can drive virtual time.
"""
from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Protocol

from scoutdesk.core import settings
from scoutdesk.core.validation import validate_positive_ms
from scoutdesk.domain import JobStatus, PollJob

logger = logging.getLogger(__name__)

StartJob = Callable[[], Awaitable[str]]
Poll = Callable[[str], Awaitable[Any]]
FetchBaseline = Callable[[], Awaitable[Any]]
Clock = Callable[[], float]
Sleep = Callable[[float], Awaitable[None]]
Listener = Callable[[PollJob], None]


def monotonic_ms() -> float:
    return time.monotonic() * 1000


class CompletionPredicate(Protocol):
    def measure(self, observation: Any) -> int | None: ...

    def evaluate(self, observation: Any, baseline: int | None) -> JobStatus | None: ...

    def error(self, observation: Any) -> str | None: ...


@dataclass(frozen=True)
class StatusFieldPredicate:
    """Completion signalled by a status field reaching a terminal value."""

    status_key: str = "status"
    completed: tuple[str, ...] = ("completed", "complete")
    failed: tuple[str, ...] = ("failed",)

    def measure(self, observation: Any) -> int | None:
        return None

    def evaluate(self, observation: Any, baseline: int | None) -> JobStatus | None:
        if not isinstance(observation, dict):
            return None
        status = str(observation.get(self.status_key) or "").strip().lower()
        if status in self.completed:
            return JobStatus.COMPLETE
        if status in self.failed:
            return JobStatus.FAILED
        return None

    def error(self, observation: Any) -> str | None:
        if not isinstance(observation, dict):
            return None
        message = observation.get("error_message") or observation.get("error")
        return str(message) if message else None


@dataclass(frozen=True)
class CountDiffPredicate:
    """Completion signalled by an append-only collection growing past its baseline."""

    items_key: str = "items"
    count_key: str = "count"

    def measure(self, observation: Any) -> int | None:
        if isinstance(observation, list):
            return len(observation)
        if isinstance(observation, dict):
            count = observation.get(self.count_key)
            if isinstance(count, int) and not isinstance(count, bool):
                return count
            items = observation.get(self.items_key)
            if isinstance(items, list):
                return len(items)
        return 0

    def evaluate(self, observation: Any, baseline: int | None) -> JobStatus | None:
        observed = self.measure(observation) or 0
        if observed > (baseline or 0):
            return JobStatus.COMPLETE
        return None

    def error(self, observation: Any) -> str | None:
        return None


STATUS_FIELD = StatusFieldPredicate()


class CompletionWatcher:
    """Starts a remote job and polls it until completion, failure or timeout."""

    def __init__(
        self,
        start_job: StartJob,
        poll: Poll,
        predicate: CompletionPredicate = STATUS_FIELD,
        *,
        kind: str = "report",
        fetch_baseline: FetchBaseline | None = None,
        interval_ms: int | None = None,
        max_duration_ms: int | None = None,
        clock: Clock = monotonic_ms,
        sleep: Sleep = asyncio.sleep,
        autorun: bool = True,
    ) -> None:
        self._start_job = start_job
        self._poll = poll
        self._predicate = predicate
        self._kind = kind
        self._fetch_baseline = fetch_baseline
        self._interval_ms = validate_positive_ms(interval_ms, "interval_ms") or settings.poll_interval_ms()
        self._max_duration_ms = (
            validate_positive_ms(max_duration_ms, "max_duration_ms") or settings.poll_max_duration_ms()
        )
        self._clock = clock
        self._sleep = sleep
        self._autorun = autorun
        self._job: PollJob | None = None
        self._task: asyncio.Task[None] | None = None
        self._generation = 0
        self._listeners: list[Listener] = []

    # ------------------------------------------------------------------
    # state
    # ------------------------------------------------------------------
    @property
    def job(self) -> PollJob | None:
        return self._job

    @property
    def status(self) -> JobStatus:
        return self._job.status if self._job else JobStatus.IDLE

    def subscribe(self, listener: Listener) -> None:
        self._listeners.append(listener)

    def _notify(self, job: PollJob) -> None:
        for listener in list(self._listeners):
            listener(job)

    def _is_current(self, job: PollJob) -> bool:
        return self._job is job and not job.status.is_terminal

    def _finish(self, job: PollJob, status: JobStatus, *, error: str | None = None) -> None:
        if not self._is_current(job):
            return
        job.status = status
        job.finished_at = self._clock()
        if error:
            job.error = error
        self._stop_timer()
        logger.info("Job %s (%s) finished as %s after %d tick(s)", job.job_id, job.kind, status.value, job.ticks)
        self._notify(job)

    def _stop_timer(self) -> None:
        task, self._task = self._task, None
        if task is None or task.done():
            return
        try:
            current = asyncio.current_task()
        except RuntimeError:
            current = None
        if task is not current:
            task.cancel()

    def _remaining_ms(self, job: PollJob) -> float:
        return job.max_duration_ms - job.elapsed_ms(self._clock())

    # ------------------------------------------------------------------
    # lifecycle
    # ------------------------------------------------------------------
    async def start(self) -> PollJob | None:
        """Start the remote job and begin polling it.

        Any outstanding job is cancelled first.  Returns ``None`` when the
        watcher was cancelled or restarted while the job was being started.
        """

        self.cancel()
        self._generation += 1
        generation = self._generation

        baseline: int | None = None
        if self._fetch_baseline is not None:
            baseline = self._predicate.measure(await self._fetch_baseline())
        job_id = await self._start_job()

        if generation != self._generation:
            logger.info("Discarding job %s: watcher was cancelled while starting", job_id)
            return None

        job = PollJob(
            job_id=job_id,
            kind=self._kind,
            started_at=self._clock(),
            interval_ms=self._interval_ms,
            max_duration_ms=self._max_duration_ms,
            baseline=baseline,
            generation=generation,
        )
        self._job = job
        logger.info("Polling job %s (%s) every %d ms", job_id, self._kind, self._interval_ms)
        self._notify(job)
        if self._autorun:
            self._task = asyncio.create_task(self._run(job))
        return job

    async def tick(self) -> JobStatus:
        """Poll once and apply the completion predicate."""

        job = self._job
        if job is None:
            return JobStatus.IDLE
        if job.status.is_terminal:
            return job.status
        if self._remaining_ms(job) <= 0:
            self._finish(job, JobStatus.TIMED_OUT)
            return job.status

        try:
            observation = await asyncio.wait_for(self._poll(job.job_id), self._remaining_ms(job) / 1000)
        except asyncio.TimeoutError:
            logger.warning("Poll for job %s outlived the duration cap", job.job_id)
            self._finish(job, JobStatus.TIMED_OUT)
            return job.status
        except Exception:
            if not self._is_current(job):
                return job.status
            raise

        if not self._is_current(job):
            logger.debug("Discarding stale poll result for job %s", job.job_id)
            return job.status

        job.ticks += 1
        job.last_observation = observation
        outcome = self._predicate.evaluate(observation, job.baseline)
        if outcome is not None:
            self._finish(job, outcome, error=self._predicate.error(observation))
        elif self._remaining_ms(job) <= 0:
            self._finish(job, JobStatus.TIMED_OUT)
        return job.status

    def observe(self, update: Any) -> JobStatus:
        """Apply a pushed status row; repeated or late updates are ignored."""

        job = self._job
        if job is None:
            return JobStatus.IDLE
        if not self._is_current(job):
            return job.status
        if isinstance(update, dict):
            target = update.get("job_id", update.get("id"))
            if target is not None and str(target) != job.job_id:
                return job.status
        outcome = STATUS_FIELD.evaluate(update, job.baseline)
        if outcome is not None:
            job.last_observation = update
            self._finish(job, outcome, error=STATUS_FIELD.error(update))
        return job.status

    def cancel(self) -> bool:
        """Stop polling immediately, keeping whatever was already observed."""

        self._generation += 1
        job = self._job
        if job is None or job.status.is_terminal:
            self._stop_timer()
            return False
        self._finish(job, JobStatus.CANCELLED)
        return True

    def close(self) -> None:
        """Cancel and forget the current job (owning view went away)."""

        self.cancel()
        self._job = None

    async def wait(self) -> JobStatus:
        task = self._task
        if task is not None:
            await asyncio.wait({task})
        return self.status

    async def _run(self, job: PollJob) -> None:
        while self._is_current(job):
            delay_ms = min(job.interval_ms, max(self._remaining_ms(job), 0))
            await self._sleep(delay_ms / 1000)
            if not self._is_current(job):
                break
            try:
                await self.tick()
            except Exception as exc:
                # The duration cap still applies to failed ticks.
                job.error = str(exc)
                logger.warning("Polling job %s failed: %s", job.job_id, exc)
