"""Application service layer for scouting reports, queue actions and job watches."""
from __future__ import annotations

import asyncio
import logging
from typing import Any, Callable

from scoutdesk.core import report_parser
from scoutdesk.core.dedupe import DedupResult, dedupe
from scoutdesk.core.reconcile import reconcile_report
from scoutdesk.core.schema import ParsedReport, QueueRecord
from scoutdesk.core.validation import ValidationError, validate_job_kind
from scoutdesk.domain import PollJob
from scoutdesk.infrastructure import ScoutingAPIClient, get_api_client
from scoutdesk.workers.watcher import (
    Clock,
    CompletionWatcher,
    CountDiffPredicate,
    Sleep,
    StatusFieldPredicate,
    monotonic_ms,
)

logger = logging.getLogger(__name__)


class UnknownWatchError(KeyError):
    """Raised when a watch id does not refer to an active watcher."""


class ScoutingService:
    """Coordinates report parsing, queue reconciliation and job polling."""

    MATCHING_QUEUES: tuple[str, ...] = ("pending", "review")

    ACTIONS: dict[str, str] = {
        "approve": "approved",
        "reject": "rejected",
        "reconsider": "pending",
    }

    def __init__(
        self,
        client_factory: Callable[[], ScoutingAPIClient] = get_api_client,
        *,
        clock: Clock = monotonic_ms,
        sleep: Sleep = asyncio.sleep,
        autorun: bool = True,
    ) -> None:
        self._client_factory = client_factory
        self._clock = clock
        self._sleep = sleep
        self._autorun = autorun
        self._watches: dict[str, CompletionWatcher] = {}

    @property
    def client(self) -> ScoutingAPIClient:
        return self._client_factory()

    # ------------------------------------------------------------------
    # reports
    # ------------------------------------------------------------------
    def parse_report(self, text: str | None) -> ParsedReport:
        return report_parser.parse(text)

    def parse_history(self, history_item: dict[str, Any] | None) -> ParsedReport:
        return report_parser.parse(report_parser.extract_report_text(history_item))

    async def fetch_matching_queue(self) -> list[QueueRecord]:
        records: list[QueueRecord] = []
        for status in self.MATCHING_QUEUES:
            records.extend(await asyncio.to_thread(self.client.fetch_queue, status))
        return records

    async def reconciled_report(self, history_item: dict[str, Any] | None) -> ParsedReport:
        report = self.parse_history(history_item)
        if report.technologies.total() == 0:
            return report
        queue = await self.fetch_matching_queue()
        return reconcile_report(report, queue)

    # ------------------------------------------------------------------
    # queue actions
    # ------------------------------------------------------------------
    async def apply_action(self, queue_id: str, action: str) -> dict[str, Any]:
        status = self.ACTIONS.get(action)
        if status is None:
            raise ValidationError(f"unknown queue action: {action}")
        result = await asyncio.to_thread(self.client.update_queue_item, queue_id, status)
        logger.info("Queue item %s moved to %s", queue_id, status)
        return result

    async def approve(self, queue_id: str) -> dict[str, Any]:
        return await self.apply_action(queue_id, "approve")

    async def reject(self, queue_id: str) -> dict[str, Any]:
        return await self.apply_action(queue_id, "reject")

    async def reconsider(self, queue_id: str) -> dict[str, Any]:
        return await self.apply_action(queue_id, "reconsider")

    # ------------------------------------------------------------------
    # persisted records
    # ------------------------------------------------------------------
    async def list_invoices(self, project_id: str) -> DedupResult:
        records = await asyncio.to_thread(self.client.list_invoices, project_id)
        return dedupe(records)

    # ------------------------------------------------------------------
    # job watches
    # ------------------------------------------------------------------
    @staticmethod
    def watch_id(kind: str, owner: str) -> str:
        return f"{kind}:{owner}"

    def _build_watcher(self, kind: str, owner: str, payload: dict[str, Any]) -> CompletionWatcher:
        client = self.client

        async def start_job() -> str:
            return await asyncio.to_thread(client.start_job, kind, {**payload, "owner": owner})

        if kind == "enrichment":
            collection = payload.get("collection")
            if not collection:
                raise ValidationError("enrichment watches require a collection path")

            async def fetch_collection(_: str = "") -> list[dict[str, Any]]:
                return await asyncio.to_thread(client.list_collection, collection)

            return CompletionWatcher(
                start_job,
                fetch_collection,
                CountDiffPredicate(),
                kind=kind,
                fetch_baseline=fetch_collection,
                interval_ms=payload.get("interval_ms"),
                max_duration_ms=payload.get("max_duration_ms"),
                clock=self._clock,
                sleep=self._sleep,
                autorun=self._autorun,
            )

        async def fetch_status(job_id: str) -> dict[str, Any]:
            return await asyncio.to_thread(client.get_job_status, job_id)

        return CompletionWatcher(
            start_job,
            fetch_status,
            StatusFieldPredicate(),
            kind=kind,
            interval_ms=payload.get("interval_ms"),
            max_duration_ms=payload.get("max_duration_ms"),
            clock=self._clock,
            sleep=self._sleep,
            autorun=self._autorun,
        )

    async def start_watch(self, kind: str, owner: str, payload: dict[str, Any] | None = None) -> PollJob | None:
        validate_job_kind(kind)
        payload = dict(payload or {})
        watch_id = self.watch_id(kind, owner)
        watcher = self._build_watcher(kind, owner, payload)
        previous = self._watches.pop(watch_id, None)
        if previous is not None:
            previous.close()
        self._watches[watch_id] = watcher
        return await watcher.start()

    def get_watch(self, watch_id: str) -> CompletionWatcher:
        watcher = self._watches.get(watch_id)
        if watcher is None:
            raise UnknownWatchError(watch_id)
        return watcher

    async def poll_watch(self, watch_id: str) -> PollJob | None:
        watcher = self.get_watch(watch_id)
        await watcher.tick()
        return watcher.job

    def push_status(self, watch_id: str, update: dict[str, Any]) -> PollJob | None:
        watcher = self.get_watch(watch_id)
        watcher.observe(update)
        return watcher.job

    def cancel_watch(self, watch_id: str) -> PollJob | None:
        watcher = self.get_watch(watch_id)
        watcher.cancel()
        return watcher.job

    def close_watch(self, watch_id: str) -> None:
        watcher = self._watches.pop(watch_id, None)
        if watcher is not None:
            watcher.close()

    def reset(self) -> None:
        for watch_id in list(self._watches):
            self.close_watch(watch_id)


_service = ScoutingService()


def get_scouting_service() -> ScoutingService:
    """Return the singleton scouting service."""

    return _service


def configure_scouting_service(service: ScoutingService) -> None:
    global _service
    _service.reset()
    _service = service


def reset_scouting_state() -> None:
    """Utility used in tests to clear watcher state."""

    _service.reset()
