"""Attach parsed technologies to the live queue records they describe.

Matching is deliberately loose: the agent abbreviates and reorders names, so
containment in either direction is accepted, as is a first-word match on
both name and provider.  The first queue record that matches wins.
"""

from __future__ import annotations

from typing import Iterable, Sequence

from scoutdesk.core.name_normalize import first_word, normalize
from scoutdesk.core.schema import ParsedReport, ParsedTechnology, QueueRecord


def matches(technology: ParsedTechnology, record: QueueRecord) -> bool:
    name = normalize(technology.name)
    provider = normalize(technology.provider)
    record_name = normalize(record.name)
    record_provider = normalize(record.provider)
    if not name or not provider or not record_name or not record_provider:
        return False

    if name in record_name or record_name in name:
        return True
    return first_word(name) in record_name and first_word(provider) in record_provider


def find_match(technology: ParsedTechnology, queue: Iterable[QueueRecord]) -> QueueRecord | None:
    for record in queue:
        if matches(technology, record):
            return record
    return None


def reconcile(technologies: Sequence[ParsedTechnology], queue: Sequence[QueueRecord]) -> list[ParsedTechnology]:
    reconciled: list[ParsedTechnology] = []
    for technology in technologies:
        record = find_match(technology, queue)
        reconciled.append(technology.model_copy(update={"queue_id": record.id if record else None}))
    return reconciled


def reconcile_report(report: ParsedReport, queue: Sequence[QueueRecord]) -> ParsedReport:
    """Return a copy of ``report`` with every technology bucket reconciled."""

    technologies = report.technologies.model_copy(
        update={
            "added": reconcile(report.technologies.added, queue),
            "review": reconcile(report.technologies.review, queue),
            "rejected": reconcile(report.technologies.rejected, queue),
        }
    )
    return report.model_copy(update={"technologies": technologies})
