"""Collapse persisted records that describe the same real-world document.

Identity is the composite ``(number, date, amount)`` key.  The first record
seen for a key survives; records with a fully empty key carry no evidence and
are always kept.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation
from typing import Any, Sequence

import pandas as pd

logger = logging.getLogger(__name__)

DEDUP_FIELDS: tuple[str, str, str] = ("invoice_number", "invoice_date", "total")
NUMERIC_TEXT = re.compile(r"[+-]?\d+(?:\.\d+)?")


@dataclass
class DedupResult:
    records: list[dict[str, Any]] = field(default_factory=list)
    input_count: int = 0

    @property
    def dropped(self) -> int:
        return self.input_count - len(self.records)


def _normalise_number(value: Any) -> str:
    try:
        number = Decimal(str(value))
    except InvalidOperation:
        return ""
    if not number.is_finite():
        return ""
    return format(number.normalize(), "f")


def _normalise_field(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, (int, float, Decimal)) and not isinstance(value, bool):
        return _normalise_number(value)
    text = str(value).strip().lower()
    if NUMERIC_TEXT.fullmatch(text):
        return _normalise_number(text)
    return text


def dedup_key(record: dict[str, Any], fields: Sequence[str] = DEDUP_FIELDS) -> tuple[str, ...]:
    return tuple(_normalise_field(record.get(name)) for name in fields)


def dedupe(records: Sequence[dict[str, Any]], fields: Sequence[str] = DEDUP_FIELDS) -> DedupResult:
    if not records:
        return DedupResult(records=[], input_count=0)

    keys = pd.DataFrame([dedup_key(record, fields) for record in records], columns=list(fields))
    empty = (keys == "").all(axis=1)
    duplicated = keys.duplicated(keep="first") & ~empty

    kept = [record for record, drop in zip(records, duplicated.tolist()) if not drop]
    result = DedupResult(records=kept, input_count=len(records))
    if result.dropped:
        logger.info("Dropped %d duplicate record(s) out of %d", result.dropped, result.input_count)
    return result
