from __future__ import annotations

import sys
from decimal import Decimal
from pathlib import Path

sys.path.append(str(Path(__file__).resolve().parents[1]))

from scoutdesk.core.dedupe import dedup_key, dedupe


def _invoice(record_id: str, number=None, date=None, total=None) -> dict:
    return {"id": record_id, "invoice_number": number, "invoice_date": date, "total": total}


def test_first_record_per_key_survives():
    records = [
        _invoice("a", "F-001", "2024-01-10", 120.5),
        _invoice("b", "F-002", "2024-01-11", 80),
        _invoice("c", "F-001", "2024-01-10", 120.5),
    ]

    result = dedupe(records)

    assert [record["id"] for record in result.records] == ["a", "b"]
    assert result.input_count == 3
    assert result.dropped == 1


def test_fully_empty_keys_are_all_kept():
    records = [_invoice("a"), _invoice("b", "", "  ", None), _invoice("c")]

    result = dedupe(records)

    assert [record["id"] for record in result.records] == ["a", "b", "c"]
    assert result.dropped == 0


def test_keys_are_normalised():
    records = [
        _invoice("a", " F-001 ", "2024-01-10", 100),
        _invoice("b", "f-001", "2024-01-10", 100.0),
        _invoice("c", "F-001", "2024-01-10", Decimal("100.00")),
    ]

    assert dedup_key(records[0]) == ("f-001", "2024-01-10", "100")
    assert [record["id"] for record in dedupe(records).records] == ["a"]


def test_numeric_text_matches_numeric_values():
    records = [
        _invoice("a", "F-002", "2024-02-01", 100.0),
        _invoice("b", "F-002", "2024-02-01", "100.00"),
        _invoice("c", "F-002", "2024-02-01", " 100 "),
    ]

    assert dedup_key(records[1]) == ("f-002", "2024-02-01", "100")
    assert [record["id"] for record in dedupe(records).records] == ["a"]


def test_partially_empty_keys_still_collapse():
    records = [_invoice("a", "F-9", None, None), _invoice("b", "F-9", None, None)]

    assert [record["id"] for record in dedupe(records).records] == ["a"]


def test_dedupe_is_idempotent_and_keeps_records_untouched():
    records = [
        _invoice("a", "F-001", "2024-01-10", 10),
        _invoice("b"),
        _invoice("c", "F-001", "2024-01-10", 10),
        _invoice("d"),
        _invoice("e", "F-003", None, 5),
    ]

    once = dedupe(records).records
    twice = dedupe(once).records

    assert twice == once
    assert once[1] is records[1]
    assert once[1]["total"] is None


def test_empty_input():
    result = dedupe([])

    assert result.records == []
    assert result.dropped == 0
