from __future__ import annotations

QUEUE_STATUSES = {"pending", "review", "approved", "rejected"}
JOB_KINDS = {"report", "enrichment"}


class ValidationError(Exception):
    """Raised when domain validation fails."""


def validate_queue_status(status: str) -> str:
    if status not in QUEUE_STATUSES:
        raise ValidationError(f"unknown queue status: {status}")
    return status


def validate_job_kind(kind: str) -> str:
    if kind not in JOB_KINDS:
        raise ValidationError(f"unknown job kind: {kind}")
    return kind


def validate_positive_ms(value: object, field: str) -> int | None:
    """Coerce an optional millisecond setting to a positive int."""

    if value is None:
        return None
    if isinstance(value, bool) or (isinstance(value, float) and not value.is_integer()):
        raise ValidationError(f"{field} must be a positive integer")
    try:
        number = int(value)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        raise ValidationError(f"{field} must be a positive integer") from None
    if number <= 0:
        raise ValidationError(f"{field} must be a positive integer")
    return number
