from __future__ import annotations

import os

DEFAULT_API_BASE = "https://watertech-scouting-production.up.railway.app"
DEFAULT_POLL_INTERVAL_MS = 3_000
DEFAULT_POLL_MAX_DURATION_MS = 5 * 60 * 1_000


def _int_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    if not raw:
        return default
    try:
        value = int(raw)
    except ValueError:
        return default
    return value if value > 0 else default


def api_base() -> str:
    return (os.getenv("SCOUTING_API_BASE") or DEFAULT_API_BASE).rstrip("/")


def api_timeout() -> float:
    raw = os.getenv("SCOUTING_API_TIMEOUT")
    try:
        return float(raw) if raw else 30.0
    except ValueError:
        return 30.0


def poll_interval_ms() -> int:
    return _int_env("SCOUTING_POLL_INTERVAL_MS", DEFAULT_POLL_INTERVAL_MS)


def poll_max_duration_ms() -> int:
    return _int_env("SCOUTING_POLL_MAX_DURATION_MS", DEFAULT_POLL_MAX_DURATION_MS)


def cors_origins() -> list[str]:
    origins_env = os.getenv("API_CORS_ORIGINS", "")
    origins = [origin.strip() for origin in origins_env.split(",") if origin.strip()]
    return origins or ["http://localhost:3000", "http://127.0.0.1:3000"]


def log_level() -> str:
    return (os.getenv("LOG_LEVEL") or "INFO").upper()
