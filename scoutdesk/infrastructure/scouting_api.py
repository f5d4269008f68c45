"""HTTP client for the scouting backend (queue, jobs, project collections)."""
from __future__ import annotations

from typing import Any
from urllib.parse import urlparse

import httpx

from scoutdesk.core import settings
from scoutdesk.core.schema import QueueRecord
from scoutdesk.core.validation import validate_queue_status


class ScoutingAPIError(RuntimeError):
    """Raised when the scouting backend reports a failure in its payload."""


class ScoutingAPIClient:
    """Thin synchronous wrapper over the scouting backend's REST endpoints."""

    def __init__(
        self,
        api_base: str | None = None,
        *,
        timeout: float | None = None,
        http_client: httpx.Client | None = None,
    ) -> None:
        base = (api_base or settings.api_base()).rstrip("/")
        parsed = urlparse(base)
        if not parsed.scheme or not parsed.netloc:
            raise ValueError("api_base must include scheme and host")

        self._api_base = base
        self._client = http_client or httpx.Client(timeout=timeout or settings.api_timeout())
        self._owns_client = http_client is None

    # ------------------------------------------------------------------
    # helpers
    # ------------------------------------------------------------------
    def _url(self, path: str) -> str:
        if not path.startswith("/"):
            path = f"/{path}"
        return f"{self._api_base}{path}"

    def _get_json(self, path: str, params: dict[str, Any] | None = None) -> Any:
        response = self._client.get(self._url(path), params=params)
        response.raise_for_status()
        return response.json()

    def _post_json(self, path: str, payload: dict[str, Any] | None = None) -> Any:
        response = self._client.post(self._url(path), json=payload or {})
        response.raise_for_status()
        return response.json()

    @staticmethod
    def _items(data: Any) -> list[dict[str, Any]]:
        if isinstance(data, list):
            return [item for item in data if isinstance(item, dict)]
        if isinstance(data, dict):
            items = data.get("items")
            if isinstance(items, list):
                return [item for item in items if isinstance(item, dict)]
        return []

    # ------------------------------------------------------------------
    # public API
    # ------------------------------------------------------------------
    def fetch_queue(self, status: str) -> list[QueueRecord]:
        data = self._get_json("/api/scouting/queue", params={"status": status})
        return [QueueRecord.from_api(item) for item in self._items(data)]

    def update_queue_item(self, queue_id: str, status: str) -> dict[str, Any]:
        validate_queue_status(status)
        data = self._post_json(f"/api/scouting/queue/{queue_id}/status", {"id": queue_id, "status": status})
        if not isinstance(data, dict) or not data.get("success"):
            message = data.get("error") if isinstance(data, dict) else None
            raise ScoutingAPIError(str(message or "queue update failed"))
        return data.get("result") or {}

    def start_job(self, kind: str, payload: dict[str, Any] | None = None) -> str:
        data = self._post_json(f"/api/jobs/{kind}", payload)
        job_id = (data.get("job_id") or data.get("id")) if isinstance(data, dict) else None
        if not job_id:
            raise ScoutingAPIError(f"backend did not return a job id for {kind}")
        return str(job_id)

    def get_job_status(self, job_id: str) -> dict[str, Any]:
        data = self._get_json(f"/api/jobs/{job_id}")
        if not isinstance(data, dict):
            raise ScoutingAPIError(f"unexpected status payload for job {job_id}")
        return data

    def list_collection(self, path: str, params: dict[str, Any] | None = None) -> list[dict[str, Any]]:
        return self._items(self._get_json(path, params=params))

    def list_invoices(self, project_id: str) -> list[dict[str, Any]]:
        return self.list_collection(f"/api/projects/{project_id}/invoices")

    def close(self) -> None:
        if self._owns_client:
            self._client.close()


_client: ScoutingAPIClient | None = None


def configure_api_client(client: ScoutingAPIClient | None) -> None:
    """Install the client used by the application services."""

    global _client
    _client = client


def get_api_client() -> ScoutingAPIClient:
    """Return the configured client, creating one from the environment on first use."""

    global _client
    if _client is None:
        _client = ScoutingAPIClient()
    return _client


__all__ = ["ScoutingAPIClient", "ScoutingAPIError", "configure_api_client", "get_api_client"]
