from __future__ import annotations

import json
import sys
from pathlib import Path

import httpx
import pytest

sys.path.append(str(Path(__file__).resolve().parents[1]))

from scoutdesk.core.validation import ValidationError
from scoutdesk.infrastructure.scouting_api import ScoutingAPIClient, ScoutingAPIError

API_BASE = "https://scouting.example.test"


def _client(handler) -> tuple[ScoutingAPIClient, httpx.Client]:
    http_client = httpx.Client(transport=httpx.MockTransport(handler))
    return ScoutingAPIClient(API_BASE, http_client=http_client), http_client


def test_fetch_queue_normalises_records():
    captured: dict[str, object] = {}

    def handler(request: httpx.Request) -> httpx.Response:
        captured["path"] = request.url.path
        captured["status"] = request.url.params["status"]
        return httpx.Response(
            200,
            json={
                "items": [
                    {
                        "id": "q1",
                        "nombre": "UV Reactor X200",
                        "proveedor": "AquaTech",
                        "pais": "ES",
                        "relevance_score": 72,
                        "trl_estimado": 7,
                        "status": "pending",
                    }
                ],
                "count": 1,
            },
        )

    client, http_client = _client(handler)

    [record] = client.fetch_queue("pending")

    assert captured == {"path": "/api/scouting/queue", "status": "pending"}
    assert (record.id, record.name, record.provider, record.country) == ("q1", "UV Reactor X200", "AquaTech", "ES")
    assert record.score == 72
    assert record.trl == 7

    client.close()
    http_client.close()


def test_update_queue_item_posts_status():
    captured: dict[str, object] = {}

    def handler(request: httpx.Request) -> httpx.Response:
        captured["path"] = request.url.path
        captured["body"] = json.loads(request.content.decode("utf-8"))
        return httpx.Response(200, json={"success": True, "result": {"id": "q1", "status": "approved"}})

    client, http_client = _client(handler)

    result = client.update_queue_item("q1", "approved")

    assert captured["path"] == "/api/scouting/queue/q1/status"
    assert captured["body"] == {"id": "q1", "status": "approved"}
    assert result == {"id": "q1", "status": "approved"}
    http_client.close()


def test_update_queue_item_raises_on_unsuccessful_payload():
    def handler(_: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"success": False, "error": "registro bloqueado"})

    client, http_client = _client(handler)

    with pytest.raises(ScoutingAPIError, match="registro bloqueado"):
        client.update_queue_item("q1", "rejected")
    with pytest.raises(ValidationError):
        client.update_queue_item("q1", "archived")
    http_client.close()


def test_http_errors_propagate():
    def handler(_: httpx.Request) -> httpx.Response:
        return httpx.Response(503, json={"detail": "maintenance"})

    client, http_client = _client(handler)

    with pytest.raises(httpx.HTTPStatusError):
        client.fetch_queue("review")
    http_client.close()


def test_job_endpoints():
    def handler(request: httpx.Request) -> httpx.Response:
        if request.method == "POST" and request.url.path == "/api/jobs/report":
            return httpx.Response(200, json={"job_id": "job-42"})
        if request.url.path == "/api/jobs/job-42":
            return httpx.Response(200, json={"id": "job-42", "status": "running"})
        if request.url.path == "/api/projects/p1/invoices":
            return httpx.Response(200, json=[{"id": "i1"}, "noise"])
        return httpx.Response(404)

    client, http_client = _client(handler)

    assert client.start_job("report", {"owner": "p1"}) == "job-42"
    assert client.get_job_status("job-42")["status"] == "running"
    assert client.list_invoices("p1") == [{"id": "i1"}]
    http_client.close()


def test_start_job_requires_an_id():
    def handler(_: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"accepted": True})

    client, http_client = _client(handler)

    with pytest.raises(ScoutingAPIError):
        client.start_job("enrichment")
    http_client.close()


def test_api_base_must_be_absolute():
    with pytest.raises(ValueError):
        ScoutingAPIClient("scouting.example.test", http_client=httpx.Client())


def test_configured_client_is_shared():
    from scoutdesk.infrastructure import configure_api_client, get_api_client

    client, http_client = _client(lambda _: httpx.Response(404))
    configure_api_client(client)
    try:
        assert get_api_client() is client
    finally:
        configure_api_client(None)
        http_client.close()
