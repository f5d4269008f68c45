from __future__ import annotations

from fastapi import APIRouter, HTTPException

from scoutdesk.application import get_scouting_service
from scoutdesk.domain import PollJob

router = APIRouter(prefix="/jobs", tags=["jobs"])


def _serialise(watch_id: str, job: PollJob | None) -> dict:
    if job is None:
        return {"watch_id": watch_id, "status": "idle"}
    return {"watch_id": watch_id, **job.to_dict()}


@router.post("")
async def start_job_watch(payload: dict) -> dict:
    kind = payload.get("kind")
    owner = payload.get("owner")
    if not kind or not owner:
        raise HTTPException(status_code=400, detail="kind and owner are required")
    options = payload.get("payload") or {}
    if not isinstance(options, dict):
        raise HTTPException(status_code=400, detail="payload must be an object")
    service = get_scouting_service()
    job = await service.start_watch(str(kind), str(owner), options)
    return _serialise(service.watch_id(str(kind), str(owner)), job)


@router.get("/{watch_id}")
async def get_job_watch(watch_id: str) -> dict:
    service = get_scouting_service()
    return _serialise(watch_id, service.get_watch(watch_id).job)


@router.post("/{watch_id}/poll")
async def poll_job_watch(watch_id: str) -> dict:
    service = get_scouting_service()
    return _serialise(watch_id, await service.poll_watch(watch_id))


@router.post("/{watch_id}/status")
async def push_job_status(watch_id: str, payload: dict) -> dict:
    """Apply a status row pushed by the backend (e.g. a realtime row change)."""
    service = get_scouting_service()
    return _serialise(watch_id, service.push_status(watch_id, payload))


@router.delete("/{watch_id}")
async def cancel_job_watch(watch_id: str) -> dict:
    service = get_scouting_service()
    return _serialise(watch_id, service.cancel_watch(watch_id))
