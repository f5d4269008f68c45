from __future__ import annotations

from fastapi import APIRouter, HTTPException

from scoutdesk.application import ScoutingService, get_scouting_service

router = APIRouter(prefix="/queue", tags=["queue"])


@router.post("/{queue_id}/{action}")
async def apply_queue_action(queue_id: str, action: str) -> dict:
    if action not in ScoutingService.ACTIONS:
        raise HTTPException(status_code=404, detail=f"unknown action: {action}")
    service = get_scouting_service()
    result = await service.apply_action(queue_id, action)
    return {"id": queue_id, "status": ScoutingService.ACTIONS[action], "result": result}
