from __future__ import annotations

from fastapi import APIRouter, HTTPException

from scoutdesk.application import get_scouting_service

router = APIRouter(prefix="/reports", tags=["reports"])


@router.post("/parse")
async def parse_report(payload: dict) -> dict:
    text = payload.get("text")
    if text is not None and not isinstance(text, str):
        raise HTTPException(status_code=400, detail="text must be a string")
    service = get_scouting_service()
    return service.parse_report(text).model_dump()


@router.post("/reconcile")
async def reconcile_history_item(payload: dict) -> dict:
    """Parse a scouting run history row and attach queue ids to its technologies."""
    service = get_scouting_service()
    report = await service.reconciled_report(payload)
    return report.model_dump()
