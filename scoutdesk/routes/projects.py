from __future__ import annotations

from fastapi import APIRouter

from scoutdesk.application import get_scouting_service

router = APIRouter(prefix="/projects", tags=["projects"])


@router.get("/{project_id}/invoices")
async def list_project_invoices(project_id: str) -> dict:
    service = get_scouting_service()
    result = await service.list_invoices(project_id)
    return {"project_id": project_id, "items": result.records, "dropped": result.dropped}
