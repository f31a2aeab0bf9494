from typing import Any, Dict, List

from fastapi import APIRouter, Body, Depends

from app.services.container import (
    slot_service,
)
from app.utils.logger import get_logger
from app.utils.auth_dependencies import get_current_user

logger = get_logger(__name__)

# NLU slot management, scoped to a project
router = APIRouter(tags=["Slots"])


@router.post("/projects/{project_id}/slots")
def insert_slot(
    project_id: str,
    slot: Any = Body(...),
    current_user: dict = Depends(get_current_user)
):
    """
    Create a slot. Returns the new slot id.
    """
    slot_id = slot_service.insert(slot, project_id, current_user)
    return {"_id": slot_id}


@router.put("/projects/{project_id}/slots")
def update_slot(
    project_id: str,
    slot: Any = Body(...),
    current_user: dict = Depends(get_current_user)
):
    """
    Replace the fields of the slot matching `slot._id`.
    """
    return {"updated": slot_service.update(slot, project_id, current_user)}


@router.delete("/projects/{project_id}/slots")
def delete_slot(
    project_id: str,
    slot: Any = Body(...),
    current_user: dict = Depends(get_current_user)
):
    """
    Delete a slot. The slot is sent in the request body.
    """
    return {"deleted": slot_service.delete(slot, project_id, current_user)}


@router.get("/projects/{project_id}/slots", response_model=List[Dict[str, Any]])
def get_slots(
    project_id: str,
    current_user: dict = Depends(get_current_user)
):
    """
    List all slots of a project.
    """
    return slot_service.get_slots(project_id)
