from typing import Any

from fastapi import APIRouter, Body, Depends, status

from app.services.container import (
    user_service,
)
from app.utils.logger import get_logger
from app.utils.auth_dependencies import get_current_user

logger = get_logger(__name__)

# User accounts and role assignments (requires users:w on GLOBAL)
router = APIRouter(tags=["Users"])


@router.post("/users", status_code=status.HTTP_201_CREATED)
def create_user(
    user: Any = Body(...),
    current_user: dict = Depends(get_current_user)
):
    """
    Create a user from `{profile, email, sendEmail, roles}`.
    """
    logger.info(f"[API] Creating user requested by {current_user.get('_id')}")
    return user_service.create_user(user, current_user)


@router.put("/users/{user_id}")
def edit_user(
    user_id: str,
    user: Any = Body(...),
    current_user: dict = Depends(get_current_user)
):
    """
    Replace the emails, profile and role assignments of a user.
    """
    return {"updated": user_service.edit_user(user_id, user, current_user)}
