"""
Admin API Routes

Approval workflow for new members, role management, member edits and
deletion. Every change is recorded in the activity_log table.
"""

from typing import List, Optional
from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from db import get_session
from models.models import PROFILE_STATUSES
from models.schemas import AdminProfileUpdate, ProfileStatusOut
from utils.auth_utils import CurrentProfile, require_admin
from utils import crud_profile
from utils.crud_profile import EmailInUseError, ProfileStoreError, ProfileNotFoundError, ProtectedProfileError
from utils.validation import ValidationFailedError, ensure_valid, validate_profile_info, validate_required_fields

router = APIRouter(prefix="/api/admin", tags=["admin"])

# action -> (column, new value, logged action)
STATUS_ACTIONS = {
    "approve": ("status", "active", "approve_user"),
    "suspend": ("status", "suspended", "suspend_user"),
    "activate": ("status", "active", "activate_user"),
    "promote": ("role", "admin", "promote_to_admin"),
    "demote": ("role", "user", "demote_from_admin"),
}


@router.get("/users", response_model=List[ProfileStatusOut], summary="List members by status")
def list_users(
    status: Optional[str] = Query(default=None),
    admin: CurrentProfile = Depends(require_admin),
    db: Session = Depends(get_session),
):
    if status and status not in PROFILE_STATUSES:
        raise HTTPException(status_code=400, detail=f"Unknown status: {status}")
    try:
        profiles = crud_profile.list_profiles_by_status(db, status)
    except ProfileStoreError as e:
        raise HTTPException(status_code=503, detail=f"Database error: {str(e)}")
    return [ProfileStatusOut.model_validate(p) for p in profiles]


@router.post("/users/{profile_id}/{action}", response_model=ProfileStatusOut, summary="Approve, suspend, activate, promote or demote")
def change_user(
    profile_id: str,
    action: str,
    admin: CurrentProfile = Depends(require_admin),
    db: Session = Depends(get_session),
):
    if action not in STATUS_ACTIONS:
        raise HTTPException(status_code=404, detail=f"Unknown action: {action}")
    column, value, log_action = STATUS_ACTIONS[action]

    try:
        actor = crud_profile.require_profile(db, admin.id)
        if column == "status":
            profile = crud_profile.set_profile_status(
                db, actor=actor, profile_id=profile_id, status=value, action=log_action)
        else:
            profile = crud_profile.set_profile_role(
                db, actor=actor, profile_id=profile_id, role=value, action=log_action)
    except ProfileNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ProfileStoreError as e:
        raise HTTPException(status_code=503, detail=f"Database error: {str(e)}")
    return ProfileStatusOut.model_validate(profile)


@router.patch("/users/{profile_id}", response_model=ProfileStatusOut, summary="Edit a member's details")
def update_user(
    profile_id: str,
    payload: AdminProfileUpdate,
    admin: CurrentProfile = Depends(require_admin),
    db: Session = Depends(get_session),
):
    updates = payload.model_dump(exclude_unset=True, mode="json")
    try:
        ensure_valid(
            validate_required_fields(updates, ("full_name", "email")),
            validate_profile_info(name=payload.full_name, year=payload.graduation_year, require_name=False),
        )
    except ValidationFailedError as e:
        raise HTTPException(status_code=400, detail=e.errors)

    try:
        actor = crud_profile.require_profile(db, admin.id)
        profile = crud_profile.admin_update_profile(db, actor=actor, profile_id=profile_id, updates=updates)
    except ProfileNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except EmailInUseError as e:
        raise HTTPException(status_code=409, detail=str(e))
    except ProfileStoreError as e:
        raise HTTPException(status_code=503, detail=f"Database error: {str(e)}")
    return ProfileStatusOut.model_validate(profile)


@router.delete("/users/{profile_id}", summary="Delete a member")
def delete_user(
    profile_id: str,
    admin: CurrentProfile = Depends(require_admin),
    db: Session = Depends(get_session),
):
    try:
        actor = crud_profile.require_profile(db, admin.id)
        crud_profile.delete_profile(db, actor=actor, profile_id=profile_id)
    except ProfileNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ProtectedProfileError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except ProfileStoreError as e:
        raise HTTPException(status_code=503, detail=f"Database error: {str(e)}")
    return {"status": "ok", "message": "User deleted"}
