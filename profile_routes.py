"""
Profile API Routes

Endpoints for members to read and edit their own directory profile.
Tables: profiles, profile_classes, projects
"""

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from db import get_session
from models.schemas import (
    DirectoryProfileOut, ProfileUpdate, ProjectIn, ProjectUpdate, ProjectOut, LIST_LINK_KINDS,
    Organization, OrganizationIn, OrganizationUpdate, FavoriteTool, FavoriteToolIn, FavoriteToolUpdate,
    ContentIngestion, ContentIngestionUpdate, ResumeIn,
)
from utils.auth_utils import CurrentProfile, get_current_profile, require_active_profile
from utils import crud_profile
from utils.crud_profile import ProfileStoreError, NotFoundError
from utils.validation import (
    ValidationFailedError, ensure_valid, sanitize_text,
    validate_profile_info, validate_linkedin_url, validate_project, validate_project_url,
    validate_required_fields, validate_resume_url, validate_skill, validate_interest,
)

router = APIRouter(prefix="/api/profile", tags=["profile"])


def _store_error(e: ProfileStoreError) -> HTTPException:
    return HTTPException(status_code=503, detail=f"Database error: {str(e)}")


def _validate_item(kind: str, value: str):
    if kind == "skills":
        return validate_skill(value)
    # interests, hobbies and teach/learn lists share the same limits
    return validate_interest(value)


def _check(*results):
    try:
        ensure_valid(*results)
    except ValidationFailedError as e:
        raise HTTPException(status_code=400, detail=e.errors)


# ─────────────────────────────────────────────
# GET /api/profile/me
# ─────────────────────────────────────────────
@router.get("/me", response_model=DirectoryProfileOut, summary="Fetch own profile")
def get_own_profile(current: CurrentProfile = Depends(get_current_profile), db: Session = Depends(get_session)):
    """Return the caller's profile whatever its approval status."""
    try:
        profile = crud_profile.require_profile(db, current.id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ProfileStoreError as e:
        raise _store_error(e)
    return DirectoryProfileOut.from_profile(profile, include_private_projects=True)


# ─────────────────────────────────────────────
# PATCH /api/profile/me
# ─────────────────────────────────────────────
@router.patch("/me", response_model=DirectoryProfileOut, summary="Update own profile")
def update_own_profile(
    payload: ProfileUpdate,
    current: CurrentProfile = Depends(require_active_profile),
    db: Session = Depends(get_session),
):
    """
    Partial update; only fields present in the body are written.
    Free text is stripped of angle brackets before saving.
    """
    updates = payload.model_dump(exclude_unset=True)
    for field in ("full_name", "bio", "location", "hometown", "cohort"):
        if isinstance(updates.get(field), str):
            updates[field] = sanitize_text(updates[field])

    _check(
        validate_profile_info(
            name=updates.get("full_name"),
            location=updates.get("location"),
            hometown=updates.get("hometown"),
            cohort=updates.get("cohort"),
            year=updates.get("graduation_year"),
            require_name="full_name" in updates,
        ),
        validate_required_fields(updates, ("visibility",)),
        validate_linkedin_url(updates.get("linkedin_url")),
    )

    try:
        profile = crud_profile.require_profile(db, current.id)
        crud_profile.update_profile_fields(db, profile, updates)
    except ProfileStoreError as e:
        raise _store_error(e)
    return DirectoryProfileOut.from_profile(profile, include_private_projects=True)


# ─────────────────────────────────────────────
# classes
# ─────────────────────────────────────────────
@router.post("/me/classes/{class_id}", summary="Add a class to own profile")
def add_class(class_id: str, current: CurrentProfile = Depends(require_active_profile), db: Session = Depends(get_session)):
    try:
        profile = crud_profile.require_profile(db, current.id)
        added = crud_profile.add_class_to_profile(db, profile, class_id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ProfileStoreError as e:
        raise _store_error(e)
    return {"status": "ok", "added": added}


@router.delete("/me/classes/{class_id}", summary="Remove a class from own profile")
def remove_class(class_id: str, current: CurrentProfile = Depends(require_active_profile), db: Session = Depends(get_session)):
    try:
        profile = crud_profile.require_profile(db, current.id)
        removed = crud_profile.remove_class_from_profile(db, profile, class_id)
    except ProfileStoreError as e:
        raise _store_error(e)
    return {"status": "ok", "removed": removed}


# ─────────────────────────────────────────────
# projects
# ─────────────────────────────────────────────
@router.post("/me/projects", response_model=ProjectOut, status_code=201, summary="Create a project")
def create_project(payload: ProjectIn, current: CurrentProfile = Depends(require_active_profile), db: Session = Depends(get_session)):
    _check(
        validate_project(payload.title, payload.description, payload.technologies),
        validate_project_url(payload.url),
    )
    try:
        profile = crud_profile.require_profile(db, current.id)
        project = crud_profile.create_project(db, profile, payload)
    except ProfileStoreError as e:
        raise _store_error(e)
    return ProjectOut.model_validate(project)


@router.patch("/me/projects/{project_id}", response_model=ProjectOut, summary="Update a project")
def update_project(
    project_id: str,
    payload: ProjectUpdate,
    current: CurrentProfile = Depends(require_active_profile),
    db: Session = Depends(get_session),
):
    changes = payload.model_dump(exclude_unset=True)
    _check(
        validate_project(payload.title, payload.description, payload.technologies,
                         require_title="title" in changes),
        validate_required_fields(changes, ("visibility",)),
        validate_project_url(payload.url),
    )
    try:
        profile = crud_profile.require_profile(db, current.id)
        project = crud_profile.update_project(db, profile, project_id, payload)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ProfileStoreError as e:
        raise _store_error(e)
    return ProjectOut.model_validate(project)


@router.delete("/me/projects/{project_id}", summary="Delete a project")
def delete_project(project_id: str, current: CurrentProfile = Depends(require_active_profile), db: Session = Depends(get_session)):
    try:
        profile = crud_profile.require_profile(db, current.id)
        crud_profile.delete_project(db, profile, project_id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ProfileStoreError as e:
        raise _store_error(e)
    return {"status": "ok", "message": "Project deleted"}


# ─────────────────────────────────────────────
# organizations
# ─────────────────────────────────────────────
@router.post("/me/organizations", response_model=Organization, status_code=201, summary="Add an organization")
def add_organization(payload: OrganizationIn, current: CurrentProfile = Depends(require_active_profile), db: Session = Depends(get_session)):
    try:
        profile = crud_profile.require_profile(db, current.id)
        return crud_profile.add_organization(db, profile, payload)
    except ProfileStoreError as e:
        raise _store_error(e)


@router.patch("/me/organizations/{organization_id}", response_model=Organization, summary="Update an organization")
def update_organization(
    organization_id: str,
    payload: OrganizationUpdate,
    current: CurrentProfile = Depends(require_active_profile),
    db: Session = Depends(get_session),
):
    changes = payload.model_dump(exclude_unset=True)
    _check(validate_required_fields(changes, ("name", "description", "role", "status", "type")))
    try:
        profile = crud_profile.require_profile(db, current.id)
        return crud_profile.update_organization(db, profile, organization_id, payload)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ProfileStoreError as e:
        raise _store_error(e)


@router.delete("/me/organizations/{organization_id}", summary="Remove an organization")
def remove_organization(organization_id: str, current: CurrentProfile = Depends(require_active_profile), db: Session = Depends(get_session)):
    try:
        profile = crud_profile.require_profile(db, current.id)
        removed = crud_profile.remove_organization(db, profile, organization_id)
    except ProfileStoreError as e:
        raise _store_error(e)
    return {"status": "ok", "removed": removed}


# ─────────────────────────────────────────────
# favorite tools
# ─────────────────────────────────────────────
@router.post("/me/tools", response_model=FavoriteTool, status_code=201, summary="Add a favorite tool")
def add_favorite_tool(payload: FavoriteToolIn, current: CurrentProfile = Depends(require_active_profile), db: Session = Depends(get_session)):
    _check(validate_project_url(payload.link))
    try:
        profile = crud_profile.require_profile(db, current.id)
        return crud_profile.add_favorite_tool(db, profile, payload)
    except ProfileStoreError as e:
        raise _store_error(e)


@router.patch("/me/tools/{tool_id}", response_model=FavoriteTool, summary="Update a favorite tool")
def update_favorite_tool(
    tool_id: str,
    payload: FavoriteToolUpdate,
    current: CurrentProfile = Depends(require_active_profile),
    db: Session = Depends(get_session),
):
    changes = payload.model_dump(exclude_unset=True)
    _check(
        validate_required_fields(changes, ("name", "categories")),
        validate_project_url(payload.link),
    )
    try:
        profile = crud_profile.require_profile(db, current.id)
        return crud_profile.update_favorite_tool(db, profile, tool_id, payload)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ProfileStoreError as e:
        raise _store_error(e)


@router.delete("/me/tools/{tool_id}", summary="Remove a favorite tool")
def remove_favorite_tool(tool_id: str, current: CurrentProfile = Depends(require_active_profile), db: Session = Depends(get_session)):
    try:
        profile = crud_profile.require_profile(db, current.id)
        removed = crud_profile.remove_favorite_tool(db, profile, tool_id)
    except ProfileStoreError as e:
        raise _store_error(e)
    return {"status": "ok", "removed": removed}


# ─────────────────────────────────────────────
# content ingestion / resume
# ─────────────────────────────────────────────
@router.put("/me/content-ingestion", response_model=ContentIngestion, summary="Update podcasts, channels and sources")
def update_content_ingestion(
    payload: ContentIngestionUpdate,
    current: CurrentProfile = Depends(require_active_profile),
    db: Session = Depends(get_session),
):
    changes = payload.model_dump(exclude_unset=True)
    _check(validate_required_fields(changes, ("podcasts", "youtube_channels", "influencers", "news_sources")))
    try:
        profile = crud_profile.require_profile(db, current.id)
        return crud_profile.update_content_ingestion(db, profile, payload)
    except ProfileStoreError as e:
        raise _store_error(e)


@router.put("/me/resume", summary="Set or clear the resume link")
def update_resume(payload: ResumeIn, current: CurrentProfile = Depends(require_active_profile), db: Session = Depends(get_session)):
    _check(validate_resume_url(payload.url))
    try:
        profile = crud_profile.require_profile(db, current.id)
        crud_profile.update_resume_url(db, profile, payload.url)
    except ProfileStoreError as e:
        raise _store_error(e)
    return {"status": "ok", "resume_url": payload.url or None}


# ─────────────────────────────────────────────
# list-valued attributes: skills, interests, ...
# ─────────────────────────────────────────────
@router.post("/me/{kind}/{value}", summary="Add a skill, interest or similar item")
def add_item(
    kind: str,
    value: str,
    current: CurrentProfile = Depends(require_active_profile),
    db: Session = Depends(get_session),
):
    if kind not in LIST_LINK_KINDS:
        raise HTTPException(status_code=404, detail=f"Unknown profile list: {kind}")
    value = sanitize_text(value)
    _check(_validate_item(kind, value))

    try:
        profile = crud_profile.require_profile(db, current.id)
        added = crud_profile.add_link_item(db, profile, LIST_LINK_KINDS[kind], value)
    except ProfileStoreError as e:
        raise _store_error(e)
    return {"status": "ok", "added": added}


@router.delete("/me/{kind}/{value}", summary="Remove a skill, interest or similar item")
def remove_item(
    kind: str,
    value: str,
    current: CurrentProfile = Depends(require_active_profile),
    db: Session = Depends(get_session),
):
    if kind not in LIST_LINK_KINDS:
        raise HTTPException(status_code=404, detail=f"Unknown profile list: {kind}")

    try:
        profile = crud_profile.require_profile(db, current.id)
        removed = crud_profile.remove_link_item(db, profile, LIST_LINK_KINDS[kind], value)
    except ProfileStoreError as e:
        raise _store_error(e)
    return {"status": "ok", "removed": removed}
