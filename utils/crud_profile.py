"""
Profile store: every relational read and write behind the directory.

All functions take an open Session (see db.get_session) and leave committing to it.
Database failures are logged and re-raised as ProfileStoreError so callers can
tell "the store is down" apart from "nothing matched".
"""

import logging
import uuid
from contextlib import contextmanager
from datetime import datetime
from typing import List, Optional
from sqlalchemy import select, or_, func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from models.models import Profile, ClassRecord, ProfileClass, Project, ActivityLog
from models.schemas import (
    ProfileLinks, ProjectIn, ProjectUpdate, Organization, OrganizationIn, OrganizationUpdate,
    FavoriteTool, FavoriteToolIn, FavoriteToolUpdate, ContentIngestion, ContentIngestionUpdate,
)

logger = logging.getLogger("profile_store")

# ProfileUpdate fields kept inside the links document
LINK_FIELDS = {"linkedin_url": "linkedinUrl", "personal_website": "personalWebsite", "github": "github"}


class ProfileStoreError(RuntimeError):
    """The relational store could not be read or written."""


class NotFoundError(LookupError):
    pass


class ProfileNotFoundError(NotFoundError):
    pass


class ProtectedProfileError(ValueError):
    """An admin action that would lock the directory out of administration."""


class EmailInUseError(ValueError):
    pass


@contextmanager
def _store_errors(action: str):
    try:
        yield
    except SQLAlchemyError as e:
        logger.error("Profile store failure while %s: %s", action, e)
        raise ProfileStoreError(f"Failed to {action}") from e


# ─────────────────────────────────────────────
# reads
# ─────────────────────────────────────────────
def get_profile_by_id(db: Session, profile_id: str) -> Profile | None:
    with _store_errors("fetch profile"):
        return db.get(Profile, profile_id)


def get_active_profile_by_id(db: Session, profile_id: str) -> Profile | None:
    with _store_errors("fetch profile"):
        stmt = select(Profile).where(Profile.id == profile_id, Profile.status == "active")
        return db.execute(stmt).scalar_one_or_none()


def require_profile(db: Session, profile_id: str) -> Profile:
    profile = get_profile_by_id(db, profile_id)
    if profile is None:
        raise ProfileNotFoundError(f"Profile {profile_id} not found")
    return profile


def list_active_profiles(db: Session, exclude_id: Optional[str] = None) -> List[Profile]:
    """Active profiles, newest first."""
    with _store_errors("fetch profiles"):
        stmt = select(Profile).where(Profile.status == "active")
        if exclude_id is not None:
            stmt = stmt.where(Profile.id != exclude_id)
        stmt = stmt.order_by(Profile.created_at.desc())
        return list(db.execute(stmt).scalars().all())


def list_profiles_by_status(db: Session, status: Optional[str] = None) -> List[Profile]:
    with _store_errors("fetch profiles"):
        stmt = select(Profile)
        if status:
            stmt = stmt.where(Profile.status == status)
        stmt = stmt.order_by(Profile.created_at.desc())
        return list(db.execute(stmt).scalars().all())


def _like_pattern(query: str) -> str:
    escaped = query.strip().lower().replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"


def search_active_profiles(db: Session, query: str) -> List[Profile]:
    """Case-insensitive substring match on full name or bio. % and _ match literally."""
    pattern = _like_pattern(query)
    with _store_errors("search profiles"):
        stmt = (
            select(Profile)
            .where(Profile.status == "active")
            .where(or_(
                func.lower(Profile.full_name).like(pattern, escape="\\"),
                func.lower(func.coalesce(Profile.bio, "")).like(pattern, escape="\\"),
            ))
            .order_by(Profile.created_at.desc())
        )
        return list(db.execute(stmt).scalars().all())


def list_classes(db: Session) -> List[ClassRecord]:
    with _store_errors("fetch classes"):
        return list(db.execute(select(ClassRecord).order_by(ClassRecord.code.asc())).scalars().all())


# ─────────────────────────────────────────────
# own-profile writes
# ─────────────────────────────────────────────
def update_profile_fields(db: Session, profile: Profile, updates: dict) -> Profile:
    links = dict(profile.links or {})
    for field, value in updates.items():
        if field in LINK_FIELDS:
            links[LINK_FIELDS[field]] = value
        else:
            setattr(profile, field, value)
    # reassign so the JSON column is flagged dirty
    profile.links = links
    profile.updated_at = datetime.utcnow()
    with _store_errors("update profile"):
        db.flush()
    return profile


def add_link_item(db: Session, profile: Profile, key: str, value: str) -> bool:
    """Append value to a list-valued links key. Returns False if already present."""
    links = dict(profile.links or {})
    current = ProfileLinks.from_document(links).model_dump(by_alias=True).get(key, [])
    if value in current:
        return False
    links[key] = current + [value]
    _save_links(db, profile, links, "update profile")
    return True


def remove_link_item(db: Session, profile: Profile, key: str, value: str) -> bool:
    links = dict(profile.links or {})
    current = ProfileLinks.from_document(links).model_dump(by_alias=True).get(key, [])
    if value not in current:
        return False
    links[key] = [item for item in current if item != value]
    _save_links(db, profile, links, "update profile")
    return True


def _save_links(db: Session, profile: Profile, links: dict, action: str) -> None:
    # reassign so the JSON column is flagged dirty
    profile.links = links
    profile.updated_at = datetime.utcnow()
    with _store_errors(action):
        db.flush()


def _entries(profile: Profile, attr: str) -> list:
    """Well-formed entries of a list-of-objects links key; malformed ones are dropped."""
    return list(getattr(ProfileLinks.from_document(profile.links), attr))


def _write_entries(db: Session, profile: Profile, key: str, entries: list, action: str) -> None:
    links = dict(profile.links or {})
    links[key] = [e.model_dump(mode="json") for e in entries]
    _save_links(db, profile, links, action)


def _update_entry(db: Session, profile: Profile, *, attr: str, key: str, entry_id: str, changes: dict, label: str):
    entries = _entries(profile, attr)
    for i, entry in enumerate(entries):
        if entry.id == entry_id:
            entries[i] = entry.model_copy(update=changes)
            _write_entries(db, profile, key, entries, f"update {label}")
            return entries[i]
    raise NotFoundError(f"{label.capitalize()} {entry_id} not found")


def _remove_entry(db: Session, profile: Profile, *, attr: str, key: str, entry_id: str, label: str) -> bool:
    entries = _entries(profile, attr)
    kept = [e for e in entries if e.id != entry_id]
    if len(kept) == len(entries):
        return False
    _write_entries(db, profile, key, kept, f"remove {label}")
    return True


def add_organization(db: Session, profile: Profile, data: OrganizationIn) -> Organization:
    organization = Organization(id=f"org-{uuid.uuid4().hex[:12]}", **data.model_dump())
    _write_entries(db, profile, "organizations", _entries(profile, "organizations") + [organization],
                   "add organization")
    return organization


def update_organization(db: Session, profile: Profile, organization_id: str, data: OrganizationUpdate) -> Organization:
    return _update_entry(db, profile, attr="organizations", key="organizations", entry_id=organization_id,
                         changes=data.model_dump(exclude_unset=True), label="organization")


def remove_organization(db: Session, profile: Profile, organization_id: str) -> bool:
    return _remove_entry(db, profile, attr="organizations", key="organizations",
                         entry_id=organization_id, label="organization")


def add_favorite_tool(db: Session, profile: Profile, data: FavoriteToolIn) -> FavoriteTool:
    tool = FavoriteTool(id=f"tool-{uuid.uuid4().hex[:12]}", **data.model_dump())
    _write_entries(db, profile, "favoriteTools", _entries(profile, "favorite_tools") + [tool],
                   "add favorite tool")
    return tool


def update_favorite_tool(db: Session, profile: Profile, tool_id: str, data: FavoriteToolUpdate) -> FavoriteTool:
    return _update_entry(db, profile, attr="favorite_tools", key="favoriteTools", entry_id=tool_id,
                         changes=data.model_dump(exclude_unset=True), label="favorite tool")


def remove_favorite_tool(db: Session, profile: Profile, tool_id: str) -> bool:
    return _remove_entry(db, profile, attr="favorite_tools", key="favoriteTools",
                         entry_id=tool_id, label="favorite tool")


def update_content_ingestion(db: Session, profile: Profile, data: ContentIngestionUpdate) -> ContentIngestion:
    """Merge the lists present in data over the stored ones."""
    current = ProfileLinks.from_document(profile.links).content_ingestion
    merged = current.model_copy(update=data.model_dump(exclude_unset=True))
    links = dict(profile.links or {})
    links["contentIngestion"] = merged.model_dump(by_alias=True)
    _save_links(db, profile, links, "update content ingestion")
    return merged


def update_resume_url(db: Session, profile: Profile, url: Optional[str]) -> None:
    links = dict(profile.links or {})
    if url:
        links["resumeUrl"] = url
    else:
        links.pop("resumeUrl", None)
    _save_links(db, profile, links, "update resume")


def add_class_to_profile(db: Session, profile: Profile, class_id: str) -> bool:
    with _store_errors("add class"):
        course = db.get(ClassRecord, class_id)
        if course is None:
            raise NotFoundError(f"Class {class_id} not found")
        if any(pc.class_id == class_id for pc in profile.profile_classes):
            return False
        profile.profile_classes.append(ProfileClass(profile_id=profile.id, class_id=class_id, course=course))
        db.flush()
    return True


def remove_class_from_profile(db: Session, profile: Profile, class_id: str) -> bool:
    with _store_errors("remove class"):
        for pc in list(profile.profile_classes):
            if pc.class_id == class_id:
                profile.profile_classes.remove(pc)
                db.flush()
                return True
    return False


def _project_links(url: Optional[str], technologies: Optional[List[str]], base: Optional[dict] = None) -> dict:
    links = dict(base or {})
    if url is not None:
        links["url"] = url
    if technologies is not None:
        links["technologies"] = technologies
    return links


def create_project(db: Session, owner: Profile, data: ProjectIn) -> Project:
    project = Project(
        owner_id=owner.id,
        title=data.title,
        summary=data.summary,
        description=data.description,
        visibility=data.visibility,
        links=_project_links(data.url, data.technologies),
    )
    with _store_errors("create project"):
        db.add(project)
        db.flush()
    return project


def _owned_project(db: Session, owner: Profile, project_id: str) -> Project:
    with _store_errors("fetch project"):
        project = db.get(Project, project_id)
    if project is None or project.owner_id != owner.id:
        raise NotFoundError(f"Project {project_id} not found")
    return project


def update_project(db: Session, owner: Profile, project_id: str, data: ProjectUpdate) -> Project:
    project = _owned_project(db, owner, project_id)
    changes = data.model_dump(exclude_unset=True)
    for field in ("title", "summary", "description", "visibility"):
        if field in changes:
            setattr(project, field, changes[field])
    if "url" in changes or "technologies" in changes:
        project.links = _project_links(changes.get("url"), changes.get("technologies"), project.links)
    project.updated_at = datetime.utcnow()
    with _store_errors("update project"):
        db.flush()
    return project


def delete_project(db: Session, owner: Profile, project_id: str) -> None:
    project = _owned_project(db, owner, project_id)
    with _store_errors("delete project"):
        owner.projects.remove(project)
        db.flush()


# ─────────────────────────────────────────────
# admin writes
# ─────────────────────────────────────────────
def log_activity(db: Session, *, actor_id: str, entity_id: str, action: str, details: dict,
                 entity_type: str = "profile") -> ActivityLog:
    entry = ActivityLog(
        entity_type=entity_type,
        entity_id=entity_id,
        actor_id=actor_id,
        action=action,
        details=details,
    )
    with _store_errors("log activity"):
        db.add(entry)
        db.flush()
    return entry


def set_profile_status(db: Session, *, actor: Profile, profile_id: str, status: str, action: str) -> Profile:
    profile = require_profile(db, profile_id)
    previous = profile.status
    profile.status = status
    with _store_errors("update profile status"):
        db.flush()
    log_activity(db, actor_id=actor.id, entity_id=profile.id, action=action,
                 details={"previous_status": previous})
    logger.info("%s: %s %s -> %s by %s", action, profile.id, previous, status, actor.id)
    return profile


def set_profile_role(db: Session, *, actor: Profile, profile_id: str, role: str, action: str) -> Profile:
    profile = require_profile(db, profile_id)
    previous = profile.role
    profile.role = role
    with _store_errors("update profile role"):
        db.flush()
    log_activity(db, actor_id=actor.id, entity_id=profile.id, action=action,
                 details={"previous_role": previous})
    logger.info("%s: %s %s -> %s by %s", action, profile.id, previous, role, actor.id)
    return profile


def admin_update_profile(db: Session, *, actor: Profile, profile_id: str, updates: dict) -> Profile:
    profile = require_profile(db, profile_id)
    email = updates.get("email")
    if email and email != profile.email:
        with _store_errors("check email"):
            taken = db.execute(
                select(Profile.id).where(func.lower(Profile.email) == email.lower(), Profile.id != profile.id)
            ).first()
        if taken:
            raise EmailInUseError(f"Email already in use: {email}")

    for field, value in updates.items():
        setattr(profile, field, value)
    profile.updated_at = datetime.utcnow()
    with _store_errors("update profile"):
        db.flush()
    log_activity(db, actor_id=actor.id, entity_id=profile.id, action="update_profile",
                 details={"updates": updates})
    logger.info("update_profile: %s fields=%s by %s", profile.id, sorted(updates), actor.id)
    return profile


def count_admins(db: Session) -> int:
    with _store_errors("count admins"):
        return db.execute(select(func.count()).select_from(Profile).where(Profile.role == "admin")).scalar_one()


def delete_profile(db: Session, *, actor: Profile, profile_id: str) -> None:
    """
    Delete a profile with its classes and projects.

    Admins cannot delete themselves, and the last admin cannot be deleted.
    The activity log keeps a snapshot of the deleted profile.
    """
    profile = require_profile(db, profile_id)
    if profile.id == actor.id:
        raise ProtectedProfileError("Cannot delete your own account")
    if profile.role == "admin" and count_admins(db) <= 1:
        raise ProtectedProfileError("Cannot delete the last admin account")

    snapshot = {
        "full_name": profile.full_name,
        "email": profile.email,
        "status": profile.status,
        "role": profile.role,
    }
    with _store_errors("delete profile"):
        db.delete(profile)
        db.flush()
    log_activity(db, actor_id=actor.id, entity_id=profile_id, action="delete_user", details=snapshot)
    logger.info("delete_user: %s (%s) by %s", profile_id, snapshot["email"], actor.id)
