"""
Directory API Routes

Browse and search the member directory. Only approved (active) members are
listed, and only active members may browse.
"""

from typing import List, Optional
from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from db import get_session
from models.schemas import DirectoryProfileOut, ClassCatalogOut
from utils.auth_utils import CurrentProfile, require_active_profile
from utils import crud_profile
from utils.crud_profile import ProfileStoreError
from utils.directory_filters import DirectoryFilters, apply_filters

router = APIRouter(prefix="/api/directory", tags=["directory"])


@router.get("", response_model=List[DirectoryProfileOut], summary="List active members")
def list_directory(
    search: Optional[str] = None,
    skills: List[str] = Query(default=[]),
    interests: List[str] = Query(default=[]),
    cohort: List[str] = Query(default=[]),
    year: List[int] = Query(default=[]),
    modality: List[str] = Query(default=[]),
    hometown: Optional[str] = None,
    location: Optional[str] = None,
    current: CurrentProfile = Depends(require_active_profile),
    db: Session = Depends(get_session),
):
    filters = DirectoryFilters(
        search=search, skills=skills, interests=interests, cohort=cohort,
        year=year, modality=modality, hometown=hometown, location=location,
    )
    try:
        profiles = crud_profile.list_active_profiles(db)
    except ProfileStoreError as e:
        raise HTTPException(status_code=503, detail=f"Database error: {str(e)}")
    return apply_filters([DirectoryProfileOut.from_profile(p) for p in profiles], filters)


@router.get("/search", response_model=List[DirectoryProfileOut], summary="Keyword search on name and bio")
def search_directory(
    q: str = Query(..., min_length=1),
    current: CurrentProfile = Depends(require_active_profile),
    db: Session = Depends(get_session),
):
    try:
        profiles = crud_profile.search_active_profiles(db, q)
    except ProfileStoreError as e:
        raise HTTPException(status_code=503, detail=f"Database error: {str(e)}")
    return [DirectoryProfileOut.from_profile(p) for p in profiles]


@router.get("/classes", response_model=List[ClassCatalogOut], summary="Class catalogue")
def list_classes(current: CurrentProfile = Depends(require_active_profile), db: Session = Depends(get_session)):
    try:
        classes = crud_profile.list_classes(db)
    except ProfileStoreError as e:
        raise HTTPException(status_code=503, detail=f"Database error: {str(e)}")
    return [ClassCatalogOut.model_validate(c) for c in classes]


@router.get("/{profile_id}", response_model=DirectoryProfileOut, summary="Public profile")
def get_directory_profile(
    profile_id: str,
    current: CurrentProfile = Depends(require_active_profile),
    db: Session = Depends(get_session),
):
    try:
        profile = crud_profile.get_active_profile_by_id(db, profile_id)
    except ProfileStoreError as e:
        raise HTTPException(status_code=503, detail=f"Database error: {str(e)}")
    if not profile:
        raise HTTPException(status_code=404, detail="Profile not found")
    return DirectoryProfileOut.from_profile(profile)
