"""
Recommendation API Routes

Exposes the profile matcher via REST API.
GET /recommendations for the signed-in user, POST /recommendations/match for
ad-hoc scoring of supplied profiles.
"""

import logging
from typing import Any, Dict, List
from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field
from sqlalchemy.orm import Session

from db import get_session
from utils.auth_utils import CurrentProfile, require_active_profile
from utils.crud_profile import ProfileStoreError
from .logic.contracts import MatchProfile, RecommendationOutput
from .logic.constants import ENGINE_VERSION, NO_SUGGESTIONS_MESSAGE
from .logic.engine import ProfileMatcher
from .logic.runner import run_recommendations, SubjectNotFoundError

logger = logging.getLogger("recommendation")

router = APIRouter(prefix="/recommendations", tags=["recommendations"])

matcher = ProfileMatcher()


# =============================================================================
# REQUEST/RESPONSE SCHEMAS
# =============================================================================

class MatchRequest(BaseModel):
    """Request body for scoring supplied profiles."""
    subject: MatchProfile = Field(
        ...,
        description="Profile to recommend connections for",
        examples=[{
            "id": "subject-1",
            "skills": ["Python", "React"],
            "cohort": "Cohort 5",
            "graduationYear": 2026,
            "classes": ["CS101"],
            "tags": ["AI"],
        }],
    )
    candidates: List[MatchProfile] = Field(
        default_factory=list,
        description="Candidate pool, already filtered to active profiles"
    )


def _serialize_output(output: RecommendationOutput) -> Dict[str, Any]:
    """Convert RecommendationOutput to the JSON body returned to the directory UI."""
    response_data = {
        "subject_id": output.subject_id,
        "summary": {
            "total_evaluated": output.total_candidates_evaluated,
            "total_matched": output.total_matched,
            "total_recommended": output.total_recommended,
            "processing_time_ms": output.processing_time_ms,
        },
        "recommendations": [r.model_dump(by_alias=True) for r in output.recommendations],
        "engine_version": output.engine_version,
    }
    if not output.recommendations:
        response_data["message"] = NO_SUGGESTIONS_MESSAGE
    return response_data


# =============================================================================
# ENDPOINTS
# =============================================================================

@router.get("", summary="Get connection recommendations for the current user")
@router.get("/", summary="Get connection recommendations for the current user", include_in_schema=False)
def get_recommendations(
    current: CurrentProfile = Depends(require_active_profile),
    db: Session = Depends(get_session)
):
    """
    Rank other active members by how likely they are to be useful connections.

    **Response:**
    - `recommendations`: up to 20 entries with `candidateId`, `matchScore`,
      `reason` (headline) and `connectionPoints` (supporting bullets)
    - `summary`: pool size and match counts
    """
    try:
        output = run_recommendations(db, current.id, matcher=matcher)
    except SubjectNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ProfileStoreError as e:
        raise HTTPException(status_code=503, detail=f"Database error: {str(e)}")
    return _serialize_output(output)


@router.post("/match", summary="Score supplied profiles")
def match_profiles(
    request: MatchRequest,
    current: CurrentProfile = Depends(require_active_profile)
):
    """
    Score `subject` against `candidates` without touching the store.

    Profiles are validated by the request schema; a malformed profile is
    rejected with 422 before matching begins.
    """
    output = matcher.run(request.subject, request.candidates)
    return _serialize_output(output)


# =============================================================================
# HEALTH CHECK
# =============================================================================

@router.get("/health", summary="Recommendation engine health check")
def health_check():
    """Check if recommendation engine is operational."""
    return {"status": "ok", "engine": "profile_matcher", "version": ENGINE_VERSION}
