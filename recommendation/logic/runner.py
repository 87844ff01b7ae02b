"""
Engine Runner

Orchestrates a recommendation request:
1. Loads the subject profile
2. Loads the active candidate pool (subject excluded)
3. Converts rows via the adapter
4. Runs the profile matcher

This is a pure orchestration layer - NO scoring, NO business logic.
Store failures propagate as ProfileStoreError; they are never turned into an
empty recommendation list.
"""

import logging
from sqlalchemy.orm import Session

from utils.crud_profile import get_profile_by_id, list_active_profiles
from .adapter import profile_to_match_profile, profiles_to_match_profiles
from .contracts import RecommendationOutput
from .engine import ProfileMatcher

logger = logging.getLogger("recommendation")


class SubjectNotFoundError(LookupError):
    """The profile recommendations were requested for does not exist."""


def run_recommendations(
    db: Session,
    subject_id: str,
    matcher: ProfileMatcher | None = None
) -> RecommendationOutput:
    """
    Generate recommendations for a stored profile.

    Args:
        db: Database session
        subject_id: Profile to recommend connections for
        matcher: Optional matcher instance (a default one is created)

    Returns:
        RecommendationOutput

    Raises:
        SubjectNotFoundError: subject_id does not resolve to a profile
        ProfileStoreError: the subject or candidate pool could not be loaded
    """
    subject_row = get_profile_by_id(db, subject_id)
    if subject_row is None:
        raise SubjectNotFoundError(f"Profile {subject_id} not found")

    subject = profile_to_match_profile(subject_row)
    candidates = profiles_to_match_profiles(list_active_profiles(db, exclude_id=subject_id))

    output = (matcher or ProfileMatcher()).run(subject, candidates)
    logger.info(
        "Recommendations for %s: %d recommended of %d evaluated",
        subject_id, output.total_recommended, output.total_candidates_evaluated,
    )
    return output
