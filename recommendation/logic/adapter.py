"""
Profile Adapter

Converts stored profiles into MatchProfile inputs for the matcher.

The profiles table keeps skills and interests inside the untyped `links`
JSON document and classes behind the profile_classes join. This module is the
single place where that layout is resolved into flat, typed collections.
"""

from typing import Iterable, List

from models.schemas import ProfileLinks
from .contracts import MatchProfile


def profile_to_match_profile(profile) -> MatchProfile:
    """
    Build a MatchProfile from an ORM Profile row.

    Interests are used as the profile's tags; classes are compared by code.
    """
    links = ProfileLinks.from_document(profile.links)

    return MatchProfile(
        id=str(profile.id),
        cohort=profile.cohort or None,
        graduation_year=profile.graduation_year,
        skills=links.skills,
        classes=[c.code for c in profile.classes],
        tags=links.interests,
    )


def profiles_to_match_profiles(profiles: Iterable) -> List[MatchProfile]:
    return [profile_to_match_profile(p) for p in profiles]
