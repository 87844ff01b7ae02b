from typing import Iterable, List, Optional
from pydantic import BaseModel, Field

from models.schemas import DirectoryProfileOut


class DirectoryFilters(BaseModel):
    """
    Browse filters for the directory page.

    List filters match when any of their values matches (OR); different
    filters must all match (AND). Text comparisons ignore case.
    """
    search: Optional[str] = None
    skills: List[str] = Field(default_factory=list)
    interests: List[str] = Field(default_factory=list)
    cohort: List[str] = Field(default_factory=list)
    year: List[int] = Field(default_factory=list)
    modality: List[str] = Field(default_factory=list)
    hometown: Optional[str] = None
    location: Optional[str] = None

    def is_empty(self) -> bool:
        return not any([
            self.search, self.skills, self.interests, self.cohort,
            self.year, self.modality, self.hometown, self.location,
        ])


def _contains(haystack: Optional[str], needle: str) -> bool:
    return bool(haystack) and needle.lower() in haystack.lower()


def _any_overlap(values: Iterable[str], wanted: List[str]) -> bool:
    lowered = {v.lower() for v in values}
    return any(w.lower() in lowered for w in wanted)


def matches_search(profile: DirectoryProfileOut, query: str) -> bool:
    query = query.strip()
    if not query:
        return True
    return (
        _contains(profile.full_name, query)
        or _contains(profile.bio, query)
        or any(_contains(s, query) for s in profile.skills)
    )


def matches_filters(profile: DirectoryProfileOut, filters: DirectoryFilters) -> bool:
    if filters.search and not matches_search(profile, filters.search):
        return False
    if filters.skills and not _any_overlap(profile.skills, filters.skills):
        return False
    if filters.interests and not _any_overlap(profile.interests, filters.interests):
        return False
    if filters.cohort and not _any_overlap([profile.cohort or ""], filters.cohort):
        return False
    if filters.year and profile.graduation_year not in filters.year:
        return False
    if filters.modality and not _any_overlap([profile.modality or ""], filters.modality):
        return False
    if filters.hometown and not _contains(profile.hometown, filters.hometown):
        return False
    if filters.location and not _contains(profile.location, filters.location):
        return False
    return True


def apply_filters(profiles: List[DirectoryProfileOut], filters: DirectoryFilters) -> List[DirectoryProfileOut]:
    if filters.is_empty():
        return profiles
    return [p for p in profiles if matches_filters(p, filters)]
