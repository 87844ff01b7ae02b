"""
Data Contracts for the Profile Matcher

Defines Pydantic models for MatchProfile (input) and Recommendation /
RecommendationOutput (output). These contracts are the API boundary
of the matching engine.
"""

from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator


def _dedupe(values) -> List[str]:
    """Drop duplicates while keeping first-seen order."""
    seen = set()
    result: List[str] = []
    for value in values or []:
        if value not in seen:
            seen.add(value)
            result.append(value)
    return result


# =============================================================================
# INPUT CONTRACTS
# =============================================================================

class MatchProfile(BaseModel):
    """
    Input contract for the matcher.
    A subject or candidate profile with its skills, classes and tags
    already resolved into flat string collections.
    """
    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(min_length=1)
    cohort: Optional[str] = None
    graduation_year: Optional[int] = Field(default=None, alias="graduationYear")

    # Set semantics, first-seen order kept so joined texts are deterministic
    skills: List[str] = Field(default_factory=list)
    classes: List[str] = Field(default_factory=list)
    tags: List[str] = Field(default_factory=list)

    @field_validator("skills", "classes", "tags", mode="before")
    @classmethod
    def _unique_entries(cls, value):
        if value is None:
            return []
        return _dedupe(value)


# =============================================================================
# OUTPUT CONTRACTS
# =============================================================================

class Recommendation(BaseModel):
    """Single recommended connection with its justifications."""
    model_config = ConfigDict(populate_by_name=True)

    candidate_id: str = Field(alias="candidateId")
    match_score: int = Field(ge=0, alias="matchScore")
    connection_points: List[str] = Field(default_factory=list, alias="connectionPoints")
    reason: str


class RecommendationOutput(BaseModel):
    """
    Output of a full recommendation run.
    Contains the ranked recommendations with summary statistics.
    """
    subject_id: str
    recommendations: List[Recommendation] = Field(default_factory=list)

    # Summary Statistics
    total_candidates_evaluated: int = 0
    total_matched: int = 0
    total_recommended: int = 0

    # Processing metadata
    processing_time_ms: Optional[float] = None
    engine_version: str = "1.0.0"


# =============================================================================
# INTERMEDIATE DATA STRUCTURES
# =============================================================================

class SignalResult(BaseModel):
    """
    Outcome of a single scoring signal for one subject/candidate pair.
    `matches` holds the items behind the signal (shared skills, the cohort ...).
    """
    signal: str
    score: int = 0
    matches: List[str] = Field(default_factory=list)
    connection_point: Optional[str] = None

    @property
    def fired(self) -> bool:
        return self.score > 0


class ScoredCandidate(BaseModel):
    """
    A candidate with its computed signal results.
    Used between scoring and ranking stages.
    """
    candidate: MatchProfile
    signals: List[SignalResult] = Field(default_factory=list)
    match_score: int = 0
    reason: str = ""

    @property
    def connection_points(self) -> List[str]:
        return [s.connection_point for s in self.signals if s.fired and s.connection_point]
