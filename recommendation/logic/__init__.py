"""
Recommendation Logic Module

Provides the deterministic profile-similarity matcher behind the
"people you may want to connect with" list.
"""

from .contracts import (
    MatchProfile,
    Recommendation,
    RecommendationOutput,
    SignalResult,
    ScoredCandidate,
)
from .engine import ProfileMatcher, get_recommendations
from .constants import Signal, MAX_RECOMMENDATIONS

__all__ = [
    # Main engine
    "ProfileMatcher",
    "get_recommendations",

    # Contracts
    "MatchProfile",
    "Recommendation",
    "RecommendationOutput",
    "SignalResult",
    "ScoredCandidate",

    # Enums / limits
    "Signal",
    "MAX_RECOMMENDATIONS",
]
