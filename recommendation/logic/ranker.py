"""
Ranker

Drops candidates without any connection, orders the rest by match score and
truncates to the recommendation cap.
"""

from typing import List
from .contracts import ScoredCandidate
from .constants import MAX_RECOMMENDATIONS


def filter_matched(
    scored_candidates: List[ScoredCandidate]
) -> List[ScoredCandidate]:
    """Keep only candidates with a strictly positive match score."""
    return [s for s in scored_candidates if s.match_score > 0]


def rank_candidates(
    scored_candidates: List[ScoredCandidate]
) -> List[ScoredCandidate]:
    """
    Rank candidates by match score (descending).

    sorted() is stable, so equal scores keep the candidate pool's order.

    Args:
        scored_candidates: List of scored candidates

    Returns:
        Sorted list by score
    """
    return sorted(
        scored_candidates,
        key=lambda x: x.match_score,
        reverse=True
    )


def select_top(
    ranked: List[ScoredCandidate],
    max_total: int = MAX_RECOMMENDATIONS
) -> List[ScoredCandidate]:
    return ranked[:max_total]
