"""
Output Assembler

Transforms internal scoring data into the Recommendation / RecommendationOutput
contracts returned to callers.
"""

from typing import List, Optional

from .contracts import ScoredCandidate, Recommendation, RecommendationOutput
from .constants import ENGINE_VERSION


def assemble_recommendation(scored: ScoredCandidate) -> Recommendation:
    """Convert a ScoredCandidate into a Recommendation."""
    return Recommendation(
        candidate_id=scored.candidate.id,
        match_score=scored.match_score,
        connection_points=scored.connection_points,
        reason=scored.reason,
    )


def assemble_output(
    subject_id: str,
    ranked: List[ScoredCandidate],
    total_evaluated: int,
    total_matched: int,
    processing_time_ms: Optional[float] = None
) -> RecommendationOutput:
    """
    Assemble the final RecommendationOutput.

    Args:
        subject_id: Profile the recommendations were generated for
        ranked: Ranked and truncated candidates
        total_evaluated: Size of the candidate pool
        total_matched: Candidates with a positive score, before truncation
        processing_time_ms: Wall time of the run

    Returns:
        RecommendationOutput
    """
    recommendations = [assemble_recommendation(s) for s in ranked]

    return RecommendationOutput(
        subject_id=subject_id,
        recommendations=recommendations,
        total_candidates_evaluated=total_evaluated,
        total_matched=total_matched,
        total_recommended=len(recommendations),
        processing_time_ms=processing_time_ms,
        engine_version=ENGINE_VERSION,
    )
