"""
Profile Matcher

Main orchestrator that combines the scoring components into a single pipeline.
This is the primary entry point for generating connection recommendations.
"""

import logging
import time
from typing import Iterable, List

from .contracts import MatchProfile, Recommendation, RecommendationOutput
from .aggregator import batch_aggregate, aggregate_scores
from .ranker import filter_matched, rank_candidates, select_top
from .output_assembler import assemble_recommendation, assemble_output
from .constants import ENGINE_VERSION, MAX_RECOMMENDATIONS

logger = logging.getLogger("recommendation")


class ProfileMatcher:
    """
    Ranks candidate profiles by how likely they are to be useful connections
    for a subject profile.

    Pipeline flow:
    1. Materialize - Read the whole candidate pool (global ranking needs it)
    2. Signal Scoring - Score each signal independently per candidate
    3. Aggregation - Sum signals into a match score, pick the reason
    4. Filtering - Drop candidates scoring zero
    5. Ranking - Stable sort by score, keep the top MAX_RECOMMENDATIONS
    6. Output Assembly - Build Recommendation records

    The matcher holds no mutable state and performs no I/O, so one instance
    can serve concurrent requests.
    """

    def __init__(self, max_results: int = MAX_RECOMMENDATIONS):
        self.max_results = max_results
        self.version = ENGINE_VERSION

    def _prepare_pool(
        self,
        subject: MatchProfile,
        candidates: Iterable[MatchProfile]
    ) -> List[MatchProfile]:
        pool = []
        for candidate in candidates:
            if candidate.id == subject.id:
                logger.debug("Dropping subject %s from its own candidate pool", subject.id)
                continue
            pool.append(candidate)
        return pool

    def recommend(
        self,
        subject: MatchProfile,
        candidates: Iterable[MatchProfile]
    ) -> List[Recommendation]:
        """
        Generate recommendations for a subject profile.

        Args:
            subject: Profile recommendations are generated for
            candidates: Active profiles to consider; may be a lazy iterable

        Returns:
            Up to max_results recommendations, highest score first.
            An empty list means nobody matched.
        """
        return self.run(subject, candidates).recommendations

    def run(
        self,
        subject: MatchProfile,
        candidates: Iterable[MatchProfile]
    ) -> RecommendationOutput:
        """
        Same as recommend() but returns the full RecommendationOutput with
        summary statistics.
        """
        start_time = time.perf_counter()

        pool = self._prepare_pool(subject, candidates)
        if not pool:
            return assemble_output(
                subject_id=subject.id,
                ranked=[],
                total_evaluated=0,
                total_matched=0,
                processing_time_ms=round((time.perf_counter() - start_time) * 1000, 2),
            )

        scored = batch_aggregate(subject, pool)
        matched = filter_matched(scored)
        ranked = select_top(rank_candidates(matched), self.max_results)

        processing_time = (time.perf_counter() - start_time) * 1000
        logger.debug(
            "Matched %d/%d candidates for %s in %.2fms",
            len(matched), len(pool), subject.id, processing_time,
        )

        return assemble_output(
            subject_id=subject.id,
            ranked=ranked,
            total_evaluated=len(pool),
            total_matched=len(matched),
            processing_time_ms=round(processing_time, 2),
        )

    def recommend_from_dict(
        self,
        subject_data: dict,
        candidates_data: Iterable[dict]
    ) -> List[Recommendation]:
        """
        Generate recommendations from plain dictionaries.

        Convenience method for API integration; raises pydantic's
        ValidationError on malformed profiles before any scoring happens.
        """
        subject = MatchProfile.model_validate(subject_data)
        candidates = [MatchProfile.model_validate(c) for c in candidates_data]
        return self.recommend(subject, candidates)

    def score_pair(
        self,
        subject: MatchProfile,
        candidate: MatchProfile
    ) -> dict:
        """
        Score a single candidate against the subject, including signals that
        did not fire. Useful for explaining a specific match.
        """
        scored = aggregate_scores(subject, candidate)
        recommendation = assemble_recommendation(scored)

        return {
            "match_score": scored.match_score,
            "reason": scored.reason,
            "connection_points": recommendation.connection_points,
            "signals": {
                s.signal: {"score": s.score, "matches": s.matches}
                for s in scored.signals
            },
        }


# Convenience function for simple usage
def get_recommendations(
    subject: MatchProfile,
    candidates: Iterable[MatchProfile]
) -> List[Recommendation]:
    """
    Convenience function to get recommendations.

    Args:
        subject: Subject profile
        candidates: Candidate pool

    Returns:
        Ranked list of Recommendation
    """
    matcher = ProfileMatcher()
    return matcher.recommend(subject, candidates)
