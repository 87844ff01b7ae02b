"""
Score Aggregator

Runs every signal scorer for a subject/candidate pair, sums the contributions
into a match score and picks the headline reason.
"""

from typing import Dict, Iterable, List
from .contracts import MatchProfile, SignalResult, ScoredCandidate
from .signal_scorers import SIGNAL_SCORERS
from .constants import REASON_PRIORITY, FALLBACK_REASON


def select_reason(signals: Dict[str, SignalResult]) -> str:
    """
    Pick the headline reason for a match.

    The first entry of REASON_PRIORITY whose signal fired wins, regardless of
    which signal contributed most. Graduation year and shared tags are not in
    the list, so a match driven only by them gets the generic fallback.
    """
    for signal, template in REASON_PRIORITY:
        result = signals.get(signal)
        if result is not None and result.fired and result.matches:
            return template.format(result.matches[0])
    return FALLBACK_REASON


def aggregate_scores(
    subject: MatchProfile,
    candidate: MatchProfile
) -> ScoredCandidate:
    """
    Compute all signals and aggregate them into a match score.

    Args:
        subject: Profile recommendations are generated for
        candidate: Profile being scored

    Returns:
        ScoredCandidate with signal results, total score and reason
    """
    signals: List[SignalResult] = [scorer(subject, candidate) for scorer in SIGNAL_SCORERS]

    match_score = sum(s.score for s in signals)
    reason = select_reason({s.signal: s for s in signals})

    return ScoredCandidate(
        candidate=candidate,
        signals=signals,
        match_score=match_score,
        reason=reason,
    )


def batch_aggregate(
    subject: MatchProfile,
    candidates: Iterable[MatchProfile]
) -> List[ScoredCandidate]:
    """Score multiple candidates, keeping input order."""
    return [aggregate_scores(subject, c) for c in candidates]
