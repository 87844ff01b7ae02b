"""
Signal Scorers

Individual scoring functions for each matching signal.
Each scorer compares a subject with one candidate and returns a SignalResult
holding its integer contribution and, when it fires, a connection point.
All logic is deterministic - no AI/ML components, exact string comparison.
"""

from typing import List, Sequence
from .contracts import MatchProfile, SignalResult
from .constants import (
    Signal,
    SHARED_SKILL_WEIGHT,
    COMPLEMENTARY_SKILL_WEIGHT,
    SHARED_CLASS_WEIGHT,
    SHARED_TAG_WEIGHT,
    SAME_COHORT_BONUS,
    SAME_GRADUATION_YEAR_BONUS,
    MAX_COMPLEMENTARY_LISTED,
    CONNECTION_POINT_TEMPLATES,
)


def _intersection(ours: Sequence[str], theirs: Sequence[str]) -> List[str]:
    """Items present in both, in the order of `ours`."""
    theirs_set = set(theirs)
    return [item for item in ours if item in theirs_set]


def _difference(theirs: Sequence[str], ours: Sequence[str]) -> List[str]:
    """Items of `theirs` missing from `ours`, in the order of `theirs`."""
    ours_set = set(ours)
    return [item for item in theirs if item not in ours_set]


def _overlap_result(signal: Signal, matches: List[str], weight: int) -> SignalResult:
    if not matches:
        return SignalResult(signal=signal.value)
    return SignalResult(
        signal=signal.value,
        score=weight * len(matches),
        matches=matches,
        connection_point=CONNECTION_POINT_TEMPLATES[signal.value].format(", ".join(matches)),
    )


def score_shared_skills(subject: MatchProfile, candidate: MatchProfile) -> SignalResult:
    """Skills both profiles claim: 10 points each."""
    shared = _intersection(subject.skills, candidate.skills)
    return _overlap_result(Signal.SHARED_SKILLS, shared, SHARED_SKILL_WEIGHT)


def score_complementary_skills(subject: MatchProfile, candidate: MatchProfile) -> SignalResult:
    """
    Skills the candidate has that the subject lacks: 5 points each.

    Every complementary skill counts toward the score, but only the first
    three are listed in the connection point.
    """
    complementary = _difference(candidate.skills, subject.skills)
    if not complementary:
        return SignalResult(signal=Signal.COMPLEMENTARY_SKILLS.value)

    listed = ", ".join(complementary[:MAX_COMPLEMENTARY_LISTED])
    return SignalResult(
        signal=Signal.COMPLEMENTARY_SKILLS.value,
        score=COMPLEMENTARY_SKILL_WEIGHT * len(complementary),
        matches=complementary,
        connection_point=CONNECTION_POINT_TEMPLATES[Signal.COMPLEMENTARY_SKILLS.value].format(listed),
    )


def score_same_cohort(subject: MatchProfile, candidate: MatchProfile) -> SignalResult:
    # empty strings never match
    if subject.cohort and candidate.cohort and subject.cohort == candidate.cohort:
        return SignalResult(
            signal=Signal.SAME_COHORT.value,
            score=SAME_COHORT_BONUS,
            matches=[subject.cohort],
            connection_point=CONNECTION_POINT_TEMPLATES[Signal.SAME_COHORT.value].format(subject.cohort),
        )
    return SignalResult(signal=Signal.SAME_COHORT.value)


def score_same_graduation_year(subject: MatchProfile, candidate: MatchProfile) -> SignalResult:
    year = subject.graduation_year
    if year is not None and candidate.graduation_year is not None and year == candidate.graduation_year:
        return SignalResult(
            signal=Signal.SAME_GRADUATION_YEAR.value,
            score=SAME_GRADUATION_YEAR_BONUS,
            matches=[str(year)],
            connection_point=CONNECTION_POINT_TEMPLATES[Signal.SAME_GRADUATION_YEAR.value].format(year),
        )
    return SignalResult(signal=Signal.SAME_GRADUATION_YEAR.value)


def score_shared_classes(subject: MatchProfile, candidate: MatchProfile) -> SignalResult:
    shared = _intersection(subject.classes, candidate.classes)
    return _overlap_result(Signal.SHARED_CLASSES, shared, SHARED_CLASS_WEIGHT)


def score_shared_tags(subject: MatchProfile, candidate: MatchProfile) -> SignalResult:
    shared = _intersection(subject.tags, candidate.tags)
    return _overlap_result(Signal.SHARED_TAGS, shared, SHARED_TAG_WEIGHT)


# Evaluation order; connection points follow it
SIGNAL_SCORERS = [
    score_shared_skills,
    score_complementary_skills,
    score_same_cohort,
    score_same_graduation_year,
    score_shared_classes,
    score_shared_tags,
]
