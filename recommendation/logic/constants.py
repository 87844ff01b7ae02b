"""
Matcher Constants

Defines signal weights, output limits and the human-readable texts used by
the profile matcher. All values are deterministic with no AI/ML components.
"""

from enum import Enum
from typing import Dict


ENGINE_VERSION = "1.0.0"


# =============================================================================
# SIGNALS
# =============================================================================

class Signal(str, Enum):
    """Scoring signals, in evaluation order."""
    SHARED_SKILLS = "shared_skills"
    COMPLEMENTARY_SKILLS = "complementary_skills"
    SAME_COHORT = "same_cohort"
    SAME_GRADUATION_YEAR = "same_graduation_year"
    SHARED_CLASSES = "shared_classes"
    SHARED_TAGS = "shared_tags"


# Per-item weights (multiplied by the size of the overlap/difference)
SHARED_SKILL_WEIGHT = 10
COMPLEMENTARY_SKILL_WEIGHT = 5
SHARED_CLASS_WEIGHT = 8
SHARED_TAG_WEIGHT = 6

# Flat bonuses
SAME_COHORT_BONUS = 20
SAME_GRADUATION_YEAR_BONUS = 15

SIGNAL_WEIGHTS: Dict[str, int] = {
    Signal.SHARED_SKILLS.value: SHARED_SKILL_WEIGHT,
    Signal.COMPLEMENTARY_SKILLS.value: COMPLEMENTARY_SKILL_WEIGHT,
    Signal.SAME_COHORT.value: SAME_COHORT_BONUS,
    Signal.SAME_GRADUATION_YEAR.value: SAME_GRADUATION_YEAR_BONUS,
    Signal.SHARED_CLASSES.value: SHARED_CLASS_WEIGHT,
    Signal.SHARED_TAGS.value: SHARED_TAG_WEIGHT,
}


# =============================================================================
# LIMITS
# =============================================================================

MAX_RECOMMENDATIONS = 20

# Complementary skills listed in the connection point
MAX_COMPLEMENTARY_LISTED = 3


# =============================================================================
# TEXTS
# =============================================================================

CONNECTION_POINT_TEMPLATES: Dict[str, str] = {
    Signal.SHARED_SKILLS.value: "Shared skills: {}",
    Signal.COMPLEMENTARY_SKILLS.value: "Complementary skills: {}",
    Signal.SAME_COHORT.value: "Same cohort: {}",
    Signal.SAME_GRADUATION_YEAR.value: "Same graduation year: {}",
    Signal.SHARED_CLASSES.value: "Shared classes: {}",
    Signal.SHARED_TAGS.value: "Shared interests: {}",
}

# Reason headline, first match wins. Graduation year and tags are not listed.
REASON_PRIORITY = [
    (Signal.SHARED_SKILLS.value, "Shared skills: {}"),
    (Signal.SAME_COHORT.value, "Same cohort: {}"),
    (Signal.COMPLEMENTARY_SKILLS.value, "Complementary skills: {}"),
    (Signal.SHARED_CLASSES.value, "Shared class: {}"),
]

FALLBACK_REASON = "Potential connection"

NO_SUGGESTIONS_MESSAGE = "No suggestions yet"
