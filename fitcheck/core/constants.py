from typing import Dict, FrozenSet, List, Tuple

from fitcheck.schemas.common import ConfidenceLevel, Tier

# Domains treated as personal by the ``email_domain_business`` rule
PERSONAL_EMAIL_DOMAINS: FrozenSet[str] = frozenset(
    {"gmail.com", "yahoo.com", "hotmail.com", "outlook.com", "aol.com", "icloud.com"}
)

# Default condition_value for the seeded ``personal_email`` negative rule
DEFAULT_PERSONAL_EMAIL_DOMAINS: List[str] = [
    "gmail.com",
    "yahoo.com",
    "hotmail.com",
    "outlook.com",
    "aol.com",
    "icloud.com",
    "live.com",
    "msn.com",
    "protonmail.com",
]

CAREER_PAGE_KEYWORDS: Tuple[str, ...] = (
    "career",
    "jobs",
    "job",
    "hiring",
    "openings",
    "work-with-us",
)

# --- Intent scoring ---------------------------------------------------------

VISIT_COUNT_CAP: int = 5
VISIT_INCREMENT: float = 0.2
DEFAULT_SIGNAL_WEIGHT: int = 10

CONFIDENCE_MULTIPLIERS: Dict[ConfidenceLevel, float] = {
    ConfidenceLevel.high: 1.0,
    ConfidenceLevel.medium: 0.7,
    ConfidenceLevel.low: 0.4,
}

# --- Predictive scoring -----------------------------------------------------

ENGAGEMENT_SCORE_WEIGHT: float = 0.15
DEFAULT_ENGAGEMENT_SCORE: float = 50.0
CATEGORICAL_BLEND: float = 0.85
BASE_RATE_BLEND: float = 15.0
WON_PREDICTION_CUTOFF: float = 50.0

# Ordered: first matching tier wins
SENIORITY_KEYWORDS: List[Tuple[str, Tuple[str, ...]]] = [
    ("c-level", ("ceo", "cto", "cfo", "cmo", "cro", "coo", "chief")),
    ("vp", ("vp", "vice president")),
    ("director", ("director",)),
    ("manager", ("manager",)),
    ("founder", ("founder", "owner")),
    ("individual", ("analyst", "lead")),
]

# --- Prospect tiers ---------------------------------------------------------

# (minimum score, tier, action, description), highest first
TIER_DEFINITIONS: List[Tuple[int, Tier, str, str]] = [
    (80, Tier.A, "Contact Now", "Ideal fit, prioritise immediate outreach"),
    (60, Tier.B, "Nurture", "Good fit, add to an active nurture sequence"),
    (40, Tier.C, "Monitor", "Partial fit, revisit when signals change"),
    (0, Tier.D, "Deprioritize", "Poor fit, not worth sales time right now"),
]

TIER_ORDER: Dict[Tier, int] = {Tier.A: 0, Tier.B: 1, Tier.C: 2, Tier.D: 3}

MAX_COMPARE_PROSPECTS: int = 3

DEFAULT_OPENING_LINE: str = (
    "I'd love to connect and share how we can help your team."
)

