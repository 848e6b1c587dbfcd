from enum import Enum
from pydantic import BaseModel


class RuleCategory(str, Enum):
    demographic = "demographic"
    firmographic = "firmographic"
    behavioral = "behavioral"


class ConditionType(str, Enum):
    job_title_contains = "job_title_contains"
    email_domain_personal = "email_domain_personal"
    email_domain_business = "email_domain_business"
    company_size_range = "company_size_range"
    industry_matches = "industry_matches"
    visited_pricing_page = "visited_pricing_page"
    visited_product_page = "visited_product_page"
    blog_only_engagement = "blog_only_engagement"
    funding_stage = "funding_stage"
    region_matches = "region_matches"
    custom = "custom"


class NegativeConditionType(str, Enum):
    personal_email = "personal_email"
    career_page_only = "career_page_only"
    competitor = "competitor"
    spam_source = "spam_source"
    fake_data = "fake_data"
    custom = "custom"


class EngagementCategory(str, Enum):
    email = "email"
    content = "content"
    web = "web"
    social = "social"
    event = "event"


class EngagementTemperature(str, Enum):
    cold = "cold"
    warm = "warm"
    hot = "hot"


class FirstPartySignalType(str, Enum):
    pricing_page = "pricing_page"
    demo_page = "demo_page"
    product_page = "product_page"
    email_open = "email_open"
    email_click = "email_click"
    email_reply = "email_reply"
    trial_signup = "trial_signup"
    comparison_page = "comparison_page"


class ThirdPartySignalType(str, Enum):
    g2_research = "g2_research"
    trustradius_research = "trustradius_research"
    competitor_comparison = "competitor_comparison"
    intent_provider = "intent_provider"
    capterra_research = "capterra_research"
    other = "other"


class ConfidenceLevel(str, Enum):
    low = "low"
    medium = "medium"
    high = "high"


class SignalSource(str, Enum):
    first_party = "first_party"
    third_party = "third_party"


class DealOutcome(str, Enum):
    won = "won"
    lost = "lost"


class TrainingStatus(str, Enum):
    untrained = "untrained"
    training = "training"
    trained = "trained"
    error = "error"


class Impact(str, Enum):
    positive = "positive"
    negative = "negative"
    neutral = "neutral"


class Tier(str, Enum):
    A = "A"
    B = "B"
    C = "C"
    D = "D"


class ScoreCategory(str, Enum):
    poor = "poor"
    moderate = "moderate"
    strong = "strong"


class ScoringMode(str, Enum):
    simple = "simple"
    advanced = "advanced"


class OutreachTone(str, Enum):
    casual = "casual"
    formal = "formal"
    challenger = "challenger"


class ProspectSortField(str, Enum):
    tier = "tier"
    score = "score"
    date = "date"
    name = "name"


class SortOrder(str, Enum):
    asc = "asc"
    desc = "desc"


class SuccessResponse(BaseModel):
    """Generic success response base."""

    success: bool = True
