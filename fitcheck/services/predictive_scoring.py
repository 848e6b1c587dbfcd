"""Win-rate based predictive scoring.

Training turns closed deals into a table of conversion rates per
categorical bucket; prediction averages the buckets a lead falls into
and blends the result with an engagement delta and the base rate.
"""

import logging
import re
from collections import defaultdict
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from fitcheck.core.constants import (
    BASE_RATE_BLEND,
    CATEGORICAL_BLEND,
    DEFAULT_ENGAGEMENT_SCORE,
    ENGAGEMENT_SCORE_WEIGHT,
    SENIORITY_KEYWORDS,
    WON_PREDICTION_CUTOFF,
)
from fitcheck.core.exceptions import (
    ModelNotTrainedError,
    ScoringDisabledError,
    TrainingDataError,
)
from fitcheck.core.rounding import round_half_up
from fitcheck.repositories.predictive_repository import PredictiveRepository
from fitcheck.schemas.common import (
    ConfidenceLevel,
    DealOutcome,
    Impact,
    TrainingStatus,
)
from fitcheck.schemas.predictive import (
    FeatureWeights,
    HistoricalDealCreate,
    PredictiveLeadData,
)

logger = logging.getLogger(__name__)

# Categorical fields shared by FeatureWeights, deals and lead data
_CATEGORICAL_FIELDS = ["industry", "company_size", "source_channel", "funding_stage", "region"]


def classify_seniority(job_title: Optional[str]) -> str:
    """First seniority tier with a whole-word keyword in *job_title*."""
    title = (job_title or "").lower()
    for tier, keywords in SENIORITY_KEYWORDS:
        if any(re.search(rf"\b{re.escape(keyword)}\b", title) for keyword in keywords):
            return tier
    return "other"


def _win_rates(buckets: List[str], outcomes: List[bool]) -> Dict[str, float]:
    counts: Dict[str, List[int]] = defaultdict(lambda: [0, 0])
    for bucket, won in zip(buckets, outcomes):
        counts[bucket][1] += 1
        if won:
            counts[bucket][0] += 1
    return {bucket: won / total for bucket, (won, total) in counts.items()}


def train_feature_weights(deals: List) -> FeatureWeights:
    """Compute per-bucket win rates from closed deals (must be non-empty)."""
    outcomes = [deal.outcome == DealOutcome.won for deal in deals]
    won_deals = [deal for deal, won in zip(deals, outcomes) if won]

    weights = {
        field: _win_rates(
            [(getattr(deal, field) or "").lower() or "unknown" for deal in deals],
            outcomes,
        )
        for field in _CATEGORICAL_FIELDS
    }
    weights["job_title"] = _win_rates(
        [classify_seniority(deal.job_title) for deal in deals], outcomes
    )

    if won_deals:
        engagement_avg = sum(d.engagement_score or 0 for d in won_deals) / len(won_deals)
    else:
        engagement_avg = DEFAULT_ENGAGEMENT_SCORE

    return FeatureWeights(
        **weights,
        engagement_score_avg=engagement_avg,
        engagement_score_weight=ENGAGEMENT_SCORE_WEIGHT,
        base_conversion_rate=len(won_deals) / len(deals),
    )


def _bucket_rates(lead, weights: FeatureWeights) -> List[float]:
    rates = []
    for field in ("industry", "company_size"):
        key = (getattr(lead, field) or "").lower()
        if key in getattr(weights, field):
            rates.append(getattr(weights, field)[key])
    seniority = classify_seniority(lead.job_title)
    if seniority in weights.job_title:
        rates.append(weights.job_title[seniority])
    for field in ("source_channel", "funding_stage", "region"):
        key = (getattr(lead, field) or "").lower()
        if key in getattr(weights, field):
            rates.append(getattr(weights, field)[key])
    return rates


def predict_score(lead, weights: FeatureWeights) -> float:
    """Unrounded 0-100 win probability for *lead*."""
    rates = _bucket_rates(lead, weights)
    if rates:
        categorical = sum(rate * 100 for rate in rates) / len(rates)
    else:
        categorical = weights.base_conversion_rate * 100

    engagement = lead.engagement_score
    if engagement is None:
        engagement = DEFAULT_ENGAGEMENT_SCORE
    engagement_bonus = (
        (engagement - weights.engagement_score_avg) / 100
    ) * weights.engagement_score_weight * 100

    final = (
        categorical * CATEGORICAL_BLEND
        + engagement_bonus
        + weights.base_conversion_rate * BASE_RATE_BLEND
    )
    return max(0.0, min(100.0, final))


def calculate_accuracy(deals: List, weights: FeatureWeights) -> float:
    """Percentage of deals whose predicted win (score >= 50) matches the outcome."""
    correct = sum(
        1
        for deal in deals
        if (predict_score(deal, weights) >= WON_PREDICTION_CUTOFF)
        == (deal.outcome == DealOutcome.won)
    )
    return correct / len(deals) * 100


def calculate_confidence(lead: PredictiveLeadData, weights: FeatureWeights) -> ConfidenceLevel:
    matched = 0
    for field in _CATEGORICAL_FIELDS:
        value = getattr(lead, field)
        if value and getattr(weights, field).get(value.lower()):
            matched += 1
    if lead.job_title:
        matched += 1
    if matched >= 5:
        return ConfidenceLevel.high
    if matched >= 3:
        return ConfidenceLevel.medium
    return ConfidenceLevel.low


def _impact(value: float, reference: float) -> Impact:
    if value > reference:
        return Impact.positive
    if value < reference:
        return Impact.negative
    return Impact.neutral


def explain_factors(lead: PredictiveLeadData, weights: FeatureWeights) -> List[Dict[str, Any]]:
    """Factors behind a prediction, compared with the base conversion rate."""
    base = weights.base_conversion_rate
    factors: List[Dict[str, Any]] = []

    for label, field in (("Industry", "industry"), ("Company Size", "company_size")):
        rate = getattr(weights, field).get((getattr(lead, field) or "").lower())
        if rate is not None:
            factors.append(
                {"factor": label, "impact": _impact(rate, base), "value": getattr(lead, field) or "Unknown"}
            )

    if lead.job_title:
        seniority = classify_seniority(lead.job_title)
        rate = weights.job_title.get(seniority)
        if rate is not None:
            factors.append(
                {"factor": "Seniority", "impact": _impact(rate, base), "value": seniority.capitalize()}
            )

    rate = weights.source_channel.get((lead.source_channel or "").lower())
    if rate is not None:
        factors.append(
            {"factor": "Source", "impact": _impact(rate, base), "value": lead.source_channel or "Unknown"}
        )

    if lead.engagement_score is not None:
        factors.append(
            {
                "factor": "Engagement",
                "impact": _impact(lead.engagement_score, weights.engagement_score_avg),
                "value": f"{lead.engagement_score:g}%",
            }
        )
    return factors


class PredictiveScoringService:
    def __init__(self, predictive_repo: PredictiveRepository) -> None:
        self._repo = predictive_repo

    async def get_settings(self):
        return await self._repo.get_settings()

    async def update_settings(self, **fields: Any):
        settings_row = await self._repo.update_settings(**fields)
        await self._repo.commit()
        return settings_row

    async def get_model_state(self):
        return await self._repo.get_model_state()

    async def list_deals(self) -> List:
        return await self._repo.list_deals()

    async def add_deal(self, payload: HistoricalDealCreate):
        deal = await self._repo.add_deal(**payload.model_dump(exclude_none=True))
        await self._repo.commit()
        return deal

    async def train(self) -> Dict[str, Any]:
        """Retrain the model from every historical deal.

        The model state moves to ``training`` first and ends in
        ``trained`` or ``error``.
        """
        state = await self._repo.get_model_state()
        await self._repo.update_model_state(
            state, training_status=TrainingStatus.training.value, error_message=None
        )
        await self._repo.commit()

        deals = await self._repo.list_deals()
        if not deals:
            error = TrainingDataError()
            await self._repo.update_model_state(
                state, training_status=TrainingStatus.error.value, error_message=error.detail
            )
            await self._repo.commit()
            raise error

        try:
            weights = train_feature_weights(deals)
            accuracy = calculate_accuracy(deals, weights)
        except Exception as exc:
            logger.error("Predictive training failed", exc_info=True)
            await self._repo.update_model_state(
                state, training_status=TrainingStatus.error.value, error_message=str(exc)
            )
            await self._repo.commit()
            raise

        won = sum(1 for deal in deals if deal.outcome == DealOutcome.won)
        await self._repo.update_model_state(
            state,
            feature_weights=weights.model_dump(),
            total_records=len(deals),
            won_records=won,
            lost_records=len(deals) - won,
            accuracy_score=accuracy,
            last_trained_at=datetime.now(timezone.utc),
            training_status=TrainingStatus.trained.value,
            error_message=None,
        )
        await self._repo.commit()
        logger.info(
            "Model trained on %d deals (%d won). Accuracy: %.1f%%",
            len(deals),
            won,
            accuracy,
        )
        return {
            "success": True,
            "total_records": len(deals),
            "won_records": won,
            "lost_records": len(deals) - won,
            "accuracy": accuracy,
        }

    async def predict(self, lead: PredictiveLeadData) -> Dict[str, Any]:
        settings_row = await self._repo.get_settings()
        if not settings_row.predictive_enabled:
            raise ScoringDisabledError("Predictive scoring is not enabled")

        state = await self._repo.get_model_state()
        if state.training_status != TrainingStatus.trained.value:
            raise ModelNotTrainedError()

        weights = FeatureWeights(**(state.feature_weights or {}))
        score = predict_score(lead, weights)
        confidence = calculate_confidence(lead, weights)
        logger.info("Predicted score %.1f%% (confidence: %s)", score, confidence.value)
        return {
            "success": True,
            "score": round_half_up(score),
            "confidence": confidence,
            "factors": explain_factors(lead, weights),
        }
