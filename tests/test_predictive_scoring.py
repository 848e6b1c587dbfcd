from types import SimpleNamespace
from unittest.mock import AsyncMock

import pytest

from fitcheck.core.exceptions import (
    ModelNotTrainedError,
    ScoringDisabledError,
    TrainingDataError,
)
from fitcheck.schemas.common import ConfidenceLevel, Impact
from fitcheck.schemas.predictive import PredictiveLeadData
from fitcheck.services.predictive_scoring import (
    PredictiveScoringService,
    calculate_accuracy,
    calculate_confidence,
    classify_seniority,
    explain_factors,
    predict_score,
    train_feature_weights,
)


def _deal(outcome, industry, size, title, source, funding, region, engagement):
    return SimpleNamespace(
        outcome=outcome,
        industry=industry,
        company_size=size,
        job_title=title,
        source_channel=source,
        funding_stage=funding,
        region=region,
        engagement_score=engagement,
    )


DEALS = [
    _deal("won", "SaaS", "50-200", "VP Sales", "Referral", "Series A", "US", 80),
    _deal("won", "SaaS", "50-200", "CEO", "Referral", "Series A", "US", 60),
    _deal("lost", "Retail", "1-10", "Analyst", "Cold", "Bootstrapped", "EU", 20),
    _deal("lost", "SaaS", "1-10", "Analyst", "Cold", "Bootstrapped", "EU", 10),
]

WINNER = PredictiveLeadData(
    industry="SaaS",
    company_size="50-200",
    job_title="VP Marketing",
    source_channel="Referral",
    funding_stage="Series A",
    region="US",
)

LOSER = PredictiveLeadData(
    industry="Retail",
    company_size="1-10",
    job_title="Analyst",
    source_channel="Cold",
    funding_stage="Bootstrapped",
    region="EU",
)


class TestSeniority:
    @pytest.mark.parametrize(
        "title,expected",
        [
            ("Chief Revenue Officer", "c-level"),
            ("Vice President, Sales", "vp"),
            ("Director of IT", "director"),
            ("Product Manager", "manager"),
            ("Co-Founder", "founder"),
            ("Data Analyst", "individual"),
            ("Intern", "other"),
            (None, "other"),
        ],
    )
    def test_classify(self, title, expected):
        assert classify_seniority(title) == expected


class TestTraining:
    """Win rates learned from a small, separable deal history."""

    def test_win_rates_per_bucket(self):
        weights = train_feature_weights(DEALS)
        assert weights.industry == {"saas": pytest.approx(2 / 3), "retail": 0.0}
        assert weights.job_title == {"vp": 1.0, "c-level": 1.0, "individual": 0.0}
        assert weights.base_conversion_rate == 0.5
        assert weights.engagement_score_avg == 70

    def test_missing_fields_bucket_as_unknown(self):
        deals = [_deal("won", None, None, None, None, None, None, 50)]
        weights = train_feature_weights(deals)
        assert weights.industry == {"unknown": 1.0}
        assert weights.job_title == {"other": 1.0}

    def test_accuracy_on_separable_history(self):
        weights = train_feature_weights(DEALS)
        assert calculate_accuracy(DEALS, weights) == 100.0


class TestPrediction:
    def test_strong_lead_scores_high(self):
        weights = train_feature_weights(DEALS)
        assert 80 < predict_score(WINNER, weights) <= 100

    def test_weak_lead_scores_low(self):
        weights = train_feature_weights(DEALS)
        # 0 categorical, -3 engagement delta, +7.5 base rate
        assert predict_score(LOSER, weights) == pytest.approx(4.5)

    def test_unknown_lead_falls_back_to_base_rate(self):
        weights = train_feature_weights(DEALS)
        assert predict_score(PredictiveLeadData(), weights) == pytest.approx(47.0)

    def test_confidence(self):
        weights = train_feature_weights(DEALS)
        assert calculate_confidence(WINNER, weights) == ConfidenceLevel.high
        assert calculate_confidence(LOSER, weights) == ConfidenceLevel.low

    def test_factors(self):
        weights = train_feature_weights(DEALS)
        lead = WINNER.model_copy(update={"engagement_score": 90})
        factors = {f["factor"]: f for f in explain_factors(lead, weights)}

        assert factors["Industry"]["impact"] == Impact.positive
        assert factors["Seniority"]["value"] == "Vp"
        assert factors["Engagement"]["value"] == "90%"
        assert factors["Engagement"]["impact"] == Impact.positive


def _mock_predictive_repo(enabled=True, status="trained", feature_weights=None, deals=None):
    repo = AsyncMock()
    repo.get_settings = AsyncMock(return_value=SimpleNamespace(predictive_enabled=enabled))
    state = SimpleNamespace(training_status=status, feature_weights=feature_weights or {})
    repo.get_model_state = AsyncMock(return_value=state)
    repo.list_deals = AsyncMock(return_value=deals or [])

    async def _update(model_state, **fields):
        for key, value in fields.items():
            setattr(model_state, key, value)
        return model_state

    repo.update_model_state = AsyncMock(side_effect=_update)
    return repo, state


class TestPredictiveService:
    @pytest.mark.asyncio
    async def test_predict_when_disabled(self):
        repo, _ = _mock_predictive_repo(enabled=False)
        with pytest.raises(ScoringDisabledError):
            await PredictiveScoringService(repo).predict(WINNER)

    @pytest.mark.asyncio
    async def test_predict_before_training(self):
        repo, _ = _mock_predictive_repo(status="untrained")
        with pytest.raises(ModelNotTrainedError):
            await PredictiveScoringService(repo).predict(WINNER)

    @pytest.mark.asyncio
    async def test_train_without_deals_marks_error(self):
        repo, state = _mock_predictive_repo()
        with pytest.raises(TrainingDataError):
            await PredictiveScoringService(repo).train()
        assert state.training_status == "error"
        assert state.error_message == "No historical deals found"

    @pytest.mark.asyncio
    async def test_train_then_predict(self):
        repo, state = _mock_predictive_repo(status="untrained", deals=DEALS)
        service = PredictiveScoringService(repo)

        result = await service.train()

        assert result["total_records"] == 4
        assert result["won_records"] == 2
        assert state.training_status == "trained"

        prediction = await service.predict(WINNER)
        assert prediction["success"] is True
        assert prediction["score"] > 80
