import uuid
from datetime import datetime, timedelta, timezone
from types import SimpleNamespace
from unittest.mock import AsyncMock

import pytest

from fitcheck.core.exceptions import SignalNotFoundError
from fitcheck.schemas.common import SignalSource
from fitcheck.services.intent_scoring import (
    IntentScoringService,
    build_timeline,
    calculate_intent_score,
    confidence_multiplier,
    get_first_party_weight,
    visit_multiplier,
)

NOW = datetime(2026, 6, 1, tzinfo=timezone.utc)


def _settings(**overrides):
    values = dict(
        in_market_threshold=50,
        first_party_weight=0.6,
        third_party_weight=0.4,
        pricing_page_weight=25,
        demo_page_weight=30,
        product_page_weight=15,
        email_open_weight=5,
        email_click_weight=10,
        email_reply_weight=20,
        trial_signup_weight=35,
        g2_research_weight=25,
        trustradius_weight=20,
        competitor_research_weight=30,
        intent_provider_weight=20,
    )
    values.update(overrides)
    return SimpleNamespace(**values)


def _first_party(signal_type, visit_count=1, hours_ago=0):
    return SimpleNamespace(
        id=uuid.uuid4(),
        signal_type=signal_type,
        visit_count=visit_count,
        observed_at=NOW - timedelta(hours=hours_ago),
    )


def _third_party(signal_type, confidence="high", hours_ago=0):
    return SimpleNamespace(
        id=uuid.uuid4(),
        signal_type=signal_type,
        confidence_level=confidence,
        observed_at=NOW - timedelta(hours=hours_ago),
    )


class TestMultipliers:
    @pytest.mark.parametrize(
        "visits,expected", [(1, 1.0), (2, 1.2), (5, 1.8), (10, 1.8)]
    )
    def test_visit_multiplier(self, visits, expected):
        assert visit_multiplier(visits) == pytest.approx(expected)

    def test_confidence_multiplier(self):
        assert confidence_multiplier("high") == 1.0
        assert confidence_multiplier("medium") == 0.7
        assert confidence_multiplier("low") == 0.4

    def test_unknown_signal_type_uses_default_weight(self):
        assert get_first_party_weight("webinar_page", _settings()) == 10

    def test_configured_zero_weight_stays_zero(self):
        assert get_first_party_weight("email_open", _settings(email_open_weight=0)) == 0


class TestIntentScore:
    """Blended first- and third-party intent score."""

    def test_blended_score(self):
        first_party = [_first_party("pricing_page", visit_count=5), _first_party("demo_page")]
        third_party = [_third_party("g2_research", "medium")]

        result = calculate_intent_score(first_party, third_party, _settings())

        # fp = 25*1.8 + 30 = 75 ; tp = 25*0.7 = 17.5
        assert result["first_party_score"] == 75
        assert result["third_party_score"] == 18
        # 75*0.6 + 17.5*0.4 = 52
        assert result["total_score"] == 52
        assert result["is_in_market"] is True
        assert result["signal_count"] == 3

    def test_total_is_capped_at_100(self):
        first_party = [_first_party("trial_signup", visit_count=5) for _ in range(5)]
        result = calculate_intent_score(first_party, [], _settings())
        assert result["total_score"] == 100

    def test_total_at_exact_half_rounds_up(self):
        settings_row = _settings(first_party_weight=0.5, third_party_weight=0.5)
        result = calculate_intent_score([_first_party("email_open")], [], settings_row)
        # 5 * 0.5 = 2.5
        assert result["total_score"] == 3

    def test_zero_weight_signal_adds_nothing(self):
        result = calculate_intent_score(
            [_first_party("pricing_page")], [], _settings(pricing_page_weight=0)
        )
        assert result["total_score"] == 0
        assert result["signal_count"] == 1

    def test_missing_settings_yield_zero(self):
        result = calculate_intent_score([_first_party("pricing_page")], [], None)
        assert result["total_score"] == 0
        assert result["is_in_market"] is False
        assert result["signal_count"] == 1

    def test_timeline_is_newest_first(self):
        old = _first_party("pricing_page", hours_ago=5)
        new = _third_party("intent_provider", hours_ago=1)
        timeline = build_timeline([old], [new])
        assert [entry["source"] for entry in timeline] == [
            SignalSource.third_party,
            SignalSource.first_party,
        ]


class TestIntentService:
    @pytest.mark.asyncio
    async def test_get_score_without_settings_row(self):
        repo = AsyncMock()
        repo.find_settings = AsyncMock(return_value=None)
        repo.list_first_party = AsyncMock(return_value=[_first_party("demo_page")])
        repo.list_third_party = AsyncMock(return_value=[])
        service = IntentScoringService(intent_repo=repo)

        result = await service.get_score("lead-1")

        assert result["total_score"] == 0
        repo.get_settings.assert_not_called()

    @pytest.mark.asyncio
    async def test_delete_missing_signal(self):
        repo = AsyncMock()
        repo.get_third_party = AsyncMock(return_value=None)
        service = IntentScoringService(intent_repo=repo)

        with pytest.raises(SignalNotFoundError):
            await service.delete_signal(SignalSource.third_party, uuid.uuid4())
        repo.delete_signal.assert_not_called()
