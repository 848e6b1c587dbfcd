import uuid
from datetime import datetime, timedelta, timezone
from types import SimpleNamespace
from unittest.mock import AsyncMock

import pytest

from fitcheck.core.exceptions import EngagementTypeNotFoundError
from fitcheck.schemas.common import EngagementCategory, EngagementTemperature
from fitcheck.schemas.engagement import EngagementEventCreate
from fitcheck.services.engagement_scoring import (
    EngagementScoringService,
    calculate_category_breakdown,
    calculate_decay_multiplier,
    calculate_engagement_score,
    get_temperature,
    rank_engaged_leads,
)

NOW = datetime(2026, 6, 1, 12, 0, tzinfo=timezone.utc)


def _settings(decay=30, cold=20, warm=50, hot=80):
    return SimpleNamespace(
        decay_period_days=decay,
        cold_threshold=cold,
        warm_threshold=warm,
        hot_threshold=hot,
    )


def _event(points, days_ago=0, lead_id="lead-1", category="web"):
    return SimpleNamespace(
        id=uuid.uuid4(),
        lead_id=lead_id,
        engagement_type_id=uuid.uuid4(),
        engagement_type=SimpleNamespace(category=category),
        points_earned=points,
        metadata_={},
        occurred_at=NOW - timedelta(days=days_ago),
    )


class TestDecay:
    """Exponential half-life decay of event points."""

    def test_no_decay_for_fresh_event(self):
        assert calculate_decay_multiplier(NOW, 30, NOW) == pytest.approx(1.0)

    def test_half_after_one_period(self):
        multiplier = calculate_decay_multiplier(NOW - timedelta(days=30), 30, NOW)
        assert multiplier == pytest.approx(0.5)

    def test_naive_timestamps_are_treated_as_utc(self):
        naive = (NOW - timedelta(days=60)).replace(tzinfo=None)
        assert calculate_decay_multiplier(naive, 30, NOW) == pytest.approx(0.25)


class TestEngagementScore:
    def test_fresh_events_keep_full_value(self):
        events = [_event(25), _event(15)]
        result = calculate_engagement_score(events, _settings(), NOW)
        assert result["raw_score"] == 40
        assert result["decayed_score"] == 40
        assert result["event_count"] == 2

    def test_decayed_score_halves_after_half_life(self):
        events = [_event(40, days_ago=30), _event(20, days_ago=30)]
        result = calculate_engagement_score(events, _settings(), NOW)
        assert result["raw_score"] == 60
        assert result["decayed_score"] == 30

    def test_half_point_rounds_up(self):
        result = calculate_engagement_score([_event(5, days_ago=30)], _settings(), NOW)
        assert result["decayed_score"] == 3
        breakdown = calculate_category_breakdown([_event(5, days_ago=30)], _settings(), NOW)
        assert breakdown[EngagementCategory.web]["decayed_points"] == 3

    def test_last_activity_is_newest_event(self):
        newest = _event(5, days_ago=1)
        result = calculate_engagement_score([newest, _event(5, days_ago=9)], _settings(), NOW)
        assert result["last_activity"] == newest.occurred_at

    def test_no_events(self):
        result = calculate_engagement_score([], _settings(), NOW)
        assert result["decayed_score"] == 0
        assert result["temperature"] == EngagementTemperature.cold
        assert result["last_activity"] is None


class TestTemperature:
    """Hot is checked before warm, whatever the thresholds."""

    def test_standard_thresholds(self):
        settings_row = _settings()
        assert get_temperature(85, settings_row) == EngagementTemperature.hot
        assert get_temperature(50, settings_row) == EngagementTemperature.warm
        assert get_temperature(49, settings_row) == EngagementTemperature.cold

    def test_hot_checked_first_when_thresholds_overlap(self):
        """warm above hot: a score clearing hot is hot even if it also clears warm."""
        settings_row = _settings(warm=90, hot=60)
        assert get_temperature(95, settings_row) == EngagementTemperature.hot
        assert get_temperature(70, settings_row) == EngagementTemperature.hot


class TestBreakdownAndRanking:
    def test_breakdown_groups_by_category(self):
        events = [
            _event(10, category="email"),
            _event(4, days_ago=30, category="email"),
            _event(25, category="web"),
        ]
        breakdown = calculate_category_breakdown(events, _settings(), NOW)
        assert breakdown[EngagementCategory.email] == {
            "count": 2,
            "points": 14,
            "decayed_points": 12,
        }
        assert breakdown[EngagementCategory.web]["points"] == 25
        assert breakdown[EngagementCategory.social]["count"] == 0

    def test_rank_orders_by_decayed_score(self):
        events = [
            _event(10, lead_id="a"),
            _event(50, lead_id="b", days_ago=60),
            _event(30, lead_id="c"),
        ]
        ranked = rank_engaged_leads(events, _settings(), limit=2, now=NOW)
        assert [lead["lead_id"] for lead in ranked] == ["c", "b"]


def _mock_engagement_repo(engagement_type=None):
    repo = AsyncMock()
    repo.get_type = AsyncMock(return_value=engagement_type)
    repo.add_event = AsyncMock(side_effect=lambda **kwargs: SimpleNamespace(**kwargs))
    return repo


class TestEngagementService:
    @pytest.mark.asyncio
    async def test_log_event_defaults_to_current_points(self):
        engagement_type = SimpleNamespace(
            id=uuid.uuid4(), name="Demo Request", current_points=40
        )
        repo = _mock_engagement_repo(engagement_type)
        service = EngagementScoringService(engagement_repo=repo)

        event = await service.log_event(
            EngagementEventCreate(lead_id="lead-1", engagement_type_id=engagement_type.id)
        )

        assert event.points_earned == 40
        repo.commit.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_log_event_explicit_points(self):
        engagement_type = SimpleNamespace(id=uuid.uuid4(), name="Site Visit", current_points=2)
        service = EngagementScoringService(engagement_repo=_mock_engagement_repo(engagement_type))

        event = await service.log_event(
            EngagementEventCreate(
                lead_id="lead-1", engagement_type_id=engagement_type.id, points_earned=7
            )
        )

        assert event.points_earned == 7

    @pytest.mark.asyncio
    async def test_log_event_unknown_type(self):
        service = EngagementScoringService(engagement_repo=_mock_engagement_repo(None))
        with pytest.raises(EngagementTypeNotFoundError):
            await service.log_event(
                EngagementEventCreate(lead_id="lead-1", engagement_type_id=uuid.uuid4())
            )

    @pytest.mark.asyncio
    async def test_seed_defaults_commits_and_lists(self):
        repo = _mock_engagement_repo()
        repo.list_types = AsyncMock(return_value=["seeded"])
        service = EngagementScoringService(engagement_repo=repo)

        assert await service.seed_defaults() == ["seeded"]
        repo.seed_types_if_empty.assert_awaited_once()
        repo.commit.assert_awaited_once()
