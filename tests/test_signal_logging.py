from types import SimpleNamespace
from unittest.mock import AsyncMock

import pytest

from fitcheck.core.exceptions import InvalidSignalError
from fitcheck.services.signal_logging import SignalLoggingService, validate_signal


def _mock_intent_repo(existing=None):
    repo = AsyncMock()
    repo.find_latest_first_party = AsyncMock(return_value=existing)
    repo.add_first_party = AsyncMock(
        side_effect=lambda **row: SimpleNamespace(id="new-id", **row)
    )
    repo.add_first_party_many = AsyncMock(
        side_effect=lambda rows: [SimpleNamespace(id=f"id-{i}", **row) for i, row in enumerate(rows)]
    )

    async def _update(signal, **fields):
        for key, value in fields.items():
            setattr(signal, key, value)
        return signal

    repo.update_first_party = AsyncMock(side_effect=_update)
    return repo


class TestValidateSignal:
    def test_valid_signal(self):
        assert validate_signal({"lead_id": "lead-1", "signal_type": "pricing_page"}) == []

    def test_collects_every_problem(self):
        errors = validate_signal(
            {"signal_type": "billboard", "visit_count": 0, "observed_at": "yesterday"}
        )
        assert "lead_id is required and must be a string" in errors
        assert errors[1].startswith("Invalid signal_type. Must be one of: pricing_page")
        assert "visit_count must be a positive number" in errors
        assert "observed_at must be a valid ISO date string" in errors

    def test_missing_signal_type(self):
        errors = validate_signal({"lead_id": "lead-1"})
        assert errors == ["signal_type is required"]

    def test_iso_timestamp_with_z_suffix(self):
        signal = {
            "lead_id": "lead-1",
            "signal_type": "demo_page",
            "observed_at": "2026-05-01T10:00:00Z",
        }
        assert validate_signal(signal) == []


class TestLogSignal:
    """Single-signal ingest: create, or bump an existing visit."""

    @pytest.mark.asyncio
    async def test_creates_new_signal(self):
        repo = _mock_intent_repo()
        service = SignalLoggingService(intent_repo=repo)

        row, action = await service.log_signal(
            {"lead_id": "lead-1", "signal_type": "pricing_page", "page_url": "/pricing"}
        )

        assert action == "created"
        assert row.visit_count == 1
        repo.commit.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_repeat_visit_increments_existing(self):
        existing = SimpleNamespace(id="sig-1", visit_count=2, observed_at=None, metadata_={})
        repo = _mock_intent_repo(existing)
        service = SignalLoggingService(intent_repo=repo)

        row, action = await service.log_signal(
            {"lead_id": "lead-1", "signal_type": "pricing_page", "page_url": "/pricing"}
        )

        assert action == "updated"
        assert row.visit_count == 3
        repo.add_first_party.assert_not_called()

    @pytest.mark.asyncio
    async def test_explicit_visit_count_always_inserts(self):
        existing = SimpleNamespace(id="sig-1", visit_count=2, observed_at=None, metadata_={})
        repo = _mock_intent_repo(existing)
        service = SignalLoggingService(intent_repo=repo)

        row, action = await service.log_signal(
            {"lead_id": "lead-1", "signal_type": "pricing_page", "visit_count": 4}
        )

        assert action == "created"
        assert row.visit_count == 4

    @pytest.mark.asyncio
    async def test_invalid_signal_raises_with_errors(self):
        service = SignalLoggingService(intent_repo=_mock_intent_repo())
        with pytest.raises(InvalidSignalError) as exc_info:
            await service.log_signal({"signal_type": "pricing_page"})
        assert exc_info.value.detail == "Validation failed"
        assert exc_info.value.errors == ["lead_id is required and must be a string"]


class TestLogBatch:
    @pytest.mark.asyncio
    async def test_skips_invalid_entries(self):
        repo = _mock_intent_repo()
        service = SignalLoggingService(intent_repo=repo)

        result = await service.log_batch(
            [
                {"lead_id": "lead-1", "signal_type": "pricing_page"},
                {"lead_id": "lead-1", "signal_type": "nope"},
                {"lead_id": "lead-2", "signal_type": "email_click"},
            ]
        )

        assert result["logged"] == 2
        assert result["skipped"] == 1
        assert result["validation_errors"][0].startswith("Signal 1: Invalid signal_type")

    @pytest.mark.asyncio
    async def test_all_invalid_raises(self):
        service = SignalLoggingService(intent_repo=_mock_intent_repo())
        with pytest.raises(InvalidSignalError) as exc_info:
            await service.log_batch([{"signal_type": "pricing_page"}])
        assert exc_info.value.detail == "No valid signals"

    @pytest.mark.asyncio
    async def test_clean_batch_has_no_error_list(self):
        service = SignalLoggingService(intent_repo=_mock_intent_repo())
        result = await service.log_batch([{"lead_id": "lead-1", "signal_type": "demo_page"}])
        assert result["validation_errors"] is None
