"""First-party signal ingestion for tracking pixels and webhooks.

Payloads arrive as loose JSON so that a batch can report every bad
entry instead of rejecting the whole request on the first one.
"""

import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from fitcheck.core.exceptions import InvalidSignalError
from fitcheck.repositories.intent_repository import IntentRepository
from fitcheck.schemas.common import FirstPartySignalType

logger = logging.getLogger(__name__)

_VALID_SIGNAL_TYPES = [t.value for t in FirstPartySignalType]


def _parse_observed_at(value: Any) -> Optional[datetime]:
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, str):
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    else:
        raise ValueError("observed_at must be a string")
    return parsed if parsed.tzinfo else parsed.replace(tzinfo=timezone.utc)


def validate_signal(signal: Dict[str, Any]) -> List[str]:
    """Return every validation problem with *signal* (empty when valid)."""
    errors: List[str] = []
    lead_id = signal.get("lead_id")
    if not lead_id or not isinstance(lead_id, str):
        errors.append("lead_id is required and must be a string")

    signal_type = signal.get("signal_type")
    if not signal_type:
        errors.append("signal_type is required")
    elif signal_type not in _VALID_SIGNAL_TYPES:
        errors.append(
            f"Invalid signal_type. Must be one of: {', '.join(_VALID_SIGNAL_TYPES)}"
        )

    visit_count = signal.get("visit_count")
    if visit_count is not None and (
        isinstance(visit_count, bool)
        or not isinstance(visit_count, (int, float))
        or visit_count < 1
    ):
        errors.append("visit_count must be a positive number")

    observed_at = signal.get("observed_at")
    if observed_at is not None:
        try:
            _parse_observed_at(observed_at)
        except ValueError:
            errors.append("observed_at must be a valid ISO date string")
    return errors


def _row_from_payload(signal: Dict[str, Any]) -> Dict[str, Any]:
    observed_at = signal.get("observed_at")
    return {
        "lead_id": signal["lead_id"],
        "signal_type": signal["signal_type"],
        "page_url": signal.get("page_url") or None,
        "visit_count": int(signal.get("visit_count") or 1),
        "metadata_": signal.get("metadata") or {},
        "observed_at": (
            _parse_observed_at(observed_at)
            if observed_at is not None
            else datetime.now(timezone.utc)
        ),
    }


class SignalLoggingService:
    def __init__(self, intent_repo: IntentRepository) -> None:
        self._repo = intent_repo

    async def log_signal(self, signal: Dict[str, Any]):
        """Log one signal, returning ``(signal_row, action)``.

        A repeat of the same lead/type/page without an explicit
        ``visit_count`` bumps the existing row instead of inserting.
        """
        errors = validate_signal(signal)
        if errors:
            raise InvalidSignalError("Validation failed", errors)

        row = _row_from_payload(signal)
        existing = await self._repo.find_latest_first_party(
            row["lead_id"], row["signal_type"], row["page_url"]
        )
        if existing is not None and not signal.get("visit_count"):
            updated = await self._repo.update_first_party(
                existing,
                visit_count=(existing.visit_count or 1) + 1,
                observed_at=row["observed_at"],
                metadata_=row["metadata_"],
            )
            await self._repo.commit()
            logger.info(
                "Updated signal %s, visit_count: %d", updated.id, updated.visit_count
            )
            return updated, "updated"

        created = await self._repo.add_first_party(**row)
        await self._repo.commit()
        logger.info("Created new signal %s", created.id)
        return created, "created"

    async def log_batch(self, signals: List[Dict[str, Any]]) -> Dict[str, Any]:
        """Insert every valid signal; invalid entries are skipped and reported."""
        validation_errors: List[str] = []
        valid: List[Dict[str, Any]] = []
        for index, signal in enumerate(signals):
            errors = validate_signal(signal)
            if errors:
                validation_errors.append(f"Signal {index}: {', '.join(errors)}")
            else:
                valid.append(signal)

        if not valid:
            raise InvalidSignalError("No valid signals", validation_errors)

        rows = await self._repo.add_first_party_many(
            [_row_from_payload(signal) for signal in valid]
        )
        await self._repo.commit()
        logger.info("Logged %d signals (%d skipped)", len(rows), len(validation_errors))
        return {
            "success": True,
            "logged": len(rows),
            "skipped": len(signals) - len(valid),
            "validation_errors": validation_errors or None,
            "signals": rows,
        }
