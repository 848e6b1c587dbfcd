import logging
from typing import Any, Dict, List
from uuid import UUID

from fitcheck.core.constants import CAREER_PAGE_KEYWORDS
from fitcheck.core.exceptions import (
    ConfirmationRequiredError,
    DisqualificationNotFoundError,
    RuleNotFoundError,
)
from fitcheck.repositories.negative_repository import NegativeScoringRepository
from fitcheck.schemas.common import NegativeConditionType
from fitcheck.schemas.negative import (
    NegativeLeadData,
    NegativeRuleCreate,
    NegativeRuleUpdate,
)

logger = logging.getLogger(__name__)


def _is_triggered(rule, lead: NegativeLeadData) -> bool:
    ctype = rule.condition_type

    if ctype == NegativeConditionType.personal_email:
        if not lead.email:
            return False
        parts = lead.email.lower().split("@")
        domain = parts[1] if len(parts) > 1 else ""
        domains = [d.strip().lower() for d in (rule.condition_value or "").split(",")]
        return bool(domain) and domain in domains

    if ctype == NegativeConditionType.career_page_only:
        if not lead.pages_visited:
            return False
        return all(
            any(keyword in page.lower() for keyword in CAREER_PAGE_KEYWORDS)
            for page in lead.pages_visited
        )

    if ctype == NegativeConditionType.competitor:
        return lead.is_competitor
    if ctype == NegativeConditionType.spam_source:
        return lead.is_spam_source
    if ctype == NegativeConditionType.fake_data:
        return lead.has_fake_data

    # custom: no evaluator
    return False


def evaluate_negative_score(
    lead: NegativeLeadData, rules: List, settings_row
) -> Dict[str, Any]:
    """Sum the points of every enabled rule that fires for *lead*.

    A lead is disqualified only when ``auto_disqualify`` is on and the
    total is at or below the configured threshold.
    """
    triggered_rules: List[Dict[str, Any]] = []
    total_score = 0

    for rule in rules:
        if not rule.enabled or not _is_triggered(rule, lead):
            continue
        triggered_rules.append(
            {
                "rule_id": str(rule.id),
                "rule_name": rule.name,
                "points": rule.points,
                "reason": rule.reason_label,
            }
        )
        total_score += rule.points

    is_disqualified = bool(
        settings_row.auto_disqualify
        and total_score <= settings_row.disqualification_threshold
    )
    return {
        "total_score": total_score,
        "triggered_rules": triggered_rules,
        "is_disqualified": is_disqualified,
    }


class NegativeScoringService:
    """Negative rule management, evaluation and disqualification records."""

    def __init__(self, negative_repo: NegativeScoringRepository) -> None:
        self._repo = negative_repo

    async def get_settings(self):
        return await self._repo.get_settings()

    async def update_settings(self, **fields: Any):
        settings_row = await self._repo.update_settings(**fields)
        await self._repo.commit()
        return settings_row

    async def list_rules(self) -> List:
        return await self._repo.list_rules()

    async def seed_defaults(self) -> List:
        await self._repo.seed_rules_if_empty()
        await self._repo.commit()
        return await self._repo.list_rules()

    async def _get_rule(self, rule_id: UUID):
        rule = await self._repo.get_rule(rule_id)
        if rule is None:
            raise RuleNotFoundError(f"Negative scoring rule {rule_id} not found")
        return rule

    async def create_rule(self, payload: NegativeRuleCreate):
        rule = await self._repo.create_rule(**payload.model_dump())
        await self._repo.commit()
        return rule

    async def update_rule(self, rule_id: UUID, payload: NegativeRuleUpdate):
        rule = await self._get_rule(rule_id)
        rule = await self._repo.update_rule(rule, **payload.model_dump(exclude_unset=True))
        await self._repo.commit()
        return rule

    async def delete_rule(self, rule_id: UUID, confirm: bool = False) -> None:
        if not confirm:
            raise ConfirmationRequiredError("Deleting a negative rule requires confirm=true")
        rule = await self._get_rule(rule_id)
        await self._repo.delete_rule(rule)
        await self._repo.commit()
        logger.info("Deleted negative scoring rule %s", rule_id)

    async def evaluate(self, lead: NegativeLeadData) -> Dict[str, Any]:
        """Score *lead* and persist the outcome when it is disqualified."""
        settings_row = await self._repo.get_settings()
        rules = await self._repo.list_rules()
        result = evaluate_negative_score(lead, rules, settings_row)
        result["lead_id"] = lead.lead_id
        result["persisted"] = False

        if result["is_disqualified"]:
            await self._repo.upsert_disqualification(
                lead_id=lead.lead_id,
                total_negative_score=result["total_score"],
                triggered_rules=result["triggered_rules"],
            )
            await self._repo.commit()
            result["persisted"] = True
            logger.info(
                "Lead %s disqualified with score %d", lead.lead_id, result["total_score"]
            )
        return result

    async def list_disqualified(self) -> List:
        return await self._repo.list_disqualified()

    async def get_disqualification(self, lead_id: str):
        record = await self._repo.get_disqualification(lead_id)
        if record is None:
            raise DisqualificationNotFoundError(f"Lead {lead_id} is not disqualified")
        return record

    async def override(
        self,
        lead_id: str,
        reason: str,
        overridden_by: str = "user",
        confirm: bool = False,
    ):
        """Suppress a disqualification while keeping its audit record."""
        if not confirm:
            raise ConfirmationRequiredError(
                "Overriding a disqualification requires confirm=true"
            )
        record = await self.get_disqualification(lead_id)
        record = await self._repo.override(record, reason, overridden_by)
        await self._repo.commit()
        logger.info("Disqualification of lead %s overridden by %s", lead_id, overridden_by)
        return record

    async def remove(self, lead_id: str, confirm: bool = False) -> None:
        if not confirm:
            raise ConfirmationRequiredError(
                "Removing a disqualification requires confirm=true"
            )
        record = await self.get_disqualification(lead_id)
        await self._repo.delete_disqualification(record)
        await self._repo.commit()
        logger.info("Disqualification of lead %s removed", lead_id)
