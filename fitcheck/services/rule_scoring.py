import logging
from typing import Any, Dict, List, Optional
from uuid import UUID

from fitcheck.core.constants import PERSONAL_EMAIL_DOMAINS
from fitcheck.core.exceptions import ConfirmationRequiredError, RuleNotFoundError
from fitcheck.repositories.scoring_rule_repository import ScoringRuleRepository
from fitcheck.schemas.common import ConditionType
from fitcheck.schemas.scoring_rules import (
    BehavioralSignals,
    EnrichedFirmographics,
    LeadProfile,
    ScoringRuleCreate,
    ScoringRuleUpdate,
)

logger = logging.getLogger(__name__)


def _candidate_values(condition_value: Optional[str]) -> List[str]:
    return [v.strip().lower() for v in (condition_value or "").split(",") if v.strip()]


def _email_domain(email: Optional[str]) -> str:
    parts = (email or "").lower().split("@")
    return parts[1] if len(parts) > 1 else ""


def evaluate_rule(rule, lead: LeadProfile) -> Dict[str, Any]:
    """Evaluate one rule against *lead* and explain the outcome.

    Returns ``{"rule", "matched", "reason"}``.  Missing lead fields are
    treated as empty strings or ``False`` and simply fail to match.
    """
    values = _candidate_values(rule.condition_value)
    enriched = lead.enriched_data or EnrichedFirmographics()
    signals = lead.behavioral_signals or BehavioralSignals()
    ctype = rule.condition_type

    if ctype == ConditionType.job_title_contains:
        job_title = (lead.job_title or "").lower()
        matched = any(v in job_title for v in values)
        reason = (
            f'Job title "{lead.job_title}" matches criteria'
            if matched
            else f"Job title doesn't match any of: {', '.join(values)}"
        )

    elif ctype == ConditionType.email_domain_personal:
        domain = _email_domain(lead.email)
        matched = any(domain == v or domain.endswith(f".{v}") for v in values)
        reason = (
            f"Email uses personal domain: {domain}"
            if matched
            else "Email uses business domain"
        )

    elif ctype == ConditionType.email_domain_business:
        domain = _email_domain(lead.email)
        matched = bool(domain) and domain not in PERSONAL_EMAIL_DOMAINS
        reason = (
            f"Email uses business domain: {domain}"
            if matched
            else "Email uses personal domain"
        )

    elif ctype == ConditionType.company_size_range:
        company_size = enriched.company_size or ""
        matched = any(v in company_size.lower() for v in values)
        reason = (
            f'Company size "{company_size}" matches criteria'
            if matched
            else "Company size doesn't match"
        )

    elif ctype == ConditionType.industry_matches:
        industry = (enriched.industry or "").lower()
        matched = any(v in industry for v in values)
        reason = (
            f'Industry "{enriched.industry}" matches criteria'
            if matched
            else "Industry doesn't match"
        )

    elif ctype == ConditionType.visited_pricing_page:
        visits = signals.pricing_page_visits or 0
        if (rule.condition_value or "").lower() == "multiple":
            matched = visits > 1
        else:
            matched = bool(signals.visited_pricing_page)
        if not matched:
            reason = "Has not visited pricing page"
        elif visits > 1:
            reason = "Visited pricing page multiple times"
        else:
            reason = "Visited pricing page"

    elif ctype == ConditionType.visited_product_page:
        matched = bool(signals.visited_product_page)
        reason = "Visited product page" if matched else "Has not visited product page"

    elif ctype == ConditionType.blog_only_engagement:
        matched = bool(signals.blog_engagement_only)
        reason = (
            "Only engaged with blog content"
            if matched
            else "Engaged with product content"
        )

    elif ctype == ConditionType.funding_stage:
        funding_stage = (enriched.funding_stage or "").lower()
        matched = any(v in funding_stage for v in values)
        reason = (
            f'Funding stage "{enriched.funding_stage}" matches'
            if matched
            else "Funding stage doesn't match"
        )

    elif ctype == ConditionType.region_matches:
        region = (enriched.region or "").lower()
        matched = any(v in region for v in values)
        reason = (
            f'Region "{enriched.region}" matches' if matched else "Region doesn't match"
        )

    else:
        # custom conditions have no evaluator
        matched = False
        reason = "Custom rule - requires manual evaluation"

    return {"rule": rule, "matched": matched, "reason": reason}


def evaluate_lead_against_rules(
    lead: LeadProfile, rules: List, qualification_threshold: int
) -> Dict[str, Any]:
    """Score *lead* against every enabled rule.

    Disabled rules are skipped entirely.  ``matched_rules`` holds one
    entry per enabled rule, matched or not, in input order.
    """
    matched_rules: List[Dict[str, Any]] = []
    total_points = 0

    for rule in rules:
        if not rule.enabled:
            continue
        match = evaluate_rule(rule, lead)
        match["points_label"] = format_points(rule.points)
        matched_rules.append(match)
        if match["matched"]:
            total_points += rule.points

    return {
        "total_points": total_points,
        "matched_rules": matched_rules,
        "is_qualified": total_points >= qualification_threshold,
        "qualification_threshold": qualification_threshold,
    }


def format_points(points: int) -> str:
    return f"+{points}" if points >= 0 else f"{points}"


def get_qualification_label(is_qualified: bool) -> str:
    return "Sales Qualified" if is_qualified else "Marketing Qualified"


class RuleScoringService:
    """Rule CRUD, ordering, settings and lead evaluation."""

    def __init__(self, rule_repo: ScoringRuleRepository) -> None:
        self._rule_repo = rule_repo

    async def list_rules(self) -> List:
        return await self._rule_repo.list_rules()

    async def _get_rule(self, rule_id: UUID):
        rule = await self._rule_repo.get_by_id(rule_id)
        if rule is None:
            raise RuleNotFoundError(f"Scoring rule {rule_id} not found")
        return rule

    async def create_rule(self, payload: ScoringRuleCreate):
        rule = await self._rule_repo.create(**payload.model_dump())
        await self._rule_repo.commit()
        logger.info("Created scoring rule %s (%s)", rule.id, rule.name)
        return rule

    async def update_rule(self, rule_id: UUID, payload: ScoringRuleUpdate):
        rule = await self._get_rule(rule_id)
        rule = await self._rule_repo.update(rule, **payload.model_dump(exclude_unset=True))
        await self._rule_repo.commit()
        return rule

    async def toggle_rule(self, rule_id: UUID, enabled: bool):
        rule = await self._get_rule(rule_id)
        rule = await self._rule_repo.update(rule, enabled=enabled)
        await self._rule_repo.commit()
        return rule

    async def delete_rule(self, rule_id: UUID, confirm: bool = False) -> None:
        if not confirm:
            raise ConfirmationRequiredError("Deleting a scoring rule requires confirm=true")
        rule = await self._get_rule(rule_id)
        await self._rule_repo.delete(rule)
        await self._rule_repo.commit()
        logger.info("Deleted scoring rule %s", rule_id)

    async def reorder_rules(self, rule_ids: List[UUID]) -> List:
        await self._rule_repo.reorder(rule_ids)
        await self._rule_repo.commit()
        return await self._rule_repo.list_rules()

    async def seed_defaults(self) -> None:
        await self._rule_repo.seed_if_empty()
        await self._rule_repo.commit()

    async def get_settings(self):
        return await self._rule_repo.get_settings()

    async def update_settings(self, **fields: Any):
        settings_row = await self._rule_repo.update_settings(**fields)
        await self._rule_repo.commit()
        return settings_row

    async def evaluate(self, lead: LeadProfile) -> Dict[str, Any]:
        """Evaluate *lead* against the stored rules and threshold."""
        rules = await self._rule_repo.list_rules()
        settings_row = await self._rule_repo.get_settings()
        result = evaluate_lead_against_rules(
            lead, rules, settings_row.qualification_threshold
        )
        result["qualification_label"] = get_qualification_label(result["is_qualified"])
        logger.info(
            "Rule evaluation: %d points from %d rules (qualified=%s)",
            result["total_points"],
            len(result["matched_rules"]),
            result["is_qualified"],
        )
        return result
