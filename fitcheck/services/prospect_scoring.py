import asyncio
import logging
import uuid
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from fitcheck.core.config import settings
from fitcheck.core.constants import TIER_DEFINITIONS
from fitcheck.core.exceptions import FitCheckError, InvalidRequestError
from fitcheck.schemas.common import OutreachTone, ScoreCategory, ScoringMode, Tier
from fitcheck.schemas.prospect import ICPCriteria
from fitcheck.services.ai_gateway import AIGatewayClient
from fitcheck.services.outreach import (
    OUTREACH_BLOCK_FORMAT,
    TONE_INSTRUCTIONS,
    outreach_from_ai,
)

logger = logging.getLogger(__name__)

UNKNOWN_COMPANY = "Unknown Company"
MISSING_REASONING = "Analysis not available"


def get_tier(score: float) -> Tier:
    for min_score, tier, _action, _description in TIER_DEFINITIONS:
        if score >= min_score:
            return tier
    return Tier.D


def get_tier_info(tier: Tier) -> Dict[str, Any]:
    for min_score, candidate, action, description in TIER_DEFINITIONS:
        if candidate == tier:
            return {
                "tier": tier,
                "min_score": min_score,
                "action": action,
                "description": description,
            }
    raise ValueError(f"Unknown tier {tier}")


def get_score_category(score: float) -> ScoreCategory:
    if score <= 40:
        return ScoreCategory.poor
    if score <= 70:
        return ScoreCategory.moderate
    return ScoreCategory.strong


def build_criteria_breakdown(
    criteria: List[ICPCriteria], criteria_scores: Any
) -> List[Dict[str, Any]]:
    """Join AI scores onto the criteria, clamping each score to its weight."""
    by_id: Dict[str, Dict[str, Any]] = {}
    if isinstance(criteria_scores, list):
        for entry in criteria_scores:
            if isinstance(entry, dict) and entry.get("criteriaId") is not None:
                by_id.setdefault(str(entry["criteriaId"]), entry)

    breakdown = []
    for criterion in criteria:
        entry = by_id.get(criterion.id, {})
        raw_score = entry.get("score")
        try:
            score = float(raw_score) if raw_score is not None else 0.0
        except (TypeError, ValueError):
            score = 0.0
        breakdown.append(
            {
                "criteria_id": criterion.id,
                "criteria_name": criterion.name,
                "score": min(score, criterion.weight),
                "max_score": criterion.weight,
                "weight": criterion.weight,
                "reasoning": entry.get("reasoning") or MISSING_REASONING,
            }
        )
    return breakdown


def _system_prompt(scoring_mode: ScoringMode, outreach_tone: OutreachTone) -> str:
    if scoring_mode == ScoringMode.advanced:
        outreach_instructions = f"""Also generate a FULL personalized cold outreach block (subject line, opening line, value hook, CTA).

{TONE_INSTRUCTIONS[outreach_tone]}"""
        outreach_format = f'"outreach": {OUTREACH_BLOCK_FORMAT}'
    else:
        outreach_instructions = (
            "Also generate a personalized cold outreach opening line based on the analysis."
        )
        outreach_format = '"openingLine": "personalized cold outreach opening line"'

    return f"""You are an ICP (Ideal Customer Profile) scoring expert for B2B sales. You analyze company information and score them against specific criteria.

You will receive company information and a list of scoring criteria with their weights. For each criterion, provide:
1. A score from 0 to the maximum weight (the weight is the max score for that criterion)
2. A brief reasoning (1 sentence) explaining the score

{outreach_instructions}

IMPORTANT: Extract the company name from the provided information. If not clear, use the first few words or "{UNKNOWN_COMPANY}".

Respond ONLY with valid JSON in this exact format:
{{
  "companyName": "extracted company name",
  "criteriaScores": [
    {{
      "criteriaId": "criterion id",
      "score": number (0 to weight),
      "reasoning": "brief explanation"
    }}
  ],
  {outreach_format}
}}"""


class ProspectScoringService:
    """Scores free-text company descriptions against ICP criteria."""

    def __init__(
        self,
        gateway: AIGatewayClient,
        batch_delay_seconds: Optional[float] = None,
    ) -> None:
        self._gateway = gateway
        self._batch_delay = (
            batch_delay_seconds
            if batch_delay_seconds is not None
            else settings.BATCH_SCORING_DELAY_SECONDS
        )

    async def score_prospect(
        self,
        company_info: str,
        criteria: List[ICPCriteria],
        scoring_mode: ScoringMode = ScoringMode.simple,
        outreach_tone: OutreachTone = OutreachTone.casual,
    ) -> Dict[str, Any]:
        if not company_info.strip() or not criteria:
            raise InvalidRequestError("Company info and criteria are required")

        criteria_lines = "\n".join(
            f"- {c.name} (ID: {c.id}, Max Score: {c.weight}): {c.description}"
            for c in criteria
        )
        user_prompt = f"""Analyze this company and score against the ICP criteria:

COMPANY INFORMATION:
{company_info}

SCORING CRITERIA (score each from 0 to its weight):
{criteria_lines}

Return the JSON response with scores for each criterion and the outreach content."""

        logger.info("Requesting ICP score (%s mode)", scoring_mode.value)
        parsed = await self._gateway.complete_json(
            _system_prompt(scoring_mode, outreach_tone), user_prompt, temperature=0.7
        )
        if not isinstance(parsed, dict):
            parsed = {}

        breakdown = build_criteria_breakdown(criteria, parsed.get("criteriaScores"))
        total_score = sum(item["score"] for item in breakdown)

        outreach_source = parsed.get("outreach")
        if not isinstance(outreach_source, dict):
            outreach_source = {"openingLine": parsed.get("openingLine")}

        logger.info("Scoring complete. Total score: %s", total_score)
        return {
            "company_name": parsed.get("companyName") or UNKNOWN_COMPANY,
            "total_score": total_score,
            "criteria_breakdown": breakdown,
            "outreach": outreach_from_ai(outreach_source),
            "scoring_mode": scoring_mode,
            "outreach_tone": outreach_tone,
        }

    async def build_prospect(
        self,
        company_info: str,
        criteria: List[ICPCriteria],
        scoring_mode: ScoringMode,
        outreach_tone: OutreachTone,
    ) -> Dict[str, Any]:
        """Score *company_info* and wrap the result as a workspace prospect."""
        result = await self.score_prospect(
            company_info, criteria, scoring_mode, outreach_tone
        )
        return {
            **result,
            "id": str(uuid.uuid4()),
            "company_description": company_info,
            "tier": get_tier(result["total_score"]),
            "score_category": get_score_category(result["total_score"]),
            "created_at": datetime.now(timezone.utc),
        }

    async def batch_score(
        self,
        companies: List[str],
        criteria: List[ICPCriteria],
        scoring_mode: ScoringMode = ScoringMode.simple,
        outreach_tone: OutreachTone = OutreachTone.casual,
    ) -> Dict[str, List[Dict[str, Any]]]:
        """Score companies one at a time with a fixed delay between calls.

        A failure is recorded and the loop moves on to the next company.
        """
        lines = [line.strip() for line in companies if line and line.strip()]
        scored: List[Dict[str, Any]] = []
        failed: List[Dict[str, str]] = []

        for index, company in enumerate(lines):
            try:
                scored.append(
                    await self.build_prospect(
                        company, criteria, scoring_mode, outreach_tone
                    )
                )
            except FitCheckError as exc:
                logger.warning("Batch scoring failed for %r: %s", company[:50], exc.detail)
                failed.append({"company": company, "error": exc.detail})

            if index < len(lines) - 1 and self._batch_delay > 0:
                await asyncio.sleep(self._batch_delay)

        logger.info("Batch scoring finished: %d scored, %d failed", len(scored), len(failed))
        return {"scored": scored, "failed": failed}
