import logging
from typing import Any, Dict

from fitcheck.core.constants import DEFAULT_OPENING_LINE
from fitcheck.schemas.common import OutreachTone
from fitcheck.services.ai_gateway import AIGatewayClient

logger = logging.getLogger(__name__)

TONE_INSTRUCTIONS = {
    OutreachTone.casual: """Write in a CASUAL, friendly tone:
- Use conversational language like you're talking to a peer
- Keep it light and approachable
- Use contractions (you're, we're, let's)
- Can include light humor or personality
- Example: "Hey! Noticed you're scaling fast...\"""",
    OutreachTone.formal: """Write in a FORMAL, professional tone:
- Use polished, enterprise-appropriate language
- Maintain professional distance while being warm
- Avoid slang or overly casual expressions
- Structure sentences properly with no contractions
- Example: "I hope this message finds you well. I was impressed to learn...\"""",
    OutreachTone.challenger: """Write in a CHALLENGER, provocative tone:
- Be bold and pattern-interrupt with unexpected statements
- Challenge assumptions or conventional thinking
- Create urgency with insight-led statements
- Use confident, direct language
- Example: "Most companies in your space are leaving money on the table by...\"""",
}

OUTREACH_BLOCK_FORMAT = """{
  "subjectLine": "compelling subject line",
  "openingLine": "personalized opening hook",
  "valueHook": "1-2 sentence value proposition",
  "cta": "specific call to action"
}"""


def outreach_from_ai(parsed: Dict[str, Any]) -> Dict[str, Any]:
    """Map the model's camelCase outreach fields onto ``OutreachBlock`` keys."""
    return {
        "subject_line": parsed.get("subjectLine"),
        "opening_line": parsed.get("openingLine") or DEFAULT_OPENING_LINE,
        "value_hook": parsed.get("valueHook"),
        "cta": parsed.get("cta"),
    }


class OutreachService:
    """Regenerates a full outreach block in a chosen tone."""

    def __init__(self, gateway: AIGatewayClient) -> None:
        self._gateway = gateway

    async def regenerate(
        self, company_name: str, company_description: str, tone: OutreachTone
    ) -> Dict[str, Any]:
        system_prompt = f"""You are an expert cold email copywriter for B2B sales. You will generate a personalized outreach block for a specific company.

Generate a FULL personalized cold outreach block with:
1. Subject line (compelling, under 50 chars, creates curiosity)
2. Opening line (personalized hook based on company intel)
3. Value hook (1-2 sentences connecting their situation to your value)
4. CTA (specific, low-friction next step)

{TONE_INSTRUCTIONS[tone]}

Respond ONLY with valid JSON in this exact format:
{OUTREACH_BLOCK_FORMAT}"""

        user_prompt = f"""Generate a {tone.value} outreach block for this company:

COMPANY: {company_name}
DETAILS: {company_description}

Return the JSON response with the outreach block."""

        logger.info("Regenerating outreach for %s with %s tone", company_name, tone.value)
        parsed = await self._gateway.complete_json(system_prompt, user_prompt, temperature=0.8)
        if not isinstance(parsed, dict):
            parsed = {}
        return {"success": True, "outreach": outreach_from_ai(parsed), "tone": tone}
