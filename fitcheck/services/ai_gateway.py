import json
import logging
import re
from typing import Any, Dict, Optional

import httpx

from fitcheck.core.config import settings
from fitcheck.core.exceptions import (
    AICreditsExhaustedError,
    AIGatewayError,
    AIRateLimitError,
)

logger = logging.getLogger(__name__)

_JSON_FENCE = re.compile(r"```json\s*([\s\S]*?)\s*```")
_ANY_FENCE = re.compile(r"```\s*([\s\S]*?)\s*```")


def extract_json(content: str) -> Any:
    """Parse JSON from a model reply, unwrapping markdown code fences."""
    match = _JSON_FENCE.search(content) or _ANY_FENCE.search(content)
    payload = match.group(1) if match else content
    try:
        return json.loads(payload.strip())
    except json.JSONDecodeError:
        logger.error("Failed to parse AI response: %s", content)
        raise AIGatewayError("Failed to parse AI response as JSON")


class AIGatewayClient:
    """Minimal client for an OpenAI-compatible chat-completions endpoint.

    Pass *http_client* to share a connection pool or to inject a mock
    transport; otherwise a short-lived client is created per call.
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        url: Optional[str] = None,
        model: Optional[str] = None,
        http_client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        self._api_key = api_key if api_key is not None else settings.AI_GATEWAY_API_KEY
        self._url = url or settings.AI_GATEWAY_URL
        self._model = model or settings.AI_MODEL
        self._http_client = http_client

    async def _post(self, body: Dict[str, Any]) -> httpx.Response:
        headers = {
            "Authorization": f"Bearer {self._api_key}",
            "Content-Type": "application/json",
        }
        if self._http_client is not None:
            return await self._http_client.post(self._url, json=body, headers=headers)
        async with httpx.AsyncClient(timeout=settings.HTTP_TIMEOUT_SECONDS) as client:
            return await client.post(self._url, json=body, headers=headers)

    async def complete(
        self, system_prompt: str, user_prompt: str, temperature: float = 0.7
    ) -> str:
        """Return the assistant message content for a single-turn chat."""
        if not self._api_key:
            raise AIGatewayError("AI_GATEWAY_API_KEY is not configured")

        body = {
            "model": self._model,
            "messages": [
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_prompt},
            ],
            "temperature": temperature,
        }
        try:
            response = await self._post(body)
        except httpx.TimeoutException:
            logger.error("AI gateway timed out: %s", self._url)
            raise AIGatewayError("AI gateway timed out")
        except httpx.HTTPError as exc:
            logger.error("AI gateway unreachable: %s (%s)", self._url, exc)
            raise AIGatewayError("AI gateway unavailable")

        if response.status_code == 429:
            raise AIRateLimitError()
        if response.status_code == 402:
            raise AICreditsExhaustedError()
        if response.is_error:
            logger.error(
                "AI gateway error: %s %s", response.status_code, response.text
            )
            raise AIGatewayError(f"AI Gateway error: {response.status_code}")

        try:
            content = response.json()["choices"][0]["message"]["content"]
        except (ValueError, KeyError, IndexError, TypeError):
            content = None
        if not content:
            raise AIGatewayError("No content in AI response")
        return content

    async def complete_json(
        self, system_prompt: str, user_prompt: str, temperature: float = 0.7
    ) -> Any:
        content = await self.complete(system_prompt, user_prompt, temperature)
        return extract_json(content)
