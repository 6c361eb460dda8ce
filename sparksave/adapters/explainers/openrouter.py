"""
OpenRouter Explanation Adapter - HTTP client for an OpenAI-compatible chat API.
"""

import asyncio
import json
import logging

import httpx
from pydantic import BaseModel, Field, PrivateAttr

from sparksave.core.domain.errors import ExplanationServiceError
from sparksave.core.ports.explanation_service import (
    ExplanationRequest,
    ExplanationService,
    describe_request,
)

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = (
    "You are an energy plan recommendation expert. Generate clear, personalized "
    "explanations for energy plan recommendations. Return only valid JSON."
)

PROMPT_INSTRUCTIONS = """Instructions:
1. Generate a clear, personalized explanation for each plan
2. Explain why this plan is recommended based on usage patterns and preferences
3. Mention specific savings amounts and percentages
4. Address any risk flags in a balanced way
5. Keep explanations concise (2-3 sentences each)
6. Return valid JSON only

Return format:
{
  "recommendations": [
    {"planId": "string", "rank": 1, "explanation": "string"}
  ]
}"""


class RetryPolicy(BaseModel):
    """Attempts and linear backoff for calls to the explanation API."""

    max_attempts: int = Field(default=2, ge=1)
    backoff_seconds: float = Field(default=1.0, ge=0)

    def delay_for(self, attempt: int) -> float:
        """Delay after a failed attempt (1-based)."""
        return self.backoff_seconds * attempt


def build_prompt(request: ExplanationRequest) -> str:
    """User prompt listing the usage, preferences and ranked plan facts."""
    facts = describe_request(request)
    stats = request.usage_stats
    lines = [
        f"Generate personalized explanations for these top {len(request.plans)} energy plan recommendations:",
        "",
        "User Usage Data:",
        f"- Annual Usage: {request.annual_kwh:.0f} kWh",
        f"- Current Annual Cost: ${request.current_annual_cost:.2f}",
        f"- Average Monthly Usage: {stats.average_monthly_kwh:.0f} kWh",
        f"- Peak Month: {stats.peak_month or 'unknown'} ({stats.peak_month_kwh:.0f} kWh)",
        "",
        "User Preferences:",
        json.dumps(facts["preferences"], indent=2),
        "",
        "Top Plans (already scored and ranked):",
        json.dumps(facts["plans"], indent=2),
        "",
        "Usage Patterns:",
        json.dumps(facts["usagePatterns"], indent=2),
        "",
        "Previous Recommendations:",
        json.dumps(facts["recentHistory"], indent=2),
        "",
        PROMPT_INSTRUCTIONS,
    ]
    return "\n".join(lines)


def parse_explanations(data: dict) -> dict[str, str]:
    """
    Extract plan_id -> explanation from a chat completion response body.

    Raises:
        ExplanationServiceError: if the body or its JSON content is malformed
    """
    try:
        content = data["choices"][0]["message"]["content"] or "{}"
        parsed = json.loads(content)
    except (KeyError, IndexError, TypeError, json.JSONDecodeError) as e:
        raise ExplanationServiceError(f"Malformed explanation response: {e}") from e

    if not isinstance(parsed, dict):
        raise ExplanationServiceError("Explanation response is not a JSON object")

    explanations = {}
    for item in parsed.get("recommendations") or []:
        if not isinstance(item, dict):
            continue
        plan_id = item.get("planId")
        text = item.get("explanation")
        if isinstance(plan_id, str) and isinstance(text, str) and text.strip():
            explanations[plan_id] = text.strip()
    return explanations


class OpenRouterExplanationService(ExplanationService):
    """
    Explanation service backed by OpenRouter (or any OpenAI-compatible API).
    Configured via Pydantic model fields.
    """
    api_key: str
    base_url: str = "https://openrouter.ai/api/v1"
    model: str = "openai/gpt-4-turbo"
    temperature: float = 0.3
    timeout: float = 30.0
    referer: str = "https://sparksave.app"
    retry: RetryPolicy = Field(default_factory=RetryPolicy)

    _client: httpx.AsyncClient | None = PrivateAttr(default=None)

    def model_post_init(self, __context):
        self.base_url = self.base_url.rstrip("/")

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create the HTTP client."""
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=self.timeout,
                headers={
                    "Authorization": f"Bearer {self.api_key}",
                    "HTTP-Referer": self.referer,
                },
            )
        return self._client

    async def explain(self, request: ExplanationRequest) -> dict[str, str]:
        """Call the chat completions endpoint, retrying transport and HTTP errors."""
        client = await self._get_client()

        payload = {
            "model": self.model,
            "messages": [
                {"role": "system", "content": SYSTEM_PROMPT},
                {"role": "user", "content": build_prompt(request)},
            ],
            "response_format": {"type": "json_object"},
            "temperature": self.temperature,
        }

        attempts = self.retry.max_attempts
        last_error: Exception | None = None
        for attempt in range(1, attempts + 1):
            try:
                response = await client.post(f"{self.base_url}/chat/completions", json=payload)
                response.raise_for_status()
                data = response.json()
            except (httpx.HTTPError, ValueError) as e:
                last_error = e
                logger.error(f"Explanation API call failed (attempt {attempt}/{attempts}): {e}")
                if attempt < attempts:
                    await asyncio.sleep(self.retry.delay_for(attempt))
                continue

            explanations = parse_explanations(data)
            logger.info(f"Received {len(explanations)} explanations from '{self.model}'")
            return explanations

        raise ExplanationServiceError(
            f"Explanation API failed after {attempts} attempts: {last_error}"
        ) from last_error

    async def health_check(self) -> bool:
        """Check that the models endpoint answers."""
        try:
            client = await self._get_client()
            response = await client.get(f"{self.base_url}/models")
            return response.status_code < 500
        except Exception:
            return False

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client:
            await self._client.aclose()
            self._client = None
