from __future__ import annotations

import logging
import os
from typing import Optional

from openai import AsyncOpenAI, OpenAIError

from app.ai.types import EngineResult
from app.analysis.errors import EngineError

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = (
    "Return a single JSON object with keys updatedCV and insight. "
    "updatedCV has fullName, email, phone, location, summary, experiences "
    "(company, role, location, period, description[]), education (school, degree, year), "
    "skills[] and additionalSkills[]. insight has jobTitle, estimatedSalary and reasoning."
)


class OpenAIProvider:
    """JSON-mode engine without web grounding: results never carry sources."""

    def __init__(
        self,
        model: str,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        timeout_s: float = 55.0,
        temperature: float = 0.2,
    ):
        self._model = model
        self._temperature = temperature
        key = (api_key or os.getenv("OPENAI_API_KEY") or "").strip()
        if not key:
            raise RuntimeError("OPENAI_API_KEY is missing")

        # The client side allows one attempt per analysis, so the SDK must not retry either.
        self._client = AsyncOpenAI(
            api_key=key,
            base_url=(base_url or os.getenv("OPENAI_BASE_URL") or None),
            timeout=float(os.getenv("OPENAI_TIMEOUT_S", str(timeout_s))),
            max_retries=0,
        )

    async def generate(self, prompt: str) -> EngineResult:
        try:
            response = await self._client.chat.completions.create(
                model=self._model,
                messages=[
                    {"role": "system", "content": SYSTEM_PROMPT},
                    {"role": "user", "content": prompt},
                ],
                temperature=self._temperature,
                response_format={"type": "json_object"},
            )
        except OpenAIError as exc:
            logger.warning("openai_generate_failed model=%s prompt_len=%s: %s", self._model, len(prompt), exc)
            raise EngineError(f"Analysis engine request failed: {exc}") from exc

        content = response.choices[0].message.content if response.choices else ""
        if not content:
            raise EngineError("Analysis engine returned an empty response.", code="empty_response")
        return EngineResult(text=content)
