from __future__ import annotations

import logging
import os
from typing import Any

import httpx
from google import genai
from google.genai import errors as genai_errors
from google.genai import types

from app.ai.types import EngineResult
from app.analysis.errors import EngineError

logger = logging.getLogger(__name__)

_STRING = {"type": types.Type.STRING}
_STRING_LIST = {"type": types.Type.ARRAY, "items": _STRING}

ANALYSIS_RESPONSE_SCHEMA: dict[str, Any] = {
    "type": types.Type.OBJECT,
    "properties": {
        "updatedCV": {
            "type": types.Type.OBJECT,
            "properties": {
                "fullName": _STRING,
                "email": _STRING,
                "phone": _STRING,
                "location": _STRING,
                "summary": _STRING,
                "experiences": {
                    "type": types.Type.ARRAY,
                    "items": {
                        "type": types.Type.OBJECT,
                        "properties": {
                            "company": _STRING,
                            "role": _STRING,
                            "location": _STRING,
                            "period": _STRING,
                            "description": _STRING_LIST,
                        },
                    },
                },
                "education": {
                    "type": types.Type.ARRAY,
                    "items": {
                        "type": types.Type.OBJECT,
                        "properties": {
                            "school": _STRING,
                            "degree": _STRING,
                            "year": _STRING,
                        },
                    },
                },
                "skills": _STRING_LIST,
                "additionalSkills": _STRING_LIST,
            },
            "required": ["fullName", "email", "experiences", "skills"],
        },
        "insight": {
            "type": types.Type.OBJECT,
            "properties": {
                "jobTitle": _STRING,
                "estimatedSalary": _STRING,
                "reasoning": _STRING,
            },
        },
    },
    "required": ["updatedCV", "insight"],
}


def _grounding_chunks(response: Any) -> list[Any]:
    candidates = getattr(response, "candidates", None) or []
    if not candidates:
        return []
    metadata = getattr(candidates[0], "grounding_metadata", None)
    return list(getattr(metadata, "grounding_chunks", None) or [])


class GeminiProvider:
    def __init__(self, model: str, api_key: str | None = None, use_search: bool = True):
        self._model = model
        self._use_search = use_search
        key = (api_key or os.getenv("GEMINI_API_KEY") or os.getenv("GOOGLE_API_KEY") or "").strip()
        if not key:
            raise RuntimeError("GEMINI_API_KEY (or GOOGLE_API_KEY) is missing")
        self._client = genai.Client(api_key=key)

    def _config(self) -> types.GenerateContentConfig:
        tools = [types.Tool(google_search=types.GoogleSearch())] if self._use_search else None
        return types.GenerateContentConfig(
            tools=tools,
            response_mime_type="application/json",
            response_schema=ANALYSIS_RESPONSE_SCHEMA,
        )

    async def generate(self, prompt: str) -> EngineResult:
        try:
            response = await self._client.aio.models.generate_content(
                model=self._model,
                contents=prompt,
                config=self._config(),
            )
        except (genai_errors.APIError, httpx.HTTPError) as exc:
            logger.warning("gemini_generate_failed model=%s prompt_len=%s: %s", self._model, len(prompt), exc)
            raise EngineError(f"Analysis engine request failed: {exc}") from exc

        text = response.text or ""
        if not text.strip():
            raise EngineError("Analysis engine returned an empty response.", code="empty_response")
        return EngineResult(text=text, grounding_chunks=_grounding_chunks(response))
