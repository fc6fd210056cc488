from __future__ import annotations

import asyncio
import logging

from pydantic import ValidationError

from app.analysis.cancellation import CancellationToken
from app.analysis.decoder import decode_response
from app.analysis.errors import AnalysisCancelled, AnalysisError, InvalidInputError
from app.analysis.lifecycle import RequestLifecycle
from app.analysis.prompt import build_prompt
from app.analysis.sources import extract_sources
from app.analysis.transport import AnalysisTransport
from app.schemas.cv import AnalysisRequest, AnalysisResponse

logger = logging.getLogger(__name__)


def validate_request(cv_text: str, additional_skills: str | None = "") -> AnalysisRequest:
    try:
        return AnalysisRequest(cv_text=cv_text, additional_skills=additional_skills)
    except ValidationError as exc:
        first = exc.errors(include_url=False)[0]
        field = ".".join(str(part) for part in first.get("loc", ())) or "input"
        raise InvalidInputError(f"{field}: {first.get('msg', 'invalid value')}") from exc


class CVAnalysisService:
    """Runs one analysis end to end and records the outcome on the lifecycle."""

    def __init__(self, transport: AnalysisTransport, lifecycle: RequestLifecycle | None = None):
        self.transport = transport
        self.lifecycle = lifecycle or RequestLifecycle()

    async def analyze(
        self,
        cv_text: str,
        additional_skills: str | None = "",
        token: CancellationToken | None = None,
    ) -> AnalysisResponse:
        request = validate_request(cv_text, additional_skills)
        request_id = self.lifecycle.begin()
        try:
            prompt = build_prompt(request.cv_text, request.additional_skills)
            raw = await self.transport.send(
                prompt,
                cv_text=request.cv_text,
                additional_skills=request.additional_skills,
                token=token,
            )
            payload = decode_response(raw)
            response = payload.to_response(extract_sources(payload.grounding_chunks))
        except AnalysisError as exc:
            logger.info("cv_analysis_failed request_id=%s code=%s", request_id, exc.code)
            self.lifecycle.fail(str(exc), request_id, code=exc.code)
            raise
        except asyncio.CancelledError:
            self.lifecycle.fail(str(AnalysisCancelled()), request_id, code="cancelled")
            raise
        except Exception as exc:
            logger.warning("cv_analysis_crashed request_id=%s: %r", request_id, exc)
            self.lifecycle.fail(str(exc) or "Analysis failed.", request_id, code="analysis_failed")
            raise

        self.lifecycle.resolve(response, request_id)
        logger.info(
            "cv_analysis_succeeded request_id=%s experiences=%s sources=%s",
            request_id,
            len(response.updated_cv.experiences),
            len(response.insight.sources),
        )
        return response
