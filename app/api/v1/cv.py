import logging

from fastapi import APIRouter, Header, HTTPException, Request, status

from app.ai.factory import get_ai_client
from app.ai.types import AIClient
from app.analysis.decoder import decode_response
from app.analysis.errors import EngineError, ParseError
from app.analysis.prompt import build_prompt
from app.analysis.sources import extract_sources
from app.core.rate_limit import rate_limit
from app.core.security import check_api_key
from app.schemas.cv import AnalysisResponse, AnalyzeRequest

logger = logging.getLogger(__name__)

router = APIRouter()


def _engine(request: Request) -> AIClient:
    engine = getattr(request.app.state, "ai_client", None)
    if engine is None:
        try:
            engine = get_ai_client()
        except (RuntimeError, ValueError) as exc:
            logger.warning("cv_analyze_engine_unconfigured: %s", exc)
            raise EngineError("Analysis engine is not configured.") from exc
        request.app.state.ai_client = engine
    return engine


@router.post("/cv/analyze", response_model=AnalysisResponse)
@rate_limit()
async def analyze_cv(
    request: Request,
    payload: AnalyzeRequest,
    x_api_key: str | None = Header(default=None, alias="X-API-Key"),
):
    check_api_key(x_api_key)
    prompt = payload.prompt or build_prompt(payload.cv_text, payload.additional_skills)
    try:
        result = await _engine(request).generate(prompt)
        decoded = decode_response(result.text)
    except EngineError as exc:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(exc)) from exc
    except ParseError as exc:
        logger.warning("cv_analyze_unparseable cv_len=%s: %s", len(payload.cv_text), exc)
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(exc)) from exc

    sources = extract_sources(result.grounding_chunks) or extract_sources(decoded.grounding_chunks)
    logger.info(
        "cv_analyze_done cv_len=%s skills_len=%s sources=%s",
        len(payload.cv_text),
        len(payload.additional_skills),
        len(sources),
    )
    return decoded.to_response(sources)
