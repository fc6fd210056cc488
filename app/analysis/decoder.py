from __future__ import annotations

from pydantic import ValidationError

from app.analysis.errors import ParseError
from app.schemas.cv import AnalysisPayload


def _first_error(exc: ValidationError) -> str:
    errors = exc.errors(include_url=False)
    if not errors:
        return str(exc)
    first = errors[0]
    location = ".".join(str(part) for part in first.get("loc", ())) or "body"
    return f"{location}: {first.get('msg', 'invalid value')}"


def decode_response(raw: str | bytes) -> AnalysisPayload:
    if raw is None or (isinstance(raw, (str, bytes)) and not raw.strip()):
        raise ParseError("empty payload")
    try:
        return AnalysisPayload.model_validate_json(raw)
    except ValidationError as exc:
        raise ParseError(_first_error(exc)) from exc
