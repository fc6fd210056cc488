from .cancellation import CancellationToken, CompositeToken, TimeoutToken, any_of
from .decoder import decode_response
from .errors import (
    AnalysisCancelled,
    AnalysisError,
    EngineError,
    InvalidInputError,
    ParseError,
    TransportError,
)
from .lifecycle import RequestLifecycle
from .prompt import CV_ANALYSIS_PROMPT, build_prompt
from .service import CVAnalysisService, validate_request
from .sources import extract_sources
from .transport import ANALYSIS_TIMEOUT_MS, AnalysisTransport

__all__ = [
    "ANALYSIS_TIMEOUT_MS",
    "AnalysisCancelled",
    "AnalysisError",
    "AnalysisTransport",
    "CVAnalysisService",
    "CV_ANALYSIS_PROMPT",
    "CancellationToken",
    "CompositeToken",
    "EngineError",
    "InvalidInputError",
    "ParseError",
    "RequestLifecycle",
    "TimeoutToken",
    "TransportError",
    "any_of",
    "build_prompt",
    "decode_response",
    "extract_sources",
    "validate_request",
]
