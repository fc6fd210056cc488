from __future__ import annotations


class AnalysisError(RuntimeError):
    def __init__(self, message: str, *, code: str = "analysis_failed"):
        super().__init__(message)
        self.code = code


class InvalidInputError(AnalysisError):
    def __init__(self, message: str):
        super().__init__(message, code="validation")


class AnalysisCancelled(AnalysisError):
    """The in-flight call was aborted by the caller's token or by the transport timeout."""

    def __init__(self, reason: str = "cancelled"):
        if reason == "timeout":
            message = "Analysis request timed out."
        else:
            message = "Analysis request was cancelled."
        super().__init__(message, code="timeout" if reason == "timeout" else "cancelled")
        self.reason = reason


class TransportError(AnalysisError):
    def __init__(self, message: str, *, status_code: int | None = None, status_text: str = ""):
        super().__init__(message, code="transport")
        self.status_code = status_code
        self.status_text = status_text


class ParseError(AnalysisError):
    def __init__(self, message: str):
        super().__init__(f"Failed to parse response: {message}", code="parse")


class EngineError(AnalysisError):
    def __init__(self, message: str, *, code: str = "engine_unavailable"):
        super().__init__(message, code=code)
