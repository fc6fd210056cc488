from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

CV_TEXT_MIN_CHARS = 50
CV_TEXT_MAX_CHARS = 10_000
ADDITIONAL_SKILLS_MAX_CHARS = 500


class _WireModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, frozen=True)


class AnalysisRequest(_WireModel):
    cv_text: str = Field(alias="cvText", min_length=CV_TEXT_MIN_CHARS, max_length=CV_TEXT_MAX_CHARS)
    additional_skills: str = Field(default="", alias="additionalSkills", max_length=ADDITIONAL_SKILLS_MAX_CHARS)

    @field_validator("additional_skills", mode="before")
    @classmethod
    def _none_as_empty(cls, value: Any) -> Any:
        return "" if value is None else value


class AnalyzeRequest(AnalysisRequest):
    """HTTP body of POST /v1/cv/analyze."""

    prompt: str = ""


class Experience(_WireModel):
    company: str = ""
    role: str = ""
    location: str | None = None
    period: str = ""
    description: list[str] = Field(default_factory=list)


class Education(_WireModel):
    school: str = ""
    degree: str = ""
    year: str = ""


class CVResume(_WireModel):
    full_name: str = Field(alias="fullName")
    email: str
    phone: str = ""
    location: str | None = None
    summary: str = ""
    experiences: list[Experience]
    education: list[Education] = Field(default_factory=list)
    skills: list[str]
    additional_skills: list[str] | None = Field(default=None, alias="additionalSkills")


class Source(_WireModel):
    title: str
    uri: str


class MarketInsight(_WireModel):
    job_title: str = Field(default="", alias="jobTitle")
    estimated_salary: str = Field(default="", alias="estimatedSalary")
    reasoning: str = ""
    sources: list[Source] = Field(default_factory=list)


class AnalysisResponse(_WireModel):
    updated_cv: CVResume = Field(alias="updatedCV")
    insight: MarketInsight


class AnalysisPayload(AnalysisResponse):
    # Citation records forwarded untouched from the engine; see app.analysis.sources.
    grounding_chunks: list[Any] = Field(default_factory=list, alias="groundingChunks")

    @field_validator("grounding_chunks", mode="before")
    @classmethod
    def _none_as_empty(cls, value: Any) -> Any:
        return [] if value is None else value

    def to_response(self, sources: list[Source] | None = None) -> AnalysisResponse:
        insight = self.insight
        if sources:
            insight = insight.model_copy(update={"sources": list(sources)})
        return AnalysisResponse(updated_cv=self.updated_cv, insight=insight)


RequestStatus = Literal["idle", "pending", "success", "error"]


class RequestState(BaseModel):
    model_config = ConfigDict(frozen=True)

    status: RequestStatus = "idle"
    result: AnalysisResponse | None = None
    error: str | None = None
    error_code: str | None = None
    request_id: int = 0
