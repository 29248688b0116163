from __future__ import annotations

import math
from datetime import datetime
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

InputMode = Literal["paste", "url"]
SourceStrategy = Literal["paste", "reader_mode", "selector_fallback", "blocked"]
DuplicateReason = Literal["URL_MATCH", "FIELDS_MATCH"]


class IngestionInput(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    url: str | None = None
    pasted_text: str | None = Field(default=None, alias="pastedText")
    page_title: str | None = Field(default=None, alias="pageTitle")


class ResolvedInput(BaseModel):
    mode: InputMode
    url: str | None = None
    text: str | None = None
    page_title: str | None = None


class FetchResult(BaseModel):
    url: str
    html: str
    http_status: int
    content_type: str = ""


class ExtractionResult(BaseModel):
    source_strategy: SourceStrategy
    text: str
    title_guess: str | None = None
    url: str | None = None
    blocked: bool = False

    def to_payload(self) -> dict[str, Any]:
        return {
            "ok": True,
            "url": self.url,
            "titleGuess": self.title_guess,
            "extractedText": self.text,
            "sourceStrategy": self.source_strategy,
        }


class FieldConfidence(BaseModel):
    model_config = ConfigDict(extra="forbid")

    company: float
    title: float
    location: float
    salary: float

    @field_validator("company", "title", "location", "salary")
    @classmethod
    def validate_confidence(cls, value: float) -> float:
        if not math.isfinite(value) or value < 0 or value > 1:
            raise ValueError("confidence must be between 0 and 1")
        return value


class ParsedJobFields(BaseModel):
    """Closed record returned by the structured parser.

    Every key is required and nullable; unknown keys are rejected so callers
    always see the same shape.
    """

    model_config = ConfigDict(extra="forbid")

    company: str | None
    title: str | None
    location: str | None
    job_type: str | None = Field(alias="jobType")
    work_mode: str | None = Field(alias="workMode")
    salary_min: float | None = Field(alias="salaryMin")
    salary_max: float | None = Field(alias="salaryMax")
    salary_currency: str | None = Field(alias="salaryCurrency")
    salary_period: str | None = Field(alias="salaryPeriod")
    seniority: str | None
    description_summary: str | None = Field(alias="descriptionSummary")
    key_requirements: list[str] = Field(alias="keyRequirements")
    key_responsibilities: list[str] = Field(alias="keyResponsibilities")
    confidence: FieldConfidence

    @field_validator("salary_min", "salary_max")
    @classmethod
    def validate_salary(cls, value: float | None) -> float | None:
        if value is not None and not math.isfinite(value):
            raise ValueError("salary must be a finite number")
        return value

    def to_payload(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True)


class InboxItem(BaseModel):
    token: str
    received_at: datetime
    expires_at: datetime
    url: str | None = None
    page_title: str | None = None
    extracted_text: str

    def to_payload(self) -> dict[str, Any]:
        return {
            "token": self.token,
            "receivedAt": self.received_at.isoformat(),
            "url": self.url,
            "pageTitle": self.page_title,
            "extractedText": self.extracted_text,
        }


class ModelResponse(BaseModel):
    content: str
    raw: dict[str, Any] = Field(default_factory=dict)
