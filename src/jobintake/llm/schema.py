from __future__ import annotations

from typing import Any

JOB_POSTING_SCHEMA_NAME = "job_posting"

_NULLABLE_STRING = {"type": ["string", "null"]}
_NULLABLE_NUMBER = {"type": ["number", "null"]}

JOB_POSTING_FIELDS = (
    "company",
    "title",
    "location",
    "jobType",
    "workMode",
    "salaryMin",
    "salaryMax",
    "salaryCurrency",
    "salaryPeriod",
    "seniority",
    "descriptionSummary",
    "keyRequirements",
    "keyResponsibilities",
    "confidence",
)

CONFIDENCE_FIELDS = ("company", "title", "location", "salary")

JOB_POSTING_SCHEMA: dict[str, Any] = {
    "type": "object",
    "additionalProperties": False,
    "properties": {
        "company": _NULLABLE_STRING,
        "title": _NULLABLE_STRING,
        "location": _NULLABLE_STRING,
        # Full-time / Part-time / Contract / Internship
        "jobType": _NULLABLE_STRING,
        # On-site / Hybrid / Remote
        "workMode": _NULLABLE_STRING,
        "salaryMin": _NULLABLE_NUMBER,
        "salaryMax": _NULLABLE_NUMBER,
        "salaryCurrency": _NULLABLE_STRING,
        # hour / month / year
        "salaryPeriod": _NULLABLE_STRING,
        "seniority": _NULLABLE_STRING,
        "descriptionSummary": _NULLABLE_STRING,
        "keyRequirements": {"type": "array", "items": {"type": "string"}},
        "keyResponsibilities": {"type": "array", "items": {"type": "string"}},
        "confidence": {
            "type": "object",
            "additionalProperties": False,
            "properties": {name: {"type": "number"} for name in CONFIDENCE_FIELDS},
            "required": list(CONFIDENCE_FIELDS),
        },
    },
    "required": list(JOB_POSTING_FIELDS),
}
