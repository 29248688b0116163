import math

import pytest
from pydantic import ValidationError

from jobintake.llm.schema import CONFIDENCE_FIELDS, JOB_POSTING_FIELDS, JOB_POSTING_SCHEMA
from jobintake.types import ParsedJobFields


def test_schema_is_closed_and_requires_every_field() -> None:
    assert JOB_POSTING_SCHEMA["additionalProperties"] is False
    assert set(JOB_POSTING_SCHEMA["required"]) == set(JOB_POSTING_SCHEMA["properties"])
    confidence = JOB_POSTING_SCHEMA["properties"]["confidence"]
    assert confidence["additionalProperties"] is False
    assert tuple(confidence["required"]) == CONFIDENCE_FIELDS


def test_schema_keys_match_model_aliases() -> None:
    aliases = {field.alias or name for name, field in ParsedJobFields.model_fields.items()}
    assert aliases == set(JOB_POSTING_FIELDS)


def test_payload_round_trips_through_aliases(fields_payload) -> None:
    fields = ParsedJobFields.model_validate(fields_payload())
    payload = fields.to_payload()
    assert list(payload) == list(JOB_POSTING_FIELDS)
    assert payload["salaryMin"] == 150000
    assert payload["confidence"]["company"] == 0.95


def test_unknown_keys_are_rejected(fields_payload) -> None:
    with pytest.raises(ValidationError):
        ParsedJobFields.model_validate(fields_payload(benefits=["dental"]))


def test_missing_keys_are_rejected(fields_payload) -> None:
    payload = fields_payload()
    del payload["seniority"]
    with pytest.raises(ValidationError):
        ParsedJobFields.model_validate(payload)


def test_nullable_fields_accept_null(fields_payload) -> None:
    fields = ParsedJobFields.model_validate(
        fields_payload(company=None, title=None, salaryMin=None, salaryMax=None)
    )
    assert fields.company is None
    assert fields.salary_min is None


@pytest.mark.parametrize("value", [-0.1, 1.5, math.nan])
def test_confidence_must_be_a_unit_interval(fields_payload, value: float) -> None:
    with pytest.raises(ValidationError):
        ParsedJobFields.model_validate(
            fields_payload(confidence={"company": value, "title": 1, "location": 0, "salary": 0})
        )


def test_non_finite_salary_is_rejected(fields_payload) -> None:
    with pytest.raises(ValidationError):
        ParsedJobFields.model_validate(fields_payload(salaryMax=math.inf))


def test_snake_case_keys_are_rejected(fields_payload) -> None:
    payload = fields_payload()
    payload["job_type"] = payload.pop("jobType")
    payload["salary_min"] = payload.pop("salaryMin")
    with pytest.raises(ValidationError):
        ParsedJobFields.model_validate(payload)
