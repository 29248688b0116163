import json
import math

from jobintake.core.persistence import (
    UNKNOWN_COMPANY,
    UNKNOWN_TITLE,
    application_values,
    as_number,
    as_string,
    as_string_list,
    dump_list,
)
from jobintake.types import ParsedJobFields


def test_as_string_trims_and_drops_blank() -> None:
    assert as_string("  Acme  ") == "Acme"
    assert as_string("   ") is None
    assert as_string(42) is None
    assert as_string(None) is None


def test_as_number_accepts_finite_numbers_only() -> None:
    assert as_number(120000) == 120000.0
    assert as_number(" 95000.5 ") == 95000.5
    assert as_number(True) is None
    assert as_number(math.inf) is None
    assert as_number("nan") is None
    assert as_number("about 100k") is None
    assert as_number(None) is None


def test_string_lists_are_cleaned() -> None:
    assert as_string_list(["  Python ", "", None, "SQL"]) == ["Python", "SQL"]
    assert as_string_list("Python") == []
    assert dump_list([]) is None
    assert json.loads(dump_list(["Python", "SQL"])) == ["Python", "SQL"]


def test_application_values_default_unknown_company_and_title(fields_payload) -> None:
    fields = ParsedJobFields.model_validate(
        fields_payload(company="   ", title=None, keyRequirements=[], salaryCurrency=" USD ")
    )
    values = application_values(fields, url="https://jobs.example.com/1")

    assert values["company"] == UNKNOWN_COMPANY
    assert values["title"] == UNKNOWN_TITLE
    assert values["url"] == "https://jobs.example.com/1"
    assert values["salary_currency"] == "USD"
    assert values["key_requirements_json"] is None
    assert json.loads(values["key_responsibilities_json"]) == ["Design APIs", "Own services in production"]


def test_application_values_without_url(fields_payload) -> None:
    fields = ParsedJobFields.model_validate(fields_payload())
    values = application_values(fields, url=None)
    assert values["url"] is None
    assert values["salary_min"] == 150000.0
