from __future__ import annotations

import os
import tempfile
from pathlib import Path

_TEST_DATA_DIR = Path(tempfile.mkdtemp(prefix="jobintake-tests-"))
os.environ.setdefault("DATABASE_URL", f"sqlite:///{_TEST_DATA_DIR / 'test.db'}")
os.environ.setdefault("DATA_DIR", str(_TEST_DATA_DIR))
os.environ.setdefault("APP_ENV", "test")
os.environ.setdefault("OPENAI_API_KEY", "")

import pytest  # noqa: E402

from jobintake.core.runtime import get_inbox  # noqa: E402
from jobintake.db.base import Base  # noqa: E402
from jobintake.db import models  # noqa: E402,F401
from jobintake.db.session import engine  # noqa: E402
from jobintake.types import ParsedJobFields  # noqa: E402


@pytest.fixture(autouse=True)
def reset_db() -> None:
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    get_inbox().clear()
    yield


def build_fields_payload(**overrides) -> dict:
    payload = {
        "company": "Acme Corp",
        "title": "Senior Backend Engineer",
        "location": None,
        "jobType": "Full-time",
        "workMode": "Remote",
        "salaryMin": 150000,
        "salaryMax": 190000,
        "salaryCurrency": "USD",
        "salaryPeriod": "year",
        "seniority": "senior",
        "descriptionSummary": "Build and operate backend services.",
        "keyRequirements": ["5+ years of Python", "PostgreSQL", "Distributed systems"],
        "keyResponsibilities": ["Design APIs", "Own services in production"],
        "confidence": {"company": 0.95, "title": 0.9, "location": 0.2, "salary": 0.7},
    }
    payload.update(overrides)
    return payload


@pytest.fixture()
def fields_payload():
    return build_fields_payload


class FakeLLM:
    def __init__(self, payload: dict | None = None, error: Exception | None = None):
        self.payload = payload or build_fields_payload()
        self.error = error
        self.calls: list[dict] = []

    def parse_job(self, *, job_text: str, url: str | None = None, page_title: str | None = None) -> ParsedJobFields:
        self.calls.append({"job_text": job_text, "url": url, "page_title": page_title})
        if self.error is not None:
            raise self.error
        return ParsedJobFields.model_validate(self.payload)


@pytest.fixture()
def fake_llm_factory():
    return FakeLLM
