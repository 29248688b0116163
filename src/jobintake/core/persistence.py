from __future__ import annotations

import json
import logging
import math
from typing import Any

from sqlalchemy.exc import SQLAlchemyError

from jobintake.core.dedupe import DuplicateCheck
from jobintake.db.base import utcnow
from jobintake.db.models import Application, ApplicationStage
from jobintake.db.repositories import Repository
from jobintake.errors import PersistError
from jobintake.types import ParsedJobFields

logger = logging.getLogger(__name__)

UNKNOWN_COMPANY = "Unknown Company"
UNKNOWN_TITLE = "Unknown Title"


def as_string(value: Any) -> str | None:
    if isinstance(value, str):
        stripped = value.strip()
        return stripped or None
    return None


def as_number(value: Any) -> float | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value) if math.isfinite(value) else None
    if isinstance(value, str) and value.strip():
        try:
            number = float(value.strip())
        except ValueError:
            return None
        return number if math.isfinite(number) else None
    return None


def as_string_list(value: Any) -> list[str]:
    if not isinstance(value, (list, tuple)):
        return []
    items = [str(item).strip() for item in value if item is not None]
    return [item for item in items if item]


def dump_list(value: Any) -> str | None:
    items = as_string_list(value)
    return json.dumps(items) if items else None


def application_values(fields: ParsedJobFields, *, url: str | None) -> dict[str, Any]:
    """Coerce parsed fields into column values the store accepts."""
    return {
        "company": as_string(fields.company) or UNKNOWN_COMPANY,
        "title": as_string(fields.title) or UNKNOWN_TITLE,
        "location": as_string(fields.location),
        "url": as_string(url),
        "job_type": as_string(fields.job_type),
        "work_mode": as_string(fields.work_mode),
        "seniority": as_string(fields.seniority),
        "salary_min": as_number(fields.salary_min),
        "salary_max": as_number(fields.salary_max),
        "salary_currency": as_string(fields.salary_currency),
        "salary_period": as_string(fields.salary_period),
        "description_summary": as_string(fields.description_summary),
        "key_requirements_json": dump_list(fields.key_requirements),
        "key_responsibilities_json": dump_list(fields.key_responsibilities),
    }


class ApplicationWriter:
    def __init__(self, repo: Repository):
        self.repo = repo

    def save(
        self,
        *,
        owner_id: str,
        fields: ParsedJobFields,
        url: str | None,
        detection: DuplicateCheck,
    ) -> Application:
        if detection.duplicate and detection.existing is not None:
            return detection.existing

        values = application_values(fields, url=url)
        values.update(
            {
                "stage": ApplicationStage.APPLIED,
                "sort_order": 0,
                "applied_date": utcnow(),
            }
        )
        try:
            application = self.repo.create_application(owner_id, values)
        except SQLAlchemyError as exc:
            self.repo.session.rollback()
            logger.exception("Failed to save application owner=%s", owner_id)
            raise PersistError(f"Failed to save application: {exc.__class__.__name__}") from exc

        logger.info("Saved application id=%s owner=%s", application.id, owner_id)
        return application
