from __future__ import annotations

import enum
import json
from datetime import datetime
from typing import Any

from sqlalchemy import DateTime, Enum, Float, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from jobintake.db.base import Base, TimestampMixin, utcnow


class ApplicationStage(str, enum.Enum):
    APPLIED = "APPLIED"
    INTERVIEW = "INTERVIEW"
    OFFER = "OFFER"
    HIRED = "HIRED"
    REJECTED = "REJECTED"


class Application(TimestampMixin, Base):
    __tablename__ = "applications"
    __table_args__ = (
        Index("ix_applications_owner_url", "owner_id", "url"),
        Index("ix_applications_owner_stage_sort", "owner_id", "stage", "sort_order"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    owner_id: Mapped[str] = mapped_column(String(255), index=True, nullable=False)
    company: Mapped[str] = mapped_column(String(255), nullable=False)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    location: Mapped[str | None] = mapped_column(String(255), nullable=True)
    url: Mapped[str | None] = mapped_column(String(2000), nullable=True)

    job_type: Mapped[str | None] = mapped_column(String(120), nullable=True)
    work_mode: Mapped[str | None] = mapped_column(String(120), nullable=True)
    seniority: Mapped[str | None] = mapped_column(String(120), nullable=True)

    salary_min: Mapped[float | None] = mapped_column(Float, nullable=True)
    salary_max: Mapped[float | None] = mapped_column(Float, nullable=True)
    salary_currency: Mapped[str | None] = mapped_column(String(10), nullable=True)
    salary_period: Mapped[str | None] = mapped_column(String(40), nullable=True)

    description_summary: Mapped[str | None] = mapped_column(Text, nullable=True)
    key_requirements_json: Mapped[str | None] = mapped_column(Text, nullable=True)
    key_responsibilities_json: Mapped[str | None] = mapped_column(Text, nullable=True)

    stage: Mapped[ApplicationStage] = mapped_column(
        Enum(ApplicationStage, native_enum=False, length=20),
        default=ApplicationStage.APPLIED,
        nullable=False,
    )
    sort_order: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    applied_date: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, nullable=False)

    @property
    def key_requirements(self) -> list[str]:
        return _load_list(self.key_requirements_json)

    @property
    def key_responsibilities(self) -> list[str]:
        return _load_list(self.key_responsibilities_json)

    def to_payload(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "ownerId": self.owner_id,
            "company": self.company,
            "title": self.title,
            "location": self.location,
            "url": self.url,
            "jobType": self.job_type,
            "workMode": self.work_mode,
            "seniority": self.seniority,
            "salaryMin": self.salary_min,
            "salaryMax": self.salary_max,
            "salaryCurrency": self.salary_currency,
            "salaryPeriod": self.salary_period,
            "descriptionSummary": self.description_summary,
            "keyRequirements": self.key_requirements,
            "keyResponsibilities": self.key_responsibilities,
            "stage": self.stage.value,
            "sortOrder": self.sort_order,
            "notes": self.notes,
            "appliedDate": self.applied_date.isoformat() if self.applied_date else None,
            "createdAt": self.created_at.isoformat() if self.created_at else None,
            "updatedAt": self.updated_at.isoformat() if self.updated_at else None,
        }


def _load_list(raw: str | None) -> list[str]:
    if not raw:
        return []
    try:
        value = json.loads(raw)
    except json.JSONDecodeError:
        return []
    if not isinstance(value, list):
        return []
    return [str(item) for item in value]
