from __future__ import annotations

from typing import Any

from sqlalchemy import and_, func, select
from sqlalchemy.orm import Session

from jobintake.db.models import Application


class Repository:
    """Owner-scoped queries over the application store.

    Every read takes the owner id so one user's records never surface in
    another user's duplicate checks or listings.
    """

    def __init__(self, session: Session):
        self.session = session

    def find_by_url(self, owner_id: str, url: str) -> Application | None:
        statement = (
            select(Application)
            .where(and_(Application.owner_id == owner_id, Application.url == url))
            .order_by(Application.id.asc())
            .limit(1)
        )
        return self.session.scalar(statement)

    def find_by_fields(
        self,
        owner_id: str,
        *,
        company: str,
        title: str,
        location: str | None = None,
    ) -> Application | None:
        conditions = [
            Application.owner_id == owner_id,
            Application.company == company,
            Application.title == title,
        ]
        if location:
            conditions.append(Application.location == location)

        statement = select(Application).where(and_(*conditions)).order_by(Application.id.asc()).limit(1)
        return self.session.scalar(statement)

    def create_application(self, owner_id: str, values: dict[str, Any]) -> Application:
        application = Application(owner_id=owner_id, **values)
        self.session.add(application)
        self.session.commit()
        self.session.refresh(application)
        return application

    def get_application(self, owner_id: str, application_id: int) -> Application | None:
        statement = select(Application).where(
            and_(Application.owner_id == owner_id, Application.id == application_id)
        )
        return self.session.scalar(statement)

    def list_applications(self, owner_id: str, limit: int = 100) -> list[Application]:
        statement = (
            select(Application)
            .where(Application.owner_id == owner_id)
            .order_by(Application.created_at.desc(), Application.id.desc())
            .limit(limit)
        )
        return list(self.session.scalars(statement).all())

    def count_applications(self, owner_id: str) -> int:
        statement = select(func.count(Application.id)).where(Application.owner_id == owner_id)
        return int(self.session.scalar(statement) or 0)
