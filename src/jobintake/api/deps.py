from __future__ import annotations

from collections.abc import Generator

from fastapi import Depends, Request
from sqlalchemy.orm import Session

from jobintake.config import get_settings
from jobintake.db.session import get_db_session
from jobintake.errors import AuthError


def get_db() -> Generator[Session, None, None]:
    yield from get_db_session()


def get_owner_id(request: Request) -> str | None:
    """Owner identity forwarded by the authentication layer in front of the API."""
    value = request.headers.get(get_settings().owner_header, "").strip()
    return value or None


def require_owner_id(owner_id: str | None = Depends(get_owner_id)) -> str:
    if owner_id is None:
        raise AuthError("Unauthorized")
    return owner_id
