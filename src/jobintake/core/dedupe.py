from __future__ import annotations

import logging
from dataclasses import dataclass

from jobintake.db.models import Application
from jobintake.db.repositories import Repository
from jobintake.types import DuplicateReason

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class DuplicateCheck:
    duplicate: bool
    existing: Application | None = None
    reason: DuplicateReason | None = None


class DuplicateDetector:
    """Decide whether a posting is already saved for an owner.

    The normalized URL is checked first; company + title (+ location when
    known) is the fallback for postings without a stable URL. The check is a
    pre-write query, so two concurrent submissions of the same posting can
    both pass it.
    """

    def __init__(self, repo: Repository):
        self.repo = repo

    def check(
        self,
        *,
        owner_id: str,
        url: str | None,
        company: str | None,
        title: str | None,
        location: str | None = None,
    ) -> DuplicateCheck:
        if url:
            existing = self.repo.find_by_url(owner_id, url)
            if existing is not None:
                logger.info("Duplicate by URL owner=%s application_id=%s", owner_id, existing.id)
                return DuplicateCheck(duplicate=True, existing=existing, reason="URL_MATCH")

        if company and title:
            existing = self.repo.find_by_fields(owner_id, company=company, title=title, location=location)
            if existing is not None:
                logger.info("Duplicate by fields owner=%s application_id=%s", owner_id, existing.id)
                return DuplicateCheck(duplicate=True, existing=existing, reason="FIELDS_MATCH")

        return DuplicateCheck(duplicate=False)
