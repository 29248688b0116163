from __future__ import annotations

import enum
import logging
from dataclasses import dataclass, field
from typing import Any

from sqlalchemy.orm import Session

from jobintake.config import Settings, get_settings
from jobintake.core.dedupe import DuplicateDetector
from jobintake.core.input_resolver import resolve_input
from jobintake.core.job_fetcher import fetch_page
from jobintake.core.persistence import ApplicationWriter, as_string
from jobintake.core.text_extractor import TextExtractor
from jobintake.core.url_normalizer import normalize_url
from jobintake.db.models import Application
from jobintake.db.repositories import Repository
from jobintake.errors import AuthError, IngestionError, ServerError
from jobintake.llm.router import LLMRouter
from jobintake.types import DuplicateReason, ExtractionResult, IngestionInput, ParsedJobFields

logger = logging.getLogger(__name__)


class PipelineStage(str, enum.Enum):
    IDLE = "idle"
    RESOLVING = "resolving"
    FETCHING = "fetching"
    EXTRACTING = "extracting"
    PARSING = "parsing"
    NORMALIZING = "normalizing"
    DETECTING = "detecting"
    WRITING = "writing"
    DONE = "done"
    FAILED = "failed"


@dataclass(slots=True)
class IngestionOutcome:
    stages: list[PipelineStage] = field(default_factory=lambda: [PipelineStage.IDLE])
    extraction: ExtractionResult | None = None
    fields: ParsedJobFields | None = None
    best_url: str = ""
    normalized_url: str | None = None
    application: Application | None = None
    duplicate: bool = False
    reason: DuplicateReason | None = None
    error: IngestionError | None = None
    failed_stage: PipelineStage | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def status(self) -> int:
        return self.error.status if self.error else 200

    @property
    def current_stage(self) -> PipelineStage:
        stage = self.stages[-1]
        return PipelineStage.RESOLVING if stage == PipelineStage.IDLE else stage

    def enter(self, stage: PipelineStage) -> None:
        self.stages.append(stage)
        logger.info("Ingestion stage=%s", stage.value)

    def fail(self, stage: PipelineStage, error: IngestionError) -> IngestionOutcome:
        self.error = error
        self.failed_stage = stage
        self.stages.append(PipelineStage.FAILED)
        return self

    def to_payload(self) -> dict[str, Any]:
        if self.error is not None:
            payload = self.error.to_payload()
            payload["stage"] = self.failed_stage.value if self.failed_stage else PipelineStage.FAILED.value
            if self.extraction is not None:
                payload["extract"] = self.extraction.to_payload()
            return payload

        payload: dict[str, Any] = {"ok": True, "bestUrl": self.best_url}
        if self.extraction is not None:
            payload["extract"] = self.extraction.to_payload()
        if self.fields is not None:
            data = self.fields.to_payload()
            data["url"] = self.best_url or None
            payload["ai"] = {"ok": True, "data": data}
        if self.stages[-1] == PipelineStage.DONE and self.application is not None:
            payload["duplicate"] = self.duplicate
            if self.reason:
                payload["reason"] = self.reason
            payload["application"] = self.application.to_payload()
        return payload


class IngestionPipeline:
    """Run one posting through resolve, fetch/extract, parse, dedupe and save.

    Runs are linear and share nothing but the database session handed in.
    Every failure is captured on the returned outcome with the stage it
    happened in; nothing is retried here.
    """

    def __init__(
        self,
        session: Session,
        *,
        settings: Settings | None = None,
        llm: LLMRouter | None = None,
        extractor: TextExtractor | None = None,
    ):
        self.session = session
        self.settings = settings or get_settings()
        self.repo = Repository(session)
        self.llm = llm or LLMRouter(self.settings)
        self.extractor = extractor or TextExtractor(
            min_text_chars=self.settings.extract_min_text_chars,
            preview_chars=self.settings.extract_preview_chars,
            login_wall_min_signals=self.settings.login_wall_min_signals,
        )
        self.detector = DuplicateDetector(self.repo)
        self.writer = ApplicationWriter(self.repo)

    def extract(self, payload: IngestionInput) -> IngestionOutcome:
        outcome = IngestionOutcome()
        try:
            self._extract_into(outcome, payload)
        except IngestionError as exc:
            return self._failed(outcome, exc)
        except Exception as exc:
            return self._crashed(outcome, exc)
        outcome.enter(PipelineStage.DONE)
        return outcome

    def parse(
        self,
        *,
        owner_id: str | None,
        text: str,
        url: str | None = None,
        page_title: str | None = None,
    ) -> IngestionOutcome:
        outcome = IngestionOutcome(best_url=(url or "").strip())
        try:
            self._require_owner(owner_id)
            outcome.enter(PipelineStage.PARSING)
            outcome.fields = self.llm.parse_job(job_text=text, url=outcome.best_url or None, page_title=page_title)
        except IngestionError as exc:
            return self._failed(outcome, exc)
        except Exception as exc:
            return self._crashed(outcome, exc)
        outcome.enter(PipelineStage.DONE)
        return outcome

    def run(self, payload: IngestionInput, *, owner_id: str | None, save: bool = True) -> IngestionOutcome:
        outcome = IngestionOutcome()
        try:
            self._require_owner(owner_id)
            extraction = self._extract_into(outcome, payload)
            outcome.best_url = (payload.url or "").strip() or (extraction.url or "")

            outcome.enter(PipelineStage.PARSING)
            fields = self.llm.parse_job(
                job_text=extraction.text,
                url=outcome.best_url or None,
                page_title=extraction.title_guess,
            )
            outcome.fields = fields

            if save:
                self._save_into(outcome, owner_id=str(owner_id), fields=fields)
        except IngestionError as exc:
            return self._failed(outcome, exc)
        except Exception as exc:
            return self._crashed(outcome, exc)

        outcome.enter(PipelineStage.DONE)
        return outcome

    def _extract_into(self, outcome: IngestionOutcome, payload: IngestionInput) -> ExtractionResult:
        outcome.enter(PipelineStage.RESOLVING)
        resolved = resolve_input(payload, min_paste_chars=self.settings.paste_min_chars)

        if resolved.mode == "paste":
            outcome.enter(PipelineStage.EXTRACTING)
            outcome.extraction = self.extractor.from_paste(
                resolved.text or "",
                url=resolved.url,
                page_title=resolved.page_title,
            )
            return outcome.extraction

        url = resolved.url or ""
        outcome.enter(PipelineStage.FETCHING)
        fetched = fetch_page(
            url,
            timeout_sec=self.settings.fetch_timeout_sec,
            min_html_chars=self.settings.fetch_min_html_chars,
            user_agent=self.settings.fetch_user_agent,
        )

        outcome.enter(PipelineStage.EXTRACTING)
        extraction = self.extractor.from_html(fetched.html, url=url)
        if resolved.page_title and not extraction.title_guess:
            extraction.title_guess = resolved.page_title
        outcome.extraction = extraction
        return extraction

    def _save_into(self, outcome: IngestionOutcome, *, owner_id: str, fields: ParsedJobFields) -> None:
        outcome.enter(PipelineStage.NORMALIZING)
        outcome.normalized_url = normalize_url(outcome.best_url or None)

        outcome.enter(PipelineStage.DETECTING)
        detection = self.detector.check(
            owner_id=owner_id,
            url=outcome.normalized_url,
            company=as_string(fields.company),
            title=as_string(fields.title),
            location=as_string(fields.location),
        )

        outcome.enter(PipelineStage.WRITING)
        outcome.application = self.writer.save(
            owner_id=owner_id,
            fields=fields,
            url=outcome.normalized_url,
            detection=detection,
        )
        outcome.duplicate = detection.duplicate
        outcome.reason = detection.reason

    @staticmethod
    def _require_owner(owner_id: str | None) -> None:
        if owner_id is None or not str(owner_id).strip():
            raise AuthError("Unauthorized: an authenticated owner is required.")

    @staticmethod
    def _failed(outcome: IngestionOutcome, exc: IngestionError) -> IngestionOutcome:
        stage = outcome.current_stage
        logger.warning("Ingestion failed stage=%s step=%s error=%s", stage.value, exc.step, exc.message)
        return outcome.fail(stage, exc)

    def _crashed(self, outcome: IngestionOutcome, exc: Exception) -> IngestionOutcome:
        stage = outcome.current_stage
        logger.exception("Ingestion crashed stage=%s", stage.value)
        if self.session.in_transaction():
            self.session.rollback()
        return outcome.fail(stage, ServerError(str(exc) or "Unknown server error."))
