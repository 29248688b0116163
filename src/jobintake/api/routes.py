from __future__ import annotations

from fastapi import APIRouter, Depends, Query
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from jobintake.api.deps import get_db, get_owner_id, require_owner_id
from jobintake.api.schemas import IngestRequest, InboxPostRequest, InboxPostResponse, ParseJobRequest
from jobintake.core.pipeline import IngestionOutcome, IngestionPipeline
from jobintake.core.runtime import get_inbox
from jobintake.db.repositories import Repository

router = APIRouter(prefix="/api", tags=["api"])


def _outcome_response(outcome: IngestionOutcome) -> JSONResponse:
    return JSONResponse(outcome.to_payload(), status_code=outcome.status)


@router.post("/extract-job")
def extract_job(
    payload: IngestRequest,
    db: Session = Depends(get_db),
    owner_id: str = Depends(require_owner_id),
) -> JSONResponse:
    outcome = IngestionPipeline(db).extract(payload)
    if not outcome.ok or outcome.extraction is None:
        return _outcome_response(outcome)
    return JSONResponse(outcome.extraction.to_payload())


@router.post("/ai/parse-job")
def parse_job(
    payload: ParseJobRequest,
    db: Session = Depends(get_db),
    owner_id: str | None = Depends(get_owner_id),
) -> JSONResponse:
    outcome = IngestionPipeline(db).parse(
        owner_id=owner_id,
        text=payload.extracted_text,
        url=payload.url,
        page_title=payload.page_title,
    )
    if not outcome.ok or outcome.fields is None:
        return _outcome_response(outcome)
    return JSONResponse({"ok": True, "data": outcome.fields.to_payload()})


@router.post("/extract-and-parse")
def extract_and_parse(
    payload: IngestRequest,
    db: Session = Depends(get_db),
    owner_id: str | None = Depends(get_owner_id),
) -> JSONResponse:
    outcome = IngestionPipeline(db).run(payload, owner_id=owner_id, save=False)
    return _outcome_response(outcome)


@router.post("/extract-and-save")
def extract_and_save(
    payload: IngestRequest,
    db: Session = Depends(get_db),
    owner_id: str | None = Depends(get_owner_id),
) -> JSONResponse:
    outcome = IngestionPipeline(db).run(payload, owner_id=owner_id, save=True)
    return _outcome_response(outcome)


@router.post("/extension/inbox", response_model=InboxPostResponse)
def post_inbox(payload: InboxPostRequest) -> InboxPostResponse:
    item = get_inbox().put(
        extracted_text=payload.extracted_text,
        url=payload.url,
        page_title=payload.page_title,
    )
    return InboxPostResponse(token=item.token)


@router.get("/extension/inbox")
def get_inbox_item(token: str | None = Query(default=None)) -> JSONResponse:
    if not token:
        return JSONResponse({"ok": False, "error": "Missing token"}, status_code=400)

    item = get_inbox().get(token)
    if item is None:
        return JSONResponse(
            {"ok": False, "error": "Token not found (expired or server restarted)"},
            status_code=404,
        )
    return JSONResponse({"ok": True, "item": item.to_payload()})


@router.get("/applications")
def list_applications(
    limit: int = Query(default=100, ge=1, le=500),
    db: Session = Depends(get_db),
    owner_id: str = Depends(require_owner_id),
) -> JSONResponse:
    repo = Repository(db)
    rows = repo.list_applications(owner_id, limit=limit)
    return JSONResponse(
        {
            "ok": True,
            "total": repo.count_applications(owner_id),
            "applications": [row.to_payload() for row in rows],
        }
    )


@router.get("/applications/{application_id}")
def get_application(
    application_id: int,
    db: Session = Depends(get_db),
    owner_id: str = Depends(require_owner_id),
) -> JSONResponse:
    application = Repository(db).get_application(owner_id, application_id)
    if application is None:
        return JSONResponse({"ok": False, "error": "Application not found"}, status_code=404)
    return JSONResponse({"ok": True, "application": application.to_payload()})
