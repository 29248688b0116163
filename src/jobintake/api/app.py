from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from jobintake.api.routes import router as api_router
from jobintake.config import get_settings
from jobintake.db.init import init_database
from jobintake.errors import IngestionError, InputError, ServerError
from jobintake.logging_config import configure_logging

logger = logging.getLogger(__name__)


def create_app() -> FastAPI:
    settings = get_settings()
    configure_logging()

    app = FastAPI(title=settings.app_name)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origin_list or ["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.on_event("startup")
    def _startup() -> None:
        init_database()

    @app.exception_handler(RequestValidationError)
    async def _invalid_body(request: Request, exc: RequestValidationError) -> JSONResponse:
        messages = [
            f"{'.'.join(str(part) for part in error.get('loc', ()) if part != 'body')}: {error.get('msg', '')}"
            for error in exc.errors()
        ]
        error = InputError("; ".join(messages) or "Invalid request body.")
        logger.info("Rejected request path=%s error=%s", request.url.path, error.message)
        return JSONResponse(error.to_payload(), status_code=error.status)

    @app.exception_handler(IngestionError)
    async def _ingestion_error(request: Request, exc: IngestionError) -> JSONResponse:
        logger.warning("Request failed path=%s step=%s error=%s", request.url.path, exc.step, exc.message)
        return JSONResponse(exc.to_payload(), status_code=exc.status)

    @app.exception_handler(Exception)
    async def _unhandled(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("Unhandled error path=%s", request.url.path)
        error = ServerError("Unexpected server error.")
        return JSONResponse(error.to_payload(), status_code=error.status)

    @app.get("/health")
    def health() -> JSONResponse:
        return JSONResponse({"status": "ok"})

    app.include_router(api_router)
    return app
