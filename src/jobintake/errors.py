"""Stage-tagged failures raised by the ingestion pipeline.

Each error class names the pipeline ``stage`` it belongs to and the ``step``
reported to callers, so the host can render stage-specific guidance such as
"try pasting the job description instead".
"""

from __future__ import annotations

from typing import Any


class IngestionError(Exception):
    """Base error that carries the failing step and an HTTP-style status."""

    step: str = "server"
    stage: str = "failed"
    default_status: int = 400

    def __init__(self, message: str, *, status: int | None = None, extra: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.status = status if status is not None else self.default_status
        self.extra = extra or {}

    def to_payload(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "ok": False,
            "step": self.step,
            "status": self.status,
            "error": self.message,
        }
        if self.extra:
            payload["extra"] = self.extra
        return payload


class InputError(IngestionError):
    """Neither a URL nor usable pasted text was supplied."""

    step = "input"
    stage = "resolving"


class AuthError(IngestionError):
    step = "auth"
    stage = "resolving"
    default_status = 401


class FetchError(IngestionError):
    """Timeout, transport failure, non-2xx status or empty body."""

    step = "extract"
    stage = "fetching"


class ExtractError(IngestionError):
    """No sufficiently readable text, including login walls."""

    step = "extract"
    stage = "extracting"

    def __init__(
        self,
        message: str,
        *,
        status: int | None = None,
        extra: dict[str, Any] | None = None,
        blocked: bool = False,
        preview: str = "",
        suggestion: str = "",
    ) -> None:
        details = dict(extra or {})
        if blocked:
            details.update({"blocked": True, "preview": preview, "suggestion": suggestion})
        super().__init__(message, status=status, extra=details)
        self.blocked = blocked
        self.preview = preview
        self.suggestion = suggestion


class ParseError(IngestionError):
    """The structured-parse call failed or returned unusable output."""

    step = "ai"
    stage = "parsing"


class PersistError(IngestionError):
    step = "server"
    stage = "writing"
    default_status = 500


class ServerError(IngestionError):
    """Unexpected failure inside a stage."""

    step = "server"
    default_status = 500
