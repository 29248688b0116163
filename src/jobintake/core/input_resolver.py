from __future__ import annotations

from urllib.parse import urlparse

from jobintake.errors import InputError
from jobintake.types import IngestionInput, ResolvedInput


def resolve_input(payload: IngestionInput, *, min_paste_chars: int = 50) -> ResolvedInput:
    """Pick the input mode for a run.

    Pasted text that clears ``min_paste_chars`` always wins over the URL, so a
    caller that already has the text never pays for a fetch.
    """
    url = (payload.url or "").strip()
    text = (payload.pasted_text or "").strip()
    page_title = (payload.page_title or "").strip() or None

    if text and len(text) >= min_paste_chars:
        return ResolvedInput(mode="paste", url=url or None, text=text, page_title=page_title)

    if url:
        parsed = urlparse(url)
        if parsed.scheme not in {"http", "https"} or not parsed.netloc:
            raise InputError(f"Not a valid http(s) URL: {url}", extra={"url": url})
        return ResolvedInput(mode="url", url=url, page_title=page_title)

    if text:
        raise InputError(
            f"Pasted job description is too short (minimum {min_paste_chars} characters).",
            extra={"length": len(text)},
        )
    raise InputError("Provide a job URL or paste the job description.")
