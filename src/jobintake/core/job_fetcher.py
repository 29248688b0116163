from __future__ import annotations

import logging
import threading
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field

import requests

from jobintake.errors import FetchError
from jobintake.types import FetchResult

logger = logging.getLogger(__name__)


USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) "
    "AppleWebKit/537.36 (KHTML, like Gecko) Chrome/124.0.0.0 Safari/537.36"
)

CHUNK_BYTES = 8192

_FETCH_POOL = ThreadPoolExecutor(max_workers=8, thread_name_prefix="jobintake-fetch")


def browser_headers(user_agent: str = USER_AGENT) -> dict[str, str]:
    return {
        "User-Agent": user_agent,
        "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
        "Accept-Language": "en-US,en;q=0.9",
        "Cache-Control": "no-cache",
        "Pragma": "no-cache",
    }


@dataclass(slots=True)
class _Download:
    """State shared by the caller and the worker streaming the body."""

    cancelled: threading.Event = field(default_factory=threading.Event)
    response: requests.Response | None = None

    def cancel(self) -> None:
        self.cancelled.set()
        if self.response is not None:
            self.response.close()


def _download(url: str, *, headers: dict[str, str], timeout_sec: int, state: _Download) -> tuple[requests.Response, bytes]:
    response = requests.get(url, timeout=timeout_sec, headers=headers, allow_redirects=True, stream=True)
    state.response = response
    chunks: list[bytes] = []
    if 200 <= response.status_code < 300:
        for chunk in response.iter_content(chunk_size=CHUNK_BYTES):
            if state.cancelled.is_set():
                break
            chunks.append(chunk)
    if state.cancelled.is_set():
        response.close()
    return response, b"".join(chunks)


def _decode(body: bytes, *, encoding: str | None, content_type: str) -> str:
    declared = encoding if "charset=" in content_type.lower() else None
    try:
        return body.decode(declared or "utf-8", errors="replace")
    except LookupError:
        return body.decode("utf-8", errors="replace")


def _timed_out(url: str, timeout_sec: int) -> FetchError:
    logger.warning("Timed out fetching job URL %s after %ss", url, timeout_sec)
    return FetchError(
        "Timed out fetching the job page. Try again or use Paste Job Description.",
        extra={"url": url},
    )


def fetch_page(
    url: str,
    *,
    timeout_sec: int = 15,
    min_html_chars: int = 50,
    user_agent: str = USER_AGENT,
) -> FetchResult:
    """GET a posting page, bounding the whole download by ``timeout_sec``.

    The body is streamed on a worker thread; once the deadline passes the
    download is cancelled and its connection closed.
    """
    state = _Download()
    future = _FETCH_POOL.submit(
        _download,
        url,
        headers=browser_headers(user_agent),
        timeout_sec=timeout_sec,
        state=state,
    )
    try:
        response, body = future.result(timeout=timeout_sec)
    except requests.Timeout as exc:
        raise _timed_out(url, timeout_sec) from exc
    except requests.RequestException as exc:
        logger.warning("Failed to fetch job URL %s: %s", url, exc)
        raise FetchError(f"Failed to fetch page: {exc}", extra={"url": url}) from exc
    except TimeoutError as exc:
        future.cancel()
        state.cancel()
        raise _timed_out(url, timeout_sec) from exc

    try:
        content_type = response.headers.get("content-type", "")
        if not 200 <= response.status_code < 300:
            raise FetchError(
                f"Failed to fetch page (HTTP {response.status_code}).",
                extra={"url": url, "contentType": content_type, "httpStatus": response.status_code},
            )

        html = _decode(body, encoding=response.encoding, content_type=content_type)
        if len(html.strip()) < min_html_chars:
            raise FetchError(
                "Fetched page returned empty HTML.",
                extra={"url": url, "contentType": content_type},
            )
    finally:
        response.close()

    logger.info("Fetched job URL %s status=%s bytes=%s", url, response.status_code, len(body))
    return FetchResult(
        url=response.url or url,
        html=html,
        http_status=response.status_code,
        content_type=content_type,
    )
