"""Reduce fetched HTML to readable job-posting text.

Strategies run in order and each returns a :class:`StrategyOutcome`. The first
outcome whose text clears the quality threshold wins; when none does, the
longest candidate is used for the failure preview. Text length is the only
quality measure.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Callable, Sequence
from dataclasses import dataclass

import trafilatura
from bs4 import BeautifulSoup

from jobintake.errors import ExtractError
from jobintake.types import ExtractionResult, SourceStrategy

logger = logging.getLogger(__name__)

JUNK_TAGS = ["script", "style", "noscript", "iframe", "svg", "canvas", "template"]

CONTENT_SELECTORS = [
    "main",
    "article",
    '[role="main"]',
    ".job",
    ".job-description",
    ".jobDescription",
    ".job-desc",
    ".description",
    ".posting",
    ".content",
    "#job",
    "#job-description",
    "#jobDescriptionText",
    "#posting",
    "#description",
    "#content",
    "[data-automation='jobDescription']",
    "[data-testid='jobDescription']",
    "[data-qa='job-description']",
    "[class*='description']",
    "[id*='description']",
]

LOGIN_WALL_SIGNALS = (
    "sign in",
    "log in",
    "password",
    "create an account",
    "forgot your password",
    "join now",
    "sign up",
    "remember me",
    "continue with google",
)

_LOGIN_WALL_PATTERNS = tuple(
    re.compile(rf"\b{re.escape(signal)}\b", re.IGNORECASE) for signal in LOGIN_WALL_SIGNALS
)

PASTE_SUGGESTION = "This page looks like a login wall. Open the posting in your browser and use Paste Job Description instead."

_MULTI_NEWLINE_RE = re.compile(r"\n{3,}")
_TRAILING_SPACE_RE = re.compile(r"[ \t]+\n")


@dataclass(slots=True)
class StrategyOutcome:
    strategy: SourceStrategy
    text: str = ""
    title_guess: str | None = None
    reason: str = ""

    @property
    def ok(self) -> bool:
        return bool(self.text)


Strategy = Callable[[BeautifulSoup, str | None], StrategyOutcome]


def clean_text(value: str) -> str:
    text = value.replace("\u00a0", " ").replace("\r\n", "\n").replace("\r", "\n")
    text = _TRAILING_SPACE_RE.sub("\n", text)
    lines = [line.strip() for line in text.split("\n")]
    text = "\n".join(lines)
    text = _MULTI_NEWLINE_RE.sub("\n\n", text)
    return text.strip()


def load_document(html: str) -> BeautifulSoup:
    soup = BeautifulSoup(html, "html.parser")
    for tag in soup(JUNK_TAGS):
        tag.decompose()
    return soup


def guess_title(soup: BeautifulSoup) -> str | None:
    if soup.title and soup.title.get_text(strip=True):
        return soup.title.get_text(strip=True)

    for attrs in ({"property": "og:title"}, {"name": "twitter:title"}):
        meta = soup.find("meta", attrs=attrs)
        if meta and str(meta.get("content", "")).strip():
            return str(meta["content"]).strip()
    return None


def reader_mode_strategy(soup: BeautifulSoup, url: str | None) -> StrategyOutcome:
    try:
        extracted = trafilatura.extract(
            str(soup),
            url=url,
            include_comments=False,
            include_tables=True,
            include_links=False,
            include_images=False,
            deduplicate=True,
        )
    except Exception as exc:
        logger.warning("Reader-mode extraction failed url=%s error=%s", url, exc)
        return StrategyOutcome(strategy="reader_mode", reason=f"reader error: {exc}")

    text = clean_text(extracted or "")
    if not text:
        return StrategyOutcome(strategy="reader_mode", reason="no article content found")
    return StrategyOutcome(strategy="reader_mode", text=text, title_guess=guess_title(soup))


def selector_strategy(soup: BeautifulSoup, url: str | None) -> StrategyOutcome:
    best = ""
    for selector in CONTENT_SELECTORS:
        matches = soup.select(selector)
        if not matches:
            continue
        candidate = clean_text("\n".join(node.get_text("\n") for node in matches))
        if len(candidate) > len(best):
            best = candidate

    if not best:
        root = soup.body or soup
        best = clean_text(root.get_text("\n"))

    if not best:
        return StrategyOutcome(strategy="selector_fallback", reason="document has no text")
    return StrategyOutcome(strategy="selector_fallback", text=best, title_guess=guess_title(soup))


DEFAULT_STRATEGIES: tuple[Strategy, ...] = (reader_mode_strategy, selector_strategy)


def count_login_signals(text: str, title: str | None = None) -> int:
    """Number of distinct login-wall phrases present as whole words."""
    haystack = f"{title or ''}\n{text}"
    return sum(1 for pattern in _LOGIN_WALL_PATTERNS if pattern.search(haystack))


class TextExtractor:
    def __init__(
        self,
        *,
        min_text_chars: int = 200,
        preview_chars: int = 400,
        login_wall_min_signals: int = 2,
        strategies: Sequence[Strategy] = DEFAULT_STRATEGIES,
    ):
        self.min_text_chars = min_text_chars
        self.preview_chars = preview_chars
        self.login_wall_min_signals = login_wall_min_signals
        self.strategies = tuple(strategies)

    def from_paste(self, text: str, *, url: str | None = None, page_title: str | None = None) -> ExtractionResult:
        cleaned = clean_text(text)
        if not cleaned:
            raise ExtractError("Pasted job description is empty.")
        return ExtractionResult(source_strategy="paste", text=cleaned, title_guess=page_title, url=url)

    def from_html(self, html: str, *, url: str | None = None) -> ExtractionResult:
        soup = load_document(html)
        outcomes: list[StrategyOutcome] = []
        chosen: StrategyOutcome | None = None

        for strategy in self.strategies:
            outcome = strategy(soup, url)
            outcomes.append(outcome)
            if outcome.ok and len(outcome.text) >= self.min_text_chars:
                chosen = outcome
                break
            logger.info(
                "Extraction strategy %s insufficient url=%s length=%s reason=%s",
                outcome.strategy,
                url,
                len(outcome.text),
                outcome.reason or "too short",
            )

        best = chosen or max(outcomes, key=lambda item: len(item.text), default=None)
        text = best.text if best else ""
        title = best.title_guess if best else guess_title(soup)

        if count_login_signals(text, title) >= self.login_wall_min_signals:
            logger.warning("Login wall detected url=%s", url)
            raise ExtractError(
                "This page appears to require signing in, so the posting text is not readable.",
                extra={"url": url, "sourceStrategy": "blocked", "titleGuess": title},
                blocked=True,
                preview=text[: self.preview_chars],
                suggestion=PASTE_SUGGESTION,
            )

        if chosen is None:
            raise ExtractError(
                "Could not extract enough readable text from this page "
                "(possibly blocked or rendered by JavaScript). Try Paste Job Description fallback.",
                extra={"url": url, "length": len(text)},
            )

        logger.info("Extracted posting text url=%s strategy=%s length=%s", url, chosen.strategy, len(chosen.text))
        return ExtractionResult(
            source_strategy=chosen.strategy,
            text=chosen.text,
            title_guess=chosen.title_guess,
            url=url,
        )
