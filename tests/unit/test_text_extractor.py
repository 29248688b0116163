import pytest
from bs4 import BeautifulSoup

from jobintake.core.text_extractor import (
    StrategyOutcome,
    TextExtractor,
    clean_text,
    count_login_signals,
    guess_title,
    load_document,
    selector_strategy,
)
from jobintake.errors import ExtractError

POSTING_PARAGRAPH = (
    "Acme Corp is hiring a Senior Backend Engineer to design, build and operate the services "
    "behind our logistics platform. You will own APIs end to end, work closely with product "
    "and data teams, and mentor other engineers. We value clear writing and careful reviews."
)


def _page(body: str, title: str = "Senior Backend Engineer | Acme Corp") -> str:
    return f"<html><head><title>{title}</title><script>var x = 1;</script></head><body>{body}</body></html>"


def test_clean_text_normalizes_whitespace() -> None:
    raw = "Title here   \n\n\n\n  Line two\t\n\nLine three  "
    assert clean_text(raw) == "Title here\n\nLine two\n\nLine three"


def test_load_document_strips_script_and_style() -> None:
    soup = load_document("<html><body><style>p{}</style><p>Keep</p><script>drop()</script></body></html>")
    assert "drop" not in soup.get_text()
    assert "Keep" in soup.get_text()


def test_guess_title_prefers_title_then_og() -> None:
    assert guess_title(BeautifulSoup("<title> Job </title>", "html.parser")) == "Job"
    og = BeautifulSoup('<head><meta property="og:title" content="OG Job"></head>', "html.parser")
    assert guess_title(og) == "OG Job"


def test_selector_strategy_keeps_longest_match() -> None:
    html = _page(
        "<nav>Home Jobs About</nav>"
        "<main><p>Short main.</p></main>"
        f"<div class='job-description'><p>{POSTING_PARAGRAPH}</p><p>{POSTING_PARAGRAPH}</p></div>"
    )
    outcome = selector_strategy(load_document(html), None)
    assert outcome.ok
    assert outcome.strategy == "selector_fallback"
    assert "Short main." not in outcome.text
    assert outcome.text.count("Acme Corp is hiring") == 2


def test_selector_strategy_falls_back_to_body_text() -> None:
    html = _page(f"<div><span>{POSTING_PARAGRAPH}</span></div>")
    outcome = selector_strategy(load_document(html), None)
    assert POSTING_PARAGRAPH in outcome.text


def test_default_strategies_extract_article_text() -> None:
    body = (
        "<header>Acme</header><article>"
        f"<p>{POSTING_PARAGRAPH}</p>"
        "<p>Requirements: five years of Python, PostgreSQL in production, and experience "
        "running distributed systems with on-call ownership.</p>"
        "<p>Benefits include remote work, a learning budget and four weeks of paid leave.</p>"
        "</article>"
    )
    result = TextExtractor().from_html(_page(body), url="https://jobs.example.com/1")

    assert result.source_strategy in {"reader_mode", "selector_fallback"}
    assert "Senior Backend Engineer" in result.text
    assert len(result.text) >= 200
    assert result.title_guess == "Senior Backend Engineer | Acme Corp"
    assert result.blocked is False


def test_first_sufficient_strategy_wins() -> None:
    calls: list[str] = []

    def too_short(soup, url):
        calls.append("short")
        return StrategyOutcome(strategy="reader_mode", text="tiny")

    def long_enough(soup, url):
        calls.append("long")
        return StrategyOutcome(strategy="selector_fallback", text=POSTING_PARAGRAPH, title_guess="T")

    def never(soup, url):
        calls.append("never")
        return StrategyOutcome(strategy="selector_fallback", text=POSTING_PARAGRAPH * 2)

    extractor = TextExtractor(strategies=[too_short, long_enough, never])
    result = extractor.from_html(_page("<p>x</p>"))

    assert calls == ["short", "long"]
    assert result.source_strategy == "selector_fallback"
    assert result.text == POSTING_PARAGRAPH


def test_text_below_quality_threshold_is_hard_failure() -> None:
    with pytest.raises(ExtractError) as excinfo:
        TextExtractor().from_html(_page("<main><p>Apply now. Great job.</p></main>"), url="https://x.com/j")
    assert excinfo.value.step == "extract"
    assert excinfo.value.blocked is False
    assert "Paste Job Description" in excinfo.value.message


def test_login_wall_is_reported_as_blocked() -> None:
    wall = (
        "<main><h1>Sign in to continue</h1><p>Email</p><p>Password</p>"
        "<p>Forgot your password?</p><p>New here? Create an account</p></main>"
    )
    with pytest.raises(ExtractError) as excinfo:
        TextExtractor().from_html(_page(wall, title="Sign in | Jobs"), url="https://x.com/j")

    error = excinfo.value
    assert error.blocked is True
    assert "Paste Job Description" in error.suggestion
    assert error.extra["sourceStrategy"] == "blocked"
    assert error.preview


def test_count_login_signals_uses_title() -> None:
    assert count_login_signals("Please enter your password", title="Log in") == 2
    assert count_login_signals(POSTING_PARAGRAPH) == 0


def test_from_paste_keeps_title_hint() -> None:
    result = TextExtractor().from_paste(f"  {POSTING_PARAGRAPH}\n\n\n\n", page_title="Acme")
    assert result.source_strategy == "paste"
    assert result.text == POSTING_PARAGRAPH
    assert result.title_guess == "Acme"


DESIGNER_POSTING = (
    "Product Designer at Northwind. You will lead design in a cross-functional squad, groom the "
    "backlog in Jira with engineering, and share design updates with stakeholders every week. "
    "We look for a portfolio of shipped work, strong prototyping skills and experience running "
    "usability studies with customers across the catalog in several markets."
)


def test_login_phrases_inside_words_are_not_signals() -> None:
    assert count_login_signals(DESIGNER_POSTING, title="Product Designer | Northwind") == 0


def test_posting_with_login_lookalikes_is_extracted() -> None:
    html = _page(f"<article><p>{DESIGNER_POSTING}</p></article>", title="Product Designer | Northwind")
    result = TextExtractor().from_html(html, url="https://jobs.example.com/designer")

    assert result.blocked is False
    assert "backlog in Jira" in result.text


def test_each_login_phrase_counts_once() -> None:
    assert count_login_signals("Sign in. Sign in again. SIGN IN.") == 1
