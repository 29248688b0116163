from __future__ import annotations

JOB_PARSE_SYSTEM_PROMPT = (
    "You extract structured job posting fields from messy text. "
    "Be conservative: if a field is unknown, set it to null. "
    "Use an empty list when no requirements or responsibilities are stated. "
    "Confidence values are numbers between 0 and 1."
)

JOB_PARSE_PROMPT = """
Extract job fields from this posting text.
{hints}
POSTING TEXT:
{job_text}
""".strip()


def build_job_parse_prompt(*, job_text: str, url: str | None = None, page_title: str | None = None) -> str:
    hints = []
    if url:
        hints.append(f"URL: {url}")
    if page_title:
        hints.append(f"Page Title: {page_title}")
    hint_block = "\n".join(hints) + "\n" if hints else ""
    return JOB_PARSE_PROMPT.format(hints=hint_block, job_text=job_text)
