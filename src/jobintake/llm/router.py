from __future__ import annotations

import logging

from pydantic import ValidationError

from jobintake.config import Settings, get_settings
from jobintake.errors import ParseError
from jobintake.llm.prompts import JOB_PARSE_SYSTEM_PROMPT, build_job_parse_prompt
from jobintake.llm.providers import LLMProvider, ProviderPool, parse_json
from jobintake.llm.schema import JOB_POSTING_SCHEMA, JOB_POSTING_SCHEMA_NAME
from jobintake.types import ParsedJobFields

logger = logging.getLogger(__name__)


class LLMRouter:
    """Schema-constrained job parsing behind a single call.

    The service is expected to honor the closed schema, but its output is
    still validated here so nothing partially shaped reaches the pipeline.
    Failures are reported as :class:`ParseError`; retrying is left to the
    caller.
    """

    def __init__(self, settings: Settings | None = None):
        self.settings = settings or get_settings()
        self.pool = ProviderPool(self.settings)

    def parse_job(self, *, job_text: str, url: str | None = None, page_title: str | None = None) -> ParsedJobFields:
        provider = self._provider()
        text = job_text.strip()
        if not text:
            raise ParseError("No posting text to parse.")

        prompt = build_job_parse_prompt(
            job_text=text[: self.settings.llm_max_input_chars],
            url=url,
            page_title=page_title,
        )
        try:
            response = provider.complete_structured(
                model=self.settings.extractor_model,
                system=JOB_PARSE_SYSTEM_PROMPT,
                prompt=prompt,
                schema_name=JOB_POSTING_SCHEMA_NAME,
                schema=JOB_POSTING_SCHEMA,
            )
        except Exception as exc:
            logger.warning("LLM structured call failed provider=%s error=%s", provider.config.name, exc)
            raise ParseError(f"AI parse failed: {exc}", extra={"provider": provider.config.name}) from exc

        if not response.content.strip():
            raise ParseError("AI returned empty content.")

        data = parse_json(response.content)
        if data is None:
            raise ParseError("AI returned non-JSON content.")

        try:
            fields = ParsedJobFields.model_validate(data)
        except ValidationError as exc:
            logger.warning("Structured job output violated schema errors=%s", exc.error_count())
            raise ParseError(
                "AI output did not match the job posting schema.",
                extra={"errors": [error["msg"] for error in exc.errors()][:10]},
            ) from exc

        logger.info(
            "Parsed job fields provider=%s api_path=%s company_conf=%.2f title_conf=%.2f",
            provider.config.name,
            response.raw.get("api_path", ""),
            fields.confidence.company,
            fields.confidence.title,
        )
        return fields

    def _provider(self) -> LLMProvider:
        if self.settings.llm_provider == "local":
            if not self.settings.local_llm_enabled:
                raise ParseError("Local LLM provider is disabled (set LOCAL_LLM_ENABLED=true).")
            return self.pool.local()

        if not self.settings.openai_api_key:
            raise ParseError("Missing OPENAI_API_KEY; cannot parse job posting.")
        return self.pool.openai()
