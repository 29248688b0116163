from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import Any

from openai import OpenAI

from jobintake.config import Settings
from jobintake.types import ModelResponse

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class ProviderConfig:
    name: str
    base_url: str
    api_key: str
    timeout_sec: int


class LLMProvider:
    def __init__(self, config: ProviderConfig):
        self.config = config
        self.client = OpenAI(
            base_url=config.base_url,
            api_key=config.api_key,
            timeout=float(config.timeout_sec),
        )

    def complete_structured(
        self,
        *,
        model: str,
        system: str,
        prompt: str,
        schema_name: str,
        schema: dict[str, Any],
    ) -> ModelResponse:
        response_format = {
            "type": "json_schema",
            "json_schema": {"name": schema_name, "schema": schema, "strict": True},
        }
        try:
            return self._complete_via_chat_completions(
                model=model,
                system=system,
                prompt=prompt,
                response_format=response_format,
                api_path="json_schema",
            )
        except Exception as exc:
            if not self._is_unsupported_response_format(exc):
                raise

            logger.warning(
                "json_schema response_format unavailable for provider=%s base_url=%s; "
                "falling back to json_object (%s)",
                self.config.name,
                self.config.base_url,
                exc,
            )
            return self._complete_via_chat_completions(
                model=model,
                system=system,
                prompt=f"{prompt}\n\nReturn JSON matching this schema:\n{json.dumps(schema)}",
                response_format={"type": "json_object"},
                api_path="json_object",
            )

    def _complete_via_chat_completions(
        self,
        *,
        model: str,
        system: str,
        prompt: str,
        response_format: dict[str, Any],
        api_path: str,
    ) -> ModelResponse:
        response = self.client.chat.completions.create(
            model=model,
            messages=[
                {"role": "system", "content": system},
                {"role": "user", "content": prompt},
            ],
            response_format=response_format,
        )

        text = self._extract_chat_text(response)
        raw = response.model_dump() if hasattr(response, "model_dump") else {}
        if not isinstance(raw, dict):
            raw = {"raw": raw}
        raw["api_path"] = api_path
        return ModelResponse(content=text, raw=raw)

    @staticmethod
    def _extract_chat_text(response: Any) -> str:
        choices = getattr(response, "choices", None) or []
        if not choices:
            return ""

        message = getattr(choices[0], "message", None)
        if message is None:
            return ""

        content = getattr(message, "content", "")
        if isinstance(content, str):
            return content
        if content is None:
            return ""
        return str(content)

    @staticmethod
    def _is_unsupported_response_format(exc: Exception) -> bool:
        status_code = getattr(exc, "status_code", None)
        if status_code not in {400, 422, None}:
            return False

        message = str(exc).strip().lower()
        if not message:
            return False

        return "response_format" in message or "json_schema" in message


def parse_json(content: str) -> dict[str, Any] | None:
    """Decode a JSON object from model output, tolerating fenced code blocks."""
    candidate = content.strip()
    if not candidate:
        return None

    if "```" in candidate:
        parts = candidate.split("```")
        for part in parts:
            part = part.strip()
            if part.startswith("json"):
                part = part[4:].strip()
            if part.startswith("{") and part.endswith("}"):
                candidate = part
                break

    try:
        value = json.loads(candidate)
    except json.JSONDecodeError:
        logger.warning("Failed to parse JSON model output")
        return None
    return value if isinstance(value, dict) else None


class ProviderPool:
    def __init__(self, settings: Settings):
        self.settings = settings
        self._openai: LLMProvider | None = None
        self._local: LLMProvider | None = None

    def openai(self) -> LLMProvider:
        if self._openai is None:
            self._openai = LLMProvider(
                ProviderConfig(
                    name="openai",
                    base_url=self.settings.openai_base_url,
                    api_key=self.settings.openai_api_key,
                    timeout_sec=self.settings.openai_timeout_sec,
                )
            )
        return self._openai

    def local(self) -> LLMProvider:
        if self._local is None:
            self._local = LLMProvider(
                ProviderConfig(
                    name="local",
                    base_url=self.settings.local_llm_base_url,
                    api_key=self.settings.local_llm_api_key,
                    timeout_sec=self.settings.local_llm_timeout_sec,
                )
            )
        return self._local
