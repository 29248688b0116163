from __future__ import annotations

import json
from types import SimpleNamespace

import pytest

from jobintake.config import Settings
from jobintake.errors import ParseError
from jobintake.llm.providers import LLMProvider, ProviderConfig
from jobintake.llm.router import LLMRouter

JOB_TEXT = (
    "Senior Backend Engineer\n"
    "Acme Corp - Remote\n"
    "Responsibilities include designing APIs and owning services.\n"
    "Requirements: Python, PostgreSQL, distributed systems.\n"
)


class FakeChatPayload:
    def __init__(self, content: str):
        self.choices = [SimpleNamespace(message=SimpleNamespace(content=content))]

    def model_dump(self) -> dict:
        return {"id": "chat_1"}


class FakeClient:
    def __init__(self, content: str | None = None, error: Exception | None = None):
        self.requests: list[dict] = []
        self.chat = SimpleNamespace(completions=SimpleNamespace(create=self._create))
        self._content = content
        self._error = error

    def _create(self, **kwargs):
        self.requests.append(kwargs)
        if self._error is not None:
            raise self._error
        return FakeChatPayload(self._content or "")


def _router_with_client(client: FakeClient, **overrides) -> LLMRouter:
    settings = Settings(openai_api_key="sk-test", local_llm_enabled=False, **overrides)
    router = LLMRouter(settings=settings)
    provider = LLMProvider(
        ProviderConfig(name="openai", base_url="http://localhost:9999/v1", api_key="sk-test", timeout_sec=5)
    )
    provider.client = client
    router.pool._openai = provider
    return router


def test_parse_job_returns_validated_fields(fields_payload) -> None:
    client = FakeClient(content=json.dumps(fields_payload()))
    router = _router_with_client(client)

    fields = router.parse_job(job_text=JOB_TEXT, url="https://jobs.example.com/42", page_title="Acme careers")

    assert fields.company == "Acme Corp"
    assert fields.key_requirements == ["5+ years of Python", "PostgreSQL", "Distributed systems"]
    request = client.requests[0]
    assert request["model"] == "gpt-4o-mini"
    assert request["response_format"]["json_schema"]["name"] == "job_posting"
    prompt = request["messages"][1]["content"]
    assert "https://jobs.example.com/42" in prompt
    assert "Requirements: Python" in prompt


def test_parse_job_truncates_long_input(fields_payload) -> None:
    client = FakeClient(content=json.dumps(fields_payload()))
    router = _router_with_client(client, llm_max_input_chars=100)

    router.parse_job(job_text=JOB_TEXT + ("x" * 5000) + "TAIL_MARKER")

    assert "TAIL_MARKER" not in client.requests[0]["messages"][1]["content"]


def test_missing_api_key_is_parse_error() -> None:
    router = LLMRouter(settings=Settings(openai_api_key="", local_llm_enabled=False))
    with pytest.raises(ParseError, match="OPENAI_API_KEY") as excinfo:
        router.parse_job(job_text=JOB_TEXT)
    assert excinfo.value.step == "ai"


def test_disabled_local_provider_is_parse_error() -> None:
    router = LLMRouter(settings=Settings(llm_provider="local", local_llm_enabled=False))
    with pytest.raises(ParseError, match="disabled"):
        router.parse_job(job_text=JOB_TEXT)


def test_output_violating_schema_is_parse_error(fields_payload) -> None:
    client = FakeClient(content=json.dumps(fields_payload(benefits=["dental"])))
    with pytest.raises(ParseError, match="schema"):
        _router_with_client(client).parse_job(job_text=JOB_TEXT)


def test_non_json_output_is_parse_error() -> None:
    client = FakeClient(content="Sorry, I cannot help with that.")
    with pytest.raises(ParseError, match="non-JSON"):
        _router_with_client(client).parse_job(job_text=JOB_TEXT)


def test_empty_output_is_parse_error() -> None:
    with pytest.raises(ParseError, match="empty"):
        _router_with_client(FakeClient(content="")).parse_job(job_text=JOB_TEXT)


def test_service_failure_is_parse_error() -> None:
    client = FakeClient(error=RuntimeError("connection reset"))
    with pytest.raises(ParseError, match="connection reset") as excinfo:
        _router_with_client(client).parse_job(job_text=JOB_TEXT)
    assert excinfo.value.extra["provider"] == "openai"
    assert len(client.requests) == 1
