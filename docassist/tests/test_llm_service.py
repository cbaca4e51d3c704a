import asyncio

import groq
import httpx
import pytest

from docassist.core.config import settings
from docassist.core.exceptions import NotConfiguredError, ProviderError
from docassist.core.llm import LlmConfig
from docassist.services.assistant.llm_service import LLMService, is_retryable_error
from docassist.tests.conftest import FakeCompletionProvider


class RateLimited(Exception):
    status_code = 429


class BadRequest(Exception):
    status_code = 400


def _groq_status_error(error_type, status):
    request = httpx.Request("POST", "https://api.groq.com/openai/v1/chat/completions")
    return error_type(f"Error code: {status}", response=httpx.Response(status, request=request), body=None)


@pytest.mark.parametrize("error, expected", [
    (asyncio.TimeoutError(), True),
    (ConnectionError("reset"), True),
    (RateLimited("slow down"), True),
    (RuntimeError("503 Service Unavailable"), True),
    (RuntimeError("Rate limit reached for model"), True),
    (ValueError("invalid api key"), False),
    (KeyError("choices"), False),
    (BadRequest("Error code: 400 - prompt has 15003 tokens"), False),
    (BadRequest("max_tokens 2500 exceeds the model limit, rate limit unaffected"), False),
    (ValueError("context of 15003 tokens is too long"), False),
    (_groq_status_error(groq.RateLimitError, 429), True),
    (_groq_status_error(groq.InternalServerError, 503), True),
    (_groq_status_error(groq.AuthenticationError, 401), False),
    (_groq_status_error(groq.BadRequestError, 400), False),
])
def test_retryable_classification(error, expected):
    assert is_retryable_error(error) is expected


@pytest.mark.asyncio
async def test_transient_errors_are_retried(llm, provider):
    provider.responses = [ConnectionError("connection reset"), RateLimited("busy"), "done"]

    assert await llm.complete("system", "user", max_tokens=10) == "done"
    assert len(provider.calls) == 3


@pytest.mark.asyncio
async def test_retries_are_bounded(llm, provider):
    provider.responses = [ConnectionError("down")] * 3

    with pytest.raises(ProviderError) as exc_info:
        await llm.complete("system", "user", max_tokens=10)

    assert len(provider.calls) == 3
    assert isinstance(exc_info.value.__cause__, ConnectionError)


@pytest.mark.asyncio
async def test_permanent_errors_fail_fast(llm, provider):
    provider.responses = [ValueError("invalid api key")]

    with pytest.raises(ProviderError):
        await llm.complete("system", "user", max_tokens=10)
    assert len(provider.calls) == 1


@pytest.mark.asyncio
async def test_request_parameters_are_forwarded(llm, provider):
    provider.responses = [None]

    assert await llm.complete("sys", "usr", max_tokens=42, temperature=0.1) == ""
    assert provider.calls == [{"system_prompt": "sys", "user_prompt": "usr", "max_tokens": 42, "temperature": 0.1}]


@pytest.mark.asyncio
async def test_missing_credential_is_not_a_provider_error():
    provider = FakeCompletionProvider(["unused"])
    llm = LLMService(provider, LlmConfig(credential="YOUR_GROQ_API_KEY"))

    assert llm.is_configured is False
    with pytest.raises(NotConfiguredError):
        await llm.complete("system", "user", max_tokens=10)
    assert provider.calls == []


@pytest.mark.asyncio
async def test_bad_request_is_not_retried_even_with_status_like_numbers(llm, provider):
    provider.responses = [BadRequest("Error code: 400 - prompt has 15003 tokens, max_tokens 2500")]

    with pytest.raises(ProviderError):
        await llm.complete("system", "user", max_tokens=2500)
    assert len(provider.calls) == 1


def test_config_defaults_follow_settings():
    config = LlmConfig(credential="gsk_test")

    assert config.model == settings.LLM_MODEL
    assert config.timeout == settings.LLM_REQUEST_TIMEOUT
    assert LlmConfig.from_settings().model == config.model
