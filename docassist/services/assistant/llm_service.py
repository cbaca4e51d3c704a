import asyncio
import logging
import re
import time

import groq
from tenacity import (
    AsyncRetrying,
    before_sleep_log,
    retry_if_exception,
    stop_after_attempt,
    wait_exponential,
)

from docassist.core.config import settings
from docassist.core.exceptions import NotConfiguredError, ProviderError
from docassist.core.llm import CompletionProvider, LlmConfig

logger = logging.getLogger(__name__)

# Groq SDK errors that are worth another attempt
_TRANSIENT_ERROR_TYPES = (
    asyncio.TimeoutError,
    ConnectionError,
    groq.APIConnectionError,
    groq.APITimeoutError,
    groq.RateLimitError,
    groq.InternalServerError,
)

RETRYABLE_STATUS_CODES = frozenset({429, 500, 502, 503, 504})

_RETRYABLE_STATUS_IN_MESSAGE = re.compile(r'\b(429|500|502|503|504)\b')

_RETRYABLE_PATTERNS = (
    "internal server error",
    "service unavailable",
    "bad gateway",
    "gateway timeout",
    "connection reset",
    "connection refused",
    "temporary failure",
    "timed out",
    "rate limit",
)


def is_retryable_error(error: BaseException) -> bool:
    """
    Check if an error is transient (server errors, timeouts, rate limits).

    An HTTP status carried by the error is authoritative; the message is only
    inspected for errors that have none.
    """
    if isinstance(error, _TRANSIENT_ERROR_TYPES):
        return True

    status = getattr(error, "status_code", None)
    if isinstance(status, int):
        return status in RETRYABLE_STATUS_CODES

    error_str = str(error).lower()
    if _RETRYABLE_STATUS_IN_MESSAGE.search(error_str):
        return True
    return any(pattern in error_str for pattern in _RETRYABLE_PATTERNS)


class LLMService:
    """
    Sends completion requests to the provider.

    Transient failures are retried with exponential backoff; any failure left
    after that is raised as ProviderError. A missing credential is raised as
    NotConfiguredError before the provider is touched.
    """

    def __init__(
        self,
        provider: CompletionProvider,
        config: LlmConfig,
        max_attempts: int = None,
        base_delay: float = None,
        max_delay: float = None,
    ):
        self.provider = provider
        self.config = config
        self.max_attempts = max_attempts or settings.LLM_RETRY_ATTEMPTS
        self.base_delay = settings.LLM_RETRY_BASE_DELAY if base_delay is None else base_delay
        self.max_delay = settings.LLM_RETRY_MAX_DELAY if max_delay is None else max_delay

    @property
    def is_configured(self) -> bool:
        return self.config.is_configured

    def ensure_configured(self) -> None:
        if not self.config.is_configured:
            raise NotConfiguredError()

    async def complete(
        self,
        system_prompt: str,
        user_prompt: str,
        max_tokens: int,
        temperature: float = None,
        label: str = "LLM",
    ) -> str:
        """
        Run one completion.

        Raises:
            NotConfiguredError: No credential configured
            ProviderError: The provider failed (after retrying transient errors)
        """
        self.ensure_configured()
        temperature = settings.LLM_TEMPERATURE if temperature is None else temperature

        retryer = AsyncRetrying(
            stop=stop_after_attempt(self.max_attempts),
            wait=wait_exponential(multiplier=self.base_delay, max=self.max_delay),
            retry=retry_if_exception(is_retryable_error),
            before_sleep=before_sleep_log(logger, logging.WARNING),
            reraise=True,
        )

        start_time = time.perf_counter()
        try:
            async for attempt in retryer:
                with attempt:
                    text = await self.provider.complete(system_prompt, user_prompt, max_tokens, temperature)
        except NotConfiguredError:
            raise
        except Exception as e:
            logger.error(f"[{label}] LLM call failed: {e}")
            raise ProviderError(f"LLM request failed: {e}") from e

        elapsed = time.perf_counter() - start_time
        logger.info(f"[{label}] Completion received in {elapsed:.2f}s ({len(text or '')} chars)")
        return text or ""
