"""
Language Model (LLM) configuration and provider.

This module provides:
- LlmConfig, the explicit credential/model settings handed to the services
- CompletionProvider, the text-completion capability the services depend on
- GroqCompletionProvider, backed by LangChain's ChatGroq
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional, Protocol

from langchain_core.messages import HumanMessage, SystemMessage

from docassist.core.config import settings
from docassist.core.exceptions import NotConfiguredError

logger = logging.getLogger(__name__)

# Placeholder value left in an unedited .env
_PLACEHOLDER_KEYS = {"", "YOUR_GROQ_API_KEY"}


@dataclass(frozen=True)
class LlmConfig:
    """Credential and model selection for completion calls."""
    credential: Optional[str] = None
    model: str = settings.LLM_MODEL
    timeout: int = settings.LLM_REQUEST_TIMEOUT

    @property
    def is_configured(self) -> bool:
        return self.credential is not None and self.credential.strip() not in _PLACEHOLDER_KEYS

    def require_credential(self) -> str:
        if not self.is_configured:
            raise NotConfiguredError()
        return self.credential

    @classmethod
    def from_settings(cls) -> "LlmConfig":
        return cls(
            credential=settings.GROQ_API_KEY or None,
            model=settings.LLM_MODEL,
            timeout=settings.LLM_REQUEST_TIMEOUT,
        )


class CompletionProvider(Protocol):
    """Single-turn text completion: system prompt + user prompt in, text out."""

    async def complete(
        self,
        system_prompt: str,
        user_prompt: str,
        max_tokens: int,
        temperature: float,
    ) -> str:
        ...


class GroqCompletionProvider:
    """
    CompletionProvider backed by ChatGroq.

    A ChatGroq client is created per (max_tokens, temperature) pair and reused.
    """

    def __init__(self, config: LlmConfig):
        self.config = config
        self._clients = {}

    def _get_client(self, max_tokens: int, temperature: float):
        from langchain_groq import ChatGroq

        key = (max_tokens, temperature)
        if key not in self._clients:
            self._clients[key] = ChatGroq(
                model=self.config.model,
                temperature=temperature,
                max_tokens=max_tokens,
                api_key=self.config.require_credential(),
                timeout=self.config.timeout,
                max_retries=0,  # retries are handled by LLMService
            )
        return self._clients[key]

    async def complete(
        self,
        system_prompt: str,
        user_prompt: str,
        max_tokens: int,
        temperature: float,
    ) -> str:
        client = self._get_client(max_tokens, temperature)
        messages = [SystemMessage(content=system_prompt), HumanMessage(content=user_prompt)]
        response = await client.ainvoke(messages)
        return response.content if hasattr(response, 'content') else str(response)


def get_completion_provider(config: Optional[LlmConfig] = None) -> CompletionProvider:
    """Build the default completion provider for the given (or configured) credentials."""
    return GroqCompletionProvider(config or LlmConfig.from_settings())
