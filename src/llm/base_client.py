# src/llm/base_client.py — v2
"""Abstract LLM client interface (chat completion with a system role)."""

from __future__ import annotations

from abc import ABC, abstractmethod

from soilsense.llm.models import LLMResponse, Message


class BaseLLMClient(ABC):
    """Unified interface for all LLM providers."""

    @abstractmethod
    async def complete(
        self,
        messages: list[Message],
        system: str | None = None,
        max_tokens: int = 3000,
        temperature: float = 0.2,
    ) -> LLMResponse:
        """Text completion. Free-form text is returned as ``content``."""

    @property
    @abstractmethod
    def provider_name(self) -> str:
        """Provider identifier (openai, anthropic)."""

    @property
    @abstractmethod
    def model_name(self) -> str:
        """Model identifier sent to the provider."""
