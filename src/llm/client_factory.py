# src/llm/client_factory.py — v3
"""Factory: instantiate LLM client from provider name.

``create_client_for`` is what the pipeline calls: it resolves the provider
for a component and returns None when that provider has no credentials,
which switches the caller to its mock fallback.
"""

from __future__ import annotations

import importlib
import logging

from soilsense.config.settings import Settings
from soilsense.llm.base_client import BaseLLMClient
from soilsense.llm.config import resolve_llm

logger = logging.getLogger(__name__)

# Registry of provider name → adapter class path (lazy import).
_PROVIDER_REGISTRY: dict[str, str] = {
    "openai": "soilsense.llm.adapters.openai_adapter.OpenAIAdapter",
    "anthropic": "soilsense.llm.adapters.anthropic_adapter.AnthropicAdapter",
}


class UnsupportedProviderError(ValueError):
    """Raised when a provider is not registered."""


def create_llm_client(
    provider: str,
    model: str,
    settings: Settings | None = None,
    **kwargs: object,
) -> BaseLLMClient:
    """Instantiate the correct adapter from provider name.

    Args:
        provider: Provider identifier (openai, anthropic).
        model: Model name (e.g. gpt-4).
        settings: Application settings (for API keys and timeout).
        **kwargs: Additional provider-specific arguments.

    Raises:
        UnsupportedProviderError: If provider is not registered.
    """
    if provider not in _PROVIDER_REGISTRY:
        raise UnsupportedProviderError(
            f"Unsupported LLM provider: {provider!r}. "
            f"Available: {', '.join(sorted(_PROVIDER_REGISTRY))}"
        )

    adapter_cls = _import_class(_PROVIDER_REGISTRY[provider])

    init_kwargs = dict(kwargs)
    init_kwargs["model"] = model
    if settings is not None:
        init_kwargs.setdefault("api_key", settings.api_key_for(provider))
        init_kwargs.setdefault("timeout_s", settings.llm_request_timeout_s)

    logger.debug("Creating LLM client: provider=%s, model=%s", provider, model)
    return adapter_cls(**init_kwargs)


def create_client_for(component: str, settings: Settings) -> BaseLLMClient | None:
    """Client for a pipeline component, or None if no credentials are set."""
    assignment = resolve_llm(component, settings)
    if not settings.api_key_for(assignment.provider):
        logger.info(
            "No API key for provider %s; %s runs in mock mode",
            assignment.provider, component,
        )
        return None
    return create_llm_client(assignment.provider, assignment.model, settings)


def _import_class(class_path: str) -> type:
    """Dynamically import a class from its fully qualified path."""
    module_path, class_name = class_path.rsplit(".", 1)
    module = importlib.import_module(module_path)
    return getattr(module, class_name)
