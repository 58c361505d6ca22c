"""Factory for creating LLM provider instances from Scout settings."""

from __future__ import annotations

import logging

from scout.llm.base import LLMProvider

logger = logging.getLogger(__name__)


def create_llm_provider(provider: str | None = None) -> LLMProvider:
    """Create an LLM provider from settings or an explicit provider name.

    The returned provider is wrapped with ``RetryingLLMProvider`` for
    resilience against transient errors.

    Args:
        provider: Override provider name (``openai`` or ``ollama``).
            If None, reads from ``get_settings().llm.provider``.

    Returns:
        A configured ``LLMProvider`` instance (with retry wrapper).

    Raises:
        ValueError: If the provider name is not recognized.
    """
    from scout.settings import get_settings

    llm = get_settings().llm
    provider_name = (provider or llm.provider).lower().strip()

    base: LLMProvider

    if provider_name == "openai":
        from scout.llm.openai_provider import OpenAIProvider

        base = OpenAIProvider(
            model=llm.model,
            api_key=llm.api_key,
            base_url=llm.base_url,
            temperature=llm.temperature,
            max_tokens=llm.max_tokens,
        )

    elif provider_name == "ollama":
        from scout.llm.ollama_provider import OllamaProvider

        base = OllamaProvider(
            base_url=llm.ollama_base_url,
            model=llm.model,
            temperature=llm.temperature,
            max_tokens=llm.max_tokens,
        )

    else:
        raise ValueError(
            f"Unknown LLM provider: {provider_name!r}. "
            f"Supported: openai, ollama"
        )

    logger.info("Created LLM provider: provider=%s model=%s", provider_name, llm.model)

    from scout.llm.retry import RetryingLLMProvider

    return RetryingLLMProvider(base, max_retries=llm.max_retries, base_delay=1.0)
