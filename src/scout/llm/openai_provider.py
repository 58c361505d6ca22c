"""OpenAI LLM provider for Scout.

Uses the official ``openai`` SDK. Setting ``SCOUT_LLM__BASE_URL`` points
it at any OpenAI-compatible endpoint (Azure, vLLM, LM Studio, a proxy).
"""

from __future__ import annotations

import logging
import time

from openai import OpenAI, OpenAIError

from scout.llm.base import LLMProvider, LLMResult

logger = logging.getLogger(__name__)


class OpenAIProvider(LLMProvider):
    """LLM provider backed by the OpenAI chat completions API.

    Args:
        model: Model name (e.g. ``gpt-4o-mini``).
        api_key: API key. Empty falls back to ``OPENAI_API_KEY``.
        base_url: Optional endpoint override.
        temperature: Default sampling temperature.
        max_tokens: Default max output tokens.
        client: Optional pre-built ``OpenAI`` client.
    """

    def __init__(
        self,
        model: str = "gpt-4o-mini",
        api_key: str = "",
        base_url: str = "",
        temperature: float = 0.2,
        max_tokens: int = 1024,
        *,
        client: OpenAI | None = None,
    ) -> None:
        self.model = model
        self.temperature = temperature
        self.max_tokens = max_tokens
        if client is None:
            # The SDK reads OPENAI_API_KEY / OPENAI_BASE_URL when these are None.
            client = OpenAI(api_key=api_key or None, base_url=base_url or None, max_retries=0)
        self._client = client

    def chat(
        self,
        messages: list[dict[str, str]],
        *,
        temperature: float | None = None,
        max_tokens: int | None = None,
        json_mode: bool = False,
    ) -> LLMResult:
        """Send a chat completion request to OpenAI."""
        kwargs: dict = {
            "model": self.model,
            "messages": messages,
            "temperature": temperature if temperature is not None else self.temperature,
            "max_tokens": max_tokens if max_tokens is not None else self.max_tokens,
        }
        if json_mode:
            kwargs["response_format"] = {"type": "json_object"}

        start = time.monotonic()
        try:
            completion = self._client.chat.completions.create(**kwargs)
        except OpenAIError as e:
            logger.error("OpenAI request failed: %s", e)
            raise
        latency_ms = (time.monotonic() - start) * 1000

        content = completion.choices[0].message.content if completion.choices else ""
        usage = completion.usage
        return LLMResult(
            content=content or "",
            input_tokens=usage.prompt_tokens if usage else 0,
            output_tokens=usage.completion_tokens if usage else 0,
            latency_ms=latency_ms,
            model=completion.model or self.model,
            raw_response=completion.model_dump(),
        )

    def check_connectivity(self) -> bool:
        """Return ``True`` if the API answers and the model exists."""
        try:
            self._client.models.retrieve(self.model)
            return True
        except OpenAIError:
            return False

    def close(self) -> None:
        self._client.close()
