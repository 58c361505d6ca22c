"""Ollama chat provider, for running Scout's assistant against a local model."""

from __future__ import annotations

import logging
import time
from typing import Any

import httpx

from scout.llm.base import LLMProvider, LLMResult

logger = logging.getLogger(__name__)


class OllamaProvider(LLMProvider):
    """Talks to an Ollama server's ``/api/chat`` endpoint (non-streaming).

    Args:
        base_url: Server root, e.g. ``http://localhost:11434``.
        model: Tag of a pulled model, e.g. ``llama3.1`` or ``llama3.1:8b``.
        temperature: Sampling temperature used when a call does not override it.
        max_tokens: Generation cap (Ollama's ``num_predict``).
        client: HTTP client to use; tests pass one with a mock transport.
    """

    def __init__(
        self,
        base_url: str = "http://localhost:11434",
        model: str = "llama3.1",
        temperature: float = 0.2,
        max_tokens: int = 1024,
        *,
        client: httpx.Client | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.model = model
        self.temperature = temperature
        self.max_tokens = max_tokens
        self._client = client or httpx.Client(base_url=self.base_url, timeout=120.0)

    def _url(self, path: str) -> str:
        return f"{self.base_url}{path}"

    def _payload(
        self,
        messages: list[dict[str, str]],
        temperature: float | None,
        max_tokens: int | None,
        json_mode: bool,
    ) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "model": self.model,
            "messages": messages,
            "stream": False,
            "options": {
                "temperature": self.temperature if temperature is None else temperature,
                "num_predict": self.max_tokens if max_tokens is None else max_tokens,
            },
        }
        if json_mode:
            # Ollama constrains decoding to valid JSON when format is set.
            payload["format"] = "json"
        return payload

    def chat(
        self,
        messages: list[dict[str, str]],
        *,
        temperature: float | None = None,
        max_tokens: int | None = None,
        json_mode: bool = False,
    ) -> LLMResult:
        payload = self._payload(messages, temperature, max_tokens, json_mode)
        started = time.monotonic()
        try:
            resp = self._client.post(self._url("/api/chat"), json=payload)
            resp.raise_for_status()
        except httpx.HTTPStatusError as exc:
            logger.error("Ollama returned %d: %s", exc.response.status_code, exc.response.text[:300])
            raise
        except httpx.TransportError as exc:
            logger.error("Ollama unreachable at %s: %s", self.base_url, exc)
            raise

        body = resp.json()
        return LLMResult(
            content=(body.get("message") or {}).get("content", ""),
            input_tokens=body.get("prompt_eval_count", 0),
            output_tokens=body.get("eval_count", 0),
            latency_ms=(time.monotonic() - started) * 1000,
            model=body.get("model") or self.model,
            raw_response=body,
        )

    def check_connectivity(self) -> bool:
        """True when the server answers and a tag of ``self.model`` is pulled."""
        try:
            resp = self._client.get(self._url("/api/tags"))
            resp.raise_for_status()
        except httpx.HTTPError as exc:
            logger.warning("Ollama connectivity check failed: %s", exc)
            return False
        family = self.model.split(":")[0]
        return any(m.get("name", "").split(":")[0] == family for m in resp.json().get("models", []))

    def close(self) -> None:
        self._client.close()
