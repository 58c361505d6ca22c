"""Backoff wrapper for LLM providers.

AI commands are interactive, so a rate limit or a dropped connection is
retried a few times before the error reaches the ``/api/ai/command``
handler. Anything that is not transient (bad request, auth failure,
unparseable reply) is raised on the first attempt.
"""

from __future__ import annotations

import logging
import time
from typing import Callable

import httpx
import openai

from scout.llm.base import LLMProvider, LLMResult

logger = logging.getLogger(__name__)

_TRANSIENT_STATUS = frozenset({408, 429, 500, 502, 503, 504})

_TRANSIENT_TYPES: tuple[type[Exception], ...] = (
    httpx.TransportError,
    openai.APIConnectionError,
    openai.RateLimitError,
    openai.InternalServerError,
    ConnectionError,
    TimeoutError,
)


def is_transient(exc: Exception) -> bool:
    """Return True if *exc* is worth another attempt."""
    if isinstance(exc, _TRANSIENT_TYPES):
        return True
    if isinstance(exc, httpx.HTTPStatusError):
        return exc.response.status_code in _TRANSIENT_STATUS
    if isinstance(exc, openai.APIStatusError):
        return exc.status_code in _TRANSIENT_STATUS
    return False


class RetryingLLMProvider(LLMProvider):
    """Delegate to another provider, retrying transient failures.

    Args:
        delegate: Provider doing the real work.
        max_retries: Extra attempts after the first call. ``0`` disables retry.
        base_delay: Seconds to wait before the first retry; doubles each time.
        max_delay: Upper bound for a single wait.
    """

    def __init__(
        self,
        delegate: LLMProvider,
        *,
        max_retries: int = 3,
        base_delay: float = 1.0,
        max_delay: float = 30.0,
    ) -> None:
        self._delegate = delegate
        self._max_retries = max(0, max_retries)
        self._base_delay = base_delay
        self._max_delay = max_delay

    @property
    def delegate(self) -> LLMProvider:
        return self._delegate

    def _backoff(self, retry: int) -> float:
        return min(self._base_delay * 2**retry, self._max_delay)

    def _attempt(self, call: Callable[[], LLMResult]) -> LLMResult:
        retry = 0
        while True:
            try:
                return call()
            except Exception as exc:
                if retry >= self._max_retries or not is_transient(exc):
                    raise
                delay = self._backoff(retry)
                retry += 1
                logger.warning(
                    "LLM call hit %s, retry %d of %d in %.1fs",
                    type(exc).__name__,
                    retry,
                    self._max_retries,
                    delay,
                )
                time.sleep(delay)

    def chat(
        self,
        messages: list[dict[str, str]],
        *,
        temperature: float | None = None,
        max_tokens: int | None = None,
        json_mode: bool = False,
    ) -> LLMResult:
        return self._attempt(
            lambda: self._delegate.chat(
                messages,
                temperature=temperature,
                max_tokens=max_tokens,
                json_mode=json_mode,
            )
        )

    def check_connectivity(self) -> bool:
        return self._delegate.check_connectivity()

    def close(self) -> None:
        self._delegate.close()
