"""Resilient page navigation with automatic wait-strategy fallback.

Wraps Playwright's ``page.goto`` with a staged strategy: try the
configured ``wait_until`` first, then fall back to progressively weaker
load states on timeout. Network failures that no wait strategy can fix
(DNS, refused connection, TLS) surface immediately as ``NavigationError``.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Literal

from playwright.async_api import Error as PlaywrightError, TimeoutError as PlaywrightTimeout

from scout.exceptions import NavigationError

if TYPE_CHECKING:
    from playwright.async_api import Page, Response

logger = logging.getLogger(__name__)

# Playwright error substrings that indicate non-retryable navigation failures.
_NON_RETRYABLE_ERRORS: tuple[str, ...] = (
    "ERR_NAME_NOT_RESOLVED",
    "ERR_CONNECTION_REFUSED",
    "ERR_CONNECTION_RESET",
    "ERR_CONNECTION_CLOSED",
    "ERR_SSL_PROTOCOL_ERROR",
    "ERR_CERT_AUTHORITY_INVALID",
    "ERR_CERT_COMMON_NAME_INVALID",
    "ERR_ADDRESS_UNREACHABLE",
    "ERR_INVALID_URL",
)

WaitUntil = Literal["commit", "domcontentloaded", "load", "networkidle"]

_FALLBACK_STRATEGY: list[WaitUntil] = ["networkidle", "load", "domcontentloaded"]


def normalize_url(url: str) -> str:
    """Return *url* with an ``https://`` scheme when it has none.

    ``about:``, ``data:``, ``file:`` and ``chrome:`` URLs pass through.
    """
    url = url.strip()
    if "://" in url or url.startswith(("about:", "data:", "file:", "chrome:", "javascript:")):
        return url
    return f"https://{url}"


async def resilient_goto(
    page: "Page",
    url: str,
    *,
    timeout_ms: int = 30_000,
    wait_until: WaitUntil = "domcontentloaded",
) -> "Response | None":
    """Navigate to *url* with automatic wait-strategy fallback.

    Tries *wait_until* first. If that times out, retries with the weaker
    strategies that follow it in ``networkidle → load → domcontentloaded``,
    using the same timeout for each attempt.

    Args:
        page: Playwright page instance.
        url: Target URL to navigate to.
        timeout_ms: Timeout per attempt in milliseconds.
        wait_until: Preferred initial wait strategy.

    Returns:
        The Playwright ``Response`` for the main frame navigation,
        or ``None`` if the page did not produce a response.

    Raises:
        NavigationError: On a non-retryable network failure.
        PlaywrightTimeout: If all fallback strategies time out.
    """
    strategies = _build_fallback_chain(wait_until)

    last_error: PlaywrightTimeout | None = None
    for strategy in strategies:
        try:
            logger.debug("goto %s (wait_until=%s, timeout=%dms)", url, strategy, timeout_ms)
            return await page.goto(url, wait_until=strategy, timeout=timeout_ms)
        except PlaywrightError as exc:
            _raise_if_non_retryable(url, exc)
            if isinstance(exc, PlaywrightTimeout):
                logger.warning(
                    "Navigation to %s timed out with wait_until=%s, retrying with weaker strategy",
                    url,
                    strategy,
                )
                last_error = exc
            else:
                raise

    raise last_error  # type: ignore[misc]


def _raise_if_non_retryable(url: str, exc: Exception) -> None:
    error_msg = str(exc)
    for pattern in _NON_RETRYABLE_ERRORS:
        if pattern in error_msg:
            reason = pattern.replace("ERR_", "").replace("_", " ").lower()
            logger.warning("Navigation to %s failed (non-retryable): %s", url, pattern)
            raise NavigationError(url, reason) from exc


def _build_fallback_chain(preferred: str) -> list[WaitUntil]:
    """Return the fallback chain starting from *preferred*.

    If *preferred* is in the default chain, returns from that point onward.
    Otherwise returns ``[preferred]`` followed by the full default chain.
    """
    if preferred in _FALLBACK_STRATEGY:
        idx = _FALLBACK_STRATEGY.index(preferred)  # type: ignore[arg-type]
        return _FALLBACK_STRATEGY[idx:]
    return [preferred, *_FALLBACK_STRATEGY]  # type: ignore[list-item]
