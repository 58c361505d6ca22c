"""Browser anti-detection: stealth launch flags and init-script patches.

Builds the keyword arguments for Playwright's
``chromium.launch_persistent_context()`` so the shared browser looks like
an ordinary desktop Chrome:

- Launch flags that hide the ``AutomationControlled`` blink feature and
  the automation infobar
- A fixed, plausible fingerprint (viewport, locale, timezone, user-agent)
- Init-script patches for ``navigator.webdriver``, ``plugins`` and
  ``languages``

Usage::

    from scout.browser.stealth import build_launch_options, STEALTH_INIT_SCRIPT

    options = build_launch_options(settings)
    context = await pw.chromium.launch_persistent_context(**options.as_kwargs())
    await context.add_init_script(STEALTH_INIT_SCRIPT)
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from scout.settings.config import Settings

logger = logging.getLogger(__name__)

# Environment variables consulted (in order) for a system Chrome binary.
EXECUTABLE_PATH_ENV_VARS: tuple[str, ...] = ("PLAYWRIGHT_EXECUTABLE_PATH", "CHROME_PATH")

_SANDBOX_ARGS: list[str] = [
    "--no-sandbox",
    "--disable-setuid-sandbox",
]

STEALTH_LAUNCH_ARGS: list[str] = [
    "--disable-dev-shm-usage",
    "--disable-blink-features=AutomationControlled",
    "--disable-infobars",
    "--window-position=0,0",
    "--ignore-certificate-errors",
]

# Injected via context.add_init_script() so it runs in every frame before
# page scripts do.
STEALTH_INIT_SCRIPT: str = """
Object.defineProperty(navigator, 'webdriver', { get: () => false });
Object.defineProperty(navigator, 'plugins', { get: () => [1, 2, 3, 4, 5] });
Object.defineProperty(navigator, 'languages', { get: () => ['en-US', 'en'] });
"""


@dataclass
class LaunchOptions:
    """Arguments for a persistent-context launch of the shared browser."""

    user_data_dir: str
    headless: bool = True
    executable_path: str | None = None
    args: list[str] = field(default_factory=list)
    viewport: dict[str, int] = field(default_factory=dict)
    locale: str = ""
    timezone_id: str = ""
    user_agent: str = ""

    def as_kwargs(self) -> dict[str, Any]:
        """Return keyword arguments for ``launch_persistent_context``."""
        kwargs: dict[str, Any] = {
            "user_data_dir": self.user_data_dir,
            "headless": self.headless,
            "args": list(self.args),
            "ignore_https_errors": True,
        }
        if self.executable_path:
            kwargs["executable_path"] = self.executable_path
        if self.viewport:
            kwargs["viewport"] = dict(self.viewport)
        if self.locale:
            kwargs["locale"] = self.locale
        if self.timezone_id:
            kwargs["timezone_id"] = self.timezone_id
        if self.user_agent:
            kwargs["user_agent"] = self.user_agent
        return kwargs


def resolve_executable_path(explicit: str = "") -> str | None:
    """Return the first existing Chrome binary path, or ``None``.

    Checks *explicit* first, then each of ``EXECUTABLE_PATH_ENV_VARS``.
    ``None`` means Playwright's bundled Chromium is used.
    """
    candidates = [explicit] + [os.getenv(name, "") for name in EXECUTABLE_PATH_ENV_VARS]
    for candidate in candidates:
        if candidate and Path(candidate).exists():
            return candidate
    return None


def build_launch_args(*, sandbox: bool = False, extra: list[str] | None = None) -> list[str]:
    """Return the Chromium command-line flags for the shared browser."""
    args: list[str] = [] if sandbox else list(_SANDBOX_ARGS)
    args.extend(STEALTH_LAUNCH_ARGS)
    for flag in extra or []:
        if flag not in args:
            args.append(flag)
    return args


def build_launch_options(settings: "Settings") -> LaunchOptions:
    """Build ``LaunchOptions`` from the ``browser`` and ``stealth`` settings."""
    browser = settings.browser
    options = LaunchOptions(
        user_data_dir=browser.user_data_dir,
        headless=browser.headless,
        executable_path=resolve_executable_path(browser.executable_path),
        args=build_launch_args(sandbox=browser.sandbox, extra=settings.stealth.extra_launch_args),
        viewport={"width": browser.viewport_width, "height": browser.viewport_height},
        locale=browser.locale,
        timezone_id=browser.timezone_id,
        user_agent=browser.user_agent,
    )
    if options.executable_path:
        logger.debug("Using Chrome executable: %s", options.executable_path)
    return options
