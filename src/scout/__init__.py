"""Scout: drive an automated browser from a web UI, with optional LLM steering."""

from __future__ import annotations

try:
    from importlib.metadata import version

    __version__ = version("scout")
except Exception:
    __version__ = "0.0.0"
