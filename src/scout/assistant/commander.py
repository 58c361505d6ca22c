"""Natural-language browser commands.

Turns a user instruction plus the current page context into a short
reply and, optionally, one suggested ``BrowserActionRequest``. The
suggestion is only returned, never executed here: the UI decides whether
to send it to ``/api/browser/action``.
"""

from __future__ import annotations

import json
import logging
from typing import Any

from pydantic import ValidationError

from scout.exceptions import LLMResponseError
from scout.llm.base import LLMProvider
from scout.models.browser import BrowserActionRequest, BrowserState, ChatRequest, ChatResponse

logger = logging.getLogger(__name__)

_COMMAND_PROMPT = """\
You are controlling a browser.
Current URL: {url}
Current Title: {title}
User Request: "{message}"

Determine the next best action.
Return a JSON object with:
- message: A short response to the user.
- action: (Optional) The action to perform.
  - action: "navigate" | "click" | "type" | "scroll" | "back" | "reload"
  - url: (if navigate)
  - selector: (if click/type)
  - text: (if type)
"""


def build_command_prompt(message: str, context: BrowserState | None = None) -> str:
    """Render the instruction prompt for *message* on the page in *context*."""
    return _COMMAND_PROMPT.format(
        url=(context.url if context and context.url else "none"),
        title=(context.title if context and context.title else "none"),
        message=message,
    )


def parse_command_reply(content: str) -> ChatResponse:
    """Parse the LLM's JSON reply into a ``ChatResponse``.

    Tolerates markdown code fences. A suggested action that does not
    validate is dropped and the message kept.

    Raises:
        LLMResponseError: If the reply is not a JSON object with a
            non-empty ``message``.
    """
    content = content.strip()
    if content.startswith("```"):
        # Remove opening fence (```json or ```)
        content = content.split("\n", 1)[-1] if "\n" in content else content[3:]
    if content.endswith("```"):
        content = content[:-3]
    content = content.strip()

    try:
        data: Any = json.loads(content)
    except json.JSONDecodeError as exc:
        logger.warning("Failed to parse LLM reply as JSON: %s", content[:200])
        raise LLMResponseError("AI reply was not valid JSON") from exc

    if not isinstance(data, dict):
        raise LLMResponseError("AI reply was not a JSON object")

    message = data.get("message")
    if not isinstance(message, str) or not message.strip():
        raise LLMResponseError("AI reply had no message")

    action: BrowserActionRequest | None = None
    raw_action = data.get("action")
    if isinstance(raw_action, dict):
        try:
            action = BrowserActionRequest.model_validate(raw_action)
        except ValidationError as exc:
            logger.warning("Dropping invalid suggested action %s: %s", raw_action, exc.errors()[0]["msg"])
    elif raw_action is not None:
        logger.warning("Dropping non-object suggested action: %r", raw_action)

    return ChatResponse(message=message, action=action)


class BrowserCommander:
    """Ask an LLM what to do next in the browser.

    Args:
        llm: The provider used for completions.
    """

    def __init__(self, llm: LLMProvider) -> None:
        self.llm = llm

    @classmethod
    def from_settings(cls) -> "BrowserCommander":
        """Create a commander using the configured LLM provider."""
        from scout.llm.factory import create_llm_provider

        return cls(create_llm_provider())

    def command(self, request: ChatRequest) -> ChatResponse:
        """Answer *request* with a reply and an optional suggested action."""
        prompt = build_command_prompt(request.message, request.context)
        result = self.llm.chat([{"role": "user", "content": prompt}], json_mode=True)
        logger.debug(
            "AI command answered by %s in %.0fms (%d in / %d out tokens)",
            result.model,
            result.latency_ms,
            result.input_tokens,
            result.output_tokens,
        )
        return parse_command_reply(result.content)

    def close(self) -> None:
        self.llm.close()
