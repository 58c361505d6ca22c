"""Natural-language command handling for the browser."""

from scout.assistant.commander import BrowserCommander, build_command_prompt, parse_command_reply

__all__ = ["BrowserCommander", "build_command_prompt", "parse_command_reply"]
