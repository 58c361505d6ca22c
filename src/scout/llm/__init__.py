"""LLM provider abstraction for Scout.

Supports ``openai`` (OpenAI or any compatible endpoint) and ``ollama``
(local) backends through a unified interface.
"""

from scout.llm.base import LLMProvider, LLMResult
from scout.llm.factory import create_llm_provider

__all__ = ["LLMProvider", "LLMResult", "create_llm_provider"]
