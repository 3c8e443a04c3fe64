from __future__ import annotations

from .anthropic_adapter import AnthropicChatAdapter
from .interface import LLMChatAdapter
from .openai_adapter import OpenAIChatAdapter


def get_adapter(provider: str, model: str, api_key: str) -> LLMChatAdapter:
    """Factory that returns an adapter for the requested provider/model."""
    if provider == "openai":
        return OpenAIChatAdapter(model, api_key)
    if provider == "anthropic":
        return AnthropicChatAdapter(model, api_key)
    raise ValueError("provider must be 'openai' or 'anthropic'")
