from .types import Provider, TokenUsage, LLMResponse
from .interface import LLMChatAdapter
from .openai_adapter import OpenAIChatAdapter
from .anthropic_adapter import AnthropicChatAdapter
from .factory import get_adapter

__all__ = [
    "Provider",
    "TokenUsage",
    "LLMResponse",
    "LLMChatAdapter",
    "OpenAIChatAdapter",
    "AnthropicChatAdapter",
    "get_adapter",
]
