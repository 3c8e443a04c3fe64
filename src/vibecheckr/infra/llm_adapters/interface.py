from __future__ import annotations

from typing import Protocol, runtime_checkable

from .types import LLMResponse


@runtime_checkable
class LLMChatAdapter(Protocol):
    """Minimal interface for one system + user chat completion."""

    def complete(
        self,
        system: str,
        user: str,
        *,
        temperature: float,
        max_output_tokens: int = 4000,
    ) -> LLMResponse:
        """Send a single-turn request and return normalized text + token usage."""
        raise NotImplementedError
