from __future__ import annotations

import anthropic

from .types import LLMResponse, TokenUsage


class AnthropicChatAdapter:
    """Anthropic Messages API adapter (Claude Sonnet, etc.)."""

    def __init__(self, model: str, api_key: str) -> None:
        self.model = model
        self._client = anthropic.Anthropic(api_key=api_key)

    def complete(
        self,
        system: str,
        user: str,
        *,
        temperature: float,
        max_output_tokens: int = 4000,
    ) -> LLMResponse:
        message = self._client.messages.create(
            model=self.model,
            max_tokens=max_output_tokens,
            temperature=temperature,
            system=system,
            messages=[{"role": "user", "content": user}],
        )
        # message.content is a list of content blocks; we only join text blocks
        texts: list[str] = []
        for block in message.content:
            if getattr(block, "type", None) == "text":
                texts.append(block.text)
        u = message.usage
        iu = u.input_tokens if u is not None else None
        ou = u.output_tokens if u is not None else None
        tt = (iu or 0) + (ou or 0) if (iu is not None or ou is not None) else None
        usage = TokenUsage(input_tokens=iu, output_tokens=ou, total_tokens=tt)
        return LLMResponse(text="".join(texts), usage=usage)
