from __future__ import annotations

from openai import OpenAI

from .types import LLMResponse, TokenUsage


class OpenAIChatAdapter:
    """OpenAI Responses API adapter (gpt-4o, o-series, etc.).

    - The system prompt goes into ``instructions``, the user message into ``input``
    - No tools, no stored conversation state
    """

    def __init__(self, model: str, api_key: str) -> None:
        self.model = model
        self._client = OpenAI(api_key=api_key)

    def complete(
        self,
        system: str,
        user: str,
        *,
        temperature: float,
        max_output_tokens: int = 4000,
    ) -> LLMResponse:
        response = self._client.responses.create(
            model=self.model,
            instructions=system,
            input=user,
            temperature=temperature,
            max_output_tokens=max_output_tokens,
            store=False,
        )
        usage = None
        u = response.usage
        if u is not None:
            iu = u.input_tokens
            ou = u.output_tokens
            tt = u.total_tokens if u.total_tokens is not None else (iu or 0) + (ou or 0)
            usage = TokenUsage(input_tokens=iu, output_tokens=ou, total_tokens=tt)
        return LLMResponse(text=response.output_text or "", usage=usage)
