from __future__ import annotations

import anthropic
import openai

from .llm_adapters import LLMChatAdapter, get_adapter
from ..core.domain.exceptions import ConfigurationError
from ..core.ports import LoggerPort


PLACEHOLDER_API_KEYS = frozenset({
    "",
    "your_api_key_here",
    "your_anthropic_api_key_here",
    "your_openai_api_key_here",
})


def is_placeholder_key(api_key: str | None) -> bool:
    return api_key is None or api_key.strip() in PLACEHOLDER_API_KEYS


class LLM:
    def __init__(
        self,
        *,
        provider: str,
        model: str,
        api_key: str | None,
        logger: LoggerPort,
        temperature: float = 0.1,
        max_output_tokens: int = 4000,
    ) -> None:
        self._provider = provider
        self._model = model
        self._api_key = api_key
        self._logger = logger
        self._temperature = temperature
        self._max_output_tokens = max_output_tokens
        self._adapter: LLMChatAdapter | None = None

    def _get_adapter(self) -> LLMChatAdapter:
        if is_placeholder_key(self._api_key):
            raise ConfigurationError(
                f"No API key configured for provider {self._provider!r}; "
                "set VIBECHECKR_LLM__API_KEY"
            )
        if self._adapter is None:
            self._adapter = get_adapter(self._provider, self._model, self._api_key or "")
        return self._adapter

    def call(
        self,
        *,
        system: str,
        user: str,
        temperature: float | None = None,
    ) -> str:
        temperature = self._temperature if temperature is None else temperature
        adapter = self._get_adapter()

        # Log LLM input with provider/model info
        self._logger.info(
            "llm_input",
            type="llm_input",
            provider=self._provider,
            model=self._model,
            temperature=temperature,
            prompt_len=len(user),
            prompt=user,
        )

        try:
            resp = adapter.complete(
                system,
                user,
                temperature=temperature,
                max_output_tokens=self._max_output_tokens,
            )
        except (anthropic.AuthenticationError, openai.AuthenticationError) as e:
            raise ConfigurationError(f"{self._provider} rejected the configured API key") from e
        text = resp.text

        # Log token usage
        usage = resp.usage
        if usage is not None:
            self._logger.info(
                "llm_usage",
                type="llm_usage",
                provider=self._provider,
                model=self._model,
                input_tokens=usage.input_tokens,
                output_tokens=usage.output_tokens,
                total_tokens=usage.total_tokens,
            )

        # Log LLM output
        self._logger.info(
            "llm_output",
            type="llm_output",
            provider=self._provider,
            model=self._model,
            raw_text_len=len(text),
            raw_text=text,
        )

        return text
