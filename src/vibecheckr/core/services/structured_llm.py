from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ValidationError

from ..domain.exceptions import InvalidResponseError
from ..domain.prompt import build_json_fix_prompt
from ..ports import LLMPort, LoggerPort
from .json_extractor import JsonExtractError, JsonExtractor


class StructuredLLM:
    """Calls the LLM and returns a validated JSON object.

    A reply that does not parse, or does not match the expected model,
    triggers exactly one corrective call. A second failure raises
    InvalidResponseError.
    """

    def __init__(
        self,
        *,
        llm: LLMPort,
        logger: LoggerPort,
        json_extractor: JsonExtractor,
        temperature: float = 0.1,
    ) -> None:
        self._llm = llm
        self._logger = logger
        self._json_extractor = json_extractor
        self._temperature = temperature

    def request(
        self,
        *,
        stage: str,
        system: str,
        user: str,
        expect: type[BaseModel],
    ) -> dict[str, Any]:
        raw_text = self._llm.call(system=system, user=user, temperature=self._temperature)
        try:
            return self._parse(raw_text, expect)
        except ValueError as first_error:
            self._logger.warning(
                "llm_json_retry",
                type="llm_json_retry",
                stage=stage,
                problem=str(first_error),
                raw_text_len=len(raw_text),
            )
            problem = str(first_error)

        fix_prompt = build_json_fix_prompt(user, raw_text, problem)
        retry_text = self._llm.call(system=system, user=fix_prompt, temperature=0.0)
        try:
            return self._parse(retry_text, expect)
        except ValueError as e:
            raise InvalidResponseError(stage, f"invalid JSON after retry: {e}", raw_text=retry_text) from e

    def _parse(self, text: str, expect: type[BaseModel]) -> dict[str, Any]:
        parsed = self._json_extractor.extract(text)
        try:
            expect.model_validate(parsed)
        except ValidationError as e:
            raise JsonExtractError(f"does not match {expect.__name__}: {e.error_count()} field error(s)") from e
        return parsed
