from __future__ import annotations

import json
from typing import Any


class JsonExtractError(ValueError):
    """Raised when no JSON object can be recovered from a reply."""


class JsonExtractor:
    """Domain service for extracting JSON from LLM responses.

    Handles JSON objects wrapped in prose or markdown fences by slicing from
    the first '{' to the last '}'.
    """

    def extract(self, text: str) -> dict[str, Any]:
        """Extract and parse the JSON object embedded in text.

        Args:
            text: Raw reply potentially containing a JSON object

        Returns:
            The parsed object

        Raises:
            JsonExtractError: If no braces are found, the slice does not parse,
                or it parses to something other than an object
        """
        start = text.find('{')
        end = text.rfind('}')

        if start == -1 or end == -1 or end <= start:
            raise JsonExtractError("no JSON object found in response")

        try:
            parsed = json.loads(text[start:end + 1])
        except json.JSONDecodeError as e:
            raise JsonExtractError(f"invalid JSON: {e.msg} at position {e.pos}") from e

        if not isinstance(parsed, dict):
            raise JsonExtractError("response JSON is not an object")
        return parsed
