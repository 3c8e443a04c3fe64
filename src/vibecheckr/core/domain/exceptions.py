"""Domain exceptions for vibecheckr."""

from __future__ import annotations


class VibeCheckrError(Exception):
    """Base class for all errors raised by the analysis pipeline."""


class AcquisitionError(VibeCheckrError):
    """Raised when the repository cannot be cloned or extracted.

    Covers unreachable remotes, clone timeouts and extraction failures.
    Surfaced to HTTP callers as a 500.
    """

    def __init__(self, message: str, details: str | None = None) -> None:
        self.message = message
        self.details = details if details is not None else message
        super().__init__(message)


class InvalidRequestError(AcquisitionError):
    """Raised when the caller supplied unusable input.

    Neither a URL nor an archive, or an archive that is not a ZIP.
    Surfaced to HTTP callers as a 400.
    """


class ScannerUnavailable(VibeCheckrError):
    """Raised by a single scanner that could not contribute results."""

    def __init__(self, tool: str, reason: str) -> None:
        self.tool = tool
        self.reason = reason
        super().__init__(f"{tool} unavailable: {reason}")


class InvalidResponseError(VibeCheckrError):
    """Raised when an LLM reply is still not valid JSON after one correction."""

    def __init__(self, stage: str, message: str, raw_text: str | None = None) -> None:
        self.stage = stage
        self.raw_text = raw_text
        super().__init__(f"{stage}: {message}")


class ConfigurationError(VibeCheckrError):
    """Raised when the LLM provider credentials are missing or rejected."""


class CleanupWarning(VibeCheckrError):
    """Raised when a working directory could not be removed."""

    def __init__(self, path: str, reason: str) -> None:
        self.path = path
        super().__init__(f"failed to remove {path}: {reason}")
