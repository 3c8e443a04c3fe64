from __future__ import annotations

import secrets
import time
from pathlib import Path
from typing import Protocol

from .domain.models import AnalysisRequest, ScanResult, WorkingDirectory


class WorkspacePort(Protocol):
    """Port for allocating and removing per-request working directories."""

    def create(self) -> WorkingDirectory:
        """Create a fresh, uniquely named directory."""
        ...

    def remove(self, workdir: WorkingDirectory) -> None:
        """Remove the directory and everything in it.

        Raises:
            CleanupWarning: If the directory could not be removed
        """
        ...


class RepositoryPort(Protocol):
    """Port for obtaining a local copy of the repository under analysis."""

    def validate(self, request: AnalysisRequest) -> None:
        """Reject unusable input before any directory is created.

        Raises:
            InvalidRequestError: If neither input is present or the archive is not a ZIP
        """
        ...

    def fetch(self, request: AnalysisRequest, target: Path) -> None:
        """Clone or extract the repository into ``target``.

        Raises:
            AcquisitionError: If cloning or extraction fails
        """
        ...


class FileWalkerPort(Protocol):
    def list_files(self, root: Path) -> list[Path]:
        """List source files under root in deterministic depth-first order."""
        ...


class ScannerRunnerPort(Protocol):
    def run(self, root: Path) -> ScanResult:
        """Run every configured scanner. Never raises."""
        ...


class LLMPort(Protocol):
    """Port for hosted chat-completion inference."""

    def call(
        self,
        *,
        system: str,
        user: str,
        temperature: float | None = None,
    ) -> str:
        """Send one system prompt + user message and return the reply text.

        Raises:
            ConfigurationError: If the API key is missing or rejected
        """
        ...


class TokenGeneratorPort(Protocol):
    def generate(self) -> str:
        ...


class ClockPort(Protocol):
    def now_iso(self) -> str:
        ...


class LoggerPort(Protocol):
    """Port for structured logging.

    Keyword arguments become structured fields on the emitted record.
    """

    def debug(self, message: str, **kwargs) -> None:
        ...

    def info(self, message: str, **kwargs) -> None:
        ...

    def warning(self, message: str, **kwargs) -> None:
        ...

    def error(self, message: str, exc_info: bool = False, **kwargs) -> None:
        ...

    def exception(self, message: str, **kwargs) -> None:
        ...


class DefaultTokenGenerator:
    def generate(self) -> str:
        return f"{int(time.time() * 1000)}-{secrets.token_hex(4)}"


class UTCClock:
    def now_iso(self) -> str:
        return time.strftime("%Y-%m-%dT%H:%M:%S", time.gmtime()) + "Z"
