from __future__ import annotations

import logging
from pathlib import Path

from dependency_injector.resources import Resource

from .handlers import build_json_file_handler, build_human_console_handler


class AnalysisLogger(Resource):
    """Structured logger for the analysis workflow.

    Keyword arguments passed to the logging methods become top-level fields of
    the JSON record. Writes to ``<logs_dir>/<log_file>`` and optionally to the
    console.
    """

    def init(
        self,
        *,
        logs_dir: Path | None = None,
        log_file: str | None = "vibecheckr.jsonl",
        logger_name: str = "vibecheckr",
        console_output: bool = False,
        level: str = "INFO",
    ) -> "AnalysisLogger":
        """Initialize logger.

        Args:
            logs_dir: Directory to store log files (no file output when None)
            log_file: JSONL file name inside logs_dir (no file output when empty)
            logger_name: Logger name
            console_output: Whether to enable console output
            level: Logging level (DEBUG, INFO, WARNING, ERROR)

        Returns:
            Self for dependency_injector Resource pattern
        """
        numeric_level = getattr(logging, level.upper())
        self._logger = logging.getLogger(logger_name)
        self._logger.setLevel(numeric_level)
        self._logger.propagate = False  # Don't propagate to root logger

        # Clear existing handlers
        self._logger.handlers.clear()
        self._handlers: list[logging.Handler] = []

        if logs_dir is not None and log_file:
            file_handler = build_json_file_handler(logs_dir / log_file, level=numeric_level)
            self._logger.addHandler(file_handler)
            self._handlers.append(file_handler)

        # Optionally add console handler (human-readable format)
        if console_output:
            console_handler = build_human_console_handler(level=numeric_level)
            self._logger.addHandler(console_handler)
            self._handlers.append(console_handler)

        return self

    def shutdown(self, resource: "AnalysisLogger") -> None:
        """Flush and close all handlers so log files are released."""
        for handler in self._handlers:
            handler.flush()
            handler.close()

        self._logger.handlers.clear()

    def debug(self, message: str, **kwargs) -> None:
        self._logger.debug(message, extra=kwargs or None)

    def info(self, message: str, **kwargs) -> None:
        self._logger.info(message, extra=kwargs or None)

    def warning(self, message: str, **kwargs) -> None:
        self._logger.warning(message, extra=kwargs or None)

    def error(self, message: str, exc_info: bool = False, **kwargs) -> None:
        """Log error message with optional extra fields and exception info."""
        self._logger.error(message, extra=kwargs or None, exc_info=exc_info)

    def exception(self, message: str, **kwargs) -> None:
        """Log exception with traceback and optional extra fields."""
        self._logger.exception(message, extra=kwargs or None)
