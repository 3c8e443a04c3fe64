from __future__ import annotations

import logging

from pythonjsonlogger.json import JsonFormatter


class JSONFormatter(JsonFormatter):
    """JSON-lines formatter; structured fields arrive via logging ``extra``."""

    def add_fields(self, log_record: dict, record: logging.LogRecord, message_dict: dict) -> None:
        super().add_fields(log_record, record, message_dict)

        log_record['timestamp'] = self.formatTime(record, '%Y-%m-%dT%H:%M:%S')
        log_record['level'] = record.levelname
        log_record['logger'] = record.name
        log_record['message'] = record.getMessage()


class HumanReadableFormatter(logging.Formatter):
    """Console formatter: timestamp, level, event name and structured fields."""

    _RESERVED = frozenset(vars(logging.makeLogRecord({})).keys()) | {"message", "asctime", "taskName"}

    def __init__(self) -> None:
        super().__init__(
            fmt='%(asctime)s - %(levelname)s - %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        )

    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        fields = {
            k: v for k, v in vars(record).items()
            if k not in self._RESERVED and k != "type"
        }
        # prompts and raw replies are too long for a terminal
        shown = [f"{k}={v}" for k, v in fields.items() if not (isinstance(v, str) and len(v) > 200)]
        if shown:
            line = f"{line} ({', '.join(shown)})"
        return line
