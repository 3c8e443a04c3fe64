"""Tests for AnalysisLogger and formatters."""
import json
import logging

from vibecheckr.infra.logging import AnalysisLogger, HumanReadableFormatter


def test_json_file_receives_structured_fields(tmp_path):
    logger = AnalysisLogger()
    logger.init(logs_dir=tmp_path, log_file="run.jsonl", logger_name="vibecheckr.test.file")

    logger.info("repo_acquired", type="repo_acquired", request_id="123-abcd", extracted=4)
    logger.shutdown(logger)

    lines = (tmp_path / "run.jsonl").read_text(encoding="utf-8").splitlines()
    record = json.loads(lines[-1])
    assert record["message"] == "repo_acquired"
    assert record["level"] == "INFO"
    assert record["request_id"] == "123-abcd"
    assert record["extracted"] == 4


def test_level_filters_debug(tmp_path):
    logger = AnalysisLogger()
    logger.init(logs_dir=tmp_path, log_file="run.jsonl", logger_name="vibecheckr.test.level", level="WARNING")

    logger.info("ignored")
    logger.warning("kept", reason="x")
    logger.shutdown(logger)

    messages = [json.loads(l)["message"] for l in (tmp_path / "run.jsonl").read_text(encoding="utf-8").splitlines()]
    assert messages == ["kept"]


def test_no_file_without_logs_dir(tmp_path):
    logger = AnalysisLogger()
    logger.init(logs_dir=None, logger_name="vibecheckr.test.nofile")

    logger.info("nothing")
    logger.shutdown(logger)

    assert list(tmp_path.iterdir()) == []


def test_human_formatter_appends_short_fields():
    record = logging.makeLogRecord({
        "msg": "scan_completed",
        "levelname": "INFO",
        "levelno": logging.INFO,
        "issues": 2,
        "prompt": "x" * 500,
    })

    line = HumanReadableFormatter().format(record)

    assert "scan_completed" in line
    assert "issues=2" in line
    assert "prompt=" not in line
