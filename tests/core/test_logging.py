"""Unit tests for src/core/logging.py"""

import json

import pytest
import structlog

from src.core.logging import configure_logging


def test_json_output(restore_root_logging: None, capsys: pytest.CaptureFixture[str]) -> None:
    configure_logging(level="INFO", log_json=True)
    structlog.get_logger("src.test").info("job_admitted", job_id="abc", source="A1")

    lines = [line for line in capsys.readouterr().err.splitlines() if line.strip()]
    assert len(lines) == 1
    record = json.loads(lines[0])
    assert record["event"] == "job_admitted"
    assert record["job_id"] == "abc"
    assert record["source"] == "A1"
    assert record["level"] == "info"
    assert "timestamp" in record


def test_level_filtering(restore_root_logging: None, capsys: pytest.CaptureFixture[str]) -> None:
    configure_logging(level="warning", log_json=True)
    logger = structlog.get_logger("src.test")
    logger.info("not_shown")
    logger.warning("shown")

    err = capsys.readouterr().err
    assert "not_shown" not in err
    assert "shown" in err


def test_console_output(restore_root_logging: None, capsys: pytest.CaptureFixture[str]) -> None:
    configure_logging(level="DEBUG", log_json=False)
    structlog.get_logger("src.test").debug("result_cache_hit", job_id="abc")

    err = capsys.readouterr().err
    assert "result_cache_hit" in err
    assert "abc" in err
