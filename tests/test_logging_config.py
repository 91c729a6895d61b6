"""Tests for logging setup"""

import json
import logging

from healthwatch import logging_config
from healthwatch.config import LoggingConfig
from healthwatch.logging_config import get_logger, setup_logging


def test_setup_is_idempotent():
    """Test repeated setup keeps a single handler"""
    setup_logging()
    before = list(logging.getLogger().handlers)

    setup_logging()
    setup_logging()

    assert logging.getLogger().handlers == before


def test_file_output(tmp_path):
    """Test JSON events land in the configured file"""
    log_file = tmp_path / "healthwatch.log"
    try:
        setup_logging(LoggingConfig(output=str(log_file), format="json"), force=True)
        get_logger("healthwatch.tests.file_output").info("Report stored", village="Pawanpur")
        logging_config._handler.flush()
        entry = json.loads(log_file.read_text(encoding="utf-8").strip().splitlines()[-1])
    finally:
        setup_logging(force=True)

    assert entry["event"] == "Report stored"
    assert entry["village"] == "Pawanpur"
    assert entry["level"] == "info"
    assert entry["service"] == "healthwatch"


def test_reconfigure_closes_previous_file(tmp_path):
    """Test forcing a new configuration releases the old log file"""
    setup_logging(LoggingConfig(output=str(tmp_path / "old.log")), force=True)
    old_handler = logging_config._handler

    setup_logging(force=True)

    assert old_handler not in logging.getLogger().handlers
    assert old_handler.stream is None
