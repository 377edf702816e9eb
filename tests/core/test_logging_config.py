# tests/core/test_logging_config.py
import json
import logging

import pytest

from src.core.logging_config import LOG_FORMAT, JourneyJsonFormatter, setup_logging


def make_record(message="Session saved", **extra):
    record = logging.LogRecord("services.journey_engine.store", logging.INFO, __file__, 42, message, None, None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record

def test_formatter_emits_json_with_service_and_session():
    line = JourneyJsonFormatter(LOG_FORMAT).format(make_record(session_id="abc-123"))
    payload = json.loads(line)

    assert payload["message"] == "Session saved"
    assert payload["level"] == "INFO"
    assert payload["service"] == "journey-engine"
    assert payload["session_id"] == "abc-123"
    assert payload["location"].endswith(":42")

def test_formatter_without_session_id():
    payload = json.loads(JourneyJsonFormatter(LOG_FORMAT, service="worker").format(make_record()))
    assert payload["service"] == "worker"
    assert "session_id" not in payload

@pytest.fixture
def restore_root_logger():
    root_logger = logging.getLogger()
    handlers, level = list(root_logger.handlers), root_logger.level
    yield root_logger
    root_logger.handlers = handlers
    root_logger.setLevel(level)

def test_setup_logging_installs_handler_once(restore_root_logger):
    first = setup_logging("DEBUG")
    second = setup_logging("warning")

    assert first is second
    assert restore_root_logger.level == logging.WARNING
    json_handlers = [h for h in restore_root_logger.handlers if isinstance(h.formatter, JourneyJsonFormatter)]
    assert json_handlers == [first]
