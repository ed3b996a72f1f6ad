"""
Unit tests for `config/logging_config.py`.
"""

import json
import logging

from config.logging_config import ContextDefaultsFilter, StructuredLogFormatter, get_logger


def make_record(**extra):
    record = logging.LogRecord("core.orchestrator", logging.INFO, __file__, 1, "Processing %s", ("x",), None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


def test_formatter_emits_json_with_context():
    record = make_record(session_id="s-1", interaction_id="i-1", extra_fields={"engine": "mock"})

    payload = json.loads(StructuredLogFormatter().format(record))

    assert payload["message"] == "Processing x"
    assert payload["session_id"] == "s-1"
    assert payload["interaction_id"] == "i-1"
    assert payload["engine"] == "mock"


def test_filter_fills_missing_context():
    record = make_record()

    assert ContextDefaultsFilter().filter(record) is True
    assert record.session_id == "no_session"
    assert record.interaction_id == "no_id"


def test_get_logger_binds_given_context_only():
    adapter = get_logger("core.orchestrator", session_id="s-1", interaction_id=None)

    assert adapter.extra == {"session_id": "s-1", "interaction_id": "no_id"}
