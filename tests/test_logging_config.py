"""
Tests for base logger setup with structlog.
"""

import io
import json
import logging

import pytest

from contextlog.logging_config import configure_logging, reset_logging
from contextlog.manager import LogManager


def json_lines(stream):
    return [json.loads(line) for line in stream.getvalue().splitlines() if line]


@pytest.fixture
def stream():
    """Capture log output and restore logging defaults afterwards."""
    buffer = io.StringIO()
    yield buffer
    reset_logging()


class TestConfigureLogging:
    """Test suite for configure_logging."""

    def test_json_output_format(self, stream):
        logger = configure_logging(json_output=True, stream=stream)

        logger.info("json_test_message", test_field="test_value")

        last_log = json_lines(stream)[-1]
        assert last_log['event'] == "json_test_message"
        assert last_log['test_field'] == 'test_value'
        assert last_log['level'] == 'info'
        assert 'timestamp' in last_log

    def test_console_output(self, stream):
        logger = configure_logging(stream=stream)

        logger.info("console_message")

        assert "console_message" in stream.getvalue()

    def test_log_level_filtering(self, stream):
        logger = configure_logging(level="WARNING", stream=stream)

        logger.info("info_message_filtered")
        logger.warning("warning_message_visible")

        content = stream.getvalue()
        assert "info_message_filtered" not in content
        assert "warning_message_visible" in content

    def test_custom_processors_run_first(self, stream):
        def add_service(logger, name, event_dict):
            event_dict['service'] = 'billing'
            return event_dict

        logger = configure_logging(json_output=True, stream=stream, processors=[add_service])

        logger.info("with_service")

        assert json_lines(stream)[-1]['service'] == 'billing'

    def test_logger_name(self, stream):
        logger = configure_logging(json_output=True, stream=stream, logger_name="importer")

        logger.info("named")

        assert json_lines(stream)[-1]['logger'] == 'importer'

    def test_reconfigure_replaces_handler(self, stream):
        first = io.StringIO()
        configure_logging(stream=first)
        logger = configure_logging(stream=stream)

        logger.warning("only_in_second_stream")

        assert "only_in_second_stream" not in first.getvalue()
        assert "only_in_second_stream" in stream.getvalue()

    def test_reset_logging(self, stream):
        configure_logging(level="DEBUG", stream=stream)

        reset_logging()

        root_logger = logging.getLogger()
        assert root_logger.level == logging.WARNING
        assert not [h for h in root_logger.handlers if getattr(h, 'stream', None) is stream]


class TestLogManagerOverStructlog:
    """LogManager using a configured structlog logger as its base logger."""

    def test_lines_written_as_json_events(self, stream):
        base = configure_logging(level="INFO", json_output=True, stream=stream)
        manager = LogManager({'job_id': 'j-1'}, logger=base)

        manager.info("started")
        manager.debug("filtered out")
        manager.error("failed")

        events = json_lines(stream)
        assert [e['event'] for e in events] == [
            "started. Data: job_id: 'j-1'",
            "Message: failed. Data: job_id: 'j-1'. ",
        ]
        assert [e['level'] for e in events] == ['info', 'error']

    def test_debug_level_follows_config(self, stream):
        manager = LogManager(logger=configure_logging(level="DEBUG", stream=stream))

        assert manager.is_debug_enabled()

    def test_progress_events(self, stream):
        base = configure_logging(json_output=True, stream=stream)
        manager = LogManager(logger=base)

        with manager.progress("rows", total=2) as tracker:
            tracker.iteration()
            tracker.iteration()

        events = [e['event'].split('.')[0] for e in json_lines(stream)]
        assert events == ["rows_start", "rows_finish"]

    def test_structlog_agent_notices_share_the_output(self, stream):
        configure_logging(json_output=True, stream=stream)
        manager = LogManager(
            {'job_id': 'j-1'},
            logger=logging.getLogger("importer"),
            config={'agent_notifier': 'structlog'}
        )

        manager.trace_on_agent("slow batch")

        notice = json_lines(stream)[-1]
        assert notice['event'] == 'agent_notice'
        assert notice['level'] == 'warning'
        assert notice['message'] == 'slow batch'
        assert notice['custom_params'] == {'job_id': 'j-1'}
