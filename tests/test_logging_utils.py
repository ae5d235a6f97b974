"""Unit tests for the shared JSON logging setup."""
import json
import logging
import sys

import lambda_function
import nearest_locations_function
from logging_utils import JsonFormatter, setup_logging


def make_record(msg='skipped %d', args=(3,), exc_info=None):
    return logging.LogRecord(
        'schedule', logging.WARNING, __file__, 1, msg, args, exc_info
    )


class TestSetupLogging:
    """Test cases for logging setup."""

    def test_setup_logging_default_level(self):
        """Test logging setup with default INFO level."""
        setup_logging()
        assert logging.getLogger().level == logging.INFO

    def test_setup_logging_debug_level(self):
        setup_logging('DEBUG')
        assert logging.getLogger().level == logging.DEBUG

    def test_setup_logging_unknown_level_falls_back_to_info(self):
        setup_logging('CHATTY')
        assert logging.getLogger().level == logging.INFO

    def test_single_json_handler(self):
        setup_logging()
        setup_logging()

        handlers = logging.getLogger().handlers
        assert len(handlers) == 1
        assert isinstance(handlers[0].formatter, JsonFormatter)

    def test_handlers_share_one_setup(self):
        """Test both handlers configure logging from the same module."""
        assert lambda_function.setup_logging is setup_logging
        assert nearest_locations_function.setup_logging is setup_logging


class TestJsonFormatter:
    """Test cases for JsonFormatter."""

    def test_base_fields(self):
        data = json.loads(JsonFormatter().format(make_record()))

        assert data['level'] == 'WARNING'
        assert data['message'] == 'skipped 3'
        assert data['logger'] == 'schedule'
        assert 'timestamp' in data
        assert 'exception' not in data

    def test_extra_fields_are_included(self):
        record = make_record()
        record.company_id = '42'
        record.duration_seconds = 0.25

        data = json.loads(JsonFormatter().format(record))

        assert data['company_id'] == '42'
        assert data['duration_seconds'] == 0.25
        assert 'args' not in data
        assert 'levelno' not in data

    def test_exception_is_formatted(self):
        try:
            raise RuntimeError('boom')
        except RuntimeError:
            record = make_record(exc_info=sys.exc_info())

        data = json.loads(JsonFormatter().format(record))

        assert 'RuntimeError: boom' in data['exception']
