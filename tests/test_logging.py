"""
Tests for logging configuration.
"""

import json
import logging

from jobportal.core.config import settings
from jobportal.core.logging_config import CustomJsonFormatter, setup_logging


def make_record(level=logging.INFO, msg="Created job 7"):
    return logging.LogRecord("jobportal.api.endpoints.jobs", level, __file__, 42, msg, None, None, func="create_job")


class TestJsonFormatter:

    def test_info_record(self):
        formatter = CustomJsonFormatter('%(timestamp)s %(level)s %(logger)s %(message)s')

        data = json.loads(formatter.format(make_record()))

        assert data["message"] == "Created job 7"
        assert data["level"] == "INFO"
        assert data["logger"] == "jobportal.api.endpoints.jobs"
        assert data["service"] == settings.PROJECT_NAME
        assert data["timestamp"].endswith("Z")
        assert "line" not in data

    def test_error_record_has_location(self):
        formatter = CustomJsonFormatter('%(timestamp)s %(level)s %(logger)s %(message)s')

        data = json.loads(formatter.format(make_record(logging.ERROR, "Error inserting job data")))

        assert data["line"] == 42
        assert data["function"] == "create_job"


class TestSetupLogging:

    def test_single_root_handler(self):
        root = logging.getLogger()
        original_level = root.level
        original_handlers = root.handlers[:]
        try:
            setup_logging("DEBUG", json_logs=True)
            setup_logging("WARNING", json_logs=False)

            assert len(root.handlers) == 1
            assert root.level == logging.WARNING
            assert logging.getLogger("botocore").level == logging.WARNING
        finally:
            for handler in root.handlers[:]:
                root.removeHandler(handler)
            for handler in original_handlers:
                root.addHandler(handler)
            root.setLevel(original_level)
