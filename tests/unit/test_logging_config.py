import json
import logging

import pytest
import structlog

from trino_exporter.logging_config import configure_logging


@pytest.fixture
def restore_logging():
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)
    structlog.reset_defaults()


def test_stdlib_records_are_rendered_as_json(restore_logging, capsys) -> None:
    configure_logging("DEBUG")

    logging.getLogger("trino_exporter.discovery").info("Discovered %d clusters", 3)

    record = json.loads(capsys.readouterr().out.strip().splitlines()[-1])
    assert record["message"] == "Discovered 3 clusters"
    assert record["level"] == "info"
    assert record["logger"] == "trino_exporter.discovery"
    assert record["service"] == "trino-exporter"
    assert "timestamp" in record


def test_sdk_loggers_are_quietened(restore_logging) -> None:
    configure_logging("DEBUG")

    assert logging.getLogger("botocore").level == logging.WARNING
    assert logging.getLogger().level == logging.DEBUG
