import json
import logging

import structlog

from decimatrix.logconfig import configure_logging


def test_verbose():
    configure_logging(verbose=True)
    logger = logging.getLogger("decimatrix")
    assert logger.level == logging.DEBUG
    assert not logger.propagate
    assert len(logger.handlers) == 1


def test_quiet():
    configure_logging()
    assert logging.getLogger("decimatrix").level == logging.WARNING


def test_repeated_calls_replace_handler():
    configure_logging()
    configure_logging(log_json=True)
    assert len(logging.getLogger("decimatrix").handlers) == 1


def test_json(capfd):
    configure_logging(verbose=True, log_json=True)
    structlog.get_logger("decimatrix.test").warning("json test", answer=42)
    parsed = json.loads(capfd.readouterr().err.strip())
    assert parsed["event"] == "json test"
    assert parsed["answer"] == 42
    assert parsed["level"] == "warning"
    assert parsed["logger"] == "decimatrix.test"


def test_library_records_rendered(capfd):
    configure_logging(verbose=True, log_json=True)
    logging.getLogger("decimatrix.io").debug("read %dx%d matrix", 2, 3)
    parsed = json.loads(capfd.readouterr().err.strip())
    assert parsed["event"] == "read 2x3 matrix"
    assert parsed["level"] == "debug"
