from __future__ import annotations

import logging
from io import StringIO

from quick_roster.logging.init import (
    LOGGER_NAME,
    SUMMARY_LEVEL,
    LabeledFormatter,
    get_logger,
    log_summary,
    set_debug,
    setup_logging,
)


def test_setup_logging_creates_logger_with_labeled_formatter():
    logger = setup_logging()
    assert logger.name == LOGGER_NAME
    assert logger.level == logging.INFO
    assert len(logger.handlers) == 1
    assert isinstance(logger.handlers[0].formatter, LabeledFormatter)
    assert logger.propagate is False


def test_setup_logging_is_idempotent():
    first = setup_logging()
    second = setup_logging()
    assert first is second
    assert len(second.handlers) == 1
    assert get_logger() is first


def test_labeled_prefixes():
    captured = StringIO()
    logger = logging.getLogger("test_quick_roster_labels")
    logger.setLevel(logging.DEBUG)
    for handler in logger.handlers[:]:
        logger.removeHandler(handler)
    logging.addLevelName(SUMMARY_LEVEL, "SUMMARY")
    handler = logging.StreamHandler(captured)
    handler.setFormatter(LabeledFormatter())
    logger.addHandler(handler)
    logger.propagate = False

    logger.debug("d")
    logger.info("i")
    logger.warning("w")
    logger.error("e")
    logger.log(SUMMARY_LEVEL, "s")

    assert captured.getvalue().splitlines() == ["DEBUG d", "INFO i", "WARN w", "ERROR e", "SUMMARY s"]


def test_log_summary_goes_to_stdout(capsys):
    setup_logging()
    log_summary("files=1 rows=2 accepted=2 rejected=0 types=job")
    out = capsys.readouterr().out
    assert "SUMMARY files=1 rows=2 accepted=2 rejected=0 types=job" in out


def test_child_loggers_use_application_handler(capsys):
    setup_logging()
    logging.getLogger("quick_roster.services.importer").warning("jobs.csv row 3: bad")
    assert "WARN jobs.csv row 3: bad" in capsys.readouterr().out


def test_set_debug(capsys):
    logger = setup_logging()
    logger.debug("hidden")
    set_debug(logger)
    logger.debug("shown")
    out = capsys.readouterr().out
    assert "hidden" not in out
    assert "DEBUG shown" in out
