# nricheck/tests/test_settings.py
import logging

from nricheck import db
from nricheck.logging_config import log_event, log_failure, logger
from nricheck.settings import get_settings


def test_db_uses_configured_url():
    settings = get_settings()
    assert db.DATABASE_URL == settings.DATABASE_URL


def test_logger_level_follows_settings():
    assert logger.level == logging.getLevelName(get_settings().LOG_LEVEL)
    assert len(logger.handlers) == 1


def test_structured_log_payloads(caplog):
    with caplog.at_level(logging.INFO, logger="nricheck"):
        event = log_event("ASSESS", "scored", {"score": 88})
        failure = log_failure("SNAPSHOT_WRITE_FAILED", {"stage": "save_report"})

    assert event["score"] == 88 and "timestamp" in event
    assert failure["context"] == {"stage": "save_report"} and "timestamp" in failure
    assert '"error_code": "SNAPSHOT_WRITE_FAILED"' in caplog.text
