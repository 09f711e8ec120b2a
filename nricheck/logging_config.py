import logging
import json
from datetime import datetime, timezone

from .settings import get_settings

logger = logging.getLogger("nricheck")
logger.setLevel(get_settings().LOG_LEVEL)

# uvicorn --reload re-imports modules; keep a single handler
if not logger.handlers:
    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(
        "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
    ))
    logger.addHandler(handler)


def _emit(level: int, payload: dict) -> dict:
    payload["timestamp"] = datetime.now(timezone.utc).isoformat()
    logger.log(level, json.dumps(payload, default=str))
    return payload


def log_event(action: str, message: str, extra: dict | None = None) -> dict:
    """Structured INFO line. Never put respondent contact details in ``extra``."""
    return _emit(logging.INFO, {"action": action, "message": message, **(extra or {})})


def log_failure(error_code: str, context: dict | None = None) -> dict:
    """
    Single entry point for failure logging.
    Returns a minimal payload you can also persist into Event.payload.
    """
    payload = {"error_code": error_code}
    if context:
        payload["context"] = context
    return _emit(logging.ERROR, payload)


def log_report(report_id: str | None, score: int, finding_count: int, delivered: bool) -> dict:
    return _emit(logging.INFO, {
        "action": "REPORT",
        "report_id": report_id,
        "score": score,
        "finding_count": finding_count,
        "delivered": delivered,
    })
