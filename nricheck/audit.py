# nricheck/audit.py
from __future__ import annotations

import json

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from . import models
from .logging_config import log_failure
from .settings import get_settings

settings = get_settings()


def record_event(db: Session, action: models.ActionEnum, report_id: str | None, payload: dict) -> bool:
    """
    Append an audit event. Best-effort: a failed write is logged and
    reported as False, never raised into the request.
    """
    evt = models.Event(
        report_id=report_id,
        action=action,
        actor_type="SYSTEM",
        payload=json.dumps(payload, ensure_ascii=False, default=str),
        app_version=settings.APP_VERSION,
        schema_version=settings.SCHEMA_VERSION,
    )
    try:
        db.add(evt)
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        log_failure("AUDIT_WRITE_FAILED", {"action": action.value, "error": str(e)})
        return False
    return True


def record_failure(db: Session, stage: str, error: Exception | str, error_code: str = "INTERNAL_FALLBACK") -> dict:
    payload = log_failure(error_code, {"stage": stage, "error": str(error)})
    record_event(db, models.ActionEnum.FAILURE_LOG, None, payload)
    return payload
