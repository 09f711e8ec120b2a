# nricheck/routes/reports.py
from __future__ import annotations

import re

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from .. import models, schemas
from ..audit import record_event, record_failure
from ..db import get_db
from ..logging_config import log_report
from ..reporting import Mailer, build_report_message, get_mailer
from ..settings import get_settings

from nricheck.engine import run_rules_engine

router = APIRouter(prefix="/reports", tags=["reports"])
settings = get_settings()

EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


def _client_error(message: str) -> JSONResponse:
    return JSONResponse({"error": message}, status_code=400)


# -------------------------
# SUBMIT REPORT
# -------------------------
@router.post("/", response_model=schemas.ReportSubmitResponse)
def submit_report(
    body: schemas.ReportRequest,
    db: Session = Depends(get_db),
    mailer: Mailer = Depends(get_mailer),
):
    if not body.email or body.quizAnswers is None:
        return _client_error("Missing email or quizAnswers")
    if not EMAIL_RE.match(body.email):
        return _client_error("Invalid email address")

    quiz_answers = body.quizAnswers.model_dump()

    # ---------- Engine (server-side; any client score is ignored) ----------
    output = run_rules_engine(body.quizAnswers.to_answers())
    message = build_report_message(body.email, output)

    # ---------- Delivery ----------
    try:
        mailer.send(message)
    except Exception as e:
        record_failure(db, "send_report", e, "EMAIL_SEND_FAILED")
        log_report(None, output.score, len(output.results), delivered=False)
        return JSONResponse({"error": "Failed to send email"}, status_code=500)

    # ---------- Snapshot (best-effort; email already sent) ----------
    report = models.Report(
        email=body.email,
        quiz_answers=quiz_answers,
        score=output.score,
        total_penalty_min=output.total_penalty_min,
        total_penalty_max=output.total_penalty_max,
        total_weight=sum(f.score_weight for f in output.results),
        results=[f.to_dict() for f in output.results],
        urgent_count=message.counts["urgent"],
        warning_count=message.counts["warning"],
        info_count=message.counts["info"],
        app_version=settings.APP_VERSION,
        ruleset_version=settings.RULESET_VERSION,
        schema_version=settings.SCHEMA_VERSION,
    )

    report_id: str | None = None
    try:
        db.add(report)
        db.commit()
        db.refresh(report)
        report_id = str(report.id)
    except SQLAlchemyError as e:
        db.rollback()
        record_failure(db, "save_report", e, "SNAPSHOT_WRITE_FAILED")

    if report_id:
        record_event(db, models.ActionEnum.SAVE_REPORT, report_id, {
            "score": output.score,
            "total_penalty_max": output.total_penalty_max,
        })

    log_report(report_id, output.score, len(output.results), delivered=True)
    return {"success": True, "reportId": report_id}


# -------------------------
# GET REPORT
# -------------------------
@router.get("/{report_id}", response_model=schemas.ReportOut)
def get_report(report_id: str, db: Session = Depends(get_db)):
    obj = db.query(models.Report).filter(models.Report.id == report_id).first()
    if not obj:
        raise HTTPException(404, "Report not found")
    return schemas.ReportOut.model_validate(obj)
