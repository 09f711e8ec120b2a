# nricheck/routes/assessments.py
from __future__ import annotations

from fastapi import APIRouter, Depends, Response
from sqlalchemy.orm import Session

from .. import models, schemas
from ..audit import record_event
from ..db import get_db
from ..settings import get_settings

from nricheck.engine import applicable_questions, run_rules_engine

router = APIRouter(prefix="/assessments", tags=["assessments"])
settings = get_settings()


@router.post("/", response_model=schemas.AssessmentResponse)
def assess(answers: schemas.QuestionnaireIn, response: Response, db: Session = Depends(get_db)):
    response.headers["X-App-Version"] = settings.APP_VERSION

    output = run_rules_engine(answers.to_answers())

    record_event(db, models.ActionEnum.ASSESS, None, {
        "score": output.score,
        "finding_ids": [f.rule_id.value for f in output.results],
        "total_penalty_max": output.total_penalty_max,
    })

    return {**output.to_dict(), "rulesetVersion": settings.RULESET_VERSION}


@router.post("/questions", response_model=schemas.QuestionsResponse)
def questions(answers: schemas.QuestionnaireIn):
    return {"questions": applicable_questions(answers.to_answers())}
