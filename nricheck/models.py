# nricheck/models.py
from __future__ import annotations

import enum
import uuid
import json
from datetime import datetime, timezone

from sqlalchemy import (
    Column,
    String,
    Enum as SAEnum,
    DateTime,
    Float,
    Integer,
    Text,
)
from sqlalchemy.types import TypeDecorator, TEXT

from .db import Base


# -------------------------
# SQLite-safe JSON columns
# -------------------------
class JsonList(TypeDecorator):
    impl = TEXT
    cache_ok = True

    def process_bind_param(self, value, dialect):
        if value is None:
            return "[]"
        if isinstance(value, (list, tuple)):
            return json.dumps(list(value), ensure_ascii=False)
        if isinstance(value, str):
            s = value.strip()
            return s if s else "[]"
        return "[]"

    def process_result_value(self, value, dialect):
        if not value:
            return []
        try:
            parsed = json.loads(value)
            return parsed if isinstance(parsed, list) else []
        except ValueError:
            return []


class JsonDict(TypeDecorator):
    impl = TEXT
    cache_ok = True

    def process_bind_param(self, value, dialect):
        if isinstance(value, dict):
            return json.dumps(value, ensure_ascii=False)
        return "{}"

    def process_result_value(self, value, dialect):
        if not value:
            return {}
        try:
            parsed = json.loads(value)
            return parsed if isinstance(parsed, dict) else {}
        except ValueError:
            return {}


class ActionEnum(str, enum.Enum):
    ASSESS = "ASSESS"
    SEND_REPORT = "SEND_REPORT"
    SAVE_REPORT = "SAVE_REPORT"
    FAILURE_LOG = "FAILURE_LOG"


def _uuid() -> str:
    return str(uuid.uuid4())


class Report(Base):
    """Snapshot of one submission: answers as sent plus the server-side engine output."""

    __tablename__ = "reports"

    id = Column(String, primary_key=True, default=_uuid)

    email = Column(String, nullable=False, index=True)
    quiz_answers = Column(JsonDict, default=dict, nullable=False)

    # Always derived from the engine run on the server, never from the client
    score = Column(Integer, nullable=False)
    total_penalty_min = Column(Integer, nullable=False, default=0)
    total_penalty_max = Column(Integer, nullable=False, default=0)
    total_weight = Column(Float, nullable=True)
    results = Column(JsonList, default=list, nullable=False)

    urgent_count = Column(Integer, nullable=False, default=0)
    warning_count = Column(Integer, nullable=False, default=0)
    info_count = Column(Integer, nullable=False, default=0)

    # Provenance
    app_version = Column(String, nullable=True)
    ruleset_version = Column(String, nullable=True)
    schema_version = Column(String, nullable=True)

    created_at = Column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))


class Event(Base):
    __tablename__ = "events"

    id = Column(Integer, primary_key=True, autoincrement=True)

    report_id = Column(String, nullable=True, index=True)
    action = Column(SAEnum(ActionEnum), nullable=False)
    actor_type = Column(String, default="SYSTEM")
    payload = Column(Text, default="{}")

    app_version = Column(String, default="dev")
    schema_version = Column(String, default="dev")

    created_at = Column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))
