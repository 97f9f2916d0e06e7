from __future__ import annotations

import uuid
from datetime import datetime, timezone
from typing import Optional, Any, Dict, List

from sqlalchemy import Index
from sqlmodel import SQLModel, Field, Column, JSON


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class PlannerSession(SQLModel, table=True):
    """
    One completed questionnaire run. `answers` and `recommendation` are stored
    verbatim as JSON and never updated after insert.
    """
    __tablename__ = "planner_sessions"

    id: str = Field(default_factory=lambda: str(uuid.uuid4()), primary_key=True, max_length=36)
    strategy: str = Field(index=True)
    client_name: Optional[str] = None
    answers: List[Dict[str, Any]] = Field(sa_column=Column(JSON, nullable=False))
    recommendation: Dict[str, Any] = Field(sa_column=Column(JSON, nullable=False))
    total_budget: Optional[float] = None
    created_at: datetime = Field(default_factory=_utcnow)

    __table_args__ = (
        Index("ix_planner_sessions_strategy_created", "strategy", "created_at"),
    )
