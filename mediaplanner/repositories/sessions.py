# mediaplanner/repositories/sessions.py
from typing import List, Optional

from sqlmodel import Session

from mediaplanner.core.errors import NotFoundError
from mediaplanner.db.models import PlannerSession
from mediaplanner.domain.models import Answer, RecommendationResult


def save_session(db: Session, answers: List[Answer], result: RecommendationResult,
                 client_name: Optional[str] = None) -> PlannerSession:
    """Insert one completed run. Rows are write-once."""
    row = PlannerSession(
        strategy=result.strategy,
        client_name=client_name,
        answers=[a.model_dump(mode="json") for a in answers],
        recommendation=result.model_dump(mode="json"),
        total_budget=result.total_budget,
    )
    db.add(row)
    db.commit()
    db.refresh(row)
    return row


def get_session_by_id(db: Session, session_id: str) -> PlannerSession:
    row = db.get(PlannerSession, session_id)
    if row is None:
        raise NotFoundError(f"Session '{session_id}' not found")
    return row


def load_result(row: PlannerSession) -> RecommendationResult:
    return RecommendationResult.model_validate(row.recommendation)
