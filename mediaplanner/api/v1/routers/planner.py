# mediaplanner/api/v1/routers/planner.py
from fastapi import APIRouter

from mediaplanner.api.v1.deps import SessionDep, StrategyNameDep
from mediaplanner.api.v1.schemas import (
    NextStepReq,
    NextStepResp,
    RecommendReq,
    RecommendResp,
    SessionResp,
    StepList,
    TextResp,
)
from mediaplanner.config import settings
from mediaplanner.core.errors import InvalidInputError
from mediaplanner.core.logging import get_logger
from mediaplanner.core.observability import RECOMMENDATIONS
from mediaplanner.domain import catalog
from mediaplanner.domain.models import Question
from mediaplanner.domain.services.chat import narrate
from mediaplanner.domain.services.decision import get_strategy, strategy_for
from mediaplanner.repositories.sessions import get_session_by_id, load_result, save_session

log = get_logger("planner")

router = APIRouter(prefix="/planner", tags=["planner"])


@router.get("/steps", response_model=StepList)
def list_steps(strategy: StrategyNameDep):
    return StepList(strategy=strategy, steps=catalog.list_questions(strategy))


@router.get("/steps/initial", response_model=Question)
def initial_step(strategy: StrategyNameDep):
    return catalog.initial_question(strategy)


@router.get("/steps/{step_id}", response_model=Question)
def get_step(step_id: str):
    return catalog.get_question(step_id)


@router.post("/next", response_model=NextStepResp)
def next_step(req: NextStepReq):
    """Resolve the question reached by one choice; `complete` when the flow ends."""
    nxt = catalog.next_question(req.question_id, req.option_id)
    return NextStepResp(complete=nxt is None, next=nxt)


@router.post("/recommend", response_model=RecommendResp)
def recommend(req: RecommendReq, db: SessionDep):
    """
    POST /planner/recommend
    Evaluates the submitted answers, stores the run and returns the result with
    its session id. `narrate=true` adds an LLM executive summary before storing.
    """
    answers = [a.to_domain() for a in req.answers]
    # unknown or repeated steps are a client error here; the engine itself only skips them
    seen = set()
    for a in answers:
        if a.question_id not in catalog.QUESTIONS:
            raise InvalidInputError(f"Unknown step '{a.question_id}'")
        if a.question_id in seen:
            raise InvalidInputError(f"Step '{a.question_id}' answered more than once")
        seen.add(a.question_id)
        catalog.get_option(a.question_id, a.option_id)

    name = req.strategy or strategy_for(answers, settings.default_strategy)
    result = get_strategy(name).evaluate(answers, total_budget=req.total_budget)

    if req.narrate:
        result = result.model_copy(update={"narrative": narrate(result)})

    row = save_session(db, answers, result, client_name=req.client_name)
    outcome = result.classification.bucket_id if result.classification else (result.matched_rule or "default")
    RECOMMENDATIONS.labels(strategy=name, outcome_id=outcome).inc()
    log.info("recommendation_created", extra={"session_id": row.id, "strategy": name, "outcome": outcome})
    return RecommendResp(session_id=row.id, result=result)


@router.get("/sessions/{session_id}", response_model=SessionResp)
def get_session(session_id: str, db: SessionDep):
    row = get_session_by_id(db, session_id)
    return SessionResp(
        session_id=row.id,
        strategy=row.strategy,
        client_name=row.client_name,
        created_at=row.created_at,
        answers=row.answers,
        result=row.recommendation,
    )


@router.post("/sessions/{session_id}/narrative", response_model=TextResp)
def session_narrative(session_id: str, db: SessionDep):
    """Executive summary of a stored plan. The stored result is left unchanged."""
    result = load_result(get_session_by_id(db, session_id))
    return TextResp(text=narrate(result))
