# mediaplanner/api/v1/routers/chat.py
from fastapi import APIRouter
from fastapi.responses import JSONResponse

from mediaplanner.api.v1.schemas import ChatReq, ChatResp
from mediaplanner.config import settings
from mediaplanner.core.errors import InvalidInputError, ProviderError
from mediaplanner.core.logging import get_logger
from mediaplanner.domain.prompts import APOLOGY
from mediaplanner.domain.services.chat import answer_question

log = get_logger("chat")

router = APIRouter(prefix="/chat", tags=["chat"])


@router.post("", response_model=ChatResp)
def chat(req: ChatReq):
    """
    POST /chat
    Keyword-categorized question answered by the LLM with static reference snippets.
    Provider failures return the canned apology instead of a bare error.
    """
    if len(req.question) > settings.max_question_chars:
        raise InvalidInputError(f"Question must be at most {settings.max_question_chars} characters")
    try:
        return answer_question(req.question)
    except ProviderError as e:
        log.error("chat_failed", extra={"error": e.error})
        return JSONResponse(
            status_code=500,
            content={"error": e.error, "answer": APOLOGY, "category": "general"},
        )
