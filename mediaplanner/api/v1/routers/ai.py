# mediaplanner/api/v1/routers/ai.py
from fastapi import APIRouter

from mediaplanner.api.v1.schemas import GenerateReq, SummarizeReq, TextResp
from mediaplanner.core.llm import generate_text
from mediaplanner.domain.services.chat import summarize_text

router = APIRouter(prefix="/ai", tags=["ai"])


@router.post("/generate", response_model=TextResp)
def generate(req: GenerateReq):
    """Raw prompt passthrough."""
    return TextResp(text=generate_text(req.prompt))


@router.post("/summarize", response_model=TextResp)
def summarize(req: SummarizeReq):
    return TextResp(text=summarize_text(req.text))
