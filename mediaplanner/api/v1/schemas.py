# mediaplanner/api/v1/schemas.py
from datetime import datetime
from typing import List, Dict, Any, Optional, Literal

from pydantic import BaseModel, Field, field_validator

from mediaplanner.domain.models import (
    Answer,
    CsvMappingResult,
    Question,
    RecommendationResult,
)

# --- Chat ---
class ChatReq(BaseModel):
    question: str

    @field_validator("question")
    @classmethod
    def _not_blank(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("question must not be empty")
        return v

class ChatResp(BaseModel):
    answer: str
    category: str
    retrieved_context: List[str] = []

# --- Planner ---
class AnswerIn(BaseModel):
    question_id: str = Field(min_length=1)
    option_id: str = Field(min_length=1)
    label: Optional[str] = None
    answered_at: Optional[datetime] = None

    def to_domain(self) -> Answer:
        data = self.model_dump(exclude_none=True)
        return Answer(**data)

class NextStepReq(BaseModel):
    question_id: str
    option_id: str

class NextStepResp(BaseModel):
    complete: bool
    next: Optional[Question] = None

class StepList(BaseModel):
    strategy: str
    steps: List[Question]

class RecommendReq(BaseModel):
    answers: List[AnswerIn] = Field(min_length=1)
    strategy: Optional[Literal["rules", "scored"]] = None
    total_budget: Optional[float] = Field(default=None, gt=0)
    client_name: Optional[str] = Field(default=None, max_length=200)
    narrate: bool = False

class RecommendResp(BaseModel):
    session_id: str
    result: RecommendationResult

class SessionResp(BaseModel):
    session_id: str
    strategy: str
    client_name: Optional[str] = None
    created_at: datetime
    answers: List[Dict[str, Any]]
    result: Dict[str, Any]

class TextResp(BaseModel):
    text: str

# --- CSV ---
class CsvMapReq(BaseModel):
    platform: Literal["facebook", "google", "tiktok"]
    csv_text: str
    plan_summary: Optional[Dict[str, Any]] = None   # {summary, allocations}
    session_id: Optional[str] = None

CsvMapResp = CsvMappingResult

# --- AI passthrough ---
class GenerateReq(BaseModel):
    prompt: str = Field(min_length=1)

class SummarizeReq(BaseModel):
    text: str = Field(min_length=1)
