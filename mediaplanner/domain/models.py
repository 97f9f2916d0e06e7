# mediaplanner/domain/models.py
from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Dict, List, Literal, Mapping, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field

Channel = Literal["Facebook", "Google", "TikTok"]
Role = Literal["Hero", "Support", "Test"]
Platform = Literal["facebook", "google", "tiktok"]
StrategyName = Literal["rules", "scored"]

CHANNELS: Tuple[str, ...] = ("Facebook", "Google", "TikTok")
HERO, SUPPORT, TEST = "Hero", "Support", "Test"


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


# --- Catalog (immutable) ---

class Option(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    label: str
    description: Optional[str] = None
    value: Optional[str] = None                       # raw token used by branch conditions
    points: Mapping[str, int] = Field(default_factory=dict)  # channel -> weight
    blocks: Tuple[str, ...] = ()                      # channels this answer rules out
    next_question_id: Optional[str] = None            # None = terminal


class Question(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    strategy: StrategyName
    step_number: float
    topic: str
    prompt: str
    hint: str = ""
    options: Tuple[Option, ...]

    def option(self, option_id: str) -> Optional[Option]:
        return next((o for o in self.options if o.id == option_id), None)


class ChannelAllocation(BaseModel):
    channel: Channel
    percentage: int = Field(ge=0, le=100)
    role: Role
    amount: Optional[float] = None                    # set when a total budget is known


class Rule(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    priority: int
    conditions: Mapping[str, Any]
    allocations: Optional[Tuple[ChannelAllocation, ...]] = None
    max_channels: Optional[int] = None
    explanation: str
    is_active: bool = True


class Bucket(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    facebook: int
    google: int
    tiktok: int
    insight: str
    recommendations: Tuple[str, ...]
    script: str


# --- Request-scoped ---

class Answer(BaseModel):
    question_id: str
    option_id: str
    label: Optional[str] = None
    answered_at: datetime = Field(default_factory=utcnow)


class DecisionVariables(BaseModel):
    """Fields derived from one answer sequence; unset means 'not answered'."""
    objective: Optional[Literal["awareness", "conversion"]] = None
    audience: Optional[Literal["genz", "adult"]] = None
    price_range: Optional[Literal["high", "low"]] = None
    kpi: Optional[Literal["quality", "volume"]] = None
    budget: Optional[Literal["low", "high"]] = None
    kpi_focus: Optional[Literal["prefer_volume", "prefer_quality"]] = None
    duration: Optional[Literal["burst", "always_on"]] = None
    has_historical_data: Optional[bool] = None
    client_insistence: Optional[bool] = None
    tracking: Optional[Literal["good", "weak"]] = None

    def as_conditions(self) -> Dict[str, Any]:
        return self.model_dump(exclude_none=True)


class ReasoningRecord(BaseModel):
    trigger: str
    message: str


class Classification(BaseModel):
    """Outcome of the scored-bucket strategy."""
    bucket_id: str
    name: str
    hero: Channel
    points: Dict[str, int]
    efficiency: int
    strength: Literal["low", "mid", "high"]
    blockers: List[str] = []
    override: Optional[str] = None
    insight: str
    recommendations: List[str]
    script: str


class RecommendationResult(BaseModel):
    strategy: StrategyName
    allocations: List[ChannelAllocation]
    reasoning: List[ReasoningRecord]
    summary: str
    decisions: DecisionVariables
    matched_rule: Optional[str] = None
    classification: Optional[Classification] = None
    total_budget: Optional[float] = None
    narrative: Optional[str] = None
    generated_at: datetime = Field(default_factory=utcnow)


class CsvMappingResult(BaseModel):
    platform: Platform
    mapping: Dict[str, str]
    confidence: Dict[str, float]
    missing_fields: List[str]
    insight: List[str]
