# mediaplanner/domain/services/chat.py
from typing import Dict, Any, List, Tuple

from mediaplanner.core.llm import generate_text
from mediaplanner.domain.models import RecommendationResult
from mediaplanner.domain.prompts import (
    KNOWLEDGE_BASE,
    SYSTEM_PROMPT,
    build_chat_prompt,
    build_summary_prompt,
)
from mediaplanner.domain.services.narrative import describe_allocations

# checked in order; first hit wins
_CATEGORY_KEYWORDS: Tuple[Tuple[str, Tuple[str, ...]], ...] = (
    ("media-planning", ("media", "channel", "budget", "reach", "frequency")),
    ("campaign-strategy", ("campaign", "กลยุทธ์", "แคมเปญ", "strategy", "creative")),
    ("kpi-funnel", ("kpi", "funnel", "metric", "conversion", "วัดผล")),
    ("performance", ("performance", "optimization", "roas", "cpa", "a/b test")),
)


def detect_category(question: str) -> str:
    q = question.lower()
    for category, keywords in _CATEGORY_KEYWORDS:
        if any(k in q for k in keywords):
            return category
    return "general"


def retrieve_context(category: str) -> List[str]:
    """Static snippets per category; no search is performed."""
    return list(KNOWLEDGE_BASE.get(category) or KNOWLEDGE_BASE["general"])


def answer_question(question: str) -> Dict[str, Any]:
    category = detect_category(question)
    context = retrieve_context(category)
    answer = generate_text(build_chat_prompt(question, category, context), system=SYSTEM_PROMPT)
    return {"answer": answer, "category": category, "retrieved_context": context}


def plan_as_text(result: RecommendationResult) -> str:
    lines = [f"Summary: {result.summary}", f"Allocations: {describe_allocations(result.allocations)}"]
    if result.total_budget is not None:
        lines.append(f"Total budget: {result.total_budget:,.2f}")
    lines.append("Reasoning:")
    lines.extend(f"- {r.message}" for r in result.reasoning)
    return "\n".join(lines)


def narrate(result: RecommendationResult) -> str:
    """LLM-written executive summary of a computed plan."""
    return generate_text(build_summary_prompt(plan_as_text(result)))


def summarize_text(text: str) -> str:
    return generate_text(build_summary_prompt(text))
