# mediaplanner/domain/services/decision.py
"""
Two interchangeable planning strategies behind one interface:

- "rules":  derive decision variables from the decision-tree answers, pick the
            highest-priority matching rule, then run the allocation adjuster.
- "scored": add up per-channel points from the scored questionnaire, check the
            TikTok blockers and classify the result into one of the C1..C8 buckets.

They answer different questionnaires and produce different splits for the same
business; neither is derived from the other.
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Dict, Iterable, List, Optional, Tuple

from mediaplanner.core.errors import InvalidInputError
from mediaplanner.domain import catalog
from mediaplanner.domain.models import (
    Answer,
    Classification,
    DecisionVariables,
    ReasoningRecord,
    RecommendationResult,
    Rule,
)
from mediaplanner.domain.services.allocation import (
    AllocationAdjuster,
    normalize_largest_remainder,
    rank_roles,
    round_half_up,
    with_amounts,
)
from mediaplanner.domain.services.narrative import reason, summarize

# (question_id, option_id) -> (field, value)
_DECISION_LOOKUP: Dict[Tuple[str, str], Tuple[str, Any]] = {
    ("STEP_1", "awareness"): ("objective", "awareness"),
    ("STEP_1", "conversion"): ("objective", "conversion"),
    ("STEP_1A", "genz"): ("audience", "genz"),
    ("STEP_1A", "adult"): ("audience", "adult"),
    ("STEP_2", "high_ticket"): ("price_range", "high"),
    ("STEP_2", "low_ticket"): ("price_range", "low"),
    ("STEP_3A", "quality"): ("kpi", "quality"),
    ("STEP_3B", "volume"): ("kpi", "volume"),
    ("STEP_4", "low_budget"): ("budget", "low"),
    ("STEP_4", "high_budget"): ("budget", "high"),
    ("STEP_5", "prefer_volume"): ("kpi_focus", "prefer_volume"),
    ("STEP_5", "prefer_quality"): ("kpi_focus", "prefer_quality"),
    ("STEP_6", "burst"): ("duration", "burst"),
    ("STEP_6", "always_on"): ("duration", "always_on"),
    ("STEP_7", "has_data"): ("has_historical_data", True),
    ("STEP_7", "no_data"): ("has_historical_data", False),
    ("STEP_8", "client_insist"): ("client_insistence", True),
    ("STEP_8", "no_preference"): ("client_insistence", False),
    ("STEP_9", "good_tracking"): ("tracking", "good"),
    ("STEP_9", "weak_tracking"): ("tracking", "weak"),
}

_BLOCKER_LABELS: Dict[str, str] = {
    "q4": "high purchase friction",
    "q5": "weak conversion tracking",
    "q6": "no vertical video assets",
    "q7": "monthly budget below 70k",
    "q8": "core audience aged 45+",
}

# hero -> (low, mid, high) bucket when a blocker fires
_BLOCKED_TIERS = {"Facebook": ("C2", "C3", "C4"), "Google": ("C6", "C7", "C8")}
_OPEN_BUCKET = {"Facebook": "C1", "Google": "C5"}
_WINNER_OVERRIDE = {"FACEBOOK": "C4", "GOOGLE": "C8"}


# --------------------------------------------------------------------
# Rule matching
# --------------------------------------------------------------------

def extract_decisions(answers: Iterable[Answer]) -> DecisionVariables:
    """Unknown (question, option) pairs are ignored; later answers win."""
    fields: Dict[str, Any] = {}
    for a in answers:
        hit = _DECISION_LOOKUP.get((a.question_id, a.option_id))
        if hit:
            field, value = hit
            fields[field] = value
    return DecisionVariables(**fields)


def _matches(rule: Rule, facts: Dict[str, Any]) -> bool:
    return all(facts.get(k) == v for k, v in rule.conditions.items())


def match_rules(decisions: DecisionVariables, rules: Optional[List[Rule]] = None) -> List[Rule]:
    """Active rules whose conditions are a subset of `decisions`, highest priority first (stable)."""
    facts = decisions.as_conditions()
    pool = catalog.active_rules() if rules is None else [r for r in rules if r.is_active]
    matched = [r for r in pool if _matches(r, facts)]
    return sorted(matched, key=lambda r: -r.priority)


# --------------------------------------------------------------------
# Scoring / classification
# --------------------------------------------------------------------

def score_answers(answers: Iterable[Answer]) -> Tuple[Dict[str, int], List[str], Optional[str]]:
    """
    Returns (points, blockers, winner). Answers that do not belong to the
    scored questionnaire are skipped; a repeated question counts once, with
    the last answer winning.
    """
    latest: Dict[str, Answer] = {}
    for a in answers:
        latest.pop(a.question_id, None)
        latest[a.question_id] = a

    points = {"facebook": 0, "google": 0}
    blockers: List[str] = []
    winner: Optional[str] = None
    for a in latest.values():
        q = catalog.QUESTIONS.get(a.question_id)
        if q is None or q.strategy != "scored":
            continue
        opt = q.option(a.option_id)
        if opt is None:
            continue
        for channel, pts in opt.points.items():
            points[channel] = points.get(channel, 0) + pts
        if "TikTok" in opt.blocks and q.id not in blockers:
            blockers.append(q.id)
        if q.id == "q10" and opt.value in _WINNER_OVERRIDE:
            winner = opt.value
    return points, blockers, winner


def strength_tier(efficiency: int) -> str:
    if efficiency <= 40:
        return "low"
    if efficiency <= 70:
        return "mid"
    return "high"


def classify(answers: Iterable[Answer]) -> Classification:
    points, blockers, winner = score_answers(answers)
    hero = "Google" if points["google"] > points["facebook"] else "Facebook"
    hero_points = points[hero.lower()]
    efficiency = round_half_up(hero_points / catalog.MAX_POINTS * 100)
    tier = strength_tier(efficiency)

    if winner:
        bucket_id = _WINNER_OVERRIDE[winner]
    elif blockers:
        bucket_id = _BLOCKED_TIERS[hero][("low", "mid", "high").index(tier)]
    else:
        bucket_id = _OPEN_BUCKET[hero]

    bucket = catalog.BUCKETS[bucket_id]
    return Classification(
        bucket_id=bucket.id,
        name=bucket.name,
        hero=hero,
        points=points,
        efficiency=efficiency,
        strength=tier,
        blockers=blockers,
        override=winner,
        insight=bucket.insight,
        recommendations=list(bucket.recommendations),
        script=bucket.script,
    )


# --------------------------------------------------------------------
# Strategies
# --------------------------------------------------------------------

class DecisionStrategy(ABC):
    name = ""

    @abstractmethod
    def evaluate(self, answers: List[Answer], total_budget: Optional[float] = None) -> RecommendationResult: ...


class RuleMatchingStrategy(DecisionStrategy):
    name = "rules"

    def __init__(self, adjuster: Optional[AllocationAdjuster] = None):
        self.adjuster = adjuster or AllocationAdjuster()

    def evaluate(self, answers: List[Answer], total_budget: Optional[float] = None) -> RecommendationResult:
        decisions = extract_decisions(answers)
        matched = match_rules(decisions)

        base_rule = next((r for r in matched if r.allocations), None)
        caps = [r.max_channels for r in matched if r.max_channels]
        max_channels = min(caps) if caps else None

        reasoning: List[ReasoningRecord] = []
        if base_rule is not None:
            base = list(base_rule.allocations)
            reasoning.append(reason(f"rule={base_rule.name}", template="rule", name=base_rule.name,
                                    priority=base_rule.priority, explanation=base_rule.explanation))
        else:
            base = list(catalog.DEFAULT_ALLOCATION)
            reasoning.append(reason("rule=default"))

        allocations, adjustments = self.adjuster.adjust(base, decisions, max_channels=max_channels)
        reasoning.extend(adjustments)

        return RecommendationResult(
            strategy=self.name,
            allocations=with_amounts(allocations, total_budget),
            reasoning=reasoning,
            summary=summarize(allocations, base_rule.name if base_rule else None),
            decisions=decisions,
            matched_rule=base_rule.name if base_rule else None,
            total_budget=total_budget,
        )


class ScoredBucketStrategy(DecisionStrategy):
    name = "scored"

    def evaluate(self, answers: List[Answer], total_budget: Optional[float] = None) -> RecommendationResult:
        c = classify(answers)
        bucket = catalog.BUCKETS[c.bucket_id]

        triple = [("Facebook", bucket.facebook), ("Google", bucket.google), ("TikTok", bucket.tiktok)]
        allocations = rank_roles(normalize_largest_remainder((ch, p) for ch, p in triple if p > 0))

        reasoning = [
            reason("points", facebook=c.points["facebook"], google=c.points["google"],
                   hero=c.hero, efficiency=c.efficiency, strength=c.strength),
        ]
        if c.blockers:
            reasoning.append(reason("blocker", reasons=", ".join(_BLOCKER_LABELS[q] for q in c.blockers)))
        if c.override:
            reasoning.append(reason("override", winner=c.override.title(), bucket_id=c.bucket_id))
        reasoning.append(reason("bucket", bucket_id=c.bucket_id, name=c.name, insight=c.insight))

        return RecommendationResult(
            strategy=self.name,
            allocations=with_amounts(allocations, total_budget),
            reasoning=reasoning,
            summary=summarize(allocations, f"{c.bucket_id} {c.name}"),
            decisions=extract_decisions(answers),
            classification=c,
            total_budget=total_budget,
        )


_STRATEGIES = {
    RuleMatchingStrategy.name: RuleMatchingStrategy,
    ScoredBucketStrategy.name: ScoredBucketStrategy,
}


def get_strategy(name: str) -> DecisionStrategy:
    try:
        return _STRATEGIES[name]()
    except KeyError:
        raise InvalidInputError(f"Unknown strategy '{name}'") from None


def strategy_for(answers: List[Answer], default: str) -> str:
    """Infer the strategy from the first answered question id."""
    for a in answers:
        q = catalog.QUESTIONS.get(a.question_id)
        if q is not None:
            return q.strategy
    return default
