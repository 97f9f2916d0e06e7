"""
Rule-matching strategy: decision extraction, rule selection and the
end-to-end split for decision-tree runs.
"""

import pytest

from conftest import FULL_RULES_RUN, answers

from mediaplanner.core.errors import InvalidInputError
from mediaplanner.domain import catalog
from mediaplanner.domain.models import DecisionVariables
from mediaplanner.domain.services.decision import (
    DecisionStrategy,
    RuleMatchingStrategy,
    ScoredBucketStrategy,
    extract_decisions,
    get_strategy,
    match_rules,
)


def _pcts(result):
    return {a.channel: a.percentage for a in result.allocations}


def test_extract_decisions_maps_known_answers():
    d = extract_decisions(answers(*FULL_RULES_RUN))
    assert d.objective == "conversion"
    assert d.price_range == "low"
    assert d.kpi == "volume"
    assert d.budget == "high"
    assert d.kpi_focus == "prefer_volume"
    assert d.duration == "burst"
    assert d.has_historical_data is True
    assert d.client_insistence is False
    assert d.tracking == "weak"
    assert d.audience is None


def test_extract_decisions_ignores_unknown_pairs():
    d = extract_decisions(answers(("STEP_1", "nonsense"), ("STEP_99", "x"), ("q1", "Low")))
    assert d.as_conditions() == {}


def test_genz_awareness_beats_fallback():
    matched = match_rules(DecisionVariables(objective="awareness", audience="genz"))
    assert matched[0].name == "Gen Z awareness"
    assert matched[0].priority == 100
    assert matched[-1].name == "Fallback"


def test_empty_decisions_match_only_fallback():
    matched = match_rules(DecisionVariables())
    assert [r.name for r in matched] == ["Fallback"]


def test_inactive_rules_are_skipped():
    rules = [r.model_copy(update={"is_active": False}) if r.name == "Gen Z awareness" else r
             for r in catalog.RULES]
    matched = match_rules(DecisionVariables(objective="awareness", audience="genz"), rules)
    assert "Gen Z awareness" not in [r.name for r in matched]


def test_genz_awareness_split_unchanged_without_adjustments():
    result = RuleMatchingStrategy().evaluate(answers(("STEP_1", "awareness"), ("STEP_1A", "genz")))
    assert result.matched_rule == "Gen Z awareness"
    assert _pcts(result) == {"TikTok": 50, "Facebook": 35, "Google": 15}
    assert result.reasoning[0].trigger == "rule=Gen Z awareness"


def test_low_budget_run_keeps_two_channels():
    result = RuleMatchingStrategy().evaluate(answers(
        ("STEP_1", "conversion"), ("STEP_2", "high_ticket"), ("STEP_3A", "quality"), ("STEP_4", "low_budget"),
    ))
    assert result.matched_rule == "High-ticket quality"
    assert len(result.allocations) == 2
    assert set(_pcts(result)) == {"Google", "Facebook"}
    assert sum(_pcts(result).values()) == 100
    assert "budget=low" in [r.trigger for r in result.reasoning]


def test_full_run_fires_every_adjustment_in_order():
    result = RuleMatchingStrategy().evaluate(answers(*FULL_RULES_RUN))
    triggers = [r.trigger for r in result.reasoning]
    assert triggers == [
        "rule=Low-ticket volume",
        "kpi_focus=prefer_volume",
        "duration=burst",
        "tracking=weak",
        "has_historical_data=true",
    ]
    assert sum(a.percentage for a in result.allocations) == 100
    hero = [a for a in result.allocations if a.role == "Hero"]
    assert len(hero) == 1
    assert hero[0].percentage == max(a.percentage for a in result.allocations)
    assert "volume" in result.summary.lower()


def test_incomplete_run_degrades_gracefully():
    result = RuleMatchingStrategy().evaluate(answers(("STEP_1", "conversion"), ("STEP_2", "low_ticket")))
    # no kpi yet, so only the fallback applies
    assert result.matched_rule == "Fallback"
    assert sum(a.percentage for a in result.allocations) == 100


def test_total_budget_adds_amounts():
    result = RuleMatchingStrategy().evaluate(
        answers(("STEP_1", "awareness"), ("STEP_1A", "adult")), total_budget=200000,
    )
    amounts = {a.channel: a.amount for a in result.allocations}
    assert amounts == {"Facebook": 110000.0, "TikTok": 50000.0, "Google": 40000.0}


def test_strategy_base_cannot_be_instantiated():
    with pytest.raises(TypeError):
        DecisionStrategy()

    class Partial(DecisionStrategy):
        name = "partial"

    with pytest.raises(TypeError):
        Partial()


def test_get_strategy_by_name():
    assert isinstance(get_strategy("rules"), RuleMatchingStrategy)
    assert isinstance(get_strategy("scored"), ScoredBucketStrategy)
    with pytest.raises(InvalidInputError):
        get_strategy("magic")
