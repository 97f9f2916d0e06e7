"""
AllocationAdjuster transformations and largest-remainder normalization.
"""

import pytest

from mediaplanner.domain.models import ChannelAllocation, DecisionVariables
from mediaplanner.domain.services.allocation import (
    AllocationAdjuster,
    _Row,
    normalize_largest_remainder,
    reconcile_roles,
    round_half_up,
)


def _base(*rows):
    return [ChannelAllocation(channel=c, percentage=p, role=r) for c, p, r in rows]


THREE = _base(("Google", 60, "Hero"), ("Facebook", 30, "Support"), ("TikTok", 10, "Test"))


def _rows(base):
    return [_Row(a.channel, float(a.percentage), a.role) for a in base]


def test_low_budget_leaves_exactly_two_channels():
    out, reasoning = AllocationAdjuster().adjust(THREE, DecisionVariables(budget="low"))
    assert [a.channel for a in out] == ["Google", "Facebook"]
    assert [a.percentage for a in out] == [67, 33]
    assert reasoning[0].trigger == "budget=low"


def test_budget_cap_evicts_test_before_larger_channels():
    base = _base(("Facebook", 40, "Hero"), ("TikTok", 35, "Test"), ("Google", 25, "Support"))
    out, _ = AllocationAdjuster().adjust(base, DecisionVariables(), max_channels=2)
    assert {a.channel for a in out} == {"Facebook", "Google"}


def test_budget_high_keeps_all_channels():
    out, reasoning = AllocationAdjuster().adjust(THREE, DecisionVariables(budget="high"))
    assert len(out) == 3
    assert reasoning == []


def test_prefer_quality_moves_weight_toward_google():
    rows = _rows(THREE)
    record = AllocationAdjuster().apply_kpi_focus(rows, DecisionVariables(kpi_focus="prefer_quality"))
    after = {r.channel: r.pct for r in rows}
    assert record.trigger == "kpi_focus=prefer_quality"
    assert after["Google"] >= 60
    assert after["Facebook"] <= 30


def test_prefer_volume_respects_google_floor():
    rows = _rows(_base(("Facebook", 80, "Hero"), ("Google", 8, "Support"), ("TikTok", 12, "Test")))
    AllocationAdjuster().apply_kpi_focus(rows, DecisionVariables(kpi_focus="prefer_volume"))
    after = {r.channel: r.pct for r in rows}
    assert after == {"Facebook": 85, "Google": 5, "TikTok": 17}


def test_decrease_lifts_value_below_floor_to_floor():
    rows = _rows(_base(("Facebook", 90, "Hero"), ("Google", 3, "Support"), ("TikTok", 7, "Test")))
    AllocationAdjuster().apply_kpi_focus(rows, DecisionVariables(kpi_focus="prefer_volume"))
    assert {r.channel: r.pct for r in rows}["Google"] == 5


def test_always_on_promotes_google_when_highest():
    base = _base(("Facebook", 40, "Hero"), ("Google", 38, "Support"), ("TikTok", 22, "Test"))
    out, reasoning = AllocationAdjuster().adjust(base, DecisionVariables(duration="always_on"))
    roles = {a.channel: a.role for a in out}
    assert roles["Google"] == "Hero"
    assert roles["Facebook"] == "Support"
    assert "Hero" in reasoning[0].message


def test_weak_tracking_promotes_facebook():
    base = _base(("TikTok", 50, "Hero"), ("Facebook", 47, "Support"), ("Google", 3, "Test"))
    out, reasoning = AllocationAdjuster().adjust(base, DecisionVariables(tracking="weak"))
    roles = {a.channel: a.role for a in out}
    assert roles == {"TikTok": "Support", "Facebook": "Hero", "Google": "Test"}
    assert reasoning[0].trigger == "tracking=weak"


def test_informational_records_follow_adjustments():
    d = DecisionVariables(kpi_focus="prefer_volume", has_historical_data=False,
                          client_insistence=True, tracking="good")
    _, reasoning = AllocationAdjuster().adjust(THREE, d)
    assert [r.trigger for r in reasoning] == [
        "kpi_focus=prefer_volume",
        "has_historical_data=false",
        "client_insistence=true",
        "tracking=good",
    ]


@pytest.mark.parametrize("weights", [
    [("A", 1), ("B", 1), ("C", 1)],
    [("A", 53), ("B", 43), ("C", 5)],
    [("A", 33.3), ("B", 33.3), ("C", 33.4)],
    [("A", 7), ("B", 7)],
])
def test_largest_remainder_sums_to_100(weights):
    out = normalize_largest_remainder(weights)
    assert sum(p for _, p in out) == 100
    assert [c for c, _ in out] == [c for c, _ in weights]


def test_largest_remainder_gives_leftover_to_biggest_fractions():
    assert normalize_largest_remainder([("A", 1), ("B", 1), ("C", 1)]) == [("A", 34), ("B", 33), ("C", 33)]


def test_normalize_rejects_zero_weight():
    with pytest.raises(ValueError):
        normalize_largest_remainder([("A", 0), ("B", 0)])


def test_reconcile_roles_moves_hero_to_top():
    out = reconcile_roles(_base(("Facebook", 30, "Hero"), ("Google", 70, "Support")))
    assert {a.channel: a.role for a in out} == {"Facebook": "Support", "Google": "Hero"}


def test_round_half_up():
    assert round_half_up(2.5) == 3
    assert round_half_up(44.44) == 44
    assert round_half_up(88.89) == 89
