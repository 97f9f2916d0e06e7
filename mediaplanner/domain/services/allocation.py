# mediaplanner/domain/services/allocation.py
"""
Post-processing of a base channel split.

Transformations run in a fixed order (budget, KPI focus, duration, tracking),
each appending one reasoning record when it fires. Intermediate percentages
are kept as floats; integers are produced once, at the end, with
largest-remainder rounding so the split always sums to exactly 100.
"""
from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Iterable, List, Optional, Tuple

from mediaplanner.domain.models import (
    ChannelAllocation,
    DecisionVariables,
    ReasoningRecord,
    HERO,
    TEST,
)
from mediaplanner.domain.services.narrative import reason

LOW_BUDGET_MAX_CHANNELS = 2

# (channel, delta, floor); floor only applies to decreases
VOLUME_SHIFT = (("Facebook", 5, None), ("TikTok", 5, None), ("Google", -10, 5))
QUALITY_SHIFT = (("Google", 10, None), ("Facebook", -10, 10))
BURST_SHIFT = (("Facebook", 3, None), ("TikTok", 3, None), ("Google", -6, 5))
ALWAYS_ON_BONUS = ("Google", 5)
WEAK_TRACKING_BONUS = ("Facebook", 5)


@dataclass
class _Row:
    channel: str
    pct: float
    role: str


def round_half_up(x: float) -> int:
    return int(math.floor(x + 0.5))


def normalize_largest_remainder(rows: Iterable[Tuple[str, float]]) -> List[Tuple[str, int]]:
    """
    Scale (channel, weight) pairs to integers summing to exactly 100.

    Each entry gets floor(share); leftover points go to the largest fractional
    parts, ties broken by larger weight, then input order.
    """
    rows = list(rows)
    if not rows:
        return []
    total = sum(w for _, w in rows)
    if total <= 0:
        raise ValueError("cannot normalize an allocation with no weight")

    shares = [w * 100.0 / total for _, w in rows]
    floors = [int(math.floor(s)) for s in shares]
    leftover = 100 - sum(floors)
    order = sorted(
        range(len(rows)),
        key=lambda i: (-(shares[i] - floors[i]), -rows[i][1], i),
    )
    for i in order[:leftover]:
        floors[i] += 1
    return [(rows[i][0], floors[i]) for i in range(len(rows))]


def reconcile_roles(allocations: List[ChannelAllocation]) -> List[ChannelAllocation]:
    """Make sure exactly one Hero exists and it holds the highest percentage."""
    if not allocations:
        return allocations
    top = max(allocations, key=lambda a: a.percentage)
    hero = next((a for a in allocations if a.role == HERO), None)
    if hero is not None and hero.percentage == top.percentage:
        return allocations
    out = []
    for a in allocations:
        if a is top:
            out.append(a.model_copy(update={"role": HERO}))
        elif a is hero:
            out.append(a.model_copy(update={"role": top.role if top.role != HERO else "Support"}))
        else:
            out.append(a)
    return out


def rank_roles(pairs: List[Tuple[str, int]]) -> List[ChannelAllocation]:
    """Order by percentage and tag Hero / Support / Test by rank."""
    ranked = sorted(pairs, key=lambda p: -p[1])
    roles = ("Hero", "Support", "Test")
    return [
        ChannelAllocation(channel=c, percentage=p, role=roles[min(i, 2)])
        for i, (c, p) in enumerate(ranked)
    ]


def with_amounts(allocations: List[ChannelAllocation], total_budget: Optional[float]) -> List[ChannelAllocation]:
    if total_budget is None:
        return allocations
    return [a.model_copy(update={"amount": round(total_budget * a.percentage / 100, 2)}) for a in allocations]


class AllocationAdjuster:
    """Applies decision-driven shifts to a base allocation."""

    def adjust(
        self,
        base: Iterable[ChannelAllocation],
        decisions: DecisionVariables,
        max_channels: Optional[int] = None,
    ) -> Tuple[List[ChannelAllocation], List[ReasoningRecord]]:
        rows = [_Row(a.channel, float(a.percentage), a.role) for a in base]
        reasoning: List[ReasoningRecord] = []

        fired = [
            self.apply_budget(rows, decisions, max_channels),
            self.apply_kpi_focus(rows, decisions),
            self.apply_duration(rows, decisions),
            self.apply_tracking(rows, decisions),
        ]
        reasoning.extend(r for r in fired if r is not None)

        reasoning.extend(self.informational(decisions))
        return self.finalize(rows), reasoning

    # --- transformations; each mutates `rows` in place ---

    def apply_budget(self, rows: List[_Row], d: DecisionVariables,
                     max_channels: Optional[int] = None) -> Optional[ReasoningRecord]:
        limit = max_channels or (LOW_BUDGET_MAX_CHANNELS if d.budget == "low" else None)
        if limit is None or len(rows) <= limit:
            return None

        # Test entries go first; among the rest keep the largest
        keep = sorted(rows, key=lambda r: (r.role == TEST, -r.pct))[:limit]
        kept_ids = {id(r) for r in keep}
        rows[:] = [r for r in rows if id(r) in kept_ids]
        total = sum(r.pct for r in rows)
        for r in rows:
            r.pct = r.pct * 100.0 / total

        kept = " and ".join(r.channel for r in rows)
        if d.budget == "low":
            return reason("budget=low", kept=kept)
        return reason(f"max_channels={limit}", template="max_channels", limit=limit, kept=kept)

    def apply_kpi_focus(self, rows: List[_Row], d: DecisionVariables) -> Optional[ReasoningRecord]:
        if d.kpi_focus == "prefer_volume":
            _shift(rows, VOLUME_SHIFT)
        elif d.kpi_focus == "prefer_quality":
            _shift(rows, QUALITY_SHIFT)
        else:
            return None
        return reason(f"kpi_focus={d.kpi_focus}")

    def apply_duration(self, rows: List[_Row], d: DecisionVariables) -> Optional[ReasoningRecord]:
        if d.duration == "burst":
            _shift(rows, BURST_SHIFT)
            return reason("duration=burst")
        if d.duration == "always_on":
            channel, bonus = ALWAYS_ON_BONUS
            promoted = _bump_and_promote(rows, channel, bonus)
            return reason("duration=always_on", promoted=promoted)
        return None

    def apply_tracking(self, rows: List[_Row], d: DecisionVariables) -> Optional[ReasoningRecord]:
        if d.tracking != "weak":
            return None
        channel, bonus = WEAK_TRACKING_BONUS
        promoted = _bump_and_promote(rows, channel, bonus)
        return reason("tracking=weak", promoted=promoted)

    def informational(self, d: DecisionVariables) -> List[ReasoningRecord]:
        records = []
        if d.has_historical_data is not None:
            records.append(reason(f"has_historical_data={str(d.has_historical_data).lower()}"))
        if d.client_insistence:
            records.append(reason("client_insistence=true"))
        if d.tracking == "good":
            records.append(reason("tracking=good"))
        return records

    def finalize(self, rows: List[_Row]) -> List[ChannelAllocation]:
        pcts = dict(normalize_largest_remainder((r.channel, r.pct) for r in rows))
        allocations = [ChannelAllocation(channel=r.channel, percentage=pcts[r.channel], role=r.role) for r in rows]
        return reconcile_roles(allocations)


def _shift(rows: List[_Row], deltas) -> None:
    by_channel = {r.channel: r for r in rows}
    for channel, delta, floor in deltas:
        row = by_channel.get(channel)
        if row is None:
            continue
        if delta >= 0:
            row.pct += delta
        else:
            # a decrease always lands at or above the floor, lifting a value already below it
            row.pct = max(floor, row.pct + delta)


def _bump_and_promote(rows: List[_Row], channel: str, bonus: float) -> bool:
    row = next((r for r in rows if r.channel == channel), None)
    if row is None:
        return False
    row.pct += bonus
    if row.role == HERO:
        return False
    if all(row.pct >= r.pct for r in rows):
        hero = next((r for r in rows if r.role == HERO), None)
        if hero is not None:
            hero.role = row.role
        row.role = HERO
        return True
    return False
