# mediaplanner/domain/services/narrative.py
"""
Templated reasoning and summary text.

Each reasoning record is keyed by the decision that fired it (`field=value`),
so callers and tests can match on `trigger` without parsing prose.
"""
from typing import Dict, List, Optional

from mediaplanner.domain.models import ChannelAllocation, ReasoningRecord, HERO

REASONING_TEMPLATES: Dict[str, str] = {
    "rule": "Matched rule '{name}' (priority {priority}): {explanation}",
    "rule=default": "No rule matched; using the default Facebook 50 / Google 30 / TikTok 20 split.",
    "budget=low": "Limited budget: concentrated on {kept} to keep optimization focused.",
    "max_channels": "Channel cap of {limit}: concentrated on {kept}.",
    "kpi_focus=prefer_volume": "Volume focus: Facebook and TikTok +5, Google -10 (not below 5%).",
    "kpi_focus=prefer_quality": "Quality focus: Google +10 for search intent, Facebook -10 (not below 10%).",
    "duration=burst": "Burst campaign: social builds momentum fast, Facebook and TikTok +3, Google -6.",
    "duration=always_on": "Always-on campaign: Google +5 for steady intent capture{promoted}.",
    "tracking=weak": "Weak tracking: Facebook +5, platform-native optimization is more reliable{promoted}.",
    "tracking=good": "Good tracking: cross-channel attribution can be trusted, no shift applied.",
    "has_historical_data=true": "Historical data available: calibrate toward the past winning channel after launch.",
    "has_historical_data=false": "No historical data: start from the recommended base and adjust after the first read.",
    "client_insistence=true": "Client has a channel preference: consider reserving 10-20% for it.",
    # scored strategy
    "points": "Points: Facebook {facebook}, Google {google}; {hero} leads with {efficiency}% efficiency ({strength}).",
    "blocker": "TikTok excluded: {reasons}.",
    "override": "Previous winner {winner} forces bucket {bucket_id}.",
    "bucket": "Bucket {bucket_id} ({name}): {insight}",
}

_PROMOTED = " and it becomes the Hero channel"


def reason(trigger: str, template: Optional[str] = None, **ctx) -> ReasoningRecord:
    key = template or trigger
    if key in ("duration=always_on", "tracking=weak"):
        ctx["promoted"] = _PROMOTED if ctx.pop("promoted", False) else ""
    return ReasoningRecord(trigger=trigger, message=REASONING_TEMPLATES[key].format(**ctx))


def describe_allocations(allocations: List[ChannelAllocation]) -> str:
    return ", ".join(f"{a.channel} {a.percentage}% ({a.role})" for a in allocations)


def summarize(allocations: List[ChannelAllocation], headline: Optional[str] = None) -> str:
    hero = next((a for a in allocations if a.role == HERO), allocations[0])
    text = f"{hero.channel} leads with {hero.percentage}% of the budget. Split: {describe_allocations(allocations)}."
    return f"{headline}. {text}" if headline else text
