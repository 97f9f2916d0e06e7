# mediaplanner/domain/catalog.py
"""
Compiled-in question catalogs, rule table and bucket models.

Everything here is built once at import time and exposed through read-only
mappings; there is no runtime mutation path.
"""
from __future__ import annotations

from types import MappingProxyType
from typing import Dict, List, Mapping, Optional, Tuple

from mediaplanner.core.errors import InvalidInputError, NotFoundError
from mediaplanner.domain.models import (
    Bucket,
    ChannelAllocation,
    Option,
    Question,
    Rule,
)

# --------------------------------------------------------------------
# Decision tree (rule-matching strategy)
# --------------------------------------------------------------------

_DECISION_TREE: Tuple[Question, ...] = (
    Question(
        id="STEP_1", strategy="rules", step_number=1, topic="Objective",
        prompt="What is the main objective of this campaign?",
        hint="Awareness builds reach; conversion drives measurable actions.",
        options=(
            Option(id="awareness", label="Awareness", value="awareness",
                   description="Make more people know the brand", next_question_id="STEP_1A"),
            Option(id="conversion", label="Conversion", value="conversion",
                   description="Drive sales, leads or sign-ups", next_question_id="STEP_2"),
        ),
    ),
    Question(
        id="STEP_1A", strategy="rules", step_number=1.5, topic="Audience",
        prompt="Who is the core audience?",
        hint="Age group decides which social platform leads reach.",
        options=(
            Option(id="genz", label="Gen Z (18-24)", value="genz", next_question_id="STEP_2"),
            Option(id="adult", label="Adults (25+)", value="adult", next_question_id="STEP_2"),
        ),
    ),
    Question(
        id="STEP_2", strategy="rules", step_number=2, topic="Price range",
        prompt="How expensive is the product or service?",
        hint="High-ticket purchases involve research and comparison.",
        options=(
            Option(id="high_ticket", label="High ticket", value="high", next_question_id="STEP_3A"),
            Option(id="low_ticket", label="Low ticket", value="low", next_question_id="STEP_3B"),
        ),
    ),
    Question(
        id="STEP_3A", strategy="rules", step_number=3, topic="KPI",
        prompt="High-ticket campaigns optimize for lead quality.",
        hint="Fewer, better leads that the sales team can close.",
        options=(
            Option(id="quality", label="Lead quality", value="quality", next_question_id="STEP_4"),
        ),
    ),
    Question(
        id="STEP_3B", strategy="rules", step_number=3, topic="KPI",
        prompt="Low-ticket campaigns optimize for volume.",
        hint="As many orders as possible at a low cost per result.",
        options=(
            Option(id="volume", label="Volume", value="volume", next_question_id="STEP_4"),
        ),
    ),
    Question(
        id="STEP_4", strategy="rules", step_number=4, topic="Budget",
        prompt="How large is the monthly media budget?",
        hint="Small budgets should not be spread over too many channels.",
        options=(
            Option(id="low_budget", label="Limited budget", value="low", next_question_id="STEP_5"),
            Option(id="high_budget", label="Comfortable budget", value="high", next_question_id="STEP_5"),
        ),
    ),
    Question(
        id="STEP_5", strategy="rules", step_number=5, topic="KPI focus",
        prompt="If you had to choose, which matters more?",
        hint="Volume favours social platforms; quality favours search.",
        options=(
            Option(id="prefer_volume", label="More results", value="prefer_volume", next_question_id="STEP_6"),
            Option(id="prefer_quality", label="Better results", value="prefer_quality", next_question_id="STEP_6"),
        ),
    ),
    Question(
        id="STEP_6", strategy="rules", step_number=6, topic="Duration",
        prompt="How long will the campaign run?",
        hint="Bursts need fast reach; always-on plans need steady intent capture.",
        options=(
            Option(id="burst", label="Short burst", value="burst", next_question_id="STEP_7"),
            Option(id="always_on", label="Always-on", value="always_on", next_question_id="STEP_7"),
        ),
    ),
    Question(
        id="STEP_7", strategy="rules", step_number=7, topic="Historical data",
        prompt="Do you have performance data from earlier campaigns?",
        hint="Past results help calibrate the first month.",
        options=(
            Option(id="has_data", label="Yes", next_question_id="STEP_8"),
            Option(id="no_data", label="No", next_question_id="STEP_8"),
        ),
    ),
    Question(
        id="STEP_8", strategy="rules", step_number=8, topic="Client preference",
        prompt="Does the client insist on a specific channel?",
        hint="A firm client preference is noted but does not override the plan.",
        options=(
            Option(id="client_insist", label="Yes, the client insists", next_question_id="STEP_9"),
            Option(id="no_preference", label="No preference", next_question_id="STEP_9"),
        ),
    ),
    Question(
        id="STEP_9", strategy="rules", step_number=9, topic="Tracking",
        prompt="How reliable is conversion tracking (pixel, conversion API)?",
        hint="Weak tracking favours platform-native optimization.",
        options=(
            Option(id="good_tracking", label="Good, tracked to purchase", value="good"),
            Option(id="weak_tracking", label="Weak or partial", value="weak"),
        ),
    ),
)

# --------------------------------------------------------------------
# Scored questionnaire (bucket strategy)
# --------------------------------------------------------------------

_TT = ("TikTok",)

_SCORED: Tuple[Question, ...] = (
    Question(
        id="q1", strategy="scored", step_number=1, topic="Strategic Context",
        prompt="How do customers usually buy this product or service?",
        hint="Reflects real decision behaviour, not just price.",
        options=(
            Option(id="Low", label="Decide fast / buy on sight", value="Low",
                   description="Low involvement / FB +3", points={"facebook": 3}),
            Option(id="High", label="Think, compare and read reviews first", value="High",
                   description="High involvement / GG +3", points={"google": 3}),
        ),
    ),
    Question(
        id="q2", strategy="scored", step_number=2, topic="Strategic Context",
        prompt="Do people already search for this product on Google?",
        hint="Search volume presence",
        options=(
            Option(id="Yes", label="Yes, clear search demand", value="Yes",
                   description="Existing demand / GG +2", points={"google": 2}),
            Option(id="No", label="Hardly / new product that needs awareness first", value="No",
                   description="Need awareness / FB +2", points={"facebook": 2}),
        ),
    ),
    Question(
        id="q3", strategy="scored", step_number=3, topic="Strategic Context",
        prompt="How likely are customers to buy again?",
        hint="LTV / retention structure",
        options=(
            Option(id="No", label="One-off or rare purchase", value="No",
                   description="One-off model / GG +1", points={"google": 1}),
            Option(id="Yes", label="Repeat purchase on a cycle", value="Yes",
                   description="Repeat purchase / FB +1", points={"facebook": 1}),
        ),
    ),
    Question(
        id="q4", strategy="scored", step_number=4, topic="Operational Flow",
        prompt="Where do customers mainly complete the purchase?",
        hint="Friction check (TikTok blocker if high)",
        options=(
            Option(id="Low", label="Online, instantly (website, marketplace, social commerce)", value="Low",
                   description="Low friction / FB +1", points={"facebook": 1}),
            Option(id="High", label="Needs follow-up, a call or a quotation", value="High",
                   description="High friction / GG +1", points={"google": 1}, blocks=_TT),
        ),
    ),
    Question(
        id="q5", strategy="scored", step_number=5, topic="Operational Flow",
        prompt="How ready is ad measurement (pixel, conversions)?",
        hint="Data health (TikTok blocker if weak)",
        options=(
            Option(id="Strong", label="Fully installed, tracked to the sale", value="Strong",
                   description="Full funnel / GG +1", points={"google": 1}),
            Option(id="Weak", label="Partial, only clicks or chats are tracked", value="Weak",
                   description="Partial tracking / FB +1", points={"facebook": 1}, blocks=_TT),
        ),
    ),
    Question(
        id="q6", strategy="scored", step_number=6, topic="Content & Resources",
        prompt="Is vertical video ready for ads?",
        hint="Creative block (TikTok blocker if no)",
        options=(
            Option(id="Yes", label="Yes, social-ready video exists", value="Yes"),
            Option(id="No", label="No assets ready yet", value="No", blocks=_TT),
        ),
    ),
    Question(
        id="q7", strategy="scored", step_number=7, topic="Content & Resources",
        prompt="What is the planned monthly ad budget?",
        hint="Budget block (TikTok blocker below 70k THB)",
        options=(
            Option(id="High", label="70,000 THB or more", value="High"),
            Option(id="Low", label="Below 70,000 THB", value="Low", blocks=_TT),
        ),
    ),
    Question(
        id="q8", strategy="scored", step_number=8, topic="Audience & Strategy",
        prompt="Which age group is the main target?",
        hint="Age blocker (TikTok blocker if 45+)",
        options=(
            Option(id="18-24", label="18-24 (Gen Z)", value="18-24"),
            Option(id="25-34", label="25-34", value="25-34"),
            Option(id="35-44", label="35-44", value="35-44"),
            Option(id="45+", label="45+", value="45+", blocks=_TT),
        ),
    ),
    Question(
        id="q9", strategy="scored", step_number=9, topic="Audience & Strategy",
        prompt="What is the main goal of this campaign?",
        hint="Volume vs quality",
        options=(
            Option(id="Volume", label="As many leads or orders as possible (low CPL)", value="Volume",
                   points={"facebook": 1}),
            Option(id="Quality", label="High-quality customers likely to close (higher ROAS)", value="Quality",
                   points={"google": 1}),
        ),
    ),
    Question(
        id="q10", strategy="scored", step_number=10, topic="Audience & Strategy",
        prompt="Has a past campaign shown a clear winning channel?",
        hint="Proof of concept context",
        options=(
            Option(id="FACEBOOK", label="3-6 months of data, Facebook won", value="FACEBOOK"),
            Option(id="GOOGLE", label="3-6 months of data, Google won", value="GOOGLE"),
            Option(id="New", label="No data yet / just starting", value="New"),
        ),
    ),
)

# scored questions are linear; the last one is terminal
def _chain(questions: Tuple[Question, ...]) -> Tuple[Question, ...]:
    linked = []
    for i, q in enumerate(questions):
        nxt = questions[i + 1].id if i + 1 < len(questions) else None
        opts = tuple(o.model_copy(update={"next_question_id": nxt}) for o in q.options)
        linked.append(q.model_copy(update={"options": opts}))
    return tuple(linked)


_SCORED = _chain(_SCORED)

# best attainable single-channel total: q1 + q2 + q3 + q4 + q5 + q9
MAX_POINTS = 9

# --------------------------------------------------------------------
# Rule table
# --------------------------------------------------------------------

def _alloc(*rows: Tuple[str, int, str]) -> Tuple[ChannelAllocation, ...]:
    return tuple(ChannelAllocation(channel=c, percentage=p, role=r) for c, p, r in rows)


RULES: Tuple[Rule, ...] = (
    Rule(
        name="Gen Z awareness",
        priority=100,
        conditions={"objective": "awareness", "audience": "genz"},
        allocations=_alloc(("TikTok", 50, "Hero"), ("Facebook", 35, "Support"), ("Google", 15, "Test")),
        explanation="Gen Z discovers brands through short video, so TikTok leads reach.",
    ),
    Rule(
        name="Adult awareness",
        priority=100,
        conditions={"objective": "awareness", "audience": "adult"},
        allocations=_alloc(("Facebook", 55, "Hero"), ("TikTok", 25, "Support"), ("Google", 20, "Test")),
        explanation="Adults 25+ are most reachable on Facebook; TikTok extends frequency.",
    ),
    Rule(
        name="High-ticket quality",
        priority=100,
        conditions={"objective": "conversion", "price_range": "high", "kpi": "quality"},
        allocations=_alloc(("Google", 60, "Hero"), ("Facebook", 30, "Support"), ("TikTok", 10, "Test")),
        explanation="High-ticket buyers research first, so search intent captures qualified leads.",
    ),
    Rule(
        name="Low-ticket volume",
        priority=100,
        conditions={"objective": "conversion", "price_range": "low", "kpi": "volume"},
        allocations=_alloc(("Facebook", 45, "Hero"), ("TikTok", 35, "Support"), ("Google", 20, "Test")),
        explanation="Impulse purchases scale on social feeds where cost per result is lowest.",
    ),
    Rule(
        name="Low-budget constraint",
        priority=50,
        conditions={"budget": "low"},
        max_channels=2,
        explanation="A limited budget is concentrated on at most two channels.",
    ),
    Rule(
        name="Fallback",
        priority=0,
        conditions={},
        allocations=_alloc(("Facebook", 50, "Hero"), ("Google", 30, "Support"), ("TikTok", 20, "Test")),
        explanation="Balanced default split when no specific pattern applies.",
    ),
)

DEFAULT_ALLOCATION: Tuple[ChannelAllocation, ...] = _alloc(
    ("Facebook", 50, "Hero"), ("Google", 30, "Support"), ("TikTok", 20, "Test"),
)

# --------------------------------------------------------------------
# Bucket models
# --------------------------------------------------------------------

_BUCKET_ROWS: Tuple[Bucket, ...] = (
    Bucket(
        id="C1", name="Social Dominance", facebook=70, google=20, tiktok=10,
        insight="Short video and social lead the plan to create instant purchase demand.",
        recommendations=("Run a video-heavy TikTok campaign", "Use broad targeting on Facebook",
                         "Boost creator posts with TikTok Spark Ads"),
        script="We lead with Facebook and TikTok because the product sells on emotion.",
    ),
    Bucket(
        id="C2", name="Stable Social Foundation", facebook=70, google=30, tiktok=0,
        insight="Build a solid Facebook base and let search pick up the intent that slips through.",
        recommendations=("Install the Conversions API", "Ship clean single-image ads",
                         "Bid on branded search keywords"),
        script="We start by building a social fan base and let Google Search close the work.",
    ),
    Bucket(
        id="C3", name="Customer Loyalty Focus", facebook=75, google=25, tiktok=0,
        insight="Repeat purchase is driven from the existing customer base through retargeting, as LTV is high.",
        recommendations=("Run Facebook catalog ads", "Build custom audiences from customer phone lists",
                         "Reserve search budget for brand keywords"),
        script="This plan squeezes value from existing customers for steady profit.",
    ),
    Bucket(
        id="C4", name="Efficient Performance", facebook=80, google=20, tiktok=0,
        insight="Budget goes where profit is highest (the winning channel) to push ROAS to the limit.",
        recommendations=("Pause unprofitable ad sets daily", "Use content that targets a specific pain point",
                         "Run a Performance Max campaign alongside"),
        script="We put 80% on Facebook to scale orders as far as possible.",
    ),
    Bucket(
        id="C5", name="Omnichannel Intent Drive", facebook=30, google=60, tiktok=10,
        insight="Google Search closes high-intent buyers while TikTok helps persuade.",
        recommendations=("Focus on Google Shopping ads", "Post review-style clips on TikTok",
                         "Analyse the journey in GA4"),
        script="Search demand plus persuasive video closes premium sales.",
    ),
    Bucket(
        id="C6", name="Search Intent Capture", facebook=30, google=70, tiktok=0,
        insight="Capture customers with clear intent on search to keep CPA safe.",
        recommendations=("Target buy, price and review keywords", "Make landing pages easy to compare",
                         "Reinforce with remarketing"),
        script="This plan captures people who already want to buy on Google.",
    ),
    Bucket(
        id="C7", name="Premium Lead Quality Filter", facebook=25, google=75, tiktok=0,
        insight="Filter for premium contacts through tightly qualified keywords.",
        recommendations=("Bid with target ROAS", "Maintain a detailed negative keyword list",
                         "Remarket only to site visitors"),
        script="We keep only high-quality leads so sales can close accurately.",
    ),
    Bucket(
        id="C8", name="Market Authority Leadership", facebook=20, google=80, tiktok=0,
        insight="Own the search results across every important keyword in the market.",
        recommendations=("Run search covering every competitor", "Use Performance Max to pick up every channel",
                         "Use display ads to reinforce category leadership"),
        script="The goal is to be first in mind every time someone searches for the brand.",
    ),
)

BUCKETS: Mapping[str, Bucket] = MappingProxyType({b.id: b for b in _BUCKET_ROWS})

# --------------------------------------------------------------------
# Read-only lookup
# --------------------------------------------------------------------

_CATALOGS: Mapping[str, Tuple[Question, ...]] = MappingProxyType({
    "rules": _DECISION_TREE,
    "scored": _SCORED,
})

QUESTIONS: Mapping[str, Question] = MappingProxyType(
    {q.id: q for catalog in _CATALOGS.values() for q in catalog}
)


def _catalog(strategy: str) -> Tuple[Question, ...]:
    try:
        return _CATALOGS[strategy]
    except KeyError:
        raise InvalidInputError(f"Unknown strategy '{strategy}'") from None


def list_questions(strategy: str) -> List[Question]:
    return list(_catalog(strategy))


def initial_question(strategy: str) -> Question:
    return _catalog(strategy)[0]


def get_question(question_id: str) -> Question:
    q = QUESTIONS.get(question_id)
    if q is None:
        raise NotFoundError(f"Step '{question_id}' not found")
    return q


def get_option(question_id: str, option_id: str) -> Option:
    opt = get_question(question_id).option(option_id)
    if opt is None:
        raise InvalidInputError(f"Option '{option_id}' is not valid for step '{question_id}'")
    return opt


def next_question(question_id: str, option_id: str) -> Optional[Question]:
    """Question reached by choosing `option_id`; None when the flow is complete."""
    opt = get_option(question_id, option_id)
    return QUESTIONS[opt.next_question_id] if opt.next_question_id else None


def active_rules() -> List[Rule]:
    return [r for r in RULES if r.is_active]


def reference_data() -> Dict[str, object]:
    return {
        "questions": [q.model_dump() for q in _SCORED],
        "models": {k: b.model_dump() for k, b in BUCKETS.items()},
        "rules": [r.model_dump() for r in RULES],
    }
