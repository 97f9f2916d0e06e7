"""
Scored-bucket strategy: points, blockers, tiers, override and bucket split.
"""

from conftest import FACEBOOK_MAX_RUN, answers

from mediaplanner.domain.services.decision import (
    ScoredBucketStrategy,
    classify,
    score_answers,
    strength_tier,
)


def _run(**overrides):
    picked = dict(FACEBOOK_MAX_RUN)
    picked.update(overrides)
    return answers(*picked.items())


def test_facebook_max_points_with_blocker_is_c4():
    c = classify(answers(*FACEBOOK_MAX_RUN))
    assert c.points == {"facebook": 9, "google": 0}
    assert c.hero == "Facebook"
    assert c.efficiency == 100
    assert c.strength == "high"
    assert c.blockers == ["q5"]
    assert c.bucket_id == "C4"


def test_no_blocker_facebook_hero_is_c1():
    c = classify(_run(q5="Strong"))
    assert c.blockers == []
    assert c.points == {"facebook": 8, "google": 1}
    assert c.bucket_id == "C1"


def test_google_hero_without_blocker_is_c5():
    c = classify(answers(("q1", "High"), ("q2", "Yes"), ("q3", "No"), ("q5", "Strong"), ("q9", "Quality")))
    assert c.hero == "Google"
    assert c.efficiency == 89
    assert c.bucket_id == "C5"


def test_google_hero_with_blocker_uses_tier():
    # google 3 + 1 = 4 -> 44% mid
    c = classify(answers(("q1", "High"), ("q4", "High")))
    assert c.hero == "Google"
    assert c.efficiency == 44
    assert c.strength == "mid"
    assert c.bucket_id == "C7"


def test_tie_goes_to_facebook():
    c = classify(answers(("q3", "Yes"), ("q4", "High")))
    assert c.points == {"facebook": 1, "google": 1}
    assert c.hero == "Facebook"
    assert c.strength == "low"
    assert c.bucket_id == "C2"


def test_repeated_question_counts_once_last_wins():
    c = classify(answers(*[("q1", "Low")] * 4))
    assert c.points == {"facebook": 3, "google": 0}
    assert c.efficiency == 33

    c = classify(answers(("q1", "Low"), ("q1", "High")))
    assert c.points == {"facebook": 0, "google": 3}
    assert c.hero == "Google"


def test_efficiency_never_exceeds_100():
    c = classify(answers(*(list(FACEBOOK_MAX_RUN) * 3)))
    assert c.efficiency == 100
    assert c.points["facebook"] == 9


def test_winner_override_forces_bucket():
    assert classify(_run(q5="Strong", q10="GOOGLE")).bucket_id == "C8"
    c = classify(answers(("q1", "High"), ("q10", "FACEBOOK")))
    assert c.bucket_id == "C4"
    assert c.override == "FACEBOOK"


def test_every_blocker_is_detected():
    _, blockers, _ = score_answers(answers(
        ("q4", "High"), ("q5", "Weak"), ("q6", "No"), ("q7", "Low"), ("q8", "45+"),
    ))
    assert blockers == ["q4", "q5", "q6", "q7", "q8"]


def test_non_scored_answers_are_skipped():
    points, blockers, winner = score_answers(answers(("STEP_1", "awareness"), ("q1", "Bogus")))
    assert points == {"facebook": 0, "google": 0}
    assert blockers == [] and winner is None


def test_strength_tiers():
    assert strength_tier(40) == "low"
    assert strength_tier(41) == "mid"
    assert strength_tier(70) == "mid"
    assert strength_tier(71) == "high"


def test_bucket_split_drops_zero_channels():
    result = ScoredBucketStrategy().evaluate(answers(*FACEBOOK_MAX_RUN))
    assert [(a.channel, a.percentage, a.role) for a in result.allocations] == [
        ("Facebook", 80, "Hero"), ("Google", 20, "Support"),
    ]
    assert result.classification.bucket_id == "C4"
    assert "blocker" in [r.trigger for r in result.reasoning]
    assert result.reasoning[-1].trigger == "bucket"


def test_three_channel_bucket_ranks_roles():
    result = ScoredBucketStrategy().evaluate(_run(q5="Strong"), total_budget=100000)
    assert [(a.channel, a.role, a.amount) for a in result.allocations] == [
        ("Facebook", "Hero", 70000.0), ("Google", "Support", 20000.0), ("TikTok", "Test", 10000.0),
    ]


def test_empty_scored_run_still_classifies():
    result = ScoredBucketStrategy().evaluate([])
    assert result.classification.bucket_id == "C1"
    assert sum(a.percentage for a in result.allocations) == 100
