"""
Tests for rover challenge scoring (KB bonus, totals, leaderboard order)
"""
from rover_shop.core.scoring import (
    kb_bonus,
    items_points,
    rank_submissions,
    score_breakdown,
    submission_total,
    total_score,
)
from rover_shop.models import JudgeScores, ScoringParams, Submission


def make_submission(sub_id: str, budget: int, scores=None, total=None) -> Submission:
    return Submission(
        id=sub_id,
        house="Lynx",
        team_name=f"Team {sub_id}",
        budget=budget,
        timestamp=f"2026-10-19T10:00:0{sub_id[-1]}+00:00",
        scores=scores,
        total_score=total,
    )


def test_kb_bonus_uncapped():
    """10 KB = 5 points, no cap by default"""
    assert kb_bonus(60) == 30
    assert kb_bonus(120) == 60


def test_kb_bonus_floors_partial_steps():
    """Partial 10 KB steps earn nothing"""
    assert kb_bonus(9) == 0
    assert kb_bonus(19) == 5


def test_kb_bonus_capped():
    """Capped variant counts at most 20 KB"""
    params = ScoringParams(bonus_cap=20)
    assert kb_bonus(60, params) == 10
    assert kb_bonus(15, params) == 5


def test_kb_bonus_negative_remaining():
    """Overspent budget earns no bonus"""
    assert kb_bonus(-30) == 0


def test_items_points():
    """3 points per collected item"""
    assert items_points(4) == 12


def test_total_score_example():
    """15 + 20 + 4*3 + 8 + floor(60/10)*5 = 85"""
    scores = JudgeScores(rover_build_score=15, coding_score=20, items_collected=4, core_values_score=8)
    assert total_score(scores, 60) == 85


def test_total_score_ignores_notes():
    """Notes never change the total"""
    base = JudgeScores(rover_build_score=10, coding_score=5, items_collected=1, core_values_score=2)
    noted = base.model_copy(update={"notes": "great teamwork"})
    assert total_score(base, 40) == total_score(noted, 40)


def test_total_score_is_pure():
    """Same inputs, same total"""
    scores = JudgeScores(rover_build_score=20, coding_score=25, items_collected=2, core_values_score=10)
    assert total_score(scores, 33) == total_score(scores, 33) == 20 + 25 + 6 + 10 + 15


def test_score_breakdown():
    """Breakdown lists every component"""
    scores = JudgeScores(rover_build_score=15, coding_score=20, items_collected=4, core_values_score=8)
    result = score_breakdown(scores, 60)
    assert result["kb_bonus"] == 30
    assert result["items_points"] == 12
    assert result["total_score"] == 85


def test_submission_total_uses_live_scores():
    """A stale stored total is ignored when scores exist"""
    scores = JudgeScores(rover_build_score=15, coding_score=20, items_collected=4, core_values_score=8)
    submission = make_submission("s1", 60, scores=scores, total=999)
    assert submission_total(submission) == 85


def test_submission_total_falls_back_to_stored_total():
    """Unscored submission with a stored total keeps it"""
    submission = make_submission("s1", 60, total=42)
    assert submission_total(submission) == 42


def test_submission_total_unscored():
    """Unscored submission scores the KB bonus only"""
    submission = make_submission("s1", 60)
    assert submission_total(submission) == 30


def test_rank_submissions_descending():
    """Highest total first"""
    low = make_submission("s1", 10)
    high = make_submission("s2", 100)
    ranked = rank_submissions([low, high])
    assert [row[1].id for row in ranked] == ["s2", "s1"]
    assert [row[0] for row in ranked] == [1, 2]
    assert [row[2] for row in ranked] == [50, 5]


def test_rank_submissions_ties_keep_arrival_order():
    """Equal totals stay in the order they arrived"""
    first = make_submission("s1", 40)
    second = make_submission("s2", 40)
    third = make_submission("s3", 45)
    ranked = rank_submissions([first, second, third])
    assert [row[1].id for row in ranked] == ["s1", "s2", "s3"]
