"""
Rover Challenge Scoring Engine

Formula:
  kb_bonus(r) = floor(min(r, cap) / step) × points      (cap optional)
  Total = rover_build + coding + items_collected × item_points
          + core_values + kb_bonus(remaining_budget)

Rules:
  - Defaults: step = 10 KB, points = 5, no cap, item_points = 3
  - Remaining budget is the submission's budget after all checkouts and sales
  - Negative remaining budget earns no bonus
  - Totals are always recomputed from the current scores; a stored total is
    only used when a submission has no scores at all
"""
from typing import Dict, Iterable, List, Tuple

from rover_shop.models import JudgeScores, ScoringParams, Submission


DEFAULT_PARAMS = ScoringParams()


def kb_bonus(remaining_budget: int, params: ScoringParams = DEFAULT_PARAMS) -> int:
    """
    Calculate bonus points for unspent King Bucks

    Args:
        remaining_budget: KB left after checkout
        params: Scoring parameters

    Returns:
        Bonus points (never negative)

    Example:
        >>> kb_bonus(60)
        30
        >>> kb_bonus(60, ScoringParams(bonus_cap=20))
        10
    """
    counted = remaining_budget
    if params.bonus_cap is not None:
        counted = min(counted, params.bonus_cap)
    if counted <= 0:
        return 0
    return (counted // params.bonus_step) * params.bonus_points


def items_points(items_collected: int, params: ScoringParams = DEFAULT_PARAMS) -> int:
    return items_collected * params.item_points


def total_score(
    scores: JudgeScores,
    remaining_budget: int,
    params: ScoringParams = DEFAULT_PARAMS
) -> int:
    """Total score for judge scores plus the KB bonus"""
    return (
        scores.rover_build_score
        + scores.coding_score
        + items_points(scores.items_collected, params)
        + scores.core_values_score
        + kb_bonus(remaining_budget, params)
    )


def score_breakdown(
    scores: JudgeScores,
    remaining_budget: int,
    params: ScoringParams = DEFAULT_PARAMS
) -> Dict:
    """
    Score with every component spelled out

    Returns:
        Dictionary with judge scores, derived points and total
    """
    return {
        "remaining_budget": remaining_budget,
        "kb_bonus": kb_bonus(remaining_budget, params),
        "rover_build_score": scores.rover_build_score,
        "coding_score": scores.coding_score,
        "items_collected": scores.items_collected,
        "items_points": items_points(scores.items_collected, params),
        "core_values_score": scores.core_values_score,
        "total_score": total_score(scores, remaining_budget, params),
    }


def submission_scores(submission: Submission) -> JudgeScores:
    return submission.scores or JudgeScores()


def submission_total(submission: Submission, params: ScoringParams = DEFAULT_PARAMS) -> int:
    """
    Live total for a submission

    Unscored submissions fall back to their stored total when one exists,
    otherwise they score the KB bonus only.
    """
    if submission.scores is None and submission.total_score is not None:
        return submission.total_score
    return total_score(submission_scores(submission), submission.budget, params)


def rank_submissions(
    submissions: Iterable[Submission],
    params: ScoringParams = DEFAULT_PARAMS
) -> List[Tuple[int, Submission, int]]:
    """
    Order submissions for the leaderboard

    Returns:
        (rank, submission, total) rows sorted by total (desc); ties keep
        the order the submissions came in
    """
    totals = [(submission, submission_total(submission, params)) for submission in submissions]
    # sorted() is stable, so equal totals keep arrival order
    totals = sorted(totals, key=lambda row: -row[1])
    return [(idx + 1, submission, total) for idx, (submission, total) in enumerate(totals)]
