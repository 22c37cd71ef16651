"""
Leaderboard service - Assemble ranked submissions and house summaries
"""
from typing import Dict, Iterable, List

from rover_shop.core.scoring import rank_submissions, score_breakdown, submission_scores, submission_total
from rover_shop.models import ScoringParams, Submission, TeamDocument


def leaderboard_rows(submissions: Iterable[Submission], params: ScoringParams) -> List[Dict]:
    """
    Ranked rows for the admin leaderboard

    Every total is computed from the submission's current scores.
    """
    rows = []
    for rank, submission, total in rank_submissions(submissions, params):
        breakdown = score_breakdown(submission_scores(submission), submission.budget, params)
        breakdown["total_score"] = total
        rows.append({
            "rank": rank,
            "id": submission.id,
            "team_name": submission.team_name,
            "house": submission.house,
            "grade": submission.grade,
            "budget": submission.budget,
            "is_scored": submission.scores is not None,
            "notes": submission_scores(submission).notes,
            "owned_items": [item.to_record() for item in submission.owned_items],
            "timestamp": submission.timestamp,
            **breakdown,
        })
    return rows


def house_summary(submissions: Iterable[Submission], houses: List[str], params: ScoringParams) -> List[Dict]:
    """Submission count and summed total per house, best house first"""
    summary = {house: {"house": house, "submissions": 0, "total_score": 0} for house in houses}
    for submission in submissions:
        entry = summary.setdefault(
            submission.house,
            {"house": submission.house, "submissions": 0, "total_score": 0}
        )
        entry["submissions"] += 1
        entry["total_score"] += submission_total(submission, params)

    return sorted(summary.values(), key=lambda x: x["total_score"], reverse=True)


def teacher_stats(submissions: List[Submission]) -> Dict:
    """Totals shown on the teacher dashboard"""
    count = len(submissions)
    average_spent = round(sum(s.spent for s in submissions) / count) if count else 0
    within_budget = sum(1 for s in submissions if s.spent <= s.budget)
    return {
        "total_submissions": count,
        "average_spent": average_spent,
        "within_budget": within_budget,
        "over_budget": count - within_budget,
    }


def group_teams_by_house(teams: Iterable[TeamDocument]) -> Dict[str, List[TeamDocument]]:
    grouped: Dict[str, List[TeamDocument]] = {}
    for team in teams:
        grouped.setdefault(team.house, []).append(team)
    return grouped
