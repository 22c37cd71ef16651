"""
Leaderboard endpoints
"""
from typing import Optional

from fastapi import APIRouter, Depends

from rover_shop.context import AppContext, get_context
from rover_shop.services.leaderboard import house_summary, leaderboard_rows, teacher_stats


router = APIRouter(tags=["leaderboard"])


@router.get("/api/leaderboard-data")
async def get_leaderboard_data(house: Optional[str] = None, ctx: AppContext = Depends(get_context)):
    """
    Leaderboard data for display

    Returns:
    - Submissions ranked by live total score (ties keep arrival order)
    - Per-house submission counts and summed totals
    - Budget stats
    """
    all_submissions = await ctx.submissions.list_submissions()
    submissions = await ctx.submissions.list_submissions(house) if house else all_submissions
    params = ctx.settings.scoring

    return {
        "teams": [
            {
                "rank": row["rank"],
                "team_name": row["team_name"],
                "house": row["house"],
                "total_score": row["total_score"],
                "kb_bonus": row["kb_bonus"],
                "is_scored": row["is_scored"],
            }
            for row in leaderboard_rows(submissions, params)
        ],
        "houses": house_summary(all_submissions, ctx.settings.houses, params),
        "stats": teacher_stats(submissions),
    }
