"""
Admin endpoints: active teams, submissions, scoring, export
"""
import logging
from typing import Optional

from fastapi import APIRouter, Depends, Header, HTTPException
from fastapi.responses import Response
from pydantic import ValidationError

from rover_shop.context import AppContext, get_context
from rover_shop.models import JudgeScores
from rover_shop.services import export
from rover_shop.services.leaderboard import group_teams_by_house, leaderboard_rows, teacher_stats
from rover_shop.services.staff_auth import verify_staff
from rover_shop.services.team_registry import now_ms


logger = logging.getLogger(__name__)

router = APIRouter(prefix="/admin", tags=["admin"])
staff_router = APIRouter(prefix="/staff", tags=["admin"])


def require_staff(
    x_staff_user: Optional[str] = Header(default=None),
    x_staff_pin: Optional[str] = Header(default=None),
    ctx: AppContext = Depends(get_context),
) -> str:
    """Dependency: staff username from the X-Staff-User / X-Staff-Pin headers"""
    username = verify_staff(x_staff_user, x_staff_pin, ctx.settings)
    if username is None:
        raise HTTPException(status_code=401, detail="Staff username and PIN required")
    return username


def _parse_scores(payload: dict) -> JudgeScores:
    try:
        return JudgeScores.model_validate(payload.get("scores", payload))
    except ValidationError as exc:
        raise HTTPException(status_code=422, detail=exc.errors(include_url=False)) from exc


@staff_router.post("/login")
async def staff_login(payload: dict, ctx: AppContext = Depends(get_context)):
    """
    Check staff credentials

    Request:
        {"username": "teacher", "pin": "1234"}
    """
    username = verify_staff(payload.get("username"), str(payload.get("pin") or ""), ctx.settings)
    if username is None:
        raise HTTPException(status_code=401, detail="Invalid username or PIN")
    return {"success": True, "username": username}


@router.get("/teams")
async def list_teams(
    house: Optional[str] = None,
    staff: str = Depends(require_staff),
    ctx: AppContext = Depends(get_context),
):
    """Active teams grouped by house"""
    teams = await ctx.teams.list_teams(house)
    submitted = {(s.team_name, s.house) for s in await ctx.submissions.list_submissions()}

    return {
        "total_teams": len(teams),
        "houses": {
            team_house: [
                {**team.to_record(), "hasSubmission": (team.team_name, team.house) in submitted}
                for team in house_teams
            ]
            for team_house, house_teams in group_teams_by_house(teams).items()
        },
    }


@router.get("/submissions")
async def list_submissions(
    house: Optional[str] = None,
    grade: Optional[int] = None,
    staff: str = Depends(require_staff),
    ctx: AppContext = Depends(get_context),
):
    """Submissions ranked by live total score"""
    submissions = await ctx.submissions.list_submissions(house, grade)
    return {
        "submissions": leaderboard_rows(submissions, ctx.settings.scoring),
        "stats": teacher_stats(submissions),
    }


@router.post("/teams/{team_id}/submit")
async def submit_for_team(
    team_id: str,
    payload: Optional[dict] = None,
    staff: str = Depends(require_staff),
    ctx: AppContext = Depends(get_context),
):
    """
    Admin: create a submission from an active team with judge scores

    The team is retired exactly as when students submit themselves.
    """
    scores = _parse_scores(payload) if payload else None
    submission = await ctx.submissions.submit_team(team_id, scores=scores, scored_by=staff if scores else None)
    if submission is None:
        raise HTTPException(status_code=404, detail=f"Team {team_id} not found")

    logger.info(f"👩‍🏫 {staff} submitted team {team_id} as {submission.id}")
    return submission.to_record()


@router.put("/submissions/{submission_id}/scores")
async def save_scores(
    submission_id: str,
    payload: dict,
    staff: str = Depends(require_staff),
    ctx: AppContext = Depends(get_context),
):
    """
    Admin: save judge scores

    Request:
        {"roverBuildScore": 15, "codingScore": 20, "itemsCollected": 4,
         "coreValuesScore": 8, "notes": "..."}
    """
    scores = _parse_scores(payload)
    submission = await ctx.submissions.update_scores(submission_id, scores, scored_by=staff)
    if submission is None:
        raise HTTPException(status_code=404, detail=f"Submission {submission_id} not found")
    return submission.to_record()


@router.delete("/submissions/{submission_id}")
async def delete_submission(
    submission_id: str,
    staff: str = Depends(require_staff),
    ctx: AppContext = Depends(get_context),
):
    if not await ctx.submissions.delete_submission(submission_id):
        raise HTTPException(status_code=404, detail=f"Submission {submission_id} not found")
    return {"success": True, "message": f"Submission {submission_id} deleted"}


@router.post("/submissions/reset")
async def reset_submissions(
    staff: str = Depends(require_staff),
    ctx: AppContext = Depends(get_context),
):
    """Delete all submissions"""
    count = await ctx.submissions.reset_submissions()
    logger.warning(f"{staff} reset all submissions ({count})")
    return {"success": True, "deleted": count, "message": "All submissions reset"}


def _csv_response(content: str, prefix: str) -> Response:
    filename = export.export_filename(prefix, now_ms())
    return Response(
        content=content,
        media_type="text/csv",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.get("/export/scores.csv")
async def export_scores(
    house: Optional[str] = None,
    staff: str = Depends(require_staff),
    ctx: AppContext = Depends(get_context),
):
    submissions = await ctx.submissions.list_submissions(house)
    return _csv_response(export.export_scores_csv(submissions, ctx.settings.scoring), "rover-scores")


@router.get("/export/submissions.csv")
async def export_submissions(
    house: Optional[str] = None,
    grade: Optional[int] = None,
    staff: str = Depends(require_staff),
    ctx: AppContext = Depends(get_context),
):
    submissions = await ctx.submissions.list_submissions(house, grade)
    return _csv_response(export.export_submissions_csv(submissions), "rover-submissions")
