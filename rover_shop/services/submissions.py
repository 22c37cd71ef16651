"""
Submission lifecycle: submit, score, delete

A submission is a move. The team's active record is retired in the same
call that stores the snapshot, whether the team or a staff member submits.
"""
import logging
import uuid
from typing import Dict, List, Optional

from pydantic import ValidationError

from rover_shop.core.scoring import total_score
from rover_shop.models import JudgeScores, ScoringParams, Submission
from rover_shop.services.team_registry import TeamRegistry, utc_now_iso
from rover_shop.storage.base import SUBMISSIONS_COLLECTION, DocumentStore


logger = logging.getLogger(__name__)


class SubmissionService:
    def __init__(self, store: DocumentStore, registry: TeamRegistry, params: ScoringParams):
        self.store = store
        self.registry = registry
        self.params = params
        self._cache: Dict[str, Submission] = {}

    async def submit_team(
        self,
        team_id: str,
        scores: Optional[JudgeScores] = None,
        scored_by: Optional[str] = None
    ) -> Optional[Submission]:
        """
        Snapshot an active team into a submission and retire the team

        Args:
            team_id: Active team id
            scores: Judge scores entered at submit time (staff path)
            scored_by: Staff username entering the scores

        Returns:
            The new submission, or None when the team is not active or
            another submit already claimed it
        """
        team = await self.registry.get_team(team_id)
        if team is None or not self.registry.claim_team(team_id):
            return None

        now = utc_now_iso()
        submission = Submission(
            **team.profile().model_dump(),
            id=uuid.uuid4().hex,
            team_id=team_id,
            timestamp=now,
            submitted_at=now,
        )
        if scores is not None:
            submission = self._with_scores(submission, scores, scored_by)

        self._cache[submission.id] = submission
        await self.store.save(SUBMISSIONS_COLLECTION, submission.id, submission.to_record())
        await self.registry.retire_team(team_id)

        logger.info(
            f"📦 Submission {submission.id} | {submission.team_name} ({submission.house}) | "
            f"Budget left: {submission.budget} KB"
        )
        return submission

    def _with_scores(self, submission: Submission, scores: JudgeScores, scored_by: Optional[str]) -> Submission:
        return submission.model_copy(update={
            "scores": scores,
            "total_score": total_score(scores, submission.budget, self.params),
            "scored_by": scored_by,
            "scored_at": utc_now_iso(),
        })

    async def get_submission(self, submission_id: str) -> Optional[Submission]:
        submission = self._cache.get(submission_id)
        if submission is not None:
            return submission

        record = await self.store.load(SUBMISSIONS_COLLECTION, submission_id)
        if record is None:
            return None
        try:
            submission = Submission.from_record({**record, "id": submission_id})
        except ValidationError as e:
            logger.warning(f"⚠️ Skipping unreadable submission {submission_id}: {e}")
            return None
        self._cache[submission_id] = submission
        return submission

    async def list_submissions(self, house: Optional[str] = None, grade: Optional[int] = None) -> List[Submission]:
        """All submissions in arrival order, optionally filtered"""
        submissions: Dict[str, Submission] = {}
        for record in await self.store.list_all(SUBMISSIONS_COLLECTION):
            if "id" not in record:
                continue
            try:
                submission = Submission.from_record(record)
            except ValidationError as e:
                logger.warning(f"⚠️ Skipping unreadable submission {record['id']}: {e}")
                continue
            submissions[submission.id] = submission
        submissions.update(self._cache)

        result = sorted(submissions.values(), key=lambda s: s.timestamp)
        if house and house != "all":
            result = [s for s in result if s.house.lower() == house.lower()]
        if grade is not None:
            result = [s for s in result if s.grade == grade]
        return result

    async def update_scores(
        self,
        submission_id: str,
        scores: JudgeScores,
        scored_by: Optional[str] = None
    ) -> Optional[Submission]:
        submission = await self.get_submission(submission_id)
        if submission is None:
            return None

        submission = self._with_scores(submission, scores, scored_by)
        self._cache[submission_id] = submission
        await self.store.save(SUBMISSIONS_COLLECTION, submission_id, submission.to_record())
        logger.info(f"📝 Scores saved for {submission.team_name}: total {submission.total_score}")
        return submission

    async def delete_submission(self, submission_id: str) -> bool:
        submission = await self.get_submission(submission_id)
        if submission is None:
            return False
        self._cache.pop(submission_id, None)
        await self.store.delete(SUBMISSIONS_COLLECTION, submission_id)
        logger.info(f"🗑️ Submission deleted: {submission_id} ({submission.team_name})")
        return True

    async def reset_submissions(self) -> int:
        """Delete every submission (testing/new event only)"""
        submissions = await self.list_submissions()
        for submission in submissions:
            self._cache.pop(submission.id, None)
            await self.store.delete(SUBMISSIONS_COLLECTION, submission.id)
        logger.info(f"🔄 Reset all submissions. Cleared {len(submissions)} submissions.")
        return len(submissions)

