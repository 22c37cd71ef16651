"""Team registration and active-team profile storage"""
import logging
import re
import time
from datetime import datetime, timezone
from typing import Dict, List, Optional, Set, Tuple

from pydantic import ValidationError

from rover_shop.config import Settings
from rover_shop.models import TeamDocument, TeamProfile
from rover_shop.storage.base import TEAMS_COLLECTION, DocumentStore


logger = logging.getLogger(__name__)


class InvalidTeam(ValueError):
    """Team name or house rejected at login"""


class TeamNotActive(LookupError):
    """Team was submitted (or is being submitted) and can no longer change"""


def utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def now_ms() -> int:
    return int(time.time() * 1000)


def generate_team_id(house: str, team_name: str, timestamp_ms: Optional[int] = None) -> str:
    """
    Build a readable, collision-resistant team id

    Example:
        >>> generate_team_id("Lynx", "Red Rovers!", 1700000000000)
        'lynx-red-rovers--1700000000000'
    """
    sanitized = re.sub(r"[^a-z0-9]", "-", team_name.lower())
    stamp = timestamp_ms if timestamp_ms is not None else now_ms()
    return f"{house.lower()}-{sanitized}-{stamp}"


class TeamRegistry:
    """
    Active teams: an in-memory cache in front of the document store

    The cache is updated before the store is written, so a failed write
    never rolls back what the team sees. Retired ids are remembered for the
    life of the process, so a store copy that survived a failed delete is
    never served again.
    """

    def __init__(self, store: DocumentStore, settings: Settings):
        self.store = store
        self.settings = settings
        self._cache: Dict[str, TeamDocument] = {}
        self._retired: Set[str] = set()

    def _validate(self, house: str, team_name: str) -> Tuple[str, str]:
        houses = {h.lower(): h for h in self.settings.houses}
        canonical_house = houses.get(house.strip().lower())
        if canonical_house is None:
            raise InvalidTeam(f"Unknown house: {house}")

        clean_name = team_name.strip()
        if not clean_name:
            raise InvalidTeam("team_name required")
        if len(clean_name) > self.settings.max_team_name_length:
            raise InvalidTeam(
                f"team_name longer than {self.settings.max_team_name_length} characters"
            )
        return canonical_house, clean_name

    async def create_team(self, house: str, team_name: str, grade: Optional[int] = None) -> TeamDocument:
        canonical_house, clean_name = self._validate(house, team_name)
        team_id = generate_team_id(canonical_house, clean_name)

        profile = TeamProfile(
            grade=grade if grade is not None else self.settings.default_grade,
            house=canonical_house,
            team_name=clean_name,
            budget=self.settings.starting_budget,
        )
        team = await self.update_team(team_id, profile)
        logger.info(f"✅ Team created: {team_id} ({canonical_house})")
        return team

    async def get_team(self, team_id: str) -> Optional[TeamDocument]:
        """Cached team, else stored team; None means a new session"""
        if team_id in self._retired:
            return None
        team = self._cache.get(team_id)
        if team is not None:
            return team

        record = await self.store.load(TEAMS_COLLECTION, team_id)
        if record is None or team_id in self._retired:
            return None

        try:
            team = TeamDocument.from_record({**record, "id": team_id})
        except ValidationError as e:
            logger.warning(f"⚠️ Skipping unreadable team record {team_id}: {e}")
            return None
        self._cache[team_id] = team
        return team

    async def update_team(self, team_id: str, profile: TeamProfile) -> TeamDocument:
        """
        Store a new profile for an active team

        Raises:
            TeamNotActive: If the team has been submitted
        """
        if team_id in self._retired:
            raise TeamNotActive(f"Team {team_id} already submitted")
        previous = self._cache.get(team_id)
        now = utc_now_iso()
        team = TeamDocument(
            **profile.model_dump(include=set(TeamProfile.model_fields)),
            id=team_id,
            created_at=previous.created_at if previous else now,
            updated_at=now,
        )
        self._cache[team_id] = team
        await self.store.save(TEAMS_COLLECTION, team_id, team.to_record())
        return team

    async def list_teams(self, house: Optional[str] = None) -> List[TeamDocument]:
        teams: Dict[str, TeamDocument] = {}
        for record in await self.store.list_all(TEAMS_COLLECTION):
            if "id" not in record or record["id"] in self._retired:
                continue
            try:
                team = TeamDocument.from_record(record)
            except ValidationError as e:
                logger.warning(f"⚠️ Skipping unreadable team record {record['id']}: {e}")
                continue
            teams[team.id] = team
        # Cached profiles are newer than anything a failed write left behind
        teams.update(self._cache)

        result = sorted(teams.values(), key=lambda t: t.created_at or "")
        if house and house != "all":
            result = [t for t in result if t.house.lower() == house.lower()]
        return result

    def claim_team(self, team_id: str) -> bool:
        """
        Take a team out of the active set ahead of submitting it

        Runs without awaiting, so of two concurrent submits only the first
        gets True.
        """
        if team_id in self._retired:
            return False
        self._retired.add(team_id)
        self._cache.pop(team_id, None)
        return True

    async def retire_team(self, team_id: str) -> None:
        self.claim_team(team_id)
        await self.store.delete(TEAMS_COLLECTION, team_id)
        logger.info(f"🗂️ Team retired: {team_id}")
