"""
Data models for the rover challenge shop

Records are stored and sent over the wire with camelCase keys
(teamName, ownedItems, roverBuildScore) so documents written by older
clients still load.
"""
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class Record(BaseModel):
    """Base for every persisted record"""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_record(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True, mode="json")


class PartCategory(str, Enum):
    HUBS = "Hubs"
    MOTORS = "Motors"
    TIRES = "Tires"
    CLAWS = "Claws"


class Part(Record):
    """Catalog entry"""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    id: str
    name: str
    price: int = Field(ge=0)
    category: PartCategory


class CartItem(Record):
    """One line in a cart or in owned items (price is a snapshot)"""
    id: str
    name: str
    price: int = Field(ge=0)
    quantity: int = Field(gt=0)
    category: PartCategory


class TeamProfile(Record):
    """One team's budget, cart and owned items"""
    grade: int = 1
    house: str
    team_name: str
    budget: int
    spent: int = 0
    cart: List[CartItem] = []
    owned_items: List[CartItem] = []

    @classmethod
    def from_record(cls, data: Dict[str, Any]) -> "TeamProfile":
        """Load a stored profile, filling fields older records lack"""
        return cls.model_validate(migrate_profile_record(data))


class TeamDocument(TeamProfile):
    """Active team as stored in the teams collection"""
    id: str
    created_at: Optional[str] = None
    updated_at: Optional[str] = None

    def profile(self) -> TeamProfile:
        return TeamProfile.model_validate(
            self.model_dump(include=set(TeamProfile.model_fields))
        )


class JudgeScores(Record):
    """Scores entered by a judge for one submission"""
    rover_build_score: int = Field(default=0, ge=0, le=20)
    coding_score: int = Field(default=0, ge=0, le=25)
    items_collected: int = Field(default=0, ge=0)
    core_values_score: int = Field(default=0, ge=0, le=10)
    notes: str = ""


class Submission(TeamProfile):
    """Frozen snapshot of a team at submit time, plus judge scores"""
    id: str
    team_id: Optional[str] = None
    timestamp: str
    submitted_at: Optional[str] = None
    scores: Optional[JudgeScores] = None
    total_score: Optional[int] = None
    scored_by: Optional[str] = None
    scored_at: Optional[str] = None

    @classmethod
    def from_record(cls, data: Dict[str, Any]) -> "Submission":
        return cls.model_validate(migrate_submission_record(data))


class ScoringParams(BaseModel):
    """Bonus and points rules for the total score"""
    bonus_step: int = Field(default=10, gt=0)     # KB per bonus step
    bonus_points: int = 5                          # points per step
    bonus_cap: Optional[int] = None                # cap on KB counted, None = uncapped
    item_points: int = 3                           # points per collected item


SCORE_FIELDS = ("roverBuildScore", "codingScore", "itemsCollected", "coreValuesScore", "notes")

# (min, max) per judge score; None = no upper bound
SCORE_LIMITS = {
    "roverBuildScore": (0, 20),
    "codingScore": (0, 25),
    "itemsCollected": (0, None),
    "coreValuesScore": (0, 10),
}


def migrate_profile_record(data: Dict[str, Any]) -> Dict[str, Any]:
    """Bring a stored profile up to the current shape"""
    record = dict(data)
    if not record.get("ownedItems"):
        record["ownedItems"] = []
    if not record.get("cart"):
        record["cart"] = []
    if record.get("grade") is None:
        record["grade"] = 1
    if record.get("spent") is None:
        record["spent"] = sum(
            int(item.get("price", 0)) * int(item.get("quantity", 0))
            for item in record["cart"]
        )
    return record


def migrate_submission_record(data: Dict[str, Any]) -> Dict[str, Any]:
    """
    Bring a stored submission up to the current shape

    Older submissions kept judge scores as flat fields next to the
    profile; they are folded into a nested scores object here.
    """
    record = migrate_profile_record(data)
    if record.get("scores") is None and any(key in record for key in SCORE_FIELDS[:4]):
        flat = {key: record.pop(key) for key in SCORE_FIELDS if key in record}
        record["scores"] = {
            key: _clamp_score(key, value) if key in SCORE_LIMITS else value
            for key, value in flat.items() if value is not None
        }
    return record


def _clamp_score(key: str, value: Any) -> int:
    """Legacy flat scores were stored unchecked; pull them back into range"""
    try:
        score = int(value)
    except (TypeError, ValueError):
        return 0
    low, high = SCORE_LIMITS[key]
    score = max(score, low)
    if high is not None:
        score = min(score, high)
    return score
