"""
Configuration loader
"""
import logging
import os
from pathlib import Path
from typing import List, Optional

import yaml
from pydantic import BaseModel, Field

from rover_shop.models import ScoringParams


logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = "config/rover.yaml"


class Settings(BaseModel):
    """Runtime settings for the shop server"""
    houses: List[str] = ["Lynx", "Jaguar", "Cougar", "Panther"]
    starting_budget: int = 120            # KB each team starts with
    default_grade: int = 1
    max_team_name_length: int = 30
    sell_rate: float = Field(default=0.5, gt=0, le=1)  # share of price refunded on sale
    scoring: ScoringParams = ScoringParams()

    # Staff gate (misclick guard, not a security boundary)
    staff_users: List[str] = ["teacher", "admin"]
    staff_pin: str = Field(default="0000", pattern=r"^\d{4}$")

    # Persistence
    remote_store_url: Optional[str] = None
    remote_timeout: float = 5.0           # seconds per request
    local_store_path: str = "data/rover-store.json"


def load_settings(config_path: Optional[str] = None) -> Settings:
    """
    Load settings from YAML file

    Args:
        config_path: Path to config file (default: $ROVER_CONFIG or config/rover.yaml)

    Returns:
        Settings object (defaults when the file does not exist)
    """
    path = Path(config_path or os.getenv("ROVER_CONFIG", DEFAULT_CONFIG_PATH))

    if not path.exists():
        logger.warning(f"Config file not found: {path}, using defaults")
        return Settings()

    with open(path, 'r', encoding='utf-8') as f:
        data = yaml.safe_load(f) or {}

    settings = Settings(**data)
    logger.info(f"Loaded settings from {path}")
    return settings
