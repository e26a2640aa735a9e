"""
Mission configuration.

MissionParameters is fixed once a game starts. Defaults reproduce the classic
game; overrides can come from a dict, a JSON file or environment variables
(optionally loaded from a ``.env`` file).
"""

import json
import os
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any, Dict, Optional

from dotenv import load_dotenv

from .constants import (
    INITIAL_ENERGY,
    INITIAL_TORPEDOES,
    KLINGON_INITIAL_SHIELDS,
    MISSION_DURATION,
)


ENV_PREFIX = "STARTREK_"


@dataclass(frozen=True)
class MissionParameters:
    """
    Immutable parameters of one game.

    Attributes:
        starting_stardate: Stardate at game start. Left as None in a template
            and filled in when the game draws it.
        time_limit: Stardates available to finish the mission.
        starting_energy: Energy at start and after docking.
        starting_torpedoes: Torpedoes at start and after docking.
        klingon_shields: Shields of each Klingon when a quadrant is entered.
    """
    starting_stardate: Optional[float] = None
    time_limit: float = MISSION_DURATION
    starting_energy: float = INITIAL_ENERGY
    starting_torpedoes: int = INITIAL_TORPEDOES
    klingon_shields: float = KLINGON_INITIAL_SHIELDS

    def __post_init__(self) -> None:
        if self.time_limit <= 0:
            raise ValueError("time_limit must be positive")
        if self.starting_energy <= 0:
            raise ValueError("starting_energy must be positive")
        if self.starting_torpedoes < 0:
            raise ValueError("starting_torpedoes cannot be negative")
        if self.klingon_shields <= 0:
            raise ValueError("klingon_shields must be positive")

    @property
    def deadline(self) -> float:
        """Last stardate before the mission fails."""
        if self.starting_stardate is None:
            raise ValueError("starting_stardate has not been drawn yet")
        return self.starting_stardate + self.time_limit

    def with_starting_stardate(self, stardate: float) -> 'MissionParameters':
        return replace(self, starting_stardate=stardate)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "starting_stardate": self.starting_stardate,
            "time_limit": self.time_limit,
            "starting_energy": self.starting_energy,
            "starting_torpedoes": self.starting_torpedoes,
            "klingon_shields": self.klingon_shields,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'MissionParameters':
        """Create parameters from a dictionary; missing keys use defaults."""
        return cls(
            starting_stardate=data.get("starting_stardate"),
            time_limit=float(data.get("time_limit", MISSION_DURATION)),
            starting_energy=float(data.get("starting_energy", INITIAL_ENERGY)),
            starting_torpedoes=int(data.get("starting_torpedoes", INITIAL_TORPEDOES)),
            klingon_shields=float(data.get("klingon_shields", KLINGON_INITIAL_SHIELDS)),
        )

    @classmethod
    def from_json(cls, path: str) -> 'MissionParameters':
        """Load parameters from a JSON file."""
        config_path = Path(path)
        if not config_path.exists():
            raise FileNotFoundError(f"Mission config not found: {path}")

        with open(config_path) as f:
            data = json.load(f)

        return cls.from_dict(data)

    @classmethod
    def from_env(cls, dotenv_path: Optional[str] = None) -> 'MissionParameters':
        """
        Read overrides from STARTREK_* environment variables.

        A .env file is loaded first (without overriding variables already
        set in the environment).
        """
        load_dotenv(dotenv_path)
        data: Dict[str, Any] = {}
        for key in ("time_limit", "starting_energy", "starting_torpedoes", "klingon_shields"):
            value = os.getenv(ENV_PREFIX + key.upper())
            if value is not None and value.strip():
                data[key] = value
        return cls.from_dict(data)


def seed_from_env(dotenv_path: Optional[str] = None) -> Optional[int]:
    """Game seed from STARTREK_SEED, or None for an entropy-seeded game."""
    load_dotenv(dotenv_path)
    value = os.getenv(ENV_PREFIX + "SEED")
    if value is None or not value.strip():
        return None
    try:
        return int(value)
    except ValueError as e:
        raise ValueError(f"{ENV_PREFIX}SEED must be an integer, got {value!r}") from e
