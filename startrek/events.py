"""
Narratable outcomes produced by the engine.

Every command returns the events it caused. A presentation layer turns them
into text; the engine itself never prints game output. Events are also kept
on the engine's log and passed to registered callbacks, which is how games are
recorded (see recorder.py).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, auto


class GameEventType(Enum):
    """Types of events that can occur during a game."""
    # Game flow
    GAME_STARTED = auto()
    VICTORY = auto()
    DEFEAT = auto()
    STARDATE_ADVANCED = auto()

    # Navigation
    QUADRANT_ENTERED = auto()
    SHIP_MOVED = auto()
    NAVIGATION_BLOCKED = auto()
    RED_ALERT = auto()
    DOCKED = auto()
    LOW_ENERGY = auto()
    DEAD_IN_SPACE = auto()

    # Damage control
    DEVICES_REPAIRED = auto()
    DEVICE_DAMAGED = auto()
    DEVICE_IMPROVED = auto()

    # Combat
    ENTERPRISE_HIT = auto()
    SHIELDS_PROTECTED = auto()
    PHASERS_FIRED = auto()
    ACCURACY_DEGRADED = auto()
    KLINGON_HIT = auto()
    KLINGON_DESTROYED = auto()
    TORPEDO_FIRED = auto()
    TORPEDO_TRACK = auto()
    TORPEDO_MISSED = auto()
    TORPEDO_ABSORBED_BY_STAR = auto()
    STARBASE_DESTROYED = auto()
    SHIELDS_SET = auto()

    # Sensors and reports
    SHORT_RANGE_SCAN = auto()
    SENSORS_DAMAGED = auto()
    LONG_RANGE_SCAN = auto()
    DAMAGE_REPORT = auto()
    GALACTIC_RECORD = auto()
    STATUS_REPORT = auto()
    TORPEDO_DATA = auto()
    STARBASE_NAV_DATA = auto()
    DIRECTION_DISTANCE = auto()


@dataclass
class GameEvent:
    """
    A single engine event.

    Attributes:
        event_type: The type of event.
        stardate: Stardate when the event occurred.
        data: Event-specific payload (positions as (x, y) tuples).
    """
    event_type: GameEventType
    stardate: float
    data: dict = field(default_factory=dict)

    def to_dict(self) -> dict:
        return {
            "event_type": self.event_type.name,
            "stardate": self.stardate,
            "data": self.data,
        }

    def __str__(self) -> str:
        details = " ".join(f"{k}={v}" for k, v in self.data.items())
        return f"SD {self.stardate:.0f} {self.event_type.name} {details}".rstrip()
