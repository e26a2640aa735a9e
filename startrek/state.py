"""
Mutable state of a game in progress.

MissionState bundles everything a command can touch: the true galaxy, the
computer's galactic record, the ship, the live quadrant, the clock and the
random source. It also provides the bookkeeping shared by navigation and
combat (entering a quadrant, destroying Klingons and starbases, docking) so
that every count stays consistent across the quadrant, the galaxy and the
record.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Optional

from .config import MissionParameters
from .constants import (
    ACCURACY_AND_MEMORY_DEVICE,
    RED_ALERT_SHIELD_THRESHOLD,
    Condition,
)
from .events import GameEvent, GameEventType
from .galaxy import GalacticRecord, Galaxy
from .navigation import Position
from .quadrant import KlingonUnit, Quadrant, instantiate_quadrant
from .rng import RandomSource
from .ship import ShipState, evaluate_condition, is_docked


@dataclass
class MissionState:
    """
    Complete state of one game.

    Attributes:
        params: Immutable mission parameters (with the drawn starting stardate).
        galaxy: Ground-truth quadrant summaries.
        record: The computer's galactic record.
        ship: The player's ship.
        quadrant: Layout of the quadrant the ship is in.
        rng: Random source shared by every rule.
        stardate: Current stardate.
        events: Every event logged so far.
    """
    params: MissionParameters
    galaxy: Galaxy
    record: GalacticRecord
    ship: ShipState
    quadrant: Quadrant
    rng: RandomSource
    stardate: float
    events: list[GameEvent] = field(default_factory=list)
    _event_callbacks: list[Callable[[GameEvent], None]] = field(default_factory=list, repr=False)

    # -------------------------------------------------------------------------
    # Event logging
    # -------------------------------------------------------------------------

    def add_event_callback(self, callback: Callable[[GameEvent], None]) -> None:
        self._event_callbacks.append(callback)

    def remove_event_callback(self, callback: Callable[[GameEvent], None]) -> None:
        if callback in self._event_callbacks:
            self._event_callbacks.remove(callback)

    def log_event(self, event_type: GameEventType, data: Optional[dict] = None) -> GameEvent:
        """Log an event and notify callbacks."""
        event = GameEvent(event_type=event_type, stardate=self.stardate, data=data or {})
        self.events.append(event)

        for callback in self._event_callbacks:
            try:
                callback(event)
            except Exception as e:
                print(f"[ENGINE] Event callback error: {e}")

        return event

    # -------------------------------------------------------------------------
    # Clock
    # -------------------------------------------------------------------------

    @property
    def deadline(self) -> float:
        return self.params.deadline

    @property
    def stardates_left(self) -> float:
        return self.deadline - self.stardate

    @property
    def is_time_expired(self) -> bool:
        return self.stardate > self.deadline

    def advance_stardate(self, delta: float = 1.0) -> None:
        self.stardate += delta
        self.log_event(GameEventType.STARDATE_ADVANCED, {
            "stardate": self.stardate,
            "stardates_left": self.stardates_left,
        })

    # -------------------------------------------------------------------------
    # Quadrants and galactic record
    # -------------------------------------------------------------------------

    def record_to_memory(self, quadrant: Position) -> bool:
        """
        Copy a quadrant's summary into the computer's record.

        Gated on damage-report device 7 (shield control), not the computer.
        Returns whether the quadrant was recorded.
        """
        if self.ship.is_damaged(ACCURACY_AND_MEMORY_DEVICE):
            return False
        if not quadrant.in_bounds():
            return False
        self.record.record(quadrant, self.galaxy[quadrant])
        return True

    def enter_quadrant(self) -> None:
        """Lay out the ship's current quadrant and record it."""
        summary = self.galaxy[self.ship.quadrant]
        self.quadrant = instantiate_quadrant(
            summary,
            self.ship.sector,
            self.rng,
            klingon_shields=self.params.klingon_shields,
        )
        self.record_to_memory(self.ship.quadrant)

        self.log_event(GameEventType.QUADRANT_ENTERED, {
            "quadrant": self.ship.quadrant.to_tuple(),
            "sector": self.ship.sector.to_tuple(),
            "klingons": summary.klingons,
            "starbases": summary.starbases,
            "stars": summary.stars,
        })
        if self.quadrant.has_klingons and self.ship.shields <= RED_ALERT_SHIELD_THRESHOLD:
            self.log_event(GameEventType.RED_ALERT, {
                "klingons": len(self.quadrant.klingons),
                "shields": self.ship.shields,
            })

    def destroy_klingon(self, klingon: KlingonUnit) -> None:
        """Remove a Klingon from the quadrant, the galaxy and the record."""
        self.quadrant.remove_klingon(klingon)
        summary = self.galaxy.remove_klingon(self.ship.quadrant)
        self.record.refresh(self.ship.quadrant, summary)
        self.log_event(GameEventType.KLINGON_DESTROYED, {
            "sector": klingon.position.to_tuple(),
            "klingons_remaining": self.galaxy.total_klingons,
        })

    def destroy_starbase(self, pos: Position) -> None:
        """Remove a starbase from the quadrant, the galaxy and the record."""
        self.quadrant.remove_starbase(pos)
        summary = self.galaxy.remove_starbase(self.ship.quadrant)
        self.record.refresh(self.ship.quadrant, summary)
        self.log_event(GameEventType.STARBASE_DESTROYED, {
            "sector": pos.to_tuple(),
            "starbases_remaining": self.galaxy.total_starbases,
        })

    # -------------------------------------------------------------------------
    # Condition and docking
    # -------------------------------------------------------------------------

    @property
    def is_docked(self) -> bool:
        return is_docked(self.ship, self.quadrant)

    @property
    def condition(self) -> Condition:
        return evaluate_condition(self.ship, self.quadrant, self.params)

    def check_docking(self) -> bool:
        """Resupply the ship if it is next to a starbase."""
        if not self.is_docked:
            return False
        self.ship.dock(self.params)
        self.log_event(GameEventType.DOCKED, {
            "sector": self.ship.sector.to_tuple(),
            "energy": self.ship.energy,
            "torpedoes": self.ship.torpedoes,
            "shields": self.ship.shields,
        })
        return True
