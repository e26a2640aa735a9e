"""
Game state machine.

The GameEngine dispatches player commands to the movement and combat rules,
produces scan and computer reports, and evaluates the end-of-game conditions
after every command:

1. No Klingons left in the galaxy: victory.
2. Shields below zero (or energy below zero after phaser fire): ship destroyed.
3. Energy and shields exhausted: dead in space.
4. Stardate past the deadline: time expired.

Once an outcome is reached every further command raises GameOverError; start
a new game with new_game().
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum, auto
from typing import Any, Callable, Optional

from .combat import PhaserResult, TorpedoResult, fire_phasers, fire_torpedo
from .commands import (
    COMPUTER_DIRECTION_CALCULATOR,
    COMPUTER_GALACTIC_RECORD,
    COMPUTER_STARBASE_NAV_DATA,
    COMPUTER_STATUS_REPORT,
    COMPUTER_TORPEDO_DATA,
    Command,
    ComputerQuery,
    DamageReport,
    FirePhasers,
    FireTorpedo,
    LongRangeScan,
    SetCourse,
    SetShields,
    ShortRangeScan,
)
from .config import MissionParameters
from .constants import Device
from .errors import GameOverError, InvalidInputError
from .events import GameEvent, GameEventType
from .galaxy import GalacticRecord, Galaxy
from .movement import NavigationResult, navigate
from .navigation import Position, direction_and_distance
from .quadrant import Quadrant
from .rng import RandomSource, create_rng, random_coordinate
from .ship import ShipState
from .state import MissionState


# =============================================================================
# OUTCOMES
# =============================================================================

class GameState(Enum):
    """Overall game state."""
    PLAYING = auto()
    VICTORY = auto()
    DEFEAT = auto()


class DefeatReason(Enum):
    """Why a game was lost."""
    SHIP_DESTROYED = "ship_destroyed"
    TIME_EXPIRED = "time_expired"
    DEAD_IN_SPACE = "dead_in_space"


@dataclass(frozen=True)
class GameOutcome:
    """
    Terminal result of a game.

    Attributes:
        state: VICTORY or DEFEAT.
        reason: Cause of a defeat, None on victory.
        rating: Efficiency rating, set on victory.
        klingons_remaining: Klingons left in the galaxy.
        stardate: Stardate at the end of the game.
    """
    state: GameState
    reason: Optional[DefeatReason] = None
    rating: Optional[int] = None
    klingons_remaining: int = 0
    stardate: float = 0.0

    @property
    def is_victory(self) -> bool:
        return self.state == GameState.VICTORY

    @property
    def summary(self) -> str:
        if self.is_victory:
            return f"victory at stardate {self.stardate:.0f}, efficiency rating {self.rating}"
        reason = self.reason.value.replace("_", " ") if self.reason else "defeat"
        return (
            f"{reason} at stardate {self.stardate:.0f}, "
            f"{self.klingons_remaining} Klingons remaining"
        )

    def to_dict(self) -> dict:
        return {
            "state": self.state.name,
            "reason": self.reason.name if self.reason else None,
            "rating": self.rating,
            "klingons_remaining": self.klingons_remaining,
            "stardate": self.stardate,
        }


# Ratings saturate at the 32-bit signed maximum, including a win in zero time
MAX_RATING = 2_147_483_647


def efficiency_rating(initial_klingons: int, elapsed: float) -> int:
    """Victory rating: initial Klingons per stardate used, times 1000."""
    if elapsed <= 0:
        return MAX_RATING
    return min(int(initial_klingons / elapsed * 1000), MAX_RATING)


# =============================================================================
# ENGINE
# =============================================================================

class GameEngine:
    """
    Runs one game.

    All game data lives in ``state`` (a MissionState); the engine adds command
    dispatch and the terminal-state machine on top of it.
    """

    def __init__(self, state: MissionState):
        self.state = state
        self.outcome: Optional[GameOutcome] = None
        self.last_result: Any = None

        # Flags raised by the current command for the game-over check
        self._ship_destroyed = False
        self._dead_in_space = False

        self._handlers: dict[type, Callable] = {
            SetCourse: self._handle_set_course,
            ShortRangeScan: self._handle_short_range_scan,
            LongRangeScan: self._handle_long_range_scan,
            FirePhasers: self._handle_fire_phasers,
            FireTorpedo: self._handle_fire_torpedo,
            SetShields: self._handle_set_shields,
            DamageReport: self._handle_damage_report,
            ComputerQuery: self._handle_computer_query,
        }

    # -------------------------------------------------------------------------
    # State access
    # -------------------------------------------------------------------------

    @property
    def params(self) -> MissionParameters:
        return self.state.params

    @property
    def galaxy(self) -> Galaxy:
        return self.state.galaxy

    @property
    def record(self) -> GalacticRecord:
        return self.state.record

    @property
    def ship(self) -> ShipState:
        return self.state.ship

    @property
    def quadrant(self) -> Quadrant:
        return self.state.quadrant

    @property
    def stardate(self) -> float:
        return self.state.stardate

    @property
    def events(self) -> list[GameEvent]:
        return self.state.events

    @property
    def game_state(self) -> GameState:
        return self.outcome.state if self.outcome else GameState.PLAYING

    @property
    def is_over(self) -> bool:
        return self.outcome is not None

    def add_event_callback(self, callback: Callable[[GameEvent], None]) -> None:
        """Register a callback for every engine event."""
        self.state.add_event_callback(callback)

    def remove_event_callback(self, callback: Callable[[GameEvent], None]) -> None:
        self.state.remove_event_callback(callback)

    # -------------------------------------------------------------------------
    # Command dispatch
    # -------------------------------------------------------------------------

    def apply_command(self, command: Command) -> tuple[list[GameEvent], Optional[GameOutcome]]:
        """
        Apply one player command.

        Args:
            command: Any of the command dataclasses.

        Returns:
            Tuple of (events caused by the command, outcome if the game ended).

        Raises:
            GameOverError: The game has already ended.
            InvalidInputError: Unknown command or out-of-range values.
            DeviceDamagedError: A required device is damaged.
            InsufficientResourceError: Not enough energy or torpedoes.
        """
        if self.outcome is not None:
            raise GameOverError(self.outcome)

        handler = self._handlers.get(type(command))
        if handler is None:
            raise InvalidInputError(f"Unknown command: {command!r}")

        first_event = len(self.state.events)
        self._ship_destroyed = False
        self._dead_in_space = False

        self.last_result = handler(command)

        self.outcome = self._check_game_over()
        if self.outcome is not None:
            self._log_outcome(self.outcome)

        return self.state.events[first_event:], self.outcome

    def _check_game_over(self) -> Optional[GameOutcome]:
        state = self.state
        galaxy = state.galaxy
        if galaxy.total_klingons == 0:
            elapsed = state.stardate - state.params.starting_stardate
            return GameOutcome(
                state=GameState.VICTORY,
                rating=efficiency_rating(galaxy.initial_klingons, elapsed),
                klingons_remaining=0,
                stardate=state.stardate,
            )

        reason = None
        if state.ship.shields < 0 or self._ship_destroyed:
            reason = DefeatReason.SHIP_DESTROYED
        elif self._dead_in_space:
            reason = DefeatReason.DEAD_IN_SPACE
        elif state.is_time_expired:
            reason = DefeatReason.TIME_EXPIRED

        if reason is None:
            return None
        return GameOutcome(
            state=GameState.DEFEAT,
            reason=reason,
            klingons_remaining=galaxy.total_klingons,
            stardate=state.stardate,
        )

    def _log_outcome(self, outcome: GameOutcome) -> None:
        event_type = GameEventType.VICTORY if outcome.is_victory else GameEventType.DEFEAT
        self.state.log_event(event_type, outcome.to_dict())

    # -------------------------------------------------------------------------
    # Navigation and combat
    # -------------------------------------------------------------------------

    def _handle_set_course(self, command: SetCourse) -> NavigationResult:
        result = navigate(self.state, command.course, command.warp)
        self._ship_destroyed = result.ship_destroyed
        self._dead_in_space = result.dead_in_space and not result.ship_destroyed
        return result

    def _handle_fire_phasers(self, command: FirePhasers) -> PhaserResult:
        result = fire_phasers(self.state, command.units)
        self._ship_destroyed = result.ship_destroyed or self.state.ship.energy < 0
        return result

    def _handle_fire_torpedo(self, command: FireTorpedo) -> TorpedoResult:
        result = fire_torpedo(self.state, command.course)
        self._ship_destroyed = result.ship_destroyed
        return result

    def _handle_set_shields(self, command: SetShields) -> None:
        ship = self.state.ship
        ship.transfer_to_shields(command.amount)
        self.state.log_event(GameEventType.SHIELDS_SET, {
            "shields": ship.shields,
            "energy": ship.energy,
        })

    # -------------------------------------------------------------------------
    # Sensors
    # -------------------------------------------------------------------------

    def _handle_short_range_scan(self, command: ShortRangeScan) -> None:
        state = self.state
        ship = state.ship

        # Docking applies even when the sensors are out
        docked = state.check_docking()
        if ship.is_damaged(Device.SHORT_RANGE_SENSORS):
            state.log_event(GameEventType.SENSORS_DAMAGED, {
                "device": Device.SHORT_RANGE_SENSORS.value,
                "docked": docked,
                "condition": state.condition.value,
            })
            return

        state.log_event(GameEventType.SHORT_RANGE_SCAN, {
            "grid": state.quadrant.snapshot(),
            "condition": state.condition.value,
            "quadrant": ship.quadrant.to_tuple(),
            "sector": ship.sector.to_tuple(),
            "stardate": state.stardate,
            "energy": ship.energy,
            "shields": ship.shields,
            "torpedoes": ship.torpedoes,
            "klingons_remaining": state.galaxy.total_klingons,
        })

    def _handle_long_range_scan(self, command: LongRangeScan) -> None:
        state = self.state
        state.ship.require(Device.LONG_RANGE_SENSORS)

        center = state.ship.quadrant
        grid: list[list[Optional[int]]] = []
        for y in range(center.y - 1, center.y + 2):
            row: list[Optional[int]] = []
            for x in range(center.x - 1, center.x + 2):
                pos = Position(x, y)
                if not pos.in_bounds():
                    row.append(None)
                    continue
                row.append(state.galaxy[pos].encoded)
                state.record_to_memory(pos)
            grid.append(row)

        state.log_event(GameEventType.LONG_RANGE_SCAN, {
            "quadrant": center.to_tuple(),
            "grid": grid,
        })

    # -------------------------------------------------------------------------
    # Reports
    # -------------------------------------------------------------------------

    def _handle_damage_report(self, command: DamageReport) -> None:
        self.state.ship.require(Device.DAMAGE_CONTROL)
        self._log_damage_report()

    def _log_damage_report(self) -> None:
        self.state.log_event(GameEventType.DAMAGE_REPORT, {
            "devices": self.state.ship.damage_report(),
        })

    def _handle_computer_query(self, command: ComputerQuery) -> None:
        state = self.state
        state.ship.require(Device.COMPUTER)

        if command.option == COMPUTER_GALACTIC_RECORD:
            state.log_event(GameEventType.GALACTIC_RECORD, {
                "quadrant": state.ship.quadrant.to_tuple(),
                "grid": state.record.as_grid(),
            })
        elif command.option == COMPUTER_STATUS_REPORT:
            state.log_event(GameEventType.STATUS_REPORT, {
                "klingons_remaining": state.galaxy.total_klingons,
                "stardates_left": state.stardates_left,
                "starbases_remaining": state.galaxy.total_starbases,
            })
            # Damage report follows without checking damage control
            self._log_damage_report()
        elif command.option == COMPUTER_TORPEDO_DATA:
            targets = [k.position for k in state.quadrant.living_klingons]
            state.log_event(GameEventType.TORPEDO_DATA, {
                "targets": self._bearings(targets),
            })
        elif command.option == COMPUTER_STARBASE_NAV_DATA:
            state.log_event(GameEventType.STARBASE_NAV_DATA, {
                "targets": self._bearings(list(state.quadrant.starbases)),
            })
        elif command.option == COMPUTER_DIRECTION_CALCULATOR:
            source, target = command.source, command.target
            if source is None or target is None:
                raise InvalidInputError("Direction calculator needs a source and a target sector")
            if not (source.in_bounds() and target.in_bounds()):
                raise InvalidInputError(f"Sectors must lie in 1..8, got {source} and {target}")
            direction, distance = direction_and_distance(source, target)
            state.log_event(GameEventType.DIRECTION_DISTANCE, {
                "source": source.to_tuple(),
                "target": target.to_tuple(),
                "direction": direction,
                "distance": distance,
            })
        else:
            raise InvalidInputError(f"Unknown computer option: {command.option}")

    def _bearings(self, targets: list[Position]) -> list[dict]:
        ship_sector = self.state.ship.sector
        bearings = []
        for target in targets:
            direction, distance = direction_and_distance(ship_sector, target)
            bearings.append({
                "sector": target.to_tuple(),
                "direction": direction,
                "distance": distance,
            })
        return bearings


# =============================================================================
# GAME SETUP
# =============================================================================

def new_game(
    seed: Optional[int] = None,
    params: Optional[MissionParameters] = None,
    rng: Optional[RandomSource] = None,
) -> GameEngine:
    """
    Start a new game.

    Draw order: starting stardate (unless params already fixes one), galaxy,
    starting quadrant x/y, starting sector x/y, then the layout of the
    starting quadrant.

    Args:
        seed: Seed for a reproducible game; None seeds from entropy.
        params: Mission parameters; defaults reproduce the classic game.
        rng: Explicit random source, overriding seed.

    Returns:
        A GameEngine positioned at the start of the mission.
    """
    if rng is None:
        rng = create_rng(seed)
    if params is None:
        params = MissionParameters()
    if params.starting_stardate is None:
        stardate = math.floor(rng.random() * 20.0 + 20.0) * 100.0
        params = params.with_starting_stardate(stardate)

    galaxy = Galaxy.generate(rng)
    start_quadrant = Position(random_coordinate(rng), random_coordinate(rng))
    start_sector = Position(random_coordinate(rng), random_coordinate(rng))

    state = MissionState(
        params=params,
        galaxy=galaxy,
        record=GalacticRecord(),
        ship=ShipState.from_params(params, start_quadrant, start_sector),
        quadrant=Quadrant(),
        rng=rng,
        stardate=params.starting_stardate,
    )
    state.log_event(GameEventType.GAME_STARTED, {
        "klingons": galaxy.total_klingons,
        "starbases": galaxy.total_starbases,
        "stardate": state.stardate,
        "time_limit": params.time_limit,
        "deadline": params.deadline,
        "quadrant": start_quadrant.to_tuple(),
        "sector": start_sector.to_tuple(),
    })
    state.enter_quadrant()
    return GameEngine(state)


def apply_command(
    engine: GameEngine,
    command: Command,
) -> tuple[list[GameEvent], Optional[GameOutcome]]:
    """Apply a command to a game; see GameEngine.apply_command."""
    return engine.apply_command(command)
