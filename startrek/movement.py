"""
Warp navigation.

A move runs in a fixed order:
1. Validate course and warp (damaged engines cap warp at 0.2)
2. Klingons in the quadrant fire first
3. Energy check (dead in space, or too low to move)
4. Automatic repair of damaged devices, then a possible random device event
5. Step through the quadrant, stopping before obstacles
6. Cross into a new quadrant if the path leaves this one
7. Charge energy and time

The order of random draws is fixed; replaying the same draws reproduces the
same move exactly.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Optional

from .combat import VolleyResult, dead_in_space, klingons_fire
from .constants import (
    ALL_DEVICES,
    DAMAGED_ENGINE_MAX_WARP,
    MAX_EVENT_SEVERITY,
    NUM_DEVICES,
    RANDOM_EVENT_CHANCE,
    SECTOR_SIZE,
    Device,
    SectorContent,
)
from .errors import WarpEnginesDamagedError
from .events import GameEventType
from .navigation import (
    Position,
    Vector2D,
    course_vector,
    quadrant_crossing,
    validate_course,
    validate_warp,
)
from .rng import random_index
from .state import MissionState


@dataclass
class DeviceEvent:
    """A random change to one device during a move."""
    device: Device
    delta: int

    @property
    def improved(self) -> bool:
        return self.delta > 0


@dataclass
class NavigationResult:
    """
    Result of a warp command.

    Attributes:
        course: Requested course.
        warp: Requested warp factor.
        steps: Planned sector steps, floor(warp * 8).
        volley: Klingon fire taken before moving.
        stalled: Energy was exhausted but shields remained; the ship did not move.
        dead_in_space: Energy and shields were both exhausted.
        ship_destroyed: The ship was destroyed during the move.
        repaired: Devices touched by automatic repair.
        device_event: Random device damage or improvement, if any.
        blocked_at: Obstacle sector that stopped the ship, if any.
        crossed_quadrant: The ship left its starting quadrant.
        energy_cost: Energy charged (negative for short moves).
        stardate_advanced: The clock moved forward.
    """
    course: float
    warp: float
    steps: int = 0
    volley: Optional[VolleyResult] = None
    stalled: bool = False
    dead_in_space: bool = False
    ship_destroyed: bool = False
    repaired: list[Device] = field(default_factory=list)
    device_event: Optional[DeviceEvent] = None
    blocked_at: Optional[Position] = None
    crossed_quadrant: bool = False
    energy_cost: float = 0.0
    stardate_advanced: bool = False


# =============================================================================
# DAMAGE CONTROL
# =============================================================================

def random_device_event(state: MissionState) -> Optional[DeviceEvent]:
    """
    Possibly damage or improve one random device.

    Draws, in order: trigger (no event if above 0.2), device index,
    improve-or-damage coin, severity 1..5.
    """
    rng = state.rng
    if rng.random() > RANDOM_EVENT_CHANCE:
        return None

    device = ALL_DEVICES[random_index(rng, NUM_DEVICES)]
    improve = rng.random() >= 0.5
    severity = random_index(rng, MAX_EVENT_SEVERITY) + 1

    if improve:
        state.ship.repair_device(device, severity)
        event = DeviceEvent(device, severity)
        state.log_event(GameEventType.DEVICE_IMPROVED, {
            "device": device.value,
            "amount": severity,
            "state": state.ship.devices[device],
        })
    else:
        state.ship.damage_device(device, severity)
        event = DeviceEvent(device, -severity)
        state.log_event(GameEventType.DEVICE_DAMAGED, {
            "device": device.value,
            "amount": severity,
            "state": state.ship.devices[device],
        })
    return event


# =============================================================================
# NAVIGATION
# =============================================================================

def navigate(state: MissionState, course: float, warp: float) -> NavigationResult:
    """
    Execute a warp command.

    Args:
        state: Game state.
        course: Course in [1, 9).
        warp: Warp factor in [0, 8].

    Returns:
        What happened during the move. Terminal conditions are reported on
        the result; the caller decides the game outcome.

    Raises:
        InvalidInputError: Course or warp out of range.
        WarpEnginesDamagedError: Engines damaged and warp above 0.2.
    """
    validate_course(course)
    validate_warp(warp)
    ship = state.ship
    if ship.is_damaged(Device.WARP_ENGINES) and warp > DAMAGED_ENGINE_MAX_WARP:
        raise WarpEnginesDamagedError(Device.WARP_ENGINES, DAMAGED_ENGINE_MAX_WARP)

    result = NavigationResult(course=course, warp=warp)

    if state.quadrant.has_klingons:
        result.volley = klingons_fire(state)
        if result.volley.ship_destroyed:
            result.ship_destroyed = True
            return result

    if ship.energy <= 0:
        if ship.shields < 1:
            result.dead_in_space = True
            result.volley = dead_in_space(state)
            result.ship_destroyed = result.volley.ship_destroyed
        else:
            result.stalled = True
            state.log_event(GameEventType.LOW_ENERGY, {
                "energy": ship.energy,
                "shields": ship.shields,
            })
        return result

    result.steps = int(math.floor(warp * SECTOR_SIZE))
    if result.steps == 0:
        return result

    result.repaired = ship.auto_repair()
    if result.repaired:
        state.log_event(GameEventType.DEVICES_REPAIRED, {
            "devices": [device.value for device in result.repaired],
        })
    result.device_event = random_device_event(state)

    _move_ship(state, course_vector(course), result)

    result.energy_cost = result.steps - 5
    ship.energy -= result.energy_cost
    if warp >= 1 or result.crossed_quadrant:
        state.advance_stardate(1)
        result.stardate_advanced = True

    return result


def _move_ship(state: MissionState, direction: Vector2D, result: NavigationResult) -> None:
    ship = state.ship
    quadrant = state.quadrant
    start_quadrant = ship.quadrant
    start_sector = ship.sector

    quadrant.set(start_sector, SectorContent.EMPTY)
    point = start_sector.to_vector()

    for _ in range(result.steps):
        ahead = point + direction
        if not ahead.in_sector_bounds():
            result.crossed_quadrant = True
            break
        if not quadrant.is_empty(ahead.rounded()):
            result.blocked_at = ahead.rounded()
            state.log_event(GameEventType.NAVIGATION_BLOCKED, {
                "obstacle": result.blocked_at.to_tuple(),
                "sector": point.rounded().to_tuple(),
            })
            break
        point = ahead

    if result.crossed_quadrant:
        ship.quadrant, ship.sector = quadrant_crossing(
            start_quadrant, start_sector, direction, result.steps
        )
        state.enter_quadrant()
        return

    ship.sector = point.rounded()
    quadrant.set(ship.sector, SectorContent.ENTERPRISE)
    state.log_event(GameEventType.SHIP_MOVED, {
        "from_sector": start_sector.to_tuple(),
        "sector": ship.sector.to_tuple(),
    })
