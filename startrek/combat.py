"""
Combat resolution for the classic Star Trek game.

Handles:
- Klingon volleys against the ship (and the docked shield exemption)
- Phaser fire split across every Klingon in the quadrant
- Photon torpedo tracks and what they hit
- The dead-in-space loop when the ship can no longer move

Every hit uses the same formula: numerator / distance * (2 * u), where the
distance is Euclidean in sectors and u is a fresh uniform draw.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterator, Optional

from .constants import (
    ACCURACY_AND_MEMORY_DEVICE,
    MAX_DEAD_IN_SPACE_VOLLEYS,
    Device,
    SectorContent,
)
from .errors import InsufficientResourceError, InvalidInputError
from .events import GameEventType
from .navigation import Position, course_vector, sector_distance, validate_course
from .rng import RandomSource
from .state import MissionState


class TorpedoOutcome(Enum):
    """How a torpedo track ended."""
    MISSED = "missed"
    KLINGON_DESTROYED = "klingon_destroyed"
    ABSORBED_BY_STAR = "absorbed_by_star"
    STARBASE_DESTROYED = "starbase_destroyed"


# =============================================================================
# RESULT TYPES
# =============================================================================

@dataclass
class VolleyResult:
    """
    Result of one round of Klingon fire.

    Attributes:
        hits: Damage dealt by each firing Klingon, in firing order.
        shielded_by_starbase: The ship was docked and took no damage.
        ship_destroyed: Shields dropped below zero.
    """
    hits: list[float] = field(default_factory=list)
    shielded_by_starbase: bool = False
    ship_destroyed: bool = False

    @property
    def total_damage(self) -> float:
        return sum(self.hits)


@dataclass
class PhaserResult:
    """
    Result of a phaser attack.

    Attributes:
        units: Energy spent.
        effective_units: Energy actually delivered (reduced when the
            accuracy device is damaged).
        hits: Damage dealt to each Klingon, in quadrant order.
        klingons_destroyed: Number of Klingons destroyed.
        return_fire: The Klingon volley triggered by the attack.
    """
    units: float
    effective_units: float = 0.0
    hits: list[float] = field(default_factory=list)
    klingons_destroyed: int = 0
    return_fire: Optional[VolleyResult] = None

    @property
    def ship_destroyed(self) -> bool:
        return self.return_fire is not None and self.return_fire.ship_destroyed


@dataclass
class TorpedoResult:
    """
    Result of a photon torpedo launch.

    Attributes:
        course: Launch course.
        track: Sectors the torpedo passed through, in order.
        outcome: How the track ended.
        impact: Sector of the object hit, if any.
        return_fire: The Klingon volley after the torpedo resolved.
    """
    course: float
    track: list[Position] = field(default_factory=list)
    outcome: TorpedoOutcome = TorpedoOutcome.MISSED
    impact: Optional[Position] = None
    return_fire: Optional[VolleyResult] = None

    @property
    def ship_destroyed(self) -> bool:
        return self.return_fire is not None and self.return_fire.ship_destroyed


# =============================================================================
# HIT FORMULA
# =============================================================================

def hit_strength(numerator: float, distance: float, rng: RandomSource) -> float:
    """
    Damage of a single shot.

    Args:
        numerator: Attacker's strength (Klingon shields or phaser share).
        distance: Euclidean distance in sectors.
        rng: Random source; one draw.
    """
    return (numerator / distance) * (2.0 * rng.random())


# =============================================================================
# KLINGON FIRE
# =============================================================================

def klingons_fire(state: MissionState) -> VolleyResult:
    """
    Every living Klingon in the quadrant fires once at the ship.

    While docked the starbase shields absorb the whole volley and no random
    numbers are drawn.
    """
    result = VolleyResult()
    attackers = state.quadrant.living_klingons
    if not attackers:
        return result

    if state.is_docked:
        result.shielded_by_starbase = True
        state.log_event(GameEventType.SHIELDS_PROTECTED, {
            "sector": state.ship.sector.to_tuple(),
        })
        return result

    ship = state.ship
    for klingon in attackers:
        distance = sector_distance(ship.sector, klingon.position)
        hit = hit_strength(klingon.shields, distance, state.rng)
        ship.shields -= hit
        result.hits.append(hit)
        state.log_event(GameEventType.ENTERPRISE_HIT, {
            "hit": hit,
            "from_sector": klingon.position.to_tuple(),
            "shields_remaining": max(0.0, ship.shields),
        })

    result.ship_destroyed = ship.shields < 0
    return result


def dead_in_space(state: MissionState) -> VolleyResult:
    """
    Resolve a ship with no energy and no shields.

    Klingons keep firing until the ship is destroyed. If a volley does no
    damage at all (or no Klingons remain) the loop stops and the ship is left
    drifting, which ends the game as well.

    Returns:
        The last volley fired.
    """
    state.log_event(GameEventType.DEAD_IN_SPACE, {
        "energy": state.ship.energy,
        "shields": state.ship.shields,
    })

    volley = VolleyResult()
    for _ in range(MAX_DEAD_IN_SPACE_VOLLEYS):
        if not state.quadrant.living_klingons:
            break
        volley = klingons_fire(state)
        if volley.ship_destroyed or volley.total_damage <= 0:
            break
    return volley


# =============================================================================
# PHASERS
# =============================================================================

def fire_phasers(state: MissionState, units: float) -> PhaserResult:
    """
    Fire phasers at every Klingon in the quadrant.

    The energy is spent first, then the Klingons fire back. If the ship
    survives, the delivered energy is split evenly across the living Klingons
    and attenuated by distance.

    Args:
        state: Game state.
        units: Energy to fire.

    Raises:
        InvalidInputError: No Klingons in the quadrant, or units <= 0.
        DeviceDamagedError: Phaser control is damaged.
        InsufficientResourceError: units exceeds available energy.
    """
    ship = state.ship
    quadrant = state.quadrant

    if not quadrant.has_klingons:
        raise InvalidInputError("Short range sensors report no Klingons in this quadrant")
    ship.require(Device.PHASER_CONTROL)
    if units <= 0:
        raise InvalidInputError(f"Phaser energy must be positive, got {units}")
    if ship.energy - units < 0:
        raise InsufficientResourceError("energy", units, ship.energy)

    degraded = ship.is_damaged(ACCURACY_AND_MEMORY_DEVICE)
    ship.energy -= units
    result = PhaserResult(units=units)
    state.log_event(GameEventType.PHASERS_FIRED, {
        "units": units,
        "energy_remaining": ship.energy,
    })

    result.return_fire = klingons_fire(state)
    if result.return_fire.ship_destroyed:
        return result

    effective = units
    if degraded:
        effective = units * state.rng.random()
        state.log_event(GameEventType.ACCURACY_DEGRADED, {
            "units": units,
            "effective_units": effective,
        })
    result.effective_units = effective

    targets = quadrant.living_klingons
    if not targets:
        return result

    share = effective / len(targets)
    for klingon in targets:
        distance = sector_distance(ship.sector, klingon.position)
        hit = hit_strength(share, distance, state.rng)
        klingon.shields -= hit
        result.hits.append(hit)
        state.log_event(GameEventType.KLINGON_HIT, {
            "hit": hit,
            "sector": klingon.position.to_tuple(),
            "shields_remaining": max(0.0, klingon.shields),
        })

    for klingon in targets:
        if not klingon.is_alive:
            state.destroy_klingon(klingon)
            result.klingons_destroyed += 1

    return result


# =============================================================================
# PHOTON TORPEDOES
# =============================================================================

def torpedo_path(start: Position, course: float) -> Iterator[Position]:
    """
    Sectors a torpedo passes through until it leaves the quadrant.

    The torpedo advances one course vector per step from the ship's sector;
    each in-bounds point is reported as its rounded sector.
    """
    direction = course_vector(course)
    point = start.to_vector()
    while True:
        point = point + direction
        if not point.in_sector_bounds():
            return
        yield point.rounded()


def fire_torpedo(state: MissionState, course: float) -> TorpedoResult:
    """
    Launch a photon torpedo along a course.

    The track stops at the first non-empty sector: a Klingon or starbase there
    is destroyed, a star absorbs the torpedo. Leaving the quadrant is a miss.
    Living Klingons fire back afterwards.

    Raises:
        DeviceDamagedError: Photon tubes are damaged.
        InsufficientResourceError: No torpedoes left.
        InvalidInputError: Course outside [1, 9).
    """
    ship = state.ship
    quadrant = state.quadrant

    ship.require(Device.PHOTON_TUBES)
    if ship.torpedoes <= 0:
        raise InsufficientResourceError("torpedoes", 1, ship.torpedoes)
    validate_course(course)

    ship.torpedoes -= 1
    result = TorpedoResult(course=course)
    state.log_event(GameEventType.TORPEDO_FIRED, {
        "course": course,
        "torpedoes_remaining": ship.torpedoes,
    })

    for sector in torpedo_path(ship.sector, course):
        result.track.append(sector)
        state.log_event(GameEventType.TORPEDO_TRACK, {"sector": sector.to_tuple()})

        content = quadrant.get(sector)
        if content in (SectorContent.EMPTY, SectorContent.ENTERPRISE):
            continue

        result.impact = sector
        if content == SectorContent.KLINGON:
            klingon = quadrant.klingon_at(sector)
            if klingon is not None:
                state.destroy_klingon(klingon)
            result.outcome = TorpedoOutcome.KLINGON_DESTROYED
        elif content == SectorContent.STAR:
            result.outcome = TorpedoOutcome.ABSORBED_BY_STAR
            state.log_event(GameEventType.TORPEDO_ABSORBED_BY_STAR, {
                "sector": sector.to_tuple(),
            })
        else:
            state.destroy_starbase(sector)
            result.outcome = TorpedoOutcome.STARBASE_DESTROYED
        break
    else:
        state.log_event(GameEventType.TORPEDO_MISSED, {"course": course})

    result.return_fire = klingons_fire(state)
    return result
