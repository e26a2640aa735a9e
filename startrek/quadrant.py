"""
The live quadrant: an 8x8 sector grid and the entities placed on it.

A quadrant is instantiated from its galaxy summary every time the ship enters
it, placing the ship, Klingons, starbases and stars on random free sectors.
Nothing about the layout survives leaving the quadrant, so two visits to the
same quadrant produce independent layouts.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from .constants import (
    KLINGON_INITIAL_SHIELDS,
    MAX_PLACEMENT_ATTEMPTS,
    SECTOR_SIZE,
    SectorContent,
)
from .errors import GenerationError
from .galaxy import QuadrantSummary
from .navigation import Position
from .rng import RandomSource, random_coordinate


@dataclass
class KlingonUnit:
    """
    A Klingon battle cruiser in the current quadrant.

    Attributes:
        position: Sector position.
        shields: Remaining shield energy; destroyed at or below zero.
    """
    position: Position
    shields: float = KLINGON_INITIAL_SHIELDS

    @property
    def is_alive(self) -> bool:
        return self.shields > 0.0


@dataclass
class Quadrant:
    """
    Sector occupancy for the quadrant the ship is in.

    The grid is the single source of occupancy; the entity lists mirror it for
    iteration in placement order.
    """
    grid: list[list[SectorContent]] = field(default_factory=lambda: [
        [SectorContent.EMPTY] * SECTOR_SIZE for _ in range(SECTOR_SIZE)
    ])
    klingons: list[KlingonUnit] = field(default_factory=list)
    starbases: list[Position] = field(default_factory=list)
    stars: list[Position] = field(default_factory=list)

    # -------------------------------------------------------------------------
    # Grid access
    # -------------------------------------------------------------------------

    def get(self, pos: Position) -> SectorContent:
        return self.grid[pos.y - 1][pos.x - 1]

    def set(self, pos: Position, content: SectorContent) -> None:
        self.grid[pos.y - 1][pos.x - 1] = content

    def is_empty(self, pos: Position) -> bool:
        return self.get(pos) == SectorContent.EMPTY

    def find_random_empty_sector(self, rng: RandomSource) -> Position:
        """
        Rejection-sample a free sector, drawing x then y.

        Raises:
            GenerationError: If no free sector is found within the guard.
        """
        for _ in range(MAX_PLACEMENT_ATTEMPTS):
            pos = Position(random_coordinate(rng), random_coordinate(rng))
            if self.is_empty(pos):
                return pos
        raise GenerationError(
            f"No free sector found after {MAX_PLACEMENT_ATTEMPTS} attempts"
        )

    # -------------------------------------------------------------------------
    # Entities
    # -------------------------------------------------------------------------

    @property
    def living_klingons(self) -> list[KlingonUnit]:
        return [k for k in self.klingons if k.is_alive]

    @property
    def has_klingons(self) -> bool:
        return bool(self.klingons)

    def add_klingon(self, pos: Position, shields: float = KLINGON_INITIAL_SHIELDS) -> KlingonUnit:
        klingon = KlingonUnit(pos, shields)
        self.set(pos, SectorContent.KLINGON)
        self.klingons.append(klingon)
        return klingon

    def add_starbase(self, pos: Position) -> None:
        self.set(pos, SectorContent.STARBASE)
        self.starbases.append(pos)

    def add_star(self, pos: Position) -> None:
        self.set(pos, SectorContent.STAR)
        self.stars.append(pos)

    def klingon_at(self, pos: Position) -> Optional[KlingonUnit]:
        for klingon in self.klingons:
            if klingon.position == pos:
                return klingon
        return None

    def remove_klingon(self, klingon: KlingonUnit) -> None:
        self.set(klingon.position, SectorContent.EMPTY)
        self.klingons = [k for k in self.klingons if k is not klingon]

    def remove_starbase(self, pos: Position) -> None:
        self.set(pos, SectorContent.EMPTY)
        self.starbases = [b for b in self.starbases if b != pos]

    def is_adjacent_to_starbase(self, pos: Position) -> bool:
        return any(pos.is_adjacent_to(base) for base in self.starbases)

    def count(self, content: SectorContent) -> int:
        return sum(row.count(content) for row in self.grid)

    def snapshot(self) -> list[list[str]]:
        """Grid contents row by row, as enum values, for scan reports."""
        return [[cell.value for cell in row] for row in self.grid]


def instantiate_quadrant(
    summary: QuadrantSummary,
    ship_sector: Position,
    rng: RandomSource,
    klingon_shields: float = KLINGON_INITIAL_SHIELDS,
) -> Quadrant:
    """
    Lay out a quadrant for the ship entering it.

    The ship is placed first, then every Klingon, starbase and star from the
    summary, each on a uniformly drawn free sector.

    Args:
        summary: Counts from the galaxy map.
        ship_sector: The ship's (rounded) sector.
        rng: Random source for placement.
        klingon_shields: Starting shields for each Klingon.
    """
    quadrant = Quadrant()
    quadrant.set(ship_sector, SectorContent.ENTERPRISE)

    for _ in range(summary.klingons):
        quadrant.add_klingon(quadrant.find_random_empty_sector(rng), klingon_shields)
    for _ in range(summary.starbases):
        quadrant.add_starbase(quadrant.find_random_empty_sector(rng))
    for _ in range(summary.stars):
        quadrant.add_star(quadrant.find_random_empty_sector(rng))

    return quadrant
