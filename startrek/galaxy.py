"""
Galaxy model: the 8x8 map of quadrant summaries.

Two independent views exist:
- ``Galaxy`` is ground truth. Klingon and starbase counts are decremented in
  place as they are destroyed, and victory is judged from it.
- ``GalacticRecord`` is the ship computer's memory. It only holds quadrants
  the ship has recorded (by entering them or by long range scan) and backs
  the cumulative galactic record report.

Only counts are persisted per quadrant; sector positions are generated anew
every time the ship enters (see quadrant.py).
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field, replace
from typing import Iterator, Optional

from .constants import GALAXY_SIZE, MAX_GALAXY_ATTEMPTS
from .errors import GenerationError
from .navigation import Position
from .rng import RandomSource


# Klingon count thresholds, checked highest first
KLINGON_THRESHOLDS: tuple[tuple[float, int], ...] = (
    (0.98, 3),
    (0.95, 2),
    (0.80, 1),
)
STARBASE_THRESHOLD = 0.96


# =============================================================================
# QUADRANT SUMMARY
# =============================================================================

@dataclass(frozen=True)
class QuadrantSummary:
    """
    Entity counts of one quadrant.

    Attributes:
        klingons: Klingon vessels, 0..3.
        starbases: Starbases, 0..1.
        stars: Stars, 1..8.
    """
    klingons: int
    starbases: int
    stars: int

    @property
    def encoded(self) -> int:
        """Three-digit scan value: klingons*100 + starbases*10 + stars."""
        return self.klingons * 100 + self.starbases * 10 + self.stars

    def to_dict(self) -> dict:
        return {
            "klingons": self.klingons,
            "starbases": self.starbases,
            "stars": self.stars,
        }


def all_quadrant_positions() -> Iterator[Position]:
    """Every quadrant position, row by row."""
    for y in range(1, GALAXY_SIZE + 1):
        for x in range(1, GALAXY_SIZE + 1):
            yield Position(x, y)


def _draw_klingons(rng: RandomSource) -> int:
    f = rng.random()
    for threshold, count in KLINGON_THRESHOLDS:
        if f > threshold:
            return count
    return 0


def _draw_summary(rng: RandomSource) -> QuadrantSummary:
    klingons = _draw_klingons(rng)
    starbases = 1 if rng.random() > STARBASE_THRESHOLD else 0
    stars = int(math.floor(rng.random() * 8.0)) + 1
    return QuadrantSummary(klingons, starbases, stars)


# =============================================================================
# GALAXY (GROUND TRUTH)
# =============================================================================

@dataclass
class Galaxy:
    """
    Ground-truth quadrant summaries.

    Attributes:
        cells: Summary per quadrant position.
        initial_klingons: Klingon total at generation time.
    """
    cells: dict[Position, QuadrantSummary]
    initial_klingons: int = 0

    def __post_init__(self) -> None:
        if not self.initial_klingons:
            self.initial_klingons = self.total_klingons

    @classmethod
    def generate(cls, rng: RandomSource) -> Galaxy:
        """
        Draw a new galaxy.

        Each of the 64 quadrants draws Klingons, then starbases, then stars.
        If the finished galaxy has no Klingons or no starbases the whole map is
        discarded and drawn again.

        Raises:
            GenerationError: If no valid galaxy appears within the retry guard.
        """
        for _ in range(MAX_GALAXY_ATTEMPTS):
            cells = {pos: _draw_summary(rng) for pos in all_quadrant_positions()}
            galaxy = cls(cells)
            if galaxy.total_klingons > 0 and galaxy.total_starbases > 0:
                return galaxy
        raise GenerationError(
            f"No galaxy with Klingons and starbases after {MAX_GALAXY_ATTEMPTS} attempts"
        )

    def __getitem__(self, quadrant: Position) -> QuadrantSummary:
        return self.cells[quadrant]

    @property
    def total_klingons(self) -> int:
        return sum(cell.klingons for cell in self.cells.values())

    @property
    def total_starbases(self) -> int:
        return sum(cell.starbases for cell in self.cells.values())

    def remove_klingon(self, quadrant: Position) -> QuadrantSummary:
        """Decrement a quadrant's Klingon count; returns the new summary."""
        cell = self.cells[quadrant]
        self.cells[quadrant] = replace(cell, klingons=max(0, cell.klingons - 1))
        return self.cells[quadrant]

    def remove_starbase(self, quadrant: Position) -> QuadrantSummary:
        """Decrement a quadrant's starbase count; returns the new summary."""
        cell = self.cells[quadrant]
        self.cells[quadrant] = replace(cell, starbases=max(0, cell.starbases - 1))
        return self.cells[quadrant]


# =============================================================================
# GALACTIC RECORD (COMPUTER MEMORY)
# =============================================================================

@dataclass
class GalacticRecord:
    """Sparse copy of the galaxy as last recorded by the ship's computer."""
    known: dict[Position, QuadrantSummary] = field(default_factory=dict)

    def record(self, quadrant: Position, summary: QuadrantSummary) -> None:
        self.known[quadrant] = summary

    def refresh(self, quadrant: Position, summary: QuadrantSummary) -> None:
        """Update a quadrant only if it has been recorded before."""
        if quadrant in self.known:
            self.known[quadrant] = summary

    def get(self, quadrant: Position) -> Optional[QuadrantSummary]:
        return self.known.get(quadrant)

    def __contains__(self, quadrant: Position) -> bool:
        return quadrant in self.known

    def __len__(self) -> int:
        return len(self.known)

    def as_grid(self) -> list[list[Optional[int]]]:
        """Encoded values row by row, None for unscanned quadrants."""
        grid = []
        for y in range(1, GALAXY_SIZE + 1):
            row = []
            for x in range(1, GALAXY_SIZE + 1):
                summary = self.known.get(Position(x, y))
                row.append(summary.encoded if summary is not None else None)
            grid.append(row)
        return grid
