"""
Coordinate and course mathematics.

Implements the geometry of the classic game:
- Integer grid positions for quadrants and sectors
- 2D float vectors for sub-sector movement and torpedo tracks
- Course (1-9) to movement vector by linear interpolation
- The ratio-based direction/distance calculator (deliberately not arctangent)
- Quadrant boundary crossing with the sector-zero correction

Coordinates are 1-based. X grows left to right, Y grows top to bottom, so a
vector with negative dy moves "up" the screen.
"""

from __future__ import annotations

import math
from dataclasses import dataclass

from .constants import (
    COURSE_VECTORS,
    GALAXY_SIZE,
    MAX_COURSE,
    MAX_WARP,
    MIN_COURSE,
    SECTOR_MAX_BOUND,
    SECTOR_MIN_BOUND,
    SECTOR_SIZE,
)
from .errors import InvalidInputError


# =============================================================================
# POSITION AND VECTOR TYPES
# =============================================================================

@dataclass(frozen=True)
class Position:
    """
    Integer grid position, used for both quadrant and sector coordinates.

    Attributes:
        x: Column, 1..8.
        y: Row, 1..8.
    """
    x: int
    y: int

    def in_bounds(self, size: int = SECTOR_SIZE) -> bool:
        """Whether the position lies on a size x size grid."""
        return 1 <= self.x <= size and 1 <= self.y <= size

    def is_adjacent_to(self, other: Position) -> bool:
        """True if other lies in the 3x3 neighbourhood (including this cell)."""
        return abs(self.x - other.x) <= 1 and abs(self.y - other.y) <= 1

    def to_vector(self) -> Vector2D:
        return Vector2D(float(self.x), float(self.y))

    def to_tuple(self) -> tuple[int, int]:
        return (self.x, self.y)

    def __str__(self) -> str:
        return f"{self.x},{self.y}"


@dataclass
class Vector2D:
    """Float vector for sub-sector positions and course directions."""
    x: float = 0.0
    y: float = 0.0

    def __add__(self, other: Vector2D) -> Vector2D:
        return Vector2D(self.x + other.x, self.y + other.y)

    def __sub__(self, other: Vector2D) -> Vector2D:
        return Vector2D(self.x - other.x, self.y - other.y)

    def __mul__(self, scalar: float) -> Vector2D:
        return Vector2D(self.x * scalar, self.y * scalar)

    def __rmul__(self, scalar: float) -> Vector2D:
        return self.__mul__(scalar)

    @property
    def magnitude(self) -> float:
        return math.sqrt(self.x**2 + self.y**2)

    def rounded(self) -> Position:
        """Nearest integer sector: floor(v + 0.5) on each axis."""
        return Position(
            int(math.floor(self.x + 0.5)),
            int(math.floor(self.y + 0.5)),
        )

    def in_sector_bounds(self) -> bool:
        """Whether the point is still inside the current quadrant."""
        return (SECTOR_MIN_BOUND <= self.x < SECTOR_MAX_BOUND and
                SECTOR_MIN_BOUND <= self.y < SECTOR_MAX_BOUND)

    def to_tuple(self) -> tuple[float, float]:
        return (self.x, self.y)

    def __repr__(self) -> str:
        return f"Vector2D({self.x:.6g}, {self.y:.6g})"


# =============================================================================
# INPUT VALIDATION
# =============================================================================

def validate_course(course: float) -> float:
    """
    Check a course value.

    Raises:
        InvalidInputError: If course is outside [1, 9).
    """
    if not MIN_COURSE <= course < MAX_COURSE:
        raise InvalidInputError(
            f"Course must be in [{MIN_COURSE:g}, {MAX_COURSE:g}), got {course}"
        )
    return float(course)


def validate_warp(warp: float) -> float:
    """
    Check a warp factor.

    Raises:
        InvalidInputError: If warp is outside [0, 8].
    """
    if not 0.0 <= warp <= MAX_WARP:
        raise InvalidInputError(f"Warp factor must be in [0, {MAX_WARP:g}], got {warp}")
    return float(warp)


# =============================================================================
# COURSE AND DIRECTION MATH
# =============================================================================

def course_vector(course: float) -> Vector2D:
    """
    Movement vector for a course in [1, 9).

    Linearly interpolates between the integer course directions floor(course)
    and floor(course) + 1. Diagonals are not normalized: course 2 moves one
    full sector on each axis per step.
    """
    validate_course(course)
    r = int(math.floor(course))
    frac = course - r
    x0, y0 = COURSE_VECTORS[r]
    x1, y1 = COURSE_VECTORS[r + 1]
    return Vector2D(x0 + (x1 - x0) * frac, y0 + (y1 - y0) * frac)


def sector_distance(a: Position, b: Position) -> float:
    """Euclidean distance between two sector positions."""
    dx = b.x - a.x
    dy = b.y - a.y
    return math.sqrt(dx * dx + dy * dy)


def _blend_direction(base: float, primary: float, secondary: float) -> float:
    # primary: magnitude along the base octant's axis
    # secondary: magnitude along the next octant's axis
    if secondary <= primary:
        return base + (secondary / primary)
    return base + (((secondary - primary) + secondary) / secondary)


def direction_and_distance(source: Position, target: Position) -> tuple[float, float]:
    """
    Course and distance from source to target, as the ship's computer does it.

    The direction is a piecewise-linear blend between compass octants driven by
    the ratio of the smaller axis offset to the larger one. It matches the true
    bearing only on multiples of 45 degrees; callers depend on these exact
    values, so no trigonometry is used.

    Returns:
        Tuple of (direction in [1, 9), distance in sectors). Identical
        positions give direction 5.
    """
    dx = math.floor(target.x - source.x)
    dy = math.floor(source.y - target.y)  # compass up is screen down
    distance = math.sqrt(dx * dx + dy * dy)

    ax, ay = abs(dx), abs(dy)
    if dx == 0 and dy == 0:
        direction = 5.0
    elif dx >= 0 and dy >= 0:
        direction = _blend_direction(1.0, ax, ay)
    elif dx < 0 and dy >= 0:
        direction = _blend_direction(3.0, ay, ax)
    elif dy < 0 and dx <= 0:
        direction = _blend_direction(5.0, ax, ay)
    else:
        direction = _blend_direction(7.0, ay, ax)

    return direction, distance


# =============================================================================
# QUADRANT CROSSING
# =============================================================================

def _clamp(value: int, low: int, high: int) -> int:
    return max(low, min(high, value))


def quadrant_crossing(
    quadrant: Position,
    sector: Position,
    direction: Vector2D,
    steps: int,
) -> tuple[Position, Position]:
    """
    New quadrant and sector after leaving the current quadrant.

    Works in absolute galactic coordinates (quadrant * 8 + sector) plus the
    full planned displacement (direction * steps), not the partial path
    already flown. A sector remainder of 0 belongs to sector 8 of the
    previous quadrant. The resulting quadrant is clamped to the galaxy edge.

    Args:
        quadrant: Quadrant at the start of the move.
        sector: Sector at the start of the move.
        direction: Course vector.
        steps: Planned number of sector steps (N).

    Returns:
        Tuple of (new quadrant, new sector).
    """
    abs_x = quadrant.x * SECTOR_SIZE + sector.x + direction.x * steps
    abs_y = quadrant.y * SECTOR_SIZE + sector.y + direction.y * steps

    new_qx = int(math.floor(abs_x / SECTOR_SIZE))
    new_qy = int(math.floor(abs_y / SECTOR_SIZE))
    new_sx = int(math.floor(abs_x - new_qx * SECTOR_SIZE + 0.5))
    new_sy = int(math.floor(abs_y - new_qy * SECTOR_SIZE + 0.5))

    if new_sx == 0:
        new_qx -= 1
        new_sx = SECTOR_SIZE
    if new_sy == 0:
        new_qy -= 1
        new_sy = SECTOR_SIZE

    new_quadrant = Position(
        _clamp(new_qx, 1, GALAXY_SIZE),
        _clamp(new_qy, 1, GALAXY_SIZE),
    )
    new_sector = Position(
        _clamp(new_sx, 1, SECTOR_SIZE),
        _clamp(new_sy, 1, SECTOR_SIZE),
    )
    return new_quadrant, new_sector
