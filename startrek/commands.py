"""
Player commands accepted by the engine.

Each command is a small immutable dataclass. The engine dispatches on the
command type; validation of the values happens when the command is applied,
so an out-of-range command can be constructed but is rejected with
InvalidInputError before any state changes.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Union

from .navigation import Position


@dataclass(frozen=True)
class SetCourse:
    """Warp along a course. course in [1, 9), warp in [0, 8]."""
    course: float
    warp: float


@dataclass(frozen=True)
class ShortRangeScan:
    """Sector grid and ship status for the current quadrant."""


@dataclass(frozen=True)
class LongRangeScan:
    """Encoded summaries of the 3x3 block of quadrants around the ship."""


@dataclass(frozen=True)
class FirePhasers:
    """Fire phasers with the given energy."""
    units: float


@dataclass(frozen=True)
class FireTorpedo:
    """Launch a photon torpedo along a course."""
    course: float


@dataclass(frozen=True)
class SetShields:
    """Set shields to amount, drawing from main energy."""
    amount: float


@dataclass(frozen=True)
class DamageReport:
    """Per-device damage values."""


# Library computer options
COMPUTER_GALACTIC_RECORD = 0
COMPUTER_STATUS_REPORT = 1
COMPUTER_TORPEDO_DATA = 2
COMPUTER_STARBASE_NAV_DATA = 3
COMPUTER_DIRECTION_CALCULATOR = 4


@dataclass(frozen=True)
class ComputerQuery:
    """
    Library computer request.

    Attributes:
        option: 0 galactic record, 1 status report, 2 photon torpedo data,
            3 starbase navigation data, 4 direction/distance calculator.
        source: Starting sector for option 4.
        target: Destination sector for option 4.
    """
    option: int
    source: Optional[Position] = None
    target: Optional[Position] = None


Command = Union[
    SetCourse,
    ShortRangeScan,
    LongRangeScan,
    FirePhasers,
    FireTorpedo,
    SetShields,
    DamageReport,
    ComputerQuery,
]
