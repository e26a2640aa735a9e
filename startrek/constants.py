"""
Fixed game constants for the classic starship-combat simulation.

Grid sizes, starting resources, the ship's device list, sector contents,
condition codes and the eight-point course table all live here so the rest
of the engine can share one definition.
"""

from __future__ import annotations

from enum import Enum


# =============================================================================
# GRID CONSTANTS
# =============================================================================

GALAXY_SIZE = 8  # quadrants per side
SECTOR_SIZE = 8  # sectors per quadrant side
MAX_KLINGONS_PER_QUADRANT = 3

# Sub-sector positions are valid while inside [0.5, 8.5) on both axes
SECTOR_MIN_BOUND = 0.5
SECTOR_MAX_BOUND = SECTOR_SIZE + 0.5


# =============================================================================
# MISSION DEFAULTS
# =============================================================================

INITIAL_ENERGY = 3000.0
INITIAL_TORPEDOES = 10
INITIAL_SHIELDS = 0.0
KLINGON_INITIAL_SHIELDS = 200.0
MISSION_DURATION = 30.0

# Condition YELLOW below this fraction of starting energy
LOW_ENERGY_FRACTION = 0.1

# Red alert on quadrant entry when shields are at or below this value
RED_ALERT_SHIELD_THRESHOLD = 200.0

# Maximum warp available while the warp engines are damaged
DAMAGED_ENGINE_MAX_WARP = 0.2

MAX_WARP = 8.0
MIN_COURSE = 1.0
MAX_COURSE = 9.0

# Random device event on navigation
RANDOM_EVENT_CHANCE = 0.2
MAX_EVENT_SEVERITY = 5

# Retry guards for rejection sampling loops
MAX_PLACEMENT_ATTEMPTS = 10_000
MAX_GALAXY_ATTEMPTS = 10_000
MAX_DEAD_IN_SPACE_VOLLEYS = 10_000


# =============================================================================
# DEVICES
# =============================================================================

class Device(Enum):
    """Ship subsystems, in damage-report order."""
    WARP_ENGINES = "WARP ENGINES"
    SHORT_RANGE_SENSORS = "S.R. SENSORS"
    LONG_RANGE_SENSORS = "L.R. SENSORS"
    PHASER_CONTROL = "PHASER CNTRL"
    PHOTON_TUBES = "PHOTON TUBES"
    DAMAGE_CONTROL = "DAMAGE CNTRL"
    SHIELD_CONTROL = "SHIELD CNTRL"
    COMPUTER = "COMPUTER"

    @property
    def number(self) -> int:
        """1-based device number as shown in the damage report."""
        return ALL_DEVICES.index(self) + 1


ALL_DEVICES: tuple[Device, ...] = tuple(Device)
NUM_DEVICES = len(ALL_DEVICES)

# Device 7 of the damage report gates phaser accuracy and galactic memory
# updates, not the computer.
ACCURACY_AND_MEMORY_DEVICE = Device.SHIELD_CONTROL


# =============================================================================
# SECTOR CONTENTS AND CONDITION
# =============================================================================

class SectorContent(Enum):
    """What occupies a single sector of the current quadrant."""
    EMPTY = "empty"
    ENTERPRISE = "enterprise"
    KLINGON = "klingon"
    STARBASE = "starbase"
    STAR = "star"


class Condition(Enum):
    """Derived ship condition code."""
    GREEN = "GREEN"
    YELLOW = "YELLOW"
    RED = "RED"
    DOCKED = "DOCKED"


# =============================================================================
# COURSE TABLE
# =============================================================================

# (dx, dy) per integer course; y grows downward on the sector grid so course 3
# (dy = -1) points up the screen. Index 0 is unused, course 9 repeats course 1
# so fractional courses just below 9 can interpolate.
COURSE_VECTORS: tuple[tuple[float, float], ...] = (
    (0.0, 0.0),
    (1.0, 0.0),
    (1.0, -1.0),
    (0.0, -1.0),
    (-1.0, -1.0),
    (-1.0, 0.0),
    (-1.0, 1.0),
    (0.0, 1.0),
    (1.0, 1.0),
    (1.0, 0.0),
)
