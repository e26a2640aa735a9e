"""
Ship state: resources, position and device damage.

Also owns the rules that depend only on the ship and its surroundings:
condition derivation, docking resupply and shield transfer.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from .config import MissionParameters
from .constants import (
    ALL_DEVICES,
    INITIAL_ENERGY,
    INITIAL_SHIELDS,
    INITIAL_TORPEDOES,
    LOW_ENERGY_FRACTION,
    Condition,
    Device,
)
from .errors import DeviceDamagedError, InsufficientResourceError, InvalidInputError
from .navigation import Position
from .quadrant import Quadrant


@dataclass
class ShipState:
    """
    The player's starship.

    Attributes:
        quadrant: Current quadrant position.
        sector: Current sector position (integer at rest).
        energy: Main energy reserve; may go negative after a long warp.
        shields: Shield energy; below zero means the ship is destroyed.
        torpedoes: Photon torpedoes remaining.
        devices: Damage value per device. 0 is nominal, negative is damaged,
            positive is better than nominal.
    """
    quadrant: Position
    sector: Position
    energy: float = INITIAL_ENERGY
    shields: float = INITIAL_SHIELDS
    torpedoes: int = INITIAL_TORPEDOES
    devices: dict[Device, int] = field(
        default_factory=lambda: {device: 0 for device in ALL_DEVICES}
    )

    @classmethod
    def from_params(cls, params: MissionParameters, quadrant: Position, sector: Position) -> ShipState:
        return cls(
            quadrant=quadrant,
            sector=sector,
            energy=params.starting_energy,
            shields=INITIAL_SHIELDS,
            torpedoes=params.starting_torpedoes,
        )

    @property
    def total_energy(self) -> float:
        """Energy plus shields, the pool shield control draws from."""
        return self.energy + self.shields

    # -------------------------------------------------------------------------
    # Devices
    # -------------------------------------------------------------------------

    def is_damaged(self, device: Device) -> bool:
        return self.devices[device] < 0

    def damage_device(self, device: Device, amount: int) -> None:
        self.devices[device] -= amount

    def repair_device(self, device: Device, amount: int) -> None:
        self.devices[device] += amount

    def require(self, device: Device) -> None:
        """Raise DeviceDamagedError if device is damaged."""
        if self.is_damaged(device):
            raise DeviceDamagedError(device)

    def auto_repair(self) -> list[Device]:
        """Add one to every damaged device; returns the devices touched."""
        repaired = []
        for device in ALL_DEVICES:
            if self.is_damaged(device):
                self.repair_device(device, 1)
                repaired.append(device)
        return repaired

    def damage_report(self) -> list[dict]:
        return [
            {"device": device.value, "number": device.number, "state": self.devices[device]}
            for device in ALL_DEVICES
        ]

    # -------------------------------------------------------------------------
    # Docking and shields
    # -------------------------------------------------------------------------

    def dock(self, params: MissionParameters) -> None:
        """Full resupply at a starbase. Devices are not repaired."""
        self.energy = params.starting_energy
        self.torpedoes = params.starting_torpedoes
        self.shields = INITIAL_SHIELDS

    def transfer_to_shields(self, amount: float) -> None:
        """
        Set shields to amount, moving the difference from or to main energy.

        energy + shields is the same before and after.

        Raises:
            DeviceDamagedError: Shield control is damaged.
            InvalidInputError: amount is zero or negative.
            InsufficientResourceError: amount exceeds energy + shields.
        """
        self.require(Device.SHIELD_CONTROL)
        if amount <= 0:
            raise InvalidInputError(f"Shield setting must be positive, got {amount}")
        available = self.total_energy
        if available - amount < 0:
            raise InsufficientResourceError("energy", amount, available)
        self.shields = amount
        self.energy = available - amount


def is_docked(ship: ShipState, quadrant: Quadrant) -> bool:
    """Docked whenever a starbase sits in the ship's 3x3 neighbourhood."""
    return quadrant.is_adjacent_to_starbase(ship.sector)


def evaluate_condition(ship: ShipState, quadrant: Quadrant, params: MissionParameters) -> Condition:
    """
    Derive the ship's condition code.

    DOCKED takes precedence, then RED when Klingons are present, then YELLOW
    when energy is under 10% of the starting energy.
    """
    if is_docked(ship, quadrant):
        return Condition.DOCKED
    if quadrant.has_klingons:
        return Condition.RED
    if ship.energy < params.starting_energy * LOW_ENERGY_FRACTION:
        return Condition.YELLOW
    return Condition.GREEN
