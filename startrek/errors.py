"""
Exception types raised by the simulation engine.

Rejected commands raise before any state is touched, so the caller can simply
re-prompt. Only ``GameOverError`` is final: once a game has reached a terminal
outcome every further command is refused until a new game is started.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from .constants import Device
    from .engine import GameOutcome


class GameError(Exception):
    """Base class for all engine errors."""


class InvalidInputError(GameError):
    """Course, warp factor, amount or option outside its valid range."""


class DeviceDamagedError(GameError):
    """The device a command depends on is damaged."""

    def __init__(self, device: Device, message: Optional[str] = None):
        self.device = device
        super().__init__(message or f"{device.value} is damaged and cannot be used")


class WarpEnginesDamagedError(DeviceDamagedError):
    """Requested warp exceeds the cap imposed by damaged engines."""

    def __init__(self, device: Device, max_warp: float):
        self.max_warp = max_warp
        super().__init__(
            device,
            f"Warp engines are damaged, maximum speed = warp {max_warp}",
        )


class InsufficientResourceError(GameError):
    """Not enough energy, shields or torpedoes for the command."""

    def __init__(self, resource: str, required: float, available: float):
        self.resource = resource
        self.required = required
        self.available = available
        super().__init__(
            f"Insufficient {resource}: required {required:g}, available {available:g}"
        )


class GameOverError(GameError):
    """The game already ended; start a new game to continue."""

    def __init__(self, outcome: GameOutcome):
        self.outcome = outcome
        super().__init__(f"Game over: {outcome.summary}")


class GenerationError(GameError):
    """A rejection-sampling loop hit its retry guard."""
