"""Classic Star Trek simulation engine package."""

from .commands import (
    # Command types
    SetCourse,
    ShortRangeScan,
    LongRangeScan,
    FirePhasers,
    FireTorpedo,
    SetShields,
    DamageReport,
    ComputerQuery,
    Command,
)

from .config import (
    MissionParameters,
    seed_from_env,
)

from .constants import (
    Condition,
    Device,
    SectorContent,
)

from .engine import (
    # State machine
    GameEngine,
    GameState,
    DefeatReason,
    GameOutcome,
    # Entry points
    new_game,
    apply_command,
)

from .errors import (
    GameError,
    InvalidInputError,
    DeviceDamagedError,
    WarpEnginesDamagedError,
    InsufficientResourceError,
    GameOverError,
    GenerationError,
)

from .events import (
    GameEvent,
    GameEventType,
)

from .navigation import (
    Position,
    Vector2D,
    course_vector,
    direction_and_distance,
)

from .recorder import (
    GameRecorder,
    GameRecording,
    create_game_filename,
)

from .rng import (
    RandomSource,
    SequenceRandom,
    create_rng,
)

__all__ = [
    # Commands
    "SetCourse",
    "ShortRangeScan",
    "LongRangeScan",
    "FirePhasers",
    "FireTorpedo",
    "SetShields",
    "DamageReport",
    "ComputerQuery",
    "Command",
    # Configuration
    "MissionParameters",
    "seed_from_env",
    # Constants
    "Condition",
    "Device",
    "SectorContent",
    # Engine
    "GameEngine",
    "GameState",
    "DefeatReason",
    "GameOutcome",
    "new_game",
    "apply_command",
    # Errors
    "GameError",
    "InvalidInputError",
    "DeviceDamagedError",
    "WarpEnginesDamagedError",
    "InsufficientResourceError",
    "GameOverError",
    "GenerationError",
    # Events
    "GameEvent",
    "GameEventType",
    # Navigation
    "Position",
    "Vector2D",
    "course_vector",
    "direction_and_distance",
    # Recording
    "GameRecorder",
    "GameRecording",
    "create_game_filename",
    # Random source
    "RandomSource",
    "SequenceRandom",
    "create_rng",
]
