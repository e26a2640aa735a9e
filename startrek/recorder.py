"""
Game Recorder - Records every engine event of a game for later replay.

Recordings are an event log for debugging and review; a game cannot be
resumed from one.

Captures:
- Mission parameters and the seed (if known)
- Every event the engine logs, in order
- The final outcome
"""

import json
from dataclasses import dataclass, field, asdict
from datetime import datetime
from pathlib import Path
from typing import Dict, Any, List, Optional

from .engine import GameEngine, GameOutcome
from .events import GameEvent


@dataclass
class GameRecording:
    """Complete recording of a game."""
    # Metadata
    recording_version: str = "1.0"
    recorded_at: str = ""
    seed: Optional[int] = None
    parameters: Dict[str, Any] = field(default_factory=dict)
    initial_klingons: int = 0
    initial_starbases: int = 0

    # Events, in the order the engine logged them
    events: List[Dict[str, Any]] = field(default_factory=list)

    # Result
    outcome: Optional[Dict[str, Any]] = None
    commands_applied: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    def to_json(self, indent: int = 2) -> str:
        return json.dumps(self.to_dict(), indent=indent)


class GameRecorder:
    """
    Records a game by listening to engine events.

    Usage:
        engine = new_game(seed=42)
        recorder = GameRecorder()
        recorder.start_recording(engine, seed=42)

        # During the game:
        engine.apply_command(SetCourse(1, 1))
        recorder.record_command()

        # After the game:
        recorder.end_recording(engine.outcome)
        recorder.save(create_game_filename(seed=42))
    """

    def __init__(self):
        self.recording = GameRecording()
        self.events: List[GameEvent] = []
        self._engine: Optional[GameEngine] = None
        self._is_recording = False

    @property
    def is_recording(self) -> bool:
        return self._is_recording

    def start_recording(self, engine: GameEngine, seed: Optional[int] = None) -> None:
        """
        Start recording a game.

        Events the engine logged before this call (the mission briefing and
        the starting quadrant) are copied in first.
        """
        self._is_recording = True
        self._engine = engine
        self.events = list(engine.events)

        self.recording = GameRecording(
            recorded_at=datetime.now().isoformat(),
            seed=seed,
            parameters=engine.params.to_dict(),
            initial_klingons=engine.galaxy.initial_klingons,
            initial_starbases=engine.galaxy.total_starbases,
        )

        engine.add_event_callback(self._record_event)

    def _record_event(self, event: GameEvent) -> None:
        """Record a single event."""
        if self._is_recording:
            self.events.append(event)

    def record_command(self) -> None:
        """Count one applied command."""
        if self._is_recording:
            self.recording.commands_applied += 1

    def end_recording(self, outcome: Optional[GameOutcome] = None) -> None:
        """End recording and finalize the game."""
        if self._engine is not None:
            self._engine.remove_event_callback(self._record_event)
            if outcome is None:
                outcome = self._engine.outcome

        self.recording.outcome = outcome.to_dict() if outcome else None
        self.recording.events = [e.to_dict() for e in self.events]

        self._is_recording = False
        self._engine = None

    def save(self, filepath: str) -> str:
        """Save recording to JSON file."""
        path = Path(filepath)
        path.parent.mkdir(parents=True, exist_ok=True)

        with open(path, 'w') as f:
            f.write(self.recording.to_json())

        return str(path)

    def get_recording(self) -> GameRecording:
        """Get the current recording."""
        return self.recording


def create_game_filename(
    seed: Optional[int] = None,
    timestamp: Optional[datetime] = None,
) -> str:
    """Generate a filename for a game recording."""
    if timestamp is None:
        timestamp = datetime.now()

    seed_part = f"seed{seed}" if seed is not None else "random"
    date_str = timestamp.strftime("%Y%m%d_%H%M%S")

    return f"game_{seed_part}_{date_str}.json"
