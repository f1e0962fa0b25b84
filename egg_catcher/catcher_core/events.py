"""
Events
======

Input intents consumed by the core each tick, and the cues it emits for
the presentation layer (sound, flashes, persistence hooks).

The core never plays sounds or draws anything; hosts drain the cue queue
once per tick and map cues to effects.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Union

from egg_catcher.catcher_core.payloads import Payload
from egg_catcher.catcher_core.rules import SessionPhase


class Intent(Enum):
    """Discrete player intents."""
    MOVE_LEFT = "move_left"
    MOVE_RIGHT = "move_right"
    TOGGLE_PAUSE = "toggle_pause"
    RESTART = "restart"
    QUIT = "quit"
    TOGGLE_LEADERBOARD = "toggle_leaderboard"

    # Login screen
    SELECT_LOGIN = "select_login"
    SELECT_REGISTER = "select_register"
    SUBMIT = "submit"
    BACKSPACE = "backspace"


@dataclass(frozen=True)
class TextEntry:
    """Characters typed on the login screen this tick."""
    text: str


InputIntent = Union[Intent, TextEntry]


@dataclass(frozen=True)
class SessionSummary:
    """Final result of one play-through, handed to persistence."""
    player_id: Optional[int]
    score: int
    lives: int
    level: int
    won: bool


# --- Cues ---------------------------------------------------------------

@dataclass(frozen=True)
class ObjectCaught:
    payload: Payload


@dataclass(frozen=True)
class ObjectMissed:
    payload: Payload


@dataclass(frozen=True)
class LifeLost:
    lives: int


@dataclass(frozen=True)
class LifeGained:
    lives: int


@dataclass(frozen=True)
class ScoreGained:
    points: int
    score: int


@dataclass(frozen=True)
class LevelUp:
    level: int


@dataclass(frozen=True)
class BossHit:
    health: int


@dataclass(frozen=True)
class PhaseChanged:
    previous: SessionPhase
    current: SessionPhase


@dataclass(frozen=True)
class SessionEnded:
    summary: SessionSummary


Cue = Union[
    ObjectCaught, ObjectMissed, LifeLost, LifeGained, ScoreGained,
    LevelUp, BossHit, PhaseChanged, SessionEnded,
]


class CueQueue:
    """FIFO of cues produced during a tick."""

    def __init__(self) -> None:
        self._cues: List[Cue] = []

    def push(self, cue: Cue) -> None:
        self._cues.append(cue)

    def drain(self) -> List[Cue]:
        """Return all pending cues and clear the queue."""
        cues, self._cues = self._cues, []
        return cues

    def peek(self) -> List[Cue]:
        return list(self._cues)

    def __len__(self) -> int:
        return len(self._cues)
