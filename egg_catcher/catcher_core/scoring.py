"""
Scoring System
==============

Owns score, lives, level and the player's record, and applies the
catch/miss polarity rules.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from egg_catcher.catcher_core.config_loader import GameConfig, get_config
from egg_catcher.catcher_core.payloads import Payload


@dataclass
class ScoreEvent:
    """Record of what a single catch or miss changed."""
    payload: Payload
    caught: bool
    points: int = 0
    life_delta: int = 0

    def __repr__(self) -> str:
        verb = "caught" if self.caught else "missed"
        return f"ScoreEvent({verb} {self.payload.label}, points={self.points}, lives={self.life_delta:+d})"


class ScoreTracker:
    """
    Tracks score, lives and level for one play-through.

    Polarity:
    - Catching a good egg scores; a bonus-life egg also restores a life up
      to the cap.
    - Catching a harmful egg costs one life.
    - A good egg reaching the floor costs one life; a harmful one is safe.
    """

    def __init__(self, config: Optional[GameConfig] = None, record: int = 0):
        """
        Initialize score tracker.

        Args:
            config: Game configuration. Uses default if None.
            record: Persisted high score carried into this play-through.
        """
        if config is None:
            config = get_config()

        self._config = config
        self._session = config.session
        self._score: int = 0
        self._lives: int = self._session.start_lives
        self._level: int = 1
        self._record: int = max(0, record)
        self._catches: int = 0

    @property
    def score(self) -> int:
        """Current total score."""
        return self._score

    @score.setter
    def score(self, value: int) -> None:
        self._score = max(0, value)
        self._record = max(self._record, self._score)

    @property
    def lives(self) -> int:
        """Remaining lives in [0, max_lives]."""
        return self._lives

    @lives.setter
    def lives(self, value: int) -> None:
        self._lives = max(0, min(self._session.max_lives, value))

    @property
    def max_lives(self) -> int:
        return self._session.max_lives

    @property
    def level(self) -> int:
        return self._level

    @level.setter
    def level(self, value: int) -> None:
        self._level = max(1, min(self._session.level_cap, value))

    @property
    def record(self) -> int:
        """Best score known for this player, including the current run."""
        return self._record

    @property
    def catches(self) -> int:
        """Total eggs caught."""
        return self._catches

    @property
    def out_of_lives(self) -> bool:
        return self._lives == 0

    def apply_catch(self, payload: Payload) -> ScoreEvent:
        """Apply the outcome of catching an egg."""
        self._catches += 1
        event = ScoreEvent(payload=payload, caught=True)

        if payload.is_harmful:
            event.life_delta = self._lose_life()
            return event

        event.points = self._session.points_per_catch
        self.score = self._score + event.points
        if payload.restores_life and self._lives < self._session.max_lives:
            self._lives += 1
            event.life_delta = 1
        return event

    def apply_miss(self, payload: Payload, penalize: bool = True) -> ScoreEvent:
        """Apply the outcome of an egg reaching the floor."""
        event = ScoreEvent(payload=payload, caught=False)
        if penalize and not payload.is_harmful:
            event.life_delta = self._lose_life()
        return event

    def _lose_life(self) -> int:
        if self._lives == 0:
            return 0
        self._lives -= 1
        return -1

    def check_level_up(self) -> bool:
        """
        Raise the level by one if the score has passed the current
        threshold (strictly greater) and the cap allows it.
        """
        session = self._session
        if self._score > session.level_step * self._level and self._level < session.level_cap:
            self._level += 1
            return True
        return False

    def reset(self) -> None:
        """Start a fresh play-through, keeping the record."""
        self._score = 0
        self._lives = self._session.start_lives
        self._level = 1
        self._catches = 0
