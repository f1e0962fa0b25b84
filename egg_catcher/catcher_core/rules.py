"""
Game Rules
==========

Session phases, encounter profiles and the phase-transition rules.

Both the base game and the boss encounter run the same
spawn -> move -> catch pipeline; an EncounterProfile tells the pipeline
which spawn policy and miss polarity apply in the current phase.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from egg_catcher.catcher_core.config_loader import GameConfig, PayloadWeights, get_config


class SessionPhase(Enum):
    AUTHENTICATING = "authenticating"
    PLAYING = "playing"
    PAUSED = "paused"
    BOSS_ENCOUNTER = "boss_encounter"
    GAME_OVER = "game_over"
    WON = "won"

    @property
    def is_terminal(self) -> bool:
        return self in (SessionPhase.GAME_OVER, SessionPhase.WON)

    @property
    def is_active(self) -> bool:
        """True while the simulation advances."""
        return self in (SessionPhase.PLAYING, SessionPhase.BOSS_ENCOUNTER)


class SpawnPolicy(Enum):
    ADMISSION_GATE = "admission_gate"
    TIMER = "timer"


@dataclass(frozen=True)
class EncounterProfile:
    """Per-phase parameters for the shared pipeline."""
    name: str
    spawn_policy: SpawnPolicy
    weights: PayloadWeights
    miss_penalty: bool     # Good eggs reaching the floor cost a life
    damages_boss: bool     # Good catches hit the boss

    @classmethod
    def base(cls, config: GameConfig) -> "EncounterProfile":
        return cls(
            name="base",
            spawn_policy=SpawnPolicy.ADMISSION_GATE,
            weights=config.spawn.weights,
            miss_penalty=True,
            damages_boss=False,
        )

    @classmethod
    def boss(cls, config: GameConfig) -> "EncounterProfile":
        return cls(
            name="boss",
            spawn_policy=SpawnPolicy.TIMER,
            weights=config.boss.weights,
            miss_penalty=config.boss.miss_penalty,
            damages_boss=True,
        )


class PhaseRules:
    """
    Decides phase transitions after catch resolution.

    - Lives at zero ends the session (takes precedence over a boss kill
      on the same tick).
    - Boss health at zero wins the encounter.
    - The first time the score reaches the boss threshold, the boss
      encounter starts. It never retriggers.
    """

    def __init__(self, config: Optional[GameConfig] = None):
        if config is None:
            config = get_config()

        self._config = config
        self._boss_enabled = config.boss.enabled
        self._threshold = config.boss.score_threshold
        self._boss_triggered = False

    @property
    def boss_triggered(self) -> bool:
        return self._boss_triggered

    def reset(self) -> None:
        self._boss_triggered = False

    def next_phase(
        self,
        phase: SessionPhase,
        score: int,
        lives: int,
        boss_health: Optional[int] = None
    ) -> SessionPhase:
        """
        Evaluate the post-tick transition.

        Args:
            phase: Current phase (PLAYING or BOSS_ENCOUNTER).
            score: Score after this tick.
            lives: Lives after this tick.
            boss_health: Boss health, when an encounter is running.

        Returns:
            The phase to be in for the next tick.
        """
        if lives == 0:
            return SessionPhase.GAME_OVER

        if phase == SessionPhase.BOSS_ENCOUNTER:
            if boss_health is not None and boss_health <= 0:
                return SessionPhase.WON
            return phase

        if (
            phase == SessionPhase.PLAYING
            and self._boss_enabled
            and not self._boss_triggered
            and score >= self._threshold
        ):
            self._boss_triggered = True
            return SessionPhase.BOSS_ENCOUNTER

        return phase


class GameRules:
    """
    Combined interface for all game rules.
    """

    def __init__(self, config: Optional[GameConfig] = None):
        """
        Initialize game rules.

        Args:
            config: Game configuration. Uses default if None.
        """
        if config is None:
            config = get_config()

        self._config = config
        self.phases = PhaseRules(config)
        self.base_profile = EncounterProfile.base(config)
        self.boss_profile = EncounterProfile.boss(config)

    def profile_for(self, phase: SessionPhase) -> EncounterProfile:
        if phase == SessionPhase.BOSS_ENCOUNTER:
            return self.boss_profile
        return self.base_profile

    def reset(self) -> None:
        """Reset all rule state."""
        self.phases.reset()
