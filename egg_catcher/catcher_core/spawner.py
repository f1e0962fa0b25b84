"""
Spawner
=======

Creates eggs under one of two policies:

- Admission gate (base game): a new egg only when none are in flight,
  from one of four fixed emitters chosen uniformly.
- Timer (boss encounter): the boss drops an egg every spawn interval,
  straight down from its current position.

Payload categories come from a weighted draw over cumulative thresholds.
"""

from __future__ import annotations

import random
from typing import Optional, Tuple

from egg_catcher.catcher_core.config_loader import GameConfig, PayloadWeights, get_config
from egg_catcher.catcher_core.errors import InvariantViolation
from egg_catcher.catcher_core.payloads import Payload
from egg_catcher.catcher_core.trajectory import FallingObject, MotionPhase, SQRT2
from egg_catcher.catcher_core.boss import Boss


class Spawner:
    """Seeded egg factory shared by both encounter variants."""

    def __init__(
        self,
        config: Optional[GameConfig] = None,
        seed: Optional[int] = None
    ):
        """
        Initialize spawner.

        Args:
            config: Game configuration. Uses default if None.
            seed: Random seed for reproducibility. Random if None.
        """
        if config is None:
            config = get_config()

        self._config = config
        self._rng = random.Random(seed)
        self._next_uid = 1

        emitters = config.emitters
        self._emitters: Tuple[Tuple[float, float], ...] = emitters.positions
        self._half_field = config.field.width / 2

    @property
    def emitters(self) -> Tuple[Tuple[float, float], ...]:
        return self._emitters

    def reset(self, seed: Optional[int] = None) -> None:
        """
        Reset the spawner with optional new seed.

        Args:
            seed: New random seed. Keeps current stream if None.
        """
        if seed is not None:
            self._rng = random.Random(seed)
        self._next_uid = 1

    def draw_payload(self, weights: PayloadWeights) -> Payload:
        """Choose a payload category by weighted draw."""
        harmful, bonus_life, _ = weights.thresholds
        r = self._rng.random()
        if r < harmful:
            return Payload.HARMFUL
        if r < bonus_life:
            return Payload.BONUS_LIFE
        return Payload.BONUS_SCORE

    @staticmethod
    def admits(active_count: int) -> bool:
        """Admission gate: at most one egg in flight."""
        return active_count == 0

    def launch_speed(self, level: int) -> float:
        motion = self._config.motion
        return motion.base_speed + motion.speed_per_level * (level - 1)

    def spawn_from_emitter(
        self,
        level: int,
        active_count: int,
        emitter_index: Optional[int] = None,
        payload: Optional[Payload] = None,
        weights: Optional[PayloadWeights] = None
    ) -> FallingObject:
        """
        Spawn a sliding egg at one of the fixed emitters.

        Args:
            level: Current level; sets the launch speed.
            active_count: Eggs currently in flight (must be zero).
            emitter_index: Force a specific emitter. Random if None.
            payload: Force a payload category. Weighted draw if None.
            weights: Draw weights. Base spawn weights if None.

        Raises:
            InvariantViolation: If the admission gate is closed.
        """
        if not self.admits(active_count):
            raise InvariantViolation(
                f"Spawner invoked with {active_count} eggs in flight"
            )

        if emitter_index is None:
            emitter_index = self._rng.randrange(len(self._emitters))
        if payload is None:
            payload = self.draw_payload(weights or self._config.spawn.weights)

        emitters = self._config.emitters
        hen_x, hen_y = self._emitters[emitter_index]
        egg_x = hen_x + emitters.width / 2 - emitters.egg_size / 2
        egg_y = hen_y + emitters.height

        speed = self.launch_speed(level)
        # Left-half chutes slide right, right-half chutes slide left
        if egg_x < self._half_field:
            vx = speed / SQRT2
            transition_x = egg_x + emitters.chute_length
        else:
            vx = -speed / SQRT2
            transition_x = egg_x - emitters.chute_length

        return FallingObject(
            x=egg_x,
            y=egg_y,
            vx=vx,
            vy=speed / SQRT2,
            payload=payload,
            phase=MotionPhase.SLIDING,
            transition_x=transition_x,
            uid=self._take_uid(),
        )

    def spawn_from_boss(
        self,
        boss: Boss,
        payload: Optional[Payload] = None,
        weights: Optional[PayloadWeights] = None
    ) -> FallingObject:
        """Spawn a falling egg straight below the boss."""
        if payload is None:
            payload = self.draw_payload(weights or self._config.boss.weights)

        x, y = boss.emit_point
        return FallingObject(
            x=x,
            y=y,
            vx=0.0,
            vy=self._config.boss.egg_speed,
            payload=payload,
            phase=MotionPhase.FALLING,
            transition_x=x,
            uid=self._take_uid(),
        )

    def _take_uid(self) -> int:
        uid = self._next_uid
        self._next_uid += 1
        return uid
