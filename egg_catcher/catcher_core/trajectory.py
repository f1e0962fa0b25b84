"""
Trajectory Model
================

Two-phase egg motion: a diagonal slide down the emitter's chute that
accelerates with level, then free fall under constant gravity.

All speeds are in pixels per tick at the configured tick rate. Hosts that
step with a variable dt pass ``scale = dt * tick_rate``; at the nominal
rate the scale is exactly 1.0.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import IntEnum
from typing import Optional

from egg_catcher.catcher_core.config_loader import GameConfig, get_config
from egg_catcher.catcher_core.payloads import Payload


SQRT2 = math.sqrt(2.0)
TWO_PI = 2.0 * math.pi


class MotionPhase(IntEnum):
    SLIDING = 0
    FALLING = 1


@dataclass
class FallingObject:
    """
    A single egg in flight.

    ``transition_x`` is only meaningful while sliding; ``direction`` is the
    sign of horizontal travel fixed at spawn (+1 right, -1 left, 0 none).
    """
    x: float
    y: float
    vx: float
    vy: float
    payload: Payload
    phase: MotionPhase = MotionPhase.SLIDING
    transition_x: float = 0.0
    alive: bool = True
    uid: int = 0

    @property
    def is_harmful(self) -> bool:
        return self.payload.is_harmful

    @property
    def direction(self) -> int:
        if self.vx > 0:
            return 1
        if self.vx < 0:
            return -1
        return 0

    @property
    def spin(self) -> float:
        """Cosmetic rotation angle for the renderer (radians)."""
        angle = self.vx if self.phase == MotionPhase.SLIDING else self.vy
        return math.fmod(angle, TWO_PI)


class TrajectoryModel:
    """Advances falling objects by one tick."""

    def __init__(self, config: Optional[GameConfig] = None):
        if config is None:
            config = get_config()

        self._config = config
        self._motion = config.motion
        self._floor_y = float(config.field.height)

    @property
    def floor_y(self) -> float:
        return self._floor_y

    def slide_acceleration(self, level: int) -> float:
        """Acceleration magnitude along the chute at a given level."""
        return self._motion.slide_accel_base + self._motion.slide_accel_per_level * level

    def advance(self, obj: FallingObject, level: int, scale: float = 1.0) -> None:
        """
        Integrate one tick of motion in place.

        Args:
            obj: Object to advance. Dead objects are left untouched.
            level: Current difficulty level (drives slide acceleration).
            scale: Fraction of a nominal tick covered by this step.
        """
        if not obj.alive:
            return

        if obj.phase == MotionPhase.SLIDING:
            self._advance_sliding(obj, level, scale)
        else:
            self._advance_falling(obj, scale)

    def _advance_sliding(self, obj: FallingObject, level: int, scale: float) -> None:
        # Equal split across both axes keeps the slide on a 45 degree line
        component = self.slide_acceleration(level) / SQRT2 * scale
        direction = obj.direction

        obj.vx += direction * component
        obj.vy += component
        obj.x += obj.vx * scale
        obj.y += obj.vy * scale

        if direction > 0 and obj.x >= obj.transition_x:
            obj.phase = MotionPhase.FALLING
        elif direction < 0 and obj.x <= obj.transition_x:
            obj.phase = MotionPhase.FALLING

    def _advance_falling(self, obj: FallingObject, scale: float) -> None:
        obj.vy += self._motion.gravity * scale

        # Leftward drift is damped while falling; rightward drift is not.
        dx = obj.vx * scale
        if dx < 0:
            dx *= self._motion.left_fall_damping

        obj.x += dx
        obj.y += obj.vy * scale

    def crossed_floor(self, obj: FallingObject) -> bool:
        """True once the object has dropped below the play field."""
        return obj.y > self._floor_y
