"""
Boss Encounter
==============

State and per-tick update for the boss: a mobile emitter that patrols the
top of the field, drops eggs on a fixed timer, and loses one health point
for every good egg the player catches.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from typing import Optional, Tuple

from egg_catcher.catcher_core.config_loader import GameConfig, get_config


class HitKind(IntEnum):
    """Cosmetic hit animation currently playing on the boss."""
    NONE = 0
    DAMAGED = 1
    DEFEATED = 2


@dataclass
class Boss:
    """Mutable boss state. ``x`` is the left edge of the boss sprite."""
    x: float
    y: float
    width: float
    height: float
    speed: float
    direction: int
    health: int
    max_health: int
    spawn_timer: float
    hit_timer: float = 0.0
    hit_kind: HitKind = HitKind.NONE

    @property
    def is_defeated(self) -> bool:
        return self.health <= 0

    @property
    def emit_point(self) -> Tuple[float, float]:
        """Where dropped eggs appear: bottom centre of the sprite."""
        return (self.x + self.width / 2, self.y + self.height)


class BossEncounter:
    """
    Drives a Boss through one encounter.

    The hit timer is presentation-only; gameplay never reads it.
    """

    def __init__(self, config: Optional[GameConfig] = None):
        if config is None:
            config = get_config()

        self._config = config
        self._boss_config = config.boss
        self._min_x = 0.0
        self._max_x = config.boss_max_x
        self.boss = self._new_boss()

    def _new_boss(self) -> Boss:
        cfg = self._boss_config
        return Boss(
            x=cfg.start_x,
            y=cfg.y,
            width=cfg.width,
            height=cfg.height,
            speed=cfg.speed,
            direction=1,
            health=cfg.max_health,
            max_health=cfg.max_health,
            spawn_timer=cfg.spawn_interval,
        )

    def reset(self) -> None:
        self.boss = self._new_boss()

    def advance(self, dt: float, scale: float = 1.0) -> bool:
        """
        Move the boss and run its timers for one tick.

        Args:
            dt: Seconds covered by this tick.
            scale: Fraction of a nominal tick (for movement).

        Returns:
            True if the spawn timer elapsed and an egg should be dropped.
        """
        boss = self.boss
        self._patrol(scale)

        if boss.hit_timer > 0.0:
            boss.hit_timer = max(0.0, boss.hit_timer - dt)
            if boss.hit_timer == 0.0 and boss.hit_kind == HitKind.DAMAGED:
                boss.hit_kind = HitKind.NONE

        boss.spawn_timer -= dt
        if boss.spawn_timer <= 0.0:
            boss.spawn_timer += self._boss_config.spawn_interval
            # A very long tick never owes more than one drop
            if boss.spawn_timer <= 0.0:
                boss.spawn_timer = self._boss_config.spawn_interval
            return True
        return False

    def _patrol(self, scale: float) -> None:
        boss = self.boss
        boss.x += boss.direction * boss.speed * scale
        if boss.x <= self._min_x:
            boss.x = self._min_x
            boss.direction = 1
        elif boss.x >= self._max_x:
            boss.x = self._max_x
            boss.direction = -1

    def take_hit(self) -> int:
        """
        Apply one point of damage.

        Returns:
            Remaining health.
        """
        boss = self.boss
        if boss.health > 0:
            boss.health -= 1
        boss.hit_timer = self._boss_config.hit_duration
        boss.hit_kind = HitKind.DEFEATED if boss.health == 0 else HitKind.DAMAGED
        return boss.health
