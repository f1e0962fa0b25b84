"""
Catch Detector
==============

Axis-aligned capture test between eggs and the catcher's basket.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple

from egg_catcher.catcher_core.config_loader import GameConfig, get_config
from egg_catcher.catcher_core.trajectory import FallingObject


@dataclass
class Catcher:
    """
    The player-controlled wolf.

    ``x`` is the left edge of the sprite. The basket is centred on the
    sprite and may be wider than it.
    """
    x: float
    y: float
    width: float
    basket_width: float
    min_x: float
    max_x: float

    @classmethod
    def from_config(cls, config: GameConfig) -> "Catcher":
        return cls(
            x=config.catcher.start_x,
            y=config.catcher.y,
            width=config.catcher.width,
            basket_width=config.catcher.basket_width,
            min_x=0.0,
            max_x=config.catcher_max_x,
        )

    @property
    def center_x(self) -> float:
        return self.x + self.width / 2

    @property
    def basket_span(self) -> Tuple[float, float]:
        """(left, right) edges of the effective catch width."""
        half = self.basket_width / 2
        return (self.center_x - half, self.center_x + half)

    def move(self, direction: int, distance: float) -> None:
        """Shift by ``direction * distance``, clamped to the field."""
        self.x = max(self.min_x, min(self.max_x, self.x + direction * distance))


class CatchDetector:
    """
    Tests eggs against the catch band.

    The band is a fixed-height zone near the basket's rim, not the full
    sprite height. Both bounds are inclusive.
    """

    def __init__(self, config: Optional[GameConfig] = None):
        if config is None:
            config = get_config()

        self._band_top = config.catcher.band_y
        self._band_bottom = config.catcher.band_y + config.catcher.band_height

    @property
    def band(self) -> Tuple[float, float]:
        return (self._band_top, self._band_bottom)

    def is_caught(self, obj: FallingObject, catcher: Catcher) -> bool:
        if not obj.alive:
            return False
        if not self._band_top <= obj.y <= self._band_bottom:
            return False
        left, right = catcher.basket_span
        return left <= obj.x <= right
