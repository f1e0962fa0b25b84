"""
Configuration Loader
====================

Loads and validates game_config.yaml, providing typed access to all parameters.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import List, Tuple, Optional

import yaml


@dataclass(frozen=True)
class FieldConfig:
    """Play-field geometry."""
    width: int
    height: int     # Floor boundary; objects below this are missed


@dataclass(frozen=True)
class CatcherConfig:
    """Catcher geometry and movement."""
    start_x: float       # Left edge of the catcher sprite
    y: float
    width: float         # Sprite width, used for clamping
    speed: float         # Pixels per tick
    basket_width: float  # Effective catch width, centred on the sprite
    band_y: float        # Top of the vertical catch band
    band_height: float


@dataclass(frozen=True)
class EmitterConfig:
    """Fixed side emitters (hens) and their chutes."""
    width: float
    height: float
    egg_size: float
    chute_length: float  # Lateral slide distance before free fall
    positions: Tuple[Tuple[float, float], ...]


@dataclass(frozen=True)
class MotionConfig:
    """Trajectory integration parameters."""
    tick_rate: int
    base_speed: float
    speed_per_level: float
    slide_accel_base: float
    slide_accel_per_level: float
    gravity: float
    left_fall_damping: float  # Multiplier on leftward motion while falling

    @property
    def tick_dt(self) -> float:
        """Nominal seconds per tick."""
        return 1.0 / self.tick_rate


@dataclass(frozen=True)
class PayloadWeights:
    """Draw probabilities for each payload category."""
    harmful: float
    bonus_life: float
    bonus_score: float

    @property
    def thresholds(self) -> Tuple[float, float, float]:
        """Cumulative draw thresholds (harmful, bonus_life, bonus_score)."""
        return (
            self.harmful,
            self.harmful + self.bonus_life,
            self.harmful + self.bonus_life + self.bonus_score,
        )


@dataclass(frozen=True)
class SpawnConfig:
    """Base-variant spawn policy."""
    weights: PayloadWeights


@dataclass(frozen=True)
class SessionConfig:
    """Lives, levels and scoring."""
    start_lives: int
    max_lives: int
    level_cap: int
    level_step: int          # Level up when score > level_step * level
    points_per_catch: int


@dataclass(frozen=True)
class BossConfig:
    """Boss encounter parameters."""
    enabled: bool
    score_threshold: int
    max_health: int
    start_x: float
    y: float
    width: float
    height: float
    speed: float
    spawn_interval: float    # Seconds between drops
    egg_speed: float         # Initial vertical speed of boss drops
    hit_duration: float      # Cosmetic hit animation length (seconds)
    miss_penalty: bool
    weights: PayloadWeights


@dataclass(frozen=True)
class ObservationConfig:
    """Snapshot array sizes."""
    max_objects: int


@dataclass(frozen=True)
class CapsConfig:
    """Episode limits for headless runs."""
    max_ticks: int


@dataclass(frozen=True)
class AuthConfig:
    """Login screen parameters."""
    max_input_length: int


@dataclass(frozen=True)
class LeaderboardConfig:
    size: int


@dataclass(frozen=True)
class GameConfig:
    """
    Complete game configuration loaded from YAML.

    All values are immutable to prevent accidental modification during runtime.
    """
    field: FieldConfig
    catcher: CatcherConfig
    emitters: EmitterConfig
    motion: MotionConfig
    spawn: SpawnConfig
    session: SessionConfig
    boss: BossConfig
    observation: ObservationConfig
    caps: CapsConfig
    auth: AuthConfig
    leaderboard: LeaderboardConfig

    @property
    def catcher_max_x(self) -> float:
        """Right-most legal catcher position (left edge)."""
        return self.field.width - self.catcher.width

    @property
    def boss_max_x(self) -> float:
        """Right-most legal boss position (left edge)."""
        return self.field.width - self.boss.width


def _parse_position(position_data: List) -> Tuple[float, float]:
    """Parse an [x, y] pair from YAML."""
    if len(position_data) != 2:
        raise ValueError(f"Emitter position must have 2 values [x, y], got {position_data}")
    return (float(position_data[0]), float(position_data[1]))


def _parse_weights(weights_data: dict) -> PayloadWeights:
    """Parse payload draw weights from YAML."""
    return PayloadWeights(
        harmful=float(weights_data["harmful"]),
        bonus_life=float(weights_data["bonus_life"]),
        bonus_score=float(weights_data["bonus_score"]),
    )


def _validate_weights(name: str, weights: PayloadWeights) -> None:
    values = (weights.harmful, weights.bonus_life, weights.bonus_score)
    if any(v < 0 for v in values):
        raise ValueError(f"{name} weights must be non-negative, got {values}")
    if abs(sum(values) - 1.0) > 1e-6:
        raise ValueError(f"{name} weights must sum to 1.0, got {sum(values):.6f}")


def _validate_config(config: GameConfig) -> None:
    """Validate configuration consistency."""
    if config.field.width <= 0 or config.field.height <= 0:
        raise ValueError(
            f"Field dimensions must be positive, got {config.field.width}x{config.field.height}"
        )

    if len(config.emitters.positions) != 4:
        raise ValueError(
            f"Exactly 4 emitters are required, got {len(config.emitters.positions)}"
        )

    _validate_weights("spawn", config.spawn.weights)
    _validate_weights("boss", config.boss.weights)

    session = config.session
    if session.max_lives < 1:
        raise ValueError(f"max_lives must be >= 1, got {session.max_lives}")
    if not 1 <= session.start_lives <= session.max_lives:
        raise ValueError(
            f"start_lives ({session.start_lives}) must be in [1, {session.max_lives}]"
        )
    if session.level_cap < 1:
        raise ValueError(f"level_cap must be >= 1, got {session.level_cap}")

    if config.motion.tick_rate <= 0:
        raise ValueError(f"tick_rate must be positive, got {config.motion.tick_rate}")

    if config.catcher.band_height <= 0 or config.catcher.basket_width <= 0:
        raise ValueError("Catch band height and basket width must be positive")

    if config.boss.max_health < 1:
        raise ValueError(f"boss.max_health must be >= 1, got {config.boss.max_health}")
    if config.boss.spawn_interval <= 0:
        raise ValueError(f"boss.spawn_interval must be positive, got {config.boss.spawn_interval}")


def load_config(config_path: Optional[str] = None) -> GameConfig:
    """
    Load and validate game configuration from YAML.

    Args:
        config_path: Path to game_config.yaml. If None, uses default location.

    Returns:
        Validated GameConfig instance.

    Raises:
        FileNotFoundError: If config file doesn't exist.
        ValueError: If config validation fails.
    """
    if config_path is None:
        config_path = os.path.join(
            os.path.dirname(os.path.dirname(__file__)),
            "game_config.yaml"
        )

    config_path = Path(config_path)
    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(config_path, "r") as f:
        raw = yaml.safe_load(f)

    field_data = raw["field"]
    field = FieldConfig(
        width=int(field_data["width"]),
        height=int(field_data["height"])
    )

    catcher_data = raw["catcher"]
    catcher = CatcherConfig(
        start_x=float(catcher_data["start_x"]),
        y=float(catcher_data["y"]),
        width=float(catcher_data["width"]),
        speed=float(catcher_data["speed"]),
        basket_width=float(catcher_data["basket_width"]),
        band_y=float(catcher_data["band_y"]),
        band_height=float(catcher_data["band_height"])
    )

    emitter_data = raw["emitters"]
    emitters = EmitterConfig(
        width=float(emitter_data["width"]),
        height=float(emitter_data["height"]),
        egg_size=float(emitter_data["egg_size"]),
        chute_length=float(emitter_data.get("chute_length", 67.5)),
        positions=tuple(_parse_position(p) for p in emitter_data["positions"])
    )

    motion_data = raw["motion"]
    motion = MotionConfig(
        tick_rate=int(motion_data.get("tick_rate", 60)),
        base_speed=float(motion_data["base_speed"]),
        speed_per_level=float(motion_data["speed_per_level"]),
        slide_accel_base=float(motion_data["slide_accel_base"]),
        slide_accel_per_level=float(motion_data["slide_accel_per_level"]),
        gravity=float(motion_data["gravity"]),
        left_fall_damping=float(motion_data.get("left_fall_damping", 1.0))
    )

    spawn = SpawnConfig(weights=_parse_weights(raw["spawn"]["weights"]))

    session_data = raw["session"]
    session = SessionConfig(
        start_lives=int(session_data["start_lives"]),
        max_lives=int(session_data["max_lives"]),
        level_cap=int(session_data["level_cap"]),
        level_step=int(session_data.get("level_step", 10)),
        points_per_catch=int(session_data.get("points_per_catch", 1))
    )

    # Boss section is optional; a missing section disables the encounter
    boss_data = raw.get("boss", {"enabled": False})
    boss = BossConfig(
        enabled=bool(boss_data.get("enabled", False)),
        score_threshold=int(boss_data.get("score_threshold", 30)),
        max_health=int(boss_data.get("max_health", 10)),
        start_x=float(boss_data.get("start_x", 370)),
        y=float(boss_data.get("y", 40)),
        width=float(boss_data.get("width", 60)),
        height=float(boss_data.get("height", 60)),
        speed=float(boss_data.get("speed", 2.0)),
        spawn_interval=float(boss_data.get("spawn_interval", 1.0)),
        egg_speed=float(boss_data.get("egg_speed", 2.0)),
        hit_duration=float(boss_data.get("hit_duration", 0.3)),
        miss_penalty=bool(boss_data.get("miss_penalty", True)),
        weights=_parse_weights(boss_data.get(
            "weights", {"harmful": 0.3, "bonus_life": 0.05, "bonus_score": 0.65}
        ))
    )

    observation = ObservationConfig(
        max_objects=int(raw.get("observation", {}).get("max_objects", 16))
    )
    caps = CapsConfig(
        max_ticks=int(raw.get("caps", {}).get("max_ticks", 36000))
    )
    auth = AuthConfig(
        max_input_length=int(raw.get("auth", {}).get("max_input_length", 20))
    )
    leaderboard = LeaderboardConfig(
        size=int(raw.get("leaderboard", {}).get("size", 5))
    )

    config = GameConfig(
        field=field,
        catcher=catcher,
        emitters=emitters,
        motion=motion,
        spawn=spawn,
        session=session,
        boss=boss,
        observation=observation,
        caps=caps,
        auth=auth,
        leaderboard=leaderboard
    )

    _validate_config(config)
    return config


# Module-level singleton for convenience
_cached_config: Optional[GameConfig] = None


def get_config() -> GameConfig:
    """Get the cached game configuration, loading if necessary."""
    global _cached_config
    if _cached_config is None:
        _cached_config = load_config()
    return _cached_config


def reload_config(config_path: Optional[str] = None) -> GameConfig:
    """Reload the configuration (useful for testing)."""
    global _cached_config
    _cached_config = load_config(config_path)
    return _cached_config
