"""
State Snapshot
==============

Per-tick view of the simulation for the presentation layer, with a
fixed-size numpy packing for agents and recorders.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Optional, Sequence, Tuple, TYPE_CHECKING
import numpy as np

from egg_catcher.catcher_core.config_loader import GameConfig, get_config
from egg_catcher.catcher_core.payloads import Payload
from egg_catcher.catcher_core.rules import SessionPhase
from egg_catcher.catcher_core.trajectory import MotionPhase

if TYPE_CHECKING:
    from egg_catcher.catcher_core.boss import Boss
    from egg_catcher.catcher_core.catch_detector import Catcher
    from egg_catcher.catcher_core.scoring import ScoreTracker
    from egg_catcher.catcher_core.trajectory import FallingObject

# Stable integer codes for phases in observation arrays
PHASE_CODES: Dict[SessionPhase, int] = {
    phase: index for index, phase in enumerate(SessionPhase)
}


@dataclass(frozen=True)
class ObjectView:
    """Read-only copy of one egg in flight."""
    uid: int
    x: float
    y: float
    vx: float
    vy: float
    phase: MotionPhase
    payload: Payload
    spin: float


@dataclass(frozen=True)
class BossView:
    """Read-only copy of the boss state."""
    x: float
    y: float
    width: float
    height: float
    health: int
    max_health: int
    hit_timer: float
    hit_kind: int


@dataclass
class GameSnapshot:
    """
    Complete game state snapshot for one tick.

    Object arrays in ``to_obs_dict`` are padded to ``max_objects`` with a
    mask marking the live slots.
    """
    phase: SessionPhase
    catcher_x: float
    catcher_y: float
    score: int
    lives: int
    max_lives: int
    level: int
    record: int
    player_id: Optional[int]
    tick: int
    objects: Tuple[ObjectView, ...]
    boss: Optional[BossView]
    max_objects: int
    field_width: float
    field_height: float

    @property
    def objects_count(self) -> int:
        return len(self.objects)

    def to_obs_dict(self) -> Dict[str, np.ndarray]:
        """Convert to a Gymnasium-style observation dictionary."""
        n = self.max_objects
        obj_x = np.zeros(n, dtype=np.float32)
        obj_y = np.zeros(n, dtype=np.float32)
        obj_vx = np.zeros(n, dtype=np.float32)
        obj_vy = np.zeros(n, dtype=np.float32)
        obj_phase = np.full(n, -1, dtype=np.int8)
        obj_payload = np.full(n, -1, dtype=np.int8)
        obj_mask = np.zeros(n, dtype=bool)

        for i, obj in enumerate(self.objects[:n]):
            obj_x[i] = obj.x
            obj_y[i] = obj.y
            obj_vx[i] = obj.vx
            obj_vy[i] = obj.vy
            obj_phase[i] = int(obj.phase)
            obj_payload[i] = int(obj.payload)
            obj_mask[i] = True

        boss = self.boss
        return {
            "phase": np.array(PHASE_CODES[self.phase], dtype=np.int32),
            "catcher_x": np.array(self.catcher_x, dtype=np.float32),
            "score": np.array(self.score, dtype=np.int64),
            "lives": np.array(self.lives, dtype=np.int32),
            "level": np.array(self.level, dtype=np.int32),
            "objects_count": np.array(min(self.objects_count, n), dtype=np.int32),

            "boss_active": np.array(boss is not None, dtype=np.int8),
            "boss_x": np.array(boss.x if boss else 0.0, dtype=np.float32),
            "boss_health": np.array(boss.health if boss else 0, dtype=np.int32),

            "obj_x": obj_x,
            "obj_y": obj_y,
            "obj_vx": obj_vx,
            "obj_vy": obj_vy,
            "obj_phase": obj_phase,
            "obj_payload": obj_payload,
            "obj_mask": obj_mask,
        }


class SnapshotBuilder:
    """Builds snapshots from live simulation state."""

    def __init__(self, config: Optional[GameConfig] = None):
        if config is None:
            config = get_config()

        self._config = config
        self._max_objects = config.observation.max_objects

    def build(
        self,
        phase: SessionPhase,
        catcher: "Catcher",
        tracker: "ScoreTracker",
        objects: Sequence["FallingObject"],
        boss: Optional["Boss"],
        player_id: Optional[int],
        tick: int
    ) -> GameSnapshot:
        views = tuple(
            ObjectView(
                uid=obj.uid,
                x=obj.x,
                y=obj.y,
                vx=obj.vx,
                vy=obj.vy,
                phase=obj.phase,
                payload=obj.payload,
                spin=obj.spin,
            )
            for obj in objects
            if obj.alive
        )

        boss_view = None
        if boss is not None:
            boss_view = BossView(
                x=boss.x,
                y=boss.y,
                width=boss.width,
                height=boss.height,
                health=boss.health,
                max_health=boss.max_health,
                hit_timer=boss.hit_timer,
                hit_kind=int(boss.hit_kind),
            )

        return GameSnapshot(
            phase=phase,
            catcher_x=catcher.x,
            catcher_y=catcher.y,
            score=tracker.score,
            lives=tracker.lives,
            max_lives=tracker.max_lives,
            level=tracker.level,
            record=tracker.record,
            player_id=player_id,
            tick=tick,
            objects=views,
            boss=boss_view,
            max_objects=self._max_objects,
            field_width=float(self._config.field.width),
            field_height=float(self._config.field.height),
        )
