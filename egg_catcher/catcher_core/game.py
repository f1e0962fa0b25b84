"""
Core Game
=========

Per-tick orchestrator combining spawning, trajectories, catch resolution,
scoring and phase rules.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional, List, Dict, Any, Iterable

from egg_catcher.catcher_core.config_loader import GameConfig, get_config
from egg_catcher.catcher_core.boss import Boss, BossEncounter
from egg_catcher.catcher_core.catch_detector import Catcher, CatchDetector
from egg_catcher.catcher_core.events import (
    BossHit,
    Cue,
    CueQueue,
    Intent,
    LevelUp,
    LifeGained,
    LifeLost,
    ObjectCaught,
    ObjectMissed,
    PhaseChanged,
    ScoreGained,
)
from egg_catcher.catcher_core.rules import EncounterProfile, GameRules, SessionPhase, SpawnPolicy
from egg_catcher.catcher_core.scoring import ScoreEvent, ScoreTracker
from egg_catcher.catcher_core.spawner import Spawner
from egg_catcher.catcher_core.state_snapshot import GameSnapshot, SnapshotBuilder
from egg_catcher.catcher_core.trajectory import FallingObject, TrajectoryModel

logger = logging.getLogger(__name__)


@dataclass
class TickResult:
    """Result of a single simulation tick."""
    snapshot: GameSnapshot
    phase: SessionPhase
    cues: List[Cue]
    delta_score: int
    caught: int
    missed: int

    @property
    def terminated(self) -> bool:
        return self.phase.is_terminal


class CoreGame:
    """
    Main game simulation class.

    Orchestrates, in this fixed order every tick:
    - Movement intents applied to the catcher
    - Spawning (admission gate, or boss timer)
    - Trajectory integration for every egg
    - Catch / floor resolution with scoring polarity
    - Level-up and phase transitions

    The active egg list, catcher and boss are owned here and never shared
    across ticks.
    """

    def __init__(
        self,
        config: Optional[GameConfig] = None,
        seed: Optional[int] = None,
        player_id: Optional[int] = None,
        record: int = 0
    ):
        """
        Initialize game.

        Args:
            config: Game configuration. Uses default if None.
            seed: Random seed for reproducibility.
            player_id: Authenticated player, if any.
            record: Persisted high score for the player.
        """
        if config is None:
            config = get_config()

        self._config = config
        self._seed = seed
        self._player_id = player_id

        # Initialize subsystems
        self._spawner = Spawner(config, seed)
        self._trajectory = TrajectoryModel(config)
        self._detector = CatchDetector(config)
        self._tracker = ScoreTracker(config, record=record)
        self._rules = GameRules(config)
        self._snapshot_builder = SnapshotBuilder(config)
        self._cues = CueQueue()

        # Game state
        self._catcher = Catcher.from_config(config)
        self._objects: List[FallingObject] = []
        self._encounter: Optional[BossEncounter] = None
        self._phase = SessionPhase.PLAYING
        self._resume_phase = SessionPhase.PLAYING
        self._tick_count = 0

    @property
    def config(self) -> GameConfig:
        """Game configuration."""
        return self._config

    @property
    def phase(self) -> SessionPhase:
        return self._phase

    @property
    def player_id(self) -> Optional[int]:
        return self._player_id

    @property
    def tracker(self) -> ScoreTracker:
        """Score, lives and level."""
        return self._tracker

    @property
    def score(self) -> int:
        """Current score."""
        return self._tracker.score

    @property
    def lives(self) -> int:
        return self._tracker.lives

    @property
    def level(self) -> int:
        return self._tracker.level

    @property
    def record(self) -> int:
        return self._tracker.record

    @property
    def catcher(self) -> Catcher:
        return self._catcher

    @property
    def objects(self) -> List[FallingObject]:
        """Eggs currently in flight."""
        return self._objects

    @property
    def boss(self) -> Optional[Boss]:
        """The boss, while an encounter is running or just finished."""
        return self._encounter.boss if self._encounter is not None else None

    @property
    def spawner(self) -> Spawner:
        return self._spawner

    @property
    def tick_count(self) -> int:
        return self._tick_count

    @property
    def is_over(self) -> bool:
        """True if game has ended."""
        return self._phase.is_terminal

    @property
    def won(self) -> bool:
        return self._phase == SessionPhase.WON

    @property
    def active_count(self) -> int:
        return sum(1 for obj in self._objects if obj.alive)

    def reset(self, seed: Optional[int] = None, record: Optional[int] = None) -> GameSnapshot:
        """
        Reset game to initial state.

        Args:
            seed: New random seed. Uses previous if None.
            record: Replace the carried high score. Kept if None.

        Returns:
            Initial game snapshot.
        """
        if seed is not None:
            self._seed = seed
        if record is None:
            record = self._tracker.record

        self._spawner.reset(self._seed)
        self._tracker = ScoreTracker(self._config, record=record)
        self._rules.reset()
        self._cues.drain()

        self._catcher = Catcher.from_config(self._config)
        self._objects = []
        self._encounter = None
        self._phase = SessionPhase.PLAYING
        self._resume_phase = SessionPhase.PLAYING
        self._tick_count = 0

        return self.snapshot()

    def tick(
        self,
        intents: Iterable[object] = (),
        dt: Optional[float] = None
    ) -> TickResult:
        """
        Advance the simulation by one tick.

        Args:
            intents: Player intents for this tick. Anything that is not a
                gameplay Intent is ignored.
            dt: Seconds covered by this tick. Nominal tick length if None.

        Returns:
            TickResult with the new snapshot and the cues emitted.
        """
        if dt is None:
            dt = self._config.motion.tick_dt
        scale = dt * self._config.motion.tick_rate
        pressed = {i for i in intents if isinstance(i, Intent)}

        if self.is_over:
            return self._result(0, 0, 0)

        if Intent.TOGGLE_PAUSE in pressed:
            self.toggle_pause()
            return self._result(0, 0, 0)

        if self._phase == SessionPhase.PAUSED:
            return self._result(0, 0, 0)

        score_before = self._tracker.score
        profile = self._rules.profile_for(self._phase)
        self._tick_count += 1

        self._apply_movement(pressed, scale)
        self._spawn(profile, dt, scale)
        self._advance_objects(scale)
        caught, missed = self._resolve_objects(profile)
        self._objects = [obj for obj in self._objects if obj.alive]

        if self._tracker.check_level_up():
            self._cues.push(LevelUp(self._tracker.level))

        self._update_phase()

        return self._result(self._tracker.score - score_before, caught, missed)

    def toggle_pause(self) -> None:
        """Pause an active game, or resume a paused one."""
        if self._phase == SessionPhase.PAUSED:
            self._set_phase(self._resume_phase)
        elif self._phase.is_active:
            self._resume_phase = self._phase
            self._set_phase(SessionPhase.PAUSED)

    def _apply_movement(self, pressed: set, scale: float) -> None:
        distance = self._config.catcher.speed * scale
        # Left wins when both are held
        if Intent.MOVE_LEFT in pressed:
            self._catcher.move(-1, distance)
        elif Intent.MOVE_RIGHT in pressed:
            self._catcher.move(1, distance)

    def _spawn(self, profile: EncounterProfile, dt: float, scale: float) -> None:
        if profile.spawn_policy == SpawnPolicy.ADMISSION_GATE:
            active = self.active_count
            if self._spawner.admits(active):
                self._objects.append(self._spawner.spawn_from_emitter(
                    level=self._tracker.level,
                    active_count=active,
                    weights=profile.weights
                ))
            return

        if self._encounter is not None and self._encounter.advance(dt, scale):
            self._objects.append(self._spawner.spawn_from_boss(
                self._encounter.boss,
                weights=profile.weights
            ))

    def _advance_objects(self, scale: float) -> None:
        level = self._tracker.level
        for obj in self._objects:
            self._trajectory.advance(obj, level, scale)

    def _resolve_objects(self, profile: EncounterProfile) -> tuple:
        caught = 0
        missed = 0
        for obj in self._objects:
            if not obj.alive:
                continue

            if self._detector.is_caught(obj, self._catcher):
                obj.alive = False
                caught += 1
                event = self._tracker.apply_catch(obj.payload)
                self._cues.push(ObjectCaught(obj.payload))
                self._push_score_cues(event)
                if (
                    profile.damages_boss
                    and obj.payload.scores
                    and self._encounter is not None
                    and not self._encounter.boss.is_defeated
                ):
                    health = self._encounter.take_hit()
                    self._cues.push(BossHit(health))

            elif self._trajectory.crossed_floor(obj):
                obj.alive = False
                missed += 1
                event = self._tracker.apply_miss(obj.payload, penalize=profile.miss_penalty)
                self._cues.push(ObjectMissed(obj.payload))
                self._push_score_cues(event)

        return caught, missed

    def _push_score_cues(self, event: ScoreEvent) -> None:
        if event.points:
            self._cues.push(ScoreGained(event.points, self._tracker.score))
        if event.life_delta < 0:
            self._cues.push(LifeLost(self._tracker.lives))
        elif event.life_delta > 0:
            self._cues.push(LifeGained(self._tracker.lives))

    def _update_phase(self) -> None:
        boss_health = self.boss.health if self._phase == SessionPhase.BOSS_ENCOUNTER else None
        next_phase = self._rules.phases.next_phase(
            self._phase,
            score=self._tracker.score,
            lives=self._tracker.lives,
            boss_health=boss_health
        )
        if next_phase == self._phase:
            return

        if next_phase == SessionPhase.BOSS_ENCOUNTER:
            self._start_encounter()
        self._set_phase(next_phase)

    def _start_encounter(self) -> None:
        # Eggs still on the chutes are discarded without penalty
        self._objects = []
        self._encounter = BossEncounter(self._config)

    def _set_phase(self, phase: SessionPhase) -> None:
        previous = self._phase
        self._phase = phase
        self._cues.push(PhaseChanged(previous, phase))
        logger.debug("Phase %s -> %s (score=%d, lives=%d)",
                     previous.value, phase.value, self._tracker.score, self._tracker.lives)

    def drain_cues(self) -> List[Cue]:
        """Return and clear cues not yet handed out by tick()."""
        return self._cues.drain()

    def _result(self, delta_score: int, caught: int, missed: int) -> TickResult:
        return TickResult(
            snapshot=self.snapshot(),
            phase=self._phase,
            cues=self._cues.drain(),
            delta_score=delta_score,
            caught=caught,
            missed=missed
        )

    def snapshot(self) -> GameSnapshot:
        """Build current game state snapshot."""
        return self._snapshot_builder.build(
            phase=self._phase,
            catcher=self._catcher,
            tracker=self._tracker,
            objects=self._objects,
            boss=self.boss,
            player_id=self._player_id,
            tick=self._tick_count
        )

    def get_info(self) -> Dict[str, Any]:
        """Get additional info dict for Gymnasium."""
        return {
            "score": self._tracker.score,
            "lives": self._tracker.lives,
            "level": self._tracker.level,
            "record": self._tracker.record,
            "catches": self._tracker.catches,
            "phase": self._phase.value,
            "tick": self._tick_count,
            "boss_health": self.boss.health if self.boss is not None else None,
        }
