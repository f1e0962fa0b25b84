"""
Tests for egg spawning and payload draws.
"""

import math
from collections import Counter

import pytest

from egg_catcher.catcher_core.boss import BossEncounter
from egg_catcher.catcher_core.config_loader import load_config
from egg_catcher.catcher_core.errors import InvariantViolation
from egg_catcher.catcher_core.payloads import Payload
from egg_catcher.catcher_core.spawner import Spawner
from egg_catcher.catcher_core.trajectory import MotionPhase


@pytest.fixture
def config():
    return load_config()


class TestSpawnerRng:
    """Test seeded determinism."""

    def test_deterministic_with_seed(self, config):
        """Same seed should produce the same eggs."""
        s1 = Spawner(config, seed=42)
        s2 = Spawner(config, seed=42)

        eggs1 = [s1.spawn_from_emitter(level=1, active_count=0) for _ in range(50)]
        eggs2 = [s2.spawn_from_emitter(level=1, active_count=0) for _ in range(50)]

        assert [(e.x, e.y, e.payload) for e in eggs1] == [(e.x, e.y, e.payload) for e in eggs2]

    def test_different_seeds_differ(self, config):
        s1 = Spawner(config, seed=42)
        s2 = Spawner(config, seed=123)

        seq1 = [s1.spawn_from_emitter(level=1, active_count=0).x for _ in range(50)]
        seq2 = [s2.spawn_from_emitter(level=1, active_count=0).x for _ in range(50)]

        assert seq1 != seq2

    def test_reset_replays_sequence(self, config):
        spawner = Spawner(config, seed=7)
        first = [spawner.draw_payload(config.spawn.weights) for _ in range(20)]

        spawner.reset(seed=7)
        second = [spawner.draw_payload(config.spawn.weights) for _ in range(20)]

        assert first == second

    def test_uids_increase(self, config):
        spawner = Spawner(config, seed=1)
        uids = [spawner.spawn_from_emitter(level=1, active_count=0).uid for _ in range(5)]
        assert uids == [1, 2, 3, 4, 5]

    def test_payload_distribution(self, config):
        """Draws follow the configured weights."""
        spawner = Spawner(config, seed=42)
        n = 20_000
        counts = Counter(spawner.draw_payload(config.spawn.weights) for _ in range(n))

        weights = config.spawn.weights
        assert counts[Payload.HARMFUL] / n == pytest.approx(weights.harmful, abs=0.01)
        assert counts[Payload.BONUS_LIFE] / n == pytest.approx(weights.bonus_life, abs=0.01)
        assert counts[Payload.BONUS_SCORE] / n == pytest.approx(weights.bonus_score, abs=0.015)

    def test_all_emitters_used(self, config):
        spawner = Spawner(config, seed=3)
        xs = {spawner.spawn_from_emitter(level=1, active_count=0).x for _ in range(200)}
        assert len(xs) == 4


class TestAdmissionGate:
    """Test the one-egg-in-flight gate."""

    def test_admits_only_when_empty(self):
        assert Spawner.admits(0)
        assert not Spawner.admits(1)
        assert not Spawner.admits(3)

    def test_spawn_with_eggs_in_flight_raises(self, config):
        spawner = Spawner(config, seed=1)
        with pytest.raises(InvariantViolation):
            spawner.spawn_from_emitter(level=1, active_count=1)


class TestEmitterLaunch:
    """Test launch geometry."""

    def test_left_emitter_launch(self, config):
        """Emitter at (150, 58) launches right with transition 67.5 px along."""
        spawner = Spawner(config, seed=1)
        egg = spawner.spawn_from_emitter(level=1, active_count=0, emitter_index=0)

        assert egg.x == pytest.approx(150 + 38 / 2 - 14 / 2)
        assert egg.y == pytest.approx(58 + 38)
        assert egg.transition_x == pytest.approx(egg.x + 67.5)
        assert egg.vx == pytest.approx(1 / math.sqrt(2))
        assert egg.vy == pytest.approx(1 / math.sqrt(2))
        assert egg.phase == MotionPhase.SLIDING

    def test_right_emitter_launch(self, config):
        spawner = Spawner(config, seed=1)
        egg = spawner.spawn_from_emitter(level=1, active_count=0, emitter_index=2)

        assert egg.x == pytest.approx(662)
        assert egg.transition_x == pytest.approx(662 - 67.5)
        assert egg.vx == pytest.approx(-1 / math.sqrt(2))
        assert egg.vy > 0

    def test_launch_speed_by_level(self, config):
        spawner = Spawner(config, seed=1)
        assert spawner.launch_speed(1) == pytest.approx(1.0)
        assert spawner.launch_speed(3) == pytest.approx(3.0)

        egg = spawner.spawn_from_emitter(level=3, active_count=0, emitter_index=1)
        assert math.hypot(egg.vx, egg.vy) == pytest.approx(3.0)

    def test_forced_payload(self, config):
        spawner = Spawner(config, seed=1)
        egg = spawner.spawn_from_emitter(level=1, active_count=0, payload=Payload.HARMFUL)
        assert egg.payload == Payload.HARMFUL


class TestBossSpawn:
    """Test timer-driven spawns from the boss."""

    def test_spawns_below_boss(self, config):
        boss = BossEncounter(config).boss
        egg = Spawner(config, seed=1).spawn_from_boss(boss)

        assert (egg.x, egg.y) == boss.emit_point
        assert egg.phase == MotionPhase.FALLING
        assert egg.vx == 0.0
        assert egg.vy == pytest.approx(config.boss.egg_speed)

    def test_boss_draw_uses_boss_weights(self, config):
        """Harmful eggs are more common from the boss."""
        spawner = Spawner(config, seed=5)
        boss = BossEncounter(config).boss
        n = 5_000
        harmful = sum(
            1 for _ in range(n)
            if spawner.spawn_from_boss(boss).payload == Payload.HARMFUL
        )
        assert harmful / n == pytest.approx(config.boss.weights.harmful, abs=0.03)
