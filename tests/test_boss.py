"""
Tests for the boss encounter.
"""

import pytest

from egg_catcher.catcher_core.boss import BossEncounter, HitKind
from egg_catcher.catcher_core.config_loader import load_config


@pytest.fixture
def config():
    return load_config()


@pytest.fixture
def encounter(config):
    return BossEncounter(config)


class TestPatrol:
    """Test horizontal oscillation."""

    def test_starts_from_config(self, config, encounter):
        boss = encounter.boss
        assert boss.x == config.boss.start_x
        assert boss.health == config.boss.max_health
        assert boss.direction == 1

    def test_stays_in_bounds_and_reverses(self, config, encounter):
        directions = set()
        for _ in range(2000):
            encounter.advance(config.motion.tick_dt)
            boss = encounter.boss
            assert 0 <= boss.x <= config.boss_max_x
            directions.add(boss.direction)

        assert directions == {1, -1}

    def test_reverses_at_right_edge(self, config, encounter):
        encounter.boss.x = config.boss_max_x - 1
        encounter.advance(config.motion.tick_dt)

        assert encounter.boss.x == config.boss_max_x
        assert encounter.boss.direction == -1


class TestSpawnTimer:
    """Test timer-driven drops."""

    def test_drops_every_interval(self, encounter):
        """With a 1.0 s interval, quarter-second ticks drop every fourth tick."""
        drops = [encounter.advance(0.25) for _ in range(12)]
        assert drops == [False, False, False, True] * 3

    def test_long_tick_drops_once(self, encounter):
        assert encounter.advance(5.0)
        assert encounter.boss.spawn_timer > 0


class TestDamage:
    """Test hits and defeat."""

    def test_hit_decrements_health(self, config, encounter):
        health = encounter.take_hit()

        assert health == config.boss.max_health - 1
        assert encounter.boss.hit_kind == HitKind.DAMAGED
        assert encounter.boss.hit_timer == pytest.approx(config.boss.hit_duration)

    def test_hit_animation_expires(self, config, encounter):
        encounter.take_hit()
        encounter.advance(config.boss.hit_duration)

        assert encounter.boss.hit_timer == 0.0
        assert encounter.boss.hit_kind == HitKind.NONE

    def test_defeat(self, config, encounter):
        for _ in range(config.boss.max_health):
            encounter.take_hit()

        assert encounter.boss.is_defeated
        assert encounter.boss.hit_kind == HitKind.DEFEATED
        assert encounter.take_hit() == 0

    def test_reset(self, config, encounter):
        encounter.take_hit()
        encounter.reset()
        assert encounter.boss.health == config.boss.max_health
