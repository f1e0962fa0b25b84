"""
Tests for phase transitions and encounter profiles.
"""

from dataclasses import replace

import pytest

from egg_catcher.catcher_core.config_loader import load_config
from egg_catcher.catcher_core.rules import GameRules, PhaseRules, SessionPhase, SpawnPolicy


@pytest.fixture
def config():
    return load_config()


@pytest.fixture
def phases(config):
    return PhaseRules(config)


class TestPhaseRules:
    """Test next_phase decisions."""

    def test_stays_playing_below_threshold(self, config, phases):
        score = config.boss.score_threshold - 1
        assert phases.next_phase(SessionPhase.PLAYING, score=score, lives=3) == SessionPhase.PLAYING

    def test_out_of_lives_ends(self, phases):
        assert phases.next_phase(SessionPhase.PLAYING, score=0, lives=0) == SessionPhase.GAME_OVER

    def test_boss_triggers_once(self, config, phases):
        score = config.boss.score_threshold

        assert phases.next_phase(SessionPhase.PLAYING, score=score, lives=3) == SessionPhase.BOSS_ENCOUNTER
        assert phases.boss_triggered
        assert phases.next_phase(SessionPhase.PLAYING, score=score + 5, lives=3) == SessionPhase.PLAYING

    def test_boss_disabled(self, config):
        config = replace(config, boss=replace(config.boss, enabled=False))
        phases = PhaseRules(config)

        assert phases.next_phase(SessionPhase.PLAYING, score=10_000, lives=3) == SessionPhase.PLAYING

    def test_boss_defeated_wins(self, phases):
        result = phases.next_phase(SessionPhase.BOSS_ENCOUNTER, score=40, lives=2, boss_health=0)
        assert result == SessionPhase.WON

    def test_game_over_beats_win(self, phases):
        """Running out of lives on the killing tick is still a loss."""
        result = phases.next_phase(SessionPhase.BOSS_ENCOUNTER, score=40, lives=0, boss_health=0)
        assert result == SessionPhase.GAME_OVER

    def test_reset_rearms_trigger(self, config, phases):
        phases.next_phase(SessionPhase.PLAYING, score=config.boss.score_threshold, lives=3)
        phases.reset()
        assert not phases.boss_triggered


class TestProfiles:
    """Test per-phase encounter profiles."""

    def test_base_profile(self, config):
        profile = GameRules(config).profile_for(SessionPhase.PLAYING)

        assert profile.spawn_policy == SpawnPolicy.ADMISSION_GATE
        assert profile.weights == config.spawn.weights
        assert profile.miss_penalty
        assert not profile.damages_boss

    def test_boss_profile(self, config):
        profile = GameRules(config).profile_for(SessionPhase.BOSS_ENCOUNTER)

        assert profile.spawn_policy == SpawnPolicy.TIMER
        assert profile.weights == config.boss.weights
        assert profile.damages_boss

    def test_phase_flags(self):
        assert SessionPhase.GAME_OVER.is_terminal
        assert SessionPhase.WON.is_terminal
        assert not SessionPhase.PAUSED.is_active
        assert SessionPhase.BOSS_ENCOUNTER.is_active
