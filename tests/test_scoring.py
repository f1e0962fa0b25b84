"""
Tests for scoring polarity, lives and levels.
"""

import pytest

from egg_catcher.catcher_core.config_loader import load_config
from egg_catcher.catcher_core.payloads import Payload
from egg_catcher.catcher_core.scoring import ScoreTracker


@pytest.fixture
def config():
    return load_config()


@pytest.fixture
def tracker(config):
    return ScoreTracker(config)


class TestPolarity:
    """Catching and missing each payload."""

    def test_catch_good_scores(self, tracker):
        event = tracker.apply_catch(Payload.BONUS_SCORE)

        assert tracker.score == 1
        assert tracker.lives == 3
        assert event.points == 1
        assert event.life_delta == 0

    def test_catch_harmful_costs_life(self, tracker):
        event = tracker.apply_catch(Payload.HARMFUL)

        assert tracker.score == 0
        assert tracker.lives == 2
        assert event.life_delta == -1

    def test_miss_harmful_is_safe(self, tracker):
        event = tracker.apply_miss(Payload.HARMFUL)

        assert tracker.lives == 3
        assert event.life_delta == 0

    def test_miss_good_costs_life(self, tracker):
        tracker.apply_miss(Payload.BONUS_SCORE)
        tracker.apply_miss(Payload.BONUS_LIFE)
        assert tracker.lives == 1

    def test_miss_without_penalty(self, tracker):
        tracker.apply_miss(Payload.BONUS_SCORE, penalize=False)
        assert tracker.lives == 3

    def test_bonus_life_capped(self, tracker):
        """A bonus-life egg at full lives still scores but adds no life."""
        event = tracker.apply_catch(Payload.BONUS_LIFE)

        assert tracker.lives == 3
        assert tracker.score == 1
        assert event.life_delta == 0

    def test_bonus_life_restores(self, tracker):
        tracker.apply_catch(Payload.HARMFUL)
        event = tracker.apply_catch(Payload.BONUS_LIFE)

        assert tracker.lives == 3
        assert event.life_delta == 1

    def test_lives_never_negative(self, tracker):
        for _ in range(5):
            tracker.apply_catch(Payload.HARMFUL)
        assert tracker.lives == 0
        assert tracker.out_of_lives


class TestLevels:
    """Level-up threshold and cap."""

    def test_no_level_up_at_boundary(self, tracker):
        """Score equal to the threshold is not enough."""
        tracker.score = 10
        assert not tracker.check_level_up()
        assert tracker.level == 1

    def test_level_up_past_boundary(self, tracker):
        tracker.score = 11
        assert tracker.check_level_up()
        assert tracker.level == 2

    def test_one_level_per_check(self, tracker):
        tracker.score = 100
        assert tracker.check_level_up()
        assert tracker.level == 2

    def test_level_cap(self, config, tracker):
        tracker.level = config.session.level_cap
        tracker.score = 10_000
        assert not tracker.check_level_up()
        assert tracker.level == config.session.level_cap

    def test_level_setter_clamps(self, config, tracker):
        tracker.level = 0
        assert tracker.level == 1
        tracker.level = 99
        assert tracker.level == config.session.level_cap


class TestRecord:
    """Record carried from persistence."""

    def test_record_tracks_best(self, config):
        tracker = ScoreTracker(config, record=5)
        tracker.score = 3
        assert tracker.record == 5
        tracker.score = 7
        assert tracker.record == 7

    def test_reset_keeps_record(self, config):
        tracker = ScoreTracker(config, record=2)
        tracker.score = 9
        tracker.apply_catch(Payload.HARMFUL)
        tracker.reset()

        assert tracker.score == 0
        assert tracker.lives == config.session.start_lives
        assert tracker.level == 1
        assert tracker.record == 9

    def test_lives_setter_clamps(self, config, tracker):
        tracker.lives = 10
        assert tracker.lives == config.session.max_lives
        tracker.lives = -1
        assert tracker.lives == 0
