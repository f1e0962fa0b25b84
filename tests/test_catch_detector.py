"""
Tests for catch detection and catcher movement.
"""

import pytest

from egg_catcher.catcher_core.catch_detector import Catcher, CatchDetector
from egg_catcher.catcher_core.config_loader import load_config
from egg_catcher.catcher_core.payloads import Payload
from egg_catcher.catcher_core.trajectory import FallingObject, MotionPhase


@pytest.fixture
def config():
    return load_config()


@pytest.fixture
def detector(config):
    return CatchDetector(config)


@pytest.fixture
def catcher(config):
    return Catcher.from_config(config)


def _egg(x, y):
    return FallingObject(x=x, y=y, vx=0.0, vy=1.0, payload=Payload.BONUS_SCORE,
                         phase=MotionPhase.FALLING)


class TestCatcher:
    """Test catcher geometry and clamping."""

    def test_starts_centred(self, catcher):
        """Default start puts the basket centre at x=400."""
        assert catcher.x == 375
        assert catcher.center_x == 400

    def test_basket_wider_than_sprite(self, catcher):
        assert catcher.basket_span == (360, 440)

    def test_move_clamps_left(self, catcher):
        catcher.move(-1, 10_000)
        assert catcher.x == 0

    def test_move_clamps_right(self, config, catcher):
        catcher.move(1, 10_000)
        assert catcher.x == config.field.width - config.catcher.width

    def test_move_by_speed(self, catcher):
        catcher.move(-1, 5)
        assert catcher.x == 370


class TestCatchDetector:
    """Test the catch band and basket span."""

    def test_band_from_config(self, detector):
        assert detector.band == (460, 520)

    @pytest.mark.parametrize("x, y", [
        (360, 460),   # Top-left corner
        (440, 520),   # Bottom-right corner
        (400, 490),   # Centre
    ])
    def test_inclusive_bounds_catch(self, detector, catcher, x, y):
        """Edges of the band and span are inside."""
        assert detector.is_caught(_egg(x, y), catcher)

    @pytest.mark.parametrize("x, y", [
        (359.9, 490),
        (440.1, 490),
        (400, 459.9),
        (400, 520.1),
    ])
    def test_outside_not_caught(self, detector, catcher, x, y):
        assert not detector.is_caught(_egg(x, y), catcher)

    def test_dead_object_not_caught(self, detector, catcher):
        egg = _egg(400, 490)
        egg.alive = False
        assert not detector.is_caught(egg, catcher)

    def test_follows_catcher(self, detector, catcher):
        """Moving the catcher moves the span."""
        egg = _egg(200, 490)
        assert not detector.is_caught(egg, catcher)

        catcher.x = 175
        assert detector.is_caught(egg, catcher)
