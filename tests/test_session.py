"""
Tests for the outer session state machine.
"""

import pytest

from egg_catcher.catcher_core.config_loader import load_config
from egg_catcher.catcher_core.errors import PersistenceError
from egg_catcher.catcher_core.events import Intent, PhaseChanged, SessionEnded, TextEntry
from egg_catcher.catcher_core.payloads import Payload
from egg_catcher.catcher_core.persistence import InMemoryStore
from egg_catcher.catcher_core.rules import SessionPhase
from egg_catcher.catcher_core.session import GameSession
from egg_catcher.catcher_core.trajectory import FallingObject, MotionPhase


class FlakyStore(InMemoryStore):
    """In-memory store whose saves can be made to fail."""

    def __init__(self):
        super().__init__()
        self.fail_saves = False

    def save_session_result(self, player_id, score, lives):
        if self.fail_saves:
            raise PersistenceError("disk full")
        super().save_session_result(player_id, score, lives)


@pytest.fixture
def config():
    return load_config()


@pytest.fixture
def store():
    return FlakyStore()


@pytest.fixture
def session(store, config):
    return GameSession(store, store, config=config, seed=42)


def _register(session, name="amy", password="pw"):
    session.tick([
        Intent.SELECT_REGISTER,
        TextEntry(name), Intent.SUBMIT,
        TextEntry(password), Intent.SUBMIT,
    ])


def _lose(session, score=None):
    """End the current play-through on the next tick."""
    game = session.game
    if score is not None:
        game.tracker.score = score
    game.tracker.lives = 1
    game.objects.append(FallingObject(
        x=400.0, y=470.0, vx=0.0, vy=0.0,
        payload=Payload.HARMFUL, phase=MotionPhase.FALLING
    ))
    session.tick()


class TestLogin:
    """Test the authentication stage."""

    def test_starts_authenticating(self, session):
        assert session.phase == SessionPhase.AUTHENTICATING
        assert session.game is None
        assert session.snapshot() is None

    def test_register_starts_play(self, session):
        _register(session)

        assert session.phase == SessionPhase.PLAYING
        assert session.player_name == "amy"
        assert session.auth is None
        assert PhaseChanged(SessionPhase.AUTHENTICATING, SessionPhase.PLAYING) in session.drain_cues()

    def test_returning_player_gets_record(self, session, store):
        player_id = store.authenticate("bob", "pw", True)
        store.save_session_result(player_id, 12, 0)

        session.tick([TextEntry("bob"), Intent.SUBMIT, TextEntry("pw"), Intent.SUBMIT])

        assert session.player_id == player_id
        assert session.game.record == 12
        assert session.game.score == 0

    def test_failed_login_stays(self, session):
        session.tick([TextEntry("ghost"), Intent.SUBMIT])

        assert session.phase == SessionPhase.AUTHENTICATING
        assert session.auth.error_message


class TestSessionEnd:
    """Test saving at the end of a play-through."""

    def test_game_over_saves(self, session, store):
        _register(session)
        _lose(session, score=7)

        assert session.phase == SessionPhase.GAME_OVER
        assert not session.has_pending_save
        assert len(store.games) == 1
        assert store.load_player_record(session.player_id).high_score == 7

        cues = session.drain_cues()
        ended = [c for c in cues if isinstance(c, SessionEnded)]
        assert len(ended) == 1
        assert ended[0].summary.score == 7
        assert not ended[0].summary.won

    def test_failed_save_is_kept_and_retried(self, session, store):
        _register(session)
        store.fail_saves = True
        _lose(session, score=4)

        assert session.has_pending_save
        assert session.game.score == 4
        assert store.games == []

        store.fail_saves = False
        session.tick([Intent.RESTART])

        assert not session.has_pending_save
        assert len(store.games) == 1
        assert session.phase == SessionPhase.PLAYING

    def test_failed_results_queue_until_saved(self, session, store):
        _register(session)
        store.fail_saves = True
        _lose(session, score=25)
        session.tick([Intent.RESTART])
        _lose(session, score=2)

        assert [s.score for s in session.pending_saves] == [25, 2]

        store.fail_saves = False
        session.tick([Intent.QUIT])

        assert not session.has_pending_save
        assert [g.score for g in store.games] == [25, 2]
        assert store.load_player_record(session.player_id).high_score == 25

    def test_restart_keeps_record(self, session):
        _register(session)
        _lose(session, score=9)
        session.tick([Intent.RESTART])

        assert session.phase == SessionPhase.PLAYING
        assert session.game.score == 0
        assert session.game.record == 9

    def test_leaderboard_toggle(self, session):
        _register(session)
        _lose(session, score=3)

        session.tick([Intent.TOGGLE_LEADERBOARD])
        assert session.show_leaderboard
        board = session.leaderboard()
        assert [r.name for r in board] == ["amy"]

        session.tick([Intent.TOGGLE_LEADERBOARD])
        assert not session.show_leaderboard

    def test_quit_closes(self, session):
        _register(session)
        _lose(session)
        session.tick([Intent.QUIT])

        assert session.closed
        assert session.tick([Intent.RESTART]) == SessionPhase.GAME_OVER

    def test_quit_with_failing_save(self, session, store):
        _register(session)
        store.fail_saves = True
        _lose(session)
        session.tick([Intent.QUIT])

        assert session.closed
        assert session.has_pending_save

    def test_restart_ignored_while_playing(self, session):
        _register(session)
        game = session.game
        session.tick([Intent.RESTART])
        assert session.game is game
