"""
Game Session
============

Outer state machine: login screen, then one CoreGame per play-through,
with persistence at the session boundaries.

Persistence is out-of-band. A failed save is logged and queued; queued
results are retried oldest-first at the next natural save point (restart
or quit) and never touch in-memory score, lives or record.
"""

from __future__ import annotations

import logging
from typing import Iterable, List, Optional

from egg_catcher.catcher_core.auth import AuthFlow
from egg_catcher.catcher_core.config_loader import GameConfig, get_config
from egg_catcher.catcher_core.errors import PersistenceError
from egg_catcher.catcher_core.events import (
    Cue,
    CueQueue,
    Intent,
    PhaseChanged,
    SessionEnded,
    SessionSummary,
)
from egg_catcher.catcher_core.game import CoreGame
from egg_catcher.catcher_core.persistence import AuthService, PersistenceService, PlayerRecord
from egg_catcher.catcher_core.rules import SessionPhase
from egg_catcher.catcher_core.state_snapshot import GameSnapshot

logger = logging.getLogger(__name__)


class GameSession:
    """
    One player's visit: authenticate, play, see results, play again.

    Services are injected and scoped to this object.
    """

    def __init__(
        self,
        auth_service: AuthService,
        persistence: PersistenceService,
        config: Optional[GameConfig] = None,
        seed: Optional[int] = None
    ):
        """
        Initialize session on the login screen.

        Args:
            auth_service: Credential verification.
            persistence: Player records and leaderboard.
            config: Game configuration. Uses default if None.
            seed: Random seed for every play-through in this session.
        """
        if config is None:
            config = get_config()

        self._config = config
        self._seed = seed
        self._auth_service = auth_service
        self._persistence = persistence

        self._auth: Optional[AuthFlow] = AuthFlow(auth_service, config)
        self._game: Optional[CoreGame] = None
        self._player_id: Optional[int] = None
        self._player_name: str = ""
        self._cues = CueQueue()

        self._summary: Optional[SessionSummary] = None
        self._pending_saves: List[SessionSummary] = []
        self._show_leaderboard = False
        self._closed = False

    @property
    def phase(self) -> SessionPhase:
        if self._game is None:
            return SessionPhase.AUTHENTICATING
        return self._game.phase

    @property
    def auth(self) -> Optional[AuthFlow]:
        """Login screen state, until authentication succeeds."""
        return self._auth

    @property
    def game(self) -> Optional[CoreGame]:
        return self._game

    @property
    def player_id(self) -> Optional[int]:
        return self._player_id

    @property
    def player_name(self) -> str:
        return self._player_name

    @property
    def summary(self) -> Optional[SessionSummary]:
        """Result of the last finished play-through."""
        return self._summary

    @property
    def has_pending_save(self) -> bool:
        return bool(self._pending_saves)

    @property
    def pending_saves(self) -> List[SessionSummary]:
        """Finished results not yet persisted, oldest first."""
        return list(self._pending_saves)

    @property
    def show_leaderboard(self) -> bool:
        return self._show_leaderboard

    @property
    def closed(self) -> bool:
        """True once the player has quit; the host should exit."""
        return self._closed

    def tick(self, intents: Iterable[object] = (), dt: Optional[float] = None) -> SessionPhase:
        """
        Advance the session by one frame.

        Args:
            intents: Input for this frame. Unknown values are ignored.
            dt: Seconds covered by this frame. Nominal tick if None.

        Returns:
            The session phase after this frame.
        """
        if self._closed:
            return self.phase

        intents = list(intents)

        if self._game is None:
            self._tick_auth(intents)
            return self.phase

        if self._game.is_over:
            self._tick_terminal(intents)
            return self.phase

        result = self._game.tick(intents, dt)
        for cue in result.cues:
            self._cues.push(cue)

        if result.terminated:
            self._finish_play()

        return self.phase

    def _tick_auth(self, intents: List[object]) -> None:
        player_id = self._auth.handle(intents)
        if player_id is None:
            return

        self._player_id = player_id
        self._player_name = self._auth.username.strip()
        self._auth = None
        record = self._load_record()
        self._start_game(record)
        self._cues.push(PhaseChanged(SessionPhase.AUTHENTICATING, SessionPhase.PLAYING))

    def _tick_terminal(self, intents: List[object]) -> None:
        for intent in intents:
            if intent == Intent.RESTART:
                self.restart()
                return
            if intent == Intent.QUIT:
                self.quit()
                return
            if intent == Intent.TOGGLE_LEADERBOARD:
                self._show_leaderboard = not self._show_leaderboard

    def _load_record(self) -> int:
        try:
            record = self._persistence.load_player_record(self._player_id)
        except PersistenceError as e:
            logger.warning("Error loading player data for ID %s: %s", self._player_id, e)
            return 0
        if record is None:
            return 0
        self._player_name = record.name
        return record.high_score

    def _start_game(self, record: int) -> None:
        self._game = CoreGame(
            config=self._config,
            seed=self._seed,
            player_id=self._player_id,
            record=record
        )
        self._show_leaderboard = False

    def _finish_play(self) -> None:
        game = self._game
        summary = SessionSummary(
            player_id=self._player_id,
            score=game.score,
            lives=game.lives,
            level=game.level,
            won=game.won,
        )
        self._summary = summary
        self._cues.push(SessionEnded(summary))
        self._pending_saves.append(summary)
        self._flush_save()

    def _flush_save(self) -> bool:
        """
        Try to persist queued summaries, oldest first.

        Stops at the first failure so results stay in play order.

        Returns:
            True when nothing is left pending.
        """
        while self._pending_saves:
            summary = self._pending_saves[0]
            if summary.player_id is not None:
                try:
                    self._persistence.save_session_result(
                        summary.player_id, summary.score, summary.lives
                    )
                except PersistenceError as e:
                    logger.warning("Error saving game data for player ID %s: %s", summary.player_id, e)
                    return False
            self._pending_saves.pop(0)
        return True

    def restart(self) -> None:
        """Start a fresh play-through, keeping the player and their record."""
        if self._game is None or not self._game.is_over:
            return
        self._flush_save()
        previous = self._game.phase
        self._start_game(self._game.record)
        self._cues.push(PhaseChanged(previous, SessionPhase.PLAYING))

    def quit(self) -> None:
        """End the session. The host should exit once ``closed`` is set."""
        self._flush_save()
        if self._pending_saves:
            logger.error(
                "%d session result(s) for player ID %s could not be saved before quitting",
                len(self._pending_saves),
                self._pending_saves[0].player_id
            )
        self._closed = True

    def leaderboard(self) -> List[PlayerRecord]:
        """Top players, or an empty list if persistence is unavailable."""
        try:
            return self._persistence.top_players(self._config.leaderboard.size)
        except PersistenceError as e:
            logger.warning("Error loading leaderboard: %s", e)
            return []

    def snapshot(self) -> Optional[GameSnapshot]:
        """Current game snapshot, or None on the login screen."""
        if self._game is None:
            return None
        return self._game.snapshot()

    def drain_cues(self) -> List[Cue]:
        """Return and clear cues queued since the last call."""
        return self._cues.drain()
