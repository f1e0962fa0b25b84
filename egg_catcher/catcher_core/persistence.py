"""
Player Services
===============

Authentication and persistence collaborators for the session.

The core only depends on the two protocols. Two implementations are
provided:

- InMemoryStore: process-local, used by tests and quick demos.
- SqliteStore: file-backed, two tables (players, games).

Both store salted PBKDF2 password digests, never clear-text passwords.
"""

from __future__ import annotations

import hashlib
import hmac
import logging
import os
import sqlite3
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Dict, List, Optional, Protocol, Union

from egg_catcher.catcher_core.errors import AuthError, AuthErrorKind, PersistenceError

logger = logging.getLogger(__name__)

_HASH_ITERATIONS = 100_000


@dataclass(frozen=True)
class PlayerRecord:
    """What persistence knows about a player."""
    player_id: int
    name: str
    high_score: int


class AuthService(Protocol):
    def user_exists(self, username: str) -> bool: ...

    def authenticate(self, username: str, password: str, is_register: bool) -> int: ...


class PersistenceService(Protocol):
    def load_player_record(self, player_id: int) -> Optional[PlayerRecord]: ...

    def save_session_result(self, player_id: int, score: int, lives: int) -> None: ...

    def top_players(self, limit: int = 5) -> List[PlayerRecord]: ...


def hash_password(password: str, salt: Optional[bytes] = None) -> str:
    """Return ``salt$digest`` in hex."""
    if salt is None:
        salt = os.urandom(16)
    digest = hashlib.pbkdf2_hmac("sha256", password.encode("utf-8"), salt, _HASH_ITERATIONS)
    return f"{salt.hex()}${digest.hex()}"


def verify_password(password: str, stored: str) -> bool:
    try:
        salt_hex, _ = stored.split("$", 1)
        salt = bytes.fromhex(salt_hex)
    except ValueError:
        return False
    return hmac.compare_digest(hash_password(password, salt), stored)


def _check_credentials(username: str, password: str, is_register: bool) -> None:
    if not username:
        raise AuthError(AuthErrorKind.EMPTY_USERNAME)
    if is_register and not password:
        raise AuthError(AuthErrorKind.EMPTY_PASSWORD)


@dataclass
class _StoredPlayer:
    record: PlayerRecord
    password_hash: str


@dataclass(frozen=True)
class GameRow:
    player_id: int
    score: int
    lives: int
    date: datetime


class InMemoryStore:
    """Authentication and persistence held in process memory."""

    def __init__(self) -> None:
        self._players: Dict[int, _StoredPlayer] = {}
        self._by_name: Dict[str, int] = {}
        self._games: List[GameRow] = []
        self._next_id = 1

    @property
    def games(self) -> List[GameRow]:
        """Every recorded session result, oldest first."""
        return list(self._games)

    def user_exists(self, username: str) -> bool:
        return username in self._by_name

    def authenticate(self, username: str, password: str, is_register: bool) -> int:
        """
        Log in or register.

        Returns:
            The player id.

        Raises:
            AuthError: On empty fields, a taken name, an unknown user or a
                wrong password.
        """
        _check_credentials(username, password, is_register)

        if is_register:
            if username in self._by_name:
                raise AuthError(AuthErrorKind.USER_EXISTS)
            player_id = self._next_id
            self._next_id += 1
            self._players[player_id] = _StoredPlayer(
                record=PlayerRecord(player_id, username, 0),
                password_hash=hash_password(password),
            )
            self._by_name[username] = player_id
            logger.info("Registered player '%s' with ID %d", username, player_id)
            return player_id

        player_id = self._by_name.get(username)
        if player_id is None:
            raise AuthError(AuthErrorKind.USER_NOT_FOUND)
        if not verify_password(password, self._players[player_id].password_hash):
            raise AuthError(AuthErrorKind.BAD_PASSWORD)
        logger.info("Authenticated player '%s' with ID %d", username, player_id)
        return player_id

    def load_player_record(self, player_id: int) -> Optional[PlayerRecord]:
        stored = self._players.get(player_id)
        return stored.record if stored is not None else None

    def save_session_result(self, player_id: int, score: int, lives: int) -> None:
        stored = self._players.get(player_id)
        if stored is None:
            raise PersistenceError(f"Unknown player ID {player_id}")

        self._games.append(GameRow(player_id, score, lives, datetime.now()))
        if score > stored.record.high_score:
            stored.record = PlayerRecord(player_id, stored.record.name, score)

    def top_players(self, limit: int = 5) -> List[PlayerRecord]:
        records = sorted(
            (p.record for p in self._players.values()),
            key=lambda r: (-r.high_score, r.name)
        )
        return records[:limit]


class SqliteStore:
    """
    Authentication and persistence backed by a SQLite database.

    Schema mirrors a classic players/games split: one row per player with
    their best score, one row per finished session.
    """

    _SCHEMA = (
        """
        CREATE TABLE IF NOT EXISTS players (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            name TEXT NOT NULL UNIQUE,
            high_score INTEGER DEFAULT 0,
            password TEXT NOT NULL
        )
        """,
        """
        CREATE TABLE IF NOT EXISTS games (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            player_id INTEGER NOT NULL,
            score INTEGER NOT NULL,
            lives INTEGER NOT NULL,
            date TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
            FOREIGN KEY (player_id) REFERENCES players(id) ON DELETE CASCADE
        )
        """,
    )

    def __init__(self, path: Union[str, Path] = ":memory:"):
        """
        Open (and create if needed) the database.

        Raises:
            PersistenceError: If the database cannot be opened.
        """
        self._path = str(path)
        try:
            self._conn = sqlite3.connect(self._path)
            self._conn.execute("PRAGMA foreign_keys = ON")
            with self._conn:
                for statement in self._SCHEMA:
                    self._conn.execute(statement)
        except sqlite3.Error as e:
            raise PersistenceError(f"Failed to open database {self._path}: {e}") from e

    def close(self) -> None:
        self._conn.close()

    def __enter__(self) -> "SqliteStore":
        return self

    def __exit__(self, *exc) -> None:
        self.close()

    def clear(self) -> None:
        """Delete all players and games."""
        try:
            with self._conn:
                self._conn.execute("DELETE FROM games")
                self._conn.execute("DELETE FROM players")
                self._conn.execute("DELETE FROM sqlite_sequence WHERE name IN ('games', 'players')")
        except sqlite3.Error as e:
            raise PersistenceError(f"Failed to clear database: {e}") from e

    def user_exists(self, username: str) -> bool:
        try:
            row = self._conn.execute(
                "SELECT COUNT(*) FROM players WHERE name = ?", (username,)
            ).fetchone()
        except sqlite3.Error as e:
            logger.error("Failed to check user existence for '%s': %s", username, e)
            raise PersistenceError(f"Failed to check user existence: {e}") from e
        return row[0] > 0

    def authenticate(self, username: str, password: str, is_register: bool) -> int:
        _check_credentials(username, password, is_register)

        if is_register:
            if self.user_exists(username):
                raise AuthError(AuthErrorKind.USER_EXISTS)
            try:
                with self._conn:
                    cursor = self._conn.execute(
                        "INSERT INTO players (name, high_score, password) VALUES (?, 0, ?)",
                        (username, hash_password(password))
                    )
            except sqlite3.IntegrityError:
                raise AuthError(AuthErrorKind.USER_EXISTS)
            except sqlite3.Error as e:
                logger.error("Failed to insert new player '%s': %s", username, e)
                raise PersistenceError(f"Failed to insert new player: {e}") from e
            player_id = cursor.lastrowid
            logger.info("Registered player '%s' with ID %d", username, player_id)
            return player_id

        try:
            row = self._conn.execute(
                "SELECT id, password FROM players WHERE name = ?", (username,)
            ).fetchone()
        except sqlite3.Error as e:
            logger.error("Failed to get player data for '%s': %s", username, e)
            raise PersistenceError(f"Failed to get player data: {e}") from e
        if row is None:
            raise AuthError(AuthErrorKind.USER_NOT_FOUND)

        player_id, stored_hash = row
        if not verify_password(password, stored_hash):
            raise AuthError(AuthErrorKind.BAD_PASSWORD)
        logger.info("Authenticated player '%s' with ID %d", username, player_id)
        return player_id

    def load_player_record(self, player_id: int) -> Optional[PlayerRecord]:
        try:
            row = self._conn.execute(
                "SELECT id, name, high_score FROM players WHERE id = ?", (player_id,)
            ).fetchone()
        except sqlite3.Error as e:
            raise PersistenceError(f"Failed to load player {player_id}: {e}") from e
        if row is None:
            return None
        return PlayerRecord(player_id=row[0], name=row[1], high_score=row[2])

    def save_session_result(self, player_id: int, score: int, lives: int) -> None:
        try:
            with self._conn:
                self._conn.execute(
                    "INSERT INTO games (player_id, score, lives) VALUES (?, ?, ?)",
                    (player_id, score, lives)
                )
                self._conn.execute(
                    "UPDATE players SET high_score = ? WHERE id = ? AND high_score < ?",
                    (score, player_id, score)
                )
        except sqlite3.Error as e:
            logger.error("Failed to save game data for player ID %d: %s", player_id, e)
            raise PersistenceError(f"Failed to save game data: {e}") from e

    def top_players(self, limit: int = 5) -> List[PlayerRecord]:
        try:
            rows = self._conn.execute(
                "SELECT id, name, high_score FROM players "
                "ORDER BY high_score DESC, name ASC LIMIT ?",
                (limit,)
            ).fetchall()
        except sqlite3.Error as e:
            raise PersistenceError(f"Failed to load leaderboard: {e}") from e
        return [PlayerRecord(player_id=r[0], name=r[1], high_score=r[2]) for r in rows]
