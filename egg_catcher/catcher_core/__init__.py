"""
Catcher Core - The simulation behind the egg catching game.

This module provides the per-tick game simulation, the session state
machine around it, the Gymnasium environment wrapper and the supporting
systems (trajectories, catching, spawning, scoring, boss).

Main exports:
- CoreGame: Per-tick game simulation
- GameSession: Login, play-through and persistence state machine
- CatcherEnv: Gymnasium environment for agents
- InMemoryStore / SqliteStore: Player services
- GameConfig: Configuration loaded from game_config.yaml
"""

from egg_catcher.catcher_core.config_loader import GameConfig, load_config
from egg_catcher.catcher_core.errors import AuthError, AuthErrorKind, PersistenceError, InvariantViolation
from egg_catcher.catcher_core.payloads import Payload
from egg_catcher.catcher_core.events import Intent, TextEntry
from egg_catcher.catcher_core.rules import SessionPhase
from egg_catcher.catcher_core.game import CoreGame, TickResult
from egg_catcher.catcher_core.session import GameSession
from egg_catcher.catcher_core.persistence import InMemoryStore, SqliteStore, PlayerRecord
from egg_catcher.catcher_core.env_gym import CatcherEnv

__all__ = [
    "GameConfig",
    "load_config",
    "AuthError",
    "AuthErrorKind",
    "PersistenceError",
    "InvariantViolation",
    "Payload",
    "Intent",
    "TextEntry",
    "SessionPhase",
    "CoreGame",
    "TickResult",
    "GameSession",
    "InMemoryStore",
    "SqliteStore",
    "PlayerRecord",
    "CatcherEnv",
]
