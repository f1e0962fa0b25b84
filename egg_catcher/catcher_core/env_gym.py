"""
Gymnasium Environment Wrapper
=============================

Provides a standard Gymnasium interface to the catching game.
Reward is always 0.0 - agents compute their own from info.
"""

from __future__ import annotations

from typing import Any, Dict, Optional, Tuple, Union
import numpy as np

import gymnasium as gym
from gymnasium import spaces

from egg_catcher.catcher_core.config_loader import GameConfig, load_config
from egg_catcher.catcher_core.events import Intent
from egg_catcher.catcher_core.game import CoreGame
from egg_catcher.catcher_core.payloads import Payload
from egg_catcher.catcher_core.rules import SessionPhase

# Discrete actions
ACTION_STAY = 0
ACTION_LEFT = 1
ACTION_RIGHT = 2

_ACTION_INTENTS = {
    ACTION_STAY: (),
    ACTION_LEFT: (Intent.MOVE_LEFT,),
    ACTION_RIGHT: (Intent.MOVE_RIGHT,),
}


class CatcherEnv(gym.Env):
    """
    Egg catching game as a Gymnasium environment.

    Action Space:
        Discrete(3): 0 = stay, 1 = move left, 2 = move right.

    Observation Space:
        Dict mirroring GameSnapshot.to_obs_dict().

    Reward:
        Always 0.0. Use info["delta_score"] and info["lives"].

    Termination:
        terminated on game over or boss defeat; truncated at caps.max_ticks.
    """

    metadata = {
        "render_modes": [],
        "render_fps": 60,
    }

    def __init__(
        self,
        config_path: Optional[str] = None,
        config: Optional[GameConfig] = None,
        debug: bool = False,
    ):
        """
        Initialize environment.

        Args:
            config_path: Path to game_config.yaml. Uses default if None.
            config: Preloaded configuration; takes precedence over config_path.
            debug: If True, prints per-step diagnostics.
        """
        super().__init__()

        self._config = config if config is not None else load_config(config_path)
        self._debug = debug
        self._game = CoreGame(config=self._config)

        self.action_space = spaces.Discrete(3)
        self.observation_space = self._build_observation_space()

        if self._debug:
            print(f"[DEBUG] CatcherEnv initialized")
            print(f"[DEBUG]   Field: {self._config.field.width}x{self._config.field.height}")
            print(f"[DEBUG]   Boss enabled: {self._config.boss.enabled}")
            print(f"[DEBUG]   Max objects: {self._config.observation.max_objects}")

    def _build_observation_space(self) -> spaces.Dict:
        """Build the observation space definition."""
        max_obj = self._config.observation.max_objects
        field = self._config.field
        session = self._config.session
        num_payloads = len(Payload)

        return spaces.Dict({
            "phase": spaces.Box(low=0, high=len(SessionPhase) - 1, shape=(), dtype=np.int32),
            "catcher_x": spaces.Box(low=0, high=field.width, shape=(), dtype=np.float32),
            "score": spaces.Box(low=0, high=np.iinfo(np.int64).max, shape=(), dtype=np.int64),
            "lives": spaces.Box(low=0, high=session.max_lives, shape=(), dtype=np.int32),
            "level": spaces.Box(low=1, high=session.level_cap, shape=(), dtype=np.int32),
            "objects_count": spaces.Box(low=0, high=max_obj, shape=(), dtype=np.int32),

            "boss_active": spaces.Box(low=0, high=1, shape=(), dtype=np.int8),
            "boss_x": spaces.Box(low=0, high=field.width, shape=(), dtype=np.float32),
            "boss_health": spaces.Box(low=0, high=self._config.boss.max_health, shape=(), dtype=np.int32),

            "obj_x": spaces.Box(low=-np.inf, high=np.inf, shape=(max_obj,), dtype=np.float32),
            "obj_y": spaces.Box(low=-np.inf, high=np.inf, shape=(max_obj,), dtype=np.float32),
            "obj_vx": spaces.Box(low=-np.inf, high=np.inf, shape=(max_obj,), dtype=np.float32),
            "obj_vy": spaces.Box(low=-np.inf, high=np.inf, shape=(max_obj,), dtype=np.float32),
            "obj_phase": spaces.Box(low=-1, high=1, shape=(max_obj,), dtype=np.int8),
            "obj_payload": spaces.Box(low=-1, high=num_payloads - 1, shape=(max_obj,), dtype=np.int8),
            "obj_mask": spaces.MultiBinary(max_obj),
        })

    def reset(
        self,
        *,
        seed: Optional[int] = None,
        options: Optional[Dict[str, Any]] = None
    ) -> Tuple[Dict[str, np.ndarray], Dict[str, Any]]:
        """
        Reset the environment.

        Args:
            seed: Random seed for reproducibility.
            options: Additional options (unused).

        Returns:
            (observation, info) tuple.
        """
        super().reset(seed=seed)

        snapshot = self._game.reset(seed=seed)

        obs = snapshot.to_obs_dict()
        info = self._game.get_info()
        info["delta_score"] = 0

        return obs, info

    def step(
        self,
        action: Union[int, np.ndarray]
    ) -> Tuple[Dict[str, np.ndarray], float, bool, bool, Dict[str, Any]]:
        """
        Execute one tick.

        Args:
            action: 0 = stay, 1 = left, 2 = right.

        Returns:
            (observation, reward, terminated, truncated, info) tuple.
            Reward is always 0.0.
        """
        if isinstance(action, np.ndarray):
            action = int(action.item())
        intents = _ACTION_INTENTS.get(int(action), ())

        result = self._game.tick(intents)

        obs = result.snapshot.to_obs_dict()
        reward = 0.0
        terminated = result.terminated
        truncated = (not terminated) and self._game.tick_count >= self._config.caps.max_ticks

        info = self._game.get_info()
        info["delta_score"] = result.delta_score
        info["caught"] = result.caught
        info["missed"] = result.missed

        if self._debug:
            print(f"[DEBUG] Step: action={action}, delta_score={result.delta_score}, "
                  f"lives={info['lives']}, objects={int(obs['objects_count'])}")
            if terminated:
                print(f"[DEBUG] TERMINATED: {info['phase']}")

        return obs, reward, terminated, truncated, info

    def close(self) -> None:
        """Nothing to release; present for API symmetry."""

    @property
    def game(self) -> CoreGame:
        """Access to underlying game (for debugging/tools)."""
        return self._game

    @property
    def config(self) -> GameConfig:
        """Game configuration."""
        return self._config
