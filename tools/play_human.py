"""
Human Play Mode
================

Play the egg catching game interactively, login screen included.

Controls:
    - Login screen: type, Backspace, Enter to submit,
      F1 / click "Login", F2 / click "Register"
    - A/D or Left/Right: Move catcher
    - P/Space: Pause
    - R: Restart (after game over)
    - T: Toggle leaderboard (after game over)
    - Q: Quit (after game over)
    - ESC: Close window

Usage:
    python -m tools.play_human [--seed SEED] [--db PATH] [--clear] [--fps FPS]
"""

from __future__ import annotations

import argparse
import logging
import math
import sys
from typing import List, Optional

try:
    import pygame
    PYGAME_AVAILABLE = True
except ImportError:
    PYGAME_AVAILABLE = False

from egg_catcher.catcher_core.config_loader import load_config, GameConfig
from egg_catcher.catcher_core.errors import PersistenceError
from egg_catcher.catcher_core.events import (
    Intent,
    LevelUp,
    LifeLost,
    SessionEnded,
    TextEntry,
)
from egg_catcher.catcher_core.payloads import Payload
from egg_catcher.catcher_core.persistence import InMemoryStore, SqliteStore
from egg_catcher.catcher_core.rules import SessionPhase
from egg_catcher.catcher_core.session import GameSession
from egg_catcher.catcher_core.state_snapshot import GameSnapshot

logger = logging.getLogger(__name__)


class CatcherRenderer:
    """
    Primitive-shape renderer: no sprites, only rects and circles drawn
    from the session snapshot.
    """

    def __init__(self, config: GameConfig):
        self._config = config
        self._width = config.field.width
        self._height = config.field.height

        # Colors
        self._sky = (150, 200, 240)
        self._ground = (110, 170, 80)
        self._chute = (140, 100, 60)
        self._hen = (240, 240, 230)
        self._catcher = (120, 120, 130)
        self._basket = (190, 140, 70)
        self._boss = (170, 40, 40)
        self._text_dark = (30, 30, 40)
        self._panel = (255, 252, 245)
        self._error = (200, 40, 40)
        self._payload_colors = {
            Payload.HARMFUL: (60, 60, 60),
            Payload.BONUS_LIFE: (230, 80, 120),
            Payload.BONUS_SCORE: (250, 245, 220),
        }

        pygame.font.init()
        self._font_large = pygame.font.Font(None, 56)
        self._font_medium = pygame.font.Font(None, 32)
        self._font_small = pygame.font.Font(None, 22)

        self.login_button = pygame.Rect(self._width // 2 - 160, 380, 140, 40)
        self.register_button = pygame.Rect(self._width // 2 + 20, 380, 140, 40)

    def render_auth(self, screen: "pygame.Surface", session: GameSession) -> None:
        """Draw the login / registration screen."""
        auth = session.auth
        screen.fill(self._sky)

        title = "Register" if auth.is_register else "Login"
        self._center_text(screen, title, self._font_large, 140)

        label = "Username:"
        if auth.editing_password:
            label = "Password:"
        self._center_text(screen, label, self._font_medium, 220)

        value = auth.masked_password if auth.editing_password else auth.username
        box = pygame.Rect(self._width // 2 - 160, 260, 320, 44)
        pygame.draw.rect(screen, self._panel, box, border_radius=6)
        pygame.draw.rect(screen, self._text_dark, box, 2, border_radius=6)
        text = self._font_medium.render(value + "_", True, self._text_dark)
        screen.blit(text, (box.x + 10, box.y + 10))

        if auth.error_message:
            self._center_text(screen, auth.error_message, self._font_small, 330, self._error)

        for rect, caption in ((self.login_button, "Login"), (self.register_button, "Register")):
            pygame.draw.rect(screen, self._panel, rect, border_radius=6)
            pygame.draw.rect(screen, self._text_dark, rect, 2, border_radius=6)
            surface = self._font_small.render(caption, True, self._text_dark)
            screen.blit(surface, surface.get_rect(center=rect.center))

    def render_game(self, screen: "pygame.Surface", session: GameSession) -> None:
        """Draw the field, eggs, boss, HUD and any overlay."""
        snapshot = session.snapshot()
        screen.fill(self._sky)
        pygame.draw.rect(screen, self._ground, (0, self._height - 40, self._width, 40))

        if snapshot.boss is None:
            self._draw_emitters(screen)
        else:
            self._draw_boss(screen, snapshot)
        self._draw_objects(screen, snapshot)
        self._draw_catcher(screen, snapshot)
        self._draw_hud(screen, session, snapshot)

        if snapshot.phase == SessionPhase.PAUSED:
            self._draw_overlay(screen, "PAUSED", ["Press P to resume"])
        elif snapshot.phase.is_terminal:
            if session.show_leaderboard:
                self._draw_leaderboard(screen, session)
            else:
                title = "YOU WIN" if snapshot.phase == SessionPhase.WON else "GAME OVER"
                self._draw_overlay(screen, title, [
                    f"Score: {snapshot.score}   Record: {snapshot.record}",
                    "R restart   T leaderboard   Q quit",
                ])

    def _draw_emitters(self, screen: "pygame.Surface") -> None:
        emitters = self._config.emitters
        half = self._width / 2
        for hx, hy in emitters.positions:
            egg_x = hx + emitters.width / 2
            egg_y = hy + emitters.height
            direction = 1 if hx < half else -1
            end_x = egg_x + direction * emitters.chute_length
            end_y = egg_y + emitters.chute_length
            pygame.draw.line(screen, self._chute, (egg_x, egg_y), (end_x, end_y), 4)
            pygame.draw.rect(screen, self._hen, (hx, hy, emitters.width, emitters.height),
                             border_radius=8)

    def _draw_boss(self, screen: "pygame.Surface", snapshot: GameSnapshot) -> None:
        boss = snapshot.boss
        color = (255, 255, 255) if boss.hit_timer > 0 else self._boss
        pygame.draw.rect(screen, color, (boss.x, boss.y, boss.width, boss.height), border_radius=10)

        bar_w = boss.width * boss.health / max(boss.max_health, 1)
        pygame.draw.rect(screen, self._text_dark, (boss.x, boss.y - 10, boss.width, 6))
        pygame.draw.rect(screen, self._error, (boss.x, boss.y - 10, bar_w, 6))

    def _draw_objects(self, screen: "pygame.Surface", snapshot: GameSnapshot) -> None:
        size = self._config.emitters.egg_size
        radius = size / 2
        for obj in snapshot.objects:
            cx = obj.x + radius
            cy = obj.y + radius
            color = self._payload_colors[obj.payload]
            pygame.draw.circle(screen, color, (int(cx), int(cy)), int(radius))
            # Spin marker
            mx = cx + math.cos(obj.spin) * radius * 0.6
            my = cy + math.sin(obj.spin) * radius * 0.6
            pygame.draw.circle(screen, self._text_dark, (int(mx), int(my)), 2)

    def _draw_catcher(self, screen: "pygame.Surface", snapshot: GameSnapshot) -> None:
        cfg = self._config.catcher
        pygame.draw.rect(screen, self._catcher,
                         (snapshot.catcher_x, snapshot.catcher_y, cfg.width, cfg.width),
                         border_radius=6)
        center = snapshot.catcher_x + cfg.width / 2
        pygame.draw.rect(screen, self._basket,
                         (center - cfg.basket_width / 2, cfg.band_y, cfg.basket_width, 8))

    def _draw_hud(self, screen: "pygame.Surface", session: GameSession, snapshot: GameSnapshot) -> None:
        lines = [
            f"Player: {session.player_name}",
            f"Score: {snapshot.score}",
            f"Record: {snapshot.record}",
            f"Level: {snapshot.level}",
            f"Lives: {snapshot.lives}",
        ]
        for i, line in enumerate(lines):
            surface = self._font_small.render(line, True, self._text_dark)
            screen.blit(surface, (self._width // 2 - 60, 10 + i * 20))

    def _draw_overlay(self, screen: "pygame.Surface", title: str, lines: List[str]) -> None:
        overlay = pygame.Surface((self._width, self._height), pygame.SRCALPHA)
        overlay.fill((0, 0, 0, 150))
        screen.blit(overlay, (0, 0))

        self._center_text(screen, title, self._font_large, self._height // 2 - 60, self._panel)
        for i, line in enumerate(lines):
            self._center_text(screen, line, self._font_medium, self._height // 2 + i * 36, self._panel)

    def _draw_leaderboard(self, screen: "pygame.Surface", session: GameSession) -> None:
        lines = [f"{i + 1}. {r.name}  {r.high_score}" for i, r in enumerate(session.leaderboard())]
        if not lines:
            lines = ["No scores yet"]
        lines.append("T to close")
        self._draw_overlay(screen, "LEADERBOARD", lines)

    def _center_text(
        self,
        screen: "pygame.Surface",
        text: str,
        font: "pygame.font.Font",
        y: int,
        color: Optional[tuple] = None
    ) -> None:
        surface = font.render(text, True, color or self._text_dark)
        screen.blit(surface, ((self._width - surface.get_width()) // 2, y))


class HumanPlayer:
    """
    Pygame host for a GameSession: turns keyboard and mouse input into
    intents and draws the session every frame.
    """

    def __init__(
        self,
        store,
        config: Optional[GameConfig] = None,
        seed: Optional[int] = None,
        target_fps: int = 60
    ):
        if not PYGAME_AVAILABLE:
            raise ImportError("pygame required. Install: pip install pygame")

        if config is None:
            config = load_config()

        self._config = config
        self._target_fps = target_fps
        self._session = GameSession(store, store, config=config, seed=seed)

        pygame.init()
        self._screen = pygame.display.set_mode((config.field.width, config.field.height))
        pygame.display.set_caption("Egg Catcher")
        self._clock = pygame.time.Clock()
        pygame.key.start_text_input()

        self._renderer = CatcherRenderer(config)
        self._running = True

    def run(self) -> int:
        """Run the game loop. Returns the last score."""
        print("=== Egg Catcher ===")
        print("F1 login, F2 register, Enter to submit")
        print()

        while self._running and not self._session.closed:
            dt = min(self._clock.tick(self._target_fps) / 1000.0, 0.05)
            intents = self._collect_intents()
            self._session.tick(intents, dt)
            self._report_cues()
            self._render()

        if not self._session.closed:
            self._session.quit()
        pygame.quit()

        summary = self._session.summary
        return summary.score if summary is not None else 0

    def _collect_intents(self) -> List[object]:
        """Process pygame events into intents for this frame."""
        on_login = self._session.phase == SessionPhase.AUTHENTICATING
        intents: List[object] = []

        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                self._running = False

            elif event.type == pygame.TEXTINPUT and on_login:
                intents.append(TextEntry(event.text))

            elif event.type == pygame.MOUSEBUTTONDOWN and on_login and event.button == 1:
                if self._renderer.login_button.collidepoint(event.pos):
                    intents.append(Intent.SELECT_LOGIN)
                elif self._renderer.register_button.collidepoint(event.pos):
                    intents.append(Intent.SELECT_REGISTER)

            elif event.type == pygame.KEYDOWN:
                if event.key == pygame.K_ESCAPE:
                    self._running = False
                elif on_login:
                    intents.extend(self._login_key(event.key))
                else:
                    intents.extend(self._game_key(event.key))

        if not on_login:
            keys = pygame.key.get_pressed()
            if keys[pygame.K_a] or keys[pygame.K_LEFT]:
                intents.append(Intent.MOVE_LEFT)
            if keys[pygame.K_d] or keys[pygame.K_RIGHT]:
                intents.append(Intent.MOVE_RIGHT)

        return intents

    @staticmethod
    def _login_key(key: int) -> List[Intent]:
        if key in (pygame.K_RETURN, pygame.K_KP_ENTER):
            return [Intent.SUBMIT]
        if key == pygame.K_BACKSPACE:
            return [Intent.BACKSPACE]
        if key == pygame.K_F1:
            return [Intent.SELECT_LOGIN]
        if key == pygame.K_F2:
            return [Intent.SELECT_REGISTER]
        return []

    @staticmethod
    def _game_key(key: int) -> List[Intent]:
        if key in (pygame.K_p, pygame.K_SPACE):
            return [Intent.TOGGLE_PAUSE]
        if key == pygame.K_r:
            return [Intent.RESTART]
        if key == pygame.K_q:
            return [Intent.QUIT]
        if key == pygame.K_t:
            return [Intent.TOGGLE_LEADERBOARD]
        return []

    def _report_cues(self) -> None:
        for cue in self._session.drain_cues():
            if isinstance(cue, LevelUp):
                print(f"  Level {cue.level}!")
            elif isinstance(cue, LifeLost):
                print(f"  Life lost ({cue.lives} left)")
            elif isinstance(cue, SessionEnded):
                outcome = "YOU WIN" if cue.summary.won else "GAME OVER"
                print(f"\n{outcome} - Score: {cue.summary.score}")

    def _render(self) -> None:
        if self._session.phase == SessionPhase.AUTHENTICATING:
            self._renderer.render_auth(self._screen, self._session)
        else:
            self._renderer.render_game(self._screen, self._session)
        pygame.display.flip()


def main():
    parser = argparse.ArgumentParser(description="Play the egg catching game interactively")
    parser.add_argument("--seed", type=int, default=None, help="Random seed")
    parser.add_argument("--db", type=str, default=None,
                        help="SQLite database path (in-memory players if omitted)")
    parser.add_argument("--clear", action="store_true", help="Delete all players and games first")
    parser.add_argument("--fps", type=int, default=60, help="Target FPS")

    args = parser.parse_args()

    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(name)s %(levelname)s %(message)s")

    try:
        config = load_config()
        if args.db is None:
            store = InMemoryStore()
        else:
            store = SqliteStore(args.db)
            if args.clear:
                store.clear()
                logger.info("Cleared database %s", args.db)

        player = HumanPlayer(store, config=config, seed=args.seed, target_fps=args.fps)
        score = player.run()
        print(f"\nFinal Score: {score}")
        return 0
    except (ImportError, PersistenceError) as e:
        print(f"Error: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
