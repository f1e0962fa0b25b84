"""
Login Flow
==========

Text-entry state machine for the login / registration screen. Drives an
AuthService and ends with a player id.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Iterable, Optional

from egg_catcher.catcher_core.config_loader import GameConfig, get_config
from egg_catcher.catcher_core.errors import AuthError, AuthErrorKind, PersistenceError
from egg_catcher.catcher_core.events import Intent, TextEntry
from egg_catcher.catcher_core.persistence import AuthService

logger = logging.getLogger(__name__)


class AuthStage(Enum):
    USERNAME = "username"
    PASSWORD = "password"
    REGISTER = "register"


class AuthFlow:
    """
    Login screen state.

    Login: type a name, submit, type the password, submit.
    Register: select register, type a name, submit, type a password,
    submit.

    Errors never leave this object; they are exposed through
    ``error_message`` for display.
    """

    def __init__(self, service: AuthService, config: Optional[GameConfig] = None):
        if config is None:
            config = get_config()

        self._service = service
        self._max_length = config.auth.max_input_length
        self.stage = AuthStage.USERNAME
        self.username = ""
        self.password = ""
        self.password_stage = False
        self.error_message = ""
        self.player_id: Optional[int] = None

    @property
    def done(self) -> bool:
        return self.player_id is not None

    @property
    def is_register(self) -> bool:
        return self.stage == AuthStage.REGISTER

    @property
    def editing_password(self) -> bool:
        """True when typed text goes to the password buffer."""
        return self.stage == AuthStage.PASSWORD or (self.is_register and self.password_stage)

    @property
    def masked_password(self) -> str:
        return "*" * len(self.password)

    def handle(self, intents: Iterable[object]) -> Optional[int]:
        """
        Process one tick of login-screen input.

        Returns:
            The player id once authentication has succeeded, else None.
        """
        for intent in intents:
            if self.done:
                break
            if isinstance(intent, TextEntry):
                self.type_text(intent.text)
            elif intent == Intent.BACKSPACE:
                self.backspace()
            elif intent == Intent.SELECT_LOGIN:
                self.select_login()
            elif intent == Intent.SELECT_REGISTER:
                self.select_register()
            elif intent == Intent.SUBMIT:
                self.submit()
        return self.player_id

    def type_text(self, text: str) -> None:
        for char in text:
            if not char.isprintable():
                continue
            if self.editing_password:
                if len(self.password) < self._max_length:
                    self.password += char
            elif len(self.username) < self._max_length:
                self.username += char

    def backspace(self) -> None:
        if self.editing_password:
            self.password = self.password[:-1]
        else:
            self.username = self.username[:-1]

    def select_login(self) -> None:
        if self.stage != AuthStage.USERNAME:
            return
        self._clear()
        self.error_message = ""

    def select_register(self) -> None:
        if self.stage != AuthStage.USERNAME:
            return
        self._clear()
        self.error_message = ""
        self.stage = AuthStage.REGISTER

    def submit(self) -> None:
        username = self.username.strip()
        password = self.password.strip()

        if self.stage == AuthStage.USERNAME:
            self._submit_username(username)
        elif self.stage == AuthStage.PASSWORD:
            self._submit_login(username, password)
        elif not self.password_stage:
            self._submit_new_username(username)
        else:
            self._submit_registration(username, password)

    def _submit_username(self, username: str) -> None:
        if not username:
            self.error_message = AuthError(AuthErrorKind.EMPTY_USERNAME).message
            return
        exists = self._user_exists(username)
        if exists is None:
            return
        if not exists:
            self.error_message = AuthError(AuthErrorKind.USER_NOT_FOUND).message
            return
        self.stage = AuthStage.PASSWORD
        self.error_message = ""
        self.password = ""

    def _submit_login(self, username: str, password: str) -> None:
        try:
            self.player_id = self._service.authenticate(username, password, False)
        except AuthError as e:
            self.error_message = e.message
            self.stage = AuthStage.USERNAME
            self.password = ""
        except PersistenceError as e:
            logger.warning("Login failed for '%s': %s", username, e)
            self.error_message = "Login unavailable, try again"
            self.stage = AuthStage.USERNAME
            self.password = ""

    def _submit_new_username(self, username: str) -> None:
        if not username:
            self.error_message = AuthError(AuthErrorKind.EMPTY_USERNAME).message
            return
        exists = self._user_exists(username)
        if exists is None:
            return
        if exists:
            self.error_message = AuthError(AuthErrorKind.USER_EXISTS).message
            self.username = ""
            return
        self.password_stage = True
        self.error_message = ""
        self.password = ""

    def _submit_registration(self, username: str, password: str) -> None:
        try:
            self.player_id = self._service.authenticate(username, password, True)
        except AuthError as e:
            self.error_message = e.message
            self._clear()
        except PersistenceError as e:
            logger.warning("Registration failed for '%s': %s", username, e)
            self.error_message = "Registration unavailable, try again"
            self._clear()

    def _user_exists(self, username: str) -> Optional[bool]:
        try:
            return self._service.user_exists(username)
        except PersistenceError as e:
            logger.warning("Failed to check username '%s': %s", username, e)
            self.error_message = "Failed to check username"
            return None

    def _clear(self) -> None:
        self.stage = AuthStage.USERNAME
        self.username = ""
        self.password = ""
        self.password_stage = False
