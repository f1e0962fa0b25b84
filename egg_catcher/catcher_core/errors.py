"""
Errors
======

Error taxonomy shared by the core and its service collaborators.
"""

from __future__ import annotations

from enum import Enum


class AuthErrorKind(Enum):
    """Why an authentication attempt was rejected."""
    EMPTY_USERNAME = "empty_username"
    EMPTY_PASSWORD = "empty_password"
    USER_EXISTS = "user_exists"
    USER_NOT_FOUND = "user_not_found"
    BAD_PASSWORD = "bad_password"


_AUTH_MESSAGES = {
    AuthErrorKind.EMPTY_USERNAME: "Username cannot be empty",
    AuthErrorKind.EMPTY_PASSWORD: "Password cannot be empty",
    AuthErrorKind.USER_EXISTS: "Username already taken",
    AuthErrorKind.USER_NOT_FOUND: "User does not exist",
    AuthErrorKind.BAD_PASSWORD: "Incorrect password",
}


class AuthError(Exception):
    """
    User-facing authentication failure.

    Non-fatal: the login flow shows the message and stays on the login screen.
    """

    def __init__(self, kind: AuthErrorKind, message: str = ""):
        self.kind = kind
        self.message = message or _AUTH_MESSAGES[kind]
        super().__init__(self.message)


class PersistenceError(Exception):
    """A player record or session result could not be read or written."""


class InvariantViolation(AssertionError):
    """Programmer error inside the simulation (never raised by valid input)."""
