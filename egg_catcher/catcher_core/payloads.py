"""
Payloads
========

Closed set of egg categories and the polarity flags derived from them.
"""

from __future__ import annotations

from enum import IntEnum


class Payload(IntEnum):
    """
    What a falling egg carries.

    Integer values are stable and used in observation arrays.
    """
    HARMFUL = 0       # Fake egg: catching it costs a life, letting it fall is safe
    BONUS_LIFE = 1    # White egg: scores and restores a life (up to the cap)
    BONUS_SCORE = 2   # Gold egg: scores

    @property
    def is_harmful(self) -> bool:
        return self is Payload.HARMFUL

    @property
    def restores_life(self) -> bool:
        return self is Payload.BONUS_LIFE

    @property
    def scores(self) -> bool:
        """True if catching this payload awards points."""
        return not self.is_harmful

    @property
    def label(self) -> str:
        return self.name.lower()
