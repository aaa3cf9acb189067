"""Abstract interfaces and state enums for the game layer.

The coordinator depends on these, not on concrete player classes.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Awaitable, Callable
from enum import IntEnum, auto
from typing import TYPE_CHECKING

from boardcore.core.enums import Color

if TYPE_CHECKING:
    from boardcore.core.move import Move
    from boardcore.core.state import GameState


# ── Coordinator FSM states ───────────────────────────────────────────────────


class CoordinatorPhase(IntEnum):
    """Finite-state-machine states of the turn coordinator."""

    IDLE = auto()
    HUMAN_TO_MOVE = auto()
    EXTERNAL_MOVE_REQUESTED = auto()
    EXTERNAL_THINKING = auto()
    ANIMATING = auto()
    PROMOTION_PENDING = auto()
    GAME_OVER = auto()


class MoveAttempt(IntEnum):
    """What happened to a human move attempt."""

    REJECTED = 0
    APPLIED = auto()
    QUEUED = auto()  # stored as a premove
    PROMOTION_PENDING = auto()


# ``async (state, opponent's previous move) -> move``
MoveSource = Callable[["GameState", "Move | None"], Awaitable["Move"]]


# ── Abstract interfaces ─────────────────────────────────────────────────────


class IPlayer(ABC):
    """Interface for a game participant (human or external source)."""

    @property
    @abstractmethod
    def color(self) -> Color: ...

    @property
    @abstractmethod
    def name(self) -> str: ...

    @property
    @abstractmethod
    def is_human(self) -> bool: ...
