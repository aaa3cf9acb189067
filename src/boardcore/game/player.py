"""Concrete player implementations."""

from __future__ import annotations

from collections.abc import Awaitable
from typing import TYPE_CHECKING

from boardcore.core.enums import Color
from boardcore.game.interfaces import IPlayer, MoveSource

if TYPE_CHECKING:
    from boardcore.core.move import Move
    from boardcore.core.state import GameState


class HumanPlayer(IPlayer):
    """A human participant whose moves come from the board widget.

    Human moves arrive via ``TurnCoordinator.submit_move()``.
    """

    __slots__ = ("_color", "_name")

    def __init__(self, color: Color, name: str = "") -> None:
        self._color = color
        self._name = name or f"Player ({color})"

    @property
    def color(self) -> Color:
        return self._color

    @property
    def name(self) -> str:
        return self._name

    @property
    def is_human(self) -> bool:
        return True


class ExternalPlayer(IPlayer):
    """A participant whose moves come from an asynchronous source.

    The source is any ``async (GameState, previous_move) -> Move`` callable:
    an engine process, a network opponent, a scripted test double. The
    coordinator awaits at most one request per turn and discards answers
    that arrive after the turn has been invalidated.

    Args:
        color: Side this player moves.
        source: Coroutine function producing the next move.
        name: Display name.
    """

    __slots__ = ("_color", "_name", "_source")

    def __init__(self, color: Color, source: MoveSource, name: str = "External") -> None:
        self._color = color
        self._source = source
        self._name = name

    @property
    def color(self) -> Color:
        return self._color

    @property
    def name(self) -> str:
        return self._name

    @property
    def is_human(self) -> bool:
        return False

    def request_move(self, state: GameState, previous_move: Move | None) -> Awaitable[Move]:
        """Ask the source for a move; *previous_move* is the opponent's last."""
        return self._source(state, previous_move)
