"""Game management layer: turn coordinator, players, premoves.

Quick start::

    from boardcore.core.enums import Color
    from boardcore.game import ExternalPlayer, TurnCoordinator

    async def engine_move(state, previous_move):
        return state.legal_moves[0]

    coordinator = TurnCoordinator(black=ExternalPlayer(Color.BLACK, engine_move))
    coordinator.start()
"""

from boardcore.game.config import CoordinatorConfig
from boardcore.game.coordinator import (
    CoordinatorEvents,
    PendingPromotion,
    TurnCoordinator,
)
from boardcore.game.errors import ChessError, ErrorKind
from boardcore.game.interfaces import (
    CoordinatorPhase,
    IPlayer,
    MoveAttempt,
    MoveSource,
)
from boardcore.game.player import ExternalPlayer, HumanPlayer
from boardcore.game.premove import PreMoveQueue

__all__ = [
    # Interfaces
    "CoordinatorPhase",
    "IPlayer",
    "MoveAttempt",
    "MoveSource",
    # Errors / config
    "ChessError",
    "CoordinatorConfig",
    "ErrorKind",
    # Concrete
    "CoordinatorEvents",
    "ExternalPlayer",
    "HumanPlayer",
    "PendingPromotion",
    "PreMoveQueue",
    "TurnCoordinator",
]
