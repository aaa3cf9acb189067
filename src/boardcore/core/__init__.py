"""Core domain layer: pure chess rules with zero external dependencies.

Quick start::

    from boardcore.core import ChessEngine, parse_square

    engine = ChessEngine()
    result = engine.make_move(parse_square("e2"), parse_square("e4"))
    state = engine.game_state()
    print(state.fen, len(state.legal_moves))
"""

from boardcore.core.board import Board
from boardcore.core.engine import ChessEngine
from boardcore.core.enums import (
    CastlingRights,
    CheckStatus,
    Color,
    GameEndReason,
    MoveCategory,
    PieceType,
)
from boardcore.core.executor import MoveExecutor
from boardcore.core.move import CompanionMove, Move, MoveAnalysis, MoveResult
from boardcore.core.move_generator import MoveGenerator
from boardcore.core.notation import STARTING_FEN, position_from_fen, position_to_fen
from boardcore.core.piece import PROMOTION_TYPES, Piece
from boardcore.core.position import Position
from boardcore.core.rules import Rules
from boardcore.core.state import CapturedPieces, GameResult, GameState
from boardcore.core.types import Square, parse_square, square_name

__all__ = [
    # Enums / flags
    "CastlingRights",
    "CheckStatus",
    "Color",
    "GameEndReason",
    "MoveCategory",
    "PieceType",
    # Types / helpers
    "Square",
    "parse_square",
    "square_name",
    # Domain objects
    "Board",
    "ChessEngine",
    "CompanionMove",
    "Move",
    "MoveAnalysis",
    "MoveExecutor",
    "MoveGenerator",
    "MoveResult",
    "PROMOTION_TYPES",
    "Piece",
    "Position",
    "Rules",
    # Snapshots
    "CapturedPieces",
    "GameResult",
    "GameState",
    # Notation
    "STARTING_FEN",
    "position_from_fen",
    "position_to_fen",
]
