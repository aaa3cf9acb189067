"""Immutable game snapshots handed to board consumers and move sources."""

from __future__ import annotations

from dataclasses import dataclass

from boardcore.core.enums import Color, GameEndReason
from boardcore.core.move import Move
from boardcore.core.piece import Piece


@dataclass(frozen=True, slots=True)
class GameResult:
    """How a game finished. ``winner`` is ``None`` for drawn outcomes."""

    winner: Color | None
    reason: GameEndReason


@dataclass(frozen=True, slots=True)
class CapturedPieces:
    """Pieces missing from each side's starting army.

    Derived by comparing piece counts with the initial army, so a pawn that
    promoted shows up as a "captured" pawn, and extra promoted pieces are
    never negative.
    """

    white: tuple[Piece, ...] = ()
    black: tuple[Piece, ...] = ()


@dataclass(frozen=True, slots=True)
class GameState:
    """Per-ply snapshot. Always rebuilt from the engine, never mutated."""

    fen: str
    side_to_move: Color
    legal_moves: tuple[Move, ...]
    is_check: bool
    is_game_over: bool
    result: GameResult | None
    move_history: tuple[Move, ...]
    captured: CapturedPieces

    @property
    def last_move(self) -> Move | None:
        return self.move_history[-1] if self.move_history else None

    def is_legal(self, move: Move) -> bool:
        return move in self.legal_moves
