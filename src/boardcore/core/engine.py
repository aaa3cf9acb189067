"""ChessEngine: the single owned rules-engine handle behind a board widget.

Queries flow position → generator → legality filter → snapshot; mutation
flows request → executor analysis → executor apply. Nothing outside the
executor writes to the live position.
"""

from __future__ import annotations

import dataclasses
import logging

from boardcore.core.board import Board, Grid
from boardcore.core.enums import CheckStatus, Color, GameEndReason, PieceType
from boardcore.core.executor import MoveExecutor
from boardcore.core.move import Move, MoveAnalysis, MoveResult
from boardcore.core.move_generator import MoveGenerator
from boardcore.core.notation import position_from_fen, position_to_fen
from boardcore.core.piece import INITIAL_COUNTS, PROMOTION_TYPES, Piece
from boardcore.core.position import Position
from boardcore.core.rules import Rules
from boardcore.core.state import CapturedPieces, GameResult, GameState
from boardcore.core.types import Square

_LOGGER = logging.getLogger(__name__)


class ChessEngine:
    """Rules engine for one game.

    Every read hands out copies, so callers can never reach into the live
    board. Create one engine per game; there is no shared global instance.
    """

    __slots__ = ("_position",)

    def __init__(self, position: Position | None = None) -> None:
        self._position = position if position is not None else Position.initial()

    # ── Read access ──────────────────────────────────────────────────────

    @property
    def position(self) -> Position:
        """Deep copy of the current position."""
        return self._position.copy()

    @property
    def side_to_move(self) -> Color:
        return self._position.side_to_move

    @property
    def last_move(self) -> Move | None:
        return self._position.last_move

    @property
    def move_history(self) -> tuple[Move, ...]:
        return tuple(self._position.history)

    def board_state(self) -> Grid:
        """Copy of the grid, ``[rank][file]`` with rank 1 first."""
        return self._position.board.snapshot()

    def board(self) -> Board:
        """Copy of the live board."""
        return self._position.board.copy()

    def get_piece(self, sq: Square) -> Piece | None:
        return self._position.board[sq]

    def to_fen(self) -> str:
        return position_to_fen(self._position)

    # ── Move queries ─────────────────────────────────────────────────────

    def valid_moves(self, from_sq: Square) -> list[Square]:
        """Legal destinations of the side to move's piece on *from_sq*."""
        return MoveGenerator(self._position).legal_targets(from_sq)

    def potential_moves(
        self,
        from_sq: Square,
        *,
        ignore_blocking: bool = False,
        include_illegal: bool = False,
        for_premove: bool = False,
        for_any_color: bool = False,
        board: Board | None = None,
    ) -> list[Square]:
        """Destinations for move hints.

        ``for_premove`` implies both ``ignore_blocking`` and
        ``include_illegal`` and allows either color. *board* replaces the
        live placement, e.g. a board with queued premoves already applied.
        """
        position = self._position
        if board is not None:
            position = position.copy()
            position.board = board.copy()

        piece = position.board[from_sq]
        if piece is None:
            return []
        if not (for_any_color or for_premove) and piece.color != position.side_to_move:
            return []

        gen = MoveGenerator(position)
        pattern_only = ignore_blocking or for_premove
        targets = gen.movement_pattern(
            from_sq, piece, respect_occupancy=not pattern_only
        )
        if include_illegal or for_premove:
            return targets
        return [to_sq for to_sq in targets if gen.is_move_legal(from_sq, to_sq)]

    def basic_movement_pattern(
        self, piece_type: PieceType, from_sq: Square, color: Color
    ) -> list[Square]:
        """Bare movement pattern of a hypothetical piece, ignoring all rules."""
        gen = MoveGenerator(self._position)
        return gen.movement_pattern(
            from_sq, Piece(color, piece_type), respect_occupancy=False
        )

    def is_king_in_check(self, color: Color) -> bool:
        return MoveGenerator(self._position).is_in_check(color)

    def is_valid_move(
        self,
        from_sq: Square,
        to_sq: Square,
        promotion: PieceType | None = None,
    ) -> MoveAnalysis:
        return MoveExecutor(self._position).analyze(from_sq, to_sq, promotion)

    # ── Mutation ─────────────────────────────────────────────────────────

    def make_move(
        self,
        from_sq: Square,
        to_sq: Square,
        promotion: PieceType | None = None,
    ) -> MoveResult:
        """Validate and apply a move; the board is untouched on failure."""
        result = MoveExecutor(self._position).execute(from_sq, to_sq, promotion)
        if not result.success:
            return result
        status = Rules.check_status(self._position)
        if status != result.check_status:
            result = dataclasses.replace(result, check_status=status)
        return result

    def play(self, move: Move) -> MoveResult:
        return self.make_move(move.from_sq, move.to_sq, move.promotion)

    def set_position(self, fen: str) -> bool:
        """Load position text. On failure returns ``False`` and keeps the
        current position untouched."""
        try:
            loaded = position_from_fen(fen)
        except ValueError as exc:
            _LOGGER.warning("Rejected position text %r: %s", fen, exc)
            return False
        self._position.replace_with(loaded)
        return True

    def reset(self) -> None:
        """Restore the standard opening position."""
        self._position.replace_with(Position.initial())

    # ── Snapshot ─────────────────────────────────────────────────────────

    def legal_moves(self) -> list[Move]:
        """Every legal move for the side to move, one per promotion choice."""
        gen = MoveGenerator(self._position)
        board = self._position.board
        moves: list[Move] = []
        for move in gen.generate_legal_moves():
            piece = board[move.from_sq]
            assert piece is not None
            if MoveExecutor.requires_promotion(piece, move.to_sq):
                moves.extend(
                    Move(move.from_sq, move.to_sq, pt) for pt in PROMOTION_TYPES
                )
            else:
                moves.append(move)
        return moves

    def captured_pieces(self) -> CapturedPieces:
        board = self._position.board
        missing: dict[Color, list[Piece]] = {Color.WHITE: [], Color.BLACK: []}
        for color, pieces in missing.items():
            for piece_type, initial in INITIAL_COUNTS.items():
                remaining = board.count(color, piece_type)
                pieces.extend(
                    Piece(color, piece_type) for _ in range(initial - remaining)
                )
        return CapturedPieces(
            white=tuple(missing[Color.WHITE]), black=tuple(missing[Color.BLACK])
        )

    def game_state(self) -> GameState:
        """Fresh snapshot of the game from the side to move's point of view."""
        pos = self._position
        legal = self.legal_moves()
        is_check = self.is_king_in_check(pos.side_to_move)
        result: GameResult | None = None
        if not legal:
            if is_check:
                result = GameResult(
                    winner=pos.side_to_move.opposite, reason=GameEndReason.CHECKMATE
                )
            else:
                result = GameResult(winner=None, reason=GameEndReason.STALEMATE)
        return GameState(
            fen=position_to_fen(pos),
            side_to_move=pos.side_to_move,
            legal_moves=tuple(legal),
            is_check=is_check,
            is_game_over=not legal,
            result=result,
            move_history=tuple(pos.history),
            captured=self.captured_pieces(),
        )

    def check_status(self) -> CheckStatus:
        return Rules.check_status(self._position)
