"""Move executor: the only code path that mutates a live position."""

from __future__ import annotations

import logging

from boardcore.core.enums import (
    CastlingRights,
    CheckStatus,
    Color,
    MoveCategory,
    PieceType,
)
from boardcore.core.move import CompanionMove, Move, MoveAnalysis, MoveResult
from boardcore.core.move_generator import MoveGenerator
from boardcore.core.piece import PROMOTION_TYPES, Piece
from boardcore.core.position import Position
from boardcore.core.types import Square

_LOGGER = logging.getLogger(__name__)

_ROOK_CORNERS: dict[Square, CastlingRights] = {
    Square(0, 0): CastlingRights.WHITE_QUEENSIDE,
    Square(7, 0): CastlingRights.WHITE_KINGSIDE,
    Square(0, 7): CastlingRights.BLACK_QUEENSIDE,
    Square(7, 7): CastlingRights.BLACK_KINGSIDE,
}


class MoveExecutor:
    """Validates move requests and applies them to a :class:`Position`.

    :meth:`analyze` never trusts the caller's idea of what kind of move is
    being made: it re-derives the category from the legal move set.
    :meth:`execute` runs :meth:`analyze` first and touches the position only
    once the analysis is complete and executable.
    """

    __slots__ = ("_pos",)

    def __init__(self, position: Position) -> None:
        self._pos = position

    # ── Analysis ─────────────────────────────────────────────────────────

    @staticmethod
    def requires_promotion(piece: Piece, to_sq: Square) -> bool:
        """Does *piece* landing on *to_sq* have to promote?"""
        return (
            piece.piece_type == PieceType.PAWN
            and to_sq.rank == piece.color.opposite.home_rank
        )

    def analyze(
        self,
        from_sq: Square,
        to_sq: Square,
        promotion: PieceType | None = None,
    ) -> MoveAnalysis:
        pos = self._pos
        board = pos.board
        piece = board[from_sq]
        if piece is None or piece.color != pos.side_to_move:
            return MoveAnalysis.invalid()

        if to_sq not in MoveGenerator(pos).legal_targets(from_sq):
            return MoveAnalysis.invalid()

        target = board[to_sq]
        category = MoveCategory.NORMAL
        captured: Piece | None = None
        companions: tuple[CompanionMove, ...] = ()
        promotion_required = False

        if piece.piece_type == PieceType.KING and abs(to_sq.file - from_sq.file) == 2:
            category = MoveCategory.CASTLING
            kingside = to_sq.file > from_sq.file
            rook_from = Square(7 if kingside else 0, from_sq.rank)
            rook_to = Square(5 if kingside else 3, from_sq.rank)
            rook = board[rook_from]
            if rook is not None:
                companions = (CompanionMove(rook_from, rook_to, rook),)
        elif piece.piece_type == PieceType.PAWN:
            if to_sq == pos.en_passant:
                category = MoveCategory.EN_PASSANT
                captured = board[
                    Square(to_sq.file, to_sq.rank - piece.color.pawn_direction)
                ]
            elif self.requires_promotion(piece, to_sq):
                category = MoveCategory.PROMOTION
                captured = target
                if promotion is None:
                    promotion_required = True
                elif promotion not in PROMOTION_TYPES:
                    return MoveAnalysis.invalid()
            elif target is not None:
                category = MoveCategory.CAPTURE
                captured = target
        elif target is not None:
            category = MoveCategory.CAPTURE
            captured = target

        return MoveAnalysis(
            valid=True,
            from_sq=from_sq,
            to_sq=to_sq,
            piece=piece,
            category=category,
            captured_piece=captured,
            companion_moves=companions,
            promotion=promotion if category == MoveCategory.PROMOTION else None,
            promotion_required=promotion_required,
        )

    # ── Execution ────────────────────────────────────────────────────────

    def execute(
        self,
        from_sq: Square,
        to_sq: Square,
        promotion: PieceType | None = None,
    ) -> MoveResult:
        """Validate, then apply. Returns a failed result without mutating
        anything when the move is illegal or still needs a promotion piece."""
        analysis = self.analyze(from_sq, to_sq, promotion)
        if not analysis.executable:
            return MoveResult.failed(promotion_required=analysis.promotion_required)
        return self.apply(analysis)

    def apply(self, analysis: MoveAnalysis) -> MoveResult:
        """Apply an executable analysis produced by :meth:`analyze` on this
        same position."""
        if not analysis.executable:
            raise ValueError("Cannot apply a move that has not been validated")
        assert analysis.from_sq is not None and analysis.to_sq is not None
        assert analysis.piece is not None and analysis.category is not None

        pos = self._pos
        board = pos.board
        from_sq, to_sq, piece = analysis.from_sq, analysis.to_sq, analysis.piece
        category = analysis.category

        pos.en_passant = None

        if category == MoveCategory.CASTLING:
            board[to_sq] = piece
            board[from_sq] = None
            for companion in analysis.companion_moves:
                board[companion.to_sq] = companion.piece
                board[companion.from_sq] = None
        elif category == MoveCategory.EN_PASSANT:
            board[Square(to_sq.file, from_sq.rank)] = None
            board[to_sq] = piece
            board[from_sq] = None
        elif category == MoveCategory.PROMOTION:
            assert analysis.promotion is not None
            board[to_sq] = piece.promoted(analysis.promotion)
            board[from_sq] = None
        else:
            if piece.piece_type == PieceType.PAWN and abs(to_sq.rank - from_sq.rank) == 2:
                pos.en_passant = Square(
                    from_sq.file, from_sq.rank + piece.color.pawn_direction
                )
            board[to_sq] = piece
            board[from_sq] = None

        self._update_castling(from_sq, to_sq, piece)

        if piece.piece_type == PieceType.PAWN or analysis.captured_piece is not None:
            pos.halfmove_clock = 0
        else:
            pos.halfmove_clock += 1

        move = Move(from_sq, to_sq, analysis.promotion)
        pos.history.append(move)

        if pos.side_to_move == Color.BLACK:
            pos.fullmove_number += 1
        pos.side_to_move = pos.side_to_move.opposite

        in_check = MoveGenerator(pos).is_in_check(pos.side_to_move)
        _LOGGER.debug("Applied %s (%s)", move, category.value)
        return MoveResult(
            success=True,
            category=category,
            captured_piece=analysis.captured_piece,
            companion_moves=analysis.companion_moves,
            check_status=CheckStatus.CHECK if in_check else CheckStatus.NONE,
            move=move,
        )

    # ── Castling bookkeeping ─────────────────────────────────────────────

    def _update_castling(self, from_sq: Square, to_sq: Square, piece: Piece) -> None:
        pos = self._pos
        if piece.piece_type == PieceType.KING:
            pos.revoke(CastlingRights.for_color(piece.color))
        for sq in (from_sq, to_sq):
            right = _ROOK_CORNERS.get(sq)
            if right is not None:
                pos.revoke(right)
