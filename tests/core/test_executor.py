"""Tests for MoveExecutor: analysis and atomic application."""

import pytest

from boardcore.core.enums import CastlingRights, CheckStatus, Color, MoveCategory, PieceType
from boardcore.core.executor import MoveExecutor
from boardcore.core.move import CompanionMove, Move
from boardcore.core.notation import position_from_fen, position_to_fen
from boardcore.core.piece import Piece
from boardcore.core.position import Position
from boardcore.core.types import (
    A1, A2, A8, C1, D1, D5, D6, D8, E1, E2, E4, E5, E7, E8, F1, G1, H1,
    parse_square,
)

CASTLE_FEN = "r3k2r/8/8/8/8/8/8/R3K2R w KQkq - 0 1"
PROMO_FEN = "8/4P3/8/8/8/8/8/k3K3 w - - 0 1"


def _exec(fen: str) -> tuple[Position, MoveExecutor]:
    pos = position_from_fen(fen)
    return pos, MoveExecutor(pos)


class TestAnalyze:
    def test_normal_move(self) -> None:
        _, ex = _exec("rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR w KQkq - 0 1")
        analysis = ex.analyze(E2, E4)
        assert analysis.executable
        assert analysis.category == MoveCategory.NORMAL
        assert analysis.piece == Piece(Color.WHITE, PieceType.PAWN)

    def test_wrong_color(self) -> None:
        _, ex = _exec(CASTLE_FEN)
        assert not ex.analyze(E8, parse_square("f8")).valid

    def test_empty_square(self) -> None:
        _, ex = _exec(CASTLE_FEN)
        assert not ex.analyze(E4, E5).valid

    def test_castling_is_detected_from_geometry(self) -> None:
        _, ex = _exec(CASTLE_FEN)
        analysis = ex.analyze(E1, G1)
        assert analysis.category == MoveCategory.CASTLING
        assert analysis.companion_moves == (
            CompanionMove(H1, F1, Piece(Color.WHITE, PieceType.ROOK)),
        )

    def test_promotion_without_piece_is_flagged(self) -> None:
        _, ex = _exec(PROMO_FEN)
        analysis = ex.analyze(E7, E8)
        assert analysis.valid
        assert analysis.promotion_required
        assert not analysis.executable

    def test_promotion_to_king_is_invalid(self) -> None:
        _, ex = _exec(PROMO_FEN)
        assert not ex.analyze(E7, E8, PieceType.KING).valid

    def test_analysis_does_not_mutate(self) -> None:
        pos, ex = _exec(CASTLE_FEN)
        before = position_to_fen(pos)
        ex.analyze(E1, G1)
        ex.analyze(E1, C1)
        assert position_to_fen(pos) == before


class TestExecute:
    def test_illegal_move_is_atomic(self) -> None:
        pos, ex = _exec(CASTLE_FEN)
        before = position_to_fen(pos)
        result = ex.execute(E1, parse_square("e3"))
        assert not result.success
        assert position_to_fen(pos) == before
        assert pos.history == []

    def test_capture(self) -> None:
        pos, ex = _exec("4k3/8/8/3p4/4P3/8/8/4K3 w - - 3 7")
        result = ex.execute(E4, D5)
        assert result.success
        assert result.category == MoveCategory.CAPTURE
        assert result.captured_piece == Piece(Color.BLACK, PieceType.PAWN)
        assert pos.halfmove_clock == 0

    def test_history_and_result_move(self) -> None:
        pos, ex = _exec("rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR w KQkq - 0 1")
        result = ex.execute(E2, E4)
        assert result.move == Move(E2, E4)
        assert pos.history == [Move(E2, E4)]
        assert pos.last_move == Move(E2, E4)

    def test_apply_rejects_unvalidated(self) -> None:
        _, ex = _exec(PROMO_FEN)
        with pytest.raises(ValueError):
            ex.apply(ex.analyze(E7, E8))

    def test_check_status_reported(self) -> None:
        _, ex = _exec("4k3/8/8/8/8/8/8/R3K3 w - - 0 1")
        result = ex.execute(A1, A8)
        assert result.check_status == CheckStatus.CHECK


class TestCastlingExecution:
    def test_kingside(self) -> None:
        pos, ex = _exec(CASTLE_FEN)
        result = ex.execute(E1, G1)
        assert result.category == MoveCategory.CASTLING
        assert pos.board[G1] == Piece(Color.WHITE, PieceType.KING)
        assert pos.board[F1] == Piece(Color.WHITE, PieceType.ROOK)
        assert pos.board[H1] is None and pos.board[E1] is None
        assert not pos.has_right(CastlingRights.WHITE_BOTH)
        assert pos.has_right(CastlingRights.BLACK_BOTH)

    def test_queenside(self) -> None:
        pos, ex = _exec(CASTLE_FEN)
        ex.execute(E1, C1)
        assert pos.board[C1] == Piece(Color.WHITE, PieceType.KING)
        assert pos.board[D1] == Piece(Color.WHITE, PieceType.ROOK)
        assert pos.board[A1] is None

    def test_rook_move_revokes_one_side(self) -> None:
        pos, ex = _exec(CASTLE_FEN)
        ex.execute(A1, A2)
        assert pos.castling == CastlingRights.WHITE_KINGSIDE | CastlingRights.BLACK_BOTH

    def test_capturing_corner_rook_revokes_both(self) -> None:
        pos, ex = _exec(CASTLE_FEN)
        ex.execute(A1, A8)
        assert position_to_fen(pos).split()[2] == "Kk"

    def test_king_move_revokes_both(self) -> None:
        pos, ex = _exec(CASTLE_FEN)
        ex.execute(E1, E2)
        assert not pos.has_right(CastlingRights.WHITE_BOTH)


class TestEnPassantExecution:
    def test_double_push_sets_target(self) -> None:
        pos, ex = _exec("rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR w KQkq - 0 1")
        ex.execute(E2, E4)
        assert pos.en_passant == parse_square("e3")

    def test_capture_removes_passed_pawn(self) -> None:
        pos, ex = _exec("4k3/8/8/3pP3/8/8/8/4K3 w - d6 0 1")
        result = ex.execute(E5, D6)
        assert result.category == MoveCategory.EN_PASSANT
        assert result.captured_piece == Piece(Color.BLACK, PieceType.PAWN)
        assert pos.board[D5] is None
        assert pos.board[D6] == Piece(Color.WHITE, PieceType.PAWN)

    def test_target_expires_after_one_move(self) -> None:
        pos, ex = _exec("4k3/8/8/3pP3/8/8/8/4K3 w - d6 0 1")
        ex.execute(E1, E2)
        assert pos.en_passant is None


class TestPromotionExecution:
    def test_missing_piece_leaves_board_untouched(self) -> None:
        pos, ex = _exec(PROMO_FEN)
        result = ex.execute(E7, E8)
        assert not result.success
        assert result.promotion_required
        assert position_to_fen(pos).startswith("8/4P3/")

    @pytest.mark.parametrize(
        "piece_type",
        [PieceType.QUEEN, PieceType.ROOK, PieceType.BISHOP, PieceType.KNIGHT],
    )
    def test_each_choice(self, piece_type: PieceType) -> None:
        pos, ex = _exec(PROMO_FEN)
        result = ex.execute(E7, E8, piece_type)
        assert result.success
        assert result.category == MoveCategory.PROMOTION
        assert pos.board[E8] == Piece(Color.WHITE, piece_type)
        assert pos.board[E7] is None

    def test_capture_promotion(self) -> None:
        pos, ex = _exec("3r4/4P3/8/8/8/8/8/k3K3 w - - 0 1")
        result = ex.execute(E7, D8, PieceType.KNIGHT)
        assert result.category == MoveCategory.PROMOTION
        assert result.captured_piece == Piece(Color.BLACK, PieceType.ROOK)
        assert pos.board[D8] == Piece(Color.WHITE, PieceType.KNIGHT)


class TestCounters:
    def test_knight_move_increments_halfmove(self) -> None:
        pos, ex = _exec("rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR w KQkq - 4 9")
        ex.execute(G1, parse_square("f3"))
        assert pos.halfmove_clock == 5
        assert pos.fullmove_number == 9

    def test_fullmove_increments_after_black(self) -> None:
        pos, ex = _exec("rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR b KQkq - 0 1")
        ex.execute(parse_square("g8"), parse_square("f6"))
        assert pos.fullmove_number == 2
        assert pos.side_to_move == Color.WHITE

    def test_pawn_move_resets_halfmove(self) -> None:
        pos, ex = _exec("rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR w KQkq - 12 30")
        ex.execute(E2, E4)
        assert pos.halfmove_clock == 0
