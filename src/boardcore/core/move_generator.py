"""Movement patterns, attack detection and legality filtering."""

from __future__ import annotations

from typing import TYPE_CHECKING

from boardcore.core.enums import CastlingRights, Color, PieceType
from boardcore.core.move import Move
from boardcore.core.piece import Piece
from boardcore.core.types import Square

if TYPE_CHECKING:
    from boardcore.core.position import Position


KNIGHT_OFFSETS: tuple[tuple[int, int], ...] = (
    (2, 1),
    (2, -1),
    (-2, 1),
    (-2, -1),
    (1, 2),
    (1, -2),
    (-1, 2),
    (-1, -2),
)

KING_OFFSETS: tuple[tuple[int, int], ...] = (
    (1, 0),
    (-1, 0),
    (0, 1),
    (0, -1),
    (1, 1),
    (1, -1),
    (-1, 1),
    (-1, -1),
)

ROOK_DIRS: tuple[tuple[int, int], ...] = ((0, 1), (0, -1), (1, 0), (-1, 0))
BISHOP_DIRS: tuple[tuple[int, int], ...] = ((1, 1), (1, -1), (-1, 1), (-1, -1))
QUEEN_DIRS: tuple[tuple[int, int], ...] = ROOK_DIRS + BISHOP_DIRS

_KING_FILE = 4
_PAWN_START_RANK: dict[Color, int] = {Color.WHITE: 1, Color.BLACK: 6}


class MoveGenerator:
    """Generates targets and checks legality for a given :class:`Position`.

    Every piece family has exactly one traversal, parameterized by
    ``respect_occupancy``. With occupancy respected the result is the
    pseudo-legal move set; without it the result is the bare movement
    pattern used for premove hints. The two can therefore never disagree
    about how a piece moves.

    Legality checks temporarily alter the position's board and always
    restore it before returning.
    """

    __slots__ = ("_pos", "_board")

    def __init__(self, position: Position) -> None:
        self._pos = position
        self._board = position.board

    # -- Patterns -----------------------------------------------------------

    def movement_pattern(
        self,
        sq: Square,
        piece: Piece | None = None,
        *,
        respect_occupancy: bool = True,
    ) -> list[Square]:
        """Every destination of the piece on *sq*, castling included.

        *piece* may be given to evaluate a piece that is not (or not yet) on
        the board, e.g. a premove hint on a projected board.
        """
        if piece is None:
            piece = self._board[sq]
            if piece is None:
                return []
        targets = self._pattern(sq, piece, respect_occupancy)
        if piece.piece_type == PieceType.KING:
            self._castling_targets(sq, piece.color, respect_occupancy, targets)
        return targets

    def basic_targets(self, sq: Square, piece: Piece) -> list[Square]:
        """Occupancy-aware reach of *piece* without castling.

        This is what attack detection consumes; it never looks at castling,
        so check detection cannot re-enter castling validation.
        """
        return self._pattern(sq, piece, True)

    def _pattern(self, sq: Square, piece: Piece, respect: bool) -> list[Square]:
        targets: list[Square] = []
        ptype = piece.piece_type
        color = piece.color
        if ptype == PieceType.PAWN:
            self._pawn(sq, color, respect, targets)
        elif ptype == PieceType.KNIGHT:
            self._stepping(sq, color, KNIGHT_OFFSETS, respect, targets)
        elif ptype == PieceType.BISHOP:
            self._sliding(sq, color, BISHOP_DIRS, respect, targets)
        elif ptype == PieceType.ROOK:
            self._sliding(sq, color, ROOK_DIRS, respect, targets)
        elif ptype == PieceType.QUEEN:
            self._sliding(sq, color, QUEEN_DIRS, respect, targets)
        else:
            self._stepping(sq, color, KING_OFFSETS, respect, targets)
        return targets

    # -- Piece-family traversals (private) ----------------------------------

    def _pawn(
        self, sq: Square, color: Color, respect: bool, out: list[Square]
    ) -> None:
        board = self._board
        direction = color.pawn_direction

        one_step = sq.offset(0, direction)
        if one_step.on_board and (not respect or board.is_empty(one_step)):
            out.append(one_step)
            if sq.rank == _PAWN_START_RANK[color]:
                two_step = sq.offset(0, 2 * direction)
                if two_step.on_board and (not respect or board.is_empty(two_step)):
                    out.append(two_step)

        for df in (-1, 1):
            diag = sq.offset(df, direction)
            if not diag.on_board:
                continue
            if not respect:
                out.append(diag)
                continue
            target = board[diag]
            if target is not None:
                if target.color != color:
                    out.append(diag)
            elif diag == self._pos.en_passant:
                out.append(diag)

    def _sliding(
        self,
        sq: Square,
        color: Color,
        directions: tuple[tuple[int, int], ...],
        respect: bool,
        out: list[Square],
    ) -> None:
        board = self._board
        for df, dr in directions:
            to_sq = sq.offset(df, dr)
            while to_sq.on_board:
                if respect:
                    target = board[to_sq]
                    if target is not None:
                        if target.color != color:
                            out.append(to_sq)
                        break
                out.append(to_sq)
                to_sq = to_sq.offset(df, dr)

    def _stepping(
        self,
        sq: Square,
        color: Color,
        offsets: tuple[tuple[int, int], ...],
        respect: bool,
        out: list[Square],
    ) -> None:
        board = self._board
        for df, dr in offsets:
            to_sq = sq.offset(df, dr)
            if not to_sq.on_board:
                continue
            if respect:
                target = board[to_sq]
                if target is not None and target.color == color:
                    continue
            out.append(to_sq)

    def _castling_targets(
        self, sq: Square, color: Color, respect: bool, out: list[Square]
    ) -> None:
        home = color.home_rank
        if sq != Square(_KING_FILE, home):
            return
        if not respect:
            out.append(Square(6, home))
            out.append(Square(2, home))
            return
        if self.is_in_check(color):
            return
        if self.can_castle(color, kingside=True):
            out.append(Square(6, home))
        if self.can_castle(color, kingside=False):
            out.append(Square(2, home))

    # -- Attack detection ---------------------------------------------------

    def is_square_attacked(self, sq: Square, by_color: Color) -> bool:
        """Is *sq* within the basic reach of any piece of *by_color*?

        Pawns only reach a diagonal that holds a piece, so ask about
        occupied squares (the king's own square, typically).
        """
        for from_sq, piece in self._board.occupied(by_color):
            if sq in self.basic_targets(from_sq, piece):
                return True
        return False

    def is_in_check(self, color: Color) -> bool:
        """Is *color*'s king attacked? A missing king is never in check."""
        king_sq = self._board.find_king(color)
        if king_sq is None:
            return False
        return self.is_square_attacked(king_sq, color.opposite)

    def can_castle(self, color: Color, kingside: bool) -> bool:
        """Full castling precondition check for *color* on one wing."""
        if not self._pos.has_right(CastlingRights.for_side(color, kingside)):
            return False

        board = self._board
        rank = color.home_rank
        king_sq = Square(_KING_FILE, rank)
        king = board[king_sq]
        if king is None or not king.is_a(color, PieceType.KING):
            return False

        rook_file = 7 if kingside else 0
        rook = board[Square(rook_file, rank)]
        if rook is None or not rook.is_a(color, PieceType.ROOK):
            return False

        low, high = sorted((_KING_FILE, rook_file))
        for file in range(low + 1, high):
            if not board.is_empty(Square(file, rank)):
                return False

        direction = 1 if kingside else -1
        opponent = color.opposite
        for step in range(3):
            test_sq = Square(_KING_FILE + step * direction, rank)
            displaced = board[test_sq]
            board[test_sq] = king
            if test_sq != king_sq:
                board[king_sq] = None
            try:
                attacked = self.is_square_attacked(test_sq, opponent)
            finally:
                board[king_sq] = king
                if test_sq != king_sq:
                    board[test_sq] = displaced
            if attacked:
                return False
        return True

    # -- Legality filter ----------------------------------------------------

    def is_move_legal(self, from_sq: Square, to_sq: Square) -> bool:
        """Would moving *from_sq* → *to_sq* keep the mover's king safe?

        Castling is accepted as-is: :meth:`can_castle` already validated it
        while the destination was generated.
        """
        board = self._board
        piece = board[from_sq]
        if piece is None:
            return False
        if piece.piece_type == PieceType.KING and abs(to_sq.file - from_sq.file) == 2:
            return True

        pos = self._pos
        saved_en_passant = pos.en_passant
        captured_sq: Square | None = None
        captured: Piece | None = None
        if piece.piece_type == PieceType.PAWN and to_sq == pos.en_passant:
            captured_sq = Square(to_sq.file, to_sq.rank - piece.color.pawn_direction)
            captured = board[captured_sq]
            board[captured_sq] = None

        original_target = board[to_sq]
        board[to_sq] = piece
        board[from_sq] = None
        try:
            return not self.is_in_check(piece.color)
        finally:
            board[from_sq] = piece
            board[to_sq] = original_target
            if captured_sq is not None:
                board[captured_sq] = captured
            pos.en_passant = saved_en_passant

    def legal_targets(self, from_sq: Square) -> list[Square]:
        """Strictly legal destinations for the side to move's piece on *from_sq*."""
        piece = self._board[from_sq]
        if piece is None or piece.color != self._pos.side_to_move:
            return []
        return [
            to_sq
            for to_sq in self.movement_pattern(from_sq, piece)
            if self.is_move_legal(from_sq, to_sq)
        ]

    def generate_legal_moves(self) -> list[Move]:
        """All legal (from, to) pairs for the side to move.

        Promotions appear once, without a piece type; the engine facade
        expands them.
        """
        color = self._pos.side_to_move
        moves: list[Move] = []
        for from_sq, _piece in list(self._board.occupied(color)):
            for to_sq in self.legal_targets(from_sq):
                moves.append(Move(from_sq, to_sq))
        return moves

    def has_legal_move(self) -> bool:
        color = self._pos.side_to_move
        for from_sq, _piece in list(self._board.occupied(color)):
            if self.legal_targets(from_sq):
                return True
        return False
