"""Board - piece placement on an 8x8 grid."""

from __future__ import annotations

from collections.abc import Iterator

from boardcore.core.enums import Color, PieceType
from boardcore.core.piece import Piece
from boardcore.core.types import Square

Grid = list[list["Piece | None"]]

_BACK_RANK: tuple[PieceType, ...] = (
    PieceType.ROOK,
    PieceType.KNIGHT,
    PieceType.BISHOP,
    PieceType.QUEEN,
    PieceType.KING,
    PieceType.BISHOP,
    PieceType.KNIGHT,
    PieceType.ROOK,
)


def _empty_grid() -> Grid:
    return [[None] * 8 for _ in range(8)]


class Board:
    """Mutable 8x8 grid of optional pieces, indexed ``[rank][file]``.

    Reads and writes are bounds-checked: an off-board square reads as empty
    and writes to one are ignored.
    """

    __slots__ = ("_grid",)

    def __init__(self) -> None:
        self._grid: Grid = _empty_grid()

    # -- Element access -----------------------------------------------------

    def __getitem__(self, sq: Square) -> Piece | None:
        file, rank = sq
        if 0 <= file < 8 and 0 <= rank < 8:
            return self._grid[rank][file]
        return None

    def __setitem__(self, sq: Square, piece: Piece | None) -> None:
        file, rank = sq
        if 0 <= file < 8 and 0 <= rank < 8:
            self._grid[rank][file] = piece

    def is_empty(self, sq: Square) -> bool:
        return self[sq] is None

    # -- Query helpers ------------------------------------------------------

    def occupied(self, color: Color | None = None) -> Iterator[tuple[Square, Piece]]:
        """Yield ``(square, piece)`` for every piece, optionally of one color."""
        for rank, row in enumerate(self._grid):
            for file, piece in enumerate(row):
                if piece is not None and (color is None or piece.color == color):
                    yield Square(file, rank), piece

    def find_king(self, color: Color) -> Square | None:
        """Scan for *color*'s king; ``None`` if it is not on the board."""
        for sq, piece in self.occupied(color):
            if piece.piece_type == PieceType.KING:
                return sq
        return None

    def count(self, color: Color, piece_type: PieceType) -> int:
        return sum(1 for _, p in self.occupied(color) if p.piece_type == piece_type)

    def snapshot(self) -> Grid:
        """Copy of the grid, rank 1 first; safe for callers to mutate."""
        return [row.copy() for row in self._grid]

    # -- Mutation / copying -------------------------------------------------

    def copy(self) -> Board:
        b = Board()
        b._grid = self.snapshot()
        return b

    # -- Factory ------------------------------------------------------------

    @classmethod
    def initial(cls) -> Board:
        """Standard starting position."""
        b = cls()
        for f, pt in enumerate(_BACK_RANK):
            b[Square(f, 0)] = Piece(Color.WHITE, pt)
            b[Square(f, 1)] = Piece(Color.WHITE, PieceType.PAWN)
            b[Square(f, 6)] = Piece(Color.BLACK, PieceType.PAWN)
            b[Square(f, 7)] = Piece(Color.BLACK, pt)
        return b

    @classmethod
    def from_grid(cls, grid: Grid) -> Board:
        """Build a board from a ``[rank][file]`` grid (rank 1 first)."""
        b = cls()
        for rank, row in enumerate(grid[:8]):
            for file, piece in enumerate(row[:8]):
                b._grid[rank][file] = piece
        return b

    # -- Dunder helpers -----------------------------------------------------

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Board):
            return NotImplemented
        return self._grid == other._grid

    def __repr__(self) -> str:
        rows: list[str] = []
        for rank in range(7, -1, -1):
            row = [str(p) if p else "." for p in self._grid[rank]]
            rows.append(f"{rank + 1} {' '.join(row)}")
        rows.append("  a b c d e f g h")
        return "\n".join(rows)
