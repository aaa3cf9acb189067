"""Piece value object."""

from __future__ import annotations

from dataclasses import dataclass

from boardcore.core.enums import Color, PieceType

# Lowercase letter per type; case carries the color in position text.
_TYPE_LETTERS: dict[PieceType, str] = {
    PieceType.PAWN: "p",
    PieceType.KNIGHT: "n",
    PieceType.BISHOP: "b",
    PieceType.ROOK: "r",
    PieceType.QUEEN: "q",
    PieceType.KING: "k",
}
_LETTER_TYPES: dict[str, PieceType] = {v: k for k, v in _TYPE_LETTERS.items()}


PROMOTION_TYPES: tuple[PieceType, ...] = (
    PieceType.QUEEN,
    PieceType.ROOK,
    PieceType.BISHOP,
    PieceType.KNIGHT,
)

# Per-side army at the start of a standard game.
INITIAL_COUNTS: dict[PieceType, int] = {
    PieceType.KING: 1,
    PieceType.QUEEN: 1,
    PieceType.ROOK: 2,
    PieceType.BISHOP: 2,
    PieceType.KNIGHT: 2,
    PieceType.PAWN: 8,
}


@dataclass(frozen=True, slots=True)
class Piece:
    """Immutable (color, type) pair.

    Being frozen, a piece can be shared between the live board and any copy
    handed out to callers without risk of aliasing bugs.
    """

    color: Color
    piece_type: PieceType

    def __str__(self) -> str:
        """Position-text letter (uppercase = white, lowercase = black)."""
        letter = _TYPE_LETTERS[self.piece_type]
        return letter.upper() if self.color == Color.WHITE else letter

    @classmethod
    def from_char(cls, char: str) -> Piece:
        """Create piece from its letter, e.g. 'N' → white knight."""
        ptype = _LETTER_TYPES.get(char.lower()) if len(char) == 1 else None
        if ptype is None:
            raise ValueError(f"Invalid piece character: {char!r}")
        color = Color.WHITE if char.isupper() else Color.BLACK
        return cls(color, ptype)

    def is_a(self, color: Color, piece_type: PieceType) -> bool:
        return self.color == color and self.piece_type == piece_type

    def promoted(self, piece_type: PieceType) -> Piece:
        """Same-colored piece of *piece_type* (pawn promotion)."""
        return Piece(self.color, piece_type)
