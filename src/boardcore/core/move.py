"""Move value object plus the analysis/result records produced by the executor."""

from __future__ import annotations

from dataclasses import dataclass

from boardcore.core.enums import CheckStatus, MoveCategory, PieceType
from boardcore.core.piece import Piece
from boardcore.core.types import Square, parse_square, square_name

_PROMO_CHARS: dict[PieceType, str] = {
    PieceType.KNIGHT: "n",
    PieceType.BISHOP: "b",
    PieceType.ROOK: "r",
    PieceType.QUEEN: "q",
}
_PROMO_TYPES: dict[str, PieceType] = {v: k for k, v in _PROMO_CHARS.items()}


@dataclass(frozen=True, slots=True)
class Move:
    """A requested or committed move: origin, destination, optional promotion."""

    from_sq: Square
    to_sq: Square
    promotion: PieceType | None = None

    # ── Display ──────────────────────────────────────────────────────────

    def __str__(self) -> str:
        base = f"{square_name(self.from_sq)}{square_name(self.to_sq)}"
        if self.promotion is not None:
            base += _PROMO_CHARS.get(self.promotion, "")
        return base

    @property
    def uci(self) -> str:
        """UCI long-algebraic notation."""
        return str(self)

    @classmethod
    def from_uci(cls, text: str) -> Move:
        """Parse ``e2e4`` / ``e7e8q``."""
        if len(text) not in (4, 5):
            raise ValueError(f"Invalid UCI move: {text!r}")
        promotion: PieceType | None = None
        if len(text) == 5:
            promotion = _PROMO_TYPES.get(text[4].lower())
            if promotion is None:
                raise ValueError(f"Invalid promotion piece in move: {text!r}")
        return cls(parse_square(text[:2]), parse_square(text[2:4]), promotion)


@dataclass(frozen=True, slots=True)
class CompanionMove:
    """A second piece relocated by the same move (the rook when castling)."""

    from_sq: Square
    to_sq: Square
    piece: Piece


@dataclass(frozen=True, slots=True)
class MoveAnalysis:
    """Outcome of validating a move request against the current position.

    ``valid`` with ``promotion_required`` means the move is legal but cannot
    be executed until a promotion piece is chosen.
    """

    valid: bool
    from_sq: Square | None = None
    to_sq: Square | None = None
    piece: Piece | None = None
    category: MoveCategory | None = None
    captured_piece: Piece | None = None
    companion_moves: tuple[CompanionMove, ...] = ()
    promotion: PieceType | None = None
    promotion_required: bool = False

    @property
    def executable(self) -> bool:
        return self.valid and not self.promotion_required

    @classmethod
    def invalid(cls) -> MoveAnalysis:
        return cls(valid=False)


@dataclass(frozen=True, slots=True)
class MoveResult:
    """Outcome of an attempt to execute a move."""

    success: bool
    category: MoveCategory | None = None
    captured_piece: Piece | None = None
    companion_moves: tuple[CompanionMove, ...] = ()
    promotion_required: bool = False
    check_status: CheckStatus | None = None
    move: Move | None = None

    @classmethod
    def failed(cls, *, promotion_required: bool = False) -> MoveResult:
        return cls(success=False, promotion_required=promotion_required)
