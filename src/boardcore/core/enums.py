"""Core enumerations and flags for the rules engine."""

from __future__ import annotations

from enum import Enum, IntEnum, IntFlag, auto


class Color(IntEnum):
    """Side color."""

    WHITE = 0
    BLACK = 1

    @property
    def opposite(self) -> Color:
        return Color(1 - self.value)

    @property
    def home_rank(self) -> int:
        """Back rank index of this side's pieces."""
        return 0 if self == Color.WHITE else 7

    @property
    def pawn_direction(self) -> int:
        return 1 if self == Color.WHITE else -1

    def __str__(self) -> str:
        return self.name.lower()


class PieceType(IntEnum):
    """Chess piece types ordered by conventional value."""

    PAWN = 1
    KNIGHT = 2
    BISHOP = 3
    ROOK = 4
    QUEEN = 5
    KING = 6


class CastlingRights(IntFlag):
    """Bitmask for castling availability."""

    NONE = 0
    WHITE_KINGSIDE = auto()
    WHITE_QUEENSIDE = auto()
    BLACK_KINGSIDE = auto()
    BLACK_QUEENSIDE = auto()

    WHITE_BOTH = WHITE_KINGSIDE | WHITE_QUEENSIDE
    BLACK_BOTH = BLACK_KINGSIDE | BLACK_QUEENSIDE
    ALL = WHITE_BOTH | BLACK_BOTH

    @classmethod
    def for_side(cls, color: Color, kingside: bool) -> CastlingRights:
        if color == Color.WHITE:
            return cls.WHITE_KINGSIDE if kingside else cls.WHITE_QUEENSIDE
        return cls.BLACK_KINGSIDE if kingside else cls.BLACK_QUEENSIDE

    @classmethod
    def for_color(cls, color: Color) -> CastlingRights:
        return cls.WHITE_BOTH if color == Color.WHITE else cls.BLACK_BOTH


class MoveCategory(str, Enum):
    """Classification of a move, re-derived by the executor."""

    NORMAL = "normal"
    CAPTURE = "capture"
    CASTLING = "castling"
    EN_PASSANT = "enPassant"
    PROMOTION = "promotion"


class CheckStatus(str, Enum):
    """Check state of the side to move after a move."""

    NONE = "none"
    CHECK = "check"
    CHECKMATE = "checkmate"
    STALEMATE = "stalemate"


class GameEndReason(str, Enum):
    """Why a game finished."""

    CHECKMATE = "checkmate"
    STALEMATE = "stalemate"
    DRAW = "draw"
    RESIGNATION = "resignation"
    TIMEOUT = "timeout"
