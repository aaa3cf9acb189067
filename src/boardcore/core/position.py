"""Position: board plus the metadata needed to continue a game."""

from __future__ import annotations

from boardcore.core.board import Board
from boardcore.core.enums import CastlingRights, Color
from boardcore.core.move import Move
from boardcore.core.types import Square


class Position:
    """Full chess position: board + side to move + castling + en passant + clocks.

    Also carries the list of moves committed since the position was created
    or last loaded. Only :class:`~boardcore.core.executor.MoveExecutor`
    mutates a live position; everything else reads it or works on a
    :meth:`copy`.
    """

    __slots__ = (
        "board",
        "side_to_move",
        "castling",
        "en_passant",
        "halfmove_clock",
        "fullmove_number",
        "history",
    )

    def __init__(
        self,
        board: Board | None = None,
        side_to_move: Color = Color.WHITE,
        castling: CastlingRights = CastlingRights.ALL,
        en_passant: Square | None = None,
        halfmove_clock: int = 0,
        fullmove_number: int = 1,
    ) -> None:
        self.board = board if board is not None else Board.initial()
        self.side_to_move = side_to_move
        self.castling = castling
        self.en_passant = en_passant
        self.halfmove_clock = halfmove_clock
        self.fullmove_number = fullmove_number
        self.history: list[Move] = []

    @classmethod
    def initial(cls) -> Position:
        return cls()

    @property
    def last_move(self) -> Move | None:
        return self.history[-1] if self.history else None

    def has_right(self, right: CastlingRights) -> bool:
        return bool(self.castling & right)

    def revoke(self, rights: CastlingRights) -> None:
        """Drop *rights*; rights are never re-granted by play."""
        self.castling &= ~rights

    def replace_with(self, other: Position) -> None:
        """Take over every field of *other* (wholesale position load)."""
        self.board = other.board
        self.side_to_move = other.side_to_move
        self.castling = other.castling
        self.en_passant = other.en_passant
        self.halfmove_clock = other.halfmove_clock
        self.fullmove_number = other.fullmove_number
        self.history = other.history.copy()

    def copy(self) -> Position:
        """Independent deep copy, history included."""
        pos = Position(
            board=self.board.copy(),
            side_to_move=self.side_to_move,
            castling=self.castling,
            en_passant=self.en_passant,
            halfmove_clock=self.halfmove_clock,
            fullmove_number=self.fullmove_number,
        )
        pos.history = self.history.copy()
        return pos

    def __repr__(self) -> str:
        return f"Position(side_to_move={self.side_to_move}, castling={self.castling!r})\n{self.board!r}"
