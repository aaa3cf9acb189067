"""Queue of human moves entered ahead of their turn."""

from __future__ import annotations

import logging
from collections.abc import Iterator

from boardcore.core.board import Board
from boardcore.core.enums import Color
from boardcore.core.move import Move
from boardcore.core.types import Square

_LOGGER = logging.getLogger(__name__)


class PreMoveQueue:
    """FIFO of premoves plus the board they project.

    Every premove belongs to the side whose piece it moves. Premoves are
    only checked against movement patterns when queued. Each one is
    validated for real when its owner's turn comes; the first failure
    discards the rest of that owner's premoves.
    """

    __slots__ = ("_entries",)

    def __init__(self) -> None:
        self._entries: list[tuple[Color, Move]] = []

    def __len__(self) -> int:
        return len(self._entries)

    def __bool__(self) -> bool:
        return bool(self._entries)

    def __iter__(self) -> Iterator[Move]:
        return (move for _, move in self._entries)

    def __repr__(self) -> str:
        return f"PreMoveQueue({' '.join(m.uci for _, m in self._entries)})"

    @property
    def moves(self) -> tuple[Move, ...]:
        return tuple(move for _, move in self._entries)

    def moves_of(self, owner: Color) -> tuple[Move, ...]:
        return tuple(move for color, move in self._entries if color == owner)

    def push(self, move: Move, owner: Color) -> None:
        self._entries.append((owner, move))
        _LOGGER.debug(
            "Queued premove %s for %s (%d pending)", move, owner.name, len(self._entries)
        )

    def pop(self, owner: Color) -> Move | None:
        """Remove and return the oldest premove of *owner*."""
        for index, (color, move) in enumerate(self._entries):
            if color == owner:
                del self._entries[index]
                return move
        return None

    def clear(self, owner: Color | None = None) -> bool:
        """Drop the premoves of *owner*, or every premove when omitted.

        Returns ``True`` if anything was dropped.
        """
        before = len(self._entries)
        if owner is None:
            self._entries.clear()
        else:
            self._entries = [e for e in self._entries if e[0] != owner]
        return len(self._entries) != before

    def highlighted_squares(self) -> set[Square]:
        squares: set[Square] = set()
        for _, move in self._entries:
            squares.add(move.from_sq)
            squares.add(move.to_sq)
        return squares

    def project(self, board: Board) -> Board:
        """Copy of *board* with every queued premove applied visually.

        Pieces simply relocate: no captures are resolved, no companion rook
        moves, and a promoting premove shows the promoted piece.
        """
        projected = board.copy()
        for _, move in self._entries:
            piece = projected[move.from_sq]
            if piece is None:
                continue
            if move.promotion is not None:
                piece = piece.promoted(move.promotion)
            projected[move.to_sq] = piece
            projected[move.from_sq] = None
        return projected
