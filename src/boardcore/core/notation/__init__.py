"""Notation package: position text (FEN) parsing and serialization."""

from boardcore.core.notation.fen import STARTING_FEN, position_from_fen, position_to_fen

__all__ = [
    "STARTING_FEN",
    "position_from_fen",
    "position_to_fen",
]
