"""Position text (FEN) parsing and serialization."""

from __future__ import annotations

from boardcore.core.board import Board
from boardcore.core.enums import CastlingRights, Color
from boardcore.core.piece import Piece
from boardcore.core.position import Position
from boardcore.core.types import Square, parse_square, square_name

STARTING_FEN = "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR w KQkq - 0 1"

_SIDES: dict[str, Color] = {"w": Color.WHITE, "b": Color.BLACK}
_SIDE_LETTERS: dict[Color, str] = {v: k for k, v in _SIDES.items()}

# Output order of the castling field.
_CASTLING_LETTERS: dict[str, CastlingRights] = {
    "K": CastlingRights.WHITE_KINGSIDE,
    "Q": CastlingRights.WHITE_QUEENSIDE,
    "k": CastlingRights.BLACK_KINGSIDE,
    "q": CastlingRights.BLACK_QUEENSIDE,
}

# Rank an en-passant target must sit on, keyed by the side to move.
_EP_RANK: dict[Color, int] = {Color.WHITE: 5, Color.BLACK: 2}


def _expand_rank(text: str) -> list[str | None]:
    """One rank of placement text as eight cells, ``None`` for empty."""
    cells: list[str | None] = []
    for ch in text:
        if ch in "12345678":
            cells.extend([None] * int(ch))
        elif ch.isdigit():
            raise ValueError(f"Invalid FEN digit {ch!r}")
        else:
            cells.append(ch)
        if len(cells) > 8:
            break
    if len(cells) != 8:
        raise ValueError(f"Invalid FEN rank width: {text!r}")
    return cells


def _parse_placement(placement: str) -> Board:
    rows = placement.split("/")
    if len(rows) != 8:
        raise ValueError(f"Invalid FEN board (must contain 8 ranks): {placement!r}")
    board = Board()
    for rank, row in zip(range(7, -1, -1), rows):
        for file, letter in enumerate(_expand_rank(row)):
            if letter is not None:
                board[Square(file, rank)] = Piece.from_char(letter)
    return board


def _parse_castling(text: str) -> CastlingRights:
    if text == "-":
        return CastlingRights.NONE
    if len(set(text)) != len(text) or any(ch not in _CASTLING_LETTERS for ch in text):
        raise ValueError(f"Invalid FEN castling field: {text!r}")
    rights = CastlingRights.NONE
    for ch in text:
        rights |= _CASTLING_LETTERS[ch]
    return rights


def _parse_en_passant(text: str, side: Color) -> Square | None:
    if text == "-":
        return None
    target = parse_square(text)
    if target.rank != _EP_RANK[side]:
        raise ValueError(f"Invalid FEN en-passant square for side-to-move: {text!r}")
    return target


def _parse_counter(text: str, minimum: int, label: str) -> int:
    try:
        value = int(text)
    except ValueError:
        raise ValueError(f"Invalid FEN {label}: {text!r}") from None
    if value < minimum:
        raise ValueError(f"Invalid FEN {label}: {text!r}")
    return value


def position_from_fen(fen: str) -> Position:
    """Parse a FEN string into a fresh :class:`Position`.

    At least four fields are required; missing clocks default to ``0`` and
    ``1``. Raises :class:`ValueError` on malformed input.
    """
    fields = fen.split()
    if not (4 <= len(fields) <= 6):
        raise ValueError(f"Invalid FEN (need 4-6 fields): {fen!r}")
    fields += ["0", "1"][len(fields) - 4:]

    placement, side_text, castling_text, ep_text, halfmove_text, fullmove_text = fields
    side = _SIDES.get(side_text)
    if side is None:
        raise ValueError(f"Invalid FEN side-to-move field: {side_text!r}")

    return Position(
        _parse_placement(placement),
        side,
        _parse_castling(castling_text),
        _parse_en_passant(ep_text, side),
        _parse_counter(halfmove_text, 0, "halfmove clock"),
        _parse_counter(fullmove_text, 1, "fullmove number"),
    )


def _placement_text(board: Board) -> str:
    rows: list[str] = []
    for rank in range(7, -1, -1):
        row = ""
        gap = 0
        for file in range(8):
            piece = board[Square(file, rank)]
            if piece is None:
                gap += 1
                continue
            row += (str(gap) if gap else "") + str(piece)
            gap = 0
        rows.append(row + (str(gap) if gap else ""))
    return "/".join(rows)


def position_to_fen(pos: Position) -> str:
    """Serialise a :class:`Position` to FEN."""
    castling = "".join(
        letter for letter, right in _CASTLING_LETTERS.items() if pos.castling & right
    )
    ep = square_name(pos.en_passant) if pos.en_passant is not None else "-"
    return " ".join(
        (
            _placement_text(pos.board),
            _SIDE_LETTERS[pos.side_to_move],
            castling or "-",
            ep,
            str(pos.halfmove_clock),
            str(pos.fullmove_number),
        )
    )
