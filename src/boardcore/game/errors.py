"""Structured errors reported by the turn coordinator."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from boardcore.core.enums import Color
    from boardcore.core.move import Move


class ErrorKind(str, Enum):
    """What went wrong while waiting for an external move."""

    INVALID_MOVE = "invalid_move"
    CALLBACK_ERROR = "callback_error"
    TIMEOUT = "timeout"


@dataclass(frozen=True, slots=True)
class ChessError:
    """Error delivered to ``on_error`` listeners.

    The board is never modified by the failed attempt; the coordinator stays
    in a state from which the request can be retried.
    """

    kind: ErrorKind
    player: Color
    message: str
    move: Move | None = None
    cause: BaseException | None = None

    def __str__(self) -> str:
        return f"[{self.kind.value}] {self.player}: {self.message}"
