"""High-level chess rules: check, checkmate and stalemate."""

from __future__ import annotations

from typing import TYPE_CHECKING

from boardcore.core.enums import CheckStatus, GameEndReason
from boardcore.core.move_generator import MoveGenerator
from boardcore.core.state import GameResult

if TYPE_CHECKING:
    from boardcore.core.position import Position


class Rules:
    """Static rule-checker that operates on a :class:`Position`.

    A game ends only by checkmate or stalemate here; repetition, the
    fifty-move rule and insufficient material are not evaluated.
    """

    @staticmethod
    def is_in_check(position: Position) -> bool:
        gen = MoveGenerator(position)
        return gen.is_in_check(position.side_to_move)

    @staticmethod
    def is_checkmate(position: Position) -> bool:
        gen = MoveGenerator(position)
        return gen.is_in_check(position.side_to_move) and not gen.has_legal_move()

    @staticmethod
    def is_stalemate(position: Position) -> bool:
        gen = MoveGenerator(position)
        return not gen.is_in_check(position.side_to_move) and not gen.has_legal_move()

    @staticmethod
    def check_status(position: Position) -> CheckStatus:
        """Check state of the side to move."""
        gen = MoveGenerator(position)
        in_check = gen.is_in_check(position.side_to_move)
        if gen.has_legal_move():
            return CheckStatus.CHECK if in_check else CheckStatus.NONE
        return CheckStatus.CHECKMATE if in_check else CheckStatus.STALEMATE

    @staticmethod
    def game_result(position: Position) -> GameResult | None:
        """Determine the current game result, ``None`` while in progress."""
        status = Rules.check_status(position)
        if status == CheckStatus.CHECKMATE:
            return GameResult(
                winner=position.side_to_move.opposite,
                reason=GameEndReason.CHECKMATE,
            )
        if status == CheckStatus.STALEMATE:
            return GameResult(winner=None, reason=GameEndReason.STALEMATE)
        return None
