"""Turn coordinator settings."""

from __future__ import annotations

from dataclasses import dataclass

from boardcore.core.enums import PieceType
from boardcore.core.piece import PROMOTION_TYPES


@dataclass(slots=True, frozen=True)
class CoordinatorConfig:
    """Behavior switches for :class:`~boardcore.game.TurnCoordinator`.

    Args:
        enable_premoves: Queue human moves made while it is not their turn.
        animate_moves: Hold in ``ANIMATING`` after each commit until the
            host calls ``complete_animation()``.
        move_timeout: Seconds an external source may take, ``None`` for no
            limit.
        auto_promotion: Piece used instead of asking when a human promotes.
    """

    enable_premoves: bool = True
    animate_moves: bool = False
    move_timeout: float | None = None
    auto_promotion: PieceType | None = None

    def __post_init__(self) -> None:
        if self.move_timeout is not None and self.move_timeout <= 0:
            raise ValueError(f"move_timeout must be positive: {self.move_timeout!r}")
        if self.auto_promotion is not None and self.auto_promotion not in PROMOTION_TYPES:
            raise ValueError(f"Cannot promote to {self.auto_promotion!r}")
