"""Tests for the Qt coordinator bridge."""

from __future__ import annotations

import asyncio

from PyQt6.QtTest import QSignalSpy

from boardcore.core.enums import Color, PieceType
from boardcore.core.move import Move
from boardcore.core.notation import STARTING_FEN
from boardcore.core.state import GameState
from boardcore.core.types import E2, E4, E5, E7, E8
from boardcore.game.coordinator import TurnCoordinator
from boardcore.game.errors import ErrorKind
from boardcore.game.interfaces import CoordinatorPhase, MoveAttempt
from boardcore.game.player import ExternalPlayer
from boardcore.game.qt_bridge import CoordinatorBridge


class TestCoordinatorBridge:
    def test_move_signal(self, qapp: object) -> None:
        coord = TurnCoordinator()
        bridge = CoordinatorBridge(coord)
        moves = QSignalSpy(bridge.move_committed)
        states = QSignalSpy(bridge.state_changed)
        coord.start()

        assert bridge.submit_move(Move(E2, E4)) == int(MoveAttempt.APPLIED)
        assert len(moves) == 1
        assert moves[0][0] == Move(E2, E4)
        assert len(states) == 2
        assert states[1][0].side_to_move == Color.BLACK

    def test_rejects_non_moves(self, qapp: object) -> None:
        coord = TurnCoordinator()
        bridge = CoordinatorBridge(coord)
        coord.start()
        assert bridge.submit_move("e2e4") == int(MoveAttempt.REJECTED)

    def test_phase_signal(self, qapp: object) -> None:
        coord = TurnCoordinator()
        bridge = CoordinatorBridge(coord)
        phases = QSignalSpy(bridge.phase_changed)
        coord.start()
        assert len(phases) == 1
        assert phases[0][0] == int(CoordinatorPhase.HUMAN_TO_MOVE)

    def test_promotion_slots(self, qapp: object) -> None:
        coord = TurnCoordinator()
        bridge = CoordinatorBridge(coord)
        assert bridge.load_position("8/4P3/8/8/8/8/8/k3K3 w - - 0 1")
        assert bridge.submit_move(Move(E7, E8)) == int(MoveAttempt.PROMOTION_PENDING)
        assert bridge.select_promotion(99) == int(MoveAttempt.REJECTED)
        bridge.cancel_promotion()
        assert coord.phase == CoordinatorPhase.HUMAN_TO_MOVE
        bridge.submit_move(Move(E7, E8))
        assert bridge.select_promotion(int(PieceType.QUEEN)) == int(MoveAttempt.APPLIED)

    def test_game_over_signal(self, qapp: object) -> None:
        coord = TurnCoordinator()
        bridge = CoordinatorBridge(coord)
        over = QSignalSpy(bridge.game_over)
        coord.start()
        coord.resign(Color.BLACK)
        assert len(over) == 1
        assert over[0][0].winner == Color.WHITE

    def test_error_signal(self, qapp: object) -> None:
        async def bad(state: GameState, previous: Move | None) -> Move:
            return Move(E2, E5)

        coord = TurnCoordinator(white=ExternalPlayer(Color.WHITE, bad))
        bridge = CoordinatorBridge(coord)
        errors = QSignalSpy(bridge.error_raised)
        coord.start()
        asyncio.run(coord.request_external_move())
        assert len(errors) == 1
        assert errors[0][0].kind == ErrorKind.INVALID_MOVE

    def test_premove_signal(self, qapp: object) -> None:
        async def never(state: GameState, previous: Move | None) -> Move:
            raise AssertionError("not requested without a running loop")

        coord = TurnCoordinator(black=ExternalPlayer(Color.BLACK, never))
        bridge = CoordinatorBridge(coord)
        premoves = QSignalSpy(bridge.premoves_changed)
        coord.start()
        bridge.submit_move(Move(E2, E4))
        assert bridge.submit_move(Move(E4, E5)) == int(MoveAttempt.QUEUED)
        bridge.clear_premoves()
        assert len(premoves) == 2
        assert premoves[1][0] == ()

    def test_reset_and_animation_slots(self, qapp: object) -> None:
        coord = TurnCoordinator()
        bridge = CoordinatorBridge(coord)
        coord.start()
        bridge.submit_move(Move(E2, E4))
        bridge.complete_animation()
        bridge.reset()
        assert coord.engine.to_fen() == STARTING_FEN

    def test_detach(self, qapp: object) -> None:
        coord = TurnCoordinator()
        bridge = CoordinatorBridge(coord)
        moves = QSignalSpy(bridge.move_committed)
        bridge.detach()
        coord.start()
        coord.submit_move(Move(E2, E4))
        assert len(moves) == 0
        assert coord.events.on_move == []
