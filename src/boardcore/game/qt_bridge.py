"""Qt bridge exposing a :class:`TurnCoordinator` to a board widget."""

from __future__ import annotations

from PyQt6.QtCore import QObject, pyqtSignal, pyqtSlot

from boardcore.core.enums import PieceType
from boardcore.core.move import Move, MoveResult
from boardcore.core.state import GameResult, GameState
from boardcore.game.coordinator import TurnCoordinator
from boardcore.game.errors import ChessError
from boardcore.game.interfaces import CoordinatorPhase, MoveAttempt


class CoordinatorBridge(QObject):
    """Main-thread adapter: coordinator callbacks become Qt signals and the
    widget's requests arrive through slots."""

    state_changed = pyqtSignal(object)  # GameState
    move_committed = pyqtSignal(object, object, object)  # Move, MoveResult, GameState
    phase_changed = pyqtSignal(int)  # CoordinatorPhase value
    error_raised = pyqtSignal(object)  # ChessError
    game_over = pyqtSignal(object)  # GameResult
    premoves_changed = pyqtSignal(object)  # tuple[Move, ...]

    def __init__(self, coordinator: TurnCoordinator, parent: QObject | None = None) -> None:
        super().__init__(parent)
        self._coordinator = coordinator
        events = coordinator.events
        events.on_state_changed.append(self._on_state_changed)
        events.on_move.append(self._on_move)
        events.on_phase_changed.append(self._on_phase_changed)
        events.on_error.append(self._on_error)
        events.on_game_over.append(self._on_game_over)
        events.on_premoves_changed.append(self._on_premoves_changed)

    @property
    def coordinator(self) -> TurnCoordinator:
        return self._coordinator

    def detach(self) -> None:
        """Stop forwarding coordinator events."""
        events = self._coordinator.events
        for listeners, cb in (
            (events.on_state_changed, self._on_state_changed),
            (events.on_move, self._on_move),
            (events.on_phase_changed, self._on_phase_changed),
            (events.on_error, self._on_error),
            (events.on_game_over, self._on_game_over),
            (events.on_premoves_changed, self._on_premoves_changed),
        ):
            if cb in listeners:
                listeners.remove(cb)

    # ── Slots ────────────────────────────────────────────────────────────

    @pyqtSlot(object, result=int)
    def submit_move(self, move: object) -> int:
        if not isinstance(move, Move):
            return int(MoveAttempt.REJECTED)
        return int(self._coordinator.submit_move(move))

    @pyqtSlot(int, result=int)
    def select_promotion(self, piece_type: int) -> int:
        try:
            chosen = PieceType(piece_type)
        except ValueError:
            return int(MoveAttempt.REJECTED)
        return int(self._coordinator.select_promotion(chosen))

    @pyqtSlot()
    def cancel_promotion(self) -> None:
        self._coordinator.cancel_promotion()

    @pyqtSlot()
    def complete_animation(self) -> None:
        self._coordinator.complete_animation()

    @pyqtSlot()
    def clear_premoves(self) -> None:
        self._coordinator.clear_premoves()

    @pyqtSlot()
    def reset(self) -> None:
        self._coordinator.reset()

    @pyqtSlot(str, result=bool)
    def load_position(self, text: str) -> bool:
        return self._coordinator.load_position(text)

    # ── Coordinator callbacks ────────────────────────────────────────────

    def _on_state_changed(self, state: GameState) -> None:
        self.state_changed.emit(state)

    def _on_move(self, move: Move, result: MoveResult, state: GameState) -> None:
        self.move_committed.emit(move, result, state)

    def _on_phase_changed(self, phase: CoordinatorPhase) -> None:
        self.phase_changed.emit(int(phase))

    def _on_error(self, error: ChessError) -> None:
        self.error_raised.emit(error)

    def _on_game_over(self, result: GameResult) -> None:
        self.game_over.emit(result)

    def _on_premoves_changed(self, moves: tuple[Move, ...]) -> None:
        self.premoves_changed.emit(moves)
