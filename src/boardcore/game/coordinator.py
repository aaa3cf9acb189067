"""TurnCoordinator: decides who may move and when.

Coordinates: ChessEngine, players, premove queue, pending promotion and the
asynchronous external move source. Emits events via simple callbacks so a
board widget / tests can subscribe.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from dataclasses import dataclass, field

from boardcore.core.board import Board
from boardcore.core.engine import ChessEngine
from boardcore.core.enums import Color, GameEndReason, PieceType
from boardcore.core.executor import MoveExecutor
from boardcore.core.move import Move, MoveResult
from boardcore.core.piece import PROMOTION_TYPES
from boardcore.core.state import GameResult, GameState
from boardcore.core.types import Square
from boardcore.game.config import CoordinatorConfig
from boardcore.game.errors import ChessError, ErrorKind
from boardcore.game.interfaces import CoordinatorPhase, IPlayer, MoveAttempt
from boardcore.game.player import ExternalPlayer, HumanPlayer
from boardcore.game.premove import PreMoveQueue

_LOGGER = logging.getLogger(__name__)

# ── Event definitions ────────────────────────────────────────────────────────

StateCallback = Callable[[GameState], None]
MoveCallback = Callable[[Move, MoveResult, GameState], None]
PhaseCallback = Callable[[CoordinatorPhase], None]
ErrorCallback = Callable[[ChessError], None]
GameOverCallback = Callable[[GameResult], None]
PreMovesCallback = Callable[[tuple[Move, ...]], None]

_PREMOVE_PHASES = frozenset(
    {
        CoordinatorPhase.EXTERNAL_MOVE_REQUESTED,
        CoordinatorPhase.EXTERNAL_THINKING,
        CoordinatorPhase.ANIMATING,
    }
)


@dataclass
class CoordinatorEvents:
    """Observable callbacks. Multiple handlers per event."""

    on_state_changed: list[StateCallback] = field(default_factory=list)
    on_move: list[MoveCallback] = field(default_factory=list)
    on_phase_changed: list[PhaseCallback] = field(default_factory=list)
    on_error: list[ErrorCallback] = field(default_factory=list)
    on_game_over: list[GameOverCallback] = field(default_factory=list)
    on_premoves_changed: list[PreMovesCallback] = field(default_factory=list)


@dataclass(frozen=True, slots=True)
class PendingPromotion:
    """A human pawn move waiting for the promotion piece."""

    move: Move
    is_premove: bool = False
    owner: Color | None = None


# ── Coordinator ──────────────────────────────────────────────────────────────


class TurnCoordinator:
    """Runs one game between humans and/or external move sources.

    Thread-safety: every method must be called from the thread running the
    event loop (the main/UI thread). The only suspension point is the await
    on an external source; answers are tagged with a turn token and dropped
    when the token no longer matches.
    """

    __slots__ = (
        "_engine",
        "_players",
        "_config",
        "_phase",
        "_token",
        "_task",
        "_orphans",
        "_premoves",
        "_pending_promotion",
        "_result",
        "_last_error",
        "events",
    )

    def __init__(
        self,
        engine: ChessEngine | None = None,
        white: IPlayer | None = None,
        black: IPlayer | None = None,
        config: CoordinatorConfig | None = None,
    ) -> None:
        self._engine = engine if engine is not None else ChessEngine()
        self._players: dict[Color, IPlayer] = {
            Color.WHITE: white if white is not None else HumanPlayer(Color.WHITE),
            Color.BLACK: black if black is not None else HumanPlayer(Color.BLACK),
        }
        for color, player in self._players.items():
            if player.color != color:
                raise ValueError(f"{player.name} plays {player.color}, not {color}")
        self._config = config if config is not None else CoordinatorConfig()
        self._phase = CoordinatorPhase.IDLE
        self._token = 0
        self._task: asyncio.Task[bool] | None = None
        self._orphans: set[asyncio.Task[bool]] = set()
        self._premoves = PreMoveQueue()
        self._pending_promotion: PendingPromotion | None = None
        self._result: GameResult | None = None
        self._last_error: ChessError | None = None
        self.events = CoordinatorEvents()

    # ── Properties ───────────────────────────────────────────────────────

    @property
    def engine(self) -> ChessEngine:
        return self._engine

    @property
    def config(self) -> CoordinatorConfig:
        return self._config

    @property
    def phase(self) -> CoordinatorPhase:
        return self._phase

    @property
    def turn_token(self) -> int:
        return self._token

    @property
    def result(self) -> GameResult | None:
        return self._result

    @property
    def last_error(self) -> ChessError | None:
        return self._last_error

    @property
    def premoves(self) -> tuple[Move, ...]:
        return self._premoves.moves

    @property
    def pending_promotion(self) -> PendingPromotion | None:
        return self._pending_promotion

    @property
    def current_player(self) -> IPlayer:
        return self._players[self._engine.side_to_move]

    def player(self, color: Color) -> IPlayer:
        return self._players[color]

    def game_state(self) -> GameState:
        return self._engine.game_state()

    def projected_board(self) -> Board:
        """The live board with queued premoves applied (display only)."""
        return self._premoves.project(self._engine.board())

    def hint_targets(self, from_sq: Square) -> list[Square]:
        """Destinations to highlight for the piece a human picked up.

        Outside the human's turn these are pattern-only hints on the
        projected board, exactly what :meth:`submit_move` would queue.
        """
        if self._phase == CoordinatorPhase.HUMAN_TO_MOVE:
            return self._engine.valid_moves(from_sq)
        if not self._premoves_allowed():
            return []
        board = self.projected_board()
        piece = board[from_sq]
        if piece is None or not self._players[piece.color].is_human:
            return []
        return self._engine.potential_moves(from_sq, for_premove=True, board=board)

    # ── Lifecycle ────────────────────────────────────────────────────────

    def start(self) -> None:
        """Evaluate the current position and hand the turn to its player."""
        if self._phase != CoordinatorPhase.IDLE:
            return
        self._advance()

    def reset(self) -> None:
        """Back to the opening position; any in-flight request goes stale."""
        self._invalidate_turn()
        self._engine.reset()
        self._set_phase(CoordinatorPhase.IDLE)
        self._advance()

    def load_position(self, text: str) -> bool:
        """Load position text. On failure nothing changes, including the
        phase and any in-flight request."""
        if not self._engine.set_position(text):
            return False
        self._invalidate_turn()
        self._set_phase(CoordinatorPhase.IDLE)
        self._advance()
        return True

    def resign(self, color: Color) -> None:
        self._end_by(color.opposite, GameEndReason.RESIGNATION)

    def flag_fall(self, color: Color) -> None:
        """*color* ran out of time (clocks are kept by the host)."""
        self._end_by(color.opposite, GameEndReason.TIMEOUT)

    async def join(self) -> None:
        """Wait until no external request is outstanding.

        Between two external players this runs the game to its end.
        """
        while self._task is not None and not self._task.done():
            await self._task

    # ── Human moves ──────────────────────────────────────────────────────

    def submit_move(self, move: Move) -> MoveAttempt:
        """A human dropped a piece.

        On the human's own turn the move is validated and committed; at other
        times it may be queued as a premove. Illegal attempts are simply
        rejected, they are not errors.
        """
        phase = self._phase
        if phase in (CoordinatorPhase.GAME_OVER, CoordinatorPhase.PROMOTION_PENDING):
            return MoveAttempt.REJECTED
        if phase == CoordinatorPhase.HUMAN_TO_MOVE:
            return self._play_human(move)
        return self._queue_premove(move)

    def select_promotion(self, piece_type: PieceType) -> MoveAttempt:
        pending = self._pending_promotion
        if pending is None or piece_type not in PROMOTION_TYPES:
            return MoveAttempt.REJECTED
        self._pending_promotion = None
        move = Move(pending.move.from_sq, pending.move.to_sq, piece_type)
        if pending.is_premove:
            assert pending.owner is not None
            self._premoves.push(move, pending.owner)
            self._emit_premoves()
            return MoveAttempt.QUEUED
        self._set_phase(CoordinatorPhase.HUMAN_TO_MOVE)
        return self._play_human(move)

    def cancel_promotion(self) -> None:
        pending = self._pending_promotion
        if pending is None:
            return
        self._pending_promotion = None
        if not pending.is_premove:
            self._set_phase(CoordinatorPhase.HUMAN_TO_MOVE)

    def clear_premoves(self) -> None:
        if self._premoves.clear():
            self._emit_premoves()

    def complete_animation(self) -> None:
        """The host finished animating the last committed move."""
        if self._phase != CoordinatorPhase.ANIMATING:
            return
        self._advance()

    # ── External moves ───────────────────────────────────────────────────

    async def request_external_move(self) -> bool:
        """Ask the external player to move and commit its answer.

        Returns ``True`` only when a move from this request was committed.
        Calling it outside ``EXTERNAL_MOVE_REQUESTED`` does nothing, so at
        most one request per turn is ever outstanding.
        """
        if self._phase != CoordinatorPhase.EXTERNAL_MOVE_REQUESTED:
            return False
        player = self.current_player
        if not isinstance(player, ExternalPlayer):
            return False

        self._token += 1
        token = self._token
        color = player.color
        state = self._engine.game_state()
        previous = self._engine.last_move
        timeout = self._config.move_timeout
        self._set_phase(CoordinatorPhase.EXTERNAL_THINKING)
        _LOGGER.debug("Requesting move from %s (token %d)", player.name, token)

        try:
            request = player.request_move(state, previous)
            if timeout is not None:
                move = await asyncio.wait_for(request, timeout)
            else:
                move = await request
        except asyncio.CancelledError:
            raise
        except Exception as exc:
            if self._is_stale(token):
                _LOGGER.debug("Ignoring failure of stale request %d: %s", token, exc)
                return False
            if timeout is not None and isinstance(exc, asyncio.TimeoutError):
                self._fail(
                    ChessError(
                        ErrorKind.TIMEOUT,
                        color,
                        f"{player.name} did not answer within {timeout:g}s",
                    )
                )
                return False
            self._fail(
                ChessError(
                    ErrorKind.CALLBACK_ERROR,
                    color,
                    f"{player.name} failed to produce a move: {exc}",
                    cause=exc,
                )
            )
            return False

        if self._is_stale(token):
            _LOGGER.info(
                "Discarding stale move %s (token %d, current %d)", move, token, self._token
            )
            return False
        return self._commit_external(move, color)

    def execute_external_move(self, move: Move) -> bool:
        """Push a move for the external side without going through its
        source, e.g. from a network message. A request in flight goes stale.
        """
        if self._phase not in (
            CoordinatorPhase.EXTERNAL_MOVE_REQUESTED,
            CoordinatorPhase.EXTERNAL_THINKING,
        ):
            _LOGGER.debug("External move %s ignored in phase %s", move, self._phase.name)
            return False
        if self._phase == CoordinatorPhase.EXTERNAL_THINKING:
            self._token += 1
            self._park_task()
            self._set_phase(CoordinatorPhase.EXTERNAL_MOVE_REQUESTED)
        return self._commit_external(move, self._engine.side_to_move)

    # ── Internal helpers ─────────────────────────────────────────────────

    def _advance(self, state: GameState | None = None) -> None:
        """Evaluate the position and prompt whoever is to move."""
        if state is None:
            state = self._engine.game_state()
        self._emit_state(state)

        if state.is_game_over:
            assert state.result is not None
            self._finish(state.result)
            return

        if self.current_player.is_human:
            self._set_phase(CoordinatorPhase.HUMAN_TO_MOVE)
            self._play_premove()
        else:
            self._set_phase(CoordinatorPhase.EXTERNAL_MOVE_REQUESTED)
            self._schedule_external()

    def _schedule_external(self) -> None:
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            # No loop: the host awaits request_external_move() itself.
            return
        task = self._task
        if task is not None and not task.done() and task is not asyncio.current_task():
            return
        self._task = loop.create_task(self.request_external_move())

    def _play_human(self, move: Move) -> MoveAttempt:
        analysis = self._engine.is_valid_move(move.from_sq, move.to_sq, move.promotion)
        if not analysis.valid:
            return MoveAttempt.REJECTED
        if analysis.promotion_required:
            auto = self._config.auto_promotion
            if auto is None:
                self._pending_promotion = PendingPromotion(move)
                self._set_phase(CoordinatorPhase.PROMOTION_PENDING)
                return MoveAttempt.PROMOTION_PENDING
            move = Move(move.from_sq, move.to_sq, auto)
        self._commit(move)
        return MoveAttempt.APPLIED

    def _premoves_allowed(self) -> bool:
        return self._config.enable_premoves and self._phase in _PREMOVE_PHASES

    def _queue_premove(self, move: Move) -> MoveAttempt:
        if not self._premoves_allowed():
            return MoveAttempt.REJECTED
        board = self.projected_board()
        piece = board[move.from_sq]
        if piece is None or not self._players[piece.color].is_human:
            return MoveAttempt.REJECTED
        targets = self._engine.potential_moves(move.from_sq, for_premove=True, board=board)
        if move.to_sq not in targets:
            return MoveAttempt.REJECTED

        if MoveExecutor.requires_promotion(piece, move.to_sq):
            if move.promotion is None:
                auto = self._config.auto_promotion
                if auto is None:
                    self._pending_promotion = PendingPromotion(
                        move, is_premove=True, owner=piece.color
                    )
                    return MoveAttempt.PROMOTION_PENDING
                move = Move(move.from_sq, move.to_sq, auto)
            elif move.promotion not in PROMOTION_TYPES:
                return MoveAttempt.REJECTED
        elif move.promotion is not None:
            move = Move(move.from_sq, move.to_sq)

        self._premoves.push(move, piece.color)
        self._emit_premoves()
        return MoveAttempt.QUEUED

    def _play_premove(self) -> None:
        """Execute the mover's oldest premove if it is legal now; otherwise
        drop the rest of that side's premoves."""
        owner = self._engine.side_to_move
        move = self._premoves.pop(owner)
        if move is None:
            return
        analysis = self._engine.is_valid_move(move.from_sq, move.to_sq, move.promotion)
        if not analysis.executable:
            _LOGGER.debug("Premove %s no longer legal, clearing %s premoves", move, owner.name)
            self._premoves.clear(owner)
            self._emit_premoves()
            return
        self._emit_premoves()
        self._commit(move)

    def _commit_external(self, move: object, color: Color) -> bool:
        if not isinstance(move, Move):
            self._fail(
                ChessError(
                    ErrorKind.INVALID_MOVE,
                    color,
                    f"Expected a Move, got {type(move).__name__}",
                )
            )
            return False
        analysis = self._engine.is_valid_move(move.from_sq, move.to_sq, move.promotion)
        if not analysis.executable:
            reason = "needs a promotion piece" if analysis.promotion_required else "is illegal"
            self._fail(
                ChessError(ErrorKind.INVALID_MOVE, color, f"Move {move} {reason}", move=move)
            )
            return False
        self._commit(move)
        return True

    def _commit(self, move: Move) -> MoveResult:
        result = self._engine.play(move)
        if not result.success:
            # Callers validate first; reaching this is a programming error.
            raise RuntimeError(f"Validated move {move} was rejected")
        self._last_error = None
        state = self._engine.game_state()
        for cb in self.events.on_move:
            cb(move, result, state)
        if self._config.animate_moves:
            self._set_phase(CoordinatorPhase.ANIMATING)
        else:
            self._advance(state)
        return result

    def _fail(self, error: ChessError) -> None:
        _LOGGER.warning("%s", error)
        self._last_error = error
        self._set_phase(CoordinatorPhase.EXTERNAL_MOVE_REQUESTED)
        for cb in self.events.on_error:
            cb(error)

    def _end_by(self, winner: Color, reason: GameEndReason) -> None:
        if self._phase == CoordinatorPhase.GAME_OVER:
            return
        self._token += 1
        self._park_task()
        self._pending_promotion = None
        self.clear_premoves()
        self._finish(GameResult(winner=winner, reason=reason))

    def _finish(self, result: GameResult) -> None:
        self._result = result
        _LOGGER.info("Game over: %s", result)
        self._set_phase(CoordinatorPhase.GAME_OVER)
        for cb in self.events.on_game_over:
            cb(result)

    def _invalidate_turn(self) -> None:
        self._token += 1
        self._park_task()
        self._pending_promotion = None
        self._result = None
        self._last_error = None
        self.clear_premoves()

    def _park_task(self) -> None:
        """Forget the current request task; it keeps running until its
        source answers, and its answer is discarded as stale."""
        task = self._task
        self._task = None
        if task is not None and not task.done():
            self._orphans.add(task)
            task.add_done_callback(self._orphans.discard)

    def _is_stale(self, token: int) -> bool:
        return token != self._token

    def _set_phase(self, phase: CoordinatorPhase) -> None:
        if phase == self._phase:
            return
        self._phase = phase
        for cb in self.events.on_phase_changed:
            cb(phase)

    def _emit_state(self, state: GameState) -> None:
        for cb in self.events.on_state_changed:
            cb(state)

    def _emit_premoves(self) -> None:
        moves = self._premoves.moves
        for cb in self.events.on_premoves_changed:
            cb(moves)
