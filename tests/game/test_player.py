"""Tests for Player implementations and coordinator settings."""

import asyncio

import pytest

from boardcore.core.engine import ChessEngine
from boardcore.core.enums import Color, PieceType
from boardcore.core.move import Move
from boardcore.core.state import GameState
from boardcore.core.types import E2, E4, E5, E7
from boardcore.game.config import CoordinatorConfig
from boardcore.game.errors import ChessError, ErrorKind
from boardcore.game.player import ExternalPlayer, HumanPlayer


class TestHumanPlayer:
    def test_properties(self) -> None:
        p = HumanPlayer(Color.WHITE, "Alice")
        assert p.color == Color.WHITE
        assert p.name == "Alice"
        assert p.is_human is True

    def test_default_name(self) -> None:
        p = HumanPlayer(Color.BLACK)
        assert "black" in p.name.lower()


class TestExternalPlayer:
    def test_properties(self) -> None:
        async def source(state: GameState, previous: Move | None) -> Move:
            return Move(E7, E5)

        p = ExternalPlayer(Color.BLACK, source, "Stockfish")
        assert p.color == Color.BLACK
        assert p.name == "Stockfish"
        assert p.is_human is False

    def test_request_move_forwards_to_source(self) -> None:
        called_with: list[tuple[GameState, Move | None]] = []

        async def source(state: GameState, previous: Move | None) -> Move:
            called_with.append((state, previous))
            return Move(E7, E5)

        engine = ChessEngine()
        engine.play(Move(E2, E4))
        state = engine.game_state()
        p = ExternalPlayer(Color.BLACK, source)

        move = asyncio.run(p.request_move(state, Move(E2, E4)))
        assert move == Move(E7, E5)
        assert called_with == [(state, Move(E2, E4))]


class TestCoordinatorConfig:
    def test_defaults(self) -> None:
        config = CoordinatorConfig()
        assert config.enable_premoves
        assert not config.animate_moves
        assert config.move_timeout is None
        assert config.auto_promotion is None

    @pytest.mark.parametrize("timeout", [0, -1.5])
    def test_non_positive_timeout(self, timeout: float) -> None:
        with pytest.raises(ValueError):
            CoordinatorConfig(move_timeout=timeout)

    def test_auto_promotion_must_be_promotable(self) -> None:
        with pytest.raises(ValueError):
            CoordinatorConfig(auto_promotion=PieceType.KING)

    def test_frozen(self) -> None:
        config = CoordinatorConfig()
        with pytest.raises(AttributeError):
            config.animate_moves = True  # type: ignore[misc]


class TestChessError:
    def test_str(self) -> None:
        error = ChessError(ErrorKind.TIMEOUT, Color.WHITE, "no answer")
        assert str(error) == "[timeout] white: no answer"
        assert error.move is None and error.cause is None
