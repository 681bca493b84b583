"""
Pytest will auto-discover / import this file called 'conftest.py'.
This file defines fixtures/variables required for testing multiple layers.
"""

from typing import Callable

import pytest

from src.chess.board import Board
from src.chess.game import GameState, Outcome, RulesEngine
from src.chess.pieces import Color
from src.core.config import Settings

Coordinates = tuple[int, int]


@pytest.fixture
def state_from_fen() -> Callable[..., GameState]:
    """Call the inner function with the piece placement (row 0 first) and the color to move"""

    def _create_state(fen: str, color_to_move: Color = Color.WHITE) -> GameState:
        return GameState(Board.from_fen(fen), color_to_move, Outcome.ongoing())

    return _create_state


@pytest.fixture
def fools_mate() -> list[tuple[Coordinates, Coordinates]]:
    """Quickest checkmate there is, as (from, to) pairs of (row, col): f3, e5, g4, Qh4"""
    return [
        ((6, 5), (5, 5)),
        ((1, 4), (3, 4)),
        ((6, 6), (4, 6)),
        ((0, 3), (4, 7)),
    ]


@pytest.fixture
def engine() -> RulesEngine:
    """Engine in the standard starting position"""
    return RulesEngine()


@pytest.fixture
def settings() -> Settings:
    """Explicit settings, so tests do not depend on the environment they run in"""
    return Settings(log_level="DEBUG", lock_on_game_over=True)
