"""Unit tests for src/services/chess_service.py"""

from typing import Callable
from unittest.mock import patch

import pytest
from loguru import logger

from src.chess.game import GameState, RulesEngine
from src.core.config import Settings
from src.core.exceptions import GameStateError
from src.core.shared_types import Color, Outcome, PieceType
from src.services.chess_service import (
    ChessService,
    GameResponse,
    LegalMovesRequest,
    LegalMovesResponse,
    SelectSquareRequest,
)

Coordinates = tuple[int, int]
PINNED_ROOK = "/".join(["k3r3", "8", "8", "8", "8", "8", "4R3", "4K3"])


@pytest.fixture
def service(settings: Settings) -> ChessService:
    """Fresh game in the starting position"""
    return ChessService(RulesEngine(), settings)


def click(service: ChessService, row: int, col: int) -> GameResponse:
    return service.select_square(SelectSquareRequest(row=row, col=col))


def move(service: ChessService, from_sq: Coordinates, to_sq: Coordinates) -> GameResponse:
    click(service, *from_sq)
    return click(service, *to_sq)


# --- SETTINGS ---
def test_service_applies_logging_settings(settings: Settings) -> None:
    with patch("src.services.chess_service.configure_logging") as mock_configure:
        ChessService(RulesEngine(), settings)
    mock_configure.assert_called_once_with(settings)


@pytest.mark.parametrize(
    "log_level, expect_logged",
    [("INFO", True), ("WARNING", False)],
)
def test_service_log_level(
    capsys: pytest.CaptureFixture[str], log_level: str, expect_logged: bool
) -> None:
    service = ChessService(RulesEngine(), Settings(log_level=log_level))
    try:
        service.new_game()
        assert ("New game started" in capsys.readouterr().err) is expect_logged
    finally:
        logger.remove()


# --- NEW GAME / STATE ---
def test_new_game(service: ChessService) -> None:
    response = service.new_game()

    assert isinstance(response, GameResponse)
    assert response.color_to_move == Color.WHITE
    assert response.outcome == Outcome.ONGOING
    assert response.winner is None
    assert response.selected_square is None
    assert response.notice is None
    assert not response.is_locked

    black_rook = response.board[0][0]
    assert black_rook is not None
    assert black_rook.type == PieceType.ROOK
    assert black_rook.color == Color.BLACK
    assert black_rook.symbol == "♜"
    assert response.board[7][4] is not None
    assert response.board[7][4].type == PieceType.KING
    assert all(piece is None for piece in response.board[4])


def test_service_creates_own_engine(settings: Settings) -> None:
    service = ChessService(settings=settings)
    assert service.engine.state == GameState.initial()


# --- SELECTION ---
def test_select_own_piece(service: ChessService) -> None:
    response = click(service, 6, 4)
    assert response.selected_square is not None
    assert (response.selected_square.row, response.selected_square.col) == (6, 4)


@pytest.mark.parametrize("square", [(4, 4), (1, 4)])
def test_select_empty_or_opponent_square_does_nothing(
    service: ChessService, square: Coordinates
) -> None:
    response = click(service, *square)
    assert response.selected_square is None
    assert response.notice is None


def test_deselect_on_second_click(service: ChessService) -> None:
    click(service, 6, 4)
    response = click(service, 6, 4)
    assert response.selected_square is None
    assert response.color_to_move == Color.WHITE


def test_reselect_other_own_piece(service: ChessService) -> None:
    click(service, 6, 4)
    response = click(service, 7, 6)
    assert response.selected_square is not None
    assert (response.selected_square.row, response.selected_square.col) == (7, 6)
    assert response.color_to_move == Color.WHITE


# --- MOVES ---
def test_make_move(service: ChessService) -> None:
    response = move(service, (6, 4), (4, 4))

    assert response.color_to_move == Color.BLACK
    assert response.selected_square is None
    assert response.notice is None
    assert response.board[6][4] is None
    moved_pawn = response.board[4][4]
    assert moved_pawn is not None
    assert moved_pawn.type == PieceType.PAWN
    assert moved_pawn.color == Color.WHITE


def test_illegal_move_keeps_state_and_selection(service: ChessService) -> None:
    response = move(service, (6, 4), (3, 4))

    assert response.notice == "Invalid move: illegal move!"
    assert response.color_to_move == Color.WHITE
    assert response.selected_square is not None
    assert response.board[6][4] is not None


def test_self_check_notice(
    settings: Settings, state_from_fen: Callable[..., GameState]
) -> None:
    service = ChessService(RulesEngine(state_from_fen(PINNED_ROOK)), settings)
    response = move(service, (6, 4), (6, 0))

    assert response.notice == "Invalid move: would put your king in check!"
    assert response.color_to_move == Color.WHITE
    assert response.board[6][4] is not None


def test_check_notice(
    settings: Settings, state_from_fen: Callable[..., GameState]
) -> None:
    position = "/".join(["4k3", "8", "8", "8", "8", "8", "8", "R3K3"])
    service = ChessService(RulesEngine(state_from_fen(position)), settings)
    response = move(service, (7, 0), (0, 0))

    assert response.notice == "Black is in check!"
    assert response.outcome == Outcome.CHECK
    assert response.outcome_color == Color.BLACK
    assert not response.is_locked


def test_notice_cleared_on_next_click(service: ChessService) -> None:
    move(service, (6, 4), (3, 4))
    response = click(service, 6, 3)
    assert response.notice is None


# --- GAME OVER ---
def test_checkmate_locks_the_game(
    service: ChessService, fools_mate: list[tuple[Coordinates, Coordinates]]
) -> None:
    for from_sq, to_sq in fools_mate:
        response = move(service, from_sq, to_sq)

    assert response.notice == "Black wins by checkmate!"
    assert response.outcome == Outcome.CHECKMATE
    assert response.winner == Color.BLACK
    assert response.is_locked

    with pytest.raises(GameStateError):
        click(service, 6, 4)


def test_king_captured_notice(
    settings: Settings, state_from_fen: Callable[..., GameState]
) -> None:
    position = "/".join(["4k3", "8", "4Q3", "8", "8", "8", "8", "4K3"])
    service = ChessService(RulesEngine(state_from_fen(position)), settings)
    response = move(service, (2, 4), (0, 4))

    assert response.notice == "White wins by capturing the king!"
    assert response.outcome == Outcome.KING_CAPTURED
    assert response.winner == Color.WHITE
    assert response.is_locked


def test_new_game_unlocks(
    service: ChessService, fools_mate: list[tuple[Coordinates, Coordinates]]
) -> None:
    for from_sq, to_sq in fools_mate:
        move(service, from_sq, to_sq)

    response = service.new_game()
    assert not response.is_locked
    assert response.outcome == Outcome.ONGOING
    assert response.color_to_move == Color.WHITE
    assert click(service, 6, 4).selected_square is not None


def test_without_lock_moves_are_rejected_by_engine(
    fools_mate: list[tuple[Coordinates, Coordinates]],
) -> None:
    service = ChessService(RulesEngine(), Settings(lock_on_game_over=False))
    for from_sq, to_sq in fools_mate:
        move(service, from_sq, to_sq)

    # white (checkmated) is still the color to move
    response = move(service, (6, 0), (5, 0))
    assert not response.is_locked
    assert response.notice == "Invalid move: game is over!"
    assert response.outcome == Outcome.CHECKMATE


# --- LEGAL MOVES ---
def test_legal_moves(service: ChessService) -> None:
    response = service.legal_moves(LegalMovesRequest(row=7, col=1))

    assert isinstance(response, LegalMovesResponse)
    assert response.color_to_move == Color.WHITE
    assert (response.square.row, response.square.col) == (7, 1)
    assert {(sq.row, sq.col) for sq in response.legal_moves} == {(5, 0), (5, 2)}


def test_no_legal_moves_for_opponent_piece(service: ChessService) -> None:
    response = service.legal_moves(LegalMovesRequest(row=1, col=4))
    assert response.legal_moves == []
