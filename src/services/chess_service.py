"""
Session shell for a hot-seat game: both players share one screen.

Orchestrates the communication between a presentation layer (which only knows which square got clicked)
and the rules engine. Keeps the UI-level state the engine should not know about: the currently selected square and
the notice to show to the players.
"""

from typing import Optional

from loguru import logger

from src.api.models import (
    GameResponse,
    LegalMovesRequest,
    LegalMovesResponse,
    PieceModel,
    SelectSquareRequest,
    SquareModel,
)
from src.chess.game import GameState, OutcomeKind, RulesEngine
from src.chess.pieces import Color as DomainColor
from src.chess.pieces import Piece
from src.chess.square import Square
from src.core.config import Settings, get_settings
from src.core.exceptions import GameStateError, MoveRejectedError
from src.core.log import configure_logging
from src.core.shared_types import Color, Outcome, PieceType


class ChessService:
    """Hot-seat game: one engine, one selection, one notice."""

    def __init__(
        self, engine: Optional[RulesEngine] = None, settings: Optional[Settings] = None
    ) -> None:
        self.engine = engine or RulesEngine()
        self.settings = settings or get_settings()
        configure_logging(self.settings)
        self.selected: Optional[Square] = None
        self.notice: Optional[str] = None

    # -- Presentation layer logic ---
    def new_game(self) -> GameResponse:
        """Throw away the current game and start over."""
        self.engine.reset()
        self.selected = None
        self.notice = None
        logger.info("New game started")
        return self.get_game_state()

    def get_game_state(self) -> GameResponse:
        return self._create_game_response(self.engine.state)

    def select_square(self, request: SelectSquareRequest) -> GameResponse:
        """
        A player clicked a square.
        ----

        1. Nothing selected yet: select the square if it holds a piece of the player to move.
        2. Clicked the selected square again: deselect.
        3. Clicked another of your own pieces: select that one instead.
        4. Otherwise: attempt to move the selected piece there.
        """
        if self.is_locked:
            raise GameStateError(
                "Game is over. Start a new game before making another move."
            )

        square = Square(request.row, request.col)
        state = self.engine.state
        self.notice = None

        if self.selected is None:
            if self._is_own_piece(state, square):
                self.selected = square
            return self.get_game_state()

        if square == self.selected:
            self.selected = None
            return self.get_game_state()

        if self._is_own_piece(state, square):
            self.selected = square
            return self.get_game_state()

        try:
            new_state = self.engine.apply_move(self.selected, square)
        except MoveRejectedError as e:
            # keep the selection: the player can pick another destination
            self.notice = f"Invalid move: {e.reason}!"
            return self.get_game_state()

        self.selected = None
        self.notice = self._outcome_notice(new_state)
        return self.get_game_state()

    def legal_moves(self, request: LegalMovesRequest) -> LegalMovesResponse:
        """Destinations to highlight for the piece on the requested square."""
        square = Square(request.row, request.col)
        destinations = self.engine.legal_destinations(square)
        return LegalMovesResponse(
            square=SquareModel(row=square.row, col=square.col),
            color_to_move=Color[self.engine.state.color_to_move.name],
            legal_moves=[SquareModel(row=sq.row, col=sq.col) for sq in destinations],
        )

    @property
    def is_locked(self) -> bool:
        return (
            self.settings.lock_on_game_over
            and self.engine.state.outcome.is_game_over
        )

    # -- Internal helpers --
    def _is_own_piece(self, state: GameState, square: Square) -> bool:
        piece = state.board.piece(square)
        return piece is not None and piece.color == state.color_to_move

    def _outcome_notice(self, state: GameState) -> Optional[str]:
        outcome = state.outcome
        if outcome.color is None:
            return None

        side = outcome.color.name.capitalize()
        notices: dict[OutcomeKind, str] = {
            OutcomeKind.CHECK: f"{side} is in check!",
            OutcomeKind.CHECKMATE: f"{side} wins by checkmate!",
            OutcomeKind.KING_CAPTURED: f"{side} wins by capturing the king!",
        }
        return notices.get(outcome.kind)

    def _create_game_response(self, state: GameState) -> GameResponse:
        """Convert the (domain) game state into a GameResponse."""
        outcome = state.outcome
        return GameResponse(
            board=[
                [self._to_piece_model(piece) for piece in row]
                for row in state.board.rows
            ],
            color_to_move=self._to_color(state.color_to_move),
            outcome=Outcome[outcome.kind.name],
            outcome_color=self._to_color(outcome.color) if outcome.color else None,
            winner=self._to_color(outcome.winner) if outcome.winner else None,
            selected_square=(
                SquareModel(row=self.selected.row, col=self.selected.col)
                if self.selected is not None
                else None
            ),
            notice=self.notice,
            is_locked=self.is_locked,
        )

    def _to_piece_model(self, piece: Optional[Piece]) -> Optional[PieceModel]:
        if piece is None:
            return None
        return PieceModel(
            type=PieceType[piece.type.name],
            color=self._to_color(piece.color),
            symbol=piece.symbol,
        )

    def _to_color(self, color: DomainColor) -> Color:
        return Color[color.name]
