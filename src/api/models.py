"""Requests and Response models exchanged with a presentation layer"""

from typing import Optional

from pydantic import BaseModel, field_validator

from src.chess.square import BOARD_DIMENSIONS
from src.core.exceptions import InvalidRequestError
from src.core.shared_types import Color, Outcome, PieceType


# --- REQUEST MODELS ---
class SquareRequest(BaseModel):
    """A square picked on the rendered board. (0, 0) is the top-left corner, black's side."""

    row: int
    col: int

    @field_validator(*["row", "col"])
    @classmethod
    def validate_coordinate(cls, value: int) -> int:
        # both dimensions are the same size for a chess board
        if not (0 <= value < BOARD_DIMENSIONS[0]):
            raise InvalidRequestError(
                f"Coordinate {value} out of bounds. Must lie in [0, {BOARD_DIMENSIONS[0] - 1}]."
            )
        return value


class SelectSquareRequest(SquareRequest):
    """User clicked a square."""


class LegalMovesRequest(SquareRequest):
    """Ask for the destinations of the piece on this square (to highlight them)."""


# --- RESPONSE MODELS ---
class PieceModel(BaseModel):
    type: PieceType
    color: Color
    symbol: str


class SquareModel(BaseModel):
    row: int
    col: int


class GameResponse(BaseModel):
    board: list[list[Optional[PieceModel]]]
    color_to_move: Color
    outcome: Outcome
    # for check: the side in check. For checkmate / king captured: the winner.
    outcome_color: Optional[Color]
    winner: Optional[Color]
    selected_square: Optional[SquareModel]
    notice: Optional[str]
    is_locked: bool


class LegalMovesResponse(BaseModel):
    square: SquareModel
    color_to_move: Color
    legal_moves: list[SquareModel]
