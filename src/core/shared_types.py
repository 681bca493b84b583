"""
Type definitions used across layers
"""

from enum import StrEnum

# --- The domain layer (src/chess) has its own Color and PieceType enums.
# --- These string versions are what crosses the boundary towards a presentation layer.
# --- Conversion between the two happens by member name, see src/services/chess_service.py


class Color(StrEnum):
    WHITE = "white"
    BLACK = "black"


class PieceType(StrEnum):
    PAWN = "pawn"
    KNIGHT = "knight"
    BISHOP = "bishop"
    ROOK = "rook"
    QUEEN = "queen"
    KING = "king"


class Outcome(StrEnum):
    ONGOING = "ongoing"
    CHECK = "check"
    CHECKMATE = "checkmate"
    KING_CAPTURED = "king captured"
