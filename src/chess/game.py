"""
The rules engine is the entrypoint into the domain layer for the service layer.

It decides if a move is legal, produces the resulting position and classifies the game state:
ongoing / check / checkmate / king captured.
"""

from dataclasses import dataclass
from enum import Enum, auto
from typing import Optional, Self

from loguru import logger

from src.chess.board import Board
from src.chess.moves import Move, follows_movement_rules
from src.chess.pieces import Color, PieceType
from src.chess.square import Square
from src.core.exceptions import (
    GameOverError,
    IllegalMoveError,
    MoveRejectedError,
    NoOpMoveError,
    OutOfBoundsError,
    SelfCheckError,
)

# Squares surrounding the king, used when looking for an escape from check
KING_DELTAS: list[tuple[int, int]] = [
    (-1, -1),
    (-1, 0),
    (-1, 1),
    (0, -1),
    (0, 1),
    (1, -1),
    (1, 0),
    (1, 1),
]


class OutcomeKind(Enum):
    ONGOING = auto()
    CHECK = auto()
    CHECKMATE = auto()
    KING_CAPTURED = auto()


@dataclass(frozen=True)
class Outcome:
    """
    Classification of the game after a move.

    NOTE: the meaning of `color` depends on the kind:
    * CHECK: the side whose king is attacked (the side to move)
    * CHECKMATE / KING_CAPTURED: the winning side
    * ONGOING: None
    """

    kind: OutcomeKind
    color: Optional[Color] = None

    @classmethod
    def ongoing(cls) -> Self:
        return cls(OutcomeKind.ONGOING)

    @classmethod
    def check(cls, color: Color) -> Self:
        return cls(OutcomeKind.CHECK, color)

    @classmethod
    def checkmate(cls, winner: Color) -> Self:
        return cls(OutcomeKind.CHECKMATE, winner)

    @classmethod
    def king_captured(cls, winner: Color) -> Self:
        return cls(OutcomeKind.KING_CAPTURED, winner)

    @property
    def is_game_over(self) -> bool:
        return self.kind in (OutcomeKind.CHECKMATE, OutcomeKind.KING_CAPTURED)

    @property
    def winner(self) -> Optional[Color]:
        return self.color if self.is_game_over else None


@dataclass(frozen=True)
class GameState:
    board: Board
    color_to_move: Color
    outcome: Outcome

    @classmethod
    def initial(cls) -> Self:
        """Standard starting position, white to move."""
        return cls(Board.starting_position(), Color.WHITE, Outcome.ongoing())


# --- PURE RULES ---
def is_legal_move(state: GameState, from_square: Square, to_square: Square) -> bool:
    """
    Movement rules for the player to move. Does NOT check whether the move exposes your own king.
    Never raises: anything that cannot be moved is simply not legal.
    """
    move = Move(from_square, to_square)
    return follows_movement_rules(move, state.color_to_move, state.board)


def would_leave_king_in_check(board: Board, color: Color) -> bool:
    """
    True if any opposing piece could move onto the square of the king of the given color.

    Works on any (hypothetical) board, not just the one of the current game state.
    """
    king_square = board.locate_king(color)
    if king_square is None:
        # Only happens on boards constructed without a king. A captured king ends the game before we get here.
        logger.warning(
            f"No {color.name.lower()} king on the board, treating as not in check"
        )
        return False

    return is_square_attacked(board, king_square, color.opponent)


def is_square_attacked(board: Board, square: Square, attacker: Color) -> bool:
    """True if any piece of `attacker` could move onto `square`."""
    return any(
        follows_movement_rules(Move(from_square, square), attacker, board)
        for from_square in board.locate_color(attacker)
    )


def is_checkmate(board: Board, color: Color) -> bool:
    """
    King-mobility-only checkmate
    ----

    1. Not in check? Not checkmate.
    2. Try to move the king to every neighbouring square (on the board, not occupied by your own piece).
    3. Any of those leave the king safe? Not checkmate.

    NOTE: blocking the check or capturing the attacker with another piece is NOT considered.
    """
    if not would_leave_king_in_check(board, color):
        return False

    # in check, so the king must be on the board
    king_square = board.locate_king(color)
    assert king_square is not None

    for d_row, d_col in KING_DELTAS:
        escape_square = king_square.offset(d_row, d_col)
        if not escape_square.is_within_bounds():
            continue

        occupant = board.piece(escape_square)
        if occupant is not None and occupant.color == color:
            continue

        escaped_board = board.move_piece(Move(king_square, escape_square))
        if not would_leave_king_in_check(escaped_board, color):
            return False

    return True


def classify_outcome(board: Board, mover: Color, captured_king: bool) -> Outcome:
    """Status of the game from the perspective of the player who is about to move (the mover's opponent)."""
    next_to_move = mover.opponent
    # capturing the king ends the game immediately, whatever the rest of the board looks like
    if captured_king:
        return Outcome.king_captured(mover)
    if is_checkmate(board, next_to_move):
        return Outcome.checkmate(mover)
    if would_leave_king_in_check(board, next_to_move):
        return Outcome.check(next_to_move)
    return Outcome.ongoing()


def apply_move(state: GameState, from_square: Square, to_square: Square) -> GameState:
    """
    Attempt a move and return the resulting game state.
    -----

    1. reject squares off the board / moves after the game ended / moving onto the same square
    2. reject moves against the movement rules
    3. make the move on a copy of the board
    4. reject if your own king is now under attack
    5. remember if a king got captured
    6. hand the turn over to the opponent
    7. classify the outcome

    Raises a MoveRejectedError subclass when the move is not allowed. The given state is never changed.
    """
    move = Move(from_square, to_square)
    mover = state.color_to_move

    if not move.is_within_bounds():
        raise OutOfBoundsError(
            f"Squares must lie on the board: {from_square} -> {to_square}"
        )

    if state.outcome.is_game_over:
        raise GameOverError(
            f"Game is over ({state.outcome.kind.name.lower()}). Start a new game first."
        )

    if from_square == to_square:
        raise NoOpMoveError(
            f"Source and destination are the same square: {from_square}"
        )

    if not is_legal_move(state, from_square, to_square):
        raise IllegalMoveError(
            f"Move not allowed for {mover.name.lower()}: {from_square} -> {to_square}"
        )

    new_board = state.board.move_piece(move)
    if would_leave_king_in_check(new_board, mover):
        raise SelfCheckError(
            f"Move would leave the {mover.name.lower()} king in check: {from_square} -> {to_square}"
        )

    captured_piece = state.board.piece(to_square)
    captured_king = captured_piece is not None and captured_piece.type == PieceType.KING

    outcome = classify_outcome(new_board, mover, captured_king)
    return GameState(board=new_board, color_to_move=mover.opponent, outcome=outcome)


def legal_destinations(state: GameState, from_square: Square) -> list[Square]:
    """All squares the piece on `from_square` can move to, self-check included. Used to highlight moves."""
    if state.outcome.is_game_over or not from_square.is_within_bounds():
        return []

    mover = state.color_to_move
    piece = state.board.piece(from_square)
    moves_king = piece is not None and piece.type == PieceType.KING
    # the king only moves if it is the piece being moved, so look it up once
    king_square = state.board.locate_king(mover)

    destinations: list[Square] = []
    for to_square, _ in state.board.squares():
        if not is_legal_move(state, from_square, to_square):
            continue
        if king_square is None:
            destinations.append(to_square)
            continue

        new_board = state.board.move_piece(Move(from_square, to_square))
        new_king_square = to_square if moves_king else king_square
        if not is_square_attacked(new_board, new_king_square, mover.opponent):
            destinations.append(to_square)
    return destinations


# --- ENGINE ---
class RulesEngine:
    """
    Owns the single GameState of one game.

    The state is replaced as a whole on every accepted move and on reset. As the state is immutable,
    whatever gets handed out is a snapshot the caller cannot use to change the game.
    """

    def __init__(self, state: Optional[GameState] = None) -> None:
        # a custom state is mostly useful to start from a constructed position
        self._state = state if state is not None else GameState.initial()

    @property
    def state(self) -> GameState:
        return self._state

    def initialize(self) -> GameState:
        self._state = GameState.initial()
        logger.debug("New game initialized, white to move")
        return self._state

    def reset(self) -> GameState:
        """Discard the current game and start from the standard position again."""
        return self.initialize()

    def is_legal_move(self, from_square: Square, to_square: Square) -> bool:
        return is_legal_move(self._state, from_square, to_square)

    def is_checkmate(self, color: Color) -> bool:
        return is_checkmate(self._state.board, color)

    def legal_destinations(self, from_square: Square) -> list[Square]:
        return legal_destinations(self._state, from_square)

    def apply_move(self, from_square: Square, to_square: Square) -> GameState:
        """Commit the move when accepted. On rejection, the error propagates and the state stays unchanged."""
        try:
            new_state = apply_move(self._state, from_square, to_square)
        except MoveRejectedError as e:
            logger.debug(f"Move rejected: {e}")
            raise

        mover = self._state.color_to_move.name.lower()
        logger.debug(f"{mover} moved {from_square} -> {to_square}")
        outcome = new_state.outcome
        if outcome.kind != OutcomeKind.ONGOING and outcome.color is not None:
            logger.info(f"{outcome.kind.name.lower()}: {outcome.color.name.lower()}")
        self._state = new_state
        return new_state
