"""
Geometry/Base movement and capturing rules

Key idea: Use strategy pattern to define, for each piece type, whether a move is allowed by that piece's movement rules.

These checks are local: whether a move leaves your own king in check is decided later by the rules engine in game.py.
"""

from dataclasses import dataclass
from typing import Callable, Optional, Protocol

from src.chess.pieces import Color, Piece, PieceType
from src.chess.square import Square


class Board(Protocol):
    """Just the parts the movement rules need"""

    def piece(self, square: Square) -> Optional[Piece]: ...
    def is_empty(self, square: Square) -> bool: ...


@dataclass(frozen=True)
class Move:
    """basic definition of a move to be made"""

    from_square: Square
    to_square: Square

    @property
    def row_diff(self) -> int:
        return abs(self.to_square.row - self.from_square.row)

    @property
    def col_diff(self) -> int:
        return abs(self.to_square.col - self.from_square.col)

    def is_within_bounds(self) -> bool:
        return self.from_square.is_within_bounds() and self.to_square.is_within_bounds()


# --- PAWN CONSTANTS: white advances towards row 0, black towards row 7 ---
PAWN_DIRECTION: dict[Color, int] = {Color.WHITE: -1, Color.BLACK: 1}
PAWN_START_ROW: dict[Color, int] = {Color.WHITE: 6, Color.BLACK: 1}


def _step(delta: int) -> int:
    if delta == 0:
        return 0
    return 1 if delta > 0 else -1


def is_path_clear(from_square: Square, to_square: Square, board: Board) -> bool:
    """
    Walk the straight or diagonal line from one square towards the other, one step at a time.
    Both endpoints are excluded: only the squares strictly in between must be empty.
    """
    d_row = _step(to_square.row - from_square.row)
    d_col = _step(to_square.col - from_square.col)
    square = from_square.offset(d_row, d_col)
    while square != to_square:
        if not board.is_empty(square):
            return False
        square = square.offset(d_row, d_col)
    return True


# --- MOVEMENT RULES ---
def is_legal_pawn_move(piece: Piece, move: Move, board: Board) -> bool:
    """
    A pawn:
    - moves by a single square forward, onto an empty square.
    - It can move by two on its first move (so when on its starting row), if both squares are empty.
    - takes diagonally forward

    NOTE: No en passant, no promotion.
    """
    direction = PAWN_DIRECTION[piece.color]
    from_sq, to_sq = move.from_square, move.to_square
    target_piece = board.piece(to_sq)
    rows_forward = to_sq.row - from_sq.row

    same_col = from_sq.col == to_sq.col
    if same_col and rows_forward == direction:
        return target_piece is None

    if same_col and rows_forward == 2 * direction:
        on_start_row = from_sq.row == PAWN_START_ROW[piece.color]
        middle_square = from_sq.offset(direction, 0)
        return on_start_row and target_piece is None and board.is_empty(middle_square)

    if move.col_diff == 1 and rows_forward == direction:
        return target_piece is not None and target_piece.color != piece.color

    return False


def is_legal_knight_move(piece: Piece, move: Move, board: Board) -> bool:
    """L-shape: two squares along one axis and one along the other. Jumps over anything in between."""
    return (move.row_diff, move.col_diff) in ((2, 1), (1, 2))


def is_legal_bishop_move(piece: Piece, move: Move, board: Board) -> bool:
    """Bishops move diagonally: |delta_row| = |delta_col|"""
    if move.row_diff != move.col_diff:
        return False
    return is_path_clear(move.from_square, move.to_square, board)


def is_legal_rook_move(piece: Piece, move: Move, board: Board) -> bool:
    """Rooks move either horizontally or vertically"""
    stays_on_row = move.from_square.row == move.to_square.row
    stays_on_col = move.from_square.col == move.to_square.col
    if not (stays_on_row or stays_on_col):
        return False
    return is_path_clear(move.from_square, move.to_square, board)


def is_legal_queen_move(piece: Piece, move: Move, board: Board) -> bool:
    """
    The Queen combines the rook moves (horizontal + vertical movements) and bishop moves (diagonal movement)
    """
    return is_legal_rook_move(piece, move, board) or is_legal_bishop_move(
        piece, move, board
    )


def is_legal_king_move(piece: Piece, move: Move, board: Board) -> bool:
    """The king moves a single square in any direction. No castling."""
    return move.row_diff <= 1 and move.col_diff <= 1


# -- STRATEGY PATTERN: MOVEMENT RULES ---
MovementRuleFn = Callable[[Piece, Move, Board], bool]
MOVEMENT_RULES: dict[PieceType, MovementRuleFn] = {
    PieceType.PAWN: is_legal_pawn_move,
    PieceType.KNIGHT: is_legal_knight_move,
    PieceType.BISHOP: is_legal_bishop_move,
    PieceType.ROOK: is_legal_rook_move,
    PieceType.QUEEN: is_legal_queen_move,
    PieceType.KING: is_legal_king_move,
}


def follows_movement_rules(move: Move, color: Color, board: Board) -> bool:
    """
    Is the move allowed for a player of the given color, ignoring self-check?
    ----

    False (never raises) when:
    * one of the squares lies off the board
    * there is no piece to move, or it belongs to the other player
    * the target square holds one of your own pieces
    Otherwise the piece type decides.
    """
    if not move.is_within_bounds():
        return False

    piece = board.piece(move.from_square)
    if piece is None or piece.color != color:
        return False

    target_piece = board.piece(move.to_square)
    if target_piece is not None and target_piece.color == color:
        return False

    movement_rule = MOVEMENT_RULES[piece.type]
    return movement_rule(piece, move, board)
