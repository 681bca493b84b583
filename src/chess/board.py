"""The Game board: the configuration of pieces on the 8x8 grid"""

from dataclasses import dataclass
from typing import Iterator, Optional, Self

from src.chess.moves import Move
from src.chess.pieces import FEN_TO_PIECE, Color, Piece, PieceType
from src.chess.square import BOARD_DIMENSIONS, Square
from src.core.exceptions import InvalidFENError

STARTING_POSITION = "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR"
EMPTY_POSITION = "/".join(["8"] * BOARD_DIMENSIONS[0])

Row = tuple[Optional[Piece], ...]


@dataclass(frozen=True)
class Board:
    """
    Immutable grid of (optional) pieces.

    Every "update" returns a new Board, so a snapshot handed out to a presentation layer can never be changed behind the engine's back,
    and hypothetical boards (to test for self-check) are cheap to create.
    """

    rows: tuple[Row, ...]

    @classmethod
    def from_fen(cls, fen_str: str) -> Self:
        """Construct a board using the piece placement part of a FEN string.

        ex. standard starting position:
        rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR
        means:
        * black pieces are on row 0, the first part of the string
        * black pawns cover row 1 entirely
        * rows 2 through 5 have 8 consecutive empty squares
        * row 6 are the white pawns (capital letters)
        * row 7 are the white pieces. Reads left-to-right: column 0 to column 7.
        """
        num_rows, num_cols = BOARD_DIMENSIONS
        fen_by_rows = fen_str.strip().split("/")
        if len(fen_by_rows) != num_rows:
            raise InvalidFENError(
                f"Expected {num_rows} rows separated by '/', got {len(fen_by_rows)}: {fen_str!r}"
            )

        rows: list[Row] = []
        for fen_one_row in fen_by_rows:
            row: list[Optional[Piece]] = []
            for character in fen_one_row:
                if character.lower() in FEN_TO_PIECE:
                    # a letter directly denotes the piece that should be created
                    row.append(Piece.from_fen(character))
                elif character.isdigit():
                    # A number denotes the amount of empty squares after each other
                    row.extend([None] * int(character))
                else:
                    raise InvalidFENError(
                        f"Invalid character {character!r} in {fen_str!r}"
                    )
            if len(row) != num_cols:
                raise InvalidFENError(
                    f"Row {fen_one_row!r} should describe {num_cols} squares, found {len(row)}"
                )
            rows.append(tuple(row))
        return cls(tuple(rows))

    @classmethod
    def starting_position(cls) -> Self:
        return cls.from_fen(STARTING_POSITION)

    @classmethod
    def empty(cls) -> Self:
        return cls.from_fen(EMPTY_POSITION)

    def to_fen(self) -> str:
        """Rows are separated by slashes in FEN string."""
        return "/".join(self._row_to_fen(row) for row in self.rows)

    def _row_to_fen(self, row: Row) -> str:
        fen_characters: list[str] = []
        empty_count = 0
        for piece in row:
            if piece is None:
                empty_count += 1
                continue
            if empty_count > 0:
                fen_characters.append(str(empty_count))
                empty_count = 0
            fen_characters.append(piece.to_fen())

        # if the entire row is empty, then we still place this number in the string
        if empty_count > 0:
            fen_characters.append(str(empty_count))
        return "".join(fen_characters)

    # --- QUERIES ---
    def piece(self, square: Square) -> Optional[Piece]:
        return self.rows[square.row][square.col]

    def is_empty(self, square: Square) -> bool:
        return self.piece(square) is None

    def squares(self) -> Iterator[tuple[Square, Optional[Piece]]]:
        for row_idx, row in enumerate(self.rows):
            for col_idx, piece in enumerate(row):
                yield Square(row_idx, col_idx), piece

    def locate_color(self, color: Color) -> list[Square]:
        return [
            square
            for square, piece in self.squares()
            if piece is not None and piece.color == color
        ]

    def locate_king(self, color: Color) -> Optional[Square]:
        """First king of the given color when scanning row by row. None if there is no such king."""
        king = Piece(PieceType.KING, color)
        return next(
            (square for square, piece in self.squares() if piece == king), None
        )

    def count_pieces(self, color: Color) -> int:
        return len(self.locate_color(color))

    # --- UPDATES (return a new board) ---
    def place_piece(self, piece: Optional[Piece], square: Square) -> Self:
        rows = [list(row) for row in self.rows]
        rows[square.row][square.col] = piece
        return type(self)(tuple(tuple(row) for row in rows))

    def remove_piece(self, square: Square) -> Self:
        return self.place_piece(None, square)

    def move_piece(self, move: Move) -> Self:
        """Relocate the piece: the destination gets overwritten (capture), the source emptied."""
        piece_that_moved = self.piece(move.from_square)
        return self.remove_piece(move.from_square).place_piece(
            piece_that_moved, move.to_square
        )
