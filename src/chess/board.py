"""The Board holds the configuration of pieces: an 8x8 grid of optional pieces. Pure data, no chess rules live here."""

from contextlib import contextmanager
from dataclasses import dataclass
from typing import Iterator, Optional, Self

from src.chess.pieces import Piece
from src.chess.square import BOARD_DIMENSIONS, Square, all_squares
from src.core.exceptions import GameStateError, IllegalMoveError
from src.core.shared_types import Color, PieceType

Grid = list[list[Optional[Piece]]]

STARTING_POSITION = "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR"


@dataclass
class Board:
    grid: Grid

    @classmethod
    def empty(cls) -> Self:
        return cls([[None] * BOARD_DIMENSIONS[1] for _ in range(BOARD_DIMENSIONS[0])])

    @classmethod
    def starting_position(cls) -> Self:
        """Back ranks: rook-knight-bishop-queen-king-bishop-knight-rook. Pawns on the 2nd and 7th rank."""
        return cls.from_fen(STARTING_POSITION)

    @classmethod
    def from_fen(cls, fen_str: str) -> Self:
        """Construct a board using the placement part of a FEN string.

        ex. standard starting position:
        rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR
        means:
        * the first group is the 8th rank (row 0), read from the a-file to the h-file
        * lower case letters are black pieces, upper case letters are white pieces
        * a number denotes that many consecutive empty squares

        NOTE: a board created like this has no history, so every piece counts as not having moved yet.
        """
        board = cls.empty()
        for row, fen_one_rank in enumerate(fen_str.split("/")):
            col = 0
            for character in fen_one_rank:
                if character.isalpha():
                    board.grid[row][col] = Piece.from_fen(character)
                    col += 1
                else:
                    col += int(character)
        return board

    def to_fen(self) -> str:
        """Ranks are separated by slashes in FEN string."""
        return "/".join(self._row_to_fen(row) for row in range(BOARD_DIMENSIONS[0]))

    def _row_to_fen(self, row: int) -> str:
        """FEN string of a single rank"""
        fen_characters: list[str] = []
        empty_count = 0
        for piece in self.grid[row]:
            if piece is not None:
                if empty_count > 0:
                    fen_characters.append(str(empty_count))
                    empty_count = 0
                fen_characters.append(piece.to_fen())
            else:
                empty_count += 1

        # if the entire rank is empty, then we still place this number in the string
        if empty_count > 0:
            fen_characters.append(str(empty_count))
        return "".join(fen_characters)

    # --- ACCESSORS ---
    def piece(self, square: Square) -> Optional[Piece]:
        return self.grid[square.row][square.col]

    def is_empty(self, square: Square) -> bool:
        return self.piece(square) is None

    def place(self, square: Square, piece: Optional[Piece]) -> None:
        self.grid[square.row][square.col] = piece

    def remove_piece(self, square: Square) -> Optional[Piece]:
        piece = self.piece(square)
        self.place(square, None)
        return piece

    def move_piece(self, from_square: Square, to_square: Square) -> Optional[Piece]:
        """Relocate the piece (ownership moves to the destination). Returns whatever stood on the destination."""
        piece = self.piece(from_square)
        if piece is None:
            raise IllegalMoveError(f"No piece to move on {from_square.to_algebraic()}")
        captured = self.piece(to_square)
        self.place(to_square, piece)
        self.place(from_square, None)
        return captured

    def locate_color(self, color: Color) -> list[Square]:
        return [
            square
            for square in all_squares()
            if (piece := self.piece(square)) is not None and piece.color == color
        ]

    def locate_king(self, color: Color) -> Square:
        """Exactly one king per color must be on the board while playing. Anything else is a bug."""
        kings = [
            square
            for square in self.locate_color(color)
            if self.piece(square).type == PieceType.KING
        ]
        if len(kings) != 1:
            raise GameStateError(
                f"Expected exactly one {color} king on the board, found {len(kings)}."
            )
        return kings[0]

    def count_material(self) -> dict[Color, int]:
        """Tally the points of material each player has on the board"""
        return {
            color: sum(self.piece(square).points for square in self.locate_color(color))
            for color in Color
        }

    # --- COPIES / SIMULATION ---
    def clone(self) -> Self:
        """Independent deep copy: no piece is shared with the original board."""
        return type(self)(
            [[piece.copy() if piece else None for piece in row] for row in self.grid]
        )

    @contextmanager
    def simulate(
        self,
        from_square: Square,
        to_square: Square,
        captured_square: Optional[Square] = None,
    ) -> Iterator[Self]:
        """
        Temporarily make a move on this very board, and put everything back afterwards.
        ---

        `captured_square` is the square of a piece taken away from somewhere else than the destination (en passant).

        The previous occupants (including empty squares) are restored on every exit path.
        """
        moving_piece = self.piece(from_square)
        original_target = self.piece(to_square)
        original_captured = self.piece(captured_square) if captured_square else None
        try:
            if captured_square:
                self.place(captured_square, None)
            self.place(to_square, moving_piece)
            self.place(from_square, None)
            yield self
        finally:
            self.place(from_square, moving_piece)
            self.place(to_square, original_target)
            if captured_square:
                self.place(captured_square, original_captured)
