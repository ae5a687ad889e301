"""
A square on the board

(placed in its own module as multiple other modules need to import it)

Squares are addressed by zero-based (row, col):
* row 0 is black's back rank (the 8th rank), row 7 is white's back rank (the 1st rank)
* col 0 is the a-file
"""

from __future__ import annotations

from dataclasses import dataclass

from src.core.exceptions import InvalidSquareError

# (rows, cols)
BOARD_DIMENSIONS = (8, 8)
FILES = "abcdefgh"


@dataclass(frozen=True)
class Square:
    row: int
    col: int

    @classmethod
    def from_algebraic(cls, sq: str) -> Square:
        """Algebraic notation: 'a8' - 'h1' get converted to (0,0) - (7,7)"""
        col = ord(sq[0]) - ord("a")
        row = BOARD_DIMENSIONS[0] - int(sq[1])
        return cls(row, col)

    @classmethod
    def from_key(cls, key: str) -> Square:
        """Inverse of `key()`: '6,4' --> Square(6, 4)"""
        row, col = key.split(",")
        return cls(int(row), int(col))

    def to_algebraic(self) -> str:
        return f"{FILES[self.col]}{BOARD_DIMENSIONS[0] - self.row}"

    def key(self) -> str:
        """The 'row,col' string used for the sets of legal destinations handed to the caller."""
        return f"{self.row},{self.col}"

    def is_within_bounds(self) -> bool:
        return (0 <= self.row < BOARD_DIMENSIONS[0]) and (
            0 <= self.col < BOARD_DIMENSIONS[1]
        )

    def assert_within_bounds(self) -> None:
        """Coordinates outside the board are a programming error of the caller: fail loudly."""
        if not self.is_within_bounds():
            raise InvalidSquareError(
                f"Square (row={self.row}, col={self.col}) is not on the board."
            )


def all_squares() -> list[Square]:
    """Every square, row by row starting at the 8th rank."""
    return [
        Square(row, col)
        for row in range(BOARD_DIMENSIONS[0])
        for col in range(BOARD_DIMENSIONS[1])
    ]
