"""Helpers for implementing Castling rules. Need to be imported by multiple sources"""

from dataclasses import dataclass
from enum import Enum
from typing import Self

from src.chess.square import Square
from src.core.shared_types import Color


class CastlingSide(Enum):
    """Values are the direction the king travels along its rank."""

    KING_SIDE = 1
    QUEEN_SIDE = -1


@dataclass(frozen=True)
class CastlingSquares:
    """
    Store the squares where king/rook start from/end up in by castling.
    NOTE: the king passes through exactly one square on its way to `king_to`, in both directions.
    """

    king_from: Square
    king_to: Square
    rook_from: Square
    rook_to: Square

    @classmethod
    def from_algebraic(cls, k_from: str, k_to: str, r_from: str, r_to: str) -> Self:
        """Convenience method: to make mapping shown below more readable"""
        king_from = Square.from_algebraic(k_from)
        king_to = Square.from_algebraic(k_to)
        rook_from = Square.from_algebraic(r_from)
        rook_to = Square.from_algebraic(r_to)
        return cls(king_from, king_to, rook_from, rook_to)

    @property
    def king_passes(self) -> Square:
        """The square in between king_from and king_to"""
        return Square(self.king_from.row, (self.king_from.col + self.king_to.col) // 2)


# The moves (in classical chess) made when castling
CASTLING_RULES: dict[tuple[Color, CastlingSide], CastlingSquares] = {
    (Color.WHITE, CastlingSide.KING_SIDE): CastlingSquares.from_algebraic(
        "e1", "g1", "h1", "f1"
    ),
    (Color.WHITE, CastlingSide.QUEEN_SIDE): CastlingSquares.from_algebraic(
        "e1", "c1", "a1", "d1"
    ),
    (Color.BLACK, CastlingSide.KING_SIDE): CastlingSquares.from_algebraic(
        "e8", "g8", "h8", "f8"
    ),
    (Color.BLACK, CastlingSide.QUEEN_SIDE): CastlingSquares.from_algebraic(
        "e8", "c8", "a8", "d8"
    ),
}


def castling_side(from_square: Square, to_square: Square) -> CastlingSide:
    """A king moving two files to the right castles king side, two files to the left castles queen side."""
    return (
        CastlingSide.KING_SIDE
        if to_square.col > from_square.col
        else CastlingSide.QUEEN_SIDE
    )


def castling_squares(color: Color, from_square: Square, to_square: Square) -> CastlingSquares:
    return CASTLING_RULES[(color, castling_side(from_square, to_square))]
