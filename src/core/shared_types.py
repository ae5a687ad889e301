"""
Type definitions used across layers
"""

from enum import StrEnum


class Color(StrEnum):
    WHITE = "white"
    BLACK = "black"

    @property
    def opponent(self) -> "Color":
        return Color.BLACK if self == Color.WHITE else Color.WHITE


class PieceType(StrEnum):
    PAWN = "pawn"
    KNIGHT = "knight"
    BISHOP = "bishop"
    ROOK = "rook"
    QUEEN = "queen"
    KING = "king"


class Winner(StrEnum):
    WHITE = "white"
    BLACK = "black"
    DRAW = "draw"


class Difficulty(StrEnum):
    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"
    EXPERT = "expert"


class MoveQuality(StrEnum):
    """Informational tag shown next to a move. Has no effect on the game."""

    BEST = "best"
    GOOD = "good"
    NORMAL = "normal"
    BAD = "bad"
    WORST = "worst"


class SoundEvent(StrEnum):
    """Category of sound the caller should play after a move (playback is not our concern)."""

    MOVE = "move"
    CAPTURE = "capture"
    GAME_OVER = "gameover"
