"""Snapshots of the game state, pushed after every move so that moves can be taken back."""

from dataclasses import dataclass
from typing import Optional, Self

from src.chess.board import Board
from src.chess.moves import Move
from src.chess.pieces import Piece
from src.core.shared_types import Color, MoveQuality

CapturedPieces = dict[Color, list[Piece]]


def empty_captures() -> CapturedPieces:
    return {Color.WHITE: [], Color.BLACK: []}


def clone_captures(captured: CapturedPieces) -> CapturedPieces:
    return {color: [piece.copy() for piece in pieces] for color, pieces in captured.items()}


@dataclass(frozen=True)
class HistorySnapshot:
    """
    State right after a move was made.

    NOTE: never share pieces with the live game. Use `capture()` to create one and `restore_*()` to get copies back out.
    """

    board: Board
    captured_pieces: CapturedPieces
    turn: Color
    is_check: bool
    last_move: Optional[Move]
    move_notation: str = ""
    move_quality: Optional[MoveQuality] = None

    @classmethod
    def capture(
        cls,
        board: Board,
        captured_pieces: CapturedPieces,
        turn: Color,
        is_check: bool,
        last_move: Optional[Move],
        move_notation: str = "",
        move_quality: Optional[MoveQuality] = None,
    ) -> Self:
        # Move is frozen, so it can be shared
        return cls(
            board=board.clone(),
            captured_pieces=clone_captures(captured_pieces),
            turn=turn,
            is_check=is_check,
            last_move=last_move,
            move_notation=move_notation,
            move_quality=move_quality,
        )

    def restore_board(self) -> Board:
        return self.board.clone()

    def restore_captures(self) -> CapturedPieces:
        return clone_captures(self.captured_pieces)
