"""
Check detection and the end of the game
---

A legal move is a geometrically valid move (see moves.py) that does not leave your own king in check.
Whether it does is found out by making the move on the board itself, looking at the king, and undoing it again
(see `Board.simulate`).
"""

from typing import Optional

from src.chess.board import Board
from src.chess.moves import (
    Move,
    en_passant_capture_square,
    is_legal_geometry,
    is_square_under_attack,
)
from src.chess.square import Square, all_squares
from src.core.shared_types import Color, Winner


def king_in_check(board: Board, color: Color, last_move: Optional[Move] = None) -> bool:
    """Is the king of `color` attacked right now?"""
    king_square = board.locate_king(color)
    return is_square_under_attack(board, king_square, color, last_move)


def leaves_king_safe(
    board: Board,
    from_square: Square,
    to_square: Square,
    last_move: Optional[Move] = None,
) -> bool:
    """
    Return True if, after moving the piece, its own king is not in check.

    plan:
    1. make the candidate move on the board (an en passant capture also takes the passed pawn away)
    2. determine if the king is in check on the new board
    3. put everything back
    """
    color = board.piece(from_square).color
    captured_square = en_passant_capture_square(board, from_square, to_square)
    with board.simulate(from_square, to_square, captured_square):
        return not king_in_check(board, color, last_move)


def legal_destinations(
    board: Board, from_square: Square, last_move: Optional[Move] = None
) -> set[str]:
    """
    Every destination of the piece on `from_square` that is geometrically legal AND keeps its king safe.
    ---

    Returned as 'row,col' strings: what a caller uses to highlight the squares.
    """
    piece = board.piece(from_square)
    if piece is None:
        return set()
    return {
        to_square.key()
        for to_square in all_squares()
        if is_legal_geometry(board, piece, from_square, to_square, last_move)
        and leaves_king_safe(board, from_square, to_square, last_move)
    }


def legal_moves(board: Board, color: Color, last_move: Optional[Move] = None) -> list[Move]:
    """List of legal moves for the player with the 'color' pieces (every origin, every destination)"""
    moves: list[Move] = []
    for from_square in board.locate_color(color):
        piece = board.piece(from_square)
        for to_square in all_squares():
            if not is_legal_geometry(board, piece, from_square, to_square, last_move):
                continue
            if leaves_king_safe(board, from_square, to_square, last_move):
                moves.append(Move(from_square, to_square))
    return moves


def has_any_legal_move(board: Board, color: Color, last_move: Optional[Move] = None) -> bool:
    """Same enumeration as `legal_moves`, but stops at the first move found that keeps the king safe."""
    for from_square in board.locate_color(color):
        piece = board.piece(from_square)
        for to_square in all_squares():
            if is_legal_geometry(
                board, piece, from_square, to_square, last_move
            ) and leaves_king_safe(board, from_square, to_square, last_move):
                return True
    return False


def terminal_winner(
    board: Board, color_to_move: Color, last_move: Optional[Move] = None
) -> Optional[Winner]:
    """
    Has the game ended (checked after the turn passed to `color_to_move`)?
    ---

    * The side to move still has a legal move: not over (None)
    * No legal move and in check: checkmate, the side that just moved wins
    * No legal move and not in check: stalemate (draw)
    """
    if has_any_legal_move(board, color_to_move, last_move):
        return None
    if king_in_check(board, color_to_move, last_move):
        return Winner(color_to_move.opponent.value)
    return Winner.DRAW
