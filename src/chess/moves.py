"""
Geometry/Base movement and capturing/attacking rules

Key idea: Use strategy pattern to define the geometry of a move for each piece type.

A geometrically legal move may still leave your own king in check. That part of legality is checked in rules.py
"""

from dataclasses import dataclass
from typing import Callable, Optional, Self

from src.chess.board import Board
from src.chess.castling import castling_squares
from src.chess.pieces import Piece
from src.chess.square import BOARD_DIMENSIONS, Square, all_squares
from src.core.exceptions import InvalidSquareError
from src.core.shared_types import Color, PieceType

Vector = tuple[int, int]


@dataclass(frozen=True)
class Move:
    """basic definition of a move to be made (also used to remember the last move played)"""

    from_square: Square
    to_square: Square
    promote_to: Optional[PieceType] = None

    @classmethod
    def from_notation(cls, notation: str) -> Self:
        """
        Coordinate notation: <file><rank>-<file><rank>

        examples:
        * "e2-e4": move the piece that was on e2 to e4
        * "e1-g1": the king castles king side
        """
        from_alg, to_alg = notation.split("-")
        return cls(Square.from_algebraic(from_alg), Square.from_algebraic(to_alg))

    def to_notation(self) -> str:
        return f"{self.from_square.to_algebraic()}-{self.to_square.to_algebraic()}"


def pawn_direction(color: Color) -> int:
    """White pawns move up the board (towards row 0), black pawns move down"""
    return -1 if color == Color.WHITE else 1


def pawn_start_row(color: Color) -> int:
    return BOARD_DIMENSIONS[0] - 2 if color == Color.WHITE else 1


def promotion_row(color: Color) -> int:
    return 0 if color == Color.WHITE else BOARD_DIMENSIONS[0] - 1


def _sign(value: int) -> int:
    return (value > 0) - (value < 0)


def is_path_blocked(board: Board, from_square: Square, to_square: Square) -> bool:
    """
    Walk from origin towards destination (along a rank, file or diagonal)
    and report whether any square strictly in between is occupied.
    """
    dr = _sign(to_square.row - from_square.row)
    dc = _sign(to_square.col - from_square.col)
    row = from_square.row + dr
    col = from_square.col + dc
    while (row, col) != (to_square.row, to_square.col):
        if not board.is_empty(Square(row, col)):
            return True
        row += dr
        col += dc
    return False


# --- SPECIAL MOVE DETECTION ---
def is_en_passant_capture(
    board: Board, piece: Piece, from_square: Square, to_square: Square, last_move: Optional[Move]
) -> bool:
    """
    En passant:
    ---

    The pawn moves diagonally onto an EMPTY square and is allowed to do so only if the move right before was
    a two-square advance of an enemy pawn, which landed next to this pawn (same rank as the origin, same file as the destination).
    """
    if last_move is None:
        return False
    lands_next_to_us = (
        last_move.to_square.row == from_square.row
        and last_move.to_square.col == to_square.col
    )
    was_double_step = abs(last_move.from_square.row - last_move.to_square.row) == 2
    passed_pawn = board.piece(last_move.to_square)
    is_enemy_pawn = (
        passed_pawn is not None
        and passed_pawn.type == PieceType.PAWN
        and passed_pawn.color != piece.color
    )
    return lands_next_to_us and was_double_step and is_enemy_pawn


def en_passant_capture_square(
    board: Board, from_square: Square, to_square: Square
) -> Optional[Square]:
    """
    Square of the pawn that gets taken when moving a pawn sideways into an empty square
    (origin rank, destination file). None if the move is not an en passant capture.
    """
    piece = board.piece(from_square)
    if piece is None or piece.type != PieceType.PAWN:
        return None
    if abs(to_square.col - from_square.col) != 1 or not board.is_empty(to_square):
        return None
    return Square(from_square.row, to_square.col)


def is_castling_move(piece: Piece, from_square: Square, to_square: Square) -> bool:
    """Castling is modelled as the king moving two files along its rank"""
    return (
        piece.type == PieceType.KING
        and from_square.row == to_square.row
        and abs(to_square.col - from_square.col) == 2
    )


# --- MOVEMENT RULES ---
def pawn_geometry(
    board: Board,
    piece: Piece,
    from_square: Square,
    to_square: Square,
    last_move: Optional[Move],
    allow_castle_check: bool,
) -> bool:
    """
    A pawn:
    - moves by a single square forward onto an empty square.
    - It can move by two in their first move (so when on their starting rank), both squares must be empty
    - takes diagonally
    - takes en passant
    """
    direction = pawn_direction(piece.color)
    dr = to_square.row - from_square.row
    dc = to_square.col - from_square.col
    target_empty = board.is_empty(to_square)

    if dc == 0 and dr == direction and target_empty:
        return True

    if (
        dc == 0
        and dr == 2 * direction
        and from_square.row == pawn_start_row(piece.color)
        and target_empty
        and board.is_empty(Square(from_square.row + direction, from_square.col))
    ):
        return True

    if abs(dc) == 1 and dr == direction:
        if not target_empty:
            # same color already got rejected before dispatching here
            return True
        return is_en_passant_capture(board, piece, from_square, to_square, last_move)

    return False


def knight_geometry(
    board: Board,
    piece: Piece,
    from_square: Square,
    to_square: Square,
    last_move: Optional[Move],
    allow_castle_check: bool,
) -> bool:
    """Knights always move such that |delta_row| + |delta_col| = 3 (and jump over everything)"""
    abs_dr = abs(to_square.row - from_square.row)
    abs_dc = abs(to_square.col - from_square.col)
    return (abs_dr, abs_dc) in [(1, 2), (2, 1)]


def bishop_geometry(
    board: Board,
    piece: Piece,
    from_square: Square,
    to_square: Square,
    last_move: Optional[Move],
    allow_castle_check: bool,
) -> bool:
    """Bishops move diagonally: |delta_row| = |delta_col|"""
    if abs(to_square.row - from_square.row) != abs(to_square.col - from_square.col):
        return False
    return not is_path_blocked(board, from_square, to_square)


def rook_geometry(
    board: Board,
    piece: Piece,
    from_square: Square,
    to_square: Square,
    last_move: Optional[Move],
    allow_castle_check: bool,
) -> bool:
    """Rooks move either horizontally or vertically"""
    if to_square.row != from_square.row and to_square.col != from_square.col:
        return False
    return not is_path_blocked(board, from_square, to_square)


def queen_geometry(
    board: Board,
    piece: Piece,
    from_square: Square,
    to_square: Square,
    last_move: Optional[Move],
    allow_castle_check: bool,
) -> bool:
    """
    The Queen combines the rook moves (horizontal + vertical movements) and bishop moves (diagonal movement)
    """
    return bishop_geometry(
        board, piece, from_square, to_square, last_move, allow_castle_check
    ) or rook_geometry(board, piece, from_square, to_square, last_move, allow_castle_check)


def king_geometry(
    board: Board,
    piece: Piece,
    from_square: Square,
    to_square: Square,
    last_move: Optional[Move],
    allow_castle_check: bool,
) -> bool:
    """
    The king can move by a single square at the time.

    Castling is modelled as a special king move (two files along the back rank).
    """
    if abs(to_square.row - from_square.row) <= 1 and abs(to_square.col - from_square.col) <= 1:
        return True
    if allow_castle_check and is_castling_move(piece, from_square, to_square):
        return can_castle(board, piece, from_square, to_square, last_move)
    return False


def can_castle(
    board: Board,
    king: Piece,
    from_square: Square,
    to_square: Square,
    last_move: Optional[Move],
) -> bool:
    """
    you are allowed to castle if
    ---

    * Neither the king nor the rook has moved before.
    * There is no piece in between the king and the rook.
    * You are not currently in check (you cannot castle out of check).
    * The square the king passes through and the square it lands on are not under attack.
    """
    if king.has_moved:
        return False

    squares = castling_squares(king.color, from_square, to_square)
    if from_square != squares.king_from:
        return False

    rook = board.piece(squares.rook_from)
    if (
        rook is None
        or rook.type != PieceType.ROOK
        or rook.color != king.color
        or rook.has_moved
    ):
        return False

    if is_path_blocked(board, squares.king_from, squares.rook_from):
        return False

    for square in [squares.king_from, squares.king_passes, squares.king_to]:
        if is_square_under_attack(board, square, king.color, last_move):
            return False
    return True


# -- STRATEGY PATTERN: MOVEMENT RULES ---
GeometryFn = Callable[
    [Board, Piece, Square, Square, Optional[Move], bool],
    bool,
]
MOVEMENT_RULES: dict[PieceType, GeometryFn] = {
    PieceType.PAWN: pawn_geometry,
    PieceType.KNIGHT: knight_geometry,
    PieceType.BISHOP: bishop_geometry,
    PieceType.ROOK: rook_geometry,
    PieceType.QUEEN: queen_geometry,
    PieceType.KING: king_geometry,
}


def is_legal_geometry(
    board: Board,
    piece: Piece,
    from_square: Square,
    to_square: Square,
    last_move: Optional[Move] = None,
    allow_castle_check: bool = True,
) -> bool:
    """
    Can `piece` standing on `from_square` reach `to_square` according to its movement rules?
    ---

    Does NOT look at whether the move leaves your own king in check.
    `allow_castle_check=False` is used when computing attacked squares
    (otherwise castling legality would depend on itself and recurse forever).
    """
    for square in (from_square, to_square):
        if not square.is_within_bounds():
            raise InvalidSquareError(
                f"Square (row={square.row}, col={square.col}) is not on the board."
            )

    if from_square == to_square:
        return False

    occupant = board.piece(to_square)
    if occupant is not None and occupant.color == piece.color:
        return False

    movement_rule = MOVEMENT_RULES[piece.type]
    return movement_rule(board, piece, from_square, to_square, last_move, allow_castle_check)


# --- CAPTURING RULES / ATTACKING RULES ---
def pawn_attacks(pawn_square: Square, pawn: Piece, square: Square) -> bool:
    """
    Pawns take diagonally
    ----

    NOTE: a pawn's forward (non-capturing) move is not an attack.
    """
    direction = pawn_direction(pawn.color)
    return (
        pawn_square.row + direction == square.row
        and abs(pawn_square.col - square.col) == 1
    )


def is_square_under_attack(
    board: Board,
    square: Square,
    defender_color: Color,
    last_move: Optional[Move] = None,
) -> bool:
    """
    Is the square in the line-of-sight of any piece of the opponent of `defender_color`?
    ---

    Any opposing piece that could (geometrically, without castling) move onto the square is attacking it.
    """
    attacker_color = defender_color.opponent
    for attacker_square in board.locate_color(attacker_color):
        attacker = board.piece(attacker_square)
        if attacker.type == PieceType.PAWN:
            if pawn_attacks(attacker_square, attacker, square):
                return True
        elif is_legal_geometry(
            board, attacker, attacker_square, square, last_move, allow_castle_check=False
        ):
            return True
    return False


def geometric_destinations(
    board: Board, from_square: Square, last_move: Optional[Move] = None
) -> list[Square]:
    """All squares the piece on `from_square` could move to, ignoring whether that leaves its king in check."""
    piece = board.piece(from_square)
    if piece is None:
        return []
    return [
        to_square
        for to_square in all_squares()
        if is_legal_geometry(board, piece, from_square, to_square, last_move)
    ]
