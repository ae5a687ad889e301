"""Unit tests for /src/chess/board.py"""

import pytest

from src.chess.board import STARTING_POSITION, Board
from src.chess.pieces import Piece
from src.chess.square import Square
from src.core.exceptions import GameStateError, IllegalMoveError
from src.core.shared_types import Color, PieceType

EMPTY_FEN = "/".join(["8"] * 8)


def test_starting_position_back_ranks() -> None:
    """rook-knight-bishop-queen-king-bishop-knight-rook, pawns on the 2nd and 7th rank"""
    board = Board.starting_position()
    back_rank = [
        PieceType.ROOK,
        PieceType.KNIGHT,
        PieceType.BISHOP,
        PieceType.QUEEN,
        PieceType.KING,
        PieceType.BISHOP,
        PieceType.KNIGHT,
        PieceType.ROOK,
    ]
    for col, piece_type in enumerate(back_rank):
        assert board.piece(Square(0, col)) == Piece(piece_type, Color.BLACK)
        assert board.piece(Square(7, col)) == Piece(piece_type, Color.WHITE)
        assert board.piece(Square(1, col)) == Piece(PieceType.PAWN, Color.BLACK)
        assert board.piece(Square(6, col)) == Piece(PieceType.PAWN, Color.WHITE)
    for row in range(2, 6):
        for col in range(8):
            assert board.is_empty(Square(row, col))


@pytest.mark.parametrize(
    "fen",
    [
        STARTING_POSITION,
        EMPTY_FEN,
        "k7/6RR/8/8/8/8/K7/8",
        "r3k2r/pppq1ppp/2n5/3p4/3P4/2N5/PPPQ1PPP/R3K2R",
    ],
)
def test_fen_round_trip(fen: str) -> None:
    assert Board.from_fen(fen).to_fen() == fen


def test_move_piece_returns_captured() -> None:
    board = Board.from_fen("8/8/8/3p4/8/8/8/3R4")
    captured = board.move_piece(Square(7, 3), Square(3, 3))
    assert captured == Piece(PieceType.PAWN, Color.BLACK)
    assert board.piece(Square(3, 3)) == Piece(PieceType.ROOK, Color.WHITE)
    assert board.is_empty(Square(7, 3))


def test_move_from_empty_square() -> None:
    board = Board.empty()
    with pytest.raises(IllegalMoveError):
        board.move_piece(Square(0, 0), Square(1, 1))


def test_locate_king() -> None:
    board = Board.starting_position()
    assert board.locate_king(Color.WHITE) == Square(7, 4)
    assert board.locate_king(Color.BLACK) == Square(0, 4)


def test_missing_king_is_an_error() -> None:
    board = Board.from_fen("k7/8/8/8/8/8/8/8")
    with pytest.raises(GameStateError):
        board.locate_king(Color.WHITE)


def test_count_material() -> None:
    board = Board.starting_position()
    assert board.count_material() == {Color.WHITE: 39, Color.BLACK: 39}


def test_clone_shares_no_pieces() -> None:
    board = Board.starting_position()
    copied = board.clone()
    assert copied == board

    copied.piece(Square(7, 4)).has_moved = True
    copied.remove_piece(Square(6, 4))
    assert not board.piece(Square(7, 4)).has_moved
    assert not board.is_empty(Square(6, 4))


def test_simulate_restores_board() -> None:
    """Swap-and-revert: both the moving piece and the (possibly empty) destination are put back"""
    board = Board.from_fen("8/8/8/3p4/8/8/8/3R4")
    before = board.clone()
    with board.simulate(Square(7, 3), Square(3, 3)):
        assert board.piece(Square(3, 3)) == Piece(PieceType.ROOK, Color.WHITE)
        assert board.is_empty(Square(7, 3))
    assert board == before

    with board.simulate(Square(7, 3), Square(5, 3)):
        assert board.is_empty(Square(7, 3))
    assert board == before
    assert board.is_empty(Square(5, 3))


def test_simulate_restores_on_error() -> None:
    board = Board.from_fen("8/8/8/3p4/8/8/8/3R4")
    before = board.clone()
    with pytest.raises(RuntimeError):
        with board.simulate(Square(7, 3), Square(3, 3)):
            raise RuntimeError("boom")
    assert board == before


def test_simulate_with_extra_captured_square() -> None:
    """En passant takes a pawn that is not standing on the destination"""
    board = Board.from_fen("8/8/8/3pP3/8/8/8/8")
    before = board.clone()
    with board.simulate(Square(3, 4), Square(2, 3), captured_square=Square(3, 3)):
        assert board.is_empty(Square(3, 3))
        assert board.piece(Square(2, 3)) == Piece(PieceType.PAWN, Color.WHITE)
    assert board == before
