"""Unit tests for src/services/chess_service.py"""

from uuid import UUID, uuid4

import pytest

from src.api.models import (
    CreateGameRequest,
    GameSettingsRequest,
    LoginRequest,
    MoveRequest,
    PromotionRequest,
    SelectSquareRequest,
)
from src.chess.board import Board
from src.core.config import Settings
from src.core.exceptions import (
    GameStateError,
    IllegalMoveError,
    InvalidRequestError,
    RepositoryError,
)
from src.core.shared_types import Color, Difficulty, MoveQuality, PieceType, Winner
from src.services.chess_service import ChessService
from src.services.session import SessionContext

FOOLS_MATE = [("f2", "f3"), ("e7", "e5"), ("g2", "g4"), ("d8", "h4")]


@pytest.fixture
def service(mock_repository) -> ChessService:
    return ChessService(SessionContext(mock_repository), Settings(ai_think_delay=0))


@pytest.fixture
def game_id(service: ChessService) -> UUID:
    return service.create_new_game(CreateGameRequest()).game_id


def move(service: ChessService, game_id: UUID, from_square: str, to_square: str, promote_to=None):
    return service.make_move(
        game_id, MoveRequest(from_square=from_square, to_square=to_square, promote_to=promote_to)
    )


def test_create_new_game(service: ChessService) -> None:
    response = service.create_new_game(CreateGameRequest())
    assert response.position == "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR"
    assert response.turn == Color.WHITE
    assert response.winner is None
    assert response.move_history == []
    assert response.ranked
    assert not response.ai_enabled
    assert response.board[7][4].type == PieceType.KING
    assert response.board[4][4] is None


def test_unknown_game(service: ChessService) -> None:
    with pytest.raises(RepositoryError):
        service.get_game_state(uuid4())


def test_make_move(service: ChessService, game_id: UUID) -> None:
    response = move(service, game_id, "e2", "e4")
    assert response.turn == Color.BLACK
    assert response.move_history == ["e2-e4"]
    assert response.move_qualities == [MoveQuality.NORMAL]
    assert response.last_move == "e2-e4"
    assert response.last_result.notation == "e2-e4"


def test_illegal_move(service: ChessService, game_id: UUID) -> None:
    with pytest.raises(IllegalMoveError):
        move(service, game_id, "e2", "e5")
    with pytest.raises(IllegalMoveError):
        move(service, game_id, "e7", "e5")  # not black's turn
    with pytest.raises(IllegalMoveError):
        move(service, game_id, "e4", "e5")  # empty square
    assert service.get_game_state(game_id).move_history == []


def test_checkmate_updates_ratings(service: ChessService, game_id: UUID) -> None:
    for from_square, to_square in FOOLS_MATE:
        response = move(service, game_id, from_square, to_square)
    assert response.winner == Winner.BLACK
    assert response.elo_change.white == -16
    assert response.elo_change.black == 16
    assert service.ratings().black_elo == 1216

    with pytest.raises(GameStateError):
        move(service, game_id, "a2", "a3")


def test_unranked_game_keeps_ratings(service: ChessService) -> None:
    game_id = service.create_new_game(CreateGameRequest(ranked=False)).game_id
    for from_square, to_square in FOOLS_MATE:
        response = move(service, game_id, from_square, to_square)
    assert response.winner == Winner.BLACK
    assert response.elo_change is None
    assert service.ratings().white_elo == 1200


def test_logged_in_profile_is_saved(service: ChessService, mock_repository) -> None:
    service.login(LoginRequest(username="alice"))
    game_id = service.create_new_game(CreateGameRequest()).game_id
    for from_square, to_square in FOOLS_MATE:
        move(service, game_id, from_square, to_square)

    assert mock_repository.get_rating("alice").white_elo == 1184
    ratings = service.ratings()
    assert ratings.username == "alice"
    assert len(ratings.elo_history) == 2

    ratings = service.logout()
    assert ratings.username is None
    assert ratings.white_elo == 1200


def test_select_square(service: ChessService, game_id: UUID) -> None:
    response = service.select_square(game_id, SelectSquareRequest(row=6, col=4))
    assert response.selected == "6,4"
    assert response.legal_destinations == ["4,4", "5,4"]

    response = service.select_square(game_id, SelectSquareRequest(row=4, col=4))
    assert response.selected is None
    assert response.move_history == ["e2-e4"]


def test_legal_moves(service: ChessService, game_id: UUID) -> None:
    response = service.legal_moves(game_id, "g1")
    assert response.square == "g1"
    assert response.legal_destinations == ["5,5", "5,7"]


def test_legal_moves_keeps_the_selection(service: ChessService, game_id: UUID) -> None:
    service.select_square(game_id, SelectSquareRequest(row=6, col=4))
    service.legal_moves(game_id, "g1")

    # f3 is a knight square: clicking it with the e2 pawn selected only deselects
    response = service.select_square(game_id, SelectSquareRequest(row=5, col=5))
    assert response.move_history == []
    assert response.selected is None
    assert response.position == "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR"


def test_rejected_move_keeps_the_selection(service: ChessService, game_id: UUID) -> None:
    service.select_square(game_id, SelectSquareRequest(row=6, col=4))
    with pytest.raises(IllegalMoveError):
        move(service, game_id, "g1", "g3")

    response = service.get_game_state(game_id)
    assert response.selected == "6,4"
    assert response.legal_destinations == ["4,4", "5,4"]

    response = service.select_square(game_id, SelectSquareRequest(row=5, col=5))
    assert response.move_history == []
    assert response.position == "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR"


def test_promotion(service: ChessService, game_id: UUID) -> None:
    service._games[game_id].game.board = Board.from_fen("k7/4P3/8/8/8/8/8/K7")

    with pytest.raises(InvalidRequestError):
        move(service, game_id, "e7", "e8")
    with pytest.raises(IllegalMoveError):
        move(service, game_id, "a1", "a2", PieceType.QUEEN)

    response = move(service, game_id, "e7", "e8", PieceType.ROOK)
    assert response.position == "k3R3/8/8/8/8/8/8/K7"
    assert response.is_check


def test_promotion_by_clicks(service: ChessService, game_id: UUID) -> None:
    service._games[game_id].game.board = Board.from_fen("k7/4P3/8/8/8/8/8/K7")
    service.select_square(game_id, SelectSquareRequest(row=1, col=4))
    response = service.select_square(game_id, SelectSquareRequest(row=0, col=4))
    assert response.promotion_pending

    response = service.promote(game_id, PromotionRequest(piece_type=PieceType.KNIGHT))
    assert not response.promotion_pending
    assert response.position == "k3N3/8/8/8/8/8/8/K7"


def test_undo(service: ChessService, game_id: UUID) -> None:
    move(service, game_id, "e2", "e4")
    response = service.undo_move(game_id)
    assert response.undone
    assert response.game.move_history == []
    assert response.game.last_result is None

    assert not service.undo_move(game_id).undone


def test_reset(service: ChessService, game_id: UUID) -> None:
    move(service, game_id, "e2", "e4")
    response = service.reset_game(game_id)
    assert response.move_history == []
    assert response.last_result is None
    assert response.turn == Color.WHITE


def test_ai_replies(service: ChessService) -> None:
    game_id = service.create_new_game(CreateGameRequest(ai_enabled=True)).game_id
    response = move(service, game_id, "e2", "e4")
    assert len(response.move_history) == 2
    assert response.turn == Color.WHITE


def test_ai_opens_as_white(service: ChessService) -> None:
    response = service.create_new_game(
        CreateGameRequest(ai_enabled=True, ai_color=Color.WHITE, difficulty=Difficulty.EASY)
    )
    assert len(response.move_history) == 1
    assert response.turn == Color.BLACK
    assert response.ai_color == Color.WHITE


def test_update_settings(service: ChessService, game_id: UUID) -> None:
    response = service.update_settings(
        game_id, GameSettingsRequest(ranked=False, difficulty=Difficulty.HARD)
    )
    assert not response.ranked
    assert response.difficulty == Difficulty.HARD
    assert not response.ai_enabled

    move(service, game_id, "e2", "e4")
    response = service.update_settings(game_id, GameSettingsRequest(ai_enabled=True))
    # switched on while it is the AI's turn: it plays right away
    assert response.ai_enabled
    assert len(response.move_history) == 2


def test_delete_game(service: ChessService, game_id: UUID) -> None:
    service.delete_game(game_id)
    with pytest.raises(RepositoryError):
        service.get_game_state(game_id)
