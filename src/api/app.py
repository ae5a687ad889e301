"""FastAPI application: HTTP routes into the ChessService, plus the websocket move relay."""

import logging
from typing import Optional
from uuid import UUID

from fastapi import FastAPI, WebSocket, WebSocketDisconnect, status

from src.api.errors import game_error_handler
from src.api.models import (
    CreateGameRequest,
    GameResponse,
    GameSettingsRequest,
    LegalMovesResponse,
    LoginRequest,
    MoveRequest,
    PromotionRequest,
    RatingResponse,
    SelectSquareRequest,
    UndoResponse,
    is_algebraic_notation,
)
from src.api.relay import ConnectionManager
from src.core.config import get_settings
from src.db.database import SessionLocal, init_db
from src.db.sql_repository import SQLRatingRepository
from src.core.exceptions import GameError, InvalidRequestError
from src.services.chess_service import ChessService
from src.services.session import SessionContext

logger = logging.getLogger(__name__)


def build_default_service() -> ChessService:
    """Service backed by the configured SQL database"""
    settings = get_settings()
    init_db()
    repository = SQLRatingRepository(SessionLocal)
    session = SessionContext(
        repository, k_factor=settings.elo_k_factor, default_elo=settings.default_elo
    )
    return ChessService(session, settings)


def create_app(service: Optional[ChessService] = None) -> FastAPI:
    settings = get_settings()
    logging.basicConfig(level=settings.log_level)

    app = FastAPI(title="Chess Engine API", version="0.1.0")
    app.add_exception_handler(GameError, game_error_handler)

    chess = service or build_default_service()
    relay = ConnectionManager()

    # --- games ---
    @app.post("/games", response_model=GameResponse, status_code=status.HTTP_201_CREATED)
    def create_game(request: CreateGameRequest) -> GameResponse:
        return chess.create_new_game(request)

    @app.get("/games/{game_id}", response_model=GameResponse)
    def get_game(game_id: UUID) -> GameResponse:
        return chess.get_game_state(game_id)

    @app.delete("/games/{game_id}", status_code=status.HTTP_204_NO_CONTENT)
    def delete_game(game_id: UUID) -> None:
        chess.delete_game(game_id)

    @app.post("/games/{game_id}/select", response_model=GameResponse)
    def select_square(game_id: UUID, request: SelectSquareRequest) -> GameResponse:
        return chess.select_square(game_id, request)

    @app.get("/games/{game_id}/legal-moves/{square}", response_model=LegalMovesResponse)
    def legal_moves(game_id: UUID, square: str) -> LegalMovesResponse:
        if not is_algebraic_notation(square):
            raise InvalidRequestError(f"Cannot interpret {square!r} as a valid square name.")
        return chess.legal_moves(game_id, square)

    @app.post("/games/{game_id}/moves", response_model=GameResponse)
    def make_move(game_id: UUID, request: MoveRequest) -> GameResponse:
        return chess.make_move(game_id, request)

    @app.post("/games/{game_id}/promotion", response_model=GameResponse)
    def promote(game_id: UUID, request: PromotionRequest) -> GameResponse:
        return chess.promote(game_id, request)

    @app.post("/games/{game_id}/undo", response_model=UndoResponse)
    def undo(game_id: UUID) -> UndoResponse:
        return chess.undo_move(game_id)

    @app.post("/games/{game_id}/reset", response_model=GameResponse)
    def reset(game_id: UUID) -> GameResponse:
        return chess.reset_game(game_id)

    @app.patch("/games/{game_id}/settings", response_model=GameResponse)
    def update_settings(game_id: UUID, request: GameSettingsRequest) -> GameResponse:
        return chess.update_settings(game_id, request)

    # --- profile / ratings ---
    @app.post("/session/login", response_model=RatingResponse)
    def login(request: LoginRequest) -> RatingResponse:
        return chess.login(request)

    @app.post("/session/logout", response_model=RatingResponse)
    def logout() -> RatingResponse:
        return chess.logout()

    @app.get("/session/ratings", response_model=RatingResponse)
    def ratings() -> RatingResponse:
        return chess.ratings()

    # --- relay between two remote players ---
    @app.websocket("/ws/relay")
    async def relay_moves(websocket: WebSocket) -> None:
        await relay.connect(websocket)
        try:
            while True:
                payload = await websocket.receive_text()
                await relay.relay(websocket, payload)
        except WebSocketDisconnect:
            relay.disconnect(websocket)

    return app
