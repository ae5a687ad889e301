"""Orchestration of communication from API router to business logic and persistence layers (and the reverse direction)."""

import logging
import random
import threading
from dataclasses import dataclass, field
from typing import Optional
from uuid import UUID, uuid4

from src.api.models import (
    CreateGameRequest,
    EloChangeView,
    EloSnapshotView,
    GameResponse,
    GameSettingsRequest,
    LegalMovesResponse,
    LoginRequest,
    MoveRequest,
    MoveResultView,
    PieceView,
    PromotionRequest,
    RatingResponse,
    SelectSquareRequest,
    UndoResponse,
)
from src.chess.ai import AIPlayer, AIScheduler
from src.chess.game import Game, MoveResult
from src.chess.moves import promotion_row
from src.chess.square import Square
from src.core.config import Settings, get_settings
from src.core.exceptions import (
    GameStateError,
    IllegalMoveError,
    InvalidRequestError,
    RepositoryError,
)
from src.core.models import EloChange
from src.core.shared_types import PieceType, Winner
from src.services.session import SessionContext

logger = logging.getLogger(__name__)


@dataclass
class GameSession:
    """One running game and everything that belongs to it exclusively."""

    game: Game
    ai: AIPlayer
    lock: threading.RLock
    scheduler: AIScheduler = field(init=False)
    last_result: Optional[MoveResult] = None
    elo_change: Optional[EloChange] = None


class ChessService:
    """Orchestration of layers for chess games."""

    def __init__(
        self,
        session: SessionContext,
        settings: Optional[Settings] = None,
        rng: Optional[random.Random] = None,
    ) -> None:
        self.session = session
        self.settings = settings or get_settings()
        self.rng = rng
        self._games: dict[UUID, GameSession] = {}

    # -- API routes logic: games ---
    def create_new_game(self, request: CreateGameRequest) -> GameResponse:
        """Start a game in the starting position. The AI (if enabled) gets to move right away when it plays white."""
        game = Game.new_game(
            ranked=request.ranked,
            worst_move_threshold=self.settings.worst_move_threshold,
        )
        lock = threading.RLock()
        ai = AIPlayer(color=request.ai_color, difficulty=request.difficulty, rng=self.rng)
        game_session = GameSession(game=game, ai=ai, lock=lock)
        game_id = uuid4()
        self._games[game_id] = game_session

        # NOTE subscribe before the AI does, so our handlers see a reset before the AI replies to it
        self._subscribe(game_id, game_session)
        game_session.scheduler = AIScheduler(
            game, ai, think_delay=self.settings.ai_think_delay, lock=lock
        )
        logger.info("Created game %s (ranked=%s, ai=%s)", game_id, request.ranked, request.ai_enabled)

        with lock:
            game_session.scheduler.set_enabled(request.ai_enabled)
            return self._create_game_response(game_id, game_session)

    def get_game_state(self, game_id: UUID) -> GameResponse:
        """
        Retrieve current game state.
        ----
        Used in "polling" loop by frontend, for instance to see the AI's move after its think delay.
        """
        game_session = self._fetch_game(game_id)
        with game_session.lock:
            return self._create_game_response(game_id, game_session)

    def select_square(self, game_id: UUID, request: SelectSquareRequest) -> GameResponse:
        """A click on a square: select / switch / deselect / move."""
        game_session = self._fetch_game(game_id)
        with game_session.lock:
            game_session.game.select_or_move(request.row, request.col)
            return self._create_game_response(game_id, game_session)

    def legal_moves(self, game_id: UUID, square: str) -> LegalMovesResponse:
        """Legal destinations of the piece on the square (algebraic notation)"""
        game_session = self._fetch_game(game_id)
        origin = Square.from_algebraic(square)
        with game_session.lock:
            destinations = game_session.game.calculate_legal_destinations(origin.row, origin.col)
        return LegalMovesResponse(
            game_id=game_id, square=square, legal_destinations=sorted(destinations)
        )

    def make_move(self, game_id: UUID, request: MoveRequest) -> GameResponse:
        """
        Make a move attempt.
        ---

        Unlike a click, a move sent in directly is checked for legality here before it reaches the game.
        """
        game_session = self._fetch_game(game_id)
        game = game_session.game
        from_square = Square.from_algebraic(request.from_square)
        to_square = Square.from_algebraic(request.to_square)

        with game_session.lock:
            if game.is_over:
                raise GameStateError(f"Game is over (winner: {game.winner}). No more moves accepted.")

            piece = game.board.piece(from_square)
            if piece is None or piece.color != game.turn:
                raise IllegalMoveError(
                    f"No piece of the side to move ({game.turn}) on {request.from_square}."
                )

            destinations = game.calculate_legal_destinations(from_square.row, from_square.col)
            if to_square.key() not in destinations:
                raise IllegalMoveError(
                    f"Move not allowed: {request.from_square}-{request.to_square}"
                )

            reaches_last_rank = piece.type == PieceType.PAWN and to_square.row == promotion_row(
                piece.color
            )
            if reaches_last_rank and request.promote_to is None:
                raise InvalidRequestError("Pawn reaches the last rank: choose a piece to promote to.")
            if not reaches_last_rank and request.promote_to is not None:
                raise IllegalMoveError("Only a pawn reaching the last rank can promote.")

            game.perform_move(
                from_square.row,
                from_square.col,
                to_square.row,
                to_square.col,
                request.promote_to,
            )
            return self._create_game_response(game_id, game_session)

    def promote(self, game_id: UUID, request: PromotionRequest) -> GameResponse:
        """Finish the pending pawn move with the chosen piece"""
        game_session = self._fetch_game(game_id)
        with game_session.lock:
            game_session.game.promote_pawn(request.piece_type)
            return self._create_game_response(game_id, game_session)

    def undo_move(self, game_id: UUID) -> UndoResponse:
        game_session = self._fetch_game(game_id)
        with game_session.lock:
            undone = game_session.game.undo_move()
            if undone:
                game_session.last_result = None
            return UndoResponse(
                undone=undone, game=self._create_game_response(game_id, game_session)
            )

    def reset_game(self, game_id: UUID) -> GameResponse:
        game_session = self._fetch_game(game_id)
        with game_session.lock:
            game_session.game.reset()
            return self._create_game_response(game_id, game_session)

    def update_settings(self, game_id: UUID, request: GameSettingsRequest) -> GameResponse:
        game_session = self._fetch_game(game_id)
        with game_session.lock:
            if request.ranked is not None:
                game_session.game.set_ranked_mode(request.ranked)
            if request.difficulty is not None:
                game_session.ai.set_difficulty(request.difficulty)
            if request.ai_enabled is not None:
                game_session.scheduler.set_enabled(request.ai_enabled)
            return self._create_game_response(game_id, game_session)

    def delete_game(self, game_id: UUID) -> None:
        """Forget a game. A pending AI move of it is dropped."""
        game_session = self._fetch_game(game_id)
        with game_session.lock:
            game_session.scheduler.cancel()
            del self._games[game_id]

    # -- API routes logic: profiles / ratings ---
    def login(self, request: LoginRequest) -> RatingResponse:
        self.session.login(request.username)
        return self.ratings()

    def logout(self) -> RatingResponse:
        self.session.logout()
        return self.ratings()

    def ratings(self) -> RatingResponse:
        record = self.session.record
        return RatingResponse(
            username=self.session.current_user,
            white_elo=record.white_elo,
            black_elo=record.black_elo,
            elo_history=[
                EloSnapshotView(white=entry.white, black=entry.black)
                for entry in record.elo_history
            ],
        )

    # -- Event handlers --
    def _subscribe(self, game_id: UUID, game_session: GameSession) -> None:
        """Listen to the game: remember what the last move was, and update ratings once the game is decided."""
        game = game_session.game

        def on_move(result: MoveResult) -> None:
            game_session.last_result = result

        def on_game_over(winner: Winner) -> None:
            logger.info("Game %s over, winner: %s", game_id, winner)
            game_session.elo_change = self.session.record_result(winner, game.ranked)

        def on_reset() -> None:
            game_session.last_result = None
            game_session.elo_change = None

        game.events.on_move.append(on_move)
        game.events.on_game_over.append(on_game_over)
        game.events.on_reset.append(on_reset)

    # -- Internal helpers --
    def _create_game_response(self, game_id: UUID, game_session: GameSession) -> GameResponse:
        """Convert the state of the game into a GameResponse."""
        game = game_session.game
        result = game_session.last_result
        return GameResponse(
            game_id=game_id,
            board=[
                [
                    PieceView(
                        type=piece.type,
                        color=piece.color,
                        icon=piece.icon,
                        has_moved=piece.has_moved,
                    )
                    if piece
                    else None
                    for piece in row
                ]
                for row in game.board.grid
            ],
            position=game.board.to_fen(),
            turn=game.turn,
            selected=game.selected_square.key() if game.selected_square else None,
            legal_destinations=sorted(game.legal_destinations),
            promotion_pending=game.pending_promotion is not None,
            is_check=game.is_check,
            winner=game.winner,
            last_move=game.last_move.to_notation() if game.last_move else None,
            captured={
                color: [piece.type for piece in pieces]
                for color, pieces in game.captured_pieces.items()
            },
            white_score=game.white_score,
            black_score=game.black_score,
            move_history=list(game.move_notation),
            move_qualities=[snapshot.move_quality for snapshot in game.history[1:]],
            elapsed=game.timer.formatted(),
            ranked=game.ranked,
            ai_enabled=game_session.ai.enabled,
            ai_color=game_session.ai.color,
            difficulty=game_session.ai.difficulty,
            last_result=MoveResultView(
                notation=result.notation,
                quality=result.quality,
                sound=result.sound,
                captured=[piece.type for piece in result.captured],
                is_check=result.is_check,
                winner=result.winner,
            )
            if result
            else None,
            elo_change=EloChangeView(
                white=game_session.elo_change.white, black=game_session.elo_change.black
            )
            if game_session.elo_change
            else None,
        )

    def _fetch_game(self, game_id: UUID) -> GameSession:
        """Attempt to find the game and raise error if it fails."""
        game_session = self._games.get(game_id)
        if game_session is None:
            raise RepositoryError(f"Game with {game_id=} not found.")
        return game_session
