"""Requests and Response models"""

from typing import Annotated, Optional
from uuid import UUID

from pydantic import BaseModel, Field, field_validator

from src.chess.pieces import PROMOTION_OPTIONS
from src.core.exceptions import InvalidRequestError
from src.core.shared_types import (
    Color,
    Difficulty,
    MoveQuality,
    PieceType,
    SoundEvent,
    Winner,
)

BoardIndex = Annotated[int, Field(ge=0, le=7)]


def is_algebraic_notation(value: str) -> bool:
    if len(value) != 2:
        return False
    file, rank = value[0], value[1]
    return file in "abcdefgh" and rank in "12345678"


# --- REQUEST MODELS ---
class CreateGameRequest(BaseModel):
    ranked: bool = True
    ai_enabled: bool = False
    ai_color: Color = Color.BLACK
    difficulty: Difficulty = Difficulty.MEDIUM


class GameSettingsRequest(BaseModel):
    """Only the fields that are set get changed"""

    ranked: Optional[bool] = None
    ai_enabled: Optional[bool] = None
    difficulty: Optional[Difficulty] = None


class SelectSquareRequest(BaseModel):
    row: BoardIndex
    col: BoardIndex


class MoveRequest(BaseModel):
    from_square: str
    to_square: str
    promote_to: Optional[PieceType] = None

    @field_validator(*["from_square", "to_square"])
    @classmethod
    def validate_square(cls, value: str) -> str:
        if not is_algebraic_notation(value):
            raise InvalidRequestError(
                f"Cannot interpret {value!r} as a valid square name."
            )
        return value

    @field_validator("promote_to")
    @classmethod
    def validate_promotion(cls, value: Optional[PieceType]) -> Optional[PieceType]:
        if value is not None and value not in PROMOTION_OPTIONS:
            raise InvalidRequestError(f"A pawn cannot promote to a {value}.")
        return value


class PromotionRequest(BaseModel):
    piece_type: PieceType

    @field_validator("piece_type")
    @classmethod
    def validate_piece_type(cls, value: PieceType) -> PieceType:
        if value not in PROMOTION_OPTIONS:
            raise InvalidRequestError(f"A pawn cannot promote to a {value}.")
        return value


class LoginRequest(BaseModel):
    username: str

    @field_validator("username")
    @classmethod
    def validate_username(cls, value: str) -> str:
        if not value.strip():
            raise InvalidRequestError("Username must not be blank.")
        return value.strip()


# --- RESPONSE MODELS ---
class PieceView(BaseModel):
    type: PieceType
    color: Color
    icon: str
    has_moved: bool


class MoveResultView(BaseModel):
    notation: str
    quality: MoveQuality
    sound: SoundEvent
    captured: list[PieceType]
    is_check: bool
    winner: Optional[Winner]


class EloChangeView(BaseModel):
    white: int
    black: int


class GameResponse(BaseModel):
    game_id: UUID
    board: list[list[Optional[PieceView]]]
    position: str
    turn: Color
    selected: Optional[str]
    legal_destinations: list[str]
    promotion_pending: bool
    is_check: bool
    winner: Optional[Winner]
    last_move: Optional[str]
    captured: dict[Color, list[PieceType]]
    white_score: int
    black_score: int
    move_history: list[str]
    move_qualities: list[Optional[MoveQuality]]
    elapsed: str
    ranked: bool
    ai_enabled: bool
    ai_color: Color
    difficulty: Difficulty
    last_result: Optional[MoveResultView] = None
    elo_change: Optional[EloChangeView] = None


class UndoResponse(BaseModel):
    undone: bool
    game: GameResponse


class LegalMovesResponse(BaseModel):
    game_id: UUID
    square: str
    legal_destinations: list[str]


class EloSnapshotView(BaseModel):
    white: int
    black: int


class RatingResponse(BaseModel):
    username: Optional[str]
    white_elo: int
    black_elo: int
    elo_history: list[EloSnapshotView]
