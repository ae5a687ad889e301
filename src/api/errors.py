"""Translate the package's exceptions into HTTP responses with a structured error envelope."""

import logging
from typing import Any

from fastapi import Request, status
from fastapi.responses import JSONResponse

from src.core.exceptions import (
    GameError,
    GameStateError,
    IllegalMoveError,
    InvalidRequestError,
    InvalidSquareError,
    NotYourTurnError,
    RepositoryError,
)

logger = logging.getLogger(__name__)

# most specific first: the first matching class decides
ERROR_STATUS: list[tuple[type[GameError], int, str]] = [
    (RepositoryError, status.HTTP_404_NOT_FOUND, "not_found"),
    (NotYourTurnError, status.HTTP_409_CONFLICT, "not_your_turn"),
    (GameStateError, status.HTTP_409_CONFLICT, "invalid_game_state"),
    (IllegalMoveError, status.HTTP_400_BAD_REQUEST, "illegal_move"),
    (InvalidSquareError, status.HTTP_400_BAD_REQUEST, "invalid_square"),
    (InvalidRequestError, 422, "invalid_request"),
]


def error_envelope(*, code: str, message: str, err_type: str) -> dict[str, Any]:
    return {"error": {"code": code, "message": message, "type": err_type}}


def _status_for(exc: GameError) -> tuple[int, str]:
    for error_class, status_code, code in ERROR_STATUS:
        if isinstance(exc, error_class):
            return status_code, code
    return status.HTTP_400_BAD_REQUEST, "game_error"


async def game_error_handler(request: Request, exc: Exception) -> JSONResponse:
    if not isinstance(exc, GameError):
        logger.exception("Unhandled exception on %s", request.url.path)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=error_envelope(
                code="internal_error", message="Internal Server Error", err_type="server_error"
            ),
        )

    status_code, code = _status_for(exc)
    logger.info("%s on %s: %s", type(exc).__name__, request.url.path, exc)
    return JSONResponse(
        status_code=status_code,
        content=error_envelope(code=code, message=str(exc), err_type="client_error"),
    )
