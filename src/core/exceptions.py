"""
Custom exceptions.

Everything raised on purpose by this package derives from GameError, so the outer layers can catch a single type.
"""


class GameError(Exception):
    """Root of all errors raised by the chess package."""


# --- DOMAIN LAYER ---
class GameStateError(GameError):
    """The game is not in a state that allows the requested operation (ex. it already ended)."""


class IllegalMoveError(GameError):
    """The move cannot be made (ex. there is no piece on the starting square)."""


class NotYourTurnError(GameError):
    """A piece was moved while it is the opponent's turn."""


class InvalidSquareError(GameError):
    """Coordinates outside of the board."""


# --- PERSISTENCE / SERVICE LAYER ---
class RepositoryError(GameError):
    """Record could not be found or stored."""


# --- API LAYER ---
class InvalidRequestError(GameError, ValueError):
    """
    Request data can not be interpreted.

    NOTE also a ValueError: pydantic only wraps ValueError/AssertionError raised inside validators.
    """
