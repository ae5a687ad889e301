"""
Boundary layer data model(s).

These objects can be used to communicate with the Service.
Hence, both the API layer (higher) and domain/db layers (lower) will use model(s) defined here to send to/receive from the Service
(Decouples the data model specific to the DB layer, API layer, or domain layer from the information needed to send across boundaries)
"""

from dataclasses import dataclass, field

DEFAULT_ELO = 1200


@dataclass(frozen=True)
class EloSnapshot:
    """Both seats' ratings at one point in time."""

    white: int
    black: int


@dataclass
class RatingRecord:
    """Transport-safe ratings of one user profile. Storage of it is the responsibility of the persistence layer."""

    white_elo: int = DEFAULT_ELO
    black_elo: int = DEFAULT_ELO
    elo_history: list[EloSnapshot] = field(default_factory=list)

    def __post_init__(self):
        # A fresh record starts with its own ratings as first history entry
        if not self.elo_history:
            self.elo_history = [EloSnapshot(self.white_elo, self.black_elo)]

    @classmethod
    def default(cls, elo: int = DEFAULT_ELO) -> "RatingRecord":
        return cls(white_elo=elo, black_elo=elo)


@dataclass(frozen=True)
class EloChange:
    """Rating difference produced by a single finished game."""

    white: int
    black: int
