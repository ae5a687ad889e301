"""
ELO rating update
---

Standard formula: the expected score follows from the rating difference,
the rating moves by K * (actual score - expected score).
"""

import math

from src.core.models import EloChange, EloSnapshot, RatingRecord
from src.core.shared_types import Winner

K_FACTOR = 32

RESULT_FOR_WHITE: dict[Winner, float] = {
    Winner.WHITE: 1.0,
    Winner.BLACK: 0.0,
    Winner.DRAW: 0.5,
}


def expected_score(rating: int, opponent_rating: int) -> float:
    return 1 / (1 + 10 ** ((opponent_rating - rating) / 400))


def _round_half_up(value: float) -> int:
    """Python's round() rounds halves to even. Rating changes round halves up."""
    return math.floor(value + 0.5)


def rating_change(
    white_elo: int, black_elo: int, winner: Winner, k_factor: int = K_FACTOR
) -> EloChange:
    expected_white = expected_score(white_elo, black_elo)
    expected_black = expected_score(black_elo, white_elo)
    white_result = RESULT_FOR_WHITE[winner]
    return EloChange(
        white=_round_half_up(k_factor * (white_result - expected_white)),
        black=_round_half_up(k_factor * ((1 - white_result) - expected_black)),
    )


def update_ratings(
    record: RatingRecord, winner: Winner, k_factor: int = K_FACTOR
) -> tuple[RatingRecord, EloChange]:
    """
    New record after a finished game (the given record is not modified).
    Both new ratings are appended to the history as one entry.
    """
    change = rating_change(record.white_elo, record.black_elo, winner, k_factor)
    white_elo = record.white_elo + change.white
    black_elo = record.black_elo + change.black
    updated = RatingRecord(
        white_elo=white_elo,
        black_elo=black_elo,
        elo_history=[*record.elo_history, EloSnapshot(white_elo, black_elo)],
    )
    return updated, change
