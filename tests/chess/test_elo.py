"""Unit tests for /src/chess/elo.py"""

import pytest

from src.chess.elo import expected_score, rating_change, update_ratings
from src.core.models import EloChange, EloSnapshot, RatingRecord
from src.core.shared_types import Winner


def test_expected_score() -> None:
    assert expected_score(1200, 1200) == pytest.approx(0.5)
    assert expected_score(1400, 1200) == pytest.approx(0.7597, abs=1e-4)
    assert expected_score(1400, 1200) + expected_score(1200, 1400) == pytest.approx(1.0)


@pytest.mark.parametrize(
    "white_elo, black_elo, winner, change",
    [
        (1200, 1200, Winner.WHITE, EloChange(16, -16)),
        (1200, 1200, Winner.BLACK, EloChange(-16, 16)),
        (1200, 1200, Winner.DRAW, EloChange(0, 0)),
        (1400, 1200, Winner.WHITE, EloChange(8, -8)),
        (1400, 1200, Winner.BLACK, EloChange(-24, 24)),
        (1400, 1200, Winner.DRAW, EloChange(-8, 8)),
    ],
)
def test_rating_change(white_elo: int, black_elo: int, winner: Winner, change: EloChange) -> None:
    assert rating_change(white_elo, black_elo, winner) == change


def test_halves_round_up() -> None:
    """K=1, equal ratings: +0.5 and -0.5 become +1 and 0"""
    assert rating_change(1200, 1200, Winner.WHITE, k_factor=1) == EloChange(1, 0)


def test_update_ratings() -> None:
    record = RatingRecord.default()
    updated, change = update_ratings(record, Winner.WHITE)

    assert change == EloChange(16, -16)
    assert updated.white_elo == 1216
    assert updated.black_elo == 1184
    assert updated.elo_history == [EloSnapshot(1200, 1200), EloSnapshot(1216, 1184)]
    # the original record is left alone
    assert record.white_elo == 1200
    assert record.elo_history == [EloSnapshot(1200, 1200)]


def test_history_grows_with_every_game() -> None:
    record = RatingRecord.default()
    for winner in [Winner.WHITE, Winner.DRAW, Winner.BLACK]:
        record, _ = update_ratings(record, winner)
    assert len(record.elo_history) == 4
    assert record.elo_history[-1] == EloSnapshot(record.white_elo, record.black_elo)
