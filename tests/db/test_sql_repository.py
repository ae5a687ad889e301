"""Unit tests for src/db/sql_repository.py"""

import threading

from sqlalchemy.orm import Session, sessionmaker

from src.core.models import EloSnapshot, RatingRecord
from src.db.sql_repository import SQLRatingRepository


def test_save_new_profile(db_session_factory: sessionmaker[Session]) -> None:
    """Conversion from a RatingRecord to DBRating for a new entry to the database."""
    record = RatingRecord.default()
    repo = SQLRatingRepository(db_session_factory)
    stored = repo.save_rating("alice", record)
    assert isinstance(stored, RatingRecord)
    assert stored == record


def test_get_rating(db_session_factory: sessionmaker[Session]) -> None:
    record = RatingRecord(
        white_elo=1216,
        black_elo=1184,
        elo_history=[EloSnapshot(1200, 1200), EloSnapshot(1216, 1184)],
    )
    repo = SQLRatingRepository(db_session_factory)
    repo.save_rating("alice", record)

    found = repo.get_rating("alice")
    assert found == record
    # history keeps its order
    assert found.elo_history[-1] == EloSnapshot(1216, 1184)


def test_get_unknown_profile(db_session_factory: sessionmaker[Session]) -> None:
    """
    Should return None if the name does not match anything in database.

    NOTE with an empty database, any name is a valid test case.
    """
    repo = SQLRatingRepository(db_session_factory)
    assert repo.get_rating("nobody") is None

    repo.save_rating("alice", RatingRecord.default())
    assert repo.get_rating("Alice") is None


def test_overwrite_profile(db_session_factory: sessionmaker[Session]) -> None:
    repo = SQLRatingRepository(db_session_factory)
    repo.save_rating("alice", RatingRecord.default())

    updated = RatingRecord(
        white_elo=1184,
        black_elo=1216,
        elo_history=[EloSnapshot(1200, 1200), EloSnapshot(1184, 1216)],
    )
    repo.save_rating("alice", updated)
    assert repo.get_rating("alice") == updated


def test_delete_profile(db_session_factory: sessionmaker[Session]) -> None:
    repo = SQLRatingRepository(db_session_factory)
    record = repo.save_rating("alice", RatingRecord.default(1500))

    deleted = repo.delete_rating("alice")
    assert deleted == record
    assert repo.get_rating("alice") is None
    assert repo.delete_rating("alice") is None


def test_shared_between_threads(db_session_factory: sessionmaker[Session]) -> None:
    """Each call opens its own session, so a save from a worker thread is seen by the caller."""
    repo = SQLRatingRepository(db_session_factory)
    record = RatingRecord(white_elo=1216, black_elo=1184)

    worker = threading.Thread(target=repo.save_rating, args=("alice", record))
    worker.start()
    worker.join()

    assert repo.get_rating("alice") == record
