"""
Pytest will auto-discover / import this file called 'conftest.py'.
This file defines fixtures/variables required for testing multiple layers.
"""

from typing import Generator

import pytest
from sqlalchemy import StaticPool, create_engine
from sqlalchemy.orm import Session, sessionmaker

from src.core.models import RatingRecord
from src.db.schema import Base

# Setup an in-memory SQLite database for testing
DATABASE_URL = "sqlite:///:memory:"
engine = create_engine(
    DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)

TestingSessionLocal = sessionmaker(autoflush=False, bind=engine)


@pytest.fixture
def db_session_factory() -> Generator[sessionmaker[Session], None, None]:
    """Sessions on a test database. Tables are removed at teardown to make unit tests of repository independent of each other."""
    Base.metadata.create_all(bind=engine)
    try:
        yield TestingSessionLocal
    finally:
        Base.metadata.drop_all(bind=engine)


class MockRatingRepository:
    """Mock the RatingRepository using a dictionary of rating records."""

    def __init__(self) -> None:
        self._ratings: dict[str, RatingRecord] = {}

    def get_rating(self, profile_name: str) -> RatingRecord | None:
        return self._ratings.get(profile_name)

    def save_rating(self, profile_name: str, record: RatingRecord) -> RatingRecord:
        self._ratings[profile_name] = record
        return record

    def delete_rating(self, profile_name: str) -> RatingRecord | None:
        return self._ratings.pop(profile_name, None)


@pytest.fixture
def mock_repository() -> MockRatingRepository:
    return MockRatingRepository()
