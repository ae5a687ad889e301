"""Implementation of (Rating)Repository using SQLAlchemy"""

from sqlalchemy import select
from sqlalchemy.orm import Session, sessionmaker

from src.core.models import EloSnapshot, RatingRecord
from src.db.schema import DBRating


class SQLRatingRepository:
    """
    Data stored using SQL / methods implemented using SQLAlchemy

    Every call is its own unit of work: a session is opened from the factory and closed again before returning,
    so one repository can be shared by the threads FastAPI runs sync endpoints in.
    """

    def __init__(self, session_factory: sessionmaker[Session]) -> None:
        self.session_factory = session_factory

    def get_rating(self, profile_name: str) -> RatingRecord | None:
        """Get the ratings of a profile, if record exists."""
        with self.session_factory() as db:
            rating_db = self._fetch_rating(db, profile_name)
            if rating_db:
                return self._to_model(rating_db)
            return None

    def save_rating(self, profile_name: str, record: RatingRecord) -> RatingRecord:
        """Create or overwrite the ratings of a profile."""
        with self.session_factory() as db:
            rating_db = self._fetch_rating(db, profile_name)
            if rating_db is None:
                rating_db = DBRating(profile_name=profile_name)
                db.add(rating_db)

            rating_db.white_elo = record.white_elo
            rating_db.black_elo = record.black_elo
            rating_db.elo_history = [
                {"white": entry.white, "black": entry.black} for entry in record.elo_history
            ]
            db.commit()
            db.refresh(rating_db)
            return self._to_model(rating_db)

    def delete_rating(self, profile_name: str) -> RatingRecord | None:
        """Remove a profile's record."""
        with self.session_factory() as db:
            rating_db = self._fetch_rating(db, profile_name)
            if not rating_db:
                return None
            record = self._to_model(rating_db)
            db.delete(rating_db)
            db.commit()
            return record

    def _fetch_rating(self, db: Session, profile_name: str) -> DBRating | None:
        query = select(DBRating).where(DBRating.profile_name == profile_name)
        return db.scalar(query)

    def _to_model(self, rating_db: DBRating) -> RatingRecord:
        """Convert SQLAlchemy model to data transfer model."""
        return RatingRecord(
            white_elo=rating_db.white_elo,
            black_elo=rating_db.black_elo,
            elo_history=[
                EloSnapshot(white=entry["white"], black=entry["black"])
                for entry in rating_db.elo_history
            ],
        )
