"""Database tables / schema"""

from datetime import datetime, timezone

from sqlalchemy import JSON
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class Base(DeclarativeBase):
    pass


class DBRating(Base):
    """Ratings of a single user profile. The history is a list of {"white": int, "black": int} entries."""

    __tablename__ = "ratings"
    profile_name: Mapped[str] = mapped_column(primary_key=True)
    white_elo: Mapped[int]
    black_elo: Mapped[int]
    elo_history: Mapped[list[dict[str, int]]] = mapped_column(JSON, default=list)
    created_at: Mapped[datetime] = mapped_column(default=utc_now)
    updated_at: Mapped[datetime] = mapped_column(default=utc_now, onupdate=utc_now)
