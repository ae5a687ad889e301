"""Protocol repository (implemented with SQL Alchemy, but the service does not care)"""

from typing import Protocol

from src.core.models import RatingRecord


class RatingRepository(Protocol):
    """Persistence layer orchestration for user profiles and their ratings"""

    def get_rating(self, profile_name: str) -> RatingRecord | None:
        """Get the ratings of a profile, if record exists."""
        ...

    def save_rating(self, profile_name: str, record: RatingRecord) -> RatingRecord:
        """Create or overwrite the ratings of a profile."""
        ...

    def delete_rating(self, profile_name: str) -> RatingRecord | None:
        """Remove a profile's record."""
        ...
