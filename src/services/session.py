"""
Who is playing, and what their ratings are.

Replaces a global 'current user': the caller owns a SessionContext and hands it to whatever needs the ratings.
"""

import logging
import threading
from typing import Optional

from src.chess.elo import K_FACTOR, update_ratings
from src.core.models import DEFAULT_ELO, EloChange, RatingRecord
from src.core.shared_types import Winner
from src.db.repository import RatingRepository

logger = logging.getLogger(__name__)


class SessionContext:
    """Logged in profile (optional) + the ratings of both seats. Shared by all games, so updates are serialized."""

    def __init__(
        self,
        repository: RatingRepository,
        k_factor: int = K_FACTOR,
        default_elo: int = DEFAULT_ELO,
    ) -> None:
        self.repo = repository
        self.k_factor = k_factor
        self.default_elo = default_elo
        self.current_user: Optional[str] = None
        self.record = RatingRecord.default(default_elo)
        self.last_change: Optional[EloChange] = None
        self._lock = threading.RLock()

    def login(self, username: str) -> Optional[RatingRecord]:
        """
        Load the profile's ratings, or create (and store) a fresh profile for a name we have not seen before.
        Blank names are ignored.
        """
        name = username.strip()
        if not name:
            return None

        with self._lock:
            record = self.repo.get_rating(name)
            if record is None:
                record = RatingRecord.default(self.default_elo)
                self.repo.save_rating(name, record)
                logger.info("Created profile %r", name)

            self.current_user = name
            self.record = record
            self.last_change = None
            return record

    def logout(self) -> None:
        """Back to anonymous play, with default ratings"""
        with self._lock:
            self.current_user = None
            self.record = RatingRecord.default(self.default_elo)
            self.last_change = None

    def record_result(self, winner: Winner, ranked: bool) -> Optional[EloChange]:
        """
        Update both ratings after a finished game. Unranked games never touch the ratings.
        The profile (if logged in) gets overwritten with the new ratings.
        """
        if not ranked:
            return None

        with self._lock:
            self.record, change = update_ratings(self.record, winner, self.k_factor)
            self.last_change = change
            logger.info(
                "Ratings after %s result: white %s (%+d), black %s (%+d)",
                winner,
                self.record.white_elo,
                change.white,
                self.record.black_elo,
                change.black,
            )

            if self.current_user is not None:
                self.repo.save_rating(self.current_user, self.record)
            return change
