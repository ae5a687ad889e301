"""Display timer: how long the current game has been running. No time control is enforced."""

import time
from typing import Callable


class GameTimer:
    """Elapsed time since the game was (re)started. Uses monotonic time; the time source can be swapped for tests."""

    def __init__(self, time_source: Callable[[], float] = time.monotonic) -> None:
        self._time_source = time_source
        self._started_at: float | None = None
        self._stopped_at: float | None = None

    def start(self) -> None:
        """(Re)start counting from zero"""
        self._started_at = self._time_source()
        self._stopped_at = None

    def stop(self) -> None:
        if self._started_at is not None and self._stopped_at is None:
            self._stopped_at = self._time_source()

    def resume(self) -> None:
        """Keep counting after a stop, as if the clock never stopped (used when a finished game is taken back)."""
        self._stopped_at = None

    @property
    def is_running(self) -> bool:
        return self._started_at is not None and self._stopped_at is None

    @property
    def elapsed_seconds(self) -> int:
        if self._started_at is None:
            return 0
        end = self._stopped_at if self._stopped_at is not None else self._time_source()
        return int(end - self._started_at)

    def formatted(self) -> str:
        """mm:ss"""
        minutes, seconds = divmod(self.elapsed_seconds, 60)
        return f"{minutes:02d}:{seconds:02d}"
