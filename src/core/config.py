"""
Configuration read from environment variables.

Every setting has a default, so running locally needs no environment at all.
"""

import os
from dataclasses import dataclass
from functools import lru_cache

ENV_PREFIX = "CHESS_"


def _env(name: str, default: str) -> str:
    return os.environ.get(f"{ENV_PREFIX}{name}", default)


@dataclass(frozen=True)
class Settings:
    database_url: str = "sqlite:///./chess.db"
    ai_think_delay: float = 0.5  # seconds, purely cosmetic
    elo_k_factor: int = 32
    default_elo: int = 1200
    worst_move_threshold: int = 5  # moving piece value at which a hanging piece counts as the worst move
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> "Settings":
        defaults = cls()
        return cls(
            database_url=_env("DATABASE_URL", defaults.database_url),
            ai_think_delay=float(_env("AI_THINK_DELAY", str(defaults.ai_think_delay))),
            elo_k_factor=int(_env("ELO_K_FACTOR", str(defaults.elo_k_factor))),
            default_elo=int(_env("DEFAULT_ELO", str(defaults.default_elo))),
            worst_move_threshold=int(
                _env("WORST_MOVE_THRESHOLD", str(defaults.worst_move_threshold))
            ),
            log_level=_env("LOG_LEVEL", defaults.log_level).upper(),
        )


@lru_cache
def get_settings() -> Settings:
    return Settings.from_env()
