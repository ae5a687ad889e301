"""
Heuristic single-ply AI
---

Every legal move gets a score (material it wins, material it leaves hanging, a bit of noise),
the moves are ranked, and the difficulty decides how far down the ranking the AI may pick from.

The AIScheduler listens to the game and plays for the AI's color after a short, purely cosmetic, think delay.
"""

import logging
import math
import random
import threading
from collections.abc import Callable
from contextlib import AbstractContextManager
from dataclasses import dataclass
from typing import Optional

from src.chess.game import Game, MoveResult
from src.chess.moves import Move, en_passant_capture_square, is_square_under_attack, promotion_row
from src.core.shared_types import Color, Difficulty, PieceType

logger = logging.getLogger(__name__)

CAPTURE_WEIGHT = 10
HANGING_PIECE_WEIGHT = 10
# Noise only breaks ties: must stay well below the smallest step in piece value (1 * 10)
MAX_JITTER = 0.5


# --- SELECTION POLICIES: how many of the top ranked moves the AI may choose from ---
def _all_moves(n: int) -> int:
    return n


def _top_half(n: int) -> int:
    return math.ceil(n / 2)


def _top_three(n: int) -> int:
    return min(3, n)


def _best_only(n: int) -> int:
    return min(1, n)


SELECTION_POLICIES: dict[Difficulty, Callable[[int], int]] = {
    Difficulty.EASY: _all_moves,
    Difficulty.MEDIUM: _top_half,
    Difficulty.HARD: _top_three,
    Difficulty.EXPERT: _best_only,
}


@dataclass(frozen=True)
class ScoredMove:
    move: Move
    score: float


class AIPlayer:
    """Chooses moves for one color."""

    def __init__(
        self,
        color: Color = Color.BLACK,
        difficulty: Difficulty = Difficulty.MEDIUM,
        enabled: bool = False,
        rng: Optional[random.Random] = None,
    ) -> None:
        self.color = color
        self.difficulty = difficulty
        self.enabled = enabled
        self.rng = rng or random.Random()

    def set_difficulty(self, level: Difficulty | str) -> None:
        self.difficulty = Difficulty(level)

    def enable(self, enabled: bool) -> None:
        self.enabled = enabled

    def is_to_move(self, game: Game) -> bool:
        """Only play when switched on, when it is our turn, and while the game is going on."""
        return self.enabled and not game.is_over and game.turn == self.color

    def score_moves(self, game: Game) -> list[ScoredMove]:
        """
        Score every legal move, best first
        ---

        * + value of the captured piece * 10
        * (above the easiest level) - value of the moving piece * 10 if it lands on a square the opponent attacks
        * + random noise in [0, 0.5)
        """
        board = game.board
        scored: list[ScoredMove] = []
        for move in game.legal_moves(self.color):
            piece = board.piece(move.from_square)
            target = board.piece(move.to_square)
            score = 0.0

            if target is not None:
                score += target.points * CAPTURE_WEIGHT

            if self.difficulty != Difficulty.EASY:
                captured_square = en_passant_capture_square(
                    board, move.from_square, move.to_square
                )
                with board.simulate(move.from_square, move.to_square, captured_square):
                    hanging = is_square_under_attack(
                        board, move.to_square, self.color, game.last_move
                    )
                if hanging:
                    score -= piece.points * HANGING_PIECE_WEIGHT

            score += self.rng.uniform(0, MAX_JITTER)
            scored.append(ScoredMove(move, score))

        scored.sort(key=lambda scored_move: scored_move.score, reverse=True)
        return scored

    def choose_move(self, game: Game) -> Optional[Move]:
        """Pick a move according to the difficulty. None if there is nothing (or nothing yet) to play."""
        if not self.is_to_move(game):
            return None

        ranked = self.score_moves(game)
        if not ranked:
            return None

        pool_size = SELECTION_POLICIES[self.difficulty](len(ranked))
        chosen = ranked[self.rng.randrange(pool_size)].move

        # A pawn reaching the last rank always becomes a queen
        piece = game.board.piece(chosen.from_square)
        if piece.type == PieceType.PAWN and chosen.to_square.row == promotion_row(self.color):
            chosen = Move(chosen.from_square, chosen.to_square, PieceType.QUEEN)
        return chosen

    def make_move(self, game: Game) -> Optional[MoveResult]:
        """Choose a move and submit it exactly like a human move would be."""
        move = self.choose_move(game)
        if move is None:
            return None
        logger.debug(
            "AI (%s, %s) plays %s", self.color, self.difficulty, move.to_notation()
        )
        return game.perform_move(
            move.from_square.row,
            move.from_square.col,
            move.to_square.row,
            move.to_square.col,
            move.promote_to,
        )


class AIScheduler:
    """
    Plays the AI's move whenever the turn passes to the AI's color.
    ---

    The move is committed after `think_delay` seconds (on a timer thread), or right away if the delay is zero.
    Resetting the game cancels a pending move: a move chosen for the old board must never land on the new one.
    The (reentrant) lock is held while the AI chooses and makes its move, so callers sharing it never see a half-made move.
    """

    def __init__(
        self,
        game: Game,
        player: AIPlayer,
        think_delay: float = 0.5,
        lock: Optional[AbstractContextManager] = None,
    ) -> None:
        self.game = game
        self.player = player
        self.think_delay = think_delay
        self.lock = lock or threading.RLock()
        self._pending: Optional[threading.Timer] = None
        self._generation = 0

        game.events.on_turn_change.append(self._on_turn_change)
        game.events.on_reset.append(self._on_reset)

    @property
    def has_pending_move(self) -> bool:
        return self._pending is not None

    def set_enabled(self, enabled: bool) -> None:
        """Switching the AI on while it is its turn makes it play."""
        self.player.enable(enabled)
        if enabled:
            self.maybe_schedule()
        else:
            self.cancel()

    def maybe_schedule(self) -> None:
        if self._pending is not None or not self.player.is_to_move(self.game):
            return

        generation = self._generation
        if self.think_delay <= 0:
            self._play(generation)
            return

        timer = threading.Timer(self.think_delay, self._play, args=(generation,))
        timer.daemon = True
        self._pending = timer
        timer.start()

    def cancel(self) -> None:
        """Drop the pending move (if any). A timer that already fired will find the generation changed and do nothing."""
        self._generation += 1
        if self._pending is not None:
            self._pending.cancel()
            self._pending = None

    def _play(self, generation: int) -> None:
        with self.lock:
            if generation != self._generation:
                logger.debug("Dropping stale AI move (generation %s)", generation)
                return
            self._pending = None
            self.player.make_move(self.game)

    def _on_turn_change(self, color: Color) -> None:
        if color == self.player.color:
            self.maybe_schedule()

    def _on_reset(self) -> None:
        self.cancel()
        self.maybe_schedule()
