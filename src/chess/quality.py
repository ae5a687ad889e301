"""
Move quality: a label shown to the player next to the move they just made.

Purely informational (feeds the UI and the choice of sound), has no influence on the game.
"""

from src.core.shared_types import MoveQuality

# a piece worth at least this much (rook or queen) that is left hanging is the worst move you could make
WORST_MOVE_THRESHOLD = 5


def classify_move_quality(
    *,
    is_terminal: bool,
    is_threatened: bool,
    moved_value: int,
    captured_value: int,
    gives_check: bool,
    worst_threshold: int = WORST_MOVE_THRESHOLD,
) -> MoveQuality:
    """
    Rules, in order of precedence:
    ---

    1. The move ended the game: best
    2. The moved piece now stands on an attacked square and is worth more than what it took: worst or bad
    3. The move gives check: good
    4. Took a piece worth more than the one that moved: best
    5. Took anything: good
    6. Otherwise: normal
    """
    if is_terminal:
        return MoveQuality.BEST
    if is_threatened and moved_value > captured_value:
        return MoveQuality.WORST if moved_value >= worst_threshold else MoveQuality.BAD
    if gives_check:
        return MoveQuality.GOOD
    if captured_value > moved_value:
        return MoveQuality.BEST
    if captured_value > 0:
        return MoveQuality.GOOD
    return MoveQuality.NORMAL
