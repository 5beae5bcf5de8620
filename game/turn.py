"""
Turn state shared by the player and the environment.

The driver owns one TurnContext for a whole run and hands it to both
agents on every call. The player writes last_move; the environment reads
it to choose where the next tile appears and keeps the regular/bonus tile
counters on it.
"""

from dataclasses import dataclass
from typing import Optional

from game.board import DIRECTIONS


@dataclass
class TurnContext:
    """Cross-agent turn state.

    Attributes:
        last_move: Direction of the player's last slide, None before the
            first move of an episode
        regular_tiles: Regular (bag) tiles placed so far
        bonus_tiles: Bonus tiles placed so far

    The tile counters are never reset by begin_episode(): the bonus-tile
    budget is a lifetime cap over every episode played with this context.
    """
    last_move: Optional[int] = None
    regular_tiles: int = 0
    bonus_tiles: int = 0

    def __post_init__(self):
        if self.last_move is not None and self.last_move not in DIRECTIONS:
            raise ValueError(f"Invalid last_move {self.last_move}")
        if self.regular_tiles < 0 or self.bonus_tiles < 0:
            raise ValueError("Tile counters must be non-negative")

    def begin_episode(self) -> None:
        """Forget the previous episode's last move."""
        self.last_move = None

    def record_move(self, direction: int) -> None:
        if direction not in DIRECTIONS:
            raise ValueError(f"Invalid direction {direction}")
        self.last_move = direction

    def bonus_ratio(self) -> float:
        if self.regular_tiles == 0:
            return 0.0
        return self.bonus_tiles / self.regular_tiles
