"""
Action results exchanged between agents and the episode driver.

An agent's take_action() returns one of:
- NoAction: pass; signals a terminal state for that side
- SlideAction(direction): player slides the board
- PlaceAction(cell, exponent): environment places a tile
"""

from dataclasses import dataclass
from typing import Union

from game.board import Board, DIRECTIONS, DIRECTION_NAMES, INVALID


class IllegalActionError(Exception):
    """Raised when the driver applies an action the board cannot take.

    Slides that leave the board unchanged and placements on occupied
    cells are illegal. Agents never return such actions; reaching this
    means the driver and the agents disagree about the board.
    """
    pass


@dataclass(frozen=True)
class NoAction:
    """Pass / terminal signal."""

    def apply(self, board: Board) -> int:
        return INVALID

    def __str__(self) -> str:
        return "none"


@dataclass(frozen=True)
class SlideAction:
    direction: int

    def __post_init__(self):
        if self.direction not in DIRECTIONS:
            raise ValueError(f"Invalid direction {self.direction}")

    def apply(self, board: Board) -> int:
        """Slide the board; returns the merge reward.

        Raises:
            IllegalActionError: If the slide does not change the board
        """
        reward = board.slide(self.direction)
        if reward == INVALID:
            raise IllegalActionError(f"Slide {self} does not change the board")
        return reward

    def __str__(self) -> str:
        return f"slide {DIRECTION_NAMES[self.direction]}"


@dataclass(frozen=True)
class PlaceAction:
    cell: int
    exponent: int

    def apply(self, board: Board) -> int:
        """Place the tile; placing earns no reward.

        Raises:
            IllegalActionError: If the cell is occupied
        """
        if board[self.cell] != 0:
            raise IllegalActionError(f"Cell {self.cell} is occupied")
        board[self.cell] = self.exponent
        return 0

    def __str__(self) -> str:
        return f"place {1 << self.exponent} at {self.cell}"


Action = Union[NoAction, SlideAction, PlaceAction]
