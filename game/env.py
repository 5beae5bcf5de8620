"""
Tile-placing environment for 2048.

The environment is the player's opponent: after every slide it places one
new tile. Placement is biased by the player's last move and drawn from a
shuffle bag, with occasional bonus tiles once the board holds a large tile.

Key rules:
- Candidate cells: all 16 before the first move of an episode, otherwise
  the 4 cells on the edge opposite the last slide
- Candidates are shuffled; the first empty one receives the tile
- Regular tiles come from a bag of {1,1,1,1,2,2,2,2,3,3,3,3} (exponents),
  refilled and reshuffled whenever empty
- Bonus tiles (exponent max - 3) need a max exponent >= 7 and keep
  bonus / regular <= 1/21 over the lifetime of the TurnContext
"""

from typing import List, Optional, Tuple

import torch

from game.actions import Action, NoAction, PlaceAction
from game.board import Board, DOWN, LEFT, RIGHT, UP
from game.turn import TurnContext


ALL_CELLS: Tuple[int, ...] = tuple(range(16))

# Cells on the edge opposite each slide direction
SPAWN_CELLS = {
    None: ALL_CELLS,
    UP: (12, 13, 14, 15),
    RIGHT: (0, 4, 8, 12),
    DOWN: (0, 1, 2, 3),
    LEFT: (3, 7, 11, 15),
}

BAG_CONTENTS: Tuple[int, ...] = (1, 1, 1, 1, 2, 2, 2, 2, 3, 3, 3, 3)

BONUS_MIN_MAX_EXPONENT = 7
BONUS_EXPONENT_OFFSET = 3
# At most one bonus tile per BONUS_RATIO_DENOMINATOR regular tiles
BONUS_RATIO_DENOMINATOR = 21


def _shuffled(items, generator: torch.Generator) -> List[int]:
    order = torch.randperm(len(items), generator=generator).tolist()
    return [items[i] for i in order]


class TileBag:
    """Shuffle bag of regular tile exponents.

    Twelve consecutive draws starting from a fresh bag are always a
    permutation of BAG_CONTENTS.

    Args:
        generator: Random generator used to shuffle each refill
    """

    def __init__(self, generator: torch.Generator):
        self.generator = generator
        self._tiles: List[int] = []

    @property
    def remaining(self) -> int:
        return len(self._tiles)

    def draw(self) -> int:
        """Take the next exponent, refilling the bag first if it is empty."""
        if not self._tiles:
            self._tiles = _shuffled(BAG_CONTENTS, self.generator)
        return self._tiles.pop()


class TileEnvironment:
    """Stochastic tile generator.

    The environment never touches the player's weights or history. It owns
    a private random generator and a tile bag; the regular/bonus counters
    live on the TurnContext passed into take_action().

    Args:
        seed: Optional seed for the private generator (None: random seed)
    """

    def __init__(self, seed: Optional[int] = None):
        self.seed = seed
        self.generator = torch.Generator()
        if seed is None:
            self.generator.seed()
        else:
            self.generator.manual_seed(seed)
        self.bag = TileBag(self.generator)

    def open_episode(self) -> None:
        """Episode start hook; the bag carries over between episodes."""
        pass

    def candidate_cells(self, turn: TurnContext) -> Tuple[int, ...]:
        return SPAWN_CELLS[turn.last_move]

    def take_action(self, board: Board, turn: TurnContext) -> Action:
        """Place one tile on the board's afterstate.

        Args:
            board: Afterstate of the player's slide (not modified)
            turn: Shared turn state (last move read, counters updated)

        Returns:
            PlaceAction for the chosen cell, or NoAction if no candidate
            cell is empty
        """
        space = _shuffled(self.candidate_cells(turn), self.generator)
        max_exponent = board.max_exponent()

        for pos in space:
            if board.cell(pos) != 0:
                continue

            if max_exponent >= BONUS_MIN_MAX_EXPONENT:
                turn.bonus_tiles += 1
                if BONUS_RATIO_DENOMINATOR * turn.bonus_tiles <= turn.regular_tiles:
                    return PlaceAction(pos, max_exponent - BONUS_EXPONENT_OFFSET)
                turn.bonus_tiles -= 1

            turn.regular_tiles += 1
            return PlaceAction(pos, self.bag.draw())

        return NoAction()
