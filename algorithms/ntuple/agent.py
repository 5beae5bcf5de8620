"""
N-tuple TD(0) player for 2048.

Greedy afterstate policy:
    choose argmax_a [ r(s, a) + V(afterstate(s, a)) ]

Online learning runs once per episode, when no legal move remains. The
episode's afterstates are swept newest first:
- the terminal afterstate's 32 entries are reset to 0 (its true value)
- every older afterstate s_t moves toward r_{t+1} + V(s_{t+1}):
      W += alpha * (V(s_{t+1}) - V(s_t) + r_{t+1})  for each of its 32 entries

where r_{t+1} is the merge reward of the move that produced s_{t+1}.
"""

from dataclasses import dataclass
from typing import List, Optional, Tuple

from algorithms.ntuple.value import FeatureIndices, ValueFunction
from game.actions import Action, NoAction, SlideAction
from game.board import Board, DIRECTIONS, INVALID
from game.turn import TurnContext


# Base rate 0.1 split over the 8 symmetries x 4 patterns updated per state
DEFAULT_LEARNING_RATE = 0.1 / 32


@dataclass
class HistoryEntry:
    """One recorded move.

    Attributes:
        afterstate: Board right after the chosen slide
        reward: score - value of the chosen move (its immediate reward)
    """
    afterstate: Board
    reward: float


@dataclass
class MoveChoice:
    """Best move found by a one-ply scan."""
    direction: int
    score: float
    value: float


class NTuplePlayer:
    """Greedy player that learns its value function from finished episodes.

    Args:
        value_function: Shared n-tuple value function (updated in place)
        learning_rate: Step size applied to each of the 32 entries
        training: If False, moves are not recorded and no learning happens
    """

    def __init__(
        self,
        value_function: ValueFunction,
        learning_rate: float = DEFAULT_LEARNING_RATE,
        training: bool = True,
    ):
        if learning_rate <= 0:
            raise ValueError("learning_rate must be positive")
        self.value_function = value_function
        self.learning_rate = learning_rate
        self.training = training
        self._history: List[HistoryEntry] = []

    @property
    def history(self) -> Tuple[HistoryEntry, ...]:
        return tuple(self._history)

    def open_episode(self) -> None:
        self._history.clear()

    def close_episode(self) -> None:
        """Drop an unfinished episode without learning from it."""
        self._history.clear()

    def best_move(self, before: Board) -> Optional[MoveChoice]:
        """Scan directions 0..3 and keep the best score.

        Ties go to the later direction (>=), which keeps recorded games
        reproducible.

        Returns:
            The chosen move, or None if no slide changes the board
        """
        best: Optional[MoveChoice] = None
        for op in DIRECTIONS:
            tmp = before.copy()
            reward = tmp.slide(op)
            if reward == INVALID:
                continue
            value = self.value_function.evaluate(tmp)
            score = reward + value
            if best is None or score >= best.score:
                best = MoveChoice(direction=op, score=score, value=value)
        return best

    def take_action(self, before: Board, turn: TurnContext) -> Action:
        """Choose a slide, or learn from the episode if none is legal.

        Args:
            before: Current board (not modified)
            turn: Shared turn state; last_move is set to the chosen slide

        Returns:
            SlideAction for the chosen direction, or NoAction when no
            direction is legal (end of the player's episode)
        """
        choice = self.best_move(before)
        if choice is None:
            if self.training:
                self.learn_from_episode()
            else:
                self._history.clear()
            return NoAction()

        direction = choice.direction
        reward = choice.score - choice.value
        after = before.copy()
        if after.slide(direction) == INVALID:
            direction, reward, after = self._any_valid_move(before)

        if self.training:
            self.record_afterstate(after, reward)
        turn.record_move(direction)
        return SlideAction(direction)

    def record_afterstate(self, afterstate: Board, reward: float) -> None:
        """Append one move to the episode history (used by take_action)."""
        self._history.append(HistoryEntry(afterstate=afterstate.copy(), reward=float(reward)))

    @staticmethod
    def _any_valid_move(before: Board) -> Tuple[int, float, Board]:
        """Last legal direction in scan order, with its reward and afterstate."""
        found = None
        for op in DIRECTIONS:
            tmp = before.copy()
            reward = tmp.slide(op)
            if reward != INVALID:
                found = (op, float(reward), tmp)
        if found is None:
            raise RuntimeError("No legal move left after one was chosen")
        return found

    def learn_from_episode(self) -> None:
        """Backward TD(0) sweep over the recorded afterstates, then clear them.

        The terminal afterstate is handled first and on its own: its entries
        are zeroed before it is read as the successor of the next-older state.
        """
        history = self._history
        n = len(history)
        if n == 0:
            return

        vf = self.value_function
        terminal: FeatureIndices = vf.feature_indices(history[n - 1].afterstate)
        vf.reset_entries(terminal)

        next_indices = terminal
        for j in range(1, n):
            cur = history[n - 1 - j]
            nxt = history[n - j]
            cur_indices = vf.feature_indices(cur.afterstate)
            v_next = vf.value_of_indices(next_indices)
            v_cur = vf.value_of_indices(cur_indices)
            delta = v_next - v_cur + nxt.reward
            vf.update_entries(cur_indices, self.learning_rate * delta)
            next_indices = cur_indices

        history.clear()
