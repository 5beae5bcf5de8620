"""Game module for the 2048 n-tuple learner."""

from game.actions import Action, IllegalActionError, NoAction, PlaceAction, SlideAction
from game.board import Board, DIRECTIONS, INVALID
from game.env import TileBag, TileEnvironment
from game.turn import TurnContext

__all__ = [
    "Action",
    "Board",
    "DIRECTIONS",
    "INVALID",
    "IllegalActionError",
    "NoAction",
    "PlaceAction",
    "SlideAction",
    "TileBag",
    "TileEnvironment",
    "TurnContext",
]
