"""
Backgammon Engine - board model, move legality, turn sequencing and a greedy AI.
"""

__version__ = "0.1.0"

# Core exports
from backgammon_engine.core.types import (
    Board,
    Move,
    MoveRecord,
    Player,
    Slot,
)
from backgammon_engine.game.session import Game, GameEvent
from backgammon_engine.game.state import GamePhase

__all__ = [
    "Board",
    "Move",
    "MoveRecord",
    "Player",
    "Slot",
    "Game",
    "GameEvent",
    "GamePhase",
]
