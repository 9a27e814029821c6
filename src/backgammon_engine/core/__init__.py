"""Core game logic and data structures."""

from backgammon_engine.core.types import (
    Board,
    Move,
    MoveRecord,
    Dice,
    Player,
    Slot,
    SlotKind,
    BackgammonError,
    BoardInvariantError,
    DiceError,
    point_slot,
    bar_slot,
    home_slot,
    parse_slot,
    WHITE_BAR,
    BLACK_BAR,
    WHITE_HOME,
    BLACK_HOME,
)

__all__ = [
    "Board",
    "Move",
    "MoveRecord",
    "Dice",
    "Player",
    "Slot",
    "SlotKind",
    "BackgammonError",
    "BoardInvariantError",
    "DiceError",
    "point_slot",
    "bar_slot",
    "home_slot",
    "parse_slot",
    "WHITE_BAR",
    "BLACK_BAR",
    "WHITE_HOME",
    "BLACK_HOME",
]
