"""Game configuration."""

from dataclasses import dataclass
from typing import Optional

from backgammon_engine.core.types import Player


@dataclass
class GameConfig:
    """Game configuration."""

    # Opponent settings
    vs_ai: bool = False  # One side played by the greedy AI
    ai_player: Player = Player.BLACK

    # Dice
    seed: Optional[int] = None  # None = fresh entropy each run

    # Self-play safety cap (turns, both players counted)
    max_turns: int = 1000
