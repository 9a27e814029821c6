"""Player agents for self-play and demos.

This module provides different types of agents that can play backgammon:
- Greedy agent: the fixed rule-priority selector the game's AI uses
- Random agent: selects moves uniformly at random

Agents pick one checker move at a time from the legal moves they are given.
"""

from dataclasses import dataclass
from typing import Callable, Optional, Sequence
import numpy as np

from backgammon_engine.core.types import Board, Move, Player
from backgammon_engine.ai.selector import choose_move


# ==============================================================================
# AGENT BASE CLASS
# ==============================================================================


@dataclass
class Agent:
    """Base agent class for playing backgammon.

    Attributes:
        name: Agent name for identification
        select_move_fn: Function that selects a move from legal moves
    """
    name: str
    select_move_fn: Callable[[Board, Player, Sequence[Move]], Optional[Move]]

    def select_move(self, board: Board, player: Player, legal_moves: Sequence[Move]) -> Optional[Move]:
        """Select a move from legal moves.

        Args:
            board: Current board state
            player: Player to move
            legal_moves: Legal single-checker moves, in canonical order

        Returns:
            Selected move, or None if there is none
        """
        return self.select_move_fn(board, player, legal_moves)


# ==============================================================================
# GREEDY AGENT
# ==============================================================================


def greedy_agent() -> Agent:
    """Create an agent that plays the rule-priority cascade."""
    return Agent(name="Greedy", select_move_fn=choose_move)


# ==============================================================================
# RANDOM AGENT
# ==============================================================================


def random_agent(seed: Optional[int] = None) -> Agent:
    """Create an agent that selects moves uniformly at random.

    Args:
        seed: Random seed (optional, for reproducibility)

    Returns:
        Random agent
    """
    rng = np.random.default_rng(seed)

    def select_random_move(board: Board, player: Player, legal_moves: Sequence[Move]) -> Optional[Move]:
        """Select a random legal move."""
        if not legal_moves:
            return None
        idx = rng.integers(0, len(legal_moves))
        return legal_moves[idx]

    return Agent(name="Random", select_move_fn=select_random_move)
