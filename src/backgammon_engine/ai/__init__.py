"""Move selection.

This module provides:
- The greedy rule-priority selector used by the game's AI side
- Agent wrappers (greedy, random) for self-play
"""

from backgammon_engine.ai.selector import choose_move, select_moves
from backgammon_engine.ai.agents import Agent, greedy_agent, random_agent

__all__ = [
    "choose_move",
    "select_moves",
    "Agent",
    "greedy_agent",
    "random_agent",
]
