"""Pytest configuration and shared fixtures."""

import pytest

from backgammon_engine.config import GameConfig
from backgammon_engine.core.dice import fixed_dice_source


@pytest.fixture
def sample_board():
    """Create a sample board state for testing."""
    from backgammon_engine.core.board import initial_board
    return initial_board()


@pytest.fixture
def make_game():
    """Build a started Game whose dice come from a fixed list of rolls."""
    from backgammon_engine.game.session import Game

    def _make(rolls=(), vs_ai=False):
        game = Game(GameConfig(vs_ai=vs_ai), fixed_dice_source(rolls))
        game.init_game()
        return game

    return _make
