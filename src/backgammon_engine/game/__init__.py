"""Turn state machine and the stateful game facade.

Modules:
- actions: The closed set of actions a game accepts
- state: Immutable game snapshots
- reducer: (state, action) -> state
- session: ``Game`` facade with dice source, history and notifications
"""

from backgammon_engine.game.actions import Action, ActionType
from backgammon_engine.game.state import GamePhase, GameState
from backgammon_engine.game.reducer import reduce
from backgammon_engine.game.session import Game, GameEvent

__all__ = [
    "Action",
    "ActionType",
    "GamePhase",
    "GameState",
    "reduce",
    "Game",
    "GameEvent",
]
