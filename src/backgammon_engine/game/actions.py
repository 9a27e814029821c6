"""Turn actions.

Every state change of a game flows through one of these actions. Actions
carry all their inputs (including rolled dice) so a recorded action list
replays to the same game.
"""

from __future__ import annotations
from dataclasses import dataclass
from enum import Enum

from backgammon_engine.core.types import Dice, Player, Slot


class ActionType(Enum):
    """Types of actions in the turn state machine."""
    INIT_GAME = "init_game"
    RESET_GAME = "reset_game"
    ROLL_DICE = "roll_dice"
    SELECT_POINT = "select_point"
    END_TURN = "end_turn"
    CONFIRM_DICE_USE = "confirm_dice_use"
    UNDO = "undo"
    AI_MOVE = "ai_move"


@dataclass(frozen=True)
class Action:
    """A single action to be applied to the game state.

    Use the factory classmethods rather than building payloads by hand.
    """
    action_type: ActionType
    slot: Slot | None = None
    dice: Dice | None = None
    vs_ai: bool = False
    ai_player: Player = Player.BLACK

    @classmethod
    def init_game(cls, vs_ai: bool = False, ai_player: Player = Player.BLACK) -> Action:
        """Factory for starting a game."""
        return cls(ActionType.INIT_GAME, vs_ai=vs_ai, ai_player=ai_player)

    @classmethod
    def reset_game(cls) -> Action:
        """Factory for restarting the current game."""
        return cls(ActionType.RESET_GAME)

    @classmethod
    def roll_dice(cls, die1: int, die2: int) -> Action:
        """Factory for a roll with already drawn dice."""
        return cls(ActionType.ROLL_DICE, dice=(die1, die2))

    @classmethod
    def select_point(cls, slot: Slot) -> Action:
        """Factory for selecting an origin or a destination."""
        return cls(ActionType.SELECT_POINT, slot=slot)

    @classmethod
    def end_turn(cls) -> Action:
        return cls(ActionType.END_TURN)

    @classmethod
    def confirm_dice_use(cls) -> Action:
        return cls(ActionType.CONFIRM_DICE_USE)

    @classmethod
    def undo(cls) -> Action:
        return cls(ActionType.UNDO)

    @classmethod
    def ai_move(cls) -> Action:
        return cls(ActionType.AI_MOVE)
