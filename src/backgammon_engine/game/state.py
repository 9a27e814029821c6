"""Game state snapshots for the turn state machine."""

from dataclasses import dataclass, replace
from enum import Enum
from typing import Dict, Optional, Tuple

from backgammon_engine.core.types import Board, Move, MoveRecord, Player, Slot
from backgammon_engine.core.board import checkers_on_bar
from backgammon_engine.core.dice import unused_dice


class GamePhase(Enum):
    """Lifecycle of a game."""
    INITIAL = "initial"    # no board yet
    PLAYING = "playing"
    ENDED = "ended"        # winner set, board kept for display


@dataclass(frozen=True)
class GameState:
    """Immutable snapshot of a game.

    Attributes:
        phase: Where the game is in its lifecycle
        board: Checker positions (None before the first game starts)
        player_turn: Player whose turn it is
        dice: This turn's dice, consumed ones first; empty before rolling
        moves_played: Records of the moves played this turn
        selected: Origin picked by the first half of a two-step move
        selectable_moves: Legal moves from ``selected``
        winner: Set only once the game has ended
        last_move: Most recent move played in this game, for notifications;
            None after an undo until the next move
        vs_ai: Whether one side is played by the AI
        ai_player: Side the AI plays when ``vs_ai`` is set
    """
    phase: GamePhase = GamePhase.INITIAL
    board: Optional[Board] = None
    player_turn: Player = Player.WHITE
    dice: Tuple[int, ...] = ()
    moves_played: Tuple[MoveRecord, ...] = ()
    selected: Optional[Slot] = None
    selectable_moves: Tuple[Move, ...] = ()
    winner: Optional[Player] = None
    last_move: Optional[MoveRecord] = None
    vs_ai: bool = False
    ai_player: Player = Player.BLACK

    @property
    def unused_dice(self) -> Tuple[int, ...]:
        return unused_dice(self.dice, self.moves_played)

    @property
    def bar(self) -> Dict[Player, int]:
        """Checkers waiting on the bar, per player."""
        if self.board is None:
            return {Player.WHITE: 0, Player.BLACK: 0}
        return {p: checkers_on_bar(self.board, p) for p in Player}

    @property
    def is_ai_turn(self) -> bool:
        return self.vs_ai and self.player_turn == self.ai_player

    def evolve(self, **changes) -> "GameState":
        """Copy of this state with some fields replaced."""
        return replace(self, **changes)
