"""Stateful game facade consumed by UIs and drivers.

``Game`` owns the current ``GameState``, draws dice from an injected dice
source, runs every request through the reducer and notifies listeners of
what happened. One re-entrant lock serializes every state change, so a
``Game`` may be shared between request threads.
"""

import logging
import threading
from typing import Callable, Dict, List, NamedTuple, Optional, Sequence, Tuple

from backgammon_engine.config import GameConfig
from backgammon_engine.core.types import Board, Move, MoveRecord, Player, Slot
from backgammon_engine.core.dice import DiceSource, dice_to_string, random_dice_source
from backgammon_engine.core.validator import is_legal_move
from backgammon_engine.game.actions import Action, ActionType
from backgammon_engine.game.reducer import reduce
from backgammon_engine.game.state import GamePhase, GameState

logger = logging.getLogger(__name__)


class GameEvent(NamedTuple):
    """Notification sent to listeners.

    Attributes:
        kind: One of "dice_rolled", "move", "hit", "undo", "turn_ended", "game_over"
        player: Player the event concerns
        data: Event details (dice, move, die used, ...)
    """
    kind: str
    player: Player
    data: Dict


Listener = Callable[[GameEvent], None]


class Game:
    """One game of backgammon.

    Args:
        config: Game configuration (defaults if None)
        dice_source: Callable producing raw rolls; a seeded random source
            built from ``config.seed`` if None
    """

    def __init__(self, config: Optional[GameConfig] = None, dice_source: Optional[DiceSource] = None):
        self.config = config or GameConfig()
        self.dice_source = dice_source or random_dice_source(self.config.seed)
        self.state = GameState(vs_ai=self.config.vs_ai, ai_player=self.config.ai_player)
        self.history: List[Action] = []
        self._listeners: List[Listener] = []
        self.lock = threading.RLock()

    # ------------------------------------------------------------------
    # Dispatch
    # ------------------------------------------------------------------

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a listener; returns a function that unregisters it."""
        self._listeners.append(listener)
        return lambda: self._listeners.remove(listener)

    def dispatch(self, action: Action) -> bool:
        """Run an action through the reducer.

        Returns:
            True if the state changed, False if the action was rejected
        """
        with self.lock:
            before = self.state
            after = reduce(before, action)
            if after is before:
                logger.debug("Rejected %s (phase=%s, turn=%s)",
                             action.action_type.value, before.phase.value, before.player_turn)
                return False

            self.state = after
            if action.action_type in (ActionType.INIT_GAME, ActionType.RESET_GAME):
                self.history = []
            self.history.append(action)
            for event in self._events(before, after, action):
                self._emit(event)
            return True

    def replay(self, actions: Sequence[Action]) -> GameState:
        """Apply recorded actions in order and return the final state."""
        for action in actions:
            self.dispatch(action)
        return self.state

    def _emit(self, event: GameEvent) -> None:
        for listener in list(self._listeners):
            listener(event)

    def _events(self, before: GameState, after: GameState, action: Action) -> List[GameEvent]:
        events = []
        mover = before.player_turn
        kind = action.action_type

        if kind in (ActionType.INIT_GAME, ActionType.RESET_GAME):
            logger.info("Game %s (vs_ai=%s)", "reset" if kind == ActionType.RESET_GAME else "initialized",
                        after.vs_ai)
            return events

        if kind == ActionType.ROLL_DICE:
            logger.info("%s rolled: %s", mover, dice_to_string(after.dice))
            events.append(GameEvent("dice_rolled", mover, {"dice": after.dice}))

        if after.last_move is not None and after.last_move is not before.last_move:
            record = after.last_move
            logger.info("%s moved %s using %d", mover, record.move, record.die_used)
            events.append(GameEvent("move", mover, {"move": record.move, "die": record.die_used}))
            if record.hit:
                logger.info("%s hit a %s blot on %s", mover, mover.opponent(), record.move.to_slot)
                events.append(GameEvent("hit", mover, {"point": record.move.to_slot}))

        if kind == ActionType.UNDO:
            undone = before.moves_played[-1]
            logger.info("Undid %s", undone.move)
            events.append(GameEvent("undo", mover, {"move": undone.move}))

        if after.phase == GamePhase.ENDED and before.phase != GamePhase.ENDED:
            logger.info("Game over! %s wins!", after.winner)
            events.append(GameEvent("game_over", after.winner, {"winner": after.winner}))
        elif after.player_turn != before.player_turn:
            logger.info("Turn ended. Now it's %s's turn", after.player_turn)
            events.append(GameEvent("turn_ended", mover, {"next": after.player_turn}))

        return events

    # ------------------------------------------------------------------
    # Public surface
    # ------------------------------------------------------------------

    def init_game(self, vs_ai: Optional[bool] = None) -> None:
        """Start a fresh game from the starting position, white to move."""
        if vs_ai is None:
            vs_ai = self.config.vs_ai
        self.dispatch(Action.init_game(vs_ai=vs_ai, ai_player=self.config.ai_player))

    def reset_game(self) -> None:
        """Restart with the same opponent settings."""
        self.dispatch(Action.reset_game())

    def roll_dice(self) -> Optional[Tuple[int, ...]]:
        """Roll for the player to move.

        Returns:
            The turn's dice (2 values, or 4 on doubles), or None if rolling
            is not allowed right now
        """
        with self.lock:
            if self.state.phase != GamePhase.PLAYING or self.state.dice:
                logger.debug("Rejected roll_dice (phase=%s, dice=%s)", self.state.phase.value, self.state.dice)
                return None
            die1, die2 = self.dice_source()
            if not self.dispatch(Action.roll_dice(die1, die2)):
                return None
            return self.state.dice

    def select_point(self, slot: Slot) -> bool:
        """Select an origin, or play to a destination if an origin is selected.

        Returns:
            True if the selection or the board changed
        """
        return self.dispatch(Action.select_point(slot))

    propose_move = select_point

    def move(self, from_slot: Slot, to_slot: Slot) -> bool:
        """Play a move in one call (select origin, then destination).

        Returns:
            True if the move was played
        """
        with self.lock:
            if self.board is None or not is_legal_move(
                    self.board, self.player_turn, Move(from_slot, to_slot), self.state.dice, self.state.moves_played):
                return False
            if self.state.selected != from_slot:
                if self.state.selected is not None:
                    # Re-selecting the origin clears the selection.
                    self.select_point(self.state.selected)
                self.select_point(from_slot)
            before = len(self.state.moves_played)
            self.select_point(to_slot)
            return len(self.state.moves_played) == before + 1

    def end_turn(self) -> bool:
        return self.dispatch(Action.end_turn())

    def confirm_dice_use(self) -> bool:
        return self.dispatch(Action.confirm_dice_use())

    def undo_move(self) -> bool:
        return self.dispatch(Action.undo())

    def ai_move(self) -> bool:
        """Let the AI play one move (or pass if it cannot move)."""
        return self.dispatch(Action.ai_move())

    def play_ai_turn(self) -> List[MoveRecord]:
        """Roll if needed and let the AI play until its turn is over.

        Returns:
            The moves the AI played this turn
        """
        with self.lock:
            if self.state.phase != GamePhase.PLAYING:
                return []
            if self.state.vs_ai and self.state.player_turn != self.state.ai_player:
                return []
            if not self.state.dice:
                self.roll_dice()

            player = self.state.player_turn
            played: List[MoveRecord] = []
            while self.state.phase == GamePhase.PLAYING and self.state.player_turn == player:
                before = self.state.last_move
                if not self.ai_move():
                    break
                if self.state.last_move is not before:
                    played.append(self.state.last_move)
            return played

    def is_move_possible(self, from_slot: Slot, to_slot: Slot) -> bool:
        """Whether a destination should be highlighted for an origin.

        Uses the cached selectable moves when ``from_slot`` is the current
        selection; False when nothing is selected.
        """
        if self.state.selected is None:
            return False
        if from_slot == self.state.selected and self.state.selectable_moves:
            return any(m.to_slot == to_slot for m in self.state.selectable_moves)
        return is_legal_move(self.board, self.player_turn, Move(from_slot, to_slot),
                             self.state.dice, self.state.moves_played)

    # ------------------------------------------------------------------
    # Read-only state
    # ------------------------------------------------------------------

    @property
    def board(self) -> Optional[Board]:
        return self.state.board

    @property
    def bar(self) -> Dict[Player, int]:
        return self.state.bar

    @property
    def dice(self) -> Tuple[int, ...]:
        return self.state.dice

    @property
    def unused_dice(self) -> Tuple[int, ...]:
        return self.state.unused_dice

    @property
    def moves_played(self) -> Tuple[MoveRecord, ...]:
        return self.state.moves_played

    @property
    def player_turn(self) -> Player:
        return self.state.player_turn

    @property
    def game_state(self) -> GamePhase:
        return self.state.phase

    @property
    def winner(self) -> Optional[Player]:
        return self.state.winner

    @property
    def selected(self) -> Optional[Slot]:
        return self.state.selected

    @property
    def selectable_moves(self) -> Tuple[Move, ...]:
        return self.state.selectable_moves
