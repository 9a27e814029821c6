"""Reducer - Applies actions to game state.

The reducer is the single point of state change for a game.

Design principles:
- Pure function: (state, action) -> new_state
- A rejected action returns the very same state object
- Board invariants are enforced by the engine, not re-checked here
"""

from typing import Callable, Dict

from backgammon_engine.core.types import Move, bar_slot
from backgammon_engine.core.board import check_winner, checkers_on_bar, initial_board
from backgammon_engine.core.dice import dice_values, validate_dice
from backgammon_engine.core.engine import apply_move, undo_move
from backgammon_engine.core.validator import has_legal_move, is_legal_move, possible_moves_from
from backgammon_engine.ai.selector import select_moves
from backgammon_engine.game.actions import Action, ActionType
from backgammon_engine.game.state import GamePhase, GameState


def reduce(state: GameState, action: Action) -> GameState:
    """Apply an action to a game state.

    Returns:
        The next state, or ``state`` itself when the action is rejected
    """
    handler = _HANDLERS[action.action_type]
    return handler(state, action)


def _new_game(vs_ai: bool, ai_player) -> GameState:
    return GameState(
        phase=GamePhase.PLAYING,
        board=initial_board(),
        vs_ai=vs_ai,
        ai_player=ai_player,
    )


def _handle_init(state: GameState, action: Action) -> GameState:
    return _new_game(action.vs_ai, action.ai_player)


def _handle_reset(state: GameState, action: Action) -> GameState:
    return _new_game(state.vs_ai, state.ai_player)


def _handle_roll(state: GameState, action: Action) -> GameState:
    if state.phase != GamePhase.PLAYING or state.dice:
        return state
    rolled = validate_dice(action.dice)
    return state.evolve(
        dice=dice_values(rolled),
        moves_played=(),
        selected=None,
        selectable_moves=(),
    )


def _play(state: GameState, move: Move) -> GameState:
    """Apply a legal move and detect the end of the game."""
    result = apply_move(state.board, state.player_turn, move, state.dice, state.moves_played)
    new_state = state.evolve(
        board=result.board,
        dice=result.dice,
        moves_played=state.moves_played + (result.record,),
        selected=None,
        selectable_moves=(),
        last_move=result.record,
    )
    winner = check_winner(result.board)
    if winner is not None:
        return new_state.evolve(phase=GamePhase.ENDED, winner=winner)
    return new_state


def _pass_turn(state: GameState) -> GameState:
    return state.evolve(
        player_turn=state.player_turn.opponent(),
        dice=(),
        moves_played=(),
        selected=None,
        selectable_moves=(),
    )


def _handle_select(state: GameState, action: Action) -> GameState:
    if state.phase != GamePhase.PLAYING or not state.dice or state.is_ai_turn:
        return state

    player = state.player_turn
    slot = action.slot

    if state.selected is not None:
        move = Move(state.selected, slot)
        if is_legal_move(state.board, player, move, state.dice, state.moves_played):
            return _play(state, move)
        return state.evolve(selected=None, selectable_moves=())

    if checkers_on_bar(state.board, player) > 0 and slot != bar_slot(player):
        return state

    moves = possible_moves_from(state.board, player, slot, state.dice, state.moves_played)
    if not moves:
        return state
    return state.evolve(selected=slot, selectable_moves=tuple(moves))


def _handle_end_turn(state: GameState, action: Action) -> GameState:
    if state.phase != GamePhase.PLAYING or not state.dice or state.is_ai_turn:
        return state
    return _pass_turn(state)


def _handle_undo(state: GameState, action: Action) -> GameState:
    if state.phase != GamePhase.PLAYING or not state.moves_played or state.is_ai_turn:
        return state
    last = state.moves_played[-1]
    return state.evolve(
        board=undo_move(state.board, state.player_turn, last),
        moves_played=state.moves_played[:-1],
        selected=None,
        selectable_moves=(),
        last_move=None,
    )


def _handle_ai_move(state: GameState, action: Action) -> GameState:
    if state.phase != GamePhase.PLAYING or not state.dice:
        return state
    if state.vs_ai and state.player_turn != state.ai_player:
        return state

    player = state.player_turn
    chosen = select_moves(state.board, player, state.dice, state.moves_played)
    if not chosen:
        return _pass_turn(state)

    new_state = _play(state, chosen[0])
    if new_state.phase == GamePhase.ENDED:
        return new_state
    if not has_legal_move(new_state.board, player, new_state.dice, new_state.moves_played):
        return _pass_turn(new_state)
    return new_state


_HANDLERS: Dict[ActionType, Callable[[GameState, Action], GameState]] = {
    ActionType.INIT_GAME: _handle_init,
    ActionType.RESET_GAME: _handle_reset,
    ActionType.ROLL_DICE: _handle_roll,
    ActionType.SELECT_POINT: _handle_select,
    ActionType.END_TURN: _handle_end_turn,
    ActionType.CONFIRM_DICE_USE: _handle_end_turn,
    ActionType.UNDO: _handle_undo,
    ActionType.AI_MOVE: _handle_ai_move,
}
