"""Greedy rule-priority move selection.

The selector looks one checker move ahead and never evaluates positions.
It walks a fixed cascade of preferences over the legal moves and takes the
first move of the first non-empty group:

1. Entering from the bar: hit a blot, else land on an owned point, else any.
2. Hit a blot, in the opponent's home board if possible.
3. Bear off the checker farthest from the off edge.
4. Land on a point already owned, in the home board if possible.
5. Leave no blot behind at the origin.
6. The first legal move.

Ties always go to the earliest move in canonical order (ascending origin,
then destination), which is the order the validator generates.
"""

from typing import List, Optional, Sequence

from backgammon_engine.core.types import Board, Move, Player
from backgammon_engine.core.board import (
    bear_off_distance,
    checkers_on_bar,
    home_board_range,
)
from backgammon_engine.core.validator import generate_legal_moves


def _hits(board: Board, player: Player, move: Move) -> bool:
    target = move.to_slot
    return target.is_point and board.get_checkers(player.opponent(), target.point) == 1


def _lands_on_own_point(board: Board, player: Player, move: Move) -> bool:
    target = move.to_slot
    return target.is_point and board.get_checkers(player, target.point) > 0


def _leaves_no_blot(board: Board, player: Player, move: Move) -> bool:
    origin = move.from_slot
    if not origin.is_point:
        return False
    count = board.get_checkers(player, origin.point)
    return count > 2 or count == 1


def _first_preferring(moves: List[Move], preferred_points: range) -> Move:
    for move in moves:
        if move.to_slot.point in preferred_points:
            return move
    return moves[0]


def choose_move(board: Board, player: Player, legal_moves: Sequence[Move]) -> Optional[Move]:
    """Apply the priority cascade to an already generated move list.

    Args:
        board: Current board
        player: Player to move
        legal_moves: Legal moves in canonical order

    Returns:
        The chosen move, or None when there is nothing to play
    """
    if not legal_moves:
        return None
    moves = list(legal_moves)

    if checkers_on_bar(board, player) > 0:
        entries = [m for m in moves if m.from_slot.is_bar]
        if entries:
            for preferred in (
                [m for m in entries if _hits(board, player, m)],
                [m for m in entries if _lands_on_own_point(board, player, m)],
            ):
                if preferred:
                    return preferred[0]
            return entries[0]

    hits = [m for m in moves if _hits(board, player, m)]
    if hits:
        return _first_preferring(hits, home_board_range(player.opponent()))

    bear_offs = [m for m in moves if m.to_slot.is_home]
    if bear_offs:
        return max(bear_offs, key=lambda m: bear_off_distance(player, m.from_slot.point))

    builds = [m for m in moves if _lands_on_own_point(board, player, m)]
    if builds:
        return _first_preferring(builds, home_board_range(player))

    safe = [m for m in moves if _leaves_no_blot(board, player, m)]
    if safe:
        return safe[0]

    return moves[0]


def select_moves(
    board: Board,
    player: Player,
    dice: Sequence[int],
    moves_played: Sequence = (),
) -> List[Move]:
    """Pick the next move for a player.

    Only one move is returned per call; the caller applies it and asks
    again until the dice are used up or nothing is playable.

    Args:
        board: Current board
        player: Player to move
        dice: This turn's dice, consumed ones first
        moves_played: Moves already played this turn

    Returns:
        A list holding the chosen move, or an empty list if no legal move exists
    """
    move = choose_move(board, player, generate_legal_moves(board, player, dice, moves_played))
    return [move] if move is not None else []
