"""Move legality and move generation.

A move is legal for a player when, in order:
1. At least one die is unused this turn.
2. The player has no checker on the bar, or the move enters from the bar.
3. The origin holds one of the player's checkers and the destination is a
   point or the player's own home.
4. The destination is not held by two or more opposing checkers.
5. A bar entry lands in the opponent's home board.
6. The required die is unused, or, when bearing off with every checker
   home, a larger unused die is available and the checker is the one
   farthest from the off edge.

Move generation walks origins in canonical slot order and returns moves
sorted by ``Move.sort_key``; the AI relies on that order for ties.
"""

from typing import List, Sequence

from backgammon_engine.core.types import (
    Board,
    Move,
    Player,
    Slot,
    bar_slot,
    home_slot,
    point_slot,
)
from backgammon_engine.core.board import (
    all_checkers_in_home_board,
    bear_off_distance,
    checkers_on_bar,
    count_at,
    entry_point,
    entry_range,
    highest_checker_in_home_board,
)
from backgammon_engine.core.dice import unused_dice


def required_die(move: Move, player: Player) -> int:
    """Die value implied by a move's geometry.

    Bar entry counts from the entry edge, bearing off counts to the off
    edge, a regular move is the distance travelled in the player's
    direction (zero or negative for a backwards move).
    """
    origin, target = move.from_slot, move.to_slot
    if origin.is_bar:
        return 25 - target.point if player == Player.WHITE else target.point
    if target.is_home:
        return bear_off_distance(player, origin.point)
    return (target.point - origin.point) * player.direction


def _destination_blocked(board: Board, player: Player, target: Slot) -> bool:
    if not target.is_point:
        return False
    return board.get_checkers(player.opponent(), target.point) >= 2


def _can_bear_off_with_excess(board: Board, player: Player, origin: Slot, needed: int,
                              remaining: Sequence[int]) -> bool:
    if not any(die > needed for die in remaining):
        return False
    return origin == highest_checker_in_home_board(board, player)


def is_legal_move(
    board: Board,
    player: Player,
    move: Move,
    dice: Sequence[int],
    moves_played: Sequence = (),
) -> bool:
    """Check whether a single checker move is legal right now.

    Args:
        board: Current board
        player: Player to move
        move: Candidate move
        dice: This turn's dice, consumed ones first
        moves_played: Moves already played this turn

    Returns:
        True if the move may be applied
    """
    remaining = unused_dice(dice, moves_played)
    if not remaining:
        return False

    origin, target = move.from_slot, move.to_slot
    own_bar = bar_slot(player)

    if checkers_on_bar(board, player) > 0 and origin != own_bar:
        return False

    # Origin must be a point or the player's own bar, holding a checker.
    if origin.is_home or (origin.is_bar and origin != own_bar):
        return False
    if count_at(board, player, origin) == 0:
        return False

    # Destination must be a point or the player's own home.
    if target.is_bar or (target.is_home and target != home_slot(player)):
        return False

    if _destination_blocked(board, player, target):
        return False

    if origin.is_bar and target.point not in entry_range(player):
        return False

    needed = required_die(move, player)
    if not 1 <= needed <= 6:
        return False

    if target.is_home:
        if not all_checkers_in_home_board(board, player):
            return False
        if needed in remaining:
            return True
        return _can_bear_off_with_excess(board, player, origin, needed, remaining)

    return needed in remaining


def possible_moves_from(
    board: Board,
    player: Player,
    origin: Slot,
    dice: Sequence[int],
    moves_played: Sequence = (),
) -> List[Move]:
    """All legal moves starting at one slot.

    Candidates are the entry points (from the bar), the player's home
    (bearing off) and ``origin ± die`` for each unused die.

    Returns:
        Legal moves sorted by ``Move.sort_key``, without duplicates
    """
    remaining = unused_dice(dice, moves_played)
    if not remaining:
        return []

    candidates = set()
    if origin.is_bar:
        for die in set(remaining):
            candidates.add(Move(origin, point_slot(entry_point(player, die))))
    elif origin.is_point:
        candidates.add(Move(origin, home_slot(player)))
        for die in set(remaining):
            target = origin.point + die * player.direction
            if 1 <= target <= 24:
                candidates.add(Move(origin, point_slot(target)))

    legal = [m for m in candidates if is_legal_move(board, player, m, dice, moves_played)]
    return sorted(legal, key=lambda m: m.sort_key)


def generate_legal_moves(
    board: Board,
    player: Player,
    dice: Sequence[int],
    moves_played: Sequence = (),
) -> List[Move]:
    """All legal single-checker moves for a player.

    With checkers on the bar only bar entries are returned; otherwise the
    union over every point the player occupies, in ascending point order.

    Args:
        board: Current board
        player: Player to move
        dice: This turn's dice, consumed ones first
        moves_played: Moves already played this turn

    Returns:
        Legal moves sorted by ``Move.sort_key``
    """
    if checkers_on_bar(board, player) > 0:
        return possible_moves_from(board, player, bar_slot(player), dice, moves_played)

    moves: List[Move] = []
    for point in range(1, 25):
        if board.get_checkers(player, point) > 0:
            moves.extend(possible_moves_from(board, player, point_slot(point), dice, moves_played))
    return moves


def has_legal_move(
    board: Board,
    player: Player,
    dice: Sequence[int],
    moves_played: Sequence = (),
) -> bool:
    """True if the player can play at least one more checker this turn."""
    return bool(generate_legal_moves(board, player, dice, moves_played))
