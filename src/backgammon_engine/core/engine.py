"""Move application and undo.

``apply_move`` and ``undo_move`` never touch the board they are given:
they work on a copy and return the new snapshot. Neither re-checks
legality; callers gate moves through ``validator.is_legal_move`` and a
board primitive raises ``BoardInvariantError`` if that contract is broken.
"""

from typing import NamedTuple, Sequence, Tuple

from backgammon_engine.core.types import Board, DiceError, Move, MoveRecord, Player, bar_slot
from backgammon_engine.core.board import add_checker, remove_checker
from backgammon_engine.core.dice import consume_die, unused_dice
from backgammon_engine.core.validator import required_die


class MoveResult(NamedTuple):
    """Outcome of applying one move."""
    board: Board
    dice: Tuple[int, ...]
    record: MoveRecord


def select_die(move: Move, player: Player, dice: Sequence[int], moves_played: Sequence) -> int:
    """Pick the unused die a move consumes.

    The exact die when one is unused, otherwise the smallest larger die
    (bearing off with an excess die).

    Raises:
        DiceError: If no unused die can pay for the move
    """
    needed = required_die(move, player)
    remaining = unused_dice(dice, moves_played)
    if needed in remaining:
        return needed
    larger = [die for die in remaining if die > needed]
    if move.to_slot.is_home and larger:
        return min(larger)
    raise DiceError(f"No unused die in {tuple(remaining)} can play {move} for {player}")


def apply_move(
    board: Board,
    player: Player,
    move: Move,
    dice: Sequence[int],
    moves_played: Sequence = (),
) -> MoveResult:
    """Play one checker move.

    Takes the checker from its origin, sends a lone opposing checker on the
    destination to the opponent's bar, lands the checker and marks one die
    as consumed.

    Args:
        board: Current board (not modified)
        player: Player moving
        move: Move to play, assumed legal
        dice: This turn's dice, consumed ones first
        moves_played: Moves already played this turn

    Returns:
        MoveResult with the new board, the reordered dice and a record of
        the move for undo
    """
    die = select_die(move, player, dice, moves_played)
    new_board = board.copy()
    opponent = player.opponent()

    remove_checker(new_board, player, move.from_slot)

    hit = False
    target = move.to_slot
    if target.is_point and new_board.get_checkers(opponent, target.point) == 1:
        remove_checker(new_board, opponent, target)
        add_checker(new_board, opponent, bar_slot(opponent))
        hit = True

    add_checker(new_board, player, target)

    new_dice = consume_die(dice, die, len(moves_played))
    return MoveResult(new_board, new_dice, MoveRecord(move=move, die_used=die, hit=hit))


def undo_move(board: Board, player: Player, record: MoveRecord) -> Board:
    """Exact inverse of ``apply_move`` for a recorded move.

    Args:
        board: Board after the move (not modified)
        player: Player who made the move
        record: Record returned when the move was applied

    Returns:
        Board as it was before the move
    """
    new_board = board.copy()
    opponent = player.opponent()
    move = record.move

    remove_checker(new_board, player, move.to_slot)
    if record.hit:
        remove_checker(new_board, opponent, bar_slot(opponent))
        add_checker(new_board, opponent, move.to_slot)
    add_checker(new_board, player, move.from_slot)

    return new_board
