"""Board representation and board-level rules.

This module implements the board model of the engine, including:
- Board initialization
- Slot addressing into the per-color count arrays
- Checker add/remove primitives that enforce board invariants
- Game state queries (bar, home, bearing-off eligibility, winner)

Board Layout:
    White moves from 24→1→off (home board: 1-6)
    Black moves from 1→24→off (home board: 19-24)

    Point numbering:
    13 14 15 16 17 18    19 20 21 22 23 24
    +------------------+------------------+
    |                  |                  |  Black home
    |                  |                  |
    |                  |                  |
    |                  |                  |
    |                  |                  |
    |                  |                  |  White home
    +------------------+------------------+
    12 11 10  9  8  7     6  5  4  3  2  1
"""

from typing import Optional, Tuple
from backgammon_engine.core.types import (
    Board,
    BoardInvariantError,
    CheckerCount,
    Player,
    Slot,
    point_slot,
)


CHECKERS_PER_PLAYER = 15

BAR_INDEX = 0
HOME_INDEX = 25


# ==============================================================================
# BOARD CONSTRUCTION
# ==============================================================================

def initial_board() -> Board:
    """Create the starting position.

    Setup:
    - White: 2 on 1, 5 on 6, 3 on 8, 5 on 12
    - Black: 5 on 13, 3 on 17, 5 on 19, 2 on 24

    Returns:
        Board in starting position, bars and homes empty
    """
    board = Board()

    board.white_checkers[1] = 2
    board.white_checkers[6] = 5
    board.white_checkers[8] = 3
    board.white_checkers[12] = 5

    board.black_checkers[13] = 5
    board.black_checkers[17] = 3
    board.black_checkers[19] = 5
    board.black_checkers[24] = 2

    return board


def empty_board() -> Board:
    """Create an empty board with no checkers.

    Returns:
        Empty board
    """
    return Board()


def board_from_counts(white: dict, black: dict) -> Board:
    """Build a board from ``{slot_or_point: count}`` mappings.

    Keys may be Slots or plain point numbers. Handy for setting up
    positions in tests and tools.
    """
    board = Board()
    for player, counts in ((Player.WHITE, white), (Player.BLACK, black)):
        for key, count in counts.items():
            slot = key if isinstance(key, Slot) else point_slot(key)
            board.set_checkers(player, slot_index(slot, player), count)
    ok, message = _points_single_colored(board)
    if not ok:
        raise BoardInvariantError(message)
    return board


# ==============================================================================
# SLOT ADDRESSING
# ==============================================================================

def slot_index(slot: Slot, player: Player) -> int:
    """Array index of a slot within a player's count array.

    Raises:
        BoardInvariantError: If the slot is another player's bar or home
    """
    if slot.is_point:
        return slot.point
    if slot.owner != player:
        raise BoardInvariantError(f"{player} has no checkers in {slot}")
    return BAR_INDEX if slot.is_bar else HOME_INDEX


def count_at(board: Board, player: Player, slot: Slot) -> CheckerCount:
    """Number of a player's checkers in a slot (0 for the other color's bar/home)."""
    if not slot.is_point and slot.owner != player:
        return 0
    return board.get_checkers(player, slot_index(slot, player))


def occupant(board: Board, point: int) -> Optional[Player]:
    """Color owning a point, or None when the point is empty."""
    if board.white_checkers[point] > 0:
        return Player.WHITE
    if board.black_checkers[point] > 0:
        return Player.BLACK
    return None


def point_count(board: Board, point: int) -> CheckerCount:
    """Total checkers on a point, whichever color owns it."""
    return int(board.white_checkers[point] + board.black_checkers[point])


def is_blot(board: Board, point: int, player: Player) -> bool:
    """True if the player has exactly one checker on the point."""
    return board.get_checkers(player, point) == 1


def is_made_point(board: Board, point: int, player: Player) -> bool:
    """True if the player holds the point with two or more checkers."""
    return board.get_checkers(player, point) >= 2


# ==============================================================================
# CHECKER PRIMITIVES (mutate the board they are given)
# ==============================================================================

def add_checker(board: Board, player: Player, slot: Slot) -> None:
    """Place one of player's checkers in a slot.

    Raises:
        BoardInvariantError: If the slot is an opposing point or would overflow
    """
    index = slot_index(slot, player)
    if slot.is_point:
        held = board.get_checkers(player.opponent(), index)
        if held > 0:
            raise BoardInvariantError(
                f"Cannot add {player} checker to point {slot.point} "
                f"holding {held} {player.opponent()} checker(s)"
            )
    count = board.get_checkers(player, index)
    if count >= CHECKERS_PER_PLAYER:
        raise BoardInvariantError(f"Cannot add {player} checker to {slot}: already holds {count}")
    board.set_checkers(player, index, count + 1)


def remove_checker(board: Board, player: Player, slot: Slot) -> None:
    """Take one of player's checkers out of a slot.

    Raises:
        BoardInvariantError: If the player has no checker there
    """
    index = slot_index(slot, player)
    count = board.get_checkers(player, index)
    if count == 0:
        raise BoardInvariantError(f"Cannot remove {player} checker from empty {slot}")
    board.set_checkers(player, index, count - 1)


# ==============================================================================
# BOARD QUERIES
# ==============================================================================

def pip_count(board: Board, player: Player) -> int:
    """Calculate pip count for a player.

    Pip count = sum of (distance to bear off × num_checkers). Checkers on
    the bar count 25 pips, borne-off checkers count nothing.

    Args:
        board: Current board
        player: Which player

    Returns:
        Total pip count
    """
    checkers = board.checkers(player)
    total = 25 * int(checkers[BAR_INDEX])
    for point in range(1, 25):
        count = int(checkers[point])
        if count:
            distance = point if player == Player.WHITE else 25 - point
            total += distance * count
    return total


def checkers_on_bar(board: Board, player: Player) -> int:
    """Get number of checkers on the bar for a player."""
    return board.get_checkers(player, BAR_INDEX)


def checkers_borne_off(board: Board, player: Player) -> int:
    """Get number of checkers borne off for a player."""
    return board.get_checkers(player, HOME_INDEX)


def home_board_range(player: Player) -> range:
    """Points of a player's home board (white 1-6, black 19-24)."""
    if player == Player.WHITE:
        return range(1, 7)
    else:
        return range(19, 25)


def entry_range(player: Player) -> range:
    """Points a player may enter on from the bar: the opponent's home board."""
    return home_board_range(player.opponent())


def entry_point(player: Player, die: int) -> int:
    """Point reached when entering from the bar with a die value."""
    if player == Player.WHITE:
        return 25 - die
    else:
        return die


def bear_off_distance(player: Player, point: int) -> int:
    """Die value that bears a checker off exactly from a point."""
    return point if player == Player.WHITE else 25 - point


def all_checkers_in_home_board(board: Board, player: Player) -> bool:
    """Check if a player may bear off.

    False if the player has checkers on the bar or on any point outside
    the home board (white: 7-24, black: 1-18).
    """
    if checkers_on_bar(board, player) > 0:
        return False

    checkers = board.checkers(player)
    home = home_board_range(player)
    outside = range(home.stop, 25) if player == Player.WHITE else range(1, home.start)
    return not any(checkers[point] > 0 for point in outside)


def highest_checker_in_home_board(board: Board, player: Player) -> Optional[Slot]:
    """The occupied home point farthest from the off edge.

    White's highest occupied point in 1-6, black's lowest in 19-24.

    Returns:
        The point slot, or None if the player has nothing in its home board
    """
    points = home_board_range(player)
    if player == Player.WHITE:
        points = reversed(points)
    for point in points:
        if board.get_checkers(player, point) > 0:
            return point_slot(point)
    return None


def check_winner(board: Board) -> Optional[Player]:
    """Return the player whose home holds all 15 checkers, if any."""
    for player in (Player.WHITE, Player.BLACK):
        if checkers_borne_off(board, player) == CHECKERS_PER_PLAYER:
            return player
    return None


def is_game_over(board: Board) -> bool:
    """Check if one player has borne off all checkers."""
    return check_winner(board) is not None


def _points_single_colored(board: Board) -> Tuple[bool, str]:
    for point in range(1, 25):
        if board.white_checkers[point] > 0 and board.black_checkers[point] > 0:
            return False, (
                f"Point {point} holds {board.white_checkers[point]} white and "
                f"{board.black_checkers[point]} black checkers"
            )
    return True, ""


def is_valid_board(board: Board) -> Tuple[bool, str]:
    """Validate a board state.

    Args:
        board: Board to validate

    Returns:
        (is_valid, error_message) tuple
    """
    white_total = int(sum(board.white_checkers))
    black_total = int(sum(board.black_checkers))

    if white_total != CHECKERS_PER_PLAYER:
        return False, f"White has {white_total} checkers, should have {CHECKERS_PER_PLAYER}"

    if black_total != CHECKERS_PER_PLAYER:
        return False, f"Black has {black_total} checkers, should have {CHECKERS_PER_PLAYER}"

    return _points_single_colored(board)


# ==============================================================================
# BOARD DISPLAY (for debugging)
# ==============================================================================

def _point_cell(board: Board, point: int) -> str:
    owner = occupant(board, point)
    if owner is None:
        return " . "
    symbol = "W" if owner == Player.WHITE else "B"
    return f"{symbol}{board.get_checkers(owner, point):<2d}"


def board_to_string(board: Board) -> str:
    """Convert board to an ASCII representation.

    Args:
        board: Board to display

    Returns:
        Multi-line string, points 13-24 on top and 12-1 below
    """
    top = [_point_cell(board, p) for p in range(13, 25)]
    bottom = [_point_cell(board, p) for p in range(12, 0, -1)]

    lines = []
    lines.append(" 13 14 15 16 17 18     19 20 21 22 23 24")
    lines.append("".join(top[:6]) + "  |  " + "".join(top[6:]))
    lines.append(
        f"Bar: W{checkers_on_bar(board, Player.WHITE)} B{checkers_on_bar(board, Player.BLACK)}   "
        f"Home: W{checkers_borne_off(board, Player.WHITE)} B{checkers_borne_off(board, Player.BLACK)}"
    )
    lines.append("".join(bottom[:6]) + "  |  " + "".join(bottom[6:]))
    lines.append(" 12 11 10  9  8  7      6  5  4  3  2  1")
    lines.append(
        f"Pips: W{pip_count(board, Player.WHITE)} B{pip_count(board, Player.BLACK)}"
    )
    return "\n".join(lines)


def print_board(board: Board) -> None:
    """Print board to console."""
    print(board_to_string(board))
