"""Tests for move legality and move generation."""

import pytest
from backgammon_engine.core.board import board_from_counts, initial_board
from backgammon_engine.core.engine import apply_move
from backgammon_engine.core.types import (
    Move,
    MoveRecord,
    Player,
    point_slot,
    WHITE_BAR,
    BLACK_BAR,
    WHITE_HOME,
    BLACK_HOME,
)
from backgammon_engine.core.validator import (
    generate_legal_moves,
    has_legal_move,
    is_legal_move,
    possible_moves_from,
    required_die,
)


def mv(origin, target):
    """Shorthand: ints are points, slots pass through."""
    as_slot = lambda s: point_slot(s) if isinstance(s, int) else s
    return Move(as_slot(origin), as_slot(target))


def names(moves):
    return [str(m) for m in moves]


class TestRequiredDie:
    """Tests for die distance geometry."""

    def test_regular_moves(self):
        assert required_die(mv(8, 5), Player.WHITE) == 3
        assert required_die(mv(13, 18), Player.BLACK) == 5
        # Backwards moves need a non-positive die
        assert required_die(mv(5, 8), Player.WHITE) == -3

    def test_bar_entry(self):
        assert required_die(mv(WHITE_BAR, 22), Player.WHITE) == 3
        assert required_die(mv(BLACK_BAR, 4), Player.BLACK) == 4

    def test_bear_off(self):
        assert required_die(mv(4, WHITE_HOME), Player.WHITE) == 4
        assert required_die(mv(21, BLACK_HOME), Player.BLACK) == 4


class TestMoveGeneration:
    """Tests for move generation."""

    def test_opening_moves_white(self):
        """Initial board, white rolls 3-1."""
        moves = generate_legal_moves(initial_board(), Player.WHITE, (3, 1))
        assert names(moves) == ["6->3", "6->5", "8->5", "8->7", "12->9", "12->11"]

    def test_opening_moves_black(self):
        moves = generate_legal_moves(initial_board(), Player.BLACK, (2, 5))
        assert names(moves) == ["13->15", "13->18", "17->19", "17->22", "19->21", "19->24"]

    def test_doubles_from_custom_board(self):
        """White plays 24->21 four times with double 3s."""
        board = board_from_counts({24: 4, 6: 11}, {13: 15})
        dice = (3, 3, 3, 3)
        played = []

        for _ in range(4):
            move = mv(24, 21)
            assert is_legal_move(board, Player.WHITE, move, dice, played)
            board, dice, record = apply_move(board, Player.WHITE, move, dice, played)
            played.append(record)

        assert board.white_checkers[24] == 0
        assert board.white_checkers[21] == 4
        assert not has_legal_move(board, Player.WHITE, dice, played)

    def test_bar_entry_black(self):
        """Black on the bar with 2-5 may only enter."""
        board = initial_board()
        board.black_checkers[24] = 1
        board.black_checkers[0] = 1

        moves = generate_legal_moves(board, Player.BLACK, (2, 5))
        assert names(moves) == ["bar:black->2", "bar:black->5"]

    def test_bar_entry_blocked(self):
        """No entry point open means no legal move at all."""
        board = board_from_counts({2: 2, 5: 2, 6: 11}, {BLACK_BAR: 1, 13: 14})
        assert generate_legal_moves(board, Player.BLACK, (2, 5)) == []
        assert not has_legal_move(board, Player.BLACK, (2, 5))

    def test_bar_entry_onto_blot(self):
        board = board_from_counts({2: 1, 6: 14}, {BLACK_BAR: 1, 13: 14})
        assert names(generate_legal_moves(board, Player.BLACK, (2, 2, 2, 2))) == ["bar:black->2"]

    def test_no_moves_after_dice_used(self):
        board = initial_board()
        record = MoveRecord(mv(6, 3), 3)
        assert generate_legal_moves(board, Player.WHITE, (3, 1), [record, record]) == []

    def test_possible_moves_from(self):
        board = initial_board()
        assert names(possible_moves_from(board, Player.WHITE, point_slot(8), (3, 1))) == ["8->5", "8->7"]
        assert possible_moves_from(board, Player.WHITE, point_slot(2), (3, 1)) == []

    def test_duplicates_removed_on_doubles(self):
        board = initial_board()
        moves = possible_moves_from(board, Player.WHITE, point_slot(12), (2, 2, 2, 2))
        assert names(moves) == ["12->10"]


class TestLegality:
    """Tests for the ordered legality rules."""

    def test_needs_unused_die(self):
        board = initial_board()
        record = MoveRecord(mv(8, 5), 3)
        assert not is_legal_move(board, Player.WHITE, mv(6, 3), (3, 1), [record, record])

    def test_bar_takes_precedence(self):
        board = board_from_counts({WHITE_BAR: 1, 6: 14}, {13: 15})
        assert not is_legal_move(board, Player.WHITE, mv(6, 3), (3, 1))
        assert is_legal_move(board, Player.WHITE, mv(WHITE_BAR, 22), (3, 1))

    def test_origin_must_hold_own_checker(self):
        board = initial_board()
        assert not is_legal_move(board, Player.WHITE, mv(13, 10), (3, 1))
        assert not is_legal_move(board, Player.WHITE, mv(4, 3), (3, 1))

    def test_cannot_use_other_players_slots(self):
        board = board_from_counts({WHITE_BAR: 1, 6: 14}, {BLACK_BAR: 1, 13: 14})
        assert not is_legal_move(board, Player.BLACK, mv(WHITE_BAR, 22), (3, 1))
        assert not is_legal_move(board, Player.WHITE, mv(WHITE_BAR, BLACK_BAR), (3, 1))

    def test_blocked_destination(self):
        board = board_from_counts({8: 1, 6: 14}, {5: 2, 13: 13})
        assert not is_legal_move(board, Player.WHITE, mv(8, 5), (3, 1))

    def test_blot_is_not_a_block(self):
        board = board_from_counts({8: 1, 6: 14}, {5: 1, 13: 14})
        assert is_legal_move(board, Player.WHITE, mv(8, 5), (3, 1))

    def test_backwards_move_illegal(self):
        board = initial_board()
        assert not is_legal_move(board, Player.WHITE, mv(6, 9), (3, 1))
        assert not is_legal_move(board, Player.BLACK, mv(19, 17), (2, 5))

    def test_entry_outside_home_board(self):
        board = board_from_counts({WHITE_BAR: 1, 6: 14}, {13: 15})
        assert not is_legal_move(board, Player.WHITE, mv(WHITE_BAR, 15), (3, 1))


class TestBearingOff:
    """Tests for bearing off."""

    def test_needs_all_checkers_home(self):
        board = board_from_counts({7: 1, 3: 14}, {13: 15})
        assert not is_legal_move(board, Player.WHITE, mv(3, WHITE_HOME), (3, 4))
        assert names(generate_legal_moves(board, Player.WHITE, (3, 4))) == ["7->3", "7->4"]

    def test_exact_die(self):
        board = board_from_counts({6: 1, 2: 14}, {13: 15})
        moves = names(generate_legal_moves(board, Player.WHITE, (2, 1)))
        assert "2->home:white" in moves
        assert "6->home:white" not in moves

    def test_excess_die_only_from_farthest_checker(self):
        board = board_from_counts({WHITE_HOME: 13, 2: 1, 4: 1}, {13: 15})
        assert names(generate_legal_moves(board, Player.WHITE, (6, 5))) == ["4->home:white"]

    def test_excess_die_black(self):
        board = board_from_counts({6: 15}, {BLACK_HOME: 12, 22: 2, 23: 1})
        # 22 is farthest from black's off edge and needs a 3
        assert is_legal_move(board, Player.BLACK, mv(22, BLACK_HOME), (5, 4))
        assert not is_legal_move(board, Player.BLACK, mv(23, BLACK_HOME), (5, 4))

    @pytest.mark.parametrize("player,origin,home", [
        (Player.WHITE, 1, WHITE_HOME),
        (Player.BLACK, 24, BLACK_HOME),
    ])
    def test_cannot_bear_off_into_other_home(self, player, origin, home):
        white = {1: 15} if player == Player.WHITE else {6: 15}
        black = {24: 15} if player == Player.BLACK else {13: 15}
        board = board_from_counts(white, black)
        other = BLACK_HOME if home == WHITE_HOME else WHITE_HOME
        assert is_legal_move(board, player, mv(origin, home), (1, 2))
        assert not is_legal_move(board, player, mv(origin, other), (1, 2))
