"""Tests for the stateful Game facade."""

import logging
import threading
import time

from backgammon_engine.config import GameConfig
from backgammon_engine.core.board import board_from_counts, initial_board
from backgammon_engine.core.dice import fixed_dice_source
from backgammon_engine.core.types import Player, point_slot, WHITE_HOME
from backgammon_engine.game.actions import ActionType
from backgammon_engine.game import session
from backgammon_engine.game.session import Game
from backgammon_engine.game.state import GamePhase, GameState


def collect(game):
    events = []
    game.subscribe(events.append)
    return events


class TestGameBasics:
    """Tests for the public game surface."""

    def test_before_init(self):
        game = Game(dice_source=fixed_dice_source([(3, 1)]))
        assert game.game_state == GamePhase.INITIAL
        assert game.board is None
        assert game.roll_dice() is None

    def test_init_game(self, make_game):
        game = make_game()
        assert game.game_state == GamePhase.PLAYING
        assert game.board == initial_board()
        assert game.player_turn == Player.WHITE
        assert game.bar == {Player.WHITE: 0, Player.BLACK: 0}

    def test_roll_dice(self, make_game):
        game = make_game([(3, 1), (4, 4)])
        assert game.roll_dice() == (3, 1)
        assert game.roll_dice() is None
        assert game.dice == (3, 1)

    def test_roll_doubles(self, make_game):
        game = make_game([(4, 4)])
        assert game.roll_dice() == (4, 4, 4, 4)
        assert game.unused_dice == (4, 4, 4, 4)

    def test_move(self, make_game):
        game = make_game([(3, 1)])
        game.roll_dice()

        assert not game.move(point_slot(8), point_slot(4))
        assert game.move(point_slot(8), point_slot(5))
        assert game.board.white_checkers[5] == 1
        assert game.unused_dice == (1,)

    def test_move_replaces_other_selection(self, make_game):
        game = make_game([(3, 1)])
        game.roll_dice()
        game.select_point(point_slot(12))

        assert game.move(point_slot(6), point_slot(5))
        assert game.selected is None
        assert game.board.white_checkers[5] == 1

    def test_select_and_highlight(self, make_game):
        game = make_game([(3, 1)])
        game.roll_dice()

        assert not game.is_move_possible(point_slot(8), point_slot(5))
        assert game.propose_move(point_slot(8))
        assert game.is_move_possible(point_slot(8), point_slot(5))
        assert not game.is_move_possible(point_slot(8), point_slot(4))
        assert game.select_point(point_slot(5))
        assert game.board.white_checkers[5] == 1

    def test_end_turn_and_undo(self, make_game):
        game = make_game([(3, 1)])
        assert not game.end_turn()
        game.roll_dice()
        game.move(point_slot(8), point_slot(5))

        assert game.undo_move()
        assert game.board == initial_board()
        assert not game.undo_move()

        assert game.confirm_dice_use()
        assert game.player_turn == Player.BLACK

    def test_reset_game(self, make_game):
        game = make_game([(3, 1)])
        game.roll_dice()
        game.move(point_slot(8), point_slot(5))
        game.reset_game()
        assert game.board == initial_board()
        assert game.dice == ()
        assert [a.action_type for a in game.history] == [ActionType.RESET_GAME]


class TestEvents:
    """Tests for listener notifications."""

    def test_roll_move_and_turn_events(self, make_game):
        game = make_game([(3, 1)])
        events = collect(game)

        game.roll_dice()
        game.move(point_slot(8), point_slot(5))
        game.end_turn()

        assert [e.kind for e in events] == ["dice_rolled", "move", "turn_ended"]
        assert events[0].data == {"dice": (3, 1)}
        assert events[1].data["die"] == 3
        assert events[2].data == {"next": Player.BLACK}

    def test_hit_event(self):
        game = Game(dice_source=fixed_dice_source([(3, 1)]))
        game.state = GameState(
            phase=GamePhase.PLAYING,
            board=board_from_counts({8: 1, 6: 14}, {5: 1, 13: 14}),
        )
        events = collect(game)

        game.roll_dice()
        game.move(point_slot(8), point_slot(5))

        hits = [e for e in events if e.kind == "hit"]
        assert len(hits) == 1
        assert hits[0].player == Player.WHITE
        assert hits[0].data == {"point": point_slot(5)}

    def test_undo_event(self, make_game):
        game = make_game([(3, 1)])
        game.roll_dice()
        game.move(point_slot(8), point_slot(5))
        events = collect(game)

        game.undo_move()
        assert [e.kind for e in events] == ["undo"]

    def test_move_after_undo_notifies_again(self, make_game):
        game = make_game([(3, 1)])
        game.roll_dice()
        game.move(point_slot(8), point_slot(5))
        game.undo_move()
        assert game.state.last_move is None
        events = collect(game)

        game.move(point_slot(8), point_slot(5))
        assert [e.kind for e in events] == ["move"]

    def test_game_over_event(self):
        game = Game(dice_source=fixed_dice_source([(1, 2)]))
        game.state = GameState(
            phase=GamePhase.PLAYING,
            board=board_from_counts({WHITE_HOME: 14, 1: 1}, {13: 15}),
        )
        events = collect(game)

        game.roll_dice()
        assert game.move(point_slot(1), WHITE_HOME)

        assert events[-1].kind == "game_over"
        assert game.winner == Player.WHITE
        assert game.game_state == GamePhase.ENDED

    def test_unsubscribe(self, make_game):
        game = make_game([(3, 1)])
        events = []
        unsubscribe = game.subscribe(events.append)
        unsubscribe()
        game.roll_dice()
        assert events == []

    def test_rejections_logged_at_debug(self, make_game, caplog):
        game = make_game()
        with caplog.at_level(logging.DEBUG, logger="backgammon_engine.game.session"):
            assert not game.undo_move()
        assert "Rejected undo" in caplog.text


class TestAiTurns:
    """Tests for AI play through the facade."""

    def test_play_ai_turn(self, make_game):
        game = make_game([(3, 1), (2, 5)], vs_ai=True)
        assert game.play_ai_turn() == []

        game.roll_dice()
        game.move(point_slot(8), point_slot(5))
        game.move(point_slot(6), point_slot(5))
        game.end_turn()

        played = game.play_ai_turn()
        assert [str(r.move) for r in played] == ["17->19", "19->24"]
        assert game.player_turn == Player.WHITE

    def test_human_cannot_end_or_undo_ai_turn(self, make_game):
        game = make_game([(3, 1), (2, 5)], vs_ai=True)
        game.roll_dice()
        game.move(point_slot(8), point_slot(5))
        game.end_turn()
        game.roll_dice()
        assert game.ai_move()

        assert not game.undo_move()
        assert not game.end_turn()
        assert not game.confirm_dice_use()
        assert game.player_turn == Player.BLACK
        assert len(game.moves_played) == 1

    def test_ai_move_single_step(self, make_game):
        game = make_game([(3, 1)])
        game.roll_dice()
        assert game.ai_move()
        assert len(game.moves_played) == 1


class TestReplay:
    """Tests for action history."""

    def test_replay_reproduces_game(self, make_game):
        game = make_game([(3, 1), (2, 5)])
        game.roll_dice()
        game.move(point_slot(8), point_slot(5))
        game.move(point_slot(6), point_slot(5))
        game.end_turn()
        game.roll_dice()
        game.ai_move()

        copy = Game(GameConfig())
        final = copy.replay(game.history)

        assert final.board == game.board
        assert final.player_turn == game.player_turn
        assert final.dice == game.dice


class TestConcurrency:
    """Tests for sharing one game between threads."""

    def test_concurrent_moves_are_serialized(self, make_game, monkeypatch):
        real_reduce = session.reduce

        def slow_reduce(state, action):
            time.sleep(0.005)
            return real_reduce(state, action)

        monkeypatch.setattr(session, "reduce", slow_reduce)
        game = make_game([(3, 1)])
        game.roll_dice()

        results = []
        threads = [
            threading.Thread(target=lambda origin=origin: results.append(game.move(point_slot(origin), point_slot(5))))
            for origin in (8, 6)
        ]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert results == [True, True]
        assert sorted(str(r.move) for r in game.moves_played) == ["6->5", "8->5"]
        assert game.board.white_checkers[5] == 2

        final = Game(GameConfig()).replay(game.history)
        assert final.board == game.board
        assert final.moves_played == game.moves_played
