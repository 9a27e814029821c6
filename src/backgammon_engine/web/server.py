"""JSON API for playing backgammon in a browser or from scripts.

The server holds one ``Game`` and exposes its public surface. It never
touches engine state except through ``Game`` methods.

Usage:
    backgammon-engine serve --vs-ai --port 8002
"""

import logging
from typing import Dict, List, Optional

from flask import Flask, jsonify, request

from backgammon_engine.config import GameConfig
from backgammon_engine.core.types import Board, Move, MoveRecord, parse_slot
from backgammon_engine.core.dice import DiceSource
from backgammon_engine.core.validator import generate_legal_moves
from backgammon_engine.game.session import Game
from backgammon_engine.game.state import GamePhase

logger = logging.getLogger(__name__)


# ==============================================================================
# SERIALIZATION
# ==============================================================================

def board_to_dict(board: Optional[Board]) -> Optional[Dict]:
    """Convert board state to a JSON-serializable dictionary."""
    if board is None:
        return None
    return {
        'white_checkers': board.white_checkers.tolist(),
        'black_checkers': board.black_checkers.tolist(),
    }


def move_to_dict(move: Move) -> Dict:
    return {'from': str(move.from_slot), 'to': str(move.to_slot)}


def record_to_dict(record: MoveRecord) -> Dict:
    return {**move_to_dict(record.move), 'die': record.die_used, 'hit': record.hit}


def state_to_dict(game: Game) -> Dict:
    """Everything a renderer needs to draw the current position."""
    return {
        'game_state': game.game_state.value,
        'player_turn': game.player_turn.value,
        'board': board_to_dict(game.board),
        'bar': {player.value: count for player, count in game.bar.items()},
        'dice': list(game.dice),
        'unused_dice': list(game.unused_dice),
        'moves_played': [record_to_dict(r) for r in game.moves_played],
        'selected': str(game.selected) if game.selected is not None else None,
        'selectable_moves': [move_to_dict(m) for m in game.selectable_moves],
        'winner': game.winner.value if game.winner else None,
        'vs_ai': game.state.vs_ai,
    }


class BadRequest(Exception):
    """Malformed request body."""


def _slot_field(data: Dict, name: str):
    if name not in data:
        raise BadRequest(f"Missing field: {name}")
    try:
        return parse_slot(str(data[name]))
    except ValueError as e:
        raise BadRequest(str(e)) from None


def _result(game: Game, success: bool, error: str = None, **extra):
    body = {'success': success, 'state': state_to_dict(game), **extra}
    if not success:
        body['error'] = error
    return jsonify(body)


# ==============================================================================
# APP FACTORY
# ==============================================================================

def create_app(config: Optional[GameConfig] = None, dice_source: Optional[DiceSource] = None) -> Flask:
    """Build the Flask app around a fresh game.

    Args:
        config: Game configuration
        dice_source: Dice to play with (seeded from config if None)
    """
    app = Flask(__name__)
    game = Game(config, dice_source)
    game.init_game()
    app.config['GAME'] = game

    @app.errorhandler(BadRequest)
    def handle_bad_request(error):
        return jsonify({'success': False, 'error': str(error)}), 400

    def body() -> Dict:
        data = request.get_json(silent=True)
        return data if isinstance(data, dict) else {}

    @app.route('/api/state', methods=['GET'])
    def api_state():
        return jsonify(state_to_dict(game))

    @app.route('/api/new_game', methods=['POST'])
    def api_new_game():
        vs_ai = body().get('vs_ai')
        if vs_ai is not None and not isinstance(vs_ai, bool):
            raise BadRequest(f"vs_ai must be true or false, got {vs_ai!r}")
        game.init_game(vs_ai=vs_ai)
        return _result(game, True)

    @app.route('/api/roll_dice', methods=['POST'])
    def api_roll_dice():
        dice = game.roll_dice()
        if dice is None:
            return _result(game, False, 'Cannot roll now')
        return _result(game, True, dice=list(dice))

    @app.route('/api/select_point', methods=['POST'])
    def api_select_point():
        slot = _slot_field(body(), 'slot')
        if not game.select_point(slot):
            return _result(game, False, f'Nothing to do at {slot}')
        return _result(game, True)

    @app.route('/api/move', methods=['POST'])
    def api_move():
        data = body()
        origin, target = _slot_field(data, 'from'), _slot_field(data, 'to')
        if not game.move(origin, target):
            return _result(game, False, 'Illegal move')
        return _result(game, True)

    @app.route('/api/legal_moves', methods=['GET'])
    def api_legal_moves():
        moves: List[Move] = []
        if game.game_state == GamePhase.PLAYING and game.board is not None:
            moves = generate_legal_moves(game.board, game.player_turn, game.dice, game.moves_played)
        return jsonify({'moves': [move_to_dict(m) for m in moves]})

    @app.route('/api/end_turn', methods=['POST'])
    def api_end_turn():
        if not game.end_turn():
            return _result(game, False, 'Cannot end turn now')
        return _result(game, True)

    @app.route('/api/confirm_dice_use', methods=['POST'])
    def api_confirm_dice_use():
        if not game.confirm_dice_use():
            return _result(game, False, 'Cannot end turn now')
        return _result(game, True)

    @app.route('/api/undo', methods=['POST'])
    def api_undo():
        if not game.undo_move():
            return _result(game, False, 'Cannot undo now')
        return _result(game, True)

    @app.route('/api/ai_move', methods=['POST'])
    def api_ai_move():
        if not game.ai_move():
            return _result(game, False, 'AI cannot move now')
        return _result(game, True)

    @app.route('/api/ai_turn', methods=['POST'])
    def api_ai_turn():
        with game.lock:
            if game.game_state != GamePhase.PLAYING or (game.state.vs_ai and game.player_turn != game.state.ai_player):
                return _result(game, False, 'Not the AI side to move')
            played = game.play_ai_turn()
        return _result(game, True, moves=[record_to_dict(r) for r in played])

    return app


def run(config: GameConfig, host: str = 'localhost', port: int = 8002, debug: bool = False) -> None:
    """Start the development server."""
    app = create_app(config)
    logger.info("Backgammon server starting on http://%s:%d (vs_ai=%s)", host, port, config.vs_ai)
    app.run(host=host, port=port, debug=debug)
