"""Whole-game play between two agents.

Games are driven through the ``Game`` facade, so every move goes through
the same validation, dice bookkeeping and turn sequencing a UI would use.
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple
import numpy as np

from backgammon_engine.config import GameConfig
from backgammon_engine.core.types import Board, MoveRecord, Player
from backgammon_engine.core.dice import DiceSource
from backgammon_engine.core.validator import generate_legal_moves
from backgammon_engine.ai.agents import Agent
from backgammon_engine.game.session import Game, GameEvent
from backgammon_engine.game.state import GamePhase

logger = logging.getLogger(__name__)


@dataclass
class GameResult:
    """Result of a completed (or abandoned) game.

    Attributes:
        winner: Winning player, None if the turn cap was hit
        num_turns: Turns played, both players counted
        moves: Every move played, with the player who played it
        hits: Number of blots hit, per player
        final_board: Board when the game stopped
    """
    winner: Optional[Player]
    num_turns: int
    moves: List[Tuple[Player, MoveRecord]] = field(default_factory=list)
    hits: Dict[Player, int] = field(default_factory=lambda: {Player.WHITE: 0, Player.BLACK: 0})
    final_board: Optional[Board] = None


def play_turn(game: Game, agent: Agent) -> List[MoveRecord]:
    """Roll and let an agent move until its turn is over.

    Returns:
        Moves played this turn
    """
    player = game.player_turn
    game.roll_dice()
    played: List[MoveRecord] = []

    while game.game_state == GamePhase.PLAYING and game.player_turn == player:
        legal = generate_legal_moves(game.board, player, game.dice, game.moves_played)
        move = agent.select_move(game.board, player, legal) if legal else None
        if move is None:
            game.end_turn()
            break
        if not game.move(move.from_slot, move.to_slot):
            raise RuntimeError(f"{agent.name} chose a move the game refused: {move}")
        played.append(game.moves_played[-1])

    return played


def play_game(
    white_agent: Agent,
    black_agent: Agent,
    dice_source: Optional[DiceSource] = None,
    config: Optional[GameConfig] = None,
) -> GameResult:
    """Play a single game between two agents.

    Args:
        white_agent: Agent playing white
        black_agent: Agent playing black
        dice_source: Dice to play with (seeded from config if None)
        config: Game configuration; ``max_turns`` caps the game

    Returns:
        GameResult with the complete move list
    """
    config = config or GameConfig()
    game = Game(config, dice_source)
    result = GameResult(winner=None, num_turns=0)

    def record(event: GameEvent) -> None:
        if event.kind == "hit":
            result.hits[event.player] += 1

    game.subscribe(record)
    game.init_game(vs_ai=False)

    for turn in range(config.max_turns):
        if game.game_state != GamePhase.PLAYING:
            break
        player = game.player_turn
        agent = white_agent if player == Player.WHITE else black_agent
        for move in play_turn(game, agent):
            result.moves.append((player, move))
        result.num_turns = turn + 1

    result.winner = game.winner
    result.final_board = game.board
    if result.winner is None:
        logger.warning("Game stopped after %d turns without a winner", result.num_turns)
    return result


def compute_game_statistics(games: List[GameResult]) -> dict:
    """Compute statistics from a batch of games.

    Args:
        games: List of game results

    Returns:
        Dictionary of statistics
    """
    total_games = len(games)
    white_wins = sum(1 for g in games if g.winner == Player.WHITE)
    black_wins = sum(1 for g in games if g.winner == Player.BLACK)
    unfinished = sum(1 for g in games if g.winner is None)

    avg_turns = float(np.mean([g.num_turns for g in games])) if games else 0.0
    total_hits = sum(sum(g.hits.values()) for g in games)

    return {
        'total_games': total_games,
        'white_wins': white_wins,
        'black_wins': black_wins,
        'unfinished': unfinished,
        'white_win_rate': white_wins / total_games if total_games > 0 else 0.0,
        'avg_turns': avg_turns,
        'total_hits': total_hits,
    }
