"""Dice utilities for backgammon.

This module handles dice rolling, the injectable dice sources used by the
game, and helpers for tracking which dice of a turn are still unused.
"""

from typing import Callable, Iterable, List, Optional, Sequence, Tuple
import numpy as np
from backgammon_engine.core.types import Dice, DiceError


# A dice source is called once per roll and returns the two raw dice.
DiceSource = Callable[[], Dice]


def is_doubles(dice: Dice) -> bool:
    """Check if dice roll is doubles.

    Args:
        dice: Dice roll tuple

    Returns:
        True if both dice show the same value
    """
    return dice[0] == dice[1]


def validate_dice(dice: Dice) -> Dice:
    """Check a raw roll and return it as a tuple of ints.

    Raises:
        DiceError: Unless the roll is two values in 1-6
    """
    if len(dice) != 2:
        raise DiceError(f"A roll has exactly two dice, got {dice!r}")
    die1, die2 = int(dice[0]), int(dice[1])
    if not (1 <= die1 <= 6 and 1 <= die2 <= 6):
        raise DiceError(f"Invalid dice roll: {dice!r}")
    return (die1, die2)


def dice_values(dice: Dice) -> Tuple[int, ...]:
    """Get the dice values to use for moves.

    For doubles, you get 4 moves. For non-doubles, you get 2 moves.

    Args:
        dice: Dice roll tuple

    Returns:
        Tuple of dice values (length 2 or 4)

    Examples:
        >>> dice_values((3, 5))
        (3, 5)
        >>> dice_values((4, 4))
        (4, 4, 4, 4)
    """
    if is_doubles(dice):
        return (dice[0],) * 4
    else:
        return (dice[0], dice[1])


def unused_dice(dice: Sequence[int], moves_played: Sequence) -> Tuple[int, ...]:
    """Dice not yet consumed this turn.

    Consumed dice are kept at the front of the sequence, one per move played.
    """
    return tuple(dice[len(moves_played):])


def consume_die(dice: Sequence[int], used: int, position: int) -> Tuple[int, ...]:
    """Move the first unused die equal to ``used`` to ``position``.

    ``position`` is the number of dice already consumed; the rest keep
    their relative order.

    Raises:
        DiceError: If no unused die has that value
    """
    values = list(dice)
    for index in range(position, len(values)):
        if values[index] == used:
            values.insert(position, values.pop(index))
            return tuple(values)
    raise DiceError(f"No unused die of value {used} in {tuple(dice)} (used {position})")


def roll_dice(rng_key: np.random.Generator) -> Dice:
    """Roll two dice.

    Args:
        rng_key: NumPy random generator

    Returns:
        Tuple of (die1, die2) where each is 1-6
    """
    die1 = int(rng_key.integers(1, 7))
    die2 = int(rng_key.integers(1, 7))
    return (die1, die2)


def random_dice_source(seed: Optional[int] = None) -> DiceSource:
    """Dice source backed by a seeded NumPy generator.

    Args:
        seed: Random seed (optional, for reproducibility)
    """
    rng = np.random.default_rng(seed)

    def roll() -> Dice:
        return roll_dice(rng)

    return roll


def fixed_dice_source(rolls: Iterable[Dice]) -> DiceSource:
    """Dice source replaying a fixed sequence of rolls.

    Raises:
        DiceError: When called after the sequence is exhausted
    """
    remaining = iter([validate_dice(roll) for roll in rolls])

    def roll() -> Dice:
        try:
            return next(remaining)
        except StopIteration:
            raise DiceError("Fixed dice source exhausted") from None

    return roll


def dice_to_string(dice: Sequence[int]) -> str:
    """Convert dice to readable string.

    Examples:
        >>> dice_to_string((3, 5))
        '3-5'
        >>> dice_to_string((4, 4, 4, 4))
        'Double 4s'
    """
    if len(dice) == 0:
        return "-"
    if len(dice) == 4 or (len(dice) == 2 and dice[0] == dice[1]):
        return f"Double {dice[0]}s"
    return "-".join(str(d) for d in dice)


def all_dice_rolls() -> List[Dice]:
    """Generate all 21 unique dice outcomes, sorted."""
    rolls = []
    for die1 in range(1, 7):
        for die2 in range(die1, 7):
            rolls.append((die1, die2))
    return rolls
