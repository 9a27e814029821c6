"""Core type definitions for the backgammon rules engine.

This module defines the value types shared by the board model, the move
validator, the engine and the turn state machine.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Tuple
import numpy as np
from numpy.typing import NDArray


# ==============================================================================
# ERRORS
# ==============================================================================

class BackgammonError(Exception):
    """Base class for engine errors."""


class BoardInvariantError(BackgammonError, ValueError):
    """A board primitive was asked to break a board invariant.

    These indicate a validator/engine inconsistency, never a user error.
    """


class DiceError(BackgammonError, ValueError):
    """Malformed die values or an exhausted dice source."""


# ==============================================================================
# PLAYERS
# ==============================================================================

class Player(Enum):
    """Player colors."""
    WHITE = "white"
    BLACK = "black"

    def opponent(self) -> "Player":
        """Return the opponent player."""
        return Player.BLACK if self == Player.WHITE else Player.WHITE

    @property
    def direction(self) -> int:
        """Sign of point movement: white moves 24→1, black 1→24."""
        return -1 if self == Player.WHITE else 1

    def __str__(self) -> str:
        return self.value


# ==============================================================================
# SLOTS
# ==============================================================================

CheckerCount = int  # 0-15


class SlotKind(Enum):
    """Kinds of board locations."""
    POINT = "point"
    BAR = "bar"
    HOME = "home"


@dataclass(frozen=True)
class Slot:
    """One logical checker location.

    A POINT slot carries its point number (1-24). BAR and HOME slots
    carry the player that owns them; there is one of each per color.

    Attributes:
        kind: Point, bar or home
        point: Point number for POINT slots, 0 otherwise
        owner: Owning player for BAR/HOME slots, None otherwise
    """
    kind: SlotKind
    point: int = 0
    owner: Optional[Player] = None

    def __post_init__(self):
        """Validate slot."""
        if self.kind == SlotKind.POINT:
            assert 1 <= self.point <= 24, f"Invalid point: {self.point}"
            assert self.owner is None, "Points have no owner"
        else:
            assert self.point == 0, f"{self.kind.value} slot cannot carry a point number"
            assert self.owner is not None, f"{self.kind.value} slot needs an owner"

    @property
    def is_point(self) -> bool:
        return self.kind == SlotKind.POINT

    @property
    def is_bar(self) -> bool:
        return self.kind == SlotKind.BAR

    @property
    def is_home(self) -> bool:
        return self.kind == SlotKind.HOME

    @property
    def order(self) -> int:
        """Canonical enumeration index.

        Points 1-24 keep their number, then white bar (25), black bar (26),
        white home (27), black home (28).
        """
        if self.kind == SlotKind.POINT:
            return self.point
        base = 25 if self.kind == SlotKind.BAR else 27
        return base if self.owner == Player.WHITE else base + 1

    def __str__(self) -> str:
        if self.kind == SlotKind.POINT:
            return str(self.point)
        return f"{self.kind.value}:{self.owner}"


def point_slot(point: int) -> Slot:
    """Slot for board point 1-24."""
    return Slot(SlotKind.POINT, point=point)


def bar_slot(player: Player) -> Slot:
    """Slot holding a player's hit checkers."""
    return Slot(SlotKind.BAR, owner=player)


def home_slot(player: Player) -> Slot:
    """Slot holding a player's borne-off checkers."""
    return Slot(SlotKind.HOME, owner=player)


def parse_slot(text: str) -> Slot:
    """Inverse of ``str(slot)``: "1".."24", "bar:white", "home:black", ...

    Raises:
        ValueError: If the text names no slot
    """
    text = text.strip().lower()
    if ":" in text:
        kind, _, owner = text.partition(":")
        try:
            player = Player(owner)
        except ValueError:
            raise ValueError(f"Unknown slot owner: {owner!r}") from None
        if kind == SlotKind.BAR.value:
            return bar_slot(player)
        if kind == SlotKind.HOME.value:
            return home_slot(player)
        raise ValueError(f"Unknown slot kind: {kind!r}")
    try:
        point = int(text)
    except ValueError:
        raise ValueError(f"Not a slot: {text!r}") from None
    if not 1 <= point <= 24:
        raise ValueError(f"Point out of range: {point}")
    return point_slot(point)


WHITE_BAR = bar_slot(Player.WHITE)
BLACK_BAR = bar_slot(Player.BLACK)
WHITE_HOME = home_slot(Player.WHITE)
BLACK_HOME = home_slot(Player.BLACK)


# ==============================================================================
# MOVES
# ==============================================================================

@dataclass(frozen=True)
class Move:
    """A single checker movement.

    Attributes:
        from_slot: Where the checker leaves (a point or the mover's bar)
        to_slot: Where the checker lands (a point or the mover's home)
    """
    from_slot: Slot
    to_slot: Slot

    @property
    def sort_key(self) -> Tuple[int, int]:
        return (self.from_slot.order, self.to_slot.order)

    def __str__(self) -> str:
        return f"{self.from_slot}->{self.to_slot}"


@dataclass(frozen=True)
class MoveRecord:
    """An executed move plus the facts needed to undo it exactly.

    Attributes:
        move: The move that was played
        die_used: Die value consumed by the move (1-6)
        hit: Whether an opposing blot was sent to the bar
    """
    move: Move
    die_used: int
    hit: bool = False

    def __post_init__(self):
        """Validate move record."""
        assert 1 <= self.die_used <= 6, f"Invalid die: {self.die_used}"


# Dice type
Dice = Tuple[int, int]  # (die1, die2) where 1 <= die1, die2 <= 6


# ==============================================================================
# BOARD REPRESENTATION
# ==============================================================================

@dataclass(eq=False)
class Board:
    """Board state representation.

    Each color has a 26-entry array:
    - Index 0: that color's bar
    - Indices 1-24: regular points
    - Index 25: that color's home (borne off)

    For White:
    - Home board: points 1-6
    - Moves from high to low (24 → 1 → off)

    For Black:
    - Home board: points 19-24
    - Moves from low to high (1 → 24 → off)

    Engine operations never mutate a board they are given; they copy it
    and return the new snapshot.

    Attributes:
        white_checkers: Array of checker counts for white (length 26)
        black_checkers: Array of checker counts for black (length 26)
    """
    white_checkers: NDArray[np.int32] = field(default_factory=lambda: np.zeros(26, dtype=np.int32))
    black_checkers: NDArray[np.int32] = field(default_factory=lambda: np.zeros(26, dtype=np.int32))

    def __post_init__(self):
        """Validate board state."""
        assert len(self.white_checkers) == 26, "white_checkers must have length 26"
        assert len(self.black_checkers) == 26, "black_checkers must have length 26"
        assert all(0 <= c <= 15 for c in self.white_checkers), "Invalid white checker count"
        assert all(0 <= c <= 15 for c in self.black_checkers), "Invalid black checker count"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Board):
            return NotImplemented
        return (
            np.array_equal(self.white_checkers, other.white_checkers)
            and np.array_equal(self.black_checkers, other.black_checkers)
        )

    __hash__ = None

    def copy(self) -> "Board":
        """Create a deep copy of the board."""
        return Board(
            white_checkers=self.white_checkers.copy(),
            black_checkers=self.black_checkers.copy(),
        )

    def checkers(self, player: Player) -> NDArray[np.int32]:
        """The raw count array for a player."""
        return self.white_checkers if player == Player.WHITE else self.black_checkers

    def get_checkers(self, player: Player, index: int) -> CheckerCount:
        """Get number of checkers at an array index (0=bar, 25=home) for a player."""
        return int(self.checkers(player)[index])

    def set_checkers(self, player: Player, index: int, count: CheckerCount) -> None:
        """Set number of checkers at an array index for a player (mutates board)."""
        assert 0 <= count <= 15, f"Invalid checker count: {count}"
        self.checkers(player)[index] = count
