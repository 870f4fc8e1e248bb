"""
Shared type definitions for the cubewalk system.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterator


class Turn(Enum):
    """Rotation applied to a facing (y grows downward, so RIGHT is clockwise)."""

    LEFT = "L"
    RIGHT = "R"


class Direction(Enum):
    """Cardinal direction for movement, listed in clockwise order."""

    UP = "U"  # decreasing y
    RIGHT = "R"  # increasing x
    DOWN = "D"  # increasing y
    LEFT = "L"  # decreasing x

    @property
    def dx(self) -> int:
        return _DELTAS[self][0]

    @property
    def dy(self) -> int:
        return _DELTAS[self][1]

    @property
    def score_index(self) -> int:
        """Facing value used by the password formula."""
        return _SCORE_INDEX[self]

    def turned(self, turn: Turn) -> Direction:
        step = 1 if turn is Turn.RIGHT else -1
        return _CLOCKWISE[(_CLOCKWISE.index(self) + step) % 4]

    def turn_left(self) -> Direction:
        return self.turned(Turn.LEFT)

    def turn_right(self) -> Direction:
        return self.turned(Turn.RIGHT)

    def opposite(self) -> Direction:
        return _CLOCKWISE[(_CLOCKWISE.index(self) + 2) % 4]

    def turn_between(self, other: Direction) -> Turn | None:
        """
        The single turn that rotates this direction onto `other`.

        Returns None for the same direction. Reversing is not a single turn
        and raises ValueError.
        """
        if other is self:
            return None
        if self.turn_right() is other:
            return Turn.RIGHT
        if self.turn_left() is other:
            return Turn.LEFT
        raise ValueError(f"{self.name} -> {other.name} is a reversal, not a turn")


_CLOCKWISE = [Direction.UP, Direction.RIGHT, Direction.DOWN, Direction.LEFT]

_DELTAS = {
    Direction.UP: (0, -1),
    Direction.RIGHT: (1, 0),
    Direction.DOWN: (0, 1),
    Direction.LEFT: (-1, 0),
}

_SCORE_INDEX = {
    Direction.RIGHT: 0,
    Direction.DOWN: 1,
    Direction.LEFT: 2,
    Direction.UP: 3,
}


@dataclass(frozen=True)
class Point:
    """An (x, y) coordinate into the grid."""

    x: int
    y: int

    def __add__(self, direction: Direction) -> Point:
        if not isinstance(direction, Direction):
            return NotImplemented
        return Point(self.x + direction.dx, self.y + direction.dy)


# =============================================================================
# Grid Definition Types
# =============================================================================


class Cell(Enum):
    """Contents of one grid square."""

    OPEN = "."
    WALL = "#"
    VOID = " "

    @classmethod
    def from_char(cls, char: str) -> Cell:
        if char == ".":
            return cls.OPEN
        if char == "#":
            return cls.WALL
        return cls.VOID


Bounds = tuple[int, int] | None


@dataclass(frozen=True)
class Grid:
    """
    A rectangular 2D grid of cells.

    Rows are indexed by y and columns by x. Row and column bounds hold the
    first and last non-void index of each row/column (None when the whole
    line is void); they are derived once in __post_init__.
    """

    cells: tuple[tuple[Cell, ...], ...]
    row_bounds: tuple[Bounds, ...] = field(init=False, repr=False, compare=False)
    col_bounds: tuple[Bounds, ...] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        widths = {len(row) for row in self.cells}
        if len(widths) > 1:
            raise ValueError(f"Grid rows must all have the same width, got {sorted(widths)}")

        rows = [_bounds(row) for row in self.cells]
        cols = [
            _bounds(tuple(row[x] for row in self.cells)) for x in range(self.width)
        ]
        # frozen dataclass: bypass __setattr__ for derived fields
        object.__setattr__(self, "row_bounds", tuple(rows))
        object.__setattr__(self, "col_bounds", tuple(cols))

    @property
    def height(self) -> int:
        return len(self.cells)

    @property
    def width(self) -> int:
        return len(self.cells[0]) if self.cells else 0

    def in_bounds(self, point: Point) -> bool:
        return 0 <= point.x < self.width and 0 <= point.y < self.height

    def cell_at(self, point: Point) -> Cell:
        """The cell at point; anything outside the grid is VOID."""
        if not self.in_bounds(point):
            return Cell.VOID
        return self.cells[point.y][point.x]

    def is_void(self, point: Point) -> bool:
        return self.cell_at(point) is Cell.VOID

    def points(self) -> Iterator[Point]:
        """All grid points in row-major order."""
        for y in range(self.height):
            for x in range(self.width):
                yield Point(x, y)


def _bounds(line: tuple[Cell, ...]) -> Bounds:
    filled = [i for i, cell in enumerate(line) if cell is not Cell.VOID]
    if not filled:
        return None
    return (filled[0], filled[-1])


# =============================================================================
# Walk Types
# =============================================================================


@dataclass(frozen=True)
class Instruction:
    """Turn (None for the leading move) then walk `distance` squares."""

    turn: Turn | None
    distance: int


@dataclass(frozen=True)
class AgentState:
    """Where the walker stands and which way it faces."""

    position: Point
    facing: Direction


# (point, direction stepped off the net) -> state on arrival
PortalMap = dict[tuple[Point, Direction], AgentState]
