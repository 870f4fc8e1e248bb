"""
Walking across the surface of a cube given only its unfolded 2D net.

Three-phase algorithm: find seams (concave notches in the net) -> zip them
into portals -> walk the move list, teleporting through portals whenever a
step would leave the net.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Iterator

from net_parser import parse_puzzle
from net_types import (
    AgentState,
    Cell,
    Direction,
    Grid,
    Instruction,
    Point,
    PortalMap,
)

logger = logging.getLogger(__name__)


class SeamError(ValueError):
    """The net cannot be zipped into a cube."""

    def __init__(self, message: str, seed_point: Point | None = None) -> None:
        super().__init__(message)
        self.seed_point = seed_point


class MissingPortalError(AssertionError):
    """A step into the void had no portal: the zipper left an edge open."""

    def __init__(self, state: AgentState) -> None:
        super().__init__(
            f"No portal leaving ({state.position.x}, {state.position.y}) heading {state.facing.name}"
        )
        self.state = state


# =============================================================================
# Grid Model helpers
# =============================================================================


def start_state(grid: Grid) -> AgentState:
    """Leftmost open cell of the top row, facing right."""
    for x, cell in enumerate(grid.cells[0] if grid.cells else ()):
        if cell is Cell.OPEN:
            return AgentState(Point(x, 0), Direction.RIGHT)
    raise ValueError("Top row of the net has no open cell to start from")


# =============================================================================
# Phase 1: Seam Finder
# =============================================================================


class Corner(Enum):
    """Diagonal corner of a kernel, as the pair of directions that reach it."""

    NW = (Direction.LEFT, Direction.UP)
    NE = (Direction.RIGHT, Direction.UP)
    SW = (Direction.LEFT, Direction.DOWN)
    SE = (Direction.RIGHT, Direction.DOWN)

    @property
    def directions(self) -> tuple[Direction, Direction]:
        return self.value

    @classmethod
    def toward(cls, first: Direction, second: Direction) -> Corner:
        """The corner reached by stepping in both directions, in either order."""
        for corner in cls:
            if {first, second} == set(corner.value):
                return corner
        raise ValueError(f"{first.name} and {second.name} do not meet at a corner")

    def of(self, point: Point) -> Point:
        horizontal, vertical = self.value
        return point + horizontal + vertical


class CornerKind(Enum):
    """Classification of a point by the number of void diagonals around it."""

    NONE = "none"
    CONCAVE = "concave"  # exactly one void diagonal
    CONVEX = "convex"  # exactly three void diagonals


@dataclass(frozen=True)
class Kernel:
    """3x3 window of cells centered on a point."""

    center: Point
    cells: tuple[tuple[Cell, ...], ...]

    @classmethod
    def at(cls, grid: Grid, point: Point) -> Kernel:
        return cls(
            point,
            tuple(
                tuple(grid.cell_at(Point(point.x + dx, point.y + dy)) for dx in (-1, 0, 1))
                for dy in (-1, 0, 1)
            ),
        )

    def cell(self, dx: int, dy: int) -> Cell:
        return self.cells[dy + 1][dx + 1]

    def neighbour(self, direction: Direction) -> Cell:
        return self.cell(direction.dx, direction.dy)

    def diagonal(self, corner: Corner) -> Cell:
        horizontal, vertical = corner.directions
        return self.cell(horizontal.dx, vertical.dy)

    def diagonal_voids(self) -> list[Corner]:
        return [corner for corner in Corner if self.diagonal(corner) is Cell.VOID]

    def quadrant(self, corner: Corner) -> tuple[Cell, Cell, Cell]:
        """The three cells around the center that share the given corner."""
        horizontal, vertical = corner.directions
        return self.neighbour(horizontal), self.neighbour(vertical), self.diagonal(corner)


def classify(kernel: Kernel) -> CornerKind:
    """
    The corner rule: count void cells among the four diagonals.

    One void diagonal marks an inward notch where two net edges meet; three
    mark the outward corner of a face. Every turn made while zipping comes
    from this rule.
    """
    match len(kernel.diagonal_voids()):
        case 1:
            return CornerKind.CONCAVE
        case 3:
            return CornerKind.CONVEX
        case _:
            return CornerKind.NONE


def classify_corner(kernel: Kernel, corner: Corner) -> CornerKind:
    """
    The corner rule applied to one lattice corner of the center cell.

    Counts void cells among the three neighbours sharing that corner: three
    voids make the corner convex, one makes it concave. Two voids mean the
    corner sits on a straight edge (or a pinch, which the caller rejects).
    """
    match sum(cell is Cell.VOID for cell in kernel.quadrant(corner)):
        case 1:
            return CornerKind.CONCAVE
        case 3:
            return CornerKind.CONVEX
        case _:
            return CornerKind.NONE


@dataclass(frozen=True)
class Seed:
    """A concave notch and the two directions along which its seam edges run."""

    point: Point
    directions: tuple[Direction, Direction]


def find_seeds(grid: Grid) -> list[Seed]:
    """
    Find every concave notch in the net, in row-major order.

    A seed is the filled cell tucked into the notch: its kernel is concave and
    all four of its orthogonal neighbours are filled. The outermost ring is
    skipped since its kernel would reach outside the grid.
    """
    seeds: list[Seed] = []
    for y in range(1, grid.height - 1):
        for x in range(1, grid.width - 1):
            point = Point(x, y)
            if grid.is_void(point):
                continue
            kernel = Kernel.at(grid, point)
            if classify(kernel) is not CornerKind.CONCAVE:
                continue
            if any(kernel.neighbour(d) is Cell.VOID for d in Direction):
                continue
            (corner,) = kernel.diagonal_voids()
            seeds.append(Seed(point, corner.directions))

    logger.info("find_seeds: %d seeds in %dx%d grid", len(seeds), grid.width, grid.height)
    return seeds


# =============================================================================
# Phase 2: Seam Zipper
# =============================================================================


class SeamStop(Enum):
    """Reason why a zip run stopped."""

    BOTH_TURNED = "both_turned"  # Both cursors reached a face corner together
    CURSORS_MET = "cursors_met"  # The two sides closed on each other
    ALREADY_ZIPPED = "already_zipped"  # Another run glued this notch first


PortalKey = tuple[Point, Direction]

# Material angle at a boundary junction, in quarter turns
CONVEX_ANGLE = 1
STRAIGHT_ANGLE = 2
CONCAVE_ANGLE = 3
FLAT_SEAM_ANGLE = 4


def _arrival(key: PortalKey) -> AgentState:
    """State of a walker coming through the seam onto this unit edge."""
    point, exit_direction = key
    return AgentState(point, exit_direction.opposite())


def next_boundary_edge(grid: Grid, key: PortalKey) -> tuple[PortalKey, int]:
    """
    The unit edge after `key` walking the outline with the void on the left.

    The lattice corner ahead of the edge is classified by the corner rule on
    the matching quadrant of the cell's kernel:
    - convex: the cell pivots in place onto its next void side
    - concave: the outline steps diagonally into the notch
    - otherwise the edge runs straight on to the next cell

    Returns:
        (next_key, angle) where angle is the material angle at the junction

    Raises:
        SeamError: If two parts of the net touch only at a corner
    """
    point, exit_direction = key
    facing = exit_direction.turn_right()
    corner = Corner.toward(facing, exit_direction)

    match classify_corner(Kernel.at(grid, point), corner):
        case CornerKind.CONVEX:
            return (point, facing), CONVEX_ANGLE
        case CornerKind.CONCAVE:
            return (corner.of(point), facing.opposite()), CONCAVE_ANGLE

    if grid.is_void(point + facing):
        raise SeamError(
            f"Net is pinched at the corner of ({point.x}, {point.y}) heading {facing.name}"
        )
    return (point + facing, exit_direction), STRAIGHT_ANGLE


@dataclass
class Boundary:
    """
    The unzipped outline of the net as a cycle of unit edges.

    Each unit edge is a (cell, exit direction) key. `angle[key]` holds the
    material angle at the junction just before `key`; gluing two edges merges
    the junctions beyond them by adding their angles.
    """

    next: dict[PortalKey, PortalKey]
    prev: dict[PortalKey, PortalKey]
    angle: dict[PortalKey, int]

    @classmethod
    def trace(cls, grid: Grid) -> Boundary:
        """
        Walk the whole outline once, starting above the first filled cell.

        Raises:
            SeamError: If the net is empty, pinched, or has holes
        """
        start_point = next((p for p in grid.points() if not grid.is_void(p)), None)
        if start_point is None:
            raise SeamError("Net has no filled cells")

        start: PortalKey = (start_point, Direction.UP)
        boundary = cls({}, {}, {})
        key = start
        for _ in range(4 * grid.width * grid.height):
            following, angle = next_boundary_edge(grid, key)
            boundary.next[key] = following
            boundary.prev[following] = key
            boundary.angle[following] = angle
            key = following
            if key == start:
                break
        else:
            raise SeamError("Net outline does not close")

        holes = [edge for edge in open_edges(grid, {}) if edge not in boundary.next]
        if holes:
            point, direction = holes[0]
            raise SeamError(
                f"Net has {len(holes)} edges off its outer outline "
                f"(first at ({point.x}, {point.y}) {direction.name}); holes cannot fold"
            )
        return boundary

    def __len__(self) -> int:
        return len(self.next)

    def __contains__(self, key: object) -> bool:
        return key in self.next

    def concave_junctions(self) -> list[tuple[PortalKey, PortalKey]]:
        """(before, after) edge pairs meeting at a concave junction."""
        return [
            (self.prev[key], key)
            for key, angle in self.angle.items()
            if angle == CONCAVE_ANGLE
        ]

    def remove_pair(self, left: PortalKey, right: PortalKey) -> tuple[PortalKey, PortalKey, int] | None:
        """
        Remove two adjacent edges (`right` follows `left`), closing the gap.

        Returns:
            (new_left, new_right, merged_angle), or None if they were the last two
        """
        new_left, new_right = self.prev[left], self.next[right]
        merged = self.angle[left] + self.angle[new_right]
        for key in (left, right):
            del self.next[key]
            del self.prev[key]
            del self.angle[key]
        if new_left == right:
            return None

        self.next[new_left] = new_right
        self.prev[new_right] = new_left
        self.angle[new_right] = merged
        return new_left, new_right, merged


@dataclass
class SeamRun:
    """The portal pairs recorded while zipping from one notch."""

    seed: Seed | None  # None for notches left over after all seeds ran
    pairs: list[tuple[PortalKey, PortalKey]]
    stop: SeamStop


def _seed_edges(seed: Seed, boundary: Boundary) -> tuple[PortalKey, PortalKey] | None:
    """The two unit edges meeting in a seed's notch, in outline order."""
    dir_a, dir_b = seed.directions
    a: PortalKey = (seed.point + dir_a, dir_b)
    b: PortalKey = (seed.point + dir_b, dir_a)
    if a not in boundary or b not in boundary:
        return None
    if boundary.next[a] == b:
        return a, b
    if boundary.next[b] == a:
        return b, a
    raise SeamError(
        f"Seed ({seed.point.x}, {seed.point.y}) does not sit in a notch of the outline",
        seed.point,
    )


def zip_seam(
    boundary: Boundary,
    left: PortalKey,
    right: PortalKey,
    portals: PortalMap,
    seed: Seed | None = None,
) -> SeamRun:
    """
    Zip the outline outward from the concave junction between two edges.

    Two cursors start on the edges either side of the notch and walk away
    from it in lock step, one backward along the outline and one forward.
    Each iteration glues their current edges into a pair of portals and
    removes them from the outline, merging the junctions just beyond. The
    merged angle decides what happens next:
    - 3 (a corner met a straight run) or 4 (two straight runs): keep zipping
    - 2 (both cursors turned at face corners): stop; the merged junction
      stays open for a later run to pass through
    The run also stops when the two cursors meet and the outline is used up.

    Raises:
        SeamError: If the merged angle exceeds a full seam, which no cube
            unfolding produces
    """
    pairs: list[tuple[PortalKey, PortalKey]] = []
    stop = SeamStop.CURSORS_MET

    for _ in range(len(boundary)):
        portals[left] = _arrival(right)
        portals[right] = _arrival(left)
        pairs.append((left, right))

        merged = boundary.remove_pair(left, right)
        if merged is None:
            stop = SeamStop.CURSORS_MET
            break

        left, right, angle = merged
        if angle == STRAIGHT_ANGLE:
            stop = SeamStop.BOTH_TURNED
            break
        if angle > FLAT_SEAM_ANGLE:
            point = seed.point if seed else left[0]
            raise SeamError(
                f"Seam from ({point.x}, {point.y}) folds {angle} quarter turns of net "
                f"around one point; the net is not a cube unfolding",
                seed.point if seed else None,
            )

    origin = f"seed ({seed.point.x}, {seed.point.y})" if seed else "open junction"
    logger.debug("zip_seam: %s paired %d edges, stopped: %s", origin, len(pairs), stop.value)
    return SeamRun(seed, pairs, stop)


def build_seams(grid: Grid, seeds: list[Seed] | None = None) -> tuple[list[SeamRun], PortalMap]:
    """
    Zip every seed in order, then any concave junction still open.

    Args:
        grid: The net
        seeds: Seeds to zip from; found with find_seeds() when None

    Returns:
        (runs, portals) where runs keeps the pairs recorded by each run

    Raises:
        SeamError: If the outline cannot be traced or is left partly unzipped
    """
    if seeds is None:
        seeds = find_seeds(grid)

    boundary = Boundary.trace(grid)
    perimeter = len(boundary)
    portals: PortalMap = {}
    runs: list[SeamRun] = []

    for seed in seeds:
        edges = _seed_edges(seed, boundary)
        if edges is None:
            logger.debug("zip_seam: seed (%d, %d) already zipped", seed.point.x, seed.point.y)
            runs.append(SeamRun(seed, [], SeamStop.ALREADY_ZIPPED))
            continue
        runs.append(zip_seam(boundary, *edges, portals, seed))

    # Notches the kernel scan cannot see (faces one cell wide)
    while boundary:
        junctions = boundary.concave_junctions()
        if not junctions:
            break
        runs.append(zip_seam(boundary, *junctions[0], portals))

    validate_portals(grid, portals)
    _check_cube_shape(grid, perimeter)

    logger.info(
        "build_seams: %d seeds, %d runs, %d of %d edges zipped",
        len(seeds),
        len(runs),
        len(portals),
        perimeter,
    )
    return runs, portals


def _check_cube_shape(grid: Grid, perimeter: int) -> None:
    """
    A cube net of side n has an outline of 14n unit edges and 6n² cells.

    Zipping alone accepts any net whose seams close up, including nets with
    too many faces.

    Raises:
        SeamError: If the outline and cell count do not match six faces
    """
    side, remainder = divmod(perimeter, 14)
    filled = sum(1 for point in grid.points() if not grid.is_void(point))
    if remainder or filled != 6 * side * side:
        raise SeamError(
            f"Net is not a cube unfolding: outline of {perimeter} unit edges "
            f"and {filled} cells, expected 14n edges and 6n² cells for some side n"
        )


def build_portals(grid: Grid, seeds: list[Seed] | None = None) -> PortalMap:
    """Zip the net into a portal map (see build_seams)."""
    _, portals = build_seams(grid, seeds)
    return portals


def open_edges(grid: Grid, portals: PortalMap) -> list[PortalKey]:
    """Every (cell, direction) that steps off the net but has no portal."""
    missing: list[PortalKey] = []
    for point in grid.points():
        if grid.is_void(point):
            continue
        for direction in Direction:
            if grid.is_void(point + direction) and (point, direction) not in portals:
                missing.append((point, direction))
    return missing


def validate_portals(grid: Grid, portals: PortalMap) -> None:
    """
    Check that every edge of the net is zipped and every portal reverses.

    Raises:
        SeamError: Listing the first few open edges or asymmetric portals
    """
    missing = open_edges(grid, portals)
    if missing:
        shown = ", ".join(f"({p.x}, {p.y}) {d.name}" for p, d in missing[:5])
        more = f" and {len(missing) - 5} more" if len(missing) > 5 else ""
        raise SeamError(f"{len(missing)} net edges left unzipped: {shown}{more}")

    for (point, direction), arrival in portals.items():
        back = portals.get((arrival.position, arrival.facing.opposite()))
        if back != AgentState(point, direction.opposite()):
            raise SeamError(
                f"Portal ({point.x}, {point.y}) {direction.name} -> "
                f"({arrival.position.x}, {arrival.position.y}) {arrival.facing.name} "
                f"does not lead back (reverse gives {back})"
            )


# =============================================================================
# Wrapping: where a step off the net lands
# =============================================================================


# Type alias for the wrap callback: state about to step into the void -> landing state
Wrap = Callable[[AgentState], AgentState]


def cube_wrap(portals: PortalMap) -> Wrap:
    """Wrap through the zipped seams of the folded cube."""

    def wrap(state: AgentState) -> AgentState:
        try:
            return portals[(state.position, state.facing)]
        except KeyError:
            raise MissingPortalError(state) from None

    return wrap


def flat_wrap(grid: Grid) -> Wrap:
    """Wrap to the far end of the current row or column, keeping the facing."""

    def wrap(state: AgentState) -> AgentState:
        x, y = state.position.x, state.position.y
        row = grid.row_bounds[y] if grid.in_bounds(state.position) else None
        col = grid.col_bounds[x] if grid.in_bounds(state.position) else None
        if row is None or col is None or grid.is_void(state.position):
            raise ValueError(f"Cannot wrap from ({x}, {y}): not a cell of the net")

        match state.facing:
            case Direction.RIGHT:
                landing = Point(row[0], y)
            case Direction.LEFT:
                landing = Point(row[1], y)
            case Direction.DOWN:
                landing = Point(x, col[0])
            case Direction.UP:
                landing = Point(x, col[1])
        return AgentState(landing, state.facing)

    return wrap


# =============================================================================
# Phase 3: Navigator
# =============================================================================


def _advance(grid: Grid, wrap: Wrap, state: AgentState) -> AgentState | None:
    """One step forward, or None if a wall blocks it."""
    candidate = state.position + state.facing
    match grid.cell_at(candidate):
        case Cell.OPEN:
            return AgentState(candidate, state.facing)
        case Cell.WALL:
            return None
        case Cell.VOID:
            arrival = wrap(state)
            if grid.cell_at(arrival.position) is Cell.WALL:
                return None
            return arrival


def trace(
    grid: Grid,
    wrap: Wrap,
    start: AgentState,
    instructions: list[Instruction],
) -> Iterator[AgentState]:
    """
    Walk the instructions, yielding each state the walker passes through.

    Yields the start state, then the state after every turn and every step
    actually taken. A wall (including a wall on the far side of a wrap) ends
    the current instruction early.

    Args:
        grid: The net
        wrap: Callback deciding where steps into the void land
        start: Initial position and facing
        instructions: Moves to apply in order

    Yields:
        AgentState after each turn or move
    """
    state = start
    yield state

    for instruction in instructions:
        if instruction.turn is not None:
            state = AgentState(state.position, state.facing.turned(instruction.turn))
            yield state

        for _ in range(instruction.distance):
            moved = _advance(grid, wrap, state)
            if moved is None:
                break
            state = moved
            yield state


def walk(
    grid: Grid,
    wrap: Wrap,
    start: AgentState,
    instructions: list[Instruction],
) -> AgentState:
    """Final state after walking all instructions."""
    state = start
    for state in trace(grid, wrap, start, instructions):
        pass
    return state


# =============================================================================
# Scorer
# =============================================================================


def score(state: AgentState) -> int:
    """The puzzle password: 1000 * row + 4 * column + facing, 1-based."""
    return 1000 * (state.position.y + 1) + 4 * (state.position.x + 1) + state.facing.score_index


def solve_flat(text: str) -> int:
    """Password for a puzzle walked on the flat, row/column-wrapping map."""
    grid, instructions = parse_puzzle(text)
    return score(walk(grid, flat_wrap(grid), start_state(grid), instructions))


def solve_cube(text: str) -> int:
    """Password for a puzzle walked on the folded cube."""
    grid, instructions = parse_puzzle(text)
    portals = build_portals(grid)
    return score(walk(grid, cube_wrap(portals), start_state(grid), instructions))


# =============================================================================
# Bundled layouts
# =============================================================================


EXAMPLE_NET = "\n".join(
    [
        "        ...#",
        "        .#..",
        "        #...",
        "        ....",
        "...#.......#",
        "........#...",
        "..#....#....",
        "..........#.",
        "        ...#....",
        "        .....#..",
        "        .#......",
        "        ......#.",
    ]
)

EXAMPLE_MOVES = "10R5L5R10L4R5L5"

EXAMPLE_PUZZLE = f"{EXAMPLE_NET}\n\n{EXAMPLE_MOVES}\n"

# Faces laid out as   .AB / .C. / DE. / F..   (side 4)
STAIRS_NET = "\n".join(
    [
        "    ....#...",
        "    ..#.....",
        "    ........",
        "    .....#..",
        "    ....",
        "    .#..",
        "    ....",
        "    ..#.",
        "........",
        ".#......",
        "....#...",
        "........",
        "....",
        "..#.",
        "....",
        "#...",
    ]
)
