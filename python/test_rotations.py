"""
Test rotation framework for orientation-independent net testing.

Nets, points, states and portal maps can all be rotated 90° clockwise, so a
check written once against a net layout can be repeated in all 4 rotations
(0°, 90°, 180°, 270°).
"""

from dataclasses import dataclass, field
from typing import Callable

from net_parser import parse_grid
from net_types import AgentState, Direction, Grid, Point, PortalMap


# =============================================================================
# Rotation Utilities
# =============================================================================


def rotate_point_90(point: Point, grid: Grid) -> Point:
    """
    Rotate a point 90° clockwise within its grid.

    A W×H grid rotated 90° clockwise becomes H×W.
    Point (x, y) → (H - 1 - y, x)
    """
    return Point(grid.height - 1 - point.y, point.x)


def rotate_direction_90(direction: Direction) -> Direction:
    """Rotate a direction 90° clockwise."""
    return direction.turn_right()


def rotate_state_90(state: AgentState, grid: Grid) -> AgentState:
    return AgentState(rotate_point_90(state.position, grid), rotate_direction_90(state.facing))


def rotate_grid_90(grid: Grid) -> Grid:
    """Rotate a Grid 90° clockwise."""
    height = grid.height
    cells = tuple(
        tuple(grid.cells[height - 1 - new_x][new_y] for new_x in range(height))
        for new_y in range(grid.width)
    )
    return Grid(cells)


def rotate_portals_90(portals: PortalMap, grid: Grid) -> PortalMap:
    """Rotate every key and arrival of a portal map (grid is the unrotated net)."""
    return {
        (rotate_point_90(point, grid), rotate_direction_90(direction)): rotate_state_90(arrival, grid)
        for (point, direction), arrival in portals.items()
    }


# =============================================================================
# Test Case Data Structures
# =============================================================================


@dataclass
class RotationalNetCase:
    """
    A net that will be checked in all 4 rotations.

    Example usage:
        case = RotationalNetCase(name="example", net=EXAMPLE_NET)
        for rotation, grid in case.get_all_rotations():
            assert not open_edges(grid, build_portals(grid))
    """

    name: str
    net: str
    grid: Grid = field(init=False)

    __test__ = False

    def __post_init__(self) -> None:
        """Parse the net on construction."""
        self.grid = parse_grid(self.net)

    def get_all_rotations(self) -> list[tuple[int, Grid]]:
        """
        Generate all 4 rotations of this net.

        Returns:
            List of (rotation_degrees, grid) tuples
        """
        results = []
        current = self.grid
        for rotation in [0, 90, 180, 270]:
            results.append((rotation, current))
            current = rotate_grid_90(current)
        return results


def run_rotational_check(
    case: RotationalNetCase,
    check: Callable[[Grid], None],
) -> None:
    """
    Run a check against every rotation of a net.

    Failures are re-raised with the case name and rotation attached.
    """
    for rotation, grid in case.get_all_rotations():
        try:
            check(grid)
        except AssertionError as e:
            raise AssertionError(f"{case.name} at {rotation}°: {e}") from e
