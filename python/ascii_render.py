"""
ASCII rendering for cube nets.

Provides two views:
1. The net with a walked path overlaid as facing arrows
2. The net with its zipped seams labelled, one letter per zip run
"""

from __future__ import annotations

import logging
from typing import Callable, Iterable

import simple_chalk as chalk  # type: ignore[import-untyped]

from cubewalk import SeamRun
from net_types import AgentState, Cell, Direction, Grid, Point

logger = logging.getLogger(__name__)

ARROWS = {
    Direction.UP: "^",
    Direction.RIGHT: ">",
    Direction.DOWN: "v",
    Direction.LEFT: "<",
}

# One colour per seam run, cycled
SEAM_COLORS: list[Callable[[str], str]] = [
    chalk.red,
    chalk.green,
    chalk.yellow,
    chalk.blue,
    chalk.magenta,
    chalk.cyan,
    chalk.redBright,
    chalk.greenBright,
    chalk.yellowBright,
    chalk.blueBright,
]


def _plain(s: str) -> str:
    return s


def _boxed(lines: list[str], width: int, title: str) -> list[str]:
    """Wrap rendered rows in a border with a centered title."""
    title = f" {title} "
    top = "┌" + "─" * width + "┐"
    if len(title) <= width:
        start = (width - len(title)) // 2
        top = "┌" + "─" * start + title + "─" * (width - start - len(title)) + "┐"
    return [top] + [f"│{line}│" for line in lines] + ["└" + "─" * width + "┘"]


def path_visits(states: Iterable[AgentState]) -> dict[Point, Direction]:
    """Last facing seen at each position along a walk."""
    visits: dict[Point, Direction] = {}
    for state in states:
        visits[state.position] = state.facing
    return visits


def render_net(
    grid: Grid,
    visits: dict[Point, Direction] | None = None,
    highlight: AgentState | None = None,
    color: bool = True,
    title: str = "net",
) -> str:
    """
    Render the net with an optional walked path.

    Args:
        grid: The net to draw
        visits: Position -> facing to draw as arrows (see path_visits)
        highlight: Agent state drawn inverted on top of everything
        color: Disable to get plain text (for tests and logs)
        title: Caption in the top border

    Returns:
        Multi-line string
    """
    visits = visits or {}
    path_color = chalk.cyan if color else _plain
    wall_color = chalk.yellow if color else _plain

    lines: list[str] = []
    for y, row in enumerate(grid.cells):
        parts: list[str] = []
        for x, cell in enumerate(row):
            point = Point(x, y)
            if highlight is not None and highlight.position == point:
                char = ARROWS[highlight.facing]
                parts.append(chalk.bgWhite.black(char) if color else char)
            elif point in visits:
                parts.append(path_color(ARROWS[visits[point]]))
            elif cell is Cell.WALL:
                parts.append(wall_color(cell.value))
            else:
                parts.append(cell.value)
        lines.append("".join(parts))

    return "\n".join(_boxed(lines, grid.width, title))


def render_portals(grid: Grid, runs: list[SeamRun], color: bool = True) -> str:
    """
    Render the net padded by one ring of void, labelling seams.

    Each zip run gets a letter; both void-side neighbours of every pair it
    recorded show that letter, so edges glued together read the same.
    """
    width, height = grid.width + 2, grid.height + 2
    buffer: list[list[str]] = [[" "] * width for _ in range(height)]

    for y, row in enumerate(grid.cells):
        for x, cell in enumerate(row):
            buffer[y + 1][x + 1] = cell.value

    for index, run in enumerate(runs):
        label = chr(ord("a") + index % 26)
        colorize = SEAM_COLORS[index % len(SEAM_COLORS)] if color else _plain
        for pair in run.pairs:
            for point, direction in pair:
                outside = point + direction
                buffer[outside.y + 1][outside.x + 1] = colorize(label)

    logger.info("render_portals: %d runs over %dx%d grid", len(runs), grid.width, grid.height)
    lines = ["".join(row) for row in buffer]
    return "\n".join(_boxed(lines, width, "seams"))
