"""
Demonstration script for the cubewalk system.
"""

import logging
import sys

from ascii_render import path_visits, render_net, render_portals
from cubewalk import (
    EXAMPLE_PUZZLE,
    build_seams,
    cube_wrap,
    flat_wrap,
    score,
    start_state,
    trace,
)
from net_parser import format_instructions, parse_puzzle


def demo(text: str) -> None:
    """Fold the net, then walk it flat and folded."""
    grid, instructions = parse_puzzle(text)
    start = start_state(grid)

    print("=" * 60)
    print(f"Net: {grid.width}x{grid.height}, moves: {format_instructions(instructions)}")
    print("=" * 60)
    print()

    runs, portals = build_seams(grid)
    print(f"Seams: {len(runs)} zip runs, {len(portals)} portals")
    for run in runs:
        seed = run.seed
        if seed is None:
            origin = "open junction"
        else:
            dirs = "/".join(d.name for d in seed.directions)
            origin = f"seed ({seed.point.x}, {seed.point.y}) {dirs}"
        print(f"  {origin}: {len(run.pairs)} pairs, {run.stop.value}")
    print()
    print(render_portals(grid, runs))
    print()

    for name, wrap in (("flat", flat_wrap(grid)), ("cube", cube_wrap(portals))):
        states = list(trace(grid, wrap, start, instructions))
        final = states[-1]
        print(f"{name.capitalize()} walk: {len(states) - 1} steps and turns")
        print(
            f"  final ({final.position.x}, {final.position.y}) facing "
            f"{final.facing.name}, password {score(final)}"
        )
        print(render_net(grid, path_visits(states), highlight=final, title=name))
        print()


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format='%(levelname)s: %(message)s')

    if len(sys.argv) > 1:
        with open(sys.argv[1]) as f:
            demo(f.read())
    else:
        demo(EXAMPLE_PUZZLE)
